from abc import abstractmethod, ABC
from typing import Optional

from eth_account import Account
from eth_account.datastructures import SignedMessage
from eth_account.messages import encode_defunct
from eth_account.signers.base import BaseAccount
from eth_typing import ChecksumAddress, HexStr

from zkminimal.eip712 import make_domain, EIP712Struct


class EthSignerBase(ABC):
    @abstractmethod
    def sign_typed_data(self, typed_data: EIP712Struct, domain=None) -> SignedMessage:
        raise NotImplementedError

    @abstractmethod
    def verify_typed_data(self, sig: HexStr, typed_data: EIP712Struct, domain=None) -> bool:
        raise NotImplementedError


class PrivateKeyEthSigner(EthSignerBase):
    """Signs zkSync typed data and transaction digests with a local key."""

    DOMAIN_NAME = "zkSync"
    DOMAIN_VERSION = "2"

    def __init__(self, creds: BaseAccount, chain_id: int):
        self.credentials = creds
        self.chain_id = chain_id
        self.default_domain = self.get_default_domain(chain_id)

    @classmethod
    def get_default_domain(cls, chain_id: int) -> EIP712Struct:
        return make_domain(name=cls.DOMAIN_NAME, version=cls.DOMAIN_VERSION, chainId=chain_id)

    @property
    def address(self) -> ChecksumAddress:
        return self.credentials.address

    @property
    def domain(self) -> EIP712Struct:
        return self.default_domain

    def _signable(self, typed_data: EIP712Struct, domain: Optional[EIP712Struct]):
        return typed_data.signable_message(domain if domain is not None else self.domain)

    def sign_typed_data(self, typed_data: EIP712Struct, domain=None) -> SignedMessage:
        """Sign the EIP-712 digest as is; used for transactions initiated by an EOA."""
        return self.credentials.sign_message(self._signable(typed_data, domain))

    def verify_typed_data(self, sig: HexStr, typed_data: EIP712Struct, domain=None) -> bool:
        address = Account.recover_message(self._signable(typed_data, domain), signature=sig)
        return address.lower() == self.address.lower()

    def sign_digest(self, digest: bytes) -> SignedMessage:
        """Sign a 32-byte digest as an EIP-191 personal message.

        Custom accounts validating with ``toEthSignedMessageHash(txHash)`` expect
        this form rather than a raw signature of the digest.
        """
        if len(digest) != 32:
            raise ValueError(f"Digest must be 32 bytes long, got {len(digest)}")
        return self.credentials.sign_message(encode_defunct(primitive=digest))

    def verify_digest(self, sig: HexStr, digest: bytes) -> bool:
        address = Account.recover_message(encode_defunct(primitive=digest), signature=sig)
        return address.lower() == self.address.lower()
