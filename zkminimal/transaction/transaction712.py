from dataclasses import dataclass
from typing import List, Optional, Union

import rlp
from eth_account.datastructures import SignedMessage
from eth_typing import ChecksumAddress, HexStr
from eth_utils import remove_0x_prefix
from web3 import Web3
from web3.types import Nonce

from zkminimal.core.utils import to_bytes, hash_byte_code, encode_address
from zkminimal.eip712 import EIP712Struct
from zkminimal.module.request_types import EIP712Meta, Transaction, TransactionType

TRANSACTION_MEMBERS = [
    ("txType", "uint256"),
    ("from", "uint256"),
    ("to", "uint256"),
    ("gasLimit", "uint256"),
    ("gasPerPubdataByteLimit", "uint256"),
    ("maxFeePerGas", "uint256"),
    ("maxPriorityFeePerGas", "uint256"),
    ("paymaster", "uint256"),
    ("nonce", "uint256"),
    ("value", "uint256"),
    ("data", "bytes"),
    ("factoryDeps", "bytes32[]"),
    ("paymasterInput", "bytes"),
]


@dataclass
class Transaction712:
    """Type 113 (EIP-712) zkSync transaction.

    ``encode`` gives the raw bytes for ``eth_sendRawTransaction``,
    ``to_eip712_struct`` the typed data that gets signed.
    """

    EIP_712_TX_TYPE = TransactionType.EIP_712_TX_TYPE.value

    chain_id: int
    nonce: Nonce
    gas_limit: int
    to: Union[ChecksumAddress, str]
    value: int
    data: Union[bytes, HexStr]
    maxPriorityFeePerGas: int
    maxFeePerGas: int
    from_: Union[bytes, HexStr]
    meta: EIP712Meta

    def _paymaster_fields(self) -> List[bytes]:
        params = self.meta.paymaster_params
        if params is None or params.paymaster is None or params.paymaster_input is None:
            return []
        return [bytes.fromhex(remove_0x_prefix(params.paymaster)), params.paymaster_input]

    def encode(self, signature: Optional[SignedMessage] = None) -> bytes:
        """Serialize as ``0x71 || rlp([...16 fields])``.

        A custom signature attached to ``meta`` takes precedence over ``signature``.
        """
        if self.meta.custom_signature is not None:
            rlp_signature = to_bytes(self.meta.custom_signature)
        elif signature is not None:
            rlp_signature = bytes(signature.signature)
        else:
            raise RuntimeError("Custom signature and signature can't be None both")

        fields = [
            self.nonce,
            self.maxPriorityFeePerGas,
            self.maxFeePerGas,
            self.gas_limit,
            encode_address(self.to),
            self.value,
            to_bytes(self.data),
            self.chain_id,
            # Ethereum-style v, r, s are unused for this type
            b'',
            b'',
            self.chain_id,
            encode_address(self.from_),
            self.meta.gas_per_pub_data,
            list(self.meta.factory_deps or []),
            rlp_signature,
            self._paymaster_fields(),
        ]
        return bytes([self.EIP_712_TX_TYPE]) + rlp.encode(fields)

    def to_eip712_struct(self) -> EIP712Struct:
        """Typed-data view of the transaction.

        The signature (custom or not) is not a member, so the digest is the same
        before and after it gets attached.
        """
        paymaster = 0
        paymaster_input = b''
        params = self.meta.paymaster_params
        if params is not None:
            if params.paymaster is not None:
                paymaster = int(params.paymaster, 16)
            if params.paymaster_input is not None:
                paymaster_input = params.paymaster_input

        return EIP712Struct(
            "Transaction",
            TRANSACTION_MEMBERS,
            **{
                "txType": self.EIP_712_TX_TYPE,
                "from": int.from_bytes(encode_address(self.from_), "big"),
                "to": int.from_bytes(encode_address(self.to), "big"),
                "gasLimit": self.gas_limit,
                "gasPerPubdataByteLimit": self.meta.gas_per_pub_data,
                "maxFeePerGas": self.maxFeePerGas,
                "maxPriorityFeePerGas": self.maxPriorityFeePerGas,
                "paymaster": paymaster,
                "nonce": self.nonce,
                "value": self.value,
                "data": to_bytes(self.data),
                "factoryDeps": [hash_byte_code(dep) for dep in self.meta.factory_deps or []],
                "paymasterInput": paymaster_input,
            },
        )

    def to_zk_transaction(self) -> Transaction:
        """Request view used by ``eth_estimateGas``; an unset gas limit is left out."""
        tx: Transaction = {
            "from": self.from_,
            "to": self.to,
            "nonce": self.nonce,
            "value": self.value,
            "data": Web3.to_hex(to_bytes(self.data)),
            "maxFeePerGas": self.maxFeePerGas,
            "maxPriorityFeePerGas": self.maxPriorityFeePerGas,
            "chainId": self.chain_id,
            "transactionType": self.EIP_712_TX_TYPE,
            "eip712Meta": self.meta,
        }
        if self.gas_limit:
            tx["gas"] = self.gas_limit
        return tx
