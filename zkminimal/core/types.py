from dataclasses import dataclass
from enum import Enum
from typing import Union

from eth_typing import Hash32, HexStr
from hexbytes import HexBytes

TransactionHash = Union[Hash32, HexBytes, HexStr]


class EthBlockParams(Enum):
    PENDING = "pending"
    LATEST = "latest"


class ZkSyncAddresses(Enum):
    CONTRACT_DEPLOYER_ADDRESS = HexStr("0x0000000000000000000000000000000000008006")


class Network(Enum):
    """Known zkSync Era networks and their public RPC endpoints."""

    MAINNET = "https://mainnet.era.zksync.io"
    SEPOLIA = "https://sepolia.era.zksync.dev"
    LOCALHOST = "http://127.0.0.1:8011"

    @classmethod
    def from_name(cls, name: str) -> "Network":
        try:
            return cls[name.strip().upper()]
        except KeyError:
            known = ", ".join(n.name.lower() for n in cls)
            raise ValueError(f"Unknown network '{name}', expected one of: {known}") from None


@dataclass
class PaymasterParams:
    paymaster: HexStr
    paymaster_input: bytes


class AccountAbstractionVersion(Enum):
    NONE = 0
    VERSION_1 = 1


class AccountNonceOrdering(Enum):
    Sequential = 0
    Arbitrary = 1


@dataclass
class ContractAccountInfo:
    account_abstraction_version: AccountAbstractionVersion
    account_nonce_ordering: AccountNonceOrdering
