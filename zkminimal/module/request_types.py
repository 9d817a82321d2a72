from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, TypedDict

from eth_typing import HexStr

from zkminimal.core.types import PaymasterParams
from zkminimal.core.utils import DEFAULT_GAS_PER_PUBDATA_LIMIT


class TransactionType(Enum):
    EIP_712_TX_TYPE = 113


@dataclass
class EIP712Meta:
    """zkSync specific part of a type 113 transaction (``customData``)."""

    GAS_PER_PUB_DATA_DEFAULT = DEFAULT_GAS_PER_PUBDATA_LIMIT

    gas_per_pub_data: int = GAS_PER_PUB_DATA_DEFAULT
    # Signature checked by the initiating account contract instead of an ECDSA one
    custom_signature: Optional[bytes] = None
    factory_deps: Optional[List[bytes]] = None
    paymaster_params: Optional[PaymasterParams] = None

    @property
    def has_custom_signature(self) -> bool:
        return bool(self.custom_signature)


# "from" is a keyword, hence the functional form
Transaction = TypedDict("Transaction", {
    "chain_id": int,
    "chainId": int,
    "nonce": int,
    "from": HexStr,
    "to": HexStr,
    "value": int,
    "data": HexStr,
    "gas": int,
    "gasPrice": int,
    "maxFeePerGas": int,
    "maxPriorityFeePerGas": int,
    "transactionType": int,
    "eip712Meta": EIP712Meta,
}, total=False)
