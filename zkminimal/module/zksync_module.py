from abc import ABC
from typing import Any, Callable, Dict, List, Union

from eth_typing import HexStr
from eth_utils import is_address, to_checksum_address
from eth_utils.curried import (
    apply_formatter_at_index,
    apply_formatter_if,
    apply_formatters_to_dict,
)
from eth_utils.toolz import compose
from web3 import Web3
from web3._utils.formatters import integer_to_hex
from web3._utils.method_formatters import (
    ABI_REQUEST_FORMATTERS,
    METHOD_NORMALIZERS,
    PYTHONIC_REQUEST_FORMATTERS,
    combine_formatters,
    is_not_null,
    to_ascii_if_bytes,
    to_hex_if_integer,
)
from web3.eth import Eth
from web3.method import Method, default_root_munger
from web3.types import RPCEndpoint

from zkminimal.core.types import (
    AccountAbstractionVersion,
    AccountNonceOrdering,
    ContractAccountInfo,
    ZkSyncAddresses,
)
from zkminimal.manage_contracts.utils import icontract_deployer_abi_default
from zkminimal.module.request_types import EIP712Meta, Transaction

eth_estimate_gas_rpc = RPCEndpoint("eth_estimateGas")


def bytes_to_list(v: bytes) -> List[int]:
    # The node expects byte arrays as JSON arrays of numbers
    return list(bytes(v))


def meta_formatter(eip712: EIP712Meta) -> dict:
    """JSON-RPC form of the ``customData`` a zkSync node reads from ``eip712Meta``."""
    ret = {"gasPerPubdata": integer_to_hex(eip712.gas_per_pub_data)}
    if eip712.custom_signature is not None:
        ret["customSignature"] = Web3.to_hex(eip712.custom_signature)
    if eip712.factory_deps is not None:
        ret["factoryDeps"] = [bytes_to_list(dep) for dep in eip712.factory_deps]
    if eip712.paymaster_params is not None:
        ret["paymasterParams"] = {
            "paymaster": eip712.paymaster_params.paymaster,
            "paymasterInput": bytes_to_list(eip712.paymaster_params.paymaster_input),
        }
    return ret


_hex_quantities = ("gas", "gasPrice", "maxFeePerGas", "maxPriorityFeePerGas",
                   "nonce", "value", "chainId", "transactionType")

ZKS_TRANSACTION_PARAMS_FORMATTERS = {
    **{key: to_hex_if_integer for key in _hex_quantities},
    "data": to_ascii_if_bytes,
    "from": apply_formatter_if(is_address, to_checksum_address),
    "to": apply_formatter_if(is_not_null, to_checksum_address),
    "eip712Meta": meta_formatter,
}

ZKSYNC_REQUEST_FORMATTERS: Dict[RPCEndpoint, Callable[..., Any]] = {
    eth_estimate_gas_rpc: apply_formatter_at_index(
        apply_formatters_to_dict(ZKS_TRANSACTION_PARAMS_FORMATTERS), 0
    ),
}


def zksync_get_request_formatters(
    method_name: Union[RPCEndpoint, Callable[..., RPCEndpoint]]
) -> Callable[..., Any]:
    formatters = combine_formatters(
        (ZKSYNC_REQUEST_FORMATTERS, ABI_REQUEST_FORMATTERS, METHOD_NORMALIZERS, PYTHONIC_REQUEST_FORMATTERS),
        method_name,
    )
    return compose(*formatters)


class ZkSync(Eth, ABC):
    """``eth`` namespace extended with the zkSync specific requests used here."""

    _eth_estimate_gas: Method[Callable[[Transaction], Union[int, str]]] = Method(
        eth_estimate_gas_rpc,
        mungers=[default_root_munger],
        request_formatters=zksync_get_request_formatters,
    )

    def eth_estimate_gas(self, tx: Transaction) -> int:
        """Gas estimate for a request that may carry ``eip712Meta``."""
        result = self._eth_estimate_gas(tx)
        return int(result, 16) if isinstance(result, str) else result

    def get_contract_account_info(self, address: HexStr) -> ContractAccountInfo:
        deployer = self.contract(
            address=Web3.to_checksum_address(ZkSyncAddresses.CONTRACT_DEPLOYER_ADDRESS.value),
            abi=icontract_deployer_abi_default(),
        )
        version, ordering = deployer.functions.getAccountInfo(Web3.to_checksum_address(address)).call()
        return ContractAccountInfo(
            account_abstraction_version=AccountAbstractionVersion(version),
            account_nonce_ordering=AccountNonceOrdering(ordering),
        )
