from abc import ABC, abstractmethod
from typing import List, Optional

from eth_typing import HexStr
from web3 import Web3
from web3.types import Nonce

from zkminimal.core.types import PaymasterParams, ZkSyncAddresses
from zkminimal.core.utils import DEFAULT_GAS_PER_PUBDATA_LIMIT, MAX_PRIORITY_FEE_PER_GAS
from zkminimal.manage_contracts.precompute_contract_deployer import PrecomputeContractDeployer
from zkminimal.module.request_types import EIP712Meta, TransactionType, Transaction as ZkTx
from zkminimal.transaction.transaction712 import Transaction712


def _zk_transaction(from_: HexStr,
                    to: HexStr,
                    chain_id: int,
                    nonce: int,
                    data: HexStr,
                    value: int,
                    gas_limit: int,
                    gas_price: int,
                    max_priority_fee_per_gas: int,
                    meta: EIP712Meta) -> ZkTx:
    return {
        "chain_id": chain_id,
        "nonce": nonce,
        "from": from_,
        "to": to,
        "gas": gas_limit,
        "gasPrice": gas_price,
        "maxPriorityFeePerGas": max_priority_fee_per_gas,
        "value": value,
        "data": data,
        "transactionType": TransactionType.EIP_712_TX_TYPE.value,
        "eip712Meta": meta,
    }


class TxBase(ABC):
    """Unsigned transaction request that can be turned into a :class:`Transaction712`."""

    def __init__(self, trans: ZkTx):
        self.tx_: ZkTx = trans

    @property
    def tx(self) -> ZkTx:
        return self.tx_

    def tx712(self, estimated_gas: int) -> Transaction712:
        tx = self.tx
        # Without an explicit cap the gas price is the most the sender pays
        max_fee_per_gas = tx.get("maxFeePerGas", tx["gasPrice"])
        return Transaction712(
            chain_id=tx["chain_id"],
            nonce=Nonce(tx["nonce"]),
            gas_limit=estimated_gas,
            to=tx["to"],
            value=tx["value"],
            data=tx["data"],
            maxPriorityFeePerGas=tx["maxPriorityFeePerGas"],
            maxFeePerGas=max_fee_per_gas,
            from_=tx["from"],
            meta=tx["eip712Meta"],
        )


class TxFunctionCall(TxBase):
    """Call of ``data`` on ``to``, optionally with a fixed fee cap and paymaster."""

    def __init__(self,
                 from_: HexStr,
                 to: HexStr,
                 value: int = 0,
                 chain_id: int = None,
                 nonce: int = None,
                 data: HexStr = HexStr("0x"),
                 gas_limit: int = 0,
                 gas_price: int = 0,
                 max_fee_per_gas: Optional[int] = None,
                 max_priority_fee_per_gas: int = MAX_PRIORITY_FEE_PER_GAS,
                 paymaster_params: Optional[PaymasterParams] = None,
                 custom_signature: Optional[bytes] = None,
                 gas_per_pub_data: int = DEFAULT_GAS_PER_PUBDATA_LIMIT):
        meta = EIP712Meta(gas_per_pub_data=gas_per_pub_data,
                          custom_signature=custom_signature,
                          paymaster_params=paymaster_params)
        trans = _zk_transaction(from_, to, chain_id, nonce, data, value,
                                gas_limit, gas_price, max_priority_fee_per_gas, meta)
        if max_fee_per_gas is not None:
            trans["maxFeePerGas"] = max_fee_per_gas
        super().__init__(trans=trans)


class TxDeployerCall(TxBase, ABC):
    """Call into the system contract deployer carrying ``bytecode`` as the last factory dependency."""

    def __init__(self,
                 web3: Web3,
                 chain_id: int,
                 nonce: int,
                 from_: HexStr,
                 bytecode: bytes,
                 gas_price: int,
                 gas_limit: int = 0,
                 deps: List[bytes] = None,
                 call_data: Optional[bytes] = None,
                 value: int = 0,
                 max_priority_fee_per_gas: int = MAX_PRIORITY_FEE_PER_GAS):
        deployer_call = self.encode_deployer_call(PrecomputeContractDeployer(web3), bytecode, call_data)
        meta = EIP712Meta(factory_deps=list(deps or []) + [bytecode])
        to = Web3.to_checksum_address(ZkSyncAddresses.CONTRACT_DEPLOYER_ADDRESS.value)
        super().__init__(trans=_zk_transaction(from_, to, chain_id, nonce, HexStr(deployer_call), value,
                                               gas_limit, gas_price, max_priority_fee_per_gas, meta))

    @abstractmethod
    def encode_deployer_call(self, deployer: PrecomputeContractDeployer,
                             bytecode: bytes, call_data: Optional[bytes]) -> HexStr:
        raise NotImplementedError


class TxCreateContract(TxDeployerCall):
    def encode_deployer_call(self, deployer, bytecode, call_data):
        return deployer.encode_create(bytecode=bytecode, call_data=call_data)


class TxCreateAccount(TxDeployerCall):
    def encode_deployer_call(self, deployer, bytecode, call_data):
        return deployer.encode_create_account(bytecode=bytecode, call_data=call_data)
