import logging
from enum import Enum, auto
from typing import Any, List, Optional

from eth_account.signers.base import BaseAccount
from web3 import Web3
from web3.contract import Contract

from zkminimal.core.types import EthBlockParams, TransactionHash
from zkminimal.manage_contracts.contract_encoder_base import ContractEncoder
from zkminimal.manage_contracts.precompute_contract_deployer import PrecomputeContractDeployer
from zkminimal.signer.eth_signer import EthSignerBase
from zkminimal.transaction.transaction_builders import TxCreateAccount, TxCreateContract

logger = logging.getLogger(__name__)


class DeploymentType(Enum):
    CREATE = auto()
    CREATE_ACCOUNT = auto()

    @classmethod
    def from_name(cls, name: str) -> "DeploymentType":
        aliases = {
            "create": cls.CREATE,
            "createaccount": cls.CREATE_ACCOUNT,
            "create_account": cls.CREATE_ACCOUNT,
        }
        try:
            return aliases[name.strip().lower()]
        except KeyError:
            raise ValueError(f"Unsupported deployment type '{name}'") from None


class ContractFactory:
    """Deploys a compiled contract through the zkSync contract deployer."""

    TX_TIMEOUT = 240
    POLL_LATENCY = 0.5

    def __init__(self,
                 zksync: Web3,
                 abi,
                 bytecode: bytes,
                 account: BaseAccount,
                 signer: EthSignerBase,
                 deployment_type: DeploymentType = DeploymentType.CREATE):
        self.web3 = zksync
        self.abi = abi
        self.byte_code = bytes(bytecode)
        self.account = account
        self.type = deployment_type
        self.signer = signer

    def _build(self, nonce: int, chain_id: int, gas_price: int,
               call_data: Optional[bytes], deps: Optional[List[bytes]]):
        tx_class = TxCreateAccount if self.type == DeploymentType.CREATE_ACCOUNT else TxCreateContract
        return tx_class(web3=self.web3,
                        chain_id=chain_id,
                        nonce=nonce,
                        from_=self.account.address,
                        gas_limit=0,
                        gas_price=gas_price,
                        bytecode=self.byte_code,
                        call_data=call_data,
                        deps=deps)

    def deploy(self,
               args: Optional[Any] = None,
               deps: List[bytes] = None) -> Contract:
        call_data = None
        if args is not None:
            encoder = ContractEncoder(self.web3, abi=self.abi, bytecode=self.byte_code)
            if isinstance(args, dict):
                call_data = encoder.encode_constructor(**args)
            else:
                call_data = encoder.encode_constructor(*args)

        nonce = self.web3.zksync.get_transaction_count(self.account.address, EthBlockParams.PENDING.value)
        chain_id = self.web3.zksync.chain_id
        gas_price = self.web3.zksync.gas_price

        create_contract = self._build(nonce, chain_id, gas_price, call_data, deps)
        estimate_gas = self.web3.zksync.eth_estimate_gas(create_contract.tx712(0).to_zk_transaction())
        logger.info("Fee for deployment is: %s ETH", Web3.from_wei(estimate_gas * gas_price, "ether"))

        tx_712 = create_contract.tx712(estimate_gas)
        signed_message = self.signer.sign_typed_data(tx_712.to_eip712_struct())
        msg = tx_712.encode(signed_message)
        tx_hash: TransactionHash = self.web3.zksync.send_raw_transaction(msg)
        logger.info("Deployment transaction sent: %s", Web3.to_hex(tx_hash))

        tx_receipt = self.web3.zksync.wait_for_transaction_receipt(
            tx_hash, timeout=self.TX_TIMEOUT, poll_latency=self.POLL_LATENCY
        )
        if tx_receipt["status"] != 1:
            raise RuntimeError(f"Deployment transaction {Web3.to_hex(tx_hash)} reverted")

        contract_address = tx_receipt.get("contractAddress")
        if deps is not None or contract_address is None:
            contract_deployer = PrecomputeContractDeployer(self.web3)
            contract_address = contract_deployer.extract_contract_address(tx_receipt)
        return self.web3.zksync.contract(address=Web3.to_checksum_address(contract_address),
                                         abi=self.abi)
