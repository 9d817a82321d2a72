import logging
from typing import Union

from eth_typing import HexStr
from web3 import Web3
from web3.contract import Contract
from web3.types import TxReceipt

from zkminimal.core.types import EthBlockParams, TransactionHash
from zkminimal.core.utils import DEFAULT_GAS_PER_PUBDATA_LIMIT
from zkminimal.manage_contracts.contract_encoder_base import BaseContractEncoder
from zkminimal.signer.eth_signer import PrivateKeyEthSigner
from zkminimal.transaction.transaction712 import Transaction712
from zkminimal.transaction.transaction_builders import TxBase, TxFunctionCall

logger = logging.getLogger(__name__)

# maxFeePerGas and maxPriorityFeePerGas of the account's transactions
AA_MAX_FEE_PER_GAS = 21000
AA_MAX_PRIORITY_FEE_PER_GAS = 0


class SmartAccount:
    """Custom account (contract wallet) whose transactions are validated by its own code.

    The account's owner key signs on its behalf: the signature goes into the
    custom signature field of the EIP-712 transaction instead of the usual
    EOA signature.

    The nonce is read from the network and never reserved locally, so two
    processes driving the same account concurrently race and at most one of
    their transactions is accepted.
    """

    TX_TIMEOUT = 240
    POLL_LATENCY = 0.5

    def __init__(self, address: HexStr, signer: PrivateKeyEthSigner, provider: Web3):
        self._address = Web3.to_checksum_address(address)
        self.signer = signer
        self.provider = provider

    @property
    def address(self) -> HexStr:
        return self._address

    def get_nonce(self, block_tag=EthBlockParams.LATEST.value) -> int:
        return self.provider.zksync.get_transaction_count(self._address, block_tag)

    def contract(self, abi) -> Contract:
        return self.provider.zksync.contract(address=self._address, abi=abi)

    def owner(self, abi) -> HexStr:
        return self.contract(abi).functions.owner().call()

    @staticmethod
    def encode_approve(token: BaseContractEncoder, spender: HexStr, amount: int) -> HexStr:
        return token.encode_method(
            fn_name="approve", args=(Web3.to_checksum_address(spender), int(amount))
        )

    def populate_transaction(self, to: HexStr, data: HexStr, value: int = 0) -> TxFunctionCall:
        # Estimation is not supported with a contract as initiator, the owner EOA stands in for it
        gas_limit = self.provider.zksync.eth_estimate_gas(
            {
                "from": self.signer.address,
                "to": Web3.to_checksum_address(to),
                "data": data,
                "value": value,
            }
        )
        gas_price = self.provider.zksync.gas_price
        return TxFunctionCall(
            from_=self._address,
            to=Web3.to_checksum_address(to),
            value=value,
            chain_id=self.provider.zksync.chain_id,
            nonce=self.get_nonce(),
            data=data,
            gas_limit=gas_limit,
            gas_price=gas_price,
            max_fee_per_gas=AA_MAX_FEE_PER_GAS,
            max_priority_fee_per_gas=AA_MAX_PRIORITY_FEE_PER_GAS,
            gas_per_pub_data=DEFAULT_GAS_PER_PUBDATA_LIMIT,
        )

    def transaction_digest(self, tx712: Transaction712) -> bytes:
        domain = PrivateKeyEthSigner.get_default_domain(tx712.chain_id)
        return tx712.to_eip712_struct().signing_digest(domain)

    def sign_transaction(self, tx: Union[TxBase, Transaction712]) -> Transaction712:
        """Sign the populated transaction and attach the result as its custom signature."""
        tx712 = tx if isinstance(tx, Transaction712) else tx.tx712(tx.tx["gas"])
        digest = self.transaction_digest(tx712)
        signed = self.signer.sign_digest(digest)
        tx712.meta.custom_signature = bytes(signed.signature)
        return tx712

    def send_transaction(self, tx712: Transaction712) -> TxReceipt:
        if not tx712.meta.has_custom_signature:
            raise RuntimeError("Transaction must be signed before it is sent")
        tx_hash: TransactionHash = self.provider.zksync.send_raw_transaction(tx712.encode())
        logger.info("Transaction sent from %s with hash %s", self._address, Web3.to_hex(tx_hash))
        tx_receipt = self.provider.zksync.wait_for_transaction_receipt(
            tx_hash, timeout=self.TX_TIMEOUT, poll_latency=self.POLL_LATENCY
        )
        if tx_receipt["status"] != 1:
            raise RuntimeError(f"Transaction {Web3.to_hex(tx_hash)} reverted")
        return tx_receipt
