import logging
import sys

from eth_account.signers.local import LocalAccount
from web3 import Web3
from web3.types import TxReceipt

from zkminimal.account.smart_account import SmartAccount
from zkminimal.config import SendConfig, configure_logging, load_account, load_environment
from zkminimal.manage_contracts.contract_encoder_base import ContractEncoder
from zkminimal.module.module_builder import ZkSyncBuilder
from zkminimal.signer.eth_signer import PrivateKeyEthSigner

logger = logging.getLogger(__name__)


def send_aa_tx(zk_web3: Web3, account: LocalAccount, config: SendConfig) -> TxReceipt:
    # Artifacts are read before anything touches the network
    account_abi = ContractEncoder.from_artifacts(zk_web3, config.account_abi_path).abi
    token = ContractEncoder.from_artifacts(zk_web3, config.token_abi_path)

    print(f"Working with wallet: {account.address}")

    signer = PrivateKeyEthSigner(account, zk_web3.zksync.chain_id)
    minimal_account = SmartAccount(config.account_address, signer, zk_web3)

    print("Setting up contract details...")
    # If this doesn't log the owner, the account address or ABI is wrong
    print("The owner of this minimal account is:", minimal_account.owner(account_abi))

    print("Populating transaction...")
    approval_data = SmartAccount.encode_approve(token, config.spender, config.amount)
    tx = minimal_account.populate_transaction(config.token_address, approval_data)

    print("Signing transaction...")
    tx712 = minimal_account.sign_transaction(tx)
    print(Web3.to_hex(tx712.meta.custom_signature))

    print(f"The minimal account nonce before the first tx is {minimal_account.get_nonce()}")
    receipt = minimal_account.send_transaction(tx712)
    print(f"Transaction sent from minimal account with hash {Web3.to_hex(receipt['transactionHash'])}")

    # Checking that the nonce for the account has increased
    print(f"The account's nonce after the first tx is {minimal_account.get_nonce()}")
    return receipt


def run() -> TxReceipt:
    print("Let's do this!")
    config = SendConfig.from_env()
    account = load_account()
    zk_web3 = ZkSyncBuilder.build(config.rpc_url)
    return send_aa_tx(zk_web3, account, config)


def main() -> int:
    load_environment()
    configure_logging()
    try:
        run()
    except Exception:
        logger.exception("Sending the account abstraction transaction failed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
