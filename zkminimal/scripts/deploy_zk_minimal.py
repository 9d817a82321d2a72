import logging
import sys

from eth_account.signers.local import LocalAccount
from web3 import Web3
from web3.contract import Contract

from zkminimal.config import DeployConfig, configure_logging, load_account, load_environment
from zkminimal.manage_contracts.contract_encoder_base import ContractEncoder
from zkminimal.manage_contracts.contract_factory import ContractFactory, DeploymentType
from zkminimal.module.module_builder import ZkSyncBuilder
from zkminimal.signer.eth_signer import PrivateKeyEthSigner

logger = logging.getLogger(__name__)


def deploy_zk_minimal(zk_web3: Web3, account: LocalAccount, config: DeployConfig) -> Contract:
    """Deploy the minimal account contract on zkSync network

    :param zk_web3:
        Instance of ZkSyncBuilder that interacts with zkSync network

    :param account:
        From which account the deployment tx will be made

    :param config:
        Artifact locations and deployment type

    :return:
        Deployed contract bound to its address.
    """
    # Artifacts are read before anything touches the network
    encoder = ContractEncoder.from_artifacts(zk_web3, config.abi_path, config.bytecode_path)
    deployment_type = DeploymentType.from_name(config.deployment_type)

    print(f"Working with wallet: {account.address}")

    signer = PrivateKeyEthSigner(account, zk_web3.zksync.chain_id)
    factory = ContractFactory(
        zksync=zk_web3,
        abi=encoder.abi,
        bytecode=encoder.bytecode,
        account=account,
        signer=signer,
        deployment_type=deployment_type,
    )
    contract = factory.deploy()

    print("Contract address:", contract.address)
    print("Contract methods:", encoder.function_names)

    if deployment_type == DeploymentType.CREATE_ACCOUNT:
        info = zk_web3.zksync.get_contract_account_info(contract.address)
        print("Account abstraction version:", info.account_abstraction_version.name)
    return contract


def run() -> Contract:
    config = DeployConfig.from_env()
    account = load_account()
    zk_web3 = ZkSyncBuilder.build(config.rpc_url)
    return deploy_zk_minimal(zk_web3, account, config)


def main() -> int:
    load_environment()
    configure_logging()
    try:
        run()
    except Exception:
        logger.exception("Deployment failed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
