from unittest import TestCase
from unittest.mock import MagicMock

import rlp
from eth_account import Account
from eth_typing import HexStr
from web3 import Web3
from web3.types import Nonce

from tests.contracts.utils import contract_path
from zkminimal.core.types import ZkSyncAddresses
from zkminimal.core.utils import hash_byte_code
from zkminimal.manage_contracts.contract_encoder_base import ContractEncoder
from zkminimal.manage_contracts.contract_factory import ContractFactory, DeploymentType
from zkminimal.manage_contracts.precompute_contract_deployer import PrecomputeContractDeployer
from zkminimal.signer.eth_signer import PrivateKeyEthSigner
from zkminimal.transaction.transaction_builders import TxCreateAccount, TxCreateContract, TxFunctionCall


class ContractDeployerTests(TestCase):

    def setUp(self) -> None:
        self.web3 = Web3()
        self.contract_deployer = PrecomputeContractDeployer(self.web3)
        counter_contract = ContractEncoder.from_json(self.web3, contract_path("Counter.json"))
        self.counter_contract_bin = counter_contract.bytecode

    def test_compute_l2_create(self):
        expected = Web3.to_checksum_address("0x5107b7154dfc1d3b7f1c4e19b5087e1d3393bcf4")
        sender = HexStr("0x7e5f4552091a69125d5dfcb7b8c2659029395bdf")
        addr = self.contract_deployer.compute_l2_create_address(sender, Nonce(3))
        self.assertEqual(expected, addr)

    def test_encode_create_account(self):
        data = self.contract_deployer.encode_create_account(self.counter_contract_bin)
        fn, params = self.contract_deployer.contract_encoder.contract.decode_function_input(data)
        self.assertEqual("createAccount", fn.fn_name)
        self.assertEqual(b"\0" * 32, params["_salt"])
        self.assertEqual(hash_byte_code(self.counter_contract_bin), params["_bytecodeHash"])
        self.assertEqual(b"", params["_input"])
        self.assertEqual(1, params["_aaVersion"])

    def test_encode_create(self):
        data = self.contract_deployer.encode_create(self.counter_contract_bin, (7).to_bytes(32, "big"))
        fn, params = self.contract_deployer.contract_encoder.contract.decode_function_input(data)
        self.assertEqual("create", fn.fn_name)
        self.assertEqual((7).to_bytes(32, "big"), params["_input"])

    def test_extract_contract_address_without_event(self):
        receipt = {"transactionHash": b"\x01" * 32, "logs": []}
        with self.assertRaises(RuntimeError):
            self.contract_deployer.extract_contract_address(receipt)


class TransactionBuildersTests(TestCase):
    SENDER = HexStr("0x36615Cf349d7F6344891B1e7CA7C72883F5dc049")

    def setUp(self) -> None:
        self.web3 = Web3()
        self.bytecode = ContractEncoder.from_json(self.web3, contract_path("Counter.json")).bytecode

    def test_create_account_tx(self):
        tx = TxCreateAccount(web3=self.web3,
                             chain_id=300,
                             nonce=4,
                             from_=self.SENDER,
                             gas_limit=0,
                             gas_price=250000000,
                             bytecode=self.bytecode)
        self.assertEqual(ZkSyncAddresses.CONTRACT_DEPLOYER_ADDRESS.value, tx.tx["to"].lower())
        self.assertEqual([self.bytecode], tx.tx["eip712Meta"].factory_deps)

        tx_712 = tx.tx712(9910372)
        self.assertEqual(9910372, tx_712.gas_limit)
        self.assertEqual(250000000, tx_712.maxFeePerGas)
        self.assertEqual(4, tx_712.nonce)

        deployer = PrecomputeContractDeployer(self.web3)
        fn, _ = deployer.contract_encoder.contract.decode_function_input(tx_712.data)
        self.assertEqual("createAccount", fn.fn_name)

    def test_create_contract_tx_with_deps(self):
        dep = b"\x02" * 96
        tx = TxCreateContract(web3=self.web3,
                              chain_id=300,
                              nonce=0,
                              from_=self.SENDER,
                              gas_price=1,
                              bytecode=self.bytecode,
                              deps=[dep])
        self.assertEqual([dep, self.bytecode], tx.tx["eip712Meta"].factory_deps)

    def test_function_call_max_fee(self):
        tx = TxFunctionCall(from_=self.SENDER,
                            to=self.SENDER,
                            chain_id=300,
                            nonce=1,
                            gas_limit=100,
                            gas_price=250000000,
                            max_fee_per_gas=21000,
                            max_priority_fee_per_gas=0)
        tx_712 = tx.tx712(tx.tx["gas"])
        self.assertEqual(21000, tx_712.maxFeePerGas)
        self.assertEqual(0, tx_712.maxPriorityFeePerGas)
        self.assertEqual(250000000, tx.tx["gasPrice"])


class ContractFactoryTests(TestCase):
    PRIVATE_KEY = "0x7726827caac94a7f9e1b160f7ea819f172f7b6f9d2a97f992c38edeab82d4110"
    DEPLOYED = "0x196bf06Fc207F5efE412635302A9e03a69387E33"

    def setUp(self) -> None:
        self.account = Account.from_key(self.PRIVATE_KEY)
        self.zk_web3 = MagicMock()
        self.zk_web3.eth = Web3().eth
        self.zk_web3.zksync.get_transaction_count.return_value = 2
        self.zk_web3.zksync.chain_id = 300
        self.zk_web3.zksync.gas_price = 250000000
        self.zk_web3.zksync.eth_estimate_gas.return_value = 9910372
        self.zk_web3.zksync.send_raw_transaction.return_value = b"\x01" * 32
        encoder = ContractEncoder.from_artifacts(self.zk_web3,
                                                 contract_path("MinimalAccount.json"),
                                                 contract_path("MinimalAccountZk.json"))
        self.factory = ContractFactory(zksync=self.zk_web3,
                                       abi=encoder.abi,
                                       bytecode=encoder.bytecode,
                                       account=self.account,
                                       signer=PrivateKeyEthSigner(self.account, 300),
                                       deployment_type=DeploymentType.CREATE_ACCOUNT)

    def test_deploy(self):
        self.zk_web3.zksync.wait_for_transaction_receipt.return_value = {
            "status": 1, "contractAddress": self.DEPLOYED, "transactionHash": b"\x01" * 32,
        }
        self.factory.deploy()

        self.zk_web3.zksync.get_transaction_count.assert_called_once_with(self.account.address, "pending")
        estimate = self.zk_web3.zksync.eth_estimate_gas.call_args[0][0]
        self.assertNotIn("gas", estimate)
        self.assertEqual(ZkSyncAddresses.CONTRACT_DEPLOYER_ADDRESS.value, estimate["to"].lower())

        raw = self.zk_web3.zksync.send_raw_transaction.call_args[0][0]
        fields = rlp.decode(raw[1:])
        self.assertEqual(b"\x71", raw[:1])
        self.assertEqual(9910372, int.from_bytes(fields[3], "big"))
        self.assertEqual(65, len(fields[14]))
        self.assertEqual([self.factory.byte_code], fields[13])
        self.zk_web3.zksync.contract.assert_called_once_with(address=self.DEPLOYED, abi=self.factory.abi)

    def test_deploy_reverted(self):
        self.zk_web3.zksync.wait_for_transaction_receipt.return_value = {
            "status": 0, "contractAddress": None, "transactionHash": b"\x01" * 32,
        }
        with self.assertRaises(RuntimeError):
            self.factory.deploy()
        self.zk_web3.zksync.contract.assert_not_called()

    def test_deployment_type_names(self):
        self.assertEqual(DeploymentType.CREATE_ACCOUNT, DeploymentType.from_name("createAccount"))
        self.assertEqual(DeploymentType.CREATE, DeploymentType.from_name("create"))
        with self.assertRaises(ValueError):
            DeploymentType.from_name("create2")
