import json
from unittest import TestCase

from web3 import Web3

from tests.contracts.utils import contract_path
from zkminimal.manage_contracts.contract_encoder_base import ContractEncoder, JsonConfiguration

SPENDER = "0xed1E24DFfF97892F55361641f1F47Eb992E7ef6D"


class ContractEncoderTests(TestCase):

    def setUp(self) -> None:
        self.web3 = Web3()

    def test_from_artifacts(self):
        encoder = ContractEncoder.from_artifacts(self.web3,
                                                 contract_path("MinimalAccount.json"),
                                                 contract_path("MinimalAccountZk.json"))
        self.assertEqual(["owner", "transferOwnership"], encoder.function_names)
        self.assertEqual(96, len(encoder.bytecode))

    def test_from_artifacts_abi_only(self):
        encoder = ContractEncoder.from_artifacts(self.web3, contract_path("ERC20.json"))
        self.assertIsNone(encoder.bytecode)
        self.assertIn("approve", encoder.function_names)

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            ContractEncoder.from_artifacts(self.web3, contract_path("Missing.json"))

    def test_malformed_json(self):
        with self.assertRaises(json.JSONDecodeError):
            ContractEncoder.from_artifacts(self.web3, contract_path("Malformed.json"))

    def test_abi_must_be_array(self):
        with self.assertRaises(ValueError):
            ContractEncoder.from_artifacts(self.web3, contract_path("AbiNotArray.json"))

    def test_missing_bytecode(self):
        with self.assertRaises(ValueError):
            ContractEncoder.from_artifacts(self.web3,
                                           contract_path("MinimalAccount.json"),
                                           contract_path("ERC20.json"))

    def test_empty_bytecode(self):
        # The EVM build of the account carries an empty bytecode object
        with self.assertRaises(ValueError):
            ContractEncoder.from_artifacts(self.web3,
                                           contract_path("MinimalAccount.json"),
                                           contract_path("MinimalAccount.json"))

    def test_bytecode_not_hex(self):
        with self.assertRaises(ValueError):
            ContractEncoder.from_artifacts(self.web3,
                                           contract_path("ERC20.json"),
                                           contract_path("BadHex.json"))

    def test_bytecode_not_deployable(self):
        # zkSync bytecode is an odd number of 32-byte words
        for artifact in ("UnalignedBytecode.json", "EvenWordBytecode.json"):
            with self.subTest(artifact=artifact):
                with self.assertRaises(ValueError):
                    ContractEncoder.from_artifacts(self.web3,
                                                   contract_path("ERC20.json"),
                                                   contract_path(artifact))

    def test_standard_json_with_plain_bytecode(self):
        encoder = ContractEncoder.from_json(self.web3, contract_path("Counter.json"), JsonConfiguration.STANDARD)
        self.assertEqual(160, len(encoder.bytecode))

    def test_approve_round_trip(self):
        encoder = ContractEncoder.from_artifacts(self.web3, contract_path("ERC20.json"))
        data = encoder.encode_method(fn_name="approve", args=(SPENDER, 1000000))
        self.assertEqual("0x095ea7b3", data[:10])

        fn_name, params = encoder.decode_method(data)
        self.assertEqual("approve", fn_name)
        self.assertEqual(SPENDER, params["spender"])
        self.assertEqual(1000000, params["value"])

    def test_encode_constructor(self):
        encoder = ContractEncoder.from_json(self.web3, contract_path("Counter.json"))
        self.assertEqual((7).to_bytes(32, "big"), encoder.encode_constructor(7))
        self.assertEqual((7).to_bytes(32, "big"), encoder.encode_constructor(start=7))
        with self.assertRaises(TypeError):
            encoder.encode_constructor(1, 2)

    def test_encode_constructor_without_constructor(self):
        encoder = ContractEncoder.from_artifacts(self.web3, contract_path("ERC20.json"))
        self.assertEqual(b"", encoder.encode_constructor())
        with self.assertRaises(TypeError):
            encoder.encode_constructor(1)

    def test_combined_json(self):
        encoders = ContractEncoder.from_json(self.web3, contract_path("Combined.json"), JsonConfiguration.COMBINED)
        # Interfaces carry no binary and are skipped
        self.assertEqual(1, len(encoders))
        self.assertEqual(["get"], encoders[0].function_names)
        self.assertEqual(32, len(encoders[0].bytecode))

    def test_constructor_keyword_errors(self):
        encoder = ContractEncoder.from_json(self.web3, contract_path("Counter.json"))
        with self.assertRaises(TypeError):
            encoder.encode_constructor(7, start=7)
        with self.assertRaises(TypeError):
            encoder.encode_constructor(begin=7)
