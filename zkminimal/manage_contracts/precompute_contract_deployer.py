from typing import Optional

from eth_typing import HexStr
from eth_utils.crypto import keccak
from web3 import Web3
from web3.logs import DISCARD
from web3.types import Nonce, TxReceipt

from zkminimal.core.types import AccountAbstractionVersion
from zkminimal.core.utils import pad_front_bytes, to_bytes, int_to_bytes, hash_byte_code
from zkminimal.manage_contracts.contract_encoder_base import BaseContractEncoder
from zkminimal.manage_contracts.utils import icontract_deployer_abi_default


class PrecomputeContractDeployer:
    """Calldata and addresses for the ContractDeployer system contract."""

    DEFAULT_SALT = b'\0' * 32
    CREATE_FUNC = "create"
    CREATE_ACCOUNT_FUNC = "createAccount"

    CREATE_PREFIX = keccak(text="zksyncCreate")

    def __init__(self, web3: Web3, abi: Optional[list] = None):
        self.web3 = web3
        self.contract_encoder = BaseContractEncoder(self.web3, abi or icontract_deployer_abi_default())

    def _deployer_call(self, fn_name: str, bytecode: bytes, call_data: Optional[bytes], *extra) -> HexStr:
        # The deployer takes the bytecode hash only, the bytecode travels in factoryDeps
        args = (self.DEFAULT_SALT, hash_byte_code(bytecode), call_data or b'') + extra
        return self.contract_encoder.encode_method(fn_name=fn_name, args=args)

    def encode_create(self, bytecode: bytes, call_data: Optional[bytes] = None) -> HexStr:
        return self._deployer_call(self.CREATE_FUNC, bytecode, call_data)

    def encode_create_account(self, bytecode: bytes,
                              call_data: Optional[bytes] = None,
                              version: AccountAbstractionVersion = AccountAbstractionVersion.VERSION_1
                              ) -> HexStr:
        return self._deployer_call(self.CREATE_ACCOUNT_FUNC, bytecode, call_data, version.value)

    def compute_l2_create_address(self, sender: HexStr, nonce: Nonce) -> HexStr:
        """Address a ``create``/``createAccount`` from ``sender`` at deployment nonce ``nonce`` lands on."""
        preimage = b"".join([
            self.CREATE_PREFIX,
            pad_front_bytes(to_bytes(sender), 32),
            pad_front_bytes(int_to_bytes(nonce), 32),
        ])
        return HexStr(Web3.to_checksum_address(keccak(preimage)[12:]))

    def extract_contract_address(self, receipt: TxReceipt) -> HexStr:
        events = self.contract_encoder.contract.events.ContractDeployed().process_receipt(receipt, errors=DISCARD)
        if len(events) == 0:
            raise RuntimeError(f"No ContractDeployed event in transaction {Web3.to_hex(receipt['transactionHash'])}")
        # Factory dependencies are deployed first, the requested contract is the last one
        return HexStr(Web3.to_checksum_address(events[-1]["args"]["contractAddress"]))
