import importlib.resources as pkg_resources
import json
from functools import lru_cache

from zkminimal.manage_contracts import contract_abi

CONTRACT_DEPLOYER_ABI = "ContractDeployer.json"


@lru_cache(maxsize=None)
def load_contract_abi(file_name: str) -> list:
    """ABI of a system contract shipped in ``contract_abi``; read once per file."""
    with (pkg_resources.files(contract_abi) / file_name).open(mode="r") as json_file:
        return json.load(json_file)["abi"]


def icontract_deployer_abi_default() -> list:
    return load_contract_abi(CONTRACT_DEPLOYER_ABI)
