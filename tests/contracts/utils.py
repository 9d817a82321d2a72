from pathlib import Path

from tests import contracts


def contract_path(contract_name: str) -> Path:
    return Path(contracts.__file__).parent / contract_name
