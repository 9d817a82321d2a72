import json
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional, Tuple, Union

from eth_abi import encode
from eth_typing import HexStr
from eth_utils.abi import get_abi_input_types
from web3 import Web3

from zkminimal.core.utils import hash_byte_code, to_bytes


class JsonConfiguration(Enum):
    COMBINED = "combined"
    STANDARD = "standard"


def read_artifact(path: Union[Path, str]) -> dict:
    """Read a compiled artifact JSON file.

    Missing files raise ``FileNotFoundError`` and malformed JSON raises
    ``json.JSONDecodeError``; an artifact that is not a JSON object raises
    ``ValueError``.
    """
    path = Path(path)
    with path.open(mode="r") as json_f:
        data = json.load(json_f)
    if not isinstance(data, dict):
        raise ValueError(f"Artifact {path} must contain a JSON object")
    return data


def artifact_abi(data: dict, source: Union[Path, str] = "artifact") -> List[dict]:
    abi = data.get("abi")
    if abi is None:
        raise ValueError(f"{source} has no 'abi' key")
    if not isinstance(abi, list):
        raise ValueError(f"{source}: 'abi' must be an array")
    return abi


def artifact_bytecode(data: dict, source: Union[Path, str] = "artifact") -> bytes:
    """Decode ``bytecode.object`` and check it is deployable zkSync bytecode.

    Anything ``hash_byte_code`` would reject later is rejected here with
    ``ValueError``, before the artifact reaches a transaction.
    """
    # Foundry and zksolc place the hex under bytecode.object, older outputs use a plain string
    bytecode = data.get("bytecode")
    if isinstance(bytecode, dict):
        bytecode = bytecode.get("object")
    if not isinstance(bytecode, str):
        raise ValueError(f"{source} has no 'bytecode.object' hex string")
    try:
        code = to_bytes(HexStr(bytecode))
    except ValueError:
        raise ValueError(f"{source}: 'bytecode.object' is not valid hex") from None
    if len(code) == 0:
        raise ValueError(f"{source}: 'bytecode.object' is empty")
    try:
        hash_byte_code(code)
    except (ValueError, OverflowError) as e:
        raise ValueError(f"{source}: {e}") from e
    return code


class BaseContractEncoder:
    @classmethod
    def from_json(
        cls,
        web3: Web3,
        compiled_contract: Path,
        conf_type: JsonConfiguration = JsonConfiguration.STANDARD,
    ):
        """Encoder(s) from a single compiler output file.

        ``COMBINED`` (``solc --combined-json abi,bin``) yields one encoder per
        contract that has both an ABI and a binary; ``STANDARD`` yields one
        encoder from an ``abi`` + ``bytecode`` artifact.
        """
        data = read_artifact(compiled_contract)
        if conf_type == JsonConfiguration.COMBINED:
            return [
                cls(web3, abi=entry["abi"], bytecode=to_bytes(entry["bin"]))
                for entry in data["contracts"].values()
                if "abi" in entry and "bin" in entry
            ]
        return cls(
            web3,
            abi=artifact_abi(data, compiled_contract),
            bytecode=artifact_bytecode(data, compiled_contract),
        )

    @classmethod
    def from_artifacts(
        cls, web3: Web3, abi_path: Path, bytecode_path: Optional[Path] = None
    ):
        """Build an encoder from split compiler outputs.

        :param web3:
            Web3 instance used for encoding

        :param abi_path:
            JSON file exposing ``abi``, e.g. ``out/<Name>.sol/<Name>.json``

        :param bytecode_path:
            JSON file exposing ``bytecode.object``, e.g. ``zkout/<Name>.sol/<Name>.json``.
            If omitted the encoder carries no bytecode.
        """
        abi = artifact_abi(read_artifact(abi_path), abi_path)
        bytecode = None
        if bytecode_path is not None:
            bytecode = artifact_bytecode(read_artifact(bytecode_path), bytecode_path)
        return cls(web3, abi=abi, bytecode=bytecode)

    def __init__(self, web3: Web3, abi, bytecode: Optional[bytes] = None):
        self.web3 = web3
        self.abi = abi
        if bytecode is None:
            self.instance_contract = self.web3.eth.contract(abi=self.abi)
        else:
            self.instance_contract = self.web3.eth.contract(
                abi=self.abi, bytecode=bytecode
            )

    def encode_method(self, fn_name, args: tuple) -> HexStr:
        return self.instance_contract.encode_abi(fn_name, args)

    def decode_method(self, data: Union[bytes, HexStr]):
        fn, params = self.instance_contract.decode_function_input(data)
        return fn.fn_name, params

    @property
    def contract(self):
        return self.instance_contract


class ContractEncoder(BaseContractEncoder):
    def __init__(self, web3: Web3, abi, bytecode=None):
        super(ContractEncoder, self).__init__(web3, abi, bytecode)

    def encode_constructor(self, *args: Any, **kwargs: Any) -> bytes:
        constructor_abi = get_constructor_abi(self.abi)

        if constructor_abi is None:
            if args or kwargs:
                raise TypeError("Contract has no constructor, arguments are not accepted")
            return b""
        arguments = merge_args_and_kwargs(constructor_abi["inputs"], args, kwargs)
        return encode(get_abi_input_types(constructor_abi), arguments)

    @property
    def bytecode(self) -> Optional[bytes]:
        return self.instance_contract.bytecode

    @property
    def function_names(self) -> List[str]:
        return [item["name"] for item in self.abi if item.get("type") == "function"]


def merge_args_and_kwargs(abi_inputs, args, kwargs) -> Tuple[Any, ...]:
    """Order positional and keyword arguments the way ``abi_inputs`` declares them."""
    names = [arg_abi["name"] for arg_abi in abi_inputs]
    if len(args) + len(kwargs) != len(names):
        raise TypeError(f"Incorrect argument count. Expected '{len(names)}'. Got '{len(args) + len(kwargs)}'")

    positional = dict(zip(names, args))
    duplicates = positional.keys() & kwargs.keys()
    if duplicates:
        raise TypeError(f"constructor got multiple values for argument(s) '{', '.join(sorted(duplicates))}'")
    unknown = kwargs.keys() - set(names)
    if unknown:
        raise TypeError(f"constructor got unexpected keyword argument(s) '{', '.join(sorted(unknown))}'")

    merged = {**positional, **kwargs}
    return tuple(merged[name] for name in names)


def get_constructor_abi(contract_abi) -> Optional[dict]:
    return next((item for item in contract_abi if item.get("type") == "constructor"), None)
