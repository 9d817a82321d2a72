import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_typing import HexStr
from eth_utils import remove_0x_prefix
from web3 import Web3

from zkminimal.core.types import Network

# Deployed minimal account and the accounts it interacts with on Sepolia
ZK_MINIMAL_ADDRESS = "0x196bf06Fc207F5efE412635302A9e03a69387E33"
RANDOM_APPROVER = "0xed1E24DFfF97892F55361641f1F47Eb992E7ef6D"
USDC_ZKSYNC = "0x5249Fd99f1C1aE9B04C65427257Fc3B8cD976620"
AMOUNT_TO_APPROVE = 1000000

ZK_MINIMAL_ABI_PATH = "out/ZkSyncMinimalAccount.sol/ZkSyncMinimalAccount.json"
ZK_MINIMAL_BYTECODE_PATH = "zkout/ZkSyncMinimalAccount.sol/ZkSyncMinimalAccount.json"
ERC20_ABI_PATH = "out/ERC20.sol/ERC20.json"


def load_environment(dotenv_path: Optional[Path] = None) -> None:
    """Populate ``os.environ`` from a ``.env`` file, never overriding variables already set."""
    load_dotenv(dotenv_path=dotenv_path, override=False)


def configure_logging() -> None:
    level = os.getenv("ZKMINIMAL_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


class EnvPrivateKey:
    def __init__(self, env: str):
        value = os.getenv(env, None)
        if value is None or len(value.strip()) == 0:
            raise LookupError(f"Can't build key from {env}")
        try:
            self._key = bytes.fromhex(remove_0x_prefix(HexStr(value.strip())))
        except ValueError:
            raise ValueError(f"{env} is not a hex encoded private key") from None

    @property
    def key(self) -> bytes:
        return self._key


class EncryptedKey:
    """Private key kept in an encrypted JSON keystore, unlocked with a password."""

    def __init__(self, keystore: Path, password_env: str):
        password = os.getenv(password_env, None)
        if password is None:
            raise LookupError(f"{password_env} must be set to decrypt {keystore}")
        with Path(keystore).open(mode="r") as json_f:
            keyfile = json.load(json_f)
        self._key = bytes(Account.decrypt(keyfile, password))

    @property
    def key(self) -> bytes:
        return self._key


def load_account() -> LocalAccount:
    keystore = os.getenv("ENCRYPTED_KEY_PATH")
    if keystore:
        key = EncryptedKey(Path(keystore), "PRIVATE_KEY_PASSWORD").key
    else:
        key = EnvPrivateKey("PRIVATE_KEY").key
    return Account.from_key(key)


def resolve_rpc_url(*url_envs: str) -> str:
    for env in url_envs:
        url = os.getenv(env)
        if url:
            return url
    return Network.from_name(os.getenv("ZKSYNC_NETWORK", Network.SEPOLIA.name)).value


def _checksum_env(env: str, default: str) -> HexStr:
    value = os.getenv(env, default)
    if not Web3.is_address(value):
        raise ValueError(f"{env}={value!r} is not an address")
    return HexStr(Web3.to_checksum_address(value))


@dataclass(frozen=True)
class DeployConfig:
    rpc_url: str
    abi_path: Path
    bytecode_path: Path
    deployment_type: str = "createAccount"

    @classmethod
    def from_env(cls) -> "DeployConfig":
        return cls(
            rpc_url=resolve_rpc_url("ZKSYNC_RPC_URL"),
            abi_path=Path(os.getenv("ZK_MINIMAL_ABI_PATH", ZK_MINIMAL_ABI_PATH)),
            bytecode_path=Path(os.getenv("ZK_MINIMAL_BYTECODE_PATH", ZK_MINIMAL_BYTECODE_PATH)),
            deployment_type=os.getenv("ZK_DEPLOYMENT_TYPE", "createAccount"),
        )


@dataclass(frozen=True)
class SendConfig:
    rpc_url: str
    account_address: HexStr
    token_address: HexStr
    spender: HexStr
    amount: int
    account_abi_path: Path
    token_abi_path: Path

    @classmethod
    def from_env(cls) -> "SendConfig":
        amount = os.getenv("AMOUNT_TO_APPROVE", str(AMOUNT_TO_APPROVE))
        try:
            amount = int(amount)
        except ValueError:
            raise ValueError(f"AMOUNT_TO_APPROVE={amount!r} is not an integer") from None
        if amount < 0:
            raise ValueError("AMOUNT_TO_APPROVE can't be negative")
        return cls(
            rpc_url=resolve_rpc_url("ZKSYNC_SEPOLIA_RPC_URL", "ZKSYNC_RPC_URL"),
            account_address=_checksum_env("ZK_MINIMAL_ADDRESS", ZK_MINIMAL_ADDRESS),
            token_address=_checksum_env("USDC_ZKSYNC", USDC_ZKSYNC),
            spender=_checksum_env("RANDOM_APPROVER", RANDOM_APPROVER),
            amount=amount,
            account_abi_path=Path(os.getenv("ZK_MINIMAL_ABI_PATH", ZK_MINIMAL_ABI_PATH)),
            token_abi_path=Path(os.getenv("ERC20_ABI_PATH", ERC20_ABI_PATH)),
        )
