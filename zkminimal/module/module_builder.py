from typing import Union

from eth_typing import URI
from web3 import Web3
from web3._utils.module import attach_modules

from zkminimal.core.types import Network
from zkminimal.module.zksync_module import ZkSync
from zkminimal.module.zksync_provider import DEFAULT_REQUEST_TIMEOUT, ZkSyncProvider


class ZkWeb3(Web3):
    """Web3 with a ``zksync`` namespace next to ``eth``."""

    zksync: ZkSync

    def __init__(self, provider: ZkSyncProvider):
        super().__init__(provider)
        attach_modules(self, {"zksync": (ZkSync,)})


class ZkSyncBuilder:
    @classmethod
    def build(cls, url: Union[URI, str, Network], timeout: float = DEFAULT_REQUEST_TIMEOUT) -> ZkWeb3:
        if isinstance(url, Network):
            url = url.value
        return ZkWeb3(ZkSyncProvider(url, timeout=timeout))
