import logging
from typing import Any, Optional, Union

from eth_typing import URI
from web3 import HTTPProvider
from web3.types import RPCEndpoint, RPCResponse

DEFAULT_REQUEST_TIMEOUT = 120


class ZkSyncProvider(HTTPProvider):
    """JSON-RPC over HTTP to a zkSync node, with every request traced at DEBUG."""

    logger = logging.getLogger("ZkSyncProvider")

    def __init__(self, url: Optional[Union[URI, str]], timeout: float = DEFAULT_REQUEST_TIMEOUT):
        super(ZkSyncProvider, self).__init__(url, request_kwargs={"timeout": timeout})

    def make_request(self, method: RPCEndpoint, params: Any) -> RPCResponse:
        self.logger.debug("%s %s params: %s", self.endpoint_uri, method, params)
        response = HTTPProvider.make_request(self, method, params)
        if "error" in response:
            self.logger.debug("%s failed: %s", method, response["error"])
        return response
