from .jsonrpc import build_chain_id_request, is_expected_chain, parse_chain_id
from .prober import find_all_working, find_random_working, find_working_endpoints
from .transports import check_endpoint, check_http, check_websocket, is_https_url, is_websocket_url

__all__ = [
    "build_chain_id_request",
    "check_endpoint",
    "check_http",
    "check_websocket",
    "find_all_working",
    "find_random_working",
    "find_working_endpoints",
    "is_expected_chain",
    "is_https_url",
    "is_websocket_url",
    "parse_chain_id",
]
