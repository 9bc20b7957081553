# rpc/transports.py
# Single-endpoint eth_chainId checks over HTTP(S) and WebSocket.
#
# Every check returns a bool. A dead, slow, misbehaving or wrong-chain
# endpoint is just False; nothing here raises for endpoint failures.

from __future__ import annotations

import json
import time
from typing import Optional

import requests
from websockets.exceptions import WebSocketException
from websockets.sync.client import connect as ws_connect

from ..log import get_logger
from .jsonrpc import build_chain_id_request, is_expected_chain

log = get_logger(__name__)

HEADERS = {"Content-Type": "application/json"}

# an eth_chainId reply is a few dozen bytes
MAX_REPLY_BYTES = 64 * 1024


def is_websocket_url(url: str) -> bool:
    return url.startswith("ws://") or url.startswith("wss://")


def is_https_url(url: str) -> bool:
    return url.startswith("https://")


def check_http(
    url: str,
    expected_chain_id: int,
    timeout: float,
    session: Optional[requests.Session] = None,
) -> bool:
    # connect, headers and body all share one deadline
    deadline = time.monotonic() + timeout
    http = session or requests
    try:
        resp = http.post(
            url,
            json=build_chain_id_request(),
            headers=HEADERS,
            timeout=(timeout, timeout),
            stream=True,
        )
    except requests.RequestException as e:
        log.debug(f"[probe] {url}: {e}")
        return False
    try:
        if resp.status_code != 200:
            log.debug(f"[probe] {url}: HTTP {resp.status_code}")
            return False
        body = _read_body(url, resp, deadline)
    finally:
        resp.close()
    if body is None:
        return False
    try:
        data = json.loads(body)
    except ValueError:
        log.debug(f"[probe] {url}: response is not JSON")
        return False
    return _accept(url, data, expected_chain_id)


def _read_body(url: str, resp, deadline: float) -> Optional[bytes]:
    """Read the reply byte by byte so a trickling server cannot outlive the deadline."""
    body = bytearray()
    try:
        for chunk in resp.iter_content(chunk_size=1):
            body += chunk
            if time.monotonic() > deadline:
                log.debug(f"[probe] {url}: reply not complete before deadline")
                return None
            if len(body) > MAX_REPLY_BYTES:
                log.debug(f"[probe] {url}: reply larger than {MAX_REPLY_BYTES} bytes")
                return None
    except requests.RequestException as e:
        log.debug(f"[probe] {url}: {e}")
        return None
    return bytes(body)


def check_websocket(url: str, expected_chain_id: int, timeout: float, connect=ws_connect) -> bool:
    # handshake, reply and closing handshake share one deadline
    deadline = time.monotonic() + timeout
    try:
        with connect(url, open_timeout=timeout, close_timeout=timeout) as ws:
            ws.send(json.dumps(build_chain_id_request()))
            raw = ws.recv(timeout=max(0.0, deadline - time.monotonic()))
            ws.close_timeout = max(0.0, deadline - time.monotonic())
    except (WebSocketException, OSError) as e:
        log.debug(f"[probe] {url}: {e}")
        return False
    try:
        data = json.loads(raw)
    except ValueError:
        log.debug(f"[probe] {url}: response is not JSON")
        return False
    return _accept(url, data, expected_chain_id)


def check_endpoint(url: str, expected_chain_id: int, timeout: float) -> bool:
    if is_websocket_url(url):
        return check_websocket(url, expected_chain_id, timeout)
    return check_http(url, expected_chain_id, timeout)


def _accept(url: str, data, expected_chain_id: int) -> bool:
    ok = is_expected_chain(data, expected_chain_id)
    if not ok:
        log.debug(f"[probe] {url}: bad eth_chainId reply {str(data)[:120]}")
    return ok
