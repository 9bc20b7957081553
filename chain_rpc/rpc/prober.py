# rpc/prober.py
# Concurrent endpoint validation.
#
# Every candidate URL gets its own daemon worker. One deadline covers the
# whole batch and is also the per-connection timeout handed to each check. The
# collector takes results off a queue as they arrive and stops at whichever
# comes first:
#   - the deadline passes (keep whatever has arrived, possibly nothing)
#   - every worker has reported
# Workers still in flight at the deadline are abandoned. They are daemon
# threads, so they never hold the process open after the caller is done.

from __future__ import annotations

import queue
import random
import threading
import time
from typing import Callable, List, Optional, Sequence, Tuple

from ..errors import AllEndpointsFailing
from ..log import get_logger
from .transports import check_endpoint

log = get_logger(__name__)

Checker = Callable[[str, int, float], bool]


def _run_check(
    checker: Checker,
    url: str,
    expected_chain_id: int,
    timeout: float,
    results: "queue.Queue[Tuple[str, bool]]",
) -> None:
    try:
        ok = checker(url, expected_chain_id, timeout)
    except Exception as e:
        log.debug(f"[probe] {url}: check raised {e!r}")
        ok = False
    results.put((url, bool(ok)))


def find_working_endpoints(
    urls: Sequence[str],
    expected_chain_id: int,
    timeout: float,
    checker: Optional[Checker] = None,
) -> List[str]:
    """Return the URLs that answered eth_chainId correctly before the deadline.

    Order follows completion, not the input list.
    """
    urls = [u for u in urls if u]
    if not urls:
        return []
    checker = checker or check_endpoint

    deadline = time.monotonic() + timeout
    results: "queue.Queue[Tuple[str, bool]]" = queue.Queue()
    for i, url in enumerate(urls):
        threading.Thread(
            target=_run_check,
            args=(checker, url, expected_chain_id, timeout, results),
            name=f"probe-{i}",
            daemon=True,
        ).start()

    working: List[str] = []
    reported = 0
    while reported < len(urls):
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            break
        try:
            url, ok = results.get(timeout=remaining)
        except queue.Empty:
            break
        reported += 1
        if ok:
            working.append(url)

    if reported < len(urls):
        log.debug(f"[probe] deadline reached, abandoning {len(urls) - reported} in-flight check(s)")
    log.info(f"[probe] {len(working)}/{len(urls)} endpoint(s) working for chain {expected_chain_id}")
    return working


def find_all_working(
    urls: Sequence[str],
    expected_chain_id: int,
    timeout: float,
    checker: Optional[Checker] = None,
    rng: Optional[random.Random] = None,
) -> List[str]:
    working = find_working_endpoints(urls, expected_chain_id, timeout, checker=checker)
    if not working:
        raise AllEndpointsFailing(tried=len(urls))
    (rng or random.Random()).shuffle(working)
    return working


def find_random_working(
    urls: Sequence[str],
    expected_chain_id: int,
    timeout: float,
    checker: Optional[Checker] = None,
    rng: Optional[random.Random] = None,
) -> str:
    """
    One working URL, picked uniformly from everything that answered in time.

    The full window is always collected before picking, rather than taking the
    fastest responder, so load spreads across endpoints.
    """
    working = find_working_endpoints(urls, expected_chain_id, timeout, checker=checker)
    if not working:
        raise AllEndpointsFailing(tried=len(urls))
    return (rng or random.Random()).choice(working)
