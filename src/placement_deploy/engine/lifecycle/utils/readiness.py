# -*- coding: utf-8 -*-
import asyncio
import logging
from typing import Optional

import requests
import urllib3

logger = logging.getLogger(__name__)


def _answers(session: requests.Session, url: str, timeout: float) -> bool:
    """Return True once the URL answers with any HTTP status."""
    try:
        response = session.get(url, timeout=timeout, verify=False)
    except requests.exceptions.RequestException as e:
        logger.debug(f"{url} not reachable yet: {e}")
        return False
    logger.debug(f"{url} answered with {response.status_code}")
    return True


async def wait_for_service(
    url: str,
    timeout: float = 60,
    interval: float = 1.0,
    session: Optional[requests.Session] = None,
) -> bool:
    """Poll a URL until the service answers or the timeout elapses.

    Any HTTP response counts as ready, including 401 from an endpoint that
    requires a token; only connection-level failures keep the poll going.

    Args:
        url: URL to poll
        timeout: Maximum time to wait in seconds
        interval: Delay between attempts in seconds
        session: Optional requests session

    Returns:
        True if the service answered, False on timeout
    """
    if session is None:
        session = requests.Session()
        # Reach the service directly, never through an environment proxy
        session.trust_env = False
    urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    loop = asyncio.get_event_loop()
    end_time = loop.time() + timeout

    while loop.time() < end_time:
        request_timeout = max(min(interval * 5, end_time - loop.time()), 0.1)
        if _answers(session, url, request_timeout):
            return True
        await asyncio.sleep(interval)

    return False
