"""
HTTP transport for POSAPI.
Every request carries a timeout. Only GET is retried at transport level;
POST and DELETE change fiscal state and are never retried here.
"""

import logging

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger("ebarimt")

RETRY_STATUS_CODES = (502, 503, 504)


def requests_session_with_retry(
    retries: int = 2,
    backoff_factor: float = 0.5,
    status_forcelist: tuple = RETRY_STATUS_CODES,
) -> requests.Session:
    """Create session with GET-only retry on gateway errors. Exponential backoff."""
    session = requests.Session()
    retry = Retry(
        total=retries,
        backoff_factor=backoff_factor,
        status_forcelist=status_forcelist,
        allowed_methods=["GET"],
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


def posapi_request(
    method: str,
    url: str,
    *,
    json: dict | None = None,
    params: dict | None = None,
    headers: dict | None = None,
    timeout: float = 15.0,
    retries: int = 2,
) -> requests.Response:
    """
    Make a POSAPI request. Raises requests.Timeout / requests.ConnectionError on transport failure;
    HTTP status interpretation is left to the caller.
    """
    session = requests_session_with_retry(retries=retries)
    try:
        return session.request(
            method=method,
            url=url,
            json=json,
            params=params,
            headers=headers,
            timeout=timeout,
        )
    finally:
        session.close()
