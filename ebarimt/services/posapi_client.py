"""
POSAPI 3.0 wire client.
Thin wrapper over the local POSAPI REST endpoints and the operator merchant API.
Every call is audited in PosApiLog; non-2xx and transport failures raise PosApiError.
"""

import json
import logging
from urllib.parse import urlencode

import requests

from ebarimt.services.config import PosApiConfig
from ebarimt.services.http_client import posapi_request
from ebarimt.services.posapi_logger import log_posapi_call

logger = logging.getLogger("ebarimt")

RECEIPT_PATH = "/rest/receipt"
INFO_PATH = "/rest/info"
SEND_PATH = "/rest/send"
BANK_ACCOUNTS_PATH = "/rest/bankAccounts"


class PosApiError(Exception):
    """Controlled exception for POSAPI errors. status_code is None on timeout/connection failure."""

    def __init__(self, message: str, status_code: int | None = None, response_data=None):
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data


def _parse_body(response: requests.Response):
    """Empty body -> None; non-JSON body -> {"_raw": text}."""
    text = response.text or ""
    if not text.strip():
        return None
    try:
        return json.loads(text)
    except ValueError:
        return {"_raw": text}


class PosApiClient:
    """
    POSAPI REST client bound to one PosApiConfig.
    Only GET requests are retried at transport level; POST and DELETE are sent once.
    """

    def __init__(self, config: PosApiConfig):
        self.config = config

    def _send(self, method: str, path: str, *, payload=None, url: str | None = None, headers=None, label: str = "POSAPI"):
        url = url or f"{self.config.base_url}{path}"
        request_headers = {"Content-Type": "application/json"}
        if headers:
            request_headers.update(headers)
        retries = self.config.get_retries if method == "GET" else 0

        try:
            response = posapi_request(
                method,
                url,
                json=payload,
                headers=request_headers,
                timeout=self.config.timeout_seconds,
                retries=retries,
            )
        except requests.Timeout as e:
            message = f"{label} {method} {path} timed out after {self.config.timeout_ms} ms"
            log_posapi_call(path, method, request_payload=payload, error=message)
            logger.error(message, extra={"endpoint": path})
            raise PosApiError(message) from e
        except requests.RequestException as e:
            message = f"{label} {method} {path} failed: {e}"
            log_posapi_call(path, method, request_payload=payload, error=message)
            logger.error(message, extra={"endpoint": path})
            raise PosApiError(message) from e

        data = _parse_body(response)
        if not response.ok:
            detail = response.text or response.reason or ""
            message = f"{label} {method} {path} failed ({response.status_code}): {detail}"
            log_posapi_call(
                path, method,
                request_payload=payload,
                response_payload=data,
                status_code=response.status_code,
                error=message,
            )
            logger.warning(
                "%s %s %s returned HTTP %s",
                label, method, path, response.status_code,
                extra={"endpoint": path, "status_code": response.status_code},
            )
            raise PosApiError(message, status_code=response.status_code, response_data=data)

        log_posapi_call(
            path, method,
            request_payload=payload,
            response_payload=data,
            status_code=response.status_code,
        )
        return data

    def issue_receipt(self, payload: dict):
        """POST /rest/receipt"""
        return self._send("POST", RECEIPT_PATH, payload=payload)

    def cancel_receipt(self, ddtd: str, printed_at: str):
        """DELETE /rest/receipt with {"id": ddtd, "date": "yyyy-MM-dd HH:mm:ss"}."""
        return self._send("DELETE", RECEIPT_PATH, payload={"id": ddtd, "date": printed_at})

    def get_info(self):
        """GET /rest/info - POS terminal info."""
        return self._send("GET", INFO_PATH)

    def send_to_unified_system(self):
        """GET /rest/send - push stored receipts to the unified system."""
        return self._send("GET", SEND_PATH)

    def get_bank_accounts(self, tin: str):
        """GET /rest/bankAccounts?tin=..."""
        return self._send("GET", f"{BANK_ACCOUNTS_PATH}?{urlencode({'tin': tin})}")

    def send_operator_merchant_request(self, payload: dict, token: str | None = None, api_key: str | None = None):
        """POST to the operator merchant API with Bearer token and X-API-KEY."""
        token = token if token is not None else self.config.operator_token
        api_key = api_key if api_key is not None else self.config.operator_api_key
        url = self.config.operator_base_url
        return self._send(
            "POST",
            url,
            payload=payload,
            url=url,
            headers={"Authorization": f"Bearer {token}", "X-API-KEY": api_key},
            label="OperatorMerchant API",
        )
