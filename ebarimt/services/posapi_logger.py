"""
POSAPI call logging utility.
Stores request/response payloads, status codes and errors for audit.
Payloads are scrubbed of lottery/QR fields and masked of credentials before insert.
"""

import logging

from ebarimt.models import PosApiLog
from ebarimt.utils import mask_sensitive_data, scrub_response

logger = logging.getLogger("ebarimt")


def _for_storage(payload):
    if payload is None:
        return None
    if not isinstance(payload, (dict, list)):
        payload = {"payload": payload}
    return mask_sensitive_data(scrub_response(payload))


def log_posapi_call(
    endpoint: str,
    method: str,
    request_payload=None,
    response_payload=None,
    status_code: int | None = None,
    error: str | Exception | None = None,
) -> PosApiLog:
    """
    Log a POSAPI call to the database.

    Args:
        endpoint: Path or URL called (e.g. "/rest/receipt").
        method: HTTP method.
        request_payload: Request body as sent, or None.
        response_payload: Parsed response body, or None.
        status_code: HTTP status, or None on transport failure.
        error: Error message or exception, if the call failed.
    """
    error_message = None
    if error is not None:
        error_message = error if isinstance(error, str) else str(error)

    log_entry = PosApiLog.objects.create(
        endpoint=endpoint[:255],
        method=method.upper(),
        request_payload=_for_storage(request_payload),
        response_payload=_for_storage(response_payload),
        status_code=status_code,
        error_message=error_message,
    )
    logger.info(
        "POSAPI call logged: %s %s -> %s",
        method.upper(),
        endpoint,
        status_code or error_message or "unknown",
        extra={"endpoint": endpoint, "status_code": status_code},
    )
    return log_entry
