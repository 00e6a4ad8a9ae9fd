"""Scrubbing and masking helpers applied before anything is persisted or logged."""

import json

# Regulator forbids storing these; they may only reach the cashier's screen.
PROHIBITED_RESPONSE_KEYS = ("lottery", "qrData", "qrDate")

SENSITIVE_KEYS = frozenset({
    "authorization", "xapikey", "apikey", "token", "operatortoken",
})


def scrub_response(obj):
    """
    Remove lottery, qrData and qrDate from a POSAPI response before it is stored.
    Returns a shallow copy; other keys are untouched. Non-dict input (incl. None) is returned as is.
    """
    if not isinstance(obj, dict):
        return obj
    return {k: v for k, v in obj.items() if k not in PROHIBITED_RESPONSE_KEYS}


def mask_sensitive_data(obj):
    """
    Recursively mask credential fields in a JSON-serializable object.
    Masks: Authorization, X-API-KEY, token, apiKey.
    """
    if obj is None:
        return None
    if isinstance(obj, (str, int, float, bool)):
        return obj
    if isinstance(obj, list):
        return [mask_sensitive_data(i) for i in obj]
    if isinstance(obj, dict):
        out = {}
        for k, v in obj.items():
            k_lower = str(k).lower().replace("_", "").replace("-", "")
            if k_lower in SENSITIVE_KEYS:
                out[k] = "[REDACTED]"
            else:
                out[k] = mask_sensitive_data(v)
        return out
    return obj


def safe_json_dumps(obj, indent: int | None = None) -> str:
    """JSON dump for log lines: prohibited fields scrubbed, credentials masked."""
    return json.dumps(mask_sensitive_data(scrub_response(obj)), indent=indent, default=str, ensure_ascii=False)
