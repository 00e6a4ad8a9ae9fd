"""Single-line JSON log records for shipping eBarimt logs to a collector."""

import json
import logging
from datetime import datetime, timezone

# Passed via logger.*(..., extra={...}); emitted only when set
EXTRA_FIELDS = ("invoice_id", "ddtd", "attempt_no", "endpoint", "status_code")


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        log_obj = {
            "timestamp": created.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in EXTRA_FIELDS:
            value = getattr(record, field, None)
            if value is not None and value != "":
                log_obj[field] = value
        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_obj, default=str, ensure_ascii=False)
