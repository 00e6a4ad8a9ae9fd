"""
Production settings: DJANGO_SETTINGS_MODULE=clinic_project.settings_production

Fails fast on missing secrets or POSAPI endpoint; eBarimt skip mode is refused.
Logs rotate under LOGS_DIR (errors kept longer than info).
"""

import os
from pathlib import Path

from .settings import *  # noqa: F401, F403

DEBUG = False


def _required(name: str) -> str:
    value = os.environ.get(name, "").strip()
    if not value:
        raise ValueError(f"{name} environment variable must be set in production")
    return value


SECRET_KEY = _required("SECRET_KEY")
ALLOWED_HOSTS = [h.strip() for h in _required("ALLOWED_HOSTS").split(",") if h.strip()]
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True

if os.environ.get("DATABASE_URL"):
    import dj_database_url

    DATABASES = {"default": dj_database_url.config(conn_max_age=600)}
else:
    DATABASES["default"]["NAME"] = os.environ.get(  # noqa: F405
        "DB_PATH", str(BASE_DIR / "db_production.sqlite3")  # noqa: F405
    )

POSAPI_BASE_URL = _required("POSAPI_BASE_URL")
if EBARIMT_SKIP:  # noqa: F405
    raise ValueError("EBARIMT_SKIP must not be enabled in production: receipts would not reach the tax authority")

LOGS_DIR = Path(os.environ.get("LOGS_DIR", str(BASE_DIR / "logs")))  # noqa: F405
LOGS_DIR.mkdir(parents=True, exist_ok=True)

_MB = 1024 * 1024
# handler name, level, file, max size, backups (one per rotation), formatter
_FILE_HANDLERS = (
    ("ebarimt_file", "INFO", "ebarimt.log", 10 * _MB, 30, "simple"),
    ("ebarimt_json_file", "INFO", "ebarimt_json.log", 10 * _MB, 30, "json"),
    ("ebarimt_error_file", "ERROR", "ebarimt_error.log", 5 * _MB, 90, "simple"),
)
for _name, _level, _filename, _max_bytes, _backups, _formatter in _FILE_HANDLERS:
    LOGGING["handlers"][_name] = {  # noqa: F405
        "level": _level,
        "class": "logging.handlers.RotatingFileHandler",
        "filename": LOGS_DIR / _filename,
        "maxBytes": _max_bytes,
        "backupCount": _backups,
        "formatter": _formatter,
    }
LOGGING["loggers"]["ebarimt"]["handlers"] = ["console"] + [h[0] for h in _FILE_HANDLERS]  # noqa: F405
