import json
import logging
import re
import sys
import time
import uuid
from typing import Any, Dict

from .config import get_settings

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RESERVED_ATTRS = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

# Contacts carry e-mail addresses and phone/fax/mobile numbers
_CONTACT_PATTERNS = (
    (re.compile(r"(?:mailto:)?[^\s@\"'<>]+@[^\s@\"'<>]+\.[A-Za-z]{2,}"), "[REDACTED_EMAIL]"),
    (re.compile(r"(?<!\w)(?:tel:)?(?:\+\d{1,3}[ -]?)?\(?\d{3}\)?[ .-]?\d{3}[ .-]\d{4}(?!\w)"), "[REDACTED_PHONE]"),
)
_CONTACT_KEYS = ("email", "phone", "fax", "mobile")


class JsonFormatter(logging.Formatter):
    """One JSON object per record; contact details are masked unless ``redact`` is off."""

    def __init__(self, redact: bool = True):
        super().__init__()
        self.redact = redact

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        entry: Dict[str, Any] = {
            "ts": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime(record.created)),
            "level": record.levelname,
            "logger": record.name,
            "message": self.scrub(record.getMessage()),
        }
        entry.update(
            (key, self.scrub(value))
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        )
        if record.exc_info:
            entry["exc_info"] = self.scrub(self.formatException(record.exc_info))
        return json.dumps(entry, ensure_ascii=False, default=str)

    def scrub(self, value: Any) -> Any:
        """Mask contact details in strings, and in dicts/lists at any depth."""
        if not self.redact:
            return value
        if isinstance(value, str):
            for pattern, mask in _CONTACT_PATTERNS:
                value = pattern.sub(mask, value)
            return value
        if isinstance(value, dict):
            return {
                key: ("[REDACTED]" if item else item)
                if any(k in str(key).lower() for k in _CONTACT_KEYS)
                else self.scrub(item)
                for key, item in value.items()
            }
        if isinstance(value, (list, tuple)):
            return [self.scrub(item) for item in value]
        return value


def setup_logging() -> None:
    settings = get_settings()
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter(redact=settings.ECTD_LOG_REDACT_CONTACTS))
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))


def request_id() -> str:
    return uuid.uuid4().hex
