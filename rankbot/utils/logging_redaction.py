"""
Logging redaction helpers.
Masks the Telegram bot token and other credentials before records are emitted.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable


_PATTERNS: Iterable[tuple[re.Pattern, str]] = (
    # Bot API URLs embed the token: https://api.telegram.org/bot<id>:<secret>/getUpdates
    (re.compile(r"bot\d+:[A-Za-z0-9_-]{20,}"), "bot[REDACTED]"),
    # Bare token pasted into a message
    (re.compile(r"\b\d{6,}:[A-Za-z0-9_-]{30,}\b"), "[REDACTED]"),
    (re.compile(r"(Bearer\s+)([A-Za-z0-9\-\._]+)"), r"\1[REDACTED]"),
    (re.compile(r"(?i)(api[_-]?key|token)\s*[:=]\s*([A-Za-z0-9\-\._:]+)"), r"\1=[REDACTED]"),
)


def redact_message(message: str) -> str:
    for pattern, replacement in _PATTERNS:
        message = pattern.sub(replacement, message)
    return message


class RedactingFilter(logging.Filter):
    """Rewrite the rendered message of every record passing through."""

    def filter(self, record: logging.LogRecord) -> bool:
        try:
            rendered = record.getMessage()
        except (TypeError, ValueError):
            # Broken %-args: let the handler report it as usual
            return True
        record.msg = redact_message(rendered)
        record.args = ()
        return True


def install_redaction_filter() -> None:
    """
    Attach the filter to every root handler.

    Filters on the root *logger* are skipped for records propagated from child
    loggers, so the handlers are where redaction has to live.
    """
    for handler in logging.getLogger().handlers:
        if any(isinstance(f, RedactingFilter) for f in handler.filters):
            continue
        handler.addFilter(RedactingFilter())
