"""Logging filter that removes credential material from log records.

Request logs include URLs, headers, token endpoint payloads and API error
bodies. Bearer and Basic credentials, OAuth tokens, passwords and client
secrets are replaced with ``***`` before the record reaches a handler. Quoted
values are redacted up to their closing quote.
"""
from __future__ import annotations

import logging
import re

REDACTED = "***"

_CREDENTIAL_KEY = r"[\"']?(?:access_token|refresh_token|id_token|client_secret|password)[\"']?\s*[:=]\s*"

_PATTERNS = [
    # Authorization: Bearer eyJ... / Authorization: Basic YWRtaW46...
    re.compile(r"(?i)\b((?:bearer|basic)\s+)[A-Za-z0-9\-._~+/]+=*"),
    # "password": "correct horse battery" (quoted values run to the closing quote)
    re.compile(r'(?i)(' + _CREDENTIAL_KEY + r'")(?:[^"\\]|\\.)*'),
    re.compile(r"(?i)(" + _CREDENTIAL_KEY + r"')(?:[^'\\]|\\.)*"),
    # access_token=... in form data and query strings
    re.compile(r"(?i)(" + _CREDENTIAL_KEY + r")(?![\"'])[^&\s,}]+"),
]


def scrub(text: str) -> str:
    """Return ``text`` with credential values replaced by ``***``."""
    for pattern in _PATTERNS:
        text = pattern.sub(lambda m: m.group(1) + REDACTED, text)
    return text


class ScrubbingFilter(logging.Filter):
    """Rewrite the rendered message of every record passing through.

    The record is rendered once (``msg % args``) so values smuggled in through
    arguments are scrubbed as well, then args are cleared.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        record.msg = scrub(message)
        record.args = None
        return True
