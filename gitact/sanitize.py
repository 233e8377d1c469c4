"""Redaction of credentials, tokens and emails in error text and details.

Everything that can reach a log line or a user-facing summary goes through
redact_message (strings) or redact_details (structured payloads).
"""

import re
from typing import Any

REDACTED = "[REDACTED]"
REDACTED_EMAIL = "[REDACTED_EMAIL]"

# Whole words of a key name (split on separators and camelCase)
SENSITIVE_KEYS = (
    "apikey",
    "secret",
    "token",
    "password",
    "passwd",
    "credential",
    "credentials",
    "key",
    "auth",
    "authorization",
)

# Order matters: URL userinfo and prefixed keys before the generic opaque-token rule
_URL_USERINFO_RE = re.compile(r"(?P<scheme>[a-zA-Z][a-zA-Z0-9+.-]*://)[^/\s@]+@")
_PREFIXED_KEY_RE = re.compile(r"\b(?:key|sk|gh[pousr]|github_pat)[-_][A-Za-z0-9_]{20,}")
_BEARER_RE = re.compile(r"(?i)\b(bearer)\s+[A-Za-z0-9._~+/=-]{8,}")
_OPAQUE_TOKEN_RE = re.compile(r"[A-Za-z0-9+/]{32,}={0,2}")
# Absolute paths ("/srv/work/...") with only short segments are kept
_MAX_PATH_SEGMENT = 20
_EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
_KEY_WORD_RE = re.compile(r"[A-Z]?[a-z0-9]+|[A-Z]+(?![a-z])")


def redact_message(message: Any) -> str:
    """Return message with secrets replaced by fixed redaction markers.

    Non-string input is converted with str(); None becomes an empty string.
    """
    if message is None:
        return ""
    text = message if isinstance(message, str) else str(message)
    text = _URL_USERINFO_RE.sub(lambda m: f"{m.group('scheme')}{REDACTED}@", text)
    text = _PREFIXED_KEY_RE.sub(REDACTED, text)
    text = _BEARER_RE.sub(lambda m: f"{m.group(1)} {REDACTED}", text)
    text = _OPAQUE_TOKEN_RE.sub(_redact_opaque, text)
    text = _EMAIL_RE.sub(REDACTED_EMAIL, text)
    return text


def _redact_opaque(match: re.Match) -> str:
    token = match.group(0)
    start = match.start()
    rooted = token.startswith("/") or (start > 0 and match.string[start - 1] in "./~")
    if rooted and "/" in token.lstrip("/"):
        segments = [seg for seg in token.split("/") if seg]
        if all(len(seg) < _MAX_PATH_SEGMENT for seg in segments):
            return token
    return REDACTED


def _is_sensitive_key(key: Any) -> bool:
    words = [w.lower() for w in _KEY_WORD_RE.findall(str(key))]
    if any(w in SENSITIVE_KEYS for w in words):
        return True
    return "".join(words) in SENSITIVE_KEYS


def redact_details(details: Any) -> Any:
    """Recursively redact a structured payload (dicts, lists, strings).

    Values under sensitive key names are replaced wholesale; other strings
    pass through redact_message. Numbers, booleans and None are kept.
    """
    if isinstance(details, dict):
        out: dict[str, Any] = {}
        for key, value in details.items():
            if _is_sensitive_key(key):
                out[key] = REDACTED
            else:
                out[key] = redact_details(value)
        return out
    if isinstance(details, (list, tuple)):
        return [redact_details(v) for v in details]
    if isinstance(details, str):
        return redact_message(details)
    return details
