"""structlog configuration for keystore events.

Every entry is one JSON line with ``ts``, ``level``, ``component`` and ``msg``
plus whatever fields the call site bound (key name, chain, address). Fields
whose key looks like secret material are replaced with ``<redacted>`` before
rendering, at any nesting depth.
"""
from __future__ import annotations

import logging
import sys
from typing import Any, MutableMapping, TextIO

import structlog

_LEVELS = {
    "critical": logging.CRITICAL,
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}
_SECRET_FIELDS = frozenset({"passphrase", "mnemonic", "private_key", "encrypted_secret", "seed", "plaintext"})
_REDACTED = "<redacted>"
_ROOT_COMPONENT = "bridge_keystore"

EventDict = MutableMapping[str, Any]


def configure_logging(level: str | None = None, stream: TextIO | None = None) -> None:
    """Route structlog through the stdlib root logger as JSON lines.

    ``stream`` defaults to stdout; the CLI passes stderr so command output
    stays clean.
    """

    numeric_level = _LEVELS.get((level or "info").strip().lower(), logging.INFO)
    handler = logging.StreamHandler(stream or sys.stdout)
    logging.basicConfig(level=numeric_level, handlers=[handler], format="%(message)s", force=True)

    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso", key="ts"),
            structlog.stdlib.add_log_level,
            _add_component,
            _scrub_secret_fields,
            _event_as_msg,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(sort_keys=True),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        cache_logger_on_first_use=True,
    )


def _add_component(logger: Any, _method: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("component", getattr(logger, "name", None) or _ROOT_COMPONENT)
    return event_dict


def _scrub_secret_fields(_logger: Any, _method: str, event_dict: EventDict) -> EventDict:
    return _scrub(event_dict)


def _scrub(mapping: EventDict) -> EventDict:
    for key, value in mapping.items():
        if key in _SECRET_FIELDS:
            mapping[key] = _REDACTED
        elif isinstance(value, dict):
            mapping[key] = _scrub(dict(value))
    return mapping


def _event_as_msg(_logger: Any, _method: str, event_dict: EventDict) -> EventDict:
    if "msg" not in event_dict:
        event_dict["msg"] = event_dict.pop("event", "")
    return event_dict


__all__ = ["configure_logging"]
