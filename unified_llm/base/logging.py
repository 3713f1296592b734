"""Structured logging for the unified_llm client layer.

Every logger handed out by :func:`get_logger` lives under the ``unified_llm``
namespace. Only that root owns handlers (a stderr console handler plus an
optional rotating file added by :func:`configure_logger`) and it does not
propagate further, so an application's root configuration never sees the same
record twice.

Events are emitted as JSON objects in the record message. Provider code goes
through :func:`normalized_log_event`, which always supplies ``structured``,
``phase``, ``attempt``, ``emitted`` and ``tokens`` (plus ``error_code`` on
failures) so one query works across OpenAI and Gemini logs.
"""
from __future__ import annotations

import contextlib
import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Mapping, Optional

from .log_support import JsonFormatter, LogContext

BASE_LOGGER_NAME = "unified_llm"
LOG_LEVEL_ENV = "UNIFIED_LLM_LOG_LEVEL"

REQUIRED_NORMALIZED_KEYS = (
    "structured",
    "phase",
    "attempt",
    "error_code",
    "emitted",
    "tokens",
)

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}
_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
_LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
_LOG_FILE_BACKUPS = 5

# Markers distinguishing handlers installed here from ones the host app added.
_READY_MARK = "_unified_llm_ready"
_CONSOLE_MARK = "_unified_llm_console"
_FILE_MARK = "_unified_llm_file"


def _level_from_name(name: str | None, fallback: int) -> int:
    if not name:
        return fallback
    return _LEVELS.get(name.strip().upper(), fallback)


def _formatter(json_mode: bool) -> logging.Formatter:
    return JsonFormatter() if json_mode else logging.Formatter(_TEXT_FORMAT)


def _discard(logger: logging.Logger, handler: logging.Handler) -> None:
    logger.removeHandler(handler)
    with contextlib.suppress(OSError):
        handler.close()


def _root(json_mode: bool, level: int) -> logging.Logger:
    root = logging.getLogger(BASE_LOGGER_NAME)
    override = os.getenv(LOG_LEVEL_ENV)
    if getattr(root, _READY_MARK, False):
        if override:
            root.setLevel(_level_from_name(override, root.level))
        return root

    wanted = _level_from_name(override, level)
    for handler in [h for h in root.handlers if getattr(h, _CONSOLE_MARK, False)]:
        _discard(root, handler)
    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(_formatter(json_mode))
    console.setLevel(wanted)
    setattr(console, _CONSOLE_MARK, True)
    root.addHandler(console)
    root.setLevel(wanted)
    root.propagate = False
    setattr(root, _READY_MARK, True)
    return root


def get_logger(name: str = BASE_LOGGER_NAME, json_mode: bool = True, level: int = logging.INFO) -> logging.Logger:
    """Return ``name`` as a logger under the ``unified_llm`` namespace.

    Names outside the namespace are prefixed. Children have no handlers and
    inherit their level, so the root decides what is written.
    """
    root = _root(json_mode, level)
    if name == BASE_LOGGER_NAME:
        return root
    prefix = BASE_LOGGER_NAME + "."
    child = logging.getLogger(name if name.startswith(prefix) else prefix + name)
    child.setLevel(logging.NOTSET)
    child.propagate = True
    return child


def configure_logger(
    *,
    level: int | str | None = None,
    file_path: Optional[str] = None,
    json_mode: bool = True,
) -> logging.Logger:
    """Adjust the shared logger at runtime.

    ``level`` accepts a number or a level name and is applied to the root and
    its handlers; ``None`` leaves it alone. ``file_path`` attaches a rotating
    file handler (10 MiB, five backups), reusing one already writing to the
    same path; passing ``None`` removes any file handler installed earlier.
    Handlers added by the host application are never touched.
    """
    root = get_logger(BASE_LOGGER_NAME, json_mode=json_mode)

    if level is not None:
        numeric = _level_from_name(level, root.level) if isinstance(level, str) else level
        root.setLevel(numeric)
        for handler in root.handlers:
            handler.setLevel(numeric)

    target = os.path.abspath(os.path.expanduser(file_path)) if file_path else None
    keep: Optional[logging.FileHandler] = None
    for handler in [h for h in root.handlers if getattr(h, _FILE_MARK, False)]:
        if target and isinstance(handler, logging.FileHandler) and handler.baseFilename == target:
            keep = handler
        else:
            _discard(root, handler)
    if target is None:
        return root

    if keep is None:
        os.makedirs(os.path.dirname(target), exist_ok=True)
        keep = RotatingFileHandler(
            target, maxBytes=_LOG_FILE_MAX_BYTES, backupCount=_LOG_FILE_BACKUPS, encoding="utf-8"
        )
        setattr(keep, _FILE_MARK, True)
        root.addHandler(keep)
    keep.setFormatter(_formatter(json_mode))
    keep.setLevel(root.level)
    return root


def log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    level: int = logging.INFO,
    keep_none: bool = False,
    **fields: Any,
) -> None:
    """Log ``event`` with context and fields serialized into one JSON message.

    ``None`` values are left out unless ``keep_none`` is true.
    """
    if not logger.isEnabledFor(level):
        return
    body: Dict[str, Any] = {"event": event}
    if ctx is not None:
        body.update(ctx.to_dict())
    body.update(fields if keep_none else {k: v for k, v in fields.items() if v is not None})
    logger.log(level, json.dumps(body, ensure_ascii=False, default=str))


def _tokens_field(tokens: Any) -> Optional[Dict[str, Any]]:
    if tokens is None:
        return None
    if isinstance(tokens, Mapping):
        return dict(tokens)
    to_dict = getattr(tokens, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    return {"value": repr(tokens)}


def normalized_log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    phase: str,
    attempt: int | None = None,
    error_code: str | None = None,
    emitted: bool | None = None,
    tokens: Any = None,
    structured: bool = True,
    level: int = logging.INFO,
    **extra_fields: Any,
) -> None:
    """Log ``event`` with the normalized key set.

    The required keys are present even when ``null``, except ``error_code``
    which only appears when set. Extra fields fill gaps but never replace a
    normalized value.
    """
    fields: Dict[str, Any] = {
        "structured": structured,
        "phase": phase,
        "attempt": attempt,
        "emitted": emitted,
        "tokens": _tokens_field(tokens),
    }
    if error_code is not None:
        fields["error_code"] = error_code
    for key, value in extra_fields.items():
        if value is not None and fields.get(key) is None:
            fields[key] = value
    log_event(logger, event, ctx, level=level, keep_none=True, **fields)


__all__ = [
    "LogContext",
    "get_logger",
    "configure_logger",
    "log_event",
    "normalized_log_event",
    "REQUIRED_NORMALIZED_KEYS",
    "BASE_LOGGER_NAME",
]
