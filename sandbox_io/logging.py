# sandbox_io/logging.py
import logging
import os
from pathlib import Path
from typing import Any, Dict

CONTENT_KEYS = {"content", "content_b64"}  # file payloads are never logged


def configure_logging(level: str | None = None):
    logging.basicConfig(
        level=(level or os.getenv("LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def _home_prefixes() -> list[str]:
    try:
        home = Path.home()
    except (RuntimeError, KeyError):
        return []
    prefixes = {str(home), home.as_posix()}
    return sorted(prefixes, key=len, reverse=True)


def redact_str(s: str) -> str:
    # user names leak through home directory paths
    for prefix in _home_prefixes():
        if not prefix or not s.startswith(prefix):
            continue
        rest = s[len(prefix):]
        # /home/al must not match /home/alice
        if not rest or rest[0] in "/\\":
            return "~" + rest
    return s


def redact_args(args: Dict[str, Any]) -> Dict[str, Any]:
    safe = dict(args)
    for k, v in list(safe.items()):
        if k in CONTENT_KEYS and isinstance(v, str):
            safe[k] = f"<{len(v)} chars>"
        elif isinstance(v, str):
            safe[k] = redact_str(v)
    return safe


def log_tool_call(logger: logging.Logger, name: str, args: Dict[str, Any]):
    logger.info("tool_call %s %s", name, redact_args(args))
