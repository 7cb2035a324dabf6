import inspect
import json
import logging
import sys
import traceback
from typing import Any, Dict, Optional


logger = logging.getLogger("aura_abt")


def setup_logger(level: str = "INFO", fmt: Optional[str] = None) -> logging.Logger:
    """
    Attach a stderr handler to the package logger.

    Safe to call more than once; the handler is only added the first time.
    stdout stays free for command output.
    """
    logger.setLevel(level.upper())
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            logging.Formatter(fmt or "%(asctime)s %(levelname)s [%(name)s] %(message)s")
        )
        logger.addHandler(handler)
    return logger


def error_context() -> str:
    """
    Return ``file:line in function`` where the exception being handled was raised.

    Outside an ``except`` block, the caller's location is returned instead.
    """
    tb = sys.exc_info()[2]
    if tb is not None:
        frame = traceback.extract_tb(tb)[-1]
        return f"{frame.filename}:{frame.lineno} in {frame.name}"
    caller = inspect.currentframe().f_back
    if caller is None:
        return "<unknown>"
    info = inspect.getframeinfo(caller)
    return f"{info.filename}:{info.lineno} in {info.function}"


def canonical_json(data: Dict[str, Any]) -> str:
    """
    RFC8785-ish: sort_keys + no whitespace
    """
    return json.dumps(data, separators=(",", ":"), sort_keys=True, ensure_ascii=False)
