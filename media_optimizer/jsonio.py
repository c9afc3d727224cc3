# media_optimizer/jsonio.py
from __future__ import annotations
import json, logging, sys
from typing import Any, Dict, Optional


def enable_json_logging():
    """Route logs to stderr (errors only) so stdout carries a single JSON payload."""
    for h in logging.root.handlers[:]:
        logging.root.removeHandler(h)
    logging.basicConfig(stream=sys.stderr, level=logging.ERROR)


def _emit(payload: Dict[str, Any]) -> None:
    print(json.dumps(payload, ensure_ascii=False), file=sys.stdout)
    sys.stdout.flush()


def success(mode: str, data: Dict[str, Any] | None = None,
            meta: Optional[Dict[str, Any]] = None, code: int = 0) -> int:
    payload = {"result": "success", "mode": mode, "data": data if data is not None else {}}
    if meta:
        payload["meta"] = meta
    _emit(payload)
    return code


def error(mode: Optional[str], message: str, debug: Optional[Dict[str, Any]] = None,
          code: int = 1) -> int:
    payload = {"result": "error", "mode": mode, "error": message}
    if debug:
        payload["debug"] = debug
    _emit(payload)
    return code
