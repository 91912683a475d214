# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vsphere_provider/core/utils.py
from __future__ import annotations

import datetime as _dt
import json
import logging
import os
import sys
import tempfile
from pathlib import Path
from typing import Any, Iterable, List, Optional


def is_tty(stream=None) -> bool:
    """
    Check if the specified stream (or stdout by default) is a TTY.
    """
    try:
        if stream is None:
            stream = sys.stdout
        return stream.isatty()
    except (AttributeError, ValueError):
        return False


def boolish(v: Any) -> bool:
    """Convert various truthy values (env vars, YAML strings) to boolean."""
    if isinstance(v, bool):
        return v
    s = str(v or "").strip().lower()
    return s in ("1", "true", "yes", "y", "on")


def string_set(values: Optional[Iterable[Any]]) -> List[str]:
    """
    Normalize a set-typed attribute: drop empties, dedupe, sort.

    >>> string_set(["b", "a", "b", ""])
    ['a', 'b']
    """
    if values is None:
        return []
    if isinstance(values, str):
        values = [values]
    return sorted({str(v) for v in values if v is not None and str(v) != ""})


class U:
    @staticmethod
    def die(logger: logging.Logger, msg: str, code: int = 1) -> None:
        from .exceptions import Fatal

        logger.error(msg)
        raise Fatal(code, msg)

    @staticmethod
    def ensure_dir(p: Path) -> None:
        p.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def now_ts() -> str:
        return _dt.datetime.now().strftime("%Y%m%d-%H%M%S")

    @staticmethod
    def utc_iso() -> str:
        return _dt.datetime.now(tz=_dt.timezone.utc).isoformat(timespec="seconds")

    @staticmethod
    def json_dump(obj: Any) -> str:
        try:
            return json.dumps(obj, indent=2, sort_keys=True, default=str)
        except (TypeError, ValueError):
            return repr(obj)

    @staticmethod
    def atomic_write_text(path: Path, text: str) -> None:
        """
        Write via a temp file in the same directory + os.replace, so readers
        never observe a half-written file.
        """
        path = Path(path)
        U.ensure_dir(path.parent)
        fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise
