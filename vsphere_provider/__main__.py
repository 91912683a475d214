# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vsphere_provider/__main__.py
from __future__ import annotations

import sys
import traceback
from typing import Optional, Sequence

from .cli.args import parse_args_with_config
from .core.exceptions import ProviderError, format_exception_for_cli
from .orchestrator import Orchestrator
from .vsphere.errors import VsphereExitCode, classify_exit_code


def _print_stderr(msg: str) -> None:
    print(msg, file=sys.stderr)


def _safe_log(logger, level: str, msg: str) -> None:
    """
    Best-effort logging without assuming logger exists or has a given method.
    """
    if logger is None:
        _print_stderr(msg)
        return

    fn = getattr(logger, level, None)
    if callable(fn):
        fn(msg)
    else:
        _print_stderr(msg)


def main(argv: Optional[Sequence[str]] = None) -> None:
    logger: Optional[object] = None
    verbose = 0

    # Phase 1: parse
    try:
        args, conf, logger = parse_args_with_config(argv)
        verbose = int(getattr(args, "verbose", 0) or 0)
    except ProviderError as e:
        _print_stderr(f"💥 ERROR    {format_exception_for_cli(e, verbose=verbose)}")
        raise SystemExit(int(classify_exit_code(e)))
    except KeyboardInterrupt:
        _safe_log(logger, "warning", "Interrupted by user (Ctrl+C).")
        raise SystemExit(int(VsphereExitCode.INTERRUPTED))

    # Phase 2: run the command
    try:
        rc = Orchestrator(logger, args, conf).run()
    except ProviderError as e:
        _safe_log(logger, "error", format_exception_for_cli(e, verbose=verbose))
        rc = int(classify_exit_code(e))
    except KeyboardInterrupt:
        _safe_log(logger, "warning", "Interrupted by user (Ctrl+C).")
        rc = int(VsphereExitCode.INTERRUPTED)
    except Exception as e:
        _safe_log(logger, "error", f"💥 UNHANDLED {type(e).__name__}: {e}")
        _safe_log(logger, "debug", traceback.format_exc())
        rc = int(classify_exit_code(e))

    raise SystemExit(rc)


if __name__ == "__main__":
    main()
