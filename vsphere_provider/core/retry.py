# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
"""
Retry utilities with exponential backoff.

Only transport-classified failures should be retried; lookup and API
errors are deterministic and are passed straight through.
"""

from __future__ import annotations

import logging
import random
import time
from typing import Callable, Optional, Tuple, Type, TypeVar, Union

T = TypeVar("T")

ExcTypes = Union[Type[BaseException], Tuple[Type[BaseException], ...]]


def _backoff(attempt: int, base_backoff_s: float, max_backoff_s: float, jitter_s: float) -> float:
    sleep_time = min(base_backoff_s * (2 ** (attempt - 1)), max_backoff_s)
    if jitter_s > 0:
        sleep_time += random.uniform(0, jitter_s)
    return sleep_time


def retry_operation(
    operation: Callable[[], T],
    *,
    max_attempts: int = 3,
    base_backoff_s: float = 2.0,
    max_backoff_s: float = 60.0,
    jitter_s: float = 1.0,
    exceptions: ExcTypes = Exception,
    operation_name: str = "operation",
    logger: Optional[logging.Logger] = None,
    log_level: int = logging.WARNING,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Retry an operation (function call) with exponential backoff.

    Args:
        operation: Callable that returns T
        max_attempts: Maximum number of attempts; values < 1 are treated as 1
        base_backoff_s: Base backoff time in seconds
        max_backoff_s: Maximum backoff time in seconds
        jitter_s: Random jitter to add to backoff in seconds
        exceptions: Exception type(s) to catch and retry
        operation_name: Name for logging
        logger: Logger to use for warnings (default: None, no logging)
        log_level: Log level for retry messages
        sleep: Sleep function (injectable for tests)

    Example:
        body = retry_operation(
            lambda: session.get(url),
            max_attempts=3,
            exceptions=TransportError,
            operation_name="GET /appliance/networking/dns/servers",
            logger=logger,
        )
    """
    attempts = max(1, int(max_attempts))

    for attempt in range(1, attempts + 1):
        try:
            return operation()
        except exceptions as e:
            if attempt >= attempts:
                if logger and attempts > 1:
                    logger.error("%s failed after %d attempts: %s", operation_name, attempts, e)
                raise

            sleep_time = _backoff(attempt, base_backoff_s, max_backoff_s, jitter_s)
            if logger:
                logger.log(
                    log_level,
                    "%s failed (attempt %d/%d): %s. Retrying in %.2fs...",
                    operation_name,
                    attempt,
                    attempts,
                    e,
                    sleep_time,
                )
            sleep(sleep_time)

    # Unreachable: the loop either returns or re-raises.
    raise RuntimeError(f"{operation_name} failed with no exception recorded")
