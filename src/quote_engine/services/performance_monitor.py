# QuoteEngine - Commercial Insurance Quote Engine
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Performance monitoring decorator for pipeline steps."""

import logging
import time
from collections.abc import Callable
from functools import wraps
from typing import ParamSpec, TypeVar

from beartype import beartype

P = ParamSpec("P")
T = TypeVar("T")

logger = logging.getLogger(__name__)


@beartype
def performance_monitor(
    operation_name: str,
    max_duration_ms: int = 2000,
    log_slow_operations: bool = True,
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """Time a synchronous operation and log slow or failed calls.

    Exceptions are logged with the elapsed time and re-raised unchanged.

    Args:
        operation_name: Name of the operation for monitoring
        max_duration_ms: Warning threshold in milliseconds
        log_slow_operations: Whether to log calls over the threshold
    """

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            start_time = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception:
                duration_ms = (time.perf_counter() - start_time) * 1000
                logger.error(
                    "%s failed after %.2fms", operation_name, duration_ms
                )
                raise

            duration_ms = (time.perf_counter() - start_time) * 1000
            if log_slow_operations and duration_ms > max_duration_ms:
                logger.warning(
                    "%s took %.2fms (threshold: %dms)",
                    operation_name,
                    duration_ms,
                    max_duration_ms,
                )
            return result

        return wrapper

    return decorator
