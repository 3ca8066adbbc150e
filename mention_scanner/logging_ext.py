#!/usr/bin/env python3
"""
Logging extensions for PnP Mention Scanner
Timing, best-effort job wrapping and log line helpers
"""
import time
import logging
import functools
from contextlib import contextmanager
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None):
    """Configure root logging for entry points (stream, plus a file when given)"""
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers)


@contextmanager
def performance_timer(operation: str, extra_context: dict = None):
    """Context manager for structured performance logging"""
    start_time = time.perf_counter()
    context = {"operation": operation}
    if extra_context:
        context.update(extra_context)

    try:
        yield context
    except Exception as e:
        context["error"] = str(e)
        context["success"] = False
        raise
    else:
        context["success"] = True
    finally:
        context["duration_ms"] = round((time.perf_counter() - start_time) * 1000, 2)
        logger.debug(f"[PERF] {operation}: {context['duration_ms']}ms")


def best_effort(job_name: str, level: int = logging.WARNING) -> Callable:
    """
    Retry policy for background jobs: log and swallow any failure.

    There is no backoff and no out-of-band retry; the next scheduled run
    of the job is the retry.
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                logger.log(level, f"{job_name} failed: {e}")
                return None
        return wrapper
    return decorator


def truncate_text(text: str, max_len: int = 180) -> str:
    return text if len(text) <= max_len else text[:max_len - 1] + '…'
