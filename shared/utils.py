"""
SHOTFORM Shared Utilities

Logging, timing and rounding helpers.
"""

import logging
import math
import sys
import time
from functools import wraps
from typing import Union


# ============================================
# Logging Configuration
# ============================================

def setup_logger(name: str = "shotform", level: Union[int, str] = logging.INFO) -> logging.Logger:
    """
    Set up a configured logger with console output.

    Usage:
        logger = setup_logger(__name__)
        logger.info("Hello from SHOTFORM")
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Avoid duplicate handlers
    if logger.handlers:
        return logger

    # Console handler with formatting
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)

    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    return logger


logger = logging.getLogger("shotform")


# ============================================
# Decorators
# ============================================

def log_execution_time(func):
    """Decorator to log function execution time."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        start = time.perf_counter()
        result = func(*args, **kwargs)
        elapsed = (time.perf_counter() - start) * 1000
        logger.debug(f"{func.__name__} executed in {elapsed:.2f}ms")
        return result

    return wrapper


# ============================================
# Utility Functions
# ============================================

def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, ties toward positive infinity.

    Python's built-in round() uses banker's rounding (round(72.5) == 72);
    scores are always rounded with this helper instead so 72.5 -> 73.
    """
    return int(math.floor(value + 0.5))
