"""
SHOTFORM Shared Module

Common utilities used across the analysis service.
"""

from .utils import setup_logger, log_execution_time, round_half_up

__all__ = [
    'setup_logger',
    'log_execution_time',
    'round_half_up',
]
