"""
Centralized logging system for Devbox.

This module provides a simple, event-driven logging system with
visual progress tracking integration.
"""

from .events import (
    ExecutionCompleted,
    ExecutionStarted,
    LogEvent,
    StepCompleted,
    StepStarted,
)
from .log_manager import LogManager
from .progress_tracker import ProgressTracker

__all__ = [
    "LogManager",
    "LogEvent",
    "ExecutionStarted",
    "ExecutionCompleted",
    "StepStarted",
    "StepCompleted",
    "ProgressTracker",
]
