"""Core utilities package"""

from .config import Settings, settings, get_settings
from .logging import setup_logging, get_logger, get_context_logger
from .errors import (
    GradingServiceError,
    ExamNotFoundError,
    ResultNotFoundError,
    MissNotFoundError,
    QuestionNotFoundError,
    DuplicateSubmissionError,
    register_error_handlers,
)

__all__ = [
    "Settings",
    "settings",
    "get_settings",
    "setup_logging",
    "get_logger",
    "get_context_logger",
    "GradingServiceError",
    "ExamNotFoundError",
    "ResultNotFoundError",
    "MissNotFoundError",
    "QuestionNotFoundError",
    "DuplicateSubmissionError",
    "register_error_handlers",
]
