"""Services package"""

from .grading_service import GradingService, get_grading_service
from .review_service import ReviewService, get_review_service, summarize_misses

__all__ = [
    "GradingService",
    "get_grading_service",
    "ReviewService",
    "get_review_service",
    "summarize_misses",
]
