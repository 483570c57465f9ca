"""Domain models package"""

from .domain import (
    ResultKind,
    StoredResult,
    StoredMiss,
    CategoryCount,
    MissStatistics,
    SubmitExamRequest,
    UpdateGradingRequest,
    RetryRequest,
    GradePassageRequest,
    GradedResponse,
    PassageResponse,
    MissListResponse,
    RetryResponse,
    UNCATEGORIZED,
)

__all__ = [
    "ResultKind",
    "StoredResult",
    "StoredMiss",
    "CategoryCount",
    "MissStatistics",
    "SubmitExamRequest",
    "UpdateGradingRequest",
    "RetryRequest",
    "GradePassageRequest",
    "GradedResponse",
    "PassageResponse",
    "MissListResponse",
    "RetryResponse",
    "UNCATEGORIZED",
]
