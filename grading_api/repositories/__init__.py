"""Repositories package"""

from .result_repository import (
    ResultRepositoryInterface,
    InMemoryResultRepository,
    get_result_repository,
)

__all__ = [
    "ResultRepositoryInterface",
    "InMemoryResultRepository",
    "get_result_repository",
]
