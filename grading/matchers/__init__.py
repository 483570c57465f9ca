"""
Concrete answer matchers.

Importing this package registers each matcher in the global registry.
"""

from ..matcher import register_matcher
from .exact import ExactMatcher, exact_match
from .fuzzy import FuzzyMatcher
from .strict import StrictMatcher

register_matcher(ExactMatcher.matcher_name, ExactMatcher)
register_matcher(StrictMatcher.matcher_name, StrictMatcher)
register_matcher(FuzzyMatcher.matcher_name, FuzzyMatcher)

__all__ = [
    "ExactMatcher",
    "StrictMatcher",
    "FuzzyMatcher",
    "exact_match",
]
