"""
Core domain models and business logic.

This package contains data types and pure functions that are
independent of any network collaborator.
"""

from .recency import filter_recent, parse_pub_date
from .result import Err, Ok, Result
from .types import Article, FinalizedArticle, SummarizedArticle

__all__ = [
    "Article",
    "SummarizedArticle",
    "FinalizedArticle",
    "Ok",
    "Err",
    "Result",
    "filter_recent",
    "parse_pub_date",
]
