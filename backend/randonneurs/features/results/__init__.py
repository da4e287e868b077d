"""
Rider results.

Usage:
    from randonneurs.features.results import ResultCollectionService, ResultSubmissionService
"""

from .models import Result, generate_submission_token
from .schemas import CollectionReport, ResultSubmissionView, SubmitResultRequest
from .collection import ResultCollectionService, submission_url
from .submission import ResultSubmissionService, SubmissionCapability

__all__ = [
    "Result",
    "generate_submission_token",
    "CollectionReport",
    "ResultSubmissionView",
    "SubmitResultRequest",
    "ResultCollectionService",
    "submission_url",
    "ResultSubmissionService",
    "SubmissionCapability",
]
