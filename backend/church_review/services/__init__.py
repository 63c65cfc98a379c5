"""Service modules - Business logic layer"""
from .church_review_service import ChurchReviewService
from .notification_service import NotificationService
from .heritage import should_require_heritage_review, suggest_heritage_classification

__all__ = [
    "ChurchReviewService",
    "NotificationService",
    "should_require_heritage_review",
    "suggest_heritage_classification",
]
