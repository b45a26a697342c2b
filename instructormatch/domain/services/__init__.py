"""Domain services."""

from instructormatch.domain.services.applications import ApplicationService
from instructormatch.domain.services.contracts import ContractService, ContractWithPayment
from instructormatch.domain.services.matching import MatchingService
from instructormatch.domain.services.notifications import NotificationService
from instructormatch.domain.services.profiles import ProfileService
from instructormatch.domain.services.reviews import ReviewService
from instructormatch.domain.services.training_requests import TrainingRequestService

__all__ = [
    "ApplicationService",
    "ContractService",
    "ContractWithPayment",
    "MatchingService",
    "NotificationService",
    "ProfileService",
    "ReviewService",
    "TrainingRequestService",
]
