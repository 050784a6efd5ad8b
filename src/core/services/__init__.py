"""
Application services.

Each service receives its database adapter and API clients through its
constructor; the dependency container wires them together.
"""

from .guest_service import GuestService, new_guest_token
from .vote_service import VoteService
from .news_service import NewsService
from .analysis_service import AnalysisService, parse_political_score
from .storage_service import StorageService

__all__ = [
    'GuestService', 'new_guest_token',
    'VoteService',
    'NewsService',
    'AnalysisService', 'parse_political_score',
    'StorageService',
]
