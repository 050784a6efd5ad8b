#!/usr/bin/env python3
"""
News page models returned by the article read path.
"""

from typing import List, Dict, Any, Optional
from dataclasses import dataclass

from core.models.article import Article
from core.models.vote import VoteCounts, VoteType

SOURCE_CACHE = "cache"
SOURCE_API = "api"
SOURCE_CACHE_FALLBACK = "cache_fallback"


@dataclass
class ArticleView:
    """An article as displayed: stored data plus vote aggregates and the viewer's own vote."""
    article: Article
    political_score: float
    votes: VoteCounts
    user_vote: Optional[VoteType] = None

    def to_dict(self) -> Dict[str, Any]:
        data = self.article.to_dict()
        data['political_score'] = self.political_score
        data['votes'] = self.votes.to_dict()
        data['userVote'] = self.user_vote.value if self.user_vote else None
        return data


@dataclass
class NewsPage:
    """One page of the news feed and where it was served from."""
    articles: List[ArticleView]
    source: str
    total_results: Optional[int] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            'success': True,
            'data': [view.to_dict() for view in self.articles],
            'source': self.source,
        }
        if self.total_results is not None:
            payload['totalResults'] = self.total_results
        if self.error:
            payload['error'] = self.error
        return payload
