#!/usr/bin/env python3
"""
Core data models for Democracy Lens.

Contains all data structures used throughout the application.
"""

from .article import Article, SourceType, clamp_score
from .vote import VoteType, VoteCounts, Vote, GuestUser, VoteOutcome
from .analysis import ParsedScore, FallbackScore, ScoreResult, ArticleAnalysis
from .news import ArticleView, NewsPage, SOURCE_CACHE, SOURCE_API, SOURCE_CACHE_FALLBACK

__all__ = [
    'Article', 'SourceType', 'clamp_score',
    'VoteType', 'VoteCounts', 'Vote', 'GuestUser', 'VoteOutcome',
    'ParsedScore', 'FallbackScore', 'ScoreResult', 'ArticleAnalysis',
    'ArticleView', 'NewsPage', 'SOURCE_CACHE', 'SOURCE_API', 'SOURCE_CACHE_FALLBACK',
]
