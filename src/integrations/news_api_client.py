#!/usr/bin/env python3
"""
News search API client (NewsAPI ``/v2/everything``).

Fetches one page of English-language articles for a query and normalizes the
JSON items into FeedItem objects.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Dict, Any, Optional

import requests
from dateutil import parser as date_parser

from core.config import DEFAULT_NEWS_QUERY
from core.exceptions import NewsApiError, RateLimitError

logger = logging.getLogger(__name__)

SORT_OPTIONS = ("publishedAt", "relevancy", "popularity")


@dataclass
class FeedItem:
    """One article as reported by the news API."""
    title: str
    url: str
    source: str
    description: str = ""
    content: str = ""
    published_at: Optional[datetime] = None
    image_url: Optional[str] = None

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> 'FeedItem':
        source = item.get('source') or {}
        published = item.get('publishedAt')
        try:
            published_at = date_parser.parse(published) if published else None
        except (ValueError, OverflowError):
            logger.debug(f"Unparseable publishedAt '{published}'")
            published_at = None

        return cls(
            title=item.get('title') or '',
            url=item.get('url') or '',
            source=source.get('name') or '',
            description=item.get('description') or '',
            content=item.get('content') or '',
            published_at=published_at,
            image_url=item.get('urlToImage'),
        )


@dataclass
class FeedPage:
    items: List[FeedItem]
    total_results: int


class NewsApiClient:
    """Thin client over the news search endpoint."""

    def __init__(self,
                 api_key: str,
                 base_url: str = "https://newsapi.org/v2/everything",
                 language: str = "en",
                 timeout: int = 10,
                 session: Optional[requests.Session] = None):
        """
        Args:
            api_key: News API key
            base_url: Full URL of the everything endpoint
            language: Language filter applied to every search
            timeout: Request timeout in seconds
            session: HTTP session (tests inject a fake)
        """
        if not api_key:
            raise ValueError("News API key not provided")

        self.api_key = api_key
        self.base_url = base_url
        self.language = language
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            'User-Agent': 'DemocracyLens/1.0'
        })

    def search_everything(self,
                          query: str,
                          from_date: Optional[str] = None,
                          sort_by: str = "publishedAt",
                          page_size: int = 10,
                          page: int = 1) -> FeedPage:
        """
        Search articles.

        Args:
            query: Search terms; empty means the default political query
            from_date: Optional ISO date lower bound
            sort_by: publishedAt, relevancy or popularity
            page_size: Items per page
            page: 1-based page number

        Returns:
            FeedPage with normalized items and the upstream total

        Raises:
            RateLimitError: Upstream answered with HTTP 429
            NewsApiError: Transport failure, non-2xx status or non-ok payload
        """
        params = {
            'q': query or DEFAULT_NEWS_QUERY,
            'sortBy': sort_by,
            'pageSize': page_size,
            'page': page,
            'language': self.language,
            'apiKey': self.api_key,
        }
        if from_date:
            params['from'] = from_date

        logger.info(f"Fetching news for '{params['q']}' (page {page}, sort {sort_by})")

        try:
            response = self.session.get(self.base_url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"News API request failed: {e}")
            raise NewsApiError(f"News API request failed: {e}") from e

        if response.status_code == 429:
            logger.warning("News API rate limit hit")
            raise RateLimitError('news API')

        if response.status_code >= 400:
            raise NewsApiError(f"News API returned HTTP {response.status_code}", response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            raise NewsApiError(f"News API returned invalid JSON: {e}", response.status_code) from e

        if not isinstance(payload, dict):
            raise NewsApiError("News API returned an unexpected payload", response.status_code)

        if payload.get('status') != 'ok':
            message = payload.get('message') or 'Failed to fetch news'
            raise NewsApiError(message, response.status_code)

        try:
            items = [FeedItem.from_api(item) for item in payload.get('articles') or [] if isinstance(item, dict)]
            total = int(payload.get('totalResults') or 0)
        except (AttributeError, TypeError, ValueError) as e:
            raise NewsApiError(f"News API returned a malformed payload: {e}", response.status_code) from e

        logger.info(f"News API returned {len(items)} items ({total} total)")

        return FeedPage(items=items, total_results=total)
