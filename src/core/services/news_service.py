#!/usr/bin/env python3
"""
News Service

Serves pages of articles from the cache when it holds enough matches,
otherwise pulls a fresh page from the news API and stores the new items.
When the live fetch fails the cache is searched again as a fallback.
"""

import logging
from typing import List, Optional

from core.config import DEFAULT_NEWS_QUERY
from core.bias import heuristic_political_score, source_type_for
from core.deduplication import external_id_for_url, unique_by_url
from core.exceptions import (
    DemocracyLensError, SourceError, RateLimitError, ValidationError, NotFoundError
)
from core.models.article import Article
from core.models.news import ArticleView, NewsPage, SOURCE_CACHE, SOURCE_API, SOURCE_CACHE_FALLBACK
from core.models.vote import GuestUser
from core.security import SecurityValidator
from core.services.guest_service import GuestService
from integrations.news_api_client import NewsApiClient, FeedItem, SORT_OPTIONS

logger = logging.getLogger(__name__)

NEWS_API_NOT_CONFIGURED = "News API key not configured"


class NewsService:
    """Read path for the news feed."""

    def __init__(self,
                 database,
                 news_client: Optional[NewsApiClient],
                 guest_service: GuestService,
                 page_size: int = 10,
                 default_query: str = DEFAULT_NEWS_QUERY,
                 validator: Optional[SecurityValidator] = None):
        """
        Args:
            database: Supabase adapter
            news_client: News API client, or None when no key is configured
            guest_service: Resolves the viewer's guest token
            page_size: Articles per page
            default_query: Query sent upstream when the caller gives none
            validator: Security validator for feed content
        """
        self.database = database
        self.news_client = news_client
        self.guest_service = guest_service
        self.page_size = page_size
        self.default_query = default_query
        self.validator = validator or SecurityValidator()

    def get_news(self,
                 query: str = "",
                 from_date: Optional[str] = None,
                 sort_by: str = "publishedAt",
                 page: int = 1,
                 guest_id: Optional[str] = None) -> NewsPage:
        """
        Get one page of the news feed.

        Args:
            query: Free-text search; empty means the default political query upstream
            from_date: Optional ISO date lower bound on publication
            sort_by: publishedAt, relevancy or popularity
            page: 1-based page number
            guest_id: Viewer's guest token, used to attach their own votes

        Returns:
            NewsPage tagged with the source it was served from
        """
        if sort_by not in SORT_OPTIONS:
            raise ValidationError('sortBy', f"must be one of {', '.join(SORT_OPTIONS)}")
        if page < 1:
            raise ValidationError('page', 'must be at least 1')

        offset = (page - 1) * self.page_size
        search_query = self.validator.sanitize_search_query(query)
        viewer = self.guest_service.lookup(guest_id)

        cached = self.database.search_cached_articles(search_query, from_date, sort_by, self.page_size, offset)
        if len(cached) >= self.page_size / 2:
            logger.info(f"Serving {len(cached)} cached articles for '{query}' (page {page})")
            return NewsPage(articles=self._views(cached, viewer), source=SOURCE_CACHE)

        try:
            if self.news_client is None:
                raise SourceError(NEWS_API_NOT_CONFIGURED)

            feed = self.news_client.search_everything(query or self.default_query, from_date, sort_by, self.page_size, page)
            stored = self._store_items(feed.items)

            return NewsPage(
                articles=self._views(stored, viewer),
                source=SOURCE_API,
                total_results=feed.total_results
            )

        except (SourceError, RateLimitError) as e:
            logger.warning(f"Live news fetch failed, falling back to cache: {e}")

            fallback = self.database.search_cached_articles(
                search_query, from_date, sort_by, self.page_size * 2, offset
            )
            return NewsPage(
                articles=self._views(fallback, viewer),
                source=SOURCE_CACHE_FALLBACK,
                error=e.message
            )

    def get_articles(self, article_id: Optional[str] = None):
        """A single stored article, or the newest page of stored articles."""
        if article_id:
            article = self.database.get_article_by_id(article_id)
            if article is None:
                raise NotFoundError('Article', article_id)
            return article

        return self.database.list_articles(limit=self.page_size)

    def _store_items(self, items: List[FeedItem]) -> List[Article]:
        """Insert unseen items, returning the stored row for each usable item."""
        stored = []

        for item in unique_by_url(items, lambda i: i.url):
            try:
                stored.append(self._store_item(item))
            except (DemocracyLensError, ValueError) as e:
                logger.error(f"Skipping feed item {item.url}: {e}")

        logger.info(f"Processed {len(stored)} of {len(items)} feed items")
        return stored

    def _store_item(self, item: FeedItem) -> Article:
        if not self.validator.validate_url(item.url):
            raise ValueError("invalid article URL")

        external_id = external_id_for_url(item.url)
        existing = self.database.get_article_by_external_id(external_id)
        if existing is not None:
            return existing

        score = heuristic_political_score(item.source, item.title, item.description)
        article = Article(
            external_id=external_id,
            title=self.validator.sanitize_title(item.title),
            description=self.validator.sanitize_summary(item.description),
            content=self.validator.sanitize_content(item.content),
            source=item.source,
            source_type=source_type_for(score),
            published_at=item.published_at,
            url=item.url,
            image_url=item.image_url if self.validator.validate_url(item.image_url) else None,
            political_score=score,
        )
        return self.database.create_article(article)

    def _views(self, articles: List[Article], viewer: Optional[GuestUser]) -> List[ArticleView]:
        views = []
        for article in articles:
            if article.political_score is not None:
                score = article.political_score
            else:
                score = heuristic_political_score(article.source, article.title, article.description)

            user_vote = None
            if viewer is not None:
                vote = self.database.get_vote(article.id, viewer.id)
                user_vote = vote.vote_type if vote else None

            views.append(ArticleView(
                article=article,
                political_score=score,
                votes=self.database.get_vote_counts(article.id),
                user_vote=user_vote,
            ))
        return views
