#!/usr/bin/env python3
"""
News command endpoints for warming and inspecting the article cache.
"""

import logging
from argparse import Namespace

from .base import BaseCommand
from core.models.news import NewsPage

logger = logging.getLogger(__name__)


class NewsCommand(BaseCommand):
    """Fetch news pages through the same read path the API serves."""

    def execute(self, subcommand: str, args: Namespace) -> int:
        """Execute news subcommand."""
        try:
            if subcommand == "fetch":
                return self.fetch(args)
            return self.unknown_subcommand(subcommand)

        except Exception as e:
            return self.handle_error(e, f"news {subcommand}")

    def fetch(self, args: Namespace) -> int:
        """Fetch one page of news, storing any new articles."""
        news_service = self.service('news_service')

        page: NewsPage = news_service.get_news(
            query=args.query or "",
            from_date=args.from_date,
            sort_by=args.sort_by,
            page=args.page
        )

        print(f"Source: {page.source}")
        if page.total_results is not None:
            print(f"Total results upstream: {page.total_results}")
        if page.error:
            print(f"Live fetch failed: {page.error}")

        print(f"\n{len(page.articles)} articles:")
        for view in page.articles:
            article = view.article
            published = article.published_at.strftime('%Y-%m-%d %H:%M') if article.published_at else 'unknown'
            print(f"  [{view.political_score:+5.1f} {article.source_type.value:>6}] {article.title[:80]}")
            if getattr(args, 'verbose', False):
                print(f"      {article.source} | {published} | {article.url}")
                print(f"      votes: +{view.votes.upvotes} / -{view.votes.downvotes}  id: {article.id}")

        return 0
