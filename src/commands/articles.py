#!/usr/bin/env python3
"""
Article command endpoints: list stored articles and run AI analysis.
"""

import logging
from argparse import Namespace

from .base import BaseCommand

logger = logging.getLogger(__name__)


class ArticlesCommand(BaseCommand):
    """Inspect stored articles and analyze them with the LLM."""

    def execute(self, subcommand: str, args: Namespace) -> int:
        """Execute articles subcommand."""
        try:
            if subcommand == "list":
                return self.list(args)
            elif subcommand == "show":
                return self.show(args)
            elif subcommand == "analyze":
                return self.analyze(args)
            return self.unknown_subcommand(subcommand)

        except Exception as e:
            return self.handle_error(e, f"articles {subcommand}")

    def list(self, args: Namespace) -> int:
        """List the newest stored articles."""
        articles = self.service('news_service').get_articles()
        if not articles:
            print("No articles stored yet. Run: python run.py news fetch")
            return 0

        for article in articles:
            score = f"{article.political_score:+5.1f}" if article.political_score is not None else "  n/a"
            print(f"{article.id}  [{score}] {article.source}: {article.title[:70]}")
        return 0

    def show(self, args: Namespace) -> int:
        article = self.service('news_service').get_articles(args.id)
        for key, value in article.to_dict().items():
            print(f"{key:>16}: {value}")
        return 0

    def analyze(self, args: Namespace) -> int:
        """Generate and store an AI summary and political score."""
        analysis = self.service('analysis_service').analyze(args.id)

        print(f"Article: {analysis.article_id}")
        print(f"Political score: {analysis.political_score:+.1f} ({analysis.score.source})")
        if analysis.score.source == "heuristic":
            print(f"  fallback reason: {analysis.score.reason}")
        print(f"\nSummary:\n{analysis.summary}")
        return 0
