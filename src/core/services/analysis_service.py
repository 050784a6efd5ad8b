#!/usr/bin/env python3
"""
Article Analysis Service

Generates an AI summary and political-leaning score for one article and
stores both on the article row.
"""

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from core.bias import heuristic_political_score
from core.exceptions import ValidationError, NotFoundError, MISSING_FIELDS
from core.models.analysis import ParsedScore, FallbackScore, ScoreResult, ArticleAnalysis
from core.models.article import Article, SCORE_MIN, SCORE_MAX

logger = logging.getLogger(__name__)

LEADING_NUMBER = re.compile(r'^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?')


def parse_political_score(text: Optional[str], article: Article) -> ScoreResult:
    """
    Parse the leading number of a model answer.

    Anything unparseable or outside [-10, 10] falls back to the heuristic
    score of the article.
    """
    match = LEADING_NUMBER.match((text or "").strip())
    if not match:
        reason = f"unparseable score {text!r}"
    else:
        value = float(match.group(0))
        if SCORE_MIN <= value <= SCORE_MAX:
            return ParsedScore(value)
        reason = f"score {value} out of range"

    logger.warning(f"Falling back to heuristic score for article {article.id}: {reason}")
    return FallbackScore(
        heuristic_political_score(article.source, article.title, article.description),
        reason
    )


class AnalysisService:
    """Runs the two LLM completions for an article and persists the result."""

    def __init__(self, database, llm_client):
        """
        Args:
            database: Supabase adapter
            llm_client: Object exposing generate_summary and rate_political_leaning
        """
        self.database = database
        self.llm_client = llm_client

    def _find_article(self, article_id: str) -> Article:
        article = self.database.get_article_by_id(article_id)
        if article is None:
            article = self.database.get_article_by_external_id(article_id)
        if article is None:
            raise NotFoundError('Article', article_id)
        return article

    def analyze(self, article_id: str) -> ArticleAnalysis:
        """
        Analyze an article by internal or external id.

        Both completions run concurrently. A failed completion fails the whole
        request (RateLimitError or LLMError propagate); only an unusable score
        answer is replaced by the heuristic.
        """
        if not article_id:
            raise ValidationError('articleId', 'Article ID is required', MISSING_FIELDS)

        article = self._find_article(article_id)
        logger.info(f"Analyzing article {article.id}: {article.title[:60]}")

        with ThreadPoolExecutor(max_workers=2) as executor:
            summary_future = executor.submit(self.llm_client.generate_summary, article)
            score_future = executor.submit(self.llm_client.rate_political_leaning, article)

            summary = summary_future.result()
            score_text = score_future.result()

        score = parse_political_score(score_text, article)

        self.database.update_article(article.id, {
            'ai_summary': summary,
            'political_score': score.value,
        })

        logger.info(f"Stored analysis for article {article.id} (score {score.value}, {score.source})")
        return ArticleAnalysis(article_id=article.id, summary=summary, score=score)
