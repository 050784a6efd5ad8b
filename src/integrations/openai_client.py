#!/usr/bin/env python3
"""
OpenAI integration for article analysis.

Provides the two completions used per article:
- A short neutral summary
- A raw political leaning score (parsed by the analysis service)
"""

import logging
from typing import List, Dict, Optional

import openai
from openai import OpenAI

from core.exceptions import LLMError, RateLimitError
from core.models.article import Article
from core.prompts import ArticleAnalysisPrompts

logger = logging.getLogger(__name__)


class OpenAIClient:
    """Client for OpenAI chat completions."""

    def __init__(self, api_key: str, model: str = "gpt-4o", timeout: float = 30.0, client: Optional[OpenAI] = None):
        """
        Initialize OpenAI client.

        Args:
            api_key: OpenAI API key
            model: Chat model used for both completions
            timeout: Request timeout in seconds
            client: Pre-built OpenAI client (tests inject a fake)
        """
        if not api_key and client is None:
            raise ValueError("OpenAI API key not provided")

        self.client = client or OpenAI(api_key=api_key, timeout=timeout, max_retries=0)
        self.model = model
        self.temperature = 0.3  # Lower temperature for more consistent analysis

    def _complete(self, messages: List[Dict[str, str]], max_tokens: int, analysis_type: str) -> str:
        """Run one chat completion and return its stripped text."""
        logger.info(f"Making OpenAI API call for {analysis_type}")

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                max_tokens=max_tokens,
                temperature=self.temperature
            )
        except openai.RateLimitError as e:
            logger.warning(f"OpenAI rate limited {analysis_type}: {e}")
            raise RateLimitError('openai') from e
        except openai.OpenAIError as e:
            logger.error(f"OpenAI API request failed for {analysis_type}: {e}")
            raise LLMError('openai', self.model, e) from e

        if not response.choices:
            raise LLMError('openai', self.model, ValueError("Empty completion"))

        usage = response.usage
        if usage is not None:
            logger.info(
                f"OpenAI API call successful - tokens: {usage.prompt_tokens} prompt + "
                f"{usage.completion_tokens} completion = {usage.total_tokens} total"
            )

        return (response.choices[0].message.content or "").strip()

    def generate_summary(self, article: Article) -> str:
        """
        Generate a 2-3 sentence neutral summary.

        Raises:
            RateLimitError: OpenAI answered with HTTP 429
            LLMError: Any other API failure
        """
        return self._complete(
            ArticleAnalysisPrompts.summary_messages(article),
            ArticleAnalysisPrompts.SUMMARY_MAX_TOKENS,
            "summary"
        )

    def rate_political_leaning(self, article: Article) -> str:
        """Ask for a single-number leaning score; the raw text is returned unparsed."""
        return self._complete(
            ArticleAnalysisPrompts.score_messages(article),
            ArticleAnalysisPrompts.SCORE_MAX_TOKENS,
            "political_score"
        )

    def test_connection(self) -> bool:
        """Test OpenAI API connection."""
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": "Hello"}],
                max_tokens=5
            )

            if response and response.choices:
                logger.info("OpenAI API connection test successful")
                return True
            else:
                logger.error("OpenAI API connection test failed: no response")
                return False

        except Exception as e:
            logger.error(f"OpenAI API connection test failed: {e}")
            return False
