#!/usr/bin/env python3
"""
AI prompts for article analysis.

This module centralizes the prompt templates sent to the LLM: a short
neutral summary and a single-number political leaning score.
"""

from typing import List, Dict

from core.models.article import Article


class ArticleAnalysisPrompts:
    """Collection of prompts for per-article analysis."""

    SYSTEM_PROMPT = (
        "You are a careful, politically neutral news analyst. "
        "Describe what an article says without adding opinions of your own."
    )

    SUMMARY_MAX_TOKENS = 150
    SCORE_MAX_TOKENS = 10

    @staticmethod
    def _article_block(article: Article) -> str:
        lines = [
            f"Title: {article.title}",
            f"Source: {article.source}",
            f"Description: {article.description}",
        ]
        if article.content:
            lines.append(f"Content: {article.content}")
        return "\n".join(lines)

    @classmethod
    def get_summary_prompt(cls, article: Article) -> str:
        return (
            "Please provide a concise summary (2-3 sentences) of the following news article:\n\n"
            f"{cls._article_block(article)}\n\n"
            "Your summary should be objective and highlight the key points of the article."
        )

    @classmethod
    def get_score_prompt(cls, article: Article) -> str:
        return (
            "Please analyze the political leaning of the following news article on a scale "
            "from -10 (extremely liberal) to +10 (extremely conservative).\n\n"
            f"{cls._article_block(article)}\n\n"
            "Consider the following factors:\n"
            "- Language and framing\n"
            "- Topic selection and emphasis\n"
            "- Source reputation\n"
            "- Presentation of different viewpoints\n\n"
            "Provide ONLY a single number between -10 and 10 representing the political leaning score.\n"
            "Return ONLY the numerical score with no additional text."
        )

    @classmethod
    def summary_messages(cls, article: Article) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": cls.SYSTEM_PROMPT},
            {"role": "user", "content": cls.get_summary_prompt(article)},
        ]

    @classmethod
    def score_messages(cls, article: Article) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": cls.SYSTEM_PROMPT},
            {"role": "user", "content": cls.get_score_prompt(article)},
        ]
