#!/usr/bin/env python3
"""
Security utilities for Democracy Lens.

Provides input validation and sanitization for feed content, guest tokens
and storage paths.
"""

import re
import html
import urllib.parse
from typing import Optional, List
import logging

logger = logging.getLogger(__name__)

GUEST_ID_PATTERN = re.compile(r'[A-Za-z0-9_-]{8,64}')


class SecurityValidator:
    """Handles security validation and sanitization."""

    # Maximum allowed lengths to prevent DoS attacks
    MAX_TITLE_LENGTH = 500
    MAX_SUMMARY_LENGTH = 2000
    MAX_CONTENT_LENGTH = 10000
    MAX_URL_LENGTH = 2048
    MAX_FILENAME_LENGTH = 200

    ALLOWED_SCHEMES = {'http', 'https'}

    SUSPICIOUS_PATTERNS = [
        r'<script[\s\S]*?</script>',  # Script tags
        r'javascript:',               # JavaScript URLs
        r'vbscript:',                 # VBScript URLs
        r'on\w+\s*=',                 # Event handlers (onclick, onload, etc.)
    ]

    def __init__(self):
        self.suspicious_regex = re.compile('|'.join(self.SUSPICIOUS_PATTERNS), re.IGNORECASE)

    def validate_url(self, url: Optional[str]) -> bool:
        """
        Validate that a URL is well formed and uses http(s).

        News items come from arbitrary publishers, so there is no domain
        allow-list; only the scheme and length are checked.
        """
        if not url or len(url) > self.MAX_URL_LENGTH:
            return False

        try:
            parsed = urllib.parse.urlparse(url)
        except ValueError as e:
            logger.error(f"Error parsing URL {url}: {e}")
            return False

        if parsed.scheme.lower() not in self.ALLOWED_SCHEMES:
            logger.warning(f"Blocked URL with invalid scheme: {parsed.scheme}")
            return False

        if not parsed.netloc:
            logger.warning(f"Blocked URL without host: {url}")
            return False

        return True

    def sanitize_text(self, text: Optional[str], max_length: int = None) -> str:
        """
        Sanitize text content by removing HTML tags and suspicious content.

        Args:
            text: Input text to sanitize
            max_length: Maximum allowed length (uses summary limit if None)

        Returns:
            Sanitized text
        """
        if not text:
            return ""

        if max_length is None:
            max_length = self.MAX_SUMMARY_LENGTH

        if len(text) > max_length:
            text = text[:max_length]
            logger.debug(f"Truncated text longer than {max_length} characters")

        text = html.unescape(text)
        text = re.sub(r'<[^>]+>', '', text)

        if self.suspicious_regex.search(text):
            logger.warning("Detected suspicious content in text, cleaning...")
            text = self.suspicious_regex.sub('[REMOVED]', text)

        return re.sub(r'\s+', ' ', text).strip()

    def sanitize_title(self, title: Optional[str]) -> str:
        return self.sanitize_text(title, self.MAX_TITLE_LENGTH)

    def sanitize_summary(self, summary: Optional[str]) -> str:
        return self.sanitize_text(summary, self.MAX_SUMMARY_LENGTH)

    def sanitize_content(self, content: Optional[str]) -> str:
        return self.sanitize_text(content, self.MAX_CONTENT_LENGTH)

    def validate_guest_id(self, guest_id: Optional[str]) -> bool:
        """Guest tokens are opaque but must be short url-safe strings."""
        return bool(guest_id) and bool(GUEST_ID_PATTERN.fullmatch(guest_id))

    def sanitize_search_query(self, query: Optional[str]) -> str:
        """
        Clean a free-text search query.

        PostgREST filter syntax uses commas and parentheses as separators,
        so they are replaced with spaces before the query reaches an
        ``or=(...)`` filter.
        """
        if not query:
            return ""
        cleaned = self.sanitize_text(query, self.MAX_TITLE_LENGTH)
        cleaned = re.sub(r'[,()*%\\]', ' ', cleaned)
        return re.sub(r'\s+', ' ', cleaned).strip()

    def sanitize_filename(self, filename: Optional[str]) -> str:
        """Reduce an uploaded file name to a safe single path segment."""
        name = (filename or "").replace('\\', '/').split('/')[-1]
        name = re.sub(r'[^A-Za-z0-9._-]+', '-', name).strip('.-')
        return name[:self.MAX_FILENAME_LENGTH] or "upload"

    def validate_storage_path(self, path: Optional[str]) -> bool:
        """Storage paths must be relative and must not climb out of the bucket."""
        if path is None:
            return False
        if path.startswith('/') or '\\' in path:
            return False
        segments: List[str] = path.split('/')
        return '..' not in segments
