#!/usr/bin/env python3
"""
Regulations.gov v4 API client.

Searches regulatory documents and their public comments. Responses are kept
in a short-lived in-memory cache because the upstream key is heavily rate
limited.
"""

import logging
from typing import List, Dict, Any, Optional

import requests

from core.cache import InMemoryCache
from core.exceptions import RegulationsApiError, RateLimitError, NotFoundError

logger = logging.getLogger(__name__)


class RegulationsClient:
    """Client for the regulations.gov document and comment endpoints."""

    def __init__(self,
                 api_key: str,
                 base_url: str = "https://api.regulations.gov/v4",
                 timeout: int = 10,
                 cache: Optional[InMemoryCache] = None,
                 session: Optional[requests.Session] = None):
        if not api_key:
            raise ValueError("Regulations API key not provided")

        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self._cache = cache
        self.session = session or requests.Session()
        self.session.headers.update({'X-Api-Key': api_key})

    def _get(self, operation: str, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Regulations API {operation} failed: {e}")
            raise RegulationsApiError(operation, e) from e

        if response.status_code == 429:
            logger.warning(f"Regulations API rate limit hit during {operation}")
            raise RateLimitError('regulations API')

        if response.status_code == 404:
            raise NotFoundError('Document', path.rsplit('/', 1)[-1])

        if response.status_code >= 400:
            logger.error(f"Regulations API {operation} returned HTTP {response.status_code}")
            raise RegulationsApiError(operation, response.text[:200], response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise RegulationsApiError(operation, e, response.status_code) from e

    def _cached(self, key: str, loader):
        if self._cache is None:
            return loader()
        return self._cache.get_or_set(key, loader)

    def search_documents(self, term: str, page_size: int = 10) -> List[Dict[str, Any]]:
        """
        Search documents, newest first.

        Returns:
            List of {id, title, postedDate, documentType}
        """
        def load():
            payload = self._get('search_documents', '/documents', {
                'filter[searchTerm]': term,
                'sort': '-postedDate',
                'page[size]': page_size,
            })
            documents = []
            for doc in payload.get('data') or []:
                attributes = doc.get('attributes') or {}
                documents.append({
                    'id': doc.get('id'),
                    'title': attributes.get('title'),
                    'postedDate': attributes.get('postedDate'),
                    'documentType': attributes.get('documentType'),
                })
            logger.info(f"Found {len(documents)} regulatory documents for '{term}'")
            return documents

        return self._cached(f"documents:{term}:{page_size}", load)

    def get_document(self, document_id: str) -> Dict[str, Any]:
        """Get one document's attributes, with its id merged in."""
        def load():
            payload = self._get('get_document', f"/documents/{document_id}")
            attributes = (payload.get('data') or {}).get('attributes') or {}
            return {'id': document_id, **attributes}

        return self._cached(f"document:{document_id}", load)

    def search_comments(self, document_id: str, term: str = "", page_size: int = 10) -> List[Dict[str, Any]]:
        """Search public comments on a document, newest first (raw entries)."""
        def load():
            payload = self._get('search_comments', '/comments', {
                'filter[commentOnId]': document_id,
                'filter[searchTerm]': term,
                'sort': '-postedDate',
                'page[size]': page_size,
            })
            return payload.get('data') or []

        return self._cached(f"comments:{document_id}:{term}:{page_size}", load)
