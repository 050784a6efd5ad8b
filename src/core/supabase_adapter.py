#!/usr/bin/env python3
"""
Supabase REST API Database Adapter.

All persistence (articles, votes, guest users, file storage) goes through
the Supabase REST API over HTTPS. The client is constructed explicitly and
handed to the adapter; nothing here is a process-wide singleton.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Dict, Any, Optional

from supabase import create_client, Client

from core.config import DatabaseConfig
from core.exceptions import (
    DatabaseOperationError, DatabaseConnectionError, RateLimitError, StorageError, ErrorClassifier
)
from core.models.article import Article
from core.models.vote import Vote, VoteCounts, VoteType, GuestUser

logger = logging.getLogger(__name__)

ARTICLES = 'articles'
VOTES = 'article_votes'
GUESTS = 'guest_users'


def create_supabase_client(config: DatabaseConfig) -> Client:
    """Create a Supabase client from database configuration."""
    if not config.api_key:
        raise DatabaseConnectionError('REST API', ValueError("Neither SUPABASE_SERVICE_KEY nor SUPABASE_ANON_KEY found"))
    try:
        return create_client(config.supabase_url, config.api_key)
    except Exception as e:
        raise DatabaseConnectionError('REST API', e) from e


def _is_uuid(value: str) -> bool:
    try:
        uuid.UUID(str(value))
        return True
    except ValueError:
        return False


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class SupabaseApiAdapter:
    """
    Database adapter using the Supabase REST API.

    Errors are logged and re-raised as DatabaseOperationError, or as
    RateLimitError when the API answered with HTTP 429.
    """

    def __init__(self, client: Client):
        """
        Args:
            client: A configured Supabase client
        """
        self.client = client
        logger.info("Supabase API adapter initialized")

    @classmethod
    def from_config(cls, config: DatabaseConfig) -> 'SupabaseApiAdapter':
        return cls(create_supabase_client(config))

    def _fail(self, operation: str, table: str, error: Exception):
        logger.error(f"Failed to {operation} on {table} via API: {error}")
        if ErrorClassifier.is_rate_limit(error):
            raise RateLimitError('database') from error
        raise DatabaseOperationError(operation, table, error) from error

    # Article Operations

    def search_cached_articles(self,
                               query: str,
                               from_date: Optional[str] = None,
                               sort_by: str = "publishedAt",
                               limit: int = 10,
                               offset: int = 0) -> List[Article]:
        """
        Search stored articles by title/description.

        Args:
            query: Free-text query, already sanitized for filter syntax
            from_date: Optional ISO date; only articles published on or after it
            sort_by: Requested ordering; every ordering is served newest first
            limit: Page size
            offset: Rows to skip

        Returns:
            Matching articles, newest first
        """
        try:
            builder = self.client.table(ARTICLES).select('*')

            if query:
                builder = builder.or_(f"title.ilike.%{query}%,description.ilike.%{query}%")

            if from_date:
                builder = builder.gte('published_at', from_date)

            # TODO: order "popularity" by vote count once counts are aggregated in the database
            result = (builder
                      .order('published_at', desc=True)
                      .range(offset, offset + limit - 1)
                      .execute())

            return [Article.from_dict(row) for row in result.data or []]

        except Exception as e:
            self._fail('search', ARTICLES, e)

    def list_articles(self, limit: int = 10, offset: int = 0) -> List[Article]:
        """Get the newest stored articles."""
        try:
            result = (self.client.table(ARTICLES)
                      .select('*')
                      .order('published_at', desc=True)
                      .range(offset, offset + limit - 1)
                      .execute())
            return [Article.from_dict(row) for row in result.data or []]
        except Exception as e:
            self._fail('list', ARTICLES, e)

    def get_article_by_id(self, article_id: str) -> Optional[Article]:
        """Get an article by internal id; non-uuid ids never match."""
        if not _is_uuid(article_id):
            return None
        try:
            result = (self.client.table(ARTICLES)
                      .select('*')
                      .eq('id', article_id)
                      .limit(1)
                      .execute())
            return Article.from_dict(result.data[0]) if result.data else None
        except Exception as e:
            self._fail('select', ARTICLES, e)

    def get_article_by_external_id(self, external_id: str) -> Optional[Article]:
        """Get an article by its dedup key."""
        try:
            result = (self.client.table(ARTICLES)
                      .select('*')
                      .eq('external_id', external_id)
                      .limit(1)
                      .execute())
            return Article.from_dict(result.data[0]) if result.data else None
        except Exception as e:
            self._fail('select', ARTICLES, e)

    def create_article(self, article: Article) -> Article:
        """
        Insert an article unless its external_id is already stored.

        A concurrent insert of the same URL is ignored by the unique
        constraint; the stored row is returned in either case.
        """
        try:
            result = (self.client.table(ARTICLES)
                      .upsert(article.to_record(), on_conflict='external_id', ignore_duplicates=True)
                      .execute())
        except Exception as e:
            self._fail('insert', ARTICLES, e)

        if result.data:
            logger.debug(f"Stored new article {article.external_id[:16]}...")
            return Article.from_dict(result.data[0])

        existing = self.get_article_by_external_id(article.external_id)
        if existing is None:
            raise DatabaseOperationError('insert', ARTICLES, RuntimeError("No row returned from article insert"))
        return existing

    def update_article(self, article_id: str, updates: Dict[str, Any]) -> None:
        """Overwrite the given columns of one article."""
        try:
            (self.client.table(ARTICLES)
             .update(updates)
             .eq('id', article_id)
             .execute())
            logger.debug(f"Updated article {article_id}: {sorted(updates)}")
        except Exception as e:
            self._fail('update', ARTICLES, e)

    # Vote Operations

    def get_vote_counts(self, article_id: str) -> VoteCounts:
        """Count up/down votes for an article."""
        try:
            result = (self.client.table(VOTES)
                      .select('vote_type')
                      .eq('article_id', article_id)
                      .execute())
            return VoteCounts.from_vote_types(row['vote_type'] for row in result.data or [])
        except Exception as e:
            self._fail('count', VOTES, e)

    def get_vote(self, article_id: str, user_id: str) -> Optional[Vote]:
        """Get the vote a user cast on an article, if any."""
        try:
            result = (self.client.table(VOTES)
                      .select('*')
                      .eq('article_id', article_id)
                      .eq('user_id', user_id)
                      .limit(1)
                      .execute())
            return Vote.from_dict(result.data[0]) if result.data else None
        except Exception as e:
            self._fail('select', VOTES, e)

    def insert_vote(self, article_id: str, user_id: str, vote_type: VoteType) -> Vote:
        """
        Insert a vote; a concurrent duplicate for the same (article, user)
        collapses into an update of the existing row.
        """
        record = {
            'article_id': article_id,
            'user_id': user_id,
            'vote_type': vote_type.value,
            'updated_at': _now_iso(),
        }
        try:
            result = (self.client.table(VOTES)
                      .upsert(record, on_conflict='article_id,user_id')
                      .execute())
        except Exception as e:
            self._fail('insert', VOTES, e)

        if not result.data:
            raise DatabaseOperationError('insert', VOTES, RuntimeError("No row returned from vote insert"))
        return Vote.from_dict(result.data[0])

    def update_vote(self, vote_id: str, vote_type: VoteType) -> None:
        try:
            (self.client.table(VOTES)
             .update({'vote_type': vote_type.value, 'updated_at': _now_iso()})
             .eq('id', vote_id)
             .execute())
        except Exception as e:
            self._fail('update', VOTES, e)

    def delete_vote(self, vote_id: str) -> None:
        try:
            (self.client.table(VOTES)
             .delete()
             .eq('id', vote_id)
             .execute())
        except Exception as e:
            self._fail('delete', VOTES, e)

    # Guest Operations

    def get_guest_user(self, guest_id: str) -> Optional[GuestUser]:
        try:
            result = (self.client.table(GUESTS)
                      .select('*')
                      .eq('guest_id', guest_id)
                      .limit(1)
                      .execute())
            return GuestUser.from_dict(result.data[0]) if result.data else None
        except Exception as e:
            self._fail('select', GUESTS, e)

    def create_guest_user(self, guest_id: str) -> GuestUser:
        """Register a guest; re-registering an existing token returns its row."""
        try:
            result = (self.client.table(GUESTS)
                      .upsert({'guest_id': guest_id, 'last_active_at': _now_iso()}, on_conflict='guest_id')
                      .execute())
        except Exception as e:
            self._fail('insert', GUESTS, e)

        if not result.data:
            raise DatabaseOperationError('insert', GUESTS, RuntimeError("No row returned from guest insert"))
        logger.info(f"Registered guest user {guest_id[:12]}...")
        return GuestUser.from_dict(result.data[0])

    def touch_guest_user(self, guest_id: str) -> Optional[GuestUser]:
        """Refresh last_active_at; returns the updated guest or None if unknown."""
        try:
            result = (self.client.table(GUESTS)
                      .update({'last_active_at': _now_iso()})
                      .eq('guest_id', guest_id)
                      .execute())
            return GuestUser.from_dict(result.data[0]) if result.data else None
        except Exception as e:
            self._fail('update', GUESTS, e)

    # Storage Operations

    def upload_file(self, bucket: str, path: str, data: bytes, content_type: str) -> str:
        """Upload (or replace) a file and return its public URL."""
        try:
            storage = self.client.storage.from_(bucket)
            storage.upload(
                path=path,
                file=data,
                file_options={'content-type': content_type, 'cache-control': '3600', 'upsert': 'true'}
            )
            return storage.get_public_url(path)
        except Exception as e:
            logger.error(f"Failed to upload {path} to {bucket}: {e}")
            raise StorageError('upload', bucket, e) from e

    def download_file(self, bucket: str, path: str) -> bytes:
        try:
            return self.client.storage.from_(bucket).download(path)
        except Exception as e:
            logger.error(f"Failed to download {path} from {bucket}: {e}")
            raise StorageError('download', bucket, e) from e

    def list_files(self, bucket: str, path: str = "") -> List[str]:
        try:
            entries = self.client.storage.from_(bucket).list(path)
            return [entry['name'] for entry in entries or []]
        except Exception as e:
            logger.error(f"Failed to list {bucket}/{path}: {e}")
            raise StorageError('list', bucket, e) from e

    def delete_files(self, bucket: str, paths: List[str]) -> None:
        try:
            self.client.storage.from_(bucket).remove(paths)
        except Exception as e:
            logger.error(f"Failed to delete {len(paths)} files from {bucket}: {e}")
            raise StorageError('delete', bucket, e) from e

    # Health Check

    def health_check(self) -> Dict[str, Any]:
        """Check API connection health."""
        try:
            self.client.table(ARTICLES).select('id').limit(1).execute()

            return {
                'connected': True,
                'method': 'REST API',
                'timestamp': _now_iso()
            }

        except Exception as e:
            logger.error(f"API health check failed: {e}")
            return {
                'connected': False,
                'method': 'REST API',
                'error': str(e),
                'timestamp': _now_iso()
            }
