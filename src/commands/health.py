#!/usr/bin/env python3
"""
Health check command for monitoring system status.

Provides health checks for the database, configuration, integrations and caches.
"""

import logging
from argparse import Namespace

from .base import BaseCommand
from core.env_loader import validate_database_config
from core.cache import get_cache_stats
from core.exceptions import DemocracyLensError

logger = logging.getLogger(__name__)


class HealthCommand(BaseCommand):
    """Handle system health monitoring and diagnostics."""

    def execute(self, subcommand: str, args: Namespace) -> int:
        """Execute health subcommand."""
        try:
            if subcommand == "check":
                return self.check(args)
            elif subcommand == "database":
                return self.database(args)
            elif subcommand == "integrations":
                return self.integrations(args)
            return self.unknown_subcommand(subcommand)

        except Exception as e:
            return self.handle_error(e, f"health {subcommand}")

    def check(self, args: Namespace) -> int:
        """Run comprehensive health check."""
        print("🏥 System Health Check")
        print("=" * 50)

        overall_healthy = True

        print("\n⚙️  Configuration:")
        try:
            validate_database_config()
            print("  ✅ Database configuration: OK")
        except ValueError as e:
            print(f"  ❌ Database configuration: {e}")
            overall_healthy = False

        print("\n📊 Database Status:")
        health = self.db.health_check()
        if health.get('connected'):
            print("  ✅ Database connection: OK")
        else:
            print("  ❌ Database connection: FAILED")
            print(f"     Error: {health.get('error', 'Unknown error')}")
            overall_healthy = False

        print("\n🔌 Integration Status:")
        for name, enabled in self._integration_flags().items():
            marker = "✅" if enabled else "⚪"
            print(f"  {marker} {name}: {'configured' if enabled else 'not configured'}")

        print("\n💾 Cache Status:")
        cache_stats = get_cache_stats()
        if cache_stats:
            for cache_name, stats in cache_stats.items():
                print(f"  📊 {cache_name.title()} Cache: {stats['entries']} entries, {stats['hit_rate']:.1f}% hit rate")
        else:
            print("  ℹ️  No cache instances active")

        print("\n" + "=" * 50)
        if overall_healthy:
            print("✅ Overall Status: HEALTHY")
            return 0
        print("❌ Overall Status: UNHEALTHY")
        return 1

    def database(self, args: Namespace) -> int:
        """Check database health specifically."""
        print("📊 Database Health Check")
        print("=" * 30)

        validate_database_config()
        print("✅ Database configuration valid")

        health = self.db.health_check()
        if not health.get('connected'):
            print(f"❌ Database connection failed: {health.get('error')}")
            return 1

        print(f"✅ Database connection successful ({health.get('method')})")
        recent = self.db.list_articles(limit=1)
        if recent:
            print(f"🔍 Newest article: {recent[0].title[:70]}")
        else:
            print("🔍 No articles stored yet")
        return 0

    def integrations(self, args: Namespace) -> int:
        """Check external integrations, optionally making live calls."""
        print("🔌 Integration Health Check")
        print("=" * 35)

        flags = self._integration_flags()
        healthy = 0

        print("\n🤖 OpenAI:")
        if flags['openai']:
            try:
                client = self.service('openai_client')
                if getattr(args, 'test', False):
                    ok = client.test_connection()
                    print(f"  {'✅' if ok else '❌'} Live completion {'succeeded' if ok else 'failed'}")
                    healthy += int(ok)
                else:
                    print(f"  ✅ Client initialized (model {client.model})")
                    print("  ℹ️  Use --test to make a live call")
                    healthy += 1
            except DemocracyLensError as e:
                print(f"  ❌ {e}")
        else:
            print("  ⚪ OPENAI_API_KEY not set; article analysis disabled")

        print("\n📰 News API:")
        if flags['news_api']:
            print("  ✅ Configured")
            healthy += 1
        else:
            print("  ⚪ NEWS_API_KEY not set; reads are served from cache only")

        print("\n🏛️  Regulations API:")
        if flags['regulations_api']:
            print("  ✅ Configured")
            healthy += 1
        else:
            print("  ⚪ REGULATIONS_API_KEY not set; regulations browser disabled")

        configured = sum(1 for enabled in flags.values() if enabled)
        print(f"\n📊 Integration Summary: {healthy}/{configured} configured integrations healthy")
        return 0 if healthy == configured else 1

    def _integration_flags(self):
        return self.config.integration_status()
