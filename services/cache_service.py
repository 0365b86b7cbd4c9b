"""
Cache Service
Optional Redis cache for read-heavy aggregates
"""

import json
import logging

import redis
from flask import current_app

# Create a standard logger for this module
logger = logging.getLogger(__name__)

SDG_GOALS_KEY = 'sdg:goals'


class CacheService:
    def __init__(self):
        self.redis_client = None
        self.enabled = False
        self.default_ttl = 300

    def init_app(self, app):
        """Initialize Redis with Flask app context"""
        self.default_ttl = app.config.get('CACHE_TTL', 300)
        redis_url = app.config.get('REDIS_URL')

        if not redis_url:
            self.redis_client = None
            self.enabled = False
            app.logger.info('Redis cache disabled (REDIS_URL not set)')
            return

        try:
            self.redis_client = redis.from_url(redis_url)
            self.enabled = True
            app.logger.info('Redis cache initialized successfully')
        except Exception as e:
            app.logger.warning(f'Redis disabled: {e}')
            self.redis_client = None
            self.enabled = False

    def get(self, key):
        """Get value from cache"""
        if not self.enabled:
            return None

        try:
            value = self.redis_client.get(key)
            if value:
                return json.loads(value)
            return None
        except Exception as e:
            current_app.logger.error(f'Cache get error: {str(e)}')
            return None

    def set(self, key, value, ttl=None):
        """
        Set value in cache

        Args:
            key: Cache key
            value: Value to cache (will be JSON serialized)
            ttl: Time to live in seconds (default CACHE_TTL)
        """
        if not self.enabled:
            return False

        try:
            json_value = json.dumps(value, default=str)
            self.redis_client.setex(key, ttl or self.default_ttl, json_value)
            return True
        except Exception as e:
            current_app.logger.error(f'Cache set error: {str(e)}')
            return False

    def delete(self, key):
        """Delete value from cache"""
        if not self.enabled:
            return False

        try:
            self.redis_client.delete(key)
            return True
        except Exception as e:
            current_app.logger.error(f'Cache delete error: {str(e)}')
            return False

    def clear_pattern(self, pattern):
        """Delete all keys matching pattern"""
        if not self.enabled:
            return 0

        try:
            keys = self.redis_client.keys(pattern)
            if keys:
                return self.redis_client.delete(*keys)
            return 0
        except Exception as e:
            current_app.logger.error(f'Cache clear pattern error: {str(e)}')
            return 0

    def get_sdg_goals(self):
        """Get cached SDG goal list"""
        return self.get(SDG_GOALS_KEY)

    def set_sdg_goals(self, goals):
        """Cache SDG goal list (static data, kept for a day)"""
        return self.set(SDG_GOALS_KEY, goals, ttl=86400)

    @staticmethod
    def _dashboard_key(organization_id):
        return f'dashboard:org:{organization_id or "all"}'

    def get_dashboard_data(self, organization_id):
        """Get cached dashboard summary"""
        return self.get(self._dashboard_key(organization_id))

    def set_dashboard_data(self, organization_id, data):
        """Cache dashboard summary"""
        return self.set(self._dashboard_key(organization_id), data)

    def clear_dashboard_cache(self):
        """Clear every cached dashboard summary"""
        removed = self.clear_pattern('dashboard:org:*')
        if removed:
            logger.debug(f'Cleared {removed} cached dashboard summaries')
        return removed


# Global cache service instance
cache_service = CacheService()
