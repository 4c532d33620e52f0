import json
import logging
from typing import Any, Dict, List, Optional

import redis

import settings
from shared.util import serialize_numpy

logger = logging.getLogger(__name__)


class RedisCache:
    """Redis wrapper that degrades to no-ops when the server is unreachable"""

    def __init__(self, redis_url: str = None):
        self.redis_url = redis_url or settings.REDIS_URL
        self.redis_client = None
        self._connect()

    def _connect(self):
        try:
            self.redis_client = redis.from_url(self.redis_url, decode_responses=True)

            self.redis_client.ping()
            logger.info(f"Connected to Redis at {self.redis_url}")
        except Exception as e:
            logger.info(f"Failed to connect to Redis: {e}")
            self.redis_client = None

    def ping(self) -> bool:
        """Test Redis connection"""
        if not self.redis_client:
            return False
        try:
            return self.redis_client.ping()
        except Exception:
            return False

    def get(self, key: str) -> Optional[str]:
        if not self.redis_client:
            return None
        try:
            return self.redis_client.get(key)
        except Exception as e:
            logger.error(f"Error getting key {key}: {e}")
            return None

    def set(self, key: str, value: str, ttl: int = None) -> bool:
        if not self.redis_client:
            return False
        try:
            if ttl:
                return bool(self.redis_client.setex(key, ttl, value))
            else:
                return bool(self.redis_client.set(key, value))
        except Exception as e:
            logger.error(f"Error setting key {key}: {e}")
            return False

    def delete(self, *keys: str) -> int:
        """Delete keys from Redis"""
        if not self.redis_client or not keys:
            return 0
        try:
            return self.redis_client.delete(*keys)
        except Exception as e:
            logger.error(f"Error deleting keys {keys}: {e}")
            return 0

    def get_json_list(self, key: str) -> List[Dict[str, Any]]:
        """Read a JSON array stored under ``key``; missing or corrupt values read as empty"""
        raw = self.get(key)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error(f"Corrupt JSON under {key}: {e}")
            return []
        return data if isinstance(data, list) else []

    def set_json_list(self, key: str, items: List[Dict[str, Any]]) -> bool:
        return self.set(key, json.dumps(serialize_numpy(items), ensure_ascii=False))

    def get_info(self) -> Dict:
        """Get Redis server info"""
        if not self.redis_client:
            return {"status": "disconnected"}

        try:
            info = self.redis_client.info()
            return {
                "status": "connected",
                "redis_version": info.get("redis_version"),
                "used_memory_human": info.get("used_memory_human"),
                "connected_clients": info.get("connected_clients"),
            }
        except Exception as e:
            logger.error(f"Error getting Redis info: {e}")
            return {"status": "error", "error": str(e)}
