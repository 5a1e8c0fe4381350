import logging
import uuid

import redis
from redis.exceptions import ConnectionError

from app.core.config import settings

logger = logging.getLogger(__name__)


class RedisIntegrationLease:
    """Per-integration lease so overlapping job runs never share a watermark."""

    def __init__(self, prefix: str = "callsync:lease", ttl_seconds: int = 600, client=None):
        self.prefix = prefix
        self.ttl_seconds = ttl_seconds
        self.client = client or redis.Redis.from_url(settings.redis_url, decode_responses=True)
        self.owner = uuid.uuid4().hex

    def _key(self, integration_id: int) -> str:
        return f"{self.prefix}:{integration_id}"

    def acquire(self, integration_id: int) -> bool:
        try:
            return bool(
                self.client.set(self._key(integration_id), self.owner, nx=True, ex=self.ttl_seconds)
            )
        except ConnectionError:
            logger.warning("Redis unavailable, syncing integration %s without a lease", integration_id)
            return True

    def release(self, integration_id: int) -> None:
        key = self._key(integration_id)
        try:
            if self.client.get(key) == self.owner:
                self.client.delete(key)
        except ConnectionError:
            return
