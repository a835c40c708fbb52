# minishop/services/session_ledger.py
import time

import redis

from minishop.utils.retry import redis_retry
from minishop.utils.settings import REDIS_URL
from minishop.utils.logging import get_logger

logger = get_logger(__name__)

_KEY = "checkout:sessions:pending"


class SessionLedger:
    """
    Redis hash of gateway sessions created by checkout but not yet backed by
    a committed Payment row: {session_id: created_at_epoch}.
    """

    def __init__(self, url: str | None = None, client: redis.Redis | None = None):
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @redis_retry()
    def record(self, session_id: str, created_at: float | None = None) -> None:
        logger.info(f"Ledger record {session_id}")
        self.redis.hset(_KEY, session_id, str(created_at if created_at is not None else time.time()))

    @redis_retry()
    def clear(self, session_id: str) -> None:
        logger.info(f"Ledger clear {session_id}")
        self.redis.hdel(_KEY, session_id)

    @redis_retry()
    def pending(self) -> dict[str, float]:
        return {sid: float(ts) for sid, ts in self.redis.hgetall(_KEY).items()}
