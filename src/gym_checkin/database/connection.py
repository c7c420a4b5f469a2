from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

from mysql.connector import errors, pooling

logger = logging.getLogger(__name__)


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    pool_size: int = 5
    connect_timeout: int = 3
    # Seconds to fail fast after the pool could not be opened.
    retry_cooldown: float = 5.0


class DatabaseConnection:
    """Singleton-like DB connection factory.

    The pool is opened lazily on the first ``connect()`` and then reused for
    the life of the process. If opening fails the error propagates; calls
    during the following ``retry_cooldown`` seconds fail immediately, and the
    first call after it tries again.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig, *, clock: Callable[[], float] = time.monotonic):
        self._config = config
        self._pool: Optional[pooling.MySQLConnectionPool] = None
        self._pool_lock = threading.Lock()
        self._clock = clock
        self._retry_at = 0.0

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    @property
    def is_established(self) -> bool:
        return self._pool is not None

    def _open_pool(self) -> pooling.MySQLConnectionPool:
        with self._pool_lock:
            if self._pool is not None:
                return self._pool

            cfg = self._config
            if self._clock() < self._retry_at:
                raise errors.InterfaceError(
                    msg=f"MySQL at {cfg.host}:{cfg.port} unavailable; next attempt in "
                    f"{self._retry_at - self._clock():.1f}s"
                )

            try:
                self._pool = pooling.MySQLConnectionPool(
                    pool_name="gym_checkin",
                    pool_size=int(cfg.pool_size),
                    host=cfg.host,
                    port=int(cfg.port),
                    user=cfg.user,
                    password=cfg.password,
                    database=cfg.database,
                    connection_timeout=int(cfg.connect_timeout),
                )
            except Exception:
                self._retry_at = self._clock() + float(cfg.retry_cooldown)
                raise
            logger.info("MySQL pool ready (%s@%s:%s/%s)", cfg.user, cfg.host, cfg.port, cfg.database)
            return self._pool

    def connect(self):
        pool = self._pool or self._open_pool()
        return pool.get_connection()
