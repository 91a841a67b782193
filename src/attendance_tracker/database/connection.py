from __future__ import annotations

import logging
from dataclasses import dataclass

import mysql.connector
from mysql.connector import errors

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    connect_timeout: int = 10

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "attendance_tracker")),
            connect_timeout=int(db_config.get("connect_timeout", 10)),
        )


class DatabaseConnection:
    """DB connection factory owned by the application container.

    Note: We create short-lived connections per operation; readiness is
    answered by actually pinging the server, not by a cached flag.
    """

    def __init__(self, config: DBConfig):
        self._config = config

    @property
    def config(self) -> DBConfig:
        return self._config

    def connect(self):
        return mysql.connector.connect(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
            connection_timeout=int(self._config.connect_timeout),
        )

    def is_ready(self) -> bool:
        try:
            conn = self.connect()
        except errors.Error as exc:
            logger.warning("Database not reachable: %s", exc)
            return False
        try:
            conn.ping(reconnect=False)
            return True
        except errors.Error as exc:
            logger.warning("Database ping failed: %s", exc)
            return False
        finally:
            conn.close()
