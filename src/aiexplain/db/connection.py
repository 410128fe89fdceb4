"""
MySQL connection provisioning.

One connection is opened per run, shared read-only by the schema and plan
inspectors, and closed on every exit path.

Usage:
    from aiexplain.db import open_connection

    with open_connection(config) as conn:
        version = server_version(conn)
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import pymysql
from pymysql.cursors import DictCursor

from aiexplain.exceptions import DatabaseConnectionError

if TYPE_CHECKING:
    from aiexplain.config import Config

logger = logging.getLogger(__name__)


def connect(config: "Config") -> Any:
    """
    Open and verify a MySQL connection.

    Rows come back as dicts keyed by column name.

    Raises:
        DatabaseConnectionError: If the server cannot be reached or refuses
            the login.
    """
    logger.debug(
        "Connecting to MySQL %s@%s:%s/%s",
        config.mysql_user,
        config.mysql_host,
        config.mysql_port,
        config.mysql_database,
    )
    try:
        conn = pymysql.connect(
            host=config.mysql_host,
            port=config.mysql_port,
            user=config.mysql_user,
            password=config.mysql_password,
            database=config.mysql_database or None,
            connect_timeout=config.connect_timeout,
            cursorclass=DictCursor,
            charset="utf8mb4",
        )
        conn.ping(reconnect=False)
    except pymysql.MySQLError as e:
        raise DatabaseConnectionError(
            f"Failed to connect to MySQL at {config.mysql_host}:{config.mysql_port}: {e}"
        ) from e
    return conn


@contextmanager
def open_connection(config: "Config") -> Iterator[Any]:
    """Connection scoped to a with-block; always closed on exit."""
    conn = connect(config)
    try:
        yield conn
    finally:
        try:
            conn.close()
        except pymysql.MySQLError as e:
            logger.debug("Error closing MySQL connection: %s", e)


def server_version(conn: Any) -> str | None:
    """
    Return the server's VERSION() string, or None if it cannot be read.

    The version only enriches the prompt, so failure here is not fatal.
    """
    try:
        with conn.cursor() as cursor:
            cursor.execute("SELECT VERSION() AS version")
            row = cursor.fetchone()
    except pymysql.MySQLError as e:
        logger.warning("Could not read server version: %s", e)
        return None

    if not row:
        return None
    return str(row["version"])
