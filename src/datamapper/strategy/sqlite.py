"""
SQLite-specific strategy implementation.

SQLite tracks the rowid of the most recent successful INSERT per connection;
`last_insert_rowid()` reads it back.
"""
import logging
from typing import TYPE_CHECKING, Any

from datamapper.strategy.base import DialectStrategy, register_strategy

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, CursorResult

logger = logging.getLogger(__name__)


@register_strategy('sqlite')
class SQLiteStrategy(DialectStrategy):
    """SQLite-specific operations.
    """

    placeholder = '?'

    def __init__(self, dialect: str = 'sqlite') -> None:
        super().__init__(dialect)

    def last_insert_id(self, cn: 'Connection', table: str,
                       result: 'CursorResult') -> Any | None:
        """Read the connection's last inserted rowid.
        """
        return cn.exec_driver_sql('SELECT last_insert_rowid()').scalar()

    def configure_connection(self, raw_conn: Any) -> None:
        """Enable foreign keys and auto-commit for SQLite.
        """
        raw_conn.execute('PRAGMA foreign_keys = ON')
        raw_conn.isolation_level = None
