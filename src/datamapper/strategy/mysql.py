"""
MySQL-specific strategy implementation.

MySQL keeps the last AUTO_INCREMENT value per connection and the driver
surfaces it as the cursor's `lastrowid`.
"""
from typing import TYPE_CHECKING, Any

from datamapper.strategy.base import DialectStrategy, register_strategy

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, CursorResult


@register_strategy('mysql')
class MySQLStrategy(DialectStrategy):
    """MySQL-specific operations.
    """

    quote_char = '`'
    empty_insert_sql = '() VALUES ()'

    def __init__(self, dialect: str = 'mysql') -> None:
        super().__init__(dialect)

    def last_insert_id(self, cn: 'Connection', table: str,
                       result: 'CursorResult') -> Any | None:
        """Return the insert id reported for the INSERT's cursor.
        """
        return result.lastrowid

    def configure_connection(self, raw_conn: Any) -> None:
        """Enable auto-commit mode for MySQL.
        """
        raw_conn.autocommit(True)
