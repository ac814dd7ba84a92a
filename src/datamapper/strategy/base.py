"""
Base strategy for dialect-specific behavior.

A strategy encapsulates everything the SQL adapter needs to know about a
backend: how identifiers are quoted, which placeholder marker the driver
expects, how an empty row is inserted, and how the id generated by the last
INSERT is retrieved. Dialects without a registered strategy fall back to
`DialectStrategy` itself, which uses ANSI quoting and reports no auto-id.
"""
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, CursorResult

logger = logging.getLogger(__name__)

# Registry of dialect name -> strategy class
# Defined here to avoid circular imports (concrete strategies import from base)
_STRATEGY_REGISTRY: dict[str, type['DialectStrategy']] = {}


def register_strategy(dialect: str):
    """Decorator to register a strategy class for a dialect.

    Usage:
        @register_strategy('postgresql')
        class PostgresStrategy(DialectStrategy):
            ...
    """
    def decorator(cls: type['DialectStrategy']) -> type['DialectStrategy']:
        _STRATEGY_REGISTRY[dialect] = cls
        return cls
    return decorator


class DialectStrategy:
    """Generic dialect behavior.

    Used directly for dialects that have no registered strategy.
    """

    quote_char = '"'
    placeholder = '%s'
    empty_insert_sql = 'DEFAULT VALUES'

    def __init__(self, dialect: str = 'generic') -> None:
        self._dialect = dialect

    @property
    def dialect_name(self) -> str:
        """Return the dialect identifier."""
        return self._dialect

    def quote_identifier(self, identifier: str) -> str:
        """Quote a database identifier, doubling any embedded quote character.
        """
        q = self.quote_char
        return q + identifier.replace(q, q + q) + q

    def make_placeholders(self, count: int) -> str:
        """Return `count` comma separated placeholders.
        """
        return ', '.join([self.placeholder] * count)

    def last_insert_id(self, cn: 'Connection', table: str,
                       result: 'CursorResult') -> Any | None:
        """Return the id generated by the last INSERT into `table`.

        Args:
            cn: Connection the INSERT ran on
            table: Table the row was inserted into
            result: Result of the INSERT statement

        Returns
            The generated id, or None when the dialect has no way to report it
        """
        logger.debug(f'No auto-id strategy for dialect {self.dialect_name}')
        return None

    def configure_connection(self, raw_conn: Any) -> None:
        """Configure a freshly opened DBAPI connection.
        """
