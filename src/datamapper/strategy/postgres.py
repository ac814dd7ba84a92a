"""
PostgreSQL-specific strategy implementation.

Serial primary keys are backed by a sequence named `<table>_id_seq`; the
value assigned by the last INSERT in this session is read with `currval`.
"""
import logging
from typing import TYPE_CHECKING, Any

from datamapper.strategy.base import DialectStrategy, register_strategy

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, CursorResult

logger = logging.getLogger(__name__)


def sequence_name(table: str) -> str:
    """Name of the sequence backing a table's `id` column."""
    return '_'.join((table, 'id', 'seq'))


@register_strategy('postgresql')
class PostgresStrategy(DialectStrategy):
    """PostgreSQL-specific operations.
    """

    def __init__(self, dialect: str = 'postgresql') -> None:
        super().__init__(dialect)

    def last_insert_id(self, cn: 'Connection', table: str,
                       result: 'CursorResult') -> Any | None:
        """Query the current value of the table's id sequence.
        """
        sequence = sequence_name(table)
        logger.debug(f'Reading currval of {sequence}')
        return cn.exec_driver_sql('SELECT currval(%s)', (sequence,)).scalar()

    def configure_connection(self, raw_conn: Any) -> None:
        """Enable auto-commit mode for PostgreSQL.
        """
        raw_conn.autocommit = True
