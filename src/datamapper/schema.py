"""
Schema metadata for mapped tables.

Metadata is read through SQLAlchemy's Inspector so every dialect SQLAlchemy
knows about can be introspected the same way.
"""
import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy import inspect

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Schema:
    """Primary key and column layout of one table."""
    table: str
    primary_keys: tuple[str, ...] = ()
    columns: tuple[str, ...] = ()


def _read_schema(inspector: Any, table: str) -> Schema:
    pk_constraint = inspector.get_pk_constraint(table)
    columns = [col['name'] for col in inspector.get_columns(table)]
    return Schema(table=table,
                  primary_keys=tuple(pk_constraint.get('constrained_columns') or ()),
                  columns=tuple(columns))


def inspect_schemata(connection: Any) -> dict[str, Schema]:
    """Read the schema of every table visible on the connection.

    Returns
        Mapping of table name to Schema
    """
    inspector = inspect(connection)
    schemata = {table: _read_schema(inspector, table)
                for table in inspector.get_table_names()}
    logger.debug(f'Inspected {len(schemata)} tables')
    return schemata
