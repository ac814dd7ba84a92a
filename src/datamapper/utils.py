"""Connection introspection helpers with no internal dependencies.
"""
from typing import Any

# module fragment of a raw DBAPI connection type -> dialect name
_DBAPI_DIALECTS = (
    ('psycopg', 'postgresql'),
    ('sqlite3', 'sqlite'),
    ('pymysql', 'mysql'),
    ('MySQLdb', 'mysql'),
)


def get_dialect_name(obj: Any) -> str:
    """Dialect name of a SQLAlchemy connection or engine, or a raw DBAPI connection.

    Raises
        AttributeError: If the dialect cannot be determined.
    """
    dialect = getattr(obj, 'dialect', None)
    if dialect is None and hasattr(obj, 'engine'):
        dialect = getattr(obj.engine, 'dialect', None)
    if dialect is not None:
        return (dialect if isinstance(dialect, str) else str(dialect.name)).lower()

    type_name = f'{type(obj).__module__}.{type(obj).__name__}'
    for fragment, name in _DBAPI_DIALECTS:
        if fragment in type_name:
            return name
    raise AttributeError(f'Cannot determine dialect for {type(obj)}')


def get_raw_connection(connection: Any) -> Any:
    """Unwrap a SQLAlchemy connection down to the driver's own connection."""
    raw_conn = getattr(connection, 'connection', connection)
    return getattr(raw_conn, 'driver_connection', raw_conn)
