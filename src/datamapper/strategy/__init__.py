"""
Dialect strategy factory.
"""
from functools import lru_cache

from datamapper.strategy.base import _STRATEGY_REGISTRY
from datamapper.strategy.base import DialectStrategy as DialectStrategy
from datamapper.strategy.base import register_strategy as register_strategy
from datamapper.strategy.mysql import MySQLStrategy as MySQLStrategy
from datamapper.strategy.postgres import PostgresStrategy as PostgresStrategy
from datamapper.strategy.sqlite import SQLiteStrategy as SQLiteStrategy
from datamapper.utils import get_dialect_name


@lru_cache(maxsize=8)
def _get_strategy(dialect: str) -> DialectStrategy:
    """Get cached strategy instance for a dialect."""
    if dialect not in _STRATEGY_REGISTRY:
        return DialectStrategy(dialect)
    return _STRATEGY_REGISTRY[dialect]()


def get_strategy(dialect: str) -> DialectStrategy:
    """Get strategy instance for a dialect name.

    Unregistered dialects get the generic strategy, which quotes with double
    quotes, binds with `%s` and cannot report generated ids.
    """
    return _get_strategy(dialect.lower())


def get_db_strategy(cn) -> DialectStrategy:
    """Get dialect strategy for the connection."""
    return get_strategy(get_dialect_name(cn))


def get_available_dialects() -> list[str]:
    """Return list of registered dialect names."""
    return list(_STRATEGY_REGISTRY.keys())


def is_supported_dialect(dialect: str) -> bool:
    """Check if a dialect has a registered strategy."""
    return dialect in _STRATEGY_REGISTRY
