"""
Database connections for the SQL adapter.

`connect()` turns DatabaseOptions (or a dict, or a config section name) into
a configured SQLAlchemy `Connection` ready to be handed to `SQLAdapter`.
Engines are shared per distinct set of options and disposed at interpreter
exit.
"""
import atexit
import logging
import threading
from collections.abc import Callable
from dataclasses import fields
from typing import Any

import sqlalchemy as sa
from datamapper.options import DatabaseOptions
from datamapper.strategy import get_db_strategy
from datamapper.utils import get_raw_connection
from sqlalchemy.engine import Engine
from sqlalchemy.pool import NullPool

from libb import load_options

__all__ = [
    'connect',
    'configure_connection',
    'create_url_from_options',
    'get_engine_for_options',
    'dispose_all_engines',
]

logger = logging.getLogger(__name__)

# drivername -> SQLAlchemy dialect+driver for server databases
_SERVER_DRIVERS = {
    'postgresql': 'postgresql+psycopg',
    'mysql': 'mysql+pymysql',
}

_engines: dict[str, Engine] = {}
_engines_lock = threading.RLock()


def create_url_from_options(options: DatabaseOptions,
                            url_creator: Callable[..., sa.URL] = sa.URL.create) -> sa.URL:
    """Build the SQLAlchemy URL for a set of options.

    Raises
        ValueError: If the drivername has no known SQLAlchemy driver.
    """
    if options.drivername == 'sqlite':
        return url_creator(drivername='sqlite', database=options.database)

    try:
        drivername = _SERVER_DRIVERS[options.drivername]
    except KeyError:
        raise ValueError(f'Unsupported database type: {options.drivername}') from None

    query = {'connect_timeout': str(options.timeout)} if options.timeout else {}
    return url_creator(drivername=drivername,
                       username=options.username,
                       password=options.password,
                       host=options.hostname,
                       port=options.port,
                       database=options.database,
                       query=query)


def _engine_kwargs(options: DatabaseOptions) -> dict[str, Any]:
    if not options.use_pool:
        return {'poolclass': NullPool}
    return {
        'pool_size': options.pool_max_connections,
        'pool_recycle': options.pool_max_idle_time,
        'pool_timeout': options.pool_wait_timeout,
        'pool_pre_ping': True,
    }


def get_engine_for_options(options: DatabaseOptions,
                           engine_factory: Callable[..., Engine] = sa.create_engine,
                           **kwargs: Any) -> Engine:
    """Return the shared engine for `options`, creating it on first use.

    Extra keyword arguments are passed to `engine_factory` and override the
    pool settings derived from the options.
    """
    key = str(options)
    with _engines_lock:
        engine = _engines.get(key)
        if engine is None:
            engine = engine_factory(create_url_from_options(options),
                                    **(_engine_kwargs(options) | kwargs))
            _engines[key] = engine
            logger.debug(f'Created engine for {options.drivername} (pooled={options.use_pool})')
        return engine


def dispose_all_engines() -> None:
    """Dispose and forget every shared engine."""
    with _engines_lock:
        while _engines:
            _, engine = _engines.popitem()
            engine.dispose()
    logger.debug('Disposed all engines')


atexit.register(dispose_all_engines)


def configure_connection(sa_connection: sa.engine.Connection) -> None:
    """Apply the dialect's session settings to a freshly opened connection.
    """
    get_db_strategy(sa_connection).configure_connection(get_raw_connection(sa_connection))


@load_options(cls=DatabaseOptions)
def connect(options: DatabaseOptions | dict[str, Any] | str,
            config: Any | None = None, **kw: Any) -> sa.engine.Connection:
    """Open a configured SQLAlchemy connection.

    Args:
        options: DatabaseOptions, a dict of options, or the name of a
            section on `config`
        config: Configuration module holding named option sections
        **kw: Keyword arguments overriding individual options

    Returns
        SQLAlchemy Connection usable as a SQLAdapter driver
    """
    if isinstance(options, DatabaseOptions):
        for field in fields(options):
            kw.pop(field.name, None)
    else:
        options = load_options(cls=DatabaseOptions)(lambda o, c: o)(options, config, **kw)

    sa_connection = get_engine_for_options(options).connect()
    configure_connection(sa_connection)
    logger.debug(f'Connected to {options.drivername} database {options.database}')
    return sa_connection
