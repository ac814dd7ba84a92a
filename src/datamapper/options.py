"""
Connection options.
"""
from dataclasses import dataclass

from libb import ConfigOptions

__all__ = ['DatabaseOptions']

_REQUIRED_OPTIONS = {
    'postgresql': ['hostname', 'username', 'password', 'database', 'port'],
    'mysql': ['hostname', 'username', 'password', 'database', 'port'],
    'sqlite': ['database'],
}


@dataclass
class DatabaseOptions(ConfigOptions):
    """Connection options for `connect()`.

    `drivername` is one of `postgresql`, `sqlite` or `mysql`; the fields each
    one requires are checked on construction. Engines use NullPool unless
    `use_pool` is set, in which case the `pool_*` fields size the QueuePool.
    """
    drivername: str = 'postgresql'
    hostname: str = None
    username: str = None
    password: str = None
    database: str = None
    port: int = 0
    timeout: int = 0
    use_pool: bool = False
    pool_max_connections: int = 5
    pool_max_idle_time: int = 300
    pool_wait_timeout: int = 30

    def __post_init__(self):
        if self.drivername not in _REQUIRED_OPTIONS:
            raise ValueError(f'drivername must be one of: {list(_REQUIRED_OPTIONS)}')
        for field in _REQUIRED_OPTIONS[self.drivername]:
            if not getattr(self, field):
                raise ValueError(f'field {field} cannot be None or 0')
