"""
In-memory adapter and mapper types for unit tests.

Usage:
    def test_update(memory_mapper):
        entry = memory_mapper.create('entry', {'value': 'a'})
"""
import itertools
from types import SimpleNamespace

import pytest
from datamapper import Adapter, Data, Mapper, Schema
from datamapper.sql import parse_order_by


class MemoryAdapter(Adapter):
    """Adapter keeping rows in lists, one per table.

    Args:
        primary_keys: Mapping of table name to its primary key columns
    """

    def __init__(self, primary_keys):
        super().__init__()
        self.tables = {name: [] for name in primary_keys}
        self._schemata = {name: Schema(table=name, primary_keys=tuple(keys))
                          for name, keys in primary_keys.items()}
        self._ids = itertools.count(1)

    def create(self, name, values):
        row = dict(values)
        keys = self._schemata[name].primary_keys
        if len(keys) == 1 and row.get(keys[0]) is None:
            row[keys[0]] = next(self._ids)
        self.tables[name].append(row)
        return dict(row)

    def find(self, name, where, options=None):
        rows = self.search(name, where, options)
        return rows[0] if rows else None

    def search(self, name, where, options=None):
        rows = [dict(row) for row in self.tables[name] if _matches(row, where)]
        order_by = (options or {}).get('order_by')
        if order_by:
            for column, direction in reversed(parse_order_by(order_by)):
                rows.sort(key=lambda row: row[column], reverse=direction == 'DESC')
        return rows

    def update(self, name, values, where):
        rows = [row for row in self.tables[name] if _matches(row, where)]
        for row in rows:
            row.update(values)
        return SimpleNamespace(rowcount=len(rows))

    def delete(self, name, where):
        keep = [row for row in self.tables[name] if not _matches(row, where)]
        removed = len(self.tables[name]) - len(keep)
        self.tables[name] = keep
        return SimpleNamespace(rowcount=removed)

    def schemata(self):
        return self._schemata


def _matches(row, where):
    return all(row.get(column) == value for column, value in (where or {}).items())


class AppMapper(Mapper):
    """Mapper type with the test collections registered."""


@AppMapper.register
class Entry(Data):
    pass


@AppMapper.register
class UserProfile(Data):
    pass


@AppMapper.register
class Membership(Data):
    pass


@AppMapper.register
class Keyless(Data):
    pass


@pytest.fixture
def memory_adapter():
    """Adapter with `entry` and `user_profile` keyed by `id`, `membership`
    keyed by (`group_id`, `user_id`) and `keyless` without a primary key.
    """
    return MemoryAdapter({
        'entry': ['id'],
        'user_profile': ['id'],
        'membership': ['group_id', 'user_id'],
        'keyless': [],
    })


@pytest.fixture
def memory_mapper(memory_adapter):
    """AppMapper backed by the in-memory adapter."""
    return AppMapper(memory_adapter)


def _create_simple_mock_connection(connection_type='postgresql'):
    """
    Create a simple mock database connection with the specified connection type.

    Args:
        connection_type: Database type ('postgresql', 'sqlite', 'unknown')

    Returns
        Simple mock connection object that will pass type detection
    """
    class MockConn:
        pass

    conn = MockConn()

    if connection_type == 'postgresql':
        conn.__class__.__module__ = 'psycopg'
    elif connection_type == 'sqlite':
        conn.__class__.__module__ = 'sqlite3'
    elif connection_type == 'unknown':
        conn.__class__.__module__ = 'unknown_db'
    conn.__class__.__qualname__ = 'Connection'
    conn.__class__.__name__ = 'Connection'

    return conn


@pytest.fixture
def create_simple_mock_connection():
    """
    Fixture that provides a factory function to create simple mock connections.

    Example usage:
        def test_connection_detection(create_simple_mock_connection):
            pg_conn = create_simple_mock_connection('postgresql')
    """
    def factory(connection_type='postgresql'):
        return _create_simple_mock_connection(connection_type)

    return factory
