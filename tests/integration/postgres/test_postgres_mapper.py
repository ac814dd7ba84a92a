"""
PostgreSQL mapper round trips against a testcontainers database.
"""
import datamapper as dm
import pytest
from datamapper import Data, DriverError, Mapper

pytestmark = [pytest.mark.postgres, pytest.mark.usefixtures('psql_docker')]


class PostgresMapper(Mapper):
    """Mapper type for the PostgreSQL integration tables."""


@PostgresMapper.register(table='test')
class TestRow(Data):
    __test__ = False


@PostgresMapper.register
class Membership(Data):
    pass


@pytest.fixture
def pg_mapper(pg_conn):
    return PostgresMapper(dm.SQLAdapter(pg_conn))


def test_create_reads_sequence(pg_mapper):
    first = pg_mapper.create('test', {'value': 'a'})
    second = pg_mapper.create('test', {'value': 'b'})

    assert first.get('id') == 1
    assert second.get('id') == 2


def test_create_update_find(pg_mapper, pg_conn):
    data = pg_mapper.create('test', {'value': 'test create'})
    data.set('value', 'test update')

    result = pg_mapper.update(data)

    assert result.rowcount == 1
    assert not data.is_changed()
    found = pg_mapper.find('test', {'id': data.get('id')})
    assert found.get('value') == 'test update'
    assert pg_conn.exec_driver_sql('select value from test').scalar() == 'test update'


def test_search_and_delete(pg_mapper):
    for value in ('a', 'b', 'c'):
        pg_mapper.create('test', {'value': value})

    rows = pg_mapper.search('test', {}, {'order_by': 'id DESC', 'limit': 2})
    assert [row.get('value') for row in rows] == ['c', 'b']

    pg_mapper.delete(rows[0])
    assert [row.get('value') for row in pg_mapper.search('test', {}, {'order_by': 'id'})] == ['a', 'b']


def test_composite_key(pg_mapper):
    data = pg_mapper.create('membership', {'group_id': 1, 'user_id': 2, 'role': 'member'})
    assert data.as_serializable() == {'group_id': 1, 'user_id': 2, 'role': 'member'}

    data.set('role', 'owner')
    pg_mapper.update(data)

    found = pg_mapper.find('membership', {'group_id': 1, 'user_id': 2})
    assert found.get('role') == 'owner'


def test_duplicate_key_raises_driver_error(pg_mapper):
    pg_mapper.create('membership', {'group_id': 1, 'user_id': 2})
    with pytest.raises(DriverError):
        pg_mapper.create('membership', {'group_id': 1, 'user_id': 2})
