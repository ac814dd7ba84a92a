"""
Data Mapper for SQL databases.

A `Mapper` converts between rows held by an `Adapter` and `Data` objects that
track which of their fields changed, so updates only write what was
modified:

    import datamapper as dm

    class AppMapper(dm.Mapper):
        pass

    @AppMapper.register
    class User(dm.Data):
        pass

    cn = dm.connect({'drivername': 'sqlite', 'database': 'app.db'})
    mapper = AppMapper(dm.SQLAdapter(cn))

    user = mapper.create('user', {'name': 'kentaro', 'age': 34})
    user.set('age', 35)
    mapper.update(user)
    mapper.delete(user)
"""
__version__ = '0.1.0'

from datamapper.adapters import Adapter, SQLAdapter
from datamapper.connection import connect
from datamapper.data import Data, Serializable
from datamapper.exceptions import ArgumentError, ConfigurationError
from datamapper.exceptions import ContractError, DataClassNotFound, DriverError
from datamapper.exceptions import MapperError, SchemaNotFound
from datamapper.mapper import Mapper, to_class_name, to_table_name
from datamapper.options import DatabaseOptions
from datamapper.schema import Schema
from datamapper.sql import SQLBuilder

__all__ = [
    'Adapter',
    'SQLAdapter',
    'Mapper',
    'Data',
    'Serializable',
    'Schema',
    'SQLBuilder',
    'connect',
    'DatabaseOptions',
    'to_class_name',
    'to_table_name',
    'MapperError',
    'ConfigurationError',
    'DataClassNotFound',
    'SchemaNotFound',
    'ArgumentError',
    'ContractError',
    'DriverError',
]
