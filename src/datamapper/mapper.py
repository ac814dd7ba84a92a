"""
Mapper between stored rows and Data objects.

A mapper delegates storage to its adapter and turns what comes back into
instances of the Data subclass registered for each collection. Data classes
are registered per mapper type; the class for a collection is looked up by
the PascalCase form of the collection name:

    class MyMapper(Mapper):
        pass

    @MyMapper.register
    class UserProfile(Data):
        pass

    mapper = MyMapper(SQLAdapter(cn))
    data = mapper.create('user_profile', {'name': 'kentaro', 'age': 34})
    data.set('age', 35)
    mapper.update(data)
"""
import logging
import re
import threading
from collections.abc import Callable, Mapping, Sequence
from typing import Any, TypeVar

import cachetools
from cachetools.keys import hashkey
from datamapper.adapters.base import Adapter
from datamapper.data import Data, Serializable
from datamapper.exceptions import ConfigurationError, ContractError
from datamapper.exceptions import DataClassNotFound, SchemaNotFound

logger = logging.getLogger(__name__)

D = TypeVar('D', bound=type[Data])

# mapper type -> class name -> Data subclass
_DATA_CLASSES: dict[type, dict[str, type[Data]]] = {}
_resolved_cache: cachetools.LRUCache = cachetools.LRUCache(maxsize=256)
_resolved_lock = threading.RLock()

_CAMEL_BOUNDARY = re.compile(r'(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])')


def to_class_name(name: str) -> str:
    """Convert a collection name to its Data class name.

    >>> to_class_name('user_profile')
    'UserProfile'
    """
    if not name:
        return name
    return ''.join(part[:1].upper() + part[1:] for part in name.split('_'))


def to_table_name(class_name: str) -> str:
    """Convert a Data class name to its collection name.

    >>> to_table_name('UserProfile')
    'user_profile'
    """
    return _CAMEL_BOUNDARY.sub('_', class_name).lower()


@cachetools.cached(cache=_resolved_cache, key=lambda mapper_cls, name: hashkey(mapper_cls, name),
                   lock=_resolved_lock)
def _resolve_data_class(mapper_cls: type, name: str) -> type[Data]:
    class_name = to_class_name(name)
    data_class = _DATA_CLASSES.get(mapper_cls, {}).get(class_name)
    if data_class is None:
        raise DataClassNotFound(
            f'no such data class: {class_name} for {name} in {mapper_cls.__qualname__}')
    logger.debug(f'Resolved {name} to {data_class.__qualname__} for {mapper_cls.__qualname__}')
    return data_class


def clear_data_class_cache() -> None:
    """Forget every cached collection -> Data class resolution."""
    with _resolved_lock:
        _resolved_cache.clear()


class Mapper:
    """Data Mapper.

    Args:
        adapter: Adapter performing the storage operations
    """

    def __init__(self, adapter: Adapter | None = None) -> None:
        self._adapter = adapter

    @property
    def adapter(self) -> Adapter:
        """The adapter.

        Raises
            ConfigurationError: If no adapter was set.
        """
        if self._adapter is None:
            raise ConfigurationError('adapter not set')
        return self._adapter

    @adapter.setter
    def adapter(self, adapter: Adapter) -> None:
        self._adapter = adapter

    @classmethod
    def register(cls, data_class: D | None = None, *,
                 table: str | None = None) -> D | Callable[[D], D]:
        """Register a Data subclass for this mapper type.

        Usable as `@MyMapper.register` or `@MyMapper.register(table='users')`.
        The collection name is `table`, else the class's own `table`
        attribute, else the snake_case form of the class name.

        A Data class is bound to one collection. It may be registered on
        several mapper types, but always under the same table.

        Raises
            ContractError: If the class is not a Data subclass.
            ConfigurationError: If the class is already bound to another table.
        """
        def decorator(data_class: D) -> D:
            if not (isinstance(data_class, type) and issubclass(data_class, Data)):
                raise ContractError(f'{data_class!r} is not a Data subclass')
            bound = data_class.__dict__.get('table')
            name = table or bound or to_table_name(data_class.__name__)
            if bound and bound != name:
                raise ConfigurationError(
                    f'{data_class.__qualname__} is bound to table {bound}, cannot register as {name}')
            data_class.table = name
            _DATA_CLASSES.setdefault(cls, {})[to_class_name(name)] = data_class
            clear_data_class_cache()
            logger.debug(f'Registered {data_class.__qualname__} as {name} for {cls.__qualname__}')
            return data_class

        if data_class is None:
            return decorator
        return decorator(data_class)

    def create(self, name: str, values: Mapping[str, Any]) -> Data:
        """Create a row and return it as a Data object.
        """
        row = self.adapter.create(name, values)
        return self.map_data(name, row)

    def find(self, name: str, where: Mapping[str, Any],
             options: Mapping[str, Any] | None = None) -> Data | None:
        """Return the first row matching `where` as a Data object, or None.
        """
        row = self.adapter.find(name, where, options)
        if row is None:
            return None
        return self.map_data(name, row)

    def search(self, name: str, where: Mapping[str, Any],
               options: Mapping[str, Any] | None = None) -> list[Data]:
        """Return every row matching `where` as Data objects.

        Raises
            ContractError: If the adapter does not return a sequence.
        """
        rows = self.adapter.search(name, where, options)
        if not isinstance(rows, Sequence) or isinstance(rows, (str, bytes)):
            raise ContractError(
                f'results returned from search() must be a sequence, got {type(rows).__name__}')
        return [self.map_data(name, row) for row in rows]

    def update(self, data: Data) -> Any | None:
        """Write the changed fields of `data`.

        Nothing is sent when no field changed. Changes are discarded only
        after the adapter call returns, so a failed update can be retried.

        Returns
            The adapter's execution result, or None when nothing changed
        """
        if not data.is_changed():
            logger.debug(f'Skipping update of unchanged {type(data).__name__}')
            return None

        params = self.mapped_params(data)
        result = self.adapter.update(data.table, params['set'], params['where'])
        data.discard_changes()
        return result

    def delete(self, data: Data) -> Any:
        """Delete the row backing `data`.
        """
        params = self.mapped_params(data)
        return self.adapter.delete(data.table, params['where'])

    def data_class(self, name: str) -> type[Data]:
        """Data subclass registered for collection `name`.

        Raises
            DataClassNotFound: If no class is registered for this mapper type.
        """
        return _resolve_data_class(type(self), name)

    def map_data(self, name: str, raw: Mapping[str, Any] | Serializable) -> Data:
        """Build the collection's Data object from a stored row.

        Raises
            ContractError: If `raw` is neither a mapping nor serializable.
        """
        data_class = self.data_class(name)

        if not isinstance(raw, Mapping):
            if not isinstance(raw, Serializable):
                raise ContractError('structured data must have as_serializable method')
            raw = raw.as_serializable()

        return data_class(raw)

    def mapped_params(self, data: Data) -> dict[str, dict[str, Any]]:
        """Compute the `set` and `where` parts for writing `data`.

        `set` holds the changed fields, `where` the current primary key
        values.

        Raises
            SchemaNotFound: If the adapter has no schema for the table.
            ConfigurationError: If the table has no primary key, or a primary
                key value is missing from `data`.
        """
        table = data.table
        schema = self.adapter.schemata().get(table)
        if schema is None:
            raise SchemaNotFound(f'no such table: {table}')

        primary_keys = schema.primary_keys
        if not primary_keys:
            raise ConfigurationError(f'tables without primary keys are not supported: {table}')

        where = {key: data.get(key) for key in primary_keys if data.get(key) is not None}
        if not where:
            raise ConfigurationError('where clause is empty')
        if len(where) != len(primary_keys):
            missing = [key for key in primary_keys if key not in where]
            raise ConfigurationError(f'incomplete primary key for {table}: missing {missing}')

        return {'set': data.changes(), 'where': where}
