"""
Adapter contract.

An adapter performs CRUD operations against a datasource on behalf of a
`Mapper`. Every operation names the collection (table) it works on first.
Subclasses override the capabilities below; the defaults raise
`NotImplementedError` so an incomplete adapter fails at the first call that
needs the missing piece.

Rows returned by `create`, `find` and `search` are plain mappings, or objects
exposing `as_serializable()` that returns one.
"""
import logging
from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from datamapper.exceptions import ConfigurationError

if TYPE_CHECKING:
    from datamapper.schema import Schema

logger = logging.getLogger(__name__)


class Adapter:
    """Base class for storage adapters.

    Args:
        driver: Handle used to reach the datasource, or a zero-argument
            callable returning one. A callable is invoked again on every
            access so pooled handles can be checked out per operation.
    """

    def __init__(self, driver: Any | Callable[[], Any] | None = None) -> None:
        self._driver = driver

    @property
    def driver(self) -> Any:
        """Resolve the driver handle.

        Raises
            ConfigurationError: If no driver was set.
        """
        if self._driver is None:
            raise ConfigurationError('driver not set')
        if _is_factory(self._driver):
            return self._driver()
        return self._driver

    @driver.setter
    def driver(self, driver: Any | Callable[[], Any]) -> None:
        self._driver = driver

    @property
    def driver_is_factory(self) -> bool:
        """True when the driver is a callable producing handles."""
        return self._driver is not None and _is_factory(self._driver)

    def create(self, name: str, values: Mapping[str, Any]) -> Mapping[str, Any]:
        """Persist a new row and return it, including any generated key.
        """
        raise NotImplementedError('create() method must be implemented by subclass')

    def find(self, name: str, where: Mapping[str, Any],
             options: Mapping[str, Any] | None = None) -> Mapping[str, Any] | None:
        """Return the first row matching `where`, or None.
        """
        raise NotImplementedError('find() method must be implemented by subclass')

    def search(self, name: str, where: Mapping[str, Any],
               options: Mapping[str, Any] | None = None) -> Sequence[Mapping[str, Any]]:
        """Return every row matching `where`.
        """
        raise NotImplementedError('search() method must be implemented by subclass')

    def update(self, name: str, values: Mapping[str, Any],
               where: Mapping[str, Any]) -> Any:
        """Set `values` on rows matching `where`.

        Returns
            Execution result exposing `rowcount`
        """
        raise NotImplementedError('update() method must be implemented by subclass')

    def delete(self, name: str, where: Mapping[str, Any]) -> Any:
        """Delete rows matching `where`.

        Returns
            Execution result exposing `rowcount`
        """
        raise NotImplementedError('delete() method must be implemented by subclass')

    def schemata(self) -> Mapping[str, 'Schema']:
        """Return schema metadata keyed by table name.
        """
        raise NotImplementedError('schemata() method must be implemented by subclass')

    def all(self, name: str, where: Mapping[str, Any],
            options: Mapping[str, Any] | None = None) -> Sequence[Mapping[str, Any]]:
        """Alias of `search`."""
        return self.search(name, where, options)

    def destroy(self, name: str, where: Mapping[str, Any]) -> Any:
        """Alias of `delete`."""
        return self.delete(name, where)


def _is_factory(driver: Any) -> bool:
    """A callable that is not itself a connection handle."""
    if hasattr(driver, 'exec_driver_sql') or hasattr(driver, 'cursor'):
        return False
    return callable(driver)
