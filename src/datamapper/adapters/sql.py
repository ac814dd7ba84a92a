"""
SQL adapter.

Implements the adapter contract on top of a SQLAlchemy `Connection`,
executing statements produced by `SQLBuilder` through the DBAPI layer with
positional binds. Driver errors (constraint violations, lost connections)
propagate unchanged.

    cn = datamapper.connect({'drivername': 'sqlite', 'database': 'app.db'})
    adapter = SQLAdapter(cn)

    # or check out a connection per operation; it is committed when the
    # operation succeeds and closed either way
    adapter = SQLAdapter(engine.connect)
"""
import logging
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from types import MappingProxyType
from typing import Any

from datamapper.adapters.base import Adapter
from datamapper.schema import Schema, inspect_schemata
from datamapper.sql import SQLBuilder
from datamapper.utils import get_dialect_name
from sqlalchemy.engine import Connection, CursorResult

from libb import attrdict

logger = logging.getLogger(__name__)


class SQLAdapter(Adapter):
    """Adapter for SQL databases reached through SQLAlchemy.
    """

    def __init__(self, driver: Any = None) -> None:
        super().__init__(driver)
        self._sql: SQLBuilder | None = None
        self._schemata: dict[str, Schema] | None = None

    @contextmanager
    def connection(self) -> Iterator[Connection]:
        """Connection for one operation.

        A handle driver is yielded as is and left to the caller. A factory
        driver is called once; its connection is committed if the operation
        succeeds and closed afterwards.
        """
        if not self.driver_is_factory:
            yield self.driver
            return

        cn = self.driver
        try:
            yield cn
            cn.commit()
        finally:
            cn.close()

    def builder(self, cn: Connection) -> SQLBuilder:
        """Statement builder for the driver's dialect, created on first use."""
        if self._sql is None:
            self._sql = SQLBuilder(get_dialect_name(cn))
        return self._sql

    def create(self, name: str, values: Mapping[str, Any]) -> attrdict:
        """Insert a row.

        When the table has a single primary key column and `values` does not
        supply it, the generated id is read back and added to the result.
        """
        values = dict(values)
        with self.connection() as cn:
            schema = self._load_schemata(cn).get(name)
            primary_keys = schema.primary_keys if schema else ()

            sql, binds = self.builder(cn).insert(name, values)
            result = self.execute(cn, sql, binds)

            if len(primary_keys) == 1 and values.get(primary_keys[0]) is None:
                values[primary_keys[0]] = self.last_insert_id(cn, name, result)

        return attrdict(values)

    def find(self, name: str, where: Mapping[str, Any],
             options: Mapping[str, Any] | None = None) -> attrdict | None:
        """Return the first matching row, or None.
        """
        options = dict(options or {})
        options.setdefault('limit', 1)
        with self.connection() as cn:
            sql, binds = self.select(cn, name, where, options)
            row = self.execute(cn, sql, binds).mappings().first()
        return attrdict(row) if row is not None else None

    def search(self, name: str, where: Mapping[str, Any],
               options: Mapping[str, Any] | None = None) -> list[attrdict]:
        """Return all matching rows in the requested order.
        """
        with self.connection() as cn:
            sql, binds = self.select(cn, name, where, options)
            return [attrdict(row) for row in self.execute(cn, sql, binds).mappings()]

    def update(self, name: str, values: Mapping[str, Any],
               where: Mapping[str, Any]) -> CursorResult:
        with self.connection() as cn:
            sql, binds = self.builder(cn).update(name, values, where)
            return self.execute(cn, sql, binds)

    def delete(self, name: str, where: Mapping[str, Any]) -> CursorResult:
        with self.connection() as cn:
            sql, binds = self.builder(cn).delete(name, where)
            return self.execute(cn, sql, binds)

    def schemata(self) -> Mapping[str, Schema]:
        """Primary key metadata for every table, read once per adapter.
        """
        if self._schemata is None:
            with self.connection() as cn:
                self._load_schemata(cn)
        return MappingProxyType(self._schemata)

    def _load_schemata(self, cn: Connection) -> dict[str, Schema]:
        if self._schemata is None:
            self._schemata = inspect_schemata(cn)
        return self._schemata

    def select(self, cn: Connection, name: str, where: Mapping[str, Any] | None,
               options: Mapping[str, Any] | None = None) -> tuple[str, list[Any]]:
        fields: Sequence[str] | None = (options or {}).get('fields')
        return self.builder(cn).select(name, fields, where, options)

    def execute(self, cn: Connection, sql: str, binds: Sequence[Any]) -> CursorResult:
        """Run a statement with positional binds on `cn`.
        """
        logger.debug(f'Executing: {sql} with {len(binds)} parameters')
        return cn.exec_driver_sql(sql, tuple(binds))

    def last_insert_id(self, cn: Connection, table: str, result: CursorResult) -> Any | None:
        """Id generated by the INSERT that produced `result`, if the dialect reports one.
        """
        return self.builder(cn).strategy.last_insert_id(cn, table, result)
