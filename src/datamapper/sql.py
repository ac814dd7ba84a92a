"""
Parameterized statement generation.

`SQLBuilder` turns a table name plus column mappings, conditions and options
into `(sql, binds)` pairs for INSERT, SELECT, UPDATE and DELETE. Values are
always passed as positional binds in the placeholder style of the active
dialect; only quoted identifiers and validated keywords are written into the
statement text.

Conditions are equality-only mappings of column to value:

    {'id': 1}            -> "id" = ?
    {'deleted': None}    -> "deleted" IS NULL
    {'id': [1, 2, 3]}    -> "id" IN (?, ?, ?)
    {'id': []}           -> 1 = 0
"""
import logging
import re
from collections.abc import Mapping, Sequence
from typing import Any

from datamapper.exceptions import ArgumentError
from datamapper.strategy import get_strategy

from libb import issequence

logger = logging.getLogger(__name__)

_ORDER_TERM = re.compile(r'^\s*([A-Za-z_][\w.]*)(?:\s+(ASC|DESC))?\s*$', re.IGNORECASE)


def quote_identifier(identifier: str, dialect: str = 'postgresql') -> str:
    """Safely quote a table or column name for the dialect.
    """
    return get_strategy(dialect).quote_identifier(identifier)


def make_placeholders(count: int, dialect: str = 'postgresql') -> str:
    """Return `count` comma separated placeholders for the dialect.
    """
    return get_strategy(dialect).make_placeholders(count)


def _is_value_list(value: Any) -> bool:
    return issequence(value) and not isinstance(value, (str, bytes))


def parse_order_by(order_by: str | Sequence[str]) -> list[tuple[str, str | None]]:
    """Split an order specification into (column, direction) pairs.

    Accepts `'id DESC'`, `'name, id desc'` or `['name', 'id DESC']`.

    Raises
        ArgumentError: If a term is not a column optionally followed by
        ASC or DESC.
    """
    terms = [order_by] if isinstance(order_by, str) else list(order_by)
    parsed = []
    for term in terms:
        if not isinstance(term, str):
            raise ArgumentError(f'order_by term must be a string, got {type(term).__name__}')
        for part in term.split(','):
            match = _ORDER_TERM.match(part)
            if not match:
                raise ArgumentError(f'Invalid order_by term: {part.strip()!r}')
            column, direction = match.groups()
            parsed.append((column, direction.upper() if direction else None))
    return parsed


def _check_count(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ArgumentError(f'{name} must be a non-negative integer, got {value!r}')
    return value


class SQLBuilder:
    """Statement builder scoped to one dialect.
    """

    def __init__(self, dialect: str) -> None:
        self.dialect = dialect
        self.strategy = get_strategy(dialect)

    def quote(self, identifier: str) -> str:
        return self.strategy.quote_identifier(identifier)

    def insert(self, table: str, values: Mapping[str, Any]) -> tuple[str, list[Any]]:
        """Build an INSERT for a single row.
        """
        quoted_table = self.quote(table)
        if not values:
            return f'INSERT INTO {quoted_table} {self.strategy.empty_insert_sql}', []

        columns = list(values)
        quoted_columns = ', '.join(self.quote(col) for col in columns)
        placeholders = self.strategy.make_placeholders(len(columns))
        sql = f'INSERT INTO {quoted_table} ({quoted_columns}) VALUES ({placeholders})'
        return sql, [values[col] for col in columns]

    def select(self, table: str, fields: Sequence[str] | None = None,
               where: Mapping[str, Any] | None = None,
               options: Mapping[str, Any] | None = None) -> tuple[str, list[Any]]:
        """Build a SELECT.

        Args:
            table: Table name
            fields: Columns to select, all columns when empty
            where: Equality conditions
            options: `order_by`, `limit` and `offset`

        Returns
            Tuple of (sql, binds)
        """
        options = options or {}
        if fields:
            select_clause = ', '.join(self.quote(col) for col in fields)
        else:
            select_clause = '*'
        sql = f'SELECT {select_clause} FROM {self.quote(table)}'

        where_sql, binds = self.where_clause(where)
        if where_sql:
            sql += f' WHERE {where_sql}'

        if options.get('order_by'):
            sql += f" ORDER BY {self.order_by_clause(options['order_by'])}"

        limit = options.get('limit')
        offset = options.get('offset')
        if limit is not None:
            sql += f" LIMIT {_check_count('limit', limit)}"
        if offset is not None:
            if limit is None and self.dialect in {'sqlite', 'mysql'}:
                # both require LIMIT before OFFSET
                sql += ' LIMIT -1' if self.dialect == 'sqlite' else ' LIMIT 18446744073709551615'
            sql += f" OFFSET {_check_count('offset', offset)}"

        return sql, binds

    def update(self, table: str, values: Mapping[str, Any],
               where: Mapping[str, Any] | None = None) -> tuple[str, list[Any]]:
        """Build an UPDATE setting `values` on rows matching `where`.

        Raises
            ArgumentError: If there is nothing to set.
        """
        if not values:
            raise ArgumentError(f'No columns to update in {table}')

        columns = list(values)
        p = self.strategy.placeholder
        set_clause = ', '.join(f'{self.quote(col)} = {p}' for col in columns)
        sql = f'UPDATE {self.quote(table)} SET {set_clause}'
        binds = [values[col] for col in columns]

        where_sql, where_binds = self.where_clause(where)
        if where_sql:
            sql += f' WHERE {where_sql}'
        return sql, binds + where_binds

    def delete(self, table: str, where: Mapping[str, Any] | None = None) -> tuple[str, list[Any]]:
        """Build a DELETE for rows matching `where`.
        """
        sql = f'DELETE FROM {self.quote(table)}'
        where_sql, binds = self.where_clause(where)
        if where_sql:
            sql += f' WHERE {where_sql}'
        return sql, binds

    def where_clause(self, where: Mapping[str, Any] | None) -> tuple[str, list[Any]]:
        """Build the body of a WHERE clause (without the keyword).
        """
        if not where:
            return '', []

        p = self.strategy.placeholder
        terms = []
        binds: list[Any] = []
        for column, value in where.items():
            quoted = self.quote(column)
            if value is None:
                terms.append(f'{quoted} IS NULL')
            elif _is_value_list(value):
                value = list(value)
                if not value:
                    terms.append('1 = 0')
                    continue
                terms.append(f'{quoted} IN ({self.strategy.make_placeholders(len(value))})')
                binds.extend(value)
            else:
                terms.append(f'{quoted} = {p}')
                binds.append(value)
        return ' AND '.join(terms), binds

    def order_by_clause(self, order_by: str | Sequence[str]) -> str:
        """Build the body of an ORDER BY clause (without the keywords).
        """
        terms = []
        for column, direction in parse_order_by(order_by):
            quoted = '.'.join(self.quote(part) for part in column.split('.'))
            terms.append(f'{quoted} {direction}' if direction else quoted)
        return ', '.join(terms)
