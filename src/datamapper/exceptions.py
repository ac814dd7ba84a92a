"""
Mapper-specific exception classes.
"""
import sqlalchemy as sa


class MapperError(Exception):
    """Base class for all datamapper errors.
    """


class ConfigurationError(MapperError):
    """Missing adapter or driver, unsupported table layout, or a statement
    that would run without a where clause.
    """


class DataClassNotFound(MapperError, LookupError):
    """No Data subclass is registered for a collection.
    """


class SchemaNotFound(MapperError, LookupError):
    """No schema metadata exists for a table.
    """


class ArgumentError(MapperError, ValueError):
    """Malformed call arguments.
    """


class ContractError(MapperError, TypeError):
    """An adapter or input value does not honor the mapper contract.
    """


# Statements run through SQLAlchemy, which wraps every DBAPI driver error
# (sqlite3, psycopg, pymysql) in DBAPIError. Passed through untouched.
DriverError = (
    sa.exc.DBAPIError,
    )
