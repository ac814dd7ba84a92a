"""
Storage adapters.
"""
from datamapper.adapters.base import Adapter as Adapter
from datamapper.adapters.sql import SQLAdapter as SQLAdapter

__all__ = ['Adapter', 'SQLAdapter']
