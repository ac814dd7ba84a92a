import pathlib
import site

import pytest
from datamapper.mapper import clear_data_class_cache

HERE = pathlib.Path(pathlib.Path(__file__).resolve()).parent
site.addsitedir(HERE)


@pytest.fixture(autouse=True)
def clear_caches():
    """Clear resolved data classes before and after each test to ensure test isolation."""
    clear_data_class_cache()
    yield
    clear_data_class_cache()


pytest_plugins = [
    'tests.fixtures.mocks',
    'tests.fixtures.sqlite',
    'tests.fixtures.postgres',
]
