import pytest
from fastapi.testclient import TestClient

from catalog.api import create_app
from catalog.library import Library

@pytest.fixture
def db_file(tmp_path, request):
    # A separate database file for every test
    return str(tmp_path / f"test_{request.node.name}.db")

@pytest.fixture
def lib(db_file):
    lib = Library(db_file=db_file)
    lib.initialize()
    yield lib
    lib.close()

@pytest.fixture
def client(lib):
    # Server errors are rendered by the app's own handlers, not re-raised into the test
    with TestClient(create_app(lib), raise_server_exceptions=False) as test_client:
        yield test_client
