"""
Core configuration
"""

import pytest_asyncio

from cloudapi.config.settings import Settings


@pytest_asyncio.fixture(scope="session")
def database_file(tmp_path_factory):
    yield {
        "database_type": "sqlite",
        "database_db": str(tmp_path_factory.mktemp("directory") / "cloudapi.db"),
        "database_echo": False,
    }


@pytest_asyncio.fixture(scope="session")
def server_settings(database_file):
    yield Settings(**database_file)


@pytest_asyncio.fixture(scope="session")
def database(server_settings: Settings):
    manager = server_settings.sync_manager()
    manager.create_all()
    yield manager
    manager.drop_all()
