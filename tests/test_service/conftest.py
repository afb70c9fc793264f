"""
Configuration variables and fixtures for the service layer tests.
"""

import pytest_asyncio
import structlog

from cloudapi.config.settings import Settings
from cloudapi.service.local import LocalDirectory


@pytest_asyncio.fixture(scope="session")
def session_manager(server_settings: Settings, database):
    yield server_settings.async_manager()


@pytest_asyncio.fixture(scope="session")
def logger():
    yield structlog.get_logger()


@pytest_asyncio.fixture(scope="session")
def directory(session_manager):
    yield LocalDirectory(manager=session_manager)


@pytest_asyncio.fixture(scope="session", loop_scope="session")
async def account(directory):
    yield await directory.add_account(
        login="service-account", email="service@example.com"
    )


@pytest_asyncio.fixture(scope="session", loop_scope="session")
async def empty_account(directory):
    yield await directory.add_account(login="empty-account")


@pytest_asyncio.fixture(scope="session", loop_scope="session")
async def role(directory, account):
    yield await directory.add_role(account_id=account.uuid, name="operators")
