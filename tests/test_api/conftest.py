"""
Fixtures for the HTTP API tests.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import select

from cloudapi.api.app import create_app
from cloudapi.config.settings import Settings
from cloudapi.database.account import Account
from cloudapi.database.role import Role

LOGIN = "acct1-login"


@pytest.fixture(scope="session")
def client(server_settings: Settings, database):
    settings = server_settings.model_copy(update={"create_accounts": [LOGIN]})

    with TestClient(create_app(settings)) as client:
        yield client


@pytest.fixture(scope="session")
def account(client, database):
    with database.session() as conn:
        account = conn.execute(
            select(Account).where(Account.login == LOGIN)
        ).scalar_one()

    yield account.to_core()


@pytest.fixture(scope="session")
def role(account, database):
    with database.session() as conn:
        with conn.begin():
            role = Role(account_uuid=account.uuid, name="api-operators")
            conn.add(role)

    yield role.uuid
