"""
A simple CLI for running the server and provisioning the local directory.
"""

import os
import sys

import uvicorn
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

USAGE = (
    "Supported commands are cloudapi run dev, cloudapi run prod, cloudapi setup, "
    "cloudapi account {login} [email] and cloudapi role {login} {role_name}"
)


def run_server(**kwargs):
    for k, v in kwargs.items():
        os.environ[k] = v

    uvicorn.run("cloudapi.api.app:app", host="0.0.0.0")


def create_account(login: str, email: str | None = None):
    from cloudapi.config.settings import Settings
    from cloudapi.database.account import Account

    manager = Settings().sync_manager()

    try:
        with manager.session() as conn:
            with conn.begin():
                account = Account(login=login, email=email)
                conn.add(account)
    except IntegrityError:
        print(f"Account {login} already exists")
        exit(1)

    print(f"Created account {login}: {account.uuid}")


def create_role(login: str, name: str):
    from cloudapi.config.settings import Settings
    from cloudapi.database.account import Account
    from cloudapi.database.role import Role

    manager = Settings().sync_manager()

    try:
        with manager.session() as conn:
            with conn.begin():
                account = conn.execute(
                    select(Account).where(Account.login == login)
                ).scalar_one_or_none()

                if account is None:
                    print(f"Account {login} does not exist")
                    exit(1)

                role = Role(account_uuid=account.uuid, name=name)
                conn.add(role)
    except IntegrityError:
        print(f"Role {name} already exists for {login}")
        exit(1)

    print(f"Created role {name} for {login}: {role.uuid}")


def main():
    try:
        command = sys.argv[1]
    except IndexError:
        print(USAGE)
        exit(1)

    if command == "run":
        try:
            dev = sys.argv[2] == "dev"
            prod = sys.argv[2] == "prod"
        except IndexError:
            print(USAGE)
            exit(1)

        if dev:
            from testcontainers.postgres import PostgresContainer

            with PostgresContainer() as container:
                print(
                    f"Container details: username={container.username}, password={container.password}, port={container.get_exposed_port(container.port)}"
                )

                environment = {
                    "CLOUDAPI_DATABASE_TYPE": "postgres",
                    "CLOUDAPI_DATABASE_USER": container.username,
                    "CLOUDAPI_DATABASE_PASSWORD": container.password,
                    "CLOUDAPI_DATABASE_PORT": str(
                        container.get_exposed_port(container.port)
                    ),
                    "CLOUDAPI_DATABASE_HOST": "localhost",
                    "CLOUDAPI_DATABASE_DB": container.dbname,
                    "CLOUDAPI_DATABASE_ECHO": "False",
                    "CLOUDAPI_CREATE_TABLES": "True",
                    "CLOUDAPI_CREATE_ACCOUNTS": '["dev"]',
                }

                run_server(**environment)
        elif prod:
            run_server()
        else:
            print(USAGE)
            exit(1)
    elif command == "setup":
        from cloudapi.config.settings import Settings

        Settings().sync_manager().create_all()

        print("Setup complete, directory tables created")
        exit(0)
    elif command == "account" and len(sys.argv) > 2:
        create_account(
            login=sys.argv[2], email=sys.argv[3] if len(sys.argv) > 3 else None
        )
    elif command == "role" and len(sys.argv) > 3:
        create_role(login=sys.argv[2], name=sys.argv[3])
    else:
        print(USAGE)
        exit(1)
