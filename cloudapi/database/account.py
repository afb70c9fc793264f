"""
Account ORM
"""

from sqlmodel import Field, SQLModel

from cloudapi.core.account import AccountData
from cloudapi.core.uuid import new_id


class Account(SQLModel, table=True):
    uuid: str = Field(primary_key=True, default_factory=new_id)

    login: str = Field(unique=True)
    email: str | None = None

    def to_core(self) -> AccountData:
        return AccountData(uuid=self.uuid, login=self.login, email=self.email)
