"""
Role ORM. Roles are only referenced by groups here; their policies live
elsewhere.
"""

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from cloudapi.core.uuid import new_id


class Role(SQLModel, table=True):
    __table_args__ = (UniqueConstraint("account_uuid", "name"),)

    uuid: str = Field(primary_key=True, default_factory=new_id)

    account_uuid: str = Field(foreign_key="account.uuid", ondelete="CASCADE")
    name: str
