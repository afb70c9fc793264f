"""
Group ORM
"""

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from cloudapi.core.dn import role_dn
from cloudapi.core.group import AttributeValue, GroupEntry
from cloudapi.core.uuid import new_id


def _directory_value(values: list[str]) -> AttributeValue | None:
    """
    Multi-valued attributes are returned the way the directory returns them:
    absent when empty, a bare string when they hold a single value.
    """
    if not values:
        return None

    if len(values) == 1:
        return values[0]

    return values


class Group(SQLModel, table=True):
    __table_args__ = (UniqueConstraint("account_uuid", "cn"),)

    uuid: str = Field(primary_key=True, default_factory=new_id)

    account_uuid: str = Field(foreign_key="account.uuid", ondelete="CASCADE")
    cn: str

    # Member user identifiers (space separated!)
    uniquemember: str = Field(default="")
    # Role identifiers (space separated!), stored without their DN.
    memberrole: str = Field(default="")

    def members(self) -> list[str]:
        return [x for x in self.uniquemember.split(" ") if x]

    def set_members(self, members: list[str]):
        self.uniquemember = " ".join(members)

    def role_ids(self) -> list[str]:
        return [x for x in self.memberrole.split(" ") if x]

    def set_role_ids(self, role_ids: list[str]):
        self.memberrole = " ".join(role_ids)

    def to_entry(self) -> GroupEntry:
        """
        Convert this Group ORM object to a directory entry.
        """
        return GroupEntry(
            cn=self.cn,
            uuid=self.uuid,
            account=self.account_uuid,
            uniquemember=_directory_value(self.members()),
            memberrole=_directory_value(
                [
                    role_dn(account_id=self.account_uuid, role_id=x)
                    for x in self.role_ids()
                ]
            ),
        )
