"""
Core group data models.
"""

from pydantic import BaseModel, ConfigDict

# Directory attributes may hold a single value or several.
AttributeValue = str | list[str]


class GroupData(BaseModel):
    """
    The public representation of a group. `members` holds user identifiers
    and `roles` bare role identifiers, never role DNs.
    """

    name: str | None = None
    id: str | None = None
    members: list[str] = []
    roles: list[str] = []


class GroupEntry(BaseModel):
    """
    A group as stored in the directory, or a delta to apply to one; only the
    attributes that were explicitly set are part of a delta.
    """

    model_config = ConfigDict(extra="allow")

    cn: str | None = None
    uuid: str | None = None
    account: str | None = None
    uniquemember: AttributeValue | None = None
    memberrole: AttributeValue | None = None

    def delta(self) -> dict[str, AttributeValue]:
        """
        The attributes explicitly set on this entry.
        """
        return self.model_dump(include=self.model_fields_set, exclude_none=True)
