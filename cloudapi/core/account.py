"""
Core account data models.
"""

from pydantic import BaseModel


class AccountData(BaseModel):
    """
    The tenant that owns directory entries. `uuid` scopes entries in the
    directory, `login` is what appears in URLs.
    """

    uuid: str
    login: str
    email: str | None = None
