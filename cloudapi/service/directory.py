"""
Base for directory clients.
"""

import abc

from cloudapi.core.account import AccountData
from cloudapi.core.errors import DirectoryError
from cloudapi.core.group import GroupEntry

__ALL__ = ["DirectoryClient", "DirectoryError"]


class DirectoryClient(abc.ABC):
    """
    The base class for directory clients. Every group operation is scoped to
    the account (tenant) that owns the group. Downstream must implement:

    - get_account: resolve an account by its login (or its UUID).
    - add_group: create a group entry under the account.
    - get_group: read a single group entry.
    - list_groups: read all group entries of the account.
    - modify_group: replace attributes of a group entry.
    - delete_group: remove a group entry.

    Failures are reported by raising `DirectoryError`.
    """

    name: str

    @abc.abstractmethod
    async def get_account(self, login: str) -> AccountData:
        raise NotImplementedError

    @abc.abstractmethod
    async def add_group(self, account_id: str, entry: GroupEntry) -> GroupEntry:
        raise NotImplementedError

    @abc.abstractmethod
    async def get_group(self, account_id: str, group_id: str) -> GroupEntry:
        raise NotImplementedError

    @abc.abstractmethod
    async def list_groups(self, account_id: str) -> list[GroupEntry]:
        raise NotImplementedError

    @abc.abstractmethod
    async def modify_group(
        self, account_id: str, group_id: str, delta: GroupEntry
    ) -> GroupEntry:
        raise NotImplementedError

    @abc.abstractmethod
    async def delete_group(self, account_id: str, group_id: str) -> None:
        raise NotImplementedError
