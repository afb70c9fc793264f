"""
A directory client backed by the SQL database, used for development and
testing in place of the external directory service.
"""

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

from cloudapi.config.managers import AsyncSessionManager
from cloudapi.core.account import AccountData
from cloudapi.core.dn import as_list, role_dn, role_id_from_dn
from cloudapi.core.errors import DirectoryError
from cloudapi.core.group import GroupEntry
from cloudapi.database.account import Account
from cloudapi.database.group import Group
from cloudapi.database.role import Role

from .directory import DirectoryClient


def not_found(message: str, attribute: str | None = None) -> DirectoryError:
    return DirectoryError(
        status_code=404, code="ResourceNotFound", message=message, attribute=attribute
    )


def invalid_argument(message: str, attribute: str | None = None) -> DirectoryError:
    return DirectoryError(
        status_code=409, code="InvalidArgument", message=message, attribute=attribute
    )


def _members(entry: GroupEntry) -> list[str]:
    members = [str(x) for x in as_list(entry.uniquemember)]

    for member in members:
        if not member or " " in member:
            raise invalid_argument(
                f"{member!r} is not a valid member", attribute="uniquemember"
            )

    return members


async def _role_ids(
    account_id: str, entry: GroupEntry, conn: AsyncSession
) -> list[str]:
    """
    Resolve the role DNs of `entry` to role identifiers, checking that each
    one names an existing role of the account.
    """
    role_ids = []

    for dn in as_list(entry.memberrole):
        role_id = role_id_from_dn(dn)

        if role_id is None or dn != role_dn(account_id=account_id, role_id=role_id):
            raise not_found(f"{dn} is not a role of this account", attribute="memberrole")

        role_ids.append(role_id)

    if role_ids:
        result = await conn.execute(
            select(Role.uuid).where(
                Role.account_uuid == account_id, Role.uuid.in_(role_ids)
            )
        )
        existing = set(result.scalars().all())

        for role_id in role_ids:
            if role_id not in existing:
                raise not_found(f"role {role_id} does not exist", attribute="memberrole")

    return role_ids


async def _read_group(account_id: str, group_id: str, conn: AsyncSession) -> Group:
    result = await conn.execute(
        select(Group).where(Group.account_uuid == account_id, Group.uuid == group_id)
    )
    group = result.scalar_one_or_none()

    if group is None:
        raise not_found(f"group {group_id} does not exist")

    return group


class LocalDirectory(DirectoryClient):
    name = "local"

    manager: AsyncSessionManager

    def __init__(self, manager: AsyncSessionManager):
        self.manager = manager
        self.log = get_logger().bind(directory=self.name)

    async def get_account(self, login: str) -> AccountData:
        async with self.manager.session() as conn:
            result = await conn.execute(
                select(Account).where(or_(Account.login == login, Account.uuid == login))
            )
            account = result.scalar_one_or_none()

        if account is None:
            raise not_found(f"{login} does not exist")

        return account.to_core()

    async def add_group(self, account_id: str, entry: GroupEntry) -> GroupEntry:
        log = self.log.bind(account_id=account_id, cn=entry.cn)

        if not entry.cn:
            raise DirectoryError(
                status_code=409,
                code="MissingParameter",
                message="cn is required",
                attribute="cn",
            )

        try:
            async with self.manager.session() as conn:
                async with conn.begin():
                    group = Group(account_uuid=account_id, cn=str(entry.cn))
                    group.set_members(_members(entry))
                    group.set_role_ids(await _role_ids(account_id, entry, conn))

                    conn.add(group)
                    await conn.flush()
        except IntegrityError as e:
            await log.ainfo("directory.group.exists", error=str(e))
            raise invalid_argument(f"group {entry.cn} already exists", attribute="cn")

        await log.ainfo("directory.group.added", group_id=group.uuid)

        return group.to_entry()

    async def get_group(self, account_id: str, group_id: str) -> GroupEntry:
        async with self.manager.session() as conn:
            group = await _read_group(account_id, group_id, conn)

        return group.to_entry()

    async def list_groups(self, account_id: str) -> list[GroupEntry]:
        async with self.manager.session() as conn:
            result = await conn.execute(
                select(Group).where(Group.account_uuid == account_id).order_by(Group.cn)
            )
            groups = result.scalars().all()

        return [group.to_entry() for group in groups]

    async def modify_group(
        self, account_id: str, group_id: str, delta: GroupEntry
    ) -> GroupEntry:
        log = self.log.bind(account_id=account_id, group_id=group_id)
        changes = delta.delta()

        try:
            async with self.manager.session() as conn:
                async with conn.begin():
                    group = await _read_group(account_id, group_id, conn)

                    if "cn" in changes:
                        group.cn = str(delta.cn)
                    if "uniquemember" in changes:
                        group.set_members(_members(delta))
                    if "memberrole" in changes:
                        group.set_role_ids(await _role_ids(account_id, delta, conn))

                    conn.add(group)
                    await conn.flush()
        except IntegrityError as e:
            await log.ainfo("directory.group.exists", error=str(e))
            raise invalid_argument(f"group {delta.cn} already exists", attribute="cn")

        await log.ainfo("directory.group.modified", attributes=sorted(changes))

        return group.to_entry()

    async def delete_group(self, account_id: str, group_id: str) -> None:
        async with self.manager.session() as conn:
            async with conn.begin():
                group = await _read_group(account_id, group_id, conn)
                await conn.delete(group)

        await self.log.ainfo(
            "directory.group.deleted", account_id=account_id, group_id=group_id
        )

    async def add_account(self, login: str, email: str | None = None) -> AccountData:
        """
        Create an account. Not part of the directory client contract; used to
        provision the local directory.

        Raises
        ------
        DirectoryError
            If an account with this login already exists.
        """
        try:
            async with self.manager.session() as conn:
                async with conn.begin():
                    account = Account(login=login, email=email)
                    conn.add(account)
                    await conn.flush()
        except IntegrityError:
            raise invalid_argument(f"account {login} already exists", attribute="login")

        await self.log.ainfo("directory.account.added", login=login)

        return account.to_core()

    async def add_role(self, account_id: str, name: str) -> str:
        """
        Create a role under the account, returning its identifier. Not part of
        the directory client contract; used to provision the local directory.
        """
        try:
            async with self.manager.session() as conn:
                async with conn.begin():
                    role = Role(account_uuid=account_id, name=name)
                    conn.add(role)
                    await conn.flush()
        except IntegrityError:
            raise invalid_argument(f"role {name} already exists", attribute="name")

        await self.log.ainfo(
            "directory.role.added", account_id=account_id, role_id=role.uuid
        )

        return role.uuid
