"""
Service layer for groups. Translates between request parameters, directory
entries and the public group representation; the directory does the rest.
"""

from collections.abc import Mapping
from typing import Any, NoReturn

from structlog.typing import FilteringBoundLogger

from cloudapi.core.account import AccountData
from cloudapi.core.errors import (
    DirectoryError,
    InvalidArgumentError,
    MissingParameterError,
)
from cloudapi.core.group import GroupData
from cloudapi.core.translate import from_request, to_public

from .directory import DirectoryClient

GROUP_INVALID = "group is invalid"
GROUP_ROLES_INVALID = "Group roles are invalid"

# Directory conflicts that are meaningful to the caller as reported.
FORWARDED_CREATE_ERRORS = {"MissingParameter", "InvalidArgument"}


async def create(
    account: AccountData,
    params: Mapping[str, Any],
    directory: DirectoryClient,
    log: FilteringBoundLogger,
) -> GroupData:
    """
    Create a new group owned by `account`.

    Parameters
    ----------
    account: AccountData
        The owning account.
    params: Mapping[str, Any]
        Request parameters: `name` (required), `members` and `roles`
        (optional, JSON lists or a single bare identifier).
    directory: DirectoryClient
        The directory to create the group in.
    log: FilteringBoundLogger
        Logger instance.

    Raises
    ------
    MissingParameterError
        If `name` is absent. The directory is not contacted.
    DirectoryError
        A 409 `MissingParameter` or `InvalidArgument` error from the directory,
        forwarded as is.
    InvalidArgumentError
        For any other directory failure; the detail is only logged.
    """
    log = log.bind(account_id=account.uuid)

    if not params.get("name"):
        await log.ainfo("group.create.missing_name")
        raise MissingParameterError("Request is missing required parameter: name")

    entry = from_request(params, account_id=account.uuid)
    entry.account = account.uuid

    log = log.bind(group_name=entry.cn)

    try:
        group = await directory.add_group(account.uuid, entry)
    except DirectoryError as e:
        await log.aerror(
            "group.create.failed",
            status=e.status_code,
            code=e.code,
            error=e.message,
        )
        if e.status_code == 409 and e.code in FORWARDED_CREATE_ERRORS:
            raise e
        raise InvalidArgumentError(GROUP_INVALID)

    await log.ainfo("group.created", group_id=group.uuid)

    return to_public(group, log=log)


async def read_by_id(
    account: AccountData,
    group_id: str,
    directory: DirectoryClient,
    log: FilteringBoundLogger,
) -> GroupData:
    """
    Read a group of `account` by its ID.

    Raises
    ------
    DirectoryError
        If the group does not exist (404 `ResourceNotFound`), or any other
        directory failure.
    """
    log = log.bind(account_id=account.uuid, group_id=group_id)
    group = await directory.get_group(account.uuid, group_id)
    await log.adebug("group.found")
    return to_public(group, log=log)


async def get_group_list(
    account: AccountData,
    directory: DirectoryClient,
    log: FilteringBoundLogger,
) -> list[GroupData]:
    """
    Get a list of all groups owned by `account`. An account without groups
    has an empty list.
    """
    log = log.bind(account_id=account.uuid)
    groups = await directory.list_groups(account.uuid)
    await log.adebug("group.listed", number_of_groups=len(groups))
    return [to_public(group, log=log) for group in groups]


async def reclassify_modify_failure(
    account: AccountData,
    group_id: str,
    error: DirectoryError,
    directory: DirectoryClient,
    log: FilteringBoundLogger,
) -> NoReturn:
    """
    Explain a failed modification for directories that do not say which
    attribute was at fault.

    The group is read again: if that fails too, the group is the problem and
    the read error is raised. Otherwise the group exists and the failure is
    assumed to come from a role that does not exist. This is an approximation;
    any other cause is reported as invalid roles as well.

    Raises
    ------
    DirectoryError
        The error from reading the group again.
    InvalidArgumentError
        If the group could be read.
    """
    log = log.bind(
        account_id=account.uuid,
        group_id=group_id,
        status=error.status_code,
        code=error.code,
        error=error.message,
    )

    try:
        await directory.get_group(account.uuid, group_id)
    except DirectoryError as e:
        await log.ainfo("group.modify.group_unreadable", read_code=e.code)
        raise e

    await log.awarning("group.modify.reclassified")
    raise InvalidArgumentError(GROUP_ROLES_INVALID)


async def update(
    account: AccountData,
    group_id: str,
    params: Mapping[str, Any],
    directory: DirectoryClient,
    log: FilteringBoundLogger,
) -> GroupData:
    """
    Replace the name, members and/or roles of a group. Parameters are the
    same as for `create`, all optional.

    Raises
    ------
    InvalidArgumentError
        If the directory rejected the roles of the group.
    DirectoryError
        If the directory rejected another attribute, or the group does not
        exist.
    """
    log = log.bind(account_id=account.uuid, group_id=group_id)

    delta = from_request(params, account_id=account.uuid)

    try:
        group = await directory.modify_group(account.uuid, group_id, delta)
    except DirectoryError as e:
        if e.attribute == "memberrole":
            await log.ainfo("group.modify.invalid_roles", error=e.message)
            raise InvalidArgumentError(GROUP_ROLES_INVALID)
        if e.attribute is not None:
            await log.ainfo("group.modify.invalid", attribute=e.attribute)
            raise e
        await reclassify_modify_failure(
            account=account, group_id=group_id, error=e, directory=directory, log=log
        )

    await log.ainfo("group.modified", attributes=sorted(delta.delta()))

    return to_public(group, log=log)


async def delete_group(
    account: AccountData,
    group_id: str,
    directory: DirectoryClient,
    log: FilteringBoundLogger,
) -> None:
    """
    Delete a group by its ID.

    Raises
    ------
    DirectoryError
        If the group does not exist (404 `ResourceNotFound`).
    """
    log = log.bind(account_id=account.uuid, group_id=group_id)
    await directory.delete_group(account.uuid, group_id)
    await log.ainfo("group.deleted")
