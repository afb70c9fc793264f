"""
Group management.
"""

from urllib.parse import quote

from fastapi import APIRouter, Request, Response, status

from cloudapi.core.group import GroupData
from cloudapi.service import groups as groups_service

from .dependencies import (
    AccountDependency,
    CreateParamsDependency,
    DirectoryDependency,
    LoggerDependency,
    ParamsDependency,
)

group_app = APIRouter(tags=["Group Management"])


@group_app.post(
    "/{account}/groups",
    name="CreateGroup",
    summary="Create a group",
    description=(
        "Create a group with the given `name`, and optionally `members` and "
        "`roles` (JSON lists of identifiers, or a single identifier)."
    ),
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Group created; `Location` points at the new group."},
        404: {"description": "Account not found."},
        409: {"description": "Missing name or invalid group."},
        415: {"description": "Unsupported content type."},
    },
)
async def create_group(
    request: Request,
    response: Response,
    owner: AccountDependency,
    params: CreateParamsDependency,
    directory: DirectoryDependency,
    log: LoggerDependency,
) -> GroupData:
    """
    Create a new group.
    """
    log = log.bind(account=owner.login)

    group = await groups_service.create(
        account=owner, params=params, directory=directory, log=log
    )

    group_path = quote(group.id, safe="!*'()")
    response.headers["Location"] = f"/{owner.login}/groups/{group_path}"

    await log.adebug("api.groups.create", path=request.url.path, group=group.model_dump())

    return group


@group_app.get(
    "/{account}/groups",
    name="ListGroups",
    summary="List groups",
    description="Retrieve all groups of the account.",
    responses={
        200: {"description": "List of groups, possibly empty."},
        404: {"description": "Account not found."},
    },
)
async def list_groups(
    request: Request,
    owner: AccountDependency,
    directory: DirectoryDependency,
    log: LoggerDependency,
) -> list[GroupData]:
    """
    List all groups.
    """
    log = log.bind(account=owner.login)

    groups = await groups_service.get_group_list(
        account=owner, directory=directory, log=log
    )

    await log.adebug(
        "api.groups.list", path=request.url.path, number_of_groups=len(groups)
    )

    return groups


@group_app.head(
    "/{account}/groups",
    name="HeadGroups",
    summary="List groups (headers only)",
)
async def head_groups(
    owner: AccountDependency,
    directory: DirectoryDependency,
    log: LoggerDependency,
) -> Response:
    await groups_service.get_group_list(
        account=owner, directory=directory, log=log.bind(account=owner.login)
    )
    return Response(status_code=status.HTTP_200_OK, media_type="application/json")


@group_app.get(
    "/{account}/groups/{group}",
    name="GetGroup",
    summary="Get group by ID",
    responses={
        200: {"description": "The group."},
        404: {"description": "Account or group not found."},
    },
)
async def get_group(
    group: str,
    request: Request,
    owner: AccountDependency,
    directory: DirectoryDependency,
    log: LoggerDependency,
) -> GroupData:
    """
    Get a group by its ID.
    """
    log = log.bind(account=owner.login)

    found = await groups_service.read_by_id(
        account=owner, group_id=group, directory=directory, log=log
    )

    await log.adebug("api.groups.get", path=request.url.path, group=found.model_dump())

    return found


@group_app.head(
    "/{account}/groups/{group}",
    name="HeadGroup",
    summary="Get group by ID (headers only)",
)
async def head_group(
    group: str,
    owner: AccountDependency,
    directory: DirectoryDependency,
    log: LoggerDependency,
) -> Response:
    await groups_service.read_by_id(
        account=owner,
        group_id=group,
        directory=directory,
        log=log.bind(account=owner.login),
    )
    return Response(status_code=status.HTTP_200_OK, media_type="application/json")


@group_app.post(
    "/{account}/groups/{group}",
    name="UpdateGroup",
    summary="Update a group",
    description=(
        "Replace the `name`, `members` and/or `roles` of a group. "
        "Parameters that are not given are left unchanged."
    ),
    responses={
        200: {"description": "The updated group."},
        404: {"description": "Account or group not found."},
        409: {"description": "Invalid group roles or attributes."},
    },
)
async def update_group(
    group: str,
    request: Request,
    owner: AccountDependency,
    params: ParamsDependency,
    directory: DirectoryDependency,
    log: LoggerDependency,
) -> GroupData:
    """
    Update a group.
    """
    log = log.bind(account=owner.login)

    updated = await groups_service.update(
        account=owner, group_id=group, params=params, directory=directory, log=log
    )

    await log.adebug(
        "api.groups.update", path=request.url.path, group=updated.model_dump()
    )

    return updated


@group_app.delete(
    "/{account}/groups/{group}",
    name="DeleteGroup",
    summary="Delete a group",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        204: {"description": "Group deleted."},
        404: {"description": "Account or group not found."},
    },
)
async def delete_group(
    group: str,
    request: Request,
    owner: AccountDependency,
    directory: DirectoryDependency,
    log: LoggerDependency,
) -> Response:
    """
    Delete a group by its ID.
    """
    log = log.bind(account=owner.login)

    await groups_service.delete_group(
        account=owner, group_id=group, directory=directory, log=log
    )

    await log.adebug("api.groups.delete", path=request.url.path)

    return Response(status_code=status.HTTP_204_NO_CONTENT)
