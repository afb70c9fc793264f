"""
Translation between directory group entries and the public group
representation.
"""

import json
from collections.abc import Mapping
from typing import Any

from structlog import get_logger
from structlog.typing import FilteringBoundLogger

from .dn import as_list, role_dn, role_id_from_dn
from .group import GroupData, GroupEntry


def to_public(
    entry: GroupEntry | None, log: FilteringBoundLogger | None = None
) -> GroupData | dict:
    """
    Convert a directory group entry to its public form.

    `memberrole` holds complete DNs but only the role identifier is public.
    Values that are not role DNs are kept as an empty string, with a warning,
    so that a corrupted entry still renders.

    Parameters
    ----------
    entry: GroupEntry | None
        The directory entry. An absent entry translates to `{}`.
    log: FilteringBoundLogger | None
        Logger used to report unparseable role DNs.
    """
    if entry is None:
        return {}

    if log is None:
        log = get_logger()

    roles = []

    for value in as_list(entry.memberrole):
        role_id = role_id_from_dn(value)

        if role_id is None:
            log.warning("group.role.unparseable", group_id=entry.uuid, value=value)
            role_id = ""

        roles.append(role_id)

    return GroupData(
        name=entry.cn,
        id=entry.uuid,
        members=as_list(entry.uniquemember),
        roles=roles,
    )


# Marks a string parameter that is not JSON.
NOT_JSON = object()


def _decode(value: Any) -> Any:
    if not isinstance(value, str):
        return value

    try:
        return json.loads(value)
    except ValueError:
        return NOT_JSON


def from_request(params: Mapping[str, Any], account_id: str) -> GroupEntry:
    """
    Build a directory entry delta from request parameters.

    - `name` becomes `cn`.
    - `members` is a JSON list of user identifiers; a value that is not JSON
      is used verbatim (a single bare identifier). A JSON scalar is a single
      identifier and JSON `null` clears the members.
    - `roles` is a JSON list of role identifiers; a value that is not JSON is
      a single role identifier. Each role becomes a role DN under
      `account_id`.

    Parameters that are absent or empty are left out of the delta.
    """
    entry = GroupEntry()

    if params.get("name"):
        entry.cn = str(params["name"])

    if params.get("members"):
        members = _decode(params["members"])
        if members is NOT_JSON:
            entry.uniquemember = params["members"]
        else:
            entry.uniquemember = [str(member) for member in as_list(members)]

    if params.get("roles"):
        roles = _decode(params["roles"])
        if roles is NOT_JSON:
            roles = [params["roles"]]

        entry.memberrole = [
            role_dn(account_id=account_id, role_id=str(role)) for role in as_list(roles)
        ]

    return entry
