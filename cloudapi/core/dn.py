"""
Distinguished name helpers. Every entity lives under its account's subtree:

    uuid=<account>, ou=users, o=smartdc
    group-uuid=<group>, uuid=<account>, ou=users, o=smartdc
    role-uuid=<role>, uuid=<account>, ou=users, o=smartdc
"""

import re
from typing import Any

USER_FMT = "uuid={account_id}, ou=users, o=smartdc"
GROUP_FMT = "group-uuid={group_id}, " + USER_FMT
ROLE_FMT = "role-uuid={role_id}, " + USER_FMT

ROLE_DN_PATTERN = re.compile(r"^role-uuid=([^,]+)")


def account_dn(account_id: str) -> str:
    return USER_FMT.format(account_id=account_id)


def group_dn(account_id: str, group_id: str) -> str:
    return GROUP_FMT.format(account_id=account_id, group_id=group_id)


def role_dn(account_id: str, role_id: str) -> str:
    return ROLE_FMT.format(account_id=account_id, role_id=role_id)


def role_id_from_dn(dn: str) -> str | None:
    """
    Extract the role identifier from a role DN, or `None` if `dn` does not
    start with a `role-uuid=` component.
    """
    match = ROLE_DN_PATTERN.match(dn)

    if match is None:
        return None

    return match.group(1)


def as_list(value: Any) -> list[Any]:
    """
    Directory attributes may be single-valued (a bare value), multi-valued
    (a list or tuple) or absent. Normalize all three to a list.
    """
    if value is None:
        return []

    if isinstance(value, (list, tuple)):
        return list(value)

    return [value]
