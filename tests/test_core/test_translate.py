"""
Tests the translation between directory entries and public groups.
"""

import pytest
from structlog.testing import capture_logs

from cloudapi.core.dn import as_list, group_dn, role_dn, role_id_from_dn
from cloudapi.core.group import GroupData, GroupEntry
from cloudapi.core.translate import from_request, to_public

ACCOUNT = "930896af-bf8c-48d4-885c-6573a94b1853"
ROLE = "b4e0ef90-7d7c-4c2c-9a2f-87d5d8b7e2a1"


def test_dn_helpers():
    assert role_dn(ACCOUNT, ROLE) == (
        f"role-uuid={ROLE}, uuid={ACCOUNT}, ou=users, o=smartdc"
    )
    assert group_dn(ACCOUNT, "g1") == (
        f"group-uuid=g1, uuid={ACCOUNT}, ou=users, o=smartdc"
    )
    assert role_id_from_dn(role_dn(ACCOUNT, ROLE)) == ROLE
    assert role_id_from_dn(f"uuid={ACCOUNT}, ou=users, o=smartdc") is None


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, []),
        ("a", ["a"]),
        (["a", "b"], ["a", "b"]),
        (("a",), ["a"]),
        (7, [7]),
        ({"id": "r1"}, [{"id": "r1"}]),
    ],
)
def test_as_list(value, expected):
    assert as_list(value) == expected


def test_to_public_absent_entry():
    assert to_public(None) == {}


def test_to_public_multi_valued():
    entry = GroupEntry(
        cn="ops",
        uuid="g1",
        uniquemember=["u1", "u2"],
        memberrole=[role_dn(ACCOUNT, ROLE), role_dn(ACCOUNT, "r2")],
    )

    assert to_public(entry) == GroupData(
        name="ops", id="g1", members=["u1", "u2"], roles=[ROLE, "r2"]
    )


def test_to_public_single_valued():
    entry = GroupEntry(
        cn="ops", uuid="g1", uniquemember="u1", memberrole=role_dn(ACCOUNT, ROLE)
    )

    group = to_public(entry)

    assert group.members == ["u1"]
    assert group.roles == [ROLE]


def test_to_public_without_members_or_roles():
    group = to_public(GroupEntry(cn="ops", uuid="g1"))

    assert group.members == []
    assert group.roles == []


def test_to_public_unparseable_role():
    entry = GroupEntry(
        cn="ops",
        uuid="g1",
        memberrole=["cn=not-a-role, o=smartdc", role_dn(ACCOUNT, ROLE)],
    )

    with capture_logs() as logs:
        group = to_public(entry)

    assert group.roles == ["", ROLE]
    assert [x["event"] for x in logs] == ["group.role.unparseable"]
    assert logs[0]["log_level"] == "warning"
    assert logs[0]["value"] == "cn=not-a-role, o=smartdc"


def test_from_request_roles():
    entry = from_request({"roles": '["r1","r2"]'}, account_id="A")

    assert len(entry.memberrole) == 2
    for dn, role_id in zip(entry.memberrole, ["r1", "r2"]):
        assert dn.startswith(f"role-uuid={role_id}, ")
        assert dn.endswith("uuid=A, ou=users, o=smartdc")

    assert entry.delta() == {"memberrole": entry.memberrole}


def test_from_request_bare_identifiers():
    entry = from_request(
        {"name": "ops", "members": "u-1", "roles": "r-1"}, account_id=ACCOUNT
    )

    assert entry.cn == "ops"
    assert entry.uniquemember == "u-1"
    assert entry.memberrole == [role_dn(ACCOUNT, "r-1")]


def test_from_request_decoded_lists():
    entry = from_request({"members": ["u1", "u2"], "roles": [ROLE]}, account_id=ACCOUNT)

    assert entry.uniquemember == ["u1", "u2"]
    assert entry.memberrole == [role_dn(ACCOUNT, ROLE)]


def test_from_request_json_members():
    entry = from_request({"members": '["u1", "u2"]'}, account_id=ACCOUNT)

    assert entry.uniquemember == ["u1", "u2"]


def test_from_request_empty():
    entry = from_request({"members": "", "roles": ""}, account_id=ACCOUNT)

    assert entry.delta() == {}


@pytest.mark.parametrize(
    "value, expected",
    [("123", ["123"]), ("true", ["True"]), (7, ["7"]), ("[1, 2]", ["1", "2"])],
)
def test_from_request_scalar_members(value, expected):
    entry = from_request({"members": value}, account_id=ACCOUNT)

    assert entry.uniquemember == expected


@pytest.mark.parametrize("value, role_id", [("123", "123"), ("true", "True"), (5, "5")])
def test_from_request_scalar_roles(value, role_id):
    entry = from_request({"roles": value}, account_id=ACCOUNT)

    assert entry.memberrole == [role_dn(ACCOUNT, role_id)]


def test_from_request_object_roles():
    entry = from_request({"roles": '{"id": "r1"}'}, account_id=ACCOUNT)

    assert len(entry.memberrole) == 1


def test_from_request_null_clears():
    entry = from_request({"members": "null", "roles": "null"}, account_id=ACCOUNT)

    assert entry.delta() == {"uniquemember": [], "memberrole": []}


def test_from_request_non_string_name():
    entry = from_request({"name": 5}, account_id=ACCOUNT)

    assert entry.cn == "5"
