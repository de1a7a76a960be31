import pytest

from notekeeper.domains.identity.entities import Role
from notekeeper.domains.notes.policy import AccessPolicy

OWNER_ID = 1
SHAREE_ID = 2
STRANGER_ID = 3

CHECKS = ["can_read", "can_write", "can_delete", "can_share"]


@pytest.mark.parametrize("check", CHECKS)
def test_owner_passes_every_check(check):
    assert getattr(AccessPolicy, check)(OWNER_ID, Role.USER, OWNER_ID, [SHAREE_ID])


@pytest.mark.parametrize("check", CHECKS)
def test_admin_passes_every_check_without_ownership(check):
    assert getattr(AccessPolicy, check)(STRANGER_ID, Role.ADMIN, OWNER_ID, [])


def test_sharee_can_only_read():
    assert AccessPolicy.can_read(SHAREE_ID, Role.USER, OWNER_ID, [SHAREE_ID])
    assert not AccessPolicy.can_write(SHAREE_ID, Role.USER, OWNER_ID, [SHAREE_ID])
    assert not AccessPolicy.can_delete(SHAREE_ID, Role.USER, OWNER_ID, [SHAREE_ID])
    assert not AccessPolicy.can_share(SHAREE_ID, Role.USER, OWNER_ID, [SHAREE_ID])


@pytest.mark.parametrize("check", CHECKS)
def test_stranger_is_denied(check):
    assert not getattr(AccessPolicy, check)(STRANGER_ID, Role.USER, OWNER_ID, [SHAREE_ID])


def test_role_parse_defaults_to_user():
    assert Role.parse(None) is Role.USER
    assert Role.parse("ADMIN") is Role.ADMIN
    with pytest.raises(ValueError):
        Role.parse("root")
