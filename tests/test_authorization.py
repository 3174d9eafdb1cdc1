import pytest

from coachhub.errors import AuthorizationError, NotFoundError, ValidationError
from coachhub.policy import (
    Action,
    PermissionLevel,
    Resource,
    ShareGrant,
    authorize,
    can,
    parse_level,
    require,
)

NONE, VIEW, COMMENT, EDIT, ADMIN = (
    PermissionLevel.NONE,
    PermissionLevel.VIEW,
    PermissionLevel.COMMENT,
    PermissionLevel.EDIT,
    PermissionLevel.ADMIN,
)


def _grant(resource_id, grantee, level, grant_id="g1"):
    return ShareGrant(id=grant_id, resource_id=resource_id, grantee_id=grantee, grantor_id="u1", level=level)


def test_levels_are_nested():
    assert NONE < VIEW < COMMENT < EDIT < ADMIN
    assert can(ADMIN, Action.MANAGE_SHARES)
    assert can(EDIT, Action.COMMENT)
    assert not can(COMMENT, Action.EDIT)
    assert not can(NONE, Action.READ)


@pytest.mark.parametrize("raw,expected", [("view", VIEW), ("Comment", COMMENT), (" edit ", EDIT), ("admin", ADMIN)])
def test_parse_level(raw, expected):
    assert parse_level(raw) is expected


@pytest.mark.parametrize("raw", ["", None, 3, "none", "owner", "read"])
def test_parse_level_rejects_garbage(raw):
    with pytest.raises(ValidationError):
        parse_level(raw)


def test_admin_is_not_grantable():
    with pytest.raises(ValidationError):
        parse_level("admin", grantable_only=True)


def test_owner_is_admin_regardless_of_grants():
    f = Resource(id="f1", owner_id="u1")
    assert authorize("u1", f) is ADMIN
    assert authorize("u1", f, [_grant("f1", "u1", VIEW)]) is ADMIN


def test_scenario_a_private_file_with_view_grant():
    f1 = Resource(id="f1", owner_id="u1", is_public=False)
    grants = [_grant("f1", "u2", VIEW)]

    assert authorize("u2", f1, grants) is VIEW
    assert authorize("u3", f1, grants) is NONE

    # after revoke the grant list no longer carries it
    assert authorize("u2", f1, []) is NONE


def test_scenario_d_public_file_is_view_only():
    f2 = Resource(id="f2", owner_id="u1", is_public=True)

    level = authorize("u9", f2, [])
    assert level is VIEW
    assert not can(level, Action.COMMENT)
    with pytest.raises(AuthorizationError):
        require(level, Action.COMMENT)

    # an explicit grant raises it
    assert authorize("u9", f2, [_grant("f2", "u9", COMMENT)]) is COMMENT


def test_grant_never_lowers_public_baseline():
    f = Resource(id="f", owner_id="u1", is_public=True)
    assert authorize("u2", f, [_grant("f", "u2", VIEW)]) is VIEW
    assert authorize("u2", f, [_grant("f", "u2", EDIT)]) is EDIT


def test_grants_for_other_files_or_people_are_ignored():
    f = Resource(id="f", owner_id="u1")
    grants = [_grant("other", "u2", EDIT), _grant("f", "u3", EDIT)]
    assert authorize("u2", f, grants) is NONE


def test_stored_admin_grant_is_capped_at_edit():
    f = Resource(id="f", owner_id="u1")
    assert authorize("u2", f, [_grant("f", "u2", ADMIN)]) is EDIT


def test_coach_without_grant_has_no_file_access():
    # being someone's coach says nothing about their files
    f = Resource(id="f", owner_id="player1")
    assert authorize("coach1", f, []) is NONE


@pytest.mark.parametrize("viewer,resource", [(None, Resource(id="f", owner_id="u1")), ("u1", None), ("", None)])
def test_missing_input_is_none_not_an_error(viewer, resource):
    assert authorize(viewer, resource, []) is NONE


@pytest.mark.parametrize("is_public", [True, False])
@pytest.mark.parametrize("viewer", ["u1", "u2", "u3"])
@pytest.mark.parametrize("has_grant", [True, False])
def test_view_iff_owner_public_or_grant(is_public, viewer, has_grant):
    f = Resource(id="f", owner_id="u1", is_public=is_public)
    grants = [_grant("f", viewer, VIEW)] if has_grant else []
    expected = viewer == "u1" or is_public or has_grant
    assert (authorize(viewer, f, grants) >= VIEW) == expected


def test_require_hides_existence_below_view():
    with pytest.raises(NotFoundError):
        require(NONE, Action.READ)
    with pytest.raises(NotFoundError):
        require(NONE, Action.MANAGE_SHARES)
    with pytest.raises(AuthorizationError):
        require(EDIT, Action.MANAGE_SHARES)
    assert require(EDIT, Action.EDIT) is EDIT
