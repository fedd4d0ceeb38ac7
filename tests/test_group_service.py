"""Tests for group and member service."""

import pytest

from settleup.domain.errors import ConflictError, NotFoundError, ValidationError
from settleup.domain.group import normalize_currency


def test_create_group(group_service):
    """Test creating a group."""
    group_id = group_service.create_group(name="Lisbon Trip", currency="eur", description="May")

    group = group_service.get_group(group_id)
    assert group.name == "Lisbon Trip"
    assert group.currency == "EUR"
    assert group.description == "May"


def test_create_duplicate_group(group_service):
    """Test that group names are unique."""
    group_service.create_group(name="Flat")
    with pytest.raises(ConflictError, match="already exists"):
        group_service.create_group(name="Flat")


def test_create_group_empty_name(group_service):
    """Test that group names must not be empty."""
    with pytest.raises(ValidationError):
        group_service.create_group(name="   ")


@pytest.mark.parametrize("code", ["", "US D", "12", "TOOLONGCURRENCY"])
def test_invalid_currency(code):
    """Test that malformed currency codes are rejected."""
    with pytest.raises(ValidationError, match="Invalid currency"):
        normalize_currency(code)


def test_resolve_group_by_name_or_id(group_service, sample_group):
    """Test resolving a group by ID, numeric string or name."""
    assert group_service.resolve_group(sample_group.id) == sample_group
    assert group_service.resolve_group(str(sample_group.id)) == sample_group
    assert group_service.resolve_group("Trip") == sample_group


def test_resolve_numeric_group_name(group_service):
    """Test that a numeric name still resolves when no such ID exists."""
    group_id = group_service.create_group(name="2024")
    assert group_service.resolve_group("2024").id == group_id


def test_resolve_missing_group(group_service):
    """Test resolving a group that does not exist."""
    with pytest.raises(NotFoundError, match="Group 'Nowhere' not found"):
        group_service.resolve_group("Nowhere")
    with pytest.raises(NotFoundError, match="Group 99 not found"):
        group_service.resolve_group(99)


def test_list_members(group_service, sample_group):
    """Test listing members in join order."""
    members = group_service.list_members(sample_group.id)
    assert [(m.handle, m.display_name) for m in members] == [
        ("alice", "Alice"),
        ("bob", "Bob"),
        ("carol", "Carol"),
    ]


def test_display_name_defaults_to_handle(group_service, sample_group):
    """Test that a member without a display name shows their handle."""
    group_service.add_member(sample_group.id, "dave")
    assert group_service.list_members(sample_group.id)[-1].display_name == "dave"


def test_duplicate_member(group_service, sample_group):
    """Test that handles are unique within a group."""
    with pytest.raises(ConflictError, match="already a member"):
        group_service.add_member(sample_group.id, "alice")


def test_same_handle_in_other_group(group_service, sample_group):
    """Test that the same handle can join another group."""
    other = group_service.create_group(name="Office")
    group_service.add_member(other, "alice")
    assert [m.handle for m in group_service.list_members(other)] == ["alice"]


@pytest.mark.parametrize("handle", ["", "two words", "a=b"])
def test_invalid_handle(group_service, sample_group, handle):
    """Test that handles must be usable in PARTICIPANT=VALUE options."""
    with pytest.raises(ValidationError, match="Invalid member handle"):
        group_service.add_member(sample_group.id, handle)


def test_require_members(group_service, sample_group):
    """Test that unknown handles are reported by name."""
    group_service.require_members(sample_group, ["alice", "carol"])
    with pytest.raises(NotFoundError, match="'zed' is not a member of group 'Trip'"):
        group_service.require_members(sample_group, ["alice", "zed"])
