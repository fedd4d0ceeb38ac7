"""Group and member domain service."""

import logging
from typing import Optional

from settleup.database.base import Database
from settleup.domain.entities import Group as GroupEntity, Member as MemberEntity
from settleup.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    group_not_found,
    member_not_found,
)

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY = "USD"


def normalize_currency(currency: str) -> str:
    """Return an upper-case currency code.

    Raises:
        ValidationError: If the code is empty or longer than 10 characters
    """
    code = (currency or "").strip().upper()
    if not code or len(code) > 10 or not code.isalpha():
        raise ValidationError(f"Invalid currency code '{currency}'")
    return code


class GroupService:
    """Service for managing groups and their members."""

    def __init__(self, db: Database):
        """Initialize group service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_group(
        self, name: str, currency: str = DEFAULT_CURRENCY, description: Optional[str] = None
    ) -> int:
        """Create a new group.

        Args:
            name: Group name, unique
            currency: Default currency for the group's expenses
            description: Optional description

        Returns:
            Group ID

        Raises:
            ValidationError: If the name is empty or the currency is invalid
            ConflictError: If a group with the same name exists
        """
        name = name.strip()
        if not name:
            raise ValidationError("Group name must not be empty")
        if self.db.get_group_by_name(name) is not None:
            raise ConflictError(f"Group with name '{name}' already exists")

        group_id = self.db.create_group(
            name=name, currency=normalize_currency(currency), description=description
        )
        logger.info("Created group %s (%s)", group_id, name)
        return group_id

    def get_group(self, group_id: int) -> Optional[GroupEntity]:
        """Get group by ID.

        Args:
            group_id: Group ID

        Returns:
            Group entity or None if not found
        """
        return self.db.get_group(group_id)

    def list_groups(self) -> list[GroupEntity]:
        """List all groups."""
        return self.db.list_groups()

    def resolve_group(self, group: str | int) -> GroupEntity:
        """Resolve a group name or ID to a group.

        A purely numeric string is tried as an ID first, then as a name.

        Raises:
            NotFoundError: If no group matches
        """
        if isinstance(group, int):
            found = self.db.get_group(group)
            if found is None:
                raise NotFoundError(group_not_found(group))
            return found

        if group.strip().isdigit():
            found = self.db.get_group(int(group))
            if found is not None:
                return found

        found = self.db.get_group_by_name(group.strip())
        if found is None:
            raise NotFoundError(group_not_found(group))
        return found

    def add_member(self, group_id: int, handle: str, display_name: Optional[str] = None) -> int:
        """Add a member to a group.

        Args:
            group_id: Group ID
            handle: Member handle used to refer to them in splits and settlements
            display_name: Name shown in reports (defaults to the handle)

        Returns:
            Member ID

        Raises:
            NotFoundError: If the group doesn't exist
            ValidationError: If the handle is empty or contains '=' or whitespace
            ConflictError: If the handle is already taken in the group
        """
        group = self.resolve_group(group_id)
        handle = handle.strip()
        if not handle or "=" in handle or any(ch.isspace() for ch in handle):
            raise ValidationError(
                f"Invalid member handle '{handle}': must be non-empty without spaces or '='"
            )
        if self.db.get_member(group.id, handle) is not None:
            raise ConflictError(f"'{handle}' is already a member of group '{group.name}'")

        member_id = self.db.add_member(
            group_id=group.id, handle=handle, display_name=(display_name or handle).strip()
        )
        logger.info("Added member %s to group %s", handle, group.id)
        return member_id

    def list_members(self, group_id: int) -> list[MemberEntity]:
        """List a group's members in join order.

        Raises:
            NotFoundError: If the group doesn't exist
        """
        group = self.resolve_group(group_id)
        return self.db.list_members(group.id)

    def require_members(self, group: GroupEntity, handles: list[str] | tuple[str, ...]) -> None:
        """Check that every handle is a member of the group.

        Raises:
            NotFoundError: Naming the first handle that is not a member
        """
        known = {member.handle for member in self.db.list_members(group.id)}
        for handle in handles:
            if handle not in known:
                raise NotFoundError(member_not_found(handle, group.name))
