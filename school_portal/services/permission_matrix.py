import logging
from typing import Any, Iterable, Optional
from school_portal.schemas.auth import CurrentUser
from school_portal.schemas.enums import Permission
from school_portal.schemas.permissions import (
    Feature,
    PermissionAssignment,
    PermissionEntry,
    Role,
    UpdatePermissionsPayload,
)

logger = logging.getLogger(__name__)

Cell = tuple[str, str]


def cell_key(role_id: str, feature_id: str) -> str:
    return f"{role_id}-{feature_id}"


class PermissionMatrix:
    """Editable copy of the role x feature matrix.

    Values come from two places: what the server last reported and the edits
    made since. Syncing with the server drops the edits.
    """

    def __init__(self, entries: Iterable[PermissionEntry] = ()):
        self.server_state: dict[Cell, Permission] = {}
        self.pending_edits: dict[Cell, Permission] = {}
        self.sync(entries)

    def sync(self, entries: Iterable[PermissionEntry]) -> None:
        self.server_state = {(e.role_id, e.feature_id): Permission(e.permission) for e in entries}
        if self.pending_edits:
            logger.info(f"Discarding {len(self.pending_edits)} unsaved permission edits")
        self.pending_edits = {}

    def edit(self, role_id: str, feature_id: str, permission: Permission) -> None:
        self.pending_edits[(role_id, feature_id)] = Permission(permission)

    def get(self, role_id: str, feature_id: str) -> Permission:
        cell = (role_id, feature_id)
        if cell in self.pending_edits:
            return self.pending_edits[cell]
        return self.server_state.get(cell, Permission.NONE)

    def merged(self) -> dict[str, Permission]:
        cells = {**self.server_state, **self.pending_edits}
        return {cell_key(role_id, feature_id): value for (role_id, feature_id), value in cells.items()}

    @property
    def has_changes(self) -> bool:
        return bool(self.pending_edits)

    def build_payload(self, roles: Iterable[Role], features: Iterable[Feature]) -> UpdatePermissionsPayload:
        features = list(features)
        return UpdatePermissionsPayload(
            permissions=[
                PermissionAssignment(
                    role_id=role.id,
                    feature_id=feature.id,
                    permission=self.get(role.id, feature.id),
                )
                for role in roles
                for feature in features
            ]
        )

    async def save(self, service: Any, roles: Iterable[Role], features: Iterable[Feature]) -> list[PermissionEntry]:
        """Send every cell in one bulk update.

        Edits survive a failed save; after a successful one the matrix holds
        what the server returned, or the sent values when it returned nothing.
        """
        payload = self.build_payload(roles, features)
        saved = await service.update_all(payload)

        if saved:
            self.sync(saved)
        else:
            self.sync(
                PermissionEntry(role_id=p.role_id, feature_id=p.feature_id, permission=p.permission)
                for p in payload.permissions
            )
        return saved


class PermissionChecker:
    """Feature access of one user in their current branch."""

    def __init__(self, user: Optional[CurrentUser], entries: Iterable[PermissionEntry], branch_id: Optional[str] = None):
        self.user = user
        self.entries = list(entries)
        if branch_id is None and user is not None and user.current_branch is not None:
            branch_id = user.current_branch.id
        self.branch_id = branch_id

    def _permissions(self, feature_code: str) -> list[Permission]:
        if self.user is None or not self.user.roles or not self.branch_id:
            return []

        found = []
        for user_role in self.user.roles:
            for entry in self.entries:
                if (
                    entry.role_id == user_role.role_id
                    and entry.feature_code == feature_code
                    and entry.branch_id == self.branch_id
                ):
                    found.append(entry.permission)
                    break
        return found

    def can_view(self, feature_code: str) -> bool:
        return any(p in (Permission.VIEW, Permission.EDIT) for p in self._permissions(feature_code))

    def can_edit(self, feature_code: str) -> bool:
        return any(p == Permission.EDIT for p in self._permissions(feature_code))
