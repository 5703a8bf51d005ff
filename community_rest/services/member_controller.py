"""Member Controller — resource controller rules specific to member accounts.

Invariants:
    - user_login is immutable: any change is CannotRename (409), flagged
      in_use when another member already holds the requested login
    - Logins and e-mail addresses stay unique across members
    - Changing roles needs the PROMOTE capability, even on one's own account
    - Members cannot be trashed: delete requires force=true
    - reassign must name another existing member
"""

from typing import Any, Mapping

from community_rest.core.authorization import Caller
from community_rest.core.domain_types import Action
from community_rest.core.errors import (
    CannotRenameError, ForbiddenError, OperationDisabledError, ValidationFailedError,
)
from community_rest.models.member import Member
from community_rest.services.resource_controller import ResourceController


class MemberController(ResourceController[Member]):
    """Members: identity uniqueness, rename protection, role changes."""

    async def validate_create(self, caller: Caller, fields: Mapping[str, Any]) -> None:
        if await self.store.find_by_login(fields["user_login"]) is not None:
            raise ValidationFailedError(
                "Sorry, that username already exists!",
                self.error_code("exists"), field="user_login",
            )
        await self._check_email_free(fields["email"], exclude_id=None)
        if fields.get("roles") is not None:
            self._require_promote(caller, "create")

    async def validate_update(
        self, caller: Caller, entity: Member, fields: Mapping[str, Any],
    ) -> None:
        new_login = fields.get("user_login")
        if new_login is not None and new_login != entity.user_login:
            holder = await self.store.find_by_login(new_login)
            raise CannotRenameError(
                "username", new_login, self.error_code("cannot_rename"),
                in_use=holder is not None and holder.id != entity.id,
            )
        if fields.get("email") is not None and fields["email"] != entity.user_email:
            await self._check_email_free(fields["email"], exclude_id=entity.id)
        if fields.get("roles") is not None and list(fields["roles"]) != list(entity.roles or []):
            self._require_promote(caller, "update")

    async def validate_delete(
        self, caller: Caller, entity: Member, options: Mapping[str, Any],
    ) -> None:
        if not options.get("force"):
            raise OperationDisabledError(
                "Members do not support trashing. Set 'force' to true to delete.",
                self.error_code("trash_not_supported"),
            )
        reassign = options.get("reassign")
        if reassign:
            if reassign == entity.id or await self.store.find(reassign) is None:
                raise ValidationFailedError(
                    "Invalid member ID for reassignment.",
                    self.error_code("invalid_reassign"), field="reassign",
                )

    async def _check_email_free(self, email: str, exclude_id: int | None) -> None:
        holder = await self.store.find_by_email(email)
        if holder is not None and holder.id != exclude_id:
            raise ValidationFailedError(
                "Sorry, that email address is already used!",
                self.error_code("email_exists"), field="email",
            )

    def _require_promote(self, caller: Caller, verb: str) -> None:
        if not self.gate.can(caller, Action.PROMOTE):
            raise ForbiddenError(
                "Sorry, you are not allowed to edit roles of this member.",
                self.error_code("cannot_edit_roles"),
            )
