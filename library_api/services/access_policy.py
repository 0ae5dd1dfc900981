"""Role-based access rules.

One policy, evaluated per request, with two variants: ``admin`` callers see
and change everything, ``user`` callers only read the catalog and their own
loans.
"""
from dataclasses import dataclass
from typing import Optional

from library_api.errors import Forbidden
from library_api.utils.validation import text_value

ADMIN = "admin"
USER = "user"
ROLES = (ADMIN, USER)

# actions reserved for admins
ADMIN_ONLY = frozenset({
    "book:create",
    "book:update",
    "book:delete",
    "lending:delete",
    "lending:view_all",
    "analytics:view_all",
})


@dataclass(frozen=True)
class Caller:
    user_id: int
    username: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN


class AccessPolicy:
    @staticmethod
    def can(caller: Caller, action: str) -> bool:
        return caller.is_admin or action not in ADMIN_ONLY

    @staticmethod
    def require(caller: Caller, action: str):
        if not AccessPolicy.can(caller, action):
            raise Forbidden("Admin privileges required")

    @staticmethod
    def ledger_scope(caller: Caller) -> Optional[str]:
        """Borrower the ledger must be restricted to, or None for the whole ledger."""
        if AccessPolicy.can(caller, "lending:view_all"):
            return None
        return caller.username

    @staticmethod
    def analytics_scope(caller: Caller, username: Optional[str] = None,
                        role: Optional[str] = None) -> Optional[str]:
        """
        Admins get global figures unless they ask for a non-admin user's view
        (``?username=x&role=user``). Everyone else only ever sees their own.
        """
        if not AccessPolicy.can(caller, "analytics:view_all"):
            return caller.username
        if username and role and role != ADMIN:
            return username
        return None

    @staticmethod
    def lend_borrower(caller: Caller, requested: Optional[str]) -> str:
        requested = text_value(requested, "borrower must be a string")
        if caller.is_admin:
            return requested
        if requested and requested != caller.username:
            raise Forbidden("You can only borrow books for yourself")
        return caller.username

    @staticmethod
    def ensure_owner(caller: Caller, borrower: str):
        if not caller.is_admin and borrower != caller.username:
            raise Forbidden("This lending record does not belong to you")
