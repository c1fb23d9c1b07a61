############################################################
#
# xarwiz-cms - Marketing Site Content Backend
#
# access.py: Roles, principals and the post ownership policy
#
############################################################

"""Roles, request principals and the post ownership policy.

There are exactly two roles. Admin is a single configured credential pair and
never a database row, so its principal uses the fixed ``ADMIN_SUBJECT`` id.
Author principals carry the live ``Author`` row loaded by the guard.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from backend.app.db.models import Author, BlogPost

ADMIN_SUBJECT = "admin"


class Role(str, Enum):
    """Token roles."""
    ADMIN = "admin"
    AUTHOR = "author"


class AccessLevel(str, Enum):
    """Role requirement for a guarded route."""
    ADMIN = "admin"
    AUTHOR = "author"
    EITHER = "either"

    def permits(self, role: Role) -> bool:
        if self is AccessLevel.EITHER:
            return True
        return self.value == role.value


@dataclass(frozen=True)
class Principal:
    """The authenticated actor attached to a request."""

    id: str
    email: str
    role: Role
    display_name: Optional[str] = None
    author: Optional["Author"] = None

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    @property
    def author_id(self) -> Optional[int]:
        if self.role is Role.AUTHOR:
            return int(self.id)
        return None

    @classmethod
    def for_admin(cls, email: str) -> "Principal":
        return cls(id=ADMIN_SUBJECT, email=email, role=Role.ADMIN, display_name="Administrator")

    @classmethod
    def for_author(cls, author: "Author") -> "Principal":
        return cls(
            id=str(author.id),
            email=author.email,
            role=Role.AUTHOR,
            display_name=author.display_name,
            author=author,
        )


def can_mutate_post(principal: Principal, post: "BlogPost") -> bool:
    """Admins may mutate any post; authors only the posts they own.

    Ownership is decided by the snapshot ``author_id`` on the post, which is
    never rewritten when the author's profile changes.
    """
    if principal.role is Role.ADMIN:
        return True
    if principal.role is Role.AUTHOR:
        return principal.id == str(post.author_id)
    return False
