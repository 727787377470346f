import logging
from dataclasses import dataclass
from typing import Optional

from .exceptions import Unauthenticated
from .models import Profile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Caller:
    """Resolved identity of an authenticated user: who they are and what they hold."""

    user_id: int
    profile_id: int
    role: str
    department_id: Optional[int] = None
    club_id: Optional[int] = None
    professional_society_id: Optional[int] = None
    is_superuser: bool = False

    @property
    def is_admin(self) -> bool:
        return self.is_superuser or self.role == Profile.Role.ADMIN

    def as_dict(self):
        return {
            "user_id": self.user_id,
            "profile_id": self.profile_id,
            "role": self.role,
            "department_id": self.department_id,
            "club_id": self.club_id,
            "professional_society_id": self.professional_society_id,
            "is_admin": self.is_admin,
        }


def resolve_caller(user) -> Caller:
    """Resolve an authenticated user into a :class:`Caller`.

    Reads the profile fresh from the database on every call. Raises
    :class:`Unauthenticated` for anonymous users, inactive users and users
    without a profile or with an unknown role.
    """
    if user is None or not getattr(user, "is_authenticated", False):
        raise Unauthenticated()
    if not user.is_active:
        raise Unauthenticated("User account is inactive.")

    profile = Profile.objects.filter(user_id=user.pk).first()
    if profile is None:
        logger.warning("Authenticated user %s has no profile", user.pk)
        raise Unauthenticated("No profile found for this user.")
    if profile.role not in Profile.Role.values:
        logger.warning("Profile %s carries unknown role %r", profile.pk, profile.role)
        raise Unauthenticated("Profile role is not recognised.")

    return Caller(
        user_id=user.pk,
        profile_id=profile.pk,
        role=profile.role,
        department_id=profile.department_id,
        club_id=profile.club_id,
        professional_society_id=profile.professional_society_id,
        is_superuser=user.is_superuser,
    )
