# hackathons/policies.py
"""
Centralized hackathon policy layer.

All role checks for hackathon-scoped actions live here. The is_* helpers
answer yes/no; the require_* helpers raise the matching domain error so
services can call them inline.
"""
import logging

from core.exceptions import ForbiddenError, PermissionDeniedError
from . import permissions as perms
from .models import Coordinator, Judge

logger = logging.getLogger("hackhub.hackathons")


class HackathonPolicy:

    @staticmethod
    def is_organizer(user, hackathon) -> bool:
        if not user or not user.is_authenticated or hackathon is None:
            return False
        return hackathon.organizer_id == user.id

    @staticmethod
    def get_coordinator(user, hackathon):
        """Accepted coordinator entry for user, or None."""
        if not user or not user.is_authenticated or hackathon is None:
            return None
        return Coordinator.objects.filter(
            hackathon=hackathon,
            user=user,
            status=Coordinator.STATUS_ACCEPTED,
        ).first()

    @staticmethod
    def is_judge(user, hackathon) -> bool:
        if not user or not user.is_authenticated or hackathon is None:
            return False
        return Judge.objects.filter(
            hackathon=hackathon,
            user=user,
            status=Judge.STATUS_ACCEPTED,
        ).exists()

    @staticmethod
    def is_staff_member(user, hackathon) -> bool:
        """Organizer, accepted coordinator or accepted judge."""
        return (
            HackathonPolicy.is_organizer(user, hackathon)
            or HackathonPolicy.get_coordinator(user, hackathon) is not None
            or HackathonPolicy.is_judge(user, hackathon)
        )

    @staticmethod
    def has_permission(user, hackathon, permission: str) -> bool:
        if HackathonPolicy.is_organizer(user, hackathon):
            return True
        coordinator = HackathonPolicy.get_coordinator(user, hackathon)
        return coordinator is not None and perms.has_permission(coordinator, permission)

    # ─────────────────────────────────────────────────────────────
    # Raising variants
    # ─────────────────────────────────────────────────────────────

    @staticmethod
    def require_organizer(user, hackathon):
        if not HackathonPolicy.is_organizer(user, hackathon):
            logger.warning(
                "Organizer check failed: hackathon=%s, user=%s",
                getattr(hackathon, "id", None), getattr(user, "id", None),
            )
            raise ForbiddenError("Only the hackathon organizer can do this")

    @staticmethod
    def require_permission(user, hackathon, permission: str):
        """
        Organizer passes. Accepted coordinator passes only with the flag set.
        A coordinator without the flag gets PermissionDeniedError; anyone
        else (including pending coordinators) gets ForbiddenError.
        """
        perms.field_for(permission)

        if HackathonPolicy.is_organizer(user, hackathon):
            return

        coordinator = HackathonPolicy.get_coordinator(user, hackathon)
        if coordinator is None:
            logger.warning(
                "Non-staff user attempted %s: hackathon=%s, user=%s",
                permission, hackathon.id, getattr(user, "id", None),
            )
            raise ForbiddenError("You are not an organizer or coordinator of this hackathon")

        if not perms.has_permission(coordinator, permission):
            logger.warning(
                "Coordinator lacks %s: hackathon=%s, user=%s",
                permission, hackathon.id, user.id,
            )
            raise PermissionDeniedError(f"Coordinator permission {permission} is required")

    @staticmethod
    def require_judge(user, hackathon):
        if not HackathonPolicy.is_judge(user, hackathon):
            raise ForbiddenError("Only accepted judges of this hackathon can score teams")
