# teams/state_machine.py
"""
Team approval state machine.

draft → submitted → approved
                 └→ rejected

approved and rejected are terminal. Any transition not in
VALID_TRANSITIONS is rejected, and so is any status outside STATUS_CHOICES.
"""
from typing import Tuple
import logging

from django.utils import timezone

from core.exceptions import InvalidStateError
from .models import Team

logger = logging.getLogger("hackhub.teams")


# Valid state transitions: from_status -> list of allowed to_statuses
VALID_TRANSITIONS = {
    Team.STATUS_DRAFT: [Team.STATUS_SUBMITTED],
    Team.STATUS_SUBMITTED: [Team.STATUS_APPROVED, Team.STATUS_REJECTED],
    Team.STATUS_APPROVED: [],
    Team.STATUS_REJECTED: [],
}

KNOWN_STATUSES = frozenset(dict(Team.STATUS_CHOICES))


def can_transition(team: Team, new_status: str) -> Tuple[bool, str]:
    """
    Check if a team can move to new_status.

    Returns (can_transition: bool, reason: str)
    """
    current_status = team.submission_status

    if new_status not in KNOWN_STATUSES:
        return False, f"Invalid status: {new_status}"

    if current_status not in KNOWN_STATUSES:
        return False, f"Team is in an unknown status: {current_status}"

    if new_status not in VALID_TRANSITIONS[current_status]:
        return False, f"Cannot transition from '{current_status}' to '{new_status}'"

    return True, ""


def transition(team: Team, new_status: str, actor=None, reason: str = "", save: bool = True) -> Team:
    """
    Move a team to new_status and stamp the review fields.

    Raises InvalidStateError when the move is not allowed. actor is None for
    system transitions (auto-accept).
    """
    can, message = can_transition(team, new_status)

    if not can:
        logger.warning(
            "Invalid team transition: team=%s, from=%s, to=%s, actor=%s. Reason: %s",
            team.id, team.submission_status, new_status, getattr(actor, "id", "system"), message,
        )
        raise InvalidStateError(message)

    old_status = team.submission_status
    now = timezone.now()
    team.submission_status = new_status
    update_fields = ["submission_status", "updated_at"]

    if new_status == Team.STATUS_SUBMITTED:
        team.submitted_at = now
        update_fields.append("submitted_at")
    else:
        team.reviewed_at = now
        team.reviewed_by = actor
        update_fields += ["reviewed_at", "reviewed_by"]
        if new_status == Team.STATUS_REJECTED:
            team.rejection_reason = reason
            update_fields.append("rejection_reason")

    if save:
        team.save(update_fields=update_fields)

    logger.info(
        "Team state transition: team=%s, from=%s, to=%s, actor=%s",
        team.id, old_status, new_status, getattr(actor, "id", "system"),
    )
    return team


def get_allowed_transitions(team: Team) -> list:
    return VALID_TRANSITIONS.get(team.submission_status, [])


def is_terminal_status(status: str) -> bool:
    return status in VALID_TRANSITIONS and not VALID_TRANSITIONS[status]


def is_editable(team: Team) -> bool:
    """Membership and project details can change only while the team is a draft."""
    return team.submission_status == Team.STATUS_DRAFT
