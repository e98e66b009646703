# hackathons/invitations.py
"""
Coordinator and judge invitations.

Each invitation carries a single-use random token that is mailed to the
invitee. Accepting or declining requires the token to resolve to a pending
entry that belongs to the acting user; the token is cleared afterwards.
"""
import logging
import secrets

from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from core.exceptions import DuplicateError, ForbiddenError, NotFoundError, ValidationError
from notifications import dispatcher
from notifications.emails import invitation_links
from .models import Coordinator, Judge
from .permissions import parse_permissions
from .policies import HackathonPolicy

logger = logging.getLogger("hackhub.hackathons")

User = get_user_model()

KIND_COORDINATOR = "coordinator"
KIND_JUDGE = "judge"

INVITATION_MODELS = {
    KIND_COORDINATOR: Coordinator,
    KIND_JUDGE: Judge,
}

NOTICE_KINDS = {
    KIND_COORDINATOR: dispatcher.COORDINATOR_INVITED,
    KIND_JUDGE: dispatcher.JUDGE_INVITED,
}


def generate_invitation_token() -> str:
    """32 random bytes, hex encoded (64 chars)."""
    return secrets.token_hex(32)


def _model_for(kind):
    try:
        return INVITATION_MODELS[kind]
    except KeyError:
        raise ValueError(f"Unknown invitation kind: {kind}")


def _resolve_invitee(email):
    email = (email or "").strip()
    if not email:
        raise ValidationError("email is required")
    user = User.objects.filter(email__iexact=email, is_active=True).first()
    if user is None:
        raise NotFoundError("User not found")
    return user


def _notify_invitee(kind, entry, inviter):
    accept_url, decline_url = invitation_links(kind, entry.invitation_token)
    dispatcher.publish(
        NOTICE_KINDS[kind],
        [entry.user],
        hackathon_id=entry.hackathon_id,
        hackathon_title=entry.hackathon.title,
        actor_name=inviter.display_name,
        accept_url=accept_url,
        decline_url=decline_url,
    )


def _invite(kind, hackathon, inviter, email, **fields):
    HackathonPolicy.require_organizer(inviter, hackathon)
    model = _model_for(kind)
    user = _resolve_invitee(email)

    if user.pk == hackathon.organizer_id:
        raise ValidationError(f"The organizer cannot be invited as a {kind}")

    with transaction.atomic():
        entry = model.objects.select_for_update().filter(hackathon=hackathon, user=user).first()
        if entry is not None and entry.status != model.STATUS_DECLINED:
            raise DuplicateError(f"User is already a {kind}")

        token = generate_invitation_token()
        if entry is None:
            entry = model(hackathon=hackathon, user=user)
        for name, value in fields.items():
            setattr(entry, name, value)
        entry.invitation_token = token
        entry.status = model.STATUS_PENDING
        entry.invited_by = inviter
        entry.accepted_at = None
        entry.save()

    logger.info("Invited %s: hackathon=%s, user=%s, by=%s", kind, hackathon.id, user.id, inviter.id)
    _notify_invitee(kind, entry, inviter)
    return entry


def invite_coordinator(hackathon, inviter, email, permissions=None):
    return _invite(
        KIND_COORDINATOR,
        hackathon,
        inviter,
        email,
        **parse_permissions(permissions),
    )


def invite_judge(hackathon, inviter, email):
    return _invite(KIND_JUDGE, hackathon, inviter, email)


def _resolve_token(kind, token, user):
    model = _model_for(kind)
    entry = (
        model.objects.select_for_update()
        .select_related("hackathon")
        .filter(invitation_token=token, status=model.STATUS_PENDING)
        .first()
        if token else None
    )
    if entry is None:
        raise NotFoundError("Invalid invitation token")
    if entry.user_id != user.id:
        logger.warning(
            "Invitation token used by another user: kind=%s, entry=%s, user=%s",
            kind, entry.id, user.id,
        )
        raise ForbiddenError("Not authorized")
    return entry


def accept_invitation(kind, token, user):
    with transaction.atomic():
        entry = _resolve_token(kind, token, user)
        entry.status = entry.STATUS_ACCEPTED
        entry.invitation_token = None
        entry.accepted_at = timezone.now()
        entry.save(update_fields=["status", "invitation_token", "accepted_at"])

    logger.info("Invitation accepted: kind=%s, hackathon=%s, user=%s", kind, entry.hackathon_id, user.id)
    return entry


def decline_invitation(kind, token, user):
    with transaction.atomic():
        entry = _resolve_token(kind, token, user)
        entry.status = entry.STATUS_DECLINED
        entry.invitation_token = None
        entry.save(update_fields=["status", "invitation_token"])

    logger.info("Invitation declined: kind=%s, hackathon=%s, user=%s", kind, entry.hackathon_id, user.id)
    return entry


# ─────────────────────────────────────────────────────────────
# Organizer-side coordinator management
# ─────────────────────────────────────────────────────────────


def _get_coordinator(hackathon, user_id):
    entry = Coordinator.objects.filter(hackathon=hackathon, user_id=user_id).first()
    if entry is None:
        raise NotFoundError("Coordinator not found")
    return entry


def update_coordinator_permissions(hackathon, organizer, user_id, permissions):
    HackathonPolicy.require_organizer(organizer, hackathon)
    entry = _get_coordinator(hackathon, user_id)
    parsed = parse_permissions(permissions)
    for name, value in parsed.items():
        setattr(entry, name, value)
    entry.save(update_fields=list(parsed) or None)
    logger.info("Coordinator permissions updated: hackathon=%s, user=%s", hackathon.id, user_id)
    return entry


def remove_coordinator(hackathon, organizer, user_id):
    HackathonPolicy.require_organizer(organizer, hackathon)
    entry = _get_coordinator(hackathon, user_id)
    entry.delete()
    logger.info("Coordinator removed: hackathon=%s, user=%s", hackathon.id, user_id)


def cancel_coordinator_invitation(hackathon, organizer, user_id):
    HackathonPolicy.require_organizer(organizer, hackathon)
    entry = _get_coordinator(hackathon, user_id)
    if entry.status != Coordinator.STATUS_PENDING:
        raise ValidationError("Only pending invitations can be cancelled")
    entry.delete()
    logger.info("Coordinator invitation cancelled: hackathon=%s, user=%s", hackathon.id, user_id)


def resend_coordinator_invitation(hackathon, organizer, user_id):
    HackathonPolicy.require_organizer(organizer, hackathon)
    entry = _get_coordinator(hackathon, user_id)
    if entry.status != Coordinator.STATUS_PENDING:
        raise ValidationError("Only pending invitations can be resent")
    entry.invitation_token = generate_invitation_token()
    entry.save(update_fields=["invitation_token"])
    _notify_invitee(KIND_COORDINATOR, entry, organizer)
    return entry
