# notifications/emails.py
from django.conf import settings
from django.core.mail import send_mail

from . import dispatcher as kinds
from .models import Notification

SIGNATURE = "Best regards,\nHackathon Platform Team"


def build_frontend_url(path):
    """Absolute SPA link; FRONTEND_URL has no trailing slash."""
    base = getattr(settings, "FRONTEND_URL", "")
    return f"{base}/{path.lstrip('/')}"


def invitation_links(role, token):
    """
    Accept/decline links for coordinator and judge invitations.
    role is "coordinator" or "judge".
    """
    return (
        build_frontend_url(f"{role}/accept/{token}"),
        build_frontend_url(f"{role}/decline/{token}"),
    )


def _team_link(ctx):
    return build_frontend_url(f"teams/{ctx.get('team_id')}") if ctx.get("team_id") else ""


def _invitation(role_label, ctx):
    subject = f"{role_label} Invitation: {ctx.get('hackathon_title')}"
    body = (
        f"{ctx.get('actor_name')} has invited you to be a {role_label.lower()} for the hackathon:\n"
        f"  {ctx.get('hackathon_title')}\n\n"
        f"Accept the invitation:\n{ctx.get('accept_url')}\n\n"
        f"Decline the invitation:\n{ctx.get('decline_url')}\n"
    )
    return subject, body, Notification.TYPE_INVITATION, ctx.get("accept_url", "")


def render(kind, ctx):
    """
    Returns (subject, body, notification_type, link) for a notice kind.
    Raises KeyError for kinds we do not know how to render.
    """
    team = ctx.get("team_name")
    hackathon = ctx.get("hackathon_title")

    if kind == kinds.TEAM_REGISTERED:
        return (
            f"Registration received: {hackathon}",
            f"Your team {team} has been registered for {hackathon}.\n"
            f"Invite your teammates and confirm the team once it is complete.\n",
            Notification.TYPE_TEAM_STATUS,
            _team_link(ctx),
        )
    if kind == kinds.TEAM_SUBMITTED:
        return (
            f"Team submitted for review: {team}",
            f"Team {team} has been submitted for approval in {hackathon}.\n",
            Notification.TYPE_TEAM_STATUS,
            _team_link(ctx),
        )
    if kind == kinds.TEAM_APPROVED:
        return (
            f"Your team has been approved: {team}",
            f"Congratulations! Team {team} has been approved for {hackathon}.\n",
            Notification.TYPE_TEAM_STATUS,
            _team_link(ctx),
        )
    if kind == kinds.TEAM_REJECTED:
        return (
            f"Team application update: {team}",
            f"Unfortunately team {team} was not approved for {hackathon}.\n\n"
            f"Reason: {ctx.get('reason')}\n",
            Notification.TYPE_TEAM_STATUS,
            _team_link(ctx),
        )
    if kind == kinds.TEAM_ELIMINATED:
        return (
            f"Team eliminated: {team}",
            f"Team {team} has been eliminated from {hackathon}.\n\n"
            f"Reason: {ctx.get('reason') or 'Not specified'}\n",
            Notification.TYPE_TEAM_STATUS,
            _team_link(ctx),
        )
    if kind == kinds.TEAM_INVITED:
        return (
            f"You've been invited to join {team}",
            f"{ctx.get('actor_name')} invited you to join team {team} for {hackathon}.\n"
            f"Open your team requests to accept or decline.\n",
            Notification.TYPE_JOIN_REQUEST,
            _team_link(ctx),
        )
    if kind == kinds.JOIN_REQUEST_RECEIVED:
        return (
            f"New join request for {team}",
            f"{ctx.get('actor_name')} would like to join team {team}.\n\n"
            f"Message: {ctx.get('message') or '-'}\n",
            Notification.TYPE_JOIN_REQUEST,
            _team_link(ctx),
        )
    if kind == kinds.JOIN_REQUEST_ACCEPTED:
        return (
            f"Join request accepted: {team}",
            f"{ctx.get('actor_name')} is now a member of team {team}.\n",
            Notification.TYPE_JOIN_REQUEST,
            _team_link(ctx),
        )
    if kind == kinds.JOIN_REQUEST_REJECTED:
        return (
            f"Join request declined: {team}",
            f"The join request for team {team} was declined.\n\n"
            f"Reason: {ctx.get('reason') or 'Not specified'}\n",
            Notification.TYPE_JOIN_REQUEST,
            _team_link(ctx),
        )
    if kind == kinds.COORDINATOR_INVITED:
        return _invitation("Coordinator", ctx)
    if kind == kinds.JUDGE_INVITED:
        return _invitation("Judge", ctx)
    if kind == kinds.HACKATHON_ANNOUNCEMENT:
        return (
            f"[Update] {hackathon} - {ctx.get('title')}",
            f"{ctx.get('message')}\n",
            Notification.TYPE_ANNOUNCEMENT,
            "",
        )
    if kind == kinds.TEAM_NOTE:
        return (
            f"Message from Organizers: {hackathon}",
            f"{ctx.get('actor_name')} left a note for team {team}:\n\n"
            f"{ctx.get('body')}\n\n"
            f"View your team:\n{_team_link(ctx)}\n",
            Notification.TYPE_TEAM_STATUS,
            _team_link(ctx),
        )
    raise KeyError(kind)


def send_notice_email(user, subject, body):
    """Plain-text mail. Users without an email address are skipped."""
    if not getattr(user, "email", None):
        return False

    greeting = user.display_name if hasattr(user, "display_name") else user.username
    send_mail(
        subject=subject,
        message=f"Hi {greeting},\n\n{body}\n{SIGNATURE}",
        from_email=getattr(settings, "DEFAULT_FROM_EMAIL", None),
        recipient_list=[user.email],
        fail_silently=False,
    )
    return True
