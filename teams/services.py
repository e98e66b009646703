# teams/services.py
"""
Team workflow services.

Views stay thin and call into this module. Every function takes model
instances plus the acting user, raises a core.exceptions domain error on
failure, and publishes notices through notifications.dispatcher. Status
changes go through teams.state_machine.
"""
from decimal import Decimal, InvalidOperation
import logging

from django.db import IntegrityError, transaction
from django.utils import timezone

from core.exceptions import (
    DomainError,
    DuplicateError,
    DuplicateRequestError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    TeamFullError,
    ValidationError,
)
from hackathons import permissions as perms
from hackathons.policies import HackathonPolicy
from notifications import dispatcher
from . import state_machine
from .models import Team, TeamMember, JoinRequest, Submission, Score, TeamNote

logger = logging.getLogger("hackhub.teams")

EDITABLE_TEAM_FIELDS = ("name", "project_title", "project_description", "tech_stack", "looking_for_members")
SUBMISSION_FIELDS = (
    "project_link", "github_link", "demo_link", "video_link",
    "presentation_link", "description", "tech_stack",
)


# ─────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────

def _context(team, **extra):
    ctx = {
        "team_id": team.id,
        "team_name": team.name,
        "hackathon_id": team.hackathon_id,
        "hackathon_title": team.hackathon.title,
    }
    ctx.update(extra)
    return ctx


def _member_ids(team):
    return list(team.active_members().values_list("user_id", flat=True))


def _lock(team):
    """Re-read the team row under select_for_update. Call inside transaction.atomic()."""
    return Team.objects.select_for_update().get(pk=team.pk)


def is_leader(team, user) -> bool:
    return bool(user and user.is_authenticated and team.leader_id == user.id)


def require_leader(team, user, action="do this"):
    if not is_leader(team, user):
        logger.warning("Leader check failed: team=%s, user=%s", team.id, getattr(user, "id", None))
        raise ForbiddenError(f"Only the team leader can {action}")


def active_membership(hackathon, user):
    """The user's active TeamMember row in this hackathon, or None."""
    return (
        TeamMember.objects.select_related("team")
        .filter(team__hackathon=hackathon, user=user, status=TeamMember.STATUS_ACTIVE)
        .first()
    )


def _clean_name(name):
    name = (name or "").strip()
    if not name:
        raise ValidationError("Team name is required")
    return name


def _ensure_name_free(hackathon, name, exclude_id=None):
    qs = Team.objects.filter(hackathon=hackathon, name__iexact=name)
    if exclude_id is not None:
        qs = qs.exclude(pk=exclude_id)
    if qs.exists():
        raise DuplicateError("Team name already taken in this hackathon")


# ─────────────────────────────────────────────────────────────
# Registration and team details
# ─────────────────────────────────────────────────────────────

def register_team(hackathon, user, name, project_title="", project_description="",
                  tech_stack=None, looking_for_members=False):
    """
    Create a draft team with user as its leader.
    """
    name = _clean_name(name)

    if not hackathon.is_registration_open(timezone.now()):
        raise InvalidStateError("Registration is closed for this hackathon")

    if active_membership(hackathon, user) is not None:
        raise DuplicateError("You are already in a team for this hackathon")

    _ensure_name_free(hackathon, name)

    if hackathon.teams.exclude(submission_status=Team.STATUS_REJECTED).count() >= hackathon.max_teams:
        raise InvalidStateError("This hackathon has reached its team limit")

    payment = {}
    if hackathon.requires_payment:
        payment = {
            "payment_status": Team.PAYMENT_PENDING,
            "payment_amount": hackathon.registration_fee_amount,
            "payment_currency": hackathon.registration_fee_currency,
        }

    try:
        with transaction.atomic():
            team = Team.objects.create(
                hackathon=hackathon,
                name=name,
                leader=user,
                project_title=project_title or "",
                project_description=project_description or "",
                tech_stack=tech_stack or [],
                looking_for_members=bool(looking_for_members),
                **payment,
            )
            TeamMember.objects.create(team=team, user=user, role=TeamMember.ROLE_LEADER)
    except IntegrityError:
        raise DuplicateError("Team name already taken in this hackathon")

    logger.info("Team registered: team=%s, hackathon=%s, leader=%s", team.id, hackathon.id, user.id)
    dispatcher.publish(dispatcher.TEAM_REGISTERED, [user], **_context(team))
    return team


def update_team(team, user, data):
    """
    Leader edits while the team is a draft. Staff holding canEditTeams can
    edit at any status.
    """
    if is_leader(team, user):
        if not state_machine.is_editable(team):
            raise InvalidStateError("Team details are locked once the team is submitted")
    else:
        HackathonPolicy.require_permission(user, team.hackathon, perms.PERM_EDIT_TEAMS)

    changes = {k: v for k, v in data.items() if k in EDITABLE_TEAM_FIELDS}
    if "name" in changes:
        changes["name"] = _clean_name(changes["name"])
        _ensure_name_free(team.hackathon, changes["name"], exclude_id=team.id)
    if "tech_stack" in changes and not isinstance(changes["tech_stack"], list):
        raise ValidationError("tech_stack must be a list")

    for field, value in changes.items():
        setattr(team, field, value)
    team.save()
    logger.info("Team updated: team=%s, by=%s, fields=%s", team.id, user.id, sorted(changes))
    return team


def delete_team(team, user):
    require_leader(team, user, "delete the team")
    if not state_machine.is_editable(team):
        raise InvalidStateError("Only draft teams can be deleted")
    team_id = team.id
    team.delete()
    logger.info("Team deleted: team=%s, by=%s", team_id, user.id)


# ─────────────────────────────────────────────────────────────
# Membership
# ─────────────────────────────────────────────────────────────

def remove_member(team, user, member_user_id):
    """Leader removes a member (by user id) while the team is a draft."""
    with transaction.atomic():
        team = _lock(team)
        require_leader(team, user, "remove members")
        if not state_machine.is_editable(team):
            raise InvalidStateError("Members can only be removed while the team is a draft")

        member = team.active_members().filter(user_id=member_user_id).first()
        if member is None:
            raise NotFoundError("Member not found")
        if member.role == TeamMember.ROLE_LEADER:
            raise ValidationError("The team leader cannot be removed")

        member.status = TeamMember.STATUS_REMOVED
        member.save(update_fields=["status"])

    logger.info("Member removed: team=%s, user=%s, by=%s", team.id, member_user_id, user.id)
    return member


def leave_team(team, user):
    with transaction.atomic():
        team = _lock(team)
        member = team.active_members().filter(user=user).first()
        if member is None:
            raise NotFoundError("You are not a member of this team")
        if member.role == TeamMember.ROLE_LEADER:
            raise InvalidStateError("Transfer leadership before leaving the team")
        if not state_machine.is_editable(team):
            raise InvalidStateError("You cannot leave a team that has been submitted")

        member.status = TeamMember.STATUS_REMOVED
        member.save(update_fields=["status"])

    logger.info("Member left: team=%s, user=%s", team.id, user.id)
    return member


def transfer_leadership(team, user, new_leader_id):
    """
    Hand leadership to another active member. The old and new TeamMember
    rows and Team.leader change together, so there is always exactly one
    active leader.
    """
    with transaction.atomic():
        team = _lock(team)
        require_leader(team, user, "transfer leadership")

        if str(new_leader_id) == str(user.id):
            raise ValidationError("You are already the team leader")

        new_member = team.active_members().filter(user_id=new_leader_id).first()
        if new_member is None:
            raise NotFoundError("New leader must be an active member of the team")

        team.active_members().filter(role=TeamMember.ROLE_LEADER).update(role=TeamMember.ROLE_MEMBER)
        new_member.role = TeamMember.ROLE_LEADER
        new_member.save(update_fields=["role"])

        team.leader_id = new_member.user_id
        team.save(update_fields=["leader", "updated_at"])

    logger.info("Leadership transferred: team=%s, from=%s, to=%s", team.id, user.id, new_member.user_id)
    return team


# ─────────────────────────────────────────────────────────────
# Approval workflow
# ─────────────────────────────────────────────────────────────

def confirm_team(team, user):
    """
    Leader submits the team for review. With auto_accept_teams the team is
    approved right away by the system.
    """
    hackathon = team.hackathon
    with transaction.atomic():
        team = _lock(team)
        require_leader(team, user, "confirm the team")

        if team.submission_status != Team.STATUS_DRAFT:
            raise InvalidStateError("Only draft teams can be confirmed")

        count = team.active_member_count
        if not (hackathon.min_members <= count <= hackathon.max_members):
            raise InvalidStateError(
                f"Team must have between {hackathon.min_members} and "
                f"{hackathon.max_members} active members (currently {count})"
            )

        state_machine.transition(team, Team.STATUS_SUBMITTED, actor=user)
        auto_approved = hackathon.auto_accept_teams
        if auto_approved:
            state_machine.transition(team, Team.STATUS_APPROVED, actor=None)

    dispatcher.publish(
        dispatcher.TEAM_SUBMITTED,
        [team.leader_id, hackathon.organizer_id],
        **_context(team),
    )
    if auto_approved:
        dispatcher.publish(dispatcher.TEAM_APPROVED, _member_ids(team), **_context(team))
    return team


def approve_team(team, user):
    HackathonPolicy.require_permission(user, team.hackathon, perms.PERM_ELIMINATE_TEAMS)

    with transaction.atomic():
        team = _lock(team)
        if team.submission_status != Team.STATUS_SUBMITTED:
            raise InvalidStateError(f"Only submitted teams can be approved (status: {team.submission_status})")
        state_machine.transition(team, Team.STATUS_APPROVED, actor=user)

    dispatcher.publish(dispatcher.TEAM_APPROVED, _member_ids(team), **_context(team))
    return team


def reject_team(team, user, reason):
    HackathonPolicy.require_permission(user, team.hackathon, perms.PERM_ELIMINATE_TEAMS)

    if reason is None or not str(reason).strip():
        raise ValidationError("A rejection reason is required")

    with transaction.atomic():
        team = _lock(team)
        if team.submission_status != Team.STATUS_SUBMITTED:
            raise InvalidStateError(f"Only submitted teams can be rejected (status: {team.submission_status})")
        state_machine.transition(team, Team.STATUS_REJECTED, actor=user, reason=reason)

    dispatcher.publish(dispatcher.TEAM_REJECTED, _member_ids(team), **_context(team, reason=reason))
    return team


def _bulk(hackathon, team_ids, user, action, result_key):
    if not isinstance(team_ids, (list, tuple)) or not team_ids:
        raise ValidationError("team_ids must be a non-empty list")

    done, failed = [], []
    for team_id in team_ids:
        team = Team.objects.select_related("hackathon").filter(pk=team_id, hackathon=hackathon).first()
        if team is None:
            failed.append({"team_id": team_id, "message": "Team not found"})
            continue
        try:
            action(team)
        except DomainError as exc:
            failed.append({"team_id": team_id, "message": str(exc.detail)})
        else:
            done.append(team.id)

    logger.info(
        "Bulk %s: hackathon=%s, by=%s, ok=%s, failed=%s",
        result_key, hackathon.id, user.id, len(done), len(failed),
    )
    return {result_key: done, "failed": failed}


def bulk_approve(hackathon, team_ids, user):
    """Approve each team on its own. Failures are collected, nothing is rolled back."""
    HackathonPolicy.require_permission(user, hackathon, perms.PERM_ELIMINATE_TEAMS)
    return _bulk(hackathon, team_ids, user, lambda team: approve_team(team, user), "approved")


def bulk_reject(hackathon, team_ids, user, reason):
    HackathonPolicy.require_permission(user, hackathon, perms.PERM_ELIMINATE_TEAMS)
    if reason is None or not str(reason).strip():
        raise ValidationError("A rejection reason is required")
    return _bulk(hackathon, team_ids, user, lambda team: reject_team(team, user, reason), "rejected")


# ─────────────────────────────────────────────────────────────
# Join requests and invitations
# ─────────────────────────────────────────────────────────────

def _ensure_can_join(team, user):
    if team.submission_status != Team.STATUS_DRAFT:
        raise InvalidStateError("This team is no longer accepting members")
    if active_membership(team.hackathon, user) is not None:
        raise DuplicateError("User is already in a team for this hackathon")
    if team.join_requests.filter(user=user, status=JoinRequest.STATUS_PENDING).exists():
        raise DuplicateRequestError("A pending request already exists for this team")
    if team.active_member_count >= team.hackathon.max_members:
        raise TeamFullError()


def send_join_request(team, user, message=""):
    with transaction.atomic():
        team = _lock(team)
        _ensure_can_join(team, user)
        join_request = JoinRequest.objects.create(
            team=team,
            user=user,
            kind=JoinRequest.KIND_REQUEST,
            initiated_by=user,
            message=message or "",
        )

    logger.info("Join request sent: team=%s, user=%s, request=%s", team.id, user.id, join_request.id)
    dispatcher.publish(
        dispatcher.JOIN_REQUEST_RECEIVED,
        [team.leader_id],
        **_context(team, actor_name=user.display_name, message=join_request.message),
    )
    return join_request


def invite_member(team, leader, invitee, message=""):
    with transaction.atomic():
        team = _lock(team)
        require_leader(team, leader, "invite members")
        if invitee.pk == leader.pk:
            raise ValidationError("You cannot invite yourself")
        _ensure_can_join(team, invitee)
        join_request = JoinRequest.objects.create(
            team=team,
            user=invitee,
            kind=JoinRequest.KIND_INVITE,
            initiated_by=leader,
            message=message or "",
        )

    logger.info("Member invited: team=%s, user=%s, by=%s", team.id, invitee.id, leader.id)
    dispatcher.publish(
        dispatcher.TEAM_INVITED,
        [invitee],
        **_context(team, actor_name=leader.display_name),
    )
    return join_request


def _get_request(team, request_id, lock=False):
    qs = JoinRequest.objects.select_related("user")
    if lock:
        qs = qs.select_for_update()
    join_request = qs.filter(team=team, pk=request_id).first()
    if join_request is None:
        raise NotFoundError("Join request not found")
    return join_request


def _require_responder(team, join_request, user):
    """Leader answers requests; the invited user answers invites."""
    if join_request.kind == JoinRequest.KIND_INVITE:
        if join_request.user_id != user.id:
            raise ForbiddenError("Only the invited user can respond to this invitation")
    else:
        require_leader(team, user, "respond to join requests")


def _require_pending(join_request):
    if join_request.status != JoinRequest.STATUS_PENDING:
        raise InvalidStateError(f"Join request is already {join_request.status}")


def accept_join_request(team, request_id, user):
    """
    Add the requester as an active member. The team row is locked so
    concurrent accepts cannot push the team past max_members.
    """
    with transaction.atomic():
        team = _lock(team)
        join_request = _get_request(team, request_id, lock=True)
        _require_responder(team, join_request, user)
        _require_pending(join_request)

        if team.submission_status != Team.STATUS_DRAFT:
            raise InvalidStateError("This team is no longer accepting members")
        if team.active_member_count >= team.hackathon.max_members:
            raise TeamFullError()
        if active_membership(team.hackathon, join_request.user) is not None:
            raise DuplicateError("User is already in a team for this hackathon")

        member, created = TeamMember.objects.get_or_create(
            team=team,
            user=join_request.user,
            defaults={"role": TeamMember.ROLE_MEMBER},
        )
        if not created:
            member.status = TeamMember.STATUS_ACTIVE
            member.role = TeamMember.ROLE_MEMBER
            member.checked_in = False
            member.checked_in_at = None
            member.save(update_fields=["status", "role", "checked_in", "checked_in_at"])

        join_request.status = JoinRequest.STATUS_ACCEPTED
        join_request.responded_at = timezone.now()
        join_request.save(update_fields=["status", "responded_at"])

    logger.info(
        "Join request accepted: team=%s, request=%s, member=%s, by=%s",
        team.id, join_request.id, join_request.user_id, user.id,
    )
    dispatcher.publish(
        dispatcher.JOIN_REQUEST_ACCEPTED,
        [r for r in (join_request.user_id, team.leader_id) if r != user.id],
        **_context(team, actor_name=join_request.user.display_name),
    )
    return join_request


def reject_join_request(team, request_id, user, reason=None):
    with transaction.atomic():
        join_request = _get_request(team, request_id, lock=True)
        _require_responder(team, join_request, user)
        _require_pending(join_request)

        join_request.status = JoinRequest.STATUS_REJECTED
        join_request.response_reason = reason or ""
        join_request.responded_at = timezone.now()
        join_request.save(update_fields=["status", "response_reason", "responded_at"])

    logger.info("Join request rejected: team=%s, request=%s, by=%s", team.id, join_request.id, user.id)
    other_party = join_request.user_id if join_request.kind == JoinRequest.KIND_REQUEST else team.leader_id
    dispatcher.publish(
        dispatcher.JOIN_REQUEST_REJECTED,
        [other_party],
        **_context(team, reason=join_request.response_reason),
    )
    return join_request


def cancel_join_request(team, request_id, user):
    """The requester withdraws a request; the leader withdraws an invite."""
    with transaction.atomic():
        join_request = _get_request(team, request_id, lock=True)
        if join_request.kind == JoinRequest.KIND_INVITE:
            require_leader(team, user, "cancel invitations")
        elif join_request.user_id != user.id:
            raise ForbiddenError("Only the requester can cancel this request")
        _require_pending(join_request)

        join_request.status = JoinRequest.STATUS_CANCELLED
        join_request.responded_at = timezone.now()
        join_request.save(update_fields=["status", "responded_at"])

    logger.info("Join request cancelled: team=%s, request=%s, by=%s", team.id, join_request.id, user.id)
    return join_request


def team_join_requests(team, user, status=None, kind=None):
    require_leader(team, user, "view join requests")
    qs = team.join_requests.select_related("user", "initiated_by")
    if status:
        qs = qs.filter(status=status)
    if kind:
        qs = qs.filter(kind=kind)
    return qs


def pending_invitations(team, user):
    return team_join_requests(team, user, status=JoinRequest.STATUS_PENDING, kind=JoinRequest.KIND_INVITE)


def my_join_requests(user):
    """Requests the user sent, and invitations the user received."""
    qs = JoinRequest.objects.filter(user=user).select_related("team", "team__hackathon", "initiated_by")
    return {
        "sent": qs.filter(kind=JoinRequest.KIND_REQUEST),
        "received": qs.filter(kind=JoinRequest.KIND_INVITE),
    }


# ─────────────────────────────────────────────────────────────
# Event-day operations
# ─────────────────────────────────────────────────────────────

def _require_check_in(team, user):
    HackathonPolicy.require_permission(user, team.hackathon, perms.PERM_CHECK_IN)
    if not team.hackathon.enable_check_in:
        raise InvalidStateError("Check-in is disabled for this hackathon")
    if team.submission_status != Team.STATUS_APPROVED:
        raise InvalidStateError("Only approved teams can be checked in")
    if team.is_eliminated:
        raise InvalidStateError("Team has been eliminated")


def check_in_team(team, user):
    _require_check_in(team, user)
    if team.checked_in:
        raise InvalidStateError("Team is already checked in")

    team.checked_in = True
    team.checked_in_at = timezone.now()
    team.save(update_fields=["checked_in", "checked_in_at", "updated_at"])
    logger.info("Team checked in: team=%s, by=%s", team.id, user.id)
    return team


def check_in_member(team, user, member_user_id):
    _require_check_in(team, user)
    member = team.active_members().filter(user_id=member_user_id).first()
    if member is None:
        raise NotFoundError("Member not found")
    if member.checked_in:
        raise InvalidStateError("Member is already checked in")

    member.checked_in = True
    member.checked_in_at = timezone.now()
    member.save(update_fields=["checked_in", "checked_in_at"])
    logger.info("Member checked in: team=%s, user=%s, by=%s", team.id, member_user_id, user.id)
    return member


def assign_numbers(team, user, table_number=None, team_number=None):
    HackathonPolicy.require_permission(user, team.hackathon, perms.PERM_ASSIGN_TABLES)
    if table_number is None and team_number is None:
        raise ValidationError("Provide table_number or team_number")

    fields = ["updated_at"]
    if team_number is not None:
        team_number = str(team_number).strip()
        taken = (
            Team.objects.filter(hackathon_id=team.hackathon_id, team_number=team_number)
            .exclude(pk=team.pk)
            .exists()
        )
        if team_number and taken:
            raise DuplicateError(f"Team number {team_number} is already assigned")
        team.team_number = team_number
        fields.append("team_number")
    if table_number is not None:
        team.table_number = str(table_number).strip()
        fields.append("table_number")

    team.save(update_fields=fields)
    logger.info("Numbers assigned: team=%s, table=%s, number=%s", team.id, team.table_number, team.team_number)
    return team


def eliminate_team(team, user, reason=""):
    HackathonPolicy.require_permission(user, team.hackathon, perms.PERM_ELIMINATE_TEAMS)
    if team.submission_status != Team.STATUS_APPROVED:
        raise InvalidStateError("Only approved teams can be eliminated")
    if team.is_eliminated:
        raise InvalidStateError("Team is already eliminated")

    team.is_eliminated = True
    team.elimination_reason = reason or ""
    team.eliminated_at = timezone.now()
    team.save(update_fields=["is_eliminated", "elimination_reason", "eliminated_at", "updated_at"])

    logger.info("Team eliminated: team=%s, by=%s", team.id, user.id)
    dispatcher.publish(dispatcher.TEAM_ELIMINATED, _member_ids(team), **_context(team, reason=reason))
    return team


# ─────────────────────────────────────────────────────────────
# Submissions and judging
# ─────────────────────────────────────────────────────────────

def _get_round(team, round_id):
    round_obj = team.hackathon.rounds.filter(pk=round_id).first()
    if round_obj is None:
        raise NotFoundError("Round not found")
    return round_obj


def _require_competing(team):
    if team.submission_status != Team.STATUS_APPROVED:
        raise InvalidStateError("Only approved teams can take part in rounds")
    if team.is_eliminated:
        raise InvalidStateError("Team has been eliminated")


def submit_project(team, user, round_id, data):
    """Create or replace the team's submission for a round."""
    if not team.is_member(user):
        raise ForbiddenError("Only team members can submit projects")
    _require_competing(team)
    round_obj = _get_round(team, round_id)

    if round_obj.end_time and timezone.now() > round_obj.end_time:
        raise InvalidStateError("The submission deadline for this round has passed")

    defaults = {k: v for k, v in data.items() if k in SUBMISSION_FIELDS and v is not None}
    defaults["submitted_by"] = user
    submission, created = Submission.objects.update_or_create(
        team=team, round=round_obj, defaults=defaults,
    )
    logger.info(
        "Project %s: team=%s, round=%s, by=%s",
        "submitted" if created else "resubmitted", team.id, round_obj.id, user.id,
    )
    return submission


def _score_breakdown(round_obj, criteria_scores):
    if not isinstance(criteria_scores, list) or not criteria_scores:
        raise ValidationError("criteria_scores must be a non-empty list")

    cleaned, seen, total = [], set(), Decimal("0")
    for item in criteria_scores:
        if not isinstance(item, dict):
            raise ValidationError("Each score must be an object with criterion and score")
        name = str(item.get("criterion") or "").strip()
        if not name:
            raise ValidationError("Each score needs a criterion")
        if name in seen:
            raise ValidationError(f"Duplicate criterion: {name}")
        seen.add(name)

        try:
            value = Decimal(str(item.get("score")))
        except (InvalidOperation, TypeError, ValueError):
            raise ValidationError(f"Score for {name} must be a number")
        if not value.is_finite():
            raise ValidationError(f"Score for {name} must be a number")

        criterion = round_obj.criterion(name)
        if round_obj.judging_criteria and criterion is None:
            raise ValidationError(f"Unknown criterion: {name}")
        max_points = Decimal(str(criterion["max_points"])) if criterion else Decimal(round_obj.max_score)
        if value < 0 or value > max_points:
            raise ValidationError(f"Score for {name} must be between 0 and {max_points}")

        cleaned.append({"criterion": name, "score": float(value)})
        total += value

    if total > round_obj.max_score:
        raise ValidationError(f"Total score cannot exceed {round_obj.max_score}")
    return cleaned, total


def score_team(team, user, round_id, criteria_scores, remarks="", feedback=""):
    HackathonPolicy.require_judge(user, team.hackathon)
    _require_competing(team)
    round_obj = _get_round(team, round_id)
    cleaned, total = _score_breakdown(round_obj, criteria_scores)

    score, _ = Score.objects.update_or_create(
        team=team,
        round=round_obj,
        judge=user,
        defaults={
            "criteria_scores": cleaned,
            "total": total,
            "remarks": remarks or "",
            "feedback": feedback or "",
        },
    )
    logger.info("Team scored: team=%s, round=%s, judge=%s, total=%s", team.id, round_obj.id, user.id, total)
    return score


def leaderboard(hackathon, user, round_id=None):
    """
    Ranked approved, non-eliminated teams. A team's round score is the mean
    of its judges' totals; the overall score sums the rounds.
    """
    if not hackathon.enable_leaderboard and not HackathonPolicy.is_staff_member(user, hackathon):
        raise ForbiddenError("The leaderboard is not public for this hackathon")

    teams = hackathon.teams.filter(submission_status=Team.STATUS_APPROVED, is_eliminated=False)
    scores = Score.objects.filter(team__in=teams)
    if round_id is not None:
        scores = scores.filter(round_id=round_id)

    per_round = {}
    for team_id, rnd_id, total in scores.values_list("team_id", "round_id", "total"):
        per_round.setdefault(team_id, {}).setdefault(rnd_id, []).append(total)

    rows = []
    for team in teams:
        rounds = per_round.get(team.id, {})
        overall = sum((sum(v) / len(v) for v in rounds.values()), Decimal("0"))
        rows.append({
            "team_id": team.id,
            "team_name": team.name,
            "team_number": team.team_number,
            "total_score": round(float(overall), 2),
            "judged_rounds": len(rounds),
        })

    rows.sort(key=lambda r: (-r["total_score"], r["team_name"].lower()))
    for index, row in enumerate(rows, start=1):
        row["rank"] = index
    return rows


# ─────────────────────────────────────────────────────────────
# Staff listings and communication
# ─────────────────────────────────────────────────────────────

def hackathon_teams(hackathon, user, status=None, looking_for_members=None):
    """
    Staff holding canViewTeams see every team. Everyone else only sees
    draft teams that are looking for members.
    """
    qs = hackathon.teams.select_related("leader", "hackathon").prefetch_related("members__user")
    if HackathonPolicy.has_permission(user, hackathon, perms.PERM_VIEW_TEAMS):
        if status:
            qs = qs.filter(submission_status=status)
        if looking_for_members is not None:
            qs = qs.filter(looking_for_members=looking_for_members)
        return qs
    return qs.filter(submission_status=Team.STATUS_DRAFT, looking_for_members=True)


def submitted_teams(hackathon, user):
    HackathonPolicy.require_permission(user, hackathon, perms.PERM_VIEW_TEAMS)
    return hackathon.teams.filter(submission_status=Team.STATUS_SUBMITTED).select_related("leader", "hackathon")


def hackathon_submissions(hackathon, user, round_id=None):
    HackathonPolicy.require_permission(user, hackathon, perms.PERM_VIEW_SUBMISSIONS)
    qs = Submission.objects.filter(team__hackathon=hackathon).select_related("team", "round", "submitted_by")
    if round_id is not None:
        qs = qs.filter(round_id=round_id)
    return qs


def my_teams(user, hackathon_id=None):
    qs = Team.objects.filter(
        members__user=user, members__status=TeamMember.STATUS_ACTIVE,
    ).select_related("hackathon", "leader").distinct()
    if hackathon_id is not None:
        qs = qs.filter(hackathon_id=hackathon_id)
    return qs


def team_notes(team, user):
    HackathonPolicy.require_permission(user, team.hackathon, perms.PERM_COMMUNICATE)
    return team.notes.select_related("author")


def add_note(team, user, body):
    HackathonPolicy.require_permission(user, team.hackathon, perms.PERM_COMMUNICATE)
    body = (body or "").strip()
    if not body:
        raise ValidationError("Note body is required")
    note = TeamNote.objects.create(team=team, author=user, body=body)
    logger.info("Note added: team=%s, by=%s", team.id, user.id)
    dispatcher.publish(
        dispatcher.TEAM_NOTE,
        [team.leader_id],
        **_context(team, actor_name=user.display_name, body=body),
    )
    return note


def send_announcement(hackathon, user, title, message):
    """
    Mail every active member of a non-rejected team. Returns the number of
    recipients the notice was addressed to.
    """
    HackathonPolicy.require_permission(user, hackathon, perms.PERM_COMMUNICATE)
    title, message = (title or "").strip(), (message or "").strip()
    if not title or not message:
        raise ValidationError("Announcement title and message are required")

    recipient_ids = (
        TeamMember.objects.filter(team__hackathon=hackathon, status=TeamMember.STATUS_ACTIVE)
        .exclude(team__submission_status=Team.STATUS_REJECTED)
        .values_list("user_id", flat=True)
        .distinct()
    )
    notice = dispatcher.publish(
        dispatcher.HACKATHON_ANNOUNCEMENT,
        list(recipient_ids),
        hackathon_id=hackathon.id,
        hackathon_title=hackathon.title,
        title=title,
        message=message,
    )
    logger.info("Announcement sent: hackathon=%s, by=%s, recipients=%s", hackathon.id, user.id, len(notice.recipient_ids))
    return len(notice.recipient_ids)
