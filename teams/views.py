# teams/views.py - Team workflow API views

from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from core.exceptions import NotFoundError
from core.responses import api_success, parse_bool
from core.throttles import InviteThrottle, JoinRequestThrottle
from hackathons.models import Hackathon
from . import services
from .models import Team
from .serializers import (
    TeamSerializer,
    TeamRegisterSerializer,
    TeamUpdateSerializer,
    JoinRequestSerializer,
    SubmissionSerializer,
    SubmitProjectSerializer,
    ScoreSerializer,
    ScoreTeamSerializer,
    TeamNoteSerializer,
    TeamMemberSerializer,
    BulkTeamsSerializer,
    TransferLeadershipSerializer,
    InviteMemberSerializer,
    RoundFilterSerializer,
)

User = get_user_model()


def get_team(team_id):
    team = (
        Team.objects.select_related("hackathon", "leader")
        .prefetch_related("members__user")
        .filter(pk=team_id)
        .first()
    )
    if team is None:
        raise NotFoundError("Team not found")
    return team


def get_hackathon(hackathon_id):
    hackathon = Hackathon.objects.filter(pk=hackathon_id).first()
    if hackathon is None:
        raise NotFoundError("Hackathon not found")
    return hackathon


def _validated(serializer_class, data, **kwargs):
    serializer = serializer_class(data=data, **kwargs)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data


def _team_payload(team):
    return TeamSerializer(get_team(team.pk)).data


# ─────────────────────────────────────────────────────────────
# Registration / my teams
# ─────────────────────────────────────────────────────────────

class TeamRegisterView(APIView):
    """POST /api/teams/register/ - caller becomes the leader"""
    permission_classes = [IsAuthenticated]

    def post(self, request):
        data = _validated(TeamRegisterSerializer, request.data)
        hackathon = get_hackathon(data.pop("hackathon_id"))
        team = services.register_team(hackathon, request.user, **data)
        return api_success(
            "Team registered successfully",
            status.HTTP_201_CREATED,
            team=_team_payload(team),
        )


class MyTeamsView(APIView):
    """
    GET /api/teams/my/
    GET /api/teams/my/hackathon/<hackathon_id>/
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, hackathon_id=None):
        teams = services.my_teams(request.user, hackathon_id).prefetch_related("members__user")
        if hackathon_id is not None:
            team = teams.first()
            return api_success(team=TeamSerializer(team).data if team else None)
        return api_success(teams=TeamSerializer(teams, many=True).data)


class MyJoinRequestsView(APIView):
    """GET /api/teams/my/join-requests/ - requests I sent and invites I received"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        requests = services.my_join_requests(request.user)
        return api_success(
            sent=JoinRequestSerializer(requests["sent"], many=True).data,
            received=JoinRequestSerializer(requests["received"], many=True).data,
        )


# ─────────────────────────────────────────────────────────────
# Team detail
# ─────────────────────────────────────────────────────────────

class TeamDetailView(APIView):
    """
    GET    /api/teams/<id>/
    PUT    /api/teams/<id>/   (leader while draft, or canEditTeams)
    DELETE /api/teams/<id>/   (leader while draft)
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, team_id):
        return api_success(team=TeamSerializer(get_team(team_id)).data)

    def put(self, request, team_id):
        team = get_team(team_id)
        data = _validated(TeamUpdateSerializer, request.data)
        team = services.update_team(team, request.user, data)
        return api_success("Team updated successfully", team=_team_payload(team))

    def delete(self, request, team_id):
        services.delete_team(get_team(team_id), request.user)
        return api_success("Team deleted successfully")


class ConfirmTeamView(APIView):
    """POST /api/teams/<id>/confirm/"""
    permission_classes = [IsAuthenticated]

    def post(self, request, team_id):
        team = services.confirm_team(get_team(team_id), request.user)
        message = (
            "Team confirmed and approved"
            if team.submission_status == Team.STATUS_APPROVED
            else "Team submitted for approval"
        )
        return api_success(message, team=_team_payload(team))


class ApproveTeamView(APIView):
    """POST /api/teams/<id>/approve/"""
    permission_classes = [IsAuthenticated]

    def post(self, request, team_id):
        team = services.approve_team(get_team(team_id), request.user)
        return api_success("Team approved successfully", team=_team_payload(team))


class RejectTeamView(APIView):
    """POST /api/teams/<id>/reject/  {reason}"""
    permission_classes = [IsAuthenticated]

    def post(self, request, team_id):
        team = services.reject_team(get_team(team_id), request.user, request.data.get("reason"))
        return api_success("Team rejected", team=_team_payload(team))


# ─────────────────────────────────────────────────────────────
# Join requests
# ─────────────────────────────────────────────────────────────

class TeamJoinRequestsView(APIView):
    """
    GET  /api/teams/<id>/join-requests/?status=   (leader)
    POST /api/teams/<id>/join-requests/  {message}
    """
    permission_classes = [IsAuthenticated]
    throttle_classes = [JoinRequestThrottle]

    def get(self, request, team_id):
        qs = services.team_join_requests(
            get_team(team_id),
            request.user,
            status=request.query_params.get("status"),
            kind=request.query_params.get("kind"),
        )
        return api_success(join_requests=JoinRequestSerializer(qs, many=True).data)

    def post(self, request, team_id):
        join_request = services.send_join_request(
            get_team(team_id), request.user, request.data.get("message", ""),
        )
        return api_success(
            "Join request sent successfully",
            status.HTTP_201_CREATED,
            join_request=JoinRequestSerializer(join_request).data,
        )


class AcceptJoinRequestView(APIView):
    """POST /api/teams/<id>/join-requests/<req_id>/accept/"""
    permission_classes = [IsAuthenticated]

    def post(self, request, team_id, request_id):
        join_request = services.accept_join_request(get_team(team_id), request_id, request.user)
        return api_success(
            "Join request accepted",
            join_request=JoinRequestSerializer(join_request).data,
            team=TeamSerializer(get_team(team_id)).data,
        )


class RejectJoinRequestView(APIView):
    """POST /api/teams/<id>/join-requests/<req_id>/reject/  {reason?}"""
    permission_classes = [IsAuthenticated]

    def post(self, request, team_id, request_id):
        join_request = services.reject_join_request(
            get_team(team_id), request_id, request.user, request.data.get("reason"),
        )
        return api_success("Join request rejected", join_request=JoinRequestSerializer(join_request).data)


class CancelJoinRequestView(APIView):
    """DELETE /api/teams/<id>/join-requests/<req_id>/"""
    permission_classes = [IsAuthenticated]

    def delete(self, request, team_id, request_id):
        join_request = services.cancel_join_request(get_team(team_id), request_id, request.user)
        return api_success("Join request cancelled", join_request=JoinRequestSerializer(join_request).data)


class PendingMembersView(APIView):
    """GET /api/teams/<id>/pending-members/ - outstanding invitations (leader)"""
    permission_classes = [IsAuthenticated]

    def get(self, request, team_id):
        qs = services.pending_invitations(get_team(team_id), request.user)
        return api_success(pending_members=JoinRequestSerializer(qs, many=True).data)


class InviteMemberView(APIView):
    """POST /api/teams/<id>/invite/  {user_id} or {email}"""
    permission_classes = [IsAuthenticated]
    throttle_classes = [InviteThrottle]

    def post(self, request, team_id):
        team = get_team(team_id)
        data = _validated(InviteMemberSerializer, request.data)

        if data.get("user_id"):
            invitee = User.objects.filter(pk=data["user_id"], is_active=True).first()
        else:
            invitee = User.objects.filter(email__iexact=data["email"].strip(), is_active=True).first()
        if invitee is None:
            raise NotFoundError("User not found")

        join_request = services.invite_member(team, request.user, invitee, data["message"])
        return api_success(
            "Invitation sent successfully",
            status.HTTP_201_CREATED,
            join_request=JoinRequestSerializer(join_request).data,
        )


# ─────────────────────────────────────────────────────────────
# Membership
# ─────────────────────────────────────────────────────────────

class RemoveMemberView(APIView):
    """DELETE /api/teams/<id>/members/<member_id>/ - member_id is the member's user id"""
    permission_classes = [IsAuthenticated]

    def delete(self, request, team_id, member_id):
        services.remove_member(get_team(team_id), request.user, member_id)
        return api_success("Member removed successfully")


class LeaveTeamView(APIView):
    """POST /api/teams/<id>/leave/"""
    permission_classes = [IsAuthenticated]

    def post(self, request, team_id):
        services.leave_team(get_team(team_id), request.user)
        return api_success("You have left the team")


class TransferLeadershipView(APIView):
    """PUT /api/teams/<id>/transfer-leadership/  {new_leader_id}"""
    permission_classes = [IsAuthenticated]

    def put(self, request, team_id):
        data = _validated(TransferLeadershipSerializer, request.data)
        team = services.transfer_leadership(get_team(team_id), request.user, data["new_leader_id"])
        return api_success("Leadership transferred successfully", team=_team_payload(team))


# ─────────────────────────────────────────────────────────────
# Event-day operations (staff)
# ─────────────────────────────────────────────────────────────

class CheckInTeamView(APIView):
    """POST /api/teams/<id>/checkin/"""
    permission_classes = [IsAuthenticated]

    def post(self, request, team_id):
        team = services.check_in_team(get_team(team_id), request.user)
        return api_success("Team checked in", team=_team_payload(team))


class CheckInMemberView(APIView):
    """POST /api/teams/<id>/members/<member_id>/checkin/"""
    permission_classes = [IsAuthenticated]

    def post(self, request, team_id, member_id):
        member = services.check_in_member(get_team(team_id), request.user, member_id)
        return api_success("Member checked in", member=TeamMemberSerializer(member).data)


class AssignNumbersView(APIView):
    """PUT /api/teams/<id>/assign/  {table_number?, team_number?}"""
    permission_classes = [IsAuthenticated]

    def put(self, request, team_id):
        team = services.assign_numbers(
            get_team(team_id),
            request.user,
            table_number=request.data.get("table_number"),
            team_number=request.data.get("team_number"),
        )
        return api_success("Numbers assigned", team=_team_payload(team))


class EliminateTeamView(APIView):
    """POST /api/teams/<id>/eliminate/  {reason?}"""
    permission_classes = [IsAuthenticated]

    def post(self, request, team_id):
        team = services.eliminate_team(get_team(team_id), request.user, request.data.get("reason", ""))
        return api_success("Team eliminated", team=_team_payload(team))


class SubmitProjectView(APIView):
    """POST /api/teams/<id>/submit/  {round_id, links..., description, tech_stack}"""
    permission_classes = [IsAuthenticated]

    def post(self, request, team_id):
        data = dict(_validated(SubmitProjectSerializer, request.data))
        round_id = data.pop("round_id")
        submission = services.submit_project(get_team(team_id), request.user, round_id, data)
        return api_success(
            "Project submitted successfully",
            status.HTTP_201_CREATED,
            submission=SubmissionSerializer(submission).data,
        )


class ScoreTeamView(APIView):
    """POST /api/teams/<id>/score/  {round_id, criteria_scores, remarks?, feedback?}"""
    permission_classes = [IsAuthenticated]

    def post(self, request, team_id):
        data = _validated(ScoreTeamSerializer, request.data)
        score = services.score_team(
            get_team(team_id),
            request.user,
            data["round_id"],
            data["criteria_scores"],
            remarks=data["remarks"],
            feedback=data["feedback"],
        )
        return api_success("Score saved", score=ScoreSerializer(score).data)


class TeamNotesView(APIView):
    """
    GET  /api/teams/<id>/notes/
    POST /api/teams/<id>/notes/  {body}
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, team_id):
        notes = services.team_notes(get_team(team_id), request.user)
        return api_success(notes=TeamNoteSerializer(notes, many=True).data)

    def post(self, request, team_id):
        note = services.add_note(get_team(team_id), request.user, request.data.get("body"))
        return api_success("Note added", status.HTTP_201_CREATED, note=TeamNoteSerializer(note).data)


# ─────────────────────────────────────────────────────────────
# Hackathon-scoped team listings
# ─────────────────────────────────────────────────────────────

class HackathonTeamsView(APIView):
    """GET /api/teams/hackathon/<hackathon_id>/?status=&looking_for_members="""
    permission_classes = [IsAuthenticated]

    def get(self, request, hackathon_id):
        looking = request.query_params.get("looking_for_members")
        teams = services.hackathon_teams(
            get_hackathon(hackathon_id),
            request.user,
            status=request.query_params.get("status"),
            looking_for_members=parse_bool(looking) if looking is not None else None,
        )
        return api_success(count=teams.count(), teams=TeamSerializer(teams, many=True).data)


class SubmittedTeamsView(APIView):
    """GET /api/teams/hackathon/<hackathon_id>/submitted/ - teams awaiting review"""
    permission_classes = [IsAuthenticated]

    def get(self, request, hackathon_id):
        teams = services.submitted_teams(get_hackathon(hackathon_id), request.user)
        return api_success(teams=TeamSerializer(teams.prefetch_related("members__user"), many=True).data)


class HackathonSubmissionsView(APIView):
    """GET /api/teams/hackathon/<hackathon_id>/submissions/?round_id="""
    permission_classes = [IsAuthenticated]

    def get(self, request, hackathon_id):
        submissions = services.hackathon_submissions(
            get_hackathon(hackathon_id), request.user,
            _validated(RoundFilterSerializer, request.query_params).get("round_id"),
        )
        return api_success(submissions=SubmissionSerializer(submissions, many=True).data)


class LeaderboardView(APIView):
    """GET /api/teams/hackathon/<hackathon_id>/leaderboard/?round_id="""
    permission_classes = [IsAuthenticated]

    def get(self, request, hackathon_id):
        rows = services.leaderboard(
            get_hackathon(hackathon_id), request.user,
            _validated(RoundFilterSerializer, request.query_params).get("round_id"),
        )
        return api_success(leaderboard=rows)


class BulkApproveView(APIView):
    """POST /api/teams/hackathon/<hackathon_id>/bulk-approve/  {team_ids}"""
    permission_classes = [IsAuthenticated]

    def post(self, request, hackathon_id):
        data = _validated(BulkTeamsSerializer, request.data)
        result = services.bulk_approve(get_hackathon(hackathon_id), data["team_ids"], request.user)
        return api_success(f"{len(result['approved'])} team(s) approved", **result)


class BulkRejectView(APIView):
    """POST /api/teams/hackathon/<hackathon_id>/bulk-reject/  {team_ids, reason}"""
    permission_classes = [IsAuthenticated]

    def post(self, request, hackathon_id):
        data = _validated(BulkTeamsSerializer, request.data)
        result = services.bulk_reject(
            get_hackathon(hackathon_id), data["team_ids"], request.user, data.get("reason"),
        )
        return api_success(f"{len(result['rejected'])} team(s) rejected", **result)
