from django.urls import path

from .views import (
    TeamRegisterView,
    MyTeamsView,
    MyJoinRequestsView,
    TeamDetailView,
    ConfirmTeamView,
    ApproveTeamView,
    RejectTeamView,
    TeamJoinRequestsView,
    AcceptJoinRequestView,
    RejectJoinRequestView,
    CancelJoinRequestView,
    PendingMembersView,
    InviteMemberView,
    RemoveMemberView,
    LeaveTeamView,
    TransferLeadershipView,
    CheckInTeamView,
    CheckInMemberView,
    AssignNumbersView,
    EliminateTeamView,
    SubmitProjectView,
    ScoreTeamView,
    TeamNotesView,
    HackathonTeamsView,
    SubmittedTeamsView,
    HackathonSubmissionsView,
    LeaderboardView,
    BulkApproveView,
    BulkRejectView,
)

urlpatterns = [
    path("register/", TeamRegisterView.as_view(), name="team-register"),
    path("my/", MyTeamsView.as_view(), name="team-my"),
    path("my/hackathon/<int:hackathon_id>/", MyTeamsView.as_view(), name="team-my-hackathon"),
    path("my/join-requests/", MyJoinRequestsView.as_view(), name="team-my-join-requests"),

    # Hackathon-scoped listings and bulk review
    path("hackathon/<int:hackathon_id>/", HackathonTeamsView.as_view(), name="hackathon-teams"),
    path("hackathon/<int:hackathon_id>/submitted/", SubmittedTeamsView.as_view(), name="hackathon-teams-submitted"),
    path(
        "hackathon/<int:hackathon_id>/submissions/",
        HackathonSubmissionsView.as_view(),
        name="hackathon-submissions",
    ),
    path("hackathon/<int:hackathon_id>/leaderboard/", LeaderboardView.as_view(), name="hackathon-leaderboard"),
    path("hackathon/<int:hackathon_id>/bulk-approve/", BulkApproveView.as_view(), name="team-bulk-approve"),
    path("hackathon/<int:hackathon_id>/bulk-reject/", BulkRejectView.as_view(), name="team-bulk-reject"),

    path("<int:team_id>/", TeamDetailView.as_view(), name="team-detail"),
    path("<int:team_id>/confirm/", ConfirmTeamView.as_view(), name="team-confirm"),
    path("<int:team_id>/approve/", ApproveTeamView.as_view(), name="team-approve"),
    path("<int:team_id>/reject/", RejectTeamView.as_view(), name="team-reject"),

    path("<int:team_id>/join-requests/", TeamJoinRequestsView.as_view(), name="team-join-requests"),
    path(
        "<int:team_id>/join-requests/<int:request_id>/",
        CancelJoinRequestView.as_view(),
        name="team-join-request-cancel",
    ),
    path(
        "<int:team_id>/join-requests/<int:request_id>/accept/",
        AcceptJoinRequestView.as_view(),
        name="team-join-request-accept",
    ),
    path(
        "<int:team_id>/join-requests/<int:request_id>/reject/",
        RejectJoinRequestView.as_view(),
        name="team-join-request-reject",
    ),
    path("<int:team_id>/pending-members/", PendingMembersView.as_view(), name="team-pending-members"),
    path("<int:team_id>/invite/", InviteMemberView.as_view(), name="team-invite"),

    path("<int:team_id>/members/<int:member_id>/", RemoveMemberView.as_view(), name="team-member-remove"),
    path("<int:team_id>/members/<int:member_id>/checkin/", CheckInMemberView.as_view(), name="team-member-checkin"),
    path("<int:team_id>/leave/", LeaveTeamView.as_view(), name="team-leave"),
    path("<int:team_id>/transfer-leadership/", TransferLeadershipView.as_view(), name="team-transfer-leadership"),

    path("<int:team_id>/checkin/", CheckInTeamView.as_view(), name="team-checkin"),
    path("<int:team_id>/assign/", AssignNumbersView.as_view(), name="team-assign"),
    path("<int:team_id>/eliminate/", EliminateTeamView.as_view(), name="team-eliminate"),
    path("<int:team_id>/submit/", SubmitProjectView.as_view(), name="team-submit"),
    path("<int:team_id>/score/", ScoreTeamView.as_view(), name="team-score"),
    path("<int:team_id>/notes/", TeamNotesView.as_view(), name="team-notes"),
]
