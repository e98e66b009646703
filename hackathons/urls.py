from django.urls import path

from .invitations import KIND_COORDINATOR, KIND_JUDGE
from .views import (
    HackathonListCreateView,
    HackathonDetailView,
    MyOrganizedHackathonsView,
    MyCoordinationsView,
    MyJudgingView,
    MyCoordinatorInvitationsView,
    CoordinatorListView,
    CoordinatorInviteView,
    CoordinatorPermissionsView,
    CoordinatorDetailView,
    CoordinatorCancelView,
    CoordinatorResendView,
    InvitationResponseView,
    JudgeInviteView,
    AnnouncementView,
)

urlpatterns = [
    path("", HackathonListCreateView.as_view(), name="hackathon-list"),
    path("my/organized/", MyOrganizedHackathonsView.as_view(), name="hackathon-my-organized"),
    path("my/coordinations/", MyCoordinationsView.as_view(), name="hackathon-my-coordinations"),
    path("my/judging/", MyJudgingView.as_view(), name="hackathon-my-judging"),
    path(
        "coordinator-invitations/",
        MyCoordinatorInvitationsView.as_view(),
        name="hackathon-coordinator-invitations",
    ),

    # Token endpoints (no hackathon id: the token identifies the entry)
    path(
        "coordinators/accept/<str:token>/",
        InvitationResponseView.as_view(kind=KIND_COORDINATOR, accept=True),
        name="coordinator-accept",
    ),
    path(
        "coordinators/decline/<str:token>/",
        InvitationResponseView.as_view(kind=KIND_COORDINATOR, accept=False),
        name="coordinator-decline",
    ),
    path(
        "judges/accept/<str:token>/",
        InvitationResponseView.as_view(kind=KIND_JUDGE, accept=True),
        name="judge-accept",
    ),
    path(
        "judges/decline/<str:token>/",
        InvitationResponseView.as_view(kind=KIND_JUDGE, accept=False),
        name="judge-decline",
    ),

    path("<int:hackathon_id>/", HackathonDetailView.as_view(), name="hackathon-detail"),
    path("<int:hackathon_id>/coordinators/", CoordinatorListView.as_view(), name="coordinator-list"),
    path(
        "<int:hackathon_id>/coordinators/invite/",
        CoordinatorInviteView.as_view(),
        name="coordinator-invite",
    ),
    path(
        "<int:hackathon_id>/coordinators/<int:user_id>/",
        CoordinatorDetailView.as_view(),
        name="coordinator-detail",
    ),
    path(
        "<int:hackathon_id>/coordinators/<int:user_id>/permissions/",
        CoordinatorPermissionsView.as_view(),
        name="coordinator-permissions",
    ),
    path(
        "<int:hackathon_id>/coordinators/<int:user_id>/cancel/",
        CoordinatorCancelView.as_view(),
        name="coordinator-cancel",
    ),
    path(
        "<int:hackathon_id>/coordinators/<int:user_id>/resend/",
        CoordinatorResendView.as_view(),
        name="coordinator-resend",
    ),
    path("<int:hackathon_id>/judges/invite/", JudgeInviteView.as_view(), name="judge-invite"),
    path("<int:hackathon_id>/announcement/", AnnouncementView.as_view(), name="hackathon-announcement"),
]
