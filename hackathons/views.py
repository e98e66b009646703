# hackathons/views.py
import logging

from django.db.models import Q
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from core.exceptions import ValidationError
from core.responses import api_success
from core.throttles import InviteThrottle
from . import invitations
from .models import Hackathon, Coordinator, Judge
from .policies import HackathonPolicy
from .serializers import (
    HackathonSerializer,
    CoordinatorSerializer,
    JudgeSerializer,
    CoordinatorInviteSerializer,
    JudgeInviteSerializer,
    AnnouncementSerializer,
)

logger = logging.getLogger("hackhub.hackathons")


def _validated(serializer_class, data, **kwargs):
    serializer = serializer_class(data=data, **kwargs)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data


class HackathonListCreateView(APIView):
    """
    GET  /api/hackathons/?status=&mode=&search=
    POST /api/hackathons/   (caller becomes the organizer)
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        qs = Hackathon.objects.select_related("organizer").prefetch_related("rounds")

        status_param = request.query_params.get("status")
        if status_param:
            qs = qs.filter(status=status_param)

        mode = request.query_params.get("mode")
        if mode:
            qs = qs.filter(mode=mode)

        search = request.query_params.get("search")
        if search:
            qs = qs.filter(Q(title__icontains=search) | Q(description__icontains=search))

        return api_success(
            count=qs.count(),
            hackathons=HackathonSerializer(qs, many=True).data,
        )

    def post(self, request):
        serializer = HackathonSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        hackathon = serializer.save(organizer=request.user)
        logger.info("Hackathon created: id=%s, organizer=%s", hackathon.id, request.user.id)
        return api_success(
            "Hackathon created successfully",
            status.HTTP_201_CREATED,
            hackathon=HackathonSerializer(hackathon).data,
        )


class HackathonDetailView(APIView):
    """
    GET            /api/hackathons/<id>/
    PUT/PATCH      /api/hackathons/<id>/   (organizer)
    DELETE         /api/hackathons/<id>/   (organizer)
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, hackathon_id):
        hackathon = get_object_or_404(Hackathon, pk=hackathon_id)
        return api_success(hackathon=HackathonSerializer(hackathon).data)

    def _update(self, request, hackathon_id, partial):
        hackathon = get_object_or_404(Hackathon, pk=hackathon_id)
        HackathonPolicy.require_organizer(request.user, hackathon)
        serializer = HackathonSerializer(hackathon, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        hackathon = serializer.save()
        return api_success("Hackathon updated successfully", hackathon=HackathonSerializer(hackathon).data)

    def put(self, request, hackathon_id):
        return self._update(request, hackathon_id, partial=False)

    def patch(self, request, hackathon_id):
        return self._update(request, hackathon_id, partial=True)

    def delete(self, request, hackathon_id):
        hackathon = get_object_or_404(Hackathon, pk=hackathon_id)
        HackathonPolicy.require_organizer(request.user, hackathon)
        hackathon.delete()
        logger.info("Hackathon deleted: id=%s, by=%s", hackathon_id, request.user.id)
        return api_success("Hackathon deleted successfully")


class MyOrganizedHackathonsView(APIView):
    """GET /api/hackathons/my/organized/"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        qs = Hackathon.objects.filter(organizer=request.user).prefetch_related("rounds")
        return api_success(hackathons=HackathonSerializer(qs, many=True).data)


class MyCoordinationsView(APIView):
    """GET /api/hackathons/my/coordinations/ - accepted coordinator roles"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        qs = Coordinator.objects.filter(
            user=request.user, status=Coordinator.STATUS_ACCEPTED,
        ).select_related("hackathon", "user", "invited_by")
        return api_success(coordinations=CoordinatorSerializer(qs, many=True).data)


class MyJudgingView(APIView):
    """GET /api/hackathons/my/judging/"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        qs = Judge.objects.filter(
            user=request.user,
        ).exclude(status=Judge.STATUS_DECLINED).select_related("hackathon", "user")
        return api_success(judging=JudgeSerializer(qs, many=True).data)


class MyCoordinatorInvitationsView(APIView):
    """GET /api/hackathons/coordinator-invitations/ - pending invitations for me"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        qs = Coordinator.objects.filter(
            user=request.user, status=Coordinator.STATUS_PENDING,
        ).select_related("hackathon", "user", "invited_by")
        return api_success(invitations=CoordinatorSerializer(qs, many=True).data)


class CoordinatorListView(APIView):
    """GET /api/hackathons/<id>/coordinators/ (organizer or accepted coordinator)"""
    permission_classes = [IsAuthenticated]

    def get(self, request, hackathon_id):
        hackathon = get_object_or_404(Hackathon, pk=hackathon_id)
        if not HackathonPolicy.is_staff_member(request.user, hackathon):
            HackathonPolicy.require_organizer(request.user, hackathon)

        qs = hackathon.coordinators.select_related("user", "invited_by", "hackathon")
        return api_success(coordinators=CoordinatorSerializer(qs, many=True).data)


class CoordinatorInviteView(APIView):
    """POST /api/hackathons/<id>/coordinators/invite/  {email, permissions?}"""
    permission_classes = [IsAuthenticated]
    throttle_classes = [InviteThrottle]

    def post(self, request, hackathon_id):
        hackathon = get_object_or_404(Hackathon, pk=hackathon_id)
        data = _validated(CoordinatorInviteSerializer, request.data)
        entry = invitations.invite_coordinator(
            hackathon, request.user, data["email"], data.get("permissions"),
        )
        return api_success(
            "Coordinator invitation sent successfully",
            status.HTTP_201_CREATED,
            coordinator=CoordinatorSerializer(entry).data,
        )


class CoordinatorPermissionsView(APIView):
    """PUT /api/hackathons/<id>/coordinators/<user_id>/permissions/  {permissions}"""
    permission_classes = [IsAuthenticated]

    def put(self, request, hackathon_id, user_id):
        hackathon = get_object_or_404(Hackathon, pk=hackathon_id)
        permissions = request.data.get("permissions")
        if permissions is None:
            raise ValidationError("permissions is required")
        entry = invitations.update_coordinator_permissions(hackathon, request.user, user_id, permissions)
        return api_success(
            "Coordinator permissions updated successfully",
            coordinator=CoordinatorSerializer(entry).data,
        )


class CoordinatorDetailView(APIView):
    """DELETE /api/hackathons/<id>/coordinators/<user_id>/"""
    permission_classes = [IsAuthenticated]

    def delete(self, request, hackathon_id, user_id):
        hackathon = get_object_or_404(Hackathon, pk=hackathon_id)
        invitations.remove_coordinator(hackathon, request.user, user_id)
        return api_success("Coordinator removed successfully")


class CoordinatorCancelView(APIView):
    """DELETE /api/hackathons/<id>/coordinators/<user_id>/cancel/"""
    permission_classes = [IsAuthenticated]

    def delete(self, request, hackathon_id, user_id):
        hackathon = get_object_or_404(Hackathon, pk=hackathon_id)
        invitations.cancel_coordinator_invitation(hackathon, request.user, user_id)
        return api_success("Coordinator invitation cancelled")


class CoordinatorResendView(APIView):
    """POST /api/hackathons/<id>/coordinators/<user_id>/resend/"""
    permission_classes = [IsAuthenticated]
    throttle_classes = [InviteThrottle]

    def post(self, request, hackathon_id, user_id):
        hackathon = get_object_or_404(Hackathon, pk=hackathon_id)
        invitations.resend_coordinator_invitation(hackathon, request.user, user_id)
        return api_success("Coordinator invitation resent")


class InvitationResponseView(APIView):
    """
    POST /api/hackathons/coordinators/accept/<token>/
    POST /api/hackathons/coordinators/decline/<token>/
    POST /api/hackathons/judges/accept/<token>/
    POST /api/hackathons/judges/decline/<token>/
    """
    permission_classes = [IsAuthenticated]
    kind = None
    accept = True

    def post(self, request, token):
        if self.accept:
            entry = invitations.accept_invitation(self.kind, token, request.user)
            message = f"{self.kind.capitalize()} invitation accepted"
        else:
            entry = invitations.decline_invitation(self.kind, token, request.user)
            message = f"{self.kind.capitalize()} invitation declined"

        return api_success(message, hackathon_id=entry.hackathon_id, status=entry.status)


class JudgeInviteView(APIView):
    """POST /api/hackathons/<id>/judges/invite/  {email}"""
    permission_classes = [IsAuthenticated]
    throttle_classes = [InviteThrottle]

    def post(self, request, hackathon_id):
        hackathon = get_object_or_404(Hackathon, pk=hackathon_id)
        data = _validated(JudgeInviteSerializer, request.data)
        entry = invitations.invite_judge(hackathon, request.user, data["email"])
        return api_success(
            "Judge invitation sent successfully",
            status.HTTP_201_CREATED,
            judge=JudgeSerializer(entry).data,
        )


class AnnouncementView(APIView):
    """POST /api/hackathons/<id>/announcement/  {title, message}"""
    permission_classes = [IsAuthenticated]

    def post(self, request, hackathon_id):
        # Lazy import: teams depends on hackathons
        from teams import services as team_services

        hackathon = get_object_or_404(Hackathon, pk=hackathon_id)
        data = _validated(AnnouncementSerializer, request.data)
        recipients = team_services.send_announcement(
            hackathon, request.user, data["title"], data["message"],
        )
        return api_success("Announcement sent", recipients=recipients)
