# users/views.py

from django.contrib.auth import get_user_model
from django.db.models import Q
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from core.responses import api_success
from teams.models import TeamMember
from .serializers import UserSearchQuerySerializer, UserSerializer, UserSummarySerializer

User = get_user_model()


class MeView(APIView):
    """
    GET /api/users/me/
    Return current user info
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return api_success(user=UserSerializer(request.user).data)


class UserSearchView(APIView):
    """
    GET /api/users/search/?query=<text>&hackathon_id=<id>

    Used when a leader looks for teammates. With hackathon_id, users who
    already hold an active membership in that hackathon are left out.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        params = UserSearchQuerySerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        query = params.validated_data["query"].strip()
        if len(query) < 2:
            return api_success(users=[])

        qs = User.objects.filter(
            Q(username__icontains=query)
            | Q(full_name__icontains=query)
            | Q(email__icontains=query),
            is_active=True,
        ).exclude(pk=request.user.pk)

        hackathon_id = params.validated_data.get("hackathon_id")
        if hackathon_id:
            taken = TeamMember.objects.filter(
                team__hackathon_id=hackathon_id,
                status=TeamMember.STATUS_ACTIVE,
            ).values_list("user_id", flat=True)
            qs = qs.exclude(pk__in=taken)

        qs = qs.order_by("username")[:20]
        return api_success(users=UserSummarySerializer(qs, many=True).data)
