# notifications/views.py
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from core.responses import api_success, parse_bool
from .models import Notification
from .serializers import MarkReadSerializer, NotificationSerializer


class MyNotificationsView(APIView):
    """
    GET /api/notifications/
    GET /api/notifications/?unread=true
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        qs = Notification.objects.filter(user=request.user)

        if parse_bool(request.query_params.get("unread")):
            qs = qs.filter(is_read=False)

        unread_count = Notification.objects.filter(user=request.user, is_read=False).count()
        serializer = NotificationSerializer(qs[:100], many=True)
        return api_success(notifications=serializer.data, unread_count=unread_count)


class MarkNotificationsReadView(APIView):
    """
    POST /api/notifications/mark-read/

    Body:
    {
      "ids": [1, 2, 3]   # or omit/empty to mark all as read
    }
    """
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = MarkReadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        ids = serializer.validated_data.get("ids")
        qs = Notification.objects.filter(user=request.user, is_read=False)

        if ids:
            qs = qs.filter(id__in=ids)

        updated = qs.update(is_read=True)
        return api_success(marked_read=updated)
