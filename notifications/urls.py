from django.urls import path

from .views import MyNotificationsView, MarkNotificationsReadView

urlpatterns = [
    path("", MyNotificationsView.as_view(), name="my-notifications"),
    path("mark-read/", MarkNotificationsReadView.as_view(), name="notifications-mark-read"),
]
