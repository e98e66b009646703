# notifications/models.py
from django.conf import settings
from django.db import models


class Notification(models.Model):
    TYPE_TEAM_STATUS = "team_status"
    TYPE_JOIN_REQUEST = "join_request"
    TYPE_INVITATION = "invitation"
    TYPE_ANNOUNCEMENT = "announcement"
    TYPE_SYSTEM = "system"

    TYPE_CHOICES = [
        (TYPE_TEAM_STATUS, "Team Status"),
        (TYPE_JOIN_REQUEST, "Join Request"),
        (TYPE_INVITATION, "Invitation"),
        (TYPE_ANNOUNCEMENT, "Announcement"),
        (TYPE_SYSTEM, "System"),
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
    )
    type = models.CharField(max_length=64, choices=TYPE_CHOICES)
    title = models.CharField(max_length=255)
    body = models.TextField(blank=True)
    link = models.CharField(max_length=1024, blank=True)
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    hackathon = models.ForeignKey(
        "hackathons.Hackathon",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="notifications",
    )
    team = models.ForeignKey(
        "teams.Team",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="notifications",
    )

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user", "is_read"], name="notif_user_read_idx"),
            models.Index(fields=["type"], name="notif_type_idx"),
        ]

    def __str__(self):
        return f"{self.user} - {self.type} - {self.title}"
