# teams/models.py
from django.conf import settings
from django.db import models

from hackathons.models import Hackathon, Round


class Team(models.Model):
    """
    A participant team in one hackathon.

    submission_status only moves through teams.state_machine. The leader is
    kept in sync with the single active TeamMember holding ROLE_LEADER.
    """
    STATUS_DRAFT = "draft"
    STATUS_SUBMITTED = "submitted"
    STATUS_APPROVED = "approved"
    STATUS_REJECTED = "rejected"

    STATUS_CHOICES = [
        (STATUS_DRAFT, "Draft"),
        (STATUS_SUBMITTED, "Submitted"),
        (STATUS_APPROVED, "Approved"),
        (STATUS_REJECTED, "Rejected"),
    ]

    PAYMENT_NOT_REQUIRED = "not_required"
    PAYMENT_PENDING = "pending"
    PAYMENT_COMPLETED = "completed"
    PAYMENT_FAILED = "failed"

    PAYMENT_CHOICES = [
        (PAYMENT_NOT_REQUIRED, "Not required"),
        (PAYMENT_PENDING, "Pending"),
        (PAYMENT_COMPLETED, "Completed"),
        (PAYMENT_FAILED, "Failed"),
    ]

    hackathon = models.ForeignKey(Hackathon, on_delete=models.CASCADE, related_name="teams")
    name = models.CharField(max_length=100)
    leader = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="led_teams",
    )

    project_title = models.CharField(max_length=255, blank=True)
    project_description = models.TextField(blank=True)
    tech_stack = models.JSONField(default=list, blank=True)
    looking_for_members = models.BooleanField(default=False)

    # Approval workflow
    submission_status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_DRAFT)
    rejection_reason = models.TextField(blank=True)
    submitted_at = models.DateTimeField(blank=True, null=True)
    reviewed_at = models.DateTimeField(blank=True, null=True)
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    # Venue logistics
    table_number = models.CharField(max_length=32, blank=True)
    team_number = models.CharField(max_length=32, blank=True)
    checked_in = models.BooleanField(default=False)
    checked_in_at = models.DateTimeField(blank=True, null=True)

    # Elimination
    is_eliminated = models.BooleanField(default=False)
    elimination_reason = models.TextField(blank=True)
    eliminated_at = models.DateTimeField(blank=True, null=True)

    # Payment (records only; no gateway calls are made here)
    payment_status = models.CharField(max_length=16, choices=PAYMENT_CHOICES, default=PAYMENT_NOT_REQUIRED)
    payment_amount = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    payment_currency = models.CharField(max_length=10, default="INR")
    payment_order_id = models.CharField(max_length=128, blank=True)
    payment_id = models.CharField(max_length=128, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        unique_together = ("hackathon", "name")
        indexes = [
            models.Index(fields=["hackathon", "submission_status"], name="team_hack_status_idx"),
            models.Index(fields=["leader"], name="team_leader_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.hackathon.title})"

    def active_members(self):
        return self.members.filter(status=TeamMember.STATUS_ACTIVE)

    @property
    def active_member_count(self):
        return self.active_members().count()

    @property
    def is_full(self):
        return self.active_member_count >= self.hackathon.max_members

    def is_member(self, user):
        if not user or not user.is_authenticated:
            return False
        return self.active_members().filter(user=user).exists()


class TeamMember(models.Model):
    ROLE_LEADER = "leader"
    ROLE_MEMBER = "member"

    ROLE_CHOICES = [
        (ROLE_LEADER, "Team Leader"),
        (ROLE_MEMBER, "Member"),
    ]

    STATUS_ACTIVE = "active"
    STATUS_REMOVED = "removed"

    STATUS_CHOICES = [
        (STATUS_ACTIVE, "Active"),
        (STATUS_REMOVED, "Removed"),
    ]

    team = models.ForeignKey(Team, on_delete=models.CASCADE, related_name="members")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="team_memberships",
    )
    role = models.CharField(max_length=16, choices=ROLE_CHOICES, default=ROLE_MEMBER)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_ACTIVE)
    checked_in = models.BooleanField(default=False)
    checked_in_at = models.DateTimeField(blank=True, null=True)
    joined_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["joined_at", "id"]
        unique_together = ("team", "user")
        indexes = [
            models.Index(fields=["user", "status"], name="teammember_user_status_idx"),
        ]

    def __str__(self):
        return f"{self.user.username} in {self.team.name}"


class JoinRequest(models.Model):
    """
    Pending membership, in either direction.

    KIND_REQUEST: the user asked to join; the leader answers.
    KIND_INVITE:  the leader invited the user; the user answers.
    """
    KIND_REQUEST = "request"
    KIND_INVITE = "invite"

    KIND_CHOICES = [
        (KIND_REQUEST, "Join request"),
        (KIND_INVITE, "Invitation"),
    ]

    STATUS_PENDING = "pending"
    STATUS_ACCEPTED = "accepted"
    STATUS_REJECTED = "rejected"
    STATUS_CANCELLED = "cancelled"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_ACCEPTED, "Accepted"),
        (STATUS_REJECTED, "Rejected"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    team = models.ForeignKey(Team, on_delete=models.CASCADE, related_name="join_requests")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="join_requests",
    )
    kind = models.CharField(max_length=16, choices=KIND_CHOICES, default=KIND_REQUEST)
    initiated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="+",
    )
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING)
    message = models.TextField(blank=True)
    response_reason = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    responded_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["team", "status"], name="joinreq_team_status_idx"),
            models.Index(fields=["user", "status"], name="joinreq_user_status_idx"),
        ]

    def __str__(self):
        return f"{self.kind} {self.user} -> {self.team} ({self.status})"


class Submission(models.Model):
    team = models.ForeignKey(Team, on_delete=models.CASCADE, related_name="submissions")
    round = models.ForeignKey(Round, on_delete=models.CASCADE, related_name="submissions")

    project_link = models.URLField(max_length=500, blank=True)
    github_link = models.URLField(max_length=500, blank=True)
    demo_link = models.URLField(max_length=500, blank=True)
    video_link = models.URLField(max_length=500, blank=True)
    presentation_link = models.URLField(max_length=500, blank=True)
    description = models.TextField(blank=True)
    tech_stack = models.JSONField(default=list, blank=True)

    submitted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="+",
    )
    submitted_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ("team", "round")

    def __str__(self):
        return f"{self.team.name} - {self.round.name}"


class Score(models.Model):
    team = models.ForeignKey(Team, on_delete=models.CASCADE, related_name="scores")
    round = models.ForeignKey(Round, on_delete=models.CASCADE, related_name="scores")
    judge = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="given_scores",
    )
    # [{"criterion": "Innovation", "score": 40}, ...]
    criteria_scores = models.JSONField(default=list)
    total = models.DecimalField(max_digits=8, decimal_places=2, default=0)
    remarks = models.TextField(blank=True)
    feedback = models.TextField(blank=True)
    scored_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ("team", "round", "judge")

    def __str__(self):
        return f"{self.team.name} / {self.round.name} by {self.judge}: {self.total}"


class TeamNote(models.Model):
    """Private note left on a team by the organizer or a coordinator."""
    team = models.ForeignKey(Team, on_delete=models.CASCADE, related_name="notes")
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="+",
    )
    body = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"Note on {self.team.name}"
