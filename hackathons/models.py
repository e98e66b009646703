# hackathons/models.py
from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import models


class Hackathon(models.Model):
    STATUS_DRAFT = "draft"
    STATUS_PUBLISHED = "published"
    STATUS_ONGOING = "ongoing"
    STATUS_COMPLETED = "completed"
    STATUS_CANCELLED = "cancelled"

    STATUS_CHOICES = [
        (STATUS_DRAFT, "Draft"),
        (STATUS_PUBLISHED, "Published"),
        (STATUS_ONGOING, "Ongoing"),
        (STATUS_COMPLETED, "Completed"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    MODE_ONLINE = "online"
    MODE_OFFLINE = "offline"
    MODE_HYBRID = "hybrid"

    MODE_CHOICES = [
        (MODE_ONLINE, "Online"),
        (MODE_OFFLINE, "Offline"),
        (MODE_HYBRID, "Hybrid"),
    ]

    organizer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="organized_hackathons",
    )
    title = models.CharField(max_length=255)
    description = models.TextField()
    mode = models.CharField(max_length=16, choices=MODE_CHOICES, default=MODE_HYBRID)
    venue = models.CharField(max_length=255, blank=True, null=True)
    tags = models.JSONField(default=list, blank=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PUBLISHED)

    # Lifecycle window
    registration_start_date = models.DateTimeField()
    registration_end_date = models.DateTimeField()
    hackathon_start_date = models.DateTimeField()
    hackathon_end_date = models.DateTimeField()

    # Team config
    min_members = models.PositiveIntegerField(default=1)
    max_members = models.PositiveIntegerField(default=4)
    allow_solo_participation = models.BooleanField(default=False)
    max_teams = models.PositiveIntegerField(default=100)

    registration_fee_amount = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    registration_fee_currency = models.CharField(max_length=10, default="INR")

    judging_criteria = models.TextField(blank=True, help_text="Free-text overview shown to participants")

    # Settings
    auto_accept_teams = models.BooleanField(default=False)
    enable_check_in = models.BooleanField(default=True)
    allow_late_registration = models.BooleanField(default=False)
    enable_leaderboard = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["organizer", "created_at"], name="hack_org_created_idx"),
            models.Index(fields=["status"], name="hack_status_idx"),
        ]

    def __str__(self):
        return self.title

    def clean(self):
        errors = date_order_errors(
            self.registration_start_date,
            self.registration_end_date,
            self.hackathon_start_date,
            self.hackathon_end_date,
        )
        errors += team_size_errors(self.min_members, self.max_members, self.allow_solo_participation)
        if errors:
            raise DjangoValidationError(errors)

    @property
    def requires_payment(self):
        return self.registration_fee_amount > 0

    def is_registration_open(self, now):
        if now < self.registration_start_date:
            return False
        if now > self.registration_end_date and not self.allow_late_registration:
            return False
        return now <= self.hackathon_end_date


def date_order_errors(reg_start, reg_end, hack_start, hack_end):
    """
    registration_start < registration_end <= hackathon_start < hackathon_end
    Returns a list of messages; empty when the ordering holds.
    """
    if None in (reg_start, reg_end, hack_start, hack_end):
        return ["All four lifecycle dates are required"]
    errors = []
    if not reg_start < reg_end:
        errors.append("Registration start must be before registration end")
    if not reg_end <= hack_start:
        errors.append("Registration must end on or before the hackathon starts")
    if not hack_start < hack_end:
        errors.append("Hackathon start must be before hackathon end")
    return errors


def team_size_errors(min_members, max_members, allow_solo):
    errors = []
    if min_members < 1:
        errors.append("Minimum team size must be at least 1")
    if min_members > max_members:
        errors.append("Minimum team size cannot exceed maximum team size")
    if allow_solo and min_members != 1:
        errors.append("Solo participation requires a minimum team size of 1")
    return errors


class Round(models.Model):
    TYPE_SUBMISSION = "submission"
    TYPE_PRESENTATION = "presentation"
    TYPE_INTERVIEW = "interview"
    TYPE_OTHER = "other"

    TYPE_CHOICES = [
        (TYPE_SUBMISSION, "Submission"),
        (TYPE_PRESENTATION, "Presentation"),
        (TYPE_INTERVIEW, "Interview"),
        (TYPE_OTHER, "Other"),
    ]

    hackathon = models.ForeignKey(Hackathon, on_delete=models.CASCADE, related_name="rounds")
    name = models.CharField(max_length=255)
    type = models.CharField(max_length=32, choices=TYPE_CHOICES, default=TYPE_SUBMISSION)
    mode = models.CharField(max_length=16, choices=Hackathon.MODE_CHOICES, default=Hackathon.MODE_ONLINE)
    description = models.TextField(blank=True)
    start_time = models.DateTimeField(blank=True, null=True)
    end_time = models.DateTimeField(blank=True, null=True)
    max_score = models.PositiveIntegerField(default=100)
    # [{"name": "Innovation", "max_points": 50, "description": ""}, ...]
    judging_criteria = models.JSONField(default=list, blank=True)
    order = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["order", "id"]

    def __str__(self):
        return f"{self.hackathon.title} - {self.name}"

    def criterion(self, name):
        for item in self.judging_criteria:
            if item.get("name") == name:
                return item
        return None


class Coordinator(models.Model):
    """
    A user invited by the organizer to help run the hackathon.
    Each permission is an explicit column; see hackathons.permissions for the key mapping.
    """
    STATUS_PENDING = "pending"
    STATUS_ACCEPTED = "accepted"
    STATUS_DECLINED = "declined"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_ACCEPTED, "Accepted"),
        (STATUS_DECLINED, "Declined"),
    ]

    hackathon = models.ForeignKey(Hackathon, on_delete=models.CASCADE, related_name="coordinators")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="coordinations",
    )

    can_view_teams = models.BooleanField(default=True)
    can_edit_teams = models.BooleanField(default=False)
    can_check_in = models.BooleanField(default=True)
    can_assign_tables = models.BooleanField(default=False)
    can_view_submissions = models.BooleanField(default=False)
    can_eliminate_teams = models.BooleanField(default=False)
    can_communicate = models.BooleanField(default=False)

    invitation_token = models.CharField(max_length=64, unique=True, null=True, blank=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING)
    invited_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    invited_at = models.DateTimeField(auto_now_add=True)
    accepted_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        unique_together = ("hackathon", "user")
        indexes = [
            models.Index(fields=["user", "status"], name="coord_user_status_idx"),
        ]

    def __str__(self):
        return f"{self.user} coordinating {self.hackathon} ({self.status})"


class Judge(models.Model):
    STATUS_PENDING = "pending"
    STATUS_ACCEPTED = "accepted"
    STATUS_DECLINED = "declined"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_ACCEPTED, "Accepted"),
        (STATUS_DECLINED, "Declined"),
    ]

    hackathon = models.ForeignKey(Hackathon, on_delete=models.CASCADE, related_name="judges")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="judging_assignments",
    )
    invitation_token = models.CharField(max_length=64, unique=True, null=True, blank=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING)
    invited_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    invited_at = models.DateTimeField(auto_now_add=True)
    accepted_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        unique_together = ("hackathon", "user")
        indexes = [
            models.Index(fields=["user", "status"], name="judge_user_status_idx"),
        ]

    def __str__(self):
        return f"{self.user} judging {self.hackathon} ({self.status})"
