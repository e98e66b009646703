from datetime import timedelta

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from hackathons import invitations
from hackathons.models import Hackathon, Round
from teams import services

User = get_user_model()

DEMO_TITLE = "Demo Hack Night"


class Command(BaseCommand):
    help = "Seeds a demo hackathon with a coordinator, a judge and two teams"

    def add_arguments(self, parser):
        parser.add_argument(
            "--reset", action="store_true",
            help="Delete an existing demo hackathon before seeding",
        )

    def _user(self, username, **extra):
        user, created = User.objects.get_or_create(
            username=username,
            defaults={"email": f"{username}@example.com", "full_name": username.title(), **extra},
        )
        if created:
            user.set_password("password")
            user.save()
        return user

    def handle(self, *args, **options):
        existing = Hackathon.objects.filter(title=DEMO_TITLE)
        if existing.exists():
            if not options["reset"]:
                self.stdout.write(self.style.WARNING("Demo hackathon already exists, use --reset to rebuild it"))
                return
            existing.delete()

        self.stdout.write("Seeding demo hackathon...")

        organizer = self._user("organizer", is_staff=True)
        coordinator = self._user("coordinator")
        judge = self._user("judge")
        alice, bob, carol, dave = (self._user(name) for name in ("alice", "bob", "carol", "dave"))

        now = timezone.now()
        with transaction.atomic():
            hackathon = Hackathon.objects.create(
                organizer=organizer,
                title=DEMO_TITLE,
                description="An evening of building small things fast.",
                mode=Hackathon.MODE_HYBRID,
                venue="Innovation Hub, Hall A",
                registration_start_date=now - timedelta(days=1),
                registration_end_date=now + timedelta(days=3),
                hackathon_start_date=now + timedelta(days=4),
                hackathon_end_date=now + timedelta(days=5),
                min_members=2,
                max_members=3,
                tags=["demo", "web"],
            )
            Round.objects.create(
                hackathon=hackathon,
                name="Final Demo",
                max_score=100,
                judging_criteria=[
                    {"name": "Innovation", "max_points": 50, "description": "How new is the idea"},
                    {"name": "Execution", "max_points": 50, "description": "How well does it work"},
                ],
            )

        entry = invitations.invite_coordinator(
            hackathon, organizer, coordinator.email,
            {"canViewTeams": True, "canCheckIn": True, "canCommunicate": True},
        )
        invitations.accept_invitation(invitations.KIND_COORDINATOR, entry.invitation_token, coordinator)
        entry = invitations.invite_judge(hackathon, organizer, judge.email)
        invitations.accept_invitation(invitations.KIND_JUDGE, entry.invitation_token, judge)

        owls = services.register_team(hackathon, alice, "Night Owls", project_title="Sleep Tracker")
        join = services.send_join_request(owls, bob, "I can do the frontend")
        services.accept_join_request(owls, join.id, alice)
        services.confirm_team(owls, alice)
        services.approve_team(owls, organizer)

        birds = services.register_team(hackathon, carol, "Early Birds", looking_for_members=True)
        services.invite_member(birds, carol, dave)

        self.stdout.write(self.style.SUCCESS(f"Demo hackathon ready (id={hackathon.id})"))
        self.stdout.write("All demo users share the password 'password'")
