from datetime import timedelta

from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from hackathons.models import Coordinator, Hackathon, Round
from teams.models import Score, Submission, Team
from .factories import make_hackathon, make_judge, make_round, make_team, make_user


class HackathonApiTests(APITestCase):
    def setUp(self):
        self.client = APIClient()
        self.organizer = make_user("organizer")
        self.invitee = make_user("invitee")
        self.base_api = "/api/hackathons/"
        now = timezone.now()
        self.payload = {
            "title": "Spring Hack",
            "description": "48 hours of building",
            "mode": Hackathon.MODE_ONLINE,
            "registration_start_date": (now + timedelta(days=1)).isoformat(),
            "registration_end_date": (now + timedelta(days=5)).isoformat(),
            "hackathon_start_date": (now + timedelta(days=6)).isoformat(),
            "hackathon_end_date": (now + timedelta(days=8)).isoformat(),
            "min_members": 2,
            "max_members": 4,
            "rounds": [
                {
                    "name": "Prototype",
                    "max_score": 100,
                    "judging_criteria": [
                        {"name": "Innovation", "max_points": 60},
                        {"name": "Design", "max_points": 40},
                    ],
                },
            ],
        }

    def test_create_hackathon_with_rounds(self):
        self.client.force_authenticate(user=self.organizer)

        resp = self.client.post(self.base_api, self.payload, format="json")

        self.assertEqual(resp.status_code, status.HTTP_201_CREATED, resp.content)
        data = resp.data["hackathon"]
        self.assertEqual(data["organizer"]["id"], self.organizer.id)
        self.assertEqual(len(data["rounds"]), 1)
        self.assertEqual(data["rounds"][0]["judging_criteria"][1]["name"], "Design")

    def test_bad_date_order_is_rejected(self):
        self.client.force_authenticate(user=self.organizer)
        self.payload["registration_end_date"] = self.payload["hackathon_end_date"]

        resp = self.client.post(self.base_api, self.payload, format="json")

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(resp.data["success"])
        self.assertIn("Registration must end", resp.data["message"])
        self.assertFalse(Hackathon.objects.exists())

    def test_solo_requires_min_one(self):
        self.client.force_authenticate(user=self.organizer)
        self.payload["allow_solo_participation"] = True

        resp = self.client.post(self.base_api, self.payload, format="json")

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_only_organizer_updates(self):
        hackathon = make_hackathon(self.organizer)
        self.client.force_authenticate(user=self.invitee)

        resp = self.client.patch(f"{self.base_api}{hackathon.id}/", {"title": "Mine now"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(user=self.organizer)
        resp = self.client.patch(f"{self.base_api}{hackathon.id}/", {"title": "Renamed"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK, resp.content)
        self.assertEqual(resp.data["hackathon"]["title"], "Renamed")

    def test_partial_update_checks_dates_against_stored_values(self):
        hackathon = make_hackathon(self.organizer)
        self.client.force_authenticate(user=self.organizer)

        resp = self.client.patch(
            f"{self.base_api}{hackathon.id}/",
            {"hackathon_end_date": (hackathon.hackathon_start_date - timedelta(hours=1)).isoformat()},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unknown_permission_key_is_400(self):
        hackathon = make_hackathon(self.organizer)
        self.client.force_authenticate(user=self.organizer)

        resp = self.client.post(
            f"{self.base_api}{hackathon.id}/coordinators/invite/",
            {"email": self.invitee.email, "permissions": {"canDoAnything": True}},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("canDoAnything", resp.data["message"])

    def test_coordinator_invite_accept_round_trip(self):
        hackathon = make_hackathon(self.organizer)
        self.client.force_authenticate(user=self.organizer)
        resp = self.client.post(
            f"{self.base_api}{hackathon.id}/coordinators/invite/",
            {"email": self.invitee.email, "permissions": {"canCheckIn": True}},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED, resp.content)
        self.assertNotIn("invitation_token", resp.data["coordinator"])
        token = Coordinator.objects.get(hackathon=hackathon, user=self.invitee).invitation_token

        self.client.force_authenticate(user=self.invitee)
        resp = self.client.get(f"{self.base_api}coordinator-invitations/")
        self.assertEqual(len(resp.data["invitations"]), 1)

        resp = self.client.post(f"{self.base_api}coordinators/accept/{token}/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK, resp.content)
        self.assertEqual(resp.data["status"], Coordinator.STATUS_ACCEPTED)

        resp = self.client.post(f"{self.base_api}coordinators/accept/{token}/")
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

        resp = self.client.get(f"{self.base_api}my/coordinations/")
        self.assertEqual(resp.data["coordinations"][0]["hackathon"]["id"], hackathon.id)
        self.assertTrue(resp.data["coordinations"][0]["permissions"]["canCheckIn"])

    def test_list_filters(self):
        make_hackathon(self.organizer, title="Online One", mode=Hackathon.MODE_ONLINE)
        make_hackathon(self.organizer, title="Offline One", mode=Hackathon.MODE_OFFLINE)
        self.client.force_authenticate(user=self.invitee)

        resp = self.client.get(self.base_api, {"mode": Hackathon.MODE_OFFLINE})
        self.assertEqual([h["title"] for h in resp.data["hackathons"]], ["Offline One"])

        resp = self.client.get(self.base_api, {"search": "online"})
        self.assertEqual(resp.data["count"], 1)

    def test_anonymous_is_rejected_with_envelope(self):
        resp = self.client.get(self.base_api)
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(resp.data["success"])


class RoundUpdateTests(APITestCase):
    def setUp(self):
        self.client = APIClient()
        self.organizer = make_user("organizer")
        self.hackathon = make_hackathon(self.organizer)
        self.round = make_round(self.hackathon)
        judge = make_user("judge")
        make_judge(self.hackathon, judge)
        leader = make_user("leader")
        team = make_team(self.hackathon, leader, [make_user("mate")], submission_status=Team.STATUS_APPROVED)
        Submission.objects.create(team=team, round=self.round, submitted_by=leader, description="v1")
        Score.objects.create(
            team=team, round=self.round, judge=judge,
            criteria_scores=[{"criterion": "Innovation", "score": 30}], total=30,
        )
        self.url = f"/api/hackathons/{self.hackathon.id}/"
        self.client.force_authenticate(user=self.organizer)

    def _round_payload(self, **extra):
        data = {
            "id": self.round.id,
            "name": self.round.name,
            "max_score": self.round.max_score,
            "judging_criteria": self.round.judging_criteria,
        }
        data.update(extra)
        return data

    def test_resending_rounds_keeps_submissions_and_scores(self):
        resp = self.client.patch(
            self.url,
            {"title": "Renamed", "rounds": [self._round_payload(name="Grand Final")]},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_200_OK, resp.content)
        self.round.refresh_from_db()
        self.assertEqual(self.round.name, "Grand Final")
        self.assertEqual(Submission.objects.count(), 1)
        self.assertEqual(Score.objects.count(), 1)

    def test_new_rounds_are_added_next_to_existing(self):
        resp = self.client.patch(
            self.url,
            {"rounds": [self._round_payload(), {"name": "Bonus", "max_score": 10, "judging_criteria": []}]},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_200_OK, resp.content)
        self.assertEqual(
            set(self.hackathon.rounds.values_list("name", flat=True)), {self.round.name, "Bonus"},
        )
        self.assertEqual(Score.objects.count(), 1)

    def test_round_with_scores_cannot_be_dropped(self):
        resp = self.client.patch(self.url, {"title": "Renamed", "rounds": []}, format="json")

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(resp.data["success"])
        self.assertTrue(Round.objects.filter(pk=self.round.pk).exists())
        self.hackathon.refresh_from_db()
        self.assertNotEqual(self.hackathon.title, "Renamed")
        self.assertEqual(Score.objects.count(), 1)

    def test_unused_round_can_be_dropped(self):
        spare = make_round(self.hackathon, name="Spare")

        resp = self.client.patch(self.url, {"rounds": [self._round_payload()]}, format="json")

        self.assertEqual(resp.status_code, status.HTTP_200_OK, resp.content)
        self.assertFalse(Round.objects.filter(pk=spare.pk).exists())

    def test_round_id_from_another_hackathon_is_rejected(self):
        other_round = make_round(make_hackathon(self.organizer, title="Other"))

        resp = self.client.patch(
            self.url,
            {"rounds": [self._round_payload(), {"id": other_round.id, "name": "Stolen", "max_score": 10}]},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        other_round.refresh_from_db()
        self.assertNotEqual(other_round.name, "Stolen")
