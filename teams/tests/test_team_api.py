from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from hackathons.models import Coordinator
from hackathons.tests.factories import make_coordinator, make_hackathon, make_team, make_user
from teams.models import JoinRequest, Team


class TeamApiTests(APITestCase):
    def setUp(self):
        self.client = APIClient()
        self.organizer = make_user("organizer")
        self.leader = make_user("leader")
        self.alice = make_user("alice")
        self.hackathon = make_hackathon(self.organizer, min_members=2, max_members=3)
        self.base_api = "/api/teams/"

    def test_register_confirm_flow(self):
        self.client.force_authenticate(user=self.leader)
        resp = self.client.post(
            f"{self.base_api}register/",
            {"hackathon_id": self.hackathon.id, "name": "Night Owls", "tech_stack": ["django"]},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED, resp.content)
        self.assertTrue(resp.data["success"])
        team_id = resp.data["team"]["id"]
        self.assertEqual(resp.data["team"]["leader"]["id"], self.leader.id)

        # Leader alone is below min_members
        resp = self.client.post(f"{self.base_api}{team_id}/confirm/")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(resp.data["success"])
        self.assertIn("between 2 and 3", resp.data["message"])

        self.client.force_authenticate(user=self.alice)
        resp = self.client.post(
            f"{self.base_api}{team_id}/join-requests/", {"message": "hi"}, format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED, resp.content)
        request_id = resp.data["join_request"]["id"]

        resp = self.client.post(f"{self.base_api}{team_id}/join-requests/", {}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data["errors"]["detail"].code, "duplicate_request")

        self.client.force_authenticate(user=self.leader)
        resp = self.client.post(f"{self.base_api}{team_id}/join-requests/{request_id}/accept/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK, resp.content)
        self.assertEqual(resp.data["team"]["active_member_count"], 2)

        resp = self.client.post(f"{self.base_api}{team_id}/confirm/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK, resp.content)
        self.assertEqual(resp.data["team"]["submission_status"], Team.STATUS_SUBMITTED)

    def test_register_twice_in_same_hackathon(self):
        make_team(self.hackathon, self.leader)
        self.client.force_authenticate(user=self.leader)

        resp = self.client.post(
            f"{self.base_api}register/",
            {"hackathon_id": self.hackathon.id, "name": "Second"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(resp.data["success"])

    def test_missing_team_is_404_envelope(self):
        self.client.force_authenticate(user=self.leader)

        resp = self.client.get(f"{self.base_api}987654/")
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(resp.data["message"], "Team not found")
        self.assertEqual(resp.data["status_code"], 404)

    def test_reject_without_reason_is_400(self):
        team = make_team(self.hackathon, self.leader, [self.alice], submission_status=Team.STATUS_SUBMITTED)
        self.client.force_authenticate(user=self.organizer)

        resp = self.client.post(f"{self.base_api}{team.id}/reject/", {}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

        resp = self.client.post(
            f"{self.base_api}{team.id}/reject/", {"reason": "Duplicate idea"}, format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK, resp.content)
        self.assertEqual(resp.data["team"]["rejection_reason"], "Duplicate idea")

    def test_permission_denied_vs_forbidden_status_codes(self):
        team = make_team(self.hackathon, self.leader, [self.alice], submission_status=Team.STATUS_SUBMITTED)
        pending = make_user("pending")
        make_coordinator(self.hackathon, pending, status=Coordinator.STATUS_PENDING, can_eliminate_teams=True)
        limited = make_user("limited")
        make_coordinator(self.hackathon, limited)

        self.client.force_authenticate(user=pending)
        resp = self.client.post(f"{self.base_api}{team.id}/approve/")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(resp.data["errors"]["detail"].code, "forbidden")

        self.client.force_authenticate(user=limited)
        resp = self.client.post(f"{self.base_api}{team.id}/approve/")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(resp.data["errors"]["detail"].code, "permission_denied")

    def test_bulk_approve_endpoint(self):
        ok = make_team(self.hackathon, self.leader, [self.alice], name="Ok", submission_status=Team.STATUS_SUBMITTED)
        done = make_team(
            self.hackathon, make_user("d1"), [make_user("d2")], name="Done",
            submission_status=Team.STATUS_APPROVED,
        )
        self.client.force_authenticate(user=self.organizer)

        resp = self.client.post(
            f"{self.base_api}hackathon/{self.hackathon.id}/bulk-approve/",
            {"team_ids": [ok.id, done.id]},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK, resp.content)
        self.assertEqual(resp.data["approved"], [ok.id])
        self.assertEqual(resp.data["failed"][0]["team_id"], done.id)

    def test_team_listing_visibility(self):
        make_team(self.hackathon, self.leader, name="Open", looking_for_members=True)
        make_team(self.hackathon, self.alice, name="Closed")

        self.client.force_authenticate(user=make_user("browser"))
        resp = self.client.get(f"{self.base_api}hackathon/{self.hackathon.id}/")
        self.assertEqual([t["name"] for t in resp.data["teams"]], ["Open"])

        self.client.force_authenticate(user=self.organizer)
        resp = self.client.get(f"{self.base_api}hackathon/{self.hackathon.id}/")
        self.assertEqual(resp.data["count"], 2)

    def test_invite_and_my_join_requests(self):
        team = make_team(self.hackathon, self.leader)
        self.client.force_authenticate(user=self.leader)
        resp = self.client.post(f"{self.base_api}{team.id}/invite/", {"email": "alice@example.com"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED, resp.content)
        self.assertEqual(resp.data["join_request"]["kind"], JoinRequest.KIND_INVITE)

        resp = self.client.post(f"{self.base_api}{team.id}/invite/", {"email": "nobody@example.com"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

        self.client.force_authenticate(user=self.alice)
        resp = self.client.get(f"{self.base_api}my/join-requests/")
        self.assertEqual(len(resp.data["received"]), 1)
        self.assertEqual(resp.data["received"][0]["team_id"], team.id)


class IdInputValidationTests(APITestCase):
    def setUp(self):
        self.client = APIClient()
        self.organizer = make_user("organizer")
        self.leader = make_user("leader")
        self.alice = make_user("alice")
        self.hackathon = make_hackathon(self.organizer)
        self.team = make_team(self.hackathon, self.leader, [self.alice])
        self.base_api = "/api/teams/"

    def test_transfer_leadership_needs_numeric_id(self):
        self.client.force_authenticate(user=self.leader)
        url = f"{self.base_api}{self.team.id}/transfer-leadership/"

        resp = self.client.put(url, {"new_leader_id": "abc"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(resp.data["success"])

        resp = self.client.put(url, {}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

        resp = self.client.put(url, {"new_leader_id": str(self.alice.id)}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK, resp.content)
        self.assertEqual(resp.data["team"]["leader"]["id"], self.alice.id)

    def test_round_filter_must_be_numeric(self):
        self.client.force_authenticate(user=self.organizer)

        for suffix in ("leaderboard/", "submissions/"):
            url = f"{self.base_api}hackathon/{self.hackathon.id}/{suffix}"
            resp = self.client.get(url, {"round_id": "abc"})
            self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST, suffix)
            self.assertFalse(resp.data["success"])

            resp = self.client.get(url)
            self.assertEqual(resp.status_code, status.HTTP_200_OK, suffix)

    def test_invite_user_id_must_be_numeric(self):
        self.client.force_authenticate(user=self.leader)
        url = f"{self.base_api}{self.team.id}/invite/"

        resp = self.client.post(url, {"user_id": "abc"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

        resp = self.client.post(url, {}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(JoinRequest.objects.exists())
