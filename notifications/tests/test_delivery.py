from unittest import mock

from django.core import mail
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from hackathons.tests.factories import make_hackathon, make_team, make_user
from notifications import dispatcher
from notifications.emails import invitation_links, render
from notifications.models import Notification
from notifications.tasks import deliver_notice
from teams import services
from teams.models import Team


class NoticeDeliveryTests(TestCase):
    def setUp(self):
        self.organizer = make_user("organizer")
        self.leader = make_user("leader")
        self.alice = make_user("alice")
        self.hackathon = make_hackathon(self.organizer, title="Winter Hack")
        self.team = make_team(
            self.hackathon, self.leader, [self.alice], name="Frostbite",
            submission_status=Team.STATUS_SUBMITTED,
        )

    def test_approval_is_delivered_after_commit(self):
        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            services.approve_team(self.team, self.organizer)
            self.assertEqual(Notification.objects.count(), 0)

        self.assertEqual(len(callbacks), 1)
        notes = Notification.objects.filter(type=Notification.TYPE_TEAM_STATUS)
        self.assertEqual({n.user_id for n in notes}, {self.leader.id, self.alice.id})
        self.assertTrue(all(n.team_id == self.team.id for n in notes))
        self.assertEqual(len(mail.outbox), 2)
        self.assertIn("Frostbite", mail.outbox[0].subject)
        self.assertIn("Winter Hack", mail.outbox[0].body)

    def test_mail_failure_does_not_undo_transition(self):
        with mock.patch("notifications.tasks.send_notice_email", side_effect=RuntimeError("smtp down")):
            with self.captureOnCommitCallbacks(execute=True):
                services.reject_team(self.team, self.organizer, "Too late")

        self.team.refresh_from_db()
        self.assertEqual(self.team.submission_status, Team.STATUS_REJECTED)
        # In-app rows are still written even though mail failed
        self.assertEqual(Notification.objects.filter(user=self.leader).count(), 1)
        self.assertEqual(len(mail.outbox), 0)

    def test_enqueue_failure_is_swallowed(self):
        with mock.patch("notifications.tasks.deliver_notice.delay", side_effect=ConnectionError("no broker")):
            with self.captureOnCommitCallbacks(execute=True):
                services.approve_team(self.team, self.organizer)

        self.team.refresh_from_db()
        self.assertEqual(self.team.submission_status, Team.STATUS_APPROVED)
        self.assertFalse(Notification.objects.exists())

    def test_broken_dispatcher_does_not_break_workflow(self):
        class BrokenDispatcher:
            def publish(self, notice):
                raise RuntimeError("boom")

        with dispatcher.override_dispatcher(BrokenDispatcher()):
            services.approve_team(self.team, self.organizer)

        self.team.refresh_from_db()
        self.assertEqual(self.team.submission_status, Team.STATUS_APPROVED)

    def test_rolled_back_work_publishes_nothing(self):
        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            with self.assertRaises(Exception):
                services.approve_team(make_team(self.hackathon, make_user("x"), name="Draft"), self.organizer)

        self.assertEqual(callbacks, [])

    def test_unknown_kind_is_dropped(self):
        self.assertEqual(deliver_notice("team.exploded", [self.leader.id], {}), 0)
        self.assertFalse(Notification.objects.exists())


class RenderTests(TestCase):
    def test_invitation_links_use_frontend_url(self):
        with self.settings(FRONTEND_URL="https://hack.example.com"):
            accept, decline = invitation_links("judge", "abc")
        self.assertEqual(accept, "https://hack.example.com/judge/accept/abc")
        self.assertEqual(decline, "https://hack.example.com/judge/decline/abc")

    def test_rejection_mail_carries_reason(self):
        subject, body, notif_type, _ = render(
            dispatcher.TEAM_REJECTED,
            {"team_name": "Frostbite", "hackathon_title": "Winter Hack", "reason": "Incomplete"},
        )
        self.assertIn("Frostbite", subject)
        self.assertIn("Reason: Incomplete", body)
        self.assertEqual(notif_type, Notification.TYPE_TEAM_STATUS)

    def test_team_note_mail_links_to_team(self):
        with self.settings(FRONTEND_URL="https://hack.example.com"):
            subject, body, notif_type, link = render(
                dispatcher.TEAM_NOTE,
                {"team_id": 7, "team_name": "Frostbite", "hackathon_title": "Winter Hack",
                 "actor_name": "Olga", "body": "Bring your laptop charger"},
            )
        self.assertEqual(subject, "Message from Organizers: Winter Hack")
        self.assertIn("Olga left a note for team Frostbite", body)
        self.assertIn("Bring your laptop charger", body)
        self.assertEqual(link, "https://hack.example.com/teams/7")
        self.assertIn(link, body)
        self.assertEqual(notif_type, Notification.TYPE_TEAM_STATUS)

    def test_unknown_kind_raises(self):
        with self.assertRaises(KeyError):
            render("nope", {})


class RecordingDispatcherTests(TestCase):
    def test_publish_dedupes_recipients(self):
        leader = make_user("leader")
        recorder = dispatcher.RecordingDispatcher()

        with dispatcher.override_dispatcher(recorder):
            notice = dispatcher.publish(dispatcher.TEAM_APPROVED, [leader, leader.id, None], team_name="X")

        self.assertEqual(notice.recipient_ids, (leader.id,))
        self.assertEqual(recorder.notices, [notice])
        self.assertIsNot(dispatcher.get_dispatcher(), recorder)


class NotificationApiTests(APITestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = make_user("reader")
        self.other = make_user("other")
        for title in ("One", "Two"):
            Notification.objects.create(user=self.user, type=Notification.TYPE_SYSTEM, title=title)
        Notification.objects.create(user=self.other, type=Notification.TYPE_SYSTEM, title="Not mine")

    def test_list_and_mark_read(self):
        self.client.force_authenticate(user=self.user)

        resp = self.client.get("/api/notifications/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data["unread_count"], 2)
        first_id = resp.data["notifications"][0]["id"]

        resp = self.client.post("/api/notifications/mark-read/", {"ids": [first_id]}, format="json")
        self.assertEqual(resp.data["marked_read"], 1)

        resp = self.client.get("/api/notifications/", {"unread": "true"})
        self.assertEqual(len(resp.data["notifications"]), 1)

        resp = self.client.post("/api/notifications/mark-read/", {}, format="json")
        self.assertEqual(resp.data["marked_read"], 1)
        self.assertTrue(Notification.objects.filter(user=self.other, is_read=False).exists())

    def test_mark_read_rejects_non_numeric_ids(self):
        self.client.force_authenticate(user=self.user)

        resp = self.client.post("/api/notifications/mark-read/", {"ids": ["abc"]}, format="json")

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Notification.objects.filter(user=self.user, is_read=False).count(), 2)
