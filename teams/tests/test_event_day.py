from datetime import timedelta

from django.test import TestCase
from django.utils import timezone

from core.exceptions import (
    DuplicateError,
    ForbiddenError,
    InvalidStateError,
    PermissionDeniedError,
    ValidationError,
)
from hackathons.tests.factories import (
    make_coordinator,
    make_hackathon,
    make_judge,
    make_round,
    make_team,
    make_user,
)
from notifications import dispatcher
from teams import services
from teams.models import Team


class CheckInAndLogisticsTests(TestCase):
    def setUp(self):
        self.organizer = make_user("organizer")
        self.leader = make_user("leader")
        self.alice = make_user("alice")
        self.hackathon = make_hackathon(self.organizer)
        self.team = make_team(
            self.hackathon, self.leader, [self.alice],
            submission_status=Team.STATUS_APPROVED,
        )
        self.recorder = dispatcher.RecordingDispatcher()
        dispatcher.set_dispatcher(self.recorder)
        self.addCleanup(dispatcher.set_dispatcher, None)

    def test_coordinator_with_check_in_flag(self):
        coordinator = make_user("coord")
        make_coordinator(self.hackathon, coordinator, can_check_in=True)

        services.check_in_team(self.team, coordinator)
        member = services.check_in_member(self.team, coordinator, self.alice.id)

        self.team.refresh_from_db()
        self.assertTrue(self.team.checked_in)
        self.assertTrue(member.checked_in)
        with self.assertRaises(InvalidStateError):
            services.check_in_team(self.team, coordinator)

    def test_check_in_without_flag_is_denied(self):
        coordinator = make_user("coord")
        make_coordinator(self.hackathon, coordinator, can_check_in=False)

        with self.assertRaises(PermissionDeniedError):
            services.check_in_team(self.team, coordinator)

    def test_check_in_disabled_or_unapproved(self):
        draft = make_team(self.hackathon, make_user("other"), name="Draft Team")
        with self.assertRaises(InvalidStateError):
            services.check_in_team(draft, self.organizer)

        self.hackathon.enable_check_in = False
        self.hackathon.save()
        self.team.refresh_from_db()
        with self.assertRaises(InvalidStateError):
            services.check_in_team(self.team, self.organizer)

    def test_assign_numbers_needs_flag_and_unique_team_number(self):
        coordinator = make_user("coord")
        make_coordinator(self.hackathon, coordinator)
        with self.assertRaises(PermissionDeniedError):
            services.assign_numbers(self.team, coordinator, table_number="T1")

        services.assign_numbers(self.team, self.organizer, table_number="T1", team_number="7")
        other = make_team(self.hackathon, make_user("other"), name="Other")
        with self.assertRaises(DuplicateError):
            services.assign_numbers(other, self.organizer, team_number="7")
        with self.assertRaises(ValidationError):
            services.assign_numbers(other, self.organizer)

    def test_eliminate_team(self):
        services.eliminate_team(self.team, self.organizer, "Missed check-in")

        self.team.refresh_from_db()
        self.assertTrue(self.team.is_eliminated)
        self.assertEqual(self.team.elimination_reason, "Missed check-in")
        self.assertIn(dispatcher.TEAM_ELIMINATED, self.recorder.kinds())
        with self.assertRaises(InvalidStateError):
            services.eliminate_team(self.team, self.organizer)

    def test_notes_and_announcements_need_communicate_flag(self):
        coordinator = make_user("coord")
        make_coordinator(self.hackathon, coordinator, can_communicate=False)
        with self.assertRaises(PermissionDeniedError):
            services.add_note(self.team, coordinator, "Ask about their API keys")

        note = services.add_note(self.team, self.organizer, "Ask about their API keys")
        self.assertEqual(list(services.team_notes(self.team, self.organizer)), [note])
        note_notice = self.recorder.for_kind(dispatcher.TEAM_NOTE)[0]
        self.assertEqual(note_notice.recipient_ids, (self.leader.id,))
        self.assertEqual(note_notice.context["body"], "Ask about their API keys")
        self.assertEqual(note_notice.context["actor_name"], self.organizer.display_name)
        self.assertEqual(note_notice.context["team_id"], self.team.id)

        count = services.send_announcement(self.hackathon, self.organizer, "Lunch", "Lunch at 1pm")
        self.assertEqual(count, 2)
        notice = self.recorder.for_kind(dispatcher.HACKATHON_ANNOUNCEMENT)[0]
        self.assertEqual(set(notice.recipient_ids), {self.leader.id, self.alice.id})


class SubmissionAndScoringTests(TestCase):
    def setUp(self):
        self.organizer = make_user("organizer")
        self.leader = make_user("leader")
        self.judge = make_user("judge")
        self.hackathon = make_hackathon(self.organizer)
        make_judge(self.hackathon, self.judge)
        self.round = make_round(self.hackathon)
        self.alpha = make_team(
            self.hackathon, self.leader, [make_user("a2")], name="Alpha",
            submission_status=Team.STATUS_APPROVED,
        )
        self.bravo = make_team(
            self.hackathon, make_user("b1"), [make_user("b2")], name="Bravo",
            submission_status=Team.STATUS_APPROVED,
        )

    def _score(self, team, judge, innovation, execution):
        return services.score_team(
            team, judge, self.round.id,
            [{"criterion": "Innovation", "score": innovation},
             {"criterion": "Execution", "score": execution}],
        )

    def test_member_submits_and_resubmits(self):
        first = services.submit_project(
            self.alpha, self.leader, self.round.id,
            {"github_link": "https://github.com/alpha/app", "description": "v1"},
        )
        second = services.submit_project(
            self.alpha, self.leader, self.round.id, {"description": "v2"},
        )
        self.assertEqual(first.id, second.id)
        self.assertEqual(second.description, "v2")
        self.assertEqual(second.github_link, "https://github.com/alpha/app")

    def test_outsider_cannot_submit(self):
        with self.assertRaises(ForbiddenError):
            services.submit_project(self.alpha, make_user("x"), self.round.id, {})

    def test_submission_after_deadline(self):
        self.round.end_time = timezone.now() - timedelta(minutes=1)
        self.round.save()

        with self.assertRaises(InvalidStateError):
            services.submit_project(self.alpha, self.leader, self.round.id, {})

    def test_scores_are_validated_against_criteria(self):
        with self.assertRaises(ValidationError):
            self._score(self.alpha, self.judge, 60, 10)
        with self.assertRaises(ValidationError):
            services.score_team(
                self.alpha, self.judge, self.round.id,
                [{"criterion": "Design", "score": 10}],
            )
        with self.assertRaises(ForbiddenError):
            self._score(self.alpha, self.leader, 10, 10)

        score = self._score(self.alpha, self.judge, 40, 35)
        self.assertEqual(score.total, 75)

        rescored = self._score(self.alpha, self.judge, 45, 35)
        self.assertEqual(rescored.id, score.id)
        self.assertEqual(rescored.total, 80)

    def test_leaderboard_averages_judges(self):
        second_judge = make_user("judge2")
        make_judge(self.hackathon, second_judge)
        self._score(self.alpha, self.judge, 40, 40)
        self._score(self.alpha, second_judge, 20, 20)
        self._score(self.bravo, self.judge, 30, 35)

        rows = services.leaderboard(self.hackathon, self.leader)

        self.assertEqual([r["team_name"] for r in rows], ["Bravo", "Alpha"])
        self.assertEqual(rows[0]["total_score"], 65.0)
        self.assertEqual(rows[1]["total_score"], 60.0)
        self.assertEqual([r["rank"] for r in rows], [1, 2])

    def test_hidden_leaderboard_is_staff_only(self):
        self.hackathon.enable_leaderboard = False
        self.hackathon.save()

        with self.assertRaises(ForbiddenError):
            services.leaderboard(self.hackathon, self.leader)
        self.assertEqual(len(services.leaderboard(self.hackathon, self.judge)), 2)
