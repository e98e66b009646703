from django.test import TestCase

from core.exceptions import (
    DuplicateError,
    DuplicateRequestError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    TeamFullError,
    ValidationError,
)
from hackathons.tests.factories import make_hackathon, make_team, make_user
from notifications import dispatcher
from teams import services
from teams.models import JoinRequest, Team, TeamMember


class JoinRequestTests(TestCase):
    def setUp(self):
        self.organizer = make_user("organizer")
        self.leader = make_user("leader")
        self.alice = make_user("alice")
        self.bob = make_user("bob")
        self.hackathon = make_hackathon(self.organizer, min_members=1, max_members=3)
        self.team = make_team(self.hackathon, self.leader)
        self.recorder = dispatcher.RecordingDispatcher()
        dispatcher.set_dispatcher(self.recorder)
        self.addCleanup(dispatcher.set_dispatcher, None)

    def _fill_team(self):
        for name in ("filler1", "filler2"):
            TeamMember.objects.create(team=self.team, user=make_user(name))

    def test_send_request_notifies_leader(self):
        join_request = services.send_join_request(self.team, self.alice, "I do frontend")

        self.assertEqual(join_request.status, JoinRequest.STATUS_PENDING)
        self.assertEqual(join_request.kind, JoinRequest.KIND_REQUEST)
        notice = self.recorder.for_kind(dispatcher.JOIN_REQUEST_RECEIVED)[0]
        self.assertEqual(notice.recipient_ids, (self.leader.id,))
        self.assertEqual(notice.context["message"], "I do frontend")

    def test_second_pending_request_is_duplicate(self):
        services.send_join_request(self.team, self.alice)

        with self.assertRaises(DuplicateRequestError):
            services.send_join_request(self.team, self.alice)
        self.assertEqual(self.team.join_requests.count(), 1)

    def test_request_after_rejection_is_allowed(self):
        first = services.send_join_request(self.team, self.alice)
        services.reject_join_request(self.team, first.id, self.leader, "Full stack only")

        second = services.send_join_request(self.team, self.alice)
        self.assertNotEqual(first.id, second.id)

    def test_request_to_full_team_fails(self):
        self._fill_team()

        with self.assertRaises(TeamFullError):
            services.send_join_request(self.team, self.alice)

    def test_accept_when_full_fails_without_touching_membership(self):
        TeamMember.objects.create(team=self.team, user=make_user("filler1"))
        join_request = services.send_join_request(self.team, self.alice)
        TeamMember.objects.create(team=self.team, user=make_user("filler2"))
        before = list(self.team.members.values_list("user_id", "status"))

        with self.assertRaises(TeamFullError):
            services.accept_join_request(self.team, join_request.id, self.leader)

        self.assertEqual(list(self.team.members.values_list("user_id", "status")), before)
        join_request.refresh_from_db()
        self.assertEqual(join_request.status, JoinRequest.STATUS_PENDING)

    def test_user_in_another_team_cannot_request(self):
        make_team(self.hackathon, self.alice, name="Alice's Team")

        with self.assertRaises(DuplicateError):
            services.send_join_request(self.team, self.alice)

    def test_submitted_team_does_not_accept_requests(self):
        Team.objects.filter(pk=self.team.pk).update(submission_status=Team.STATUS_SUBMITTED)
        self.team.refresh_from_db()

        with self.assertRaises(InvalidStateError):
            services.send_join_request(self.team, self.alice)

    def test_only_leader_accepts_requests(self):
        join_request = services.send_join_request(self.team, self.alice)

        with self.assertRaises(ForbiddenError):
            services.accept_join_request(self.team, join_request.id, self.alice)

        services.accept_join_request(self.team, join_request.id, self.leader)
        member = self.team.members.get(user=self.alice)
        self.assertEqual(member.role, TeamMember.ROLE_MEMBER)
        self.assertEqual(member.status, TeamMember.STATUS_ACTIVE)

    def test_accepting_twice_fails(self):
        join_request = services.send_join_request(self.team, self.alice)
        services.accept_join_request(self.team, join_request.id, self.leader)

        with self.assertRaises(InvalidStateError):
            services.accept_join_request(self.team, join_request.id, self.leader)

    def test_accept_reactivates_removed_member(self):
        join_request = services.send_join_request(self.team, self.alice)
        services.accept_join_request(self.team, join_request.id, self.leader)
        services.remove_member(self.team, self.leader, self.alice.id)

        again = services.send_join_request(self.team, self.alice)
        services.accept_join_request(self.team, again.id, self.leader)

        self.assertEqual(self.team.members.filter(user=self.alice).count(), 1)
        self.assertTrue(self.team.is_member(self.alice))

    def test_unknown_request_is_not_found(self):
        with self.assertRaises(NotFoundError):
            services.accept_join_request(self.team, 424242, self.leader)

    def test_cancel_by_requester_only(self):
        join_request = services.send_join_request(self.team, self.alice)

        with self.assertRaises(ForbiddenError):
            services.cancel_join_request(self.team, join_request.id, self.bob)

        services.cancel_join_request(self.team, join_request.id, self.alice)
        join_request.refresh_from_db()
        self.assertEqual(join_request.status, JoinRequest.STATUS_CANCELLED)

        with self.assertRaises(InvalidStateError):
            services.accept_join_request(self.team, join_request.id, self.leader)


class TeamInvitationTests(TestCase):
    def setUp(self):
        self.organizer = make_user("organizer")
        self.leader = make_user("leader")
        self.alice = make_user("alice")
        self.hackathon = make_hackathon(self.organizer, min_members=1, max_members=3)
        self.team = make_team(self.hackathon, self.leader)
        self.recorder = dispatcher.RecordingDispatcher()
        dispatcher.set_dispatcher(self.recorder)
        self.addCleanup(dispatcher.set_dispatcher, None)

    def test_invite_is_answered_by_invitee(self):
        invite = services.invite_member(self.team, self.leader, self.alice)
        self.assertEqual(invite.kind, JoinRequest.KIND_INVITE)
        self.assertEqual(self.recorder.for_kind(dispatcher.TEAM_INVITED)[0].recipient_ids, (self.alice.id,))

        with self.assertRaises(ForbiddenError):
            services.accept_join_request(self.team, invite.id, self.leader)

        services.accept_join_request(self.team, invite.id, self.alice)
        self.assertTrue(self.team.is_member(self.alice))
        accepted = self.recorder.for_kind(dispatcher.JOIN_REQUEST_ACCEPTED)[0]
        self.assertEqual(accepted.recipient_ids, (self.leader.id,))

    def test_only_leader_invites(self):
        member = make_user("member")
        TeamMember.objects.create(team=self.team, user=member)

        with self.assertRaises(ForbiddenError):
            services.invite_member(self.team, member, self.alice)

    def test_leader_cannot_invite_self(self):
        with self.assertRaises(ValidationError):
            services.invite_member(self.team, self.leader, self.leader)

    def test_leader_cancels_invite_and_invitee_rejects(self):
        invite = services.invite_member(self.team, self.leader, self.alice)
        with self.assertRaises(ForbiddenError):
            services.cancel_join_request(self.team, invite.id, self.alice)
        services.cancel_join_request(self.team, invite.id, self.leader)

        second = services.invite_member(self.team, self.leader, self.alice)
        services.reject_join_request(self.team, second.id, self.alice, "Busy that weekend")
        second.refresh_from_db()
        self.assertEqual(second.status, JoinRequest.STATUS_REJECTED)
        self.assertEqual(second.response_reason, "Busy that weekend")

    def test_pending_invitations_listing(self):
        services.invite_member(self.team, self.leader, self.alice)
        services.send_join_request(self.team, make_user("bob"))

        pending = services.pending_invitations(self.team, self.leader)
        self.assertEqual([r.user_id for r in pending], [self.alice.id])

        mine = services.my_join_requests(self.alice)
        self.assertEqual(mine["received"].count(), 1)
        self.assertEqual(mine["sent"].count(), 0)


class MembershipTests(TestCase):
    def setUp(self):
        self.organizer = make_user("organizer")
        self.leader = make_user("leader")
        self.alice = make_user("alice")
        self.hackathon = make_hackathon(self.organizer)
        self.team = make_team(self.hackathon, self.leader, [self.alice])

    def _leaders(self):
        return list(
            self.team.members.filter(
                status=TeamMember.STATUS_ACTIVE, role=TeamMember.ROLE_LEADER,
            ).values_list("user_id", flat=True)
        )

    def test_transfer_leadership_keeps_one_leader(self):
        services.transfer_leadership(self.team, self.leader, self.alice.id)

        self.team.refresh_from_db()
        self.assertEqual(self.team.leader, self.alice)
        self.assertEqual(self._leaders(), [self.alice.id])

        # The old leader is now a plain member and may leave
        services.leave_team(self.team, self.leader)
        self.assertEqual(self._leaders(), [self.alice.id])

    def test_transfer_to_non_member_fails(self):
        with self.assertRaises(NotFoundError):
            services.transfer_leadership(self.team, self.leader, make_user("stranger").id)
        self.assertEqual(self._leaders(), [self.leader.id])

    def test_transfer_by_member_is_forbidden(self):
        with self.assertRaises(ForbiddenError):
            services.transfer_leadership(self.team, self.alice, self.alice.id)

    def test_leader_cannot_leave_or_be_removed(self):
        with self.assertRaises(InvalidStateError):
            services.leave_team(self.team, self.leader)

        other = make_user("other")
        TeamMember.objects.create(team=self.team, user=other)
        with self.assertRaises(ForbiddenError):
            services.remove_member(self.team, other, self.leader.id)

    def test_members_frozen_after_submit(self):
        services.confirm_team(self.team, self.leader)

        with self.assertRaises(InvalidStateError):
            services.remove_member(self.team, self.leader, self.alice.id)
        with self.assertRaises(InvalidStateError):
            services.leave_team(self.team, self.alice)
