# notifications/dispatcher.py
"""
Outbound notices.

Workflow code never sends mail itself. It publishes a Notice and moves on;
delivery happens after the surrounding transaction commits, in a Celery
task, and any failure there is logged and dropped.
"""
from contextlib import contextmanager
from dataclasses import dataclass, field
import logging

from django.db import transaction

logger = logging.getLogger("hackhub.notifications")

# Notice kinds
TEAM_REGISTERED = "team.registered"
TEAM_SUBMITTED = "team.submitted"
TEAM_APPROVED = "team.approved"
TEAM_REJECTED = "team.rejected"
TEAM_ELIMINATED = "team.eliminated"
TEAM_INVITED = "team.invited"
JOIN_REQUEST_RECEIVED = "join_request.received"
JOIN_REQUEST_ACCEPTED = "join_request.accepted"
JOIN_REQUEST_REJECTED = "join_request.rejected"
COORDINATOR_INVITED = "coordinator.invited"
JUDGE_INVITED = "judge.invited"
HACKATHON_ANNOUNCEMENT = "hackathon.announcement"
TEAM_NOTE = "team.note"


@dataclass(frozen=True)
class Notice:
    kind: str
    recipient_ids: tuple
    context: dict = field(default_factory=dict)


class CeleryDispatcher:
    """Default dispatcher: hands the notice to Celery once the DB commit lands."""

    def publish(self, notice: Notice):
        if not notice.recipient_ids:
            return
        transaction.on_commit(lambda: self._enqueue(notice))

    def _enqueue(self, notice: Notice):
        # Lazy import: tasks pull in models, dispatcher is imported by services
        from .tasks import deliver_notice

        try:
            deliver_notice.delay(notice.kind, list(notice.recipient_ids), notice.context)
        except Exception:
            logger.exception("Failed to enqueue notice %s for %s", notice.kind, notice.recipient_ids)


class RecordingDispatcher:
    """Keeps notices in memory. Used by tests and management shells."""

    def __init__(self):
        self.notices = []

    def publish(self, notice: Notice):
        self.notices.append(notice)

    def kinds(self):
        return [n.kind for n in self.notices]

    def for_kind(self, kind):
        return [n for n in self.notices if n.kind == kind]


_dispatcher = None


def get_dispatcher():
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = CeleryDispatcher()
    return _dispatcher


def set_dispatcher(dispatcher):
    global _dispatcher
    _dispatcher = dispatcher


@contextmanager
def override_dispatcher(dispatcher):
    previous = _dispatcher
    set_dispatcher(dispatcher)
    try:
        yield dispatcher
    finally:
        set_dispatcher(previous)


def publish(kind, recipients, **context):
    """
    Convenience wrapper used by services.
    recipients may be users or user ids; duplicates and None are dropped.
    """
    ids = []
    for recipient in recipients:
        if recipient is None:
            continue
        user_id = getattr(recipient, "pk", recipient)
        if user_id not in ids:
            ids.append(user_id)
    notice = Notice(kind=kind, recipient_ids=tuple(ids), context=context)
    try:
        get_dispatcher().publish(notice)
    except Exception:
        logger.exception("Failed to publish notice %s", kind)
    return notice
