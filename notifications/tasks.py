# notifications/tasks.py
import logging

from celery import shared_task
from django.contrib.auth import get_user_model

from .emails import render, send_notice_email
from .models import Notification

logger = logging.getLogger("hackhub.notifications")

User = get_user_model()


@shared_task
def deliver_notice(kind: str, recipient_ids: list, context: dict):
    """
    Create in-app notifications and send mail for one notice.
    Best effort: every failure is logged, nothing is retried or raised.
    """
    try:
        subject, body, notif_type, link = render(kind, context)
    except KeyError:
        logger.error("No template for notice kind %s", kind)
        return 0

    delivered = 0
    for user in User.objects.filter(pk__in=recipient_ids):
        try:
            Notification.objects.create(
                user=user,
                type=notif_type,
                title=subject,
                body=body,
                link=link,
                hackathon_id=context.get("hackathon_id"),
                team_id=context.get("team_id"),
            )
        except Exception:
            logger.exception("Failed to store notification %s for user %s", kind, user.pk)

        try:
            send_notice_email(user, subject, body)
        except Exception:
            logger.exception("Failed to send %s email to user %s", kind, user.pk)
            continue
        delivered += 1

    logger.info("Delivered notice %s to %s/%s recipients", kind, delivered, len(recipient_ids))
    return delivered
