# community/notifications.py
"""
Donation event dispatch.

The core only decides *which* logical event happened and *who* should hear
about it. Delivery belongs to the notifier backends listed in
settings.NOTIFICATION_BACKENDS. Events are handed over after the database
transaction commits, and a failing backend never undoes the committed change.
"""

import json
import logging
from typing import NamedTuple, Optional

from django.conf import settings
from django.core.mail import send_mail
from django.db import transaction
from django.utils.module_loading import import_string
from pywebpush import webpush, WebPushException

logger = logging.getLogger(__name__)

DONATION_CREATED = 'donation_created'
DONATION_ACCEPTED = 'donation_accepted'
DONATION_DELIVERED = 'donation_delivered'

EVENT_MESSAGES = {
    DONATION_CREATED: ('New Donation Available! 🍱', 'A new donation was posted: {title}'),
    DONATION_ACCEPTED: ('Your donation was accepted', 'A volunteer is on the way for: {title}'),
    DONATION_DELIVERED: ('Your donation was delivered', 'Thank you! {title} reached people in need.'),
}


class DonationEvent(NamedTuple):
    type: str
    donation_id: int
    recipient_id: int
    title: str = ''

    def render(self):
        subject, body = EVENT_MESSAGES[self.type]
        return subject, body.format(title=self.title)


class LoggingNotifier:
    def send(self, event, recipient):
        logger.info("Notify user %s: %s for donation %s", event.recipient_id, event.type, event.donation_id)


class EmailNotifier:
    def send(self, event, recipient):
        if not recipient.email:
            return
        subject, message = event.render()
        send_mail(subject, message, settings.DEFAULT_FROM_EMAIL, [recipient.email], fail_silently=False)


class WebPushNotifier:
    def send(self, event, recipient):
        if not recipient.push_subscription:
            return
        subject, body = event.render()
        message_data = {
            'title': subject,
            'body': body,
            'url': f'/donations/{event.donation_id}',
        }
        try:
            webpush(
                subscription_info=json.loads(recipient.push_subscription),
                data=json.dumps(message_data),
                vapid_private_key=settings.WEBPUSH_SETTINGS['VAPID_PRIVATE_KEY'],
                vapid_claims={
                    "sub": f"mailto:{settings.WEBPUSH_SETTINGS['VAPID_ADMIN_EMAIL']}"
                }
            )
        except WebPushException as e:
            logger.warning("Web push to user %s failed: %s", recipient.pk, e)


def get_backends():
    return [import_string(path)() for path in settings.NOTIFICATION_BACKENDS]


def deliver(events):
    from .models import User

    if not events:
        return
    recipients = User.objects.in_bulk([event.recipient_id for event in events])
    backends = get_backends()
    for event in events:
        recipient = recipients.get(event.recipient_id)
        if recipient is None or not recipient.notification_enabled:
            continue
        for backend in backends:
            try:
                backend.send(event, recipient)
            except Exception:
                logger.exception("Notifier %s failed for %s on donation %s",
                                 type(backend).__name__, event.type, event.donation_id)


def events_for(event_type, donation) -> list:
    """Build the events a committed donation change should produce."""
    from .models import User

    if event_type == DONATION_CREATED:
        volunteer_ids = User.objects.filter(
            user_type=User.UserType.VOLUNTEER,
            notification_enabled=True,
            is_active=True,
        ).values_list('pk', flat=True)
        return [DonationEvent(event_type, donation.pk, pk, donation.title) for pk in volunteer_ids]

    recipient_id: Optional[int] = donation.donor_id
    if recipient_id is None:
        return []
    return [DonationEvent(event_type, donation.pk, recipient_id, donation.title)]


def notify(event_type, donation):
    """Schedule notifications for `donation` once the current transaction commits."""
    donation_id = donation.pk

    def _send():
        from .models import Donation

        current = Donation.objects.filter(pk=donation_id).first()
        if current is None:
            return
        deliver(events_for(event_type, current))

    transaction.on_commit(_send, robust=True)
