# community/services/ratings.py

import logging

from django.db import IntegrityError, transaction

from ..exceptions import Conflict, InvalidState, Unauthorized, ValidationFailed
from ..forms import RatingForm
from ..models import Donation, Rating
from .lifecycle import get_donation

logger = logging.getLogger(__name__)


def can_rate(donation_id, actor_id):
    donation = Donation.objects.filter(pk=donation_id).first()
    if donation is None or donation.status != Donation.DonationStatus.DELIVERED:
        return False
    if donation.counterpart_id(actor_id) is None:
        return False
    return not Rating.objects.filter(donation=donation, rated_by_id=actor_id).exists()


def submit_rating(donation_id, actor, rating, feedback=None):
    """Rate the other participant of a delivered donation, once."""
    donation = get_donation(donation_id)
    form = RatingForm({'rating': rating, 'feedback': feedback})
    if not form.is_valid():
        raise ValidationFailed(form.errors.get_json_data(), "Rating must be between 1 and 5.")

    if actor.pk not in (donation.donor_id, donation.volunteer_id):
        raise Unauthorized("You are not part of this donation.")
    if donation.status != Donation.DonationStatus.DELIVERED:
        raise InvalidState("Only delivered donations can be rated.")
    rated_user_id = donation.counterpart_id(actor.pk)
    if rated_user_id is None:
        raise Unauthorized("There is nobody to rate on this donation.")

    record = form.save(commit=False)
    record.donation = donation
    record.rated_by = actor
    record.rated_user_id = rated_user_id
    try:
        with transaction.atomic():
            record.save()
    except IntegrityError:
        raise Conflict("You have already rated this donation.")

    logger.info("User %s rated user %s %s/5 for donation %s", actor.pk, rated_user_id, record.rating, donation.pk)
    return record
