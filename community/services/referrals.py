# community/services/referrals.py
"""
Referral ledger. A user can be referred once, ever; completing a referral
credits both sides in the same transaction as the referral row.
"""

import logging

from django.db import IntegrityError, transaction
from django.db.models import F

from ..exceptions import AlreadyReferred, InvalidReferral, NotFound
from ..models import Referral, User

logger = logging.getLogger(__name__)

REFERRER_BONUS = 50
REFEREE_BONUS = 25


def complete_referral(referrer_id, referee_id):
    if referrer_id == referee_id:
        raise InvalidReferral("You cannot refer yourself.")
    found = User.objects.in_bulk([referrer_id, referee_id])
    if referrer_id not in found or referee_id not in found:
        raise NotFound("Referrer or referee does not exist.")
    if Referral.objects.filter(referee_id=referee_id).exists():
        raise AlreadyReferred()

    try:
        with transaction.atomic():
            referral = Referral.objects.create(
                referrer_id=referrer_id,
                referee_id=referee_id,
                referrer_points=REFERRER_BONUS,
                referee_points=REFEREE_BONUS,
            )
            User.objects.filter(pk=referrer_id).update(referral_points=F('referral_points') + REFERRER_BONUS)
            User.objects.filter(pk=referee_id).update(referral_points=F('referral_points') + REFEREE_BONUS)
    except IntegrityError:
        # unique referee: a concurrent referral committed first
        raise AlreadyReferred()

    logger.info("Referral completed: %s referred %s", referrer_id, referee_id)
    return referral


def redeem_referral_code(code, referee):
    code = (code or '').strip().upper()
    referrer = User.objects.filter(referral_code=code).first() if code else None
    if referrer is None:
        raise InvalidReferral("Unknown referral code.")
    return complete_referral(referrer.pk, referee.pk)


def referral_summary(user):
    user.refresh_from_db(fields=['referral_points'])
    return {
        'referral_code': user.referral_code,
        'referral_points': user.referral_points,
        'referrals_made': user.referrals_made.count(),
        'referred_by': getattr(getattr(user, 'referral', None), 'referrer_id', None),
    }
