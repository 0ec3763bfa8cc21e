# community/services/activity.py
"""
Per-user activity counters, derived from the Donation table on every call.
Nothing here is stored; the donation rows are the only source of truth.
"""

import math
import re
from datetime import timedelta
from typing import NamedTuple

from django.utils import timezone

from ..models import Donation, User

POINTS_PER_DONATION = 10
POINTS_PER_DELIVERY = 15
UNITS_PER_LIFE = 5

QUANTITY_PATTERN = re.compile(r'^\s*(\d+(?:\.\d+)?)')


class ActivityCounters(NamedTuple):
    donations_completed: int = 0
    deliveries_completed: int = 0
    total_quantity: float = 0
    total_points: int = 0
    lives_impacted: int = 0
    current_streak: int = 0
    longest_streak: int = 0


def parse_quantity(value):
    """
    Leading number of a free-text quantity: "12kg" -> 12, "2.5 l" -> 2.5.
    Anything without a leading number counts as 0.
    """
    match = QUANTITY_PATTERN.match(value or '')
    if not match:
        return 0
    number = float(match.group(1))
    return int(number) if number.is_integer() else number


def lives_for_quantity(total_quantity, has_donations=True):
    if not has_donations:
        return 0
    return max(1, math.floor(total_quantity / UNITS_PER_LIFE))


def streaks(activity_dates, today):
    """Return (current, longest) runs of consecutive days in `activity_dates`."""
    days = sorted(set(activity_dates))
    if not days:
        return 0, 0

    longest = run = 1
    for previous, day in zip(days, days[1:]):
        run = run + 1 if day - previous == timedelta(days=1) else 1
        longest = max(longest, run)

    active = set(days)
    cursor = today if today in active else today - timedelta(days=1)
    current = 0
    while cursor in active:
        current += 1
        cursor -= timedelta(days=1)
    return current, longest


def _local_dates(timestamps):
    return [timezone.localtime(ts).date() for ts in timestamps if ts is not None]


def compute_counters(user_id, role, today=None):
    """
    Counters for `user_id` acting as `role` (donor or volunteer).

    Donors score per posted donation whatever its status; volunteers score per
    delivered donation only.
    """
    today = today or timezone.localdate()
    donations_completed = deliveries_completed = 0
    total_quantity = 0
    activity = []

    if role == User.UserType.DONOR:
        rows = list(Donation.objects.filter(donor_id=user_id).values_list('quantity', 'created_at'))
        donations_completed = len(rows)
        total_quantity = sum(parse_quantity(quantity) for quantity, _ in rows)
        activity = _local_dates(created for _, created in rows)
    elif role == User.UserType.VOLUNTEER:
        delivered = list(Donation.objects.filter(
            volunteer_id=user_id,
            status=Donation.DonationStatus.DELIVERED,
        ).values_list('delivered_at', flat=True))
        deliveries_completed = len(delivered)
        activity = _local_dates(delivered)

    current_streak, longest_streak = streaks(activity, today)
    return ActivityCounters(
        donations_completed=donations_completed,
        deliveries_completed=deliveries_completed,
        total_quantity=total_quantity,
        total_points=donations_completed * POINTS_PER_DONATION + deliveries_completed * POINTS_PER_DELIVERY,
        lives_impacted=lives_for_quantity(total_quantity, donations_completed > 0),
        current_streak=current_streak,
        longest_streak=longest_streak,
    )
