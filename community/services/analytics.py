# community/services/analytics.py
"""Impact figures for dashboards: per user and per pickup city."""

import math
from datetime import timedelta

from django.db.models import Count, Q
from django.utils import timezone

from ..exceptions import Unauthorized
from ..models import Donation, User
from .activity import parse_quantity

PEOPLE_PER_MEAL = 1.5
WASTE_KG_PER_MEAL = 0.5
WEEK_DAYS = 7


def donations_for(user, role):
    if role == User.UserType.VOLUNTEER:
        return Donation.objects.filter(volunteer=user)
    return Donation.objects.filter(donor=user)


def personal_analytics(user, role=None, today=None):
    role = role or user.user_type
    today = today or timezone.localdate()
    rows = list(donations_for(user, role).values('quantity', 'food_type', 'created_at'))

    total_meals = sum(parse_quantity(row['quantity']) for row in rows)

    week_start = today - timedelta(days=WEEK_DAYS - 1)
    per_day = {week_start + timedelta(days=offset): 0 for offset in range(WEEK_DAYS)}
    for row in rows:
        day = timezone.localtime(row['created_at']).date()
        if day in per_day:
            per_day[day] += 1

    food_types = {}
    for row in rows:
        food_types[row['food_type']] = food_types.get(row['food_type'], 0) + 1

    return {
        'total_donations': len(rows),
        'total_meals': total_meals,
        'people_helped': math.floor(total_meals * PEOPLE_PER_MEAL),
        'waste_reduced': math.floor(total_meals * WASTE_KG_PER_MEAL),
        'weekly': [
            {'date': day.isoformat(), 'day': day.strftime('%a'), 'count': count}
            for day, count in per_day.items()
        ],
        'food_types': [
            {'food_type': food_type, 'count': count}
            for food_type, count in sorted(food_types.items(), key=lambda item: (-item[1], item[0]))
        ],
    }


def area_analytics(actor):
    """Donation totals per pickup city. Admins only."""
    if actor is None or actor.user_type != User.UserType.ADMIN:
        raise Unauthorized("Only admins can view area analytics.")

    Status = Donation.DonationStatus
    rows = (
        Donation.objects
        .values('pickup_city')
        .annotate(
            total_donations=Count('id'),
            pending_donations=Count('id', filter=Q(status=Status.PENDING)),
            in_transit_donations=Count('id', filter=Q(status=Status.IN_TRANSIT)),
            completed_donations=Count('id', filter=Q(status=Status.DELIVERED)),
            unique_donors=Count('donor', distinct=True),
            unique_volunteers=Count('volunteer', distinct=True),
        )
        .order_by('-total_donations', 'pickup_city')
    )
    return list(rows)
