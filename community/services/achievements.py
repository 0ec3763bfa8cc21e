# community/services/achievements.py
"""
Achievement engine.

Eligibility is recomputed from the activity counters on every evaluation.
Unlock rows are the only thing written, and the (user, achievement) unique
constraint makes a second unlock of the same pair a no-op.
"""

import logging

from django.utils import timezone

from ..models import Achievement, UserAchievement
from .activity import compute_counters

logger = logging.getLogger(__name__)

Category = Achievement.Category

# category -> (counter field, divisor applied to points_required)
CATEGORY_RULES = {
    Category.DONATION: ('donations_completed', 10),
    Category.DELIVERY: ('deliveries_completed', 10),
    Category.STREAK: ('longest_streak', 10),
    Category.IMPACT: ('lives_impacted', 2),
    Category.SPECIAL: ('total_points', 1),
}


def definitions_for(role):
    return list(
        Achievement.objects
        .filter(user_type__in=[role, Achievement.Audience.BOTH])
        .order_by('points_required', 'code')
    )


def target_for(achievement):
    _, divisor = CATEGORY_RULES[achievement.category]
    return achievement.points_required / divisor


def progress_for(current_value, target_value):
    if target_value <= 0:
        return 0
    return min(100, 100 * current_value / target_value)


def _unlock(user, achievement, now):
    # get_or_create falls back to a read when a concurrent insert wins the unique constraint
    unlock, created = UserAchievement.objects.get_or_create(
        user=user,
        achievement=achievement,
        defaults={'unlocked_at': now, 'progress': 100},
    )
    if created:
        logger.info("User %s unlocked achievement %s", user.pk, achievement.code)
    return unlock


def evaluate_achievements(user, role=None, clock=timezone.now):
    """
    Evaluate every achievement that applies to `role` for `user`, unlocking
    the ones whose threshold is met. Returns one dict per achievement.
    """
    role = role or user.user_type
    counters = compute_counters(user.pk, role)
    unlocked = {
        unlock.achievement_id: unlock
        for unlock in UserAchievement.objects.filter(user=user)
    }

    results = []
    for achievement in definitions_for(role):
        field, _ = CATEGORY_RULES[achievement.category]
        current_value = getattr(counters, field)
        target_value = target_for(achievement)

        unlock = unlocked.get(achievement.pk)
        if unlock is None and current_value >= target_value:
            unlock = _unlock(user, achievement, clock())

        results.append({
            'code': achievement.code,
            'name': achievement.name,
            'description': achievement.description,
            'tier': achievement.tier,
            'category': achievement.category,
            'icon': achievement.icon,
            'points_required': achievement.points_required,
            'unlocked': unlock is not None,
            'unlocked_at': unlock.unlocked_at if unlock else None,
            'progress': 100 if unlock else progress_for(current_value, target_value),
            'current_value': current_value,
            'target_value': target_value,
        })
    return results


def achievement_summary(results):
    unlocked = [item for item in results if item['unlocked']]
    return {
        'unlocked': len(unlocked),
        'locked': len(results) - len(unlocked),
        'total_points': sum(item['points_required'] for item in unlocked),
    }
