# community/services/leaderboard.py

from django.db.models import Count, Q

from ..models import Donation, User

BOARDS = {
    # board type -> (user type, count expression)
    User.UserType.DONOR: (User.UserType.DONOR, Count('donations')),
    User.UserType.VOLUNTEER: (
        User.UserType.VOLUNTEER,
        Count('deliveries', filter=Q(deliveries__status=Donation.DonationStatus.DELIVERED)),
    ),
}


def top_n(board_type, n=3):
    """
    Top `n` donors (by donations posted) or volunteers (by deliveries made).
    Ties go to the lower user id; users with no activity are left out.
    """
    if board_type not in BOARDS:
        raise ValueError(f"Unknown leaderboard type: {board_type!r}")
    if n < 0:
        raise ValueError("n must not be negative")

    user_type, count = BOARDS[board_type]
    ranked = (
        User.objects
        .filter(user_type=user_type)
        .annotate(activity_count=count)
        .filter(activity_count__gt=0)
        .order_by('-activity_count', 'pk')
        .values('pk', 'full_name', 'username', 'activity_count')[:n]
    )
    return [
        {
            'rank': position,
            'user_id': row['pk'],
            'full_name': row['full_name'] or row['username'],
            'count': row['activity_count'],
        }
        for position, row in enumerate(ranked, start=1)
    ]
