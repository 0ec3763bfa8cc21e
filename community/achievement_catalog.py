# community/achievement_catalog.py
"""
Built-in achievement definitions, loaded with `manage.py load_achievements`.

points_required is scaled by the category divisor in services.achievements:
a donation badge with 100 points needs 10 donations, an impact badge with 100
points needs 50 lives impacted, a special badge compares against total points.
"""

ACHIEVEMENTS = [
    # --- Donors ---
    {'code': 'first_donation', 'name': 'First Bite', 'description': 'Post your first donation.',
     'tier': 'bronze', 'category': 'donation', 'icon': 'trophy', 'points_required': 10, 'user_type': 'donor'},
    {'code': 'donations_10', 'name': 'Generous Heart', 'description': 'Post 10 donations.',
     'tier': 'silver', 'category': 'donation', 'icon': 'heart', 'points_required': 100, 'user_type': 'donor'},
    {'code': 'donations_50', 'name': 'Community Pillar', 'description': 'Post 50 donations.',
     'tier': 'gold', 'category': 'donation', 'icon': 'star', 'points_required': 500, 'user_type': 'donor'},
    {'code': 'donations_100', 'name': 'Hunger Hero', 'description': 'Post 100 donations.',
     'tier': 'platinum', 'category': 'donation', 'icon': 'award', 'points_required': 1000, 'user_type': 'donor'},
    {'code': 'impact_milestone', 'name': 'Feeding Fifty', 'description': 'Help feed 50 people.',
     'tier': 'gold', 'category': 'impact', 'icon': 'target', 'points_required': 100, 'user_type': 'donor'},
    {'code': 'impact_500', 'name': 'City Feeder', 'description': 'Help feed 500 people.',
     'tier': 'diamond', 'category': 'impact', 'icon': 'target', 'points_required': 1000, 'user_type': 'donor'},

    # --- Volunteers ---
    {'code': 'first_delivery', 'name': 'On The Road', 'description': 'Complete your first delivery.',
     'tier': 'bronze', 'category': 'delivery', 'icon': 'truck', 'points_required': 10, 'user_type': 'volunteer'},
    {'code': 'deliveries_10', 'name': 'Reliable Runner', 'description': 'Complete 10 deliveries.',
     'tier': 'silver', 'category': 'delivery', 'icon': 'truck', 'points_required': 100, 'user_type': 'volunteer'},
    {'code': 'deliveries_50', 'name': 'Delivery Legend', 'description': 'Complete 50 deliveries.',
     'tier': 'gold', 'category': 'delivery', 'icon': 'award', 'points_required': 500, 'user_type': 'volunteer'},

    # --- Everyone ---
    {'code': 'streak_7', 'name': 'On Fire', 'description': 'Stay active 7 days in a row.',
     'tier': 'silver', 'category': 'streak', 'icon': 'zap', 'points_required': 70, 'user_type': 'both'},
    {'code': 'streak_30', 'name': 'Unstoppable', 'description': 'Stay active 30 days in a row.',
     'tier': 'platinum', 'category': 'streak', 'icon': 'zap', 'points_required': 300, 'user_type': 'both'},
    {'code': 'points_100', 'name': 'Rising Star', 'description': 'Earn 100 points.',
     'tier': 'bronze', 'category': 'special', 'icon': 'star', 'points_required': 100, 'user_type': 'both'},
    {'code': 'points_1000', 'name': 'Champion', 'description': 'Earn 1000 points.',
     'tier': 'diamond', 'category': 'special', 'icon': 'crown', 'points_required': 1000, 'user_type': 'both'},
]
