# community/services/feed.py

from django.db.models import Q

from .activity import parse_quantity

SORT_ORDERS = {
    'newest': ('-created_at', '-pk'),
    'oldest': ('created_at', 'pk'),
    'expiry': ('expiry_date', 'pk'),
}


def filter_donations(queryset, search='', food_type='all', status='all', urgency='all', sort_by='newest'):
    """
    Apply the feed's search box, dropdown filters and sort order.
    "all" (or an empty value) disables a filter. Sorting by quantity
    parses the free-text quantity, so it returns a list instead of a queryset.
    """
    search = (search or '').strip()
    if search:
        queryset = queryset.filter(
            Q(title__icontains=search)
            | Q(description__icontains=search)
            | Q(pickup_city__icontains=search)
        )
    if food_type and food_type != 'all':
        queryset = queryset.filter(food_type=food_type)
    if status and status != 'all':
        queryset = queryset.filter(status=status)
    if urgency and urgency != 'all':
        queryset = queryset.filter(urgency=urgency)

    if sort_by == 'quantity':
        return sorted(queryset, key=lambda donation: (-parse_quantity(donation.quantity), donation.pk))
    return queryset.order_by(*SORT_ORDERS.get(sort_by, SORT_ORDERS['newest']))
