# community/views/analytics_views.py
from rest_framework.decorators import api_view
from rest_framework.response import Response

from ..decorators import user_type_required
from ..models import User
from ..services import analytics


@api_view(['GET'])
def my_analytics(request):
    return Response({'success': True, 'analytics': analytics.personal_analytics(request.user)})


@api_view(['GET'])
@user_type_required(User.UserType.ADMIN)
def area_analytics(request):
    """Per-city donation totals for the admin dashboard."""
    return Response({'success': True, 'areas': analytics.area_analytics(request.user)})
