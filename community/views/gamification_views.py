# community/views/gamification_views.py
from django.http import Http404
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from ..serializers import ReferralCodeSerializer
from ..services import achievements, activity, leaderboard, referrals

DEFAULT_LEADERBOARD_SIZE = 3


@api_view(['GET'])
def my_stats(request):
    counters = activity.compute_counters(request.user.pk, request.user.user_type)
    return Response({'success': True, 'role': request.user.user_type, 'stats': counters._asdict()})


@api_view(['GET'])
def my_achievements(request):
    results = achievements.evaluate_achievements(request.user, request.user.user_type)
    return Response({
        'success': True,
        'achievements': results,
        'summary': achievements.achievement_summary(results),
    })


@api_view(['GET'])
def leaderboard_view(request, board_type):
    try:
        n = int(request.query_params.get('n', DEFAULT_LEADERBOARD_SIZE))
    except ValueError:
        return Response({'success': False, 'message': 'n must be a whole number.'}, status=status.HTTP_400_BAD_REQUEST)
    if n < 0:
        return Response({'success': False, 'message': 'n must not be negative.'}, status=status.HTTP_400_BAD_REQUEST)
    if board_type not in leaderboard.BOARDS:
        raise Http404("Unknown leaderboard.")
    return Response({'success': True, 'type': board_type, 'leaders': leaderboard.top_n(board_type, n)})


@api_view(['GET'])
def referral_overview(request):
    return Response({'success': True, 'referral': referrals.referral_summary(request.user)})


@api_view(['POST'])
def redeem_referral(request):
    serializer = ReferralCodeSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    referrals.redeem_referral_code(serializer.validated_data['code'], request.user)
    return Response(
        {
            'success': True,
            'message': f'Referral applied! You earned {referrals.REFEREE_BONUS} points.',
            'referral': referrals.referral_summary(request.user),
        },
        status=status.HTTP_201_CREATED,
    )
