# community/views/donation_views.py
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from ..models import Donation
from ..serializers import (
    DeliveryProofSerializer, DonationSerializer, RatingInputSerializer, RatingSerializer, TransitionSerializer,
)
from ..services import feed, lifecycle, ratings


def _actor(request):
    return request.user if request.user.is_authenticated else None


@api_view(['GET', 'POST'])
@permission_classes([AllowAny])
def donation_list(request):
    """Browse the donation feed, or post a new donation (anonymous posting allowed)."""
    if request.method == 'POST':
        donation = lifecycle.create_donation(_actor(request), request.data)
        return Response(
            {'success': True, 'message': 'Donation posted successfully!', 'donation': DonationSerializer(donation).data},
            status=status.HTTP_201_CREATED,
        )

    params = request.query_params
    donations = feed.filter_donations(
        Donation.objects.select_related('donor', 'volunteer'),
        search=params.get('search', ''),
        food_type=params.get('food_type', 'all'),
        status=params.get('status', 'all'),
        urgency=params.get('urgency', 'all'),
        sort_by=params.get('sort_by', 'newest'),
    )
    return Response({'success': True, 'donations': DonationSerializer(donations, many=True).data})


@api_view(['GET', 'PATCH', 'DELETE'])
def donation_detail(request, donation_id):
    if request.method == 'PATCH':
        donation = lifecycle.update_donation(donation_id, request.user, request.data)
        return Response({'success': True, 'message': 'Donation updated.', 'donation': DonationSerializer(donation).data})
    if request.method == 'DELETE':
        lifecycle.delete_donation(donation_id, request.user)
        return Response({'success': True, 'message': 'Donation deleted.'})

    donation = lifecycle.get_donation(donation_id)
    data = DonationSerializer(donation).data
    data['proofs'] = DeliveryProofSerializer(donation.proofs.order_by('created_at'), many=True).data
    return Response({'success': True, 'donation': data})


def _transition_response(donation, message):
    return Response({'success': True, 'message': message, 'donation': DonationSerializer(donation).data})


@api_view(['POST'])
def accept_donation(request, donation_id):
    donation = lifecycle.apply_transition(donation_id, request.user, Donation.DonationStatus.ACCEPTED)
    return _transition_response(donation, 'Donation accepted! Please check your active pickups.')


@api_view(['POST'])
def pickup_donation(request, donation_id):
    donation = lifecycle.apply_transition(donation_id, request.user, Donation.DonationStatus.IN_TRANSIT)
    return _transition_response(donation, 'Marked as picked up!')


@api_view(['POST'])
def deliver_donation(request, donation_id):
    donation = lifecycle.apply_transition(donation_id, request.user, Donation.DonationStatus.DELIVERED)
    return _transition_response(donation, 'Marked as delivered. Thank you!')


@api_view(['POST'])
def transition_donation(request, donation_id):
    serializer = TransitionSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    donation = lifecycle.apply_transition(donation_id, request.user, serializer.validated_data['status'])
    return _transition_response(donation, 'Donation status updated.')


@api_view(['POST'])
def add_proof(request, donation_id):
    proof = lifecycle.add_delivery_proof(donation_id, request.user, request.data)
    return Response(
        {'success': True, 'message': 'Proof saved.', 'proof': DeliveryProofSerializer(proof).data},
        status=status.HTTP_201_CREATED,
    )


@api_view(['GET'])
def chat_counterpart(request, donation_id):
    counterpart_id = lifecycle.chat_counterpart(donation_id, request.user)
    return Response({'success': True, 'counterpart_id': counterpart_id})


@api_view(['GET', 'POST'])
def donation_rating(request, donation_id):
    if request.method == 'POST':
        serializer = RatingInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        record = ratings.submit_rating(
            donation_id,
            request.user,
            serializer.validated_data['rating'],
            serializer.validated_data.get('feedback'),
        )
        return Response(
            {'success': True, 'message': 'Rating submitted successfully!', 'rating': RatingSerializer(record).data},
            status=status.HTTP_201_CREATED,
        )

    lifecycle.get_donation(donation_id)
    return Response({'success': True, 'can_rate': ratings.can_rate(donation_id, request.user.pk)})
