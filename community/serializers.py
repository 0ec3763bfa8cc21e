# community/serializers.py
from rest_framework import serializers

from .models import Donation, DeliveryProof, Rating


class DonationSerializer(serializers.ModelSerializer):
    donor_name = serializers.SerializerMethodField()
    volunteer_name = serializers.SerializerMethodField()

    class Meta:
        model = Donation
        fields = [
            'id', 'donor', 'donor_name', 'volunteer', 'volunteer_name',
            'title', 'description', 'food_type', 'quantity', 'urgency', 'status',
            'image_url', 'pickup_address', 'pickup_city', 'pickup_latitude', 'pickup_longitude',
            'expiry_date', 'pickup_time', 'created_at', 'updated_at', 'picked_up_at', 'delivered_at',
        ]
        read_only_fields = fields

    def get_donor_name(self, obj):
        return obj.donor.display_name if obj.donor_id else None

    def get_volunteer_name(self, obj):
        return obj.volunteer.display_name if obj.volunteer_id else None


class DeliveryProofSerializer(serializers.ModelSerializer):
    class Meta:
        model = DeliveryProof
        fields = ['id', 'donation', 'uploaded_by', 'image_url', 'proof_type', 'created_at']
        read_only_fields = fields


class RatingSerializer(serializers.ModelSerializer):
    class Meta:
        model = Rating
        fields = ['id', 'donation', 'rated_by', 'rated_user', 'rating', 'feedback', 'created_at']
        read_only_fields = fields


class TransitionSerializer(serializers.Serializer):
    status = serializers.CharField()


class RatingInputSerializer(serializers.Serializer):
    rating = serializers.IntegerField()
    feedback = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class ReferralCodeSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=8)
