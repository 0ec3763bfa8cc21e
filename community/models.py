from django.db import models
from django.db.models import Q
from django.contrib.auth.models import AbstractUser
from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
import secrets
import string

REFERRAL_CODE_LENGTH = 8
REFERRAL_CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_referral_code():
    return ''.join(secrets.choice(REFERRAL_CODE_ALPHABET) for _ in range(REFERRAL_CODE_LENGTH))


# --- CORE USER MODEL ---
class User(AbstractUser):
    class UserType(models.TextChoices):
        DONOR = 'donor', 'Donor'
        VOLUNTEER = 'volunteer', 'Volunteer'
        ADMIN = 'admin', 'Admin'

    user_type = models.CharField(max_length=10, choices=UserType.choices, default=UserType.DONOR, db_index=True)
    full_name = models.CharField(max_length=255, blank=True)
    phone = models.CharField(max_length=20, blank=True, null=True)
    address = models.TextField(blank=True, null=True)
    bio = models.TextField(blank=True, null=True)
    avatar_url = models.URLField(max_length=500, blank=True, null=True, help_text="Reference returned by the external storage service")
    notification_enabled = models.BooleanField(default=True)
    push_subscription = models.TextField(blank=True, null=True, help_text="Web push subscription data (JSON)")
    referral_code = models.CharField(max_length=REFERRAL_CODE_LENGTH, unique=True, editable=False)
    referral_points = models.PositiveIntegerField(default=0, help_text="Balance credited by completed referrals")
    updated_at = models.DateTimeField(auto_now=True)

    def save(self, *args, **kwargs):
        if not self.referral_code:
            code = generate_referral_code()
            while User.objects.filter(referral_code=code).exists():
                code = generate_referral_code()
            self.referral_code = code
        super().save(*args, **kwargs)

    @property
    def display_name(self):
        return self.full_name or self.username

    def __str__(self):
        return f"{self.username} ({self.get_user_type_display()})"  # type: ignore


class Donation(models.Model):
    class DonationStatus(models.TextChoices):
        PENDING = 'pending', 'Pending'
        ACCEPTED = 'accepted', 'Accepted'
        IN_TRANSIT = 'in_transit', 'In Transit'
        DELIVERED = 'delivered', 'Delivered'

    class Urgency(models.TextChoices):
        URGENT = 'urgent', 'Urgent'
        NORMAL = 'normal', 'Normal'
        FLEXIBLE = 'flexible', 'Flexible'

    donor = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, null=True, blank=True, related_name='donations', help_text="Empty for anonymous donations")
    volunteer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, null=True, blank=True, related_name='deliveries', db_index=True)
    title = models.CharField(max_length=200)
    description = models.TextField()
    food_type = models.CharField(max_length=50, db_index=True)
    quantity = models.CharField(max_length=50, help_text="e.g., 12kg, 20 meals")
    urgency = models.CharField(max_length=10, choices=Urgency.choices, default=Urgency.NORMAL)
    status = models.CharField(max_length=20, choices=DonationStatus.choices, default=DonationStatus.PENDING, db_index=True)
    image_url = models.URLField(max_length=500, blank=True, null=True)
    pickup_address = models.TextField()
    pickup_city = models.CharField(max_length=100, db_index=True)
    pickup_latitude = models.FloatField(null=True, blank=True)
    pickup_longitude = models.FloatField(null=True, blank=True)
    expiry_date = models.DateTimeField()
    pickup_time = models.DateTimeField()
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    picked_up_at = models.DateTimeField(null=True, blank=True)
    delivered_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(status='pending', volunteer__isnull=True)
                    | (~Q(status='pending') & Q(volunteer__isnull=False))
                ),
                name='donation_volunteer_iff_not_pending',
            ),
            models.CheckConstraint(
                condition=(
                    Q(status__in=['in_transit', 'delivered'], picked_up_at__isnull=False)
                    | Q(status__in=['pending', 'accepted'], picked_up_at__isnull=True)
                ),
                name='donation_picked_up_at_matches_status',
            ),
            models.CheckConstraint(
                condition=(
                    Q(status='delivered', delivered_at__isnull=False)
                    | (~Q(status='delivered') & Q(delivered_at__isnull=True))
                ),
                name='donation_delivered_at_matches_status',
            ),
        ]

    def counterpart_id(self, user_id):
        """The other participant's id for `user_id`, or None."""
        if self.donor_id is not None and user_id == self.donor_id:
            return self.volunteer_id
        if self.volunteer_id is not None and user_id == self.volunteer_id:
            return self.donor_id
        return None

    def __str__(self):
        return f"{self.title} ({self.status})"


class DeliveryProof(models.Model):
    class ProofType(models.TextChoices):
        BEFORE = 'before', 'Before'
        AFTER = 'after', 'After'

    donation = models.ForeignKey(Donation, on_delete=models.CASCADE, related_name='proofs')
    uploaded_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='delivery_proofs')
    image_url = models.URLField(max_length=500)
    proof_type = models.CharField(max_length=10, choices=ProofType.choices, default=ProofType.AFTER)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.get_proof_type_display()} proof for donation {self.donation_id}"  # type: ignore


# --- GAMIFICATION ---
class Achievement(models.Model):
    class Tier(models.TextChoices):
        BRONZE = 'bronze', 'Bronze'
        SILVER = 'silver', 'Silver'
        GOLD = 'gold', 'Gold'
        PLATINUM = 'platinum', 'Platinum'
        DIAMOND = 'diamond', 'Diamond'

    class Category(models.TextChoices):
        DONATION = 'donation', 'Donation'
        DELIVERY = 'delivery', 'Delivery'
        STREAK = 'streak', 'Streak'
        IMPACT = 'impact', 'Impact'
        SPECIAL = 'special', 'Special'

    class Audience(models.TextChoices):
        DONOR = 'donor', 'Donor'
        VOLUNTEER = 'volunteer', 'Volunteer'
        BOTH = 'both', 'Both'

    code = models.CharField(max_length=50, unique=True)
    name = models.CharField(max_length=100)
    description = models.TextField(blank=True)
    tier = models.CharField(max_length=10, choices=Tier.choices, default=Tier.BRONZE)
    category = models.CharField(max_length=10, choices=Category.choices)
    icon = models.CharField(max_length=50, blank=True, help_text="Opaque icon key for clients")
    points_required = models.PositiveIntegerField(default=0)
    user_type = models.CharField(max_length=10, choices=Audience.choices, default=Audience.BOTH)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.name} ({self.tier})"


class UserAchievement(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='achievements')
    achievement = models.ForeignKey(Achievement, on_delete=models.CASCADE, related_name='unlocks')
    unlocked_at = models.DateTimeField()
    progress = models.PositiveSmallIntegerField(default=100)

    class Meta:
        unique_together = ('user', 'achievement')

    def __str__(self):
        return f"{self.user} - {self.achievement.name}"


class Rating(models.Model):
    donation = models.ForeignKey(Donation, on_delete=models.CASCADE, related_name='ratings')
    rated_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='ratings_given')
    rated_user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='ratings_received')
    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    feedback = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ('donation', 'rated_by')

    def __str__(self):
        return f"{self.rated_by} rated {self.rated_user} {self.rating}/5"


class Referral(models.Model):
    referrer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='referrals_made')
    referee = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='referral')
    referrer_points = models.PositiveIntegerField()
    referee_points = models.PositiveIntegerField()
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.referrer} referred {self.referee}"
