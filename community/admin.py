from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import Achievement, DeliveryProof, Donation, Rating, Referral, User, UserAchievement


@admin.register(User)
class CommunityUserAdmin(UserAdmin):
    list_display = ('username', 'email', 'full_name', 'user_type', 'referral_code', 'referral_points', 'is_active')
    list_filter = ('user_type', 'is_active', 'notification_enabled')
    readonly_fields = ('referral_code', 'referral_points')
    fieldsets = UserAdmin.fieldsets + (
        ('Community', {'fields': ('user_type', 'full_name', 'phone', 'address', 'bio', 'avatar_url',
                                  'notification_enabled', 'referral_code', 'referral_points')}),
    )


@admin.register(Donation)
class DonationAdmin(admin.ModelAdmin):
    list_display = ('title', 'donor', 'volunteer', 'status', 'urgency', 'pickup_city', 'created_at')
    list_filter = ('status', 'urgency', 'food_type')
    search_fields = ('title', 'description', 'pickup_city')
    # lifecycle fields only change through the donation services
    readonly_fields = ('status', 'volunteer', 'picked_up_at', 'delivered_at', 'created_at', 'updated_at')


@admin.register(Achievement)
class AchievementAdmin(admin.ModelAdmin):
    list_display = ('code', 'name', 'tier', 'category', 'points_required', 'user_type')
    list_filter = ('tier', 'category', 'user_type')


admin.site.register(UserAchievement)
admin.site.register(DeliveryProof)
admin.site.register(Rating)
admin.site.register(Referral)
