# community/urls.py
from django.urls import path
from . import views

urlpatterns = [
    # --- Donation lifecycle ---
    path('api/donations/', views.donation_list, name='donation_list'),
    path('api/donations/<int:donation_id>/', views.donation_detail, name='donation_detail'),
    path('api/donations/<int:donation_id>/accept/', views.accept_donation, name='accept_donation'),
    path('api/donations/<int:donation_id>/pickup/', views.pickup_donation, name='pickup_donation'),
    path('api/donations/<int:donation_id>/deliver/', views.deliver_donation, name='deliver_donation'),
    path('api/donations/<int:donation_id>/transition/', views.transition_donation, name='transition_donation'),

    # --- Collaborator hooks ---
    path('api/donations/<int:donation_id>/proofs/', views.add_proof, name='add_proof'),
    path('api/donations/<int:donation_id>/counterpart/', views.chat_counterpart, name='chat_counterpart'),
    path('api/donations/<int:donation_id>/rating/', views.donation_rating, name='donation_rating'),

    # --- Gamification ---
    path('api/me/stats/', views.my_stats, name='my_stats'),
    path('api/me/achievements/', views.my_achievements, name='my_achievements'),
    path('api/leaderboard/<str:board_type>/', views.leaderboard_view, name='leaderboard'),
    path('api/referrals/', views.referral_overview, name='referral_overview'),
    path('api/referrals/redeem/', views.redeem_referral, name='redeem_referral'),

    # --- Analytics ---
    path('api/me/analytics/', views.my_analytics, name='my_analytics'),
    path('api/analytics/areas/', views.area_analytics, name='area_analytics'),
]
