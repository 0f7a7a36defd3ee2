from django.urls import path
from . import views

app_name = 'rewards'

urlpatterns = [
    # User-facing endpoints
    path('me/summary/', views.get_points_summary, name='summary'),
    path('me/transactions/', views.get_points_transactions, name='transactions'),
    path('me/level/', views.get_points_level, name='level'),
    path('check-balance/', views.check_balance, name='check_balance'),
    path('use/', views.use_points, name='use'),
    path('use-promotion/', views.use_promotion, name='use_promotion'),
    path('promotions/', views.get_promotions, name='promotions'),
    path('leaderboard/', views.get_leaderboard, name='leaderboard'),

    # Admin and internal endpoints
    path('admin/add/', views.admin_add_points, name='admin_add'),
    path('internal/award/', views.internal_award_points, name='internal_award'),
]
