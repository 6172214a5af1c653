"""
Administration routes.
Frontend expects:
- GET /api/admin/dashboard
- GET /api/admin/users
"""
from django.urls import path
from . import views

app_name = 'administration'

urlpatterns = [
    path('dashboard', views.PlatformDashboardView.as_view(), name='dashboard'),
    path('users', views.UserListView.as_view(), name='users'),
]
