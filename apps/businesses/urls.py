"""
Business routes.
Frontend expects:
- GET, POST /businesses
- GET /businesses/create
- GET, PATCH, DELETE /businesses/{id}
- POST /businesses/{id}/switch
- GET, POST /businesses/{id}/members
- DELETE /businesses/{id}/members/{userId}
- PUT /businesses/{id}/members/{userId}/role
"""
from django.urls import path

from apps.core.middleware.tenant import business_context_exempt
from . import views

app_name = 'businesses'

urlpatterns = [
    path('', views.BusinessListView.as_view(), name='list'),
    path('create', views.BusinessCreateView.as_view(), name='create'),
    path('<int:business_id>', views.BusinessDetailView.as_view(), name='detail'),
    # Switching changes the context, so it must not be matched against it
    path('<int:business_id>/switch', business_context_exempt(views.BusinessSwitchView.as_view()), name='switch'),
    path('<int:business_id>/members', views.MemberListView.as_view(), name='members'),
    path('<int:business_id>/members/<int:user_id>', views.MemberDetailView.as_view(), name='member-detail'),
    path('<int:business_id>/members/<int:user_id>/role', views.MemberRoleView.as_view(), name='member-role'),
]
