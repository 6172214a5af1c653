"""
URL configuration for the Business Tenancy Service.

- Admin interface
- Landing page and tenancy context
- Business and membership endpoints
- Platform administration endpoints
- Health check
"""
from django.contrib import admin
from django.http import JsonResponse
from django.urls import path, include

from apps.businesses import views as business_views
from apps.core import views as core_views


def _health_check_response(request):
    """
    Generate standardized health check response.

    Args:
        request: Django HTTP request object

    Returns:
        dict: Health check response data
    """
    return {
        'status': 'healthy',
        'service': 'business-tenancy',
        'version': '1.0.0',
    }


urlpatterns = [
    path('admin/', admin.site.urls),

    # Health check endpoints (support both with and without trailing slash)
    path('health/', lambda request: JsonResponse(_health_check_response(request)), name='health'),
    path('health', lambda request: JsonResponse(_health_check_response(request)), name='health-no-slash'),

    # Landing page and shared tenancy data
    path('dashboard', core_views.DashboardView.as_view(), name='dashboard'),
    path('api/context', core_views.TenancyContextView.as_view(), name='tenancy-context'),

    # Businesses - the list/create endpoint answers with and without trailing slash
    path('businesses', business_views.BusinessListView.as_view(), name='business-list'),
    path('businesses/', include('apps.businesses.urls')),

    # Platform administration
    path('api/admin/', include('apps.administration.urls')),
]
