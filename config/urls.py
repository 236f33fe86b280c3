"""
BananaTrack — Root URL Configuration

All API endpoints are namespaced under /api/v1/.

@file config/urls.py
"""

from django.contrib import admin
from django.urls import include, path
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.reverse import reverse
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

admin.site.site_header = 'BananaTrack Administration'
admin.site.site_title = 'BananaTrack'
admin.site.index_title = 'Production Ledger'


@api_view(['GET'])
@permission_classes([AllowAny])
def api_root(request, format=None):
    """BananaTrack API v1 — endpoint directory."""
    return Response({
        'auth': {
            'login': reverse('api-v1:auth-login', request=request, format=format),
            'refresh': reverse('api-v1:auth-refresh', request=request, format=format),
        },
        'production': reverse('api-v1:production:data-list', request=request, format=format),
    })


api_v1_patterns = [
    path('', api_root, name='api-root'),
    path('auth/login/', TokenObtainPairView.as_view(), name='auth-login'),
    path('auth/refresh/', TokenRefreshView.as_view(), name='auth-refresh'),
    path('production/', include('production.urls', namespace='production')),
]

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/', include((api_v1_patterns, 'api-v1'))),
]
