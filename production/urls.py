"""
Production — URL Configuration

@file production/urls.py
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import ProductionDataViewSet

app_name = 'production'

router = DefaultRouter()
router.register('data', ProductionDataViewSet, basename='data')

urlpatterns = [
    path('', include(router.urls)),
]
