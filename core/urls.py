# core/urls.py
from django.urls import path
from rest_framework.authtoken.views import obtain_auth_token
from core.views import (
    HealthCheckView,
    SerialNumberConfigView,
    SerialNumberNextView,
    SerialNumberPreviewView,
)

urlpatterns = [
    path('health/', HealthCheckView.as_view(), name='health'),
    path('auth/token/', obtain_auth_token, name='auth-token'),
    path('serial-number/next/', SerialNumberNextView.as_view(), name='serial-number-next'),
    path('serial-number/config/', SerialNumberConfigView.as_view(), name='serial-number-config'),
    path('serial-number/preview/', SerialNumberPreviewView.as_view(), name='serial-number-preview'),
]
