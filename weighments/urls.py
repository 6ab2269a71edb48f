# weighments/urls.py
from django.urls import path, include
from rest_framework.routers import DefaultRouter

from weighments.api.views import (
    BillViewSet,
    StoredTareByVehicleView,
    StoredTareExpiryView,
    StoredTareListView,
    TicketViewSet,
    WeighmentCaptureView,
)

router = DefaultRouter()
router.register(r'tickets', TicketViewSet, basename='ticket')
router.register(r'bills', BillViewSet, basename='bill')

urlpatterns = [
    path('weighments/', WeighmentCaptureView.as_view(), name='weighment-capture'),

    # ===================== STORED TARE ROUTES =====================
    path('tares/', StoredTareListView.as_view(), name='tare-list'),
    path('tares/vehicle/<str:vehicle_no>/', StoredTareByVehicleView.as_view(), name='tare-by-vehicle'),
    path('tares/<str:vehicle_no>/expiry/', StoredTareExpiryView.as_view(), name='tare-expiry'),

    path('', include(router.urls)),
]
