from rest_framework.routers import DefaultRouter
from .views import VehicleViewSet, PartyViewSet, ProductViewSet

router = DefaultRouter()
router.register(r'vehicles', VehicleViewSet, basename='vehicle')
router.register(r'parties', PartyViewSet, basename='party')
router.register(r'products', ProductViewSet, basename='product')

urlpatterns = router.urls
