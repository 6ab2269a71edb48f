import logging
from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated
from masters.models import Vehicle, Party, Product
from masters.serializers import VehicleSerializer, PartySerializer, ProductSerializer

logger = logging.getLogger(__name__)


class MasterSearchMixin:
    """Optional ``?search=`` filter on the model's name field."""
    search_field = None

    def get_queryset(self):
        qs = super().get_queryset()
        term = self.request.query_params.get('search')
        if term and self.search_field:
            qs = qs.filter(**{f"{self.search_field}__icontains": term.strip()})
        return qs

    def perform_create(self, serializer):
        instance = serializer.save()
        logger.info(f"{instance.__class__.__name__} created by {self.request.user}: {instance}")


# ===================== VEHICLE VIEWSET =====================
class VehicleViewSet(MasterSearchMixin, viewsets.ModelViewSet):
    queryset = Vehicle.objects.all()
    serializer_class = VehicleSerializer
    permission_classes = [IsAuthenticated]
    search_field = 'vehicle_no'


# ===================== PARTY VIEWSET =====================
class PartyViewSet(MasterSearchMixin, viewsets.ModelViewSet):
    queryset = Party.objects.all()
    serializer_class = PartySerializer
    permission_classes = [IsAuthenticated]
    search_field = 'party_name'


# ===================== PRODUCT VIEWSET =====================
class ProductViewSet(MasterSearchMixin, viewsets.ModelViewSet):
    queryset = Product.objects.all()
    serializer_class = ProductSerializer
    permission_classes = [IsAuthenticated]
    search_field = 'product_name'
