from .weighment_serializers import (
    BillListSerializer,
    BillSerializer,
    StoredTareSerializer,
    TareExpirySerializer,
    TicketSerializer,
)
from .capture_serializer import WeighmentCaptureSerializer
