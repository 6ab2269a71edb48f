from .capture_views import WeighmentCaptureView
from .ticket_views import TicketViewSet
from .bill_views import BillViewSet
from .tare_views import StoredTareByVehicleView, StoredTareExpiryView, StoredTareListView
