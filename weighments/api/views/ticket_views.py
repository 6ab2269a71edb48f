# weighments/api/views/ticket_views.py

import logging

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from weighments.api.serializers import TicketSerializer, WeighmentCaptureSerializer
from weighments.api.views.capture_views import weighment_response
from weighments.services.ledgers import TicketLedger
from weighments.services.weighment_engine import WeighmentEngine

logger = logging.getLogger(__name__)


class TicketViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = TicketSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        qs = TicketLedger().list()
        vehicle_no = self.request.query_params.get('vehicle_no')
        if vehicle_no:
            qs = qs.filter(vehicle_no__icontains=vehicle_no.strip())
        return qs

    @action(detail=True, methods=['post'])
    def close(self, request, pk=None):
        """
        Second weighing for an open ticket.
        Example: POST /api/tickets/12/close/ {"live_weight": 5000, "is_stable": true}
        """
        data = request.data.copy()
        data['operation_type'] = 'update'
        data['ticket_id'] = pk

        serializer = WeighmentCaptureSerializer(data=data)
        if not serializer.is_valid():
            return Response({'error': serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

        engine = WeighmentEngine()
        result = engine.execute(serializer.build_operation(engine), serializer.get_reading())
        logger.info(f"Ticket {pk} closed by {request.user} -> bill {result.bill.bill_no}")
        return Response(weighment_response(result, engine), status=status.HTTP_200_OK)
