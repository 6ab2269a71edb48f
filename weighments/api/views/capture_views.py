# weighments/api/views/capture_views.py

import logging

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from weighments.api.serializers import (
    BillSerializer,
    StoredTareSerializer,
    TicketSerializer,
    WeighmentCaptureSerializer,
)
from weighments.services.weighment_engine import WeighmentEngine

logger = logging.getLogger(__name__)


def weighment_response(result, engine):
    return {
        'operation_type': result.operation.operation_type.value,
        'sub_mode': result.operation.sub_mode,
        'bill': BillSerializer(result.bill).data if result.bill else None,
        'ticket': TicketSerializer(result.ticket).data if result.ticket else None,
        'stored_tare': (
            StoredTareSerializer(result.stored_tare, context={'tare_store': engine.tares}).data
            if result.stored_tare else None
        ),
    }


class WeighmentCaptureView(APIView):
    """
    POST /api/weighments/
    Runs one New / Update / Stored-Tare operation against the posted reading.
    Domain errors are turned into responses by core.exceptions.api_exception_handler.
    """
    permission_classes = [IsAuthenticated]

    def get_engine(self):
        return WeighmentEngine()

    def post(self, request):
        serializer = WeighmentCaptureSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({'error': serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

        engine = self.get_engine()
        operation = serializer.build_operation(engine)
        result = engine.execute(operation, serializer.get_reading())

        logger.info(
            f"Weighment {operation.operation_type.value}/{operation.sub_mode} "
            f"by {request.user}: bill={getattr(result.bill, 'bill_no', None)}"
        )
        return Response(weighment_response(result, engine), status=status.HTTP_201_CREATED)
