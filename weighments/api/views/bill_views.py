# weighments/api/views/bill_views.py

import logging
import io
from datetime import datetime

from django.http import FileResponse
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from weighments.api.serializers import BillListSerializer, BillSerializer
from weighments.services.bill_slip import render_bill_slip
from weighments.services.ledgers import BillLedger
from weighments.services.weighment_engine import WeighmentEngine

logger = logging.getLogger(__name__)


class BillViewSet(viewsets.ReadOnlyModelViewSet):
    """
    GET /api/bills/?status=OPEN&q=KA01&start_date=2025-01-01&end_date=2025-01-31
    """
    permission_classes = [IsAuthenticated]

    def get_serializer_class(self):
        if self.action in ('list', 'open', 'closed'):
            return BillListSerializer
        return BillSerializer

    def get_queryset(self):
        ledger = BillLedger()
        params = self.request.query_params

        qs = ledger.search(params.get('q'))

        bill_status = params.get('status')
        if bill_status:
            qs = qs.filter(status=bill_status.upper())

        start_date = params.get('start_date')
        end_date = params.get('end_date')
        if start_date or end_date:
            try:
                start = datetime.strptime(start_date, '%Y-%m-%d').date() if start_date else None
                end = datetime.strptime(end_date, '%Y-%m-%d').date() if end_date else None
            except ValueError:
                logger.warning(f"Ignoring bad date filter: {start_date}..{end_date}")
                return qs
            if start:
                qs = qs.filter(created_at__date__gte=start)
            if end:
                qs = qs.filter(created_at__date__lte=end)
        return qs

    def _render(self, qs):
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(self.get_serializer(page, many=True).data)
        return Response(self.get_serializer(qs, many=True).data)

    @action(detail=False, methods=['get'])
    def open(self, request):
        return self._render(BillLedger().open_bills())

    @action(detail=False, methods=['get'])
    def closed(self, request):
        return self._render(BillLedger().closed_bills())

    @action(detail=True, methods=['post'], url_path='print')
    def mark_printed(self, request, pk=None):
        """Operator confirms the bill slip was printed (CLOSED -> PRINTED)."""
        bill = WeighmentEngine().mark_printed(pk)
        logger.info(f"Bill {bill.bill_no} printed by {request.user}")
        return Response(BillSerializer(bill).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=['get'])
    def slip(self, request, pk=None):
        """PDF slip download. OPEN bills give the provisional first-leg slip."""
        bill = self.get_object()
        return FileResponse(
            io.BytesIO(render_bill_slip(bill)),
            as_attachment=True,
            filename=f"Bill-{bill.bill_no}.pdf",
            content_type='application/pdf',
        )
