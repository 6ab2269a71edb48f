# reports/views.py

import csv
from datetime import datetime, timedelta

from django.db.models import Count, Sum
from django.http import HttpResponse
from django.utils import timezone
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from weighments.models import BillStatus
from weighments.services.ledgers import BillLedger


def report_range(request):
    """``start_date`` / ``end_date`` query params; defaults to the last 30 days including today."""
    today = timezone.localdate()
    start_date_str = request.query_params.get('start_date')
    end_date_str = request.query_params.get('end_date')

    start_date = datetime.strptime(start_date_str, '%Y-%m-%d').date() if start_date_str else today - timedelta(days=29)
    end_date = datetime.strptime(end_date_str, '%Y-%m-%d').date() if end_date_str else today
    return start_date, end_date


class WeighmentReportView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        try:
            start_date, end_date = report_range(request)
        except ValueError:
            return Response({"error": "Invalid date format. Use YYYY-MM-DD."}, status=400)

        bills = BillLedger().between(start_date, end_date)
        resolved = bills.filter(status__in=[BillStatus.CLOSED, BillStatus.PRINTED])

        status_counts = {s: 0 for s in BillStatus.values}
        for row in bills.values('status').annotate(count=Count('id')):
            status_counts[row['status']] = row['count']

        totals = resolved.aggregate(net=Sum('net_weight'), charges=Sum('charges'))

        # Product-wise breakdown
        product_weighments = resolved.values('product_name').annotate(
            trips=Count('id'),
            total_net_weight=Sum('net_weight'),
        ).order_by('-total_net_weight')

        # Party-wise breakdown
        party_weighments = resolved.values('party_name').annotate(
            trips=Count('id'),
            total_net_weight=Sum('net_weight'),
            total_charges=Sum('charges'),
        ).order_by('-total_net_weight')

        return Response({
            'total_bills': bills.count(),
            'status_counts': status_counts,
            'total_net_weight': float(totals['net'] or 0),
            'total_charges': float(totals['charges'] or 0),
            'product_weighments': list(product_weighments),
            'party_weighments': list(party_weighments),
            'start_date': start_date.strftime('%Y-%m-%d'),
            'end_date': end_date.strftime('%Y-%m-%d'),
        })


class WeighmentExportView(APIView):
    """GET /api/reports/weighments/export/?start_date=...&end_date=... as CSV"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        try:
            start_date, end_date = report_range(request)
        except ValueError:
            return Response({"error": "Invalid date format. Use YYYY-MM-DD."}, status=400)

        bills = BillLedger().between(start_date, end_date).order_by('created_at', 'id')

        response = HttpResponse(content_type='text/csv')
        response['Content-Disposition'] = f'attachment; filename="weighments_{start_date}_{end_date}.csv"'
        writer = csv.writer(response)
        writer.writerow([
            'Bill No', 'Date', 'Vehicle No', 'Party', 'Product',
            'Gross (KG)', 'Tare (KG)', 'Net (KG)', 'Charges', 'Status',
        ])
        for bill in bills:
            writer.writerow([
                bill.bill_no,
                timezone.localtime(bill.created_at).strftime('%Y-%m-%d %H:%M'),
                bill.vehicle_no,
                bill.party_name,
                bill.product_name,
                bill.gross_weight if bill.gross_weight is not None else '',
                bill.tare_weight if bill.tare_weight is not None else '',
                bill.net_weight if bill.net_weight is not None else '',
                bill.charges,
                bill.status,
            ])
        return response
