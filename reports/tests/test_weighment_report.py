import csv
import io

from django.contrib.auth import get_user_model
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from weighments.services.operations import (
    CloseTicket,
    NewGross,
    NewOneTime,
    WeightReading,
)
from weighments.services.weighment_engine import WeighmentEngine


class WeighmentReportTest(APITestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(username="manager", password="secret123")
        self.client.force_authenticate(user=self.user)
        self.url = reverse("weighment-report")

        engine = WeighmentEngine()
        opened = engine.execute(
            NewGross(vehicle_no="GJ01XY9012", party_name="Shree Traders", product_name="Sand", charges=50),
            WeightReading(15000, True),
        )
        engine.execute(CloseTicket(ticket_id=opened.ticket.pk), WeightReading(5000, True))
        engine.execute(
            NewOneTime(vehicle_no="KA01AB1234", party_name="Om Builders", product_name="Sand", charges=30),
            WeightReading(2000, True),
        )
        engine.execute(
            NewGross(vehicle_no="MH12AB1234", party_name="Om Builders", product_name="Gravel"),
            WeightReading(9000, True),
        )

    def test_default_range_covers_today(self):
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        data = response.data
        self.assertEqual(data["total_bills"], 3)
        self.assertEqual(data["status_counts"], {"OPEN": 1, "CLOSED": 2, "PRINTED": 0})
        self.assertEqual(data["total_net_weight"], 12000.0)
        self.assertEqual(data["total_charges"], 80.0)
        self.assertEqual(data["end_date"], timezone.localdate().strftime("%Y-%m-%d"))

        products = {row["product_name"]: row["trips"] for row in data["product_weighments"]}
        self.assertEqual(products, {"Sand": 2})

    def test_range_without_bills(self):
        response = self.client.get(self.url, {"start_date": "2000-01-01", "end_date": "2000-01-31"})
        self.assertEqual(response.data["total_bills"], 0)
        self.assertEqual(response.data["total_net_weight"], 0)

    def test_bad_date(self):
        response = self.client.get(self.url, {"start_date": "01/02/2025"})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class WeighmentExportTest(APITestCase):
    def setUp(self):
        user = get_user_model().objects.create_user(username="manager", password="secret123")
        self.client.force_authenticate(user=user)
        engine = WeighmentEngine()
        engine.execute(
            NewOneTime(vehicle_no="KA01AB1234", party_name="Om Builders", product_name="Sand"),
            WeightReading(2000, True),
        )
        engine.execute(
            NewGross(vehicle_no="MH12AB1234", party_name="Om Builders", product_name="Gravel"),
            WeightReading(9000, True),
        )

    def test_csv_export(self):
        response = self.client.get(reverse("weighment-export"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response["Content-Type"], "text/csv")

        rows = list(csv.reader(io.StringIO(response.content.decode())))
        self.assertEqual(rows[0][0], "Bill No")
        self.assertEqual(len(rows), 3)
        self.assertEqual(rows[1][2], "KA01AB1234")
        self.assertEqual(rows[1][7], "2000.00")
        # open bill has no net weight yet
        self.assertEqual(rows[2][7], "")
