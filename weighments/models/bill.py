# weighments/models/bill.py
from django.core.validators import MinValueValidator
from django.db import models

from .ticket import VehicleStatus


class BillStatus(models.TextChoices):
    OPEN = 'OPEN', 'Open'
    CLOSED = 'CLOSED', 'Closed'
    PRINTED = 'PRINTED', 'Printed'


class WeightType(models.TextChoices):
    GROSS = 'gross', 'Gross'
    TARE = 'tare', 'Tare'
    ONE_TIME = 'one-time', 'One-time'


# Forward-only lifecycle
STATUS_ORDER = [BillStatus.OPEN, BillStatus.CLOSED, BillStatus.PRINTED]


class Bill(models.Model):
    bill_no = models.CharField(max_length=50, unique=True)
    ticket_no = models.CharField(max_length=50, db_index=True)
    vehicle_no = models.CharField(max_length=20, db_index=True)
    party_name = models.CharField(max_length=150)
    product_name = models.CharField(max_length=150)
    gross_weight = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    tare_weight = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    net_weight = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True, editable=False)
    charges = models.DecimalField(max_digits=10, decimal_places=2, default=0, validators=[MinValueValidator(0)])
    front_image = models.TextField(null=True, blank=True)
    rear_image = models.TextField(null=True, blank=True)
    status = models.CharField(max_length=10, choices=BillStatus.choices, default=BillStatus.OPEN)
    first_weight_type = models.CharField(max_length=10, choices=WeightType.choices)
    first_vehicle_status = models.CharField(max_length=10, choices=VehicleStatus.choices, null=True, blank=True)
    second_vehicle_status = models.CharField(max_length=10, choices=VehicleStatus.choices, null=True, blank=True)
    second_weight_at = models.DateTimeField(null=True, blank=True)
    remarks = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    closed_at = models.DateTimeField(null=True, blank=True)
    printed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ['-created_at', '-id']

    @staticmethod
    def compute_net(gross_weight, tare_weight):
        if gross_weight is None or tare_weight is None:
            return None
        return gross_weight - tare_weight

    def save(self, *args, **kwargs):
        # net weight is always derived, never trusted from the caller
        self.net_weight = self.compute_net(self.gross_weight, self.tare_weight)
        update_fields = kwargs.get('update_fields')
        if update_fields is not None and {'gross_weight', 'tare_weight'} & set(update_fields):
            kwargs['update_fields'] = set(update_fields) | {'net_weight'}
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.bill_no} [{self.status}]"
