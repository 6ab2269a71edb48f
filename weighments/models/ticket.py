# weighments/models/ticket.py
from django.core.validators import MinValueValidator
from django.db import models


class VehicleStatus(models.TextChoices):
    LOAD = 'load', 'Load'
    EMPTY = 'empty', 'Empty'


class Ticket(models.Model):
    """
    The unresolved half of a two-trip weighment.
    Lives only while its bill is OPEN; closing the weighment deletes it.
    """
    FIRST_WEIGHT_CHOICES = (
        ('gross', 'Gross'),
        ('tare', 'Tare'),
    )

    ticket_no = models.CharField(max_length=50, unique=True)
    vehicle_no = models.CharField(max_length=20, db_index=True)
    party_name = models.CharField(max_length=150)
    product_name = models.CharField(max_length=150)
    vehicle_status = models.CharField(max_length=10, choices=VehicleStatus.choices)
    gross_weight = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    tare_weight = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    first_weight_type = models.CharField(max_length=10, choices=FIRST_WEIGHT_CHOICES)
    charges = models.DecimalField(max_digits=10, decimal_places=2, default=0, validators=[MinValueValidator(0)])
    front_image = models.TextField(null=True, blank=True)
    rear_image = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def save(self, *args, **kwargs):
        if not self.pk and (self.gross_weight is None) == (self.tare_weight is None):
            raise ValueError("A new ticket carries exactly one of gross_weight / tare_weight")
        super().save(*args, **kwargs)

    @property
    def first_weight(self):
        return self.gross_weight if self.first_weight_type == 'gross' else self.tare_weight

    def __str__(self):
        return f"{self.ticket_no} ({self.vehicle_no})"
