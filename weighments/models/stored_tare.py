# weighments/models/stored_tare.py
from django.db import models


class StoredTare(models.Model):
    """Cached empty-vehicle weight, reusable across trips while it is valid."""
    vehicle_no = models.CharField(max_length=20, unique=True)
    tare_weight = models.DecimalField(max_digits=12, decimal_places=2)
    stored_at = models.DateTimeField()
    updated_at = models.DateTimeField()

    class Meta:
        ordering = ['-stored_at']

    def __str__(self):
        return f"{self.vehicle_no}: {self.tare_weight} kg"
