# weighments/services/tare_store.py
"""
Stored tare lookup and upsert.

One validity window (``WEIGHBRIDGE["TARE_VALIDITY_DAYS"]``) drives both
``get_valid`` and ``expiry_info``. The boundary is inclusive: a tare stored
exactly one window ago is still valid.
"""

import logging
import math
from datetime import timedelta

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from weighments.models import StoredTare
from weighments.services.operations import normalize_vehicle_no

logger = logging.getLogger(__name__)


def tare_validity_window():
    return timedelta(days=settings.WEIGHBRIDGE.get("TARE_VALIDITY_DAYS", 30))


class TareStore:

    def __init__(self, validity=None, clock=timezone.now):
        self.validity = validity if validity is not None else tare_validity_window()
        self.clock = clock

    def list(self):
        return StoredTare.objects.all()

    def get_by_vehicle(self, vehicle_no):
        return StoredTare.objects.filter(vehicle_no=normalize_vehicle_no(vehicle_no)).first()

    def is_expired(self, tare, now=None):
        now = now or self.clock()
        return now - tare.stored_at > self.validity

    def get_valid(self, vehicle_no):
        tare = self.get_by_vehicle(vehicle_no)
        if tare is None or self.is_expired(tare):
            return None
        return tare

    def save(self, vehicle_no, tare_weight):
        """
        Upsert by vehicle. A still-valid entry keeps its original ``stored_at``
        so re-weighing does not stretch the window; an expired entry is renewed
        from now.
        """
        vehicle_no = normalize_vehicle_no(vehicle_no)
        now = self.clock()

        with transaction.atomic():
            tare = StoredTare.objects.select_for_update().filter(vehicle_no=vehicle_no).first()
            if tare is None:
                tare = StoredTare.objects.create(
                    vehicle_no=vehicle_no,
                    tare_weight=tare_weight,
                    stored_at=now,
                    updated_at=now,
                )
                logger.info(f"Stored tare saved for {vehicle_no}: {tare_weight} kg")
                return tare

            if self.is_expired(tare, now):
                logger.info(f"Expired stored tare for {vehicle_no} renewed: {tare.tare_weight} -> {tare_weight} kg")
                tare.stored_at = now
            else:
                logger.info(f"Stored tare refreshed for {vehicle_no}: {tare.tare_weight} -> {tare_weight} kg")
            tare.tare_weight = tare_weight
            tare.updated_at = now
            tare.save(update_fields=['tare_weight', 'stored_at', 'updated_at'])
            return tare

    def expiry_info_for(self, tare, now=None):
        now = now or self.clock()
        expiry_date = tare.stored_at + self.validity
        remaining = (expiry_date - now).total_seconds()
        return {
            'is_expired': remaining < 0,
            'days_remaining': max(0, math.ceil(remaining / 86400)),
            'hours_remaining': max(0, math.ceil(remaining / 3600)),
            'expiry_date': expiry_date,
        }

    def expiry_info(self, vehicle_no):
        tare = self.get_by_vehicle(vehicle_no)
        if tare is None:
            return None
        return self.expiry_info_for(tare)
