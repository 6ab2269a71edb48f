"""Weighbridge error taxonomy and the DRF exception handler that maps it to HTTP."""

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class WeighbridgeError(Exception):
    """Base class for every weighbridge domain error."""
    status_code = status.HTTP_400_BAD_REQUEST
    code = "weighbridge_error"


# ===========================
#  VALIDATION (no side effects)
# ===========================
class WeighmentValidationError(WeighbridgeError):
    """Input rejected before any state was touched."""
    code = "validation_error"


class MissingFieldError(WeighmentValidationError):
    code = "missing_field"

    def __init__(self, fields):
        self.fields = list(fields)
        super().__init__(f"Required field(s) missing: {', '.join(self.fields)}")


class UnstableWeightError(WeighmentValidationError):
    code = "unstable_weight"

    def __init__(self, live_weight=None):
        self.live_weight = live_weight
        super().__init__("Weight is not stable; wait for the indicator to settle")


class NoValidTareError(WeighmentValidationError):
    code = "no_valid_tare"

    def __init__(self, vehicle_no):
        self.vehicle_no = vehicle_no
        super().__init__(f"No valid stored tare for vehicle {vehicle_no}")


# ===========================
#  INTEGRITY (stale view or external corruption)
# ===========================
class LedgerIntegrityError(WeighbridgeError):
    """Referenced record is missing or in the wrong state; refresh and retry."""
    status_code = status.HTTP_409_CONFLICT
    code = "integrity_error"


class TicketNotFoundError(LedgerIntegrityError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "ticket_not_found"

    def __init__(self, ticket_id):
        self.ticket_id = ticket_id
        super().__init__(f"Open ticket {ticket_id} not found")


class BillNotFoundError(LedgerIntegrityError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "bill_not_found"

    def __init__(self, bill_id):
        self.bill_id = bill_id
        super().__init__(f"Bill {bill_id} not found")


class TicketAlreadyClosedError(LedgerIntegrityError):
    code = "ticket_already_closed"

    def __init__(self, ticket_id):
        self.ticket_id = ticket_id
        super().__init__(f"Ticket {ticket_id} was already closed")


class SerialCollisionError(LedgerIntegrityError):
    code = "serial_collision"

    def __init__(self, serial_no):
        self.serial_no = serial_no
        super().__init__(f"Serial number {serial_no} is already in use")


class BillStatusError(LedgerIntegrityError):
    code = "bill_status"

    def __init__(self, bill_id, current, requested):
        self.bill_id = bill_id
        self.current = current
        self.requested = requested
        super().__init__(f"Bill {bill_id} cannot move from {current} to {requested}")


# ===========================
#  PERSISTENCE
# ===========================
class PersistenceError(WeighbridgeError):
    """Backing store failed; the operation is not committed."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "persistence_error"


class InconsistentStateError(PersistenceError):
    """Ledgers disagree with each other; needs operator attention."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "inconsistent_state"


def api_exception_handler(exc, context):
    if isinstance(exc, WeighbridgeError):
        if isinstance(exc, InconsistentStateError):
            logger.critical(f"Inconsistent ledger state: {exc}", exc_info=exc)
        elif isinstance(exc, PersistenceError):
            logger.error(f"Persistence failure: {exc}", exc_info=exc)
        else:
            logger.warning(f"{exc.code}: {exc}")
        return Response({"error": str(exc), "code": exc.code}, status=exc.status_code)

    return exception_handler(exc, context)
