# weighments/services/ledgers.py
import logging

from django.db import IntegrityError, transaction
from django.db.models import Q
from django.utils import timezone

from core.exceptions import (
    BillNotFoundError,
    BillStatusError,
    SerialCollisionError,
    TicketAlreadyClosedError,
    TicketNotFoundError,
)
from weighments.models import Bill, BillStatus, Ticket
from weighments.models.bill import STATUS_ORDER

logger = logging.getLogger(__name__)


def serial_in_use(serial_no):
    """True when a ticket or bill already carries ``serial_no``."""
    return (
        Ticket.objects.filter(ticket_no=serial_no).exists()
        or Bill.objects.filter(bill_no=serial_no).exists()
    )


# ===========================
#  TICKET LEDGER
# ===========================
class TicketLedger:
    """Open tickets awaiting their second weighing."""

    def list(self):
        return Ticket.objects.all()

    def get_by_id(self, ticket_id, for_update=False):
        qs = Ticket.objects.all()
        if for_update:
            qs = qs.select_for_update()
        try:
            return qs.filter(pk=ticket_id).first()
        except (TypeError, ValueError):
            return None

    def require(self, ticket_id, for_update=False):
        ticket = self.get_by_id(ticket_id, for_update=for_update)
        if ticket is None:
            raise TicketNotFoundError(ticket_id)
        return ticket

    def add(self, ticket):
        try:
            # savepoint so a collision leaves the outer transaction usable
            with transaction.atomic():
                ticket.save(force_insert=True)
        except IntegrityError as e:
            raise SerialCollisionError(ticket.ticket_no) from e
        logger.info(f"Ticket opened: {ticket.ticket_no} ({ticket.vehicle_no})")
        return ticket

    def remove_by_id(self, ticket_id):
        """Delete the ticket only if it is still open."""
        deleted, _ = Ticket.objects.filter(pk=ticket_id).delete()
        if not deleted:
            raise TicketAlreadyClosedError(ticket_id)
        logger.info(f"Ticket {ticket_id} removed from open ledger")


# ===========================
#  BILL LEDGER
# ===========================
class BillLedger:
    """Billing records and their OPEN -> CLOSED -> PRINTED lifecycle."""

    def list(self, status=None):
        qs = Bill.objects.all()
        if status:
            qs = qs.filter(status=status)
        return qs

    def open_bills(self):
        return self.list(status=BillStatus.OPEN)

    def closed_bills(self):
        return Bill.objects.filter(status__in=[BillStatus.CLOSED, BillStatus.PRINTED])

    def get_by_id(self, bill_id):
        try:
            return Bill.objects.filter(pk=bill_id).first()
        except (TypeError, ValueError):
            return None

    def get_by_ticket_no(self, ticket_no, for_update=False):
        qs = Bill.objects.filter(ticket_no=ticket_no)
        if for_update:
            qs = qs.select_for_update()
        return qs.first()

    def search(self, query):
        query = (query or "").strip()
        if not query:
            return self.list()
        return Bill.objects.filter(
            Q(bill_no__icontains=query)
            | Q(vehicle_no__icontains=query)
            | Q(party_name__icontains=query)
            | Q(product_name__icontains=query)
        )

    def between(self, start, end):
        """Bills created on dates ``start``..``end`` inclusive (local dates)."""
        return Bill.objects.filter(created_at__date__gte=start, created_at__date__lte=end)

    def add(self, bill):
        try:
            with transaction.atomic():
                bill.save(force_insert=True)
        except IntegrityError as e:
            raise SerialCollisionError(bill.bill_no) from e
        logger.info(f"Bill {bill.bill_no} recorded as {bill.status}")
        return bill

    def close(self, bill, now, **resolved):
        """Resolve an OPEN bill's weights and move it to CLOSED."""
        if bill.status != BillStatus.OPEN:
            raise BillStatusError(bill.pk, bill.status, BillStatus.CLOSED)
        for field, value in resolved.items():
            setattr(bill, field, value)
        bill.status = BillStatus.CLOSED
        bill.closed_at = now
        bill.save()
        logger.info(f"Bill {bill.bill_no} closed, net {bill.net_weight} kg")
        return bill

    def update_status(self, bill_id, status, now=None):
        """
        Move a bill one step forward. Re-applying the current status is a
        no-op; anything backwards or skipping a step raises BillStatusError.
        """
        bill = self.get_by_id(bill_id)
        if bill is None:
            raise BillNotFoundError(bill_id)
        if bill.status == status:
            return bill
        if status not in STATUS_ORDER:
            raise BillStatusError(bill_id, bill.status, status)

        current_index = STATUS_ORDER.index(bill.status)
        if STATUS_ORDER.index(status) != current_index + 1:
            raise BillStatusError(bill_id, bill.status, status)

        now = now or timezone.now()
        changes = {'status': status, 'updated_at': now}
        if status == BillStatus.CLOSED:
            changes['closed_at'] = now
        elif status == BillStatus.PRINTED:
            changes['printed_at'] = now

        # compare-and-swap on the status we read
        updated = Bill.objects.filter(pk=bill_id, status=bill.status).update(**changes)
        if not updated:
            bill.refresh_from_db()
            if bill.status == status:
                return bill
            raise BillStatusError(bill_id, bill.status, status)

        bill.refresh_from_db()
        logger.info(f"Bill {bill.bill_no} -> {status}")
        return bill
