# weighments/services/weighment_engine.py
"""
Weighment lifecycle engine.

Turns a weight reading plus an operation into tickets, bills and stored
tares:

- NewGross / NewTare open a two-trip weighment (ticket + OPEN bill)
- NewOneTime bills a walk-in immediately (tare 0, CLOSED)
- CloseTicket resolves the second weighing and closes the bill
- StoreTare / StoredTareTrip cache an empty weight and bill trips against it

Every mutating operation runs in one database transaction. Serial numbers
are committed inside that transaction, after validation, so an aborted
operation never consumes one.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Optional

from django.db import DatabaseError, transaction
from django.utils import timezone

from core.exceptions import (
    BillNotFoundError,
    BillStatusError,
    InconsistentStateError,
    MissingFieldError,
    NoValidTareError,
    PersistenceError,
    UnstableWeightError,
    WeighbridgeError,
    WeighmentValidationError,
)
from core.serial_numbers import SerialNumberGenerator
from masters.utils import remember_walk_in
from weighments.models import Bill, BillStatus, StoredTare, Ticket, VehicleStatus, WeightType
from weighments.services.ledgers import BillLedger, TicketLedger
from weighments.services.operations import (
    CapturedImages,
    CloseTicket,
    NewGross,
    NewOneTime,
    NewTare,
    StoredTareTrip,
    StoreTare,
    WeightReading,
    normalize_vehicle_no,
    to_weight,
)
from weighments.services.tare_store import TareStore

logger = logging.getLogger(__name__)


@dataclass
class WeighmentResult:
    operation: object
    bill: Optional[Bill] = None
    ticket: Optional[Ticket] = None
    stored_tare: Optional[StoredTare] = None


class WeighmentEngine:

    def __init__(
        self,
        serials: Optional[SerialNumberGenerator] = None,
        tares: Optional[TareStore] = None,
        tickets: Optional[TicketLedger] = None,
        bills: Optional[BillLedger] = None,
        camera: Optional[Callable[[], CapturedImages]] = None,
        clock: Callable = timezone.now,
    ):
        self.clock = clock
        self.serials = serials or SerialNumberGenerator(clock=clock)
        self.tares = tares or TareStore(clock=clock)
        self.tickets = tickets or TicketLedger()
        self.bills = bills or BillLedger()
        self.camera = camera
        self._handlers = {
            NewGross: self._open_two_trip,
            NewTare: self._open_two_trip,
            NewOneTime: self._one_time,
            CloseTicket: self._close_ticket,
            StoreTare: self._store_tare,
            StoredTareTrip: self._stored_tare_trip,
        }

    # ---------- entry points ----------
    def execute(self, operation, reading: WeightReading) -> WeighmentResult:
        handler = self._handlers.get(type(operation))
        if handler is None:
            raise WeighmentValidationError(f"Unsupported operation: {type(operation).__name__}")

        self._validate(operation, reading)
        images = self._capture_images(operation)

        logger.info(
            f"Weighment {operation.operation_type.value}/{operation.sub_mode} "
            f"at {reading.live_weight} kg"
        )
        try:
            with transaction.atomic():
                return handler(operation, reading, images)
        except WeighbridgeError:
            raise
        except DatabaseError as e:
            logger.error(f"Weighment not committed: {e}", exc_info=True)
            raise PersistenceError(f"Could not save weighment: {e}") from e

    def resolve_stored_tare(self, vehicle_no, party_name="", product_name="", refresh=False,
                            charges=Decimal("0"), images=None, remarks=""):
        """
        Pick the stored-tare sub-mode from what is on file: no valid tare (or
        an explicit refresh) stores one, otherwise the trip is billed.
        """
        vehicle_no = normalize_vehicle_no(vehicle_no)
        if not vehicle_no:
            raise MissingFieldError(["vehicle_no"])
        if refresh or self.tares.get_valid(vehicle_no) is None:
            return StoreTare(vehicle_no=vehicle_no)

        trip = StoredTareTrip(
            vehicle_no=vehicle_no,
            party_name=party_name,
            product_name=product_name,
            charges=charges,
            images=images,
            remarks=remarks,
        )
        missing = trip.missing_fields()
        if missing:
            raise MissingFieldError(missing)
        return trip

    def mark_printed(self, bill_id) -> Bill:
        """CLOSED -> PRINTED. Repeating it on a PRINTED bill changes nothing."""
        try:
            bill = self.bills.get_by_id(bill_id)
            if bill is None:
                raise BillNotFoundError(bill_id)
            if bill.status == BillStatus.PRINTED:
                return bill
            if bill.status != BillStatus.CLOSED:
                raise BillStatusError(bill_id, bill.status, BillStatus.PRINTED)
            return self.bills.update_status(bill_id, BillStatus.PRINTED, now=self.clock())
        except DatabaseError as e:
            raise PersistenceError(f"Could not mark bill {bill_id} printed: {e}") from e

    # ---------- guards ----------
    def _validate(self, operation, reading):
        missing = operation.missing_fields()
        if missing:
            raise MissingFieldError(missing)
        if not reading.is_stable:
            raise UnstableWeightError(reading.live_weight)

        charges = getattr(operation, "charges", None)
        if charges is not None and to_weight(charges) < 0:
            raise WeighmentValidationError("Charges cannot be negative")

    def _capture_images(self, operation):
        if not hasattr(operation, "images"):
            return None
        if operation.images:
            return operation.images
        if self.camera is None:
            return None
        try:
            return self.camera()
        except Exception as e:
            # camera trouble never blocks a weighment
            logger.warning(f"Image capture failed, continuing without images: {e}")
            return None

    # ---------- handlers ----------
    def _open_two_trip(self, op, reading, images):
        gross_first = isinstance(op, NewGross)
        weight = reading.live_weight
        vehicle_no = normalize_vehicle_no(op.vehicle_no)
        vehicle_status = VehicleStatus.LOAD if gross_first else VehicleStatus.EMPTY
        weight_type = WeightType.GROSS if gross_first else WeightType.TARE
        front, rear = _image_pair(images)

        serial_no = self.serials.commit()
        ticket = self.tickets.add(Ticket(
            ticket_no=serial_no,
            vehicle_no=vehicle_no,
            party_name=op.party_name.strip(),
            product_name=op.product_name.strip(),
            vehicle_status=vehicle_status,
            gross_weight=weight if gross_first else None,
            tare_weight=None if gross_first else weight,
            first_weight_type=weight_type,
            charges=to_weight(op.charges),
            front_image=front,
            rear_image=rear,
        ))
        bill = self.bills.add(Bill(
            bill_no=serial_no,
            ticket_no=serial_no,
            vehicle_no=vehicle_no,
            party_name=ticket.party_name,
            product_name=ticket.product_name,
            gross_weight=ticket.gross_weight,
            tare_weight=ticket.tare_weight,
            charges=ticket.charges,
            front_image=front,
            rear_image=rear,
            status=BillStatus.OPEN,
            first_weight_type=weight_type,
            first_vehicle_status=vehicle_status,
            remarks=op.remarks,
        ))
        remember_walk_in(vehicle_no, ticket.party_name, ticket.product_name)
        return WeighmentResult(operation=op, bill=bill, ticket=ticket)

    def _one_time(self, op, reading, images):
        vehicle_no = normalize_vehicle_no(op.vehicle_no)
        front, rear = _image_pair(images)

        serial_no = self.serials.commit()
        bill = self.bills.add(Bill(
            bill_no=serial_no,
            ticket_no=serial_no,
            vehicle_no=vehicle_no,
            party_name=op.party_name.strip(),
            product_name=op.product_name.strip(),
            gross_weight=reading.live_weight,
            tare_weight=Decimal("0"),
            charges=to_weight(op.charges),
            front_image=front,
            rear_image=rear,
            status=BillStatus.CLOSED,
            first_weight_type=WeightType.ONE_TIME,
            first_vehicle_status=VehicleStatus.LOAD,
            closed_at=self.clock(),
            remarks=op.remarks,
        ))
        remember_walk_in(vehicle_no, bill.party_name, bill.product_name)
        return WeighmentResult(operation=op, bill=bill)

    def _close_ticket(self, op, reading, images):
        now = self.clock()
        weight = reading.live_weight
        ticket = self.tickets.require(op.ticket_id, for_update=True)

        bill = self.bills.get_by_ticket_no(ticket.ticket_no, for_update=True)
        if bill is not None and bill.status != BillStatus.OPEN:
            raise InconsistentStateError(
                f"Ticket {ticket.ticket_no} is still open but its bill is {bill.status}"
            )

        if ticket.first_weight_type == WeightType.GROSS:
            gross_weight, tare_weight = ticket.gross_weight, weight
            second_status = VehicleStatus.EMPTY
        else:
            gross_weight, tare_weight = weight, ticket.tare_weight
            second_status = VehicleStatus.LOAD

        new_front, new_rear = _image_pair(images)
        resolved = dict(
            gross_weight=gross_weight,
            tare_weight=tare_weight,
            charges=to_weight(op.charges) if op.charges is not None else ticket.charges,
            front_image=new_front or ticket.front_image,
            rear_image=new_rear or ticket.rear_image,
            second_vehicle_status=second_status,
            second_weight_at=now,
        )
        if op.remarks is not None:
            resolved["remarks"] = op.remarks

        # ticket leaves the open ledger before the bill reads as closed
        self.tickets.remove_by_id(ticket.pk)

        if bill is not None:
            bill = self.bills.close(bill, now, **resolved)
        else:
            logger.warning(f"No OPEN bill for ticket {ticket.ticket_no}; creating it closed")
            bill = self.bills.add(Bill(
                bill_no=ticket.ticket_no,
                ticket_no=ticket.ticket_no,
                vehicle_no=ticket.vehicle_no,
                party_name=ticket.party_name,
                product_name=ticket.product_name,
                status=BillStatus.CLOSED,
                first_weight_type=ticket.first_weight_type,
                first_vehicle_status=ticket.vehicle_status,
                closed_at=now,
                **resolved,
            ))

        if bill.net_weight is not None and bill.net_weight < 0:
            logger.warning(f"Bill {bill.bill_no} closed with negative net weight {bill.net_weight} kg")
        return WeighmentResult(operation=op, bill=bill)

    def _store_tare(self, op, reading, images):
        tare = self.tares.save(op.vehicle_no, reading.live_weight)
        remember_walk_in(vehicle_no=tare.vehicle_no)
        return WeighmentResult(operation=op, stored_tare=tare)

    def _stored_tare_trip(self, op, reading, images):
        vehicle_no = normalize_vehicle_no(op.vehicle_no)
        tare = self.tares.get_valid(vehicle_no)
        if tare is None:
            raise NoValidTareError(vehicle_no)
        front, rear = _image_pair(images)

        serial_no = self.serials.commit()
        bill = self.bills.add(Bill(
            bill_no=serial_no,
            ticket_no=serial_no,
            vehicle_no=vehicle_no,
            party_name=op.party_name.strip(),
            product_name=op.product_name.strip(),
            gross_weight=reading.live_weight,
            tare_weight=tare.tare_weight,
            charges=to_weight(op.charges),
            front_image=front,
            rear_image=rear,
            status=BillStatus.CLOSED,
            first_weight_type=WeightType.GROSS,
            first_vehicle_status=VehicleStatus.LOAD,
            closed_at=self.clock(),
            remarks=op.remarks,
        ))
        remember_walk_in(vehicle_no, bill.party_name, bill.product_name)
        return WeighmentResult(operation=op, bill=bill, stored_tare=tare)


def _image_pair(images):
    if not images:
        return None, None
    return images.front_image, images.rear_image
