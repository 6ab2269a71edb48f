from datetime import timedelta
from decimal import Decimal
from unittest import mock

from django.db import DatabaseError
from django.test import TestCase

from core.exceptions import (
    BillNotFoundError,
    BillStatusError,
    InconsistentStateError,
    MissingFieldError,
    NoValidTareError,
    PersistenceError,
    SerialCollisionError,
    TicketNotFoundError,
    UnstableWeightError,
    WeighmentValidationError,
)
from core.models import AppSetting
from core.serial_numbers import SerialNumberGenerator
from masters.models import Party, Vehicle
from weighments.models import Bill, BillStatus, StoredTare, Ticket, VehicleStatus, WeightType
from weighments.services.ledgers import BillLedger
from weighments.services.operations import (
    CapturedImages,
    CloseTicket,
    NewGross,
    NewOneTime,
    NewTare,
    StoredTareTrip,
    StoreTare,
)
from weighments.services.weighment_engine import WeighmentEngine

from .helpers import FakeClock, stable, unstable, utc


class EngineTestCase(TestCase):
    def setUp(self):
        self.clock = FakeClock(utc(2025, 6, 1, 10, 0))
        self.engine = WeighmentEngine(clock=self.clock)

    def open_gross(self, weight=15000, **fields):
        op = NewGross(
            vehicle_no=fields.pop("vehicle_no", "GJ01XY9012"),
            party_name=fields.pop("party_name", "Shree Traders"),
            product_name=fields.pop("product_name", "Sand"),
            **fields,
        )
        return self.engine.execute(op, stable(weight))


class TwoTripTest(EngineTestCase):
    def test_gross_first_then_tare(self):
        opened = self.open_gross(15000)
        self.assertEqual(opened.ticket.ticket_no, "WB-2025-001")
        self.assertEqual(opened.bill.bill_no, opened.ticket.ticket_no)
        self.assertEqual(opened.bill.status, BillStatus.OPEN)
        self.assertIsNone(opened.bill.net_weight)

        self.clock.now += timedelta(hours=2)
        closed = self.engine.execute(CloseTicket(ticket_id=opened.ticket.pk), stable(5000))

        bill = Bill.objects.get(pk=opened.bill.pk)
        self.assertEqual(closed.bill.pk, bill.pk)
        self.assertEqual(bill.status, BillStatus.CLOSED)
        self.assertEqual(bill.gross_weight, Decimal("15000"))
        self.assertEqual(bill.tare_weight, Decimal("5000"))
        self.assertEqual(bill.net_weight, Decimal("10000"))
        self.assertEqual(bill.second_vehicle_status, VehicleStatus.EMPTY)
        self.assertEqual(bill.closed_at, self.clock.now)
        self.assertFalse(Ticket.objects.exists())

    def test_tare_first_then_gross(self):
        opened = self.engine.execute(
            NewTare(vehicle_no="MH12AB1234", party_name="Om Builders", product_name="Gravel"),
            stable("5000.40"),
        )
        self.assertEqual(opened.ticket.first_weight_type, WeightType.TARE)
        self.assertEqual(opened.ticket.vehicle_status, VehicleStatus.EMPTY)
        self.assertIsNone(opened.ticket.gross_weight)

        self.engine.execute(CloseTicket(ticket_id=opened.ticket.pk), stable("15000.90"))

        bill = Bill.objects.get(pk=opened.bill.pk)
        self.assertEqual(bill.tare_weight, Decimal("5000.40"))
        self.assertEqual(bill.gross_weight, Decimal("15000.90"))
        self.assertEqual(bill.net_weight, Decimal("10000.50"))
        self.assertEqual(bill.second_vehicle_status, VehicleStatus.LOAD)

    def test_close_keeps_first_leg_charges_and_images(self):
        images = CapturedImages(front_image="front-1", rear_image="rear-1")
        opened = self.open_gross(charges=Decimal("50"), images=images)

        self.engine.execute(CloseTicket(ticket_id=opened.ticket.pk), stable(5000))

        bill = Bill.objects.get(pk=opened.bill.pk)
        self.assertEqual(bill.charges, Decimal("50"))
        self.assertEqual(bill.front_image, "front-1")
        self.assertEqual(bill.rear_image, "rear-1")

    def test_close_can_override_charges_and_images(self):
        opened = self.open_gross(charges=Decimal("50"))
        self.engine.execute(
            CloseTicket(
                ticket_id=opened.ticket.pk,
                charges=Decimal("80"),
                images=CapturedImages(front_image="front-2"),
                remarks="second trip",
            ),
            stable(5000),
        )
        bill = Bill.objects.get(pk=opened.bill.pk)
        self.assertEqual(bill.charges, Decimal("80"))
        self.assertEqual(bill.front_image, "front-2")
        self.assertEqual(bill.remarks, "second trip")

    def test_negative_net_is_recorded(self):
        opened = self.open_gross(5000)
        with self.assertLogs("weighments.services.weighment_engine", level="WARNING"):
            self.engine.execute(CloseTicket(ticket_id=opened.ticket.pk), stable(6000))
        self.assertEqual(Bill.objects.get(pk=opened.bill.pk).net_weight, Decimal("-1000"))

    def test_closing_twice(self):
        opened = self.open_gross()
        self.engine.execute(CloseTicket(ticket_id=opened.ticket.pk), stable(5000))
        with self.assertRaises(TicketNotFoundError):
            self.engine.execute(CloseTicket(ticket_id=opened.ticket.pk), stable(5000))
        self.assertEqual(Bill.objects.filter(status=BillStatus.CLOSED).count(), 1)

    def test_closing_unknown_ticket(self):
        with self.assertRaises(TicketNotFoundError):
            self.engine.execute(CloseTicket(ticket_id=424242), stable(5000))

    def test_close_without_bill_creates_closed_bill(self):
        opened = self.open_gross()
        Bill.objects.filter(pk=opened.bill.pk).delete()

        result = self.engine.execute(CloseTicket(ticket_id=opened.ticket.pk), stable(5000))

        self.assertEqual(result.bill.status, BillStatus.CLOSED)
        self.assertEqual(result.bill.bill_no, opened.ticket.ticket_no)
        self.assertEqual(result.bill.net_weight, Decimal("10000"))
        self.assertFalse(Ticket.objects.exists())

    def test_ticket_with_non_open_bill_is_inconsistent(self):
        opened = self.open_gross()
        Bill.objects.filter(pk=opened.bill.pk).update(status=BillStatus.CLOSED)

        with self.assertRaises(InconsistentStateError):
            self.engine.execute(CloseTicket(ticket_id=opened.ticket.pk), stable(5000))
        self.assertTrue(Ticket.objects.filter(pk=opened.ticket.pk).exists())

    def test_serials_follow_each_other(self):
        first = self.open_gross(vehicle_no="GJ01XY9012")
        second = self.open_gross(vehicle_no="MH12AB1234")
        self.assertEqual(first.ticket.ticket_no, "WB-2025-001")
        self.assertEqual(second.ticket.ticket_no, "WB-2025-002")


class OneTimeTest(EngineTestCase):
    def test_one_time_closes_immediately(self):
        result = self.engine.execute(
            NewOneTime(vehicle_no="ka01ab1234", party_name="Walk-in", product_name="Scrap"),
            stable(8000),
        )
        bill = result.bill
        self.assertIsNone(result.ticket)
        self.assertEqual(bill.vehicle_no, "KA01AB1234")
        self.assertEqual(bill.status, BillStatus.CLOSED)
        self.assertEqual(bill.first_weight_type, WeightType.ONE_TIME)
        self.assertEqual(bill.tare_weight, 0)
        self.assertEqual(bill.net_weight, Decimal("8000"))
        self.assertEqual(bill.closed_at, self.clock.now)
        self.assertFalse(Ticket.objects.exists())


class StoredTareTest(EngineTestCase):
    def test_store_then_trip(self):
        op = self.engine.resolve_stored_tare("GJ01XY9012")
        self.assertIsInstance(op, StoreTare)
        stored = self.engine.execute(op, stable(5000))
        self.assertEqual(stored.stored_tare.tare_weight, Decimal("5000"))
        self.assertFalse(Bill.objects.exists())

        self.clock.now += timedelta(days=5)
        op = self.engine.resolve_stored_tare("GJ01XY9012", "Shree Traders", "Sand")
        self.assertIsInstance(op, StoredTareTrip)
        result = self.engine.execute(op, stable(15000))

        bill = result.bill
        self.assertEqual(bill.status, BillStatus.CLOSED)
        self.assertEqual(bill.gross_weight, Decimal("15000"))
        self.assertEqual(bill.tare_weight, Decimal("5000"))
        self.assertEqual(bill.net_weight, Decimal("10000"))
        self.assertEqual(bill.bill_no, "WB-2025-001")
        self.assertFalse(Ticket.objects.exists())

    def test_expired_tare_asks_for_a_new_one(self):
        self.engine.execute(StoreTare(vehicle_no="GJ01XY9012"), stable(5000))
        self.clock.now += timedelta(days=31)

        op = self.engine.resolve_stored_tare("GJ01XY9012", "Shree Traders", "Sand")
        self.assertIsInstance(op, StoreTare)

        self.engine.execute(op, stable(5100))
        tare = StoredTare.objects.get(vehicle_no="GJ01XY9012")
        self.assertEqual(tare.tare_weight, Decimal("5100"))
        self.assertEqual(tare.stored_at, self.clock.now)

    def test_refresh_forces_store(self):
        self.engine.execute(StoreTare(vehicle_no="GJ01XY9012"), stable(5000))
        op = self.engine.resolve_stored_tare("GJ01XY9012", "Shree Traders", "Sand", refresh=True)
        self.assertIsInstance(op, StoreTare)

    def test_trip_needs_party_and_product(self):
        self.engine.execute(StoreTare(vehicle_no="GJ01XY9012"), stable(5000))
        with self.assertRaises(MissingFieldError) as ctx:
            self.engine.resolve_stored_tare("GJ01XY9012", party_name="Shree Traders")
        self.assertEqual(ctx.exception.fields, ["product_name"])

    def test_trip_without_valid_tare(self):
        with self.assertRaises(NoValidTareError):
            self.engine.execute(
                StoredTareTrip(vehicle_no="GJ01XY9012", party_name="Shree Traders", product_name="Sand"),
                stable(15000),
            )
        self.assertFalse(Bill.objects.exists())
        self.assertEqual(self.engine.serials.peek(), "WB-2025-001")

    def test_resolve_needs_vehicle(self):
        with self.assertRaises(MissingFieldError):
            self.engine.resolve_stored_tare("  ")


class ValidationTest(EngineTestCase):
    def assertNothingRecorded(self):
        self.assertFalse(Ticket.objects.exists())
        self.assertFalse(Bill.objects.exists())
        self.assertFalse(StoredTare.objects.exists())
        self.assertEqual(self.engine.serials.peek(), "WB-2025-001")

    def test_unstable_weight_is_rejected(self):
        op = NewGross(vehicle_no="GJ01XY9012", party_name="Shree Traders", product_name="Sand")
        with self.assertRaises(UnstableWeightError):
            self.engine.execute(op, unstable(15000))
        self.assertNothingRecorded()

    def test_unstable_store_tare_is_rejected(self):
        with self.assertRaises(UnstableWeightError):
            self.engine.execute(StoreTare(vehicle_no="GJ01XY9012"), unstable(5000))
        self.assertNothingRecorded()

    def test_missing_fields_are_listed(self):
        op = NewGross(vehicle_no="GJ01XY9012", party_name=" ", product_name="")
        with self.assertRaises(MissingFieldError) as ctx:
            self.engine.execute(op, stable(15000))
        self.assertEqual(ctx.exception.fields, ["party_name", "product_name"])
        self.assertNothingRecorded()

    def test_negative_charges_are_rejected(self):
        op = NewOneTime(vehicle_no="GJ01XY9012", party_name="A", product_name="B", charges=Decimal("-1"))
        with self.assertRaises(WeighmentValidationError):
            self.engine.execute(op, stable(100))
        self.assertNothingRecorded()

    def legacy_ticket(self, ticket_no="WB-2025-001"):
        return Ticket.objects.create(
            ticket_no=ticket_no,
            vehicle_no="OLD0001",
            party_name="Legacy",
            product_name="Legacy",
            vehicle_status=VehicleStatus.LOAD,
            gross_weight=Decimal("1000"),
            first_weight_type=WeightType.GROSS,
        )

    def test_serial_collision_rolls_back(self):
        self.legacy_ticket()
        # a generator that cannot see existing records
        self.engine = WeighmentEngine(
            serials=SerialNumberGenerator(clock=self.clock, in_use=lambda serial_no: False),
            clock=self.clock,
        )
        with self.assertRaises(SerialCollisionError):
            self.open_gross()
        self.assertEqual(Ticket.objects.count(), 1)
        self.assertFalse(Bill.objects.exists())
        self.assertEqual(self.engine.serials.peek(), "WB-2025-001")

    def test_existing_serial_is_skipped(self):
        self.legacy_ticket()
        opened = self.open_gross()
        self.assertEqual(opened.ticket.ticket_no, "WB-2025-002")
        self.assertEqual(opened.bill.bill_no, "WB-2025-002")

    def test_database_failure_commits_nothing(self):
        with mock.patch.object(BillLedger, "add", side_effect=DatabaseError("disk full")):
            with self.assertRaises(PersistenceError) as ctx:
                self.open_gross()
        self.assertIsInstance(ctx.exception.__cause__, DatabaseError)
        self.assertNothingRecorded()


class SerialReuseTest(EngineTestCase):
    def test_manual_reset_mid_year(self):
        first = self.open_gross(vehicle_no="GJ01AA0001")
        self.engine.execute(CloseTicket(ticket_id=first.ticket.pk), stable(5000))
        self.open_gross(vehicle_no="GJ01AA0002")

        self.engine.serials.reset()

        third = self.open_gross(vehicle_no="GJ01AA0003")
        self.assertEqual(third.bill.bill_no, "WB-2025-003")
        fourth = self.engine.execute(
            NewOneTime(vehicle_no="GJ01AA0004", party_name="Shree Traders", product_name="Sand"),
            stable(4000),
        )
        self.assertEqual(fourth.bill.bill_no, "WB-2025-004")
        self.assertEqual(Bill.objects.count(), 4)

    def test_corrupt_counter_after_bills(self):
        self.open_gross(vehicle_no="GJ01AA0001")
        AppSetting.objects.filter(key=AppSetting.SERIAL_NUMBER_CONFIG).update(value="{not json")

        with self.assertLogs("core.serial_numbers", level="WARNING"):
            opened = self.open_gross(vehicle_no="GJ01AA0002")
        self.assertEqual(opened.ticket.ticket_no, "WB-2025-002")
        self.assertEqual(self.open_gross(vehicle_no="GJ01AA0003").ticket.ticket_no, "WB-2025-003")


class CameraTest(TestCase):
    def setUp(self):
        self.clock = FakeClock(utc(2025, 6, 1, 10, 0))

    def test_camera_images_are_attached(self):
        engine = WeighmentEngine(clock=self.clock, camera=lambda: CapturedImages("cam-front", "cam-rear"))
        result = engine.execute(
            NewOneTime(vehicle_no="GJ01XY9012", party_name="A", product_name="B"), stable(100)
        )
        self.assertEqual(result.bill.front_image, "cam-front")
        self.assertEqual(result.bill.rear_image, "cam-rear")

    def test_camera_failure_does_not_block(self):
        def broken_camera():
            raise OSError("camera offline")

        engine = WeighmentEngine(clock=self.clock, camera=broken_camera)
        with self.assertLogs("weighments.services.weighment_engine", level="WARNING"):
            result = engine.execute(
                NewOneTime(vehicle_no="GJ01XY9012", party_name="A", product_name="B"), stable(100)
            )
        self.assertEqual(result.bill.status, BillStatus.CLOSED)
        self.assertIsNone(result.bill.front_image)


class MarkPrintedTest(EngineTestCase):
    def test_print_is_idempotent(self):
        bill = self.engine.execute(
            NewOneTime(vehicle_no="GJ01XY9012", party_name="A", product_name="B"), stable(100)
        ).bill
        first_print = self.clock.now + timedelta(minutes=5)
        self.clock.now = first_print
        printed = self.engine.mark_printed(bill.pk)
        self.assertEqual(printed.status, BillStatus.PRINTED)
        self.assertEqual(printed.printed_at, first_print)

        self.clock.now += timedelta(hours=1)
        again = self.engine.mark_printed(bill.pk)
        self.assertEqual(again.status, BillStatus.PRINTED)
        self.assertEqual(again.printed_at, first_print)

    def test_open_bill_cannot_be_printed(self):
        opened = self.open_gross()
        with self.assertRaises(BillStatusError):
            self.engine.mark_printed(opened.bill.pk)
        self.assertEqual(Bill.objects.get(pk=opened.bill.pk).status, BillStatus.OPEN)

    def test_unknown_bill(self):
        with self.assertRaises(BillNotFoundError):
            self.engine.mark_printed(999)


class WalkInMastersTest(EngineTestCase):
    def test_new_names_are_remembered(self):
        self.open_gross(vehicle_no="gj05zz0001", party_name="New Party")
        self.assertEqual(Vehicle.objects.get(vehicle_no="GJ05ZZ0001").source, "walk-in")
        self.assertTrue(Party.objects.filter(party_name="New Party").exists())

    def test_existing_master_is_left_alone(self):
        Party.objects.create(party_name="Shree Traders", source="master")
        self.open_gross()
        self.assertEqual(Party.objects.get(party_name="Shree Traders").source, "master")
