# weighments/services/operations.py
"""
Weighment operations, one dataclass per (operation type x sub-mode).

Each carries only the fields its flow reads, so the engine never has to
guess which of a dozen optional inputs apply.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional, Union


class OperationType(str, Enum):
    NEW = "new"
    UPDATE = "update"
    STORED_TARE = "stored-tare"


def normalize_vehicle_no(vehicle_no):
    return (vehicle_no or "").strip().upper()


def to_weight(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() first so 0.1 stays 0.1 instead of its binary expansion
    return Decimal(str(value))


@dataclass(frozen=True)
class WeightReading:
    """One sample from the weight indicator."""
    live_weight: Decimal
    is_stable: bool

    def __post_init__(self):
        object.__setattr__(self, "live_weight", to_weight(self.live_weight))


@dataclass(frozen=True)
class CapturedImages:
    front_image: Optional[str] = None
    rear_image: Optional[str] = None

    def __bool__(self):
        return bool(self.front_image or self.rear_image)


class Operation:
    operation_type: OperationType
    sub_mode: str
    required_fields = ()

    def missing_fields(self):
        return [name for name in self.required_fields if not str(getattr(self, name) or "").strip()]


@dataclass(frozen=True)
class NewGross(Operation):
    """Two-trip leg 1, loaded vehicle weighed first."""
    vehicle_no: str
    party_name: str
    product_name: str
    charges: Decimal = Decimal("0")
    images: Optional[CapturedImages] = None
    remarks: str = ""

    operation_type = OperationType.NEW
    sub_mode = "gross"
    required_fields = ("vehicle_no", "party_name", "product_name")


@dataclass(frozen=True)
class NewTare(Operation):
    """Two-trip leg 1, empty vehicle weighed first."""
    vehicle_no: str
    party_name: str
    product_name: str
    charges: Decimal = Decimal("0")
    images: Optional[CapturedImages] = None
    remarks: str = ""

    operation_type = OperationType.NEW
    sub_mode = "tare"
    required_fields = ("vehicle_no", "party_name", "product_name")


@dataclass(frozen=True)
class NewOneTime(Operation):
    """Single weighing for a walk-in; tare is taken as 0."""
    vehicle_no: str
    party_name: str
    product_name: str
    charges: Decimal = Decimal("0")
    images: Optional[CapturedImages] = None
    remarks: str = ""

    operation_type = OperationType.NEW
    sub_mode = "one-time"
    required_fields = ("vehicle_no", "party_name", "product_name")


@dataclass(frozen=True)
class CloseTicket(Operation):
    """Two-trip leg 2. ``None`` charges/images keep what the ticket captured."""
    ticket_id: int
    charges: Optional[Decimal] = None
    images: Optional[CapturedImages] = None
    remarks: Optional[str] = None

    operation_type = OperationType.UPDATE
    sub_mode = "close"
    required_fields = ("ticket_id",)


@dataclass(frozen=True)
class StoreTare(Operation):
    """Capture (or refresh) the stored tare for a vehicle."""
    vehicle_no: str

    operation_type = OperationType.STORED_TARE
    sub_mode = "store"
    required_fields = ("vehicle_no",)


@dataclass(frozen=True)
class StoredTareTrip(Operation):
    """Gross weighing billed against the vehicle's valid stored tare."""
    vehicle_no: str
    party_name: str
    product_name: str
    charges: Decimal = Decimal("0")
    images: Optional[CapturedImages] = None
    remarks: str = ""

    operation_type = OperationType.STORED_TARE
    sub_mode = "trip"
    required_fields = ("vehicle_no", "party_name", "product_name")


Weighment = Union[NewGross, NewTare, NewOneTime, CloseTicket, StoreTare, StoredTareTrip]
