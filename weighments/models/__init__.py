from .ticket import Ticket, VehicleStatus
from .bill import Bill, BillStatus, WeightType
from .stored_tare import StoredTare

__all__ = ["Ticket", "VehicleStatus", "Bill", "BillStatus", "WeightType", "StoredTare"]
