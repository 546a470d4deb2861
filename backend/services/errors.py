"""
Domain errors raised by the procurement engines.

Every engine operation either completes or raises one of these before any
state is changed. The HTTP layer maps them to status codes in main.py.
"""
from backend.utils.helpers import format_quantity


class ProcurementError(Exception):
    """Base class for all engine errors"""
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ProcurementError):
    """Missing or invalid input (empty line items, bad quantity, no reason...)"""
    status_code = 400


class NotFoundError(ProcurementError):
    status_code = 404

    def __init__(self, resource: str, identifier):
        super().__init__(f"{resource} {identifier} not found")
        self.resource = resource
        self.identifier = identifier


class PermissionDenied(ProcurementError):
    """The acting role (or raiser identity) may not perform the operation"""
    status_code = 403


class InsufficientStock(ProcurementError):
    status_code = 409

    def __init__(self, material_id: int, requested, available):
        super().__init__(
            f"Insufficient stock for material {material_id}: "
            f"requested {format_quantity(requested)}, available {format_quantity(available)}"
        )
        self.material_id = material_id
        self.requested = requested
        self.available = available


class InvalidStateTransition(ProcurementError):
    status_code = 409

    def __init__(self, entity: str, current, action: str):
        current_value = getattr(current, "value", current)
        super().__init__(f"Cannot {action} {entity}: current status is '{current_value}'")
        self.entity = entity
        self.current = current
        self.action = action


class ReferentialIntegrityError(ProcurementError):
    """A master record is still referenced and cannot be deleted"""
    status_code = 409


class PersistenceFailure(ProcurementError):
    """The backing store failed; the whole operation was rolled back"""
    status_code = 503
