class LedgerError(Exception):
    """Base class for every failure a ledger operation reports to its caller."""


class ValidationError(LedgerError):
    """Malformed or missing input, rejected before any lock is taken."""


class InvalidQuantity(ValidationError):
    def __init__(self, item_id, quantity):
        self.item_id = item_id
        self.quantity = quantity
        super().__init__(f"Item {item_id}: quantity must be a positive integer, got {quantity!r}")


class ConflictError(LedgerError):
    """The stored state does not allow the operation. Nothing was written."""


class ItemNotFound(ConflictError):
    def __init__(self, item_id):
        self.item_id = item_id
        super().__init__(f"Item {item_id} not found")


class UserNotFound(ConflictError):
    def __init__(self, user_id):
        self.user_id = user_id
        super().__init__(f"User {user_id} not found")


class OutOfStock(ConflictError):
    def __init__(self, item_id):
        self.item_id = item_id
        self.available = 0
        self.requested = 1
        super().__init__(f"Item {item_id} is out of stock")


class InsufficientStock(ConflictError):
    def __init__(self, item_id, available, requested):
        self.item_id = item_id
        self.available = available
        self.requested = requested
        super().__init__(
            f"Item {item_id}: requested {requested}, available {available}"
        )


class RecordNotFound(ConflictError):
    def __init__(self, record_id):
        self.record_id = record_id
        super().__init__(f"No borrowed record with id {record_id}")


class InvalidRecordIds(ConflictError):
    def __init__(self, missing):
        self.missing = sorted(missing)
        super().__init__(
            "Invalid, missing or already returned record ids: "
            + ", ".join(str(x) for x in self.missing)
        )


class StoreError(LedgerError):
    """The store failed mid unit of work. Every write of that unit was rolled back."""
