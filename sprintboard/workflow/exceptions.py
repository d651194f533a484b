"""Board exception types."""


class BoardValidationError(ValueError):
    """Raised when a save is rejected before any state is touched."""


class InvalidTransitionError(Exception):
    """Raised when an invalid state transition is attempted."""

    def __init__(self, kind: str, entity_id: str, from_status, to_status):
        self.kind = kind
        self.entity_id = entity_id
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Invalid transition for {kind} {entity_id}: "
            f"{from_status.value} → {to_status.value}"
        )
