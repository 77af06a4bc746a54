"""Exceptions raised by the repositories and services.

Routes translate them into ``HTTPException`` responses; the computation
modules under ``algorithms`` never raise any of them.
"""


class TrainerError(Exception):
    """Base class for application errors."""


class InvalidInputError(TrainerError, ValueError):
    """A value is missing or outside its documented range."""


class NotFoundError(TrainerError, LookupError):
    """An id did not resolve to a stored record."""

    def __init__(self, entity: str, entity_id: object | None = None) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found")


class ConflictError(TrainerError):
    """The requested change contradicts the stored state."""
