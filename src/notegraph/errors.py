"""Errors raised by the matrix, vector, reduction and clustering operations.

Every failure carries the structured context that caused it, so callers can
branch on the exception class and read the fields instead of parsing text.
"""

from __future__ import annotations


class NoteGraphError(ValueError):
    """Base class for all notegraph failures."""


class InvalidLinkIndex(NoteGraphError):
    """A link references a note index outside ``0..max_index``."""

    def __init__(self, from_id: int, to_id: int, max_index: int):
        self.from_id = from_id
        self.to_id = to_id
        self.max_index = max_index
        super().__init__(
            f"Link ({from_id} -> {to_id}) references a note outside 0..{max_index}"
        )


class InvalidVectorDimensions(NoteGraphError):
    """A vector's length differs from the dimensionality of its batch."""

    def __init__(self, expected: int, got: int, vector_index: int):
        self.expected = expected
        self.got = got
        self.vector_index = vector_index
        super().__init__(
            f"Vector {vector_index} has {got} dimensions, expected {expected}"
        )


class InsufficientData(NoteGraphError):
    """Too few points (or clusters) for the operation to be well-defined."""

    def __init__(self, required: int, provided: int):
        self.required = required
        self.provided = provided
        super().__init__(f"Insufficient data: required {required}, provided {provided}")


class ZeroNormVector(NoteGraphError):
    """Normalization is undefined for a (numerically) zero vector."""

    def __init__(self, vector_index: int | None = None):
        self.vector_index = vector_index
        where = f" at index {vector_index}" if vector_index is not None else ""
        super().__init__(f"Cannot normalize zero-norm vector{where}")


class DimensionalityReductionError(NoteGraphError):
    """A reduction strategy rejected its parameters or failed numerically."""

    def __init__(self, method: str, reason: str):
        self.method = method
        self.reason = reason
        super().__init__(f"{method} reduction failed: {reason}")
