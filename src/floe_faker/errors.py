"""Custom exceptions for floe-faker.

This module defines the exception hierarchy:
- FloeFakerError (base)
- ModelGraphError
- UnknownModelError
- UnsupportedRelationshipError
- InstantiationError
- MissingGeneratorError
- FieldAssignmentError
- PersistenceEmptyResultError

Every error aborts the current build. Nothing is retried.
"""

from __future__ import annotations

__all__ = [
    "FloeFakerError",
    "ModelGraphError",
    "UnknownModelError",
    "UnsupportedRelationshipError",
    "InstantiationError",
    "MissingGeneratorError",
    "FieldAssignmentError",
    "PersistenceEmptyResultError",
]


def _type_name(tp: object) -> str:
    """Return a readable name for a class, NewType or typing construct."""
    name = getattr(tp, "__qualname__", None) or getattr(tp, "__name__", None)
    return name if isinstance(name, str) else repr(tp)


class FloeFakerError(Exception):
    """Base exception for all floe-faker operations.

    Attributes:
        message: Human-readable error description.
        details: Optional additional context about the error.

    Example:
        >>> try:
        ...     faker.build(Room, store)
        ... except FloeFakerError as e:
        ...     print(f"Faking failed: {e}")
    """

    def __init__(self, message: str, *, details: dict[str, str] | None = None) -> None:
        """Initialize FloeFakerError.

        Args:
            message: Human-readable error description.
            details: Optional additional context about the error.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation with details if present."""
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


class ModelGraphError(FloeFakerError):
    """The model graph is malformed.

    Raised when:
    - The same model class is declared twice
    - A relationship references a model class that was never declared
    """

    def __init__(self, message: str, *, model: type | None = None) -> None:
        """Initialize ModelGraphError.

        Args:
            message: Human-readable error description.
            model: The offending model class.
        """
        details = {"model": _type_name(model)} if model is not None else None
        super().__init__(message, details=details)
        self.model = model


class UnknownModelError(FloeFakerError, LookupError):
    """The requested class is not declared in the model graph.

    Always raised before an instance is created or a store is touched.

    Example:
        >>> try:
        ...     faker.i_need(ClassOutsideOfTheModelGraph)
        ... except UnknownModelError as e:
        ...     print(e.model)
    """

    def __init__(self, model: type, message: str | None = None) -> None:
        """Initialize UnknownModelError.

        Args:
            model: The class that was requested.
            message: Optional custom error message.
        """
        msg = message or (
            f"Cannot create an object of {_type_name(model)} from the provided model graph"
        )
        super().__init__(msg, details={"model": _type_name(model)})
        self.model = model


class UnsupportedRelationshipError(FloeFakerError, NotImplementedError):
    """The model graph declares a relationship kind that cannot be faked.

    Only one-to-many relationships are supported. One-to-one, recursive,
    many-to-many and polymorphic relationships raise this error while the
    dependency index is built, so the faker cannot be constructed for such
    a graph.
    """

    def __init__(self, kind: str, *, model: type | None = None) -> None:
        """Initialize UnsupportedRelationshipError.

        Args:
            kind: The relationship kind (e.g. "many_to_many").
            model: The model class on the owning side of the relationship.
        """
        details = {"kind": kind}
        if model is not None:
            details["model"] = _type_name(model)
        super().__init__(f"Relationship kind not implemented: {kind}", details=details)
        self.kind = kind
        self.model = model


class InstantiationError(FloeFakerError):
    """A blank instance of the model class could not be created."""

    def __init__(self, model: type, *, cause: str | None = None) -> None:
        """Initialize InstantiationError.

        Args:
            model: The class that failed to instantiate.
            cause: The underlying cause of the failure.
        """
        details = {"model": _type_name(model)}
        if cause:
            details["cause"] = cause
        super().__init__(f"Cannot create the {_type_name(model)}", details=details)
        self.model = model
        self.cause = cause


class MissingGeneratorError(FloeFakerError):
    """No generator is registered for a column's declared type.

    The offending type is always part of the message.

    Example:
        >>> try:
        ...     faker.build(Sensor, store)
        ... except MissingGeneratorError as e:
        ...     print(e.field_type)
    """

    def __init__(
        self,
        field_type: object,
        *,
        model: type | None = None,
        field: str | None = None,
    ) -> None:
        """Initialize MissingGeneratorError.

        Args:
            field_type: The declared type that has no generator.
            model: The model class owning the field.
            field: The field name.
        """
        type_name = _type_name(field_type)
        details = {"type": type_name}
        if model is not None:
            details["model"] = _type_name(model)
        if field:
            details["field"] = field
        super().__init__(f"No generator for type {type_name}", details=details)
        self.field_type = field_type
        self.model = model
        self.field = field


class FieldAssignmentError(FloeFakerError):
    """A generated value could not be written into a field."""

    def __init__(self, model: type, field: str, *, cause: str | None = None) -> None:
        """Initialize FieldAssignmentError.

        Args:
            model: The model class owning the field.
            field: The field that rejected the value.
            cause: The underlying cause of the failure.
        """
        details = {"model": _type_name(model), "field": field}
        if cause:
            details["cause"] = cause
        super().__init__(
            f"Cannot initialize fields in {_type_name(model)}",
            details=details,
        )
        self.model = model
        self.field = field
        self.cause = cause


class PersistenceEmptyResultError(FloeFakerError):
    """The store accepted the insert but returned no row on read-back."""

    def __init__(
        self,
        model: type,
        *,
        table: str | None = None,
        key: object | None = None,
    ) -> None:
        """Initialize PersistenceEmptyResultError.

        Args:
            model: The model class being built.
            table: The table the row was inserted into.
            key: The key returned by the insert.
        """
        details = {"model": _type_name(model)}
        if table:
            details["table"] = table
        if key is not None:
            details["key"] = str(key)
        super().__init__("Store returned no data for the inserted record", details=details)
        self.model = model
        self.table = table
        self.key = key
