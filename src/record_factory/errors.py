"""Exception hierarchy for record-factory.

Analysis errors are raised while a record schema is analyzed (once, ahead of
time) and block the builder from being used at all. Build errors are raised
by a synthesized builder's ``create()``. Persistence errors are never wrapped:
whatever the record's ``create()`` raises reaches the caller unchanged.
"""


class RecordFactoryError(Exception):
    """Base class for every error raised by record-factory."""

    pass


# ============================================================================
# Analysis Errors
# ============================================================================


class AnalysisError(RecordFactoryError):
    """Raised when a record schema cannot be analyzed."""

    pass


class UnsupportedShapeError(AnalysisError):
    """Raised when the record is not a flat named-field structure."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(
            f"Factory can only be derived from named-field records, {kind} given"
        )


class UnknownAttributeError(AnalysisError):
    """Raised for an annotation key outside the recognized set."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Unknown attribute: {key}")


class UnparsableLiteralError(AnalysisError):
    """Raised when an annotation value is not a literal of the expected kind."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Expected a literal str, got {value!r}")


class UnparsableTypeError(AnalysisError):
    """Raised when a string literal does not parse into a valid identifier."""

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"Could not parse literal to an identifier: {value!r}")


class UnparsableAttributeError(AnalysisError):
    """Raised when a record-level annotation cannot be parsed."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Could not parse attribute: {detail}")


class MissingReferencedKeyError(AnalysisError):
    """Raised when a relation has no resolvable referenced key."""

    def __init__(self, field_name: str) -> None:
        self.field_name = field_name
        super().__init__(
            f"The relation {field_name} is missing a referenced key. "
            "By default, the suffix of the field is used (e.g. the referenced "
            "key of the relation `hammer_id` is `id`). Please use the "
            "`referenced_key` attribute or give this field a suffix."
        )


class ReservedFieldNameError(AnalysisError):
    """Raised when a field name collides with a builder method."""

    def __init__(self, field_name: str) -> None:
        self.field_name = field_name
        super().__init__(
            f"Field '{field_name}' collides with a builder method and cannot "
            "be given a setter"
        )


class DuplicateRelationError(AnalysisError):
    """Raised when two relations derive the same customization hook."""

    def __init__(self, hook_name: str, field_names: list[str]) -> None:
        self.hook_name = hook_name
        self.field_names = field_names
        super().__init__(
            f"Relations {', '.join(field_names)} both derive {hook_name}(). "
            "Rename one of the fields so that each relation has its own hook"
        )


# ============================================================================
# Build Errors
# ============================================================================


class BuildError(RecordFactoryError):
    """Raised when a synthesized builder cannot assemble its record."""

    pass


class UnknownRecordTypeError(BuildError):
    """Raised when a relation targets a record type with no registered builder."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"No builder registered for record type '{name}'. "
            "Decorate it with @factory before creating related records."
        )


class MissingDefaultError(BuildError):
    """Raised when an unset field has no declared or derivable default."""

    def __init__(self, field_name: str, field_type: object) -> None:
        self.field_name = field_name
        self.field_type = field_type
        super().__init__(
            f"Field '{field_name}' was not set and {field_type!r} has no default value"
        )


# ============================================================================
# Configuration Errors
# ============================================================================


class ProfileNotFoundError(RecordFactoryError):
    """Raised when no database profile is configured."""

    pass
