"""Error model shared by schema checking, data validation and merging.

Every pass builds one ErrorCollection, appends path-qualified errors while it
walks, and freezes the collection before handing it back to the caller.
"""

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from enum import Enum

PathSegment = str | int
Path = tuple[PathSegment, ...]

ROOT_LABEL = "root"


class ErrorKind(str, Enum):
    """Kinds of errors reported by treeschema."""
    # Schema definition
    UNKNOWN_PROPERTY = "unknown_property"
    INVALID_SCHEMA = "invalid_schema"
    INVALID_PATTERN = "invalid_pattern"
    TRANSFORMER_CONFLICT = "transformer_conflict"
    PROPERTY_CONFLICT = "property_conflict"
    MERGE_INVALID = "merge_invalid"
    # Data validation
    MISSING_KEY = "missing_key"
    UNKNOWN_KEY = "unknown_key"
    PATTERN_UNMATCHED = "pattern_unmatched"
    TYPE_MISMATCH = "type_mismatch"
    VALUE_MISMATCH = "value_mismatch"
    VALIDATOR_FAILED = "validator_failed"
    TRANSFORMER_FAILED = "transformer_failed"
    INVALID_VALIDATOR = "invalid_validator"


def format_path(path: Sequence[PathSegment]) -> str:
    """Render a path as ``a.b[2].c``.

    Examples:
        >>> format_path(())
        'root'
        >>> format_path(("servers", 0, "host"))
        'servers[0].host'
    """
    parts: list[str] = []
    for segment in path:
        if isinstance(segment, int):
            parts.append(f"[{segment}]")
        elif parts:
            parts.append(f".{segment}")
        else:
            parts.append(str(segment))
    return "".join(parts) or ROOT_LABEL


@dataclass(frozen=True)
class ValidationError:
    """A single error at a position in the data or schema tree."""
    path: Path
    message: str
    kind: ErrorKind = ErrorKind.VALIDATOR_FAILED

    @property
    def location(self) -> str:
        return format_path(self.path)

    def __str__(self) -> str:
        return f"{self.location}: {self.message}"


class ErrorCollection:
    """Ordered, append-only aggregate of validation errors.

    Components append while they work and call ``freeze()`` before returning;
    callers only read.
    """

    def __init__(self, errors: Sequence[ValidationError] | None = None):
        self._errors: list[ValidationError] = list(errors or [])
        self._frozen = False

    def add(self, path: Sequence[PathSegment], message: str, kind: ErrorKind) -> ValidationError:
        """Append an error and return it."""
        error = ValidationError(tuple(path), message, kind)
        self.append(error)
        return error

    def append(self, error: ValidationError) -> None:
        if self._frozen:
            raise RuntimeError("ErrorCollection is read-only once returned")
        self._errors.append(error)

    def extend(self, errors: "ErrorCollection | Sequence[ValidationError]") -> None:
        for error in errors:
            self.append(error)

    def freeze(self) -> "ErrorCollection":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def count(self) -> int:
        """Total number of errors."""
        return len(self._errors)

    def __len__(self) -> int:
        return len(self._errors)

    def __bool__(self) -> bool:
        return bool(self._errors)

    def __iter__(self) -> Iterator[ValidationError]:
        return iter(tuple(self._errors))

    def __getitem__(self, index: int) -> ValidationError:
        return self._errors[index]

    def items(self) -> list[tuple[str, str]]:
        """Ordered ``(rendered path, message)`` pairs."""
        return [(error.location, error.message) for error in self._errors]

    def by_kind(self, kind: ErrorKind) -> list[ValidationError]:
        return [error for error in self._errors if error.kind == kind]

    def counts_by_kind(self) -> dict[str, int]:
        """Get error counts by kind, only for kinds that occurred."""
        counts: dict[str, int] = {}
        for error in self._errors:
            counts[error.kind.value] = counts.get(error.kind.value, 0) + 1
        return counts

    def render(self) -> str:
        """One ``path: message`` line per error."""
        return "\n".join(str(error) for error in self._errors)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        return {
            "valid": not self._errors,
            "total_errors": len(self._errors),
            "errors_by_kind": self.counts_by_kind(),
            "errors": [
                {
                    "path": error.location,
                    "kind": error.kind.value,
                    "message": error.message,
                }
                for error in self._errors
            ],
        }

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"ErrorCollection(count={len(self._errors)})"


class SchemaError(Exception):
    """Raised when a schema fails self-validation or merging in strict mode."""

    def __init__(self, message: str, errors: ErrorCollection | None = None):
        self.errors = errors if errors is not None else ErrorCollection().freeze()
        super().__init__(message)

    def __str__(self) -> str:
        message = super().__str__()
        if self.errors:
            return f"{message}\n{self.errors.render()}"
        return message
