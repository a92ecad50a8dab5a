"""Domain value objects: resolution results, contexts, diagnostics and fix outcomes."""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from kt_array_literal.domain.protocols import RewriteActionProtocol
    from kt_array_literal.domain.syntax import NodeId


class CallContext(Enum):
    """Syntactic position of a call expression, as far as array literals are concerned."""

    ANNOTATION_ARGUMENT = "annotation_argument"
    ANNOTATION_CONSTRUCTOR_DEFAULT_PARAMETER = "annotation_constructor_default_parameter"
    OTHER = "other"


class Severity(Enum):
    """Highlight types a diagnostic can be registered with."""

    GENERIC_ERROR_OR_WARNING = "generic_error_or_warning"
    WEAK_WARNING = "weak_warning"
    INFORMATION = "information"


class LanguageFeature(Enum):
    """Language features the inspection depends on, with the version that introduced them."""

    ARRAY_LITERALS_IN_ANNOTATIONS = ("ArrayLiteralsInAnnotations", (1, 2))

    def __init__(self, feature_name: str, since_version: tuple[int, int]) -> None:
        self.feature_name = feature_name
        self.since_version = since_version

    @classmethod
    def from_name(cls, name: str) -> "LanguageFeature | None":
        for feature in cls:
            if feature.feature_name == name:
                return feature
        return None


@dataclass(frozen=True)
class ResolvedTarget:
    """What a call resolved to: the declaring scope (package) and the declared name."""

    declaring_scope: str
    name: str


@dataclass(frozen=True)
class Diagnostic:
    """A reported finding bound to a deferred rewrite."""

    code: str
    message: str
    anchor: "NodeId"
    location: str
    severity: Severity
    context: CallContext
    fix: "RewriteActionProtocol"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for reporters."""
        return {
            "code": self.code,
            "message": self.message,
            "location": self.location,
            "severity": self.severity.value,
            "context": self.context.value,
            "fix": self.fix.family_name,
        }


@dataclass(frozen=True)
class InspectionReport:
    """Diagnostics found in one file."""

    path: str
    diagnostics: list[Diagnostic] = field(default_factory=list)

    def has_problems(self) -> bool:
        return bool(self.diagnostics)


@dataclass(frozen=True)
class FixResult:
    """Outcome of applying every fix of one file."""

    path: str
    applied: int
    failed: int
    text: str
    changed: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "applied": self.applied,
            "failed": self.failed,
            "changed": self.changed,
        }
