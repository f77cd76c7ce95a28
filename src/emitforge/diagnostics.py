"""
emitforge.diagnostics - Diagnostic Types
========================================

Diagnostics are the only way failures leave the emission pipeline. A broken
override template never raises; it produces a :class:`Diagnostic` that points
at the template document so the person editing it lands in the right place.

The identifiers are a closed set of string constants (:class:`DiagnosticId`)
so hosts can filter or map them without parsing messages.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Severity(str, Enum):
    """
    Severity levels for diagnostics.

    Only ``error`` diagnostics make an emission fail. ``info`` and
    ``warning`` are advisory and come from the scaffold helpers.
    """

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class DiagnosticId(str, Enum):
    """
    Stable identifiers for every diagnostic emitforge produces.

    Attributes
    ----------
    TEMPLATE_RENDER_ERROR : str
        A user template could not be rendered against its model.

    TEMPLATE_OUTPUT_INVALID : str
        A user template rendered, but the result is not valid Python.

    TEMPLATE_SYNTAX_ERROR : str
        Jinja2 could not parse the template document.

    TEMPLATE_UNDEFINED : str
        The template referenced a model path that does not exist.

    TEMPLATE_RUNTIME_ERROR : str
        Any other failure raised while the template was executing.

    DEFAULT_OUTPUT_INVALID : str
        A built-in emitter produced code the frontend rejected.

    SCAFFOLD_AVAILABLE : str
        A customizable template exists but no user override was written.

    SCAFFOLD_STALE : str
        A scaffolded user template was derived from an older default.
    """

    TEMPLATE_RENDER_ERROR = "template-render-error"
    TEMPLATE_OUTPUT_INVALID = "template-output-invalid"
    TEMPLATE_SYNTAX_ERROR = "template-syntax-error"
    TEMPLATE_UNDEFINED = "template-undefined"
    TEMPLATE_RUNTIME_ERROR = "template-runtime-error"
    DEFAULT_OUTPUT_INVALID = "default-output-invalid"
    SCAFFOLD_AVAILABLE = "scaffold-available"
    SCAFFOLD_STALE = "scaffold-stale"


@dataclass(frozen=True)
class Location:
    """
    A position inside a document, 1-based.

    For template diagnostics ``path`` is the virtual template document
    (e.g. ``Templates/Ids/StrongId.py.j2``), never a generated file.
    """

    path: str
    line: int = 1
    column: int = 1

    def __str__(self) -> str:
        return f"{self.path}:{self.line}:{self.column}"


@dataclass(frozen=True)
class Diagnostic:
    """
    A single problem report.

    Attributes
    ----------
    id : DiagnosticId
        Stable identifier of the kind of problem.

    message : str
        Human-readable description. Template diagnostics always name the
        template.

    severity : Severity
        How serious the problem is. Defaults to ``error``.

    location : Location | None
        Where the problem is, when it can be attributed to a document.
    """

    id: DiagnosticId
    message: str
    severity: Severity = Severity.ERROR
    location: Location | None = None

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR

    def __str__(self) -> str:
        prefix = f"{self.location}: " if self.location else ""
        return f"{prefix}{self.id.value}: {self.message}"
