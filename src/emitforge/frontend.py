"""
emitforge.frontend - Target-Language Validation
===============================================

The emission pipeline does not parse Python itself. It hands rendered text to
a *frontend* and only looks at the verdict: valid or not, plus a list of
``(code, message)`` errors it folds into one diagnostic.

:class:`PythonFrontend` uses the interpreter's own compiler. ``compile()``
goes further than ``ast.parse``: besides syntax it rejects compile-time
semantic errors such as ``return`` outside a function.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol


@dataclass(frozen=True)
class FrontendError:
    """One error reported by a frontend."""

    code: str
    message: str
    line: int | None = None
    column: int | None = None

    def __str__(self) -> str:
        if self.line is None:
            return f"{self.code}: {self.message}"
        return f"{self.code} at {self.line}:{self.column or 0}: {self.message}"


@dataclass(frozen=True)
class FrontendResult:
    valid: bool
    errors: tuple[FrontendError, ...] = field(default_factory=tuple)

    @property
    def summary(self) -> str:
        return "; ".join(str(e) for e in self.errors)


class Frontend(Protocol):
    """Anything that can tell whether a piece of target code is valid."""

    def validate(self, text: str) -> FrontendResult: ...


class PythonFrontend:
    """
    Validate text as a Python module.

    Parameters
    ----------
    filename : str
        Name reported by the compiler in its messages. The file is never
        read or written.
    """

    def __init__(self, filename: str = "<emitforge>") -> None:
        self.filename = filename

    def validate(self, text: str) -> FrontendResult:
        try:
            compile(text, self.filename, "exec", dont_inherit=True)
        except SyntaxError as e:
            # IndentationError and TabError are SyntaxError subclasses
            return FrontendResult(
                valid=False,
                errors=(FrontendError(type(e).__name__, e.msg, e.lineno, e.offset),),
            )
        except ValueError as e:
            return FrontendResult(valid=False, errors=(FrontendError("ValueError", str(e)),))
        except (MemoryError, RecursionError) as e:
            # Raised by the parser on deeply nested expressions
            return FrontendResult(
                valid=False,
                errors=(FrontendError(type(e).__name__, "source too deeply nested"),),
            )

        return FrontendResult(valid=True)
