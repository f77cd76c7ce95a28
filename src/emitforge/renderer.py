"""
emitforge.renderer - Jinja2 Rendering of Override Templates
===========================================================

Renders a user-authored template document against a model. Rendering never
raises for problems in the template itself; it returns a
:class:`RenderFailure` carrying diagnostics located in the *template*
document, so a host can report them next to the file the user edits.

Environment
-----------
Templates come from the user's project, so they run in Jinja2's
``SandboxedEnvironment`` with ``StrictUndefined``: a typo in a model path is
an error, not an empty string. Autoescaping is off since the output is
Python source, and whitespace handling matches the rest of emitforge
(``trim_blocks``, ``lstrip_blocks``, ``keep_trailing_newline``).

Model Context
-------------
The model's top-level fields become template variables, so a template says
``{{ type_name }}`` rather than ``{{ model.type_name }}``. Nested values keep
their attribute access: ``{{ backing_type.code_name }}``. Pydantic models,
dataclasses, mappings and plain objects are all accepted.
"""

from __future__ import annotations

import dataclasses
import traceback
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from jinja2 import FunctionLoader, StrictUndefined, TemplateSyntaxError, UndefinedError
from jinja2.sandbox import SandboxedEnvironment
from pydantic import BaseModel

from emitforge.diagnostics import Diagnostic, DiagnosticId, Location


# =============================================================================
# Render Results
# =============================================================================


@dataclass(frozen=True)
class RenderSuccess:
    """The template rendered; ``text`` is its output."""

    text: str


@dataclass(frozen=True)
class RenderFailure:
    """The template could not be rendered; one diagnostic per error."""

    diagnostics: tuple[Diagnostic, ...]

    @property
    def message(self) -> str:
        return "; ".join(d.message for d in self.diagnostics)


RenderResult = RenderSuccess | RenderFailure


# =============================================================================
# Model Context
# =============================================================================


def model_context(model: Any) -> dict[str, Any]:
    """
    Expose a model's top-level fields as template variables.

    Parameters
    ----------
    model : Any
        A pydantic model, dataclass instance, mapping, plain object, or
        ``None`` (no variables).

    Returns
    -------
    dict[str, Any]
        Variable name to value. Nested values are passed through as-is so
        dotted access keeps working inside the template.
    """
    if model is None:
        return {}
    if isinstance(model, Mapping):
        return dict(model)
    if isinstance(model, BaseModel):
        return {name: getattr(model, name) for name in type(model).model_fields}
    if dataclasses.is_dataclass(model) and not isinstance(model, type):
        return {f.name: getattr(model, f.name) for f in dataclasses.fields(model)}

    context: dict[str, Any] = {}
    for name in dir(model):
        if name.startswith("_"):
            continue
        value = getattr(model, name)
        if not callable(value):
            context[name] = value
    return context


# =============================================================================
# Renderer
# =============================================================================


class TemplateRenderer:
    """
    Render template documents into text.

    A renderer holds no per-template state and can be shared between
    threads; every call builds its own environment around the one document
    it renders.
    """

    def create_environment(self, source_text: str, source_path: str) -> SandboxedEnvironment:
        """
        Build a sandboxed environment that serves exactly one document.

        The document is registered under ``source_path`` as its filename so
        Jinja2's rewritten tracebacks point at template lines.
        """
        return SandboxedEnvironment(
            loader=FunctionLoader(lambda _name: (source_text, source_path, lambda: False)),
            undefined=StrictUndefined,
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    def render(
        self,
        source_text: str,
        template_name: str,
        model: Any,
        source_path: str | None = None,
    ) -> RenderResult:
        """
        Render ``source_text`` against ``model``.

        Parameters
        ----------
        source_text : str
            The template document.

        template_name : str
            Logical name (``<group>/<name>``), used in messages.

        model : Any
            Model whose fields are exposed to the template.

        source_path : str | None
            Path of the virtual template document, used for diagnostic
            locations. Defaults to ``Templates/<template_name>``.

        Returns
        -------
        RenderResult
            :class:`RenderSuccess` with the text, or :class:`RenderFailure`
            with one diagnostic describing the first error Jinja2 hit.
        """
        path = source_path or f"Templates/{template_name}"
        env = self.create_environment(source_text, path)

        try:
            template = env.get_template(template_name)
        except TemplateSyntaxError as e:
            return _failure(
                DiagnosticId.TEMPLATE_SYNTAX_ERROR,
                f"Template '{template_name}' has a syntax error: {e.message}",
                Location(path, e.lineno or 1),
            )

        try:
            text = template.render(**model_context(model))
        except UndefinedError as e:
            return _failure(
                DiagnosticId.TEMPLATE_UNDEFINED,
                f"Template '{template_name}' references an undefined value: {e.message}",
                Location(path, _template_line(e, path)),
            )
        except Exception as e:
            # Templates are user code; any failure inside them is theirs to fix.
            return _failure(
                DiagnosticId.TEMPLATE_RUNTIME_ERROR,
                f"Template '{template_name}' failed while rendering: "
                f"{type(e).__name__}: {e}",
                Location(path, _template_line(e, path)),
            )

        return RenderSuccess(text)


def _failure(diagnostic_id: DiagnosticId, message: str, location: Location) -> RenderFailure:
    return RenderFailure((Diagnostic(diagnostic_id, message, location=location),))


def _template_line(error: BaseException, source_path: str) -> int:
    """Innermost traceback line that belongs to the template document."""
    line = 1
    for frame in traceback.extract_tb(error.__traceback__):
        if frame.filename == source_path and frame.lineno:
            line = frame.lineno
    return line


_default_renderer = TemplateRenderer()


def render(
    source_text: str,
    template_name: str,
    model: Any,
    source_path: str | None = None,
) -> RenderResult:
    """Module-level shortcut for :meth:`TemplateRenderer.render`."""
    return _default_renderer.render(source_text, template_name, model, source_path)
