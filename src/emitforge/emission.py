"""
emitforge.emission - Customizable Emissions
===========================================

This module ties a default emission to the user template that may replace
it.

Pipeline
--------
An emitter builds its default code while recording model bindings in a
:class:`~emitforge.template_map.TemplateMap`, then wraps both into a
:class:`CustomizableEmission`:

    emission = with_user_template(Emission.from_code(code), "Ids/StrongId", model, tmap)

At generation time the emission is resolved against the project's
:class:`~emitforge.registry.UserTemplateRegistry`:

    1. Default already failed        -> default returned unchanged
    2. No user template              -> default returned unchanged
    3. Template fails to render      -> template-render-error
    4. Rendered text is not Python   -> template-output-invalid
    5. Otherwise                     -> rendered text

Steps 3 and 4 report on the template file, never on the generated file, so
the user is pointed at the document they actually wrote.

The same emission can instead be handed to
:class:`~emitforge.scaffold.ScaffoldGenerator` to derive a starter template.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from emitforge.diagnostics import Diagnostic, DiagnosticId, Location
from emitforge.frontend import Frontend, PythonFrontend
from emitforge.registry import UserTemplateRegistry
from emitforge.renderer import RenderFailure
from emitforge.template_map import TemplateBinding, TemplateMap


logger = logging.getLogger(__name__)


# =============================================================================
# Emission
# =============================================================================


@dataclass(frozen=True)
class Emission:
    """
    Generated code, or the reasons there is none.

    Default and resolved emissions share this shape, so a caller cannot tell
    whether a user template was involved except through ``code``.

    Attributes
    ----------
    code : str
        The generated source. Empty when ``success`` is False.

    success : bool
        Whether ``code`` is usable.

    diagnostics : tuple[Diagnostic, ...]
        Why the emission failed. Empty on success.
    """

    code: str
    success: bool
    diagnostics: tuple[Diagnostic, ...] = field(default_factory=tuple)

    @classmethod
    def from_code(cls, code: str) -> Emission:
        return cls(code=code, success=True)

    @classmethod
    def from_failure(cls, diagnostics: Iterable[Diagnostic], code: str = "") -> Emission:
        return cls(code=code, success=False, diagnostics=tuple(diagnostics))


DefaultEmission = Emission
ResolvedEmission = Emission


# =============================================================================
# Customizable Emission
# =============================================================================


@dataclass(frozen=True)
class CustomizableEmission:
    """
    A default emission together with everything needed to override it.

    Attributes
    ----------
    default_emission : Emission
        Output of the structural emitter.

    template_name : str
        Logical template name, ``<group>/<name>``. A user template at
        ``Templates/<group>/<name>.<ext>`` overrides this emission.

    model : Any
        The model the default was built from; templates render against it.

    bindings : tuple[TemplateBinding, ...]
        Model values recorded while building the default, in the order
        they were bound.
    """

    default_emission: Emission
    template_name: str
    model: Any
    bindings: tuple[TemplateBinding, ...] = field(default_factory=tuple)

    def resolve_from(
        self,
        registry: UserTemplateRegistry,
        frontend: Frontend | None = None,
    ) -> Emission:
        """
        Pick the final emission: the default or a validated user override.

        Parameters
        ----------
        registry : UserTemplateRegistry
            User templates of the current pass.

        frontend : Frontend | None
            Validator for the rendered text. Defaults to
            :class:`~emitforge.frontend.PythonFrontend`.

        Returns
        -------
        Emission
            The default emission when it failed or has no override, the
            rendered override when it is valid, or a failed emission with a
            single template diagnostic.
        """
        if not self.default_emission.success:
            return self.default_emission

        if not registry.has_template(self.template_name):
            return self.default_emission

        template_path = registry.get_file_path(self.template_name) or (
            f"Templates/{self.template_name}"
        )

        rendered = registry.try_render(self.template_name, self.model)
        if isinstance(rendered, RenderFailure):
            logger.debug("Template '%s' failed to render", self.template_name)
            return self._render_error(rendered, template_path)

        frontend = frontend or PythonFrontend(filename=template_path)
        verdict = frontend.validate(rendered.text)
        if not verdict.valid:
            logger.debug("Template '%s' rendered invalid code", self.template_name)
            return Emission.from_failure([
                Diagnostic(
                    DiagnosticId.TEMPLATE_OUTPUT_INVALID,
                    f"User template '{self.template_name}' produced invalid Python: "
                    f"{verdict.summary}",
                    location=Location(template_path),
                )
            ])

        logger.debug("Using user template '%s'", self.template_name)
        return Emission.from_code(rendered.text)

    def _render_error(self, failure: RenderFailure, template_path: str) -> Emission:
        first = failure.diagnostics[0].location if failure.diagnostics else None
        return Emission.from_failure([
            Diagnostic(
                DiagnosticId.TEMPLATE_RENDER_ERROR,
                f"User template '{self.template_name}' could not be rendered: "
                f"{failure.message}",
                location=first or Location(template_path),
            )
        ])


def with_user_template(
    emission: Emission,
    template_name: str,
    model: Any,
    template_map: TemplateMap | None = None,
) -> CustomizableEmission:
    """
    Make ``emission`` overridable by the user template ``template_name``.

    Without a ``template_map`` the emission can still be overridden, but its
    scaffold is the default code with no placeholders.
    """
    bindings = template_map.bindings if template_map is not None else ()
    return CustomizableEmission(emission, template_name, model, bindings)
