"""
emitforge.emitters - Built-in Default Emitters
==============================================

Each emitter turns a model into default Python source, recording every model
value it writes through a :class:`~emitforge.template_map.TemplateMap`.
The result is wrapped into a customizable emission so a user template can
replace it and a scaffold can be derived from it.

Available Emitters
------------------
strong-id (template ``Ids/StrongId``):
    A frozen dataclass wrapping a single value, e.g. ``OrderId(42)``.

error (template ``Errors/Error``):
    An exception class with a default message.

Adding an emitter means writing a ``build`` function and registering an
:class:`EmitterSpec` in :data:`EMITTERS`.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from emitforge.diagnostics import Diagnostic, DiagnosticId
from emitforge.emission import CustomizableEmission, Emission, with_user_template
from emitforge.frontend import Frontend, PythonFrontend
from emitforge.models import ErrorModel, StrongIdModel
from emitforge.template_map import TemplateMap


@dataclass(frozen=True)
class EmitterSpec:
    """
    Registration of a built-in emitter.

    Attributes
    ----------
    template_name : str
        Default template overriding this emitter's output.

    model_type : type[BaseModel]
        Pydantic model the emitter consumes.

    build : Callable
        ``build(model, tmap) -> str`` producing the default code.

    description : str
        One-line summary for the CLI.
    """

    template_name: str
    model_type: type[BaseModel]
    build: Callable[[Any, TemplateMap], str]
    description: str


# =============================================================================
# strong-id
# =============================================================================


def build_strong_id(model: StrongIdModel, tmap: TemplateMap) -> str:
    """Emit a frozen dataclass wrapping one value of the backing type."""
    type_name = tmap.bind(model.type_name, "type_name")
    code_name = tmap.bind(model.backing_type.code_name, "backing_type.code_name")
    default = tmap.bind(model.backing_type.default, "backing_type.default")

    if model.module:
        summary = f"{type_name} identifier for {tmap.bind(model.module, 'module')}."
    else:
        summary = f"{type_name} identifier."

    return (
        f'"""{summary}"""\n'
        "\n"
        "from __future__ import annotations\n"
        "\n"
        "from dataclasses import dataclass\n"
        "\n"
        "\n"
        "@dataclass(frozen=True, slots=True)\n"
        f"class {type_name}:\n"
        f'    """Strongly typed wrapper around a {code_name} value."""\n'
        "\n"
        f"    value: {code_name}\n"
        "\n"
        "    @classmethod\n"
        f"    def empty(cls) -> {type_name}:\n"
        f"        return cls({default})\n"
        "\n"
        "    def __repr__(self) -> str:\n"
        f'        return f"{type_name}({{self.value!r}})"\n'
    )


# =============================================================================
# error
# =============================================================================


def build_error(model: ErrorModel, tmap: TemplateMap) -> str:
    """Emit an exception class carrying a default message."""
    class_name = tmap.bind(model.class_name, "class_name")
    base_class = tmap.bind(model.base_class, "base_class")
    message = tmap.bind(model.message, "message")

    return (
        f'"""Definition of {class_name}."""\n'
        "\n"
        "\n"
        f"class {class_name}({base_class}):\n"
        f'    """{message}"""\n'
        "\n"
        f'    default_message = "{message}"\n'
        "\n"
        "    def __init__(self, message: str | None = None) -> None:\n"
        "        super().__init__(message or self.default_message)\n"
    )


EMITTERS: dict[str, EmitterSpec] = {
    "strong-id": EmitterSpec(
        template_name="Ids/StrongId",
        model_type=StrongIdModel,
        build=build_strong_id,
        description="Frozen dataclass wrapping a single identifier value",
    ),
    "error": EmitterSpec(
        template_name="Errors/Error",
        model_type=ErrorModel,
        build=build_error,
        description="Exception class with a default message",
    ),
}


# =============================================================================
# Building Emissions
# =============================================================================


def build_emission(
    generator: str,
    model: BaseModel | dict[str, Any],
    template_name: str | None = None,
    frontend: Frontend | None = None,
) -> CustomizableEmission:
    """
    Run a built-in emitter and wrap its output.

    Parameters
    ----------
    generator : str
        Key of :data:`EMITTERS`.

    model : BaseModel | dict
        Emitter model, or raw fields validated into it.

    template_name : str | None
        Override template name; defaults to the emitter's.

    frontend : Frontend | None
        Validator for the default code. Defaults to
        :class:`~emitforge.frontend.PythonFrontend`.

    Returns
    -------
    CustomizableEmission
        The emission. Its default is failed with a ``default-output-invalid``
        diagnostic when the emitter produced invalid code (for instance a
        keyword as type name).

    Raises
    ------
    KeyError
        If ``generator`` is unknown.
    ValidationError
        If ``model`` does not fit the emitter's model type.
    """
    spec = EMITTERS[generator]
    typed_model = spec.model_type.model_validate(model)
    name = template_name or spec.template_name

    tmap = TemplateMap()
    code = spec.build(typed_model, tmap)

    verdict = (frontend or PythonFrontend(filename=f"<{generator}>")).validate(code)
    if verdict.valid:
        emission = Emission.from_code(code)
    else:
        emission = Emission.from_failure(
            [
                Diagnostic(
                    DiagnosticId.DEFAULT_OUTPUT_INVALID,
                    f"Generator '{generator}' produced invalid Python for "
                    f"template '{name}': {verdict.summary}",
                )
            ],
            code=code,
        )

    return with_user_template(emission, name, typed_model, tmap)
