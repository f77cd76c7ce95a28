"""
emitforge.models - Pydantic Models for Configuration and Emitters
=================================================================

Two families of models live here:

1. **Emitter models** describe what a built-in emitter generates. Their
   field names are the names templates use: ``{{ type_name }}``,
   ``{{ backing_type.code_name }}``.
2. **Configuration models** describe a project's ``emitforge.toml``: where
   user templates live and which generation units to produce.

Architecture Notes
------------------

    ForgeConfig (emitforge.toml)
    ├── templates_dir: str
    ├── template_extension: str
    └── units: list[UnitConfig]
        ├── name, generator, output
        ├── template_name (optional override)
        └── model: dict  (validated against the emitter's model)

Usage Example
-------------
>>> config = ForgeConfig.from_toml(Path("emitforge.toml"))
>>> [unit.name for unit in config.units]
['order-id', 'order-not-found']
"""

from __future__ import annotations

import re
from pathlib import Path, PurePosixPath
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator


# =============================================================================
# Emitter Models
# =============================================================================

_DOTTED_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")


class BackingType(BaseModel):
    """
    Python type wrapped by a strong identifier.

    Attributes
    ----------
    code_name : str
        Type as written in source (``int``, ``str``, ``uuid.UUID``).

    default : str
        Source expression for the empty value (``0``, ``""``).
    """

    code_name: str = Field(default="int", description="Type name as written in code")
    default: str = Field(default="0", description="Expression for the empty value")

    @field_validator("code_name")
    @classmethod
    def validate_code_name(cls, v: str) -> str:
        v = v.strip()
        if not _DOTTED_NAME.match(v):
            msg = f"Invalid backing type '{v}'. Use a (dotted) type name like 'int'."
            raise ValueError(msg)
        return v


class StrongIdModel(BaseModel):
    """
    Model of the ``strong-id`` emitter.

    Examples
    --------
    >>> model = StrongIdModel(type_name="OrderId", module="shop.ids")
    >>> model.backing_type.code_name
    'int'
    """

    type_name: str = Field(description="Name of the generated class")
    module: str = Field(default="", description="Module the class is generated into")
    backing_type: BackingType = Field(default_factory=BackingType)

    @field_validator("type_name")
    @classmethod
    def validate_type_name(cls, v: str) -> str:
        """
        Type names must be identifiers.

        Keywords are accepted here on purpose and rejected later by the
        Python frontend, which reports them as invalid default output.
        """
        v = v.strip()
        if not v.isidentifier():
            msg = f"Invalid type name '{v}'. Type names must be Python identifiers."
            raise ValueError(msg)
        return v

    @field_validator("module")
    @classmethod
    def validate_module(cls, v: str) -> str:
        v = v.strip()
        if v and not _DOTTED_NAME.match(v):
            msg = f"Invalid module name '{v}'."
            raise ValueError(msg)
        return v


class ErrorModel(BaseModel):
    """Model of the ``error`` emitter."""

    class_name: str = Field(description="Name of the exception class")
    base_class: str = Field(default="Exception", description="Exception base class")
    message: str = Field(min_length=1, max_length=200, description="Default message")

    @field_validator("class_name", "base_class")
    @classmethod
    def validate_names(cls, v: str) -> str:
        v = v.strip()
        if not _DOTTED_NAME.match(v):
            msg = f"Invalid class name '{v}'."
            raise ValueError(msg)
        return v

    @field_validator("message")
    @classmethod
    def validate_message(cls, v: str) -> str:
        # The message is written inside a double-quoted literal verbatim
        if any(ch in v for ch in ('"', "\\", "\n", "\r")):
            msg = "Messages cannot contain double quotes, backslashes, or line breaks."
            raise ValueError(msg)
        return v


# =============================================================================
# Configuration Models
# =============================================================================


class UnitConfig(BaseModel):
    """
    One generation unit: an emitter, its model, and where the code goes.

    Attributes
    ----------
    name : str
        Unique slug used on the command line (``emitforge scaffold order-id``).

    generator : str
        Built-in emitter name (``strong-id``, ``error``).

    output : Path
        Output file, relative to the project root.

    template_name : str | None
        Template overriding this unit. Defaults to the emitter's template,
        which is shared by every unit using that emitter.

    model : dict
        Emitter model fields.
    """

    name: str = Field(min_length=1, max_length=100)
    generator: str
    output: Path
    template_name: str | None = None
    model: dict[str, Any] = Field(default_factory=dict)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip().lower()
        if not re.match(r"^[a-z][a-z0-9_-]*$", v):
            msg = (
                f"Invalid unit name '{v}'. Names must start with a letter "
                "and contain only letters, numbers, hyphens, and underscores."
            )
            raise ValueError(msg)
        return v

    @field_validator("generator")
    @classmethod
    def validate_generator(cls, v: str) -> str:
        from emitforge.emitters import EMITTERS

        if v not in EMITTERS:
            valid = ", ".join(sorted(EMITTERS))
            msg = f"Unknown generator '{v}'. Valid generators: {valid}"
            raise ValueError(msg)
        return v

    @field_validator("template_name")
    @classmethod
    def validate_template_name(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip().strip("/")
        if "/" not in v:
            msg = f"Template name '{v}' must have the form '<group>/<name>'."
            raise ValueError(msg)
        return v

    @model_validator(mode="after")
    def validate_model_fields(self) -> UnitConfig:
        """Check the model against the emitter's model type at load time."""
        from emitforge.emitters import EMITTERS

        EMITTERS[self.generator].model_type.model_validate(self.model)
        return self

    @property
    def resolved_template_name(self) -> str:
        from emitforge.emitters import EMITTERS

        return self.template_name or EMITTERS[self.generator].template_name


class ForgeConfig(BaseModel):
    """
    Contents of ``emitforge.toml``.

    Examples
    --------
    >>> config = ForgeConfig()
    >>> config.templates_dir
    'Templates'
    """

    templates_dir: str = Field(
        default="Templates",
        description="Folder holding user templates, relative to the project root",
    )
    template_extension: str = Field(
        default=".py.j2",
        description="Extension used for scaffolded templates",
    )
    units: list[UnitConfig] = Field(default_factory=list)

    @field_validator("templates_dir")
    @classmethod
    def validate_templates_dir(cls, v: str) -> str:
        v = v.replace("\\", "/").rstrip("/")
        if PurePosixPath(v).name != "Templates":
            msg = f"templates_dir '{v}' must be a folder named 'Templates'."
            raise ValueError(msg)
        return v

    @field_validator("template_extension")
    @classmethod
    def validate_extension(cls, v: str) -> str:
        if not v.startswith(".") or len(v) < 2:
            msg = f"template_extension '{v}' must start with '.'"
            raise ValueError(msg)
        return v

    @model_validator(mode="after")
    def validate_unique_units(self) -> ForgeConfig:
        names = [unit.name for unit in self.units]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            msg = f"Duplicate unit names: {', '.join(duplicates)}"
            raise ValueError(msg)

        outputs = [unit.output.as_posix() for unit in self.units]
        shared = sorted({o for o in outputs if outputs.count(o) > 1})
        if shared:
            msg = f"Units share an output file: {', '.join(shared)}"
            raise ValueError(msg)
        return self

    def get_unit(self, name: str) -> UnitConfig:
        for unit in self.units:
            if unit.name == name:
                return unit
        msg = f"Unknown unit '{name}'"
        raise KeyError(msg)

    @classmethod
    def from_toml(cls, path: Path) -> ForgeConfig:
        """
        Load configuration from a TOML file.

        Raises
        ------
        FileNotFoundError
            If the config file doesn't exist.
        ValidationError
            If the config file has invalid values.
        """
        import tomli

        with open(path, "rb") as f:
            data = tomli.load(f)

        return cls(**data)
