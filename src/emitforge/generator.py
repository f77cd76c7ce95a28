"""
emitforge.generator - Generation Pipeline
=========================================

Runs every unit of an ``emitforge.toml`` through the emission pipeline.

Architecture
------------
The generator follows a pipeline pattern:

    1. Load user templates from ``Templates/``
    2. Build the default emission of each unit (built-in emitters)
    3. Resolve each emission against the templates
    4. Write successful outputs to disk

Units are independent: one unit failing (broken template, invalid output)
is reported in the result and does not stop its siblings.

Scaffolding uses the same units but writes starter templates instead of
generated code.

Usage Example
-------------
>>> config = ForgeConfig.from_toml(Path("emitforge.toml"))
>>> result = generate(config, Path("."))
>>> result.success
True
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import tomlkit

from emitforge.diagnostics import Diagnostic
from emitforge.emission import CustomizableEmission, Emission
from emitforge.emitters import build_emission
from emitforge.models import ForgeConfig, UnitConfig
from emitforge.registry import UserTemplateRegistry, load_candidates
from emitforge.scaffold import render_scaffold_document


logger = logging.getLogger(__name__)


# =============================================================================
# Result Data Classes
# =============================================================================


@dataclass
class UnitResult:
    """
    Outcome of one generation unit.

    Attributes
    ----------
    unit : UnitConfig
        The unit that was generated.

    emission : Emission
        The resolved emission.

    customized : bool
        Whether a user template was used.

    output_path : Path | None
        Written file, when the unit succeeded and this was not a dry run.
    """

    unit: UnitConfig
    emission: Emission
    customized: bool = False
    output_path: Path | None = None

    @property
    def success(self) -> bool:
        return self.emission.success


@dataclass
class GenerationResult:
    """
    Result of a generation run.

    Attributes
    ----------
    success : bool
        True when every unit succeeded.

    units : list[UnitResult]
        Per-unit outcomes in configuration order.

    files_created : list[Path]
        Absolute paths of every file written.
    """

    success: bool
    units: list[UnitResult] = field(default_factory=list)
    files_created: list[Path] = field(default_factory=list)

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return [d for result in self.units for d in result.emission.diagnostics]


# =============================================================================
# Building and Resolving
# =============================================================================


def load_registry(config: ForgeConfig, root: Path) -> UserTemplateRegistry:
    """Build the user template registry of the project at ``root``."""
    candidates = load_candidates(root, config.templates_dir)
    registry = UserTemplateRegistry.build(candidates)
    logger.debug("Loaded %d user template(s) from %s", len(registry), root / config.templates_dir)
    return registry


def build_units(config: ForgeConfig) -> list[tuple[UnitConfig, CustomizableEmission]]:
    """Build the customizable emission of every unit, in configuration order."""
    return [
        (unit, build_emission(unit.generator, unit.model, unit.resolved_template_name))
        for unit in config.units
    ]


def write_files(root: Path, files: dict[Path, str]) -> list[Path]:
    """
    Write ``files`` (relative path -> content) below ``root``.

    Returns
    -------
    list[Path]
        Absolute paths of the written files.
    """
    created_files: list[Path] = []

    for relative_path, content in files.items():
        full_path = root / relative_path
        full_path.parent.mkdir(parents=True, exist_ok=True)
        full_path.write_text(content, encoding="utf-8")
        created_files.append(full_path)

    return created_files


def generate(
    config: ForgeConfig,
    root: Path,
    registry: UserTemplateRegistry | None = None,
    *,
    dry_run: bool = False,
) -> GenerationResult:
    """
    Generate every unit of ``config`` into ``root``.

    Parameters
    ----------
    config : ForgeConfig
        Project configuration.

    root : Path
        Project root. Outputs and ``Templates/`` are relative to it.

    registry : UserTemplateRegistry | None
        User templates. Loaded from ``root`` when omitted.

    dry_run : bool, default=False
        Resolve everything but write nothing.

    Returns
    -------
    GenerationResult
        Per-unit outcomes. Failed units carry their diagnostics.
    """
    registry = registry if registry is not None else load_registry(config, root)
    result = GenerationResult(success=True)
    outputs: dict[Path, str] = {}

    for unit, emission in build_units(config):
        resolved = emission.resolve_from(registry)
        unit_result = UnitResult(
            unit=unit,
            emission=resolved,
            customized=resolved.success and resolved is not emission.default_emission,
        )
        result.units.append(unit_result)

        if resolved.success:
            outputs[unit.output] = resolved.code
        else:
            result.success = False
            for diagnostic in resolved.diagnostics:
                logger.error("%s: %s", unit.name, diagnostic)

    if not dry_run:
        written = write_files(root, outputs)
        result.files_created.extend(written)
        by_relative = dict(zip(outputs, written, strict=True))
        for unit_result in result.units:
            if unit_result.success:
                unit_result.output_path = by_relative.get(unit_result.unit.output)

    return result


# =============================================================================
# Scaffolding
# =============================================================================


def template_path_for(config: ForgeConfig, template_name: str) -> Path:
    """Relative path a scaffold for ``template_name`` is written to."""
    return Path(config.templates_dir) / f"{template_name}{config.template_extension}"


def scaffold_units(
    config: ForgeConfig,
    root: Path,
    names: list[str] | None = None,
    *,
    force: bool = False,
    skip_existing: bool = False,
) -> list[Path]:
    """
    Write starter templates for the selected units.

    Units sharing a template name produce one file, scaffolded from the
    first of them.

    Parameters
    ----------
    config : ForgeConfig
        Project configuration.

    root : Path
        Project root.

    names : list[str] | None
        Unit names to scaffold. All units when omitted.

    force : bool, default=False
        Overwrite existing template files.

    skip_existing : bool, default=False
        Leave existing template files alone instead of failing.

    Returns
    -------
    list[Path]
        Absolute paths of the written templates.

    Raises
    ------
    KeyError
        If a name does not match any unit.
    FileExistsError
        If a template exists and neither ``force`` nor ``skip_existing``
        is set. Nothing is written in that case.
    ValueError
        If a unit's default emission is invalid, so no scaffold exists.
    """
    units = [config.get_unit(n) for n in names] if names else list(config.units)
    selected = {unit.name for unit in units}

    documents: dict[Path, str] = {}
    for unit, emission in build_units(config):
        if unit.name not in selected:
            continue

        relative = template_path_for(config, emission.template_name)
        if relative in documents:
            continue

        document = render_scaffold_document(emission)
        if document is None:
            msg = f"Cannot scaffold '{unit.name}': its default output is invalid."
            raise ValueError(msg)
        documents[relative] = document

    existing = [path for path in documents if (root / path).exists()]
    if existing and not force:
        if not skip_existing:
            raise FileExistsError(
                f"Templates already exist: {', '.join(p.as_posix() for p in existing)}. "
                "Use --force to overwrite."
            )
        for path in existing:
            del documents[path]

    return write_files(root, documents)


# =============================================================================
# Starter Configuration
# =============================================================================


def starter_config_document() -> tomlkit.TOMLDocument:
    """A commented ``emitforge.toml`` with one unit per built-in emitter."""
    doc = tomlkit.document()
    doc.add(tomlkit.comment("emitforge configuration"))
    doc.add(tomlkit.comment("User templates in Templates/<group>/<name>.py.j2 override built-in output."))
    doc.add(tomlkit.nl())
    doc["templates_dir"] = "Templates"
    doc["template_extension"] = ".py.j2"

    backing_type = tomlkit.inline_table()
    backing_type.update({"code_name": "int", "default": "0"})

    order_id = tomlkit.table()
    order_id["name"] = "order-id"
    order_id["generator"] = "strong-id"
    order_id["output"] = "src/app/ids/order_id.py"
    order_id["model"] = {"type_name": "OrderId", "module": "app.ids", "backing_type": backing_type}

    not_found = tomlkit.table()
    not_found["name"] = "order-not-found"
    not_found["generator"] = "error"
    not_found["output"] = "src/app/errors/order_not_found.py"
    not_found["model"] = {
        "class_name": "OrderNotFound",
        "base_class": "LookupError",
        "message": "Order could not be found.",
    }

    units = tomlkit.aot()
    units.append(order_id)
    units.append(not_found)
    doc["units"] = units

    return doc


def write_starter_config(path: Path, *, force: bool = False) -> Path:
    """
    Write :func:`starter_config_document` to ``path``.

    Raises
    ------
    FileExistsError
        If ``path`` exists and ``force`` is False.
    """
    if path.exists() and not force:
        raise FileExistsError(f"{path} already exists. Use --force to overwrite.")

    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        f.write(tomlkit.dumps(starter_config_document()))
    return path
