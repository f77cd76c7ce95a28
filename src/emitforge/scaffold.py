"""
emitforge.scaffold - Starter Templates from Default Emissions
=============================================================

Turns a default emission into a Jinja2 template a user can start editing.
Every literal recorded in the emission's bindings is replaced by a
``{{ property_path }}`` placeholder, so rendering the scaffold against the
same model gives back the default code.

Longest Value First
-------------------
Bindings are applied longest value first. With ``"OrderId" -> type_name``
and ``"shop.OrderId" -> module`` the text ``shop.OrderId`` must become
``{{ module }}``; replacing ``OrderId`` first would leave
``shop.{{ type_name }}`` behind and the longer value could never match
again. A stable sort keeps insertion order between values of equal length,
and the text is walked once per binding, without re-scanning placeholders.

Provenance Header
-----------------
Scaffolds written to disk start with two Jinja2 comment lines:

    {# @emitforge v0.1.0 hash:a3f8c2d1e5b7 #}
    {# scaffold: Ids/StrongId #}

The hash identifies the scaffold body the file was derived from, which is
how :func:`find_stale_templates` notices that the default output changed
since the user copied it. Comments render to nothing, so the header does not
change what the template produces.
"""

from __future__ import annotations

import hashlib
import re
from collections.abc import Iterable
from dataclasses import dataclass

from emitforge import __version__
from emitforge.diagnostics import Diagnostic, DiagnosticId, Location, Severity
from emitforge.emission import CustomizableEmission
from emitforge.registry import UserTemplateRegistry


PACKAGE_NAME = "emitforge"


# =============================================================================
# Scaffold Generation
# =============================================================================


class ScaffoldGenerator:
    """Derive placeholder templates from customizable emissions."""

    def generate(self, emission: CustomizableEmission) -> str | None:
        """
        Build the scaffold for ``emission``.

        Parameters
        ----------
        emission : CustomizableEmission
            Emission whose default code and bindings are used.

        Returns
        -------
        str | None
            The template text, the default code unchanged when there are no
            bindings, or None when the default emission failed.
        """
        default = emission.default_emission
        if not default.success:
            return None

        if not emission.bindings:
            return default.code

        # (text, is_placeholder) segments; placeholders are never searched again
        segments: list[tuple[str, bool]] = [(default.code, False)]
        for binding in sorted(emission.bindings, key=lambda b: len(b.value), reverse=True):
            segments = _substitute(segments, binding.value, binding.placeholder)

        return "".join(text for text, _ in segments)


def _substitute(
    segments: list[tuple[str, bool]],
    value: str,
    placeholder: str,
) -> list[tuple[str, bool]]:
    """Replace ``value`` with ``placeholder`` inside literal segments only."""
    result: list[tuple[str, bool]] = []
    for text, is_placeholder in segments:
        if is_placeholder or value not in text:
            result.append((text, is_placeholder))
            continue

        for i, part in enumerate(text.split(value)):
            if i:
                result.append((placeholder, True))
            if part:
                result.append((part, False))
    return result


_default_generator = ScaffoldGenerator()


def generate(emission: CustomizableEmission) -> str | None:
    """Module-level shortcut for :meth:`ScaffoldGenerator.generate`."""
    return _default_generator.generate(emission)


def compute_hash(text: str) -> str:
    """Short SHA-256 fingerprint (12 hex digits) of a scaffold body."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()[:12]


# =============================================================================
# Provenance Header
# =============================================================================

_PACKAGE_LINE = re.compile(r"^\{# @(?P<package>\S+) v(?P<version>\S+) hash:(?P<hash>[0-9a-f]+) #\}$")
_SCAFFOLD_LINE = re.compile(r"^\{# scaffold: (?P<name>\S+) #\}$")


@dataclass(frozen=True)
class ScaffoldFileHeader:
    """
    Provenance of a scaffolded template file.

    Attributes
    ----------
    package : str
        Tool that wrote the file.

    version : str
        Tool version at scaffold time.

    hash : str
        :func:`compute_hash` of the scaffold body.

    scaffold_name : str
        Template name the scaffold was generated for.
    """

    package: str
    version: str
    hash: str
    scaffold_name: str

    def format(self) -> str:
        return (
            f"{{# @{self.package} v{self.version} hash:{self.hash} #}}\n"
            f"{{# scaffold: {self.scaffold_name} #}}"
        )

    @classmethod
    def parse(cls, content: str) -> ScaffoldFileHeader | None:
        """
        Read the header from the first two lines of ``content``.

        Returns None if either line is missing or malformed.
        """
        lines = content.splitlines()
        if len(lines) < 2:
            return None

        first = _PACKAGE_LINE.match(lines[0].strip())
        second = _SCAFFOLD_LINE.match(lines[1].strip())
        if first is None or second is None:
            return None

        return cls(
            package=first["package"],
            version=first["version"],
            hash=first["hash"],
            scaffold_name=second["name"],
        )

    @classmethod
    def extract_hash(cls, content: str) -> str | None:
        header = cls.parse(content)
        return header.hash if header else None


def render_scaffold_document(emission: CustomizableEmission) -> str | None:
    """
    Scaffold ``emission`` and prepend its provenance header.

    Returns None when no scaffold can be generated.
    """
    body = generate(emission)
    if body is None:
        return None

    header = ScaffoldFileHeader(
        package=PACKAGE_NAME,
        version=__version__,
        hash=compute_hash(body),
        scaffold_name=emission.template_name,
    )
    return f"{header.format()}\n{body}"


# =============================================================================
# Availability and Staleness
# =============================================================================


def find_available_scaffolds(
    emissions: Iterable[CustomizableEmission],
    registry: UserTemplateRegistry,
) -> list[Diagnostic]:
    """
    Report customizable templates the user has not overridden yet.

    One info diagnostic per template name, in first-seen order.
    """
    diagnostics: list[Diagnostic] = []
    seen: set[str] = set()

    for emission in emissions:
        name = emission.template_name
        if name in seen or registry.has_template(name):
            continue
        seen.add(name)
        diagnostics.append(
            Diagnostic(
                DiagnosticId.SCAFFOLD_AVAILABLE,
                f"Template '{name}' can be customized. "
                "Run 'emitforge scaffold' to create a starter template.",
                severity=Severity.INFO,
            )
        )

    return diagnostics


def find_stale_templates(
    emissions: Iterable[CustomizableEmission],
    registry: UserTemplateRegistry,
) -> list[Diagnostic]:
    """
    Report user templates scaffolded from a different default than today's.

    Templates without a provenance header are hand-written and never
    reported. Each template name is checked once, against the first emission
    that uses it.
    """
    diagnostics: list[Diagnostic] = []
    seen: set[str] = set()

    for emission in emissions:
        name = emission.template_name
        if name in seen:
            continue
        seen.add(name)

        source = registry.get_source(name)
        if source is None:
            continue

        recorded = ScaffoldFileHeader.extract_hash(source)
        body = generate(emission)
        if recorded is None or body is None:
            continue

        current = compute_hash(body)
        if recorded != current:
            diagnostics.append(
                Diagnostic(
                    DiagnosticId.SCAFFOLD_STALE,
                    f"Template '{name}' was scaffolded from an older default "
                    f"(hash {recorded}, current {current}). Re-scaffold and merge "
                    "your changes to pick up the new output.",
                    severity=Severity.WARNING,
                    location=Location(registry.get_file_path(name) or f"Templates/{name}"),
                )
            )

    return diagnostics
