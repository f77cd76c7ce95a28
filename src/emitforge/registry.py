"""
emitforge.registry - User Template Registry
===========================================

Indexes the override templates a user keeps in their project. Candidates are
plain ``(path, content)`` pairs handed over by whoever discovered them; the
registry only decides which of them follow the naming convention:

    Templates/<group>/<name>.<extension>   ->   "<group>/<name>"

Naming Rules
------------
- Backslashes are normalized to ``/`` before matching.
- The ``Templates/`` segment is matched case-sensitively, and the last one in
  the path wins (``/work/Templates/app/Templates/Ids/X.py.j2`` is ``Ids/X``).
- The extension starts at the first ``.`` of the file name, so
  ``StrongId.py.j2`` is ``StrongId``; dots in group folders are kept.
- Files without an extension are ignored.

A registry is built once per generation pass and never changes afterwards.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any

from emitforge.renderer import RenderResult, TemplateRenderer


logger = logging.getLogger(__name__)

TEMPLATES_MARKER = "Templates/"


@dataclass(frozen=True)
class TemplateCandidate:
    """An auxiliary document that may be a user template."""

    path: str
    content: str


@dataclass(frozen=True)
class TemplateEntry:
    """A registered user template."""

    source_text: str
    source_path: str


def extract_template_name(path: str) -> str | None:
    """
    Derive the logical template name from a candidate path.

    Parameters
    ----------
    path : str
        Candidate path, absolute or relative, with either separator.

    Returns
    -------
    str | None
        ``<group>/<name>``, or None if the path does not follow the
        ``Templates/<name>.<extension>`` convention.

    Examples
    --------
    >>> extract_template_name("C:\\\\repo\\\\Templates\\\\Ids\\\\StrongId.py.j2")
    'Ids/StrongId'
    >>> extract_template_name("src/Widget.py.j2") is None
    True
    """
    normalized = path.replace("\\", "/")

    idx = normalized.rfind(TEMPLATES_MARKER)
    while idx > 0 and normalized[idx - 1] != "/":
        idx = normalized.rfind(TEMPLATES_MARKER, 0, idx)
    if idx < 0:
        return None

    relative = normalized[idx + len(TEMPLATES_MARKER):]
    folder, _, filename = relative.rpartition("/")

    stem, dot, _extension = filename.partition(".")
    if not dot or not stem:
        return None

    return f"{folder}/{stem}" if folder else stem


class UserTemplateRegistry:
    """
    Read-only index of user templates by logical name.

    Use :meth:`build` to construct one; the constructor takes an
    already-built mapping.

    Examples
    --------
    >>> registry = UserTemplateRegistry.build([
    ...     TemplateCandidate("Templates/Ids/StrongId.py.j2", "class {{ type_name }}: ..."),
    ... ])
    >>> registry.has_template("Ids/StrongId")
    True
    """

    def __init__(
        self,
        entries: dict[str, TemplateEntry] | None = None,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self._entries = MappingProxyType(dict(entries or {}))
        self._renderer = renderer or TemplateRenderer()

    @classmethod
    def empty(cls) -> UserTemplateRegistry:
        return cls()

    @classmethod
    def build(
        cls,
        candidates: Iterable[TemplateCandidate],
        renderer: TemplateRenderer | None = None,
    ) -> UserTemplateRegistry:
        """
        Index every candidate that follows the naming convention.

        When two candidates map to the same name the later one wins and a
        warning is logged; hosts should not rely on which file that is.
        """
        entries: dict[str, TemplateEntry] = {}

        for candidate in candidates:
            name = extract_template_name(candidate.path)
            if name is None:
                logger.debug("Ignoring %s: not under Templates/", candidate.path)
                continue

            previous = entries.get(name)
            if previous is not None:
                logger.warning(
                    "Template '%s' is defined by both %s and %s; using %s",
                    name,
                    previous.source_path,
                    candidate.path,
                    candidate.path,
                )

            entries[name] = TemplateEntry(candidate.content, candidate.path)

        return cls(entries, renderer)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def has_template(self, name: str) -> bool:
        return name in self._entries

    def get_file_path(self, name: str) -> str | None:
        entry = self._entries.get(name)
        return entry.source_path if entry else None

    def get_source(self, name: str) -> str | None:
        entry = self._entries.get(name)
        return entry.source_text if entry else None

    def try_render(self, name: str, model: Any) -> RenderResult | None:
        """
        Render the template registered under ``name``.

        Returns
        -------
        RenderResult | None
            None when no template is registered. A registered template
            always yields a result, successful or not.
        """
        entry = self._entries.get(name)
        if entry is None:
            return None
        return self._renderer.render(entry.source_text, name, model, entry.source_path)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(sorted(self._entries))

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"UserTemplateRegistry({list(self.names)!r})"


# =============================================================================
# Discovery
# =============================================================================


def load_candidates(root: Path, templates_dir: str = "Templates") -> list[TemplateCandidate]:
    """
    Read every file below ``root / templates_dir`` as a candidate.

    Paths are reported relative to ``root`` with ``/`` separators, so
    diagnostics point at ``Templates/...`` the way users see it in their
    project. Files that are not UTF-8 text are skipped with a warning.

    Parameters
    ----------
    root : Path
        Project root.

    templates_dir : str
        Folder holding the templates, relative to ``root``.

    Returns
    -------
    list[TemplateCandidate]
        Candidates sorted by path, so collisions resolve the same way on
        every platform.
    """
    base = root / templates_dir
    if not base.is_dir():
        return []

    candidates: list[TemplateCandidate] = []
    for file_path in sorted(base.rglob("*")):
        if not file_path.is_file():
            continue
        try:
            content = file_path.read_text(encoding="utf-8")
        except UnicodeDecodeError:
            logger.warning("Skipping %s: not a UTF-8 text file", file_path)
            continue
        candidates.append(
            TemplateCandidate(file_path.relative_to(root).as_posix(), content)
        )

    return candidates
