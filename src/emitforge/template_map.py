"""
emitforge.template_map - Model Value Bindings
=============================================

A :class:`TemplateMap` is a side channel filled in while an emitter builds
its default code. Every model value the emitter writes into the output is
passed through :meth:`TemplateMap.bind`, which hands the value straight back
and remembers which model path it came from.

The scaffold generator later uses those bindings to turn the literal values
back into ``{{ path }}`` placeholders.

Example
-------
>>> tmap = TemplateMap()
>>> name = tmap.bind(model.type_name, "type_name")
>>> code = f"class {name}:\\n    pass\\n"
>>> tmap.bindings
(TemplateBinding(property_path='type_name', value='OrderId'),)
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import TypeVar


T = TypeVar("T")


@dataclass(frozen=True)
class TemplateBinding:
    """
    Link between a literal in the default output and the model path that
    produced it.

    Attributes
    ----------
    property_path : str
        Dotted path into the model (e.g. ``backing_type.code_name``). Used
        verbatim inside the scaffold placeholder.

    value : str
        Exact text that appeared in the default output. Never empty or
        whitespace-only.
    """

    property_path: str
    value: str

    @property
    def placeholder(self) -> str:
        return "{{ " + self.property_path + " }}"


class TemplateMap:
    """
    Insertion-ordered record of :class:`TemplateBinding` values.

    The map is append-only. Emissions take a tuple snapshot of
    :attr:`bindings` when they are created, so later calls to :meth:`bind`
    never affect an emission that already exists.
    """

    def __init__(self) -> None:
        self._bindings: list[TemplateBinding] = []

    def bind(self, value: T, property_path: str) -> T:
        """
        Record ``value`` as coming from ``property_path`` and return it.

        Values that are ``None`` or whose string form is empty after
        stripping are not recorded; they stay inert literals in any scaffold.
        Repeated paths are recorded every time.

        Parameters
        ----------
        value : T
            The model value being written into the output. Non-string
            values are recorded by their ``str()`` form.

        property_path : str
            Dotted path into the model that yields ``value``.

        Returns
        -------
        T
            ``value``, unchanged.
        """
        if value is not None:
            text = str(value)
            if text.strip():
                self._bindings.append(TemplateBinding(property_path, text))
        return value

    @property
    def bindings(self) -> tuple[TemplateBinding, ...]:
        return tuple(self._bindings)

    def __len__(self) -> int:
        return len(self._bindings)

    def __iter__(self) -> Iterator[TemplateBinding]:
        return iter(tuple(self._bindings))

    def __repr__(self) -> str:
        return f"TemplateMap({self._bindings!r})"
