"""Lens: a total optic that focuses on one part of a structure.

A lens assumes its focus exists. Using it on a structure that lacks the focus
is a programmer error and raises ``StructuralError`` instead of producing a
validation outcome.

Laws (hold for every constructor here and after composition):
- ``lens.set(s, lens.view(s)) == s``
- ``lens.view(lens.set(s, a)) == a``
- ``lens.set(lens.set(s, a), b) == lens.set(s, b)``

Usage:
    name = Lens.key("name")
    name.view({"name": "Alice"})            # "Alice"
    name.set({"name": "Alice"}, "Bob")      # {"name": "Bob"}

    city = Lens.path(["address", "city"])
    city.over(user, str.upper)
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

from opticheck.core.errors import StructuralError
from opticheck.core.types import Absent, Maybe, Present
from opticheck.optics._access import MISSING, lookup, replace


@dataclass(frozen=True)
class Lens:
    """A total getter/setter pair.

    Attributes:
        getter: ``s -> a``; raises StructuralError when the focus is absent
        setter: ``(s, a) -> s'``; raises StructuralError when the focus is absent
        builder: Optional ``a -> s`` building the smallest structure holding ``a``.
            Only needed when the lens is composed into a Prism and reviewed.
        label: Human-readable description used in reprs and error messages
    """

    getter: Callable[[Any], Any]
    setter: Callable[[Any, Any], Any]
    builder: Callable[[Any], Any] | None = None
    label: str = field(default="lens", compare=False)

    def __repr__(self) -> str:
        return f"Lens.{self.label}"

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def view(self, structure: Any) -> Any:
        return self.getter(structure)

    def set(self, structure: Any, value: Any) -> Any:
        return self.setter(structure, value)

    def over(self, structure: Any, fn: Callable[[Any], Any]) -> Any:
        """Apply ``fn`` to the focus and write the result back."""
        return self.set(structure, fn(self.view(structure)))

    def compose(self, inner: Any) -> Any:
        """Focus through this lens, then through ``inner``.

        Composing with another Lens (or an Iso) yields a Lens; composing with
        a Prism yields a Prism.
        """
        from opticheck.optics.compose import compose

        return compose(self, inner)

    def as_prism(self):
        """View this lens as a Prism.

        Structural absence becomes ``Absent`` so the resulting prism keeps the
        never-raises contract of ``preview``.
        """
        from opticheck.optics.prism import Prism

        getter = self.getter
        builder = self.builder
        label = self.label

        def match(structure: Any) -> Maybe:
            try:
                return Present(getter(structure))
            except StructuralError:
                return Absent

        def build(value: Any) -> Any:
            if builder is None:
                raise TypeError(f"Lens.{label} cannot rebuild a structure from its focus")
            return builder(value)

        return Prism(match, build, label=f"lens({label})")

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def make(
        cls,
        getter: Callable[[Any], Any],
        setter: Callable[[Any, Any], Any],
        builder: Callable[[Any], Any] | None = None,
    ) -> "Lens":
        return cls(getter, setter, builder, label="make(...)")

    @classmethod
    def identity(cls) -> "Lens":
        """The lens whose focus is the whole structure."""
        return cls(lambda s: s, lambda s, a: a, lambda a: a, label="identity()")

    @classmethod
    def key(cls, name: Any) -> "Lens":
        """Focus on a mapping key, a sequence position or an object attribute."""

        def get(structure: Any) -> Any:
            value = lookup(structure, name)
            if value is MISSING:
                raise StructuralError(name, structure)
            return value

        def put(structure: Any, value: Any) -> Any:
            if lookup(structure, name) is MISSING:
                raise StructuralError(name, structure)
            return replace(structure, name, value)

        return cls(get, put, lambda value: {name: value}, label=f"key({name!r})")

    @classmethod
    def index(cls, position: int) -> "Lens":
        """Focus on a position inside a list or tuple."""
        if isinstance(position, bool) or not isinstance(position, int):
            raise TypeError(f"Lens.index expects an int, got {position!r}")
        lens = cls.key(position)
        return cls(lens.getter, lens.setter, None, label=f"index({position})")

    @classmethod
    def path(cls, names: Iterable[Any]) -> "Lens":
        """Focus on a nested location; every intermediate must exist."""
        keys = list(names)
        result = cls.identity()
        for name in keys:
            result = _compose_lenses(result, cls.key(name))
        return cls(result.getter, result.setter, result.builder, label=f"path({keys!r})")


def _compose_lenses(outer: Lens, inner: Lens) -> Lens:
    def get(structure: Any) -> Any:
        return inner.getter(outer.getter(structure))

    def put(structure: Any, value: Any) -> Any:
        part = outer.getter(structure)
        return outer.setter(structure, inner.setter(part, value))

    builder = None
    if outer.builder is not None and inner.builder is not None:
        outer_build, inner_build = outer.builder, inner.builder
        builder = lambda value: outer_build(inner_build(value))  # noqa: E731

    return Lens(get, put, builder, label=f"{outer.label}.{inner.label}")
