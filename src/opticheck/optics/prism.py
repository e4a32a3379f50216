"""Prism: a partial optic that may or may not find its focus.

``preview`` returns ``Present(value)`` or ``Absent`` and never raises;
``review`` builds the smallest structure containing a value.

Usage:
    email = Prism.key("email")
    email.preview({"email": "a@b.com"})     # Present("a@b.com")
    email.preview({"name": "Alice"})        # Absent
    email.review("a@b.com")                 # {"email": "a@b.com"}
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

from opticheck.core.types import Absent, Maybe, Present, from_none
from opticheck.optics._access import MISSING, lookup


@dataclass(frozen=True)
class Prism:
    """A matcher/builder pair.

    Attributes:
        matcher: ``s -> Maybe[a]``
        builder: ``a -> s``
        label: Human-readable description used in reprs and error messages
    """

    matcher: Callable[[Any], Maybe]
    builder: Callable[[Any], Any]
    label: str = field(default="prism", compare=False)

    def __repr__(self) -> str:
        return f"Prism.{self.label}"

    def preview(self, structure: Any) -> Maybe:
        return self.matcher(structure)

    def review(self, value: Any) -> Any:
        return self.builder(value)

    def compose(self, inner: Any) -> "Prism":
        """Match this prism, then ``inner`` on the result."""
        from opticheck.optics.compose import compose

        return compose(self, inner)

    def as_prism(self) -> "Prism":
        return self

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def make(cls, matcher: Callable[[Any], Maybe], builder: Callable[[Any], Any]) -> "Prism":
        return cls(matcher, builder, label="make(...)")

    @classmethod
    def identity(cls) -> "Prism":
        """Always matches, focusing on the whole structure."""
        return cls(Present, lambda value: value, label="identity()")

    @classmethod
    def none(cls) -> "Prism":
        """Never matches."""
        return cls(lambda _: Absent, lambda _: None, label="none()")

    @classmethod
    def filter(cls, predicate: Callable[[Any], bool]) -> "Prism":
        """Matches the whole structure when ``predicate`` holds."""

        def match(structure: Any) -> Maybe:
            return Present(structure) if predicate(structure) else Absent

        return cls(match, lambda value: value, label="filter(...)")

    @classmethod
    def instance_of(cls, kind: type | tuple[type, ...]) -> "Prism":
        """Matches values of the given type (variant selection)."""

        def match(structure: Any) -> Maybe:
            return Present(structure) if isinstance(structure, kind) else Absent

        return cls(match, lambda value: value, label=f"instance_of({kind!r})")

    @classmethod
    def some(cls) -> "Prism":
        """Focuses on the first element of a non-empty list or tuple."""

        def match(structure: Any) -> Maybe:
            if isinstance(structure, (list, tuple)) and structure:
                return Present(structure[0])
            return Absent

        return cls(match, lambda value: [value], label="some()")

    @classmethod
    def key(cls, name: Any) -> "Prism":
        """Focuses on a key or attribute; missing or ``None`` is ``Absent``."""

        def match(structure: Any) -> Maybe:
            value = lookup(structure, name)
            if value is MISSING:
                return Absent
            return from_none(value)

        return cls(match, lambda value: {name: value}, label=f"key({name!r})")

    @classmethod
    def path(cls, names: Iterable[Any]) -> "Prism":
        """Focuses on a nested location.

        Any missing key, non-container intermediate, or ``None`` final value
        gives ``Absent``. An empty path never matches. ``review`` builds the
        nested dicts leading to the value.
        """
        keys = tuple(names)

        def match(structure: Any) -> Maybe:
            if not keys:
                return Absent
            current = structure
            for name in keys:
                if current is None:
                    return Absent
                current = lookup(current, name)
                if current is MISSING:
                    return Absent
            return from_none(current)

        def build(value: Any) -> Any:
            for name in reversed(keys):
                value = {name: value}
            return value

        return cls(match, build, label=f"path({list(keys)!r})")
