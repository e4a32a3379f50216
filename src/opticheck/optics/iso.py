"""Iso: a lossless, two-way optic.

An iso is a pair of inverse functions. It can stand in for a Lens (viewing and
setting always succeed) or for a Prism (preview always finds a value).

Laws:
- ``iso.review(iso.view(s)) == s``
- ``iso.view(iso.review(a)) == a``
"""

from dataclasses import dataclass, field
from typing import Any, Callable

from opticheck.core.types import Present


@dataclass(frozen=True)
class Iso:
    forward: Callable[[Any], Any]
    backward: Callable[[Any], Any]
    label: str = field(default="iso", compare=False)

    def __repr__(self) -> str:
        return f"Iso.{self.label}"

    def view(self, structure: Any) -> Any:
        return self.forward(structure)

    def review(self, value: Any) -> Any:
        return self.backward(value)

    def over(self, structure: Any, fn: Callable[[Any], Any]) -> Any:
        """Modify the viewed side: view, apply ``fn``, review."""
        return self.backward(fn(self.forward(structure)))

    def under(self, value: Any, fn: Callable[[Any], Any]) -> Any:
        """Modify the reviewed side: review, apply ``fn``, view."""
        return self.forward(fn(self.backward(value)))

    def reverse(self) -> "Iso":
        return Iso(self.backward, self.forward, label=f"{self.label}.reverse()")

    def compose(self, inner: Any) -> Any:
        from opticheck.optics.compose import compose

        return compose(self, inner)

    def as_lens(self):
        from opticheck.optics.lens import Lens

        backward = self.backward
        return Lens(
            self.forward,
            lambda _structure, value: backward(value),
            backward,
            label=f"iso({self.label})",
        )

    def as_prism(self):
        from opticheck.optics.prism import Prism

        forward = self.forward
        return Prism(
            lambda structure: Present(forward(structure)),
            self.backward,
            label=f"iso({self.label})",
        )

    @classmethod
    def make(cls, forward: Callable[[Any], Any], backward: Callable[[Any], Any]) -> "Iso":
        return cls(forward, backward, label="make(...)")

    @classmethod
    def identity(cls) -> "Iso":
        return cls(lambda s: s, lambda a: a, label="identity()")
