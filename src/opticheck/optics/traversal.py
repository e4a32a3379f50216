"""Traversal: several foci related as one unit.

A traversal is built with ``Traversal.combine`` from Lenses and Prisms. It is
not an element-wise mapper; it declares a fixed, ordered set of locations
that are read together, e.g. a start and an end date.

Foci behave according to their kind:
- Lens foci always contribute their value (or raise StructuralError)
- Prism foci contribute only when they match

Usage:
    period = Traversal.combine([Lens.key("start"), Prism.key("end")])
    period.to_list({"start": 1})              # [1]
    period.to_list_checked({"start": 1})      # Absent
    period.to_list_checked({"start": 1, "end": 2})  # Present([1, 2])
"""

from dataclasses import dataclass
from typing import Any, Iterable, Iterator

from opticheck.core.types import Absent, Maybe, Present
from opticheck.optics.iso import Iso
from opticheck.optics.lens import Lens
from opticheck.optics.prism import Prism


@dataclass(frozen=True)
class Traversal:
    """An ordered, immutable collection of Lens and Prism foci."""

    foci: tuple[Lens | Prism, ...] = ()

    def __repr__(self) -> str:
        return f"Traversal.combine({list(self.foci)!r})"

    @classmethod
    def combine(cls, optics: Iterable[Any]) -> "Traversal":
        """Combine optics into one multi-focus traversal.

        Combine order is kept by every read. Isos are used as Lenses and nested
        traversals are flattened, so ``combine([])`` is the identity.

        Raises:
            TypeError: If an element is not a Lens, Prism, Iso or Traversal
        """
        foci: list[Lens | Prism] = []
        for optic in optics:
            if isinstance(optic, (Lens, Prism)):
                foci.append(optic)
            elif isinstance(optic, Iso):
                foci.append(optic.as_lens())
            elif isinstance(optic, Traversal):
                foci.extend(optic.foci)
            else:
                raise TypeError(
                    f"cannot combine {optic!r}: expected a Lens, Prism, Iso or Traversal"
                )
        return cls(tuple(foci))

    def append(self, other: "Traversal") -> "Traversal":
        return Traversal(self.foci + other.foci)

    def __len__(self) -> int:
        return len(self.foci)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def to_list(self, structure: Any) -> list[Any]:
        """Collect every Lens value and every matching Prism value."""
        return [found.value for found in self._read(structure) if found is not Absent]

    def to_list_checked(self, structure: Any) -> Maybe:
        """All-or-nothing read.

        Returns ``Present(values)`` only when every focus yields a value, and
        ``Absent`` as soon as one Prism focus does not match.
        """
        values = []
        for found in self._read(structure):
            if found is Absent:
                return Absent
            values.append(found.value)
        return Present(values)

    def preview_first(self, structure: Any) -> Maybe:
        """The first focus, in combine order, that yields a value."""
        for found in self._read(structure):
            if found is not Absent:
                return found
        return Absent

    def has_any(self, structure: Any) -> bool:
        return self.preview_first(structure) is not Absent

    def _read(self, structure: Any) -> Iterator[Maybe]:
        # Lazy so that the first-match reads stop early.
        for optic in self.foci:
            if isinstance(optic, Lens):
                yield Present(optic.view(structure))
            else:
                yield optic.preview(structure)
