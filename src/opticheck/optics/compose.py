"""Sequential composition across optic kinds.

The result has the weakest kind among its parts:

    Iso  . Iso   -> Iso
    Lens . Iso   -> Lens     (and Iso . Lens)
    Lens . Lens  -> Lens
    Prism . any  -> Prism    (and any . Prism)

Composition is associative, and ``compose()`` with no arguments is the
identity Iso. Traversals relate several foci side by side and cannot be
composed in sequence.
"""

from typing import Any

from opticheck.core.types import Maybe
from opticheck.optics.iso import Iso
from opticheck.optics.lens import Lens, _compose_lenses
from opticheck.optics.prism import Prism

_RANK = {Iso: 0, Lens: 1, Prism: 2}

_IDENTITY = Iso.identity()


def compose(*optics: Any) -> Iso | Lens | Prism:
    """Compose optics outermost first.

    Accepts either several optics or a single list of them.
    """
    if len(optics) == 1 and isinstance(optics[0], (list, tuple)):
        optics = tuple(optics[0])

    for optic in optics:
        if type(optic) not in _RANK:
            raise TypeError(
                f"cannot compose {optic!r}: expected a Lens, Prism or Iso"
            )

    result: Iso | Lens | Prism = _IDENTITY
    for optic in optics:
        result = _compose_pair(result, optic)
    return result


def _compose_pair(outer: Any, inner: Any) -> Iso | Lens | Prism:
    # The seed is dropped so labels stay readable.
    if outer is _IDENTITY:
        return inner

    rank = max(_RANK[type(outer)], _RANK[type(inner)])

    if rank == 0:
        return _compose_isos(outer, inner)
    if rank == 1:
        return _compose_lenses(_as_lens(outer), _as_lens(inner))
    return _compose_prisms(outer.as_prism(), inner.as_prism())


def _as_lens(optic: Lens | Iso) -> Lens:
    if isinstance(optic, Iso):
        return optic.as_lens()
    return optic


def _compose_isos(outer: Iso, inner: Iso) -> Iso:
    return Iso(
        lambda s: inner.forward(outer.forward(s)),
        lambda a: outer.backward(inner.backward(a)),
        label=f"{outer.label}.{inner.label}",
    )


def _compose_prisms(outer: Prism, inner: Prism) -> Prism:
    def match(structure: Any) -> Maybe:
        return outer.matcher(structure).bind(inner.matcher)

    def build(value: Any) -> Any:
        return outer.builder(inner.builder(value))

    return Prism(match, build, label=f"{outer.label}.{inner.label}")
