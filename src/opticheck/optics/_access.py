"""Shape-preserving read/replace helpers shared by the optics.

Supported containers:
- Mappings (dict and subclasses, other Mapping types)
- Sequences addressed by integer position (list, tuple, namedtuple)
- Objects addressed by attribute (dataclasses, namedtuples, plain objects)
"""

import copy
import dataclasses
from collections.abc import Mapping, MutableMapping, MutableSequence, Sequence
from typing import Any

# Scalars never expose fields, even though they have attributes.
_SCALARS = (str, bytes, bytearray, int, float, complex, bool, type(None))

MISSING = object()


def lookup(structure: Any, key: Any) -> Any:
    """Return the value at ``key`` or ``MISSING`` when there is none."""
    if isinstance(structure, Mapping):
        if key in structure:
            return structure[key]
        return MISSING

    if _is_position(structure, key):
        if -len(structure) <= key < len(structure):
            return structure[key]
        return MISSING

    if isinstance(key, str) and has_field(structure, key):
        return getattr(structure, key, MISSING)

    return MISSING


def has_field(structure: Any, name: str) -> bool:
    """Whether ``name`` is a data field of ``structure``.

    Methods and other class-level members are not fields, and neither are the
    attributes of scalars and plain sequences.
    """
    if isinstance(structure, (_SCALARS, type)):
        return False
    if dataclasses.is_dataclass(structure):
        return name in {f.name for f in dataclasses.fields(structure)}
    if isinstance(structure, tuple) and hasattr(structure, "_fields"):
        return name in structure._fields
    if isinstance(structure, Sequence):
        return False
    if name in getattr(structure, "__dict__", {}):
        return True
    return any(name in _slots(cls) for cls in type(structure).__mro__)


def _slots(cls: type) -> tuple[str, ...]:
    slots = cls.__dict__.get("__slots__", ())
    if isinstance(slots, str):
        return (slots,)
    return tuple(slots)


def replace(structure: Any, key: Any, value: Any) -> Any:
    """Return a copy of ``structure`` with ``key`` set to ``value``.

    The concrete type of ``structure`` is kept. The caller is responsible for
    checking that ``key`` exists first.
    """
    if isinstance(structure, MutableMapping):
        updated = copy.copy(structure)
        updated[key] = value
        return updated

    if isinstance(structure, Mapping):
        return type(structure)({**structure, key: value})

    if _is_position(structure, key):
        if isinstance(structure, MutableSequence):
            updated = copy.copy(structure)
            updated[key] = value
            return updated
        items = list(structure)
        items[key] = value
        if hasattr(structure, "_make"):
            return structure._make(items)
        return type(structure)(items)

    if dataclasses.is_dataclass(structure) and not isinstance(structure, type):
        return dataclasses.replace(structure, **{key: value})

    if isinstance(structure, tuple) and hasattr(structure, "_replace"):
        return structure._replace(**{key: value})

    updated = copy.copy(structure)
    setattr(updated, key, value)
    return updated


def _is_position(structure: Any, key: Any) -> bool:
    return (
        isinstance(key, int)
        and not isinstance(key, bool)
        and isinstance(structure, Sequence)
        and not isinstance(structure, (str, bytes, bytearray))
    )
