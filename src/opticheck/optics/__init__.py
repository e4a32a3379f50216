"""Optics: composable accessors used to project parts of a value.

- Lens: total focus, raises StructuralError when the focus is absent
- Prism: partial focus, ``Absent`` when the focus is missing
- Traversal: several Lens/Prism foci read together
- Iso: lossless two-way transformation
"""

from opticheck.optics.compose import compose
from opticheck.optics.iso import Iso
from opticheck.optics.lens import Lens
from opticheck.optics.prism import Prism
from opticheck.optics.traversal import Traversal

__all__ = [
    "Iso",
    "Lens",
    "Prism",
    "Traversal",
    "compose",
]
