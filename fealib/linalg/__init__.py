"""Dense linear-algebra kernel: access, arithmetic, transforms, condensation."""

from .dense import (
    add,
    add_entry,
    determinant,
    get_entry,
    get_submatrix,
    invert,
    is_symmetric,
    mirror,
    multiply,
    scale,
    set_entry,
    set_submatrix,
    subtract,
    transpose,
)
from .transform import TransformDirection, transform, transform_vector
from .condensation import condense, expand_condensed, recover_eliminated
