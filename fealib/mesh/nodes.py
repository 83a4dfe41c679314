"""
Node snapshots and degree-of-freedom conventions.

Nodes are owned by the mesh and referenced (not owned) by elements. A node
is an immutable snapshot: the solver publishes new unknowns by creating the
next version with :meth:`Node.updated`, never by mutating a node an element
may be reading.

DOF conventions:
    - Global, per node: [ux, uy, uz, rx, ry, rz]  (GlobalDof)
    - Element vectors/matrices are node-major: node k occupies
      [k * ndof, (k + 1) * ndof)
    - Element-local per-node orders are declared by each element type
      (LocalDof members)
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Optional

import numpy as np

from fealib.errors import DimensionMismatchError, InvalidIndexError


class CoordinateSystem(Enum):
    GLOBAL = "global"
    LOCAL = "local"


class GlobalDof(IntEnum):
    UX = 0
    UY = 1
    UZ = 2
    RX = 3
    RY = 4
    RZ = 5


class LocalDof(IntEnum):
    """Element-local DOF kinds (order within a node is set per element)."""
    U1 = 0
    U2 = 1
    U3 = 2
    R1 = 3
    R2 = 4
    R3 = 5


GLOBAL_DOFS_PER_NODE = len(GlobalDof)


@dataclass(frozen=True, eq=False)
class Node:
    """
    Immutable node snapshot.

    Attributes
    ----------
    id : int
        Node identity (mesh numbering).
    position : ndarray, shape (3,)
        Global coordinates (x, y, z).
    unknown : ndarray, shape (6,)
        Global-frame unknowns [ux, uy, uz, rx, ry, rz]. Default zero.
    local_frame : ndarray, shape (3, 3), optional
        Rows are the node's local axes in global coordinates. Only needed
        for ``get_unknown(CoordinateSystem.LOCAL)``.
    version : int
        Snapshot counter; incremented by :meth:`updated`.
    """
    id: int
    position: np.ndarray
    unknown: np.ndarray = field(default_factory=lambda: np.zeros(GLOBAL_DOFS_PER_NODE))
    local_frame: Optional[np.ndarray] = None
    version: int = 0

    def __post_init__(self):
        """Validate and freeze the arrays."""
        position = np.array(self.position, dtype=np.float64)
        if position.shape == (2,):
            position = np.append(position, 0.0)
        if position.shape != (3,):
            raise DimensionMismatchError(
                f"Node {self.id}: position must have 2 or 3 components, "
                f"got shape {position.shape}"
            )
        unknown = np.array(self.unknown, dtype=np.float64)
        if unknown.shape != (GLOBAL_DOFS_PER_NODE,):
            raise DimensionMismatchError(
                f"Node {self.id}: unknown must have {GLOBAL_DOFS_PER_NODE} "
                f"components, got shape {unknown.shape}"
            )
        position.flags.writeable = False
        unknown.flags.writeable = False
        object.__setattr__(self, "position", position)
        object.__setattr__(self, "unknown", unknown)

        if self.local_frame is not None:
            frame = np.array(self.local_frame, dtype=np.float64)
            if frame.shape != (3, 3):
                raise DimensionMismatchError(
                    f"Node {self.id}: local_frame must be 3x3, got {frame.shape}"
                )
            if not np.allclose(frame @ frame.T, np.eye(3), atol=1e-10):
                raise ValueError(f"Node {self.id}: local_frame is not orthonormal")
            frame.flags.writeable = False
            object.__setattr__(self, "local_frame", frame)

    def get_unknown(self, coordinate_system=CoordinateSystem.GLOBAL):
        """
        Nodal unknown vector in the requested coordinate system.

        Parameters
        ----------
        coordinate_system : CoordinateSystem
            ``GLOBAL`` returns [ux, uy, uz, rx, ry, rz]; ``LOCAL`` rotates
            translations and rotations into the node's local frame
            (identity if none is set).

        Returns
        -------
        u : ndarray, shape (6,)
            A copy; callers may modify it freely.
        """
        if coordinate_system is CoordinateSystem.GLOBAL:
            return self.unknown.copy()
        if coordinate_system is CoordinateSystem.LOCAL:
            if self.local_frame is None:
                return self.unknown.copy()
            r = self.local_frame
            return np.concatenate((r @ self.unknown[:3], r @ self.unknown[3:]))
        raise InvalidIndexError(
            f"Illegal coordinate system {coordinate_system!r} for node {self.id}"
        )

    def updated(self, unknown):
        """Next snapshot of this node carrying new global unknowns."""
        return Node(
            id=self.id,
            position=self.position,
            unknown=unknown,
            local_frame=self.local_frame,
            version=self.version + 1,
        )
