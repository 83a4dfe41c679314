"""Node snapshots and DOF conventions."""

from .nodes import Node, CoordinateSystem, GlobalDof, LocalDof
