"""
Element-type registry and factory.

    from fealib.elements.library import create_element
    plate = create_element("plate_tri6", nodes, material, Section.plate(0.01))
"""

from fealib.elements.membrane_tri6 import MembraneTri6
from fealib.elements.plate_tri6 import MindlinPlateTri6
from fealib.errors import UnsupportedConfigurationError

# element type name -> formulation class
ELEMENT_TYPES = {
    MindlinPlateTri6.element_type: MindlinPlateTri6,
    MembraneTri6.element_type: MembraneTri6,
}


def _lookup(element_type):
    try:
        return ELEMENT_TYPES[element_type]
    except KeyError:
        raise UnsupportedConfigurationError(
            f"Unknown element type '{element_type}'. "
            f"Available: {sorted(ELEMENT_TYPES)}"
        ) from None


def create_element(element_type, nodes, material, section, temperature_loads=()):
    """
    Build an element formulation by type name.

    Raises
    ------
    UnsupportedConfigurationError
        Unknown element type.
    InvalidIndexError
        Node count does not match the element type.
    """
    return _lookup(element_type)(nodes, material, section, temperature_loads)


def get_element_meta(element_type):
    """Node count, local DOF order and recoverable forces of an element type."""
    cls = _lookup(element_type)
    return {
        "n_nodes": cls.n_nodes,
        "local_dofs": cls.local_dofs,
        "supported_forces": cls.supported_forces,
    }
