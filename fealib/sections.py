"""Section geometry keyed by named dimension slots."""

from dataclasses import dataclass, field
from enum import IntEnum
from types import MappingProxyType
from typing import Mapping

from fealib.errors import InvalidIndexError


class SectionDimension(IntEnum):
    THICKNESS = 0
    WIDTH = 1
    HEIGHT = 2


@dataclass(frozen=True)
class Section:
    """
    Immutable set of section dimensions.

    Example
    -------
    >>> plate = Section.plate(0.02)
    >>> plate.get_dimension(SectionDimension.THICKNESS)
    0.02
    """
    dimensions: Mapping[SectionDimension, float] = field(default_factory=dict)
    name: str = ""

    def __post_init__(self):
        dims = {}
        for slot, value in dict(self.dimensions).items():
            try:
                slot = SectionDimension(slot)
            except ValueError:
                raise InvalidIndexError(f"Unknown section dimension slot {slot!r}") from None
            if value <= 0.0:
                raise ValueError(
                    f"Section '{self.name}': {slot.name.lower()} must be positive, got {value}"
                )
            dims[slot] = float(value)
        object.__setattr__(self, "dimensions", MappingProxyType(dims))

    @classmethod
    def plate(cls, thickness, name="plate"):
        return cls({SectionDimension.THICKNESS: thickness}, name=name)

    def get_dimension(self, slot):
        try:
            return self.dimensions[SectionDimension(slot)]
        except (ValueError, KeyError):
            raise InvalidIndexError(
                f"Section '{self.name}' has no dimension {slot!r}"
            ) from None
