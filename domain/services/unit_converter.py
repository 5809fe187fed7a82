"""
Unit conversion between display units and canonical SI values.

Part of RIT-14: Canonical SI storage for counter targets and responses

Counter targets and counter responses are stored in SI. The converter maps a
user-entered value in a chosen PhysicalQuantity to SI and back:

    to_si(v, q)   = v * q.scale + q.offset
    from_si(c, q) = (c - q.offset) / q.scale

Usage:
    >>> converter = UnitConverter()
    >>> converter.to_si(5, "km")
    5000.0
    >>> converter.from_si(5000, "mi")
    3.106855961...
"""

import math
from typing import Dict, Iterable, List, Optional, Union

from domain.exceptions import InvalidQuantityError
from domain.models.quantity import DEFAULT_QUANTITIES, PhysicalQuantity, build_catalog

QuantityRef = Union[str, PhysicalQuantity]


def _check_quantity(quantity: PhysicalQuantity) -> PhysicalQuantity:
    if not (quantity.scale > 0) or math.isinf(quantity.scale):
        raise InvalidQuantityError(
            f"Quantity '{quantity.key}' has a non-positive scale factor",
            quantity=quantity.key,
        )
    return quantity


def _check_value(value: float) -> float:
    if value is None or isinstance(value, bool) or math.isnan(value) or math.isinf(value):
        raise InvalidQuantityError(f"Value {value!r} is not a finite number")
    return float(value)


def to_si(value: float, quantity: PhysicalQuantity) -> float:
    """Convert a display value to its canonical SI value."""
    q = _check_quantity(quantity)
    return _check_value(value) * q.scale + q.offset


def from_si(canonical_value: float, quantity: PhysicalQuantity) -> float:
    """Convert a canonical SI value to the quantity's display unit."""
    q = _check_quantity(quantity)
    return (_check_value(canonical_value) - q.offset) / q.scale


class UnitConverter:
    """
    Catalog-backed converter.

    Quantities may be passed as PhysicalQuantity instances or by key; keys
    are resolved against the catalog the converter was built with.
    """

    def __init__(self, quantities: Optional[Iterable[PhysicalQuantity]] = None) -> None:
        self._catalog: Dict[str, PhysicalQuantity] = build_catalog(
            DEFAULT_QUANTITIES if quantities is None else quantities
        )

    def resolve(self, quantity: QuantityRef) -> PhysicalQuantity:
        """Resolve a key or quantity to a valid PhysicalQuantity."""
        if isinstance(quantity, PhysicalQuantity):
            return _check_quantity(quantity)
        found = self._catalog.get(quantity) if quantity else None
        if found is None:
            raise InvalidQuantityError(f"Unknown quantity '{quantity}'", quantity=quantity)
        return _check_quantity(found)

    def knows(self, key: str) -> bool:
        return key in self._catalog

    def to_si(self, value: float, quantity: QuantityRef) -> float:
        return to_si(value, self.resolve(quantity))

    def from_si(self, canonical_value: float, quantity: QuantityRef) -> float:
        return from_si(canonical_value, self.resolve(quantity))

    def convert(self, value: float, from_quantity: QuantityRef, to_quantity: QuantityRef) -> float:
        """
        Convert between two units of the same dimension.

        Raises:
            InvalidQuantityError: If either unit is unknown or the dimensions differ.
        """
        source = self.resolve(from_quantity)
        target = self.resolve(to_quantity)
        if source.dimension != target.dimension:
            raise InvalidQuantityError(
                f"Cannot convert {source.dimension.value} to {target.dimension.value}",
                from_quantity=source.key,
                to_quantity=target.key,
            )
        return from_si(to_si(value, source), target)

    def list_quantities(self) -> List[PhysicalQuantity]:
        return sorted(self._catalog.values(), key=lambda q: (q.dimension.value, q.key))
