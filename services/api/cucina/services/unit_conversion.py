"""
Unit Conversion Service for Cucina.

Converts quantities across the user-authored measurement graph. Every edge is
direct and directed: ``1 unit(from) = factor unit(to)``. There is no reverse
inference and no multi-hop search; a missing edge is reported as ``None``.
"""

from typing import Iterable, NamedTuple, Optional, Sequence, Union

from ..schemas import InventoryItem, Measurement

# --- Types ---

class Sufficiency(NamedTuple):
    has_enough: bool
    available: float


class MeasurementGraph:
    """Measurement definitions indexed by id, with their outgoing edges."""

    def __init__(self, measurements: Iterable[Measurement]):
        self._units: dict[str, Measurement] = {}
        self._edges: dict[str, dict[str, float]] = {}
        for m in measurements:
            self._units[m.id] = m
            # First authored edge wins if a target is listed twice
            edges: dict[str, float] = {}
            for c in m.conversions:
                edges.setdefault(c.to_measurement_id, c.factor)
            self._edges[m.id] = edges

    def __contains__(self, measurement_id: str) -> bool:
        return measurement_id in self._units

    def __len__(self) -> int:
        return len(self._units)

    def get(self, measurement_id: str) -> Optional[Measurement]:
        return self._units.get(measurement_id)

    def edge(self, from_id: str, to_id: str) -> Optional[float]:
        return self._edges.get(from_id, {}).get(to_id)

    def targets(self, from_id: str) -> list[str]:
        return list(self._edges.get(from_id, {}))


Measurements = Union[MeasurementGraph, Sequence[Measurement]]


def as_graph(measurements: Measurements) -> MeasurementGraph:
    if isinstance(measurements, MeasurementGraph):
        return measurements
    return MeasurementGraph(measurements)

# --- Core Functions ---

def convert(
    from_unit: str,
    to_unit: str,
    quantity: float,
    measurements: Measurements,
) -> Optional[float]:
    """Convert ``quantity`` along the direct edge ``from_unit -> to_unit``.

    Returns the quantity unchanged when both units are the same, and ``None``
    when no direct edge exists (including an unknown ``from_unit``).
    """
    if from_unit == to_unit:
        return quantity

    factor = as_graph(measurements).edge(from_unit, to_unit)
    if factor is None:
        return None
    return quantity * factor


def total_in_unit(
    ingredient_id: str,
    target_unit: str,
    lots: Iterable[InventoryItem],
    measurements: Measurements,
) -> float:
    """Sum every lot of an ingredient expressed in ``target_unit``.

    Lots that cannot be converted are left out of the total.
    """
    graph = as_graph(measurements)
    total = 0.0
    for lot in lots:
        if lot.ingredient_id != ingredient_id:
            continue
        converted = convert(lot.measurement_id, target_unit, lot.quantity, graph)
        if converted is not None:
            total += converted
    return total


def check_sufficiency(
    ingredient_id: str,
    required_unit: str,
    required_qty: float,
    lots: Iterable[InventoryItem],
    measurements: Measurements,
) -> Sufficiency:
    available = total_in_unit(ingredient_id, required_unit, lots, measurements)
    return Sufficiency(has_enough=available >= required_qty, available=available)


def shortfall(required_qty: float, available: float) -> float:
    return max(0.0, required_qty - available)


def convertible_units(measurement_id: str, measurements: Measurements) -> list[Measurement]:
    """Measurements reachable from ``measurement_id`` by one direct edge."""
    graph = as_graph(measurements)
    result = []
    for target in graph.targets(measurement_id):
        m = graph.get(target)
        if m is not None:
            result.append(m)
    return result
