"""
Router for unit conversion utilities.
"""

from fastapi import APIRouter, Depends

from ..deps import get_kitchen
from ..schemas import UnitConvertRequest, UnitConvertResponse
from ..services.kitchen import Kitchen
from ..services.unit_conversion import convert

router = APIRouter()


@router.post("/convert", response_model=UnitConvertResponse)
def convert_units(req: UnitConvertRequest, kitchen: Kitchen = Depends(get_kitchen)):
    """
    Convert a quantity along one direct edge.

    ``qty`` is null and ``convertible`` false when no edge exists.
    """
    qty = convert(req.from_measurement_id, req.to_measurement_id, req.qty, kitchen.measurement_graph)
    return UnitConvertResponse(
        qty=qty,
        measurement_id=req.to_measurement_id,
        convertible=qty is not None,
    )
