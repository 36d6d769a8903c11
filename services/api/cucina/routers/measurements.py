from typing import Optional

from fastapi import APIRouter, Depends, status

from ..deps import get_kitchen
from ..schemas import ConversionIn, Measurement, NameIn
from ..services.kitchen import Kitchen
from ..services.unit_conversion import convertible_units

router = APIRouter()


@router.get("/", response_model=list[Measurement])
def list_measurements(q: Optional[str] = None, kitchen: Kitchen = Depends(get_kitchen)):
    return kitchen.list_measurements(q or "")


@router.post("/", response_model=Measurement, status_code=status.HTTP_201_CREATED)
def add_measurement(body: NameIn, kitchen: Kitchen = Depends(get_kitchen)):
    return kitchen.add_measurement(body.name)


@router.get("/{measurement_id}/convertible", response_model=list[Measurement])
def list_convertible(measurement_id: str, kitchen: Kitchen = Depends(get_kitchen)):
    """Units reachable from this one by a single authored edge."""
    kitchen.get_measurement(measurement_id)
    return convertible_units(measurement_id, kitchen.measurement_graph)


@router.patch("/{measurement_id}", response_model=Measurement)
def rename_measurement(measurement_id: str, body: NameIn, kitchen: Kitchen = Depends(get_kitchen)):
    return kitchen.rename_measurement(measurement_id, body.name)


@router.delete("/{measurement_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_measurement(measurement_id: str, kitchen: Kitchen = Depends(get_kitchen)):
    kitchen.delete_measurement(measurement_id)


@router.put("/{measurement_id}/conversions", response_model=Measurement)
def set_conversion(measurement_id: str, body: ConversionIn, kitchen: Kitchen = Depends(get_kitchen)):
    """Add or overwrite the directed edge ``measurement_id -> to_measurement_id``."""
    return kitchen.set_conversion(measurement_id, body.to_measurement_id, body.factor)


@router.delete("/{measurement_id}/conversions/{to_measurement_id}", response_model=Measurement)
def remove_conversion(measurement_id: str, to_measurement_id: str, kitchen: Kitchen = Depends(get_kitchen)):
    return kitchen.remove_conversion(measurement_id, to_measurement_id)
