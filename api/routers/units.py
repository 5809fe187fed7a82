"""
Units router.

Part of RIT-16: Physical quantity catalog

- GET /units - the quantity catalog, optionally filtered by dimension
- GET /units/convert - convert a value between two units of one dimension
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from api.deps import get_unit_converter
from api.errors import error_body, status_for
from application.use_cases.base import UseCaseResult
from domain.exceptions import InvalidQuantityError
from domain.models import Dimension
from domain.services import UnitConverter

router = APIRouter(
    tags=["Units"],
)


@router.get("/units")
def list_units_endpoint(
    dimension: Optional[Dimension] = Query(default=None),
    converter: UnitConverter = Depends(get_unit_converter),
):
    """List display units with their SI conversion factors."""
    units = [
        q.model_dump(mode="json")
        for q in converter.list_quantities()
        if dimension is None or q.dimension == dimension
    ]
    return {"success": True, "units": units, "count": len(units)}


@router.get("/units/convert")
def convert_units_endpoint(
    value: float = Query(...),
    from_unit: str = Query(..., alias="from"),
    to_unit: str = Query(..., alias="to"),
    converter: UnitConverter = Depends(get_unit_converter),
):
    """Convert value from one unit to another through SI."""
    try:
        converted = converter.convert(value, from_unit, to_unit)
    except InvalidQuantityError as e:
        body = error_body(UseCaseResult.from_error(e))
        return JSONResponse(status_code=status_for(e.kind), content=body)

    return {
        "success": True,
        "value": value,
        "from": from_unit,
        "to": to_unit,
        "result": converted,
    }
