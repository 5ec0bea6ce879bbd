# carit/routers/car_options.py
"""Cascading vehicle-selection dropdown options."""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import sessionmaker
from carit.database import get_session_factory
from carit.schemas.car_options import CarOptionsOut
from carit.services.car_options_service import get_car_options

router = APIRouter()


@router.get("/car-options", response_model=CarOptionsOut)
async def car_options(
    year: Optional[str] = None,
    make: Optional[str] = None,
    model: Optional[str] = None,
    session_factory: sessionmaker = Depends(get_session_factory),
):
    """Trims are only returned when year, make and model are all given."""
    filters = {"year": year, "make": make, "model": model}
    return await get_car_options(filters, session_factory=session_factory)
