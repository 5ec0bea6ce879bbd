# carit/routers/garage.py
"""Garage endpoints: list, add, edit and remove the caller's vehicles."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from carit.database import get_db
from carit.dependencies import get_user_id
from carit.schemas.common import SuccessOut
from carit.schemas.garage import CarOut, GarageCarOut, GarageEditIn, GarageRemoveIn, VehicleIn
from carit.services.garage_service import add_vehicle, edit_vehicle, list_garage, remove_vehicle

router = APIRouter()


@router.get("/garage", response_model=list[CarOut], summary="Vehicles in the caller's garage")
def get_garage(user_id: str = Depends(get_user_id), db: Session = Depends(get_db)):
    return list_garage(db, user_id)


@router.post("/garage/add", response_model=GarageCarOut)
def add_to_garage(body: VehicleIn, user_id: str = Depends(get_user_id), db: Session = Depends(get_db)):
    car = add_vehicle(db, user_id, body.model_dump())
    return {"success": True, "car": car}


@router.post("/garage/edit", response_model=GarageCarOut)
def edit_garage_vehicle(body: GarageEditIn, user_id: str = Depends(get_user_id), db: Session = Depends(get_db)):
    """Only the caller's garage changes; other owners of the same vehicle are untouched."""
    car = edit_vehicle(db, user_id, body.carId, body.updates.model_dump(exclude_none=True))
    return {"success": True, "car": car}


@router.post("/garage/remove", response_model=SuccessOut)
def remove_from_garage(body: GarageRemoveIn, user_id: str = Depends(get_user_id), db: Session = Depends(get_db)):
    remove_vehicle(db, user_id, body.carId)
    return {"success": True}
