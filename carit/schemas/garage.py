# carit/schemas/garage.py
from pydantic import BaseModel, Field
from typing import Optional


class CarOut(BaseModel):
    id: str = Field(alias="_id")
    year: int
    make: str
    model: str
    trim: str

    class Config:
        populate_by_name = True


class VehicleIn(BaseModel):
    year: int
    make: str
    model: str
    trim: Optional[str] = None


class VehicleUpdate(BaseModel):
    year: Optional[int] = None
    make: Optional[str] = None
    model: Optional[str] = None
    trim: Optional[str] = None


class GarageEditIn(BaseModel):
    carId: str
    updates: VehicleUpdate


class GarageRemoveIn(BaseModel):
    carId: str


class GarageCarOut(BaseModel):
    success: bool = True
    car: CarOut
