# carit/models/catalog_vehicle.py
"""
Vehicle catalog: one row per distinct (year, make, model, trim).
Rows are shared by every garage that references the same tuple.
The unique constraint is what keeps concurrent find_or_create calls from duplicating entries.
"""

import uuid

from sqlalchemy import Column, Integer, String, DateTime, UniqueConstraint
from carit.database import Base


def new_vehicle_id() -> str:
    return uuid.uuid4().hex


def normalize_vehicle_id(value) -> str:
    """
    Canonical string form of a vehicle id.
    Accepts uuid.UUID objects and hex strings with or without dashes, any case.
    Returns "" for empty input so callers can treat it as missing.
    """
    if value is None:
        return ""
    if isinstance(value, uuid.UUID):
        return value.hex
    text = str(value).strip().lower()
    try:
        return uuid.UUID(text).hex
    except ValueError:
        return text


class CatalogVehicle(Base):
    __tablename__ = "catalog_vehicles"
    __table_args__ = (
        UniqueConstraint("year", "make", "model", "trim", name="uq_catalog_vehicle_tuple"),
    )

    id = Column(String(32), primary_key=True, default=new_vehicle_id)
    year = Column(Integer, nullable=False, index=True)
    make = Column(String(100), nullable=False, index=True)
    model = Column(String(100), nullable=False)
    trim = Column(String(100), nullable=False, default="")   # "" is a real trim, not unset
    created_at = Column(DateTime)

    def to_dict(self) -> dict:
        return {
            "_id": self.id,
            "year": self.year,
            "make": self.make,
            "model": self.model,
            "trim": self.trim,
        }

    def __repr__(self):
        return f"<CatalogVehicle {self.id} {self.year} {self.make} {self.model} {self.trim!r}>"
