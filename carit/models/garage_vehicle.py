# carit/models/garage_vehicle.py
"""
Garage membership: the user ↔ catalog vehicle relation.
Row order (id) is the order vehicles were added to the garage.
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from carit.database import Base


class GarageVehicle(Base):
    __tablename__ = "garage_vehicles"
    __table_args__ = (
        UniqueConstraint("user_id", "vehicle_id", name="uq_garage_user_vehicle"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(255), ForeignKey("users.id"), nullable=False, index=True)
    vehicle_id = Column(String(32), ForeignKey("catalog_vehicles.id"), nullable=False, index=True)
    added_at = Column(DateTime)

    vehicle = relationship("CatalogVehicle", lazy="joined")

    def __repr__(self):
        return f"<GarageVehicle user={self.user_id} vehicle={self.vehicle_id}>"
