# carit/models/user.py
"""
Users table: one row per authenticated subject.
The row is the user "document": profile fields plus the embedded flowchart history.
Garage membership lives in garage_vehicles.
"""

from sqlalchemy import Column, Integer, String, DateTime, Text, JSON
from carit.database import Base

# Wire (JSON) field name → column attribute
USER_FIELDS = {
    "name": "name",
    "email": "email",
    "flowcharts": "flowcharts",
    "attitude": "attitude",
    "crashOut": "crash_out",
    "experienceLevel": "experience_level",
}


class User(Base):
    __tablename__ = "users"

    id = Column(String(255), primary_key=True)   # external auth subject, immutable
    name = Column(String(255))
    email = Column(String(255))
    attitude = Column(Text)
    crash_out = Column(Integer)
    experience_level = Column(Integer)
    flowcharts = Column(JSON)                     # oldest first, capped by MAX_FLOWCHARTS
    version_id = Column(Integer, nullable=False)
    created_at = Column(DateTime)
    updated_at = Column(DateTime)

    __mapper_args__ = {"version_id_col": version_id}

    def get_field(self, field: str):
        return getattr(self, USER_FIELDS[field])

    def set_field(self, field: str, value):
        setattr(self, USER_FIELDS[field], value)

    def __repr__(self):
        return f"<User {self.id} flowcharts={len(self.flowcharts or [])}>"
