# carit/services/catalog_service.py
"""
Vehicle catalog: deduplicated (year, make, model, trim) entries shared across garages.
Used by garage_service, car_options_service and scripts/setup/seed_catalog.py.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from carit.exceptions import ConflictError, InvalidArgumentError
from carit.models.catalog_vehicle import CatalogVehicle, new_vehicle_id, normalize_vehicle_id
from carit.models.garage_vehicle import GarageVehicle
from carit.utils.logger import get_logger

logger = get_logger(__name__)

CATALOG_FIELDS = ("year", "make", "model", "trim")


def normalize_year(year) -> int:
    if year is None or isinstance(year, bool):
        raise InvalidArgumentError("Missing required fields")
    if isinstance(year, int):
        return year
    if isinstance(year, float) and year.is_integer():
        return int(year)
    try:
        return int(str(year).strip())
    except ValueError:
        raise InvalidArgumentError(f"Invalid year: {year!r}") from None


def normalize_description(year, make, model, trim=None) -> tuple:
    """Validate and canonicalise a vehicle tuple. trim defaults to ""."""
    make = str(make).strip() if make is not None else ""
    model = str(model).strip() if model is not None else ""
    if not make or not model:
        raise InvalidArgumentError("Missing required fields")
    trim = str(trim).strip() if trim is not None else ""
    return normalize_year(year), make, model, trim


def lookup_vehicle(db: Session, year: int, make: str, model: str, trim: str) -> Optional[CatalogVehicle]:
    return (
        db.query(CatalogVehicle)
        .filter(
            CatalogVehicle.year == year,
            CatalogVehicle.make == make,
            CatalogVehicle.model == model,
            CatalogVehicle.trim == trim,
        )
        .first()
    )


def find_or_create(db: Session, year, make, model, trim=None) -> CatalogVehicle:
    """
    Return the catalog entry for the tuple, inserting it if needed. Commits immediately.
    Must be called with no other pending changes in the session: a losing insert race
    rolls the session back before re-fetching the winner's row.
    """
    year, make, model, trim = normalize_description(year, make, model, trim)

    vehicle = lookup_vehicle(db, year, make, model, trim)
    if vehicle is not None:
        return vehicle

    vehicle = CatalogVehicle(id=new_vehicle_id(), year=year, make=make, model=model,
                             trim=trim, created_at=datetime.utcnow())
    db.add(vehicle)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        vehicle = lookup_vehicle(db, year, make, model, trim)
        if vehicle is None:
            raise ConflictError("Vehicle could not be added to the catalog") from None
        logger.info(f"[Catalog] Concurrent insert for {year} {make} {model} {trim!r}, reusing {vehicle.id}")
        return vehicle

    logger.info(f"[Catalog] Created {vehicle.id}: {year} {make} {model} {trim!r}")
    return vehicle


def get_vehicle(db: Session, vehicle_id) -> Optional[CatalogVehicle]:
    vehicle_id = normalize_vehicle_id(vehicle_id)
    if not vehicle_id:
        return None
    return db.get(CatalogVehicle, vehicle_id)


def reference_count(db: Session, vehicle_id: str) -> int:
    """Number of garages currently holding the entry. Flush pending changes first."""
    return db.query(GarageVehicle).filter(GarageVehicle.vehicle_id == vehicle_id).count()


def delete_if_orphaned(db: Session, vehicle_id: str) -> bool:
    """Delete the entry when no garage references it. Does not commit."""
    if reference_count(db, vehicle_id):
        return False
    vehicle = db.get(CatalogVehicle, vehicle_id)
    if vehicle is None:
        return False
    db.delete(vehicle)
    logger.info(f"[Catalog] Deleted orphaned entry {vehicle_id}")
    return True


def list_distinct(db: Session, field: str, filters: Optional[dict] = None) -> list:
    """
    Sorted distinct non-empty values of one catalog field among entries matching filters.
    Years sort newest first, text fields alphabetically.
    """
    if field not in CATALOG_FIELDS:
        raise InvalidArgumentError(f"Unknown catalog field: {field}")

    q = db.query(getattr(CatalogVehicle, field)).distinct()
    for key, value in (filters or {}).items():
        if key not in CATALOG_FIELDS:
            raise InvalidArgumentError(f"Unknown catalog field: {key}")
        if value is None or value == "":
            continue
        if key == "year":
            value = normalize_year(value)
        q = q.filter(getattr(CatalogVehicle, key) == value)

    values = [row[0] for row in q.all() if row[0]]
    return sorted(values, reverse=(field == "year"))
