# carit/services/garage_service.py
"""
Per-user garage: the user ↔ catalog vehicle relation.

Catalog entries are shared, so a garage never mutates or deletes an entry another user
still holds:
  - edit is copy-on-write: the caller's membership is repointed to the entry for the
    new tuple, other owners keep the old one
  - remove detaches the caller's membership; the entry is deleted only once no garage
    references it
"""

from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from carit.exceptions import ForbiddenError, InvalidArgumentError
from carit.models.catalog_vehicle import normalize_vehicle_id
from carit.models.garage_vehicle import GarageVehicle
from carit.services.catalog_service import CATALOG_FIELDS, delete_if_orphaned, find_or_create
from carit.services.user_service import require_user
from carit.utils.logger import get_logger

logger = get_logger(__name__)


def _membership(db: Session, user_id: str, vehicle_id: str):
    return (
        db.query(GarageVehicle)
        .filter(GarageVehicle.user_id == user_id, GarageVehicle.vehicle_id == vehicle_id)
        .first()
    )


def _owned_membership(db: Session, user_id: str, car_id) -> GarageVehicle:
    """Ownership check. Raises ForbiddenError when car_id is not in the user's garage."""
    vehicle_id = normalize_vehicle_id(car_id)
    if not user_id or not vehicle_id:
        raise InvalidArgumentError()
    require_user(db, user_id)

    membership = _membership(db, user_id, vehicle_id)
    if membership is None:
        logger.warning(f"[Garage] {user_id} does not own vehicle {vehicle_id}")
        raise ForbiddenError()
    return membership


def list_garage(db: Session, user_id: str) -> list:
    """Hydrated garage entries in the order they were added. Unknown users have an empty garage."""
    if not user_id:
        raise InvalidArgumentError()
    rows = (
        db.query(GarageVehicle)
        .filter(GarageVehicle.user_id == user_id)
        .order_by(GarageVehicle.id)
        .all()
    )
    return [row.vehicle.to_dict() for row in rows if row.vehicle is not None]


def add_vehicle(db: Session, user_id: str, description: dict) -> dict:
    """Add a vehicle (creating its catalog entry if needed). Adding the same tuple twice is a no-op."""
    if not user_id or not description:
        raise InvalidArgumentError()
    require_user(db, user_id)

    vehicle = find_or_create(db, description.get("year"), description.get("make"),
                             description.get("model"), description.get("trim"))
    vehicle_id = vehicle.id

    if _membership(db, user_id, vehicle_id) is not None:
        logger.debug(f"[Garage] {user_id} already has {vehicle_id}")
        return vehicle.to_dict()

    db.add(GarageVehicle(user_id=user_id, vehicle_id=vehicle_id, added_at=datetime.utcnow()))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        # A concurrent add of the same vehicle is fine; anything else is not
        if _membership(db, user_id, vehicle_id) is None:
            raise
        logger.debug(f"[Garage] Concurrent add of {vehicle_id} for {user_id}")
    else:
        logger.info(f"[Garage] {user_id} added {vehicle_id}")

    return vehicle.to_dict()


def edit_vehicle(db: Session, user_id: str, car_id, updates: dict) -> dict:
    """
    Change year/make/model/trim of a garage vehicle for this user only.
    Returns the entry the user's garage now points at.
    """
    if not updates:
        raise InvalidArgumentError("No updates supplied")
    unknown = set(updates) - set(CATALOG_FIELDS)
    if unknown:
        raise InvalidArgumentError(f"Unknown vehicle fields: {', '.join(sorted(unknown))}")
    supplied = {key: value for key, value in updates.items() if value is not None}
    if not supplied:
        raise InvalidArgumentError("No updates supplied")

    membership = _owned_membership(db, user_id, car_id)
    current = membership.vehicle
    old_id = current.id
    merged = {field: getattr(current, field) for field in CATALOG_FIELDS}
    merged.update(supplied)

    target = find_or_create(db, merged["year"], merged["make"], merged["model"], merged["trim"])
    if target.id == old_id:
        return target.to_dict()

    # find_or_create committed; re-read the membership in case it changed meanwhile
    membership = _membership(db, user_id, old_id)
    if membership is None:
        # The target may have been created just for this edit
        delete_if_orphaned(db, target.id)
        db.commit()
        logger.info(f"[Garage] {user_id} lost {old_id} during edit")
        raise ForbiddenError()

    if _membership(db, user_id, target.id) is not None:
        db.delete(membership)
    else:
        membership.vehicle = target
    db.flush()
    delete_if_orphaned(db, old_id)
    db.commit()

    logger.info(f"[Garage] {user_id} edited {old_id} → {target.id}")
    return target.to_dict()


def remove_vehicle(db: Session, user_id: str, car_id) -> bool:
    """
    Detach a vehicle from the user's garage. Returns True when the catalog entry was
    deleted as well (nobody else referenced it).
    """
    membership = _owned_membership(db, user_id, car_id)
    vehicle_id = membership.vehicle_id

    db.delete(membership)
    db.flush()
    deleted = delete_if_orphaned(db, vehicle_id)
    db.commit()

    logger.info(f"[Garage] {user_id} removed {vehicle_id} (catalog entry deleted={deleted})")
    return deleted
