# carit/services/car_options_service.py
"""
Cascading dropdown options for vehicle selection: year → make → model → trim.
Each level is constrained by the selections above it; the four lookups are independent
reads and run in parallel, each on its own session.
"""

import asyncio
from typing import Optional

from carit.database import SessionLocal
from carit.services.catalog_service import list_distinct, normalize_year
from carit.utils.logger import get_logger

logger = get_logger(__name__)

FILTER_FIELDS = ("year", "make", "model")


def _distinct(session_factory, field: str, filters: dict) -> list:
    db = session_factory()
    try:
        return list_distinct(db, field, filters)
    finally:
        db.close()


async def _no_values() -> list:
    return []


async def get_car_options(filters: Optional[dict] = None, session_factory=SessionLocal) -> dict:
    """
    filters: optional {year, make, model}. Empty values count as not selected.
    Trims are only listed once year, make and model are all selected.
    """
    selected = {
        key: value for key, value in (filters or {}).items()
        if key in FILTER_FIELDS and value is not None and value != ""
    }
    if "year" in selected:
        selected["year"] = normalize_year(selected["year"])

    def above(*fields):
        return {key: selected[key] for key in fields if key in selected}

    def lookup(field, constraints):
        return asyncio.to_thread(_distinct, session_factory, field, constraints)

    trims = (
        lookup("trim", above("year", "make", "model"))
        if all(key in selected for key in FILTER_FIELDS)
        else _no_values()
    )
    years, makes, models, trims = await asyncio.gather(
        lookup("year", {}),
        lookup("make", above("year")),
        lookup("model", above("year", "make")),
        trims,
    )
    logger.debug(f"[CarOptions] {selected} → {len(years)} years, {len(makes)} makes, "
                 f"{len(models)} models, {len(trims)} trims")
    return {"years": years, "makes": makes, "models": models, "trims": trims}
