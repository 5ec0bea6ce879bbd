# carit/routers/users.py
"""User profile endpoints: first-contact creation and profile read/write."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from carit.database import get_db
from carit.dependencies import get_user_id
from carit.schemas.common import SuccessOut
from carit.schemas.user import CreateUserIn, CreateUserOut, UserDataIn, UserDataOut
from carit.services.user_service import create_or_backfill, get_profile, update_user

router = APIRouter()


@router.post("/create-user", response_model=CreateUserOut, summary="Create user on first contact")
def create_user(body: CreateUserIn, user_id: str = Depends(get_user_id), db: Session = Depends(get_db)):
    """Idempotent: fills missing profile fields on repeat calls."""
    return {"message": create_or_backfill(db, user_id, body.name, body.email)}


@router.get("/get-user-data", response_model=UserDataOut)
def get_user_data(user_id: str = Depends(get_user_id), db: Session = Depends(get_db)):
    return get_profile(db, user_id)


@router.post("/set-user-data", response_model=SuccessOut)
def set_user_data(body: UserDataIn, user_id: str = Depends(get_user_id), db: Session = Depends(get_db)):
    update_user(db, user_id, body.model_dump(exclude_unset=True))
    return {"success": True}
