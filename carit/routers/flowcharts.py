# carit/routers/flowcharts.py
"""Flowchart history endpoints + generation through the external generator."""

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session
from carit.database import get_db
from carit.dependencies import get_user_id
from carit.schemas.flowchart import DeleteFlowchartIn, FlowchartOut, GenerateFlowchartIn, GenerateQuestionsIn
from carit.schemas.common import SuccessOut
from carit.services.flowchart_generator import FlowchartGenerator, get_flowchart_generator
from carit.services.flowchart_service import (
    append_flowchart,
    check_flowchart_context,
    delete_flowchart,
    list_flowcharts,
)
from carit.services.user_service import require_user

router = APIRouter()


@router.get("/get-flowcharts", response_model=list[FlowchartOut], summary="Saved flowcharts, oldest first")
def get_flowcharts(user_id: str = Depends(get_user_id), db: Session = Depends(get_db)):
    return list_flowcharts(db, user_id)


@router.post("/delete-flowchart", response_model=SuccessOut)
def delete_flowchart_at(body: DeleteFlowchartIn, user_id: str = Depends(get_user_id), db: Session = Depends(get_db)):
    delete_flowchart(db, user_id, body.index)
    return {"success": True}


@router.post("/gen-questions", response_class=PlainTextResponse)
def generate_questions(
    body: GenerateQuestionsIn,
    user_id: str = Depends(get_user_id),
    generator: FlowchartGenerator = Depends(get_flowchart_generator),
):
    """Follow-up questions for the reported issue. Nothing is saved."""
    return generator.generate_questions(body.vehicle, body.issues)


@router.post("/gen-flowchart", response_class=PlainTextResponse)
def generate_flowchart(
    body: GenerateFlowchartIn,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
    generator: FlowchartGenerator = Depends(get_flowchart_generator),
):
    """Generate a flowchart for the diagnostic session and save it to the caller's history."""
    check_flowchart_context(user_id, body.vehicle, body.issues, body.responses)
    require_user(db, user_id)

    flowchart = generator.generate(body.vehicle, body.issues, body.responses)
    append_flowchart(db, user_id, flowchart, body.vehicle, body.issues, body.responses)
    return flowchart
