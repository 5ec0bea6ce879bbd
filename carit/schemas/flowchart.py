# carit/schemas/flowchart.py
from pydantic import BaseModel
from typing import Any, Optional


class FlowchartOut(BaseModel):
    flowchart: Any
    vehicle: Any
    issues: Any
    responses: Any


class DeleteFlowchartIn(BaseModel):
    index: Optional[int] = None


class GenerateFlowchartIn(BaseModel):
    vehicle: Any
    issues: str
    responses: Any


class GenerateQuestionsIn(BaseModel):
    vehicle: Any
    issues: str
