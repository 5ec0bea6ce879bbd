# carit/schemas/car_options.py
from pydantic import BaseModel
from typing import List


class CarOptionsOut(BaseModel):
    years: List[int]
    makes: List[str]
    models: List[str]
    trims: List[str]
