# club/schemas/run.py
from pydantic import BaseModel


class TableRevenueOut(BaseModel):
    table: int
    income: int
    usage: str          # HH:MM, unrounded


class RunOut(BaseModel):
    lines: list[str]
    revenue: list[TableRevenueOut]
