from fastapi import APIRouter
from pydantic import BaseModel, Field
from typing import Any, Dict, List

from app.api.v1.datasets import ChartModel
from insights.profile import classify_columns, profile
from insights.table import Table


router = APIRouter()


class ProfileRequest(BaseModel):
    """Rows to chart without uploading or storing them."""

    rows: List[Dict[str, Any]] = Field(
        ...,
        description="JSON array of objects; keys are column names.",
    )


class ColumnModel(BaseModel):
    name: str
    role: str


class ProfileResponse(BaseModel):
    columns: List[ColumnModel]
    charts: List[ChartModel]


@router.post("", response_model=ProfileResponse)
async def profile_rows(payload: ProfileRequest) -> ProfileResponse:
    """Classify columns and pick charts for ad-hoc rows. An empty list yields no charts."""
    table = Table.from_records(payload.rows)
    return ProfileResponse(
        columns=[ColumnModel(name=c.name, role=c.role.value) for c in classify_columns(table)],
        charts=[ChartModel(**chart.to_dict()) for chart in profile(table)],
    )
