import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, File, HTTPException, Response, UploadFile
from groq import APIError
from pydantic import BaseModel, Field

from insights import config
from insights.ingest import dataset_name_of, extension_of, parse
from insights.profile import ChartDescriptor, profile
from insights.store import StoredDataset, get_store
from insights.table import IngestionError, json_safe
from llm.dataset_chat_agent import DatasetChatAgent, build_data_context
from llm.prompts import build_welcome_message

logger = logging.getLogger(__name__)

router = APIRouter()


class ChartModel(BaseModel):
    """Renderer-ready chart: the data slice is already aggregated."""

    id: str
    kind: str = Field(..., description="One of 'bar', 'line', 'pie', 'scatter'.")
    title: str
    data: List[Dict[str, Any]]
    xField: Optional[str] = None
    yField: Optional[str] = None


class DatasetSummary(BaseModel):
    id: str
    name: str
    fileName: str
    fileType: str
    rowCount: int
    columnCount: int
    uploadedAt: datetime


class DatasetDetail(DatasetSummary):
    columns: List[str]
    preview: List[Dict[str, Any]]
    charts: List[ChartModel] = Field(default_factory=list)


class UploadResponse(DatasetDetail):
    welcome: str = Field(..., description="Opening chat message for the new dataset.")


class ChatRequest(BaseModel):
    question: str = Field(..., min_length=1, description="Free-text question about the dataset.")


class ChatResponse(BaseModel):
    answer: str


def _chart_models(charts: List[ChartDescriptor]) -> List[ChartModel]:
    return [ChartModel(**chart.to_dict()) for chart in charts]


def _summary_fields(dataset: StoredDataset) -> Dict[str, Any]:
    return {
        "id": dataset.id,
        "name": dataset.name,
        "fileName": dataset.file_name,
        "fileType": dataset.file_type,
        "rowCount": dataset.row_count,
        "columnCount": dataset.column_count,
        "uploadedAt": dataset.uploaded_at,
    }


def _get_or_404(dataset_id: str) -> StoredDataset:
    dataset = get_store().get(dataset_id)
    if dataset is None:
        raise HTTPException(status_code=404, detail="Dataset not found")
    return dataset


@router.post("", response_model=UploadResponse, status_code=201)
async def upload_dataset(file: UploadFile = File(...)) -> UploadResponse:
    """
    Parse, profile and store an uploaded CSV/TXT/JSON file.

    Nothing is stored unless parsing succeeds, so a bad upload never replaces
    what the user already has.
    """
    content = await file.read()
    if len(content) > config.MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=413,
            detail=f"File is larger than {config.MAX_UPLOAD_BYTES} bytes.",
        )

    file_name = file.filename or "uploaded_file"
    file_type = extension_of(file_name)
    try:
        table = parse(content, file_type)
    except IngestionError as exc:
        logger.warning("Rejected upload %s: %s", file_name, exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    charts = profile(table)
    dataset = get_store().save(
        name=dataset_name_of(file_name),
        file_name=file_name,
        file_type=file_type,
        table=table,
    )

    return UploadResponse(
        **_summary_fields(dataset),
        columns=dataset.columns,
        preview=json_safe(dataset.preview),
        charts=_chart_models(charts),
        welcome=build_welcome_message(dataset.name, dataset.row_count, dataset.column_count),
    )


@router.get("", response_model=List[DatasetSummary])
async def list_datasets() -> List[DatasetSummary]:
    return [DatasetSummary(**_summary_fields(d)) for d in get_store().list()]


@router.get("/{dataset_id}", response_model=DatasetDetail)
async def get_dataset(dataset_id: str) -> DatasetDetail:
    """Stored dataset with charts re-profiled from its stored rows."""
    dataset = _get_or_404(dataset_id)
    return DatasetDetail(
        **_summary_fields(dataset),
        columns=dataset.columns,
        preview=json_safe(dataset.preview),
        charts=_chart_models(profile(dataset.to_table())),
    )


@router.get("/{dataset_id}/charts", response_model=List[ChartModel])
async def get_dataset_charts(dataset_id: str) -> List[ChartModel]:
    dataset = _get_or_404(dataset_id)
    return _chart_models(profile(dataset.to_table()))


@router.delete("/{dataset_id}", status_code=204)
async def delete_dataset(dataset_id: str) -> Response:
    if not get_store().delete(dataset_id):
        raise HTTPException(status_code=404, detail="Dataset not found")
    return Response(status_code=204)


@router.post("/{dataset_id}/chat", response_model=ChatResponse)
async def chat_with_dataset(dataset_id: str, payload: ChatRequest) -> ChatResponse:
    """Ask the model a question about one stored dataset."""
    dataset = _get_or_404(dataset_id)
    agent = DatasetChatAgent()
    try:
        result = await agent.run(question=payload.question, data_context=build_data_context(dataset))
    except RuntimeError as exc:
        # Likely configuration issue such as missing API key
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    except APIError as exc:
        logger.exception("Model call failed for dataset %s", dataset_id)
        raise HTTPException(status_code=502, detail="The language model request failed.") from exc

    return ChatResponse(answer=result.answer)
