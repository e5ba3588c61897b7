from pydantic import BaseModel
from typing import Optional, Any

from .common import BaseResponse


class PipelineResult(BaseResponse):
    """Outcome of one ingestion or re-derivation run; data is the pipeline's payload"""
    data: Optional[dict[str, Any]] = None
    run_id: Optional[str] = None
    started_at: Optional[str] = None
    completed_at: Optional[str] = None
    duration_seconds: Optional[float] = None
    records_processed: int = 0
    error: Optional[str] = None


class PipelineInfo(BaseModel):
    name: str
    display_name: str
    description: str
    target_tables: list[str]
    atomic: bool


class PipelineListResponse(BaseResponse):
    data: list[PipelineInfo] = []


class PipelineRunInfo(BaseModel):
    """Audit entry for a past run, as stored in pipeline_runs"""
    run_id: str
    pipeline_name: str
    subject: Optional[str] = None
    status: str
    message: Optional[str] = None
    started_at: str
    completed_at: Optional[str] = None
    duration_seconds: Optional[float] = None
    records_processed: int = 0
    error: Optional[str] = None
    error_code: Optional[str] = None


class PipelineRunHistoryResponse(BaseResponse):
    data: list[PipelineRunInfo] = []
