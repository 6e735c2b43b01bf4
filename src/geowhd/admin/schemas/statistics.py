"""
Pydantic schemas for office statistics queries
"""
from typing import Any, Dict, List
from pydantic import BaseModel, Field


class StatisticsResponse(BaseModel):
    """Rows of an office-level query"""
    dataset: str
    office: str
    office_kind: str
    aggregate: bool
    columns: List[str]
    row_count: int
    rows: List[Dict[str, Any]] = Field(..., description="One object per result row; missing values are null")


class DatasetStatusItem(BaseModel):
    """Cache slot state for one upstream snapshot"""
    dataset_id: str
    state: str = Field(..., description="unloaded | loading | loaded")


class DatasetStatusResponse(BaseModel):
    datasets: List[DatasetStatusItem]
