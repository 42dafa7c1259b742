# api/models/analysis_models.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional


class AnalysisResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    original_name: str = Field(..., alias="originalName")
    status: str = Field(..., description="'ok' or 'failed'")
    pages: Optional[int] = None
    characters: int = 0
    # Passed through as produced: schema object, warning or unparsed variant
    summary: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    text_file_name: Optional[str] = Field(None, alias="textFileName")
    text_content: Optional[str] = Field(None, alias="textContent")


class AnalyzeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    generated_at: str = Field(..., alias="generatedAt")
    total_papers: int = Field(..., alias="totalPapers")
    results: List[AnalysisResult]


class ExportRequest(BaseModel):
    # Results come back from the client; kept loose so every variant exports
    results: Optional[List[Any]] = None
