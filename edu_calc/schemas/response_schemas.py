from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional


class CalculationResultResponse(BaseModel):
    """Calculator answer"""
    text: str = Field(..., description="Human readable answer or error message")
    steps: Optional[List[str]] = Field(None, description="Worked solution, one line per entry")
    plot_data: Optional[Dict[str, Any]] = Field(None, alias="plotData", description="Chart definition")

    class Config:
        populate_by_name = True


class CalculatorInfo(BaseModel):
    """Registered calculator summary"""
    name: str
    category: str
    description: str


class CalculatorDetail(CalculatorInfo):
    """Registered calculator with its input fields"""
    class_name: str
    fields: List[str] = Field(default_factory=list, description="Accepted field names")


class PerformanceStatsResponse(BaseModel):
    """Aggregated timing of calculations served so far"""
    total_operations: int = 0
    successful_operations: int = 0
    failed_operations: int = 0
    success_rate: float = Field(0.0, ge=0.0, le=1.0)
    avg_execution_time: float = 0.0
    max_execution_time: float = 0.0
    p95_execution_time: float = 0.0
