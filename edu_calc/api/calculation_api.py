from fastapi import APIRouter, HTTPException
from typing import List, Optional

from edu_calc.schemas.request_schemas import SolveRequest
from edu_calc.schemas.response_schemas import (
    CalculationResultResponse,
    CalculatorDetail,
    CalculatorInfo,
    PerformanceStatsResponse,
)
from edu_calc.services.calculation_service import CalculationService

router = APIRouter()


@router.get("", response_model=List[CalculatorInfo])
async def list_calculators(category: Optional[str] = None):
    """List registered calculators, optionally filtered by category"""
    try:
        service = CalculationService()
        return service.list_calculators(category)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/categories", response_model=List[str])
async def list_categories():
    """List calculator categories"""
    try:
        service = CalculationService()
        return service.list_categories()
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/stats/performance", response_model=PerformanceStatsResponse)
async def get_performance_stats():
    """Timing summary of calculations served by this process"""
    try:
        service = CalculationService()
        return service.get_performance_stats()
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/solve", response_model=CalculationResultResponse, response_model_exclude_none=True)
async def solve(request: SolveRequest):
    """Run one calculator; calculation errors come back as result text"""
    try:
        service = CalculationService()
        return service.solve(request.calculator_id, request.fields)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{calculator_id:path}", response_model=CalculatorDetail)
async def get_calculator(calculator_id: str):
    """Describe one calculator and its accepted fields"""
    try:
        service = CalculationService()
        return service.get_calculator(calculator_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
