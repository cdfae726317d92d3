"""
Router para resúmenes de caja (cierre diario y períodos)
"""

from fastapi import APIRouter, Query, Path
from typing import List
from datetime import date

from caja.common.responses import ApiResponse
from caja.dependencies.dbDependencies import db_dependency
from caja.dependencies.userDependencies import user_dependency
from caja.modules.summary.service import SummaryService
from caja.modules.summary.schemas import DailySummary

router = APIRouter(
    prefix="/summary",
    tags=["Summary"]
)


@router.get("/daily/{day}", response_model=ApiResponse[DailySummary])
async def get_daily_summary(db: db_dependency, auth: user_dependency, day: date = Path(..., description="YYYY-MM-DD")):
    """Totales de ventas, comisiones y retiros de un día"""
    return ApiResponse(data=SummaryService(db, auth.user_id).get_daily_summary(day))


@router.get("/range", response_model=ApiResponse[List[DailySummary]])
async def get_range_summary(
    db: db_dependency,
    auth: user_dependency,
    start_date: date = Query(..., alias="startDate"),
    end_date: date = Query(..., alias="endDate"),
):
    """Un resumen por día entre startDate y endDate (inclusive)"""
    return ApiResponse(data=SummaryService(db, auth.user_id).get_range_summary(start_date, end_date))


@router.get("/month/{year}/{month}", response_model=ApiResponse[List[DailySummary]])
async def get_month_summary(
    db: db_dependency,
    auth: user_dependency,
    year: int = Path(..., ge=2000, le=2100),
    month: int = Path(..., ge=1, le=12),
):
    return ApiResponse(data=SummaryService(db, auth.user_id).get_month_summary(year, month))
