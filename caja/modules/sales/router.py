"""
Router para el módulo de Ventas
"""

from fastapi import APIRouter, HTTPException, status, Query, Path
from typing import List, Optional
from datetime import date

from caja.common.responses import ApiResponse, ok
from caja.dependencies.dbDependencies import db_dependency
from caja.dependencies.userDependencies import user_dependency
from caja.modules.commissions.models import PaymentMethod
from caja.modules.sales.service import SaleService
from caja.modules.sales.schemas import SaleCreate, SaleUpdate, SaleOut

router = APIRouter(
    prefix="/sales",
    tags=["Sales"],
    responses={404: {"description": "Not found"}}
)


def _not_found():
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Venta no encontrada")


@router.get("", response_model=ApiResponse[List[SaleOut]], response_model_exclude_none=True)
async def get_sales(
    db: db_dependency,
    auth: user_dependency,
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    payment_method: Optional[PaymentMethod] = Query(None, alias="paymentMethod"),
):
    """Ventas con filtros opcionales, más recientes primero"""
    sales = SaleService(db).get_sales(
        auth.user_id,
        start_date=start_date,
        end_date=end_date,
        payment_method=payment_method,
    )
    return ApiResponse(data=[SaleOut.model_validate(s) for s in sales])


@router.post("", response_model=ApiResponse[SaleOut], response_model_exclude_none=True, status_code=status.HTTP_201_CREATED)
async def create_sale(sale_data: SaleCreate, db: db_dependency, auth: user_dependency):
    """
    Registrar una venta

    - **amount**: total cobrado, mayor a 0
    - **paymentMethod**: efectivo, transferencia, qr, tarjeta_debito, tarjeta_credito
    - **cardBrand** / **installments**: requeridos para tarjeta_credito (1, 3, 6 o 12 cuotas)
    """
    sale = SaleService(db).create_sale(sale_data, auth.user_id)
    return ApiResponse(data=SaleOut.model_validate(sale), message="Venta registrada correctamente")


@router.get("/{sale_id}", response_model=ApiResponse[SaleOut], response_model_exclude_none=True)
async def get_sale(db: db_dependency, auth: user_dependency, sale_id: str = Path(...)):
    sale = SaleService(db).get_sale_by_id(sale_id, auth.user_id)
    if not sale:
        raise _not_found()
    return ApiResponse(data=SaleOut.model_validate(sale))


@router.put("/{sale_id}", response_model=ApiResponse[SaleOut], response_model_exclude_none=True)
async def update_sale(updates: SaleUpdate, db: db_dependency, auth: user_dependency, sale_id: str = Path(...)):
    sale = SaleService(db).update_sale(sale_id, updates, auth.user_id)
    if not sale:
        raise _not_found()
    return ApiResponse(data=SaleOut.model_validate(sale), message="Venta actualizada correctamente")


@router.delete("/{sale_id}")
async def delete_sale(db: db_dependency, auth: user_dependency, sale_id: str = Path(...)):
    if not SaleService(db).delete_sale(sale_id, auth.user_id):
        raise _not_found()
    return ok(message="Venta eliminada correctamente")
