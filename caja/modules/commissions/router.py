"""
Router para el módulo de Comisiones

Configuración de porcentajes por medio de pago y cálculo de comisiones.
"""

from fastapi import APIRouter, status, Path
from typing import List

from caja.common.responses import ApiResponse
from caja.dependencies.dbDependencies import db_dependency
from caja.dependencies.userDependencies import user_dependency
from caja.modules.commissions.service import CommissionService
from caja.modules.commissions.schemas import (
    CommissionConfigOut, CommissionConfigUpdate, CommissionCalculateRequest,
    CommissionCalculation, OrganizedCommissions
)

router = APIRouter(
    prefix="/commissions",
    tags=["Commissions"],
    responses={404: {"description": "Not found"}}
)


@router.get("", response_model=ApiResponse[List[CommissionConfigOut]], response_model_exclude_none=True)
async def get_commissions(db: db_dependency, auth: user_dependency):
    """Configuraciones activas del usuario"""
    configs = CommissionService(db).get_commissions(auth.user_id)
    return ApiResponse(data=[CommissionConfigOut.model_validate(c) for c in configs])


@router.get("/organized", response_model=ApiResponse[OrganizedCommissions])
async def get_organized_commissions(db: db_dependency, auth: user_dependency):
    """Porcentajes agrupados: medios simples y tarjeta de crédito por marca y cuotas"""
    organized = CommissionService(db).get_organized_commissions(auth.user_id)
    return ApiResponse(data=OrganizedCommissions.model_validate(organized))


@router.post(
    "/default",
    response_model=ApiResponse[List[CommissionConfigOut]],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED
)
async def create_default_commissions(db: db_dependency, auth: user_dependency):
    """Provisionar la tabla predeterminada (las filas existentes no se modifican)"""
    configs = CommissionService(db).create_default_commissions(auth.user_id)
    return ApiResponse(
        data=[CommissionConfigOut.model_validate(c) for c in configs],
        message="Configuraciones predeterminadas creadas"
    )


@router.post("/calculate", response_model=ApiResponse[CommissionCalculation])
async def calculate_commission(request: CommissionCalculateRequest, db: db_dependency, auth: user_dependency):
    """
    Calcular la comisión de un monto

    - **paymentMethod**: efectivo, transferencia, qr, tarjeta_debito, tarjeta_credito
    - **cardBrand** e **installments**: requeridos para tarjeta_credito
    """
    commission = CommissionService(db).calculate_commission(
        auth.user_id,
        request.payment_method,
        request.amount,
        request.card_brand,
        request.installments,
    )
    return ApiResponse(data=CommissionCalculation(
        commission=commission,
        net_amount=request.amount - commission
    ))


@router.put("/{commission_id}", response_model=ApiResponse[CommissionConfigOut], response_model_exclude_none=True)
async def update_commission(
    updates: CommissionConfigUpdate, db: db_dependency, auth: user_dependency, commission_id: str = Path(...)
):
    config = CommissionService(db).update_commission(commission_id, updates, auth.user_id)
    return ApiResponse(
        data=CommissionConfigOut.model_validate(config),
        message="Comisión actualizada correctamente"
    )
