"""
Router para el módulo de Retiros
"""

from fastapi import APIRouter, HTTPException, status, Query, Path
from typing import List, Optional
from datetime import date

from caja.common.responses import ApiResponse, ok
from caja.dependencies.dbDependencies import db_dependency
from caja.dependencies.userDependencies import user_dependency
from caja.modules.withdrawals.models import WithdrawalReason
from caja.modules.withdrawals.service import WithdrawalService
from caja.modules.withdrawals.schemas import WithdrawalCreate, WithdrawalUpdate, WithdrawalOut

router = APIRouter(
    prefix="/withdrawals",
    tags=["Withdrawals"],
    responses={404: {"description": "Not found"}}
)


def _not_found():
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Retiro no encontrado")


@router.get("", response_model=ApiResponse[List[WithdrawalOut]])
async def get_withdrawals(
    db: db_dependency,
    auth: user_dependency,
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    reason: Optional[WithdrawalReason] = Query(None),
):
    withdrawals = WithdrawalService(db).get_withdrawals(
        auth.user_id, start_date=start_date, end_date=end_date, reason=reason
    )
    return ApiResponse(data=[WithdrawalOut.model_validate(w) for w in withdrawals])


@router.post("", response_model=ApiResponse[WithdrawalOut], status_code=status.HTTP_201_CREATED)
async def create_withdrawal(withdrawal_data: WithdrawalCreate, db: db_dependency, auth: user_dependency):
    """
    Registrar un retiro de caja

    - **amount**: mayor a 0
    - **reason**: gastos_operativos, pago_proveedores, salarios, servicios, impuestos, personal, otros
    """
    withdrawal = WithdrawalService(db).create_withdrawal(withdrawal_data, auth.user_id)
    return ApiResponse(data=WithdrawalOut.model_validate(withdrawal), message="Retiro registrado correctamente")


@router.get("/{withdrawal_id}", response_model=ApiResponse[WithdrawalOut])
async def get_withdrawal(db: db_dependency, auth: user_dependency, withdrawal_id: str = Path(...)):
    withdrawal = WithdrawalService(db).get_withdrawal_by_id(withdrawal_id, auth.user_id)
    if not withdrawal:
        raise _not_found()
    return ApiResponse(data=WithdrawalOut.model_validate(withdrawal))


@router.put("/{withdrawal_id}", response_model=ApiResponse[WithdrawalOut])
async def update_withdrawal(
    updates: WithdrawalUpdate, db: db_dependency, auth: user_dependency, withdrawal_id: str = Path(...)
):
    withdrawal = WithdrawalService(db).update_withdrawal(withdrawal_id, updates, auth.user_id)
    if not withdrawal:
        raise _not_found()
    return ApiResponse(data=WithdrawalOut.model_validate(withdrawal), message="Retiro actualizado correctamente")


@router.delete("/{withdrawal_id}")
async def delete_withdrawal(db: db_dependency, auth: user_dependency, withdrawal_id: str = Path(...)):
    if not WithdrawalService(db).delete_withdrawal(withdrawal_id, auth.user_id):
        raise _not_found()
    return ok(message="Retiro eliminado correctamente")
