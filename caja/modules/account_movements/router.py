"""
Router para el ledger de cuentas corrientes

Todos los endpoints requieren bearer token y están scoped por usuario.
"""

from fastapi import APIRouter, HTTPException, status, Query, Path
from typing import List, Optional
from datetime import date

from caja.common.responses import ApiResponse, ok
from caja.dependencies.dbDependencies import db_dependency
from caja.dependencies.userDependencies import user_dependency
from caja.modules.account_movements.models import MovementType
from caja.modules.account_movements.service import AccountMovementService
from caja.modules.account_movements.schemas import (
    AccountMovementCreate, AccountMovementUpdate, AccountMovementOut,
    AccountMovementImport, CustomerDataImport, CustomerAccount,
    CustomerBalanceOut, CustomerImportResult
)

router = APIRouter(
    prefix="/account-movements",
    tags=["Account Movements"],
    responses={404: {"description": "Not found"}}
)


def _not_found():
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Movimiento no encontrado")


@router.get("", response_model=ApiResponse[List[AccountMovementOut]], response_model_exclude_none=True)
async def get_movements(
    db: db_dependency,
    auth: user_dependency,
    customer_id: Optional[str] = Query(None, alias="customerId"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    type: Optional[MovementType] = Query(None),
):
    """Movimientos del usuario, más recientes primero"""
    movements = AccountMovementService(db).get_movements(
        user_id=auth.user_id,
        customer_id=customer_id,
        start_date=start_date,
        end_date=end_date,
        type=type,
    )
    return ApiResponse(data=[AccountMovementOut.model_validate(m) for m in movements])


@router.get("/customer/{customer_id}", response_model=ApiResponse[CustomerAccount], response_model_exclude_none=True)
async def get_customer_account(db: db_dependency, auth: user_dependency, customer_id: str = Path(...)):
    """Cuenta completa del cliente con saldo actual y totales"""
    account = AccountMovementService(db).get_customer_account(customer_id, auth.user_id)
    return ApiResponse(data=CustomerAccount.model_validate(account))


@router.get("/customer/{customer_id}/balance", response_model=ApiResponse[CustomerBalanceOut])
async def get_customer_balance(db: db_dependency, auth: user_dependency, customer_id: str = Path(...)):
    balance = AccountMovementService(db).get_customer_balance(customer_id, auth.user_id)
    return ApiResponse(data=CustomerBalanceOut(balance=balance))


@router.post(
    "/customer/{customer_id}/recalculate",
    response_model=ApiResponse[List[AccountMovementOut]],
    response_model_exclude_none=True
)
async def recalculate_customer_balances(db: db_dependency, auth: user_dependency, customer_id: str = Path(...)):
    """
    Recalcular los saldos de todos los movimientos del cliente.

    Editar o eliminar un movimiento no corrige los saldos posteriores;
    este endpoint los reconstruye en orden cronológico.
    """
    movements = AccountMovementService(db).recalculate_balances(customer_id, auth.user_id)
    return ApiResponse(
        data=[AccountMovementOut.model_validate(m) for m in movements],
        message=f"{len(movements)} saldos recalculados"
    )


@router.post(
    "",
    response_model=ApiResponse[AccountMovementOut],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED
)
async def create_movement(movement_data: AccountMovementCreate, db: db_dependency, auth: user_dependency):
    """
    Registrar un movimiento de cuenta

    - **amount**: positivo para ventas, negativo para pagos
    - **code**: opcional; vacío no se guarda
    - **date**: opcional, por defecto el día actual
    """
    movement = AccountMovementService(db).create_movement(movement_data, auth.user_id)
    return ApiResponse(data=AccountMovementOut.model_validate(movement))


@router.post(
    "/import",
    response_model=ApiResponse[List[AccountMovementOut]],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED
)
async def import_movements(import_data: AccountMovementImport, db: db_dependency, auth: user_dependency):
    """Importación masiva; los saldos provistos se guardan tal cual"""
    movements = AccountMovementService(db).import_movements(
        import_data.customer_id, import_data.movements, auth.user_id
    )
    return ApiResponse(
        data=[AccountMovementOut.model_validate(m) for m in movements],
        message=f"{len(movements)} movimientos importados correctamente"
    )


@router.post(
    "/import-excel",
    response_model=ApiResponse[CustomerImportResult],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED
)
async def import_customer_data(import_data: CustomerDataImport, db: db_dependency, auth: user_dependency):
    """Importar cliente y movimientos desde las filas de su planilla"""
    customer, movements = AccountMovementService(db).import_customer_data(
        import_data.customer_name, import_data.movements, auth.user_id
    )
    return ApiResponse(
        data=CustomerImportResult.model_validate({"customer": customer, "movements": movements}),
        message=f'Cliente "{import_data.customer_name}" importado con {len(movements)} movimientos'
    )


@router.get("/{movement_id}", response_model=ApiResponse[AccountMovementOut], response_model_exclude_none=True)
async def get_movement(db: db_dependency, auth: user_dependency, movement_id: str = Path(...)):
    movement = AccountMovementService(db).get_movement_by_id(movement_id, auth.user_id)
    if not movement:
        raise _not_found()
    return ApiResponse(data=AccountMovementOut.model_validate(movement))


@router.put("/{movement_id}", response_model=ApiResponse[AccountMovementOut], response_model_exclude_none=True)
async def update_movement(
    updates: AccountMovementUpdate, db: db_dependency, auth: user_dependency, movement_id: str = Path(...)
):
    """Editar un movimiento; los saldos posteriores no se recalculan"""
    movement = AccountMovementService(db).update_movement(movement_id, updates, auth.user_id)
    if not movement:
        raise _not_found()
    return ApiResponse(data=AccountMovementOut.model_validate(movement))


@router.delete("/{movement_id}")
async def delete_movement(db: db_dependency, auth: user_dependency, movement_id: str = Path(...)):
    if not AccountMovementService(db).delete_movement(movement_id, auth.user_id):
        raise _not_found()
    return ok(message="Movimiento eliminado correctamente")
