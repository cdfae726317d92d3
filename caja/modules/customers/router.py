"""
Router para el módulo de Clientes

Todos los endpoints requieren autenticación y están scoped por usuario.
"""

from fastapi import APIRouter, HTTPException, status, Query, Path
from typing import List, Optional

from caja.common.responses import ApiResponse, ok
from caja.dependencies.dbDependencies import db_dependency
from caja.dependencies.userDependencies import user_dependency
from caja.modules.customers.service import CustomerService
from caja.modules.customers.schemas import (
    CustomerCreate, CustomerUpdate, CustomerOut, CustomerBalance
)

router = APIRouter(
    prefix="/customers",
    tags=["Customers"],
    responses={404: {"description": "Not found"}}
)


def _not_found():
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Cliente no encontrado")


@router.get("", response_model=ApiResponse[List[CustomerOut]])
async def get_customers(
    db: db_dependency,
    auth: user_dependency,
    name: Optional[str] = Query(None, description="Filtro parcial por nombre")
):
    """Clientes ordenados por nombre"""
    customers = CustomerService(db).get_customers(auth.user_id, name=name)
    return ApiResponse(data=[CustomerOut.model_validate(c) for c in customers])


@router.post("", response_model=ApiResponse[CustomerOut], status_code=status.HTTP_201_CREATED)
async def create_customer(customer_data: CustomerCreate, db: db_dependency, auth: user_dependency):
    """
    Crear un nuevo cliente

    - **name**: requerido
    - **email**: opcional, debe ser válido
    - **creditLimit**: opcional, no negativo
    """
    customer = CustomerService(db).create_customer(customer_data, auth.user_id)
    return ApiResponse(data=CustomerOut.model_validate(customer), message="Cliente creado correctamente")


@router.get("/search", response_model=ApiResponse[List[CustomerOut]])
async def search_customers(
    db: db_dependency,
    auth: user_dependency,
    q: str = Query(..., min_length=1, description="Nombre, email o teléfono")
):
    customers = CustomerService(db).search_customers(q, auth.user_id)
    return ApiResponse(data=[CustomerOut.model_validate(c) for c in customers])


@router.get("/balances", response_model=ApiResponse[List[CustomerBalance]])
async def get_customer_balances(db: db_dependency, auth: user_dependency):
    """Saldo actual de cada cliente con sus últimas fechas de entrega y pago"""
    balances = CustomerService(db).get_customer_balances(auth.user_id)
    return ApiResponse(data=[CustomerBalance.model_validate(b) for b in balances])


@router.get("/{customer_id}", response_model=ApiResponse[CustomerOut])
async def get_customer(db: db_dependency, auth: user_dependency, customer_id: str = Path(...)):
    customer = CustomerService(db).get_customer_by_id(customer_id, auth.user_id)
    if not customer:
        raise _not_found()
    return ApiResponse(data=CustomerOut.model_validate(customer))


@router.put("/{customer_id}", response_model=ApiResponse[CustomerOut])
async def update_customer(
    updates: CustomerUpdate, db: db_dependency, auth: user_dependency, customer_id: str = Path(...)
):
    customer = CustomerService(db).update_customer(customer_id, updates, auth.user_id)
    if not customer:
        raise _not_found()
    return ApiResponse(data=CustomerOut.model_validate(customer), message="Cliente actualizado correctamente")


@router.delete("/{customer_id}")
async def delete_customer(db: db_dependency, auth: user_dependency, customer_id: str = Path(...)):
    """Eliminar cliente; su historial de movimientos se conserva"""
    if not CustomerService(db).delete_customer(customer_id, auth.user_id):
        raise _not_found()
    return ok(message="Cliente eliminado correctamente")
