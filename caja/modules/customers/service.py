"""
Servicios de negocio para el módulo de Clientes

- CRUD de clientes con aislamiento por usuario
- Búsqueda por nombre, email o teléfono
- Saldos de cuenta corriente por cliente (lee el ledger de movimientos)
"""

from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import func
from datetime import date
from typing import List, Optional, Dict, Any
import logging

from caja.database.database import get_tenant_query
from caja.modules.customers.models import Customer
from caja.modules.customers.schemas import CustomerCreate, CustomerUpdate

logger = logging.getLogger(__name__)


class CustomerService:
    """Servicio para gestión de clientes"""

    def __init__(self, db: Session):
        self.db = db

    def create_customer(self, customer_data: CustomerCreate, user_id: str) -> Customer:
        """Crear un nuevo cliente"""
        try:
            customer = Customer(
                name=customer_data.name,
                email=customer_data.email,
                phone=customer_data.phone,
                address=customer_data.address,
                tax_id=customer_data.tax_id,
                credit_limit=customer_data.credit_limit,
                notes=customer_data.notes,
                user_id=user_id,
            )
            self.db.add(customer)
            self.db.commit()
            self.db.refresh(customer)

            logger.info(f"Cliente creado {customer.id} ({customer.name}) para usuario {user_id}")
            return customer

        except SQLAlchemyError as e:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error creando cliente: {str(e)}"
            )

    def get_customers(self, user_id: str, name: Optional[str] = None) -> List[Customer]:
        """Listar clientes; `name` filtra por coincidencia parcial sin distinguir mayúsculas"""
        query = get_tenant_query(self.db, Customer, user_id)

        if name:
            query = query.filter(func.lower(Customer.name).contains(name.lower()))

        return query.order_by(func.lower(Customer.name).asc()).all()

    def search_customers(self, term: str, user_id: str) -> List[Customer]:
        """Buscar por nombre, email o teléfono"""
        needle = term.lower()
        customers = get_tenant_query(self.db, Customer, user_id).all()
        return [
            c for c in customers
            if needle in c.name.lower()
            or (c.email and needle in c.email.lower())
            or (c.phone and term in c.phone)
        ]

    def get_customer_by_id(self, customer_id: str, user_id: str) -> Optional[Customer]:
        """
        Obtener cliente por ID.

        Devuelve None tanto si no existe como si pertenece a otro usuario.
        """
        customer = self.db.get(Customer, customer_id)
        if customer is None:
            return None
        if customer.user_id != user_id:
            logger.warning(f"Acceso denegado al cliente {customer_id} para usuario {user_id}")
            return None
        return customer

    def find_by_exact_name(self, name: str, user_id: str) -> Optional[Customer]:
        """
        Coincidencia exacta de nombre sin distinguir mayúsculas.

        Se compara en Python: lower() de SQLite sólo pliega ASCII y
        nombres como "Ángela" no coincidirían.
        """
        target = name.strip().casefold()
        for customer in get_tenant_query(self.db, Customer, user_id).all():
            if customer.name.strip().casefold() == target:
                return customer
        return None

    def update_customer(self, customer_id: str, updates: CustomerUpdate, user_id: str) -> Optional[Customer]:
        """Actualizar sólo los campos enviados"""
        customer = self.get_customer_by_id(customer_id, user_id)
        if not customer:
            return None

        try:
            for field, value in updates.model_dump(exclude_unset=True).items():
                setattr(customer, field, value)
            self.db.commit()
            self.db.refresh(customer)
            return customer
        except SQLAlchemyError as e:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error actualizando cliente: {str(e)}"
            )

    def delete_customer(self, customer_id: str, user_id: str) -> bool:
        """Eliminar cliente. Sus movimientos de cuenta no se eliminan."""
        customer = self.get_customer_by_id(customer_id, user_id)
        if not customer:
            return False

        try:
            self.db.delete(customer)
            self.db.commit()
            logger.info(f"Cliente eliminado {customer_id} para usuario {user_id}")
            return True
        except SQLAlchemyError as e:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error eliminando cliente: {str(e)}"
            )

    def get_customer_balances(self, user_id: str) -> List[Dict[str, Any]]:
        """
        Saldo actual de cada cliente junto con la fecha de la última
        entrega (venta) y del último pago registrados en su cuenta.
        """
        from caja.modules.account_movements.service import AccountMovementService
        from caja.modules.account_movements.models import MovementType

        ledger = AccountMovementService(self.db)
        result = []
        for customer in self.get_customers(user_id):
            movements = ledger.get_movements(user_id=user_id, customer_id=customer.id)
            last_sale: Optional[date] = next(
                (m.date for m in movements if m.type == MovementType.SALE), None
            )
            last_payment: Optional[date] = next(
                (m.date for m in movements if m.type == MovementType.PAYMENT), None
            )
            result.append({
                "customer": customer,
                "balance": movements[0].balance if movements else 0,
                "last_delivery_date": last_sale,
                "last_payment_date": last_payment,
            })
        return result
