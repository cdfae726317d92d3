"""
Servicios de negocio para el ledger de cuentas corrientes

Mantiene, por cliente, un historial de movimientos con saldo corrido:
- Alta de movimientos calculando saldo = saldo actual + monto
- Consulta de movimientos (más recientes primero) y del saldo actual
- Edición y borrado SIN recalcular los movimientos posteriores
- Recalculo explícito de todos los saldos de un cliente
- Importación masiva ordenada por fecha (saldos provistos por el origen)

El saldo actual de un cliente es el `balance` de su movimiento más reciente
por (date desc, created_at desc), o 0 si no tiene movimientos.
"""

from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from decimal import Decimal
from typing import List, Optional, Dict, Any, Tuple
from datetime import date, datetime, timedelta, timezone
import logging

from caja.database.database import get_tenant_query
from caja.common.validators import normalize_code, today_iso
from caja.modules.account_movements.models import AccountMovement, MovementType
from caja.modules.account_movements.schemas import (
    AccountMovementCreate, AccountMovementUpdate, ImportedMovement, SpreadsheetRow, check_amount_sign
)
from caja.modules.customers.models import Customer
from caja.modules.customers.schemas import CustomerCreate
from caja.modules.customers.service import CustomerService

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
EDITABLE_FIELDS = ("description", "code", "date", "amount")


class AccountMovementService:
    """Servicio del ledger de cuentas corrientes"""

    def __init__(self, db: Session):
        self.db = db
        self.customer_service = CustomerService(db)

    # ===== helpers =====

    def _require_customer(self, customer_id: str, user_id: str, lock: bool = False) -> Customer:
        """
        Cliente del usuario o 404. Con `lock` toma un bloqueo de fila
        (SELECT ... FOR UPDATE) que serializa las altas sobre el mismo cliente.
        """
        query = self.db.query(Customer).filter(Customer.id == customer_id)
        if lock:
            query = query.with_for_update()
        customer = query.first()

        if customer is None or customer.user_id != user_id:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Cliente no encontrado"
            )
        return customer

    def _ledger_query(self, user_id: str, customer_id: str):
        return get_tenant_query(self.db, AccountMovement, user_id).filter(
            AccountMovement.customer_id == customer_id
        )

    # ===== operaciones =====

    def create_movement(self, movement_data: AccountMovementCreate, user_id: str) -> AccountMovement:
        """Registrar un movimiento aplicando `amount` sobre el saldo actual"""
        try:
            customer = self._require_customer(movement_data.customer_id, user_id, lock=True)

            current_balance = self.get_customer_balance(customer.id, user_id)
            new_balance = current_balance + movement_data.amount

            movement = AccountMovement(
                customer_id=customer.id,
                customer_name=customer.name,
                date=movement_data.date or today_iso(),
                description=movement_data.description,
                code=normalize_code(movement_data.code),
                amount=movement_data.amount,
                balance=new_balance,
                type=movement_data.type,
                user_id=user_id,
            )

            self.db.add(movement)
            self.db.commit()
            self.db.refresh(movement)

            logger.info(
                f"Movimiento {movement.type.value} {movement.id} cliente={customer.id} "
                f"monto={movement.amount} saldo={movement.balance}"
            )
            return movement

        except HTTPException:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error creando movimiento: {str(e)}"
            )

    def get_movements(
        self,
        user_id: str,
        customer_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        type: Optional[MovementType] = None
    ) -> List[AccountMovement]:
        """
        Movimientos del usuario, más recientes primero por (date, created_at).
        Las fechas límite son inclusivas.
        """
        query = get_tenant_query(self.db, AccountMovement, user_id)

        if customer_id:
            query = query.filter(AccountMovement.customer_id == customer_id)
        if type:
            query = query.filter(AccountMovement.type == type)
        if start_date:
            query = query.filter(AccountMovement.date >= start_date)
        if end_date:
            query = query.filter(AccountMovement.date <= end_date)

        return query.order_by(
            AccountMovement.date.desc(),
            AccountMovement.created_at.desc()
        ).all()

    def get_movement_by_id(self, movement_id: str, user_id: str) -> Optional[AccountMovement]:
        """
        Obtener movimiento por ID.

        Inexistente y ajeno son indistinguibles: ambos devuelven None.
        """
        movement = self.db.get(AccountMovement, movement_id)
        if movement is None:
            return None
        if movement.user_id != user_id:
            logger.warning(f"Acceso denegado al movimiento {movement_id} para usuario {user_id}")
            return None
        return movement

    def update_movement(
        self, movement_id: str, updates: AccountMovementUpdate, user_id: str
    ) -> Optional[AccountMovement]:
        """
        Editar descripción, código, fecha o monto.

        Si cambia el monto, el saldo de ESTE movimiento se corrige por la
        diferencia; los movimientos posteriores no se recalculan. El nuevo
        monto debe respetar el signo del tipo (400 si no). Un código vacío
        borra el código guardado.
        """
        movement = self.get_movement_by_id(movement_id, user_id)
        if not movement:
            return None

        submitted = updates.model_dump(exclude_unset=True)
        changes = {
            field: value
            for field, value in submitted.items()
            if field in EDITABLE_FIELDS and value is not None
        }
        if "code" in submitted:
            changes["code"] = normalize_code(submitted["code"])

        if "amount" in changes:
            try:
                check_amount_sign(movement.type, changes["amount"])
            except ValueError as e:
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

        try:
            if "amount" in changes:
                difference = changes["amount"] - movement.amount
                movement.balance = movement.balance + difference
            for field, value in changes.items():
                setattr(movement, field, value)

            self.db.commit()
            self.db.refresh(movement)
            return movement

        except SQLAlchemyError as e:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error actualizando movimiento: {str(e)}"
            )

    def delete_movement(self, movement_id: str, user_id: str) -> bool:
        """Eliminar movimiento sin recalcular los saldos posteriores"""
        movement = self.get_movement_by_id(movement_id, user_id)
        if not movement:
            return False

        try:
            self.db.delete(movement)
            self.db.commit()
            logger.info(f"Movimiento eliminado {movement_id} cliente={movement.customer_id}")
            return True
        except SQLAlchemyError as e:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error eliminando movimiento: {str(e)}"
            )

    def get_customer_balance(self, customer_id: str, user_id: str) -> Decimal:
        """Saldo del movimiento más reciente, 0 si no hay movimientos"""
        latest = self._ledger_query(user_id, customer_id).order_by(
            AccountMovement.date.desc(),
            AccountMovement.created_at.desc()
        ).first()

        if latest is None:
            return ZERO
        return Decimal(latest.balance)

    def get_customer_account(self, customer_id: str, user_id: str) -> Dict[str, Any]:
        """Cuenta completa: cliente, movimientos, saldo actual y totales"""
        customer = self._require_customer(customer_id, user_id)
        movements = self.get_movements(user_id=user_id, customer_id=customer_id)

        total_sales = sum(
            (m.amount for m in movements if m.type == MovementType.SALE and m.amount > 0),
            ZERO
        )
        total_payments = sum(
            (abs(m.amount) for m in movements if m.type == MovementType.PAYMENT and m.amount < 0),
            ZERO
        )

        return {
            "customer": customer,
            "movements": movements,
            "current_balance": movements[0].balance if movements else ZERO,
            "total_sales": total_sales,
            "total_payments": total_payments,
        }

    def recalculate_balances(self, customer_id: str, user_id: str) -> List[AccountMovement]:
        """
        Reescribe el saldo de todos los movimientos del cliente como suma
        corrida en orden cronológico. Ventas suman, pagos restan (sea cual
        sea el signo almacenado) y los ajustes aplican su monto tal cual.
        """
        self._require_customer(customer_id, user_id, lock=True)

        movements = self._ledger_query(user_id, customer_id).order_by(
            AccountMovement.date.asc(),
            AccountMovement.created_at.asc()
        ).all()

        try:
            running = ZERO
            for movement in movements:
                running += ledger_delta(movement.type, Decimal(movement.amount))
                movement.balance = running
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error recalculando saldos: {str(e)}"
            )

        logger.info(f"Saldos recalculados cliente={customer_id} movimientos={len(movements)} saldo={running}")
        return movements

    # ===== importación =====

    def import_movements(
        self, customer_id: str, movements: List[ImportedMovement], user_id: str
    ) -> List[AccountMovement]:
        """
        Importar movimientos ordenados por fecha ascendente.
        Los saldos se guardan tal como vienen, no se recalculan.
        """
        customer = self._require_customer(customer_id, user_id)

        # sorted es estable: dentro de un mismo día se respeta el orden recibido
        ordered = sorted(movements, key=lambda m: m.date)
        base_time = datetime.now(timezone.utc)

        created = []
        try:
            for index, item in enumerate(ordered):
                movement = AccountMovement(
                    customer_id=customer.id,
                    customer_name=customer.name,
                    date=item.date,
                    description=item.description,
                    code=normalize_code(item.code),
                    amount=item.amount,
                    balance=item.balance,
                    type=item.type,
                    user_id=user_id,
                    created_at=base_time + timedelta(microseconds=index),
                    updated_at=base_time,
                )
                self.db.add(movement)
                created.append(movement)

            self.db.commit()
            for movement in created:
                self.db.refresh(movement)

        except SQLAlchemyError as e:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error importando movimientos: {str(e)}"
            )

        logger.info(f"{len(created)} movimientos importados cliente={customer.id}")
        return created

    def import_customer_data(
        self, customer_name: str, rows: List[SpreadsheetRow], user_id: str
    ) -> Tuple[Customer, List[AccountMovement]]:
        """
        Importar la planilla de un cliente: lo busca por nombre exacto (sin
        distinguir mayúsculas) o lo crea, y luego importa sus movimientos.
        precio > 0 es venta, el resto pago; el monto se guarda en valor absoluto.
        """
        customer = self.customer_service.find_by_exact_name(customer_name, user_id)
        if customer is None:
            customer = self.customer_service.create_customer(
                CustomerCreate(
                    name=customer_name,
                    credit_limit=ZERO,
                    notes=f"Cliente importado desde Excel - {date.today().strftime('%d/%m/%Y')}",
                ),
                user_id
            )

        processed = sorted(
            (
                ImportedMovement(
                    date=row.fecha,
                    description=row.descripcion or "Movimiento importado",
                    code=row.codigo,
                    amount=abs(row.precio),
                    balance=row.saldo,
                    type=MovementType.SALE if row.precio > 0 else MovementType.PAYMENT,
                )
                for row in rows
            ),
            key=lambda m: m.date
        )

        movements = self.import_movements(customer.id, processed, user_id)
        return customer, movements


def ledger_delta(movement_type: MovementType, amount: Decimal) -> Decimal:
    """Efecto de un movimiento sobre la deuda del cliente"""
    if movement_type == MovementType.SALE:
        return abs(amount)
    if movement_type == MovementType.PAYMENT:
        return -abs(amount)
    return amount
