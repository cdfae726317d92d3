"""
Servicios de negocio para el módulo de Retiros
"""

from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional
from datetime import date
import logging

from caja.database.database import get_tenant_query
from caja.common.validators import today_iso
from caja.modules.withdrawals.models import Withdrawal, WithdrawalReason
from caja.modules.withdrawals.schemas import WithdrawalCreate, WithdrawalUpdate

logger = logging.getLogger(__name__)


class WithdrawalService:
    """Servicio para retiros de caja"""

    def __init__(self, db: Session):
        self.db = db

    def create_withdrawal(self, withdrawal_data: WithdrawalCreate, user_id: str) -> Withdrawal:
        try:
            withdrawal = Withdrawal(
                amount=withdrawal_data.amount,
                reason=withdrawal_data.reason,
                description=withdrawal_data.description or "",
                date=withdrawal_data.date or today_iso(),
                user_id=user_id,
            )
            self.db.add(withdrawal)
            self.db.commit()
            self.db.refresh(withdrawal)

            logger.info(f"Retiro {withdrawal.id} ({withdrawal.reason.value}) monto={withdrawal.amount} usuario={user_id}")
            return withdrawal

        except SQLAlchemyError as e:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error al crear el retiro: {str(e)}"
            )

    def get_withdrawals(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        reason: Optional[WithdrawalReason] = None
    ) -> List[Withdrawal]:
        """Retiros del usuario, más recientes primero"""
        try:
            query = get_tenant_query(self.db, Withdrawal, user_id)

            if start_date:
                query = query.filter(Withdrawal.date >= start_date)
            if end_date:
                query = query.filter(Withdrawal.date <= end_date)
            if reason:
                query = query.filter(Withdrawal.reason == reason)

            return query.order_by(Withdrawal.date.desc(), Withdrawal.created_at.desc()).all()

        except SQLAlchemyError as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error al obtener los retiros: {str(e)}"
            )

    def get_withdrawal_by_id(self, withdrawal_id: str, user_id: str) -> Optional[Withdrawal]:
        withdrawal = self.db.get(Withdrawal, withdrawal_id)
        if withdrawal is None:
            return None
        if withdrawal.user_id != user_id:
            logger.warning(f"Acceso denegado al retiro {withdrawal_id} para usuario {user_id}")
            return None
        return withdrawal

    def update_withdrawal(
        self, withdrawal_id: str, updates: WithdrawalUpdate, user_id: str
    ) -> Optional[Withdrawal]:
        """Actualizar monto, motivo, descripción o fecha"""
        withdrawal = self.get_withdrawal_by_id(withdrawal_id, user_id)
        if not withdrawal:
            return None

        try:
            for field, value in updates.model_dump(exclude_unset=True).items():
                # description puede vaciarse, el resto no admite null
                if value is None and field != "description":
                    continue
                setattr(withdrawal, field, value if value is not None else "")

            self.db.commit()
            self.db.refresh(withdrawal)
            return withdrawal

        except SQLAlchemyError as e:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error al actualizar el retiro: {str(e)}"
            )

    def delete_withdrawal(self, withdrawal_id: str, user_id: str) -> bool:
        withdrawal = self.get_withdrawal_by_id(withdrawal_id, user_id)
        if not withdrawal:
            return False

        try:
            self.db.delete(withdrawal)
            self.db.commit()
            logger.info(f"Retiro eliminado {withdrawal_id} para usuario {user_id}")
            return True
        except SQLAlchemyError as e:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error al eliminar el retiro: {str(e)}"
            )

    def get_withdrawals_by_date_range(self, start_date: date, end_date: date, user_id: str) -> List[Withdrawal]:
        return self.get_withdrawals(user_id, start_date=start_date, end_date=end_date)
