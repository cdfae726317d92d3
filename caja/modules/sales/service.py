"""
Servicios de negocio para el módulo de Ventas

- Alta de ventas con separación efectivo / digital y comisión del medio de pago
- Consultas por rango de fechas y medio de pago
- Edición recalculando montos y comisión cuando cambian los datos de cobro
"""

from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from decimal import Decimal
from typing import List, Optional, Dict
from datetime import date
import logging

from caja.database.database import get_tenant_query
from caja.common.validators import today_iso
from caja.modules.commissions.models import PaymentMethod, CardBrand
from caja.modules.commissions.schemas import check_card_details
from caja.modules.commissions.service import CommissionService
from caja.modules.sales.models import Sale
from caja.modules.sales.schemas import SaleCreate, SaleUpdate

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
PAYMENT_FIELDS = ("amount", "payment_method", "card_brand", "installments")


class SaleService:
    """Servicio para ventas de caja"""

    def __init__(self, db: Session):
        self.db = db
        self.commission_service = CommissionService(db)

    def _calculate_amounts(
        self,
        user_id: str,
        amount: Decimal,
        payment_method: PaymentMethod,
        card_brand: Optional[CardBrand] = None,
        installments: Optional[int] = None
    ) -> Dict[str, Decimal]:
        """Efectivo va a cash_amount; cualquier otro medio a digital_amount"""
        commission = self.commission_service.calculate_commission(
            user_id, payment_method, amount, card_brand, installments
        )
        is_cash = PaymentMethod(payment_method) == PaymentMethod.EFECTIVO
        return {
            "cash_amount": amount if is_cash else ZERO,
            "digital_amount": ZERO if is_cash else amount,
            "commission_amount": commission,
        }

    def create_sale(self, sale_data: SaleCreate, user_id: str) -> Sale:
        """Registrar una venta; la comisión nunca bloquea el alta"""
        is_credit = sale_data.payment_method == PaymentMethod.TARJETA_CREDITO
        card_brand = sale_data.card_brand if is_credit else None
        installments = sale_data.installments if is_credit else None

        amounts = self._calculate_amounts(
            user_id, sale_data.amount, sale_data.payment_method, card_brand, installments
        )

        try:
            sale = Sale(
                date=sale_data.date or today_iso(),
                description=sale_data.description,
                payment_method=sale_data.payment_method.value,
                card_brand=card_brand.value if card_brand else None,
                installments=installments,
                user_id=user_id,
                **amounts
            )
            self.db.add(sale)
            self.db.commit()
            self.db.refresh(sale)

            logger.info(
                f"Venta {sale.id} {sale.payment_method} monto={sale_data.amount} "
                f"comision={sale.commission_amount} usuario={user_id}"
            )
            return sale

        except SQLAlchemyError as e:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error creando venta: {str(e)}"
            )

    def get_sales(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        payment_method: Optional[PaymentMethod] = None
    ) -> List[Sale]:
        """Ventas del usuario, más recientes primero"""
        try:
            query = get_tenant_query(self.db, Sale, user_id)

            if start_date:
                query = query.filter(Sale.date >= start_date)
            if end_date:
                query = query.filter(Sale.date <= end_date)
            if payment_method:
                query = query.filter(Sale.payment_method == PaymentMethod(payment_method).value)

            return query.order_by(Sale.date.desc(), Sale.created_at.desc()).all()

        except SQLAlchemyError as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error obteniendo ventas: {str(e)}"
            )

    def get_sale_by_id(self, sale_id: str, user_id: str) -> Optional[Sale]:
        sale = self.db.get(Sale, sale_id)
        if sale is None:
            return None
        if sale.user_id != user_id:
            logger.warning(f"Acceso denegado a la venta {sale_id} para usuario {user_id}")
            return None
        return sale

    def update_sale(self, sale_id: str, updates: SaleUpdate, user_id: str) -> Optional[Sale]:
        """
        Editar una venta.

        Si cambia el monto, el medio de pago o los datos de tarjeta se
        recalculan la separación efectivo / digital y la comisión.
        """
        sale = self.get_sale_by_id(sale_id, user_id)
        if not sale:
            return None

        changes = updates.model_dump(exclude_none=True)
        amounts = None

        if any(field in changes for field in PAYMENT_FIELDS):
            amount = changes.get("amount", sale.total_amount)
            payment_method = PaymentMethod(changes.get("payment_method", sale.payment_method))
            is_credit = payment_method == PaymentMethod.TARJETA_CREDITO
            card_brand = changes.get("card_brand", sale.card_brand) if is_credit else None
            installments = changes.get("installments", sale.installments) if is_credit else None

            try:
                check_card_details(payment_method, card_brand, installments)
            except ValueError as e:
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

            card_brand = CardBrand(card_brand) if card_brand else None
            amounts = self._calculate_amounts(user_id, amount, payment_method, card_brand, installments)

        try:
            if amounts is not None:
                for field, value in amounts.items():
                    setattr(sale, field, value)
                sale.payment_method = payment_method.value
                sale.card_brand = card_brand.value if card_brand else None
                sale.installments = installments

            if "description" in changes:
                sale.description = changes["description"]
            if "date" in changes:
                sale.date = changes["date"]

            self.db.commit()
            self.db.refresh(sale)
            return sale

        except SQLAlchemyError as e:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error actualizando venta: {str(e)}"
            )

    def delete_sale(self, sale_id: str, user_id: str) -> bool:
        sale = self.get_sale_by_id(sale_id, user_id)
        if not sale:
            return False

        try:
            self.db.delete(sale)
            self.db.commit()
            logger.info(f"Venta eliminada {sale_id} para usuario {user_id}")
            return True
        except SQLAlchemyError as e:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error eliminando venta: {str(e)}"
            )

    def get_sales_by_date_range(self, start_date: date, end_date: date, user_id: str) -> List[Sale]:
        return self.get_sales(user_id, start_date=start_date, end_date=end_date)
