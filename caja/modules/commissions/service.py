"""
Servicios de negocio para el módulo de Comisiones

- Configuración de porcentajes por medio de pago, marca y cuotas
- Provisión de la tabla predeterminada (20 filas por usuario)
- Cálculo de la comisión de una venta

El cálculo nunca propaga errores: ante cualquier falla devuelve 0 para
que la venta pueda registrarse igual.
"""

from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Dict, Any, Union
import logging

from caja.modules.commissions.models import CommissionConfig, PaymentMethod, CardBrand
from caja.modules.commissions.schemas import CommissionConfigUpdate
from caja.modules.commissions.defaults import (
    ZERO, config_id, default_keys, default_percentage
)

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def _round(value: Decimal) -> Decimal:
    # Redondeo comercial a centavos
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


class CommissionService:
    """Servicio de configuración y cálculo de comisiones"""

    def __init__(self, db: Session):
        self.db = db

    def get_commissions(self, user_id: str) -> List[CommissionConfig]:
        """Configuraciones activas del usuario"""
        try:
            return self.db.query(CommissionConfig).filter(
                CommissionConfig.user_id == user_id,
                CommissionConfig.is_active.is_(True)
            ).all()
        except SQLAlchemyError as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error al obtener configuraciones de comisiones: {str(e)}"
            )

    def create_default_commissions(self, user_id: str) -> List[CommissionConfig]:
        """
        Provisionar la tabla predeterminada en un único commit.

        Cada fila tiene un ID derivado de su clave natural, así que repetir
        la provisión no duplica filas: las existentes quedan intactas y sólo
        se insertan las faltantes.
        """
        keys = list(default_keys())
        ids = [config_id(user_id, *key) for key in keys]

        try:
            existing = {
                c.id: c for c in self.db.query(CommissionConfig).filter(CommissionConfig.id.in_(ids)).all()
            }

            configs = []
            created = 0
            for config_key, (method, brand, installments) in zip(ids, keys):
                config = existing.get(config_key)
                if config is None:
                    config = CommissionConfig(
                        id=config_key,
                        user_id=user_id,
                        payment_method=method.value,
                        card_brand=brand.value if brand else None,
                        installments=installments,
                        percentage=default_percentage(method, brand, installments),
                        is_active=True,
                    )
                    self.db.add(config)
                    created += 1
                configs.append(config)

            self.db.commit()

        except SQLAlchemyError as e:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error al crear configuraciones predeterminadas: {str(e)}"
            )

        logger.info(f"Comisiones predeterminadas para usuario {user_id}: {created} creadas, {len(configs) - created} existentes")
        return configs

    def update_commission(
        self, commission_id: str, updates: CommissionConfigUpdate, user_id: str
    ) -> CommissionConfig:
        """
        Actualizar porcentaje, monto fijo o estado.

        Inexistente y ajena responden igual hacia afuera (404).
        """
        config = self.db.get(CommissionConfig, commission_id)

        if config is None or config.user_id != user_id:
            if config is not None:
                logger.warning(f"Usuario {user_id} intentó modificar la comisión {commission_id} de otro usuario")
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Configuración de comisión no encontrada"
            )

        changes = updates.model_dump(exclude_unset=True)
        try:
            if changes.get("percentage") is not None:
                config.percentage = changes["percentage"]
            if "fixed_amount" in changes:
                config.fixed_amount = changes["fixed_amount"]
            if changes.get("is_active") is not None:
                config.is_active = changes["is_active"]

            self.db.commit()
            self.db.refresh(config)
            return config

        except SQLAlchemyError as e:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error al actualizar configuración de comisión: {str(e)}"
            )

    def calculate_commission(
        self,
        user_id: str,
        payment_method: Union[PaymentMethod, str],
        amount: Decimal,
        card_brand: Optional[Union[CardBrand, str]] = None,
        installments: Optional[int] = None
    ) -> Decimal:
        """
        Comisión = amount * porcentaje / 100 (+ monto fijo si la configuración lo tiene).

        Si el usuario no tiene configuración para la combinación, provisiona
        la tabla predeterminada y responde con el porcentaje de esa tabla
        (sin monto fijo). Cualquier error devuelve 0.
        """
        try:
            amount = Decimal(str(amount))
            method = PaymentMethod(payment_method)
            brand = CardBrand(card_brand) if card_brand else None

            query = self.db.query(CommissionConfig).filter(
                CommissionConfig.user_id == user_id,
                CommissionConfig.payment_method == method.value,
                CommissionConfig.is_active.is_(True)
            )
            if method == PaymentMethod.TARJETA_CREDITO and brand and installments:
                query = query.filter(
                    CommissionConfig.card_brand == brand.value,
                    CommissionConfig.installments == int(installments)
                )

            config = query.first()

            if config is None:
                self.create_default_commissions(user_id)
                percentage = default_percentage(method, brand, installments)
                return _round(amount * percentage / 100)

            commission = amount * Decimal(config.percentage) / 100
            return _round(commission + Decimal(config.fixed_amount or 0))

        except Exception:
            logger.exception(f"Error calculando comisión para usuario {user_id} ({payment_method})")
            try:
                self.db.rollback()
            except SQLAlchemyError:
                logger.warning("Rollback fallido tras error de comisión")
            return ZERO

    def get_organized_commissions(self, user_id: str) -> Dict[str, Any]:
        """Porcentajes activos agrupados por medio de pago, marca y cuotas"""
        organized: Dict[str, Any] = {
            PaymentMethod.EFECTIVO.value: ZERO,
            PaymentMethod.TRANSFERENCIA.value: ZERO,
            PaymentMethod.QR.value: ZERO,
            PaymentMethod.TARJETA_DEBITO.value: ZERO,
            PaymentMethod.TARJETA_CREDITO.value: {brand.value: {} for brand in CardBrand},
        }

        for config in self.get_commissions(user_id):
            if config.payment_method == PaymentMethod.TARJETA_CREDITO.value:
                if config.card_brand and config.installments:
                    organized[PaymentMethod.TARJETA_CREDITO.value].setdefault(
                        config.card_brand, {}
                    )[config.installments] = config.percentage
            else:
                organized[config.payment_method] = config.percentage

        return organized
