"""
Servicio de resúmenes de caja

Agrega ventas y retiros por día calendario. No persiste nada: cada resumen
se calcula al momento de la consulta.
"""

from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from collections import defaultdict
from calendar import monthrange
from datetime import date, timedelta
from decimal import Decimal
from typing import List
import logging

from caja.modules.sales.service import SaleService
from caja.modules.withdrawals.service import WithdrawalService
from caja.modules.summary.schemas import DailySummary

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
MAX_RANGE_DAYS = 366


class SummaryService:
    """Resúmenes diarios, por rango y mensuales de un usuario"""

    def __init__(self, db: Session, user_id: str):
        self.db = db
        self.user_id = user_id
        self.sales = SaleService(db)
        self.withdrawals = WithdrawalService(db)

    def _build_summaries(self, start_date: date, end_date: date) -> List[DailySummary]:
        """Un resumen por cada día del rango (inclusive), días sin actividad en cero"""
        sales_by_day = defaultdict(list)
        for sale in self.sales.get_sales_by_date_range(start_date, end_date, self.user_id):
            sales_by_day[sale.date].append(sale)

        withdrawals_by_day = defaultdict(list)
        for withdrawal in self.withdrawals.get_withdrawals_by_date_range(start_date, end_date, self.user_id):
            withdrawals_by_day[withdrawal.date].append(withdrawal)

        summaries = []
        day = start_date
        while day <= end_date:
            sales = sales_by_day.get(day, [])
            withdrawals = withdrawals_by_day.get(day, [])

            total_cash = sum((Decimal(s.cash_amount) for s in sales), ZERO)
            total_digital = sum((Decimal(s.digital_amount) for s in sales), ZERO)
            total_commissions = sum((Decimal(s.commission_amount) for s in sales), ZERO)
            total_withdrawals = sum((Decimal(w.amount) for w in withdrawals), ZERO)
            total_net = total_cash + total_digital - total_commissions

            summaries.append(DailySummary(
                date=day,
                total_cash=total_cash,
                total_digital=total_digital,
                total_commissions=total_commissions,
                total_net=total_net,
                sales_count=len(sales),
                total_withdrawals=total_withdrawals,
                withdrawals_count=len(withdrawals),
                final_balance=total_net - total_withdrawals,
            ))
            day += timedelta(days=1)

        return summaries

    def get_daily_summary(self, day: date) -> DailySummary:
        return self._build_summaries(day, day)[0]

    def get_range_summary(self, start_date: date, end_date: date) -> List[DailySummary]:
        if start_date > end_date:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="La fecha de inicio debe ser anterior o igual a la fecha de fin"
            )
        if (end_date - start_date).days >= MAX_RANGE_DAYS:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"El rango no puede superar {MAX_RANGE_DAYS} días"
            )

        logger.debug(f"Resumen {start_date}..{end_date} para usuario {self.user_id}")
        return self._build_summaries(start_date, end_date)

    def get_month_summary(self, year: int, month: int) -> List[DailySummary]:
        """Un resumen por cada día del mes"""
        if not 1 <= month <= 12:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Mes inválido")

        last_day = monthrange(year, month)[1]
        return self.get_range_summary(date(year, month, 1), date(year, month, last_day))
