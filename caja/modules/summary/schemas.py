"""
Esquemas Pydantic para el módulo de Resúmenes
"""

from decimal import Decimal
import datetime as dt

from caja.common.responses import CamelModel, Money


class DailySummary(CamelModel):
    """
    Cierre de caja de un día.

    total_net = total_cash + total_digital - total_commissions
    final_balance = total_net - total_withdrawals
    """
    date: dt.date
    total_cash: Money = Decimal("0")
    total_digital: Money = Decimal("0")
    total_commissions: Money = Decimal("0")
    total_net: Money = Decimal("0")
    sales_count: int = 0
    total_withdrawals: Money = Decimal("0")
    withdrawals_count: int = 0
    final_balance: Money = Decimal("0")
