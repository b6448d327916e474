"""
Year-by-year simulation loop and Monte-Carlo run manager.
"""

from .balance_sheet import BalanceSheetLine
from .cash_flow import CashFlowLine
from .kpi import Kpi, KpiDictionary
from .net_cash_flow import CashWithdrawal, NetCashFlowManager
from .results import KpiResult, SimulationResultLine, SimulationResultTable
from .simulation import Simulation
from .social_accounts import SocialAccounts

__all__ = [
    "BalanceSheetLine",
    "CashFlowLine",
    "CashWithdrawal",
    "Kpi",
    "KpiDictionary",
    "KpiResult",
    "NetCashFlowManager",
    "SimulationResultLine",
    "SimulationResultTable",
    "Simulation",
    "SocialAccounts",
]
