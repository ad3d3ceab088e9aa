"""ThaiSave Core - Thai savings account interest simulation."""

__version__ = "0.1.0"

from .calculator import SavingsCalculator, compute_savings_daily_actual365
from .models import SavingsInput, SavingsResult

__all__ = [
    "SavingsCalculator",
    "compute_savings_daily_actual365",
    "SavingsInput",
    "SavingsResult",
]
