"""Re-export individual schema modules for easy imports."""

from .entry import EntryIn
from .progress import ChartPointOut, ComparisonOut, ProgressOut
from .session import CredentialsIn, TokenOut
from .settings import GoalIn, SettingsSaved

__all__ = [
    "EntryIn",
    "ChartPointOut",
    "ComparisonOut",
    "ProgressOut",
    "CredentialsIn",
    "TokenOut",
    "GoalIn",
    "SettingsSaved",
]
