"""orgchart models package."""

from .base import Base, TimestampMixin
from .company import Company, Employee

__all__ = [
    "Base",
    "TimestampMixin",
    "Company",
    "Employee",
]
