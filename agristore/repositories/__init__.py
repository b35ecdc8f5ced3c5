from .base import Repository
from .unit_of_work import UnitOfWork

__all__ = ["Repository", "UnitOfWork"]
