"""
Abstract Record Store Interface

DESIGN DECISION: The dashboard reads records through an abstract,
read-only interface. This allows us to:
1. Point the app at a hosted backend in production
2. Use in-memory records for tests and demos
3. Keep the aggregation engine unaware of where records come from

Writes (adding incomes, editing budgets) belong to the host
application's own forms and are not part of this interface.
"""

from abc import ABC, abstractmethod

from pocketbook.models.records import (
    Budget,
    Debt,
    ExpenseRecord,
    IncomeRecord,
    SavingsGoal,
)


class RecordStoreInterface(ABC):
    """
    Abstract interface for reading a user's financial records.
    
    Implementations return every row they can validate. Rows that fail
    validation are dropped by the implementation, not raised.
    """
    
    @abstractmethod
    async def list_incomes(self) -> list[IncomeRecord]:
        """
        List all income entries.
        
        Raises:
            StorageError: If the backend cannot be read
        """
        pass
    
    @abstractmethod
    async def list_expenses(self) -> list[ExpenseRecord]:
        """
        List all expense entries.
        
        Raises:
            StorageError: If the backend cannot be read
        """
        pass
    
    @abstractmethod
    async def list_debts(self) -> list[Debt]:
        """List all debts, borrowed and lent."""
        pass
    
    @abstractmethod
    async def list_savings_goals(self) -> list[SavingsGoal]:
        """List all savings goals."""
        pass
    
    @abstractmethod
    async def list_budgets(self) -> list[Budget]:
        """List all category budgets (at most one per category)."""
        pass


class StorageError(Exception):
    """Base exception for record store operations."""
    pass


class NotFoundError(StorageError):
    """Table or entity not found in storage."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
