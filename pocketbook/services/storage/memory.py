"""In-memory record store for tests, demos and unconfigured installs."""

from collections.abc import Iterable
from typing import Optional

from pocketbook.models.records import (
    Budget,
    Debt,
    ExpenseRecord,
    FinanceSnapshot,
    IncomeRecord,
    SavingsGoal,
)
from pocketbook.services.storage.interface import RecordStoreInterface


class InMemoryRecordStore(RecordStoreInterface):
    """
    Holds records in plain lists.
    
    Every list call returns a copy, so callers cannot mutate the
    store's contents through a result.
    """
    
    def __init__(
        self,
        incomes: Optional[Iterable[IncomeRecord]] = None,
        expenses: Optional[Iterable[ExpenseRecord]] = None,
        debts: Optional[Iterable[Debt]] = None,
        savings_goals: Optional[Iterable[SavingsGoal]] = None,
        budgets: Optional[Iterable[Budget]] = None,
    ):
        self._incomes = list(incomes or [])
        self._expenses = list(expenses or [])
        self._debts = list(debts or [])
        self._savings_goals = list(savings_goals or [])
        self._budgets = list(budgets or [])
    
    @classmethod
    def from_snapshot(cls, snapshot: FinanceSnapshot) -> "InMemoryRecordStore":
        return cls(
            incomes=snapshot.incomes,
            expenses=snapshot.expenses,
            debts=snapshot.debts,
            savings_goals=snapshot.savings_goals,
            budgets=snapshot.budgets,
        )
    
    async def list_incomes(self) -> list[IncomeRecord]:
        return list(self._incomes)
    
    async def list_expenses(self) -> list[ExpenseRecord]:
        return list(self._expenses)
    
    async def list_debts(self) -> list[Debt]:
        return list(self._debts)
    
    async def list_savings_goals(self) -> list[SavingsGoal]:
        return list(self._savings_goals)
    
    async def list_budgets(self) -> list[Budget]:
        return list(self._budgets)
