"""
Expense tools.
"""

from typing import Optional

from pydantic import Field

from .args import DateStr, PageArgs
from .registry import NoArgs, OperationType, ToolArgs, descriptor_group, tool
from .results import json_result


RESOURCES = ["expenses"]


class ListExpensesArgs(PageArgs):
    project: Optional[str] = Field(None, description="Filter expenses by project ID")
    user: Optional[int] = Field(None, description="Filter expenses by user ID")
    from_: Optional[DateStr] = Field(None, alias="from", description="Start date (YYYY-MM-DD)")
    to: Optional[DateStr] = Field(None, description="End date (YYYY-MM-DD)")


class CreateExpenseArgs(ToolArgs):
    category: int = Field(description="Expense category ID")
    amount: float = Field(gt=0, description="Expense amount")
    date: DateStr
    project: Optional[str] = Field(None, description="Project ID the expense belongs to")
    user: Optional[int] = Field(None, description="User ID who incurred the expense")
    details: Optional[str] = Field(None, description="Description of the expense")
    billable: Optional[bool] = Field(None, description="Whether the expense is billable")


class ExpenseIdArgs(ToolArgs):
    id: int = Field(description="Expense ID")


@tool(
    "everhour_list_expenses",
    "List expenses, optionally filtered by project, user and date range.",
    ListExpensesArgs, OperationType.READ, RESOURCES,
)
async def list_expenses(gateway, args: ListExpensesArgs):
    expenses = await gateway.list_expenses(args.to_params()) or []
    return json_result({"expenses": expenses, "total": len(expenses)})


@tool(
    "everhour_list_expense_categories",
    "List expense categories.",
    NoArgs, OperationType.READ, RESOURCES,
)
async def list_expense_categories(gateway, args: NoArgs):
    categories = await gateway.list_expense_categories() or []
    return json_result({"categories": categories, "total": len(categories)})


@tool(
    "everhour_create_expense",
    "Record a new expense.",
    CreateExpenseArgs, OperationType.WRITE, RESOURCES,
)
async def create_expense(gateway, args: CreateExpenseArgs):
    expense = await gateway.create_expense(args.to_params())
    return json_result({
        "expense": expense,
        "message": "Expense created successfully",
    })


@tool(
    "everhour_delete_expense",
    "Delete an expense. This action cannot be undone.",
    ExpenseIdArgs, OperationType.DELETE, RESOURCES,
)
async def delete_expense(gateway, args: ExpenseIdArgs):
    await gateway.delete_expense(args.id)
    return json_result({
        "success": True,
        "message": f"Expense {args.id} deleted successfully",
    })


TOOLS = descriptor_group(
    list_expenses,
    list_expense_categories,
    create_expense,
    delete_expense,
)
