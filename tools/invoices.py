"""
Invoice tools.
"""

from typing import List, Literal, Optional

from pydantic import Field

from .args import DateStr, PageArgs
from .registry import OperationType, ToolArgs, descriptor_group, tool
from .results import json_result


RESOURCES = ["invoices"]

InvoiceStatus = Literal["draft", "sent", "paid"]


class ListInvoicesArgs(PageArgs):
    client: Optional[int] = Field(None, description="Filter invoices by client ID")
    status: Optional[InvoiceStatus] = Field(None, description="Filter invoices by status")


class InvoiceIdArgs(ToolArgs):
    id: int = Field(description="Invoice ID")


class CreateInvoiceArgs(ToolArgs):
    client: int = Field(description="Client ID to invoice")
    projects: Optional[List[str]] = Field(None, description="Project IDs to include")
    date_from: Optional[DateStr] = Field(None, description="Start of the billed period (YYYY-MM-DD)")
    date_till: Optional[DateStr] = Field(None, description="End of the billed period (YYYY-MM-DD)")
    issue_date: Optional[DateStr] = Field(None, description="Issue date (YYYY-MM-DD)")
    due_date: Optional[DateStr] = Field(None, description="Due date (YYYY-MM-DD)")
    notes: Optional[str] = Field(None, description="Notes printed on the invoice")


class UpdateStatusArgs(ToolArgs):
    id: int = Field(description="Invoice ID")
    status: InvoiceStatus = Field(description="New invoice status")


@tool(
    "everhour_list_invoices",
    "List invoices, optionally filtered by client and status.",
    ListInvoicesArgs, OperationType.READ, RESOURCES,
)
async def list_invoices(gateway, args: ListInvoicesArgs):
    invoices = await gateway.list_invoices(args.to_params()) or []
    return json_result({"invoices": invoices, "total": len(invoices)})


@tool(
    "everhour_get_invoice",
    "Get details of a specific invoice by ID.",
    InvoiceIdArgs, OperationType.READ, RESOURCES,
)
async def get_invoice(gateway, args: InvoiceIdArgs):
    invoice = await gateway.get_invoice(args.id)
    return json_result({"invoice": invoice})


@tool(
    "everhour_create_invoice",
    "Create a draft invoice for a client.",
    CreateInvoiceArgs, OperationType.WRITE, RESOURCES,
)
async def create_invoice(gateway, args: CreateInvoiceArgs):
    invoice = await gateway.create_invoice(args.to_params())
    return json_result({
        "invoice": invoice,
        "message": "Invoice created successfully",
    })


@tool(
    "everhour_update_invoice_status",
    "Mark an invoice as draft, sent or paid.",
    UpdateStatusArgs, OperationType.WRITE, RESOURCES,
)
async def update_invoice_status(gateway, args: UpdateStatusArgs):
    invoice = await gateway.update_invoice_status(args.id, args.status)
    return json_result({
        "invoice": invoice,
        "message": f"Invoice {args.id} marked as {args.status}",
    })


@tool(
    "everhour_delete_invoice",
    "Delete an invoice. This action cannot be undone.",
    InvoiceIdArgs, OperationType.DELETE, RESOURCES,
)
async def delete_invoice(gateway, args: InvoiceIdArgs):
    await gateway.delete_invoice(args.id)
    return json_result({
        "success": True,
        "message": f"Invoice {args.id} deleted successfully",
    })


TOOLS = descriptor_group(
    list_invoices,
    get_invoice,
    create_invoice,
    update_invoice_status,
    delete_invoice,
)
