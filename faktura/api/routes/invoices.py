"""
Invoice management endpoints.

Plain CRUD is open to the invoice form; automation intake and completion
require the X-Automation-Secret header.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, Request, status
from fastapi.responses import Response

from faktura.api.dependencies import (
    get_automation_use_case,
    get_complete_invoice_use_case,
    get_create_invoice_use_case,
    get_import_calculation_use_case,
    get_inv_store,
    get_preview_invoice_use_case,
    get_update_invoice_use_case,
    require_automation_secret,
)
from faktura.application.dto.requests import (
    AutomationInvoiceRequest,
    CreateInvoiceRequest,
    PreviewInvoiceRequest,
    UpdateInvoiceRequest,
)
from faktura.application.dto.responses import (
    AutomationInvoiceResponse,
    ErrorResponse,
    InvoiceListResponse,
    InvoicePreviewResponse,
    InvoiceResponse,
)
from faktura.application.use_cases import (
    CompleteInvoiceUseCase,
    CreateInvoiceFromAutomationUseCase,
    CreateInvoiceUseCase,
    ImportCalculationUseCase,
    PreviewInvoiceUseCase,
    UpdateInvoiceUseCase,
    calculation_to_automation_request,
)
from faktura.core.entities import InvoiceStatus
from faktura.core.exceptions import InvoiceNotFoundError
from faktura.infrastructure.storage.sqlite import SQLiteInvoiceStore

router = APIRouter(prefix="/api/invoices", tags=["invoices"])

AUTOMATION_RESPONSES: dict[int | str, dict[str, Any]] = {
    401: {"model": ErrorResponse, "description": "Wrong or missing automation secret"},
    503: {"model": ErrorResponse, "description": "AUTOMATION_SECRET not configured"},
}


def _host_url(request: Request) -> str:
    return str(request.base_url).rstrip("/")


@router.get("", response_model=InvoiceListResponse)
async def list_invoices(
    limit: int = 100,
    offset: int = 0,
    invoice_status: InvoiceStatus | None = None,
    store: SQLiteInvoiceStore = Depends(get_inv_store),
) -> InvoiceListResponse:
    """List invoices, newest first."""
    invoices = await store.list_invoices(limit=limit, offset=offset, status=invoice_status)
    total = await store.count_invoices(status=invoice_status)

    return InvoiceListResponse(
        invoices=[InvoiceResponse.from_invoice(inv) for inv in invoices],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.post(
    "",
    response_model=InvoiceResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse, "description": "Invalid invoice"}},
)
async def create_invoice(
    request: CreateInvoiceRequest,
    use_case: CreateInvoiceUseCase = Depends(get_create_invoice_use_case),
) -> InvoiceResponse:
    """Create a draft invoice; totals are computed from the items."""
    invoice = await use_case.execute(request)
    return use_case.to_response(invoice)


@router.post("/preview", response_model=InvoicePreviewResponse)
async def preview_invoice(
    request: PreviewInvoiceRequest,
    use_case: PreviewInvoiceUseCase = Depends(get_preview_invoice_use_case),
) -> InvoicePreviewResponse:
    """Compute line amounts, VAT summary and totals without saving."""
    return use_case.to_response(use_case.execute(request))


@router.post(
    "/from-automation",
    response_model=AutomationInvoiceResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_automation_secret)],
    responses={
        400: {"model": ErrorResponse, "description": "Webhook domain not allowed"},
        **AUTOMATION_RESPONSES,
    },
)
async def create_invoice_from_automation(
    body: AutomationInvoiceRequest,
    request: Request,
    use_case: CreateInvoiceFromAutomationUseCase = Depends(get_automation_use_case),
) -> AutomationInvoiceResponse:
    """
    Create a draft invoice from a workflow automation request.

    Missing seller, buyer and items are filled with configured defaults.
    Returns the invoice and the URL of its edit form.
    """
    result = await use_case.execute(body, host_url=_host_url(request))
    return use_case.to_response(result)


@router.post(
    "/from-calculation",
    response_model=AutomationInvoiceResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_automation_secret)],
    responses={
        422: {"model": ErrorResponse, "description": "Calculation could not be imported"},
        **AUTOMATION_RESPONSES,
    },
)
async def create_invoice_from_calculation(
    request: Request,
    payload: Any = Body(...),
    webhook_url: str | None = None,
    import_use_case: ImportCalculationUseCase = Depends(get_import_calculation_use_case),
    use_case: CreateInvoiceFromAutomationUseCase = Depends(get_automation_use_case),
) -> AutomationInvoiceResponse:
    """Import a calculation export straight into a new draft invoice."""
    imported = import_use_case.execute(payload)
    automation_request = calculation_to_automation_request(imported, webhook_url=webhook_url)
    result = await use_case.execute(automation_request, host_url=_host_url(request))
    return use_case.to_response(result)


@router.get(
    "/{invoice_id}",
    response_model=InvoiceResponse,
    responses={404: {"model": ErrorResponse, "description": "Invoice not found"}},
)
async def get_invoice(
    invoice_id: str,
    store: SQLiteInvoiceStore = Depends(get_inv_store),
) -> InvoiceResponse:
    """Get invoice by ID."""
    invoice = await store.get_invoice(invoice_id)
    if invoice is None:
        raise InvoiceNotFoundError(invoice_id)
    return InvoiceResponse.from_invoice(invoice)


@router.put(
    "/{invoice_id}",
    response_model=InvoiceResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Invoice not found"},
        409: {"model": ErrorResponse, "description": "Completed invoice cannot be reopened"},
        422: {"model": ErrorResponse, "description": "Invalid invoice"},
    },
)
async def update_invoice(
    invoice_id: str,
    request: UpdateInvoiceRequest,
    use_case: UpdateInvoiceUseCase = Depends(get_update_invoice_use_case),
) -> InvoiceResponse:
    """
    Update an invoice with the fields sent.

    Totals are recomputed from the merged record. Setting status to
    completed notifies the invoice's webhook once.
    """
    invoice = await use_case.execute(invoice_id, request)
    return use_case.to_response(invoice)


@router.delete(
    "/{invoice_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse, "description": "Invoice not found"}},
)
async def delete_invoice(
    invoice_id: str,
    store: SQLiteInvoiceStore = Depends(get_inv_store),
) -> Response:
    """Delete an invoice and its items."""
    if not await store.delete_invoice(invoice_id):
        raise InvoiceNotFoundError(invoice_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{invoice_id}/complete",
    response_model=InvoiceResponse,
    dependencies=[Depends(require_automation_secret)],
    responses={
        404: {"model": ErrorResponse, "description": "Invoice not found"},
        **AUTOMATION_RESPONSES,
    },
)
async def complete_invoice(
    invoice_id: str,
    use_case: CompleteInvoiceUseCase = Depends(get_complete_invoice_use_case),
) -> InvoiceResponse:
    """Mark an invoice completed; the webhook is delivered at most once."""
    invoice = await use_case.execute(invoice_id)
    return use_case.to_response(invoice)
