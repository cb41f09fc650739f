"""
Calculation import endpoints.

Accept a damage-assessment export as raw JSON; failures answer 422 with the
Polish message meant for the invoice form.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends

from faktura.api.dependencies import get_import_calculation_use_case
from faktura.application.dto.requests import ApplyCalculationRequest
from faktura.application.dto.responses import (
    ApplyCalculationResponse,
    CalculationImportResponse,
    ErrorResponse,
)
from faktura.application.use_cases import ImportCalculationUseCase

router = APIRouter(prefix="/api/calculations", tags=["calculations"])


@router.post(
    "/import",
    response_model=CalculationImportResponse,
    responses={422: {"model": ErrorResponse, "description": "Calculation could not be imported"}},
)
async def import_calculation(
    payload: Any = Body(...),
    use_case: ImportCalculationUseCase = Depends(get_import_calculation_use_case),
) -> CalculationImportResponse:
    """Turn an export into invoice lines, claim metadata and their totals."""
    return use_case.to_response(use_case.execute(payload))


@router.post(
    "/apply",
    response_model=ApplyCalculationResponse,
    responses={422: {"model": ErrorResponse, "description": "Calculation could not be imported"}},
)
async def apply_calculation(
    request: ApplyCalculationRequest,
    use_case: ImportCalculationUseCase = Depends(get_import_calculation_use_case),
) -> ApplyCalculationResponse:
    """Merge an export into the invoice form data sent alongside it."""
    return use_case.to_apply_response(use_case.apply(request.payload, request.draft))
