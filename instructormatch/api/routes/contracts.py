from __future__ import annotations

from fastapi import APIRouter, Depends, status
from instructormatch.api.deps import get_current_account, get_db_session
from instructormatch.api.errors import to_http_exception
from instructormatch.api.schemas.contracts import (
    ContractCreate,
    ContractResponse,
    ContractStatusUpdate,
    PaymentResponse,
)
from instructormatch.domain import MarketplaceError
from instructormatch.domain.services.contracts import ContractService, ContractWithPayment
from instructormatch.infrastructure.db.models import ContractStatus, UserModel
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/api/contracts", tags=["Contracts"])


def _contract_out(result: ContractWithPayment) -> ContractResponse:
    response = ContractResponse.model_validate(result.contract)
    if result.payment is not None:
        response.payment = PaymentResponse.model_validate(result.payment)
    return response


@router.post("", response_model=ContractResponse, status_code=status.HTTP_201_CREATED)
async def create_contract(
    payload: ContractCreate,
    account: UserModel = Depends(get_current_account),
    session: AsyncSession = Depends(get_db_session),
) -> ContractResponse:
    """
    Create a draft contract and hold its payment in escrow.

    The payment splits `totalAmount` into a 10% service fee and the instructor's share.
    """
    service = ContractService(session)
    try:
        result = await service.create_contract(
            request_id=payload.request_id,
            company_id=payload.company_id,
            instructor_id=payload.instructor_id,
            agreed_rate=payload.agreed_rate,
            total_amount=payload.total_amount,
            terms=payload.terms,
        )
    except MarketplaceError as exc:
        raise to_http_exception(exc) from exc
    return _contract_out(result)


@router.get("", response_model=list[ContractResponse])
async def list_contracts(
    account: UserModel = Depends(get_current_account),
    session: AsyncSession = Depends(get_db_session),
) -> list[ContractResponse]:
    contracts = await ContractService(session).list_for_user(account.id)
    return [
        _contract_out(
            ContractWithPayment(
                contract=contract,
                payment=contract.payments[0] if contract.payments else None,
            )
        )
        for contract in contracts
    ]


@router.put("/{contract_id}/status", response_model=ContractResponse)
async def update_contract_status(
    contract_id: str,
    payload: ContractStatusUpdate,
    account: UserModel = Depends(get_current_account),
    session: AsyncSession = Depends(get_db_session),
) -> ContractResponse:
    """Sign, complete (releasing escrow) or dispute a contract."""
    service = ContractService(session)
    try:
        result = await service.update_status(
            contract_id=contract_id,
            user_id=account.id,
            status=ContractStatus(payload.status),
        )
    except MarketplaceError as exc:
        raise to_http_exception(exc) from exc
    return _contract_out(result)
