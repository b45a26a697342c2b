"""Contracts and the simulated escrow that backs them.

A contract is created from caller-supplied terms together with a payment row
holding the escrow split. No payment processor is involved: "released" only
means the payout was credited to the instructor's earnings.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING

import structlog
from instructormatch.core.config import get_settings
from instructormatch.domain.errors import ForbiddenError, NotFoundError, ValidationError
from instructormatch.domain.escrow import compute_escrow_split, to_money
from instructormatch.infrastructure.db.models import (
    Company,
    Contract,
    ContractStatus,
    Instructor,
    Payment,
    PaymentStatus,
    TrainingRequest,
    utcnow,
)
from sqlalchemy import or_, select
from sqlalchemy.orm import selectinload

if TYPE_CHECKING:
    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger(__name__)

CONTRACT_TRANSITIONS: dict[ContractStatus, frozenset[ContractStatus]] = {
    ContractStatus.DRAFT: frozenset({ContractStatus.SIGNED, ContractStatus.DISPUTED}),
    ContractStatus.SIGNED: frozenset({ContractStatus.COMPLETED, ContractStatus.DISPUTED}),
    ContractStatus.COMPLETED: frozenset(),
    ContractStatus.DISPUTED: frozenset(),
}


@dataclass(slots=True)
class ContractWithPayment:
    contract: Contract
    payment: Payment | None


class ContractService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_contract(
        self,
        *,
        request_id: str,
        company_id: str,
        instructor_id: str,
        agreed_rate: Decimal,
        total_amount: Decimal,
        terms: str | None = None,
    ) -> ContractWithPayment:
        """Persist a draft contract and its escrow payment in one transaction."""
        if await self.session.get(TrainingRequest, request_id) is None:
            raise NotFoundError(f"Training request {request_id} not found")
        if await self.session.get(Company, company_id) is None:
            raise NotFoundError(f"Company {company_id} not found")
        if await self.session.get(Instructor, instructor_id) is None:
            raise NotFoundError(f"Instructor {instructor_id} not found")

        split = compute_escrow_split(total_amount, get_settings().service_fee_rate)

        contract = Contract(
            request_id=request_id,
            company_id=company_id,
            instructor_id=instructor_id,
            agreed_rate=to_money(agreed_rate),
            total_amount=split.amount,
            terms=terms,
            status=ContractStatus.DRAFT,
        )
        try:
            self.session.add(contract)
            await self.session.flush()

            payment = Payment(
                contract_id=contract.id,
                amount=split.amount,
                service_fee=split.service_fee,
                instructor_amount=split.instructor_amount,
                status=PaymentStatus.HELD_IN_ESCROW,
                paid_at=utcnow(),
            )
            self.session.add(payment)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        await logger.ainfo(
            "contract_created",
            contract_id=contract.id,
            request_id=request_id,
            total_amount=str(split.amount),
            service_fee=str(split.service_fee),
            instructor_amount=str(split.instructor_amount),
        )
        return ContractWithPayment(contract=contract, payment=payment)

    async def list_for_user(self, user_id: str) -> list[Contract]:
        """Contracts where the caller is the company or the instructor, newest first."""
        company_ids = select(Company.id).where(Company.user_id == user_id)
        instructor_ids = select(Instructor.id).where(Instructor.user_id == user_id)
        stmt: Select[tuple[Contract]] = (
            select(Contract)
            .where(
                or_(
                    Contract.company_id.in_(company_ids),
                    Contract.instructor_id.in_(instructor_ids),
                )
            )
            .options(selectinload(Contract.payments))
            .order_by(Contract.created_at.desc(), Contract.id)
        )
        return list((await self.session.scalars(stmt)).all())

    async def update_status(
        self, *, contract_id: str, user_id: str, status: ContractStatus
    ) -> ContractWithPayment:
        stmt = (
            select(Contract)
            .where(Contract.id == contract_id)
            .options(selectinload(Contract.payments))
        )
        contract = await self.session.scalar(stmt)
        if contract is None:
            raise NotFoundError(f"Contract {contract_id} not found")

        company = await self.session.get(Company, contract.company_id)
        instructor = await self.session.get(
            Instructor, contract.instructor_id, with_for_update=True
        )
        party_ids = {party.user_id for party in (company, instructor) if party is not None}
        if user_id not in party_ids:
            raise ForbiddenError("You are not a party to this contract")

        if status not in CONTRACT_TRANSITIONS[contract.status]:
            raise ValidationError(
                f"Cannot move contract from {contract.status.value} to {status.value}"
            )

        payment = contract.payments[0] if contract.payments else None
        now = utcnow()
        try:
            contract.status = status
            if status == ContractStatus.SIGNED:
                contract.signed_at = now
            elif status == ContractStatus.COMPLETED:
                contract.completed_at = now
                if payment is not None and payment.status == PaymentStatus.HELD_IN_ESCROW:
                    payment.status = PaymentStatus.RELEASED
                    payment.released_at = now
                    if instructor is not None:
                        instructor.total_earnings = (
                            instructor.total_earnings or Decimal("0")
                        ) + payment.instructor_amount
                if instructor is not None:
                    instructor.completed_sessions = (instructor.completed_sessions or 0) + 1
            elif status == ContractStatus.DISPUTED and payment is not None:
                payment.status = PaymentStatus.DISPUTED
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        await logger.ainfo(
            "contract_status_changed",
            contract_id=contract.id,
            status=status.value,
            payment_status=payment.status.value if payment else None,
        )
        return ContractWithPayment(contract=contract, payment=payment)
