"""Simulated escrow split between the platform fee and the instructor payout."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from instructormatch.domain.errors import ValidationError

CENT = Decimal("0.01")
DEFAULT_SERVICE_FEE_RATE = Decimal("0.10")


@dataclass(frozen=True, slots=True)
class EscrowSplit:
    amount: Decimal
    service_fee: Decimal
    instructor_amount: Decimal


def to_money(value: Decimal | int | float | str) -> Decimal:
    """Quantize a value to cents, rounding half up."""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def compute_escrow_split(
    total_amount: Decimal | int | float | str,
    fee_rate: Decimal = DEFAULT_SERVICE_FEE_RATE,
) -> EscrowSplit:
    """Split ``total_amount`` into service fee and instructor payout.

    The payout is derived by subtraction, so ``service_fee + instructor_amount``
    always equals the (cent-quantized) amount exactly.
    """
    amount = to_money(total_amount)
    if amount < 0:
        raise ValidationError("Total amount must not be negative")

    service_fee = to_money(amount * fee_rate)
    return EscrowSplit(
        amount=amount,
        service_fee=service_fee,
        instructor_amount=amount - service_fee,
    )
