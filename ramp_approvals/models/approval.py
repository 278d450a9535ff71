from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer

Priority = Literal["low", "medium", "high"]
ApprovalType = Literal["transaction", "reimbursement"]

HIGH_PRIORITY_AMOUNT = Decimal("100000")
MEDIUM_PRIORITY_AMOUNT = Decimal("50000")


def calculate_priority(amount: Decimal) -> Priority:
    """Priority tier is a pure function of the major-unit amount."""
    if amount >= HIGH_PRIORITY_AMOUNT:
        return "high"
    if amount >= MEDIUM_PRIORITY_AMOUNT:
        return "medium"
    return "low"


class Approval(BaseModel):
    """
    A transaction or reimbursement awaiting review, in dashboard shape.

    Serialized with camelCase keys (``dateSubmitted``, ``amountMinorUnits``)
    to match what the dashboard client reads.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    department: str = "unknown"
    description: str = ""
    amount: Decimal = Field(ge=0)
    amount_minor_units: int | None = Field(default=None, alias="amountMinorUnits")
    currency: str = "USD"
    requestor: str = ""
    date_submitted: str | None = Field(default=None, alias="dateSubmitted")
    priority: Priority
    status: str = "pending"
    type: ApprovalType

    @field_serializer("amount")
    def _amount_as_number(self, amount: Decimal) -> float | int:
        # JSON clients expect a number, not pydantic's default Decimal string
        return int(amount) if amount == amount.to_integral_value() else float(amount)


class ApprovalsResponse(BaseModel):
    """Success envelope for GET /api/approvals"""
    success: bool = True
    data: list[Approval]
    count: int
    source: str = "ramp-api"
