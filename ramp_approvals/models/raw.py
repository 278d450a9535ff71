"""
Partial views of Ramp API records.

Ramp payloads carry many more fields than the dashboard needs and any of the
nested objects may be missing. Each model declares only what normalization
reads, with an explicit default for every field, so absence is handled by
the model rather than by optional chaining at each use site.
"""

from pydantic import BaseModel, ConfigDict


class RampPerson(BaseModel):
    """Card holder (transactions) or submitting user (reimbursements)"""
    model_config = ConfigDict(extra="ignore")

    first_name: str | None = None
    last_name: str | None = None
    department_name: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()


class RampAmount(BaseModel):
    """Nested amount object, always in minor units"""
    model_config = ConfigDict(extra="ignore")

    amount: int | None = None
    currency_code: str | None = None


class RampTransaction(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    amount: int | RampAmount | None = None
    currency_code: str | None = None
    merchant_name: str | None = None
    merchant_descriptor: str | None = None
    card_holder: RampPerson | None = None
    user_transaction_time: str | None = None
    accounting_date: str | None = None
    state: str | None = None


class RampReimbursement(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    amount: int | RampAmount | None = None
    currency: str | None = None
    memo: str | None = None
    user: RampPerson | None = None
    created_at: str | None = None
    status: str | None = None
