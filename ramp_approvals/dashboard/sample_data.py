"""
Fallback approvals shown when the live Ramp feed is unavailable.

Priorities are derived from the amount like every other Approval, so the
sample behaves exactly like live data under filtering and sorting.
"""

from decimal import Decimal

from ..models.approval import Approval, calculate_priority

_SAMPLE_ROWS = [
    ("REQ-2024-001", "finance", "New accounting software licenses", 25000, "Sarah Johnson", "2024-01-08"),
    ("REQ-2024-002", "operations", "Manufacturing equipment upgrade", 150000, "Mike Chen", "2024-01-05"),
    ("REQ-2024-003", "marketing", "Annual trade show booth rental", 35000, "Emily Rodriguez", "2024-01-10"),
    ("REQ-2024-004", "it", "Cloud infrastructure scaling", 75000, "David Kim", "2024-01-07"),
    ("REQ-2024-005", "operations", "Warehouse expansion project", 220000, "Lisa Thompson", "2024-01-03"),
    ("REQ-2024-006", "finance", "Risk management software", 18000, "Robert Wilson", "2024-01-09"),
    ("REQ-2024-007", "marketing", "Digital advertising campaign", 45000, "Jennifer Davis", "2024-01-06"),
    ("REQ-2024-008", "it", "Cybersecurity upgrade package", 60000, "Alex Martinez", "2024-01-04"),
    ("REQ-2024-009", "operations", "Fleet vehicle replacement", 95000, "Maria Garcia", "2024-01-11"),
    ("REQ-2024-010", "finance", "Audit and compliance tools", 32000, "James Brown", "2024-01-02"),
]


def sample_approvals() -> list[Approval]:
    """A fresh copy of the sample list"""
    approvals = []
    for approval_id, department, description, dollars, requestor, submitted in _SAMPLE_ROWS:
        amount = Decimal(dollars)
        approvals.append(Approval(
            id=approval_id,
            department=department,
            description=description,
            amount=amount,
            amount_minor_units=dollars * 100,
            requestor=requestor,
            date_submitted=submitted,
            priority=calculate_priority(amount),
            status="pending",
            type="reimbursement",
        ))
    return approvals
