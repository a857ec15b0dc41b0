from app.schemas.customer import (
    CustomerCreate,
    CustomerUpdate,
    CustomerResponse,
    CustomerListResponse,
)
from app.schemas.checklist import (
    TaskStatus,
    ServiceTask,
    TrailerProgress,
    OtherProgress,
    ChecklistSummary,
)
from app.schemas.line_items import (
    PartAndConsumable,
    PartsAndConsumables,
    Lubricant,
    LubricantsUsed,
)
from app.schemas.job_card import (
    JobCardCreate,
    JobCardUpdate,
    JobCardResponse,
    JobCardListResponse,
    PaymentStatus,
)
from app.schemas.form import (
    JobCardFormState,
    FormChange,
    FormChangeRequest,
)

__all__ = [
    "CustomerCreate",
    "CustomerUpdate",
    "CustomerResponse",
    "CustomerListResponse",
    "TaskStatus",
    "ServiceTask",
    "TrailerProgress",
    "OtherProgress",
    "ChecklistSummary",
    "PartAndConsumable",
    "PartsAndConsumables",
    "Lubricant",
    "LubricantsUsed",
    "JobCardCreate",
    "JobCardUpdate",
    "JobCardResponse",
    "JobCardListResponse",
    "PaymentStatus",
    "JobCardFormState",
    "FormChange",
    "FormChangeRequest",
]
