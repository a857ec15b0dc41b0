from app.models.customer import Customer
from app.models.job_card import JobCard

__all__ = [
    "Customer",
    "JobCard",
]
