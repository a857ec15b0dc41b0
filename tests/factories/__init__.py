"""
Test factories for generating realistic test data.

Uses factory_boy for declarative test data generation.
"""

from .customer import CustomerFactory, CompanyCustomerFactory
from .job_card import (
    JobCardFactory,
    TrailerJobCardFactory,
    OtherVehicleJobCardFactory,
    PartFactory,
    LubricantFactory,
)

__all__ = [
    "CustomerFactory",
    "CompanyCustomerFactory",
    # Job cards
    "JobCardFactory",
    "TrailerJobCardFactory",
    "OtherVehicleJobCardFactory",
    "PartFactory",
    "LubricantFactory",
]
