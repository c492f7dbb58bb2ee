from database.models.customer import Customer
from database.models.provider_group import ProviderGroup
from database.models.provider import Provider, UserNpi
from database.models.role import Role, UserRole
from database.models.user import User
from database.models.submission import (
    Submission,
    SubmissionPurpose,
    SubmissionCategory,
    SubmissionStatus,
    PURPOSE_SUBMISSION_TYPES,
)

__all__ = [
    "Customer",
    "ProviderGroup",
    "Provider",
    "UserNpi",
    "Role",
    "UserRole",
    "User",
    # Submission models
    "Submission",
    "SubmissionPurpose",
    "SubmissionCategory",
    "SubmissionStatus",
    "PURPOSE_SUBMISSION_TYPES",
]
