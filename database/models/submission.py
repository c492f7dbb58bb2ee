"""Database models for document submissions sent to the CMS HIH Gateway."""
import uuid
from datetime import datetime
from sqlmodel import SQLModel, Field, Column
from sqlalchemy import Text, String
from typing import Optional
from enum import Enum


class SubmissionPurpose(str, Enum):
    """Purpose of submission as understood by the HIH Gateway"""
    ADR = "ADR"                                  # Response to Additional Documentation Request
    UNSOLICITED_PWK_XDR = "UNSOLICITED_PWK_XDR"
    PA_AMBULANCE = "PA_AMBULANCE"                # Non-Emergent Ambulance Transport PA Request
    HHPCR = "HHPCR"                              # Home Health Pre-Claim Review
    PA_DMEPOS = "PA_DMEPOS"
    HOPD = "HOPD"
    FIRST_APPEAL = "FIRST_APPEAL"
    SECOND_APPEAL = "SECOND_APPEAL"
    ADMC = "ADMC"                                # Advance Determination of Medicare Coverage
    RA_DISCUSSION = "RA_DISCUSSION"
    DME_DISCUSSION = "DME_DISCUSSION"


# Submission type code (see core.permissions.SUBMISSION_TYPES) gating each purpose
PURPOSE_SUBMISSION_TYPES = {
    SubmissionPurpose.ADR: "ADR",
    SubmissionPurpose.UNSOLICITED_PWK_XDR: "PWK",
    SubmissionPurpose.PA_AMBULANCE: "PA_ABT",
    SubmissionPurpose.HHPCR: "HH_PRE_CLAIM",
    SubmissionPurpose.PA_DMEPOS: "PA_DMEPOS",
    SubmissionPurpose.HOPD: "HOPD",
    SubmissionPurpose.FIRST_APPEAL: "FIRST_APPEAL",
    SubmissionPurpose.SECOND_APPEAL: "SECOND_APPEAL",
    SubmissionPurpose.ADMC: "ADMC",
    SubmissionPurpose.RA_DISCUSSION: "RA_DISCUSSION",
    SubmissionPurpose.DME_DISCUSSION: "DME_DISCUSSION",
}


class SubmissionCategory(str, Enum):
    DEFAULT = "DEFAULT"
    MEDICAL_REVIEW = "MEDICAL_REVIEW"
    NON_MEDICAL_REVIEW = "NON_MEDICAL_REVIEW"
    RESPONSES_FOR_PA = "RESPONSES_FOR_PA"


class SubmissionStatus(str, Enum):
    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    ERROR = "ERROR"


class Submission(SQLModel, table=True):
    __tablename__ = "submissions"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    title: str = Field(max_length=255)
    purpose_of_submission: SubmissionPurpose = Field(sa_column=Column(String(50), index=True))
    recipient: str = Field(max_length=255)
    claim_id: Optional[str] = Field(default=None, max_length=100)
    case_id: Optional[str] = Field(default=None, max_length=32)
    comments: Optional[str] = Field(default=None, sa_column=Column(Text))
    status: SubmissionStatus = Field(
        default=SubmissionStatus.DRAFT,
        sa_column=Column(String(20), index=True),
    )
    author_type: str = Field(default="Individual", max_length=50)

    # HIH Gateway options
    category: SubmissionCategory = Field(
        default=SubmissionCategory.DEFAULT,
        sa_column=Column(String(50)),
    )
    auto_split: bool = Field(default=False)
    send_in_x12: bool = Field(default=False)
    threshold: int = Field(default=100)

    # Gateway response tracking
    transaction_id: Optional[str] = Field(default=None, max_length=255)
    response_message: Optional[str] = Field(default=None, sa_column=Column(Text))
    error_description: Optional[str] = Field(default=None, sa_column=Column(Text))
    submitted_at: Optional[datetime] = Field(default=None)

    creator_id: str = Field(foreign_key="users.id", index=True)
    provider_id: str = Field(foreign_key="providers.id", index=True)
    customer_id: str = Field(foreign_key="customers.id", index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
