from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional

from database.models import SubmissionPurpose, SubmissionCategory, SubmissionStatus


class SubmissionCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    purpose_of_submission: SubmissionPurpose
    recipient: str = Field(min_length=1, max_length=255)
    provider_id: str
    claim_id: Optional[str] = Field(default=None, max_length=100)
    case_id: Optional[str] = Field(default=None, max_length=32)
    comments: Optional[str] = None
    category: SubmissionCategory = SubmissionCategory.DEFAULT
    auto_split: bool = False
    send_in_x12: bool = False
    threshold: int = Field(default=100, ge=1)


class SubmissionResponse(BaseModel):
    id: str
    title: str
    purpose_of_submission: SubmissionPurpose
    recipient: str
    claim_id: Optional[str]
    case_id: Optional[str]
    comments: Optional[str]
    status: SubmissionStatus
    author_type: str
    category: SubmissionCategory
    auto_split: bool
    send_in_x12: bool
    threshold: int
    transaction_id: Optional[str]
    response_message: Optional[str]
    error_description: Optional[str]
    submitted_at: Optional[datetime]
    creator_id: str
    provider_id: str
    customer_id: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class SubmissionListResponse(BaseModel):
    submissions: list[SubmissionResponse]
    total: int
