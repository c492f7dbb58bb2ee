from datetime import datetime
from typing import Optional
from sqlmodel import Session, select, func
from sqlalchemy import update

from database.models import (
    Provider,
    Submission,
    SubmissionStatus,
    UserNpi,
    User,
    PURPOSE_SUBMISSION_TYPES,
)
from database.scoping import scope_submissions
from api.submission.schemas import SubmissionCreate
from core.scope import ScopeFilter
from services.hih_gateway import HIHSubmissionResult

# Statuses from which a submission may be (re)sent
SENDABLE_STATUSES = (SubmissionStatus.DRAFT.value, SubmissionStatus.ERROR.value)


def get_submission(session: Session, submission_id: str) -> Optional[Submission]:
    return session.get(Submission, submission_id)


def allowed_purposes(submission_types: list[str]) -> list[str]:
    """Purposes whose submission type is among the given type codes."""
    return [
        purpose.value
        for purpose, submission_type in PURPOSE_SUBMISSION_TYPES.items()
        if submission_type in submission_types
    ]


def visible_submissions(
    statement,
    scope: Optional[ScopeFilter],
    user: User,
    viewable_types: list[str],
):
    """Restrict a submission query to what a caller may see.

    Without a scope the caller sees submissions for their assigned NPIs.
    """
    if scope is not None:
        statement = scope_submissions(statement, scope)
    else:
        statement = statement.join(UserNpi, UserNpi.provider_id == Submission.provider_id).where(
            UserNpi.user_id == user.id
        )
    return statement.where(Submission.purpose_of_submission.in_(allowed_purposes(viewable_types)))


def get_submissions(
    session: Session,
    scope: Optional[ScopeFilter],
    user: User,
    viewable_types: list[str],
    status: Optional[SubmissionStatus] = None,
    skip: int = 0,
    limit: int = 100,
) -> tuple[list[Submission], int]:
    """Get visible submissions, newest first, with the total count."""
    statement = visible_submissions(select(Submission), scope, user, viewable_types)
    count_statement = visible_submissions(select(func.count(Submission.id)), scope, user, viewable_types)
    if status is not None:
        statement = statement.where(Submission.status == status.value)
        count_statement = count_statement.where(Submission.status == status.value)

    submissions = list(session.exec(
        statement.order_by(Submission.created_at.desc()).offset(skip).limit(limit)
    ).all())
    return submissions, session.exec(count_statement).one()


def is_assigned_npi(session: Session, user: User, provider_id: str) -> bool:
    return session.exec(
        select(UserNpi).where(UserNpi.user_id == user.id, UserNpi.provider_id == provider_id)
    ).first() is not None


def create_submission(
    session: Session,
    data: SubmissionCreate,
    creator: User,
    provider: Provider,
) -> Submission:
    """Create a draft submission for an NPI."""
    submission = Submission(
        title=data.title,
        purpose_of_submission=data.purpose_of_submission.value,
        recipient=data.recipient,
        claim_id=data.claim_id or None,
        case_id=data.case_id or None,
        comments=data.comments or None,
        status=SubmissionStatus.DRAFT.value,
        category=data.category.value,
        auto_split=data.auto_split,
        send_in_x12=data.send_in_x12,
        threshold=data.threshold,
        creator_id=creator.id,
        provider_id=provider.id,
        customer_id=provider.customer_id,
    )
    session.add(submission)
    session.commit()
    session.refresh(submission)
    return submission


def claim_for_sending(session: Session, submission: Submission) -> bool:
    """Atomically move a sendable submission to PROCESSING.

    Returns False when another request already claimed it or its status does
    not allow sending. The refreshed row is left on the submission.
    """
    result = session.execute(
        update(Submission)
        .where(Submission.id == submission.id, Submission.status.in_(SENDABLE_STATUSES))
        .values(status=SubmissionStatus.PROCESSING.value, updated_at=datetime.utcnow())
        .execution_options(synchronize_session=False)
    )
    session.commit()
    session.refresh(submission)
    return result.rowcount == 1


def release_claim(session: Session, submission: Submission, status: str) -> Submission:
    """Put back the status a claimed submission had before sending failed."""
    submission.status = status
    submission.updated_at = datetime.utcnow()
    session.add(submission)
    session.commit()
    session.refresh(submission)
    return submission


def record_gateway_result(
    session: Session,
    submission: Submission,
    result: HIHSubmissionResult,
) -> Submission:
    """Store the outcome of sending a submission to the gateway."""
    now = datetime.utcnow()
    if result.ok:
        submission.status = SubmissionStatus.SUBMITTED.value
        submission.transaction_id = result.submission_id
        submission.response_message = result.message
        submission.error_description = None
        submission.submitted_at = now
    else:
        submission.status = SubmissionStatus.ERROR.value
        submission.response_message = result.message
        submission.error_description = "; ".join(
            f"{error.get('code', 'UNKNOWN')}: {error.get('description', '')}" for error in result.errors
        ) or result.message
    submission.updated_at = now
    session.add(submission)
    session.commit()
    session.refresh(submission)
    return submission


def delete_submission(session: Session, submission: Submission) -> None:
    session.delete(submission)
    session.commit()
