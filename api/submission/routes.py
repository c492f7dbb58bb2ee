from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from database.connection import get_session
from database.models import Provider, Submission, SubmissionStatus, PURPOSE_SUBMISSION_TYPES
from database.scoping import is_in_scope
from api.submission import crud
from api.submission.schemas import SubmissionCreate, SubmissionResponse, SubmissionListResponse
from auth import UserContext, get_user_context
from core.roles import RoleName
from services.hih_gateway import (
    HIHGatewayClient,
    HIHGatewayError,
    build_submission_payload,
    get_gateway_client,
)
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


def _can_access_provider(session: Session, ctx: UserContext, provider: Provider) -> bool:
    scope = ctx.scope
    if scope is not None:
        return is_in_scope(scope, provider.customer_id, provider.provider_group_id)
    if ctx.has_role(RoleName.BASIC_USER):
        return crud.is_assigned_npi(session, ctx.user, provider.id)
    return False


def _get_accessible_submission(session: Session, ctx: UserContext, submission_id: str) -> Submission:
    submission = crud.get_submission(session, submission_id)
    if not submission:
        raise HTTPException(status_code=404, detail="Submission not found")

    provider = session.get(Provider, submission.provider_id)
    if not provider or not _can_access_provider(session, ctx, provider):
        raise HTTPException(status_code=403, detail="Access denied to this submission")

    if PURPOSE_SUBMISSION_TYPES.get(submission.purpose_of_submission) not in ctx.permissions.can_view:
        raise HTTPException(status_code=403, detail="Access denied to this submission")

    return submission


@router.get("", response_model=SubmissionListResponse)
def list_submissions(
    status_filter: Optional[SubmissionStatus] = None,
    skip: int = 0,
    limit: int = 100,
    ctx: UserContext = Depends(get_user_context),
    session: Session = Depends(get_session),
):
    """List submissions visible to the caller."""
    scope = ctx.scope
    if scope is None and not ctx.has_role(RoleName.BASIC_USER):
        raise HTTPException(status_code=403, detail="No authorized scope for this operation")

    submissions, total = crud.get_submissions(
        session,
        scope,
        ctx.user,
        ctx.permissions.can_view,
        status=status_filter,
        skip=skip,
        limit=limit,
    )
    return SubmissionListResponse(submissions=submissions, total=total)


@router.post("", response_model=SubmissionResponse, status_code=status.HTTP_201_CREATED)
def create_submission(
    data: SubmissionCreate,
    ctx: UserContext = Depends(get_user_context),
    session: Session = Depends(get_session),
):
    """Create a draft submission for an accessible NPI."""
    submission_type = PURPOSE_SUBMISSION_TYPES[data.purpose_of_submission]
    if submission_type not in ctx.permissions.can_create:
        raise HTTPException(
            status_code=403,
            detail=f"Not allowed to create {data.purpose_of_submission.value} submissions",
        )

    provider = session.get(Provider, data.provider_id)
    if not provider or not _can_access_provider(session, ctx, provider):
        raise HTTPException(status_code=403, detail="Access denied to this NPI")

    if not provider.active:
        raise HTTPException(status_code=400, detail="NPI is inactive")

    submission = crud.create_submission(session, data, ctx.user, provider)
    logger.info(f"Draft submission {submission.id} created by {ctx.user.username}")
    return submission


@router.get("/{submission_id}", response_model=SubmissionResponse)
def get_submission(
    submission_id: str,
    ctx: UserContext = Depends(get_user_context),
    session: Session = Depends(get_session),
):
    """Get submission details."""
    return _get_accessible_submission(session, ctx, submission_id)


@router.delete("/{submission_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_submission(
    submission_id: str,
    ctx: UserContext = Depends(get_user_context),
    session: Session = Depends(get_session),
):
    """Delete a draft submission."""
    submission = _get_accessible_submission(session, ctx, submission_id)

    if submission.status != SubmissionStatus.DRAFT.value:
        raise HTTPException(status_code=400, detail="Only draft submissions can be deleted")

    logger.info(f"Submission {submission.id} deleted by {ctx.user.username}")
    crud.delete_submission(session, submission)


@router.post("/{submission_id}/submit", response_model=SubmissionResponse)
async def submit_submission(
    submission_id: str,
    ctx: UserContext = Depends(get_user_context),
    session: Session = Depends(get_session),
    gateway: HIHGatewayClient = Depends(get_gateway_client),
):
    """Send a submission to the CMS HIH Gateway and record the outcome."""
    submission = _get_accessible_submission(session, ctx, submission_id)

    previous_status = submission.status
    if not crud.claim_for_sending(session, submission):
        raise HTTPException(status_code=400, detail=f"Submission is already {submission.status}")

    provider = session.get(Provider, submission.provider_id)
    payload = build_submission_payload(
        title=submission.title,
        purpose_of_submission=submission.purpose_of_submission,
        recipient=submission.recipient,
        provider_npi=provider.npi,
        category=submission.category,
        auto_split=submission.auto_split,
        send_in_x12=submission.send_in_x12,
        threshold=submission.threshold,
        claim_id=submission.claim_id,
        case_id=submission.case_id,
        comments=submission.comments,
    )

    try:
        result = await gateway.create_submission(payload)
    except HIHGatewayError as e:
        logger.error(f"Submission {submission.id} could not be sent: {e}")
        crud.release_claim(session, submission, previous_status)
        raise HTTPException(status_code=502, detail=str(e))

    if not result.ok:
        logger.warning(f"Submission {submission.id} rejected: {result.message}")

    return crud.record_gateway_result(session, submission, result)
