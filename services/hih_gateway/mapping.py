"""
Mapping between internal submission fields and CMS HIH Gateway formats.
"""
from typing import Any, Dict, Optional

from database.models.submission import SubmissionPurpose, SubmissionCategory


# Purpose of submission -> HIH numeric code
PURPOSE_TO_HIH_CODE: Dict[str, str] = {
    SubmissionPurpose.ADR.value: "1",
    SubmissionPurpose.UNSOLICITED_PWK_XDR.value: "7",
    SubmissionPurpose.PA_AMBULANCE.value: "8.1",
    SubmissionPurpose.HHPCR.value: "8.3",
    SubmissionPurpose.PA_DMEPOS.value: "8.4",
    SubmissionPurpose.HOPD.value: "8.5",
    SubmissionPurpose.FIRST_APPEAL.value: "9",
    SubmissionPurpose.SECOND_APPEAL.value: "9.1",
    SubmissionPurpose.ADMC.value: "10",
    SubmissionPurpose.RA_DISCUSSION.value: "11",
    SubmissionPurpose.DME_DISCUSSION.value: "11.1",
}
HIH_CODE_TO_PURPOSE: Dict[str, str] = {code: purpose for purpose, code in PURPOSE_TO_HIH_CODE.items()}

# Submission category -> HIH category string
CATEGORY_TO_HIH: Dict[str, str] = {
    SubmissionCategory.DEFAULT.value: "default",
    SubmissionCategory.MEDICAL_REVIEW.value: "medicalreview",
    SubmissionCategory.NON_MEDICAL_REVIEW.value: "non-medicalreview",
    SubmissionCategory.RESPONSES_FOR_PA.value: "responsesforpa/prrequests",
}
HIH_TO_CATEGORY: Dict[str, str] = {hih: category for category, hih in CATEGORY_TO_HIH.items()}

DEFAULT_HIH_PURPOSE_CODE = "1"
DEFAULT_HIH_CATEGORY = "default"


def _value(member) -> str:
    return member.value if hasattr(member, "value") else member


def map_purpose_to_hih_code(purpose: SubmissionPurpose | str) -> str:
    """Unmapped purposes are sent as an ADR response."""
    return PURPOSE_TO_HIH_CODE.get(_value(purpose), DEFAULT_HIH_PURPOSE_CODE)


def map_hih_code_to_purpose(code: str) -> Optional[SubmissionPurpose]:
    purpose = HIH_CODE_TO_PURPOSE.get(code)
    return SubmissionPurpose(purpose) if purpose else None


def map_category_to_hih(category: SubmissionCategory | str) -> str:
    return CATEGORY_TO_HIH.get(_value(category), DEFAULT_HIH_CATEGORY)


def map_hih_to_category(category_string: str) -> Optional[SubmissionCategory]:
    category = HIH_TO_CATEGORY.get(category_string.lower())
    return SubmissionCategory(category) if category else None


def build_submission_payload(
    title: str,
    purpose_of_submission: SubmissionPurpose | str,
    recipient: str,
    provider_npi: str,
    category: SubmissionCategory | str = SubmissionCategory.DEFAULT,
    auto_split: bool = False,
    send_in_x12: bool = False,
    threshold: int = 100,
    claim_id: Optional[str] = None,
    case_id: Optional[str] = None,
    comments: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Build the HIH Gateway submission payload.

    Optional identifiers are left out entirely when empty. The document set
    starts empty and is filled as documents are attached.
    """
    payload: Dict[str, Any] = {
        "purpose_of_submission": map_purpose_to_hih_code(purpose_of_submission),
        "author_npi": provider_npi,
        "name": title,
        "intended_recepient": recipient,  # Field name as spelled by the gateway
        "auto_split": auto_split,
        "category": map_category_to_hih(category),
        "bSendinX12": send_in_x12,
        "threshold": threshold,
        "document_set": [],
    }
    if claim_id:
        payload["esmd_claim_id"] = claim_id
    if case_id:
        payload["esmd_case_id"] = case_id
    if comments:
        payload["comments"] = comments
    return payload
