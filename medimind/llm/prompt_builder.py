"""Build chat message lists for the analyze and follow-up calls."""

from medimind.models import AnalysisRequest
from medimind.prompts import (
    ANALYSIS_SYSTEM,
    ANALYSIS_USER,
    DEFAULT_MEDIMIND_CODE,
    DEFAULT_PATIENT_NAME,
    FOLLOWUP_SYSTEM,
)

Message = dict[str, str]


def _describe_prescription(request: AnalysisRequest) -> str:
    attachment = request.attachment
    if attachment is None:
        return "None"
    if attachment.filename:
        return f"Uploaded ({attachment.filename})"
    return "Uploaded"


def build_analysis_user_prompt(request: AnalysisRequest) -> str:
    return ANALYSIS_USER.format(
        name=request.name or DEFAULT_PATIENT_NAME,
        code=request.code or DEFAULT_MEDIMIND_CODE,
        symptoms=request.symptoms,
        age=request.age,
        history=request.history or "None",
        prescription=_describe_prescription(request),
    )


def build_analysis_messages(request: AnalysisRequest) -> list[Message]:
    """System instruction plus the per-request user instruction."""
    return [
        {"role": "system", "content": ANALYSIS_SYSTEM},
        {"role": "user", "content": build_analysis_user_prompt(request)},
    ]


def build_followup_messages(case_context: str, question: str) -> list[Message]:
    """Caller-supplied context and question go in as two separate user turns."""
    return [
        {"role": "system", "content": FOLLOWUP_SYSTEM},
        {"role": "user", "content": case_context},
        {"role": "user", "content": question},
    ]
