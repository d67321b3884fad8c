"""Analyze pipeline: request -> raw reply -> section map -> persisted case."""

import logging
from typing import NewType

from medimind.errors import StoreError
from medimind.llm.client import ModelClient
from medimind.llm.prompt_builder import build_analysis_messages, build_followup_messages
from medimind.llm.sections import extract_sections
from medimind.models import AnalysisRequest, AnalysisResponse, CaseRecord
from medimind.store.cases import CaseStore

logger = logging.getLogger(__name__)

RawReply = NewType("RawReply", str)


async def infer_case(request: AnalysisRequest, model_client: ModelClient) -> RawReply:
    """Step 1: one model call. Raises InferenceError."""
    reply = await model_client.complete(
        build_analysis_messages(request),
        call_type="case_analysis",
    )
    return RawReply(reply)


def build_case_record(request: AnalysisRequest, reply: RawReply) -> CaseRecord:
    """Step 2: split the reply into sections. Never fails."""
    return CaseRecord(
        request=request,
        sections=extract_sections(reply),
        full_response=reply,
    )


async def analyze_case(
    request: AnalysisRequest,
    model_client: ModelClient,
    store: CaseStore,
) -> AnalysisResponse:
    """Run the full pipeline.

    Inference errors propagate. A store failure is logged and the analysis is
    still returned, flagged as unsaved, so the inference result is not lost.
    """
    reply = await infer_case(request, model_client)
    record = build_case_record(request, reply)

    try:
        case_id = await store.insert_case(record)
    except StoreError as e:
        logger.error("Case not saved, returning unsaved analysis: %s", e)
        return AnalysisResponse(
            full_response=record.full_response,
            agents=record.sections,
            case_id=None,
            saved=False,
        )

    logger.info("Saved case %s (prescription=%s)", case_id, record.prescription_flag.value)
    return AnalysisResponse(
        full_response=record.full_response,
        agents=record.sections,
        case_id=case_id,
        saved=True,
    )


async def answer_followup(
    case_context: str,
    question: str,
    model_client: ModelClient,
) -> str:
    """Stateless follow-up: the caller resends the case context every time."""
    return await model_client.complete(
        build_followup_messages(case_context, question),
        call_type="followup_chat",
    )
