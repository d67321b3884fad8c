"""HTTP handlers: analyze, follow-up chat, health."""

import json
import logging
import re
from typing import Any, Mapping

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile

from medimind.config import Settings
from medimind.errors import InferenceError, RequestValidationFailed, StoreError
from medimind.llm.case_analysis import analyze_case, answer_followup
from medimind.llm.client import ModelClient
from medimind.models import AnalysisRequest, Attachment, ChatRequest, ChatResponse
from medimind.store.cases import CaseStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

ATTACHMENT_FIELD = "prescription"
MISSING_FIELDS_MESSAGE = "Missing symptoms or age"
INFERENCE_FAILED_MESSAGE = "Ollama inference failed. Make sure Ollama is running."
CHAT_FAILED_MESSAGE = "Chat failed"

_INT_PREFIX_RE = re.compile(r"^\s*([+-]?\d+)")


# --- Dependencies ---

def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_model_client(request: Request) -> ModelClient:
    return request.app.state.model_client


def get_case_store(request: Request) -> CaseStore:
    return request.app.state.case_store


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


# --- Request parsing ---

def _is_form(request: Request) -> bool:
    content_type = request.headers.get("content-type", "").lower()
    return content_type.startswith(("multipart/form-data", "application/x-www-form-urlencoded"))


async def _read_attachment(upload: UploadFile, max_bytes: int) -> Attachment | None:
    # Only metadata survives; the content is read to enforce the size cap.
    contents = await upload.read(max_bytes + 1)
    if not upload.filename and not contents:
        return None
    if len(contents) > max_bytes:
        raise RequestValidationFailed(
            f"Attachment exceeds the {max_bytes // (1024 * 1024)} MiB limit",
            status_code=413,
        )
    return Attachment(
        filename=upload.filename or None,
        content_type=upload.content_type,
        size=len(contents),
    )


async def read_analysis_fields(
    request: Request,
    max_upload_bytes: int,
) -> tuple[dict[str, Any], Attachment | None]:
    """Collect analyze fields from a multipart/urlencoded form or a JSON body."""
    if _is_form(request):
        form = await request.form()
        try:
            fields = {key: value for key, value in form.items() if isinstance(value, str)}
            upload = form.get(ATTACHMENT_FIELD)
            attachment = None
            if isinstance(upload, UploadFile):
                attachment = await _read_attachment(upload, max_upload_bytes)
        finally:
            await form.close()
        return fields, attachment

    try:
        body = await request.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}
    return body, None


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def parse_age(value: Any) -> int:
    """Integer-prefix parse: 30, "30", " 30 years" -> 30."""
    if isinstance(value, bool):
        raise RequestValidationFailed("Age must be a whole number")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    match = _INT_PREFIX_RE.match(str(value))
    if match is None:
        raise RequestValidationFailed("Age must be a whole number")
    return int(match.group(1))


def build_analysis_request(
    fields: Mapping[str, Any],
    attachment: Attachment | None = None,
) -> AnalysisRequest:
    """Validate required fields before any external call is made."""
    symptoms = _optional_text(fields.get("symptoms"))
    raw_age = fields.get("age")
    if symptoms is None or raw_age is None or (isinstance(raw_age, str) and not raw_age.strip()):
        raise RequestValidationFailed(MISSING_FIELDS_MESSAGE)

    return AnalysisRequest(
        name=_optional_text(fields.get("name")),
        code=_optional_text(fields.get("userCode")),
        symptoms=symptoms,
        age=parse_age(raw_age),
        history=_optional_text(fields.get("history")),
        attachment=attachment,
    )


# --- Handlers ---

@router.post("/analyze")
async def analyze(
    request: Request,
    settings: Settings = Depends(get_settings),
    model_client: ModelClient = Depends(get_model_client),
    store: CaseStore = Depends(get_case_store),
):
    try:
        fields, attachment = await read_analysis_fields(request, settings.max_upload_bytes)
        analysis_request = build_analysis_request(fields, attachment)
    except RequestValidationFailed as e:
        return _error(str(e), e.status_code)
    except Exception:
        logger.exception("Failed to read analyze request.")
        return _error("Invalid analyze request", 400)

    try:
        result = await analyze_case(analysis_request, model_client, store)
    except InferenceError as e:
        logger.error("Analyze inference failed: %s", e)
        return _error(INFERENCE_FAILED_MESSAGE, 500)
    except Exception:
        logger.exception("Analyze failed unexpectedly.")
        return _error("Analysis failed", 500)

    return JSONResponse(result.model_dump(mode="json", by_alias=True))


@router.post("/chat")
async def chat(
    request: Request,
    model_client: ModelClient = Depends(get_model_client),
):
    # Forwarded as received; every failure is reported as a chat failure.
    try:
        body = await request.json()
        if not isinstance(body, dict):
            body = {}
        payload = ChatRequest(
            case_context=_as_text(body.get("caseContext")),
            question=_as_text(body.get("question")),
        )
        reply = await answer_followup(payload.case_context, payload.question, model_client)
    except InferenceError as e:
        logger.error("Chat inference failed: %s", e)
        return _error(CHAT_FAILED_MESSAGE, 500)
    except Exception:
        logger.exception("Chat failed unexpectedly.")
        return _error(CHAT_FAILED_MESSAGE, 500)

    return ChatResponse(reply=reply)


@router.get("/health")
async def health(store: CaseStore = Depends(get_case_store)):
    try:
        await store.ping()
    except StoreError as e:
        logger.warning("Health check failed: %s", e)
        return JSONResponse({"status": "error", "message": str(e)}, status_code=500)
    except Exception as e:
        logger.exception("Health check failed unexpectedly.")
        return JSONResponse({"status": "error", "message": str(e)}, status_code=500)
    return {"status": "ok"}
