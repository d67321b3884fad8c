from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# --- Analyze request ---

class Attachment(BaseModel):
    filename: str | None = None
    content_type: str | None = None
    size: int = 0


class AnalysisRequest(BaseModel):
    name: str | None = None
    code: str | None = None
    symptoms: str
    age: int
    history: str | None = None
    attachment: Attachment | None = None


# --- Model output ---

class SectionMap(BaseModel):
    symptom: str = ""
    risk: str = ""
    fraud: str = ""
    security: str = ""
    coordinator: str = ""
    recommendations: str = ""


# --- Persistence ---

class PrescriptionFlag(str, Enum):
    UPLOADED = "UPLOADED"
    NONE = "NONE"


def _none_if_blank(value: str | None) -> str | None:
    if value is None:
        return None
    return value if value.strip() else None


class CaseRecord(BaseModel):
    request: AnalysisRequest
    sections: SectionMap
    full_response: str

    @property
    def prescription_flag(self) -> PrescriptionFlag:
        if self.request.attachment is not None:
            return PrescriptionFlag.UPLOADED
        return PrescriptionFlag.NONE

    def to_row(self) -> dict[str, Any]:
        """Row payload for the cases table. Empty text is stored as NULL."""
        return {
            "user_id": None,
            "patient_name": _none_if_blank(self.request.name),
            "user_code": _none_if_blank(self.request.code),
            "symptoms": self.request.symptoms,
            "age": self.request.age,
            "history": _none_if_blank(self.request.history),
            "symptom_analyzer": _none_if_blank(self.sections.symptom),
            "risk_predictor": _none_if_blank(self.sections.risk),
            "fraud_detector": _none_if_blank(self.sections.fraud),
            "security_guardian": _none_if_blank(self.sections.security),
            "coordinator_insights": _none_if_blank(self.sections.coordinator),
            "recommendations": _none_if_blank(self.sections.recommendations),
            "full_response": self.full_response,
            "prescription_text": None,
            "prescription_flag": self.prescription_flag.value,
        }


# --- API payloads ---

class AnalysisResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    full_response: str = Field(alias="fullResponse")
    agents: SectionMap
    case_id: str | int | None = Field(default=None, alias="caseId")
    saved: bool = False


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    case_context: str = Field(default="", alias="caseContext")
    question: str = ""


class ChatResponse(BaseModel):
    reply: str
