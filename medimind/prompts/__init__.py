"""Centralized prompt templates for MediMind model calls.

Import any prompt constant directly:
    from medimind.prompts import ANALYSIS_SYSTEM, FOLLOWUP_SYSTEM
"""

from medimind.prompts.analysis import (
    ANALYSIS_SYSTEM,
    ANALYSIS_USER,
    DEFAULT_MEDIMIND_CODE,
    DEFAULT_PATIENT_NAME,
)
from medimind.prompts.followup import FOLLOWUP_SYSTEM

__all__ = [
    "ANALYSIS_SYSTEM",
    "ANALYSIS_USER",
    "DEFAULT_MEDIMIND_CODE",
    "DEFAULT_PATIENT_NAME",
    "FOLLOWUP_SYSTEM",
]
