import asyncio
from types import SimpleNamespace
import unittest
from unittest.mock import AsyncMock

from medimind.errors import InferenceError, StoreError
from medimind.llm.case_analysis import (
    analyze_case,
    answer_followup,
    build_case_record,
    infer_case,
)
from medimind.models import AnalysisRequest

REPLY = "🔍 SYMPTOM_ANALYZER: dry cough\n💊 RECOMMENDATIONS: fluids"


def _request() -> AnalysisRequest:
    return AnalysisRequest(symptoms="cough", age=30)


class CaseAnalysisPipelineTests(unittest.TestCase):
    def test_infer_case_sends_analysis_messages(self) -> None:
        model_client = SimpleNamespace(complete=AsyncMock(return_value=REPLY))

        reply = asyncio.run(infer_case(_request(), model_client))

        self.assertEqual(reply, REPLY)
        messages = model_client.complete.await_args.args[0]
        self.assertEqual([m["role"] for m in messages], ["system", "user"])
        self.assertEqual(model_client.complete.await_args.kwargs["call_type"], "case_analysis")

    def test_build_case_record_extracts_sections(self) -> None:
        record = build_case_record(_request(), REPLY)

        self.assertEqual(record.sections.symptom, "dry cough")
        self.assertEqual(record.sections.recommendations, "fluids")
        self.assertEqual(record.sections.risk, "")
        self.assertEqual(record.full_response, REPLY)

    def test_analyze_case_saves_and_returns_case_id(self) -> None:
        model_client = SimpleNamespace(complete=AsyncMock(return_value=REPLY))
        store = SimpleNamespace(insert_case=AsyncMock(return_value="case-9"))

        result = asyncio.run(analyze_case(_request(), model_client, store))

        self.assertEqual(result.case_id, "case-9")
        self.assertTrue(result.saved)
        self.assertEqual(result.agents.symptom, "dry cough")
        saved_record = store.insert_case.await_args.args[0]
        self.assertEqual(saved_record.full_response, REPLY)

    def test_store_failure_keeps_analysis_unsaved(self) -> None:
        model_client = SimpleNamespace(complete=AsyncMock(return_value=REPLY))
        store = SimpleNamespace(insert_case=AsyncMock(side_effect=StoreError("rejected")))

        result = asyncio.run(analyze_case(_request(), model_client, store))

        self.assertFalse(result.saved)
        self.assertIsNone(result.case_id)
        self.assertEqual(result.full_response, REPLY)
        self.assertEqual(result.agents.recommendations, "fluids")

    def test_inference_failure_skips_store(self) -> None:
        model_client = SimpleNamespace(complete=AsyncMock(side_effect=InferenceError("down")))
        store = SimpleNamespace(insert_case=AsyncMock())

        with self.assertRaises(InferenceError):
            asyncio.run(analyze_case(_request(), model_client, store))

        store.insert_case.assert_not_awaited()

    def test_answer_followup_uses_followup_call(self) -> None:
        model_client = SimpleNamespace(complete=AsyncMock(return_value="Usually not."))

        reply = asyncio.run(answer_followup("ctx", "Is it contagious?", model_client))

        self.assertEqual(reply, "Usually not.")
        messages = model_client.complete.await_args.args[0]
        self.assertEqual(messages[1]["content"], "ctx")
        self.assertEqual(messages[2]["content"], "Is it contagious?")
        self.assertEqual(model_client.complete.await_args.kwargs["call_type"], "followup_chat")


if __name__ == "__main__":
    unittest.main()
