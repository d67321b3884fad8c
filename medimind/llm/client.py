from datetime import datetime, timezone
import json
import logging
from pathlib import Path
import time
from threading import Lock
from typing import Any, Sequence
from uuid import uuid4

from openai import (
    APIConnectionError,
    APIError,
    APIStatusError,
    AsyncOpenAI,
)

from medimind.config import Settings
from medimind.errors import InferenceError

logger = logging.getLogger(__name__)
_log_write_lock = Lock()


def _status_detail(exc: APIStatusError) -> str:
    try:
        text = exc.response.text
    except Exception:
        text = ""
    return text or str(exc.body or exc.message)


class ModelClient:
    """Single blocking-per-call chat completion against the configured endpoint."""

    def __init__(self, settings: Settings, client: AsyncOpenAI | None = None) -> None:
        self.settings = settings
        self._client = client

    def get_client(self) -> AsyncOpenAI:
        if self._client is None:
            kwargs: dict[str, Any] = {
                "base_url": self.settings.llm_base_url,
                "api_key": self.settings.llm_api_key,
                "max_retries": 0,
            }
            if self.settings.llm_request_timeout_seconds is not None:
                kwargs["timeout"] = self.settings.llm_request_timeout_seconds
            self._client = AsyncOpenAI(**kwargs)
        return self._client

    def _log_path(self) -> Path:
        log_path = Path(self.settings.llm_log_path)
        if log_path.is_absolute():
            return log_path
        # Relative paths resolve against the working directory of the server.
        return Path.cwd() / log_path

    def _append_call_log(self, record: dict) -> None:
        if not self.settings.llm_log_enabled:
            return

        path = self._log_path()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            line = json.dumps(record, ensure_ascii=False)
            with _log_write_lock:
                with path.open("a", encoding="utf-8") as f:
                    f.write(line + "\n")
        except Exception:
            logger.exception("Failed to write model call log.")

    async def complete(
        self,
        messages: Sequence[dict[str, str]],
        call_type: str = "unspecified",
    ) -> str:
        """Send one non-streaming chat request and return the reply text."""
        client = self.get_client()
        call_id = str(uuid4())
        started = time.perf_counter()
        log_record = {
            "ts_utc": datetime.now(timezone.utc).isoformat(),
            "call_id": call_id,
            "call_type": call_type,
            "base_url": self.settings.llm_base_url,
            "model": self.settings.llm_model,
            "messages": list(messages),
        }

        def _finish(output: str | None, error: Exception | None) -> None:
            self._append_call_log(
                {
                    **log_record,
                    "output": output,
                    "latency_ms": int((time.perf_counter() - started) * 1000),
                    "success": error is None,
                    "error_type": error.__class__.__name__ if error else None,
                    "error_message": str(error) if error else None,
                }
            )

        try:
            response = await client.chat.completions.create(
                model=self.settings.llm_model,
                messages=list(messages),
                stream=False,
            )
        except APIStatusError as exc:
            _finish(None, exc)
            raise InferenceError(
                f"Model endpoint returned HTTP {exc.status_code}",
                detail=_status_detail(exc),
            ) from exc
        except APIConnectionError as exc:
            _finish(None, exc)
            raise InferenceError(
                f"Model endpoint unreachable at {self.settings.llm_base_url}",
                detail=str(exc),
            ) from exc
        except APIError as exc:
            _finish(None, exc)
            raise InferenceError("Model request failed", detail=str(exc)) from exc

        if not response.choices:
            error = InferenceError("Model endpoint returned no choices")
            _finish(None, error)
            raise error

        output = response.choices[0].message.content or ""
        _finish(output, None)
        return output
