from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Protocol

import requests
from loguru import logger

from src.errors import PipelineTriggerFailed, PipelineUnavailable


class PipelineStatus(str, Enum):
    STARTED = "started"
    FAILED = "failed"


@dataclass
class TriggerOutcome:
    status: PipelineStatus
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    @property
    def started(self) -> bool:
        return self.status is PipelineStatus.STARTED


class PipelineNotifier(Protocol):
    def trigger(self, object_path: str, bucket_id: str, trigger_source: str = "upload") -> TriggerOutcome:
        ...


def _error_detail(resp: requests.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return f"Processing service returned HTTP {resp.status_code}"
    if isinstance(body, dict):
        detail = body.get("detail") or body.get("error")
        if detail:
            return str(detail)
    return f"Processing service returned HTTP {resp.status_code}"


class PipelineClient:
    """
    Client for the external processing (prediction/training) service.

    - ``trigger`` starts a pipeline run for an object and never raises; the
      outcome says whether the run was accepted.
    - ``status`` and ``logs`` proxy the polling endpoints and raise
      ``PipelineUnavailable`` when the service cannot answer.
    - No automatic retries.
    """

    def __init__(
        self,
        base_url: str,
        trigger_timeout: float = 30.0,
        poll_timeout: float = 5.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.trigger_timeout = trigger_timeout
        self.poll_timeout = poll_timeout
        self.session = session or requests.Session()

    def trigger(self, object_path: str, bucket_id: str, trigger_source: str = "upload") -> TriggerOutcome:
        try:
            data = self._post_start(object_path, bucket_id, trigger_source)
        except PipelineTriggerFailed as exc:
            logger.error("Pipeline trigger failed for {}: {}", object_path, exc.message)
            return TriggerOutcome(status=PipelineStatus.FAILED, error=exc.message)
        logger.info("Pipeline started for {} (source={}): {}", object_path, trigger_source, data)
        return TriggerOutcome(status=PipelineStatus.STARTED, data=data)

    def _post_start(self, object_path: str, bucket_id: str, trigger_source: str) -> Dict[str, Any]:
        url = f"{self.base_url}/pipeline/start"
        logger.info("Triggering pipeline at {}", url)
        try:
            resp = self.session.post(
                url,
                json={
                    "file_path": object_path,
                    "bucket_name": bucket_id,
                    "trigger_source": trigger_source,
                },
                timeout=self.trigger_timeout,
            )
        except requests.Timeout as exc:
            raise PipelineTriggerFailed(f"Pipeline trigger timed out after {self.trigger_timeout}s") from exc
        except requests.RequestException as exc:
            raise PipelineTriggerFailed(f"Failed to reach processing service: {exc}") from exc

        if not resp.ok:
            raise PipelineTriggerFailed(_error_detail(resp))
        try:
            body = resp.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {"result": body}

    def status(self) -> Dict[str, Any]:
        return self._get("/pipeline/status")

    def logs(self, limit: int = 50) -> Dict[str, Any]:
        return self._get("/pipeline/logs", params={"limit": limit})

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            resp = self.session.get(url, params=params, timeout=self.poll_timeout)
        except requests.RequestException as exc:
            logger.error("GET {} failed: {}", url, exc)
            raise PipelineUnavailable(f"Processing service unavailable: {exc}") from exc
        if not resp.ok:
            detail = _error_detail(resp)
            logger.error("GET {} returned {}: {}", url, resp.status_code, detail)
            raise PipelineUnavailable(detail)
        try:
            return resp.json()
        except ValueError as exc:
            raise PipelineUnavailable(f"Processing service returned invalid JSON from {path}") from exc
