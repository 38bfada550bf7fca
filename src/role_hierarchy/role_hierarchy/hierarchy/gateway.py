from __future__ import annotations

import logging
from typing import Collection, Optional, Protocol

import requests

from ..core.constants import DEFAULT_REQUEST_TIMEOUT
from ..core.exceptions import DomainError, PersistenceFailure, ValidationError
from .model import WorkflowData
from .service import WorkflowService

logger = logging.getLogger(__name__)

REQUEST_FAILED = "Request failed"


class WorkflowGateway(Protocol):
    """Where the editor loads its saved workflow from and saves it to."""

    def load(self) -> Optional[WorkflowData]:
        raise NotImplementedError

    def save(self, workflow: WorkflowData) -> None:
        """Persist ``workflow``. Raises PersistenceFailure on any failure."""

        raise NotImplementedError


class RepositoryWorkflowGateway(WorkflowGateway):
    """In-process gateway that goes straight to :class:`WorkflowService`."""

    def __init__(self, service: WorkflowService, *, current_policies: Collection[str]):
        self._service = service
        self._policies = frozenset(current_policies)

    def load(self) -> Optional[WorkflowData]:
        try:
            saved = self._service.get_saved(current_policies=self._policies)
        except DomainError as e:
            raise PersistenceFailure(str(e)) from e
        return saved.workflow if saved else None

    def save(self, workflow: WorkflowData) -> None:
        try:
            self._service.save_workflow(current_policies=self._policies, payload=workflow)
        except DomainError as e:
            raise PersistenceFailure(str(e)) from e
        except Exception as e:
            logger.exception("Save workflow error")
            raise PersistenceFailure("Failed to save workflow") from e


class HttpWorkflowGateway(WorkflowGateway):
    """Talks to ``/api/roles/workflow`` with a bearer token, like the web client."""

    def __init__(
        self,
        base_url: str,
        *,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._session = session or requests.Session()

    @property
    def url(self) -> str:
        return f"{self.base_url}/roles/workflow"

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(self, method: str, payload: Optional[dict] = None) -> dict:
        try:
            response = self._session.request(
                method,
                self.url,
                json=payload,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise PersistenceFailure(str(e) or REQUEST_FAILED) from e

        if not response.ok:
            raise PersistenceFailure(_error_message(response))

        try:
            return response.json()
        except ValueError as e:
            raise PersistenceFailure("Invalid response from server") from e

    def load(self) -> Optional[WorkflowData]:
        body = self._request("GET")
        try:
            workflow = WorkflowData.from_dict(body)
        except ValidationError as e:
            raise PersistenceFailure(str(e)) from e
        return None if workflow.is_empty else workflow

    def save(self, workflow: WorkflowData) -> None:
        self._request("POST", workflow.to_dict())


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return REQUEST_FAILED
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return REQUEST_FAILED
