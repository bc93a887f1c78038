"""
Everhour API Client
-------------------
One method per Everhour operation, wrapping an authenticated httpx client.

Rules:
- API key sent as X-Api-Key on every request, never logged
- Exactly one HTTP request per call (no retries); the only exceptions
  are stop_timer without an id (lookup + stop) and list_all_sections
  (fan-out over projects)
- Any non-2xx response becomes UpstreamError
- No response at all, or a malformed base URL, becomes TransportError
- Operations Everhour does not offer raise FeatureUnavailableError
  without touching the network
"""

from dataclasses import dataclass, field
from datetime import date as date_cls
from typing import Any, Dict, List, Optional
from urllib.parse import quote
import logging

import httpx

from core.errors import (
    FeatureUnavailableError,
    NoActiveTimerError,
    TransportError,
    UpstreamError,
)
from infra.config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_SECONDS, Settings
from .paths import ApiPaths, paths_for


# list_all_sections fan-out limits
SECTION_SCAN_PROJECT_LIMIT = 20
SECTION_SCAN_MAX_PROJECTS = 10


@dataclass
class APIConfig:
    """Configuration for the Everhour client."""
    api_key: str
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    api_version: str = "current"
    headers: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_settings(cls, settings: Settings) -> "APIConfig":
        return cls(
            api_key=settings.api_key,
            base_url=settings.base_url,
            timeout_seconds=settings.timeout_seconds,
            api_version=settings.api_version,
        )


def _compact(value: Any) -> Any:
    """Drop None entries so optional arguments are omitted, not sent as null."""
    if isinstance(value, dict):
        return {k: _compact(v) for k, v in value.items() if v is not None}
    return value


def _segment(value: Any) -> str:
    """Quote an identifier for use as one path segment."""
    return quote(str(value), safe=":")


class EverhourClient:
    """
    Gateway to the Everhour REST API.

    Holds no mutable state between calls: every request opens its own
    httpx client, so concurrent invocations never share buffers.
    """

    def __init__(
        self,
        config: APIConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.config = config
        self.paths: ApiPaths = paths_for(config.api_version)
        self._transport = transport
        self._logger = logging.getLogger("everhour.api.client")

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> "EverhourClient":
        return cls(APIConfig.from_settings(settings), transport=transport)

    def _get_headers(self) -> Dict[str, str]:
        """Build request headers with authentication."""
        headers = {
            "Content-Type": "application/json",
            "User-Agent": "everhour-mcp/1.0",
        }
        headers.update(self.config.headers)
        headers["X-Api-Key"] = self.config.api_key
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None
    ) -> Any:
        """Make one HTTP request and decode the JSON body."""
        url = f"{self.config.base_url.rstrip('/')}/{path.lstrip('/')}"
        self._logger.debug(f"{method} {path}")

        try:
            async with httpx.AsyncClient(
                timeout=self.config.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.request(
                    method=method,
                    url=url,
                    params=_compact(params) if params else None,
                    json=_compact(json) if json is not None else None,
                    headers=self._get_headers(),
                )
        except httpx.TimeoutException as e:
            self._logger.error(f"{method} {path} timed out after {self.config.timeout_seconds}s")
            raise TransportError(
                f"Request to Everhour timed out after {self.config.timeout_seconds}s"
            ) from e
        except httpx.TransportError as e:
            self._logger.error(f"{method} {path} failed: {e}")
            raise TransportError(f"Could not reach Everhour: {e}") from e
        except httpx.InvalidURL as e:
            self._logger.error(f"{method} {path} has an invalid URL: {e}")
            raise TransportError(f"Invalid Everhour API URL {self.config.base_url!r}: {e}") from e

        if response.is_success:
            if not response.content:
                return None
            try:
                return response.json()
            except ValueError as e:
                raise UpstreamError(
                    "Response was not valid JSON",
                    "INVALID_RESPONSE",
                    status_code=response.status_code,
                ) from e

        try:
            body = response.json()
        except ValueError:
            body = {}

        error = UpstreamError.from_body(body, response.status_code)
        self._logger.log(
            logging.DEBUG if response.status_code == 404 else logging.ERROR,
            f"{method} {path} -> {response.status_code}: {error.message}",
            extra={"status_code": response.status_code, "error_code": error.code},
        )
        raise error

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self._request("GET", path, params=params)

    async def _post(self, path: str, data: Optional[Dict[str, Any]] = None) -> Any:
        return await self._request("POST", path, json=data)

    async def _put(self, path: str, data: Optional[Dict[str, Any]] = None) -> Any:
        return await self._request("PUT", path, json=data)

    async def _delete(self, path: str) -> None:
        await self._request("DELETE", path)

    # Projects

    async def list_projects(self, params: Optional[Dict[str, Any]] = None) -> List[Dict]:
        return await self._get("/projects", params)

    async def get_project(self, project_id: str) -> Dict:
        return await self._get(f"/projects/{_segment(project_id)}")

    async def create_project(self, params: Dict[str, Any]) -> Dict:
        return await self._post("/projects", params)

    async def update_project(self, project_id: str, params: Dict[str, Any]) -> Dict:
        return await self._put(f"/projects/{_segment(project_id)}", params)

    async def delete_project(self, project_id: str) -> None:
        await self._delete(f"/projects/{_segment(project_id)}")

    async def get_project_time(self, project_id: str) -> List[Dict]:
        return await self._get(f"/projects/{_segment(project_id)}/time")

    # Tasks

    async def search_tasks(self, params: Optional[Dict[str, Any]] = None) -> List[Dict]:
        """
        Search tasks. Everhour's search endpoint needs a query or a
        project filter; without either the result is empty and no
        request is made.
        """
        params = params or {}
        if not params.get("query") and not params.get("project"):
            return []
        return await self._get("/tasks/search", params)

    async def get_task(self, task_id: str) -> Dict:
        return await self._get(f"/tasks/{_segment(task_id)}")

    async def create_task(self, project_id: str, params: Dict[str, Any]) -> Dict:
        return await self._post(f"/projects/{_segment(project_id)}/tasks", params)

    async def update_task(self, task_id: str, params: Dict[str, Any]) -> Dict:
        return await self._put(f"/tasks/{_segment(task_id)}", params)

    async def delete_task(self, task_id: str) -> None:
        await self._delete(f"/tasks/{_segment(task_id)}")

    async def list_project_tasks(
        self,
        project_id: str,
        params: Optional[Dict[str, Any]] = None
    ) -> List[Dict]:
        return await self._get(self.paths.project_tasks_path(_segment(project_id)), params)

    async def update_task_estimate(self, task_id: str, estimate: int) -> Dict:
        return await self._put(f"/tasks/{_segment(task_id)}/estimate", {"estimate": estimate})

    async def delete_task_estimate(self, task_id: str) -> None:
        await self._delete(f"/tasks/{_segment(task_id)}/estimate")

    # Task time

    async def add_task_time(self, task_id: str, params: Dict[str, Any]) -> Dict:
        return await self._post(f"/tasks/{_segment(task_id)}/time", params)

    async def update_task_time(self, task_id: str, params: Dict[str, Any]) -> Dict:
        return await self._put(f"/tasks/{_segment(task_id)}/time", params)

    async def delete_task_time(self, task_id: str) -> None:
        await self._delete(f"/tasks/{_segment(task_id)}/time")

    async def get_task_time(self, task_id: str) -> List[Dict]:
        return await self._get(f"/tasks/{_segment(task_id)}/time")

    # Time records

    async def list_time_records(self, params: Optional[Dict[str, Any]] = None) -> List[Dict]:
        return await self._get("/team/time", params)

    async def get_time_record(self, record_id: int) -> Dict:
        return await self._get(f"/time/{_segment(record_id)}")

    async def create_time_record(self, params: Dict[str, Any]) -> Dict:
        return await self._post("/time", params)

    async def update_time_record(self, record_id: int, params: Dict[str, Any]) -> Dict:
        return await self._put(f"/time/{_segment(record_id)}", params)

    async def delete_time_record(self, record_id: int) -> None:
        await self._delete(f"/time/{_segment(record_id)}")

    async def get_user_time(
        self,
        user_id: int,
        params: Optional[Dict[str, Any]] = None
    ) -> List[Dict]:
        return await self._get(f"/users/{_segment(user_id)}/time", params)

    # Timers

    async def get_current_timer(self) -> Optional[Dict]:
        """
        The running timer, or None.

        A 404 here means "no timer", not a failed request.
        """
        try:
            return await self._get(self.paths.current_timer)
        except UpstreamError as e:
            if e.status_code == 404:
                return None
            raise

    async def get_running_timer(self) -> Optional[Dict]:
        """Alias of get_current_timer."""
        return await self.get_current_timer()

    async def list_timers(self, params: Optional[Dict[str, Any]] = None) -> List[Dict]:
        return await self._get("/timers", params)

    async def start_timer(self, params: Dict[str, Any]) -> Dict:
        return await self._post("/timers", params)

    async def start_timer_for_task(self, task_id: str, comment: Optional[str] = None) -> Dict:
        path, body = self.paths.start_for_task(_segment(task_id), comment)
        if "task" in body:
            body["task"] = task_id
        return await self._post(path, body)

    async def stop_timer(self, timer_id: Optional[int] = None) -> Dict:
        """
        Stop a timer, by default the running one.

        Without timer_id the running timer is looked up first. The lookup
        and the stop are two separate requests; a timer stopped by someone
        else in between surfaces as an UpstreamError from the stop call.
        """
        if timer_id is None:
            current = await self.get_current_timer()
            if not is_active_timer(current):
                raise NoActiveTimerError()
            timer_id = current["id"]

        return await self._post(f"/timers/{_segment(timer_id)}/stop")

    # Clients

    async def list_clients(self, params: Optional[Dict[str, Any]] = None) -> List[Dict]:
        return await self._get("/clients", params)

    async def get_client(self, client_id: int) -> Dict:
        return await self._get(f"/clients/{_segment(client_id)}")

    async def create_client(self, params: Dict[str, Any]) -> Dict:
        return await self._post("/clients", params)

    async def update_client(self, client_id: int, params: Dict[str, Any]) -> Dict:
        return await self._put(f"/clients/{_segment(client_id)}", params)

    async def delete_client(self, client_id: int) -> None:
        await self._delete(f"/clients/{_segment(client_id)}")

    # Users

    async def get_current_user(self) -> Dict:
        return await self._get(self.paths.current_user)

    async def list_team_users(self, params: Optional[Dict[str, Any]] = None) -> List[Dict]:
        return await self._get(self.paths.team_users, params)

    async def get_user(self, user_id: int) -> Dict:
        return await self._get(f"/users/{_segment(user_id)}")

    # Sections

    async def list_sections(
        self,
        project_id: str,
        params: Optional[Dict[str, Any]] = None
    ) -> List[Dict]:
        return await self._get(f"/projects/{_segment(project_id)}/sections", params)

    async def list_all_sections(self, params: Optional[Dict[str, Any]] = None) -> List[Dict]:
        """
        Sections across projects.

        Everhour has no global sections listing, so this walks the first
        few projects. Projects whose sections Everhour refuses (missing,
        no permission) are skipped; transport failures still propagate.
        """
        projects = await self.list_projects({"limit": SECTION_SCAN_PROJECT_LIMIT}) or []
        sections: List[Dict] = []

        for project in projects[:SECTION_SCAN_MAX_PROJECTS]:
            try:
                sections.extend(await self.list_sections(project["id"], params) or [])
            except UpstreamError as e:
                self._logger.warning(f"Skipping sections of project {project.get('id')}: {e.message}")

        return sections

    async def get_section(self, section_id: str) -> Dict:
        return await self._get(f"/sections/{_segment(section_id)}")

    async def create_section(self, params: Dict[str, Any]) -> Dict:
        return await self._post("/sections", params)

    async def update_section(self, section_id: str, params: Dict[str, Any]) -> Dict:
        return await self._put(f"/sections/{_segment(section_id)}", params)

    async def delete_section(self, section_id: str) -> None:
        await self._delete(f"/sections/{_segment(section_id)}")

    # Timecards

    async def list_timecards(self, params: Optional[Dict[str, Any]] = None) -> List[Dict]:
        return await self._get("/timecards", params)

    async def get_timecard(self, timecard_id: int) -> Dict:
        return await self._get(f"/timecards/{_segment(timecard_id)}")

    async def list_user_timecards(
        self,
        user_id: int,
        params: Optional[Dict[str, Any]] = None
    ) -> List[Dict]:
        return await self._get(f"/users/{_segment(user_id)}/timecards", params)

    async def update_timecard(self, timecard_id: int, params: Dict[str, Any]) -> Dict:
        return await self._put(f"/timecards/{_segment(timecard_id)}", params)

    async def delete_timecard(self, timecard_id: int) -> None:
        await self._delete(f"/timecards/{_segment(timecard_id)}")

    async def clock_in(self, user_id: int, date: Optional[str] = None) -> Dict:
        return await self._post("/timecards/clock-in", {
            "user": user_id,
            "date": date or date_cls.today().isoformat(),
        })

    async def clock_out(self, user_id: int) -> Dict:
        return await self._post("/timecards/clock-out", {"user": user_id})

    # Invoices

    async def list_invoices(self, params: Optional[Dict[str, Any]] = None) -> List[Dict]:
        return await self._get("/invoices", params)

    async def get_invoice(self, invoice_id: int) -> Dict:
        return await self._get(f"/invoices/{_segment(invoice_id)}")

    async def create_invoice(self, params: Dict[str, Any]) -> Dict:
        return await self._post("/invoices", params)

    async def update_invoice(self, invoice_id: int, params: Dict[str, Any]) -> Dict:
        return await self._put(f"/invoices/{_segment(invoice_id)}", params)

    async def delete_invoice(self, invoice_id: int) -> None:
        await self._delete(f"/invoices/{_segment(invoice_id)}")

    async def refresh_invoice_line_items(self, invoice_id: int) -> Dict:
        return await self._post(f"/invoices/{_segment(invoice_id)}/refresh")

    async def update_invoice_status(self, invoice_id: int, status: str) -> Dict:
        return await self._put(f"/invoices/{_segment(invoice_id)}/status", {"status": status})

    async def export_invoice(self, invoice_id: int, system: str) -> Dict:
        return await self._post(f"/invoices/{_segment(invoice_id)}/export", {"system": system})

    # Expenses

    async def list_expenses(self, params: Optional[Dict[str, Any]] = None) -> List[Dict]:
        return await self._get("/expenses", params)

    async def create_expense(self, params: Dict[str, Any]) -> Dict:
        return await self._post("/expenses", params)

    async def update_expense(self, expense_id: int, params: Dict[str, Any]) -> Dict:
        return await self._put(f"/expenses/{_segment(expense_id)}", params)

    async def delete_expense(self, expense_id: int) -> None:
        await self._delete(f"/expenses/{_segment(expense_id)}")

    async def list_expense_categories(self) -> List[Dict]:
        return await self._get("/expenses/categories")

    async def create_expense_category(self, name: str) -> Dict:
        return await self._post("/expenses/categories", {"name": name})

    async def update_expense_category(self, category_id: int, name: str) -> Dict:
        return await self._put(f"/expenses/categories/{_segment(category_id)}", {"name": name})

    async def delete_expense_category(self, category_id: int) -> None:
        await self._delete(f"/expenses/categories/{_segment(category_id)}")

    async def add_attachment_to_expense(self, expense_id: int, attachment_id: int) -> Dict:
        return await self._post(
            f"/expenses/{_segment(expense_id)}/attachments",
            {"attachmentId": attachment_id},
        )

    # Schedule / resource planning: not offered by the Everhour API

    async def list_schedule_assignments(self, params: Optional[Dict[str, Any]] = None) -> List[Dict]:
        raise _schedule_unavailable()

    async def create_schedule_assignment(self, params: Dict[str, Any]) -> Dict:
        raise _schedule_unavailable()

    async def update_schedule_assignment(self, assignment_id: int, params: Dict[str, Any]) -> Dict:
        raise _schedule_unavailable()

    async def delete_schedule_assignment(self, assignment_id: int) -> None:
        raise _schedule_unavailable()

    # Utility

    async def test_connection(self) -> bool:
        """One authenticated call; True if Everhour accepted it."""
        try:
            await self.get_current_user()
            return True
        except (UpstreamError, TransportError) as e:
            self._logger.warning(f"Connection test failed: {e.message}")
            return False


def is_active_timer(timer: Optional[Dict]) -> bool:
    """A timer payload describes a running timer."""
    if not timer or not timer.get("id"):
        return False
    return timer.get("status", "active") == "active"


def _schedule_unavailable() -> FeatureUnavailableError:
    return FeatureUnavailableError(
        "Schedule/Resource Planning endpoints are not available in the Everhour API"
    )
