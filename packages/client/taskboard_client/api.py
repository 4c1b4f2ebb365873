"""
HTTP client for the Taskboard API.

Every non-2xx response raises APIError carrying the server's ``error`` body,
which is either a message or a ``{field: message}`` map.
"""

from __future__ import annotations

import uuid
from typing import Any

import httpx
import structlog

from taskboard_shared.schemas.members import MemberCreate, MemberListResponse, MemberRead
from taskboard_shared.schemas.tasks import TaskCreate, TaskListResponse, TaskRead, TaskUpdate
from taskboard_shared.schemas.users import AuthResponse, LoginRequest, MeResponse, SignupRequest, UserRead

log = structlog.get_logger()


class APIError(Exception):
    """A request the server rejected, or that never reached it (status 0)."""

    def __init__(self, status_code: int, error: Any):
        self.status_code = status_code
        self.error = error
        super().__init__(self.message)

    @property
    def message(self) -> str:
        if isinstance(self.error, dict):
            return "; ".join(f"{field}: {msg}" for field, msg in self.error.items())
        return str(self.error)


class TaskboardAPI:
    """Thin async wrapper over the REST endpoints."""

    def __init__(
        self,
        base_url: str,
        *,
        token: str | None = None,
        verify_tls: bool = True,
        request_timeout: int = 30,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._verify_tls = verify_tls
        self._request_timeout = request_timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self.token = token

    async def open(self) -> None:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(self._request_timeout),
            verify=self._verify_tls,
            transport=self._transport,
        )

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> TaskboardAPI:
        await self.open()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    # --- plumbing ---

    def _headers(self) -> dict[str, str]:
        if self.token:
            return {"Authorization": f"Bearer {self.token}"}
        return {}

    async def _request(self, method: str, path: str, json: Any = None) -> Any:
        assert self._client, "call open() first"
        try:
            resp = await self._client.request(method, path, json=json, headers=self._headers())
        except httpx.TransportError as exc:
            log.error("api.unreachable", method=method, path=path, error=str(exc))
            raise APIError(0, f"Cannot reach server: {exc}")

        if resp.is_error:
            try:
                error = resp.json().get("error", resp.text)
            except ValueError:
                error = resp.text or resp.reason_phrase
            log.warning("api.request_failed", method=method, path=path, status=resp.status_code)
            raise APIError(resp.status_code, error)
        return resp.json()

    # --- auth ---

    async def signup(self, req: SignupRequest) -> AuthResponse:
        data = await self._request("POST", "/auth/signup", req.model_dump(mode="json", by_alias=True))
        auth = AuthResponse.model_validate(data)
        self.token = auth.token
        return auth

    async def login(self, req: LoginRequest) -> AuthResponse:
        data = await self._request("POST", "/auth/login", req.model_dump(mode="json", by_alias=True))
        auth = AuthResponse.model_validate(data)
        self.token = auth.token
        return auth

    async def me(self) -> UserRead:
        data = await self._request("GET", "/auth/me")
        return MeResponse.model_validate(data).user

    # --- members ---

    async def list_members(self) -> list[MemberRead]:
        data = await self._request("GET", "/members")
        return MemberListResponse.model_validate(data).members

    async def create_member(self, req: MemberCreate) -> MemberRead:
        data = await self._request("POST", "/members", req.model_dump(mode="json", by_alias=True))
        return MemberRead.model_validate(data)

    # --- tasks ---

    async def list_tasks(self, member_id: uuid.UUID) -> list[TaskRead]:
        data = await self._request("GET", f"/members/{member_id}/tasks")
        return TaskListResponse.model_validate(data).tasks

    async def create_task(self, member_id: uuid.UUID, req: TaskCreate) -> TaskRead:
        data = await self._request(
            "POST", f"/members/{member_id}/tasks", req.model_dump(mode="json", by_alias=True)
        )
        return TaskRead.model_validate(data)

    async def update_task(self, member_id: uuid.UUID, task_id: uuid.UUID, req: TaskUpdate) -> TaskRead:
        data = await self._request(
            "PUT",
            f"/members/{member_id}/tasks/{task_id}",
            req.model_dump(mode="json", by_alias=True, exclude_unset=True),
        )
        return TaskRead.model_validate(data)

    async def delete_task(self, member_id: uuid.UUID, task_id: uuid.UUID) -> None:
        await self._request("DELETE", f"/members/{member_id}/tasks/{task_id}")
