# playtube/client/api.py
"""
HTTP client for the PlayTube API.
Sends the token held by AuthStore and unwraps the response envelope.
"""
from __future__ import annotations

import logging
import mimetypes
from contextlib import ExitStack
from pathlib import Path
from typing import Any, Optional

import httpx

from playtube.client.auth_slice import AuthStore, set_loading, set_login_data, set_token
from playtube.client.config import client_settings

logger = logging.getLogger(__name__)


class ApiClientError(Exception):
    def __init__(self, status_code: int, message: str, errors: Optional[list[Any]] = None):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.errors = errors or []


def _file_part(path: Path, handle: Any) -> tuple[str, Any, str]:
    content_type, _ = mimetypes.guess_type(path.name)
    return path.name, handle, content_type or "application/octet-stream"


def _unwrap(response: httpx.Response) -> Any:
    try:
        body = response.json()
    except ValueError:
        body = None

    if response.is_error or (isinstance(body, dict) and body.get("success") is False):
        if isinstance(body, dict):
            raise ApiClientError(
                response.status_code,
                str(body.get("message") or "Request failed"),
                body.get("errors"),
            )
        raise ApiClientError(response.status_code, response.text or "Request failed")

    if isinstance(body, dict) and "data" in body:
        return body["data"]
    return body


class PlaytubeClient:
    def __init__(
        self,
        store: AuthStore,
        base_url: str = client_settings.API_URL,
        timeout: float = client_settings.TIMEOUT_SECONDS,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._store = store
        self._http = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)

    def __enter__(self) -> "PlaytubeClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    # -- session ---------------------------------------------------------

    def login_with_token(self, token: str) -> dict[str, Any]:
        self._store.dispatch(set_token(token))
        try:
            return self.fetch_current_user()
        except ApiClientError:
            self._store.dispatch(set_token(None))
            raise

    def fetch_current_user(self) -> dict[str, Any]:
        user = self._request("GET", "/auth/me")
        self._store.dispatch(set_login_data(user))
        return user

    def logout(self) -> None:
        self._store.dispatch(set_token(None))
        self._store.dispatch(set_login_data(None))

    # -- videos ----------------------------------------------------------

    def publish_video(
        self,
        video_path: Path,
        thumbnail_path: Path,
        title: str,
        description: str,
    ) -> dict[str, Any]:
        video_path, thumbnail_path = Path(video_path), Path(thumbnail_path)
        with ExitStack() as stack:
            files = {
                "videoFile": _file_part(video_path, stack.enter_context(video_path.open("rb"))),
                "thumbnail": _file_part(thumbnail_path, stack.enter_context(thumbnail_path.open("rb"))),
            }
            return self._request(
                "POST",
                "/videos/",
                data={"title": title, "description": description},
                files=files,
            )

    def list_videos(
        self,
        page: int = 1,
        limit: int = 10,
        user_id: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        params: dict[str, Any] = {"page": page, "limit": limit}
        if user_id:
            params["userId"] = user_id
        return self._request("GET", "/videos/", params=params)

    def get_video(self, video_id: str) -> dict[str, Any]:
        return self._request("GET", f"/videos/{video_id}")

    def update_video_details(
        self,
        video_id: str,
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> dict[str, Any]:
        payload = {key: value for key, value in (("title", title), ("description", description)) if value is not None}
        return self._request("PATCH", f"/videos/{video_id}", json=payload)

    def update_thumbnail(self, video_id: str, thumbnail_path: Path) -> dict[str, Any]:
        thumbnail_path = Path(thumbnail_path)
        with thumbnail_path.open("rb") as handle:
            return self._request(
                "PATCH",
                f"/videos/thumbnail/{video_id}",
                files={"thumbnail": _file_part(thumbnail_path, handle)},
            )

    def update_video_file(self, video_id: str, video_path: Path) -> dict[str, Any]:
        video_path = Path(video_path)
        with video_path.open("rb") as handle:
            return self._request(
                "PATCH",
                f"/videos/video/{video_id}",
                files={"videoFile": _file_part(video_path, handle)},
            )

    def delete_video(self, video_id: str) -> dict[str, Any]:
        return self._request("DELETE", f"/videos/{video_id}")

    def toggle_publish_status(self, video_id: str) -> dict[str, Any]:
        return self._request("PATCH", f"/videos/toggle/publish/{video_id}")

    def _headers(self) -> dict[str, str]:
        token = self._store.state.token
        return {"Authorization": f"Bearer {token}"} if token else {}

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        self._store.dispatch(set_loading(True))
        try:
            response = self._http.request(method, path, headers=self._headers(), **kwargs)
        except httpx.TimeoutException as error:
            logger.error("%s %s timed out: %s", method, path, error)
            raise ApiClientError(408, "Request timed out") from error
        except httpx.TransportError as error:
            logger.error("%s %s failed: %s", method, path, error)
            raise ApiClientError(503, "Could not reach the server") from error
        finally:
            self._store.dispatch(set_loading(False))

        logger.debug("%s %s -> %d", method, path, response.status_code)
        return _unwrap(response)
