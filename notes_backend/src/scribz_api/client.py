"""Thin HTTP client for the notes API.

The bearer token is an argument of every authenticated call; the client keeps
no "current token" of its own, so one instance can safely serve several users.
"""
from typing import Any, Dict, List, Optional

import httpx


class ApiError(Exception):
    """Non-2xx response from the API."""

    def __init__(self, status_code: int, detail: Any):
        super().__init__(f"{status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


def _auth(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


class NotesClient:
    def __init__(self, base_url: str = "http://localhost:8000", http: Optional[httpx.Client] = None):
        self._http = http or httpx.Client(base_url=base_url)

    def close(self) -> None:
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def _request(self, method: str, path: str, token: Optional[str] = None, **kwargs) -> Any:
        headers = _auth(token) if token else {}
        response = self._http.request(method, path, headers=headers, **kwargs)
        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = response.text
            detail = body.get("detail", body) if isinstance(body, dict) else body
            raise ApiError(response.status_code, detail)
        return response.json()

    # Auth

    def signup(self, email: str, password: str) -> Dict[str, Any]:
        return self._request("POST", "/auth/signup", json={"email": email, "password": password})

    def login(self, email: str, password: str) -> Dict[str, Any]:
        return self._request("POST", "/auth/login", json={"email": email, "password": password})

    def me(self, token: str) -> Dict[str, Any]:
        return self._request("GET", "/auth/me", token)

    # Notes

    def list_notes(self, token: str, filter: str = "all", search: str = "") -> List[Dict[str, Any]]:
        params = {"filter": filter}
        if search:
            params["search"] = search
        return self._request("GET", "/notes", token, params=params)

    def create_note(self, token: str, **fields) -> Dict[str, Any]:
        return self._request("POST", "/notes", token, json=fields)

    def get_note(self, token: str, note_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/notes/{note_id}", token)

    def update_note(self, token: str, note_id: str, **fields) -> Dict[str, Any]:
        return self._request("PUT", f"/notes/{note_id}", token, json=fields)

    def toggle_favorite(self, token: str, note_id: str) -> Dict[str, Any]:
        return self._request("PATCH", f"/notes/{note_id}/favorite", token)

    def toggle_trash(self, token: str, note_id: str) -> Dict[str, Any]:
        return self._request("PATCH", f"/notes/{note_id}/trash", token)

    def delete_note(self, token: str, note_id: str) -> Dict[str, Any]:
        return self._request("DELETE", f"/notes/{note_id}", token)
