import os
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

_SECRET_GETTER = None
_USER_GETTER = None


class ApiError(RuntimeError):
    def __init__(self, status_code, detail):
        super().__init__(f"API error {status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail

    @property
    def message(self):
        if isinstance(self.detail, dict):
            return str(self.detail.get("message") or self.detail.get("detail") or self.detail)
        return str(self.detail)

    @property
    def partial(self):
        return isinstance(self.detail, dict) and bool(self.detail.get("partial"))


def _build_session():
    session = requests.Session()
    # Mutations are not idempotent, so only reads are retried.
    retry = Retry(
        total=2,
        backoff_factor=0.5,
        status_forcelist=(502, 504),
        allowed_methods=("GET",),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry, pool_connections=10, pool_maxsize=10)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


_SESSION = _build_session()


def configure(secret_getter, user_getter):
    global _SECRET_GETTER, _USER_GETTER
    _SECRET_GETTER = secret_getter
    _USER_GETTER = user_getter


def _get_secret(path, default=None):
    if _SECRET_GETTER is None:
        return default
    return _SECRET_GETTER(path, default)


def api_base_url():
    return (
        _get_secret(("app", "API_BASE_URL"))
        or _get_secret(("API_BASE_URL",))
        or os.getenv("API_BASE_URL")
        or ""
    )


def is_enabled():
    return bool(api_base_url())


def request(method: str, path: str, params: dict | None = None, json: dict | None = None, timeout: int = 10) -> Any:
    base = api_base_url().rstrip("/")
    if not base:
        raise RuntimeError("API_BASE_URL not configured")
    user_id = _USER_GETTER() if _USER_GETTER else None
    if not user_id:
        raise RuntimeError("Missing user id for API request")
    headers = {"X-User-Id": str(user_id)}
    url = f"{base}{path}"
    response = _SESSION.request(method, url, params=params, json=json, headers=headers, timeout=timeout)
    if not response.ok:
        try:
            detail = response.json().get("detail")
        except Exception:
            detail = response.text
        raise ApiError(response.status_code, detail)
    if response.status_code == 204:
        return None
    return response.json()


def get_dashboard():
    return request("GET", "/v1/dashboard")


def refresh_dashboard():
    return request("POST", "/v1/dashboard/refresh")


def complete_habit(habit_id):
    return request("POST", f"/v1/habits/{habit_id}/complete")


def complete_todo(todo_id):
    return request("POST", f"/v1/todos/{todo_id}/complete")
