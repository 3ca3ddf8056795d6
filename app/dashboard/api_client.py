"""HTTP client the admin dashboard uses to talk to the REST API."""

import logging
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)

LISTING_KINDS = ("lands", "houses", "apartments")


class ApiError(Exception):
    """The API answered with an error envelope or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AdminApiClient:
    """
    Thin wrapper over the `/api` endpoints.

    Every call returns the decoded envelope (`success`, `data`, ...) or raises
    `ApiError`. The token from `login` is sent as a Bearer header afterwards.
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.transport = transport

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    def request(
        self,
        method: str,
        endpoint: str,
        json: Optional[Dict] = None,
        params: Optional[Dict] = None,
    ) -> Dict[str, Any]:
        try:
            with httpx.Client(
                base_url=self.base_url, timeout=self.timeout, transport=self.transport
            ) as client:
                resp = client.request(
                    method, endpoint, json=json, params=params, headers=self._headers()
                )
        except httpx.ConnectError as e:
            raise ApiError(f"Cannot connect to API at {self.base_url}") from e
        except httpx.HTTPError as e:
            raise ApiError(f"Request failed: {e}") from e

        try:
            body = resp.json()
        except ValueError:
            body = {}

        if resp.is_error or body.get("success") is False:
            message = body.get("message") or resp.text or resp.reason_phrase
            logger.warning("%s %s -> %s: %s", method, endpoint, resp.status_code, message)
            raise ApiError(message, resp.status_code)
        return body

    def health(self) -> bool:
        try:
            with httpx.Client(timeout=5.0, transport=self.transport) as client:
                resp = client.get(self.base_url.rsplit("/api", 1)[0] + "/health")
            return resp.status_code == 200
        except httpx.HTTPError:
            return False

    # Auth

    def login(self, email: str, password: str) -> Dict[str, Any]:
        body = self.request("POST", "/admin/login", json={"email": email, "password": password})
        data = body["data"]
        self.token = data["token"]
        return data["user"]

    def logout(self):
        self.token = None

    # Overview

    def dashboard(self) -> Dict[str, Any]:
        return self.request("GET", "/admin/dashboard")["data"]

    def stats(self) -> Dict[str, Any]:
        return self.request("GET", "/admin/stats")["data"]

    # Listings

    @staticmethod
    def _check_kind(kind: str):
        if kind not in LISTING_KINDS:
            raise ValueError(f"Unknown listing kind: {kind}")

    def list_listings(self, kind: str, page: int = 1, limit: int = 10, **params) -> Dict[str, Any]:
        self._check_kind(kind)
        query = {"page": page, "limit": limit, **params}
        return self.request("GET", f"/{kind}/all", params=query)

    def create_listing(self, kind: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        self._check_kind(kind)
        return self.request("POST", f"/{kind}", json=payload)["data"]

    def update_listing(self, kind: str, listing_id: int, payload: Dict[str, Any]) -> Dict[str, Any]:
        self._check_kind(kind)
        return self.request("PUT", f"/{kind}/{listing_id}", json=payload)["data"]

    def delete_listing(self, kind: str, listing_id: int) -> Dict[str, Any]:
        self._check_kind(kind)
        return self.request("DELETE", f"/{kind}/{listing_id}")

    # Payments

    def list_payments(self, page: int = 1, limit: int = 10, status: Optional[str] = None) -> Dict[str, Any]:
        params = {"page": page, "limit": limit}
        if status:
            params["status"] = status
        return self.request("GET", "/payments", params=params)

    def complete_payment(self, payment_id: int) -> Dict[str, Any]:
        return self.request("PATCH", f"/payments/{payment_id}/complete")["data"]

    def fail_payment(self, payment_id: int) -> Dict[str, Any]:
        return self.request("PATCH", f"/payments/{payment_id}/fail")["data"]

    # Users

    def list_users(self, page: int = 1, limit: int = 10) -> Dict[str, Any]:
        return self.request("GET", "/admin/users", params={"page": page, "limit": limit})

    def user_details(self, user_id: int) -> Dict[str, Any]:
        return self.request("GET", f"/admin/users/{user_id}")["data"]

    def update_user_role(self, user_id: int, role: str) -> Dict[str, Any]:
        return self.request("PUT", f"/admin/users/{user_id}/role", json={"role": role})["data"]

    def delete_user(self, user_id: int) -> Dict[str, Any]:
        return self.request("DELETE", f"/admin/users/{user_id}")

    # Placeholder sections

    def list_placeholder(self, resource: str) -> List[Any]:
        return self.request("GET", f"/admin/{resource}")["data"]
