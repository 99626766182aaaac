from __future__ import annotations

from typing import Any, List, Sequence

import httpx


class OrderServiceError(Exception):
    """Raised when the coffee order API is unreachable or rejects a request."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class CoffeeShopClient:
    """Storefront-side client for the order API.

    Pass ``client`` to reuse an existing ``httpx.Client`` (for instance a
    FastAPI ``TestClient``); it must carry the service base URL.
    """

    def __init__(self, base_url: str = "http://localhost:3000", client: httpx.Client | None = None):
        self._client = client or httpx.Client(base_url=base_url.rstrip("/"), timeout=5.0)

    def get_menu(self) -> List[dict]:
        return self._request("GET", "/api/menu")["data"]

    def create_order(self, customer_name: str, items: Sequence[dict], total: float | None = None) -> dict:
        if total is None:
            total = sum(item.get("price", 0) for item in items)
        payload = {"customerName": customer_name, "items": list(items), "total": total}
        return self._request("POST", "/api/orders", json=payload)["data"]

    def list_orders(self) -> List[dict]:
        return self._request("GET", "/api/orders")["data"]

    def get_order(self, order_id: int) -> dict:
        return self._request("GET", f"/api/orders/{order_id}")["data"]

    def update_status(self, order_id: int, status: str) -> dict:
        return self._request("PUT", f"/api/orders/{order_id}", json={"status": status})["data"]

    def delete_order(self, order_id: int) -> None:
        self._request("DELETE", f"/api/orders/{order_id}")

    def health(self) -> dict:
        return self._request("GET", "/health")

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> dict:
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise OrderServiceError(f"Order service unreachable: {exc}") from exc

        try:
            payload = response.json()
        except ValueError:
            payload = {}
        if response.status_code >= 400:
            message = payload.get("error") if isinstance(payload, dict) else None
            raise OrderServiceError(
                message or f"Request failed ({response.status_code}): {response.text}",
                status_code=response.status_code,
            )
        return payload
