from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

from fastapi import Body, Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import schemas
from .database import InMemoryDatabase, init_db
from .repository import OrderRecord, OrderRepository
from .service import OrderNotFoundError, OrderService, OrderValidationError

logger = logging.getLogger("coffee-service")

ENDPOINTS = (
    "GET    /api/menu",
    "POST   /api/orders",
    "GET    /api/orders",
    "GET    /api/orders/{id}",
    "PUT    /api/orders/{id}",
    "DELETE /api/orders/{id}",
    "GET    /health",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Coffee Shop API ready, available endpoints:")
    for endpoint in ENDPOINTS:
        logger.info("   %s", endpoint)
    yield


def create_app(database: InMemoryDatabase | None = None) -> FastAPI:
    db = database if database is not None else init_db()
    app = FastAPI(
        title="Coffee Order Service",
        version="0.1.0",
        description="Menu catalog and order lifecycle for the coffee shop storefront.",
        lifespan=lifespan,
    )
    app.state.database = db

    allowed_origins = [
        origin.strip() for origin in os.environ.get("ALLOWED_ORIGINS", "*").split(",")
    ]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def get_service() -> OrderService:
        return OrderService(OrderRepository(db))

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info("Received: %s %s", request.method, request.url.path)
        return await call_next(request)

    @app.exception_handler(OrderValidationError)
    async def validation_error_handler(request: Request, exc: OrderValidationError) -> JSONResponse:
        logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc)
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(OrderNotFoundError)
    async def not_found_handler(request: Request, exc: OrderNotFoundError) -> JSONResponse:
        logger.warning("Not found %s %s", request.method, request.url.path)
        return _error(status.HTTP_404_NOT_FOUND, str(exc))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        message = _describe_validation_errors(exc)
        logger.warning("Rejected %s %s: %s", request.method, request.url.path, message)
        return _error(status.HTTP_400_BAD_REQUEST, message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    @app.get("/health", response_model=schemas.HealthResponse, tags=["system"])
    async def health() -> schemas.HealthResponse:
        return schemas.HealthResponse(status="OK", timestamp=datetime.now(timezone.utc).isoformat())

    @app.get("/api/menu", response_model=schemas.MenuResponse, tags=["menu"])
    async def list_menu(service: OrderService = Depends(get_service)) -> schemas.MenuResponse:
        return schemas.MenuResponse(
            data=[schemas.MenuItem(**item.__dict__) for item in service.list_menu()]
        )

    @app.post(
        "/api/orders",
        response_model=schemas.OrderResponse,
        response_model_exclude_none=True,
        status_code=status.HTTP_201_CREATED,
        tags=["orders"],
    )
    async def create_order(
        payload: schemas.CreateOrderRequest,
        service: OrderService = Depends(get_service),
    ) -> schemas.OrderResponse:
        items = None
        if payload.items is not None:
            items = [item.model_dump(exclude_unset=True) for item in payload.items]
        record = service.create_order(payload.customer_name, items, payload.total)
        return schemas.OrderResponse(message="Order created successfully", data=_to_order(record))

    @app.get(
        "/api/orders",
        response_model=schemas.OrderListResponse,
        response_model_exclude_none=True,
        tags=["orders"],
    )
    async def list_orders(service: OrderService = Depends(get_service)) -> schemas.OrderListResponse:
        return schemas.OrderListResponse(data=[_to_order(record) for record in service.list_orders()])

    @app.get(
        "/api/orders/{order_id}",
        response_model=schemas.OrderResponse,
        response_model_exclude_none=True,
        tags=["orders"],
    )
    async def get_order(
        order_id: str, service: OrderService = Depends(get_service)
    ) -> schemas.OrderResponse:
        record = service.get_order(_parse_order_id(order_id))
        return schemas.OrderResponse(data=_to_order(record))

    @app.put(
        "/api/orders/{order_id}",
        response_model=schemas.OrderResponse,
        response_model_exclude_none=True,
        tags=["orders"],
    )
    async def update_order_status(
        order_id: str,
        payload: Any = Body(default=None),
        service: OrderService = Depends(get_service),
    ) -> schemas.OrderResponse:
        new_status = payload.get("status") if isinstance(payload, dict) else None
        record = service.update_status(_parse_order_id(order_id), new_status)
        return schemas.OrderResponse(message="Order updated", data=_to_order(record))

    @app.delete(
        "/api/orders/{order_id}",
        response_model=schemas.DeleteResponse,
        response_model_exclude_none=True,
        tags=["orders"],
    )
    async def delete_order(
        order_id: str, service: OrderService = Depends(get_service)
    ) -> schemas.DeleteResponse:
        service.delete_order(_parse_order_id(order_id))
        return schemas.DeleteResponse(message="Order deleted successfully")

    return app


def _parse_order_id(raw: str) -> int:
    # Ids are integers; anything else cannot name an existing order.
    try:
        return int(raw)
    except ValueError as exc:
        raise OrderNotFoundError("Order not found") from exc


def _to_order(record: OrderRecord) -> schemas.Order:
    return schemas.Order(**record.__dict__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=schemas.ErrorResponse(error=message).model_dump(),
    )


def _describe_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "Invalid request: " + "; ".join(parts)
