"""Health check endpoints - GET /health, GET /healthz."""

import json
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Response

from backend.app.db.engine import get_store
from backend.app.db.storage import KeyValueStore

router = APIRouter()


async def check_store(store: KeyValueStore) -> tuple[bool, str]:
    """Check storage connectivity.

    Returns:
        (is_ok, status_message)
    """
    try:
        await store.ping()
        return (True, "ok")
    except Exception as e:
        return (False, f"error: {type(e).__name__}")


@router.get("/health")
async def health() -> dict[str, str]:
    """Simple liveness check.

    Returns:
        200 OK always (application is running)
    """
    return {"status": "ok"}


@router.get("/healthz", response_model=None)
async def healthz(
    store: Annotated[KeyValueStore, Depends(get_store)],
) -> dict[str, Any] | Response:
    """Readiness check.

    Returns:
        200 with component status if the store is reachable
        503 otherwise
    """
    store_ok, store_status = await check_store(store)

    response_body = {
        "status": "ok" if store_ok else "degraded",
        "components": {"store": store_status},
    }

    if not store_ok:
        return Response(
            content=json.dumps(response_body),
            status_code=503,
            media_type="application/json",
        )

    return response_body
