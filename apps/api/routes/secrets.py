"""
Secrets API routes.

Docs:
  - docs/architecture/secrets/secrets-save-path-v1.md
"""

from __future__ import annotations

from fastapi import APIRouter

from secretshare.contexts.secrets.adapters.inbound.api.routes import (
    build_secrets_router as build_secrets_context_router,
)
from secretshare.contexts.secrets.application.use_cases import SaveSecretUseCase


def build_secrets_router(
    *,
    save_use_case: SaveSecretUseCase,
    max_expire_minutes: int,
) -> APIRouter:
    """
    Build secrets router facade for FastAPI app composition root.

    Docs:
      - docs/architecture/secrets/secrets-save-path-v1.md
    Related:
      - src/secretshare/contexts/secrets/adapters/inbound/api/routes/secrets.py
      - apps/api/wiring/modules/secrets.py
      - apps/api/main/app.py

    Args:
        save_use_case: Save-secret use-case.
        max_expire_minutes: Upper TTL bound accepted by the API.
    Returns:
        APIRouter: Router with all secrets endpoints included.
    Assumptions:
        Retrieval endpoints live outside this service.
    Raises:
        ValueError: If context router rejects dependencies.
    Side Effects:
        None.
    """
    router = APIRouter()
    router.include_router(
        build_secrets_context_router(
            save_use_case=save_use_case,
            max_expire_minutes=max_expire_minutes,
        )
    )
    return router
