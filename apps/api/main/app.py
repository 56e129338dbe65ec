"""
FastAPI application factory for SecretShare API.
"""

from __future__ import annotations

import os
from typing import Mapping

from fastapi import FastAPI

from apps.api.common import register_api_error_handlers
from apps.api.wiring.modules import build_secrets_api_module


def create_app(*, environ: Mapping[str, str] | None = None) -> FastAPI:
    """
    Build FastAPI app with the secrets module wired at startup.

    Docs: docs/architecture/secrets/secrets-save-path-v1.md,
      docs/architecture/api/api-errors-payload-v1.md
    Related: apps.api.routes.secrets,
      apps.api.wiring.modules.secrets,
      apps.api.common.errors

    Args:
        environ: Optional environment mapping override.
    Returns:
        FastAPI: Application instance with registered routers.
    Assumptions:
        Module wiring performs fail-fast validation before first request.
    Raises:
        FileNotFoundError: If an explicitly configured secrets YAML path is missing.
        ValueError: If secrets runtime settings are invalid.
    Side Effects:
        Reads secrets YAML config when present.
    """
    effective_environ = os.environ if environ is None else environ

    app = FastAPI(
        title="SecretShare API",
        version="1.0.0",
    )
    register_api_error_handlers(app=app)
    secrets_module = build_secrets_api_module(environ=effective_environ)
    app.include_router(secrets_module.router)
    return app


app = create_app()
