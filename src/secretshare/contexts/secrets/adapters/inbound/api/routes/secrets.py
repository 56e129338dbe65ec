from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field, StrictInt

from secretshare.contexts.secrets.application.use_cases import (
    SaveSecretRequest,
    SaveSecretUseCase,
    map_secrets_exception,
)
from secretshare.contexts.secrets.domain.entities import Secret
from secretshare.contexts.secrets.domain.errors import SecretDomainError
from secretshare.platform.errors import SecretShareError


class SaveSecretApiRequest(BaseModel):
    """
    SaveSecretApiRequest — API payload for `POST /secrets`.

    Docs:
      - docs/architecture/secrets/secrets-save-path-v1.md
    Related:
      - src/secretshare/contexts/secrets/application/use_cases/save_secret.py
      - apps/api/routes/secrets.py
    """

    model_config = ConfigDict(populate_by_name=True)

    payload: str = Field(min_length=1)
    expire_at: StrictInt = Field(alias="expireAt", ge=0)
    organisation: str | None = None


class SecretResponse(BaseModel):
    """
    SecretResponse — API-safe secret projection without ciphertext or IV.

    Docs:
      - docs/architecture/secrets/secrets-save-path-v1.md
    Related:
      - src/secretshare/contexts/secrets/domain/entities/secret.py
      - src/secretshare/contexts/secrets/adapters/inbound/api/routes/secrets.py
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    token: str
    expire_at: datetime = Field(alias="expireAt")
    created_at: datetime = Field(alias="createdAt")
    organisation: str


def build_secrets_router(
    *,
    save_use_case: SaveSecretUseCase,
    max_expire_minutes: int,
) -> APIRouter:
    """
    Build router exposing the save-secret endpoint.

    Docs:
      - docs/architecture/secrets/secrets-save-path-v1.md
      - docs/architecture/api/api-errors-payload-v1.md
    Related:
      - src/secretshare/contexts/secrets/application/use_cases/save_secret.py
      - apps/api/common/errors.py
      - apps/api/wiring/modules/secrets.py

    Args:
        save_use_case: Save-secret use-case.
        max_expire_minutes: Upper TTL bound accepted by the API.
    Returns:
        APIRouter: Configured secrets router.
    Assumptions:
        Global `SecretShareError` handlers are registered on the application.
    Raises:
        ValueError: If required dependencies are missing or TTL bound is not positive.
    Side Effects:
        None.
    """
    if save_use_case is None:  # type: ignore[truthy-bool]
        raise ValueError("build_secrets_router requires save_use_case")
    if max_expire_minutes <= 0:
        raise ValueError("build_secrets_router requires max_expire_minutes > 0")

    router = APIRouter(tags=["secrets"])

    @router.post(
        "/secrets",
        response_model=SecretResponse,
        response_model_by_alias=True,
        status_code=201,
    )
    def post_secret(request: SaveSecretApiRequest) -> SecretResponse:
        """
        Encrypt and store one secret, returning its id and access token.

        Args:
            request: Save-secret payload.
        Returns:
            SecretResponse: API-safe created secret projection.
        Assumptions:
            Organisation presence is validated by the use-case, not by request schema.
        Raises:
            SecretShareError: Canonical 422/409 payload mapped by global API error handlers.
        Side Effects:
            Writes one secret record in storage.
        """
        if request.expire_at > max_expire_minutes:
            raise SecretShareError(
                code="validation_error",
                message=f"Expiration must not exceed {max_expire_minutes} minutes",
                details={"max_expire_minutes": max_expire_minutes},
            )
        try:
            secret = save_use_case.execute(
                SaveSecretRequest(
                    payload=request.payload,
                    expire_in_minutes=request.expire_at,
                    organisation=request.organisation,
                )
            )
        except SecretDomainError as error:
            raise map_secrets_exception(error=error) from error
        return _to_secret_response(secret=secret)

    return router



def _to_secret_response(*, secret: Secret) -> SecretResponse:
    """
    Convert domain secret into strict API response DTO.

    Args:
        secret: Persisted secret entity.
    Returns:
        SecretResponse: Response model without ciphertext and IV.
    Assumptions:
        Token is safe to return to the creator of the secret.
    Raises:
        None.
    Side Effects:
        None.
    """
    return SecretResponse(
        id=secret.id,
        token=secret.token,
        expire_at=secret.expire_at,
        created_at=secret.created_at,
        organisation=secret.organisation,
    )
