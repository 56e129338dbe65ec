from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from secretshare.contexts.secrets.application.ports import (
    SecretCipher,
    SecretIdGenerator,
    SecretRepository,
    SecretsClock,
)
from secretshare.contexts.secrets.domain.entities import Secret, is_organisation_provided
from secretshare.contexts.secrets.domain.errors import (
    EXPIRATION_INVALID_MESSAGE,
    SecretAlreadyExistsError,
    SecretValidationError,
)

log = logging.getLogger(__name__)

_MILLISECONDS_PER_MINUTE = 60_000
# a thousand leap years keeps `now + ttl` below `datetime.max` for any clock before year 9000
MAX_EXPIRE_IN_MINUTES = 1_000 * 366 * 24 * 60


@dataclass(frozen=True, slots=True)
class SaveSecretRequest:
    """
    SaveSecretRequest — input of the save-secret use-case.

    Docs:
      - docs/architecture/secrets/secrets-save-path-v1.md
    Related:
      - src/secretshare/contexts/secrets/application/use_cases/save_secret.py
      - src/secretshare/contexts/secrets/adapters/inbound/api/routes/secrets.py
    """

    payload: str
    expire_in_minutes: int
    organisation: str | None = None


class SaveSecretUseCase:
    """
    SaveSecretUseCase — encrypt payload and persist a new time-bounded secret.

    Docs:
      - docs/architecture/secrets/secrets-save-path-v1.md
    Related:
      - src/secretshare/contexts/secrets/application/ports/secret_repository.py
      - src/secretshare/contexts/secrets/application/ports/secret_cipher.py
      - src/secretshare/contexts/secrets/application/ports/secret_id_generator.py
      - src/secretshare/contexts/secrets/adapters/inbound/api/routes/secrets.py
    """

    def __init__(
        self,
        *,
        id_generator: SecretIdGenerator,
        secret_repository: SecretRepository,
        cipher: SecretCipher,
        clock: SecretsClock,
    ) -> None:
        """
        Initialize use-case dependencies for ids, storage, encryption, and time.

        Args:
            id_generator: Secret id generator port.
            secret_repository: Secret storage port.
            cipher: Payload encryption port.
            clock: UTC clock port for timestamps.
        Returns:
            None.
        Assumptions:
            Dependencies are initialized and non-null.
        Raises:
            ValueError: If any dependency is missing.
        Side Effects:
            None.
        """
        if id_generator is None:  # type: ignore[truthy-bool]
            raise ValueError("SaveSecretUseCase requires id_generator")
        if secret_repository is None:  # type: ignore[truthy-bool]
            raise ValueError("SaveSecretUseCase requires secret_repository")
        if cipher is None:  # type: ignore[truthy-bool]
            raise ValueError("SaveSecretUseCase requires cipher")
        if clock is None:  # type: ignore[truthy-bool]
            raise ValueError("SaveSecretUseCase requires clock")

        self._id_generator = id_generator
        self._secret_repository = secret_repository
        self._cipher = cipher
        self._clock = clock

    def execute(self, request: SaveSecretRequest) -> Secret:
        """
        Validate request, reserve fresh id, encrypt payload, and persist the secret.

        Args:
            request: Save request with payload, TTL in minutes, and organisation.
        Returns:
            Secret: Persisted secret snapshot.
        Assumptions:
            Side effects run strictly in order: generate id, existence check, encrypt, save.
            Collaborator failures propagate unchanged.
        Raises:
            SecretValidationError: If organisation or TTL is invalid; no side effects occur.
            SecretAlreadyExistsError: If generated id already exists; nothing is encrypted
                or saved.
        Side Effects:
            Encrypts payload and writes one record in repository.
        """
        if not is_organisation_provided(organisation=request.organisation):
            raise SecretValidationError()
        expire_in_minutes = _ensure_expire_in_minutes(value=request.expire_in_minutes)

        secret_id = self._id_generator.generate()
        if self._secret_repository.find_by_id(secret_id):
            log.warning("secret id collision: id=%s", secret_id)
            raise SecretAlreadyExistsError(secret_id=secret_id)

        encrypted = self._cipher.encrypt(request.payload)

        now = _ensure_utc_datetime(value=self._clock.now(), field_name="clock.now")
        secret = Secret(
            id=secret_id,
            secret=encrypted.secret,
            token=encrypted.secret_key,
            iv=encrypted.iv,
            expire_at=compute_expire_at(
                created_at=now,
                expire_in_minutes=expire_in_minutes,
            ),
            created_at=now,
            updated_at=now,
            organisation=request.organisation,
        )
        self._secret_repository.save(secret)
        log.info(
            "secret saved: id=%s organisation=%s expire_at=%s",
            secret.id,
            secret.organisation,
            secret.expire_at.isoformat(),
        )
        return secret


def compute_expire_at(*, created_at: datetime, expire_in_minutes: int) -> datetime:
    """
    Derive absolute expiration instant from creation time and TTL in minutes.

    Args:
        created_at: Secret creation instant.
        expire_in_minutes: Requested lifetime in minutes.
    Returns:
        datetime: `created_at + expire_in_minutes * 60000` milliseconds.
    Assumptions:
        TTL is already validated as integer in `[0, MAX_EXPIRE_IN_MINUTES]`.
    Raises:
        None.
    Side Effects:
        None.
    """
    return created_at + timedelta(milliseconds=expire_in_minutes * _MILLISECONDS_PER_MINUTE)


def _ensure_expire_in_minutes(*, value: object) -> int:
    """
    Validate TTL is a non-negative integer number of minutes within `MAX_EXPIRE_IN_MINUTES`.

    Args:
        value: Raw TTL value from request.
    Returns:
        int: Same validated value.
    Assumptions:
        Boolean values are not accepted as integers. The upper bound keeps the expiration
        instant representable, so no overflow can surface after encryption.
    Raises:
        SecretValidationError: If value is not an integer in `[0, MAX_EXPIRE_IN_MINUTES]`.
    Side Effects:
        None.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise SecretValidationError(EXPIRATION_INVALID_MESSAGE)
    if not 0 <= value <= MAX_EXPIRE_IN_MINUTES:
        raise SecretValidationError(EXPIRATION_INVALID_MESSAGE)
    return value


def _ensure_utc_datetime(*, value: datetime, field_name: str) -> datetime:
    """
    Validate datetime is timezone-aware UTC and return same value.

    Args:
        value: Datetime value to validate.
        field_name: Field label for deterministic error messages.
    Returns:
        datetime: Same validated datetime.
    Assumptions:
        UTC datetimes have zero offset.
    Raises:
        ValueError: If datetime is naive or non-UTC.
    Side Effects:
        None.
    """
    offset = value.utcoffset()
    if value.tzinfo is None or offset is None:
        raise ValueError(f"{field_name} must be timezone-aware UTC datetime")
    if offset.total_seconds() != 0:
        raise ValueError(f"{field_name} must be UTC datetime")
    return value
