"""
Application state and credential storage.

The ContentController is the single writer of AppState. Every update
replaces the whole state record, so readers never see a partially
applied generation result. At most one generation runs at a time; a
request arriving while one is in flight is rejected, not queued.
"""

import json
import logging
import threading
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Callable, Optional

from .errors import GenerationError, GenerationErrorKind, GenerationInProgressError
from .models import GeneratedContent, GenerationRequest

logger = logging.getLogger(__name__)


CREDENTIAL_KEY = "anthropicApiKey"
INVALID_API_KEY_MESSAGE = "Invalid API Key. Please update your API Key."
MISSING_API_KEY_MESSAGE = "API Key is not set. Please configure your API Key."
INVALID_INPUT = "invalid_input"

# Builds a generator callable for an API key
GeneratorFactory = Callable[[str], Callable[[GenerationRequest], GeneratedContent]]


class CredentialStoreError(Exception):
    """Raised when the credential file cannot be read or written."""
    pass


class CredentialStore:
    """Persists the API credential in a local JSON file under a fixed key."""

    def __init__(self, path: Path, key: str = CREDENTIAL_KEY):
        self.path = Path(path)
        self.key = key

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise CredentialStoreError(f"Failed to read credentials from {self.path}: {e}") from e
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as e:
            raise CredentialStoreError(f"Failed to write credentials to {self.path}: {e}") from e

    def load(self) -> Optional[str]:
        value = self._read().get(self.key)
        return value if isinstance(value, str) and value else None

    def save(self, api_key: str) -> None:
        data = self._read()
        data[self.key] = api_key
        self._write(data)

    def clear(self) -> None:
        data = self._read()
        if self.key in data:
            del data[self.key]
            self._write(data)


@dataclass(frozen=True)
class AppState:
    """Snapshot of the UI state."""
    api_key: Optional[str] = None
    is_busy: bool = False
    result: Optional[GeneratedContent] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None  # INVALID_INPUT or a GenerationErrorKind value
    reauth_required: bool = False

    @property
    def needs_credential(self) -> bool:
        """True when the user must go through credential setup first."""
        return not self.api_key


def validate_inputs(request: GenerationRequest) -> Optional[str]:
    """
    Check that a request carries enough product information.

    A source URL makes every other field optional. Without one, a product
    name or an image is needed; details alone are not enough.

    Returns:
        An error message, or None when the request can be generated.
    """
    if request.has_source_url:
        return None
    has_name = bool(request.product_name.strip())
    has_details = bool(request.product_details.strip())
    has_image = request.image is not None
    if not (has_name or has_details or has_image):
        return (
            "Please provide a Product Source URL, or Product Name, Details, "
            "or an Image to generate content."
        )
    if not (has_name or has_image):
        return "If no Product Source URL is given, please enter a product name or upload an image."
    return None


class ContentController:
    """
    Owns the application state and drives generations.

    Args:
        store: Credential persistence.
        generator_factory: Builds a generator for an API key. The generator
            takes a GenerationRequest and returns GeneratedContent.
    """

    def __init__(self, store: CredentialStore, generator_factory: GeneratorFactory):
        self.store = store
        self.generator_factory = generator_factory
        self._state = AppState()
        self._lock = threading.Lock()

    @property
    def state(self) -> AppState:
        return self._state

    def _update(self, **changes) -> AppState:
        self._state = replace(self._state, **changes)
        return self._state

    def load_credentials(self) -> AppState:
        """Load the stored credential at startup."""
        with self._lock:
            return self._update(api_key=self.store.load())

    def submit_api_key(self, api_key: str) -> AppState:
        """Store a new credential and clear any previous error."""
        api_key = api_key.strip()
        if not api_key:
            raise ValueError("API key must not be empty")
        with self._lock:
            self.store.save(api_key)
            return self._update(api_key=api_key, error=None, error_kind=None, reauth_required=False)

    def change_api_key(self) -> AppState:
        """Forget the credential and return to setup, dropping the current result."""
        with self._lock:
            return self._clear_credential(error=None)

    def _clear_credential(self, error: Optional[str], error_kind: Optional[str] = None) -> AppState:
        self.store.clear()
        return self._update(
            api_key=None,
            result=None,
            error=error,
            error_kind=error_kind,
            reauth_required=False,
        )

    def generate(self, request: GenerationRequest) -> AppState:
        """
        Run one generation and record its outcome.

        Args:
            request: The user's inputs.

        Returns:
            The state after the generation finished. On failure, ``error``
            holds the user-visible message; on an auth failure the stored
            credential is also cleared and ``reauth_required`` is set.

        Raises:
            GenerationInProgressError: If a generation is already running.
        """
        with self._lock:
            if self._state.is_busy:
                raise GenerationInProgressError("A generation is already in progress.")
            if not self._state.api_key:
                return self._clear_credential(
                    error=MISSING_API_KEY_MESSAGE, error_kind=GenerationErrorKind.AUTH.value
                )
            message = validate_inputs(request)
            if message:
                return self._update(error=message, error_kind=INVALID_INPUT)
            api_key = self._state.api_key
            self._update(is_busy=True, error=None, error_kind=None, result=None, reauth_required=False)

        try:
            content = self.generator_factory(api_key)(request)
        except GenerationError as e:
            return self._finish_with_error(e)
        except Exception as e:
            logger.exception("Unexpected generation failure")
            return self._finish_with_error(GenerationError(GenerationErrorKind.TRANSPORT, str(e)))

        with self._lock:
            return self._update(is_busy=False, result=content, error=None, error_kind=None)

    def _finish_with_error(self, error: GenerationError) -> AppState:
        logger.error(f"Generation failed ({error.kind.value}): {error.message}")
        with self._lock:
            if error.is_auth_error:
                state = self._update(
                    api_key=None,
                    is_busy=False,
                    result=None,
                    error=INVALID_API_KEY_MESSAGE,
                    error_kind=error.kind.value,
                    reauth_required=True,
                )
                try:
                    self.store.clear()
                except CredentialStoreError as e:
                    logger.error(f"Failed to clear stored credential: {e}")
                return state
            return self._update(
                is_busy=False, result=None, error=error.message, error_kind=error.kind.value
            )
