"""Tests for application state and credential storage."""

import json
import threading

import pytest

from content_spark.app_state import (
    CREDENTIAL_KEY,
    INVALID_API_KEY_MESSAGE,
    INVALID_INPUT,
    MISSING_API_KEY_MESSAGE,
    ContentController,
    CredentialStore,
    CredentialStoreError,
    validate_inputs,
)
from content_spark.errors import GenerationError, GenerationErrorKind, GenerationInProgressError
from content_spark.models import GenerationRequest, ImageData


@pytest.fixture
def store(tmp_path) -> CredentialStore:
    return CredentialStore(tmp_path / "credentials.json")


def _controller(store, generator) -> ContentController:
    """Controller whose factory always returns the given generator."""
    controller = ContentController(store, lambda api_key: generator)
    store.save("sk-test")
    controller.load_credentials()
    return controller


class TestCredentialStore:
    """Tests for the credential file."""

    def test_missing_file(self, store):
        """Test a missing file loads as no credential."""
        assert store.load() is None

    def test_save_and_load(self, store):
        """Test a saved key is stored under the fixed key."""
        store.save("sk-abc")
        assert store.load() == "sk-abc"
        assert json.loads(store.path.read_text())[CREDENTIAL_KEY] == "sk-abc"

    def test_clear_keeps_other_keys(self, store):
        """Test clearing removes only the credential."""
        store.path.write_text(json.dumps({CREDENTIAL_KEY: "sk-abc", "theme": "dark"}))
        store.clear()
        assert store.load() is None
        assert json.loads(store.path.read_text()) == {"theme": "dark"}

    def test_corrupt_file(self, store):
        """Test an unreadable file raises CredentialStoreError."""
        store.path.write_text("{not json")
        with pytest.raises(CredentialStoreError, match="Failed to read credentials"):
            store.load()


class TestValidateInputs:
    """Tests for the input presence rules."""

    def test_url_alone_is_enough(self):
        """Test a source URL makes every other input optional."""
        assert validate_inputs(GenerationRequest(source_url="https://shop.example/p")) is None

    def test_nothing_provided(self):
        """Test an empty request is rejected."""
        assert validate_inputs(GenerationRequest()).startswith("Please provide a Product Source URL")

    def test_details_alone(self):
        """Test details without a name or image are rejected."""
        message = validate_inputs(GenerationRequest(product_details="Lightweight gel"))
        assert message.startswith("If no Product Source URL is given")

    def test_name_or_image(self):
        """Test a name or an image is enough."""
        assert validate_inputs(GenerationRequest(product_name="Serum")) is None
        image = ImageData.from_bytes(b"img", "image/webp")
        assert validate_inputs(GenerationRequest(image=image)) is None


class TestContentController:
    """Tests for the single-writer state holder."""

    def test_starts_without_credential(self, store):
        """Test a fresh controller routes to credential setup."""
        controller = ContentController(store, lambda api_key: None)
        assert controller.load_credentials().needs_credential

    def test_submit_api_key(self, store):
        """Test submitting a key persists it."""
        controller = ContentController(store, lambda api_key: None)
        state = controller.submit_api_key("  sk-new  ")
        assert state.api_key == "sk-new"
        assert store.load() == "sk-new"

    def test_submit_empty_key(self, store):
        """Test an empty key is rejected."""
        controller = ContentController(store, lambda api_key: None)
        with pytest.raises(ValueError):
            controller.submit_api_key("   ")

    def test_change_api_key(self, store, seo_content):
        """Test changing the key forgets the credential and the result."""
        controller = _controller(store, lambda request: seo_content)
        controller.generate(GenerationRequest(product_name="Serum"))
        state = controller.change_api_key()
        assert state.needs_credential
        assert state.result is None
        assert store.load() is None

    def test_successful_generation(self, store, seo_content):
        """Test a successful generation stores the result."""
        requests = []

        def generator(request):
            requests.append(request)
            return seo_content

        controller = _controller(store, generator)
        request = GenerationRequest(product_name="Serum")
        state = controller.generate(request)

        assert requests == [request]
        assert state.result == seo_content
        assert state.error is None
        assert not state.is_busy

    def test_factory_receives_api_key(self, store, seo_content):
        """Test the generator is built for the stored key."""
        keys = []

        def factory(api_key):
            keys.append(api_key)
            return lambda request: seo_content

        controller = ContentController(store, factory)
        controller.submit_api_key("sk-xyz")
        controller.generate(GenerationRequest(product_name="Serum"))
        assert keys == ["sk-xyz"]

    def test_missing_credential(self, store):
        """Test generating without a key routes to setup."""
        controller = ContentController(store, lambda api_key: pytest.fail("must not build"))
        state = controller.generate(GenerationRequest(product_name="Serum"))
        assert state.error == MISSING_API_KEY_MESSAGE
        assert state.error_kind == GenerationErrorKind.AUTH.value
        assert state.needs_credential

    def test_invalid_input_keeps_result(self, store, seo_content):
        """Test a validation failure does not call the generator or drop the result."""
        calls = []

        def generator(request):
            calls.append(request)
            return seo_content

        controller = _controller(store, generator)
        controller.generate(GenerationRequest(product_name="Serum"))
        state = controller.generate(GenerationRequest())

        assert len(calls) == 1
        assert state.error_kind == INVALID_INPUT
        assert state.result == seo_content

    def test_auth_failure_clears_credential(self, store):
        """Test an auth failure clears the stored key and requires setup."""
        def generator(request):
            raise GenerationError(GenerationErrorKind.AUTH, "API Key Error: 401")

        controller = _controller(store, generator)
        state = controller.generate(GenerationRequest(product_name="Serum"))

        assert state.error == INVALID_API_KEY_MESSAGE
        assert state.reauth_required
        assert state.needs_credential
        assert store.load() is None
        assert not state.is_busy

    def test_auth_failure_with_unreadable_store(self, store, seo_content):
        """Test an auth failure still releases the busy flag when the store cannot be cleared."""
        calls = []

        def generator(request):
            calls.append(request)
            if len(calls) == 1:
                store.path.write_text("{not json")
                raise GenerationError(GenerationErrorKind.AUTH, "API Key Error: 401")
            return seo_content

        controller = _controller(store, generator)
        state = controller.generate(GenerationRequest(product_name="Serum"))

        assert not state.is_busy
        assert state.reauth_required
        assert state.needs_credential
        assert state.error == INVALID_API_KEY_MESSAGE

        store.path.write_text("{}")
        controller.submit_api_key("sk-fresh")
        assert controller.generate(GenerationRequest(product_name="Serum")).result == seo_content

    @pytest.mark.parametrize(
        "kind", [GenerationErrorKind.MALFORMED_RESPONSE, GenerationErrorKind.TRANSPORT]
    )
    def test_other_failures_keep_credential(self, store, kind):
        """Test non-auth failures surface the message and keep the key."""
        def generator(request):
            raise GenerationError(kind, "something went wrong")

        controller = _controller(store, generator)
        state = controller.generate(GenerationRequest(product_name="Serum"))

        assert state.error == "something went wrong"
        assert state.error_kind == kind.value
        assert not state.reauth_required
        assert state.api_key == "sk-test"
        assert store.load() == "sk-test"

    def test_unexpected_exception_is_transport(self, store):
        """Test an unclassified exception becomes a TRANSPORT error."""
        def generator(request):
            raise RuntimeError("boom")

        controller = _controller(store, generator)
        state = controller.generate(GenerationRequest(product_name="Serum"))

        assert state.error_kind == GenerationErrorKind.TRANSPORT.value
        assert not state.is_busy

    def test_concurrent_generation_rejected(self, store, seo_content):
        """Test a second generation while one is running is rejected, not queued."""
        started = threading.Event()
        release = threading.Event()

        def generator(request):
            started.set()
            release.wait(timeout=5)
            return seo_content

        controller = _controller(store, generator)
        worker = threading.Thread(
            target=controller.generate, args=(GenerationRequest(product_name="Serum"),)
        )
        worker.start()
        try:
            assert started.wait(timeout=5)
            assert controller.state.is_busy
            with pytest.raises(GenerationInProgressError):
                controller.generate(GenerationRequest(product_name="Other"))
        finally:
            release.set()
            worker.join(timeout=5)

        assert not controller.state.is_busy
        assert controller.state.result == seo_content
