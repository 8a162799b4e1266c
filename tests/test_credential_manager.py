"""Tests del ciclo de vida del token.

Tests obligatorios:
1. Token en archivo → se usa sin registrar
2. Sin token → registro + persistencia
3. --force-register → registro siempre
4. Registro fallido → CredentialError (fatal)
5. Error al persistir → se registra en log y se continúa

Ejecutar:
    pytest tests/test_credential_manager.py -v
"""

import logging
import time
from unittest.mock import MagicMock

import pytest

from ble_client.auth import CredentialManager, TokenStore
from ble_client.core.domain import CredentialSource, CredentialState
from ble_client.errors import CredentialError, TokenStoreError
from ble_client.transports.http import RegistrationResult


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def store(tmp_path) -> TokenStore:
    return TokenStore(tmp_path / "sense" / "ble-client-jwt")


@pytest.fixture
def client():
    """Mock del IngressClient con registro exitoso."""
    mock = MagicMock()
    mock.register = MagicMock(
        return_value=RegistrationResult(status_code=200, token="fresh-jwt")
    )
    return mock


@pytest.fixture
def manager(client, store) -> CredentialManager:
    return CredentialManager(client, store, api_key="api-key-1")


# =============================================================================
# TEST 1: TOKEN EN ARCHIVO
# =============================================================================

class TestLoadFromStore:
    """Token existente en el almacén."""

    def test_uses_stored_token(self, manager, client, store):
        store.write("stored-jwt")

        credential = manager.load_or_register()

        assert credential.token == "stored-jwt"
        assert credential.source == CredentialSource.STORE
        assert manager.state == CredentialState.LOADED
        client.register.assert_not_called()

    def test_stored_token_is_stripped(self, manager, store):
        store.path.parent.mkdir(parents=True)
        store.path.write_bytes(b"stored-jwt\n")

        assert manager.load_or_register().token == "stored-jwt"

    def test_initial_state(self, manager):
        assert manager.state == CredentialState.UNLOADED
        assert manager.credential is None


# =============================================================================
# TEST 2: SIN TOKEN → REGISTRO
# =============================================================================

class TestRegisterWhenMissing:
    """Cualquier error de lectura dispara el registro."""

    def test_missing_file_registers_and_persists(self, manager, client, store):
        credential = manager.load_or_register()

        assert credential.token == "fresh-jwt"
        assert credential.source == CredentialSource.REGISTRATION
        assert manager.state == CredentialState.LOADED
        client.register.assert_called_once()
        assert client.register.call_args.args[0] == "api-key-1"

        # Cargable en la próxima ejecución
        assert store.read() == "fresh-jwt"

    def test_empty_file_registers(self, manager, client, store):
        store.write("")

        assert manager.load_or_register().token == "fresh-jwt"
        client.register.assert_called_once()

    def test_non_ascii_file_registers(self, manager, client, store):
        store.path.parent.mkdir(parents=True)
        store.path.write_bytes(b"jwt\xff\xfe")

        assert manager.load_or_register().token == "fresh-jwt"
        client.register.assert_called_once()
        assert store.read() == "fresh-jwt"

    def test_registration_timestamp_is_unix_epoch(self, manager, client):
        before = int(time.time())
        manager.register()

        properties = client.register.call_args.args[1]
        assert properties.timestamp >= before
        assert properties.timestamp > 59


# =============================================================================
# TEST 3: FORCE REGISTER
# =============================================================================

class TestForceRegister:
    """--force-register ignora el token existente."""

    def test_force_register_overwrites(self, manager, client, store):
        store.write("old-jwt")

        credential = manager.load_or_register(force_register=True)

        assert credential.token == "fresh-jwt"
        client.register.assert_called_once()
        assert store.read() == "fresh-jwt"


# =============================================================================
# TEST 4: REGISTRO FALLIDO
# =============================================================================

class TestRegistrationFailure:
    """Sin credencial no hay escaneo: el registro fallido es fatal."""

    @pytest.mark.parametrize("status", [201, 401, 403, 500])
    def test_non_200_is_fatal(self, manager, client, store, status):
        client.register.return_value = RegistrationResult(status_code=status, token="x")

        with pytest.raises(CredentialError, match=str(status)):
            manager.load_or_register()

        assert manager.state == CredentialState.FAILED
        assert not store.exists()

    def test_transport_error_is_fatal(self, manager, client):
        client.register.return_value = RegistrationResult(
            status_code=0, error="ConnectError: connection refused"
        )

        with pytest.raises(CredentialError, match="connection refused"):
            manager.load_or_register()

        assert manager.state == CredentialState.FAILED

    def test_missing_token_is_fatal(self, manager, client):
        client.register.return_value = RegistrationResult(status_code=200, token=None)

        with pytest.raises(CredentialError, match="no token"):
            manager.load_or_register()

    def test_no_retry(self, manager, client):
        client.register.return_value = RegistrationResult(status_code=500)

        with pytest.raises(CredentialError):
            manager.load_or_register()

        assert client.register.call_count == 1


# =============================================================================
# TEST 5: ERROR AL PERSISTIR
# =============================================================================

class TestPersistFailure:
    """El token sigue siendo válido aunque no se pueda guardar."""

    def test_write_failure_is_logged(self, client, caplog):
        store = MagicMock()
        store.read.side_effect = TokenStoreError("jwt file not found")
        store.write.side_effect = TokenStoreError("read-only file system")
        manager = CredentialManager(client, store, api_key="k")

        with caplog.at_level(logging.ERROR):
            credential = manager.load_or_register()

        assert credential.token == "fresh-jwt"
        assert manager.state == CredentialState.LOADED
        assert "Unable to write jwt" in caplog.text

    def test_unwritable_path(self, client, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("x")
        store = TokenStore(blocker / "ble-client-jwt")
        manager = CredentialManager(client, store, api_key="k")

        assert manager.load_or_register().token == "fresh-jwt"


# =============================================================================
# TOKEN STORE
# =============================================================================

class TestTokenStore:
    """Archivo del token: contenido completo = token."""

    def test_round_trip(self, store):
        store.write("a.b.c")
        assert store.read() == "a.b.c"
        assert store.path.read_bytes() == b"a.b.c"

    def test_overwrite(self, store):
        store.write("first-longer-token")
        store.write("second")
        assert store.read() == "second"

    def test_missing(self, store):
        with pytest.raises(TokenStoreError, match="not found"):
            store.read()

    @pytest.mark.parametrize("raw", [b"jwt\xff\xfe", "jwt-ñ".encode("utf-8")])
    def test_non_ascii_rejected(self, store, raw):
        store.path.parent.mkdir(parents=True)
        store.path.write_bytes(raw)
        with pytest.raises(TokenStoreError, match="ASCII"):
            store.read()

    def test_file_mode(self, store):
        store.write("t")
        assert store.path.stat().st_mode & 0o777 == 0o600
