import json

import pytest

from provider_gateway.core.config.config import get_config
from provider_gateway.core.credentials import UserKeyValues
from provider_gateway.core.credentials.file_storage import FileCredentialStore
from provider_gateway.core.credentials.memory_storage import InMemoryCredentialStore
from provider_gateway.core.exceptions import CredentialStorageError, ProviderGatewayError


@pytest.mark.unit
class TestUserKeyValues:
    def test_from_camel_case_record(self):
        values = UserKeyValues.from_dict({"apiKey": "k", "baseURL": "https://x"})

        assert values == UserKeyValues(api_key="k", base_url="https://x")

    def test_from_snake_case_record(self):
        assert UserKeyValues.from_dict({"api_key": "k"}) == UserKeyValues(api_key="k")

    def test_to_dict(self):
        assert UserKeyValues(api_key="k").to_dict() == {"apiKey": "k", "baseURL": None}


@pytest.mark.unit
class TestInMemoryCredentialStore:
    @pytest.mark.asyncio
    async def test_put_and_get(self):
        store = InMemoryCredentialStore()
        store.put("u1", "openrouter", UserKeyValues(api_key="k"))

        assert await store.get_user_key_values("u1", "openrouter") == UserKeyValues(api_key="k")
        assert await store.get_user_key_values("u2", "openrouter") is None
        assert await store.get_user_key_values("u1", "other") is None


@pytest.mark.unit
class TestFileCredentialStore:
    @pytest.mark.asyncio
    async def test_reads_user_endpoint_record(self, tmp_path):
        path = tmp_path / "credentials.json"
        path.write_text(
            json.dumps({"u1": {"openrouter": {"apiKey": "k", "baseURL": "https://x"}}})
        )

        store = FileCredentialStore(path)

        assert await store.get_user_key_values("u1", "openrouter") == UserKeyValues(
            api_key="k", base_url="https://x"
        )
        assert await store.get_user_key_values("u1", "absent") is None
        assert await store.get_user_key_values("u2", "openrouter") is None

    @pytest.mark.asyncio
    async def test_sees_changes_without_restart(self, tmp_path):
        path = tmp_path / "credentials.json"
        store = FileCredentialStore(path)
        assert await store.get_user_key_values("u1", "openrouter") is None

        path.write_text(json.dumps({"u1": {"openrouter": {"apiKey": "new"}}}))

        assert (await store.get_user_key_values("u1", "openrouter")).api_key == "new"

    @pytest.mark.asyncio
    async def test_malformed_records_are_ignored(self, tmp_path):
        path = tmp_path / "credentials.json"
        path.write_text(json.dumps({"u1": "not-a-dict", "u2": {"openrouter": ["x"]}}))
        store = FileCredentialStore(path)

        assert await store.get_user_key_values("u1", "openrouter") is None
        assert await store.get_user_key_values("u2", "openrouter") is None

    @pytest.mark.asyncio
    async def test_corrupted_file_raises(self, tmp_path):
        path = tmp_path / "credentials.json"
        path.write_text("{not json")

        with pytest.raises(CredentialStorageError) as exc:
            await FileCredentialStore(path).get_user_key_values("u1", "openrouter")
        assert isinstance(exc.value, ProviderGatewayError)
        assert exc.value.error_type.value == "credential_storage_error"

    @pytest.mark.asyncio
    async def test_top_level_must_be_object(self, tmp_path):
        path = tmp_path / "credentials.json"
        path.write_text("[]")

        with pytest.raises(CredentialStorageError):
            await FileCredentialStore(path).get_user_key_values("u1", "openrouter")


@pytest.mark.unit
class TestConfiguredCredentialStore:
    def test_in_memory_when_no_file(self):
        assert isinstance(get_config().credential_store, InMemoryCredentialStore)

    def test_file_store_when_configured(self, monkeypatch, tmp_path):
        from provider_gateway.core.config.config import Config

        monkeypatch.setenv("CREDENTIALS_FILE", str(tmp_path / "credentials.json"))
        Config.reset_singleton()

        store = get_config().credential_store
        assert isinstance(store, FileCredentialStore)
        assert store.path == tmp_path / "credentials.json"
