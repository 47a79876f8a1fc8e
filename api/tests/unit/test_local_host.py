"""
Tests de las implementaciones locales del host (credenciales, parámetros, cursor).
"""
import json

from seatable_nodes.core.config import Settings
from seatable_nodes.domain.entities.dtable import ApiCredentials
from seatable_nodes.infrastructure.host.local_host import (
    EnvCredentialsProvider,
    InMemoryCursorStore,
    JsonFileCursorStore,
    MappingParameterSource,
)


class TestEnvCredentialsProvider:
    def test_credentials_from_settings(self):
        app_settings = Settings(SEATABLE_SERVER_URL="https://seatable.example.com", SEATABLE_API_TOKEN="tok")
        assert EnvCredentialsProvider(app_settings).get_credentials() == ApiCredentials(
            server="https://seatable.example.com", token="tok"
        )

    def test_empty_token_means_no_credentials(self):
        app_settings = Settings(SEATABLE_API_TOKEN="")
        assert EnvCredentialsProvider(app_settings).get_credentials() is None


class TestMappingParameterSource:
    def test_common_parameters_and_default(self):
        source = MappingParameterSource({"table": "Contacts"})
        assert source.get("table") == "Contacts"
        assert source.get("table", 3) == "Contacts"
        assert source.get("row_id") is None
        assert source.get("operation", 0, "metadata") == "metadata"

    def test_per_item_overrides(self):
        source = MappingParameterSource({"row_id": "base"}, per_item=[{"row_id": "r1"}, {}])
        assert source.get("row_id", 0) == "r1"
        assert source.get("row_id", 1) == "base"
        assert source.get("row_id", 2) == "base"


class TestCursorStores:
    def test_in_memory(self):
        store = InMemoryCursorStore()
        assert store.load() is None
        store.save("2024-05-01T10:00:00.000+00:00")
        assert store.load() == "2024-05-01T10:00:00.000+00:00"

    def test_json_file_round_trip(self, tmp_path):
        path = tmp_path / "state" / "trigger.json"
        store = JsonFileCursorStore(path)

        assert store.load() is None
        store.save("2024-05-01T10:00:00.000+00:00")

        assert json.loads(path.read_text(encoding="utf-8")) == {
            "lastTimeChecked": "2024-05-01T10:00:00.000+00:00"
        }
        assert JsonFileCursorStore(path).load() == "2024-05-01T10:00:00.000+00:00"

    def test_json_file_empty(self, tmp_path):
        path = tmp_path / "trigger.json"
        path.write_text("", encoding="utf-8")
        assert JsonFileCursorStore(path).load() is None
