from __future__ import annotations

import pytest

from planday_mcp import cli
from planday_mcp.settings import reset_settings_cache


class RecordingServer:
    def __init__(self, runtime) -> None:
        self.runtime = runtime
        self.ran = False

    def run(self) -> None:
        self.ran = True


@pytest.fixture
def started(monkeypatch):
    servers = []

    def fake_build(runtime):
        servers.append(RecordingServer(runtime))
        return servers[-1]

    monkeypatch.setattr(cli, "build_planday_server", fake_build)
    monkeypatch.setenv("PLANDAY_CLIENT_ID", "cli-client")
    reset_settings_cache()
    yield servers
    reset_settings_cache()


def test_log_level_flag_overrides_settings(started) -> None:
    cli.main(["--log-level", "DEBUG"])

    (server,) = started
    assert server.ran is True
    assert server.runtime.settings.log_level == "DEBUG"
    assert server.runtime.settings.client_id == "cli-client"


def test_env_file_flag_is_loaded(started, tmp_path, monkeypatch) -> None:
    monkeypatch.delenv("PLANDAY_CLIENT_ID")
    env_file = tmp_path / "portal.env"
    env_file.write_text("PLANDAY_CLIENT_ID=file-client\nPLANDAY_LOG_LEVEL=WARNING\n")

    cli.main(["--env-file", str(env_file)])

    (server,) = started
    assert server.runtime.settings.client_id == "file-client"
    assert server.runtime.settings.log_level == "WARNING"
