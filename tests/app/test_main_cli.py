from __future__ import annotations

import threading

import pytest

from nodedns import main as main_module
from nodedns.config import ConfigurationError, SyncConfig

ENV_VARS = (
    "DNS_NAME",
    "DNS_ROOTS",
    "CF_API_TOKEN",
    "CF_API_EMAIL",
    "CF_API_KEY",
    "CF_PROXY",
    "CF_TTL",
    "USE_INTERNAL_IP",
    "SKIP_EXTERNAL_IP",
    "NODE_SELECTOR",
    "RESYNC_SECONDS",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def isolated_cli(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(main_module, "load_dotenv", lambda: False)
    monkeypatch.setattr(main_module, "_install_signal_handlers", lambda _stop: None)


@pytest.fixture
def captured(monkeypatch: pytest.MonkeyPatch) -> dict[str, object]:
    calls: dict[str, object] = {}

    def fake_sync(config: SyncConfig, **kwargs: object) -> None:
        calls["config"] = config
        calls.update(kwargs)

    monkeypatch.setattr(main_module, "sync_node_dns", fake_sync)
    return calls


def test_main_cli_with_flags(captured: dict[str, object]) -> None:
    main_module.main(
        [
            "--dns-name",
            "nodes.example.com",
            "--dns-roots",
            "example.com",
            "--cloudflare-api-token",
            "tok",
            "--cloudflare-proxy",
            "true",
            "--cloudflare-ttl",
            "300",
            "--use-internal-ip",
            "--node-selector",
            "role=edge",
        ]
    )

    config = captured["config"]
    assert isinstance(config, SyncConfig)
    assert config.names == ("nodes.example.com",)
    assert config.proxied is True
    assert config.record_ttl == 1
    assert config.use_internal is True
    assert config.skip_external is False
    assert config.node_selector == "role=edge"
    assert isinstance(captured["stop"], threading.Event)


def test_main_cli_reads_environment(
    monkeypatch: pytest.MonkeyPatch, captured: dict[str, object]
) -> None:
    monkeypatch.setenv("DNS_NAME", "a.example.com,b.example.com")
    monkeypatch.setenv("DNS_ROOTS", "example.com")
    monkeypatch.setenv("CF_API_EMAIL", "ops@example.com")
    monkeypatch.setenv("CF_API_KEY", "key")
    monkeypatch.setenv("SKIP_EXTERNAL_IP", "1")

    main_module.main([])

    config = captured["config"]
    assert isinstance(config, SyncConfig)
    assert config.names == ("a.example.com", "b.example.com")
    assert config.skip_external is True
    assert config.ttl == 120


@pytest.mark.parametrize(
    "argv",
    [
        ["--dns-roots", "example.com", "--cloudflare-api-token", "tok"],
        ["--dns-name", "nodes.example.com", "--cloudflare-api-token", "tok"],
        ["--dns-name", "nodes.example.com", "--dns-roots", "example.com"],
    ],
)
def test_main_cli_missing_configuration_exits_2(
    argv: list[str], captured: dict[str, object]
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main_module.main(argv)

    assert excinfo.value.code == 2
    assert captured == {}


def test_main_cli_fatal_configuration_during_startup(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_sync(*_: object, **__: object) -> None:
        raise ConfigurationError("nodes.other.org is not within any of the dns roots")

    monkeypatch.setattr(main_module, "sync_node_dns", fake_sync)

    with pytest.raises(SystemExit) as excinfo:
        main_module.main(
            [
                "--dns-name",
                "nodes.other.org",
                "--dns-roots",
                "example.com",
                "--cloudflare-api-token",
                "tok",
            ]
        )

    assert excinfo.value.code == 2


def test_main_cli_unexpected_failure_exits_1(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_sync(*_: object, **__: object) -> None:
        raise RuntimeError("boom")

    monkeypatch.setattr(main_module, "sync_node_dns", fake_sync)

    with pytest.raises(SystemExit) as excinfo:
        main_module.main(
            [
                "--dns-name",
                "nodes.example.com",
                "--dns-roots",
                "example.com",
                "--cloudflare-api-token",
                "tok",
            ]
        )

    assert excinfo.value.code == 1
