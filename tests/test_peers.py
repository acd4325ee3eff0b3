from pathlib import Path
from types import MappingProxyType
from typing import Any

import pytest

from fabricconfig.config import ClientConfig
from fabricconfig.errors import PeerConfigError, PeerShapeError
from fabricconfig.models import PeerConfig
from fabricconfig.peers import EntryShape, entry_shape, read_peer_entry, resolve_peers
from fabricconfig.store import SettingsStore


def _entry(**overrides: Any) -> dict[Any, Any]:
    entry: dict[Any, Any] = {
        "host": "peer0.example.com",
        "port": 7051,
        "event_host": "peer0.example.com",
        "event_port": 7053,
        "tls": {"certificate": "/certs/peer0.pem", "serverhostoverride": "peer0"},
    }
    entry.update(overrides)
    return entry


def _as_shape(entry: dict[Any, Any], shape: EntryShape) -> Any:
    if shape is EntryShape.STRING_KEYED:
        return entry
    return MappingProxyType(entry)


def _config(peers: dict[str, Any], tls_enabled: bool = False) -> ClientConfig:
    return ClientConfig(SettingsStore({"client": {"peers": peers, "tls": {"enabled": tls_enabled}}}))


def test_entry_shape_classification() -> None:
    assert entry_shape({"host": "a"}) is EntryShape.STRING_KEYED
    assert entry_shape({"host": "a", 1: "b"}) is EntryShape.ANY_KEYED
    assert entry_shape(MappingProxyType({"host": "a"})) is EntryShape.ANY_KEYED
    assert entry_shape(["host"]) is None


@pytest.mark.parametrize("shape", list(EntryShape))
def test_valid_peer_matches_input(shape: EntryShape) -> None:
    peers = _config({"peer0": _as_shape(_entry(), shape)}).peers_config()
    assert peers == [
        PeerConfig(
            host="peer0.example.com",
            port="7051",
            event_host="peer0.example.com",
            event_port="7053",
            tls_certificate="/certs/peer0.pem",
            tls_server_host_override="peer0",
        )
    ]
    assert peers[0].address == "peer0.example.com:7051"
    assert peers[0].event_address == "peer0.example.com:7053"


@pytest.mark.parametrize("shape", list(EntryShape))
@pytest.mark.parametrize(
    "missing, message",
    [
        ("host", "host key not exist or empty for peer0"),
        ("port", "port key not exist or empty for peer0"),
        ("event_host", "event_host not exist or empty for peer0"),
        ("event_port", "event_port not exist or empty for peer0"),
    ],
)
def test_missing_required_field_is_fatal(shape: EntryShape, missing: str, message: str) -> None:
    entry = _entry()
    del entry[missing]
    with pytest.raises(PeerConfigError) as exc_info:
        _config({"peer0": _as_shape(entry, shape)}).peers_config()
    assert str(exc_info.value) == message
    assert exc_info.value.label == "peer0"
    assert exc_info.value.is_fatal is True


@pytest.mark.parametrize(
    "field, value",
    [("host", 42), ("host", ""), ("port", "7051"), ("port", True), ("event_port", 70.53)],
)
def test_wrong_typed_required_field_is_fatal(field: str, value: Any) -> None:
    with pytest.raises(PeerConfigError):
        _config({"peer0": _entry(**{field: value})}).peers_config()


def test_empty_certificate_fatal_only_with_tls() -> None:
    entry = _entry(tls={"serverhostoverride": "peer0"})

    with pytest.raises(PeerConfigError, match="tls.certificate not exist or empty for peer0"):
        _config({"peer0": entry}, tls_enabled=True).peers_config()

    peers = _config({"peer0": entry}, tls_enabled=False).peers_config()
    assert peers[0].tls_certificate == ""
    assert peers[0].tls_server_host_override == "peer0"


@pytest.mark.parametrize("tls", [None, "not-a-map", ["x"]])
def test_missing_or_odd_tls_section_yields_empty_fields(tls: Any) -> None:
    entry = _entry()
    if tls is None:
        del entry["tls"]
    else:
        entry["tls"] = tls
    peer = read_peer_entry("peer0", entry)
    assert peer.tls_certificate == ""
    assert peer.tls_server_host_override == ""


def test_non_mapping_entry_is_recoverable() -> None:
    with pytest.raises(PeerShapeError) as exc_info:
        _config({"peer0": "peer0.example.com:7051"}).peers_config()
    assert exc_info.value.label == "peer0"
    assert exc_info.value.is_fatal is False


def test_gopath_substituted(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GOPATH", "/opt/build")
    entry = _entry(tls={"certificate": "$GOPATH/certs/peer0.pem"})
    peers = _config({"peer0": entry}).peers_config()
    assert peers[0].tls_certificate == "/opt/build/certs/peer0.pem"


def test_gopath_unset_substitutes_empty(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GOPATH", raising=False)
    entry = _entry(tls={"certificate": "$GOPATH/certs/peer0.pem"})
    peers = _config({"peer0": entry}).peers_config()
    assert peers[0].tls_certificate == "/certs/peer0.pem"


def test_records_follow_map_order() -> None:
    peers = resolve_peers(
        {
            "peer1": _entry(host="peer1.example.com"),
            "peer0": _entry(host="peer0.example.com"),
        },
        tls_enabled=False,
    )
    assert [p.host for p in peers] == ["peer1.example.com", "peer0.example.com"]


def test_no_peers_configured() -> None:
    assert ClientConfig(SettingsStore()).peers_config() == []


def test_yaml_entry_with_non_string_key(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(
        "client:\n"
        "  peers:\n"
        "    peer0:\n"
        "      HOST: peer0.example.com\n"
        "      port: 7051\n"
        "      event_host: peer0.example.com\n"
        "      event_port: 7053\n"
        "      1: extra\n"
        "      tls:\n"
        "        Certificate: /certs/peer0.pem\n"
    )
    config = ClientConfig(SettingsStore.from_file(path))
    peers = config.peers_config()
    assert peers[0].host == "peer0.example.com"
    assert peers[0].tls_certificate == "/certs/peer0.pem"


def test_settings_changes_are_observed() -> None:
    config = _config({"peer0": _entry(tls={})})
    assert len(config.peers_config()) == 1

    config.settings.set("client.tls.enabled", True)
    with pytest.raises(PeerConfigError):
        config.peers_config()
