from __future__ import annotations

import project_config
from orchestrator import resolve_settings


def test_defaults_without_overrides() -> None:
    settings = resolve_settings(env={})
    assert settings.output_dir == ""
    assert settings.suffix == "_stable.csv"
    assert settings.trace_level == "none"
    assert settings.profile == "dev"
    assert settings.events_enabled is False


def test_config_file_overrides_defaults(tmp_path, monkeypatch) -> None:
    config = tmp_path / "config.toml"
    config.write_text(
        "[search]\ntrace_level = \"summary\"\n\n[events]\nenabled = true\nmax_bytes = 2048\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("REGNET_CONFIG", str(config))
    project_config.reload()

    settings = resolve_settings(env={})

    assert settings.trace_level == "summary"
    assert settings.events_enabled is True
    assert settings.events_max_bytes == 2048


def test_environment_overrides_config() -> None:
    settings = resolve_settings(
        env={"REGNET_TRACE_LEVEL": "FULL", "REGNET_EVENTS_ENABLED": "yes", "REGNET_OUTPUT_DIR": "/tmp/out"}
    )
    assert settings.trace_level == "full"
    assert settings.events_enabled is True
    assert settings.output_dir == "/tmp/out"


def test_cli_overrides_environment() -> None:
    settings = resolve_settings(
        cli={"profile": "strict", "trace_level": None},
        env={"REGNET_VALIDATION_PROFILE": "dev", "REGNET_TRACE_LEVEL": "summary"},
    )
    assert settings.profile == "strict"
    assert settings.trace_level == "summary"


def test_invalid_values_fall_back() -> None:
    settings = resolve_settings(
        env={"REGNET_TRACE_LEVEL": "loud", "REGNET_VALIDATION_PROFILE": "lenient", "REGNET_EVENTS_ENABLED": "maybe"}
    )
    assert settings.trace_level == "none"
    assert settings.profile == "dev"
    assert settings.events_enabled is False


def test_delimiter_must_be_a_single_character() -> None:
    assert resolve_settings(cli={"delimiter": ";"}, env={}).delimiter == ";"
    assert resolve_settings(cli={"delimiter": "::"}, env={}).delimiter == ","
    assert resolve_settings(cli={"delimiter": "\n"}, env={}).delimiter == ","


def test_multi_character_delimiter_in_config_is_ignored(tmp_path, monkeypatch, write_model, toggle_document) -> None:
    from tools.cli import steady

    config = tmp_path / "config.toml"
    config.write_text('[output]\ndelimiter = "::"\n', encoding="utf-8")
    monkeypatch.setenv("REGNET_CONFIG", str(config))
    project_config.reload()
    out_dir = tmp_path / "out"

    code = steady.main(["run", str(write_model(toggle_document)), "--steady", "--output-dir", str(out_dir)])

    assert code == steady.EXIT_OK
    assert (out_dir / "toggle_stable.csv").read_text(encoding="utf-8") == "A,B\n0,0\n1,1\n"
