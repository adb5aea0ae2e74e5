import pytest

from framekit.config import CONFIG_ENV, HarnessSettings, Settings, load_settings, parse_settings, resolve_config_path
from framekit.core import ConfigError


def test_defaults_without_file() -> None:
    settings = load_settings(None)
    assert settings == Settings()
    assert settings.harness.case_timeout_s == 10.0
    assert settings.harness.suite_timeout_s == 30.0
    assert settings.report.json_path == "framekit-report.json"


def test_load_yaml_settings(tmp_path) -> None:
    path = tmp_path / "framekit.yaml"
    path.write_text(
        """
harness:
  headless: true
  drivers: [dummy]
  size: [64, 48]
  case_timeout_s: 2.5
  suite_timeout_s: null
  cases: ["ui.*"]
report:
  format: json
  path: out/report.json
  show_timing: false
""",
        encoding="utf-8",
    )
    settings = load_settings(str(path))
    assert settings.harness == HarnessSettings(
        headless=True,
        drivers=("dummy",),
        size=(64, 48),
        case_timeout_s=2.5,
        suite_timeout_s=None,
        cases=("ui.*",),
    )
    assert settings.report.format == "json"
    assert settings.report.json_path == "out/report.json"
    assert settings.report.show_timing is False


def test_overrides_skip_none() -> None:
    base = parse_settings({"harness": {"case_timeout_s": 3}})
    merged = base.with_overrides({"case_timeout_s": None, "fail_fast": True}, {"color": False})
    assert merged.harness.case_timeout_s == 3.0
    assert merged.harness.fail_fast is True
    assert merged.report.color is False


@pytest.mark.parametrize(
    "raw, fragment",
    [
        ({"harness": {"size": [10]}}, "harness/size"),
        ({"harness": {"case_timeout_s": 0}}, "harness/case_timeout_s"),
        ({"report": {"format": "xml"}}, "report/format"),
        ({"unknown": 1}, "root"),
        (["not", "a", "mapping"], "mapping"),
    ],
)
def test_invalid_settings_raise(raw, fragment) -> None:
    with pytest.raises(ConfigError, match=fragment):
        parse_settings(raw)


def test_unreadable_and_malformed_files(tmp_path) -> None:
    with pytest.raises(ConfigError, match="Cannot read"):
        load_settings(str(tmp_path / "missing.yaml"))
    bad = tmp_path / "bad.yaml"
    bad.write_text("harness: [unclosed", encoding="utf-8")
    with pytest.raises(ConfigError, match="Invalid YAML"):
        load_settings(str(bad))


def test_config_path_from_environment(monkeypatch) -> None:
    monkeypatch.setenv(CONFIG_ENV, "/etc/framekit.yaml")
    assert resolve_config_path(None) == "/etc/framekit.yaml"
    assert resolve_config_path("local.yaml") == "local.yaml"
    monkeypatch.delenv(CONFIG_ENV)
    assert resolve_config_path(None) is None


def test_suite_budget_can_be_disabled_or_overridden() -> None:
    assert parse_settings({"harness": {"suite_timeout_s": None}}).harness.suite_timeout_s is None
    settings = Settings().with_overrides({"suite_timeout_s": 5}, {})
    assert settings.harness.suite_timeout_s == 5
