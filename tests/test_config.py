import pytest

from skillscan.config import ConfigError, ScanConfig, default_config_path, load_config
from skillscan.severity import Severity
from skillscan.utils import DEFAULT_EXCLUDE_DIRS


def test_missing_file_yields_defaults(tmp_path):
    config = load_config(tmp_path / "absent.yaml")

    assert config == ScanConfig()
    assert config.fail_on is Severity.CRITICAL
    assert config.exclude_dirs == DEFAULT_EXCLUDE_DIRS


def test_values_are_normalised(tmp_path):
    path = tmp_path / ".skillscan.yaml"
    path.write_text(
        """
extensions: [cs, .CSHTML]
exclude_dirs: [bin, obj, generated]
fail_on: HIGH
disabled_rules: [asp006]
workers: 4
max_file_size_bytes: 1000
""",
        encoding="utf-8",
    )

    config = load_config(path)

    assert config.extensions == (".cs", ".cshtml")
    assert config.exclude_dirs == frozenset({"bin", "obj", "generated"})
    assert config.fail_on is Severity.HIGH
    assert config.disabled_rules == ("ASP006",)
    assert config.workers == 4
    assert config.max_file_size_bytes == 1000


@pytest.mark.parametrize(
    "body, message",
    [
        ("- just\n- a list\n", "must be a mapping"),
        ("fail_on: urgent\n", "fail_on"),
        ("workers: 0\n", "positive integer"),
        ("exclude_dirs: 3\n", "list of strings"),
        ("colour: blue\n", "unknown key"),
        ("fail_on: [unclosed\n", "Cannot parse"),
    ],
)
def test_invalid_config_raises(tmp_path, body, message):
    path = tmp_path / "bad.yaml"
    path.write_text(body, encoding="utf-8")

    with pytest.raises(ConfigError) as excinfo:
        load_config(path)

    assert message in str(excinfo.value)


def test_overrides_skip_none_values():
    config = ScanConfig(workers=3).with_overrides(workers=None, fail_on=Severity.LOW)

    assert config.workers == 3
    assert config.fail_on is Severity.LOW


def test_default_config_path_discovery(tmp_path):
    assert default_config_path(tmp_path) is None

    (tmp_path / ".skillscan.yaml").write_text("workers: 2\n", encoding="utf-8")

    assert default_config_path(tmp_path) == tmp_path / ".skillscan.yaml"
