import json

import pytest

from ccrm.config import AppConfig, load_config
from ccrm.core.enums import Semester
from ccrm.core.exceptions import ConfigurationError


def test_defaults(tmp_path):
    config = load_config(data_dir=tmp_path)
    assert config.app_name == "Campus Course & Records Manager"
    assert config.max_students_per_course == 30
    assert config.max_courses_per_student == 6
    assert config.max_credits_per_student == 18
    assert config.minimum_gpa == 2.0
    assert config.default_semester is Semester.FALL
    assert config.log_level == "INFO"
    assert config.error_log_retention == 10


def test_directories_derive_from_data_dir(tmp_path):
    config = load_config(data_dir=tmp_path / "data")
    assert config.backup_dir == tmp_path / "data" / "backups"
    assert config.export_dir == tmp_path / "data" / "exports"
    assert config.import_dir == tmp_path / "data" / "imports"
    assert config.log_dir == tmp_path / "data" / "logs"

    config.ensure_directories()
    for directory in (config.data_dir, config.backup_dir, config.export_dir, config.import_dir):
        assert directory.is_dir()


def test_explicit_directory_wins(tmp_path):
    config = load_config(data_dir=tmp_path, backup_dir=tmp_path / "elsewhere")
    assert config.backup_dir == tmp_path / "elsewhere"
    assert config.export_dir == tmp_path / "exports"


def test_json_file_with_overrides(tmp_path):
    path = tmp_path / "ccrm.json"
    path.write_text(json.dumps({
        "data_dir": str(tmp_path / "store"),
        "max_courses_per_student": 4,
        "default_semester": "spring",
        "log_level": "debug",
    }), encoding="utf-8")

    config = load_config(path, max_courses_per_student=5, log_level=None)
    assert config.data_dir == tmp_path / "store"
    assert config.max_courses_per_student == 5
    assert config.default_semester is Semester.SPRING
    assert config.log_level == "DEBUG"


def test_environment_variables(tmp_path, monkeypatch):
    monkeypatch.setenv("CCRM_MAX_STUDENTS_PER_COURSE", "45")
    monkeypatch.setenv("CCRM_DEFAULT_SEMESTER", "WINTER")
    config = load_config(data_dir=tmp_path)
    assert config.max_students_per_course == 45
    assert config.default_semester is Semester.WINTER


@pytest.mark.parametrize("overrides", [
    {"max_students_per_course": 0},
    {"max_courses_per_student": -2},
    {"minimum_gpa": 11},
    {"default_semester": "autumn"},
    {"log_level": "verbose"},
])
def test_invalid_values_raise_configuration_error(tmp_path, overrides):
    with pytest.raises(ConfigurationError) as excinfo:
        load_config(data_dir=tmp_path, **overrides)
    assert excinfo.value.error_code == "CONFIGURATION_INVALID"


def test_unreadable_or_malformed_file(tmp_path):
    with pytest.raises(ConfigurationError):
        load_config(tmp_path / "missing.json")
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_config(broken)
    listing = tmp_path / "list.json"
    listing.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_config(listing)


def test_configs_are_independent(tmp_path):
    first = load_config(data_dir=tmp_path / "a")
    second = load_config(data_dir=tmp_path / "b", max_courses_per_student=2)
    assert first.max_courses_per_student == 6
    assert second.max_courses_per_student == 2
    assert isinstance(first, AppConfig)


def test_summary(tmp_path):
    summary = load_config(data_dir=tmp_path).summary()
    assert summary.startswith("=== CCRM Configuration ===")
    assert "Max Courses per Student: 6" in summary
    assert "Default Semester: Fall" in summary
    assert "Error Logs Kept: 10" in summary
