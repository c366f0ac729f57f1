import pytest

from dcm.libs.classes.errors import ConfigFileError, ConfigShapeError
from dcm.libs.functions.load_services import load_services

YAML_FIXTURE = """
foo:
  bar:
    baz: qux
another: value
yet:
  another:
    - value1
    - value2
    - value3
"""


def test_loads_plain_mapping(tmp_path):
    path = tmp_path / "testproj.yml"
    path.write_text(YAML_FIXTURE, encoding="utf-8")

    assert load_services(path) == {
        "foo": {"bar": {"baz": "qux"}},
        "another": "value",
        "yet": {"another": ["value1", "value2", "value3"]},
    }


def test_unwraps_versioned_compose_file(tmp_path):
    path = tmp_path / "compose.yml"
    path.write_text(
        'version: "2"\nservices:\n  web:\n    image: nginx\n  api:\n    build: .\n',
        encoding="utf-8",
    )

    services = load_services(path)

    assert list(services) == ["web", "api"]
    assert services["web"] == {"image": "nginx"}


def test_keeps_document_when_version_is_not_a_string(tmp_path):
    path = tmp_path / "compose.yml"
    path.write_text("version: 2\nservices:\n  web: {}\n", encoding="utf-8")

    assert load_services(path) == {"version": 2, "services": {"web": {}}}


def test_empty_file(tmp_path):
    path = tmp_path / "empty.yml"
    path.write_text("", encoding="utf-8")

    assert load_services(path) == {}


def test_missing_file(tmp_path):
    with pytest.raises(ConfigFileError, match="not found"):
        load_services(tmp_path / "nope.yml")


def test_invalid_yaml(tmp_path):
    path = tmp_path / "bad.yml"
    path.write_text("foo: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigFileError):
        load_services(path)


def test_non_mapping_document(tmp_path):
    path = tmp_path / "list.yml"
    path.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ConfigShapeError):
        load_services(path)


def test_directory_is_a_config_file_error(tmp_path):
    with pytest.raises(ConfigFileError, match="Error reading config file"):
        load_services(tmp_path)
