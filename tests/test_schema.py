import json
from dataclasses import dataclass, field

import pytest

from hughttp.networking.errors import (
    InvalidConfiguration,
    SchemaNotFound,
    SchemaValidationError,
)
from hughttp.networking.schema import (
    SchemaTransformer,
    bind_fields,
    load_schema,
    validate_document,
)

USER_SCHEMA = {
    "type": "object",
    "properties": {
        "id": {"type": "integer"},
        "name": {"type": "string"},
    },
    "required": ["id", "name"],
}


@dataclass
class User:
    id: int = 0
    name: str = ""
    tags: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class FrozenUser:
    id: int = 0
    name: str = ""


class PlainUser:
    id: int = 0
    name: str = ""

    def __init__(self) -> None:
        self.email = None


@pytest.fixture
def schema_file(tmp_path):
    path = tmp_path / "user.json"
    path.write_text(json.dumps(USER_SCHEMA), encoding="utf-8")
    return path


def test_load_schema_reads_json(schema_file):
    assert load_schema(schema_file) == USER_SCHEMA


def test_load_schema_missing_file(tmp_path):
    with pytest.raises(SchemaNotFound) as excinfo:
        load_schema(tmp_path / "absent.json")

    assert excinfo.value.path == tmp_path / "absent.json"


def test_load_schema_rejects_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(InvalidConfiguration):
        load_schema(path)


def test_validate_document_accepts_conforming_document():
    assert validate_document({"id": 1, "name": "Test"}, USER_SCHEMA) == []


def test_validate_document_collects_every_violation():
    messages = validate_document({"id": "x"}, USER_SCHEMA)

    assert len(messages) == 2
    assert any(m.startswith("$.id:") and "integer" in m for m in messages)
    assert any("'name' is a required property" in m for m in messages)


def test_validate_document_reports_nested_paths():
    schema = {"type": "array", "items": {"type": "integer"}}

    assert validate_document([1, "two"], schema) == [
        "$[1]: 'two' is not of type 'integer'"
    ]


def test_validate_document_rejects_invalid_schema():
    with pytest.raises(InvalidConfiguration):
        validate_document({}, {"type": "not-a-type"})


def test_bind_fields_copies_matching_keys_only():
    user = bind_fields({"id": 1, "name": "Test", "extra": True}, User)

    assert user == User(id=1, name="Test")
    assert not hasattr(user, "extra")


def test_bind_fields_leaves_missing_fields_default():
    user = bind_fields({"name": "Only"}, User)

    assert user.id == 0
    assert user.tags == []


def test_bind_fields_supports_frozen_dataclasses():
    assert bind_fields({"id": 5}, FrozenUser) == FrozenUser(id=5)


def test_bind_fields_supports_plain_classes():
    user = bind_fields(
        {"id": 2, "name": "Plain", "email": "a@b.c", "other": 1}, PlainUser
    )

    assert user.id == 2
    assert user.name == "Plain"
    assert user.email == "a@b.c"
    assert not hasattr(user, "other")


def test_bind_fields_ignores_non_mapping_documents():
    assert bind_fields([1, 2], User) == User()


def test_bind_fields_does_not_coerce_types():
    assert bind_fields({"id": "7"}, User).id == "7"


def test_transformer_binds_valid_document(schema_file):
    user = SchemaTransformer(schema_file).transform(
        {"id": 1, "name": "Test"}, User
    )

    assert user.name == "Test"
    assert user.id == 1


def test_transformer_raises_with_all_messages(schema_file):
    with pytest.raises(SchemaValidationError) as excinfo:
        SchemaTransformer(schema_file).transform({"id": "x"}, User)

    assert len(excinfo.value.messages) == 2
    assert "; " in str(excinfo.value)
    assert str(excinfo.value).startswith("Schema validation failed: ")


def test_transformer_missing_schema(tmp_path):
    with pytest.raises(SchemaNotFound):
        SchemaTransformer(tmp_path / "nope.json").transform({}, User)
