import json
import logging

import pytest

from ecs_run_task.exceptions import TaskDefinitionFileError
from ecs_run_task.task_definition import (
    IGNORED_TASK_DEFINITION_ATTRIBUTES,
    Array,
    Bool,
    Null,
    Number,
    Object,
    String,
    clean_empty_values,
    is_empty_value,
    load_task_definition,
    normalize,
    to_node,
)


class TestNodes:
    def test_to_node(self):
        node = to_node({"a": [1, True, None, "x"], "b": {"c": 1.5}})
        assert node == Object(
            (
                ("a", Array((Number(1), Bool(True), Null(), String("x")))),
                ("b", Object((("c", Number(1.5)),))),
            )
        )

    def test_to_node_rejects_unknown_types(self):
        with pytest.raises(TypeError):
            to_node({"a": object()})

    def test_round_trip(self):
        document = {"a": [1, {"b": False}], "c": "d"}
        assert to_node(document).to_python() == document

    @pytest.mark.parametrize(
        "value",
        [None, "", [], {}, [None, ""], {"a": None}, {"a": {"b": [{}]}}, [[], {"x": ""}]],
    )
    def test_empty_values(self, value):
        assert is_empty_value(value)

    @pytest.mark.parametrize(
        "value", [0, False, 0.0, "0", [0], {"a": False}, {"a": {"b": [None, "x"]}}]
    )
    def test_non_empty_values(self, value):
        assert not is_empty_value(value)


class TestCleanEmptyValues:
    def test_removes_nested_empty_values(self):
        document = {
            "family": "x",
            "cpu": "",
            "volumes": [],
            "placementConstraints": [{}],
            "containerDefinitions": [
                {
                    "name": "c",
                    "environment": [{"name": "A", "value": "1"}, {"name": None}],
                    "portMappings": [None, {"containerPort": 80, "hostPort": None}],
                    "logConfiguration": {"options": {}},
                }
            ],
        }
        assert clean_empty_values(document) == {
            "family": "x",
            "containerDefinitions": [
                {
                    "name": "c",
                    "environment": [{"name": "A", "value": "1"}],
                    "portMappings": [{"containerPort": 80}],
                }
            ],
        }

    def test_keeps_zero_and_false(self):
        document = {"essential": False, "cpu": 0, "memory": 0.0}
        assert clean_empty_values(document) == document

    def test_preserves_array_order(self):
        assert clean_empty_values({"a": ["3", "", "1", None, "2"]}) == {"a": ["3", "1", "2"]}

    def test_entirely_empty_document(self):
        assert clean_empty_values({"a": None, "b": [{}]}) == {}

    def test_does_not_modify_input(self):
        document = {"a": "", "b": 1}
        clean_empty_values(document)
        assert document == {"a": "", "b": 1}


class TestNormalize:
    def test_normalize_describe_output(self):
        document = {
            "family": "x",
            "revision": 5,
            "containerDefinitions": [{"name": "c", "cpu": 0, "environment": []}],
        }
        assert normalize(document) == {
            "family": "x",
            "containerDefinitions": [{"name": "c", "cpu": 0}],
        }

    def test_warns_for_each_ignored_attribute(self, caplog):
        document = {
            "family": "x",
            "compatibilities": ["EC2", "FARGATE"],
            "taskDefinitionArn": "arn:aws:ecs:us-east-1:000000000000:task-definition/x:1",
            "requiresAttributes": [{"name": "com.amazonaws.ecs.capability.docker-remote-api.1.18"}],
            "revision": 1,
            "status": "ACTIVE",
            "registeredBy": "arn:aws:iam::000000000000:root",
            "registeredAt": "2023-01-01T00:00:00.000Z",
        }
        with caplog.at_level(logging.WARNING):
            result = normalize(document)

        assert result == {"family": "x"}
        warnings = [record.getMessage() for record in caplog.records]
        assert len(warnings) == len(IGNORED_TASK_DEFINITION_ATTRIBUTES)
        for attribute in IGNORED_TASK_DEFINITION_ATTRIBUTES:
            assert any(f"'{attribute}'" in message for message in warnings)

    def test_no_warning_for_empty_ignored_attribute(self, caplog):
        with caplog.at_level(logging.WARNING):
            result = normalize({"family": "x", "status": "", "compatibilities": []})
        assert result == {"family": "x"}
        assert not caplog.records

    def test_ignored_attributes_are_only_removed_at_top_level(self):
        document = {"family": "x", "containerDefinitions": [{"name": "c", "status": "kept"}]}
        assert normalize(document) == document

    @pytest.mark.parametrize(
        "document",
        [
            {"family": "x", "revision": 5, "containerDefinitions": [{"name": "c", "cpu": 0}]},
            {"a": [None, {"b": ""}, {"c": [0, False, ""]}], "status": "ACTIVE"},
            {"a": None},
        ],
    )
    def test_normalize_is_idempotent(self, document):
        normalized = normalize(document)
        assert normalize(normalized) == normalized


class TestLoadTaskDefinition:
    def test_load_yaml(self, tmp_path):
        (tmp_path / "task-definition.yaml").write_text(
            "family: x\ncontainerDefinitions:\n  - name: c\n    image: busybox\n    cpu: 0\n"
        )
        document = load_task_definition("task-definition.yaml", workspace=str(tmp_path))
        assert document == {
            "family": "x",
            "containerDefinitions": [{"name": "c", "image": "busybox", "cpu": 0}],
        }

    def test_load_json_with_absolute_path(self, tmp_path):
        path = tmp_path / "task-definition.json"
        path.write_text(json.dumps({"family": "x", "revision": 3}))
        assert load_task_definition(str(path), workspace="/does/not/matter") == {
            "family": "x",
            "revision": 3,
        }

    def test_relative_path_uses_github_workspace(self, tmp_path, monkeypatch):
        from ecs_run_task import config

        (tmp_path / "td.json").write_text('{"family": "y"}')
        monkeypatch.setattr(config, "GITHUB_WORKSPACE", str(tmp_path))
        assert load_task_definition("td.json") == {"family": "y"}

    def test_missing_file(self, tmp_path):
        with pytest.raises(TaskDefinitionFileError) as exc:
            load_task_definition("missing.json", workspace=str(tmp_path))
        assert "missing.json" in exc.value.message

    def test_invalid_yaml(self, tmp_path):
        (tmp_path / "td.yaml").write_text("family: [x\n")
        with pytest.raises(TaskDefinitionFileError):
            load_task_definition("td.yaml", workspace=str(tmp_path))

    def test_document_must_be_a_mapping(self, tmp_path):
        (tmp_path / "td.yaml").write_text("- family\n")
        with pytest.raises(TaskDefinitionFileError) as exc:
            load_task_definition("td.yaml", workspace=str(tmp_path))
        exc.match("does not contain a task definition object")

    def test_file_that_is_not_utf8(self, tmp_path):
        (tmp_path / "td.yaml").write_bytes(b"family: \xff\xfe\n")
        with pytest.raises(TaskDefinitionFileError) as exc:
            load_task_definition("td.yaml", workspace=str(tmp_path))
        assert str(tmp_path / "td.yaml") in exc.value.message

    @pytest.mark.parametrize(
        "content",
        [
            "family: x\nblob: !!binary aGVsbG8=\n",
            "family: x\nnames: !!set {a: null, b: null}\n",
        ],
    )
    def test_values_without_json_counterpart(self, tmp_path, content):
        (tmp_path / "td.yaml").write_text(content)
        with pytest.raises(TaskDefinitionFileError) as exc:
            load_task_definition("td.yaml", workspace=str(tmp_path))
        exc.match("Unsupported value of type")
