import pytest

from kubectl_wider.columns import (
    NONE_CELL,
    ColumnSpec,
    PathSegment,
    build_rows,
    parse_column_spec,
    parse_columns,
    resolve,
    split_path,
)
from kubectl_wider.errors import ColumnSpecError
from kubectl_wider.snapshot import CompositeRecord


def _tokens(path):
    return [seg.token for seg in split_path(path)]


class TestSplitPath:
    def test_escaped_dot_stays_in_one_segment(self):
        spec = parse_column_spec("NAME:.node.metadata.labels.kubernetes\\.io/os")

        assert spec.name == "NAME"
        assert [s.token for s in spec.path] == [
            "node",
            "metadata",
            "labels",
            "kubernetes.io/os",
        ]
        assert spec.path[-1].escaped is True
        assert not any(s.escaped for s in spec.path[:-1])

    def test_several_escapes_in_one_segment(self):
        assert _tokens(".node.metadata.labels.node\\.kubernetes\\.io/instance-type") == [
            "node",
            "metadata",
            "labels",
            "node.kubernetes.io/instance-type",
        ]

    def test_leading_dot_optional(self):
        assert _tokens("pod.metadata.name") == _tokens(".pod.metadata.name")

    def test_braces_stripped(self):
        assert _tokens("{.pod.metadata.name}") == ["pod", "metadata", "name"]

    def test_backslash_not_before_dot_is_literal(self):
        assert _tokens(".pod.metadata.annotations.a\\b") == [
            "pod",
            "metadata",
            "annotations",
            "a\\b",
        ]

    def test_index_suffix(self):
        segs = split_path(".pvcs[1].metadata.name")
        assert segs[0] == PathSegment(token="pvcs", index=1)

    def test_wildcard_suffix(self):
        segs = split_path(".pod.spec.containers[*].image")
        assert segs[2] == PathSegment(token="containers", index="*")

    @pytest.mark.parametrize("path", ["", ".", "pod..name", ".pod.", "{}"])
    def test_empty_segments_rejected(self, path):
        with pytest.raises(ColumnSpecError):
            split_path(path)

    def test_bad_index_rejected(self):
        with pytest.raises(ColumnSpecError):
            split_path(".pvcs[first].metadata")


class TestParseColumns:
    def test_split_at_first_colon_only(self):
        spec = parse_column_spec("PORT:.pod.metadata.annotations.a:b")
        assert spec.name == "PORT"
        assert spec.path[-1].token == "a:b"

    def test_columns_keep_order(self):
        cols = parse_columns("NAME:.pod.metadata.name,NODE:.node.metadata.name")
        assert [c.name for c in cols] == ["NAME", "NODE"]

    @pytest.mark.parametrize("spec", ["NAME", ":.pod.metadata.name", "NAME:"])
    def test_malformed_entry(self, spec):
        with pytest.raises(ColumnSpecError):
            parse_column_spec(spec)

    def test_empty_list(self):
        with pytest.raises(ColumnSpecError):
            parse_columns("")

    def test_column_spec_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_columns("NAME")


@pytest.fixture
def record(pods, nodes, service_accounts, pvcs):
    return CompositeRecord(
        pod=pods[0],
        node=nodes[0],
        service_account=service_accounts[0],
        pvcs=tuple(pvcs),
    )


def _resolve(record, path):
    return resolve(record, split_path(path))


class TestResolve:
    def test_plain_field(self, record):
        assert _resolve(record, ".pod.metadata.name") == "web-1"

    def test_label_with_dots(self, record):
        assert _resolve(record, ".node.metadata.labels.kubernetes\\.io/os") == "linux"

    def test_unescaped_label_key_misses(self, record):
        # without the escape the key is split into kubernetes / io/os
        assert _resolve(record, ".node.metadata.labels.kubernetes.io/os") == NONE_CELL

    def test_aliases(self, record):
        assert _resolve(record, ".sa.metadata.name") == "web"
        assert _resolve(record, ".serviceAccount.metadata.name") == "web"
        assert _resolve(record, ".pvc[0].metadata.name") == "web-data"

    def test_index_and_wildcard(self, record):
        assert _resolve(record, ".pvcs[1].metadata.name") == "web-logs"
        assert _resolve(record, ".pvcs[-1].metadata.name") == "web-logs"
        assert _resolve(record, ".pvcs[*].metadata.name") == "web-data,web-logs"
        assert _resolve(record, ".pvcs[5].metadata.name") == NONE_CELL

    def test_non_string_values(self, record):
        assert _resolve(record, ".pvcs[0].status.capacity") == '{"storage":"10Gi"}'

    def test_missing_node(self, pods):
        unscheduled = CompositeRecord(pod=pods[2])
        assert _resolve(unscheduled, ".node.metadata.name") == NONE_CELL
        assert _resolve(unscheduled, ".sa.metadata.name") == NONE_CELL
        assert _resolve(unscheduled, ".pvcs[*].metadata.name") == NONE_CELL

    def test_unknown_root(self, record):
        assert _resolve(record, ".metadata.name") == NONE_CELL

    def test_scalar_traversal(self, record):
        assert _resolve(record, ".pod.metadata.name.first") == NONE_CELL

    def test_resolution_does_not_mutate(self, record, pods):
        before = repr(record.to_dict())
        _resolve(record, ".node.metadata.labels.missing\\.key")
        _resolve(record, ".pvcs[*].spec.storageClassName")
        assert repr(record.to_dict()) == before

    def test_build_rows(self, record, pods):
        cols = [
            ColumnSpec("NAME", split_path(".pod.metadata.name")),
            ColumnSpec("NODE", split_path(".node.metadata.name")),
        ]
        rows = build_rows([record, CompositeRecord(pod=pods[2])], cols)
        assert rows == [["web-1", "node-a"], ["pending-1", NONE_CELL]]
