"""경로 접근 유틸리티 테스트"""

import pytest

from formlogic.core import get_rule_by_path, get_value_by_path, merge_edge, set_value_by_path
from formlogic.core.paths import split_path


class TestSplitPath:
    """경로 분해 테스트"""

    def test_string_path(self):
        assert split_path("a.b.c") == ("a", "b", "c")

    def test_sequence_path(self):
        assert split_path(["a", 1]) == ("a", "1")


class TestGetValueByPath:
    """경로 조회 테스트"""

    def test_nested_value(self):
        assert get_value_by_path({"a": {"b": 1}}, "a.b") == 1

    def test_missing_strict(self):
        assert get_value_by_path({"a": {"b": 1}}, "a.c") is None

    def test_missing_non_strict_returns_current(self):
        """non-strict 모드는 마지막으로 찾은 값을 반환"""
        data = {"a": {"b": 1}}
        assert get_value_by_path(data, "a.c", strict=False) == {"b": 1}

    def test_path_below_primitive(self):
        assert get_value_by_path({"a": 1}, "a.b") is None

    def test_wildcard_fan_out(self):
        data = {"x": {"v": 1}, "y": {"v": 2}, "z": {"w": 3}}
        assert get_value_by_path(data, "*.v") == [1, 2]

    def test_trailing_wildcard_reaches_leaves(self):
        """마지막 와일드카드는 말단 값까지 내려감"""
        data = {"a": {"b": 1, "c": {"d": 2}}, "e": 3}
        assert get_value_by_path(data, "*") == [1, 2, 3]

    def test_wildcard_flattens_edge_lists(self):
        graph = {"group": {"f1": ["x.f1"], "f2": ["y.f2", "z.f2"]}}
        assert get_value_by_path(graph, "group.*") == ["x.f1", "y.f2", "z.f2"]

    def test_list_index(self):
        assert get_value_by_path({"a": [10, 20]}, "a.1") == 20


class TestSetValueByPath:
    """경로 설정 테스트"""

    def test_creates_intermediate_levels(self):
        data = {}
        result = set_value_by_path(data, "a.b.c", 1)
        assert result is data
        assert data == {"a": {"b": {"c": 1}}}

    def test_keeps_siblings(self):
        data = {"a": {"x": 1}}
        set_value_by_path(data, "a.y", 2)
        assert data == {"a": {"x": 1, "y": 2}}

    def test_none_path_returns_data(self):
        data = {"a": 1}
        assert set_value_by_path(data, None, 2) is data

    def test_empty_segments_return_value(self):
        assert set_value_by_path({"a": 1}, [], 2) == 2

    def test_cannot_descend_into_list(self):
        with pytest.raises(ValueError, match="경로를 만들 수 없습니다"):
            set_value_by_path({"a": ["x"]}, "a.b", 1)


class TestGetRuleByPath:
    """규칙 조회 테스트"""

    RULES = {
        "order": {
            "total": {"+": [{"var": "price"}, 1]},
            "tags": ["a", "b"],
            "empty": {},
        },
        "flag": True,
    }

    def test_exact_path(self):
        assert get_rule_by_path(self.RULES, "order.total") == {"+": [{"var": "price"}, 1]}

    def test_longer_path_resolves_to_prefix_rule(self):
        """규칙보다 긴 경로는 도중의 표현식으로 해석"""
        assert get_rule_by_path(self.RULES, "order.total.extra") == {"+": [{"var": "price"}, 1]}

    def test_primitive_and_primitive_list(self):
        assert get_rule_by_path(self.RULES, "flag") is True
        assert get_rule_by_path(self.RULES, "order.tags") == ["a", "b"]

    def test_group_is_not_a_rule(self):
        assert get_rule_by_path(self.RULES, "order") is None

    def test_empty_object_short_circuits(self):
        assert get_rule_by_path(self.RULES, "order.empty.x") is None

    def test_missing_segment_is_skipped(self):
        assert get_rule_by_path(self.RULES, "unknown.order.total") == {"+": [{"var": "price"}, 1]}
        assert get_rule_by_path(self.RULES, "unknown") is None


class TestMergeEdge:
    """간선 병합 테스트"""

    def test_new_edge(self):
        assert merge_edge(None, "a") == ["a"]

    def test_append_to_list(self):
        existing = ["a"]
        merged = merge_edge(existing, "b")
        assert merged == ["a", "b"]
        assert existing == ["a"]

    def test_mapping_keeps_shape(self):
        """규칙 묶음 간선은 하위 키마다 경로를 덧붙여 병합"""
        existing = {"f1": ["x.f1"], "f2": {"g": []}}
        assert merge_edge(existing, "dep") == {
            "f1": ["x.f1", "dep.f1"],
            "f2": {"g": ["dep.f2.g"]},
        }
