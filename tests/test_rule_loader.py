"""규칙 파일 로더 및 규칙 묶음 레지스트리 테스트"""

import logging

import pytest
import yaml

from formlogic.core import (
    EngineSettings,
    RuleSetRegistry,
    get_default_registry,
    load_rules,
    reset_default_registry,
)


YAML_RULES = """
order:
  subtotal:
    "*": [{var: price}, {var: qty}]
  total:
    "+": [{var: order.subtotal}, {var: shipping}]
"""


@pytest.fixture
def rules_dir(tmp_path):
    (tmp_path / "order.yaml").write_text(YAML_RULES, encoding="utf-8")
    (tmp_path / "flags.json").write_text('{"adult": {">": [{"var": "age"}, 18]}}', encoding="utf-8")
    (tmp_path / "notes.txt").write_text("무시되는 파일", encoding="utf-8")
    return tmp_path


class TestLoadRules:
    """규칙 파일 로드 테스트"""

    def test_load_yaml(self, rules_dir):
        rules = load_rules(rules_dir / "order.yaml")
        assert rules["order"]["subtotal"] == {"*": [{"var": "price"}, {"var": "qty"}]}

    def test_load_json(self, rules_dir):
        rules = load_rules(str(rules_dir / "flags.json"))
        assert rules == {"adult": {">": [{"var": "age"}, 18]}}

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="규칙 파일을 찾을 수 없습니다"):
            load_rules(tmp_path / "none.yaml")

    def test_unsupported_suffix(self, rules_dir):
        with pytest.raises(ValueError, match="지원하지 않는 규칙 파일 형식"):
            load_rules(rules_dir / "notes.txt")

    def test_top_level_must_be_mapping(self, tmp_path):
        rules_file = tmp_path / "list.yml"
        rules_file.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ValueError, match="최상위는 딕셔너리"):
            load_rules(rules_file)

    def test_invalid_yaml(self, tmp_path):
        rules_file = tmp_path / "broken.yaml"
        rules_file.write_text("a: [1, 2\n", encoding="utf-8")
        with pytest.raises(yaml.YAMLError):
            load_rules(rules_file)


class TestRuleSetRegistry:
    """규칙 묶음 레지스트리 테스트"""

    def test_register_and_get(self):
        registry = RuleSetRegistry()
        engine = registry.register("chain", {"a": {"var": "b"}})

        assert registry.get("chain") is engine
        assert "chain" in registry
        assert len(registry) == 1
        assert registry.get("unknown") is None

    def test_duplicate_name(self):
        registry = RuleSetRegistry()
        registry.register("chain", {"a": {"var": "b"}})

        with pytest.raises(ValueError, match="이미 등록되어 있습니다"):
            registry.register("chain", {})

        replaced = registry.register("chain", {"x": {"var": "y"}}, replace=True)
        assert registry.get("chain") is replaced

    def test_remove(self):
        registry = RuleSetRegistry()
        registry.register("chain", {})
        assert registry.remove("chain") is True
        assert registry.remove("chain") is False

    def test_load_dir(self, rules_dir):
        registry = RuleSetRegistry(rules_dir=rules_dir)

        assert registry.list_names() == ["flags", "order"]
        assert registry.get("flags").run("adult", {"age": 20}) is True
        assert registry.get("order").run("order.subtotal", {"price": 3, "qty": 2}) == 6

    def test_load_dir_skips_broken_files(self, rules_dir, caplog):
        (rules_dir / "broken.json").write_text("{", encoding="utf-8")

        with caplog.at_level(logging.WARNING, logger="formlogic.core.registry"):
            registry = RuleSetRegistry(rules_dir=rules_dir)

        assert registry.list_names() == ["flags", "order"]
        assert "broken.json" in caplog.text

    def test_settings_are_shared(self):
        registry = RuleSetRegistry(settings=EngineSettings(max_depth=3))
        engine = registry.register("chain", {})
        assert engine.settings.max_depth == 3


class TestDefaultRegistry:
    """기본 레지스트리 테스트"""

    def test_singleton(self, monkeypatch):
        monkeypatch.setenv("FORMLOGIC_MAX_DEPTH", "42")
        reset_default_registry()
        try:
            registry = get_default_registry()
            assert get_default_registry() is registry
            assert registry.settings.max_depth == 42
        finally:
            reset_default_registry()
