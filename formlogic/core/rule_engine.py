"""RuleEngine: 규칙 트리 실행 및 의존 규칙 재평가"""

import logging
import threading
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

from .config import EngineSettings
from .dependency import DependencyGraph, Direction, make_dependency_graph
from .evaluator import evaluate
from .exceptions import DependencyCycleError
from .logic import is_logic
from .paths import get_rule_by_path
from .rule_loader import load_rules

logger = logging.getLogger(__name__)


class RuleEngine:
    """규칙 트리를 실행하고 의존 관계를 따라 재평가하는 엔진

    규칙 트리와 의존성 그래프는 생성 시 한 번 만들어지고 이후 바뀌지 않습니다.
    저장된 사실관계 스냅샷만 바뀔 수 있으며, 잠금으로 보호됩니다.
    각 호출은 스냅샷을 한 번만 읽으므로 평가 도중 use_facts가 호출되어도
    진행 중인 평가에는 영향을 주지 않습니다.

    Attributes:
        rules: 규칙 트리
        dependency_graph: 규칙 트리에서 만든 의존성 그래프
        settings: 엔진 설정

    Example:
        >>> engine = RuleEngine({"total": {"+": [{"var": "price"}, {"var": "fee"}]}})
        >>> engine.use_facts({"price": 100, "fee": 5}).run("total")
        105
    """

    def __init__(self, rules: Mapping[str, Any], settings: Optional[EngineSettings] = None):
        """RuleEngine 초기화

        Args:
            rules: 규칙 트리
            settings: 엔진 설정 (기본값: EngineSettings())
        """
        self.rules = rules
        self.settings = settings or EngineSettings()
        self.dependency_graph: DependencyGraph = make_dependency_graph(rules)
        self._facts: Optional[Mapping[str, Any]] = None
        self._lock = threading.Lock()

    @classmethod
    def from_file(
        cls,
        rules_file: Union[str, Path],
        settings: Optional[EngineSettings] = None
    ) -> "RuleEngine":
        """규칙 파일(YAML/JSON)에서 엔진 생성"""
        return cls(load_rules(rules_file), settings=settings)

    @property
    def facts(self) -> Optional[Mapping[str, Any]]:
        """현재 저장된 사실관계 스냅샷"""
        with self._lock:
            return self._facts

    def use_facts(self, facts: Mapping[str, Any]) -> "RuleEngine":
        """사실관계 스냅샷 교체

        Returns:
            self (메서드 체이닝용)
        """
        with self._lock:
            self._facts = facts
        return self

    def get_dependencies(
        self,
        path: str,
        direction: Optional[Direction] = None
    ) -> List[str]:
        """경로의 직접 의존 경로 목록"""
        return self.dependency_graph.edges(path, direction or self.settings.default_direction)

    def run(self, path: str, facts: Optional[Mapping[str, Any]] = None) -> Any:
        """경로의 규칙을 실행

        Args:
            path: 규칙 경로
            facts: 이번 호출에만 사용할 사실관계 (없으면 저장된 스냅샷)

        Returns:
            평가 결과

        Raises:
            LogicError: 규칙이 잘못된 표현식인 경우
        """
        rule = get_rule_by_path(self.rules, path)
        resolved_facts = facts if facts is not None else self.facts

        if resolved_facts is None:
            logger.warning(
                "사실관계가 없습니다. use_facts를 호출하거나 facts 인자를 전달하세요 (path=%s)",
                path
            )
            resolved_facts = {}

        return evaluate(rule, resolved_facts, max_depth=self.settings.max_depth)

    def run_several(self, entries: Sequence[Sequence[Any]]) -> List[Any]:
        """여러 규칙을 순서대로 실행

        Args:
            entries: [경로] 또는 [경로, 사실관계] 항목의 리스트

        Returns:
            각 항목의 평가 결과 리스트 (잘못된 인자이면 빈 리스트)
        """
        if not isinstance(entries, (list, tuple)):
            logger.error("run_several는 리스트만 인자로 받습니다: %s", type(entries).__name__)
            return []

        snapshot = self.facts
        results = []
        for entry in entries:
            path = entry[0]
            local_facts = entry[1] if len(entry) > 1 and entry[1] is not None else snapshot
            results.append(self.run(path, local_facts or {}))
        return results

    def propagate(self, path: str, direction: Optional[Direction] = None) -> List[str]:
        """경로에서 도달 가능한 모든 의존 경로 (전이 폐포)

        직접 의존 경로를 먼저 나열한 뒤 각 경로의 폐포를 차례로 이어 붙입니다.
        중복은 제거하지 않으므로 여러 경로로 도달하는 경로는 여러 번 나타납니다.

        forward/backward 그래프에서 현재 탐색 중인 경로로 되돌아오면 순환으로 보고
        DependencyCycleError를 발생시킵니다. undirected 그래프는 모든 간선이
        양방향으로 존재하므로 현재 탐색 중인 경로는 건너뜁니다.

        Args:
            path: 시작 경로
            direction: 그래프 방향 (기본값: settings.default_direction)

        Returns:
            의존 경로 리스트

        Raises:
            DependencyCycleError: forward/backward 그래프에 순환이 있는 경우
        """
        direction = Direction(direction or self.settings.default_direction)
        return self._flatten_dependencies(path, (path,), direction)

    def _flatten_dependencies(
        self,
        path: str,
        chain: Tuple[str, ...],
        direction: Direction
    ) -> List[str]:
        dependencies = self.get_dependencies(path, direction)

        if direction is Direction.UNDIRECTED:
            dependencies = [dep for dep in dependencies if dep not in chain]
        else:
            for dep in dependencies:
                if dep in chain:
                    raise DependencyCycleError(chain[chain.index(dep):] + (dep,))

        result = list(dependencies)
        for dep in dependencies:
            result.extend(self._flatten_dependencies(dep, chain + (dep,), direction))
        return result

    def drill(
        self,
        path: str,
        facts: Optional[Mapping[str, Any]] = None,
        direction: Optional[Direction] = None
    ) -> List[Any]:
        """경로의 규칙과 그 규칙에 의존하는 모든 규칙을 실행

        결과 순서는 [path, *propagate(path)]와 같습니다.
        앞선 결과를 사실관계에 반영하지 않으므로 각 규칙은 같은 사실관계로 평가됩니다.
        예를 들어 a = b, b = c + 1 일 때 drill("c", {"c": 4}, "backward")의
        b 결과는 5이지만 a 결과는 None입니다. a까지 5로 보려면 facts에 b를
        함께 넘기거나 b의 결과를 반영한 facts로 다시 호출해야 합니다.

        Returns:
            평가 결과 리스트 (첫 번째가 path의 결과)
        """
        snapshot = facts if facts is not None else self.facts
        return [self.run(p, snapshot) for p in self.drill_paths(path, direction)]

    def drill_paths(self, path: str, direction: Optional[Direction] = None) -> List[str]:
        """drill이 실행하는 경로 목록"""
        return [path, *self.propagate(path, direction)]

    def list_rule_paths(self) -> List[str]:
        """규칙 트리에 있는 모든 표현식의 경로"""
        return _collect_rule_paths(self.rules)


def _collect_rule_paths(rules: Any, prefix: str = "") -> List[str]:
    if is_logic(rules):
        return [prefix]
    if isinstance(rules, Mapping):
        items = rules.items()
    elif isinstance(rules, (list, tuple)):
        items = enumerate(rules)
    else:
        return []
    paths = []
    for key, value in items:
        paths.extend(_collect_rule_paths(value, f"{prefix}.{key}" if prefix else str(key)))
    return paths


def create_rule_engine(
    rules: Mapping[str, Any],
    settings: Optional[EngineSettings] = None
) -> RuleEngine:
    """RuleEngine 생성 팩토리"""
    return RuleEngine(rules, settings=settings)
