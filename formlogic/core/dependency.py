"""Dependency: 규칙 간 의존성 탐색 및 의존성 그래프

의존성은 Logic 표현식 안의 `{"var": "경로"}` 피연산자입니다.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Mapping, Tuple

from .exceptions import LogicError
from .logic import LOOP_VARIABLE, Operator, get_operand, get_operator, is_logic
from .paths import (
    PathLike,
    get_value_by_path,
    join_path,
    merge_edge,
    split_path,
)

logger = logging.getLogger(__name__)

# 규칙 묶음 경로 자신에게 달린 간선을 하위 간선 맵 안에 보관하는 키
OWN_EDGES = ""


class Direction(str, Enum):
    """의존성 그래프 방향"""

    FORWARD = "forward"  # 필드 -> 필드가 읽는 경로
    BACKWARD = "backward"  # 경로 -> 그 경로를 읽는 필드
    UNDIRECTED = "undirected"  # forward와 backward의 병합


def scan_dependency(logic: Any, on_dep_found: Callable[[str], None]) -> None:
    """표현식 트리를 순회하며 발견한 var 경로마다 콜백 호출

    Args:
        logic: 표현식, 표현식 리스트 또는 리터럴
        on_dep_found: var 경로를 받는 콜백

    Raises:
        LogicError: 피연산자가 없는 var 표현식
    """
    if isinstance(logic, (list, tuple)):
        for item in logic:
            scan_dependency(item, on_dep_found)
        return

    if not is_logic(logic):
        return

    operands = get_operand(logic)

    if get_operator(logic) is Operator.VAR:
        if not operands:
            raise LogicError("var 연산자에 피연산자가 없습니다")
        if isinstance(operands[0], str):
            on_dep_found(operands[0])
        else:
            # 경로 자체를 계산하는 var
            scan_dependency(operands[0], on_dep_found)
    else:
        for operand in operands:
            scan_dependency(operand, on_dep_found)


def collect_dependencies(logic: Any) -> List[str]:
    """표현식이 읽는 경로 목록 (중복 제거, 처음 발견한 순서)

    루프 변수 `$` 자체는 제외되지만 `$.value`처럼 루프 변수 아래 경로는
    그대로 포함됩니다.
    """
    found: Dict[str, None] = {}
    scan_dependency(logic, lambda dep: found.setdefault(dep, None))
    found.pop(LOOP_VARIABLE, None)
    return list(found)


def iter_edge_sets(edges: Any, prefix: Tuple[str, ...] = ()) -> Iterator[Tuple[str, List[str]]]:
    """중첩된 간선 맵을 (경로, 간선 리스트) 쌍으로 펼침"""
    if isinstance(edges, list):
        yield join_path(prefix), edges
    elif isinstance(edges, Mapping):
        for key, value in edges.items():
            if key == OWN_EDGES:
                yield join_path(prefix), value
            else:
                yield from iter_edge_sets(value, prefix + (key,))


def _add_edge(edges: Dict[str, Any], path: Tuple[str, ...], edge: str) -> None:
    """간선 맵의 path 위치에 edge 추가

    도중에 간선 리스트를 만나면 그 리스트를 OWN_EDGES 키로 옮긴 딕셔너리로 바꿔
    하위 경로의 간선 집합과 나란히 보관합니다. path 위치가 이미 하위 간선 맵이면
    edge는 그 맵의 OWN_EDGES 리스트에 들어갑니다.
    """
    node = edges
    for segment in path[:-1]:
        child = node.get(segment)
        if isinstance(child, list):
            child = node[segment] = {OWN_EDGES: child}
        elif not isinstance(child, dict):
            child = node[segment] = {}
        node = child

    leaf = path[-1]
    current = node.get(leaf)
    if isinstance(current, dict):
        current[OWN_EDGES] = merge_edge(current.get(OWN_EDGES), edge)
    else:
        node[leaf] = merge_edge(current, edge)


@dataclass(frozen=True)
class DependencyGraph:
    """규칙 트리에서 만든 의존성 그래프

    세 그래프 모두 규칙 트리와 같은 모양의 중첩 딕셔너리이며,
    값은 경로 문자열 리스트 또는 하위 필드별 간선 맵입니다.
    경로 자신의 간선과 하위 경로의 간선이 함께 있으면 자신의 간선은
    하위 간선 맵의 OWN_EDGES(빈 문자열) 키에 들어갑니다.

    Attributes:
        forward: 필드 경로 -> 필드가 읽는 경로들
        backward: 경로 -> 그 경로를 읽는 필드들
        undirected: forward와 backward의 얕은 병합 (backward 우선)
    """

    forward: Dict[str, Any] = field(default_factory=dict)
    backward: Dict[str, Any] = field(default_factory=dict)
    undirected: Dict[str, Any] = field(default_factory=dict)

    def view(self, direction: Direction = Direction.UNDIRECTED) -> Dict[str, Any]:
        """방향에 해당하는 그래프 반환"""
        return getattr(self, Direction(direction).value)

    def edges(self, path: PathLike, direction: Direction = Direction.UNDIRECTED) -> List[str]:
        """경로의 직접 간선 목록

        경로가 규칙 묶음을 가리키면 하위 필드의 간선을 깊이 우선으로 모두 모읍니다.

        Args:
            path: 조회할 경로
            direction: 그래프 방향

        Returns:
            간선 경로 리스트 (없으면 빈 리스트)
        """
        found = get_value_by_path(self.view(direction), path, True)
        if found is None:
            return []
        if isinstance(found, Mapping):
            return [edge for _, edge_set in iter_edge_sets(found) for edge in edge_set]
        return list(found)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'forward': self.forward,
            'backward': self.backward,
            'undirected': self.undirected,
        }


def make_dependency_graph(rules: Any) -> DependencyGraph:
    """규칙 트리 전체를 한 번 순회하여 의존성 그래프 생성

    규칙 경로의 첫 세그먼트를 의존성 경로로 바꿔 의존성 경로를 만듭니다.
    예를 들어 "income.total"이 "tax"를 읽으면 의존성 경로는 "tax.total"이 됩니다.

    Args:
        rules: 규칙 트리

    Returns:
        DependencyGraph
    """
    forward: Dict[str, Any] = {}
    backward: Dict[str, Any] = {}

    def visit(rule: Any, path: Tuple[str, ...]) -> None:
        if is_logic(rule):
            for dep in collect_dependencies(rule):
                dep_path = split_path(dep) + path[1:] if path else ("",)
                own_path = path or ("",)
                _add_edge(forward, own_path, join_path(dep_path))
                _add_edge(backward, dep_path, join_path(own_path))
        elif isinstance(rule, Mapping):
            for key, value in rule.items():
                visit(value, path + (str(key),))
        elif isinstance(rule, (list, tuple)):
            for index, value in enumerate(rule):
                visit(value, path + (str(index),))

    visit(rules, ())

    graph = DependencyGraph(
        forward=forward,
        backward=backward,
        undirected={**forward, **backward},
    )
    logger.debug(
        "의존성 그래프 생성: forward %d개, backward %d개",
        sum(len(edges) for _, edges in iter_edge_sets(forward)),
        sum(len(edges) for _, edges in iter_edge_sets(backward)),
    )
    return graph
