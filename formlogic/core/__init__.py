"""규칙 평가 및 의존성 그래프 핵심 로직"""

from .exceptions import LogicError, EvaluationDepthError, DependencyCycleError
from .logic import Operator, is_logic, is_common_primitive
from .evaluator import evaluate
from .dependency import (
    Direction,
    DependencyGraph,
    scan_dependency,
    collect_dependencies,
    make_dependency_graph,
)
from .paths import get_value_by_path, set_value_by_path, get_rule_by_path, merge_edge
from .config import EngineSettings
from .rule_loader import load_rules
from .rule_engine import RuleEngine, create_rule_engine
from .registry import RuleSetRegistry, get_default_registry, reset_default_registry

__all__ = [
    'LogicError',
    'EvaluationDepthError',
    'DependencyCycleError',
    'Operator',
    'is_logic',
    'is_common_primitive',
    'evaluate',
    'Direction',
    'DependencyGraph',
    'scan_dependency',
    'collect_dependencies',
    'make_dependency_graph',
    'get_value_by_path',
    'set_value_by_path',
    'get_rule_by_path',
    'merge_edge',
    'EngineSettings',
    'load_rules',
    'RuleEngine',
    'create_rule_engine',
    'RuleSetRegistry',
    'get_default_registry',
    'reset_default_registry',
]
