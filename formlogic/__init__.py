"""formlogic: 선언형 규칙 평가기와 의존성 그래프"""

from .core import (
    RuleEngine,
    create_rule_engine,
    evaluate,
    collect_dependencies,
    is_logic,
)

__version__ = "0.1.0"

__all__ = [
    'RuleEngine',
    'create_rule_engine',
    'evaluate',
    'collect_dependencies',
    'is_logic',
]
