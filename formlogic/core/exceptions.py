"""규칙 평가 및 의존성 탐색 예외"""

from typing import Sequence, Tuple


class LogicError(ValueError):
    """잘못된 Logic 표현식

    알 수 없는 연산자이거나 필요한 피연산자가 없는 경우 발생합니다.
    평가 중 발생하는 유일한 치명적 오류입니다.
    """


class EvaluationDepthError(LogicError):
    """표현식 중첩 깊이가 허용 한도를 넘은 경우"""

    def __init__(self, max_depth: int):
        self.max_depth = max_depth
        super().__init__(f"표현식 중첩 깊이가 한도({max_depth})를 초과했습니다")


class DependencyCycleError(RuntimeError):
    """의존성 그래프에서 순환이 발견된 경우

    Attributes:
        cycle: 순환을 이루는 경로 목록 (시작 경로가 마지막에 다시 나타남)
    """

    def __init__(self, cycle: Sequence[str]):
        self.cycle: Tuple[str, ...] = tuple(cycle)
        super().__init__(f"의존성 순환이 감지되었습니다: {' -> '.join(self.cycle)}")
