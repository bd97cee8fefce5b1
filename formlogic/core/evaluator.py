"""Evaluator: Logic 표현식 평가기

표현식 트리와 사실관계를 받아 원시값(또는 원시값 리스트)으로 환원합니다.
"""

import math
from typing import Any, Callable, Dict, List, Mapping, Optional

from .exceptions import EvaluationDepthError, LogicError
from .logic import (
    LOOP_VARIABLE,
    PASSTHROUGH_OPERATORS,
    Operator,
    get_operand,
    get_operator,
    is_logic,
    is_truthy,
    is_undefined_or_null,
    strict_equals,
    to_number,
)

DEFAULT_MAX_DEPTH = 256


def _nth(values: List[Any], index: int) -> Any:
    return values[index] if -len(values) <= index < len(values) else None


def _add(*xn):
    return sum(xn, 0)


def _subtract(*xn):
    return to_number(_nth(list(xn), 0)) - to_number(_nth(list(xn), 1))


def _multiply(*xn):
    result = 1
    for x in xn:
        result *= x
    return result


def _divide(*xn):
    dividend, divisor = to_number(_nth(list(xn), 0)), to_number(_nth(list(xn), 1))
    if divisor == 0:
        if dividend == 0 or math.isnan(dividend):
            return math.nan
        return math.copysign(math.inf, dividend) * math.copysign(1, divisor)
    return dividend / divisor


def _chain(compare: Callable[[Any, Any], bool]) -> Callable[..., bool]:
    def check(*xn):
        for current, following in zip(xn, xn[1:]):
            if math.isnan(current) or math.isnan(following):
                return False
            if not compare(current, following):
                return False
        return True
    return check


def _extremum(pick: Callable[..., Any], empty: float) -> Callable[..., float]:
    def extremum(*xn):
        if not xn:
            return empty
        if any(math.isnan(x) for x in xn):
            return math.nan
        return pick(xn)
    return extremum


def _equal(*xn):
    left, right = _nth(list(xn), 0), _nth(list(xn), 1)
    if is_undefined_or_null(left) and is_undefined_or_null(right):
        return True
    return strict_equals(left, right)


def _not_equal(*xn):
    left, right = _nth(list(xn), 0), _nth(list(xn), 1)
    if is_undefined_or_null(left) and is_undefined_or_null(right):
        return False
    return not strict_equals(left, right)


def _or_else(*xn):
    left = _nth(list(xn), 0)
    return left if is_truthy(left) else _nth(list(xn), 1)


BASIC_OPERATIONS: Dict[Operator, Callable[..., Any]] = {
    Operator.ADD: _add,
    Operator.SUBTRACT: _subtract,
    Operator.MULTIPLY: _multiply,
    Operator.DIVIDE: _divide,
    Operator.NOT: lambda *xn: not is_truthy(_nth(list(xn), 0)),
    Operator.TO_BOOL: lambda *xn: is_truthy(_nth(list(xn), 0)),
    Operator.EQUAL: _equal,
    Operator.NOT_EQUAL: _not_equal,
    Operator.LESS: _chain(lambda a, b: a < b),
    Operator.GREATER: _chain(lambda a, b: a > b),
    Operator.OR_ELSE: _or_else,
    Operator.MAX: _extremum(max, -math.inf),
    Operator.MIN: _extremum(min, math.inf),
}


class _Evaluation:
    """단일 evaluate 호출의 상태 (깊이 예산)"""

    def __init__(self, max_depth: int):
        self.max_depth = max_depth
        self.handlers: Dict[Operator, Callable[[List[Any], Mapping[str, Any], int], Any]] = {
            Operator.IF: self._if,
            Operator.AND: self._and,
            Operator.OR: self._or,
            Operator.SOME: self._some,
            Operator.EVERY: self._every,
            Operator.VAR: self._var,
        }

    def resolve(self, logic: Any, data: Mapping[str, Any], depth: int = 0) -> Any:
        if depth > self.max_depth:
            raise EvaluationDepthError(self.max_depth)

        if isinstance(logic, (list, tuple)):
            return [self.resolve(item, data, depth + 1) for item in logic]

        if not is_logic(logic):
            return logic

        operator = get_operator(logic)
        operand = get_operand(logic)

        handler = self.handlers.get(operator)
        if handler is not None:
            return handler(operand, data, depth + 1)

        operation = BASIC_OPERATIONS.get(operator)
        if operation is None:
            raise LogicError(f"알 수 없는 연산자: {operator.value}")

        settled = [self.resolve(item, data, depth + 1) for item in operand]
        if operator in PASSTHROUGH_OPERATORS:
            return operation(*settled)
        return operation(*[to_number(value) for value in settled])

    def _if(self, operand, data, depth):
        for i in range(0, len(operand) - 1, 2):
            if is_truthy(self.resolve(operand[i], data, depth)):
                return self.resolve(operand[i + 1], data, depth)
        if not operand:
            return None
        return self.resolve(operand[-1], data, depth)

    def _and(self, operand, data, depth):
        for item in operand:
            if not is_truthy(self.resolve(item, data, depth)):
                return False
        return True

    def _or(self, operand, data, depth):
        for item in operand:
            if is_truthy(self.resolve(item, data, depth)):
                return True
        return False

    def _bind_each(self, elements, template, data, depth):
        """각 원소를 `$`에 바인딩해 template을 평가"""
        for element in elements:
            yield is_truthy(self.resolve(template, {**data, LOOP_VARIABLE: element}, depth))

    def _some(self, operand, data, depth):
        value = self.resolve(_nth(operand, 0), data, depth)
        if isinstance(value, (list, tuple)):
            return any(self._bind_each(value, _nth(operand, 1), data, depth))
        return is_truthy(value)

    def _every(self, operand, data, depth):
        value = self.resolve(_nth(operand, 0), data, depth)
        if isinstance(value, (list, tuple)):
            return all(self._bind_each(value, _nth(operand, 1), data, depth))
        return is_truthy(value)

    def _var(self, operand, data, depth):
        if not operand:
            raise LogicError("var 연산자에 피연산자가 없습니다")
        path = operand[0]
        if not isinstance(path, str):
            path = self.resolve(path, data, depth)
        value: Any = data
        for key in str(path).split("."):
            if not key:
                continue
            value = _lookup(value, key)
            # 0, "", False도 값 없음과 똑같이 탐색을 멈춤
            if not is_truthy(value):
                break
        return value


def _lookup(value: Any, key: str) -> Any:
    if isinstance(value, Mapping):
        return value.get(key)
    if isinstance(value, (list, tuple)) and key.isdigit():
        index = int(key)
        return value[index] if index < len(value) else None
    return None


def evaluate(
    logic: Any,
    facts: Optional[Mapping[str, Any]] = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Any:
    """Logic 표현식 평가

    Args:
        logic: 표현식, 표현식 리스트 또는 리터럴
        facts: 사실관계 (`var`가 조회하는 데이터)
        max_depth: 허용하는 최대 중첩 깊이

    Returns:
        평가 결과 (원시값 또는 원시값 리스트)

    Raises:
        LogicError: 알 수 없는 연산자이거나 피연산자가 없는 경우
        EvaluationDepthError: 중첩 깊이가 max_depth를 넘은 경우

    Example:
        >>> evaluate({"+": [1, {"var": "a"}]}, {"a": 2})
        3
    """
    return _Evaluation(max_depth).resolve(logic, facts if facts is not None else {})
