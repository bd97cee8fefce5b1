"""Logic: 규칙 표현식 데이터 모델

Logic 표현식은 연산자 하나를 키로 가지는 딕셔너리입니다.

    {"+": [1, {"var": "price"}]}
    {"if": [{"<": [{"var": "age"}, 19]}, "minor", "adult"]}

키가 없거나, 두 개 이상이거나, 알 수 없는 연산자인 딕셔너리는 표현식이 아니라
리터럴 값(중첩된 규칙 묶음 등)으로 취급됩니다.

규칙과 사실관계는 JSON 형태로 UI 계층과 주고받기 때문에 참/거짓 판정과
숫자 변환은 UI 계층과 같은 느슨한 변환 규칙을 따릅니다.
"""

import math
import re
from enum import Enum
from numbers import Number
from typing import Any, List, Mapping

from .exceptions import LogicError


class Operator(str, Enum):
    """지원하는 연산자 (닫힌 집합)"""

    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    GREATER = ">"
    LESS = "<"
    NOT = "!"
    TO_BOOL = "!!"
    OR_ELSE = "||"
    EQUAL = "==="
    NOT_EQUAL = "!=="
    MIN = "min"
    MAX = "max"
    SOME = "some"
    EVERY = "every"
    IF = "if"
    AND = "and"
    OR = "or"
    VAR = "var"


OPERATORS = frozenset(op.value for op in Operator)

# 피연산자를 숫자로 바꾸지 않고 그대로 넘기는 연산자
PASSTHROUGH_OPERATORS = frozenset({
    Operator.NOT,
    Operator.TO_BOOL,
    Operator.EQUAL,
    Operator.NOT_EQUAL,
})

# 루프 변수 자리표시자 (some/every 템플릿 안에서 현재 원소)
LOOP_VARIABLE = "$"

_NUMERIC_STRING = re.compile(
    r"^[+-]?(\d+\.?\d*([eE][+-]?\d+)?|\.\d+([eE][+-]?\d+)?|Infinity)$"
)


def is_common_primitive(value: Any) -> bool:
    """문자열, 숫자, 불리언, None 여부 확인"""
    return value is None or isinstance(value, (str, bool, Number))


def is_primitive(value: Any) -> bool:
    """경로 탐색 관점의 원시값 여부 확인

    딕셔너리와 리스트(튜플)를 제외한 모든 값이 원시값입니다.
    """
    return not isinstance(value, (Mapping, list, tuple))


def is_logic(value: Any) -> bool:
    """Logic 표현식 여부 확인

    Args:
        value: 검사할 값

    Returns:
        키가 정확히 하나이고 그 키가 지원하는 연산자이면 True
    """
    if not isinstance(value, Mapping) or len(value) != 1:
        return False
    key = next(iter(value))
    return isinstance(key, str) and key in OPERATORS


def get_operator(logic: Mapping[str, Any]) -> Operator:
    """표현식의 연산자 반환

    Raises:
        LogicError: 알 수 없는 연산자
    """
    key = next(iter(logic), None)
    try:
        return Operator(key)
    except ValueError:
        raise LogicError(f"알 수 없는 연산자: {key}") from None


def get_operand(logic: Mapping[str, Any]) -> List[Any]:
    """표현식의 피연산자를 리스트로 반환

    피연산자가 리스트가 아니면 원소 하나짜리 리스트로 감쌉니다.

    Raises:
        LogicError: 알 수 없는 연산자
    """
    operand = logic[get_operator(logic).value]
    if isinstance(operand, (list, tuple)):
        return list(operand)
    return [operand]


def is_truthy(value: Any) -> bool:
    """느슨한 참/거짓 판정

    None, False, 0, NaN, 빈 문자열만 거짓입니다.
    빈 리스트나 빈 딕셔너리도 참입니다.
    """
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, Number):
        return value == value and value != 0
    if isinstance(value, str):
        return value != ""
    return True


def is_undefined_or_null(value: Any) -> bool:
    return value is None


def to_number(value: Any) -> float:
    """느슨한 숫자 변환

    None(값 없음)은 NaN이 됩니다.

    Args:
        value: 변환할 값

    Returns:
        변환된 숫자 (변환할 수 없으면 NaN)
    """
    if value is None:
        return math.nan
    if isinstance(value, bool):
        return 1 if value else 0
    if isinstance(value, Number):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        if not _NUMERIC_STRING.match(text):
            return math.nan
        return float(text.replace("Infinity", "inf"))
    if isinstance(value, (list, tuple)):
        # 배열은 문자열로 바꾼 뒤 변환됨: [] -> "" -> 0, [7] -> "7" -> 7
        if not value:
            return 0
        if len(value) == 1:
            item = value[0]
            if item is None:
                return 0
            if isinstance(item, bool) or isinstance(item, Mapping):
                return math.nan
            return to_number(item)
        return math.nan
    return math.nan


def strict_equals(left: Any, right: Any) -> bool:
    """타입까지 같아야 하는 엄격 비교

    타입이 다르면 같지 않습니다 (1과 True, 1과 "1"은 다름).
    리스트와 딕셔너리는 동일 객체일 때만 같습니다.
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, Number) and isinstance(right, Number):
        return left == right
    if isinstance(left, str) and isinstance(right, str):
        return left == right
    if left is None or right is None:
        return left is right
    if isinstance(left, (Mapping, list, tuple)) or isinstance(right, (Mapping, list, tuple)):
        return left is right
    return type(left) is type(right) and left == right
