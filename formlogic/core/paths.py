"""경로 접근 유틸리티

점(.)으로 구분된 경로로 중첩 딕셔너리의 값을 읽고 쓰며,
규칙 트리에서 규칙을 찾고, 의존성 간선을 병합합니다.

경로 문자열은 공개 API 경계에서 한 번만 `split_path`로 분해하고
내부에서는 세그먼트 튜플로 다룹니다.
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .logic import is_common_primitive, is_logic, is_primitive

PATH_DELIMITER = "."
WILDCARD = "*"

PathLike = Union[str, Sequence[str]]


def split_path(path: PathLike) -> Tuple[str, ...]:
    """경로를 세그먼트 튜플로 변환

    Args:
        path: "section.field" 형태의 문자열 또는 세그먼트 시퀀스

    Returns:
        세그먼트 튜플
    """
    if isinstance(path, str):
        return tuple(path.split(PATH_DELIMITER))
    return tuple(str(segment) for segment in path)


def join_path(segments: Sequence[str]) -> str:
    return PATH_DELIMITER.join(segments)


def _has_segment(obj: Any, segment: str) -> bool:
    if isinstance(obj, Mapping):
        return segment in obj
    if isinstance(obj, (list, tuple)):
        return segment.isdigit() and int(segment) < len(obj)
    return False


def _child(obj: Any, segment: str) -> Any:
    if isinstance(obj, Mapping):
        return obj[segment]
    return obj[int(segment)]


def _values(obj: Any) -> List[Any]:
    if isinstance(obj, Mapping):
        return list(obj.values())
    return list(obj)


def get_value_by_path(obj: Any, path: PathLike, strict: bool = True) -> Any:
    """경로로 중첩된 값 조회

    와일드카드 `*` 세그먼트는 현재 단계의 모든 값으로 퍼져 나가며
    결과를 한 단계 평탄화한 리스트(None 제외)를 반환합니다.
    마지막 세그먼트가 `*`이고 현재 값이 딕셔너리이면 말단 값에 이를 때까지
    계속 내려갑니다.

    Args:
        obj: 조회 대상
        path: 경로
        strict: False이면 세그먼트가 없을 때 None 대신 현재 값을 반환

    Returns:
        조회된 값 (없으면 None)
    """
    return _get_value(obj, split_path(path), strict)


def _get_value(obj: Any, segments: Tuple[str, ...], strict: bool) -> Any:
    if is_primitive(obj):
        if segments:
            if segments == (WILDCARD,):
                return [obj]
            return None
        return obj

    if not segments:
        return obj

    segment, rest = segments[0], segments[1:]

    if segment == WILDCARD:
        is_last_segment = not rest and isinstance(obj, Mapping)
        if is_last_segment:
            rest = (WILDCARD,)
        found = []
        for value in _values(obj):
            result = _get_value(value, rest, not is_last_segment)
            if isinstance(result, list):
                found.extend(result)
            else:
                found.append(result)
        return [item for item in found if item is not None]

    if _has_segment(obj, segment):
        return _get_value(_child(obj, segment), rest, strict)

    if strict:
        return None

    return obj


def set_value_by_path(data: Any, path: Optional[PathLike], value: Any) -> Any:
    """경로에 값 설정

    중간 단계 딕셔너리가 없으면 새로 만듭니다.

    Args:
        data: 값을 설정할 딕셔너리 (제자리에서 수정됨)
        path: 경로 (None이면 data를 그대로 반환)
        value: 설정할 값

    Returns:
        수정된 루트 객체 (경로가 비어 있으면 value)
    """
    if path is None:
        return data
    return _set_value(data, split_path(path), value)


def _set_value(data: Any, segments: Tuple[str, ...], value: Any) -> Any:
    if not segments:
        return value

    if not isinstance(data, dict):
        raise ValueError(
            f"'{type(data).__name__}' 값 아래에는 경로를 만들 수 없습니다: {join_path(segments)}"
        )

    segment, rest = segments[0], segments[1:]
    if segment not in data:
        data[segment] = {}

    data[segment] = _set_value(data[segment], rest, value)
    return data


def is_terminal_rule(value: Any) -> bool:
    """더 내려갈 필요 없는 규칙 값인지 확인

    원시값, 원시값만 담은 리스트, Logic 표현식이 해당됩니다.
    """
    return (
        is_common_primitive(value)
        or (isinstance(value, (list, tuple)) and all(is_common_primitive(v) for v in value))
        or is_logic(value)
    )


def get_rule_by_path(rules: Any, path: PathLike) -> Any:
    """규칙 트리에서 경로에 해당하는 규칙 조회

    경로를 따라 내려가다가 말단 규칙을 만나면 남은 세그먼트와 관계없이
    그 규칙을 반환합니다. 따라서 "field.sub"처럼 규칙보다 긴 경로도
    도중의 표현식으로 해석됩니다. 현재 단계에 없는 세그먼트는 건너뜁니다.

    Args:
        rules: 규칙 트리
        path: 규칙 경로

    Returns:
        찾은 규칙 (말단 규칙이 아니거나 빈 딕셔너리를 만나면 None)
    """
    current = rules

    for segment in split_path(path):
        if is_terminal_rule(current):
            return current

        if isinstance(current, Mapping) and not current:
            return None

        if _has_segment(current, segment):
            child = _child(current, segment)
            if child is None:
                return None
            current = child

    if is_terminal_rule(current):
        return current

    return None


def merge_edge(last_edge: Any, path: str) -> Union[List[str], Dict[str, Any]]:
    """기존 간선 집합에 새 경로 병합

    간선 집합이 딕셔너리(규칙 묶음)이면 각 하위 키마다 재귀적으로 병합하여
    규칙 트리와 같은 모양을 유지합니다.

    Args:
        last_edge: 기존 간선 집합 (리스트, 딕셔너리 또는 None)
        path: 추가할 경로

    Returns:
        병합된 새 간선 집합
    """
    if isinstance(last_edge, list):
        return [*last_edge, path]
    if isinstance(last_edge, Mapping):
        return {
            key: merge_edge(value, f"{path}{PATH_DELIMITER}{key}")
            for key, value in last_edge.items()
        }
    return [path]
