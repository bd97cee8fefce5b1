"""API 요청/응답 스키마 (Pydantic)"""

import math
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..core import Direction


def to_json_safe(value: Any) -> Any:
    """NaN/무한대를 None으로 바꿔 JSON으로 직렬화 가능한 값 반환"""
    if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
        return None
    if isinstance(value, list):
        return [to_json_safe(v) for v in value]
    if isinstance(value, dict):
        return {k: to_json_safe(v) for k, v in value.items()}
    return value


# ============================================================================
# 표현식 평가 관련 스키마
# ============================================================================

class EvaluateRequest(BaseModel):
    """표현식 평가 요청"""
    logic: Any = Field(..., description="Logic 표현식")
    facts: Dict[str, Any] = Field(default_factory=dict, description="사실관계")

    class Config:
        json_schema_extra = {
            "example": {
                "logic": {"if": [{"<": [{"var": "age"}, 19]}, "minor", "adult"]},
                "facts": {"age": 30}
            }
        }


class EvaluateResponse(BaseModel):
    """표현식 평가 응답"""
    result: Any = None


class DependenciesRequest(BaseModel):
    """의존성 추출 요청"""
    logic: Any = Field(..., description="Logic 표현식")


class DependenciesResponse(BaseModel):
    """의존성 추출 응답"""
    dependencies: List[str]


# ============================================================================
# 규칙 묶음 관련 스키마
# ============================================================================

class RuleSetCreateRequest(BaseModel):
    """규칙 묶음 등록 요청"""
    name: str = Field(..., min_length=1, description="규칙 묶음 이름")
    rules: Dict[str, Any] = Field(..., description="규칙 트리")
    replace: bool = Field(default=False, description="같은 이름이 있으면 교체")

    class Config:
        json_schema_extra = {
            "example": {
                "name": "order",
                "rules": {
                    "subtotal": {"*": [{"var": "price"}, {"var": "quantity"}]},
                    "total": {"+": [{"var": "subtotal"}, {"var": "shipping"}]}
                }
            }
        }


class RuleSetResponse(BaseModel):
    """규칙 묶음 응답"""
    name: str
    rule_paths: List[str]
    forward: Dict[str, Any]
    backward: Dict[str, Any]


class RuleSetListResponse(BaseModel):
    """규칙 묶음 목록 응답"""
    names: List[str]
    total: int


class GraphResponse(BaseModel):
    """의존성 그래프 응답"""
    name: str
    direction: Direction
    graph: Dict[str, Any]


class RunRequest(BaseModel):
    """규칙 실행 요청"""
    path: str = Field(..., description="규칙 경로 (예: section.field)")
    facts: Optional[Dict[str, Any]] = Field(None, description="사실관계")


class RunResponse(BaseModel):
    """규칙 실행 응답"""
    path: str
    result: Any = None


class RunSeveralRequest(BaseModel):
    """여러 규칙 실행 요청"""
    entries: List[RunRequest]


class RunSeveralResponse(BaseModel):
    """여러 규칙 실행 응답"""
    results: List[RunResponse]


class PropagateResponse(BaseModel):
    """의존 경로 전파 응답"""
    path: str
    direction: Direction
    paths: List[str]


class DrillRequest(BaseModel):
    """규칙 및 의존 규칙 실행 요청"""
    path: str = Field(..., description="시작 규칙 경로")
    facts: Optional[Dict[str, Any]] = Field(None, description="사실관계")
    direction: Optional[Direction] = Field(None, description="그래프 방향")


class DrillResponse(BaseModel):
    """규칙 및 의존 규칙 실행 응답"""
    paths: List[str]
    results: List[Any]


class ErrorResponse(BaseModel):
    """에러 응답"""
    detail: str
