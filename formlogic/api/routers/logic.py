"""Logic 표현식 평가 API 라우터"""

from fastapi import APIRouter, HTTPException, status

from ...core import LogicError, collect_dependencies, evaluate
from ..schemas import (
    DependenciesRequest,
    DependenciesResponse,
    EvaluateRequest,
    EvaluateResponse,
    to_json_safe,
)

router = APIRouter()


@router.post("/evaluate", response_model=EvaluateResponse)
async def evaluate_logic(request: EvaluateRequest):
    """표현식을 사실관계로 평가"""
    try:
        result = evaluate(request.logic, request.facts)
    except LogicError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"표현식 평가 실패: {str(e)}"
        )

    return EvaluateResponse(result=to_json_safe(result))


@router.post("/dependencies", response_model=DependenciesResponse)
async def extract_dependencies(request: DependenciesRequest):
    """표현식이 읽는 경로 목록 추출"""
    try:
        dependencies = collect_dependencies(request.logic)
    except LogicError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"의존성 추출 실패: {str(e)}"
        )

    return DependenciesResponse(dependencies=dependencies)
