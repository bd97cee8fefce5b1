"""규칙 묶음 등록 및 실행 API 라우터"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...core import (
    DependencyCycleError,
    Direction,
    LogicError,
    RuleEngine,
    RuleSetRegistry,
    get_default_registry,
)
from ..schemas import (
    DrillRequest,
    DrillResponse,
    GraphResponse,
    PropagateResponse,
    RuleSetCreateRequest,
    RuleSetListResponse,
    RuleSetResponse,
    RunRequest,
    RunResponse,
    RunSeveralRequest,
    RunSeveralResponse,
    to_json_safe,
)

router = APIRouter()


def get_registry() -> RuleSetRegistry:
    """규칙 묶음 레지스트리 의존성

    테스트에서는 dependency_overrides로 교체합니다.
    """
    return get_default_registry()


def _get_engine(registry: RuleSetRegistry, name: str) -> RuleEngine:
    engine = registry.get(name)
    if engine is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"규칙 묶음을 찾을 수 없습니다: {name}"
        )
    return engine


def _ruleset_to_response(name: str, engine: RuleEngine) -> RuleSetResponse:
    return RuleSetResponse(
        name=name,
        rule_paths=engine.list_rule_paths(),
        forward=engine.dependency_graph.forward,
        backward=engine.dependency_graph.backward,
    )


@router.get("", response_model=RuleSetListResponse)
async def list_rulesets(registry: RuleSetRegistry = Depends(get_registry)):
    """등록된 규칙 묶음 목록"""
    names = registry.list_names()
    return RuleSetListResponse(names=names, total=len(names))


@router.post("", response_model=RuleSetResponse, status_code=status.HTTP_201_CREATED)
async def create_ruleset(
    request: RuleSetCreateRequest,
    registry: RuleSetRegistry = Depends(get_registry)
):
    """규칙 묶음 등록

    등록 시 의존성 그래프를 만듭니다.
    """
    if request.name in registry and not request.replace:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"규칙 묶음 '{request.name}'이(가) 이미 등록되어 있습니다"
        )

    try:
        engine = registry.register(request.name, request.rules, replace=request.replace)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"규칙 묶음 등록 실패: {str(e)}"
        )

    return _ruleset_to_response(request.name, engine)


@router.get("/{name}", response_model=RuleSetResponse)
async def get_ruleset(name: str, registry: RuleSetRegistry = Depends(get_registry)):
    """규칙 묶음 조회"""
    return _ruleset_to_response(name, _get_engine(registry, name))


@router.delete("/{name}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_ruleset(name: str, registry: RuleSetRegistry = Depends(get_registry)):
    """규칙 묶음 삭제"""
    if not registry.remove(name):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"규칙 묶음을 찾을 수 없습니다: {name}"
        )


@router.get("/{name}/graph", response_model=GraphResponse)
async def get_graph(
    name: str,
    direction: Direction = Query(Direction.UNDIRECTED, description="그래프 방향"),
    registry: RuleSetRegistry = Depends(get_registry)
):
    """의존성 그래프 조회"""
    engine = _get_engine(registry, name)
    return GraphResponse(
        name=name,
        direction=direction,
        graph=engine.dependency_graph.view(direction),
    )


@router.post("/{name}/run", response_model=RunResponse)
async def run_rule(
    name: str,
    request: RunRequest,
    registry: RuleSetRegistry = Depends(get_registry)
):
    """단일 규칙 실행"""
    engine = _get_engine(registry, name)
    try:
        result = engine.run(request.path, request.facts)
    except LogicError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"규칙 실행 실패 ({request.path}): {str(e)}"
        )

    return RunResponse(path=request.path, result=to_json_safe(result))


@router.post("/{name}/run-several", response_model=RunSeveralResponse)
async def run_several_rules(
    name: str,
    request: RunSeveralRequest,
    registry: RuleSetRegistry = Depends(get_registry)
):
    """여러 규칙을 순서대로 실행"""
    engine = _get_engine(registry, name)
    entries = [[entry.path, entry.facts] for entry in request.entries]
    try:
        results = engine.run_several(entries)
    except LogicError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"규칙 실행 실패: {str(e)}"
        )

    return RunSeveralResponse(results=[
        RunResponse(path=entry.path, result=to_json_safe(result))
        for entry, result in zip(request.entries, results)
    ])


@router.get("/{name}/propagate", response_model=PropagateResponse)
async def propagate(
    name: str,
    path: str = Query(..., description="시작 경로"),
    direction: Optional[Direction] = Query(None, description="그래프 방향"),
    registry: RuleSetRegistry = Depends(get_registry)
):
    """경로에서 도달 가능한 모든 의존 경로"""
    engine = _get_engine(registry, name)
    direction = direction or engine.settings.default_direction
    try:
        paths = engine.propagate(path, direction)
    except DependencyCycleError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    return PropagateResponse(path=path, direction=direction, paths=paths)


@router.post("/{name}/drill", response_model=DrillResponse)
async def drill(
    name: str,
    request: DrillRequest,
    registry: RuleSetRegistry = Depends(get_registry)
):
    """규칙과 그 규칙에 의존하는 모든 규칙 실행"""
    engine = _get_engine(registry, name)
    try:
        paths = engine.drill_paths(request.path, request.direction)
        results = engine.drill(request.path, request.facts, request.direction)
    except DependencyCycleError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except LogicError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"규칙 실행 실패: {str(e)}"
        )

    return DrillResponse(paths=paths, results=to_json_safe(results))
