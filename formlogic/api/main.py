"""FastAPI 애플리케이션 메인"""

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..core import RuleSetRegistry, get_default_registry
from .routers import logic, rulesets
from .routers.rulesets import get_registry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """애플리케이션 라이프사이클 관리"""
    # 시작 시 규칙 디렉토리 로드 (FORMLOGIC_RULES_DIR)
    rules_dir = os.getenv("FORMLOGIC_RULES_DIR")
    if rules_dir:
        registry = get_default_registry()
        registry.rules_dir = Path(rules_dir)
        registry.load_dir()
        logger.info("규칙 디렉토리 로드 완료: %s (%d개)", rules_dir, len(registry))
    yield


# FastAPI 앱 생성
app = FastAPI(
    title="formlogic 규칙 평가 API",
    description="Logic 표현식 평가 및 규칙 의존성 그래프",
    version=__version__,
    lifespan=lifespan
)

# CORS 설정 (FORMLOGIC_CORS_ORIGINS: 쉼표로 구분한 출처 목록, 기본값은 전체 허용)
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("FORMLOGIC_CORS_ORIGINS", "*").split(",")
    if origin.strip()
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 라우터 등록
app.include_router(
    logic.router,
    prefix="/api/v1/logic",
    tags=["표현식"]
)

app.include_router(
    rulesets.router,
    prefix="/api/v1/rulesets",
    tags=["규칙묶음"]
)


@app.get("/")
async def root(registry: RuleSetRegistry = Depends(get_registry)):
    """루트 엔드포인트

    등록된 규칙 묶음 목록과 주요 엔드포인트 경로를 함께 반환합니다.
    """
    return {
        "message": "formlogic 규칙 평가 API",
        "version": __version__,
        "rulesets": registry.list_names(),
        "endpoints": {
            "evaluate": "/api/v1/logic/evaluate",
            "dependencies": "/api/v1/logic/dependencies",
            "rulesets": "/api/v1/rulesets",
        },
        "docs": "/docs"
    }


@app.get("/health")
async def health_check():
    """헬스체크 엔드포인트"""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=os.getenv("FORMLOGIC_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
