"""규칙 엔진 설정"""

import os

from pydantic import BaseModel, Field

from .dependency import Direction
from .evaluator import DEFAULT_MAX_DEPTH


class EngineSettings(BaseModel):
    """RuleEngine 설정

    Attributes:
        max_depth: 표현식 평가 시 허용하는 최대 중첩 깊이
        default_direction: propagate/drill의 기본 그래프 방향
    """

    max_depth: int = Field(DEFAULT_MAX_DEPTH, ge=1, description="최대 표현식 중첩 깊이")
    default_direction: Direction = Field(Direction.UNDIRECTED, description="기본 전파 방향")

    @classmethod
    def from_env(cls) -> "EngineSettings":
        """환경 변수에서 설정 로드

        FORMLOGIC_MAX_DEPTH, FORMLOGIC_DEFAULT_DIRECTION을 읽습니다.
        """
        return cls(
            max_depth=int(os.getenv("FORMLOGIC_MAX_DEPTH", str(DEFAULT_MAX_DEPTH))),
            default_direction=os.getenv("FORMLOGIC_DEFAULT_DIRECTION", Direction.UNDIRECTED.value),
        )
