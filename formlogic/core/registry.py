"""RuleSetRegistry: 이름으로 관리하는 규칙 묶음 저장소

규칙 묶음마다 RuleEngine을 하나씩 만들어 보관합니다.
의존성 그래프는 등록 시점에 한 번 만들어지므로, 규칙을 바꾸려면
같은 이름으로 다시 등록해야 합니다.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .config import EngineSettings
from .rule_engine import RuleEngine
from .rule_loader import RULE_FILE_SUFFIXES, load_rules

logger = logging.getLogger(__name__)


class RuleSetRegistry:
    """규칙 묶음 레지스트리

    Attributes:
        engines: 이름 -> RuleEngine 매핑
        rules_dir: 규칙 파일이 저장된 디렉토리
        settings: 새로 만드는 엔진에 적용할 설정
    """

    def __init__(
        self,
        rules_dir: Optional[Path] = None,
        settings: Optional[EngineSettings] = None
    ):
        """
        Args:
            rules_dir: 규칙 파일 디렉토리 (주어지면 초기화 시 로드)
            settings: 엔진 설정
        """
        self.engines: Dict[str, RuleEngine] = {}
        self.rules_dir = Path(rules_dir) if rules_dir else None
        self.settings = settings or EngineSettings()

        if self.rules_dir and self.rules_dir.exists():
            self.load_dir()

    def register(
        self,
        name: str,
        rules: Mapping[str, Any],
        replace: bool = False
    ) -> RuleEngine:
        """규칙 묶음 등록

        Args:
            name: 규칙 묶음 이름
            rules: 규칙 트리
            replace: True이면 같은 이름의 기존 묶음을 교체

        Returns:
            생성된 RuleEngine

        Raises:
            ValueError: 같은 이름이 이미 있고 replace=False인 경우
        """
        if name in self.engines and not replace:
            raise ValueError(f"규칙 묶음 '{name}'이(가) 이미 등록되어 있습니다")

        engine = RuleEngine(rules, settings=self.settings)
        self.engines[name] = engine
        logger.info("규칙 묶음 등록: %s (규칙 %d개)", name, len(engine.list_rule_paths()))
        return engine

    def get(self, name: str) -> Optional[RuleEngine]:
        """이름으로 엔진 조회 (없으면 None)"""
        return self.engines.get(name)

    def remove(self, name: str) -> bool:
        """규칙 묶음 삭제

        Returns:
            삭제했으면 True, 없었으면 False
        """
        return self.engines.pop(name, None) is not None

    def list_names(self) -> List[str]:
        """등록된 규칙 묶음 이름 목록"""
        return sorted(self.engines.keys())

    def load_dir(self) -> None:
        """규칙 디렉토리의 모든 규칙 파일 로드

        파일 이름(확장자 제외)이 규칙 묶음 이름이 됩니다.
        로드에 실패한 파일은 경고를 남기고 건너뜁니다.
        """
        if not self.rules_dir or not self.rules_dir.exists():
            return

        for rules_file in sorted(self.rules_dir.iterdir()):
            if rules_file.suffix.lower() not in RULE_FILE_SUFFIXES:
                continue
            try:
                self.register(rules_file.stem, load_rules(rules_file), replace=True)
            except Exception as e:
                logger.warning("규칙 파일 로드 실패 %s: %s", rules_file, e)

    def __contains__(self, name: object) -> bool:
        return name in self.engines

    def __len__(self) -> int:
        return len(self.engines)

    def __str__(self) -> str:
        return f"RuleSetRegistry({len(self)} rule sets)"


_default_registry: Optional[RuleSetRegistry] = None


def get_default_registry() -> RuleSetRegistry:
    """기본 레지스트리 가져오기

    애플리케이션 전역에서 사용할 단일 레지스트리 인스턴스를 반환합니다.
    FORMLOGIC_* 환경 변수로 설정을 읽습니다.
    """
    global _default_registry
    if _default_registry is None:
        _default_registry = RuleSetRegistry(settings=EngineSettings.from_env())
    return _default_registry


def reset_default_registry() -> None:
    """기본 레지스트리 초기화 (주로 테스트용)"""
    global _default_registry
    _default_registry = None
