"""규칙 파일 로더 (YAML / JSON)"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

import yaml

logger = logging.getLogger(__name__)

YAML_SUFFIXES = {".yaml", ".yml"}
JSON_SUFFIXES = {".json"}
RULE_FILE_SUFFIXES = YAML_SUFFIXES | JSON_SUFFIXES


def load_rules(rules_file: Union[str, Path]) -> Dict[str, Any]:
    """파일에서 규칙 트리 로드

    Args:
        rules_file: 규칙 파일 경로 (.yaml, .yml, .json)

    Returns:
        규칙 트리 딕셔너리

    Raises:
        FileNotFoundError: 규칙 파일이 없는 경우
        ValueError: 지원하지 않는 확장자이거나 최상위가 딕셔너리가 아닌 경우
        yaml.YAMLError: YAML 파싱 오류
        json.JSONDecodeError: JSON 파싱 오류
    """
    rules_path = Path(rules_file)

    if not rules_path.exists():
        raise FileNotFoundError(f"규칙 파일을 찾을 수 없습니다: {rules_path}")

    suffix = rules_path.suffix.lower()
    if suffix not in RULE_FILE_SUFFIXES:
        raise ValueError(f"지원하지 않는 규칙 파일 형식: {rules_path}")

    with open(rules_path, 'r', encoding='utf-8') as f:
        if suffix in YAML_SUFFIXES:
            rules = yaml.safe_load(f)
        else:
            rules = json.load(f)

    if not isinstance(rules, dict):
        raise ValueError(f"규칙 파일의 최상위는 딕셔너리여야 합니다: {rules_path}")

    logger.debug("규칙 파일 로드: %s (%d개 항목)", rules_path, len(rules))
    return rules
