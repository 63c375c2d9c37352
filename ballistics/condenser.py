"""
이름 축약기 (Name Condenser)

긴 총열/탄약 이름을 짧고 고유한 코드로 축약
- 네임스페이스(ammo, barrel)별 독립된 양방향 매핑
- 한 번 배정된 축약명은 리포트 생성 1회 동안 영구 유지
- 충돌 시 단어별로 한 글자씩 라운드로빈 확장
"""
import re
from typing import Dict, List, Optional, Tuple

from loguru import logger

from .errors import AbbreviationExhausted

AMMO = "ammo"
BARREL = "barrel"
NAMESPACES = (AMMO, BARREL)

# 공백으로 치환 (단어 분리)
_SEPARATOR_PATTERN = re.compile(r"[()\[\]/]")
# 제거 (단어 결합)
_REMOVE_PATTERN = re.compile(r"[#\-]")


# =====================================================
# 문자열 축약 함수
# =====================================================

def normalize_label(label: str) -> str:
    """축약 전 정규화: 괄호·슬래시 → 공백, '#01' → '1', '#'·'-' 제거"""
    text = _SEPARATOR_PATTERN.sub(" ", label)
    text = text.replace("#01", "1")
    return _REMOVE_PATTERN.sub("", text)


def label_words(label: str) -> List[str]:
    return normalize_label(label).split()


def expand_label(label: str, target_length: int) -> str:
    """
    target_length 글자 후보 생성

    단어마다 target_length // 단어수 글자, 앞쪽 target_length % 단어수 개
    단어는 한 글자씩 더 가져간다. 단어 길이를 넘으면 잘린다.
    각 조각의 첫 글자는 대문자.

    예) "Elastic Bumper Cars", 4 → "ElBC"
    """
    words = label_words(label)
    if not words:
        return ""

    full_rounds, remaining = divmod(target_length, len(words))
    pieces = []
    for idx, word in enumerate(words):
        count = full_rounds + (1 if idx < remaining else 0)
        piece = word[:count]
        if piece:
            pieces.append(piece[0].upper() + piece[1:])
    return "".join(pieces)


def minimal_candidate(label: str) -> str:
    """단어별 첫 글자 (최소 후보)"""
    return expand_label(label, len(label_words(label)))


# =====================================================
# 양방향 매핑
# =====================================================

class AbbreviationMap:
    """원본명 ↔ 축약명 양방향 매핑 (단사 유지)"""

    def __init__(self, namespace: str):
        self.namespace = namespace
        self._condensed: Dict[str, str] = {}
        self._verbose: Dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._condensed)

    def __contains__(self, verbose: str) -> bool:
        return verbose in self._condensed

    def get_condensed(self, verbose: str) -> Optional[str]:
        return self._condensed.get(verbose)

    def get_verbose(self, condensed: str) -> Optional[str]:
        return self._verbose.get(condensed)

    def insert(self, verbose: str, condensed: str):
        """새 매핑 등록 (기존 매핑 재배정/재사용 불가)"""
        if verbose in self._condensed:
            raise ValueError(
                f"[{self.namespace}] 이미 축약된 이름입니다: {verbose}={self._condensed[verbose]}"
            )
        if condensed in self._verbose:
            raise ValueError(
                f"[{self.namespace}] 이미 사용 중인 축약명입니다: {condensed}={self._verbose[condensed]}"
            )
        self._condensed[verbose] = condensed
        self._verbose[condensed] = verbose

    def items(self) -> List[Tuple[str, str]]:
        """(축약명, 원본명) 목록 - 등록 순서"""
        return [(condensed, verbose) for verbose, condensed in self._condensed.items()]


# =====================================================
# 축약기
# =====================================================

class NameCondenser:
    """
    리포트 1회 실행 범위의 축약기

    전역 상태 없이 실행마다 새 인스턴스를 만들어 사용한다.
    동시에 여러 리포트를 만들 경우 인스턴스를 공유하지 않는다.
    """

    def __init__(self, presets: Optional[Dict[str, Dict[str, str]]] = None):
        self._maps: Dict[str, AbbreviationMap] = {
            namespace: AbbreviationMap(namespace) for namespace in NAMESPACES
        }
        for namespace, entries in (presets or {}).items():
            mapping = self._get_map(namespace)
            for verbose, condensed in entries.items():
                mapping.insert(verbose, condensed)

    def _get_map(self, namespace: str) -> AbbreviationMap:
        try:
            return self._maps[namespace]
        except KeyError:
            raise ValueError(
                f"알 수 없는 네임스페이스: {namespace} (사용 가능: {', '.join(NAMESPACES)})"
            ) from None

    def condense(self, namespace: str, verbose: str) -> str:
        """원본명 → 축약명 (처음 보는 이름이면 새로 배정)"""
        mapping = self._get_map(namespace)
        existing = mapping.get_condensed(verbose)
        if existing is not None:
            return existing

        condensed = self._assign(mapping, verbose)
        mapping.insert(verbose, condensed)
        logger.debug(f"축약 [{namespace}] {verbose} → {condensed}")
        return condensed

    def expand(self, namespace: str, condensed: str) -> Optional[str]:
        """축약명 → 원본명 (없으면 None)"""
        return self._get_map(namespace).get_verbose(condensed)

    def _assign(self, mapping: AbbreviationMap, verbose: str) -> str:
        words = label_words(verbose)
        if not words:
            raise AbbreviationExhausted(mapping.namespace, verbose)

        conflict = ""
        max_length = max(len(word) for word in words) * len(words)
        for target_length in range(len(words), max_length + 1):
            candidate = expand_label(verbose, target_length)
            owner = mapping.get_verbose(candidate)
            if owner is None:
                return candidate
            conflict = owner

        raise AbbreviationExhausted(mapping.namespace, verbose, conflict)

    # ==================== 편의 함수 ====================

    def condense_ammo(self, ammo: str) -> str:
        return self.condense(AMMO, ammo)

    def condense_barrel(self, barrel: str) -> str:
        return self.condense(BARREL, barrel)

    def ammo_verbose(self, condensed: str) -> Optional[str]:
        return self.expand(AMMO, condensed)

    def barrel_verbose(self, condensed: str) -> Optional[str]:
        return self.expand(BARREL, condensed)

    def reference(self) -> Dict[str, List[Tuple[str, str]]]:
        """네임스페이스별 (축약명, 원본명) 목록"""
        return {namespace: mapping.items() for namespace, mapping in self._maps.items()}

