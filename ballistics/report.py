"""
거리별 데미지 리포트 생성

정렬 규칙 (ReportSortKey 필드 순서 = 정렬 순서):
1. range 오름차순
2. damage_key 오름차순 (= 데미지 내림차순, 거리 헤더는 -Infinity로 맨 앞)
3. tier: 헤더(0)가 같은 데미지의 버킷 줄(1)보다 앞
4. weapon / barrels / ammo 텍스트 (동점 처리)
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence, Tuple

from loguru import logger

from .aggregator import DamageBucket, RangeGroup, aggregate
from .condenser import AMMO, BARREL, NameCondenser
from .models import Dataset

FORMAT_PREAMBLE = """Output format:
Hierarchy Level
1 Range
2 Damage

"""

# 거리 헤더용 데미지 (실제 데미지보다 항상 큼)
RANGE_HEADER_DAMAGE = Decimal("Infinity")

HEADER_TIER = 0
LINE_TIER = 1


def format_damage(damage: Decimal) -> str:
    """지수 표기·불필요한 0 없이 출력 (25.0 → 25, 22.50 → 22.5)"""
    return f"{damage.normalize():f}"


@dataclass(frozen=True, order=True)
class ReportSortKey:
    """리포트 줄 정렬 키"""
    range: int
    damage_key: Decimal
    tier: int
    weapon: str = ""
    barrels: str = ""
    ammo: str = ""

    @classmethod
    def range_header(cls, target_range: int) -> "ReportSortKey":
        return cls(range=target_range, damage_key=-RANGE_HEADER_DAMAGE, tier=HEADER_TIER)

    @classmethod
    def damage_header(cls, target_range: int, damage: Decimal) -> "ReportSortKey":
        return cls(range=target_range, damage_key=-damage, tier=HEADER_TIER)

    @classmethod
    def for_bucket(cls, bucket: DamageBucket) -> "ReportSortKey":
        return cls(
            range=bucket.range,
            damage_key=-bucket.damage,
            tier=LINE_TIER,
            weapon=bucket.weapon_name,
            barrels=bucket.barrels,
            ammo=bucket.ammo,
        )


@dataclass(order=True)
class ReportEntry:
    """정렬 키가 붙은 리포트 한 줄"""
    key: ReportSortKey
    text: str = field(compare=False)


@dataclass
class Report:
    """생성된 리포트 문서"""
    entries: List[ReportEntry]
    groups: List[RangeGroup]
    ammo_key: List[Tuple[str, str]]
    barrel_key: List[Tuple[str, str]]

    @property
    def ranges(self) -> List[int]:
        return [g.range for g in self.groups]

    def reference(self) -> str:
        """축약명 참조표"""
        lines = ["1 Ammo Condensed Name Key\n"]
        lines.extend(f"{short}={verbose}\n" for short, verbose in self.ammo_key)
        lines.append("1 Barrel Condensed Name Key\n")
        lines.extend(f"{short}={verbose}\n" for short, verbose in self.barrel_key)
        return "".join(lines)

    def body(self) -> str:
        return "".join(entry.text for entry in self.entries)

    def render(self) -> str:
        """최종 텍스트 문서"""
        return FORMAT_PREAMBLE + self.reference() + self.body()

    def entries_for_range(self, target_range: int) -> List[ReportEntry]:
        return [e for e in self.entries if e.key.range == target_range]

    def to_dict(self) -> Dict[str, Any]:
        """JSON 내보내기용 구조"""
        ranges = []
        for group in self.groups:
            damages = []
            for damage in group.damages:
                buckets = sorted(
                    (b for b in group.buckets if b.damage == damage),
                    key=lambda b: (b.weapon_name, b.barrels, b.ammo)
                )
                damages.append({
                    "damage": format_damage(damage),
                    "buckets": [
                        {
                            "category": b.category_name,
                            "weapon": b.weapon_name,
                            "barrels": b.barrel_codes,
                            "ammo": b.ammo_codes,
                            "configurations": len(b.configurations),
                        }
                        for b in buckets
                    ],
                })
            ranges.append({"range": group.range, "damages": damages})

        return {
            "meta": {
                "generated_at": datetime.now().isoformat(),
                "total_ranges": len(self.groups),
                "total_lines": len(self.entries),
            },
            "keys": {
                AMMO: dict(self.ammo_key),
                BARREL: dict(self.barrel_key),
            },
            "ranges": ranges,
        }


def build_entries(groups: Sequence[RangeGroup]) -> List[ReportEntry]:
    """거리 헤더, 데미지 헤더, 버킷 줄을 정렬된 한 목록으로"""
    entries: List[ReportEntry] = []
    for group in groups:
        entries.append(ReportEntry(
            ReportSortKey.range_header(group.range),
            f"1 Range={group.range}\n"
        ))
        for damage in group.damages:
            entries.append(ReportEntry(
                ReportSortKey.damage_header(group.range, damage),
                f"2 Damage={format_damage(damage)}\n"
            ))
        for bucket in group.buckets:
            entries.append(ReportEntry(
                ReportSortKey.for_bucket(bucket),
                bucket.describe() + "\n"
            ))

    entries.sort()
    return entries


def generate_report(
    dataset: Dataset,
    condenser: Optional[NameCondenser] = None,
    ranges: Optional[Sequence[int]] = None
) -> Report:
    """
    데이터셋 → 리포트

    Args:
        dataset: 정규화된 데이터셋 (읽기 전용)
        condenser: 축약기 (None이면 이번 실행용으로 새로 생성)
        ranges: 리포트할 거리 (None이면 전체 샘플 거리)

    Raises:
        AbbreviationExhausted: 고유 축약명을 만들 수 없는 경우
    """
    if condenser is None:
        condenser = NameCondenser()
    groups = aggregate(dataset, condenser, ranges=ranges)
    entries = build_entries(groups)
    reference = condenser.reference()

    logger.info(
        f"리포트 생성 완료: 거리 {len(groups)}개, 줄 {len(entries)}개, "
        f"탄약 {len(reference[AMMO])}종, 총열 {len(reference[BARREL])}종"
    )

    return Report(
        entries=entries,
        groups=groups,
        ammo_key=reference[AMMO],
        barrel_key=reference[BARREL],
    )
