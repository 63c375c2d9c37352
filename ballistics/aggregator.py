"""
거리별 데미지 버킷 집계

거리(오름차순) → 무기별로 같은 유효 데미지를 내는 구성들을 하나의 버킷으로 묶고
버킷의 총열/탄약 이름을 축약해 한 줄 설명을 만든다.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional, Sequence

from loguru import logger

from .condenser import NameCondenser
from .models import Configuration, Dataset
from .resolver import effective_damage, observed_ranges


@dataclass
class DamageBucket:
    """한 무기에서 특정 거리 데미지가 같은 구성 묶음"""
    range: int
    damage: Decimal
    category_name: str
    weapon_name: str
    configurations: List[Configuration] = field(default_factory=list)
    barrel_codes: List[str] = field(default_factory=list)
    ammo_codes: List[str] = field(default_factory=list)

    @property
    def barrels(self) -> str:
        """총열 축약명 (구분자 없이 연결)"""
        return "".join(self.barrel_codes)

    @property
    def ammo(self) -> str:
        """탄약 축약명 (공백 구분)"""
        return " ".join(self.ammo_codes)

    def describe(self) -> str:
        return f"N={self.weapon_name} B={self.barrels} A={self.ammo}"


@dataclass
class RangeGroup:
    """한 거리의 전체 버킷"""
    range: int
    buckets: List[DamageBucket] = field(default_factory=list)

    @property
    def damages(self) -> List[Decimal]:
        """등장 데미지 (내림차순, 중복 제거)"""
        return sorted({b.damage for b in self.buckets}, reverse=True)


def bucket_configurations(
    configurations: Sequence[Configuration],
    target_range: int
) -> Dict[Decimal, List[Configuration]]:
    """유효 데미지 기준으로 구성 분할 (처음 등장한 순서 유지)"""
    buckets: Dict[Decimal, List[Configuration]] = {}
    for config in configurations:
        damage = effective_damage(config, target_range)
        buckets.setdefault(damage, []).append(config)
    return buckets


def aggregate(
    dataset: Dataset,
    condenser: NameCondenser,
    ranges: Optional[Sequence[int]] = None
) -> List[RangeGroup]:
    """
    거리별 버킷 집계

    Args:
        dataset: 정규화된 데이터셋
        condenser: 이번 실행 전용 축약기
        ranges: 집계할 거리 (None이면 데이터셋의 전체 샘플 거리)

    Returns:
        거리 오름차순 RangeGroup 리스트
    """
    target_ranges = sorted(set(ranges)) if ranges is not None else observed_ranges(dataset)
    groups: List[RangeGroup] = []

    for target_range in target_ranges:
        group = RangeGroup(range=target_range)

        for category, weapon in dataset.iter_weapons():
            split = bucket_configurations(weapon.configurations, target_range)
            for damage, configs in split.items():
                barrel_codes = dict.fromkeys(
                    condenser.condense_barrel(c.barrel_type) for c in configs
                )
                ammo_codes = dict.fromkeys(
                    condenser.condense_ammo(c.ammo_type) for c in configs
                )
                group.buckets.append(DamageBucket(
                    range=target_range,
                    damage=damage,
                    category_name=category.name,
                    weapon_name=weapon.name,
                    configurations=configs,
                    barrel_codes=list(barrel_codes),
                    ammo_codes=list(ammo_codes),
                ))

        logger.debug(
            f"Range {target_range}: 버킷 {len(group.buckets)}개, 데미지 {len(group.damages)}종"
        )
        groups.append(group)

    return groups
