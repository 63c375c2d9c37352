"""
무기 데이터셋 모델

카테고리 → 무기 → 구성(총열/탄약) → 거리별 데미지 감쇠 샘플
- 로드 이후 변경되지 않는 읽기 전용 구조 (frozen dataclass)
- 데미지는 float 대신 Decimal 사용 (리포트 재현성)
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterator, List, Optional, Tuple


@dataclass(frozen=True)
class DamageDropoff:
    """거리별 데미지 샘플 (range 이상부터 적용)"""
    range: int
    damage: Decimal


@dataclass(frozen=True)
class AmmoStats:
    """무기의 탄약별 스탯"""
    magazine_size: int
    headshot_multiplier: Decimal
    empty_reload: Optional[Decimal] = None
    tactical_reload: Optional[Decimal] = None
    pellet_count: Optional[int] = None


@dataclass(frozen=True)
class Configuration:
    """무기 구성 (무기명, 총열, 탄약) 조합"""
    weapon_name: str
    barrel_type: str
    ammo_type: str
    dropoffs: Tuple[DamageDropoff, ...] = ()
    rpm_single: Optional[int] = None
    rpm_burst: Optional[int] = None
    rpm_auto: Optional[int] = None
    velocity: Optional[int] = None

    @property
    def key(self) -> Tuple[str, str, str]:
        """구성 식별 키"""
        return (self.weapon_name, self.barrel_type, self.ammo_type)


@dataclass(frozen=True)
class Weapon:
    """무기 정보"""
    name: str
    configurations: Tuple[Configuration, ...] = ()
    ammo_stats: Dict[str, AmmoStats] = field(default_factory=dict, hash=False, compare=False)

    def get_ammo_stats(self, ammo_type: str) -> Optional[AmmoStats]:
        return self.ammo_stats.get(ammo_type)


@dataclass(frozen=True)
class Category:
    """무기 카테고리"""
    name: str
    weapons: Tuple[Weapon, ...] = ()


@dataclass(frozen=True)
class Dataset:
    """정규화된 전체 데이터셋"""
    categories: Tuple[Category, ...] = ()

    def iter_weapons(self) -> Iterator[Tuple[Category, Weapon]]:
        """(카테고리, 무기) 순회 - 데이터셋 순서 유지"""
        for category in self.categories:
            for weapon in category.weapons:
                yield category, weapon

    def iter_configurations(self) -> Iterator[Configuration]:
        for _, weapon in self.iter_weapons():
            yield from weapon.configurations

    def get_category(self, name: str) -> Optional[Category]:
        for category in self.categories:
            if category.name == name:
                return category
        return None

    def get_weapon(self, name: str) -> Optional[Weapon]:
        for _, weapon in self.iter_weapons():
            if weapon.name == name:
                return weapon
        return None

    @property
    def weapon_count(self) -> int:
        return sum(len(c.weapons) for c in self.categories)

    @property
    def configuration_count(self) -> int:
        return sum(1 for _ in self.iter_configurations())

    def barrel_types(self) -> List[str]:
        """등장 순서대로 중복 제거한 총열 목록"""
        return list(dict.fromkeys(c.barrel_type for c in self.iter_configurations()))

    def ammo_types(self) -> List[str]:
        """등장 순서대로 중복 제거한 탄약 목록 (탄약 스탯 포함)"""
        names: Dict[str, None] = {}
        for _, weapon in self.iter_weapons():
            for config in weapon.configurations:
                names.setdefault(config.ammo_type, None)
            for ammo_name in weapon.ammo_stats:
                names.setdefault(ammo_name, None)
        return list(names)
