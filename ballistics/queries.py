"""
데이터셋 조회 함수

무기별 특정 거리 데미지, 카테고리 내 상위 구성, 무기 목록/구성/탄약 스탯 조회
"""
from dataclasses import asdict, dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from .errors import UnknownCategoryError, UnknownWeaponError
from .models import Category, Configuration, Dataset, Weapon
from .resolver import find_effective_dropoff


@dataclass
class DamageAtRange:
    """특정 거리에서의 구성별 데미지"""
    weapon_name: str
    barrel_type: str
    ammo_type: str
    effective_range: int
    damage: Decimal
    velocity: Optional[int] = None
    rpm_single: Optional[int] = None
    rpm_burst: Optional[int] = None
    rpm_auto: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class BestConfig(DamageAtRange):
    """카테고리 상위 구성 (탄약 스탯 포함)"""
    magazine_size: Optional[int] = None
    empty_reload: Optional[Decimal] = None
    tactical_reload: Optional[Decimal] = None
    headshot_multiplier: Optional[Decimal] = None


def _damage_row(config: Configuration, target_range: int) -> Optional[DamageAtRange]:
    dropoff = find_effective_dropoff(config.dropoffs, target_range)
    if dropoff is None:
        return None
    return DamageAtRange(
        weapon_name=config.weapon_name,
        barrel_type=config.barrel_type,
        ammo_type=config.ammo_type,
        effective_range=dropoff.range,
        damage=dropoff.damage,
        velocity=config.velocity,
        rpm_single=config.rpm_single,
        rpm_burst=config.rpm_burst,
        rpm_auto=config.rpm_auto,
    )


def _best_row(weapon: Weapon, config: Configuration, target_range: int) -> Optional[BestConfig]:
    row = _damage_row(config, target_range)
    if row is None:
        return None
    stats = weapon.get_ammo_stats(config.ammo_type)
    return BestConfig(
        **asdict(row),
        magazine_size=stats.magazine_size if stats else None,
        empty_reload=stats.empty_reload if stats else None,
        tactical_reload=stats.tactical_reload if stats else None,
        headshot_multiplier=stats.headshot_multiplier if stats else None,
    )


def damage_at_range(dataset: Dataset, weapon_name: str, target_range: int) -> List[DamageAtRange]:
    """
    무기의 구성별 target_range 데미지 (데미지 내림차순)

    target_range 이하 샘플이 없는 구성은 제외된다.
    """
    weapon = dataset.get_weapon(weapon_name)
    if weapon is None:
        raise UnknownWeaponError(weapon_name)

    rows = [_damage_row(config, target_range) for config in weapon.configurations]
    result = [row for row in rows if row is not None]
    result.sort(key=lambda r: (-r.damage, r.barrel_type, r.ammo_type))
    return result


def best_configs_in_category(
    dataset: Dataset,
    category_name: str,
    target_range: int,
    limit: int = 10
) -> List[BestConfig]:
    """카테고리 내 target_range 데미지 상위 구성"""
    category = dataset.get_category(category_name)
    if category is None:
        raise UnknownCategoryError(category_name)

    rows: List[BestConfig] = []
    for weapon in category.weapons:
        for config in weapon.configurations:
            row = _best_row(weapon, config, target_range)
            if row is not None:
                rows.append(row)

    rows.sort(key=lambda r: (-r.damage, r.weapon_name, r.barrel_type, r.ammo_type))
    return rows[:max(limit, 0)]


# =====================================================
# 무기 정보 조회
# =====================================================

@dataclass
class WeaponSummary:
    """카테고리 내 무기"""
    weapon_name: str
    category_name: str
    configuration_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ConfigDropoff:
    """구성별 감쇠 샘플 한 줄 (구성 × 거리)"""
    weapon_name: str
    barrel_type: str
    ammo_type: str
    range: int
    damage: Decimal
    velocity: Optional[int] = None
    rpm_single: Optional[int] = None
    rpm_burst: Optional[int] = None
    rpm_auto: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class WeaponAmmoStats:
    """무기의 탄약별 스탯 한 줄"""
    weapon_name: str
    ammo_type: str
    magazine_size: int
    headshot_multiplier: Decimal
    empty_reload: Optional[Decimal] = None
    tactical_reload: Optional[Decimal] = None
    pellet_count: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class WeaponDetails:
    """무기 전체 정보"""
    weapon_name: str
    category_name: str
    configurations: List[ConfigDropoff] = field(default_factory=list)
    ammo_stats: List[WeaponAmmoStats] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _find_weapon(dataset: Dataset, weapon_name: str) -> Tuple[Category, Weapon]:
    for category, weapon in dataset.iter_weapons():
        if weapon.name == weapon_name:
            return category, weapon
    raise UnknownWeaponError(weapon_name)


def weapons_by_category(dataset: Dataset, category_name: str) -> List[WeaponSummary]:
    """카테고리의 무기 목록 (무기명 순)"""
    category = dataset.get_category(category_name)
    if category is None:
        raise UnknownCategoryError(category_name)

    rows = [
        WeaponSummary(
            weapon_name=weapon.name,
            category_name=category.name,
            configuration_count=len(weapon.configurations),
        )
        for weapon in category.weapons
    ]
    rows.sort(key=lambda r: r.weapon_name)
    return rows


def weapon_configs(dataset: Dataset, weapon_name: str) -> List[ConfigDropoff]:
    """
    무기의 구성별 감쇠 샘플 (총열 → 탄약 → 거리 순)

    샘플이 없는 구성은 나오지 않는다.
    같은 (총열, 탄약, 거리)가 중복되면 먼저 나온 샘플만 남긴다.
    """
    _, weapon = _find_weapon(dataset, weapon_name)

    rows: List[ConfigDropoff] = []
    seen = set()
    for config in weapon.configurations:
        for dropoff in config.dropoffs:
            key = (config.barrel_type, config.ammo_type, dropoff.range)
            if key in seen:
                continue
            seen.add(key)
            rows.append(ConfigDropoff(
                weapon_name=weapon.name,
                barrel_type=config.barrel_type,
                ammo_type=config.ammo_type,
                range=dropoff.range,
                damage=dropoff.damage,
                velocity=config.velocity,
                rpm_single=config.rpm_single,
                rpm_burst=config.rpm_burst,
                rpm_auto=config.rpm_auto,
            ))

    rows.sort(key=lambda r: (r.barrel_type, r.ammo_type, r.range))
    return rows


def weapon_ammo_stats(dataset: Dataset, weapon_name: str) -> List[WeaponAmmoStats]:
    """무기의 탄약별 스탯 (탄약명 순)"""
    _, weapon = _find_weapon(dataset, weapon_name)

    rows = [
        WeaponAmmoStats(
            weapon_name=weapon.name,
            ammo_type=ammo_name,
            magazine_size=stats.magazine_size,
            headshot_multiplier=stats.headshot_multiplier,
            empty_reload=stats.empty_reload,
            tactical_reload=stats.tactical_reload,
            pellet_count=stats.pellet_count,
        )
        for ammo_name, stats in weapon.ammo_stats.items()
    ]
    rows.sort(key=lambda r: r.ammo_type)
    return rows


def weapon_details(dataset: Dataset, weapon_name: str) -> WeaponDetails:
    """무기 기본 정보 + 구성별 감쇠 + 탄약 스탯"""
    category, weapon = _find_weapon(dataset, weapon_name)
    return WeaponDetails(
        weapon_name=weapon.name,
        category_name=category.name,
        configurations=weapon_configs(dataset, weapon_name),
        ammo_stats=weapon_ammo_stats(dataset, weapon_name),
    )
