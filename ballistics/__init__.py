"""
BF2042 무기 데미지 리포트 엔진

거리별 유효 데미지 계산, 동일 데미지 구성 묶음, 이름 축약, 정렬된 리포트 생성
"""
from .models import (
    AmmoStats,
    Category,
    Configuration,
    DamageDropoff,
    Dataset,
    Weapon,
)
from .errors import (
    AbbreviationExhausted,
    BallisticsError,
    UnknownCategoryError,
    UnknownWeaponError,
)
from .resolver import effective_damage, find_effective_dropoff, observed_ranges
from .condenser import AMMO, BARREL, NAMESPACES, AbbreviationMap, NameCondenser
from .aggregator import DamageBucket, RangeGroup, aggregate
from .report import (
    FORMAT_PREAMBLE,
    Report,
    ReportEntry,
    ReportSortKey,
    format_damage,
    generate_report,
)
from .queries import (
    BestConfig,
    ConfigDropoff,
    DamageAtRange,
    WeaponAmmoStats,
    WeaponDetails,
    WeaponSummary,
    best_configs_in_category,
    damage_at_range,
    weapon_ammo_stats,
    weapon_configs,
    weapon_details,
    weapons_by_category,
)

__all__ = [
    # Models
    "AmmoStats",
    "Category",
    "Configuration",
    "DamageDropoff",
    "Dataset",
    "Weapon",
    # Errors
    "AbbreviationExhausted",
    "BallisticsError",
    "UnknownCategoryError",
    "UnknownWeaponError",
    # Resolver
    "effective_damage",
    "find_effective_dropoff",
    "observed_ranges",
    # Condenser
    "AMMO",
    "BARREL",
    "NAMESPACES",
    "AbbreviationMap",
    "NameCondenser",
    # Aggregator
    "DamageBucket",
    "RangeGroup",
    "aggregate",
    # Report
    "FORMAT_PREAMBLE",
    "Report",
    "ReportEntry",
    "ReportSortKey",
    "format_damage",
    "generate_report",
    # Queries
    "BestConfig",
    "ConfigDropoff",
    "DamageAtRange",
    "WeaponAmmoStats",
    "WeaponDetails",
    "WeaponSummary",
    "best_configs_in_category",
    "damage_at_range",
    "weapon_ammo_stats",
    "weapon_configs",
    "weapon_details",
    "weapons_by_category",
]
