"""
weapons.json → 데이터셋 변환

- JSON 실수는 Decimal로 파싱 (부동소수점 오차 방지)
- Pydantic 스키마 검증 후 frozen 데이터셋 모델로 변환
"""
import json
from decimal import Decimal
from typing import Any, Dict, List, Optional

from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from ballistics.models import (
    AmmoStats,
    Category,
    Configuration,
    DamageDropoff,
    Dataset,
    Weapon,
)

from .schemas import (
    CategorySchema,
    ValidationReport,
    WeaponSchema,
    WeaponsFileSchema,
)
from .validators import BusinessValidator


class DatasetLoadError(ValueError):
    """데이터셋을 읽거나 변환할 수 없음"""

    def __init__(self, message: str, details: Optional[List[Dict[str, Any]]] = None,
                 report: Optional[ValidationReport] = None):
        super().__init__(message)
        self.details = details or []
        self.report = report


def read_weapons_file(data_file: str) -> Dict[str, Any]:
    """JSON 파일 읽기 (실수 → Decimal)"""
    try:
        with open(data_file, "r", encoding="utf-8") as f:
            data = json.load(f, parse_float=Decimal)
    except json.JSONDecodeError as e:
        raise DatasetLoadError(f"JSON 형식이 올바르지 않습니다: {data_file} ({e})") from e
    except OSError as e:
        raise DatasetLoadError(f"데이터 파일을 읽을 수 없습니다: {data_file} ({e})") from e

    if not isinstance(data, dict):
        raise DatasetLoadError(f"데이터 파일 루트가 객체가 아닙니다: {data_file}")
    return data


def parse_weapons_data(data: Dict[str, Any]) -> WeaponsFileSchema:
    """스키마 검증"""
    try:
        return WeaponsFileSchema.model_validate(data)
    except PydanticValidationError as e:
        details = [
            {
                "field": ".".join(str(loc) for loc in error["loc"]),
                "message": error["msg"],
            }
            for error in e.errors()
        ]
        raise DatasetLoadError(
            f"스키마 검증 실패: {len(details)}건",
            details=details
        ) from e


def _to_weapon(weapon: WeaponSchema) -> Weapon:
    configurations = tuple(
        Configuration(
            weapon_name=weapon.name,
            barrel_type=stat.barrel_type,
            ammo_type=stat.ammo_type,
            dropoffs=tuple(DamageDropoff(range=d.range, damage=d.damage) for d in stat.dropoffs),
            rpm_single=stat.rpm_single,
            rpm_burst=stat.rpm_burst,
            rpm_auto=stat.rpm_auto,
            velocity=stat.velocity,
        )
        for stat in weapon.stats
    )
    ammo_stats = {
        ammo_name: AmmoStats(
            magazine_size=stat.mag_size,
            headshot_multiplier=stat.headshot_multiplier,
            empty_reload=stat.empty_reload,
            tactical_reload=stat.tactical_reload,
            pellet_count=stat.pellet_count,
        )
        for ammo_name, stat in weapon.ammo_stats.items()
    }
    return Weapon(name=weapon.name, configurations=configurations, ammo_stats=ammo_stats)


def _to_category(category: CategorySchema) -> Category:
    return Category(
        name=category.name,
        weapons=tuple(_to_weapon(w) for w in category.weapons)
    )


def to_dataset(schema: WeaponsFileSchema) -> Dataset:
    """스키마 → 데이터셋 모델"""
    return Dataset(categories=tuple(_to_category(c) for c in schema.categories))


def load_dataset_from_data(data: Dict[str, Any], strict: bool = False) -> Dataset:
    """
    메모리 데이터에서 데이터셋 생성

    Args:
        data: {"categories": [...]} 형식의 딕셔너리
        strict: True면 비즈니스 검증 실패 시 DatasetLoadError

    Returns:
        Dataset
    """
    dataset = to_dataset(parse_weapons_data(data))

    report = BusinessValidator().validate_dataset(dataset)
    for issue in report.errors:
        logger.warning(f"[{issue.error_type}] {issue.message}")
    for issue in report.warnings:
        logger.debug(f"[{issue.error_type}] {issue.message}")

    if strict and not report.can_build_report:
        raise DatasetLoadError(
            f"데이터셋 검증 실패: 오류 {len(report.errors)}건",
            details=[{"field": i.field, "message": i.message} for i in report.errors],
            report=report
        )

    logger.info(
        f"데이터 로드 완료: 카테고리 {len(dataset.categories)}개, "
        f"무기 {dataset.weapon_count}개, 구성 {dataset.configuration_count}개"
    )
    return dataset


def load_dataset(data_file: str, strict: bool = False) -> Dataset:
    """JSON 파일에서 데이터셋 로드"""
    logger.info(f"데이터 파일 로드: {data_file}")
    return load_dataset_from_data(read_weapons_file(data_file), strict=strict)
