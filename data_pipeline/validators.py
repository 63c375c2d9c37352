"""
무기 데이터 검증

Technical Validation: weapons.json 스키마 검증
Business Validation: 데이터셋 불변식 검증 (중복 구성, 중복 거리, 음수 값 등)
"""

from typing import List, Dict, Any, Set, Tuple
from pydantic import ValidationError as PydanticValidationError
from datetime import datetime
from loguru import logger

from ballistics.condenser import label_words
from ballistics.models import Dataset

from .schemas import (
    WeaponsFileSchema,
    ValidationReport,
    ValidationIssue,
    ValidationSeverity,
)

# database/schema.sql config_dropoffs.damage 소수 자릿수
DAMAGE_DECIMAL_PLACES = 1


def count_tables(dataset: Dataset) -> Dict[str, int]:
    """저장소 테이블 기준 레코드 수"""
    configurations = list(dataset.iter_configurations())
    return {
        "categories": len(dataset.categories),
        "weapons": dataset.weapon_count,
        "barrels": len(dataset.barrel_types()),
        "ammo_types": len(dataset.ammo_types()),
        "configurations": len(configurations),
        "config_dropoffs": sum(len(c.dropoffs) for c in configurations),
        "weapon_ammo_stats": sum(len(w.ammo_stats) for _, w in dataset.iter_weapons()),
    }


class TechnicalValidator:
    """
    기술적 검증

    - 필수 필드 존재 여부
    - 데이터 타입 (거리 정수, 데미지 Decimal)
    """

    def validate_weapons_data(self, data: Dict[str, Any]) -> ValidationReport:
        """weapons.json 원본 데이터 스키마 검증"""
        errors = []

        try:
            WeaponsFileSchema.model_validate(data)
        except PydanticValidationError as e:
            for error in e.errors():
                errors.append(ValidationIssue(
                    error_type="SCHEMA_VALIDATION_FAILED",
                    severity=ValidationSeverity.CRITICAL,
                    message=error["msg"],
                    field=".".join(str(loc) for loc in error["loc"]),
                    value=error.get("input"),
                    suggestion="데이터 형식을 확인하세요"
                ))

        return ValidationReport(
            is_valid=len(errors) == 0,
            errors=errors,
            validated_at=datetime.now()
        )


class BusinessValidator:
    """
    비즈니스 로직 검증

    - 무기명 중복
    - (총열, 탄약) 구성 중복 (MalformedConfiguration)
    - 구성 내 감쇠 거리 중복
    - 음수 거리/데미지
    - 감쇠 샘플 없는 구성 (경고)
    - 사용되지 않는 탄약 스탯 (경고)
    - 축약할 수 없는 총열/탄약 이름 (빈 이름, 기호만 있는 이름)
    - 저장소 정밀도(소수 1자리)를 넘는 데미지 (경고)
    """

    def validate_dataset(self, dataset: Dataset) -> ValidationReport:
        errors: List[ValidationIssue] = []
        warnings: List[ValidationIssue] = []

        seen_categories: Set[str] = set()
        for category in dataset.categories:
            if category.name in seen_categories:
                errors.append(ValidationIssue(
                    error_type="DUPLICATE_CATEGORY",
                    severity=ValidationSeverity.HIGH,
                    message=f"카테고리명이 중복됩니다: {category.name}",
                    field="categories.name",
                    value=category.name,
                    suggestion="카테고리를 하나로 합치세요"
                ))
            seen_categories.add(category.name)

        seen_weapons: Set[str] = set()
        checked_labels: Set[Tuple[str, str]] = set()
        for category, weapon in dataset.iter_weapons():
            if weapon.name in seen_weapons:
                errors.append(ValidationIssue(
                    error_type="DUPLICATE_WEAPON",
                    severity=ValidationSeverity.CRITICAL,
                    message=f"무기명이 중복됩니다: {weapon.name} ({category.name})",
                    field="weapons.name",
                    value=weapon.name,
                    suggestion="무기명은 데이터셋 전체에서 고유해야 합니다"
                ))
            seen_weapons.add(weapon.name)

            used_ammo: Set[str] = set()
            seen_configs: Set[Tuple[str, str]] = set()
            for config in weapon.configurations:
                used_ammo.add(config.ammo_type)
                pair = (config.barrel_type, config.ammo_type)
                label = f"{weapon.name} / {config.barrel_type} / {config.ammo_type}"

                if pair in seen_configs:
                    errors.append(ValidationIssue(
                        error_type="MALFORMED_CONFIGURATION",
                        severity=ValidationSeverity.HIGH,
                        message=f"구성이 중복됩니다: {label}",
                        field="stats",
                        value=list(pair),
                        suggestion="(총열, 탄약) 조합은 무기마다 한 번만 정의하세요"
                    ))
                seen_configs.add(pair)

                for field_name, name in (("barrelType", config.barrel_type), ("ammoType", config.ammo_type)):
                    if (field_name, name) in checked_labels:
                        continue
                    checked_labels.add((field_name, name))
                    if not label_words(name):
                        errors.append(ValidationIssue(
                            error_type="EMPTY_LABEL",
                            severity=ValidationSeverity.HIGH,
                            message=f"축약명을 만들 수 없는 이름입니다: {label} ({field_name}='{name}')",
                            field=f"stats.{field_name}",
                            value=name,
                            suggestion="글자나 숫자가 포함된 이름을 사용하세요"
                        ))

                errors.extend(self._check_dropoffs(label, config.dropoffs))
                warnings.extend(self._check_precision(label, config.dropoffs))

                if not config.dropoffs:
                    warnings.append(ValidationIssue(
                        error_type="EMPTY_DROPOFFS",
                        severity=ValidationSeverity.LOW,
                        message=f"감쇠 데이터가 없습니다 (모든 거리 데미지 0): {label}",
                        field="dropoffs",
                    ))

                if config.velocity is None:
                    warnings.append(ValidationIssue(
                        error_type="MISSING_VELOCITY",
                        severity=ValidationSeverity.INFO,
                        message=f"탄속 정보가 없습니다: {label}",
                        field="velocity",
                    ))

            for ammo_name in weapon.ammo_stats:
                if ammo_name not in used_ammo:
                    warnings.append(ValidationIssue(
                        error_type="UNUSED_AMMO_STATS",
                        severity=ValidationSeverity.LOW,
                        message=f"사용되지 않는 탄약 스탯: {weapon.name} / {ammo_name}",
                        field="ammoStats",
                        value=ammo_name,
                    ))

        report = ValidationReport(
            is_valid=len(errors) == 0,
            errors=errors,
            warnings=warnings,
            table_counts=count_tables(dataset),
            validated_at=datetime.now()
        )
        logger.debug(f"데이터셋 검증: 오류 {len(errors)}건, 경고 {len(warnings)}건")
        return report

    def _check_dropoffs(self, label: str, dropoffs) -> List[ValidationIssue]:
        issues = []
        seen_ranges: Set[int] = set()

        for dropoff in dropoffs:
            if dropoff.range in seen_ranges:
                issues.append(ValidationIssue(
                    error_type="DUPLICATE_DROPOFF_RANGE",
                    severity=ValidationSeverity.HIGH,
                    message=f"감쇠 거리가 중복됩니다: {label} @ {dropoff.range}m",
                    field="dropoffs.range",
                    value=dropoff.range,
                    suggestion="같은 거리의 샘플은 하나만 남기세요 (먼저 나온 샘플이 적용됨)"
                ))
            seen_ranges.add(dropoff.range)

            if dropoff.range < 0:
                issues.append(ValidationIssue(
                    error_type="NEGATIVE_RANGE",
                    severity=ValidationSeverity.HIGH,
                    message=f"거리가 음수입니다: {label} @ {dropoff.range}m",
                    field="dropoffs.range",
                    value=dropoff.range,
                ))

            if dropoff.damage < 0:
                issues.append(ValidationIssue(
                    error_type="NEGATIVE_DAMAGE",
                    severity=ValidationSeverity.HIGH,
                    message=f"데미지가 음수입니다: {label} @ {dropoff.range}m = {dropoff.damage}",
                    field="dropoffs.damage",
                    value=str(dropoff.damage),
                ))

        return issues

    def _check_precision(self, label: str, dropoffs) -> List[ValidationIssue]:
        """config_dropoffs.damage는 DECIMAL(5,1): 소수 2자리 이상은 저장 시 반올림됨"""
        issues = []
        for dropoff in dropoffs:
            if not dropoff.damage.is_finite():
                continue
            if dropoff.damage.normalize().as_tuple().exponent < -DAMAGE_DECIMAL_PLACES:
                issues.append(ValidationIssue(
                    error_type="DAMAGE_PRECISION",
                    severity=ValidationSeverity.MEDIUM,
                    message=f"데미지가 소수 {DAMAGE_DECIMAL_PLACES}자리를 넘습니다 (DB 저장 시 반올림): "
                            f"{label} @ {dropoff.range}m = {dropoff.damage}",
                    field="dropoffs.damage",
                    value=str(dropoff.damage),
                    suggestion="JSON과 DB 리포트가 달라질 수 있습니다"
                ))
        return issues
