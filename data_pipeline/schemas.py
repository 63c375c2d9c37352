"""
무기 데이터 파이프라인 스키마 정의

Pydantic 모델을 사용하여 weapons.json 유효성 검사 및 타입 강제
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Dict, Any
from datetime import datetime
from decimal import Decimal
from enum import Enum


class ValidationSeverity(str, Enum):
    """검증 오류 심각도"""
    CRITICAL = "critical"   # 리포트 생성 불가
    HIGH = "high"           # 리포트 생성 불가, 데이터 수정 필요
    MEDIUM = "medium"       # 생성 가능, 경고 표시
    LOW = "low"             # 생성 가능, 로그만
    INFO = "info"           # 정보성


class ValidationIssue(BaseModel):
    """검증 오류/경고"""
    error_type: str = Field(..., description="오류 유형")
    severity: ValidationSeverity = Field(..., description="심각도")
    message: str = Field(..., description="오류 메시지")
    field: Optional[str] = Field(None, description="관련 필드")
    value: Optional[Any] = Field(None, description="문제가 된 값")
    suggestion: Optional[str] = Field(None, description="해결 제안")


class ValidationReport(BaseModel):
    """데이터셋 검증 결과"""
    is_valid: bool = Field(default=True, description="최종 유효성")
    errors: List[ValidationIssue] = Field(default_factory=list)
    warnings: List[ValidationIssue] = Field(default_factory=list)
    table_counts: Dict[str, int] = Field(default_factory=dict, description="테이블별 레코드 수")
    validated_at: datetime = Field(default_factory=datetime.now)

    @property
    def has_critical_errors(self) -> bool:
        return any(e.severity in [ValidationSeverity.CRITICAL, ValidationSeverity.HIGH] for e in self.errors)

    @property
    def can_build_report(self) -> bool:
        """리포트 생성 가능 여부"""
        return not self.has_critical_errors

    def issues_of_type(self, error_type: str) -> List[ValidationIssue]:
        return [i for i in self.errors + self.warnings if i.error_type == error_type]


# ==================== weapons.json 스키마 ====================

class DamageDropoffSchema(BaseModel):
    """거리별 데미지 샘플"""
    damage: Decimal = Field(..., description="데미지")
    range: int = Field(..., description="적용 시작 거리 (m)")


class WeaponStatSchema(BaseModel):
    """총열/탄약 조합별 스탯"""
    barrel_type: str = Field(..., alias="barrelType", min_length=1, description="총열")
    ammo_type: str = Field(..., alias="ammoType", min_length=1, description="탄약")
    dropoffs: List[DamageDropoffSchema] = Field(default_factory=list, description="데미지 감쇠")
    velocity: Optional[int] = Field(None, description="탄속 (m/s)")
    rpm_single: Optional[int] = Field(None, alias="rpmSingle", description="단발 RPM")
    rpm_burst: Optional[int] = Field(None, alias="rpmBurst", description="점사 RPM")
    rpm_auto: Optional[int] = Field(None, alias="rpmAuto", description="연사 RPM")

    @field_validator("barrel_type", "ammo_type", mode="before")
    @classmethod
    def strip_label(cls, v: Any) -> Any:
        """이름 앞뒤 공백 정리 (길이 검사 전)"""
        return v.strip() if isinstance(v, str) else v

    class Config:
        populate_by_name = True


class AmmoStatSchema(BaseModel):
    """탄약별 스탯"""
    mag_size: int = Field(..., alias="magSize", ge=0, description="탄창 크기")
    headshot_multiplier: Decimal = Field(..., alias="headshotMultiplier", description="헤드샷 배율")
    empty_reload: Optional[Decimal] = Field(None, alias="emptyReload", description="빈 탄창 재장전 (초)")
    tactical_reload: Optional[Decimal] = Field(None, alias="tacticalReload", description="전술 재장전 (초)")
    pellet_count: Optional[int] = Field(None, alias="pelletCount", description="산탄 수")

    class Config:
        populate_by_name = True


class WeaponSchema(BaseModel):
    """무기"""
    name: str = Field(..., min_length=1, description="무기명")
    stats: List[WeaponStatSchema] = Field(default_factory=list)
    ammo_stats: Dict[str, AmmoStatSchema] = Field(default_factory=dict, alias="ammoStats")

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("ammo_stats", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return {} if v is None else v

    class Config:
        populate_by_name = True


class CategorySchema(BaseModel):
    """카테고리"""
    name: str = Field(..., min_length=1, description="카테고리명")
    weapons: List[WeaponSchema] = Field(default_factory=list)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v


class WeaponsFileSchema(BaseModel):
    """weapons.json 루트"""
    categories: List[CategorySchema] = Field(default_factory=list)
