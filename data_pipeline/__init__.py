"""
데이터 파이프라인 패키지

weapons.json 처리 단계:
- Stage 1: Raw Load (Decimal 파싱)
- Stage 2: Technical Validation (스키마 검증)
- Stage 3: Business Logic Validation (데이터셋 불변식 검증)
- Stage 4: Dataset 변환
"""

from .schemas import (
    DamageDropoffSchema,
    WeaponStatSchema,
    AmmoStatSchema,
    WeaponSchema,
    CategorySchema,
    WeaponsFileSchema,
    ValidationReport,
    ValidationIssue,
    ValidationSeverity,
)
from .validators import TechnicalValidator, BusinessValidator, count_tables
from .loader import (
    DatasetLoadError,
    load_dataset,
    load_dataset_from_data,
    read_weapons_file,
    parse_weapons_data,
    to_dataset,
)

__all__ = [
    # Schemas
    "DamageDropoffSchema",
    "WeaponStatSchema",
    "AmmoStatSchema",
    "WeaponSchema",
    "CategorySchema",
    "WeaponsFileSchema",
    "ValidationReport",
    "ValidationIssue",
    "ValidationSeverity",
    # Validators
    "TechnicalValidator",
    "BusinessValidator",
    "count_tables",
    # Loader
    "DatasetLoadError",
    "load_dataset",
    "load_dataset_from_data",
    "read_weapons_file",
    "parse_weapons_data",
    "to_dataset",
]
