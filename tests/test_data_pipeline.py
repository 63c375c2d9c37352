"""
데이터 파이프라인 단위 테스트
- loader.py JSON 로드/변환 테스트
- validators.py 스키마/비즈니스 검증 테스트
"""
import pytest
import sys
from decimal import Decimal
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from data_pipeline.loader import (
    DatasetLoadError,
    load_dataset,
    load_dataset_from_data,
    parse_weapons_data,
    read_weapons_file,
    to_dataset,
)
from data_pipeline.schemas import ValidationSeverity
from data_pipeline.validators import BusinessValidator, TechnicalValidator


def first_weapon(data):
    return data["categories"][0]["weapons"][0]


# =============================================================================
# JSON 로드
# =============================================================================

class TestReadWeaponsFile:
    """weapons.json 읽기"""

    def test_floats_parsed_as_decimal(self, weapons_file):
        data = read_weapons_file(str(weapons_file))
        stats = first_weapon(data)["ammoStats"]["Standard Issue"]
        assert isinstance(stats["headshotMultiplier"], Decimal)
        assert stats["headshotMultiplier"] == Decimal("1.5")

    def test_missing_file(self, tmp_path):
        with pytest.raises(DatasetLoadError):
            read_weapons_file(str(tmp_path / "missing.json"))

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{categories: ", encoding="utf-8")
        with pytest.raises(DatasetLoadError):
            read_weapons_file(str(path))

    def test_root_must_be_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(DatasetLoadError):
            read_weapons_file(str(path))


class TestLoadDataset:
    """데이터셋 변환"""

    def test_load_from_file(self, weapons_file):
        dataset = load_dataset(str(weapons_file))
        assert [c.name for c in dataset.categories] == ["Assault Rifles", "Shotguns"]
        assert dataset.weapon_count == 3
        assert dataset.configuration_count == 5

    def test_aliases_mapped(self, sample_weapons_data):
        dataset = to_dataset(parse_weapons_data(sample_weapons_data))
        weapon = dataset.get_weapon("M5A3")
        config = weapon.configurations[0]
        assert config.barrel_type == "Factory"
        assert config.ammo_type == "Standard Issue"
        assert config.rpm_auto == 800
        assert config.velocity == 560
        assert weapon.get_ammo_stats("Standard Issue").tactical_reload == Decimal("1.9")

    def test_dropoff_order_preserved(self, sample_dataset):
        config = sample_dataset.get_weapon("NVK-S22").configurations[0]
        assert [d.range for d in config.dropoffs] == [0, 10, 25]

    def test_missing_ammo_stats(self, sample_dataset):
        """ammoStats 없는 무기는 빈 딕셔너리"""
        assert sample_dataset.get_weapon("AC-42").ammo_stats == {}

    def test_null_ammo_stats(self, sample_weapons_data):
        first_weapon(sample_weapons_data)["ammoStats"] = None
        dataset = load_dataset_from_data(sample_weapons_data)
        assert dataset.get_weapon("M5A3").ammo_stats == {}

    def test_schema_error_details(self, sample_weapons_data):
        del first_weapon(sample_weapons_data)["stats"][0]["barrelType"]
        with pytest.raises(DatasetLoadError) as exc_info:
            load_dataset_from_data(sample_weapons_data)
        fields = [d["field"] for d in exc_info.value.details]
        assert "categories.0.weapons.0.stats.0.barrelType" in fields

    def test_non_integer_range_rejected(self, sample_weapons_data):
        first_weapon(sample_weapons_data)["stats"][0]["dropoffs"][0]["range"] = "near"
        with pytest.raises(DatasetLoadError):
            load_dataset_from_data(sample_weapons_data)

    def test_business_errors_tolerated_by_default(self, sample_weapons_data):
        stats = first_weapon(sample_weapons_data)["stats"]
        stats.append(dict(stats[0]))
        dataset = load_dataset_from_data(sample_weapons_data)
        assert dataset.configuration_count == 6

    def test_strict_mode_raises(self, sample_weapons_data):
        stats = first_weapon(sample_weapons_data)["stats"]
        stats.append(dict(stats[0]))
        with pytest.raises(DatasetLoadError) as exc_info:
            load_dataset_from_data(sample_weapons_data, strict=True)
        assert exc_info.value.report is not None
        assert exc_info.value.report.issues_of_type("MALFORMED_CONFIGURATION")


# =============================================================================
# 기술적 검증
# =============================================================================

class TestTechnicalValidator:
    """스키마 검증"""

    def test_valid_data(self, sample_weapons_data):
        report = TechnicalValidator().validate_weapons_data(sample_weapons_data)
        assert report.is_valid
        assert report.errors == []

    def test_missing_field_is_critical(self, sample_weapons_data):
        del first_weapon(sample_weapons_data)["name"]
        report = TechnicalValidator().validate_weapons_data(sample_weapons_data)
        assert not report.is_valid
        assert report.errors[0].error_type == "SCHEMA_VALIDATION_FAILED"
        assert report.errors[0].severity == ValidationSeverity.CRITICAL
        assert report.errors[0].field == "categories.0.weapons.0.name"


# =============================================================================
# 비즈니스 로직 검증
# =============================================================================

class TestBusinessValidator:
    """데이터셋 불변식 검증"""

    def validate(self, data):
        return BusinessValidator().validate_dataset(to_dataset(parse_weapons_data(data)))

    def test_sample_is_valid(self, sample_weapons_data):
        report = self.validate(sample_weapons_data)
        assert report.is_valid
        assert report.can_build_report

    def test_table_counts(self, sample_weapons_data):
        report = self.validate(sample_weapons_data)
        assert report.table_counts == {
            "categories": 2,
            "weapons": 3,
            "barrels": 2,
            "ammo_types": 4,
            "configurations": 5,
            "config_dropoffs": 13,
            "weapon_ammo_stats": 3,
        }

    def test_duplicate_configuration(self, sample_weapons_data):
        stats = first_weapon(sample_weapons_data)["stats"]
        stats.append(dict(stats[1]))
        report = self.validate(sample_weapons_data)
        issues = report.issues_of_type("MALFORMED_CONFIGURATION")
        assert len(issues) == 1
        assert issues[0].severity == ValidationSeverity.HIGH
        assert not report.can_build_report

    def test_duplicate_weapon_name(self, sample_weapons_data):
        shotguns = sample_weapons_data["categories"][1]["weapons"]
        shotguns.append(dict(shotguns[0]))
        report = self.validate(sample_weapons_data)
        issues = report.issues_of_type("DUPLICATE_WEAPON")
        assert issues[0].severity == ValidationSeverity.CRITICAL
        assert report.has_critical_errors

    def test_duplicate_dropoff_range(self, sample_weapons_data):
        first_weapon(sample_weapons_data)["stats"][0]["dropoffs"].append(
            {"range": 40, "damage": Decimal("21")}
        )
        report = self.validate(sample_weapons_data)
        assert report.issues_of_type("DUPLICATE_DROPOFF_RANGE")[0].value == 40

    def test_negative_values(self, sample_weapons_data):
        first_weapon(sample_weapons_data)["stats"][0]["dropoffs"].append(
            {"range": -5, "damage": Decimal("-1")}
        )
        report = self.validate(sample_weapons_data)
        assert report.issues_of_type("NEGATIVE_RANGE")
        assert report.issues_of_type("NEGATIVE_DAMAGE")

    def test_empty_dropoffs_is_warning(self, sample_weapons_data):
        first_weapon(sample_weapons_data)["stats"][0]["dropoffs"] = []
        report = self.validate(sample_weapons_data)
        assert report.is_valid
        assert report.warnings[0].error_type == "EMPTY_DROPOFFS"
        assert report.warnings[0].severity == ValidationSeverity.LOW

    def test_unused_ammo_stats_warning(self, sample_weapons_data):
        first_weapon(sample_weapons_data)["ammoStats"]["High Power"] = {
            "magSize": 25,
            "headshotMultiplier": Decimal("1.4"),
        }
        report = self.validate(sample_weapons_data)
        assert report.is_valid
        assert report.issues_of_type("UNUSED_AMMO_STATS")[0].value == "High Power"

    def test_missing_velocity_info(self, sample_weapons_data):
        del first_weapon(sample_weapons_data)["stats"][0]["velocity"]
        report = self.validate(sample_weapons_data)
        issues = report.issues_of_type("MISSING_VELOCITY")
        assert issues[0].severity == ValidationSeverity.INFO
        assert report.can_build_report


# =============================================================================
# 이름/정밀도 검증
# =============================================================================

class TestLabelValidation:
    """축약할 수 없는 총열/탄약 이름"""

    def test_blank_barrel_rejected_by_schema(self, sample_weapons_data):
        """공백만 있는 이름은 정리 후 길이 검사에서 실패"""
        first_weapon(sample_weapons_data)["stats"][0]["barrelType"] = "   "
        with pytest.raises(DatasetLoadError) as exc_info:
            load_dataset_from_data(sample_weapons_data, strict=True)
        fields = [d["field"] for d in exc_info.value.details]
        assert "categories.0.weapons.0.stats.0.barrelType" in fields

    def test_blank_weapon_name_rejected(self, sample_weapons_data):
        first_weapon(sample_weapons_data)["name"] = "  "
        report = TechnicalValidator().validate_weapons_data(sample_weapons_data)
        assert not report.is_valid

    def test_labels_stripped(self, sample_weapons_data):
        first_weapon(sample_weapons_data)["stats"][0]["ammoType"] = "  Standard Issue "
        dataset = load_dataset_from_data(sample_weapons_data)
        assert dataset.get_weapon("M5A3").configurations[0].ammo_type == "Standard Issue"

    @pytest.mark.parametrize("label", ["()", "#-", "[/]"])
    def test_symbol_only_label_is_error(self, sample_weapons_data, label):
        first_weapon(sample_weapons_data)["stats"][0]["barrelType"] = label
        report = BusinessValidator().validate_dataset(
            to_dataset(parse_weapons_data(sample_weapons_data))
        )
        issues = report.issues_of_type("EMPTY_LABEL")
        assert len(issues) == 1
        assert issues[0].severity == ValidationSeverity.HIGH
        assert issues[0].value == label
        assert not report.can_build_report

    def test_symbol_only_ammo_fails_strict_load(self, sample_weapons_data):
        stats = sample_weapons_data["categories"][1]["weapons"][0]["stats"][0]
        stats["ammoType"] = "(#)"
        with pytest.raises(DatasetLoadError) as exc_info:
            load_dataset_from_data(sample_weapons_data, strict=True)
        assert exc_info.value.report.issues_of_type("EMPTY_LABEL")

    def test_repeated_label_reported_once(self, sample_weapons_data):
        for stats in first_weapon(sample_weapons_data)["stats"][:2]:
            stats["ammoType"] = "()"
        report = BusinessValidator().validate_dataset(
            to_dataset(parse_weapons_data(sample_weapons_data))
        )
        assert len(report.issues_of_type("EMPTY_LABEL")) == 1


class TestDamagePrecision:
    """DB 저장 정밀도 (소수 1자리)"""

    def validate(self, data):
        return BusinessValidator().validate_dataset(to_dataset(parse_weapons_data(data)))

    def test_two_decimal_places_warned(self, sample_weapons_data):
        first_weapon(sample_weapons_data)["stats"][0]["dropoffs"][1]["damage"] = Decimal("22.25")
        report = self.validate(sample_weapons_data)
        issues = report.issues_of_type("DAMAGE_PRECISION")
        assert len(issues) == 1
        assert issues[0].severity == ValidationSeverity.MEDIUM
        assert issues[0].value == "22.25"
        assert report.is_valid
        assert report.can_build_report

    @pytest.mark.parametrize("damage", ["22.5", "22.50", "22", "22.0"])
    def test_one_decimal_place_ok(self, sample_weapons_data, damage):
        first_weapon(sample_weapons_data)["stats"][0]["dropoffs"][1]["damage"] = Decimal(damage)
        report = self.validate(sample_weapons_data)
        assert report.issues_of_type("DAMAGE_PRECISION") == []
