"""
BF2042 무기 거리별 데미지 리포트 메인
"""
import asyncio
import json
import sys
from pathlib import Path
from typing import Optional
from loguru import logger

from ballistics import (
    BallisticsError,
    Dataset,
    best_configs_in_category,
    damage_at_range,
    format_damage,
    generate_report,
    weapon_ammo_stats,
    weapon_configs,
    weapon_details,
    weapons_by_category,
)
from data_pipeline.config import report_config
from data_pipeline.loader import (
    DatasetLoadError,
    load_dataset,
    parse_weapons_data,
    read_weapons_file,
    to_dataset,
)
from data_pipeline.validators import TechnicalValidator, BusinessValidator
from database.supabase_client import DatabaseError, WeaponStatsDB


LOG_FORMAT = "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"


def setup_logging(verbose: bool = False, log_dir: Optional[str] = None):
    """로깅 설정"""
    logger.remove()
    logger.add(
        sys.stderr,
        format=LOG_FORMAT,
        level="DEBUG" if verbose else "INFO"
    )
    logger.add(
        f"{log_dir or report_config.log_dir}/report_{{time:YYYY-MM-DD}}.log",
        rotation="1 day",
        retention="30 days",
        level="DEBUG"
    )


class WeaponReporter:
    """무기 데미지 리포트 실행기"""

    def __init__(self, data_file: Optional[str] = None, strict: Optional[bool] = None):
        self.data_file = data_file or report_config.data_file
        self.strict = report_config.strict if strict is None else strict
        self.db: Optional[WeaponStatsDB] = None
        self._initialized = False

    async def initialize(self):
        """Supabase 초기화"""
        try:
            self.db = WeaponStatsDB()
            self._initialized = True
            logger.info("Supabase 연결 초기화 완료")
        except Exception as e:
            logger.error(f"초기화 오류: {e}")
            raise

    async def load(self, source: str = "json") -> Dataset:
        """데이터셋 로드 (json 파일 또는 Supabase)"""
        if source == "db":
            if not self._initialized:
                await self.initialize()
            return await self.db.fetch_dataset()
        return load_dataset(self.data_file, strict=self.strict)

    async def write_report(self, source: str = "json", output_format: str = "text",
                           output_file: Optional[str] = None) -> str:
        """리포트 생성 후 파일 저장, 저장 경로 반환"""
        dataset = await self.load(source)
        report = generate_report(dataset)

        output_path = Path(output_file or report_config.output_file)
        if output_path.parent != Path("."):
            output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w", encoding="utf-8") as f:
            if output_format == "json":
                json.dump(report.to_dict(), f, ensure_ascii=False, indent=2)
            else:
                f.write(report.render())

        logger.info(f"리포트 저장: {output_path}")
        return str(output_path)

    async def validate(self) -> bool:
        """weapons.json 검증 결과 출력"""
        data = read_weapons_file(self.data_file)

        technical = TechnicalValidator().validate_weapons_data(data)
        if not technical.is_valid:
            print("\n=== 스키마 오류 ===")
            for issue in technical.errors:
                print(f"  [{issue.severity.value}] {issue.field}: {issue.message}")
            return False

        business = BusinessValidator().validate_dataset(to_dataset(parse_weapons_data(data)))

        print("\n=== 테이블별 레코드 수 ===")
        for table, count in business.table_counts.items():
            print(f"  {table}: {count}개")

        if business.errors:
            print("\n=== 오류 ===")
            for issue in business.errors:
                print(f"  [{issue.severity.value}] {issue.error_type}: {issue.message}")
        if business.warnings:
            print("\n=== 경고 ===")
            for issue in business.warnings:
                print(f"  [{issue.severity.value}] {issue.error_type}: {issue.message}")

        return business.can_build_report

    async def print_damage(self, weapon_name: str, target_range: int, source: str = "json"):
        """무기의 구성별 거리 데미지 출력"""
        dataset = await self.load(source)
        rows = damage_at_range(dataset, weapon_name, target_range)

        print(f"\n=== {weapon_name} @ {target_range}m ===")
        if not rows:
            print("  해당 거리 데이터 없음")
        for row in rows:
            print(
                f"  {row.barrel_type} / {row.ammo_type}: "
                f"{format_damage(row.damage)} (기준 {row.effective_range}m)"
            )

    async def print_best(self, category_name: str, target_range: int, limit: int = 10,
                         source: str = "json"):
        """카테고리 상위 구성 출력"""
        dataset = await self.load(source)
        rows = best_configs_in_category(dataset, category_name, target_range, limit=limit)

        print(f"\n=== {category_name} 상위 {len(rows)}개 @ {target_range}m ===")
        for rank, row in enumerate(rows, 1):
            magazine = f", 탄창 {row.magazine_size}" if row.magazine_size is not None else ""
            print(
                f"  {rank}. {row.weapon_name} - {row.barrel_type} / {row.ammo_type}: "
                f"{format_damage(row.damage)}{magazine}"
            )

    async def print_weapons(self, category_name: str, source: str = "json"):
        """카테고리 무기 목록 출력"""
        dataset = await self.load(source)
        rows = weapons_by_category(dataset, category_name)

        print(f"\n=== {category_name} 무기 {len(rows)}개 ===")
        for row in rows:
            print(f"  {row.weapon_name} (구성 {row.configuration_count}개)")

    async def print_configs(self, weapon_name: str, source: str = "json"):
        """무기 구성별 감쇠 샘플 출력"""
        dataset = await self.load(source)
        rows = weapon_configs(dataset, weapon_name)

        print(f"\n=== {weapon_name} 구성별 감쇠 ===")
        current = None
        for row in rows:
            if (row.barrel_type, row.ammo_type) != current:
                current = (row.barrel_type, row.ammo_type)
                velocity = f" (탄속 {row.velocity})" if row.velocity is not None else ""
                print(f"  {row.barrel_type} / {row.ammo_type}{velocity}")
            print(f"    {row.range}m: {format_damage(row.damage)}")

    async def print_ammo_stats(self, weapon_name: str, source: str = "json"):
        """무기 탄약별 스탯 출력"""
        dataset = await self.load(source)
        rows = weapon_ammo_stats(dataset, weapon_name)

        print(f"\n=== {weapon_name} 탄약 스탯 ===")
        if not rows:
            print("  탄약 스탯 없음")
        for row in rows:
            pellets = f", 펠릿 {row.pellet_count}" if row.pellet_count is not None else ""
            print(
                f"  {row.ammo_type}: 탄창 {row.magazine_size}, "
                f"헤드샷 x{row.headshot_multiplier}{pellets}"
            )

    async def print_details(self, weapon_name: str, source: str = "json"):
        """무기 전체 정보 JSON 출력"""
        dataset = await self.load(source)
        details = weapon_details(dataset, weapon_name)
        print(json.dumps(details.to_dict(), ensure_ascii=False, indent=2, default=str))

    async def init_db(self) -> dict:
        """weapons.json → Supabase"""
        if not self._initialized:
            await self.initialize()
        dataset = load_dataset(self.data_file, strict=True)
        return await self.db.populate_from_dataset(dataset)

    async def get_stats(self) -> dict:
        """Supabase 테이블 통계"""
        if not self._initialized:
            await self.initialize()
        if not await self.db.test_connection():
            raise DatabaseError("Supabase에 연결할 수 없습니다")
        return await self.db.get_table_counts()


async def main():
    """메인 함수"""
    import argparse

    parser = argparse.ArgumentParser(description="BF2042 무기 거리별 데미지 리포트")
    parser.add_argument(
        "--mode",
        choices=["report", "validate", "damage", "best", "weapons", "configs", "ammo", "details",
                 "init-db", "status"],
        default="report",
        help="실행 모드"
    )
    parser.add_argument("--data-file", help="무기 데이터 JSON 경로")
    parser.add_argument("--output", help="리포트 출력 경로")
    parser.add_argument("--source", choices=["json", "db"], default="json", help="데이터 출처")
    parser.add_argument("--format", choices=["text", "json"], default="text", help="리포트 형식")
    parser.add_argument("--weapon", help="무기명 (damage, configs, ammo, details 모드)")
    parser.add_argument("--category", help="카테고리명 (best, weapons 모드)")
    parser.add_argument("--range", type=int, help="거리 (m)")
    parser.add_argument("--limit", type=int, default=10, help="조회 개수 (best 모드)")
    parser.add_argument("--strict", action="store_true", help="검증 오류 시 중단")
    parser.add_argument("--verbose", action="store_true", help="DEBUG 로그 출력")

    args = parser.parse_args()

    setup_logging(args.verbose)

    reporter = WeaponReporter(
        data_file=args.data_file,
        strict=True if args.strict else None
    )

    try:
        if args.mode == "report":
            await reporter.write_report(args.source, args.format, args.output)

        elif args.mode == "validate":
            if not await reporter.validate():
                sys.exit(1)

        elif args.mode == "damage":
            if not args.weapon or args.range is None:
                parser.error("damage 모드는 --weapon과 --range가 필요합니다")
            await reporter.print_damage(args.weapon, args.range, args.source)

        elif args.mode == "best":
            if not args.category or args.range is None:
                parser.error("best 모드는 --category와 --range가 필요합니다")
            await reporter.print_best(args.category, args.range, args.limit, args.source)

        elif args.mode == "weapons":
            if not args.category:
                parser.error("weapons 모드는 --category가 필요합니다")
            await reporter.print_weapons(args.category, args.source)

        elif args.mode in ("configs", "ammo", "details"):
            if not args.weapon:
                parser.error(f"{args.mode} 모드는 --weapon이 필요합니다")
            if args.mode == "configs":
                await reporter.print_configs(args.weapon, args.source)
            elif args.mode == "ammo":
                await reporter.print_ammo_stats(args.weapon, args.source)
            else:
                await reporter.print_details(args.weapon, args.source)

        elif args.mode == "init-db":
            counts = await reporter.init_db()
            print("\n=== 저장 결과 ===")
            for table, count in counts.items():
                print(f"  {table}: {count}개")

        elif args.mode == "status":
            stats = await reporter.get_stats()
            print("\n=== 데이터베이스 통계 ===")
            for table, count in stats.items():
                print(f"  {table}: {count}개")

    except DatasetLoadError as e:
        logger.error(f"데이터 로드 오류: {e}")
        for detail in e.details:
            logger.error(f"  {detail.get('field')}: {detail.get('message')}")
        sys.exit(1)
    except (BallisticsError, DatabaseError, ValueError) as e:
        logger.error(f"실행 오류: {e}")
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
