"""
Supabase 데이터베이스 클라이언트

테이블 구성:
- categories(category_id, category_name)
- weapons(weapon_id, weapon_name, category_id)
- barrels(barrel_id, barrel_name)
- ammo_types(ammo_id, ammo_type_name)
- weapon_ammo_stats(weapon_id, ammo_id, magazine_size, empty_reload_time,
  tactical_reload_time, headshot_multiplier, pellet_count)
- configurations(config_id, weapon_id, barrel_id, ammo_id, velocity,
  rpm_single, rpm_burst, rpm_auto)
- config_dropoffs(config_id, range, damage)
"""
from decimal import Decimal
from typing import List, Optional, Dict, Any, Tuple
from supabase import create_client, Client
from loguru import logger

from ballistics.models import (
    AmmoStats,
    Category,
    Configuration,
    DamageDropoff,
    Dataset,
    Weapon,
)
from data_pipeline.config import supabase_config


# 테이블별 카운트 기준 컬럼
TABLE_KEYS: Dict[str, str] = {
    "categories": "category_id",
    "weapons": "weapon_id",
    "barrels": "barrel_id",
    "ammo_types": "ammo_id",
    "configurations": "config_id",
    "config_dropoffs": "config_id",
    "weapon_ammo_stats": "weapon_id",
}

# PostgREST 기본 최대 행 수
PAGE_SIZE = 1000
BATCH_SIZE = 500


class DatabaseError(Exception):
    """Supabase 요청 실패"""


# 싱글톤 클라이언트
_supabase_client: Optional[Client] = None


def get_supabase_client() -> Client:
    """Supabase 클라이언트 인스턴스 반환 (싱글톤)"""
    global _supabase_client
    if _supabase_client is None:
        if not supabase_config.supabase_url or not supabase_config.supabase_key:
            raise ValueError("SUPABASE_URL과 SUPABASE_KEY 환경변수를 설정해주세요")
        _supabase_client = create_client(
            supabase_config.supabase_url,
            supabase_config.supabase_key
        )
    return _supabase_client


def _to_decimal(value: Any) -> Optional[Decimal]:
    if value is None:
        return None
    return Decimal(str(value))


def _first_unique(rows: List[Dict[str, Any]], keys: Tuple[str, ...]) -> List[Dict[str, Any]]:
    """충돌 키 기준 첫 행만 유지"""
    seen = set()
    result = []
    for row in rows:
        key = tuple(row[k] for k in keys)
        if key in seen:
            continue
        seen.add(key)
        result.append(row)
    return result


class WeaponStatsDB:
    """무기 스탯 저장소"""

    def __init__(self, client: Optional[Client] = None):
        self.client: Client = client if client is not None else get_supabase_client()

    def _execute(self, action: str, query) -> Any:
        try:
            return query.execute()
        except Exception as e:
            logger.error(f"{action} 오류: {e}")
            raise DatabaseError(f"{action} 실패: {e}") from e

    def _select_all(self, table: str, columns: str = "*") -> List[Dict[str, Any]]:
        """페이지 단위로 전체 행 조회"""
        rows: List[Dict[str, Any]] = []
        start = 0
        while True:
            result = self._execute(
                f"{table} 조회",
                self.client.table(table).select(columns).range(start, start + PAGE_SIZE - 1)
            )
            batch = result.data or []
            rows.extend(batch)
            if len(batch) < PAGE_SIZE:
                return rows
            start += PAGE_SIZE

    def _upsert(self, table: str, rows: List[Dict[str, Any]], on_conflict: str,
                ignore_duplicates: bool = False) -> int:
        """배치 upsert, 전송한 행 수 반환"""
        for i in range(0, len(rows), BATCH_SIZE):
            batch = rows[i:i + BATCH_SIZE]
            self._execute(
                f"{table} 저장",
                self.client.table(table).upsert(
                    batch,
                    on_conflict=on_conflict,
                    ignore_duplicates=ignore_duplicates
                )
            )
        return len(rows)

    def _id_map(self, table: str, name_column: str, id_column: str) -> Dict[str, int]:
        return {row[name_column]: row[id_column] for row in self._select_all(table)}

    # ==================== 저장 ====================

    async def populate_from_dataset(self, dataset: Dataset) -> Dict[str, int]:
        """
        데이터셋을 테이블에 저장

        이름 테이블 → 무기 → 탄약 스탯 → 구성 → 감쇠 순서로 저장한다.
        같은 구성/거리가 중복되면 먼저 나온 행만 저장된다.

        Returns:
            테이블별 전송 행 수
        """
        counts: Dict[str, int] = {}

        counts["categories"] = self._upsert(
            "categories",
            _first_unique([{"category_name": c.name} for c in dataset.categories], ("category_name",)),
            on_conflict="category_name"
        )
        counts["barrels"] = self._upsert(
            "barrels",
            [{"barrel_name": name} for name in dataset.barrel_types()],
            on_conflict="barrel_name"
        )
        counts["ammo_types"] = self._upsert(
            "ammo_types",
            [{"ammo_type_name": name} for name in dataset.ammo_types()],
            on_conflict="ammo_type_name"
        )

        category_ids = self._id_map("categories", "category_name", "category_id")
        barrel_ids = self._id_map("barrels", "barrel_name", "barrel_id")
        ammo_ids = self._id_map("ammo_types", "ammo_type_name", "ammo_id")

        weapon_rows = [
            {"weapon_name": weapon.name, "category_id": category_ids[category.name]}
            for category, weapon in dataset.iter_weapons()
        ]
        counts["weapons"] = self._upsert(
            "weapons", _first_unique(weapon_rows, ("weapon_name",)), on_conflict="weapon_name"
        )
        weapon_ids = self._id_map("weapons", "weapon_name", "weapon_id")

        stat_rows = []
        config_rows = []
        for _, weapon in dataset.iter_weapons():
            weapon_id = weapon_ids[weapon.name]
            for ammo_name, stats in weapon.ammo_stats.items():
                stat_rows.append({
                    "weapon_id": weapon_id,
                    "ammo_id": ammo_ids[ammo_name],
                    "magazine_size": stats.magazine_size,
                    "empty_reload_time": str(stats.empty_reload) if stats.empty_reload is not None else None,
                    "tactical_reload_time": str(stats.tactical_reload) if stats.tactical_reload is not None else None,
                    "headshot_multiplier": str(stats.headshot_multiplier),
                    "pellet_count": stats.pellet_count,
                })
            for config in weapon.configurations:
                config_rows.append({
                    "weapon_id": weapon_id,
                    "barrel_id": barrel_ids[config.barrel_type],
                    "ammo_id": ammo_ids[config.ammo_type],
                    "velocity": config.velocity,
                    "rpm_single": config.rpm_single,
                    "rpm_burst": config.rpm_burst,
                    "rpm_auto": config.rpm_auto,
                })

        counts["weapon_ammo_stats"] = self._upsert(
            "weapon_ammo_stats",
            _first_unique(stat_rows, ("weapon_id", "ammo_id")),
            on_conflict="weapon_id,ammo_id"
        )
        counts["configurations"] = self._upsert(
            "configurations",
            _first_unique(config_rows, ("weapon_id", "barrel_id", "ammo_id")),
            on_conflict="weapon_id,barrel_id,ammo_id"
        )

        config_ids = {
            (row["weapon_id"], row["barrel_id"], row["ammo_id"]): row["config_id"]
            for row in self._select_all("configurations")
        }

        dropoff_rows = []
        for _, weapon in dataset.iter_weapons():
            for config in weapon.configurations:
                config_id = config_ids[(
                    weapon_ids[weapon.name],
                    barrel_ids[config.barrel_type],
                    ammo_ids[config.ammo_type],
                )]
                for dropoff in config.dropoffs:
                    dropoff_rows.append({
                        "config_id": config_id,
                        "range": dropoff.range,
                        "damage": str(dropoff.damage),
                    })

        counts["config_dropoffs"] = self._upsert(
            "config_dropoffs",
            _first_unique(dropoff_rows, ("config_id", "range")),
            on_conflict="config_id,range",
            ignore_duplicates=True
        )

        logger.info(f"Supabase 저장 완료: {counts}")
        return counts

    # ==================== 조회 ====================

    async def fetch_dataset(self) -> Dataset:
        """
        전체 테이블을 읽어 데이터셋 구성

        정렬: 카테고리 ID → 무기명 → 총열 → 탄약 → 거리
        """
        categories = sorted(self._select_all("categories"), key=lambda r: r["category_id"])
        weapons = self._select_all("weapons")
        barrel_names = {r["barrel_id"]: r["barrel_name"] for r in self._select_all("barrels")}
        ammo_names = {r["ammo_id"]: r["ammo_type_name"] for r in self._select_all("ammo_types")}
        configs = self._select_all("configurations")
        dropoffs = self._select_all("config_dropoffs")
        ammo_stats = self._select_all("weapon_ammo_stats")

        dropoffs_by_config: Dict[int, List[DamageDropoff]] = {}
        for row in sorted(dropoffs, key=lambda r: (r["config_id"], r["range"])):
            dropoffs_by_config.setdefault(row["config_id"], []).append(
                DamageDropoff(range=row["range"], damage=_to_decimal(row["damage"]))
            )

        weapon_names = {w["weapon_id"]: w["weapon_name"] for w in weapons}

        configs_by_weapon: Dict[int, List[Configuration]] = {}
        for row in configs:
            configs_by_weapon.setdefault(row["weapon_id"], []).append(Configuration(
                weapon_name=weapon_names[row["weapon_id"]],
                barrel_type=barrel_names[row["barrel_id"]],
                ammo_type=ammo_names[row["ammo_id"]],
                dropoffs=tuple(dropoffs_by_config.get(row["config_id"], [])),
                rpm_single=row.get("rpm_single"),
                rpm_burst=row.get("rpm_burst"),
                rpm_auto=row.get("rpm_auto"),
                velocity=row.get("velocity"),
            ))

        stats_by_weapon: Dict[int, Dict[str, AmmoStats]] = {}
        for row in ammo_stats:
            stats_by_weapon.setdefault(row["weapon_id"], {})[ammo_names[row["ammo_id"]]] = AmmoStats(
                magazine_size=row["magazine_size"],
                headshot_multiplier=_to_decimal(row["headshot_multiplier"]),
                empty_reload=_to_decimal(row.get("empty_reload_time")),
                tactical_reload=_to_decimal(row.get("tactical_reload_time")),
                pellet_count=row.get("pellet_count"),
            )

        weapons_by_category: Dict[int, List[Weapon]] = {}
        for row in sorted(weapons, key=lambda r: r["weapon_name"]):
            weapon_configs = sorted(
                configs_by_weapon.get(row["weapon_id"], []),
                key=lambda c: (c.barrel_type, c.ammo_type)
            )
            weapons_by_category.setdefault(row["category_id"], []).append(Weapon(
                name=row["weapon_name"],
                configurations=tuple(weapon_configs),
                ammo_stats=stats_by_weapon.get(row["weapon_id"], {}),
            ))

        dataset = Dataset(categories=tuple(
            Category(
                name=row["category_name"],
                weapons=tuple(weapons_by_category.get(row["category_id"], []))
            )
            for row in categories
        ))
        logger.info(
            f"Supabase 데이터셋 로드: 무기 {dataset.weapon_count}개, 구성 {dataset.configuration_count}개"
        )
        return dataset

    # ==================== 통계 조회 ====================

    async def get_table_counts(self) -> Dict[str, int]:
        """테이블별 레코드 수"""
        counts = {}
        for table, key in TABLE_KEYS.items():
            result = self._execute(
                f"{table} 통계 조회",
                self.client.table(table).select(key, count="exact")
            )
            counts[table] = result.count or 0
        return counts

    async def test_connection(self) -> bool:
        """연결 확인"""
        try:
            self.client.table("categories").select("category_id").limit(1).execute()
            return True
        except Exception as e:
            logger.error(f"Supabase 연결 오류: {e}")
            return False
