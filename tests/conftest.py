"""
Pytest configuration and fixtures for weapon damage report tests
"""

import copy
import json
import pytest
import sys
from decimal import Decimal
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Dict, List

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))


SAMPLE_WEAPONS_DATA: Dict[str, Any] = {
    "categories": [
        {
            "name": "Assault Rifles",
            "weapons": [
                {
                    "name": "M5A3",
                    "stats": [
                        {
                            "barrelType": "Factory",
                            "ammoType": "Standard Issue",
                            "dropoffs": [
                                {"range": 0, "damage": Decimal("25")},
                                {"range": 40, "damage": Decimal("22")},
                                {"range": 60, "damage": Decimal("18")},
                            ],
                            "velocity": 560,
                            "rpmAuto": 800,
                        },
                        {
                            "barrelType": "CQB",
                            "ammoType": "Standard Issue",
                            "dropoffs": [
                                {"range": 0, "damage": Decimal("25")},
                                {"range": 40, "damage": Decimal("22")},
                                {"range": 60, "damage": Decimal("16")},
                            ],
                            "velocity": 500,
                            "rpmAuto": 900,
                        },
                        {
                            "barrelType": "Factory",
                            "ammoType": "Armor Piercing (Single)",
                            "dropoffs": [
                                {"range": 0, "damage": Decimal("30")},
                                {"range": 50, "damage": Decimal("25")},
                            ],
                            "velocity": 600,
                            "rpmSingle": 400,
                        },
                    ],
                    "ammoStats": {
                        "Standard Issue": {
                            "magSize": 30,
                            "headshotMultiplier": Decimal("1.5"),
                            "emptyReload": Decimal("2.4"),
                            "tacticalReload": Decimal("1.9"),
                        },
                        "Armor Piercing (Single)": {
                            "magSize": 20,
                            "headshotMultiplier": Decimal("1.5"),
                        },
                    },
                },
                {
                    "name": "AC-42",
                    "stats": [
                        {
                            "barrelType": "Factory",
                            "ammoType": "Armor Piercing (Burst/Auto)",
                            "dropoffs": [
                                {"range": 0, "damage": Decimal("28")},
                                {"range": 30, "damage": Decimal("24")},
                            ],
                            "velocity": 610,
                            "rpmBurst": 720,
                        },
                    ],
                },
            ],
        },
        {
            "name": "Shotguns",
            "weapons": [
                {
                    "name": "NVK-S22",
                    "stats": [
                        {
                            "barrelType": "Factory",
                            "ammoType": "#00 Buckshot",
                            "dropoffs": [
                                {"range": 0, "damage": Decimal("20")},
                                {"range": 10, "damage": Decimal("12")},
                                {"range": 25, "damage": Decimal("6")},
                            ],
                            "velocity": 350,
                            "rpmSingle": 80,
                        },
                    ],
                    "ammoStats": {
                        "#00 Buckshot": {
                            "magSize": 4,
                            "headshotMultiplier": Decimal("1.1"),
                            "pelletCount": 8,
                        },
                    },
                },
            ],
        },
    ]
}


def _json_number(value):
    """Decimal → JSON 숫자 (소수점 없으면 int)"""
    return float(value) if "." in str(value) else int(value)


@pytest.fixture(scope="function")
def sample_weapons_data():
    """weapons.json 형식 샘플 (Decimal 값)"""
    return copy.deepcopy(SAMPLE_WEAPONS_DATA)


@pytest.fixture(scope="function")
def sample_dataset(sample_weapons_data):
    """검증을 통과하는 샘플 데이터셋"""
    from data_pipeline.loader import load_dataset_from_data
    return load_dataset_from_data(sample_weapons_data)


@pytest.fixture(scope="function")
def weapons_file(tmp_path):
    """디스크에 기록한 weapons.json"""
    path = tmp_path / "weapons.json"
    path.write_text(json.dumps(SAMPLE_WEAPONS_DATA, default=_json_number), encoding="utf-8")
    return path


# =============================================================================
# Supabase 가짜 클라이언트
# =============================================================================

# 자동 증가 ID 컬럼
FAKE_ID_COLUMNS = {
    "categories": "category_id",
    "weapons": "weapon_id",
    "barrels": "barrel_id",
    "ammo_types": "ammo_id",
    "configurations": "config_id",
}


class FakeQuery:
    """client.table(...) 체인 흉내 (select / upsert / range / limit / eq)"""

    def __init__(self, client: "FakeSupabaseClient", table: str):
        self.client = client
        self.table = table
        self.operation = "select"
        self.rows: List[Dict[str, Any]] = []
        self.on_conflict = ""
        self.ignore_duplicates = False
        self.count = None
        self.start = None
        self.end = None
        self.filters: List[tuple] = []

    def select(self, *columns, count=None):
        self.operation = "select"
        self.count = count
        return self

    def upsert(self, rows, on_conflict="", ignore_duplicates=False):
        self.operation = "upsert"
        self.rows = rows if isinstance(rows, list) else [rows]
        self.on_conflict = on_conflict
        self.ignore_duplicates = ignore_duplicates
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def range(self, start, end):
        self.start, self.end = start, end
        return self

    def limit(self, size):
        self.start, self.end = 0, size - 1
        return self

    def execute(self):
        self.client.calls.append((self.operation, self.table))
        if self.table in self.client.fail_tables:
            raise RuntimeError(f"{self.table} 요청 실패")
        if self.operation == "upsert":
            return SimpleNamespace(data=self._apply_upsert(), count=None)

        rows = [
            dict(row) for row in self.client.tables.setdefault(self.table, [])
            if all(row.get(c) == v for c, v in self.filters)
        ]
        total = len(rows)
        if self.start is not None:
            rows = rows[self.start:self.end + 1]
        return SimpleNamespace(data=rows, count=total if self.count else None)

    def _apply_upsert(self):
        stored = self.client.tables.setdefault(self.table, [])
        keys = [k for k in self.on_conflict.split(",") if k]
        id_column = FAKE_ID_COLUMNS.get(self.table)
        written = []
        for row in self.rows:
            existing = next(
                (s for s in stored if keys and all(s.get(k) == row.get(k) for k in keys)),
                None
            )
            if existing is not None:
                if not self.ignore_duplicates:
                    existing.update(row)
                    written.append(dict(existing))
                continue
            new_row = dict(row)
            if id_column:
                self.client.next_ids[self.table] = self.client.next_ids.get(self.table, 0) + 1
                new_row[id_column] = self.client.next_ids[self.table]
            stored.append(new_row)
            written.append(dict(new_row))
        return written


class FakeSupabaseClient:
    """메모리 기반 Supabase 클라이언트"""

    def __init__(self, fail_tables=None):
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.next_ids: Dict[str, int] = {}
        self.calls: List[tuple] = []
        self.fail_tables = set(fail_tables or [])

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)


@pytest.fixture(scope="function")
def fake_supabase():
    return FakeSupabaseClient()


@pytest.fixture(scope="function")
def failing_supabase():
    return FakeSupabaseClient(fail_tables=["categories"])
