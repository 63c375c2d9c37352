"""
Supabase 저장소 패키지
"""

from .supabase_client import DatabaseError, WeaponStatsDB, get_supabase_client

__all__ = [
    "DatabaseError",
    "WeaponStatsDB",
    "get_supabase_client",
]
