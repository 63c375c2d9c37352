"""
리포트 설정
"""
from pydantic_settings import BaseSettings
from pydantic import Field
from dotenv import load_dotenv

load_dotenv()


class ReportConfig(BaseSettings):
    """리포트 생성 설정"""

    # 입출력
    data_file: str = Field(default="weapons.json", description="무기 데이터 JSON 경로")
    output_file: str = Field(default="output.txt", description="리포트 출력 경로")

    # 로그
    log_dir: str = Field(default="logs", description="로그 디렉토리")

    # 검증 실패 시 중단 여부
    strict: bool = Field(default=False, description="비즈니스 검증 오류 시 리포트 생성 중단")

    class Config:
        env_prefix = "REPORT_"
        case_sensitive = False


class SupabaseConfig(BaseSettings):
    """Supabase 설정"""

    supabase_url: str = Field(default="", description="Supabase Project URL")
    supabase_key: str = Field(default="", description="Supabase service key")

    class Config:
        env_prefix = ""
        case_sensitive = False


# 전역 설정 인스턴스
report_config = ReportConfig()
supabase_config = SupabaseConfig()
