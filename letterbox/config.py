# letterbox/config.py
from pydantic_settings import BaseSettings
from pydantic import ConfigDict
from typing import List, Optional

class Settings(BaseSettings):
    model_config = ConfigDict(env_file=".env", extra="allow")

    # Database (database_url 우선, 없으면 MySQL, 그것도 없으면 로컬 SQLite)
    database_url: Optional[str] = None
    mysql_host: Optional[str] = None
    mysql_port: int = 3306
    mysql_user: str = "letterbox"
    mysql_password: str = ""
    mysql_database: str = "letterbox"
    sqlite_path: str = "letterbox.db"

    # CORS
    cors_origins: List[str] = ["*"]

    # 배달 규칙
    readiness_clamp_hours: int = 8760  # 1년 이상 남은 편지는 배달 가능으로 간주

    # 오버레이 렌더링 기본 캔버스
    overlay_width: int = 600
    overlay_height: int = 800
    overlay_max_side: int = 4096

    # App Settings
    debug: bool = False
    log_level: str = "INFO"

    @property
    def sqlalchemy_url(self) -> str:
        if self.database_url:
            return self.database_url
        if self.mysql_host:
            return (
                f"mysql+aiomysql://{self.mysql_user}:{self.mysql_password}"
                f"@{self.mysql_host}:{self.mysql_port}/{self.mysql_database}"
            )
        return f"sqlite+aiosqlite:///{self.sqlite_path}"

settings = Settings()
