from pathlib import Path
from typing import Any, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core_config.constants import DEFAULT_PORT, INDEX_FILENAME


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore", populate_by_name=True)

    environment: str = Field(default="dev", alias="ENVIRONMENT")
    service_log_level: str = Field(default="INFO", alias="SERVICE_LOG_LEVEL")
    port: int = Field(default=DEFAULT_PORT, alias="PORT")

    # Static roots. assets/logs/index default to children of public_root.
    public_root: Path = Field(default=Path("public"), alias="PUBLIC_ROOT")
    assets_dir: Optional[Path] = Field(default=None, alias="ASSETS_DIR")
    logs_dir: Optional[Path] = Field(default=None, alias="LOGS_DIR")
    index_file: Optional[Path] = Field(default=None, alias="INDEX_FILE")

    # InnerTube (youtubei/v1) upstream
    innertube_base_url: str = Field(default="https://www.youtube.com", alias="INNERTUBE_BASE_URL")
    innertube_api_key: Optional[str] = Field(default=None, alias="INNERTUBE_API_KEY")
    innertube_client_name: str = Field(default="TVHTML5", alias="INNERTUBE_CLIENT_NAME")
    innertube_client_version: str = Field(default="7.20250101.00.00", alias="INNERTUBE_CLIENT_VERSION")
    innertube_hl: str = Field(default="en", alias="INNERTUBE_HL")
    innertube_gl: str = Field(default="US", alias="INNERTUBE_GL")

    # Other upstream hosts
    video_info_url: str = Field(default="https://www.youtube.com/get_video_info", alias="VIDEO_INFO_URL")
    telemetry_base_url: str = Field(default="https://www.youtube-nocookie.com", alias="TELEMETRY_BASE_URL")
    thumbnail_base_url: str = Field(default="https://i.ytimg.com/vi", alias="THUMBNAIL_BASE_URL")

    def model_post_init(self, __context: Any) -> None:  # type: ignore[override]
        if self.assets_dir is None:
            object.__setattr__(self, "assets_dir", self.public_root / "assets")
        if self.logs_dir is None:
            object.__setattr__(self, "logs_dir", self.public_root / "logs")
        if self.index_file is None:
            object.__setattr__(self, "index_file", self.public_root / INDEX_FILENAME)

    @property
    def innertube_context(self) -> dict:
        """Client context block sent with every InnerTube request."""
        return {
            "client": {
                "clientName": self.innertube_client_name,
                "clientVersion": self.innertube_client_version,
                "hl": self.innertube_hl,
                "gl": self.innertube_gl,
            }
        }


def get_settings(**overrides: Any) -> "Settings":
    return Settings(**overrides)  # type: ignore
