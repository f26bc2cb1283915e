from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    database_url: str = Field(default="sqlite+pysqlite:///./animehub.db", validation_alias="DATABASE_URL")
    db_auto_create: bool = Field(default=True, validation_alias="DB_AUTO_CREATE")

    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_file: str | None = Field(default=None, validation_alias="LOG_FILE")

    media_root: str = Field(default="./storage/media", validation_alias="MEDIA_ROOT")
    media_url_prefix: str = Field(default="/media", validation_alias="MEDIA_URL_PREFIX")

    default_cover_url: str = Field(default="/images/default_cover.png", validation_alias="DEFAULT_COVER_URL")
    featured_images_limit: int = Field(default=2, ge=1, validation_alias="FEATURED_IMAGES_LIMIT")
    greeting_audio_prefix: str = Field(default="/audio", validation_alias="GREETING_AUDIO_PREFIX")

    @property
    def DATABASE_URL(self) -> str:  # pragma: no cover
        return self.database_url

    @property
    def DB_AUTO_CREATE(self) -> bool:  # pragma: no cover
        return self.db_auto_create


settings = Settings()
