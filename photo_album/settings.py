from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_title: str = "Photo Album"
    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]

    aws_region: str = "us-east-1"
    aws_endpoint_url: Optional[str] = None
    s3_bucket: str = "photo-album"

    # Store credential; List refuses to run without it
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None

    # Objects are addressed as <blob_public_base_url>/<key>
    blob_public_base_url: Optional[str] = None
    blob_object_acl: Optional[str] = "public-read"

    @property
    def store_configured(self) -> bool:
        return bool(self.aws_access_key_id and self.aws_secret_access_key)

    @property
    def public_base_url(self) -> str:
        if self.blob_public_base_url:
            return self.blob_public_base_url.rstrip("/")
        return f"https://{self.s3_bucket}.s3.{self.aws_region}.amazonaws.com"

settings = Settings()
