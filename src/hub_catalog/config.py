"""설정 관리 모듈."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """애플리케이션 설정."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # 조직 / 저장소
    organisation_name: str = Field(
        default="imageomics",
        description="API 호출에 사용할 조직 이름 (소문자)",
    )
    github_org_name: str = Field(
        default="Imageomics",
        description="GitHub 조직 표시 이름",
    )
    catalog_repo_name: str = Field(
        default="catalog",
        description="카탈로그 자체 저장소 이름 (통계 배지용)",
    )

    # API
    github_api_base_url: str = Field(
        default="https://api.github.com",
        description="GitHub REST API 기본 URL",
    )
    hub_api_base_url: str = Field(
        default="https://huggingface.co/api",
        description="Hugging Face Hub API 기본 URL",
    )
    hub_web_base_url: str = Field(
        default="https://huggingface.co",
        description="Hugging Face Hub 웹 URL",
    )
    github_token: str | None = Field(default=None, description="GitHub API 토큰")
    request_timeout: float = Field(
        default=10.0,
        gt=0,
        description="HTTP 요청 타임아웃 (초)",
    )

    # 동작
    refresh_interval_days: int = Field(
        default=30,
        ge=1,
        description="'새 항목'으로 표시할 기간 (일)",
    )
    max_items: int = Field(
        default=100,
        ge=1,
        description="카테고리별 최대 항목 수",
    )
    detail_concurrency: int = Field(
        default=10,
        ge=1,
        description="동시에 요청할 모델 상세 정보 최대 개수",
    )

    forked_repos: list[str] = Field(
        default=[
            "Fish-Vista",
            "PhyloNN",
            "telemetry-dashboard",
            "docker-workshop",
        ],
        description="포크지만 목록에 포함할 저장소 이름",
    )
    excluded_repos: list[str] = Field(
        default=[".github"],
        description="목록에서 항상 제외할 관리용 저장소 이름",
    )


settings = Settings()
