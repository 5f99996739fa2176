"""데이터 모델 정의."""

from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


class Category(str, Enum):
    """항목 카테고리."""

    code = "code"
    dataset = "dataset"
    model = "model"
    space = "space"


class ViewCategory(str, Enum):
    """조회 가능한 카테고리 (전체 보기와 포크 보기 포함)."""

    all = "all"
    code = "code"
    dataset = "dataset"
    model = "model"
    space = "space"
    forked_code = "forkedCode"


class SortKey(str, Enum):
    """정렬 기준."""

    last_modified = "lastModified"
    created_at = "createdAt"
    alphabetical_asc = "alphabetical"
    alphabetical_desc = "alphabetical-desc"
    popularity_desc = "popularity"
    popularity_asc = "popularity-asc"


def parse_timestamp(value: Any) -> datetime | None:
    """타임스탬프를 파싱한다. 해석할 수 없으면 None을 반환한다."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, int | float):
        try:
            parsed = datetime.fromtimestamp(value, UTC)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def coerce_count(value: Any) -> int:
    """스타/좋아요 수를 정수로 변환한다 (예: '12' -> 12, None -> 0)."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(value, 0)
    if isinstance(value, float):
        return max(int(value), 0)
    if isinstance(value, str):
        try:
            return max(int(value.strip()), 0)
        except ValueError:
            return 0
    return 0


def _coerce_str_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value else []
    if isinstance(value, list | tuple | set):
        return [str(v) for v in value if v is not None and str(v)]
    return []


def _coerce_optional_str(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, int | float) and not isinstance(value, bool):
        return str(value)
    return None


def is_within_window(
    created_at: datetime,
    window_days: int,
    now: datetime | None = None,
) -> bool:
    """생성 시각이 기준 기간 이내인지 확인한다."""
    now = now or datetime.now(UTC)
    return (now - created_at) < timedelta(days=window_days)


# --- 원본 레코드 (소스별) ---


class GitHubRepoRecord(BaseModel):
    """GitHub 저장소 API 응답 항목."""

    full_name: str = Field(min_length=1, description="저장소 전체 이름 (owner/repo)")
    name: str | None = Field(default=None, description="저장소 이름")
    description: str | None = Field(default=None, description="저장소 설명")
    created_at: datetime | None = Field(default=None, description="생성 시각")
    updated_at: datetime | None = Field(default=None, description="마지막 수정 시각")
    fork: bool = Field(default=False, description="포크 여부")
    topics: list[str] = Field(default_factory=list, description="토픽 목록")
    stargazers_count: int = Field(default=0, description="스타 수")
    forks_count: int = Field(default=0, description="포크 수")
    language: str | None = Field(default=None, description="주 프로그래밍 언어")
    html_url: str | None = Field(default=None, description="저장소 URL")

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _lenient_timestamp(cls, value: Any) -> datetime | None:
        return parse_timestamp(value)

    @field_validator("stargazers_count", "forks_count", mode="before")
    @classmethod
    def _lenient_count(cls, value: Any) -> int:
        return coerce_count(value)

    @field_validator("topics", mode="before")
    @classmethod
    def _lenient_topics(cls, value: Any) -> list[str]:
        return _coerce_str_list(value)

    @field_validator("name", "description", "language", "html_url", mode="before")
    @classmethod
    def _lenient_str(cls, value: Any) -> str | None:
        return _coerce_optional_str(value)

    @field_validator("fork", mode="before")
    @classmethod
    def _lenient_fork(cls, value: Any) -> bool:
        return value is True


class HubCardData(BaseModel):
    """Hub 항목의 cardData 메타데이터 블록."""

    model_config = ConfigDict(protected_namespaces=())

    pretty_name: str | None = None
    title: str | None = None
    model_name: str | None = None
    description: str | None = None
    short_description: str | None = None
    tags: list[str] = Field(default_factory=list)
    library_name: str | None = None
    sdk: str | None = None
    datasets: list[str] = Field(default_factory=list)
    models: list[str] = Field(default_factory=list)
    created_at: datetime | None = None

    @field_validator(
        "pretty_name",
        "title",
        "model_name",
        "description",
        "short_description",
        "library_name",
        "sdk",
        mode="before",
    )
    @classmethod
    def _lenient_str(cls, value: Any) -> str | None:
        return _coerce_optional_str(value)

    @field_validator("tags", "datasets", "models", mode="before")
    @classmethod
    def _lenient_list(cls, value: Any) -> list[str]:
        return _coerce_str_list(value)

    @field_validator("created_at", mode="before")
    @classmethod
    def _lenient_timestamp(cls, value: Any) -> datetime | None:
        return parse_timestamp(value)


class HubRecord(BaseModel):
    """Hugging Face Hub API 응답 항목 (공통 필드)."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(min_length=1, description="항목 식별자 (org/name)")
    created_at: datetime | None = Field(default=None, alias="createdAt")
    last_modified: datetime | None = Field(default=None, alias="lastModified")
    likes: int = Field(default=0, description="좋아요 수")
    tags: list[str] = Field(default_factory=list, description="태그 목록")
    description: str | None = Field(default=None, description="설명")
    card_data: HubCardData | None = Field(default=None, alias="cardData")

    @field_validator("created_at", "last_modified", mode="before")
    @classmethod
    def _lenient_timestamp(cls, value: Any) -> datetime | None:
        return parse_timestamp(value)

    @field_validator("likes", mode="before")
    @classmethod
    def _lenient_count(cls, value: Any) -> int:
        return coerce_count(value)

    @field_validator("tags", mode="before")
    @classmethod
    def _lenient_tags(cls, value: Any) -> list[str]:
        return _coerce_str_list(value)

    @field_validator("description", mode="before")
    @classmethod
    def _lenient_str(cls, value: Any) -> str | None:
        return _coerce_optional_str(value)

    @field_validator("card_data", mode="before")
    @classmethod
    def _lenient_card(cls, value: Any) -> Any:
        return value if isinstance(value, dict | HubCardData) else None

    @property
    def card(self) -> HubCardData:
        """cardData가 없으면 빈 블록을 반환한다."""
        return self.card_data or HubCardData()


class HubDatasetRecord(HubRecord):
    """Hub 데이터셋."""


class HubModelRecord(HubRecord):
    """Hub 모델."""

    model_config = ConfigDict(protected_namespaces=())

    library_name: str | None = Field(default=None, description="라이브러리 이름")
    pipeline_tag: str | None = Field(default=None, description="파이프라인 태그")

    @field_validator("library_name", "pipeline_tag", mode="before")
    @classmethod
    def _lenient_model_str(cls, value: Any) -> str | None:
        return _coerce_optional_str(value)


class HubSpaceRecord(HubRecord):
    """Hub 스페이스."""

    sdk: str | None = Field(default=None, description="SDK 이름")
    models: list[str] = Field(default_factory=list, description="연결된 모델")
    datasets: list[str] = Field(default_factory=list, description="연결된 데이터셋")

    @field_validator("sdk", mode="before")
    @classmethod
    def _lenient_sdk(cls, value: Any) -> str | None:
        return _coerce_optional_str(value)

    @field_validator("models", "datasets", mode="before")
    @classmethod
    def _lenient_links(cls, value: Any) -> list[str]:
        return _coerce_str_list(value)


# --- 통합 모델 ---


class CatalogItem(BaseModel):
    """통합 카탈로그 항목 (GitHub + Hub 공통)."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="카테고리 내 고유 ID")
    category: Category = Field(description="카테고리")
    display_name: str = Field(min_length=1, description="표시 이름")
    description: str = Field(description="설명")
    tags: list[str] = Field(default_factory=list, description="태그 (원래 표기)")
    created_at: datetime = Field(description="생성 시각")
    last_modified: datetime = Field(description="마지막 수정 시각")
    popularity: int = Field(default=0, ge=0, description="스타/좋아요 수")
    external_url: str = Field(description="원본 페이지 URL")
    source_specific: dict[str, Any] = Field(
        default_factory=dict, description="소스별 추가 정보"
    )
    freshness_days: int = Field(default=30, ge=1, description="'새 항목' 기준 기간 (일)")

    @property
    def tag_keys(self) -> frozenset[str]:
        """비교용 소문자 태그 집합."""
        return frozenset(tag.lower() for tag in self.tags)

    def is_new(self, now: datetime | None = None) -> bool:
        """호출 시점 기준으로 새 항목인지 계산한다."""
        return is_within_window(self.created_at, self.freshness_days, now)


class QueryParams(BaseModel):
    """조회 조건."""

    category: ViewCategory = Field(default=ViewCategory.all, description="카테고리")
    search_term: str = Field(default="", description="검색어")
    sort_key: SortKey = Field(default=SortKey.last_modified, description="정렬 기준")
    tag: str = Field(default="", description="태그 필터")
    library: str = Field(default="", description="모델 라이브러리 필터")
    sdk: str = Field(default="", description="스페이스 SDK 필터")
    model_dataset: str = Field(default="", description="모델이 사용한 데이터셋 ID")
    space_model: str = Field(default="", description="스페이스가 사용한 모델 ID")
    space_dataset: str = Field(default="", description="스페이스가 사용한 데이터셋 ID")


class RepoStats(BaseModel):
    """카탈로그 저장소 통계."""

    stars: int = Field(default=0, description="스타 수")
    forks: int = Field(default=0, description="포크 수")
    latest_release: str | None = Field(default=None, description="최신 릴리스 태그")
