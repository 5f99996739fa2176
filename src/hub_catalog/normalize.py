"""원본 레코드를 통합 CatalogItem으로 변환하는 모듈.

소스별 원본 레코드(GitHub 저장소, Hub 데이터셋/모델/스페이스)는 각각 하나의
순수 함수로 변환된다. 필드 우선순위는 고정되어 있다.

- 표시 이름: 소스별 pretty name -> title -> ID의 마지막 경로 조각
- 설명: 소스별 상세 설명 -> 일반 설명 -> 기본 문구
- 인기도: 스타/좋아요 수 (없거나 숫자가 아니면 0)
"""

from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from pydantic import ValidationError

from hub_catalog.config import Settings
from hub_catalog.config import settings as default_settings
from hub_catalog.errors import MalformedRecord
from hub_catalog.models import (
    EPOCH,
    CatalogItem,
    Category,
    GitHubRepoRecord,
    HubDatasetRecord,
    HubModelRecord,
    HubRecord,
    HubSpaceRecord,
    is_within_window,
)

PLACEHOLDER_DESCRIPTION = "No description provided."

_RECORD_TYPES: dict[Category, type[GitHubRepoRecord] | type[HubRecord]] = {
    Category.code: GitHubRepoRecord,
    Category.dataset: HubDatasetRecord,
    Category.model: HubModelRecord,
    Category.space: HubSpaceRecord,
}


def slug_from_id(item_id: str) -> str:
    """ID에서 마지막 경로 조각을 추출한다 (예: 'org/name' -> 'name')."""
    slug = item_id.rstrip("/").rsplit("/", 1)[-1]
    return slug or item_id


def is_new(
    created_at: datetime,
    window_days: int,
    now: datetime | None = None,
) -> bool:
    """생성 후 window_days일이 지나지 않았으면 True."""
    return is_within_window(created_at, window_days, now)


def _first_text(*candidates: str | None) -> str | None:
    """비어 있지 않은 첫 번째 문자열을 반환한다."""
    for candidate in candidates:
        if candidate and candidate.strip():
            return candidate.strip()
    return None


def dedupe_tags(*groups: Iterable[str]) -> list[str]:
    """대소문자를 무시하고 중복 태그를 제거한다 (처음 표기 유지)."""
    seen: set[str] = set()
    tags: list[str] = []
    for group in groups:
        for tag in group:
            tag = tag.strip()
            key = tag.lower()
            if not tag or key in seen:
                continue
            seen.add(key)
            tags.append(tag)
    return tags


def _raw_identifier(raw: Mapping[str, Any]) -> object:
    return raw.get("full_name") or raw.get("id") or raw.get("name")


def parse_record(
    raw: Mapping[str, Any],
    category: Category,
) -> GitHubRepoRecord | HubRecord:
    """원본 딕셔너리를 카테고리별 레코드 모델로 파싱한다."""
    if not isinstance(raw, Mapping):
        raise MalformedRecord(category.value, raw)
    try:
        return _RECORD_TYPES[category].model_validate(raw)
    except ValidationError as e:
        raise MalformedRecord(category.value, _raw_identifier(raw)) from e


def normalize_code(
    record: GitHubRepoRecord,
    settings: Settings,
) -> CatalogItem:
    """GitHub 저장소를 CatalogItem으로 변환한다."""
    created_at = record.created_at or record.updated_at or EPOCH
    return CatalogItem(
        id=record.full_name,
        category=Category.code,
        # GitHub에는 title에 해당하는 필드가 없다
        display_name=_first_text(record.name) or slug_from_id(record.full_name),
        description=_first_text(record.description) or PLACEHOLDER_DESCRIPTION,
        tags=dedupe_tags(record.topics),
        created_at=created_at,
        last_modified=record.updated_at or created_at,
        popularity=record.stargazers_count,
        external_url=record.html_url or f"https://github.com/{record.full_name}",
        source_specific={
            "language": record.language,
            "forks": record.forks_count,
            "fork": record.fork,
        },
        freshness_days=settings.refresh_interval_days,
    )


def _hub_item(
    record: HubRecord,
    category: Category,
    url: str,
    title: str | None,
    source_specific: dict[str, Any],
    settings: Settings,
) -> CatalogItem:
    card = record.card
    created_at = record.created_at or card.created_at or record.last_modified or EPOCH
    return CatalogItem(
        id=record.id,
        category=category,
        display_name=_first_text(card.pretty_name, title) or slug_from_id(record.id),
        description=_first_text(
            card.description,
            card.short_description,
            record.description,
        )
        or PLACEHOLDER_DESCRIPTION,
        tags=dedupe_tags(record.tags, card.tags),
        created_at=created_at,
        last_modified=record.last_modified or created_at,
        popularity=record.likes,
        external_url=url,
        source_specific=source_specific,
        freshness_days=settings.refresh_interval_days,
    )


def normalize_dataset(record: HubDatasetRecord, settings: Settings) -> CatalogItem:
    """Hub 데이터셋을 CatalogItem으로 변환한다."""
    return _hub_item(
        record,
        Category.dataset,
        url=f"{settings.hub_web_base_url}/datasets/{record.id}",
        title=record.card.title,
        source_specific={},
        settings=settings,
    )


def normalize_model(record: HubModelRecord, settings: Settings) -> CatalogItem:
    """Hub 모델을 CatalogItem으로 변환한다."""
    card = record.card
    return _hub_item(
        record,
        Category.model,
        url=f"{settings.hub_web_base_url}/{record.id}",
        title=_first_text(card.title, card.model_name),
        source_specific={
            "library_name": record.library_name or card.library_name,
            "pipeline_tag": record.pipeline_tag,
            "datasets": card.datasets,
        },
        settings=settings,
    )


def normalize_space(record: HubSpaceRecord, settings: Settings) -> CatalogItem:
    """Hub 스페이스를 CatalogItem으로 변환한다."""
    card = record.card
    return _hub_item(
        record,
        Category.space,
        url=f"{settings.hub_web_base_url}/spaces/{record.id}",
        title=card.title,
        source_specific={
            "sdk": record.sdk or card.sdk,
            "models": record.models or card.models,
            "datasets": record.datasets or card.datasets,
        },
        settings=settings,
    )


def normalize(
    raw: Mapping[str, Any],
    category: Category,
    settings: Settings | None = None,
) -> CatalogItem:
    """원본 항목 하나를 CatalogItem으로 변환한다.

    Args:
        raw: API 응답의 항목 딕셔너리
        category: 항목의 카테고리
        settings: 설정. None이면 기본 설정 사용.

    Returns:
        변환된 CatalogItem

    Raises:
        MalformedRecord: 식별자 필드가 없거나 형식이 잘못된 경우
    """
    settings = settings or default_settings
    record = parse_record(raw, category)

    if isinstance(record, GitHubRepoRecord):
        return normalize_code(record, settings)
    if isinstance(record, HubModelRecord):
        return normalize_model(record, settings)
    if isinstance(record, HubSpaceRecord):
        return normalize_space(record, settings)
    if isinstance(record, HubDatasetRecord):
        return normalize_dataset(record, settings)

    raise MalformedRecord(category.value, _raw_identifier(raw))
