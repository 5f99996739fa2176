"""검색/필터/정렬 모듈."""

from collections.abc import Callable
from typing import Any

from hub_catalog.config import Settings
from hub_catalog.config import settings as default_settings
from hub_catalog.models import CatalogItem, Category, QueryParams, SortKey, ViewCategory
from hub_catalog.store import CategoryStore, forked_subset

# 정렬 기준별 (키 함수, 내림차순 여부)
_SORTS: dict[SortKey, tuple[Callable[[CatalogItem], Any], bool]] = {
    SortKey.last_modified: (lambda item: item.last_modified, True),
    SortKey.created_at: (lambda item: item.created_at, True),
    SortKey.alphabetical_asc: (lambda item: item.id, False),
    SortKey.alphabetical_desc: (lambda item: item.id, True),
    SortKey.popularity_desc: (lambda item: item.popularity, True),
    SortKey.popularity_asc: (lambda item: item.popularity, False),
}

# 특정 카테고리에만 적용되는 필터: (QueryParams 필드, 카테고리, source_specific 키)
_FACETS = (
    ("library", Category.model, "library_name"),
    ("sdk", Category.space, "sdk"),
)

# 연결된 항목 필터: (QueryParams 필드, 카테고리, 태그 접두사, source_specific 키)
_LINKS = (
    ("model_dataset", Category.model, "dataset", "datasets"),
    ("space_model", Category.space, "model", "models"),
    ("space_dataset", Category.space, "dataset", "datasets"),
)


def matches_search(item: CatalogItem, term: str) -> bool:
    """ID, 설명, 태그 중 하나라도 검색어를 포함하는지 확인한다."""
    term = term.strip().lower()
    if not term:
        return True
    if term in item.id.lower() or term in item.description.lower():
        return True
    return any(term in tag for tag in item.tag_keys)


def matches_tag(item: CatalogItem, tag: str) -> bool:
    """태그 필터와 정확히 일치하는 태그가 있는지 확인한다 (대소문자 무시)."""
    tag = tag.strip().lower()
    return not tag or tag in item.tag_keys


def matches_facets(item: CatalogItem, params: QueryParams) -> bool:
    """라이브러리/SDK 필터를 확인한다. 해당 카테고리가 아닌 항목은 통과한다."""
    for field, category, key in _FACETS:
        wanted = getattr(params, field).strip().lower()
        if not wanted or item.category is not category:
            continue
        value = item.source_specific.get(key)
        if not isinstance(value, str) or value.lower() != wanted:
            return False
    return True


def matches_links(item: CatalogItem, params: QueryParams) -> bool:
    """연결된 데이터셋/모델 필터를 확인한다.

    ID 자체나 'dataset:<id>', 'model:<id>' 형태의 태그, 또는 카드에 적힌
    연결 목록 중 하나와 일치하면 통과한다. 해당 카테고리가 아닌 항목은 통과한다.
    """
    for field, category, prefix, key in _LINKS:
        wanted = getattr(params, field).strip().lower()
        if not wanted or item.category is not category:
            continue
        linked = item.source_specific.get(key) or []
        linked_keys = {str(value).lower() for value in linked}
        if (
            wanted not in item.tag_keys
            and f"{prefix}:{wanted}" not in item.tag_keys
            and wanted not in linked_keys
        ):
            return False
    return True


class QueryEngine:
    """CategoryStore의 항목을 조회 조건에 따라 필터링하고 정렬한다.

    네트워크 요청을 하지 않으며, 로드되지 않은 카테고리는 빈 목록으로 취급한다.
    """

    def __init__(
        self,
        store: CategoryStore,
        settings: Settings | None = None,
    ) -> None:
        self.store = store
        self.settings = settings or default_settings

    def source_items(self, view: ViewCategory) -> list[CatalogItem]:
        """조회 대상 항목을 원래 순서대로 반환한다."""
        if view is ViewCategory.all:
            return [item for c in Category for item in self.store.items_for(c)]
        if view is ViewCategory.forked_code:
            return forked_subset(
                self.store.items_for(Category.code),
                self.settings.forked_repos,
            )
        return self.store.items_for(Category(view.value))

    def evaluate(self, params: QueryParams) -> list[CatalogItem]:
        """조회 조건에 맞는 항목을 정렬해 새 리스트로 반환한다."""
        items = [
            item
            for item in self.source_items(params.category)
            if matches_search(item, params.search_term)
            and matches_tag(item, params.tag)
            and matches_facets(item, params)
            and matches_links(item, params)
        ]

        key, descending = _SORTS[params.sort_key]
        # sorted()는 안정 정렬이며 reverse=True에서도 동순위 순서를 유지한다
        return sorted(items, key=key, reverse=descending)

    def tags_for(self, view: ViewCategory) -> list[str]:
        """로드된 항목의 태그 선택지를 정렬해 반환한다."""
        if view is ViewCategory.all:
            tags = {tag for c in Category for tag in self.store.tags_for(c)}
        elif view is ViewCategory.forked_code:
            tags = {tag for item in self.source_items(view) for tag in item.tag_keys}
        else:
            tags = set(self.store.tags_for(Category(view.value)))
        return sorted(tags)

    def facets_for(self, view: ViewCategory) -> dict[str, list[str]]:
        """로드된 항목의 라이브러리/SDK 선택지와 연결 항목 선택지를 반환한다.

        연결 항목 선택지는 로드된 데이터셋/모델의 ID이며, 조회 대상에 해당
        카테고리가 포함될 때만 채운다.
        """
        items = self.source_items(view)
        facets: dict[str, list[str]] = {}
        for field, category, key in _FACETS:
            values = set()
            for item in items:
                value = item.source_specific.get(key)
                if item.category is category and isinstance(value, str) and value:
                    values.add(value)
            facets[field] = sorted(values)

        for field, category, prefix, _ in _LINKS:
            if view is ViewCategory.all or view.value == category.value:
                linked = self.store.items_for(Category(prefix))
                facets[field] = sorted(item.id for item in linked)
            else:
                facets[field] = []
        return facets
