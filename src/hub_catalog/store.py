"""카테고리별 항목 캐시 모듈."""

from collections.abc import Iterable

from hub_catalog.models import CatalogItem, Category


class CategoryStore:
    """카테고리별로 정규화된 항목과 태그를 보관한다.

    세션마다 새로 생성하며, 한 번 로드된 카테고리는 세션 동안 만료되지 않는다.
    쓰기는 FetchOrchestrator만 수행한다.
    """

    def __init__(self) -> None:
        self._items: dict[Category, list[CatalogItem]] = {c: [] for c in Category}
        self._tags: dict[Category, set[str]] = {c: set() for c in Category}
        self._loaded: dict[Category, bool] = {c: False for c in Category}

    def is_loaded(self, category: Category) -> bool:
        """카테고리가 로드되었는지 확인한다."""
        return self._loaded[category]

    def loaded_categories(self) -> list[Category]:
        """로드된 카테고리 목록을 정의 순서대로 반환한다."""
        return [c for c in Category if self._loaded[c]]

    def items_for(self, category: Category) -> list[CatalogItem]:
        """카테고리의 항목 목록 사본을 반환한다. 로드 전이면 빈 목록."""
        return list(self._items[category])

    def tags_for(self, category: Category) -> list[str]:
        """카테고리의 소문자 태그를 정렬해 반환한다."""
        return sorted(self._tags[category])

    def populate(self, category: Category, items: Iterable[CatalogItem]) -> None:
        """카테고리 항목을 저장하고 태그를 추가한 뒤 로드 완료로 표시한다."""
        items = list(items)
        tags = {key for item in items for key in item.tag_keys}

        self._items[category] = items
        self._tags[category].update(tags)
        self._loaded[category] = True


def forked_subset(
    items: Iterable[CatalogItem],
    allow_list: Iterable[str],
) -> list[CatalogItem]:
    """표시 이름이 포크 허용 목록에 있는 항목만 남긴다 (대소문자 무시)."""
    allowed = {name.lower() for name in allow_list}
    return [item for item in items if item.display_name.lower() in allowed]
