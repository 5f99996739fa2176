"""카테고리 로드 오케스트레이터."""

import asyncio
import logging
from collections.abc import Iterable
from typing import Any

import httpx

from hub_catalog.config import Settings
from hub_catalog.config import settings as default_settings
from hub_catalog.errors import (
    CatalogError,
    DetailFetchFailed,
    FetchFailed,
    MalformedRecord,
)
from hub_catalog.models import CatalogItem, Category, ViewCategory
from hub_catalog.normalize import normalize
from hub_catalog.sources import GitHubSource, HuggingFaceSource, Source
from hub_catalog.store import CategoryStore, forked_subset

logger = logging.getLogger(__name__)


def _field(raw: Any, key: str) -> Any:
    return raw.get(key) if isinstance(raw, dict) else None


class FetchOrchestrator:
    """카테고리별로 외부 API를 호출하고 CategoryStore를 채운다.

    카테고리당 세션에서 한 번만 요청한다. 같은 카테고리에 대한 동시 첫 요청은
    카테고리별 잠금으로 하나로 합쳐진다.
    """

    def __init__(
        self,
        store: CategoryStore,
        github: Source | None = None,
        hub: HuggingFaceSource | None = None,
        settings: Settings | None = None,
    ) -> None:
        """
        Args:
            store: 항목을 저장할 CategoryStore
            github: GitHub 소스. None이면 기본 소스 생성.
            hub: Hugging Face 소스. None이면 기본 소스 생성.
            settings: 설정. None이면 기본 설정 사용.
        """
        self.settings = settings or default_settings
        self.store = store
        self.github = github or GitHubSource(self.settings)
        self.hub = hub or HuggingFaceSource(self.settings)
        self.diagnostics: list[CatalogError] = []
        self._locks: dict[Category, asyncio.Lock] = {}

    async def ensure_loaded(
        self, category: ViewCategory | Category | str
    ) -> list[CatalogItem]:
        """카테고리가 로드되었는지 확인하고 항목 목록을 반환한다.

        Args:
            category: 조회할 카테고리 ('all', 'forkedCode' 포함)

        Returns:
            카테고리의 CatalogItem 리스트

        Raises:
            FetchFailed: 목록 요청이 실패한 경우
        """
        view = ViewCategory(category)

        if view is ViewCategory.all:
            return await self.ensure_all_loaded()
        if view is ViewCategory.forked_code:
            code_items = await self._ensure(Category.code)
            return forked_subset(code_items, self.settings.forked_repos)
        return await self._ensure(Category(view.value))

    async def ensure_all_loaded(self) -> list[CatalogItem]:
        """네 카테고리를 모두 로드한다.

        성공한 카테고리는 모두 저장되며, 실패가 있으면 전체가 끝난 뒤
        첫 번째 FetchFailed를 다시 발생시킨다.
        """
        results = await asyncio.gather(
            *(self._ensure(category) for category in Category),
            return_exceptions=True,
        )

        items: list[CatalogItem] = []
        failures: list[FetchFailed] = []
        for result in results:
            if isinstance(result, FetchFailed):
                failures.append(result)
            elif isinstance(result, BaseException):
                raise result
            else:
                items.extend(result)

        if failures:
            raise failures[0]
        return items

    async def _ensure(self, category: Category) -> list[CatalogItem]:
        if self.store.is_loaded(category):
            return self.store.items_for(category)

        lock = self._locks.setdefault(category, asyncio.Lock())
        async with lock:
            # 대기 중에 다른 요청이 로드를 끝냈을 수 있다
            if self.store.is_loaded(category):
                return self.store.items_for(category)

            logger.info(f"Loading {category.value} items")
            try:
                items = await self._load(category)
            except (httpx.HTTPError, ValueError) as e:
                logger.error(f"Failed to load {category.value}: {e}")
                raise FetchFailed(category.value, e) from e

            self.store.populate(category, items)
            logger.info(f"Loaded {len(items)} {category.value} items")
            return self.store.items_for(category)

    async def _load(self, category: Category) -> list[CatalogItem]:
        if category is Category.code:
            return await self._load_code()
        if category is Category.model:
            return await self._load_models()

        raw_items = await self.hub.list_items(category, self.settings.max_items)
        return self._normalize_all(raw_items[: self.settings.max_items], category)

    async def _load_code(self) -> list[CatalogItem]:
        """관리용 저장소와 허용되지 않은 포크를 제외한 저장소를 로드한다."""
        raw_repos = await self.github.list_items(
            Category.code, self.settings.max_items
        )

        excluded = {name.lower() for name in self.settings.excluded_repos}
        allowed_forks = {name.lower() for name in self.settings.forked_repos}

        kept = []
        for repo in raw_repos:
            name = str(_field(repo, "name") or "").lower()
            if name in excluded:
                continue
            if _field(repo, "fork") is True and name not in allowed_forks:
                continue
            kept.append(repo)

        return self._normalize_all(kept[: self.settings.max_items], Category.code)

    async def _load_models(self) -> list[CatalogItem]:
        """모델 ID 목록을 가져온 뒤 상세 정보를 병렬로 요청한다.

        목록 응답에는 cardData 등이 빠져 있어 항목별 상세 요청이 필요하다.
        실패한 상세 요청은 결과에서 제외한다.
        """
        listing = await self.hub.list_items(
            Category.model, self.settings.max_items, full=False
        )

        model_ids: list[str] = []
        for raw in listing[: self.settings.max_items]:
            model_id = _field(raw, "id")
            if not isinstance(model_id, str) or not model_id:
                self._record(MalformedRecord(Category.model.value, model_id))
                continue
            model_ids.append(model_id)

        details = await self.hub.fetch_details(
            Category.model,
            model_ids,
            concurrency=self.settings.detail_concurrency,
        )

        records = []
        for detail in details:
            if isinstance(detail, DetailFetchFailed):
                self._record(detail)
                continue
            records.append(detail)

        return self._normalize_all(records, Category.model)

    def _normalize_all(
        self,
        raw_items: Iterable[Any],
        category: Category,
    ) -> list[CatalogItem]:
        """항목을 정규화한다. 식별자가 없는 항목은 기록 후 제외한다."""
        items = []
        for raw in raw_items:
            try:
                items.append(normalize(raw, category, self.settings))
            except MalformedRecord as e:
                self._record(e)
        return items

    def _record(self, error: CatalogError) -> None:
        logger.warning(str(error))
        self.diagnostics.append(error)
