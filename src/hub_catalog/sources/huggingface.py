"""Hugging Face Hub 소스 모듈."""

import asyncio
import logging
from typing import Any

import httpx

from hub_catalog.config import Settings
from hub_catalog.config import settings as default_settings
from hub_catalog.errors import DetailFetchFailed
from hub_catalog.models import Category
from hub_catalog.sources.base import json_list

logger = logging.getLogger(__name__)

KIND_PATHS = {
    Category.dataset: "datasets",
    Category.model: "models",
    Category.space: "spaces",
}


class HuggingFaceSource:
    """Hugging Face Hub에서 조직의 데이터셋/모델/스페이스를 수집한다."""

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            settings: 설정. None이면 기본 설정 사용.
            transport: HTTP 트랜스포트 (테스트용)
        """
        self.settings = settings or default_settings
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.settings.hub_api_base_url,
            timeout=self.settings.request_timeout,
            transport=self.transport,
        )

    def _path(self, category: Category) -> str:
        try:
            return KIND_PATHS[category]
        except KeyError:
            raise ValueError(
                f"HuggingFaceSource does not serve {category.value}"
            ) from None

    async def list_items(
        self, category: Category, limit: int, full: bool = True
    ) -> list[dict[str, Any]]:
        """조직이 작성한 항목 목록을 가져온다.

        Args:
            category: dataset, model, space 중 하나
            limit: 최대 항목 수
            full: True면 전체 메타데이터(cardData 등)를 함께 요청

        Returns:
            항목 딕셔너리 리스트
        """
        path = self._path(category)
        async with self._client() as client:
            params: dict[str, Any] = {
                "author": self.settings.organisation_name,
                "limit": limit,
            }
            if full:
                params["full"] = "true"
            response = await client.get(f"/{path}", params=params)
            response.raise_for_status()

        items = json_list(response)
        logger.info(f"Fetched {len(items)} {path}")
        return items

    async def _fetch_detail(
        self,
        client: httpx.AsyncClient,
        semaphore: asyncio.Semaphore,
        path: str,
        item_id: str,
    ) -> dict[str, Any]:
        """개별 항목의 상세 정보를 가져온다.

        Raises:
            DetailFetchFailed: 요청 실패, 200이 아닌 응답, 잘못된 본문
        """
        async with semaphore:
            try:
                response = await client.get(f"/{path}/{item_id}")
            except httpx.RequestError as e:
                raise DetailFetchFailed(item_id, e) from e

        if response.status_code != 200:
            raise DetailFetchFailed(
                item_id, RuntimeError(f"HTTP {response.status_code}")
            )
        try:
            data = response.json()
        except ValueError as e:
            raise DetailFetchFailed(item_id, e) from e
        if not isinstance(data, dict):
            raise DetailFetchFailed(item_id, ValueError("Expected a JSON object"))
        return data

    async def fetch_details(
        self,
        category: Category,
        item_ids: list[str],
        concurrency: int | None = None,
    ) -> list[dict[str, Any] | DetailFetchFailed]:
        """여러 항목의 상세 정보를 병렬로 가져온다.

        모든 요청이 끝날 때까지 기다리며, 실패한 항목은 예외 대신
        DetailFetchFailed 인스턴스로 반환한다.

        Args:
            category: 항목 카테고리
            item_ids: 항목 ID 목록
            concurrency: 동시 요청 수 상한. None이면 설정값 사용.

        Returns:
            item_ids 순서와 같은 결과 리스트
        """
        path = self._path(category)
        semaphore = asyncio.Semaphore(concurrency or self.settings.detail_concurrency)

        async with self._client() as client:
            tasks = [
                self._fetch_detail(client, semaphore, path, item_id)
                for item_id in item_ids
            ]
            results = await asyncio.gather(*tasks, return_exceptions=True)

        details: list[dict[str, Any] | DetailFetchFailed] = []
        for result in results:
            if isinstance(result, BaseException) and not isinstance(
                result, DetailFetchFailed
            ):
                raise result
            details.append(result)
        return details
