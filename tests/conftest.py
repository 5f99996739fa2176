"""공용 테스트 픽스처."""

from datetime import UTC, datetime, timedelta
from typing import Any

import httpx
import pytest

from hub_catalog.config import Settings
from hub_catalog.models import CatalogItem, Category

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=UTC)


class FakeApi:
    """경로별로 정해진 응답을 돌려주는 가짜 API.

    라우트 값이 int면 해당 상태 코드, Exception이면 요청 시 발생,
    그 외에는 200 JSON 응답으로 사용한다.
    """

    def __init__(self, routes: dict[str, Any] | None = None) -> None:
        self.routes: dict[str, Any] = routes or {}
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"error": "Not Found"})
        if isinstance(route, Exception):
            raise route
        if isinstance(route, int):
            return httpx.Response(route, json={"error": f"HTTP {route}"})
        return httpx.Response(200, json=route)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def count(self, path: str) -> int:
        """경로별 요청 횟수를 반환한다."""
        return sum(1 for request in self.requests if request.url.path == path)


@pytest.fixture
def test_settings() -> Settings:
    """테스트용 설정을 반환한다."""
    return Settings(
        _env_file=None,
        organisation_name="imageomics",
        github_org_name="Imageomics",
        github_token=None,
        refresh_interval_days=30,
        max_items=100,
        detail_concurrency=2,
        forked_repos=["Fish-Vista"],
        excluded_repos=[".github"],
    )


def github_repo(
    name: str,
    *,
    fork: bool = False,
    topics: list[str] | None = None,
    stars: int = 0,
    created_at: str = "2024-01-01T00:00:00Z",
    updated_at: str = "2024-06-01T00:00:00Z",
    description: str | None = None,
) -> dict[str, Any]:
    """GitHub 저장소 API 응답 항목을 만든다."""
    return {
        "name": name,
        "full_name": f"Imageomics/{name}",
        "description": description,
        "created_at": created_at,
        "updated_at": updated_at,
        "fork": fork,
        "topics": topics or [],
        "stargazers_count": stars,
        "forks_count": 0,
        "language": "Python",
        "html_url": f"https://github.com/Imageomics/{name}",
    }


def hub_item(item_id: str, **extra: Any) -> dict[str, Any]:
    """Hugging Face Hub API 응답 항목을 만든다."""
    item: dict[str, Any] = {
        "id": item_id,
        "createdAt": "2024-01-01T00:00:00.000Z",
        "lastModified": "2024-06-01T00:00:00.000Z",
        "likes": 0,
        "tags": [],
    }
    item.update(extra)
    return item


def make_item(
    item_id: str,
    category: Category = Category.code,
    *,
    tags: list[str] | None = None,
    description: str = "No description provided.",
    popularity: int = 0,
    created_days_ago: int = 100,
    modified_days_ago: int = 10,
    **source_specific: Any,
) -> CatalogItem:
    """테스트용 CatalogItem을 만든다."""
    return CatalogItem(
        id=item_id,
        category=category,
        display_name=item_id.rsplit("/", 1)[-1],
        description=description,
        tags=tags or [],
        created_at=NOW - timedelta(days=created_days_ago),
        last_modified=NOW - timedelta(days=modified_days_ago),
        popularity=popularity,
        external_url=f"https://example.com/{item_id}",
        source_specific=source_specific,
    )
