"""GitHub 조직 저장소 소스."""

import logging
from typing import Any

import httpx

from hub_catalog.config import Settings
from hub_catalog.config import settings as default_settings
from hub_catalog.models import Category, RepoStats
from hub_catalog.sources.base import json_list

logger = logging.getLogger(__name__)

# GitHub API의 페이지당 최대 항목 수
MAX_PER_PAGE = 100


class GitHubSource:
    """GitHub API에서 조직의 공개 저장소를 수집한다."""

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

    def _headers(self) -> dict[str, str]:
        """요청 헤더를 생성한다."""
        headers = {"Accept": "application/vnd.github.v3+json"}
        if self.settings.github_token:
            headers["Authorization"] = f"Bearer {self.settings.github_token}"
        return headers

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.settings.github_api_base_url,
            headers=self._headers(),
            timeout=self.settings.request_timeout,
            transport=self.transport,
        )

    async def list_items(self, category: Category, limit: int) -> list[dict[str, Any]]:
        """조직의 공개 저장소 목록을 가져온다.

        Args:
            category: 항상 Category.code
            limit: 페이지당 요청할 항목 수

        Returns:
            저장소 딕셔너리 리스트
        """
        if category is not Category.code:
            raise ValueError(f"GitHubSource does not serve {category.value}")

        org = self.settings.organisation_name
        async with self._client() as client:
            response = await client.get(
                f"/orgs/{org}/repos",
                params={"type": "public", "per_page": min(limit, MAX_PER_PAGE)},
            )
            response.raise_for_status()

        repos = json_list(response)
        logger.info(f"Fetched {len(repos)} repositories for {org}")
        return repos

    async def fetch_repo_stats(self, repo_name: str | None = None) -> RepoStats:
        """카탈로그 저장소의 스타/포크 수와 최신 릴리스를 가져온다."""
        org = self.settings.github_org_name
        repo_name = repo_name or self.settings.catalog_repo_name

        async with self._client() as client:
            response = await client.get(f"/repos/{org}/{repo_name}")
            response.raise_for_status()
            data: dict[str, Any] = response.json()

            latest_release = None
            release = await client.get(f"/repos/{org}/{repo_name}/releases/latest")
            if release.status_code == 200:
                latest_release = release.json().get("tag_name")
            elif release.status_code != 404:
                logger.warning(
                    f"Failed to fetch latest release: {release.status_code}"
                )

        return RepoStats(
            stars=data.get("stargazers_count") or 0,
            forks=data.get("forks_count") or 0,
            latest_release=latest_release,
        )
