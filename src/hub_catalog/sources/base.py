"""소스 프로토콜 정의."""

from typing import Any, Protocol

import httpx

from hub_catalog.models import Category


class Source(Protocol):
    """데이터 소스 프로토콜."""

    async def list_items(self, category: Category, limit: int) -> list[dict[str, Any]]:
        """카테고리의 원본 항목 목록을 가져온다."""
        ...


def json_list(response: httpx.Response) -> list[dict[str, Any]]:
    """응답 본문이 JSON 배열인지 확인하고 반환한다.

    Raises:
        ValueError: 본문이 JSON이 아니거나 배열이 아닌 경우
    """
    payload = response.json()
    if not isinstance(payload, list):
        raise ValueError(f"Expected a JSON array from {response.url}")
    return payload
