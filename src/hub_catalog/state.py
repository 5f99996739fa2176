"""조회 조건 직렬화 모듈.

조회 조건을 주소창에 넣을 수 있는 짧은 key=value 문자열로 변환하고 되돌린다.
기본값과 같은 필드는 생략한다.
"""

import logging
import re
from enum import Enum
from urllib.parse import parse_qsl, urlencode, urlsplit

from hub_catalog.models import QueryParams, SortKey, ViewCategory

logger = logging.getLogger(__name__)

# QueryParams 필드 -> 직렬화 키
STATE_KEYS = {
    "category": "category",
    "search_term": "search",
    "sort_key": "sort",
    "tag": "tag",
    "library": "library",
    "sdk": "sdk",
    "model_dataset": "modelDataset",
    "space_model": "spaceModel",
    "space_dataset": "spaceDataset",
}

_DEFAULTS = QueryParams()


def encode_state(params: QueryParams) -> str:
    """기본값이 아닌 필드만 key=value 문자열로 인코딩한다."""
    pairs = []
    for field, key in STATE_KEYS.items():
        value = getattr(params, field)
        if value == getattr(_DEFAULTS, field):
            continue
        if isinstance(value, Enum):
            value = value.value
        pairs.append((key, value))
    return urlencode(pairs)


def _parse(encoded: str) -> dict[str, str]:
    """key=value 문자열을 딕셔너리로 파싱한다. 같은 키는 마지막 값이 남는다."""
    encoded = encoded.strip().lstrip("?#/")
    return dict(parse_qsl(encoded, keep_blank_values=True))


def merge_tiers(*encodings: str) -> dict[str, str]:
    """여러 인코딩을 합친다. 뒤쪽 인코딩의 키가 앞쪽을 덮어쓴다."""
    merged: dict[str, str] = {}
    for encoded in encodings:
        merged.update(_parse(encoded))
    return merged


def params_from_mapping(values: dict[str, str]) -> QueryParams:
    """딕셔너리에서 QueryParams를 만든다. 허용되지 않는 값은 기본값으로 둔다."""
    fields: dict[str, object] = {}

    category = values.get(STATE_KEYS["category"])
    if category is not None:
        try:
            fields["category"] = ViewCategory(category)
        except ValueError:
            logger.info(f"Ignoring unknown category: {category!r}")

    sort_key = values.get(STATE_KEYS["sort_key"])
    if sort_key is not None:
        try:
            fields["sort_key"] = SortKey(sort_key)
        except ValueError:
            logger.info(f"Ignoring unknown sort key: {sort_key!r}")

    for field in (
        "search_term",
        "tag",
        "library",
        "sdk",
        "model_dataset",
        "space_model",
        "space_dataset",
    ):
        value = values.get(STATE_KEYS[field])
        if value is not None:
            fields[field] = value

    return QueryParams(**fields)


def decode_state(encoded: str) -> QueryParams:
    """key=value 문자열을 QueryParams로 디코딩한다."""
    return params_from_mapping(_parse(encoded))


def decode_location(location: str) -> QueryParams:
    """주소(쿼리 문자열 + 프래그먼트)에서 조회 조건을 복원한다.

    쿼리 문자열과 프래그먼트에 같은 키가 있으면 프래그먼트 값을 사용한다.
    'key=value'로 시작하는 문자열은 주소가 아닌 인코딩 문자열로 본다.
    """
    location = location.strip()
    head = re.split(r"[?#]", location, maxsplit=1)[0]
    if head == location or "=" in head:
        return decode_state(location)

    parts = urlsplit(location)
    return params_from_mapping(merge_tiers(parts.query, parts.fragment))
