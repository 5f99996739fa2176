"""카탈로그 예외 정의."""


class CatalogError(Exception):
    """카탈로그 예외의 기본 클래스."""


class FetchFailed(CatalogError):
    """카테고리 목록 요청이 실패했다."""

    def __init__(self, category: str, cause: BaseException) -> None:
        """
        Args:
            category: 실패한 카테고리
            cause: 원인 예외
        """
        self.category = category
        self.cause = cause
        super().__init__(f"Failed to fetch {category}: {cause}")


class DetailFetchFailed(CatalogError):
    """개별 항목의 상세 정보 요청이 실패했다."""

    def __init__(self, item_id: str, cause: BaseException | None = None) -> None:
        self.item_id = item_id
        self.cause = cause
        super().__init__(f"Failed to fetch details for {item_id}: {cause}")


class MalformedRecord(CatalogError):
    """원본 레코드에서 식별자를 찾을 수 없다."""

    def __init__(self, category: str, raw_identifier: object = None) -> None:
        self.category = category
        self.raw_identifier = raw_identifier
        super().__init__(
            f"Malformed {category} record (identifier: {raw_identifier!r})"
        )
