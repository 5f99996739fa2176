"""레코드 정규화 테스트."""

from datetime import UTC, datetime, timedelta

import pytest

from hub_catalog.config import Settings
from hub_catalog.errors import MalformedRecord
from hub_catalog.models import Category
from hub_catalog.normalize import (
    PLACEHOLDER_DESCRIPTION,
    dedupe_tags,
    is_new,
    normalize,
    slug_from_id,
)
from tests.conftest import NOW, github_repo, hub_item


class TestDisplayName:
    """표시 이름 우선순위 테스트."""

    def test_falls_back_to_slug(self, test_settings: Settings) -> None:
        """cardData가 없으면 ID의 마지막 조각을 사용한다."""
        item = normalize(
            hub_item("imageomics/bioclip"), Category.dataset, test_settings
        )
        assert item.display_name == "bioclip"

    def test_pretty_name_wins_over_title(self, test_settings: Settings) -> None:
        """pretty_name이 title보다 우선한다."""
        raw = hub_item(
            "imageomics/tol",
            cardData={"pretty_name": "Tree of Life", "title": "ToL-10M"},
        )
        assert normalize(raw, Category.dataset, test_settings).display_name == (
            "Tree of Life"
        )

    def test_title_used_without_pretty_name(self, test_settings: Settings) -> None:
        """pretty_name이 없으면 title을 사용한다."""
        raw = hub_item("imageomics/demo", cardData={"title": "BioCLIP Demo"})
        assert normalize(raw, Category.space, test_settings).display_name == (
            "BioCLIP Demo"
        )

    def test_model_name_used_as_title(self, test_settings: Settings) -> None:
        """모델은 model_name을 title 대신 사용할 수 있다."""
        raw = hub_item("imageomics/bioclip", cardData={"model_name": "BioCLIP"})
        assert normalize(raw, Category.model, test_settings).display_name == "BioCLIP"

    def test_blank_pretty_name_is_skipped(self, test_settings: Settings) -> None:
        """공백뿐인 이름은 건너뛴다."""
        raw = hub_item("imageomics/x", cardData={"pretty_name": "   "})
        assert normalize(raw, Category.dataset, test_settings).display_name == "x"

    def test_code_uses_short_name(self, test_settings: Settings) -> None:
        """GitHub 저장소는 짧은 이름을 사용한다."""
        item = normalize(github_repo("Fish-Vista"), Category.code, test_settings)
        assert item.id == "Imageomics/Fish-Vista"
        assert item.display_name == "Fish-Vista"

    def test_code_without_name_uses_slug(self, test_settings: Settings) -> None:
        """name이 없으면 full_name에서 추출한다."""
        raw = github_repo("pybioclip")
        del raw["name"]
        assert normalize(raw, Category.code, test_settings).display_name == (
            "pybioclip"
        )

    def test_slug_from_id(self) -> None:
        """경로 구분자 뒤의 문자열을 추출한다."""
        assert slug_from_id("org/name") == "name"
        assert slug_from_id("name") == "name"
        assert slug_from_id("org/name/") == "name"


class TestDescription:
    """설명 우선순위 테스트."""

    def test_card_description_first(self, test_settings: Settings) -> None:
        raw = hub_item(
            "imageomics/a",
            description="generic",
            cardData={"description": "rich", "short_description": "short"},
        )
        assert normalize(raw, Category.dataset, test_settings).description == "rich"

    def test_generic_description_fallback(self, test_settings: Settings) -> None:
        raw = hub_item("imageomics/a", description="generic")
        assert normalize(raw, Category.dataset, test_settings).description == (
            "generic"
        )

    def test_placeholder(self, test_settings: Settings) -> None:
        """설명이 없으면 기본 문구를 사용한다."""
        assert (
            normalize(hub_item("imageomics/a"), Category.model, test_settings)
            .description
            == PLACEHOLDER_DESCRIPTION
        )
        assert (
            normalize(github_repo("repo"), Category.code, test_settings).description
            == "No description provided."
        )


class TestPopularity:
    """인기도 변환 테스트."""

    @pytest.mark.parametrize(
        ("likes", "expected"),
        [(12, 12), ("7", 7), ("many", 0), (None, 0), (-3, 0)],
    )
    def test_likes_coerced(
        self, test_settings: Settings, likes: object, expected: int
    ) -> None:
        raw = hub_item("imageomics/a", likes=likes)
        assert normalize(raw, Category.dataset, test_settings).popularity == expected

    def test_missing_stars_is_zero(self, test_settings: Settings) -> None:
        raw = github_repo("repo")
        del raw["stargazers_count"]
        assert normalize(raw, Category.code, test_settings).popularity == 0


class TestTags:
    """태그 처리 테스트."""

    def test_dedupe_keeps_first_spelling(self) -> None:
        assert dedupe_tags(["Vision", "vision", "biology"], ["Biology", "fish"]) == [
            "Vision",
            "biology",
            "fish",
        ]

    def test_hub_tags_merge_card_tags(self, test_settings: Settings) -> None:
        raw = hub_item(
            "imageomics/a",
            tags=["Vision", "license:mit"],
            cardData={"tags": ["vision", "CLIP"]},
        )
        item = normalize(raw, Category.dataset, test_settings)
        assert item.tags == ["Vision", "license:mit", "CLIP"]
        assert item.tag_keys == frozenset({"vision", "license:mit", "clip"})

    def test_missing_topics(self, test_settings: Settings) -> None:
        raw = github_repo("repo")
        raw["topics"] = None
        assert normalize(raw, Category.code, test_settings).tags == []


class TestFreshness:
    """'새 항목' 판정 테스트."""

    def test_five_days_old_is_new(self) -> None:
        assert is_new(NOW - timedelta(days=5), 30, now=NOW) is True

    def test_forty_days_old_is_not_new(self) -> None:
        assert is_new(NOW - timedelta(days=40), 30, now=NOW) is False

    def test_item_recomputes_against_now(self, test_settings: Settings) -> None:
        """is_new는 호출 시점 기준으로 다시 계산된다."""
        created = NOW - timedelta(days=5)
        raw = hub_item("imageomics/a", createdAt=created.isoformat())
        item = normalize(raw, Category.dataset, test_settings)

        assert item.is_new(now=NOW) is True
        assert item.is_new(now=NOW + timedelta(days=60)) is False

    def test_window_comes_from_settings(self, test_settings: Settings) -> None:
        settings = test_settings.model_copy(update={"refresh_interval_days": 3})
        raw = hub_item("imageomics/a", createdAt=(NOW - timedelta(days=5)).isoformat())
        assert normalize(raw, Category.dataset, settings).is_new(now=NOW) is False


class TestTimestamps:
    """타임스탬프 처리 테스트."""

    def test_created_falls_back_to_last_modified(self, test_settings: Settings) -> None:
        raw = hub_item("imageomics/a")
        del raw["createdAt"]
        item = normalize(raw, Category.dataset, test_settings)
        assert item.created_at == datetime(2024, 6, 1, tzinfo=UTC)

    def test_unparsable_timestamp_is_ignored(self, test_settings: Settings) -> None:
        raw = hub_item("imageomics/a", lastModified="yesterday")
        item = normalize(raw, Category.dataset, test_settings)
        assert item.last_modified == item.created_at

    def test_out_of_range_epoch_is_ignored(self, test_settings: Settings) -> None:
        """범위를 벗어난 숫자 타임스탬프는 없는 값으로 취급한다."""
        raw = hub_item("imageomics/a", createdAt=1e20)
        item = normalize(raw, Category.dataset, test_settings)
        assert item.created_at == datetime(2024, 6, 1, tzinfo=UTC)

    def test_code_timestamps(self, test_settings: Settings) -> None:
        item = normalize(github_repo("repo"), Category.code, test_settings)
        assert item.created_at == datetime(2024, 1, 1, tzinfo=UTC)
        assert item.last_modified == datetime(2024, 6, 1, tzinfo=UTC)


class TestSourceSpecific:
    """소스별 필드와 URL 테스트."""

    def test_external_urls(self, test_settings: Settings) -> None:
        web = test_settings.hub_web_base_url
        assert (
            normalize(hub_item("o/d"), Category.dataset, test_settings).external_url
            == f"{web}/datasets/o/d"
        )
        assert (
            normalize(hub_item("o/m"), Category.model, test_settings).external_url
            == f"{web}/o/m"
        )
        assert (
            normalize(hub_item("o/s"), Category.space, test_settings).external_url
            == f"{web}/spaces/o/s"
        )

    def test_model_library(self, test_settings: Settings) -> None:
        raw = hub_item("o/m", library_name="open_clip", pipeline_tag="zero-shot")
        item = normalize(raw, Category.model, test_settings)
        assert item.source_specific["library_name"] == "open_clip"
        assert item.source_specific["pipeline_tag"] == "zero-shot"

    def test_space_sdk(self, test_settings: Settings) -> None:
        raw = hub_item("o/s", sdk="gradio", models=["o/m"])
        item = normalize(raw, Category.space, test_settings)
        assert item.source_specific["sdk"] == "gradio"
        assert item.source_specific["models"] == ["o/m"]


class TestMalformed:
    """식별자 누락 테스트."""

    def test_missing_hub_id(self, test_settings: Settings) -> None:
        raw = hub_item("o/a")
        del raw["id"]
        with pytest.raises(MalformedRecord) as exc_info:
            normalize(raw, Category.dataset, test_settings)
        assert exc_info.value.category == "dataset"

    def test_missing_full_name(self, test_settings: Settings) -> None:
        raw = github_repo("repo")
        del raw["full_name"]
        with pytest.raises(MalformedRecord) as exc_info:
            normalize(raw, Category.code, test_settings)
        assert exc_info.value.raw_identifier == "repo"

    def test_not_a_mapping(self, test_settings: Settings) -> None:
        with pytest.raises(MalformedRecord):
            normalize(["o/a"], Category.model, test_settings)  # type: ignore[arg-type]
