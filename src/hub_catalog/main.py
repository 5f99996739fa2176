"""CLI 엔트리포인트."""

import asyncio
import logging
from collections.abc import Callable, Coroutine
from typing import Annotated, Any, TypeVar

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from hub_catalog.config import settings
from hub_catalog.errors import FetchFailed
from hub_catalog.models import CatalogItem, QueryParams, SortKey, ViewCategory
from hub_catalog.orchestrator import FetchOrchestrator
from hub_catalog.query import QueryEngine
from hub_catalog.sources import GitHubSource
from hub_catalog.state import decode_location, encode_state
from hub_catalog.store import CategoryStore

console = Console()

T = TypeVar("T")

app = typer.Typer(
    name="hub-catalog",
    help="조직의 코드, 데이터셋, 모델, 스페이스를 한 곳에서 검색합니다.",
    no_args_is_help=True,
)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _build_orchestrator() -> FetchOrchestrator:
    """세션마다 새 CategoryStore로 오케스트레이터를 만든다."""
    return FetchOrchestrator(CategoryStore(), settings=settings)


def _render_results(items: list[CatalogItem], params: QueryParams) -> None:
    """조회 결과를 Rich 테이블로 렌더링한다."""
    if not items:
        console.print("\n[yellow]조건에 맞는 항목이 없습니다.[/yellow]")
        return

    console.print()
    console.rule(f"[bold blue]{settings.github_org_name} Catalog[/bold blue]")
    console.print()

    table = Table(show_header=True, header_style="bold cyan", expand=True)
    table.add_column("#", style="dim", width=3)
    table.add_column("이름", style="bold", min_width=20)
    table.add_column("종류", width=8)
    table.add_column("설명")
    table.add_column("⭐", justify="right", width=6)
    table.add_column("수정일", width=10)

    for i, item in enumerate(items, 1):
        name = f"[link={item.external_url}]{escape(item.display_name)}[/link]"
        if item.is_new():
            name = f"{name} [green]NEW![/green]"
        table.add_row(
            str(i),
            name,
            item.category.value,
            escape(item.description),
            f"{item.popularity:,}",
            item.last_modified.date().isoformat(),
        )

    console.print(table)
    console.print(f"[dim]{len(items)}개 항목 ({params.category.value})[/dim]")


async def _browse(params: QueryParams) -> tuple[list[CatalogItem], list[str]]:
    """카테고리를 로드한 뒤 조회 결과와 태그 선택지를 반환한다."""
    orchestrator = _build_orchestrator()
    await orchestrator.ensure_loaded(params.category)

    engine = QueryEngine(orchestrator.store, orchestrator.settings)
    return engine.evaluate(params), engine.tags_for(params.category)


def _run(coro_factory: Callable[[], Coroutine[Any, Any, T]], verbose: bool) -> T:
    """비동기 작업을 실행하고 오류를 CLI 종료 코드로 변환한다."""
    _configure_logging(verbose)
    try:
        return asyncio.run(coro_factory())
    except KeyboardInterrupt:
        console.print("\n[dim]중단됨[/dim]")
        raise typer.Exit(0) from None
    except FetchFailed as e:
        console.print(
            f"[red]{e.category} 항목을 불러오지 못했습니다: {escape(str(e.cause))}[/red]"
        )
        raise typer.Exit(1) from e
    except Exception as e:
        console.print(f"[red]오류 발생: {escape(str(e))}[/red]")
        raise typer.Exit(1) from e


@app.command()
def browse(
    category: Annotated[
        ViewCategory | None,
        typer.Option("--category", "-c", help="카테고리"),
    ] = None,
    search: Annotated[
        str | None,
        typer.Option("--search", "-q", help="검색어 (ID, 설명, 태그)"),
    ] = None,
    tag: Annotated[
        str | None,
        typer.Option("--tag", "-t", help="태그 필터"),
    ] = None,
    sort: Annotated[
        SortKey | None,
        typer.Option("--sort", "-s", help="정렬 기준"),
    ] = None,
    library: Annotated[
        str | None,
        typer.Option("--library", help="모델 라이브러리 필터"),
    ] = None,
    sdk: Annotated[
        str | None,
        typer.Option("--sdk", help="스페이스 SDK 필터"),
    ] = None,
    model_dataset: Annotated[
        str | None,
        typer.Option("--model-dataset", help="모델이 사용한 데이터셋 ID"),
    ] = None,
    space_model: Annotated[
        str | None,
        typer.Option("--space-model", help="스페이스가 사용한 모델 ID"),
    ] = None,
    space_dataset: Annotated[
        str | None,
        typer.Option("--space-dataset", help="스페이스가 사용한 데이터셋 ID"),
    ] = None,
    state: Annotated[
        str | None,
        typer.Option("--state", help="공유된 상태 문자열 또는 주소"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="진행 로그 출력"),
    ] = False,
) -> None:
    """항목을 검색하고 필터링합니다."""
    params = decode_location(state) if state else QueryParams()

    overrides = {
        "category": category,
        "search_term": search,
        "tag": tag,
        "sort_key": sort,
        "library": library,
        "sdk": sdk,
        "model_dataset": model_dataset,
        "space_model": space_model,
        "space_dataset": space_dataset,
    }
    params = params.model_copy(
        update={k: v for k, v in overrides.items() if v is not None}
    )

    with console.status("항목을 불러오는 중..."):
        items, tag_choices = _run(lambda: _browse(params), verbose)

    _render_results(items, params)
    if tag_choices:
        console.print(f"[dim]태그: {', '.join(tag_choices)}[/dim]")

    encoded = encode_state(params)
    console.print(f"state: {encoded or '(default)'}", markup=False, highlight=False)


@app.command()
def tags(
    category: Annotated[
        ViewCategory,
        typer.Option("--category", "-c", help="카테고리"),
    ] = ViewCategory.all,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="진행 로그 출력"),
    ] = False,
) -> None:
    """카테고리의 태그 선택지를 출력합니다."""
    _, choices = _run(lambda: _browse(QueryParams(category=category)), verbose)

    if not choices:
        console.print("[yellow]태그가 없습니다.[/yellow]")
        return
    for choice in choices:
        console.print(choice, markup=False, highlight=False)


@app.command()
def stats(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="진행 로그 출력"),
    ] = False,
) -> None:
    """카탈로그 저장소의 스타/포크 수와 최신 릴리스를 출력합니다."""
    source = GitHubSource(settings)
    repo_stats = _run(source.fetch_repo_stats, verbose)

    console.print(
        f"⭐ {repo_stats.stars:,}  🍴 {repo_stats.forks:,}  "
        f"🏷️ {repo_stats.latest_release or '-'}"
    )


if __name__ == "__main__":
    app()
