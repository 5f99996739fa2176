"""데이터 소스 모듈."""

from hub_catalog.sources.base import Source
from hub_catalog.sources.github import GitHubSource
from hub_catalog.sources.huggingface import HuggingFaceSource

__all__ = ["GitHubSource", "HuggingFaceSource", "Source"]
