"""Shared typed models for the talk migration pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterator


class ResourceType(str, Enum):
    SLIDES = "slides"
    VIDEO = "video"
    CODE = "code"
    LINK = "link"


class TalkStatus(str, Enum):
    COMPLETED = "completed"
    VIDEO_PENDING = "video-pending"


@dataclass(frozen=True, slots=True)
class Resource:
    """One resource attached to a talk (slides, video, repository or link)."""

    type: ResourceType
    title: str
    url: str
    description: str = ""


@dataclass(slots=True)
class TalkRecord:
    """Evolving state of one talk migration, filled in step by step."""

    source_url: str
    title: str = ""
    date: str = ""
    conference: str = ""
    speaker: str = ""
    abstract: str = ""
    status: TalkStatus = TalkStatus.VIDEO_PENDING


class ResourceList:
    """URL-unique resource collection with fixed head slots for slides and video.

    Iteration order is: the slides slot, the head video, then every other
    extracted resource in extraction order. The slides slot holds the head
    slides or, without one, the first extracted slides resource. Adding a
    URL that is already present is a no-op and returns False.
    """

    def __init__(self, resources: list[Resource] | None = None) -> None:
        self._head_slides: Resource | None = None
        self._head_video: Resource | None = None
        self._extracted: list[Resource] = []
        for resource in resources or []:
            self.add(resource)

    def __contains__(self, url: object) -> bool:
        return any(resource.url == url for resource in self)

    def __iter__(self) -> Iterator[Resource]:
        return iter(self.items())

    def __len__(self) -> int:
        return len(self.items())

    def add(self, resource: Resource) -> bool:
        if resource.url in self:
            return False
        self._extracted.append(resource)
        return True

    def prepend_slides(self, resource: Resource) -> bool:
        if resource.url in self:
            return False
        self._head_slides = resource
        return True

    def prepend_video(self, resource: Resource) -> bool:
        if resource.url in self:
            return False
        self._head_video = resource
        return True

    def items(self) -> list[Resource]:
        rest = list(self._extracted)
        slides = self._head_slides
        if slides is None:
            slides = next((r for r in rest if r.type is ResourceType.SLIDES), None)
            if slides is not None:
                rest.remove(slides)
        head = [r for r in (slides, self._head_video) if r is not None]
        return [*head, *rest]

    def first_of(self, resource_type: ResourceType) -> Resource | None:
        return next((r for r in self if r.type is resource_type), None)

    def others(self) -> list[Resource]:
        """Resources listed in the artifact's Resources section."""
        return [r for r in self if r.type not in (ResourceType.SLIDES, ResourceType.VIDEO)]


@dataclass(slots=True)
class MigrationResult:
    """Outcome of one single-talk migration run."""

    url: str
    success: bool
    errors: list[str] = field(default_factory=list)
    artifact_path: Path | None = None
    record: TalkRecord | None = None
    resources: list[Resource] = field(default_factory=list)
    tests_passed: bool | None = None


@dataclass(slots=True)
class MigrationOutcome:
    """Per-URL success/failure ledger for a speaker batch run."""

    succeeded: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failed)

    @property
    def success(self) -> bool:
        """True when at least one talk ran and none failed."""
        return self.total > 0 and not self.failed

    @property
    def success_rate(self) -> float:
        if not self.total:
            return 0.0
        return round(len(self.succeeded) / self.total * 100, 1)
