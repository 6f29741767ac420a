"""Markdown artifact rendering and writing."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from models import ResourceList, ResourceType, TalkRecord
from slugs import artifact_filename

TALKS_DIR = os.getenv("TALKS_DIR", "_talks")
RESOURCES_HEADING = "## Resources"

LOGGER = logging.getLogger(__name__)


def render_artifact(record: TalkRecord, resources: ResourceList) -> str:
    """Render the talk as plain Markdown with a fixed line order and no front matter."""
    lines = [
        f"# {record.title}",
        "",
        f"**Conference:** {record.conference}  ",
        f"**Date:** {record.date}  ",
    ]

    slides = resources.first_of(ResourceType.SLIDES)
    if slides:
        lines.append(f"**Slides:** [View Slides]({slides.url})  ")
    video = resources.first_of(ResourceType.VIDEO)
    if video:
        lines.append(f"**Video:** [Watch Video]({video.url})  ")
    lines.append("")

    if record.abstract:
        lines.extend([record.abstract, ""])

    others = resources.others()
    if others:
        lines.extend([RESOURCES_HEADING, ""])
        lines.extend(f"- [{resource.title or resource.url}]({resource.url})" for resource in others)
        lines.append("")

    # Audit trail for re-runs and the regression suite.
    lines.append(f"<!-- Source: {record.source_url} -->")
    return "\n".join(lines) + "\n"


def artifact_path(record: TalkRecord, talks_dir: Path | str = TALKS_DIR) -> Path:
    return Path(talks_dir) / artifact_filename(record.date, record.conference, record.title)


def write_artifact(record: TalkRecord, resources: ResourceList, talks_dir: Path | str = TALKS_DIR) -> Path:
    path = artifact_path(record, talks_dir)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_artifact(record, resources), encoding="utf-8")
    LOGGER.info("Talk file generated: %s", path)
    return path
