from __future__ import annotations

from pathlib import Path

import pytest

from conftest import ABSTRACT, TALK_URL, make_page
from errors import ExtractionError
from metadata import (
    UNKNOWN_SPEAKER,
    conference_from_known_patterns,
    conference_from_platform_domain,
    conference_from_presentation_line,
    conference_from_structured_data,
    date_from_existing_files,
    date_from_page_text,
    date_from_time_element,
    extract_metadata,
    extract_title,
    normalize_date,
    speaker_for_url,
)


def _body(inner: str) -> str:
    return f"<html><body>{inner}</body></html>"


def test_extract_metadata_full_page(sample_page, tmp_path: Path) -> None:
    record = extract_metadata(sample_page, talks_dir=tmp_path / "_talks", pdf_dir=tmp_path / "pdfs")

    assert record.title == "Robocoders: Judgment Day – AI IDEs Face Off"
    assert record.conference == "Devoxx Poland 2025"
    assert record.date == "2025-06-11"
    assert record.speaker == "Baruch Sadogursky"
    assert record.abstract == ABSTRACT
    assert record.source_url == TALK_URL


def test_multiline_title_is_collapsed_to_one_line() -> None:
    page = make_page(_body("<h1>\n    Robocoders:\n    Judgment Day\n</h1>"))
    assert extract_title(page) == "Robocoders: Judgment Day"


def test_missing_title_is_fatal(tmp_path: Path) -> None:
    page = make_page(_body("<p>Devoxx Poland 2025, June 11, 2025</p>"))

    with pytest.raises(ExtractionError) as excinfo:
        extract_metadata(page, talks_dir=tmp_path, pdf_dir=tmp_path)

    assert excinfo.value.messages == ["No title found (missing h1 element)"]


def test_missing_conference_and_date_are_both_reported(tmp_path: Path) -> None:
    page = make_page(_body("<h1>Untitled</h1><p>Nothing useful here</p>"), url="https://example.com/talk")

    with pytest.raises(ExtractionError) as excinfo:
        extract_metadata(page, talks_dir=tmp_path, pdf_dir=tmp_path)

    assert len(excinfo.value.messages) == 2
    assert "conference" in excinfo.value.messages[0]
    assert "date" in excinfo.value.messages[1]


# ---------------------------------------------------------------------------
# Date strategies
# ---------------------------------------------------------------------------

def test_time_element_datetime_keeps_calendar_date() -> None:
    page = make_page(_body('<time datetime="2025-06-20T08:00:00+02:00">Friday</time>'))
    assert date_from_time_element(page) == "2025-06-20"


def test_time_element_without_datetime_is_skipped() -> None:
    page = make_page(_body("<time>June 20, 2025</time>"))
    assert date_from_time_element(page) is None


@pytest.mark.parametrize("text, expected", [
    ("Presented on June 20, 2025 in Kraków", "2025-06-20"),
    ("Presented on Jun 3, 2024", "2024-06-03"),
    ("Published 2023-11-02 by the organizers", "2023-11-02"),
    ("Talk at 10, 2025 then June 5, 2025", "2025-06-05"),
])
def test_date_from_page_text(text: str, expected: str) -> None:
    assert date_from_page_text(make_page(_body(f"<p>{text}</p>"))) == expected


def test_date_from_page_text_none_when_only_month_year() -> None:
    assert date_from_page_text(make_page(_body("<p>June 2025</p>"))) is None


def test_date_from_existing_files_reuses_conference_date(tmp_path: Path) -> None:
    talks_dir = tmp_path / "_talks"
    talks_dir.mkdir()
    (talks_dir / "2025-06-11-devoxx-poland-2025-earlier-talk.md").write_text("# Earlier\n")
    (talks_dir / "2024-10-01-jfokus-2024-other.md").write_text("# Other\n")

    strategy = date_from_existing_files("Devoxx Poland 2025", talks_dir, tmp_path / "pdfs")

    assert strategy(make_page(_body("<p>x</p>"))) == "2025-06-11"


def test_existing_file_date_wins_over_page(tmp_path: Path) -> None:
    pdf_dir = tmp_path / "pdfs"
    pdf_dir.mkdir()
    (pdf_dir / "2025-06-12-devoxx-poland-2025-deck.pdf").write_bytes(b"%PDF")
    page = make_page(_body(
        "<h1>Talk</h1><p>Devoxx Poland 2025</p>"
        '<time datetime="2025-06-20T08:00:00+02:00">x</time>'
    ))

    record = extract_metadata(page, talks_dir=tmp_path / "_talks", pdf_dir=pdf_dir)

    assert record.date == "2025-06-12"


@pytest.mark.parametrize("raw, expected", [
    ("2025-06-20", "2025-06-20"),
    ("2025-06-20T08:00:00Z", "2025-06-20"),
    ("2025-06-20T23:30:00-07:00", "2025-06-20"),
    ("June 20, 2025", "2025-06-20"),
    ("2025-02-30", None),
    ("not a date", None),
])
def test_normalize_date(raw: str, expected: str | None) -> None:
    assert normalize_date(raw) == expected


# ---------------------------------------------------------------------------
# Conference strategies
# ---------------------------------------------------------------------------

def test_presentation_line_is_truncated_to_six_words() -> None:
    page = make_page(_body(
        "<p>A presentation at The Very Long Annual International Developer Conference in Oslo</p>"
    ))
    assert conference_from_presentation_line(page) == "The Very Long Annual International Developer"


def test_presentation_line_drops_trailing_year_clause() -> None:
    page = make_page(_body("<p>A presentation at DevOpsDays Chicago on 2025 stage in Chicago</p>"))
    assert conference_from_presentation_line(page) == "DevOpsDays Chicago"


def test_presentation_line_rejects_slide_content() -> None:
    page = make_page(_body("<p>A presentation at Hello! I am an Employee of the month in Paris</p>"))
    assert conference_from_presentation_line(page) is None


def test_known_conference_patterns() -> None:
    page = make_page(_body("<p>Thanks to everyone at Voxxed Days Zurich 2025!</p>"))
    assert conference_from_known_patterns(page) == "Voxxed Days Zurich 2025"


def test_structured_data_yields_placeholder() -> None:
    page = make_page(_body(
        '<script type="application/ld+json">{not json}</script>'
        '<script type="application/ld+json">{"description": "A talk about robots"}</script>'
    ))
    assert conference_from_structured_data(page) == "Conference Event"


def test_structured_data_without_talk_description() -> None:
    page = make_page(_body('<script type="application/ld+json">{"description": "A blog"}</script>'))
    assert conference_from_structured_data(page) is None


def test_platform_domain_fallback() -> None:
    assert conference_from_platform_domain(make_page(_body("<p>x</p>"))) == "Speaking Event"
    assert conference_from_platform_domain(make_page(_body("<p>x</p>"), url="https://example.com/t")) is None


def test_speaker_defaults_to_unknown() -> None:
    assert speaker_for_url(TALK_URL) == "Baruch Sadogursky"
    assert speaker_for_url("https://example.com/talk") == UNKNOWN_SPEAKER


def test_abstract_empty_when_no_long_paragraph(tmp_path: Path) -> None:
    page = make_page(_body("<h1>Short</h1><p>Devoxx France 2025 on April 16, 2025</p>"))

    record = extract_metadata(page, talks_dir=tmp_path, pdf_dir=tmp_path)

    assert record.abstract == ""
    assert record.conference == "Devoxx France 2025"
    assert record.date == "2025-04-16"
