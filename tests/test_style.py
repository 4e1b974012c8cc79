"""Tests for the travel style validator."""

from sourcecite.verification.style import verify_travel_style

GOOD_HTML = (
    "<p>Plan a summer escape to Colorado with a flexible itinerary.</p>"
    "<h2>Colorado Must-See Mountain Stops</h2>"
    "<p>Start your morning exploring Rocky Mountain National Park, a must-see landmark "
    "with scenic stops and hiking trails for visitors planning their route.</p>"
    "<p>Stay at boutique hotels in Estes Park for convenient lodging and sample downtown "
    "dining for locally sourced cuisine.</p>"
    "<p>Visit in the shoulder season during fall for colorful foliage without peak season "
    "crowds.</p>"
)


def test_accepts_travel_guide() -> None:
    result = verify_travel_style(GOOD_HTML, required_subject="Colorado")
    assert result.is_valid is True
    assert result.issues == ()


def test_flags_every_missing_cue() -> None:
    result = verify_travel_style("<p>no travel content</p>", required_subject="Colorado")

    assert result.is_valid is False
    assert len(result.issues) == 4
    assert any("Mention Colorado frequently" in issue for issue in result.issues)
    assert any("must-see stops" in issue for issue in result.issues)
    assert any("lodging recommendations" in issue for issue in result.issues)
    assert any("seasonal or timing" in issue for issue in result.issues)


def test_reports_only_the_missing_check() -> None:
    html = (
        GOOD_HTML.replace("Stay at boutique hotels", "Try cafes")
        .replace("convenient lodging", "coffee")
    )

    result = verify_travel_style(html, required_subject="Colorado")

    assert result.is_valid is False
    assert len(result.issues) == 1
    assert "lodging recommendations" in result.issues[0]


def test_attractions_must_be_in_heading_or_list() -> None:
    html = (
        "<p>Colorado has a must-see national park.</p>"
        "<p>Colorado hotels fill up in summer.</p>"
    )
    result = verify_travel_style(html, required_subject="Colorado")

    assert len(result.issues) == 1
    assert "must-see stops" in result.issues[0]


def test_attractions_in_list_item() -> None:
    html = (
        "<ul><li>Garden of the Gods landmark</li></ul>"
        "<p>Colorado inns are cozy in winter. Colorado awaits.</p>"
    )
    assert verify_travel_style(html, required_subject="Colorado").is_valid


def test_subject_mentions_threshold() -> None:
    html = GOOD_HTML.replace("Colorado Must-See", "Must-See")

    assert not verify_travel_style(html, required_subject="Colorado").is_valid
    assert verify_travel_style(html, required_subject="Colorado", min_subject_mentions=1).is_valid


def test_subject_match_is_case_insensitive() -> None:
    html = GOOD_HTML.replace("Colorado", "COLORADO")
    assert verify_travel_style(html, required_subject="Colorado").is_valid


def test_subject_with_punctuation() -> None:
    html = (
        "<h2>U.S. Must-See Landmarks</h2>"
        "<p>Book hotels early for a summer tour of the U.S. national parks.</p>"
    )
    assert verify_travel_style(html, required_subject="U.S.").is_valid


def test_subject_not_matched_inside_words() -> None:
    html = GOOD_HTML.replace("Colorado", "Coloradoan")
    result = verify_travel_style(html, required_subject="Colorado")
    assert any("found 0 mention(s)" in issue for issue in result.issues)
