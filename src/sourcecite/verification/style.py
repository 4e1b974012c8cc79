"""Deterministic travel-guide style check."""

import re

from bs4 import BeautifulSoup

from sourcecite.data import TravelStyleResult

ATTRACTION_RE = re.compile(
    r"\b(must[- ]see|attractions?|landmarks?|national park|museums?|trails?|scenic|"
    r"stops?|sights?|viewpoints?|overlooks?|historic)\b",
    re.IGNORECASE,
)
LODGING_RE = re.compile(
    r"\b(lodging|hotels?|motels?|resorts?|inns?|cabins?|campgrounds?|camping|"
    r"bed[- ]and[- ]breakfast|b&b|vacation rentals?|accommodations?|stay at|where to stay)\b",
    re.IGNORECASE,
)
SEASONAL_RE = re.compile(
    r"\b(spring|summer|fall|autumn|winter|seasons?|seasonal|shoulder season|peak season|"
    r"off[- ]season|best time|months?|weather|holidays?|weekends?|crowds?)\b",
    re.IGNORECASE,
)


def verify_travel_style(
    html: str, *, required_subject: str, min_subject_mentions: int = 2
) -> TravelStyleResult:
    """Check that ``html`` reads like a travel guide about ``required_subject``.

    Each check is independent and adds its own issue: the subject must be
    mentioned at least ``min_subject_mentions`` times, a heading or list item
    must name must-see attractions, and the text must carry lodging and
    seasonal/timing guidance.
    """
    soup = BeautifulSoup(html or "", "html.parser")
    text = " ".join(soup.get_text(" ").split())
    issues: list[str] = []

    subject = required_subject.strip()
    if subject:
        mentions = len(re.findall(rf"(?<!\w){re.escape(subject)}(?!\w)", text, re.IGNORECASE))
        if mentions < min_subject_mentions:
            issues.append(
                f"Mention {subject} frequently: found {mentions} mention(s), "
                f"expected at least {min_subject_mentions}."
            )

    structured = [
        el.get_text(" ") for el in soup.find_all(["h2", "h3", "h4", "li"])
    ]
    if not any(ATTRACTION_RE.search(item) for item in structured):
        issues.append(
            "Add a heading or list that names concrete must-see stops or attractions."
        )

    if not LODGING_RE.search(text):
        issues.append("Include lodging recommendations such as hotels, inns or campgrounds.")

    if not SEASONAL_RE.search(text):
        issues.append("Add seasonal or timing guidance, such as the best time of year to visit.")

    return TravelStyleResult(is_valid=not issues, issues=tuple(issues))
