"""Prompt fragments for citation-bearing article generation."""

from collections.abc import Sequence

from sourcecite.data import Article
from sourcecite.timestamps import normalize_published_at

DETAIL_INSTRUCTION = (
    "- Provide specific real-world examples (e.g., car model years or actual app names) "
    'instead of generic placeholders like "App 1".\n'
)

DEFAULT_SYSTEM_PROMPT = """\
You are a professional journalist writing accurate, well-sourced web articles. \
Output raw HTML only, using <h2>, <h3>, <p>, <a>, <ul> and <li> tags. Never wrap \
the output in markdown code fences and never invent sources or links.\
"""


def build_link_instruction(sources: Sequence[str], min_links: int) -> str:
    """Instruction block asking the model to cite ``min_links`` of ``sources``."""
    if not sources:
        return ""
    required = min(min_links, len(sources))
    listing = "\n".join(f"  - {url}" for url in sources)
    return (
        f"- Integrate at least {required} clickable HTML links into relevant keywords or phrases.\n"
        f"{listing}\n"
        '  - Embed each link as <a href="URL" target="_blank">text</a> exactly once and do not '
        "list them at the end. Spread the links naturally across the article.\n"
    )


def _format_entry(index: int, article: Article) -> str:
    title = article.title.strip() or "Untitled"
    published = normalize_published_at(article.published_at) or "date unavailable"
    summary = " ".join(article.summary.split()) or "No summary available."
    return (
        f'{index}. "{title}" ({published})\n'
        f"   Summary: {summary}\n"
        f"   URL: {article.url}"
    )


def build_recent_reporting_block(articles: Sequence[Article]) -> str:
    """Numbered digest of recent reporting for the model to ground claims on."""
    if not articles:
        return ""
    entries = "\n".join(_format_entry(i, a) for i, a in enumerate(articles, 1))
    return f"Recent reporting to reference:\n{entries}\n"


def build_article_prompt(
    topic: str,
    articles: Sequence[Article],
    *,
    min_links: int,
    custom_instructions: str | None = None,
) -> str:
    """Full user prompt for a news article about ``topic``."""
    reporting = build_recent_reporting_block(articles)
    links = build_link_instruction([a.url for a in articles], min_links)
    custom = ""
    if custom_instructions and custom_instructions.strip():
        custom = f"- {custom_instructions.strip()}\n"
    return (
        f'Write a web article titled "{topic}".\n'
        "Do NOT include the title or any <h1> tag in the HTML output.\n\n"
        f"{reporting}\n"
        "Requirements:\n"
        "- Begin with a 2-3 sentence introduction (no <h2> tags).\n"
        "- Organize the article with <h2> headings and write 2-3 paragraphs under each.\n"
        "- Only state facts supported by the reporting above.\n"
        f"{DETAIL_INSTRUCTION}"
        f"{custom}"
        f"{links}"
        "- Do NOT invent sources or links.\n\n"
        "Output raw HTML only:"
    )
