from __future__ import annotations

from bs4 import BeautifulSoup

ALLOWED_TAGS: dict[str, set[str]] = {
    "p": set(), "br": set(), "strong": set(), "b": set(), "em": set(), "i": set(),
    "u": set(), "s": set(), "ul": set(), "ol": set(), "li": set(),
    "h1": set(), "h2": set(), "h3": set(), "blockquote": set(), "code": set(), "pre": set(),
    "a": {"href", "title"},
}

# removed together with everything inside them
_DROP_TAGS = ["script", "style", "noscript", "svg", "iframe", "object", "embed", "form"]

_SAFE_SCHEMES = ("http://", "https://", "mailto:")


def _safe_href(value: str) -> bool:
    v = value.strip().lower()
    return v.startswith(_SAFE_SCHEMES) or v.startswith("/") or v.startswith("#")


def sanitize_html(markup: str | None) -> str:
    """Reduce editor markup to an allow-listed subset that is safe to render."""
    if not markup:
        return ""
    soup = BeautifulSoup(markup, "html.parser")
    for bad in soup(_DROP_TAGS):
        bad.decompose()

    for tag in soup.find_all(True):
        allowed = ALLOWED_TAGS.get(tag.name)
        if allowed is None:
            tag.unwrap()
            continue
        for attr in list(tag.attrs):
            if attr not in allowed:
                del tag.attrs[attr]
        href = tag.attrs.get("href")
        if href is not None and not _safe_href(href):
            del tag.attrs["href"]
    return str(soup).strip()

