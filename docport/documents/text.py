"""Plain-text helpers for rich-text (HTML) document bodies.

Excerpts and word counts are always derived from the stored body, never
supplied by callers.
"""

import re

from bs4 import BeautifulSoup

EXCERPT_MAX_LENGTH = 200

ALLOWED_TAGS = frozenset(
    {"p", "br", "strong", "b", "em", "i", "u", "h1", "h2", "h3", "h4", "h5", "h6", "ul", "ol", "li"}
)
_DROPPED_TAGS = ("script", "style", "iframe", "object", "embed")
_BLOCK_TAGS = ("p", "div", "li", "h1", "h2", "h3", "h4", "h5", "h6", "blockquote")

_TAG_RE = re.compile(r"<\s*/?\s*[a-zA-Z!][^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")
_SENTENCE_END_RE = re.compile(r"[.!?。！？]")
_KOREAN_ONLY_RE = re.compile(r"[^가-힣\s]")
_LATIN_WORD_RE = re.compile(r"[a-zA-Z]+")
_NUMBER_RE = re.compile(r"\d+")
_PARAGRAPH_BREAK_RE = re.compile(r"\n\s*\n")


def looks_like_html(content: str) -> bool:
    return bool(content) and _TAG_RE.search(content) is not None


def sanitize_content(content: str) -> str:
    """Strip unsafe markup from an HTML body.

    Only basic formatting tags survive and every attribute is removed.
    Plain text without any markup is returned unchanged so that it keeps
    its original characters and line breaks.
    """
    if not looks_like_html(content):
        return content

    soup = BeautifulSoup(content, "html.parser")
    for tag in soup.find_all(_DROPPED_TAGS):
        tag.decompose()
    for tag in soup.find_all(True):
        if tag.name not in ALLOWED_TAGS:
            tag.unwrap()
        else:
            tag.attrs = {}
    return str(soup).strip()


def html_to_plain_text(html: str) -> str:
    """Convert an HTML string to a single line of plain text."""
    if not html or not html.strip():
        return ""
    if looks_like_html(html):
        text = BeautifulSoup(html, "html.parser").get_text(" ")
    else:
        text = html
    return _WHITESPACE_RE.sub(" ", text.replace("\xa0", " ")).strip()


def generate_excerpt(text: str, max_length: int = EXCERPT_MAX_LENGTH) -> str:
    """Build a preview, preferring whole sentences over a hard cut."""
    if not text or not text.strip():
        return ""

    clean_text = text.strip()
    if len(clean_text) <= max_length:
        return clean_text

    excerpt = ""
    for sentence in _SENTENCE_END_RE.split(clean_text):
        sentence = sentence.strip()
        if not sentence:
            continue
        candidate = f"{excerpt}. {sentence}" if excerpt else sentence
        if len(candidate) > max_length:
            break
        excerpt = candidate

    if not excerpt or len(excerpt) < max_length * 0.7:
        excerpt = clean_text[: max_length - 3]
        # cut on a word boundary when one is reasonably close to the end
        last_space = excerpt.rfind(" ")
        if last_space > max_length * 0.5:
            excerpt = excerpt[:last_space]

    return excerpt + ("..." if len(excerpt) < len(clean_text) else "")


def create_excerpt_from_html(html: str, max_length: int = EXCERPT_MAX_LENGTH) -> str:
    return generate_excerpt(html_to_plain_text(html), max_length)


def count_words(text: str) -> int:
    """Count words in mixed Korean/Latin text.

    Korean is counted per eojeol (space separated unit); Latin words and
    numbers are counted individually. The larger of the two counts wins.
    """
    if not text or not text.strip():
        return 0

    clean_text = text.strip()
    korean_count = len(_KOREAN_ONLY_RE.sub(" ", clean_text).split())
    latin_count = len(_LATIN_WORD_RE.findall(clean_text))
    number_count = len(_NUMBER_RE.findall(clean_text))
    return max(korean_count, latin_count + number_count)


def count_words_from_html(html: str) -> int:
    return count_words(html_to_plain_text(html))


def content_to_paragraphs(content: str) -> list[str]:
    """Split a body into paragraphs of plain text, keeping single line breaks."""
    if not content:
        return []

    if looks_like_html(content):
        soup = BeautifulSoup(content, "html.parser")
        for br in soup.find_all("br"):
            br.replace_with("\n")
        for block in soup.find_all(_BLOCK_TAGS):
            block.append("\n\n")
        text = soup.get_text()
    else:
        text = content

    text = text.replace("\r\n", "\n").replace("\xa0", " ")
    paragraphs = (part.strip() for part in _PARAGRAPH_BREAK_RE.split(text))
    return [paragraph for paragraph in paragraphs if paragraph]
