from docport.documents.text import (
    content_to_paragraphs,
    count_words,
    create_excerpt_from_html,
    generate_excerpt,
    html_to_plain_text,
    sanitize_content,
)


class TestSanitizeContent:
    def test_keeps_basic_formatting_and_drops_attributes(self) -> None:
        html = '<p onclick="steal()">안녕<script>alert(1)</script><span>하세요</span></p>'
        assert sanitize_content(html) == "<p>안녕하세요</p>"

    def test_removes_iframes_and_styles(self) -> None:
        html = "<strong>굵게</strong><style>p{}</style><iframe src='x'></iframe>"
        assert sanitize_content(html) == "<strong>굵게</strong>"

    def test_returns_plain_text_unchanged(self) -> None:
        text = "첫 줄\n\n  둘째 줄  & 기호 < 비교"
        assert sanitize_content(text) == text


class TestHtmlToPlainText:
    def test_joins_block_text_with_spaces(self) -> None:
        assert html_to_plain_text("<p>안녕</p><p>세상</p>") == "안녕 세상"

    def test_collapses_whitespace_in_plain_text(self) -> None:
        assert html_to_plain_text("  a\n\n b c ") == "a b c"

    def test_empty_input(self) -> None:
        assert html_to_plain_text("   ") == ""


class TestGenerateExcerpt:
    def test_returns_short_text_as_is(self) -> None:
        assert generate_excerpt("짧은 글입니다.") == "짧은 글입니다."

    def test_prefers_whole_sentences(self) -> None:
        sentence = "a" * 60
        text = ". ".join([sentence] * 5) + "."

        assert generate_excerpt(text) == ". ".join([sentence] * 3) + "..."

    def test_falls_back_to_hard_cut(self) -> None:
        excerpt = generate_excerpt("가" * 250)

        assert excerpt == "가" * 197 + "..."
        assert len(excerpt) == 200

    def test_excerpt_from_html_strips_tags(self) -> None:
        assert create_excerpt_from_html("<p><b>Hello</b> world</p>") == "Hello world"


class TestCountWords:
    def test_counts_korean_eojeol(self) -> None:
        assert count_words("안녕하세요 반갑습니다") == 2

    def test_counts_latin_words_and_numbers(self) -> None:
        assert count_words("hello world 2024") == 3

    def test_takes_larger_count_for_mixed_text(self) -> None:
        assert count_words("I love 서울 2024 and 부산") == 4

    def test_empty_text_has_no_words(self) -> None:
        assert count_words("  ") == 0


class TestContentToParagraphs:
    def test_splits_plain_text_on_blank_lines(self) -> None:
        assert content_to_paragraphs("첫 문단\n둘째 줄\n\n둘째 문단") == [
            "첫 문단\n둘째 줄",
            "둘째 문단",
        ]

    def test_splits_html_blocks_and_line_breaks(self) -> None:
        assert content_to_paragraphs("<p>하나</p><p>둘<br>셋</p>") == ["하나", "둘\n셋"]

    def test_empty_content(self) -> None:
        assert content_to_paragraphs("") == []
