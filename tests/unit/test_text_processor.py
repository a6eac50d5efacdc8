from pathlib import Path

import pytest

from app.extraction.encoding import detect_encoding, read_text
from app.extraction.exceptions import ExtractionError
from app.extraction.text_processor import TextDocumentProcessor, classify_structure
from app.extraction.text_stats import count_word_tokens, count_words


class TestDetectEncoding:
    def test_utf8_bom(self) -> None:
        assert detect_encoding(b"\xef\xbb\xbfabc") == "utf-8-sig"

    def test_utf16_le_bom(self) -> None:
        assert detect_encoding(b"\xff\xfea\x00") == "utf-16"

    def test_utf16_be_bom(self) -> None:
        assert detect_encoding(b"\xfe\xff\x00a") == "utf-16"

    def test_utf32_le_checked_before_utf16_le(self) -> None:
        assert detect_encoding(b"\xff\xfe\x00\x00") == "utf-32"

    def test_defaults_to_utf8(self) -> None:
        assert detect_encoding(b"plain") == "utf-8"


class TestReadText:
    def test_decodes_utf16_le_with_bom(self, tmp_path: Path) -> None:
        path = tmp_path / "utf16.txt"
        path.write_bytes(b"\xff\xfe" + "Grüße aus Köln".encode("utf-16-le"))

        content, codec = read_text(path)

        assert content == "Grüße aus Köln"
        assert codec == "utf-16"

    def test_decodes_utf32_le_with_bom(self, tmp_path: Path) -> None:
        path = tmp_path / "utf32.txt"
        path.write_bytes(b"\xff\xfe\x00\x00" + "hello".encode("utf-32-le"))

        content, _codec = read_text(path)

        assert content == "hello"

    def test_strips_utf8_bom(self, tmp_path: Path) -> None:
        path = tmp_path / "bom.txt"
        path.write_bytes(b"\xef\xbb\xbfhello")
        assert read_text(path)[0] == "hello"

    def test_replaces_invalid_bytes(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.txt"
        path.write_bytes(b"ok \xff\xfd end")

        content, _codec = read_text(path)

        assert content.startswith("ok ")
        assert "�" in content


class TestHelpers:
    def test_count_word_tokens_splits_on_punctuation(self) -> None:
        assert count_word_tokens("One, two;three!  four?") == 4

    def test_count_words_splits_on_whitespace_only(self) -> None:
        assert count_words("One, two;three!  four?") == 3
        assert count_words(None) == 0

    def test_classify_list(self) -> None:
        lines = ["- a", "- b", "plain", "plain"]
        assert classify_structure(lines)["LikelyType"] == "List/Outline"

    def test_classify_numbered_list(self) -> None:
        lines = ["1. a", "2. b", "plain", "plain"]
        result = classify_structure(lines)
        assert result["NumberedItemCount"] == 2
        assert result["LikelyType"] == "List/Outline"

    def test_classify_code(self) -> None:
        lines = ["def f():", "    return 1", "    pass", "x"]
        assert classify_structure(lines)["LikelyType"] == "Code/Technical"

    def test_classify_prose(self) -> None:
        lines = ["Para one.", "", "Para two.", "More text", "Even more"]
        assert classify_structure(lines)["LikelyType"] == "Prose/Article"

    def test_classify_plain(self) -> None:
        lines = ["a", "b", "c"]
        assert classify_structure(lines)["LikelyType"] == "Plain Text"


class TestTextDocumentProcessor:
    def test_extract_text_returns_content(self, text_file_path: Path) -> None:
        text = TextDocumentProcessor().extract_text(text_file_path)
        assert text.startswith("Meeting Notes\n")

    def test_extract_metadata(self, text_file_path: Path) -> None:
        metadata = TextDocumentProcessor().extract_metadata(text_file_path)

        assert metadata.title == "Meeting Notes"
        assert metadata.page_count == 1
        assert metadata.get_int("LineCount") == 4
        assert metadata.get_int("WordCount") == 13
        assert metadata.get_int("EmptyLineCount") == 2
        assert metadata.get_str("LikelyType") == "Prose/Article"
        assert metadata.created_at is not None

    def test_page_count_from_length(self, tmp_path: Path) -> None:
        path = tmp_path / "long.txt"
        path.write_text("a" * 4500, encoding="utf-8")

        metadata = TextDocumentProcessor().extract_metadata(path)

        assert metadata.page_count == 2

    def test_long_first_line_is_not_a_title(self, tmp_path: Path) -> None:
        path = tmp_path / "wide.txt"
        path.write_text("x" * 150 + "\nmore", encoding="utf-8")

        metadata = TextDocumentProcessor().extract_metadata(path)

        assert metadata.title is None

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.txt"
        path.write_bytes(b"")

        processor = TextDocumentProcessor()

        assert processor.extract_text(path) == ""
        assert processor.extract_metadata(path).page_count == 1

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ExtractionError):
            TextDocumentProcessor().extract_text(tmp_path / "missing.txt")
