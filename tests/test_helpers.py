"""
Tests for Helper Utilities

Tests cover content cleanup (quotes, escapes, entities), HTML tag
stripping, format selection, token masking and duration formatting.
"""

import pytest
from datetime import timedelta

from utils.helpers import (
    cleanup_content, strip_html_tags, normalize_content, decode_html_entities,
    unescape_unicode, mask_token, format_duration, safe_get
)


# =============================================================================
# cleanup_content Tests
# =============================================================================

class TestCleanupContent:
    """Tests for cleanup_content."""

    def test_strips_enclosing_quotes(self):
        assert cleanup_content('"<p>Hi</p>"') == "<p>Hi</p>"

    def test_keeps_short_quoted_value(self):
        """Two characters or fewer are left alone."""
        assert cleanup_content('""') == '""'

    def test_only_one_layer_of_quotes(self):
        assert cleanup_content('""nested""') == '"nested"'

    def test_unescapes_backslash_quotes(self):
        assert cleanup_content('<a href=\\"/x\\">link</a>') == '<a href="/x">link</a>'

    def test_resolves_unicode_escapes_and_entities(self):
        assert cleanup_content('\\u0041 &amp; B') == "A & B"

    def test_resolves_korean_unicode(self):
        assert cleanup_content('\\uc548\\ub155') == "안녕"

    def test_resolves_newline_escape(self):
        assert cleanup_content('line1\\nline2') == "line1\nline2"

    def test_lone_surrogate_escape_is_replaced(self):
        """An unpaired surrogate decodes to U+FFFD so the result stays valid UTF-8."""
        assert cleanup_content("caf\\ud800e") == "caf\ufffde"

    def test_surrogate_pair_escape_is_combined(self):
        assert cleanup_content("\\ud83d\\ude00") == "\U0001f600"

    def test_invalid_escape_left_unchanged(self):
        """A bad escape sequence makes the unicode pass a no-op instead of an error."""
        assert cleanup_content('C:\\path &lt;dir&gt;') == 'C:\\path <dir>'

    @pytest.mark.parametrize("entity, char", [
        ("&nbsp;", " "),
        ("&amp;", "&"),
        ("&lt;", "<"),
        ("&gt;", ">"),
        ("&quot;", '"'),
        ("&#39;", "'"),
        ("&apos;", "'"),
    ])
    def test_entity_table(self, entity, char):
        assert cleanup_content(f"x{entity}y") == f"x{char}y"

    def test_double_encoded_entity_decodes_once(self):
        assert decode_html_entities("&amp;lt;") == "&lt;"

    def test_entity_step_is_idempotent(self):
        raw = "Tom &amp; Jerry &lt;3 &nbsp;caf\u00e9"
        once = cleanup_content(raw)
        assert cleanup_content(once) == once

    def test_plain_text_unchanged(self):
        assert cleanup_content("just text") == "just text"


class TestUnescapeUnicode:
    """Tests for unescape_unicode."""

    def test_bare_quotes_are_allowed(self):
        assert unescape_unicode('say "hi" \\u0021') == 'say "hi" !'

    def test_invalid_escape_raises(self):
        with pytest.raises(ValueError):
            unescape_unicode("bad \\x escape")


# =============================================================================
# strip_html_tags Tests
# =============================================================================

class TestStripHtmlTags:
    """Tests for strip_html_tags."""

    def test_simple_markup(self):
        assert strip_html_tags("<p>Hello <b>World</b></p>") == "Hello World"

    def test_attributes_are_dropped(self):
        assert strip_html_tags('<a href="https://example.com" class="x">link</a>') == "link"

    def test_adjacent_blocks_get_a_space(self):
        assert strip_html_tags("<p>one</p><p>two</p>") == "one two"

    def test_double_newlines_collapsed(self):
        assert strip_html_tags("a\n\nb") == "a\nb"

    def test_nbsp_becomes_space(self):
        assert strip_html_tags("a&nbsp;&nbsp;b") == "a b"

    def test_unclosed_tag_drops_rest(self):
        assert strip_html_tags("keep <span never closed") == "keep"

    def test_empty_input(self):
        assert strip_html_tags("") == ""


# =============================================================================
# normalize_content Tests
# =============================================================================

class TestNormalizeContent:
    """Tests for format selection."""

    def test_html_format_keeps_markup(self):
        assert normalize_content('"<p>\\u0041 &amp; B</p>"', "html") == "<p>A & B</p>"

    def test_text_format_strips_markup(self):
        assert normalize_content('"<p>\\u0041 &amp; B</p>"', "text") == "A & B"

    def test_text_format_strips_decoded_entities(self):
        """Entities are decoded first, so encoded tags are stripped as well."""
        assert normalize_content("&lt;b&gt;bold&lt;/b&gt; text", "text") == "bold text"


# =============================================================================
# Small Helper Tests
# =============================================================================

class TestMaskToken:
    """Tests for mask_token."""

    def test_long_token(self):
        assert mask_token("abcdefghijklmnop") == "abcdefghij..."

    def test_exactly_ten_chars(self):
        assert mask_token("abcdefghij") == ""

    def test_empty(self):
        assert mask_token("") == ""


class TestFormatDuration:
    """Tests for format_duration."""

    @pytest.mark.parametrize("delta, expected", [
        (timedelta(0), "0s"),
        (timedelta(hours=23, minutes=59, seconds=58), "23h59m58s"),
        (timedelta(hours=2), "2h0m0s"),
        (timedelta(minutes=4, seconds=2), "4m2s"),
        (timedelta(seconds=9), "9s"),
        (timedelta(milliseconds=250), "250ms"),
        (timedelta(hours=23, minutes=59, seconds=58, milliseconds=500), "23h59m58.5s"),
        (timedelta(microseconds=1500), "1.5ms"),
        (timedelta(microseconds=500), "500µs"),
        (timedelta(seconds=-1, milliseconds=-250), "-1.25s"),
        (timedelta(minutes=-4, seconds=-2), "-4m2s"),
    ])
    def test_format(self, delta, expected):
        assert format_duration(delta) == expected


class TestSafeGet:
    """Tests for safe_get."""

    def test_nested_value(self):
        assert safe_get({"a": {"b": {"c": 1}}}, "a", "b", "c") == 1

    def test_missing_key(self):
        assert safe_get({"a": {}}, "a", "b", default="x") == "x"

    def test_none_in_path(self):
        assert safe_get({"a": None}, "a", "b", default="x") == "x"

    def test_none_value_returns_default(self):
        assert safe_get({"a": None}, "a", default="") == ""
