"""Unit tests for the normalizer."""

from coursecorpus.config.schema import NormalizerConfig
from coursecorpus.operators.normalize import Normalizer, normalize


class TestNormalize:
    def test_strips_fence_language_tag_keeps_code(self):
        raw = "```javascript\nvar add = function(a, b) {\n  return a + b;\n};\n```"
        assert normalize(raw) == "```\nvar add = function(a, b) {\nreturn a + b;\n};\n```"

    def test_tilde_fence(self):
        assert normalize("~~~python\nprint('hi')\n~~~") == "~~~\nprint('hi')\n~~~"

    def test_code_content_not_rewritten(self):
        raw = "```\n**kwargs and https://example.com\n```"
        assert normalize(raw) == "```\n**kwargs and https://example.com\n```"

    def test_removes_emphasis_markers(self):
        raw = "This is **bold**, *em*, __strong__, _under_ and ~~gone~~."
        assert normalize(raw) == "This is bold, em, strong, under and gone."

    def test_keeps_snake_case_and_list_bullets(self):
        raw = "* use my_var_name\n* a * b"
        assert normalize(raw) == "* use my_var_name\n* a * b"

    def test_replaces_link_and_image_urls(self):
        raw = '![diagram](https://cdn1.example.com/x.png) see [the docs](https://b.example.com "Docs")'
        assert normalize(raw) == "![diagram](<url>) see [the docs](<url>)"

    def test_differing_cdn_links_normalize_equal(self):
        a = "![logo](https://cdn-a.example.com/logo.png)"
        b = "![logo](http://cdn-b.example.net/assets/logo.png)"
        assert normalize(a) == normalize(b)

    def test_reference_definitions_and_bare_urls(self):
        raw = "[mdn]: https://developer.mozilla.org/en-US/\nVisit https://expressjs.com today or <http://flask.pocoo.org>"
        assert normalize(raw) == "[mdn]: <url>\nVisit <url> today or <url>"

    def test_strips_whitespace_per_line(self):
        assert normalize("  indented   \n\ttabbed\t") == "indented\ntabbed"

    def test_collapses_blank_lines(self):
        assert normalize("\n\none\n\n\n\ntwo\n\n") == "one\n\ntwo"

    def test_keeps_blank_lines_when_configured(self):
        config = NormalizerConfig(collapse_blank_lines=False)
        assert normalize("one\n\n\ntwo", config) == "one\n\n\ntwo"

    def test_line_endings(self):
        assert normalize("a\r\nb\rc") == "a\nb\nc"

    def test_byte_order_mark(self):
        assert normalize("\ufeff# Title") == "# Title"

    def test_empty_and_whitespace_only(self):
        assert normalize("") == ""
        assert normalize("   \n\n\t\n") == ""

    def test_lowercase_option(self):
        assert normalize("Hello World", NormalizerConfig(lowercase=True)) == "hello world"

    def test_custom_placeholder(self):
        config = NormalizerConfig(link_placeholder="LINK")
        assert normalize("[a](http://x.com)", config) == "[a](LINK)"

    def test_deterministic(self):
        raw = "# Lesson\n\n**Bold** [link](http://a.com)\n```js\nx()\n```\n"
        assert normalize(raw) == normalize(raw)

    def test_normalizer_callable(self):
        normalizer = Normalizer(NormalizerConfig(lowercase=True))
        assert normalizer("ABC  ") == "abc"
