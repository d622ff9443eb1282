import pytest

from jsxl10n import catalog as po_catalog
from jsxl10n import parser
from jsxl10n.classes import Catalog, ExtractOptions
from jsxl10n.errors import CatalogStructureError

EXISTING_PO = """\
msgid ""
msgstr ""
"Project-Id-Version: demo 1.0\\n"
"POT-Creation-Date: 2020-01-01 10:00+0000\\n"
"Content-Type: text/plain; charset=utf-8\\n"

# keep this note
#: app.js:1
msgid "Hello"
msgstr "Bonjour"

#: old.js:3
msgid "Gone"
msgstr "Parti"
"""


@pytest.fixture
def existing(tmp_path):
    (tmp_path / "messages.po").write_text(EXISTING_PO, encoding="utf-8")
    return ExtractOptions(join_existing=True, output_dir=str(tmp_path))


@pytest.fixture
def frozen_date(monkeypatch):
    monkeypatch.setattr(po_catalog, "creation_date", lambda: "2030-06-01 12:00+0000")


def test_keywords():
    assert parser.keywords(None) == ["gettext", "ngettext"]
    names = ["_", "t"]
    assert parser.keywords(names) == ["_", "t", "n_", "nt"]
    assert names == ["_", "t"]


def test_comment_regex_escapes_tag():
    regex = parser.comment_regex("i18n(x):")
    assert regex.match(" i18n(x): hello")
    assert not regex.match(" i18nxx: hello")
    assert regex.match("/ doc comment")


def test_fresh_catalog(frozen_date):
    options = ExtractOptions(project_id_version="demo 2.0", report_bugs_to="me@x.org")
    sources = {"a.js": 'gettext("one");', "b.jsx": "<p>{gettext('two')}</p>"}
    result = parser.run(sources, options)

    assert result.charset == "utf-8"
    assert result.headers["project-id-version"] == "demo 2.0"
    assert result.headers["report-msgid-bugs-to"] == "me@x.org"
    assert list(result.translations[""]) == ["one", "two"]
    assert result.translations[""]["two"].comments.reference == "b.jsx:1"


def test_same_message_across_files():
    result = parser.run(
        {"a.js": 'gettext("Hi");', "b.js": '\ngettext("Hi");'}, ExtractOptions()
    )
    assert result.translations[""]["Hi"].comments.reference == "a.js:1\nb.js:2"


def test_missing_existing_catalog_starts_fresh(tmp_path):
    options = ExtractOptions(join_existing=True, output_dir=str(tmp_path))
    result = parser.run({"a.js": 'gettext("one");'}, options)
    assert list(result.translations[""]) == ["one"]


def test_unparseable_existing_catalog_starts_fresh(tmp_path):
    (tmp_path / "messages.po").write_text("garbage garbage\n", encoding="utf-8")
    options = ExtractOptions(join_existing=True, output_dir=str(tmp_path))
    result = parser.run({"a.js": 'gettext("one");'}, options)
    assert list(result.translations[""]) == ["one"]


class TestJoinExisting:
    def test_preserves_translations_and_old_entries(self, existing, frozen_date):
        result = parser.run(
            {"app.js": 'gettext("Hello");\ngettext("New");'}, existing
        )

        translations = result.translations[""]
        assert set(translations) == {"Hello", "Gone", "New"}
        assert translations["Hello"].msgstr == ["Bonjour"]
        assert translations["Hello"].comments.translator == "keep this note"
        assert translations["Gone"].msgstr == ["Parti"]
        assert result.headers["pot-creation-date"] == "2030-06-01 12:00+0000"

    def test_unchanged_catalog_keeps_creation_date(self, existing, frozen_date):
        result = parser.run({"app.js": 'gettext("Hello");'}, existing)
        assert result.headers["pot-creation-date"] == "2020-01-01 10:00+0000"

    def test_new_reference_updates_creation_date(self, existing, frozen_date):
        result = parser.run({"other.js": 'gettext("Hello");'}, existing)

        assert result.translations[""]["Hello"].comments.reference == (
            "app.js:1\nother.js:1"
        )
        assert result.headers["pot-creation-date"] == "2030-06-01 12:00+0000"

    def test_corrupt_catalog(self, monkeypatch, existing):
        broken = Catalog("utf-8", {}, translations=[])
        monkeypatch.setattr(po_catalog, "read_catalog", lambda path: broken)

        with pytest.raises(CatalogStructureError):
            parser.run({"app.js": 'gettext("Hello");'}, existing)


def test_headers_survive_empty_message(tmp_path):
    options = ExtractOptions(
        join_existing=True, output_dir=str(tmp_path), project_id_version="demo 1.0"
    )
    result = parser.run({"a.js": 'gettext("");\ngettext("Hi");'}, options)
    po_catalog.save_catalog(result, str(tmp_path / "messages.po"))

    loaded = po_catalog.read_catalog(str(tmp_path / "messages.po"))

    assert loaded.headers["project-id-version"] == "demo 1.0"
    assert list(loaded.translations[""]) == ["Hi"]


def test_generate():
    sources = {"a.js": 'ngettext("1 item", "N items", n);'}
    text = parser.generate(sources, ExtractOptions())
    assert 'msgid "1 item"' in text
    assert 'msgid_plural "N items"' in text
    assert "#: a.js:1" in text
