from jsxl10n.classes import Comments, TranslationEntry
from jsxl10n.merge import (
    merge_comment,
    merge_comments,
    merge_translation,
    merge_translations,
    translations_differ,
)


def entry(msgid, reference, msgstr=None, extracted=None, **kwargs):
    return TranslationEntry(
        msgid,
        msgstr=msgstr or [""],
        comments=Comments(extracted=extracted, reference=reference),
        **kwargs,
    )


class TestMergeComment:
    def test_deduplicates_lines_in_order(self):
        assert merge_comment("a\nb", "b\nc") == "a\nb\nc"

    def test_drops_empty_lines(self):
        assert merge_comment("a\n\nb", "\na") == "a\nb"
        assert merge_comment("", "") == ""

    def test_missing_side(self):
        assert merge_comment(None, "x") == "x"
        assert merge_comment("x", None) == "x"
        assert merge_comment(None, None) is None


def test_merge_comments_fields_independently():
    old = Comments(extracted="note", reference="a.js:1", translator="checked")
    new = Comments(extracted="note\nother", reference="b.js:2")

    merged = merge_comments(old, new)

    assert merged == Comments(
        extracted="note\nother",
        reference="a.js:1\nb.js:2",
        translator="checked",
        flag=None,
    )


def test_merge_comments_missing_record():
    new = Comments(reference="a.js:1")
    assert merge_comments(None, new) is new
    assert merge_comments(new, None) is new


class TestMergeTranslation:
    def test_keeps_existing_translation(self):
        old = entry("Hello", "a.js:1", msgstr=["Bonjour"])
        new = entry("Hello", "b.js:7")

        merged = merge_translation(old, new)

        assert merged.msgstr == ["Bonjour"]
        assert merged.comments.reference == "a.js:1\nb.js:7"

    def test_takes_plural_form_from_new_occurrence(self):
        old = entry("1 file", "a.js:1")
        new = entry("1 file", "a.js:9", msgstr=["", ""], msgid_plural="{n} files")

        merged = merge_translation(old, new)

        assert merged.msgid_plural == "{n} files"
        assert merged.msgstr == ["", ""]

    def test_plural_entry_keeps_both_slots(self):
        old = entry("1 file", "a.js:1", msgstr=["", ""], msgid_plural="{n} files")
        new = entry("1 file", "a.js:4")

        merged = merge_translation(old, new)

        assert merged.msgid_plural == "{n} files"
        assert merged.msgstr == ["", ""]

    def test_found_again_is_no_longer_obsolete(self):
        old = entry("Hello", "a.js:1", msgstr=["Hallo"], obsolete=True)
        merged = merge_translation(old, entry("Hello", "a.js:1"))
        assert merged.obsolete is False
        assert merged.msgstr == ["Hallo"]

    def test_does_not_mutate_inputs(self):
        old = entry("Hello", "a.js:1", msgstr=["Bonjour"])
        new = entry("Hello", "b.js:2")
        merge_translation(old, new)
        assert old.comments.reference == "a.js:1"
        assert new.msgstr == [""]


class TestMergeTranslations:
    def test_retains_old_only_entries(self):
        old = {"Gone": entry("Gone", "old.js:3", msgstr=["Parti"])}
        new = {"Hello": entry("Hello", "a.js:1")}

        merged = merge_translations(old, new)

        assert set(merged) == {"Gone", "Hello"}
        assert merged["Gone"].msgstr == ["Parti"]

    def test_old_mapping_untouched(self):
        old = {"Hello": entry("Hello", "a.js:1", msgstr=["Bonjour"])}
        merged = merge_translations(old, {"Hello": entry("Hello", "b.js:2")})

        assert merged["Hello"].comments.reference == "a.js:1\nb.js:2"
        assert old["Hello"].comments.reference == "a.js:1"

    def test_merging_same_entries_is_stable(self):
        translations = {"Hello": entry("Hello", "a.js:1", extracted="greeting")}
        merged = merge_translations(translations, translations)
        assert not translations_differ(merged, translations)
