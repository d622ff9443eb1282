import copy
import logging
from collections.abc import Mapping

from jsxl10n.classes import Comments, TranslationEntry

logger = logging.getLogger(__name__)


def _deduplicate(lines: list[str]) -> list[str]:
    seen = set()
    result = []
    for line in lines:
        if line and line not in seen:
            seen.add(line)
            result.append(line)
    return result


def merge_comment(old: str | None, new: str | None) -> str | None:
    if isinstance(old, str) and isinstance(new, str):
        return "\n".join(_deduplicate(old.split("\n") + new.split("\n")))
    return old or new


def merge_comments(old: Comments | None, new: Comments | None) -> Comments | None:
    if isinstance(old, Comments) and isinstance(new, Comments):
        return Comments(
            extracted=merge_comment(old.extracted, new.extracted),
            reference=merge_comment(old.reference, new.reference),
            translator=merge_comment(old.translator, new.translator),
            flag=merge_comment(old.flag, new.flag),
        )
    return old or new


def merge_translation(old: TranslationEntry, new: TranslationEntry) -> TranslationEntry:
    """Fold a newly extracted occurrence of a message into an existing entry.

    Identity fields come from ``new``; translated text already present in
    ``old`` is kept. Comments and references are unioned line by line.
    """
    translation = copy.deepcopy(old)
    translation.msgid = new.msgid
    if new.msgid_plural is not None:
        translation.msgid_plural = new.msgid_plural
    if new.msgctxt is not None:
        translation.msgctxt = new.msgctxt
    if not any(old.msgstr):
        translation.msgstr = list(new.msgstr)
    if translation.msgid_plural is not None and len(translation.msgstr) < 2:
        translation.msgstr += [""] * (2 - len(translation.msgstr))
    translation.obsolete = old.obsolete and new.obsolete
    translation.comments = merge_comments(old.comments, new.comments)
    return translation


def merge_translations(
    old_translations: Mapping[str, TranslationEntry],
    new_translations: Mapping[str, TranslationEntry],
) -> dict[str, TranslationEntry]:
    # Entries missing from new_translations are kept; pruning is not our job
    translations = copy.deepcopy(dict(old_translations))
    for msgid, translation in new_translations.items():
        if msgid in translations:
            translations[msgid] = merge_translation(translations[msgid], translation)
        else:
            translations[msgid] = translation
    logger.debug(
        f"Merged {len(new_translations)} entries into {len(old_translations)}, "
        f"{len(translations)} total"
    )
    return translations


def translations_differ(
    left: Mapping[str, TranslationEntry], right: Mapping[str, TranslationEntry]
) -> bool:
    return dict(left) != dict(right)
