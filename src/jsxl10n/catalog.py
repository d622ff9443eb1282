import logging
import pathlib
from datetime import datetime, timezone

import polib

from jsxl10n.classes import Catalog, Comments, TranslationEntry
from jsxl10n.errors import CatalogStructureError

logger = logging.getLogger(__name__)

DEFAULT_CHARSET = "utf-8"

# Header names whose conventional spelling is not plain title case
_HEADER_NAMES = {
    "pot-creation-date": "POT-Creation-Date",
    "po-revision-date": "PO-Revision-Date",
    "mime-version": "MIME-Version",
}


def creation_date() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M+0000")


def default_headers(
    project_id_version: str | None = None, report_bugs_to: str | None = None
) -> dict[str, str]:
    return {
        "project-id-version": project_id_version or "PACKAGE VERSION",
        "language-team": "LANGUAGE <LL@li.org>",
        "report-msgid-bugs-to": report_bugs_to or "",
        "pot-creation-date": creation_date(),
        "po-revision-date": "YEAR-MO-DA HO:MI+ZONE",
        "language": "",
        "mime-version": "1.0",
        "content-type": f"text/plain; charset={DEFAULT_CHARSET}",
        "content-transfer-encoding": "8bit",
    }


def new_catalog(
    project_id_version: str | None = None, report_bugs_to: str | None = None
) -> Catalog:
    return Catalog(
        charset=DEFAULT_CHARSET,
        headers=default_headers(project_id_version, report_bugs_to),
        translations={"": {}},
    )


def _header_name(key: str) -> str:
    title = "-".join(part.capitalize() for part in key.split("-"))
    return _HEADER_NAMES.get(key, title)


def _join_lines(lines) -> str | None:
    lines = [line for line in lines if line]
    return "\n".join(lines) if lines else None


def _entry_from_po(po_entry: polib.POEntry) -> TranslationEntry:
    references = [
        f"{path}:{line}" if line else path for path, line in po_entry.occurrences
    ]
    comments = Comments(
        extracted=po_entry.comment or None,
        reference=_join_lines(references),
        translator=po_entry.tcomment or None,
        flag=_join_lines(po_entry.flags),
    )
    if po_entry.msgid_plural:
        msgstr = [
            po_entry.msgstr_plural[index] for index in sorted(po_entry.msgstr_plural)
        ] or ["", ""]
    else:
        msgstr = [po_entry.msgstr]
    return TranslationEntry(
        po_entry.msgid,
        msgid_plural=po_entry.msgid_plural or None,
        msgstr=msgstr,
        comments=comments,
        msgctxt=po_entry.msgctxt,
        obsolete=po_entry.obsolete,
    )


def read_catalog(path: str) -> Catalog | None:
    """Load an existing catalog file.

    Returns None when the file is missing or cannot be parsed, so callers can
    start a fresh catalog. Raises CatalogStructureError when the file parses
    but defines the same active message twice in one context. Obsolete
    entries that clash with an active one are kept in Catalog.obsolete.
    """
    file = pathlib.Path(path)
    if not file.is_file():
        logger.debug(f"No existing catalog at {file}")
        return None

    try:
        po = polib.pofile(str(file))
    except (OSError, ValueError) as ex:
        logger.warning(f"Could not parse existing catalog {file}: {ex}")
        return None

    translations: dict[str, dict[str, TranslationEntry]] = {"": {}}
    obsolete: list[TranslationEntry] = []
    for po_entry in po:
        context = translations.setdefault(po_entry.msgctxt or "", {})
        entry = _entry_from_po(po_entry)
        existing = context.get(entry.msgid)
        if existing is None:
            context[entry.msgid] = entry
        elif entry.obsolete:
            obsolete.append(entry)
        elif existing.obsolete:
            # Active entries take the slot, msgfmt ignores obsolete ones
            obsolete.append(existing)
            context[entry.msgid] = entry
        else:
            raise CatalogStructureError(
                f'Duplicate message "{po_entry.msgid}" in {file}. '
                "Please make sure it is valid by using `msgfmt -c`."
            )

    logger.info(f"Loaded {len(po)} entries from {file}")
    return Catalog(
        charset=po.encoding or DEFAULT_CHARSET,
        headers={key.lower(): value for key, value in po.metadata.items()},
        translations=translations,
        obsolete=obsolete,
        header_names={key.lower(): key for key in po.metadata},
    )


def _occurrences(reference: str | None) -> list[tuple[str, str]]:
    occurrences = []
    for token in (reference or "").split():
        path, sep, line = token.rpartition(":")
        if sep and line.isdigit():
            occurrences.append((path, line))
        else:
            occurrences.append((token, ""))
    return occurrences


def _entry_to_po(entry: TranslationEntry) -> polib.POEntry:
    comments = entry.comments or Comments()
    kwargs = {
        "msgid": entry.msgid,
        "msgctxt": entry.msgctxt,
        "comment": comments.extracted or "",
        "tcomment": comments.translator or "",
        "occurrences": _occurrences(comments.reference),
        "flags": comments.flag.split("\n") if comments.flag else [],
        "obsolete": entry.obsolete,
    }
    if entry.msgid_plural is not None:
        kwargs["msgid_plural"] = entry.msgid_plural
        kwargs["msgstr_plural"] = dict(enumerate(entry.msgstr))
    else:
        kwargs["msgstr"] = entry.msgstr[0] if entry.msgstr else ""
    return polib.POEntry(**kwargs)


def to_pofile(catalog: Catalog) -> polib.POFile:
    po = polib.POFile(encoding=catalog.charset)
    po.metadata = {
        catalog.header_names.get(key) or _header_name(key): value
        for key, value in catalog.headers.items()
    }
    for context in sorted(catalog.translations):
        for entry in catalog.translations[context].values():
            po.append(_entry_to_po(entry))
    for entry in catalog.obsolete:
        po.append(_entry_to_po(entry))
    return po


def compile_catalog(catalog: Catalog) -> str:
    return str(to_pofile(catalog))


def save_catalog(catalog: Catalog, path: str) -> None:
    to_pofile(catalog).save(path)
    logger.info(f"Wrote catalog to {path}")
