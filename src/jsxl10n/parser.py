import copy
import logging
import os
import re
from collections.abc import Mapping

from jsxl10n import catalog as po_catalog
from jsxl10n.classes import Catalog, ExtractOptions, TranslationEntry
from jsxl10n.errors import CatalogStructureError
from jsxl10n.merge import merge_translations, translations_differ
from jsxl10n.walker import extract_translations

logger = logging.getLogger(__name__)

DEFAULT_KEYWORDS = ["gettext", "ngettext"]
DEFAULT_COMMENT_TAG = "L10n:"


def keywords(keyword: list[str] | None) -> list[str]:
    if not keyword:
        return list(DEFAULT_KEYWORDS)
    return list(keyword) + [f"n{name}" for name in keyword]


def comment_regex(tag: str | None) -> re.Pattern:
    # "///" comments are the xgettext convention for translator notes
    return re.compile(rf"^\s*{re.escape(tag or DEFAULT_COMMENT_TAG)}|^/")


def check_structure(catalog: Catalog) -> None:
    translations = catalog.translations
    if not isinstance(translations, dict) or not isinstance(translations.get(""), dict):
        raise CatalogStructureError()
    for msgid, entry in translations[""].items():
        if not isinstance(entry, TranslationEntry) or entry.msgid != msgid:
            raise CatalogStructureError()


def load_catalog(options: ExtractOptions) -> Catalog | None:
    if not options.join_existing:
        return None
    path = os.path.abspath(os.path.join(options.output_dir or "", options.output))
    return po_catalog.read_catalog(path)


def run(sources: Mapping[str, str], options: ExtractOptions) -> Catalog:
    existing = load_catalog(options)
    if existing is None:
        logger.debug("Starting a new catalog")
        catalog = po_catalog.new_catalog(
            options.project_id_version, options.report_bugs_to
        )
    else:
        catalog = existing

    check_structure(catalog)

    # Working copy, compared against the loaded entries at the end
    translations = copy.deepcopy(catalog.translations[""])

    function_names = keywords(options.keyword)
    regex = comment_regex(options.add_comments)
    for filename, source in sources.items():
        logger.info(f"Parsing {filename}")
        new_translations = extract_translations(
            filename, source, regex, function_names, options.sanity
        )
        translations = merge_translations(translations, new_translations)

    changed = translations_differ(translations, catalog.translations[""])
    if options.join_existing and changed:
        # Only touch the creation date when the content changed
        catalog.headers["pot-creation-date"] = po_catalog.creation_date()
    catalog.translations[""] = translations

    logger.info(f"Catalog has {len(translations)} messages")
    return catalog


def generate(sources: Mapping[str, str], options: ExtractOptions) -> str:
    return po_catalog.compile_catalog(run(sources, options))
