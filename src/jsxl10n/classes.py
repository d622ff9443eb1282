from dataclasses import dataclass, field
from typing import Any


@dataclass
class Comments:
    extracted: str | None = None
    reference: str | None = None
    translator: str | None = None
    flag: str | None = None


@dataclass
class TranslationEntry:
    msgid: str
    msgid_plural: str | None = None
    msgstr: list[str] = field(default_factory=lambda: [""])
    comments: Comments | None = None
    msgctxt: str | None = None
    obsolete: bool = False


@dataclass
class SourceCandidate:
    msgid: str
    msgid_plural: str | None
    line: int
    comments: str
    reference: str

    def to_entry(self) -> TranslationEntry:
        comments = Comments(extracted=self.comments or None, reference=self.reference)
        entry = TranslationEntry(self.msgid, comments=comments)
        if self.msgid_plural is not None:
            entry.msgid_plural = self.msgid_plural
            entry.msgstr = ["", ""]
        return entry


@dataclass
class Catalog:
    charset: str
    headers: dict[str, str]
    translations: dict[str, dict[str, TranslationEntry]]
    # Obsolete entries whose msgid is also defined by an active entry
    obsolete: list[TranslationEntry] = field(default_factory=list)
    # Spelling of header names as read, keyed by the lowercased name
    header_names: dict[str, str] = field(default_factory=dict)


@dataclass
class ExtractOptions:
    join_existing: bool = False
    output: str = "messages.po"
    output_dir: str = ""
    keyword: list[str] | None = None
    add_comments: str | None = None
    sanity: bool = False
    project_id_version: str | None = None
    report_bugs_to: str | None = None


@dataclass(frozen=True)
class Resolved:
    name: str
    args: list[Any]


@dataclass
class SourceComment:
    line: int
    value: str
