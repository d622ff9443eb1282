import json
import logging
import re
from collections.abc import Callable, Iterable, Iterator

import tree_sitter_javascript
from tree_sitter import Language, Node, Parser

from jsxl10n.callsite import resolve_callee
from jsxl10n.classes import SourceCandidate, SourceComment, TranslationEntry
from jsxl10n.errors import ExtractionError, SourceSyntaxError
from jsxl10n.literals import expression_children, extract_string, is_string
from jsxl10n.merge import merge_translation

logger = logging.getLogger(__name__)

_HASH_BANG = re.compile(r"\A#.*")

_parser: Parser | None = None


def get_parser() -> Parser:
    global _parser
    if _parser is None:
        _parser = Parser(Language(tree_sitter_javascript.language()))
    return _parser


# Each rule maps a node to the nodes the walk descends into
WalkRule = Callable[[Node], Iterable[Node]]


def _children(node: Node) -> Iterable[Node]:
    return expression_children(node)


def _nothing(node: Node) -> Iterable[Node]:
    return ()


BASE_RULES: dict[str, WalkRule] = {
    "comment": _nothing,
    "string": _nothing,
    "regex": _nothing,
}


def _jsx_element(node: Node) -> Iterable[Node]:
    for child in expression_children(node):
        if child.type == "jsx_opening_element":
            yield from _jsx_attributes(child)
        elif child.type != "jsx_closing_element":
            yield child


def _jsx_attributes(node: Node) -> Iterable[Node]:
    # Spread attributes come through as jsx_expression nodes
    return [
        child
        for child in node.named_children
        if child.type in ("jsx_attribute", "jsx_expression")
    ]


def _jsx_attribute(node: Node) -> Iterable[Node]:
    return [child for child in node.named_children if child.type == "jsx_expression"]


JSX_RULES: dict[str, WalkRule] = {
    "jsx_element": _jsx_element,
    "jsx_opening_element": _jsx_attributes,
    "jsx_self_closing_element": _jsx_attributes,
    "jsx_attribute": _jsx_attribute,
    "jsx_expression": _children,
    "jsx_closing_element": _nothing,
    "jsx_text": _nothing,
}

WALK_RULES: dict[str, WalkRule] = {**BASE_RULES, **JSX_RULES}


def walk_calls(root: Node, rules: dict[str, WalkRule] = WALK_RULES) -> Iterator[Node]:
    """Yield call nodes in post-order, children before their parent."""
    stack: list[tuple[Node, bool]] = [(root, False)]
    while stack:
        node, expanded = stack.pop()
        if expanded:
            if node.type == "call_expression":
                yield node
            continue
        stack.append((node, True))
        edges = list(rules.get(node.type, _children)(node))
        stack.extend((child, False) for child in reversed(edges))


def _iter_nodes(root: Node) -> Iterator[Node]:
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def _comment_body(text: str) -> str:
    if text.startswith("//"):
        return text[2:]
    if text.startswith("/*"):
        return text[2:-2]
    return text


def capture_comments(root: Node, comment_regex: re.Pattern) -> list[SourceComment]:
    comments = []
    for node in _iter_nodes(root):
        if node.type != "comment":
            continue
        body = _comment_body(node.text.decode("utf-8"))
        match = comment_regex.match(body)
        if not match:
            continue
        value = body[match.end():].strip()
        if value:
            comments.append(SourceComment(node.start_point[0] + 1, value))
    return comments


def find_comments(comments: list[SourceComment], line: int) -> str:
    return "\n".join(c.value for c in comments if c.line in (line, line - 1))


def describe_node(node: Node | None) -> str:
    if node is None:
        return "null"
    return json.dumps(
        {
            "type": node.type,
            "text": node.text.decode("utf-8"),
            "line": node.start_point[0] + 1,
        },
        indent=2,
    )


def _check_syntax(filename: str, root: Node) -> None:
    if not root.has_error:
        return
    for node in _iter_nodes(root):
        if node.is_error or node.is_missing:
            raise SourceSyntaxError(filename, node.start_point[0] + 1)
    raise SourceSyntaxError(filename, 1)


def maybe_extract_msgids(
    filename: str, node: Node, function_names: list[str], strict: bool
) -> list[str] | None:
    resolved = resolve_callee(node)
    if resolved is None or resolved.name not in function_names:
        return None

    args = resolved.args
    first = args[0] if args else None
    second = args[1] if len(args) > 1 else None

    line = node.start_point[0] + 1
    # ngettext, n_ and friends take singular and plural forms
    if resolved.name.startswith("n") and is_string(first) and is_string(second):
        msgids = [extract_string(first), extract_string(second)]
    elif is_string(first):
        msgids = [extract_string(first)]
    elif strict:
        raise ExtractionError(filename, describe_node(first))
    else:
        logger.debug(f"Skipping {resolved.name}() call in {filename}:{line}")
        return None

    if not msgids[0]:
        # The empty msgid is reserved for the catalog header
        logger.warning(f"Ignoring empty message in {filename}:{line}")
        return None
    return msgids


def find_candidates(
    filename: str,
    source: str,
    comment_regex: re.Pattern,
    function_names: list[str],
    strict: bool = False,
) -> list[SourceCandidate]:
    source = _HASH_BANG.sub("", source)
    tree = get_parser().parse(source.encode("utf-8"))
    _check_syntax(filename, tree.root_node)
    comments = capture_comments(tree.root_node, comment_regex)

    candidates = []
    for node in walk_calls(tree.root_node):
        msgids = maybe_extract_msgids(filename, node, function_names, strict)
        if not msgids:
            continue
        line = node.start_point[0] + 1
        candidates.append(
            SourceCandidate(
                msgid=msgids[0],
                msgid_plural=msgids[1] if len(msgids) > 1 else None,
                line=line,
                comments=find_comments(comments, line),
                reference=f"{filename}:{line}",
            )
        )
    return candidates


def extract_translations(
    filename: str,
    source: str,
    comment_regex: re.Pattern,
    function_names: list[str],
    strict: bool = False,
) -> dict[str, TranslationEntry]:
    translations: dict[str, TranslationEntry] = {}
    for candidate in find_candidates(
        filename, source, comment_regex, function_names, strict
    ):
        translation = candidate.to_entry()
        if candidate.msgid in translations:
            translations[candidate.msgid] = merge_translation(
                translations[candidate.msgid], translation
            )
        else:
            translations[candidate.msgid] = translation
    logger.debug(f"Found {len(translations)} messages in {filename}")
    return translations
