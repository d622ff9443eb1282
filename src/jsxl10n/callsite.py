from tree_sitter import Node

from jsxl10n.classes import Resolved
from jsxl10n.literals import expression_children, extract_string, is_string_literal


def _text(node: Node) -> str:
    return node.text.decode("utf-8")


def _accessed_name(node: Node) -> str | None:
    if node.type == "identifier":
        return _text(node)
    if node.type == "member_expression":
        return _text(node.child_by_field_name("property"))
    if node.type == "subscript_expression":
        index = node.child_by_field_name("index")
        if index is not None and is_string_literal(index):
            return extract_string(index)
    return None


def resolve_callee(node: Node) -> Resolved | None:
    """Name the function invoked by a call node.

    Handles plain calls (``gettext(...)``), member calls (``i18n.gettext(...)``)
    and explicit-receiver calls (``gettext.call(ctx, ...)``), in which case the
    receiver argument is dropped. Returns None for anything else.
    """
    if node.type != "call_expression":
        return None
    arguments = node.child_by_field_name("arguments")
    if arguments is None or arguments.type != "arguments":
        return None

    callee = node.child_by_field_name("function")
    args = expression_children(arguments)
    if callee.type == "identifier":
        return Resolved(_text(callee), args)
    if callee.type != "member_expression":
        return None

    name = _text(callee.child_by_field_name("property"))
    if name == "call":
        name = _accessed_name(callee.child_by_field_name("object"))
        args = args[1:]
    if not name:
        return None
    return Resolved(name, args)
