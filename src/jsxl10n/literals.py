from tree_sitter import Node

_SIMPLE_ESCAPES = {
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
}
_LINE_TERMINATORS = ("\r\n", "\n", "\r", "\u2028", "\u2029")


def expression_children(node: Node) -> list[Node]:
    return [child for child in node.named_children if child.type != "comment"]


def _unwrap(node: Node) -> Node:
    while node.type == "parenthesized_expression":
        inner = expression_children(node)
        if len(inner) != 1:
            break
        node = inner[0]
    return node


def is_string_literal(node: Node) -> bool:
    return _unwrap(node).type == "string"


def is_concatenation(node: Node) -> bool:
    node = _unwrap(node)
    if node.type != "binary_expression":
        return False
    operator = node.child_by_field_name("operator")
    if operator is None or operator.type != "+":
        return False
    return is_string(node.child_by_field_name("left")) and is_string(
        node.child_by_field_name("right")
    )


def is_string(node: Node | None) -> bool:
    if node is None:
        return False
    return is_string_literal(node) or is_concatenation(node)


def decode_escape(sequence: str) -> str:
    body = sequence[1:]
    if body in _SIMPLE_ESCAPES:
        return _SIMPLE_ESCAPES[body]
    if body.startswith("u{"):
        return chr(int(body[2:-1], 16))
    if body[:1] in ("u", "x") and len(body) > 1:
        return chr(int(body[1:], 16))
    if body.isdigit() and all(digit in "01234567" for digit in body):
        return chr(int(body, 8))
    if body in _LINE_TERMINATORS:
        return ""
    return body


def _literal_value(node: Node) -> str:
    parts = []
    for child in node.named_children:
        text = child.text.decode("utf-8")
        if child.type == "escape_sequence":
            parts.append(decode_escape(text))
        elif child.type != "comment":
            parts.append(text)
    # Recombine UTF-16 surrogate pairs written as two \u escapes
    value = "".join(parts)
    return value.encode("utf-16", "surrogatepass").decode("utf-16", "surrogatepass")


def extract_string(node: Node) -> str:
    """Return the value of a string literal or a concatenation of literals.

    The node must satisfy is_string().
    """
    node = _unwrap(node)
    if node.type == "string":
        return _literal_value(node)
    return extract_string(node.child_by_field_name("left")) + extract_string(
        node.child_by_field_name("right")
    )
