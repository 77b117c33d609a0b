from __future__ import annotations
from typing import Union

from .vreader import SEPARATORS, Form, Keyword, List, String, Symbol

__all__ = ["to_source", "to_bytes"]

_NAME_STOPS = {chr(b) for b in SEPARATORS} | {")"}


def _text(payload: Union[str, bytes]) -> str:
    if isinstance(payload, bytes):
        return payload.decode("utf-8", "surrogateescape")
    return payload


def _check_name(name: str, what: str):
    if any(ch in _NAME_STOPS for ch in name):
        raise ValueError(f"{what} {name!r} contains a separator or ')'")


def _atom(form: Form, closing: bool) -> str:
    if isinstance(form, String):
        val = _text(form.val)
        if '"' in val:
            raise ValueError(f"string {val!r} contains '\"'")
        return f'"{val}"'
    if isinstance(form, Keyword):
        name = _text(form.name)
        _check_name(name, "keyword")
        return f":{name}"
    if isinstance(form, Symbol):
        name = _text(form.name)
        _check_name(name, "symbol")
        if name[:1] in ('"', "(", ":"):
            raise ValueError(f"symbol {name!r} would read as another form")
        # An empty symbol only reads back when a ")" directly follows it
        if not name and not closing:
            raise ValueError("empty symbol is only printable as the last list item")
        return name
    raise TypeError(f"not a form: {form!r}")


def to_source(form: Form) -> str:
    """Render a form as source text that reads back to an equal form.

    Children are joined by a single space. Payloads the grammar cannot express
    (a ``"`` inside a string, separators or ``)`` inside a symbol or keyword, an
    empty symbol anywhere but the end of a list) raise ValueError.

    Lists are walked with an explicit stack, so arbitrarily deep trees print
    without hitting the recursion limit.
    """
    out: list[str] = []
    stack: list[tuple[List, int]] = []
    node, closing = form, False
    while True:
        if node is not None:
            if isinstance(node, List):
                out.append("(")
                stack.append((node, 0))
            else:
                out.append(_atom(node, closing))
        if not stack:
            break
        parent, idx = stack.pop()
        if idx == len(parent):
            out.append(")")
            node = None
            continue
        stack.append((parent, idx + 1))
        node = parent[idx]
        closing = idx == len(parent) - 1
        if idx or (closing and isinstance(node, Symbol) and not node.name):
            out.append(" ")
    return "".join(out)


def to_bytes(form: Form) -> bytes:
    return to_source(form).encode("utf-8", "surrogateescape")
