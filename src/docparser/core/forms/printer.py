"""
Form Printer

Renders forms back to dialect source text. Used to keep lambda-list
elements as literal tokens and for human-facing display.
"""

from .types import Character, Form, Identifier, form_head

_PREFIX_FOR = {
    "quote": "'",
    "quasiquote": "`",
    "unquote": ",",
    "unquote-splicing": ",@",
    "function": "#'",
}


def _render_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def render_form(form: Form) -> str:
    """Render a form as source text."""
    if isinstance(form, (Identifier, Character)):
        return str(form)
    if isinstance(form, str):
        return _render_string(form)
    if isinstance(form, tuple):
        head = form_head(form)
        if head is not None and not head.is_qualified and len(form) == 2:
            prefix = _PREFIX_FOR.get(head.name)
            if prefix:
                return prefix + render_form(form[1])
        return "(" + " ".join(render_form(item) for item in form) + ")"
    if isinstance(form, bool):
        raise TypeError(f"Cannot render {form!r} as a form")
    if isinstance(form, (int, float)):
        return repr(form)
    raise TypeError(f"Cannot render {type(form).__name__} as a form")
