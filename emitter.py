from typing import List, TextIO

from out_types import Function

INDENT_SIZE = 4


def render_function(fn: Function) -> str:
    params = ", ".join(f"{arg.name}: {arg.type}" for arg in fn.args)
    return_type = f" -> {fn.return_type}" if fn.return_type != "void" else ""
    return f"fn {fn.name}({params}){return_type};"


def render(functions: List[Function]) -> str:
    """Renders the extern block; an empty list renders as an empty string."""
    if not functions:
        return ""
    indent = " " * INDENT_SIZE
    lines = ["extern {"]
    lines.extend(f"{indent}{render_function(fn)}" for fn in functions)
    lines.append("}")
    return "\n".join(lines) + "\n"


def emit(functions: List[Function], sink: TextIO):
    text = render(functions)
    if text:
        sink.write(text)
