QUALIFIER_PREFIXES = (
    "struct ",
    "enum ",
    "const ",
)

# Words that cannot be used as parameter names in the generated extern block.
RESERVED_KEYWORDS = {
    "asm", "break", "const", "continue", "defer", "else", "enum", "error",
    "export", "extern", "false", "fn", "for", "goto", "if", "inline", "null",
    "pub", "return", "struct", "switch", "true", "type", "undefined", "union",
    "unreachable", "use", "var", "volatile", "while",
}


def strip_prefixes(name: str) -> str:
    """Removes leading qualifier tokens, e.g. ``"const struct Foo"`` -> ``"Foo"``."""
    stripped = True
    while stripped:
        stripped = False
        for prefix in QUALIFIER_PREFIXES:
            if name.startswith(prefix):
                name = name[len(prefix):]
                stripped = True
                break
    return name


def sanitize_identifier(name: str, index: int) -> str:
    """Gives unnamed parameters a positional name and escapes reserved keywords."""
    if not name:
        return f"arg{index}"
    return f"{name}_" if name in RESERVED_KEYWORDS else name
