"""Escaping of user-visible strings embedded in generated scripts.

Display names and package identifiers end up inside double-quoted bash
strings and single-quoted PowerShell literals. These helpers make sure such
values are always treated as data by the interpreting shell.
"""

# Characters that keep a special meaning inside a double-quoted bash string
SHELL_DANGEROUS_CHARS = frozenset('$`"\\!')


def escape_shell_string(text: str) -> str:
    """Escape a string for use inside a double-quoted POSIX shell string.

    Each occurrence of ``$``, backtick, ``"``, ``\\`` or ``!`` in the input
    gets exactly one backslash in front of it. The input is scanned once,
    left to right, so backslashes added here are never escaped again.

    Args:
        text: Arbitrary input, typically an application display name.

    Returns:
        The escaped string. Input without dangerous characters is returned
        unchanged.
    """
    return "".join("\\" + char if char in SHELL_DANGEROUS_CHARS else char for char in text)


def escape_powershell_string(text: str) -> str:
    """Escape a string for use inside a single-quoted PowerShell literal.

    Single-quoted literals perform no expansion, so doubling the single
    quote is the only escaping needed.
    """
    return text.replace("'", "''")
