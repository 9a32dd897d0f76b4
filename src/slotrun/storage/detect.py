"""Tabular output detection."""


def looks_tabular(text: str) -> bool:
    """Return ``True`` if the first non-empty line of ``text`` contains a comma.

    Archiving decisions depend on exactly this rule, false positives
    included.  A line made only of spaces is not empty.

    Examples:
        >>> looks_tabular("a,b,c\\n1,2,3")
        True
        >>> looks_tabular("\\n\\nhello world")
        False
    """
    for line in text.splitlines():
        if line:
            return "," in line
    return False
