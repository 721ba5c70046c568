import re

_NON_WORD = re.compile(r"[^\w\s-]")
_SEPARATORS = re.compile(r"[\s_-]+")


def slugify(name: str) -> str:
    """Lowercase ``name``, drop punctuation and join words with single hyphens.

    >>> slugify("Some  Name -- Here!")
    'some-name-here'
    """
    slug = _NON_WORD.sub("", name.strip().lower())
    return _SEPARATORS.sub("-", slug).strip("-")


def make_tag_name(name: str, parent_name: str | None = None) -> str:
    if parent_name:
        return f"{parent_name} {name}"
    return name
