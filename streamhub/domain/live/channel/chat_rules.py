"""Chat rules rendering."""

from markdown_it import MarkdownIt

# Raw HTML in the source is escaped, never passed through.
_markdown = MarkdownIt("commonmark", {"html": False})


def render_chat_rules(chat_rules_md: str | None) -> str | None:
    """Render streamer-supplied Markdown chat rules to HTML; blank rules render to None."""
    if chat_rules_md is None or not chat_rules_md.strip():
        return None
    return _markdown.render(chat_rules_md)
