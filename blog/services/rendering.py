import markdown

MARKDOWN_EXTENSIONS = ["fenced_code", "tables"]


def render_markdown(text: str) -> str:
    """Convert a post's markdown body to HTML."""
    return markdown.markdown(text, extensions=MARKDOWN_EXTENSIONS)
