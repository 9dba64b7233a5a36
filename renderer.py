import html
import re

from config import DEFAULT_BULLET_ICON_SRC

TABLE_OPEN = '<table class="markdown-table">'
TABLE_CLOSE = "</table>"
LINE_BREAK = "<br>"

# After line-break conversion a "line start" is the beginning of the text or
# the position right after a <br> or a closing table tag.
_LINE_START = r"(?:^|(?<=<br>)|(?<=</table>))"

_BULLET_RE = re.compile(_LINE_START + r"[-*][ \t]")
_BOLD_RE = re.compile(r"\*\*(.+?)\*\*")
_ITALIC_RE = re.compile(r"\*(.+?)\*")
_NUMBERED_RE = re.compile(_LINE_START + r"(\d+)\.[ \t]")


def escape_html(text: str) -> str:
    """
    Escape `&`, `<` and `>` so the text can be inserted as HTML.

    Quotes are kept as-is, which matches how browsers serialize a text node.
    """
    return html.escape(text, quote=False)


def _split_row(line: str) -> list[str]:
    row = line.strip()
    if row.startswith("|"):
        row = row[1:]
    if row.endswith("|"):
        row = row[:-1]
    return [cell.strip() for cell in row.split("|")]


def convert_markdown_tables(text: str) -> str:
    """
    Turn runs of `|`-prefixed lines into an HTML table.

    Each such line becomes a `<tr>`, each `|`-separated cell a `<td>`. A table
    ends at the first line that is not a row or at end of input; the newline
    ending its last row is absorbed by the closing tag. Other lines are kept
    with their own newline.

    Args:
        text: Already HTML-escaped text.

    Returns:
        The text with tables converted.
    """
    lines = text.split("\n")
    last = len(lines) - 1
    parts = []
    in_table = False

    for idx, line in enumerate(lines):
        if line.strip().startswith("|"):
            if not in_table:
                in_table = True
                parts.append(TABLE_OPEN)
            cells = "".join(f"<td>{cell}</td>" for cell in _split_row(line))
            parts.append(f"<tr>{cells}</tr>")

            following = lines[idx + 1] if idx < last else ""
            if not following.strip().startswith("|"):
                parts.append(TABLE_CLOSE)
                in_table = False
        else:
            parts.append(line if idx == last else line + "\n")

    return "".join(parts)


class MessageRenderer:
    """
    Converts the markdown subset produced by the assistant into safe HTML.

    The stages always run in the same order: escape, tables, line breaks,
    bullets, bold, italic, numbered items. Every tag in the output is added by
    one of these stages; input markup is never unescaped.

    A message must be rendered exactly once. Rendering the output again
    would escape it a second time.
    """

    def __init__(self, icon_src: str = DEFAULT_BULLET_ICON_SRC, icon_alt: str = "Egis Logo"):
        self.icon_tag = (
            f'<img src="{html.escape(icon_src)}" alt="{html.escape(icon_alt)}" '
            'style="height:20px; vertical-align:middle; margin-right:5px;">'
        )

    def render(self, text: str) -> str:
        content = escape_html(text)
        content = convert_markdown_tables(content)
        content = content.replace("\n", LINE_BREAK)
        content = _BULLET_RE.sub(lambda m: self.icon_tag, content)
        content = _BOLD_RE.sub(r"<strong>\1</strong>", content)
        content = _ITALIC_RE.sub(r"<em>\1</em>", content)
        content = _NUMBERED_RE.sub(lambda m: f"{self.icon_tag}{m.group(1)}. ", content)
        return content
