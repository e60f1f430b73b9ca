"""Markdown to styled terminal text.

Parses with ``markdown-it-py`` (CommonMark plus tables and strikethrough) and
emits ANSI-colored lines indented by a fixed left margin. Fenced code is
highlighted with Pygments. The viewer treats the result as opaque text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, fields

from markdown_it import MarkdownIt
from markdown_it.token import Token
from pygments import highlight as pygments_highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from . import colors
from .ansi import ANSI_ESCAPE_RE, SGR_RESET, is_sgr, pad_ansi_line, visible_width, wrap_ansi_words
from .config import DEFAULT_STYLE, ColorTable

MARGIN = 4
BOLD = "\033[1m"
DIM = "\033[2m"
ITALIC = "\033[3m"
UNDERLINE = "\033[4m"
STRIKE = "\033[9m"

_TASK_PREFIX_RE = re.compile(r"^\[([ xX])\]\s+")

_md_parser = MarkdownIt("commonmark").enable(["table", "strikethrough"])
_FORMATTERS: dict[str, Terminal256Formatter] = {}


@dataclass(frozen=True)
class MarkdownTheme:
    """Resolved escape sequences per markdown element (``""`` disables)."""

    heading1: str = ""
    heading2: str = ""
    heading3: str = ""
    heading4: str = ""
    heading5: str = ""
    heading6: str = ""
    bold: str = ""
    italic: str = ""
    strikethrough: str = ""
    link: str = ""
    link_url: str = ""
    code: str = ""
    code_block: str = ""
    code_block_bg: str = ""
    list_marker: str = ""
    task_checked: str = ""
    task_unchecked: str = ""
    blockquote: str = ""
    table_header: str = ""
    table_row: str = ""
    table_border: str = ""
    color: bool = False

    @classmethod
    def from_colors(cls, table: ColorTable) -> MarkdownTheme:
        values: dict[str, object] = {"color": True}
        for item in fields(cls):
            if item.name == "color":
                continue
            hex_value = getattr(table, item.name)
            if item.name == "code_block_bg":
                values[item.name] = colors.background(hex_value)
            else:
                values[item.name] = colors.foreground(hex_value)
        return cls(**values)

    def heading(self, level: int) -> str:
        return getattr(self, f"heading{max(1, min(6, level))}")


PLAIN_THEME = MarkdownTheme()


def _formatter_for_style(style: str) -> Terminal256Formatter:
    formatter = _FORMATTERS.get(style)
    if formatter is not None:
        return formatter
    try:
        formatter = Terminal256Formatter(style=style)
    except ClassNotFound:
        formatter = _formatter_for_style(DEFAULT_STYLE) if style != DEFAULT_STYLE else Terminal256Formatter()
    _FORMATTERS[style] = formatter
    return formatter


def highlight_code(code: str, language: str, style: str = DEFAULT_STYLE) -> str | None:
    """Highlight ``code`` for ``language``; ``None`` when the language is unknown."""
    if not language:
        return None
    try:
        lexer = get_lexer_by_name(language)
    except ClassNotFound:
        return None
    return pygments_highlight(code, lexer, _formatter_for_style(style)).rstrip("\n")


def _with_background(line: str, bg: str) -> str:
    """Re-assert ``bg`` after every SGR in ``line`` so resets keep the block shaded."""
    return bg + ANSI_ESCAPE_RE.sub(lambda m: m.group(0) + bg if is_sgr(m.group(0)) else m.group(0), line)


def _block_end(tokens: list[Token], start: int) -> int:
    """Return the index of the token closing the block opened at ``start``."""
    depth = 0
    for idx in range(start, len(tokens)):
        depth += tokens[idx].nesting
        if depth == 0:
            return idx
    return len(tokens) - 1


class MarkdownRenderer:
    """Render markdown documents to newline-terminated ANSI text."""

    def __init__(self, theme: MarkdownTheme = PLAIN_THEME, style: str = DEFAULT_STYLE) -> None:
        self.theme = theme
        self.style = style
        self._reset = SGR_RESET if theme.color else ""

    def _s(self, *codes: str) -> str:
        """Join style codes, or return ``""`` when color output is off."""
        return "".join(codes) if self.theme.color else ""

    def render(self, document: str, width: int) -> str:
        if not document.strip():
            return ""
        content_width = max(1, width - 1 - MARGIN)
        lines = self._blocks(_md_parser.parse(document), content_width)
        while lines and not lines[-1]:
            lines.pop()
        margin = " " * MARGIN
        return "".join(f"{margin}{line}\n" if line else "\n" for line in lines)

    __call__ = render

    # -- blocks -------------------------------------------------------------

    def _blocks(self, tokens: list[Token], width: int, base: str = "", nested: bool = False) -> list[str]:
        lines: list[str] = []
        idx = 0
        while idx < len(tokens):
            tok = tokens[idx]
            kind = tok.type
            if kind == "heading_open":
                level = int(tok.tag[1:]) if tok.tag[1:].isdigit() else 1
                lines.extend(self._heading(tokens[idx + 1], level, width))
                idx = _block_end(tokens, idx) + 1
                continue
            if kind == "paragraph_open":
                lines.extend(wrap_ansi_words(self._inline(tokens[idx + 1], base), width))
                if not tok.hidden:
                    lines.append("")
                idx = _block_end(tokens, idx) + 1
                continue
            if kind in {"fence", "code_block"}:
                language = tok.info.strip().split()[0] if tok.info.strip() else ""
                lines.extend(self._code_block(tok.content, language, width))
                idx += 1
                continue
            if kind in {"bullet_list_open", "ordered_list_open"}:
                end = _block_end(tokens, idx)
                lines.extend(self._list(tokens[idx : end + 1], width, base))
                if not nested:
                    lines.append("")
                idx = end + 1
                continue
            if kind == "blockquote_open":
                end = _block_end(tokens, idx)
                lines.extend(self._blockquote(tokens[idx + 1 : end], width))
                idx = end + 1
                continue
            if kind == "table_open":
                end = _block_end(tokens, idx)
                lines.extend(self._table(tokens[idx + 1 : end]))
                lines.append("")
                idx = end + 1
                continue
            if kind == "hr":
                lines.append(self._s(self.theme.table_border) + "─" * width + self._reset)
                lines.append("")
                idx += 1
                continue
            if kind == "html_block":
                for raw in tok.content.rstrip("\n").split("\n"):
                    lines.extend(wrap_ansi_words(base + raw + (self._reset if base else ""), width))
                lines.append("")
                idx += 1
                continue
            if kind == "inline":
                lines.extend(wrap_ansi_words(self._inline(tok, base), width))
            idx += 1
        return lines

    def _heading(self, inline: Token, level: int, width: int) -> list[str]:
        style = self._s(self.theme.heading(level), BOLD)
        text = self._inline(inline, style)
        return [*wrap_ansi_words(f"{style}{'#' * level} {self._reset}{text}", width), ""]

    def _code_block(self, code: str, language: str, width: int) -> list[str]:
        code = code.rstrip("\n").replace("\t", "    ")
        highlighted = highlight_code(code, language, self.style) if self.theme.color else None
        bg = self._s(self.theme.code_block_bg)
        fg = self._s(self.theme.code_block)
        out: list[str] = []
        source_lines = (highlighted if highlighted is not None else code).split("\n")
        block_width = max([width, *(visible_width(line) + 2 for line in source_lines)])
        for line in source_lines:
            body = pad_ansi_line(f" {line} " if highlighted is not None else f" {fg}{line} ", block_width)
            out.append(_with_background(body, bg) + self._reset if bg else body + self._reset)
        out.append("")
        return out

    def _blockquote(self, tokens: list[Token], width: int) -> list[str]:
        gutter = f"{self._s(self.theme.blockquote)}│{self._reset} "
        inner = self._blocks(tokens, max(1, width - 2), base=self._s(self.theme.blockquote))
        while inner and not inner[-1]:
            inner.pop()
        return [f"{gutter}{line}" for line in inner] + [""]

    def _list(self, tokens: list[Token], width: int, base: str) -> list[str]:
        ordered = tokens[0].type == "ordered_list_open"
        number = int(tokens[0].attrs.get("start", 1) or 1) if ordered else 0
        lines: list[str] = []
        idx = 1
        while idx < len(tokens) - 1:
            if tokens[idx].type != "list_item_open":
                idx += 1
                continue
            end = _block_end(tokens, idx)
            item = tokens[idx + 1 : end]
            marker = self._task_marker(item)
            if marker is None:
                label = f"{number}." if ordered else "•"
                marker = f"{self._s(self.theme.list_marker)}{label}{self._reset}"
            number += 1
            marker_width = visible_width(marker) + 1
            body = self._blocks(item, max(1, width - marker_width), base=base, nested=True)
            while body and not body[-1]:
                body.pop()
            if not body:
                body = [""]
            lines.append(f"{marker} {body[0]}")
            lines.extend(f"{' ' * marker_width}{line}" if line else "" for line in body[1:])
            idx = end + 1
        return lines

    def _task_marker(self, item: list[Token]) -> str | None:
        """Strip a leading ``[ ]``/``[x]`` from a list item; return its checkbox marker."""
        inline = next((tok for tok in item if tok.type == "inline"), None)
        if inline is None or not inline.children or inline.children[0].type != "text":
            return None
        first = inline.children[0]
        match = _TASK_PREFIX_RE.match(first.content)
        if match is None:
            return None
        first.content = first.content[match.end() :]
        if match.group(1) == " ":
            return f"{self._s(self.theme.task_unchecked)}☐{self._reset}"
        return f"{self._s(self.theme.task_checked)}☑{self._reset}"

    def _table(self, tokens: list[Token]) -> list[str]:
        rows: list[list[str]] = []
        aligns: list[str] = []
        header_rows = 0
        in_head = False
        for tok in tokens:
            if tok.type == "thead_open":
                in_head = True
            elif tok.type == "thead_close":
                in_head = False
            elif tok.type == "tr_open":
                rows.append([])
                if in_head:
                    header_rows += 1
            elif tok.type in {"th_open", "td_open"} and len(rows) == 1:
                style = str(tok.attrs.get("style", ""))
                aligns.append(style.replace("text-align:", "") if "text-align" in style else "left")
            elif tok.type == "inline" and rows:
                rows[-1].append(self._inline(tok))
        if not rows:
            return []

        columns = max(len(row) for row in rows)
        for row in rows:
            row.extend([""] * (columns - len(row)))
        aligns.extend(["left"] * (columns - len(aligns)))
        widths = [max(visible_width(row[col]) for row in rows) for col in range(columns)]

        border = self._s(self.theme.table_border)

        def rule(left: str, mid: str, right: str) -> str:
            return border + left + mid.join("─" * (w + 2) for w in widths) + right + self._reset

        def cell(text: str, col: int, style: str) -> str:
            gap = widths[col] - visible_width(text)
            if aligns[col] == "right":
                text = " " * gap + text
            elif aligns[col] == "center":
                text = " " * (gap // 2) + text + " " * (gap - gap // 2)
            else:
                text = text + " " * gap
            return f" {style}{text}{self._reset} "

        sep = f"{border}│{self._reset}"
        out = [rule("┌", "┬", "┐")]
        for row_idx, row in enumerate(rows):
            style = self._s(self.theme.table_header, BOLD) if row_idx < header_rows else self._s(self.theme.table_row)
            out.append(sep + sep.join(cell(text, col, style) for col, text in enumerate(row)) + sep)
            if row_idx + 1 == header_rows and header_rows < len(rows):
                out.append(rule("├", "┼", "┤"))
        out.append(rule("└", "┴", "┘"))
        return out

    # -- inline -------------------------------------------------------------

    def _inline(self, token: Token, base: str = "") -> str:
        theme = self.theme
        parts: list[str] = [base]
        stack: list[str] = []
        links: list[tuple[str, int]] = []

        def restore() -> None:
            if self.theme.color:
                parts.append(SGR_RESET + base + "".join(stack))

        def push(style: str) -> None:
            stack.append(style)
            parts.append(style)

        def pop() -> None:
            if stack:
                stack.pop()
            restore()

        for child in token.children or []:
            kind = child.type
            if kind == "text":
                parts.append(child.content)
            elif kind == "softbreak":
                parts.append(" ")
            elif kind == "hardbreak":
                parts.append("\n")
            elif kind == "strong_open":
                push(self._s(theme.bold, BOLD))
            elif kind == "em_open":
                push(self._s(theme.italic, ITALIC))
            elif kind == "s_open":
                push(self._s(theme.strikethrough, STRIKE))
            elif kind in {"strong_close", "em_close", "s_close"}:
                pop()
            elif kind == "code_inline":
                parts.append(self._s(theme.code) + child.content)
                restore()
            elif kind == "link_open":
                links.append((str(child.attrs.get("href", "")), len(parts)))
                push(self._s(theme.link, UNDERLINE))
            elif kind == "link_close":
                pop()
                if links:
                    href, start = links.pop()
                    label = ANSI_ESCAPE_RE.sub("", "".join(parts[start:]))
                    if href and href != label and not href.startswith("#"):
                        parts.append(f" {self._s(theme.link_url, DIM)}({href})")
                        restore()
            elif kind == "image":
                src = str(child.attrs.get("src", ""))
                parts.append(f"[image: {child.content or src}]")
            elif child.content:
                parts.append(child.content)
        parts.append(self._reset)
        return "".join(parts)


def make_renderer(theme: MarkdownTheme = PLAIN_THEME, style: str = DEFAULT_STYLE) -> MarkdownRenderer:
    """Return a ``(document, width) -> str`` renderer for the pipeline."""
    return MarkdownRenderer(theme, style)


def render_markdown(
    document: str,
    width: int,
    theme: MarkdownTheme = PLAIN_THEME,
    style: str = DEFAULT_STYLE,
) -> str:
    return MarkdownRenderer(theme, style).render(document, width)
