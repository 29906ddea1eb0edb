import logging
import re
from bisect import bisect_right
from dataclasses import dataclass

from .document import EditPoint, TextDocument
from .models import DirectiveSyntax

logger = logging.getLogger(__name__)


@dataclass
class ImportDirective:
    start: EditPoint
    end: EditPoint

    @property
    def text(self) -> str:
        return self.start.get_text(self.end)


@dataclass
class ScopeBlock:
    name: str
    start: EditPoint


def directive_pattern(syntax: DirectiveSyntax) -> re.Pattern[str]:
    keyword = re.escape(syntax.keyword)
    terminator = re.escape(syntax.terminator)
    return re.compile(
        rf"^[ \t]*(?P<text>{keyword}[ \t]+(?!var\b|await\b)[^\s(]+[^\n(]*?{terminator})[ \t]*\r?$",
        re.MULTILINE,
    )


def scope_pattern(syntax: DirectiveSyntax) -> re.Pattern[str]:
    keyword = re.escape(syntax.scope_keyword)
    return re.compile(
        rf"^(?P<indent>[ \t]*){keyword}[ \t]+(?P<name>[\w.@]+)[ \t]*\r?\n(?P=indent)\{{[ \t]*\r?$",
        re.MULTILINE,
    )


def scope_level_regions(text: str, syntax: DirectiveSyntax) -> tuple[list[int], list[bool]]:
    """Split text at every brace and statement terminator.

    Returns the region start offsets and, for each region, whether every
    brace enclosing it opens a scope block (file level counts as one).
    """
    scope_header = re.compile(rf"{re.escape(syntax.scope_keyword)}\b")
    starts = [0]
    at_scope_level = [True]
    stack: list[bool] = []
    segment_start = 0

    for match in re.finditer(r"[{};]", text):
        if match.group() == "{":
            header = re.sub(r"//[^\n]*", "", text[segment_start:match.start()])
            lines = [line.strip() for line in header.splitlines() if line.strip()]
            stack.append(bool(lines) and scope_header.match(lines[-1]) is not None)
        elif match.group() == "}" and stack:
            stack.pop()
        segment_start = match.end()
        starts.append(match.end())
        at_scope_level.append(all(stack))

    return starts, at_scope_level


def find_directives(document: TextDocument, syntax: DirectiveSyntax) -> list[ImportDirective]:
    """Find whole-line import directives at file or scope-block level, top to bottom.

    Lines inside type or member bodies are skipped, so using statements and
    declarations in methods stay where they are.
    """
    starts, at_scope_level = scope_level_regions(document.text, syntax)
    directives = []
    for match in directive_pattern(syntax).finditer(document.text):
        if not at_scope_level[bisect_right(starts, match.start("text")) - 1]:
            continue
        directives.append(ImportDirective(
            start=document.create_point(match.start("text")),
            end=document.create_point(match.end("text")),
        ))
    logger.debug(f"Found {len(directives)} '{syntax.keyword}' directives")
    return directives


def find_scope_blocks(document: TextDocument, syntax: DirectiveSyntax) -> list[ScopeBlock]:
    """Find block-scoped declarations whose opening brace stands alone on the next line.

    The start marker sits on the declaration line at the brace's column, so one
    line down and one character right lands just past the brace.
    """
    blocks = []
    for match in scope_pattern(syntax).finditer(document.text):
        blocks.append(ScopeBlock(
            name=match.group("name"),
            start=document.create_point(match.end("indent")),
        ))
    logger.debug(f"Found {len(blocks)} '{syntax.scope_keyword}' blocks")
    return blocks
