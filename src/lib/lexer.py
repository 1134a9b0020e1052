"""
Custom Pygments lexer for .todo syntax highlighting

Highlights todo files for terminal display (the "highlight" output
format). This is a presentation lexer only; the document structure comes
from lib/tokenizer.py.

Token types:
- Generic.Heading: "# name" lines
- Keyword: todo state inside brackets
- Punctuation: brackets and bullet markers
- String: `verbatim`
- Generic.Strong: *bold*
- Generic.Emph: /italic/
- Generic.Deleted: -crossed-
- Name.Attribute: _underline_
- Name.Tag: |name[handler:path]| links
"""

from pygments import highlight
from pygments.formatters import TerminalFormatter
from pygments.lexer import RegexLexer, bygroups, include, default
from pygments.token import (
    Text,
    Whitespace,
    Punctuation,
    Name,
    String,
    Keyword,
    Generic,
)


class TodoLexer(RegexLexer):
    """
    Lexer for .todo markup

    Example:
        # Work
        [x] *ship* the /release/

    Tokens:
        # Work → Generic.Heading
        [ → Punctuation
        x → Keyword
        *ship* → Generic.Strong
        /release/ → Generic.Emph
    """

    name = 'Todo'
    aliases = ['todo']
    filenames = ['*.todo']

    tokens = {
        'root': [
            # Heading lines
            (r'^([ ]*)(#[^\n]*)(\n?)', bygroups(Whitespace, Generic.Heading, Whitespace)),

            # Todo state at line start
            (r'^([ ]*)(\[)([^\]]*)(\])', bygroups(Whitespace, Punctuation, Keyword, Punctuation), 'inline'),

            # Bullet marker at line start
            (r'^([ ]*)(-)', bygroups(Whitespace, Punctuation), 'inline'),

            (r'\n', Whitespace),
            (r'[ ]+', Whitespace),

            # Anything else starts a paragraph line
            default('inline'),
        ],

        'inline': [
            (r'\n', Whitespace, '#pop'),
            include('markup'),
            (r'[^`_\-*/|\n]+', Text),
            (r'.', Text),
        ],

        'markup': [
            (r'\|[^|\[\n]*\[[^:|\]\n]*:[^|\]\n]*\]\|', Name.Tag),
            (r'`[^`\n]*`', String),
            (r'\*[^*\n]*\*', Generic.Strong),
            (r'/[^/\n]*/', Generic.Emph),
            (r'-[^\-\n]*-', Generic.Deleted),
            (r'_[^_\n]*_', Name.Attribute),
        ],
    }


def get_lexer() -> TodoLexer:
    """
    Get the TodoLexer instance

    Returns:
        TodoLexer instance ready for use with Pygments
    """
    return TodoLexer()


def source_highlight(source: str) -> str:
    """
    Highlight .todo source for an ANSI terminal

    Args:
        source: Raw .todo text

    Returns:
        Text with ANSI color escapes
    """
    return highlight(source, TodoLexer(), TerminalFormatter())
