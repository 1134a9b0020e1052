"""
Syntax highlighting tests

Tests the Pygments lexer used by the "highlight" output format.
"""

from pygments.token import Generic, Keyword, Name, Punctuation, String

from todofile.lib.lexer import TodoLexer, get_lexer, source_highlight


def lex(source):
    return list(TodoLexer().get_tokens(source))


class TestTodoLexer:
    """Test token types for each construct"""

    def test_heading(self):
        assert (Generic.Heading, "# Work") in lex("# Work\n")

    def test_todo_state(self):
        tokens = lex("[x] *ship* it\n")
        assert (Punctuation, "[") in tokens
        assert (Keyword, "x") in tokens
        assert (Generic.Strong, "*ship*") in tokens

    def test_bullet(self):
        tokens = lex("- `code` and /it/\n")
        assert (Punctuation, "-") in tokens
        assert (String, "`code`") in tokens
        assert (Generic.Emph, "/it/") in tokens

    def test_link(self):
        assert (Name.Tag, "|S[open:u]|") in lex("see |S[open:u]|\n")

    def test_registered_names(self):
        lexer = get_lexer()
        assert "todo" in lexer.aliases
        assert "*.todo" in lexer.filenames


class TestSourceHighlight:
    """Test terminal output"""

    def test_ansi_output(self):
        output = source_highlight("# Work\n[x] ship\n")
        assert "Work" in output
        assert "\x1b[" in output
