"""
Export tests

Tests the dict/JSON tree export, the numbered link listing and the eww
widget export.
"""

import json
import shlex

import pytest

from todofile.config import TodoConfig, TodoStateOps
from todofile.lib.parser import document_parse
from todofile.lib.export import document_toDict, document_toJSON, links_list, span_toDict
from todofile.lib.eww import EwwRenderer, ewwTodos_build, ewwTodos_toJSON, quote
from todofile.models.tokens import Normal, Bold, Link, Handler, TextExtra


@pytest.fixture
def config():
    return TodoConfig(todo_state={"x": "DONE"}, handlers={"open": "xdg-open {path}"})


class TestTreeExport:
    """Test document_toDict / document_toJSON"""

    def test_todo(self, config):
        document = document_parse("# Work\n[x] *ship*\n", config)
        assert document_toDict(document) == {"headings": [{
            "name": "Work",
            "body": [{
                "kind": "todo",
                "state": {"kind": "defined", "text": "DONE"},
                "description": [{"kind": "bold", "children": [{"kind": "normal", "text": "ship"}]}],
            }],
        }]}

    def test_unset_and_other_states(self, config):
        document = document_parse("# W\n[] a\n[y] b\n", config)
        body = document_toDict(document)["headings"][0]["body"]
        assert body[0]["state"] is None
        assert body[1]["state"] == {"kind": "other", "text": "y"}

    def test_bullet_and_text(self):
        document = document_parse("# W\n- a\nb\n")
        body = document_toDict(document)["headings"][0]["body"]
        assert body == [
            {"kind": "bullet", "marker": "-", "text": [{"kind": "normal", "text": "a"}]},
            {"kind": "text", "text": [{"kind": "normal", "text": "b"}]},
        ]

    def test_link(self, config):
        document = document_parse("# W\n- |Site[open:https://x]|\n", config)
        span = document_toDict(document)["headings"][0]["body"][0]["text"][0]
        assert span == {
            "kind": "link",
            "name": "Site",
            "handler": "open",
            "known": True,
            "path": "https://x",
        }

    def test_text_extra(self):
        assert span_toDict(TextExtra("`", [Normal("abc")])) == {
            "kind": "text_extra",
            "delimiter": "`",
            "children": [{"kind": "normal", "text": "abc"}],
        }

    def test_unknown_span(self):
        with pytest.raises(TypeError):
            span_toDict("not a span")

    def test_json_matches_dict(self, config):
        document = document_parse("# W\n[x] *a* |S[open:u]|\n- b\n", config)
        assert json.loads(document_toJSON(document)) == document_toDict(document)


class TestLinksList:
    """Test the numbered link listing"""

    def test_document_order(self, config):
        document = document_parse(
            "# W\n- |Site[open:https://x]|\n\n# H\n[x] read *|Doc[view:/tmp/a]|*\n",
            config,
        )
        assert links_list(document) == [
            "0 Site - open:https://x",
            "1 Doc - view:/tmp/a",
        ]

    def test_no_links(self):
        assert links_list(document_parse("# W\n- a\n")) == []


class TestEww:
    """Test the eww widget export"""

    def test_quote_escapes(self):
        assert quote('say "hi" \\') == '"say \\"hi\\" \\\\"'

    def test_normal(self):
        assert EwwRenderer("").span_render(Normal("hi")) == '(label :halign "start" :text "hi")'

    def test_styled(self):
        assert EwwRenderer("").span_render(Bold([Normal("b")])) == (
            '(box :style "font-weight: bold;" :halign "start" (label :halign "start" :text "b"))'
        )

    def test_text_extra(self):
        assert EwwRenderer("").span_render(TextExtra("*", [Normal("b")])) == (
            '(box :space-evenly false :halign "start" (label :halign "start" :text "*") '
            '(label :halign "start" :text "b"))'
        )

    def test_todos(self, config):
        document = document_parse("# W\n[x] *b* |S[open:u]|\n- not a todo\n", config)
        todos = ewwTodos_build(document, config, link_command="todofile --openLinkRaw {handler} {path}")

        assert len(todos) == 1
        assert todos[0]["state"] == "[DONE]"
        description = todos[0]["description"]
        assert description[1] == '(label :halign "start" :text " ")'
        assert ':onclick "todofile --openLinkRaw open u &"' in description[2]
        assert ':text "S"' in description[2]

    def test_unset_state_policy(self):
        config = TodoConfig(todo_state_ops=TodoStateOps(default="TODO", brackets=False))
        todos = ewwTodos_build(document_parse("# W\n[] a\n"), config)
        assert todos[0]["state"] == "TODO"

    def test_unset_state_default(self):
        todos = ewwTodos_build(document_parse("# W\n[] a\n"))
        assert todos[0]["state"] == "[ ]"

    def test_json(self, config):
        document = document_parse("# W\n[x] a\n", config)
        assert json.loads(ewwTodos_toJSON(document, config)) == [
            {"state": "[DONE]", "description": ['(label :halign "start" :text "a")']}
        ]

    def test_link_command_is_shell_quoted(self):
        path = 'a"; touch /tmp/x; "'
        renderer = EwwRenderer("run {handler} {path}")
        command = renderer.command_make(Link(name="S", handler=Handler("open"), path=path))
        assert shlex.split(command) == ["run", "open", path]

    def test_directories_substituted_once(self):
        """Braces in directory names are kept as text, not read as placeholders"""
        renderer = EwwRenderer(
            "todofile {inputdir} {outputdir} --openLinkRaw {handler} {path}",
            inputdir="/tmp/{in}",
            outputdir="/tmp/out dir",
        )
        command = renderer.command_make(Link(name="S", handler=Handler("open"), path="u"))
        assert command == "todofile '/tmp/{in}' '/tmp/out dir' --openLinkRaw open u"
