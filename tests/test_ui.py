"""Tests for the prompt widgets and group runner."""

import pytest

from ghdispatch import ui


class FakeStdin:
    def __init__(self, tty):
        self.tty = tty

    def isatty(self):
        return self.tty


class TestWidgets:
    """text / select / confirm."""

    def test_text_answer_kept_as_typed(self, feed_input, monkeypatch):
        monkeypatch.setattr(ui.sys, "stdin", FakeStdin(tty=False))
        feed_input("  hello  ")

        assert ui.text("Name") == "  hello  "

    def test_text_empty_answer_keeps_default_when_piped(self, feed_input, monkeypatch):
        monkeypatch.setattr(ui.sys, "stdin", FakeStdin(tty=False))
        feed_input("")

        assert ui.text("Input tag", initial_value="1.0.0") == "1.0.0"

    def test_text_default_is_editable_on_terminal(self, feed_input, monkeypatch):
        """The default is typed in for the user, so erasing it submits ''."""
        hooks, inserted = [], []
        monkeypatch.setattr(ui.sys, "stdin", FakeStdin(tty=True))
        monkeypatch.setattr(ui.readline, "set_startup_hook",
                            lambda hook=None: hooks.append(hook))
        monkeypatch.setattr(ui.readline, "insert_text", inserted.append)
        feed_input("")

        assert ui.text("Input tag", initial_value="1.0.0") == ""

        assert len(hooks) == 2 and hooks[-1] is None
        hooks[0]()
        assert inserted == ["1.0.0"]

    def test_text_clears_prefill_on_cancel(self, feed_input, monkeypatch):
        hooks = []
        monkeypatch.setattr(ui.sys, "stdin", FakeStdin(tty=True))
        monkeypatch.setattr(ui.readline, "set_startup_hook",
                            lambda hook=None: hooks.append(hook))
        feed_input(KeyboardInterrupt)

        with pytest.raises(ui.PromptCancelled):
            ui.text("Input tag", initial_value="1.0.0")

        assert hooks[-1] is None

    def test_select_reprompts_on_invalid_choice(self, feed_input, capsys):
        feed_input("9", "abc", "2")
        options = [ui.Option("a"), ui.Option("b")]

        assert ui.select("Pick", options) == "b"
        assert "Enter a number between 1 and 2" in capsys.readouterr().out

    def test_select_without_default_requires_answer(self, feed_input):
        feed_input("", "1")

        assert ui.select("Pick", [ui.Option("a"), ui.Option("b")]) == "a"

    def test_select_unknown_initial_value_has_no_default(self, feed_input):
        feed_input("", "2")

        assert ui.select("Pick", [ui.Option("a"), ui.Option("b")], initial_value="zzz") == "b"

    def test_select_empty_options(self, capsys):
        assert ui.select("Pick", []) is None
        assert "Nothing to choose from" in capsys.readouterr().out

    def test_select_shows_label_and_hint(self, feed_input, capsys):
        feed_input("1")

        ui.select("Pick", [ui.Option(value=7, label="Deploy", hint=".github/workflows/deploy.yml")])

        out = capsys.readouterr().out
        assert "Deploy" in out
        assert ".github/workflows/deploy.yml" in out

    @pytest.mark.parametrize("answer,default,expected", [
        ("", True, True),
        ("", False, False),
        ("y", False, True),
        ("YES", False, True),
        ("n", True, False),
    ])
    def test_confirm(self, feed_input, answer, default, expected):
        feed_input(answer)

        assert ui.confirm("Continue?", default=default) is expected

    def test_confirm_reprompts(self, feed_input):
        feed_input("maybe", "y")

        assert ui.confirm("Continue?", default=False) is True

    @pytest.mark.parametrize("exc", [KeyboardInterrupt, EOFError])
    def test_interrupt_cancels(self, feed_input, exc):
        feed_input(exc)

        with pytest.raises(ui.PromptCancelled):
            ui.text("Name")


class TestGroup:
    """Grouped prompts with a cancellation hook."""

    def test_runs_in_order(self):
        calls = []

        def make(name):
            def prompt():
                calls.append(name)
                return name.upper()
            return prompt

        result = ui.group({"a": make("a"), "b": make("b"), "c": make("c")})

        assert calls == ["a", "b", "c"]
        assert list(result.items()) == [("a", "A"), ("b", "B"), ("c", "C")]

    def test_cancel_hook_receives_partial_results(self, feed_input):
        feed_input("first", KeyboardInterrupt)
        seen = []

        with pytest.raises(ui.PromptCancelled):
            ui.group(
                {"one": lambda: ui.text("One"), "two": lambda: ui.text("Two")},
                on_cancel=lambda results: seen.append(dict(results)),
            )

        assert seen == [{"one": "first"}]

    def test_cancel_hook_can_exit(self, feed_input):
        feed_input(KeyboardInterrupt)

        def on_cancel(results):
            raise SystemExit(0)

        with pytest.raises(SystemExit) as exc:
            ui.group({"one": lambda: ui.text("One")}, on_cancel=on_cancel)

        assert exc.value.code == 0

    def test_empty_group(self):
        assert ui.group({}) == {}


def test_colours_disabled_without_tty():
    """Plain text when NO_COLOR is set or stdout is captured."""
    assert ui.green("ok") == "ok"
    assert ui.bold("title") == "title"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
