#!/usr/bin/env python3
"""
ui - Terminal output and prompt widgets.

  Output
  ──────
  - ANSI colour helpers (disabled when stdout is not a TTY or NO_COLOR is set)
  - intro()/outro() section banners, step/success/warn/error lines

  Prompts
  ───────
  - text(message, placeholder, initial_value)   → str
  - select(message, options, initial_value)     → option value
  - confirm(message, default)                   → bool
  - group(prompts, on_cancel)                   → {name: answer}

Every widget raises PromptCancelled on Ctrl-C / Ctrl-D so callers decide
whether an abort is fatal.
"""

import os
import readline
import sys
from typing import Any, Callable, Dict, List, NamedTuple, Optional


# ─────────────────────────────────────────────────────────────
# ANSI helpers
# ─────────────────────────────────────────────────────────────

def _c(code: str, text: str) -> str:
    if os.environ.get("NO_COLOR") or not sys.stdout.isatty():
        return text
    return f"\033[{code}m{text}\033[0m"

def green(t):   return _c("32", t)
def red(t):     return _c("31", t)
def yellow(t):  return _c("33", t)
def cyan(t):    return _c("36", t)
def grey(t):    return _c("90", t)
def bold(t):    return _c("1",  t)
def dim(t):     return _c("2",  t)


def intro(title: str) -> None:
    print(f"\n{bold('━' * 60)}")
    print(f"  {bold(cyan(title))}")
    print(f"{bold('━' * 60)}")


def outro(message: str) -> None:
    print(f"  {grey('└')}  {dim(message)}\n")


def step(message: str) -> None:
    print(f"  {cyan('◇')}  {message}")


def success(message: str) -> None:
    print(green(f"  ✓  {message}"))


def warn(message: str) -> None:
    print(yellow(f"  ⚠  {message}"))


def error(message: str) -> None:
    print(red(f"  ❌  {message}"), file=sys.stderr)


def cancel(message: str) -> None:
    print(grey(f"\n  ⊘  {message}\n"))


# ─────────────────────────────────────────────────────────────
# Prompts
# ─────────────────────────────────────────────────────────────

class PromptCancelled(Exception):
    """The user pressed Ctrl-C or closed stdin while a prompt was open."""


class Option(NamedTuple):
    value: Any
    label: str = ""
    hint: str = ""

    @property
    def display(self) -> str:
        return self.label or str(self.value)


def _ask(prompt: str) -> str:
    try:
        return input(prompt)
    except (KeyboardInterrupt, EOFError):
        raise PromptCancelled() from None


def _prefilled_ask(prompt: str, initial_value: str) -> str:
    """input() with initial_value already typed in and editable."""

    def _prefill_hook() -> None:
        readline.insert_text(initial_value)

    readline.set_startup_hook(_prefill_hook)
    try:
        return _ask(prompt)
    finally:
        readline.set_startup_hook()


def text(message: str, placeholder: str = "", initial_value: str = "") -> str:
    """
    Free-text prompt, returned as typed.

    On a terminal initial_value is pre-filled and can be edited or erased.
    Without one (piped stdin) it is shown in brackets and an empty answer
    keeps it.
    """
    print(f"\n  {bold(message)}")
    if placeholder:
        print(f"  {grey(placeholder)}")
    if sys.stdin is not None and sys.stdin.isatty():
        return _prefilled_ask("  > ", initial_value)
    suffix = f" [{initial_value}]" if initial_value else ""
    return _ask(f"  >{suffix} ") or initial_value


def select(message: str, options: List[Option], initial_value: Any = None) -> Any:
    """Numbered single-choice prompt; Enter picks initial_value if it is listed."""
    if not options:
        warn("Nothing to choose from.")
        return None

    default_idx = None
    for i, opt in enumerate(options):
        if opt.value == initial_value:
            default_idx = i
            break

    print(f"\n  {bold(message)}\n")
    for i, opt in enumerate(options, 1):
        marker = cyan("●") if default_idx == i - 1 else grey("○")
        hint = f"  {grey(opt.hint)}" if opt.hint else ""
        print(f"    {marker} {bold(str(i))}.  {opt.display}{hint}")
    print()

    suffix = f" [{default_idx + 1}]" if default_idx is not None else ""
    while True:
        choice = _ask(f"  Choice{suffix}: ").strip()
        if not choice and default_idx is not None:
            return options[default_idx].value
        if choice.isdigit() and 1 <= int(choice) <= len(options):
            return options[int(choice) - 1].value
        print(yellow(f"  Enter a number between 1 and {len(options)}."))


def confirm(message: str, default: bool = True) -> bool:
    """Yes/no prompt."""
    hint = "[Y/n]" if default else "[y/N]"
    print(f"\n  {bold(message)}")
    while True:
        answer = _ask(f"  {hint} ").strip().lower()
        if not answer:
            return default
        if answer in ("y", "yes"):
            return True
        if answer in ("n", "no"):
            return False
        print(yellow("  Please answer y or n."))


def group(
    prompts: Dict[str, Callable[[], Any]],
    on_cancel: Optional[Callable[[Dict[str, Any]], None]] = None,
) -> Dict[str, Any]:
    """
    Run deferred prompts one at a time, in insertion order.

    On cancellation the on_cancel hook receives the answers collected so far;
    if the hook returns, PromptCancelled is re-raised.
    """
    results: Dict[str, Any] = {}
    for name, prompt in prompts.items():
        try:
            results[name] = prompt()
        except PromptCancelled:
            if on_cancel is not None:
                on_cancel(results)
            raise
    return results
