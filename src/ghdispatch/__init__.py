"""
ghdispatch - Interactive GitHub Actions workflow dispatcher.

Modules included:
- config: YAML repository list and bookmark persistence
- gh: GitHub CLI wrapper (login, workflow list/view/run)
- inputs: workflow_dispatch input → prompt mapping
- runner: `gh workflow run` arguments and confirmation summary
- dispatch: the interactive session
- models: workflow, input and bookmark records
- ui: colour output and prompt widgets
- log: file-backed diagnostic log
- cli: command-line entry point
"""

__version__ = "0.1.0"
__author__ = "1minds3t"
__email__ = "1minds3t@proton.me"
__all__ = ["cli", "config", "dispatch", "gh", "inputs", "log", "models", "runner", "ui"]
