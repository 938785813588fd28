#!/usr/bin/env python3
"""
dispatch - Interactive workflow dispatch.

Phases, strictly in order:

  login check → load config → repo → branch → workflows + bookmarks
    → pick workflow or bookmark
        bookmark: reuse its workflow / branch / inputs
        workflow: fetch inputs at branch → prompt → optionally bookmark
    → confirm + run → optionally open in browser

Exit codes: 1 for login failure, an unusable selection or a gh error;
0 for success or when the user cancels.
"""

import json
import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ghdispatch import gh, ui
from ghdispatch.config import (
    ConfigLockedError,
    RepositoryNotFoundError,
    get_bookmarks_for_repo,
    get_branches_for_repo,
    get_repo_list,
    load_config,
    save_bookmark,
)
from ghdispatch.inputs import build_input_prompts
from ghdispatch.log import get_logger
from ghdispatch.models import (
    Bookmark,
    BookmarkSelection,
    Selection,
    WorkflowSelection,
    WorkflowSummary,
    input_value_to_str,
)
from ghdispatch.runner import build_display_info, build_workflow_run_args

ACTIONS_URL = "https://github.com/{repo}/actions"


def _fail(message: str) -> None:
    ui.error(message)
    get_logger().error(message)
    sys.exit(1)


def _abort(results=None) -> None:
    ui.cancel("Operation cancelled.")
    get_logger().info("Cancelled by user")
    sys.exit(0)


# ─────────────────────────────────────────────────────────────
# Phases
# ─────────────────────────────────────────────────────────────

def ensure_logged_in() -> None:
    ui.intro("Checking Login")
    if not gh.check_login():
        _fail("You are not logged in! Run `gh auth login` to authenticate with GitHub")
    ui.success("Logged in to GitHub")
    ui.outro("Finished Checking Login")


def load_repositories(config_path: Path) -> dict:
    ui.intro("Loading Config")
    config = load_config(config_path)
    get_logger().info(f"Config {config_path}: {json.dumps(config, default=str)}")
    ui.step(f"Config : {config_path}")
    ui.outro("Finished Loading Config")
    return config


def select_repo(config: dict) -> str:
    ui.intro("Repo Selection")
    repos = get_repo_list(config)
    if not repos:
        _fail("No repositories configured")
    ui.step(f"Repos : {', '.join(repos)}")
    repo = ui.select("Pick a repository:", [ui.Option(value=r) for r in repos])
    ui.outro("Finished Repo Selection")
    return repo


def select_branch(config: dict, repo: str) -> str:
    ui.intro("Branch Selection")
    branches = get_branches_for_repo(config, repo)
    if not branches:
        _fail(f"No branches configured for {repo}")
    branch = ui.select("Pick a branch", [ui.Option(value=b) for b in branches])
    ui.outro("Finished Branch Selection")
    return branch


def build_target_options(
    workflows: List[WorkflowSummary],
    bookmarks: List[Bookmark],
) -> List[ui.Option]:
    options = [
        ui.Option(
            value=BookmarkSelection(index=i),
            label=f"★ {b.nickname}",
            hint=f"{b.workflow} @ {b.branch}",
        )
        for i, b in enumerate(bookmarks)
    ]
    options += [
        ui.Option(value=WorkflowSelection(workflow_id=w.id), label=w.name, hint=w.path)
        for w in workflows
    ]
    return options


def select_target(workflows: List[WorkflowSummary], bookmarks: List[Bookmark]) -> Selection:
    options = build_target_options(workflows, bookmarks)
    if not options:
        _fail("No active workflows or bookmarks for this repository")
    try:
        selection = ui.select("Select Workflow", options)
    except ui.PromptCancelled:
        _fail("Workflow selection cancelled")
    if selection is None:
        _fail("No workflow selected")
    return selection


def resolve_bookmark(selection: BookmarkSelection, bookmarks: List[Bookmark]) -> Bookmark:
    if not 0 <= selection.index < len(bookmarks):
        _fail(f"Bookmark #{selection.index} no longer exists")
    return bookmarks[selection.index]


def resolve_workflow(selection: WorkflowSelection,
                     workflows: List[WorkflowSummary]) -> WorkflowSummary:
    for w in workflows:
        if w.id == selection.workflow_id:
            return w
    _fail(f"Workflow {selection.workflow_id} not found")


def collect_inputs(workflow: str, repo: str, branch: str) -> Dict[str, str]:
    ui.intro("Workflow Input Retrieval")
    specs = gh.get_workflow_inputs(workflow, repo, branch)
    ui.step(f"{len(specs)} input(s) declared on {branch}")
    ui.outro("Finished Workflow Input Retrieval")

    ui.intro("User Input Collection")
    prompts = build_input_prompts(specs)
    answers = ui.group(prompts, on_cancel=_abort)
    ui.outro("Finished User Input Collection")
    return {k: input_value_to_str(v) for k, v in answers.items()}


def bookmark_workflow_ref(workflow: WorkflowSummary) -> str:
    """Prefer the workflow file name; it stays stable when display names change."""
    return Path(workflow.path).name if workflow.path else workflow.name


def offer_bookmark_save(config_path: Path, repo: str, workflow: str,
                        branch: str, inputs: Dict[str, str]) -> Optional[Bookmark]:
    if not ui.confirm("Save these inputs as a bookmark?", default=False):
        return None

    nickname = ""
    while not nickname:
        nickname = ui.text("Bookmark nickname", placeholder="Required? true").strip()

    bookmark = Bookmark(nickname=nickname, workflow=workflow, branch=branch, inputs=dict(inputs))
    try:
        save_bookmark(config_path, repo, bookmark)
    except (RepositoryNotFoundError, ConfigLockedError, OSError) as e:
        get_logger().error(str(e))
        ui.error(f"Could not save bookmark: {e}")
        return None
    ui.success(f"Bookmark '{nickname}' saved to {config_path}")
    return bookmark


def confirm_and_run(workflow: str, repo: str, branch: str, inputs: Dict[str, str]) -> bool:
    ui.intro("Running Workflow")
    run_args = build_workflow_run_args(workflow, repo, branch, inputs)
    display_info = build_display_info(workflow, repo, branch, inputs)

    if not ui.confirm(f"{display_info}\n\n  Do you want to continue?"):
        ui.step("Skipped running the workflow")
        return False

    output = gh.run_workflow(run_args)
    get_logger().info(f"Dispatched {workflow} on {repo}@{branch}")
    ui.success(f"Done ! Result : {output}" if output else "Done !")
    return True


def offer_open_in_browser(workflow: str, repo: str) -> None:
    if ui.confirm("Do you want to open the workflow in the web ui?"):
        gh.open_workflow_in_browser(workflow, repo)


# ─────────────────────────────────────────────────────────────
# Entry
# ─────────────────────────────────────────────────────────────

def _pick_workflow_and_inputs(config_path: Path, config: dict, repo: str,
                              branch: str) -> Tuple[str, str, Dict[str, str]]:
    ui.intro("Workflow Selection")
    workflows = gh.filter_active_workflows(gh.list_workflows(repo))
    bookmarks = get_bookmarks_for_repo(config, repo)
    selection = select_target(workflows, bookmarks)

    if isinstance(selection, BookmarkSelection):
        bookmark = resolve_bookmark(selection, bookmarks)
        ui.step(f"Selected Bookmark: [{bookmark.nickname}]")
        ui.outro("Finished Workflow Selection")
        return bookmark.workflow, bookmark.branch or branch, dict(bookmark.inputs)

    workflow = resolve_workflow(selection, workflows)
    ui.step(f"Selected Workflow: [{workflow.name}]")
    ui.outro("Finished Workflow Selection")

    inputs = collect_inputs(workflow.name, repo, branch)
    offer_bookmark_save(config_path, repo, bookmark_workflow_ref(workflow), branch, inputs)
    return workflow.name, branch, inputs


def run_workflow_creation(config_path: Path) -> None:
    """Drive one interactive dispatch from login check to browser hand-off."""
    logger = get_logger()
    logger.info(f"Session start (config: {config_path})")

    ensure_logged_in()
    config = load_repositories(config_path)

    try:
        repo = select_repo(config)
        branch = select_branch(config, repo)
        workflow, branch, inputs = _pick_workflow_and_inputs(config_path, config, repo, branch)
        confirm_and_run(workflow, repo, branch, inputs)
        offer_open_in_browser(workflow, repo)
    except ui.PromptCancelled:
        _abort()

    ui.outro(f"Done ! View your workflow in the web ui : {ACTIONS_URL.format(repo=repo)}")
    logger.info("Session finished")
