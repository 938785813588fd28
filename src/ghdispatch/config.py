#!/usr/bin/env python3
"""
config - Repository configuration for ghdispatch.

The config file is the only persistent store:

    repos:
      - name: owner/repo
        branches: [main, dev]
        bookmarks:            # optional
          - nickname: Nightly deploy
            workflow: deploy.yml
            branch: main
            inputs: {environment: prod}

It is loaded with ruamel.yaml in round-trip mode. Saving a bookmark inserts
the new entry into the existing text, so everything else in the file stays
byte-for-byte as it was.
"""

import os
import shutil
import tempfile
from io import StringIO
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from filelock import FileLock, Timeout as _FileLockTimeout
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap, CommentedSeq
from ruamel.yaml.error import YAMLError
from ruamel.yaml.util import load_yaml_guess_indent

from ghdispatch.log import get_logger
from ghdispatch.models import Bookmark

DEFAULT_CONFIG_PATH = "./config.yml"
CONFIG_ENV_VAR = "GHDISPATCH_CONFIG"
LOCK_TIMEOUT = 10

PathLike = Union[str, Path]


class RepositoryNotFoundError(LookupError):
    """Raised when a bookmark targets a repository missing from the config."""

    def __init__(self, repo_name: str):
        self.repo_name = repo_name
        super().__init__(f"Repository {repo_name} not found in config")


class ConfigLockedError(RuntimeError):
    """Another process holds the config lock."""


def _yaml() -> YAML:
    ry = YAML()
    ry.preserve_quotes = True
    ry.default_flow_style = False
    ry.width = 4096
    # match the documented layout: list items indented under their key
    ry.indent(mapping=2, sequence=4, offset=2)
    return ry


def resolve_config_path(cli_value: Optional[str] = None) -> Path:
    """--config wins, then $GHDISPATCH_CONFIG, then ./config.yml."""
    if cli_value:
        return Path(cli_value)
    return Path(os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH)


def load_config(config_path: PathLike = DEFAULT_CONFIG_PATH) -> Dict[str, Any]:
    """
    Read and parse the config file.

    FileNotFoundError and ruamel's YAMLError propagate. No schema checks:
    an empty document comes back as {}.
    """
    text = Path(config_path).read_text(encoding="utf-8")
    data = _yaml().load(text)
    return data if data is not None else {}


def _repos(config: Dict[str, Any]) -> List[Dict[str, Any]]:
    return list((config or {}).get("repos") or [])


def _find_repo(config: Dict[str, Any], repo_name: str) -> Optional[Dict[str, Any]]:
    for repo in _repos(config):
        if repo.get("name") == repo_name:
            return repo
    return None


def get_repo_list(config: Dict[str, Any]) -> List[str]:
    """All repository names, sorted."""
    return sorted(str(repo.get("name", "")) for repo in _repos(config))


def get_branches_for_repo(config: Dict[str, Any], repo_name: str) -> List[str]:
    repo = _find_repo(config, repo_name)
    if repo is None:
        return []
    return [str(b) for b in (repo.get("branches") or [])]


def get_bookmarks_for_repo(config: Dict[str, Any], repo_name: str) -> List[Bookmark]:
    repo = _find_repo(config, repo_name)
    if repo is None:
        return []
    return [Bookmark.from_dict(b) for b in (repo.get("bookmarks") or [])]


def _atomic_write_text(path: Path, text: str) -> None:
    """Write text to path via a temp file + os.replace, keeping path's mode."""
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(text)
        if path.exists():
            shutil.copymode(path, tmp_path)
        os.replace(tmp_path, path)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


# ─────────────────────────────────────────────────────────────
# Bookmark insertion
#
# A new bookmark is spliced into the existing text right after the
# last line of the repo's bookmarks (or of the repo entry itself), so
# every other byte of the file stays as the user wrote it. Layouts the
# splice cannot handle (flow style, `bookmarks: []`, ...) fall back to
# a full round-trip dump using the file's own indentation.
# ─────────────────────────────────────────────────────────────

def _indent_of(line: str) -> int:
    return len(line) - len(line.lstrip(" "))


def _is_content(line: str) -> bool:
    stripped = line.strip()
    return bool(stripped) and not stripped.startswith("#")


def _block_end(lines: List[str], start: int, indent: int) -> int:
    """Index just past the last content line after `start` indented deeper than `indent`."""
    end = start + 1
    for i in range(start + 1, len(lines)):
        if not _is_content(lines[i]):
            continue
        if _indent_of(lines[i]) <= indent:
            break
        end = i + 1
    return end


def _dash_col(lines: List[str], node) -> int:
    line, col = node.lc.line, node.lc.col
    return lines[line].rfind("-", 0, col)


def _render_item(bookmark: Bookmark, dash_col: int, mapping_indent: int = 2) -> str:
    entry = CommentedMap(bookmark.to_dict())
    entry["inputs"] = CommentedMap(entry["inputs"])
    ry = YAML()
    ry.width = 4096
    ry.indent(mapping=mapping_indent, sequence=2, offset=0)
    buf = StringIO()
    ry.dump([entry], buf)
    pad = " " * dash_col
    return "".join(
        pad + line if line.strip() else line
        for line in buf.getvalue().splitlines(keepends=True)
    )


def _mapping_indent(item: Any) -> int:
    """Indent used under an existing bookmark's `inputs` key, 2 if unknown."""
    if isinstance(item, CommentedMap) and "inputs" in item:
        inputs = item["inputs"]
        if isinstance(inputs, CommentedMap) and inputs and not inputs.fa.flow_style():
            step = inputs.lc.col - item.lc.key("inputs")[1]
            if step > 0:
                return step
    return 2


def _splice_bookmark(text: str, config: Any, repo: Any, bookmark: Bookmark) -> Optional[str]:
    """Return text with bookmark inserted, or None when the layout is not handled."""
    if not (isinstance(config, CommentedMap) and isinstance(repo, CommentedMap)):
        return None
    repos = config.get("repos")
    if not isinstance(repos, CommentedSeq):
        return None
    if repos.fa.flow_style() or repo.fa.flow_style():
        return None

    lines = text.splitlines(keepends=True)
    if lines and not lines[-1].endswith("\n"):
        lines[-1] += "\n"

    if "bookmarks" in repo:
        bms = repo["bookmarks"]
        if not isinstance(bms, CommentedSeq) or not bms or bms.fa.flow_style():
            return None
        last = len(bms) - 1
        line, col = bms.lc.item(last)
        dash = lines[line].rfind("-", 0, col)
        if dash < 0:
            return None
        at = _block_end(lines, line, dash)
        block = _render_item(bookmark, dash, _mapping_indent(bms[last]))
    else:
        repo_dash = _dash_col(lines, repo)
        if repo_dash < 0:
            return None
        at = _block_end(lines, repo.lc.line, repo_dash)
        key_col = repo.lc.col
        offset = repo_dash - config.lc.key("repos")[1]
        block = " " * key_col + "bookmarks:\n" + _render_item(bookmark, key_col + offset)

    lines.insert(at, block)
    return "".join(lines)


def _spliced_matches(new_text: str, config: Any, repo_name: str, bookmark: Bookmark) -> bool:
    try:
        reloaded = _yaml().load(new_text)
    except YAMLError:
        return False
    expected = get_bookmarks_for_repo(config, repo_name)
    expected.append(Bookmark.from_dict(bookmark.to_dict()))
    return (get_repo_list(reloaded) == get_repo_list(config)
            and get_bookmarks_for_repo(reloaded, repo_name) == expected)


def _dump_with_bookmark(text: str, config: Any, repo: Any, bookmark: Bookmark) -> str:
    _, indent, block_seq_indent = load_yaml_guess_indent(text)
    if repo.get("bookmarks") is None:
        repo["bookmarks"] = CommentedSeq()
    entry = CommentedMap(bookmark.to_dict())
    entry["inputs"] = CommentedMap(entry["inputs"])
    repo["bookmarks"].append(entry)

    ry = _yaml()
    offset = block_seq_indent or 0
    if indent and indent >= offset + 2:
        ry.indent(mapping=indent, sequence=indent, offset=offset)
    buf = StringIO()
    ry.dump(config, buf)
    return buf.getvalue()


def save_bookmark(config_path: PathLike, repo_name: str, bookmark: Bookmark) -> None:
    """
    Append a bookmark to repo_name's entry in the config file.

    The file is re-read under a lock right before writing; nothing is
    written when the repository is missing. Symlinks are followed and the
    file keeps its permission bits.
    """
    path = Path(os.path.realpath(config_path))
    logger = get_logger()

    lock = FileLock(str(path) + ".lock", timeout=LOCK_TIMEOUT)
    try:
        lock.acquire()
    except _FileLockTimeout:
        raise ConfigLockedError(
            f"Could not acquire lock on {path.name}: "
            "is another ghdispatch process running?"
        )

    try:
        text = path.read_text(encoding="utf-8")
        config = _yaml().load(text) or {}
        repo = _find_repo(config, repo_name)
        if repo is None:
            raise RepositoryNotFoundError(repo_name)

        new_text = _splice_bookmark(text, config, repo, bookmark)
        if new_text is None or not _spliced_matches(new_text, config, repo_name, bookmark):
            logger.info(f"Rewriting {path.name} in full to add bookmark")
            new_text = _dump_with_bookmark(text, config, repo, bookmark)

        _atomic_write_text(path, new_text)
    finally:
        lock.release()

    logger.info(f"Saved bookmark '{bookmark.nickname}' for {repo_name} in {path}")
