"""Train configuration: loading, validation and lookup.

A repository describes its trains in `.pr-train.yml` at the repo root:

    prs:
      main-branch-name: main
      draft-by-default: true
    trains:
      big-feature:
        - big-feature-1
        - big-feature-2
        - big-feature-combined:
            combined: true

Each branch entry is either a bare branch name or a single-key mapping that
annotates the branch. Entries are normalized into BranchSpec once, at load
time, so nothing downstream has to inspect raw YAML shapes.
"""

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from prtrain.core.errors import ConfigurationError

CONFIG_FILE_NAME = ".pr-train.yml"

INIT_TEMPLATE = """\
# pr-train configuration. Keep this file out of version control.
# `pr-train --new-branch` rewrites this file and drops all comments.
prs:
  # Branch the first pull request of every train (and the combined branch) targets.
  main-branch-name: master
  # Create new pull requests as drafts unless --no-draft is passed.
  draft-by-default: false
  # Print pull request URLs after creating/updating them.
  print-urls: true

trains:
  # Branches are merged (or rebased) in the order listed here.
  my-feature:
    - my-feature-1
    - my-feature-2
    # Optional integration branch accumulating the whole train.
    - my-feature-combined:
        combined: true
"""


@dataclass(frozen=True)
class BranchSpec:
    """A branch of a train, normalized from its config entry."""

    name: str
    combined: bool = False
    init_sha: str | None = None


@dataclass(frozen=True)
class Train:
    """Ordered chain of dependent branches."""

    key: str
    branches: tuple[BranchSpec, ...]

    @property
    def branch_names(self) -> list[str]:
        return [spec.name for spec in self.branches]

    def contains(self, branch: str) -> bool:
        return branch in self.branch_names


@dataclass(frozen=True)
class PrsOptions:
    """The `prs` section of the config file."""

    main_branch_name: str | None = None
    draft_by_default: bool = False
    print_urls: bool = False


@dataclass(frozen=True)
class TrainConfig:
    """Parsed `.pr-train.yml`. Trains keep file order."""

    trains: tuple[Train, ...]
    prs: PrsOptions


def config_path(repo_root: Path) -> Path:
    return repo_root / CONFIG_FILE_NAME


def load_train_config(path: Path) -> TrainConfig:
    """Load and validate the train config file.

    Raises:
        ConfigurationError: If the file is missing, is not valid YAML, or
            does not describe trains correctly
    """
    if not path.exists():
        raise ConfigurationError(
            f"{path} not found.",
            hint="Run `pr-train --init` to create an example configuration.",
        )

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Could not parse {path}: {e}") from e

    return parse_train_config(data)


def parse_train_config(data: Any) -> TrainConfig:
    """Validate raw YAML data and normalize it into a TrainConfig."""
    if not isinstance(data, dict):
        raise ConfigurationError("Config must be a mapping with a 'trains' key.")

    raw_trains = data.get("trains")
    if not isinstance(raw_trains, dict) or not raw_trains:
        raise ConfigurationError("Config must define at least one train under 'trains'.")

    trains = tuple(_parse_train(str(key), entries) for key, entries in raw_trains.items())
    return TrainConfig(trains=trains, prs=_parse_prs_options(data.get("prs")))


def _parse_train(key: str, entries: Any) -> Train:
    if not isinstance(entries, list) or not entries:
        raise ConfigurationError(f"Train '{key}' must be a non-empty list of branches.")

    branches = tuple(_parse_branch_entry(key, entry) for entry in entries)

    names = [spec.name for spec in branches]
    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        raise ConfigurationError(
            f"Train '{key}' lists branches more than once: {', '.join(duplicates)}"
        )

    combined = [spec.name for spec in branches if spec.combined]
    if len(combined) > 1:
        raise ConfigurationError(
            f"Train '{key}' has more than one combined branch: {', '.join(combined)}"
        )
    if combined and not branches[-1].combined:
        raise ConfigurationError(
            f"Combined branch '{combined[0]}' must be the last branch of train '{key}'."
        )

    return Train(key=key, branches=branches)


def _parse_branch_entry(train_key: str, entry: Any) -> BranchSpec:
    if isinstance(entry, str):
        return BranchSpec(name=entry)

    if isinstance(entry, dict) and len(entry) == 1:
        name, annotations = next(iter(entry.items()))
        if annotations is None:
            annotations = {}
        if not isinstance(annotations, dict):
            raise ConfigurationError(
                f"Branch '{name}' in train '{train_key}' must map to a set of options."
            )
        init_sha = annotations.get("initSha")
        return BranchSpec(
            name=str(name),
            combined=bool(annotations.get("combined", False)),
            init_sha=str(init_sha) if init_sha is not None else None,
        )

    raise ConfigurationError(
        f"Invalid branch entry in train '{train_key}': {entry!r}. "
        "Use a branch name or a single-key mapping."
    )


def _lookup_option(section: dict[str, Any], kebab_key: str) -> Any:
    """Read an option by its kebab-case name, falling back to camelCase."""
    if kebab_key in section:
        return section[kebab_key]
    head, *rest = kebab_key.split("-")
    camel_key = head + "".join(part.capitalize() for part in rest)
    return section.get(camel_key)


def _parse_prs_options(section: Any) -> PrsOptions:
    if section is None:
        return PrsOptions()
    if not isinstance(section, dict):
        raise ConfigurationError("'prs' must be a mapping of options.")

    main_branch_name = _lookup_option(section, "main-branch-name")
    return PrsOptions(
        main_branch_name=str(main_branch_name) if main_branch_name is not None else None,
        draft_by_default=bool(_lookup_option(section, "draft-by-default")),
        print_urls=bool(_lookup_option(section, "print-urls")),
    )


def resolve_current_train(current_branch: str, config: TrainConfig) -> Train | None:
    """Find the train containing current_branch.

    When several trains list the branch, the first one in file order wins.
    """
    for train in config.trains:
        if train.contains(current_branch):
            return train
    return None


def ordered_branches(train: Train) -> list[str]:
    """Branch names in merge/PR order, combined branch included."""
    return train.branch_names


def combined_branch(train: Train) -> str | None:
    for spec in train.branches:
        if spec.combined:
            return spec.name
    return None


def write_init_template(path: Path) -> None:
    """Create an example config file.

    Raises:
        FileExistsError: If a config file already exists at path
    """
    if path.exists():
        raise FileExistsError(f"{path.name} already exists")
    path.write_text(INIT_TEMPLATE, encoding="utf-8")


def check_branch_insertion(train: Train, after: str, new_branch: str) -> None:
    """Validate inserting new_branch into train directly after an existing branch.

    Raises:
        ConfigurationError: If the anchor branch is not in the train, the
            anchor is the combined branch, or new_branch is already listed
    """
    if train.contains(new_branch):
        raise ConfigurationError(f"Branch '{new_branch}' is already part of train '{train.key}'.")
    if not train.contains(after):
        raise ConfigurationError(f"Branch '{after}' is not part of train '{train.key}'.")
    if after == combined_branch(train):
        raise ConfigurationError("Cannot insert a branch after the combined branch.")


def insert_branch_after(path: Path, train_key: str, after: str, new_branch: str) -> None:
    """Insert new_branch into a train directly after an existing branch.

    The file is re-read immediately before the edit and replaced atomically,
    so the rewrite is based on the latest content on disk. The rewrite goes
    through yaml.safe_dump, so comments in the file are not kept.

    Raises:
        ConfigurationError: If the train cannot be found or check_branch_insertion
            rejects the insertion
    """
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    config = parse_train_config(data)

    train = next((t for t in config.trains if t.key == train_key), None)
    if train is None:
        raise ConfigurationError(f"Train '{train_key}' not found in {path.name}.")
    check_branch_insertion(train, after, new_branch)

    # Raw keys are strings after a successful parse, but the YAML may use non-str keys
    raw_key = next(key for key in data["trains"] if str(key) == train_key)
    entries: list[Any] = data["trains"][raw_key]
    index = train.branch_names.index(after)
    entries.insert(index + 1, new_branch)

    _atomic_write(path, yaml.safe_dump(data, default_flow_style=False, sort_keys=False))


def _atomic_write(path: Path, content: str) -> None:
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
