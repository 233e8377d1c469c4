"""gitact entry point.

Subcommands: run (validate and execute one intent payload), history (issues
and PRs recorded for the repository), context (state for the decision
component). Usage: gitact [-c config.yaml] run --intent intent.json
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

import yaml

from gitact.adapters import GitHubAdapter
from gitact.config import AppConfig, load_config
from gitact.errors import ConfigurationError
from gitact.logging import GitactLogging
from gitact.models import RepoRef
from gitact.services.cycle import run_cycle
from gitact.services.executor import ActionExecutor
from gitact.services.git import RepositoryStore
from gitact.services.history import build_cycle_context, load_history
from gitact.services.store import MemoryStore, YamlMemoryStore

LOG = logging.getLogger("gitact.main")


def build_parser() -> argparse.ArgumentParser:
    """CLI: global options, then run | history | context."""
    parser = argparse.ArgumentParser(
        prog="gitact",
        description="gitact - execute repository action intents against GitHub",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=Path("config.yaml"),
        help="Path to YAML config file",
    )
    parser.add_argument(
        "--repo",
        help="Target repository owner/name (overrides config)",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only load and validate config, then exit",
    )
    sub = parser.add_subparsers(dest="subcommand")
    run = sub.add_parser("run", help="Validate and execute one intent")
    run.add_argument(
        "--intent",
        "-i",
        required=True,
        help="JSON or YAML file holding the intent payload; - reads stdin",
    )
    run.add_argument(
        "--allow-duplicates",
        action="store_true",
        help="Execute create actions even if history already has them",
    )
    sub.add_parser("history", help="Show recorded issues and pull requests")
    sub.add_parser("context", help="Show the cycle context for the decision component")
    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    return build_parser().parse_args(argv)


def build_services(config: AppConfig) -> tuple[ActionExecutor, MemoryStore]:
    """Wire store, clones and GitHub adapter from config."""
    store = YamlMemoryStore(config.workspace.memory_dir)
    repos = RepositoryStore(
        config.workspace.workdir,
        remote_base=config.github.remote_base,
        timeout=config.workspace.git_timeout,
    )
    token = config.github_token_resolved
    adapter = GitHubAdapter(token, api_url=config.github.api_url, timeout=config.github.timeout) if token else None
    if adapter is None:
        LOG.warning("GITHUB_TOKEN not set; issue, comment and pull request actions will fail")
    executor = ActionExecutor(
        repos,
        adapter,
        store,
        default_branch=config.repository.default_branch,
        author_name=config.bot.name,
        author_email=config.bot.email,
    )
    return executor, store


def _resolve_ref(args: argparse.Namespace, config: AppConfig) -> RepoRef:
    if args.repo:
        try:
            return RepoRef.parse(args.repo)
        except ValueError as e:
            raise ConfigurationError(str(e), operation="config") from e
    return config.repo_ref()


def _load_payload(source: str) -> Any:
    text = sys.stdin.read() if source == "-" else Path(source).read_text(encoding="utf-8")
    return yaml.safe_load(text)


def _dump(data: Any) -> None:
    print(yaml.safe_dump(data, sort_keys=False, allow_unicode=True, width=1000), end="")


def main(argv: list[str] | None = None) -> int:
    """Entry point: dispatch to run, history or context."""
    args = parse_args(argv)
    config = load_config(args.config)
    GitactLogging(config.logging).setup()

    if args.check:
        print("Config OK:", config.repository.owner or "-", config.repository.name or "-")
        return 0
    if not args.subcommand:
        build_parser().print_help()
        return 2

    executor, store = build_services(config)

    if args.subcommand == "run":
        try:
            ref: RepoRef | None = _resolve_ref(args, config)
        except ConfigurationError:
            # The intent may carry owner/repo itself
            ref = None
        try:
            payload = _load_payload(args.intent)
        except (OSError, yaml.YAMLError) as e:
            LOG.error("Cannot read intent %s: %s", args.intent, e)
            return 2
        result = run_cycle(
            payload,
            ref,
            executor,
            store,
            skip_duplicates=config.cycle.skip_duplicates and not args.allow_duplicates,
        )
        _dump(result.to_dict())
        return 0 if result.ok else 1

    try:
        ref = _resolve_ref(args, config)
    except ConfigurationError as e:
        LOG.error("%s", e.message)
        return 2
    if args.subcommand == "history":
        _dump(load_history(store, ref).model_dump(mode="json"))
    else:
        _dump(build_cycle_context(store, ref))
    return 0


if __name__ == "__main__":
    sys.exit(main())
