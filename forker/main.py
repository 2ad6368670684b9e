"""Forker entry point.

Usage: forker [--config PATH] [--base-path DIR] <command> [options]
Commands: list, fork, status, peers, prs, active, untrack.
"""

import argparse
import sys
from pathlib import Path
from typing import Callable

from forker.config import AppConfig, load_config
from forker.errors import ForkerError
from forker.github import GhCliClient
from forker.logging import LEVELS, ForkerLogging
from forker.manager import ForkManager
from forker.storage import Storage

RULE = "-" * 80


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse global options and the subcommand."""
    parser = argparse.ArgumentParser(
        prog="forker",
        description="Track GitHub forks of vendored dependencies",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to YAML config file (default: forker.yaml)",
    )
    parser.add_argument("--base-path", type=Path, default=None, help="Project directory holding .forker/")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=list(LEVELS),
        default=None,
        help="Log level (case-insensitive)",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("list", help="List all forks for a GitHub account")
    p_list.add_argument("--account", required=True, help="GitHub account URL or username")

    p_fork = sub.add_parser("fork", help="Fork a repository on GitHub")
    p_fork.add_argument("--url", required=True, help="Repository URL to fork")
    p_fork.add_argument("--account", required=True, help="GitHub account to fork to")

    sub.add_parser("status", help="Show status of tracked forks")
    sub.add_parser("peers", help="List other forks of the same repositories")
    sub.add_parser("prs", help="List pull requests across fork network")
    sub.add_parser("active", help="Show most recently active forks")

    p_untrack = sub.add_parser("untrack", help="Delete stored data of a tracked repository")
    p_untrack.add_argument("name", help="Tracked repository name")

    return parser.parse_args(argv if argv is not None else sys.argv[1:])


def _cmd_list(manager: ForkManager, args: argparse.Namespace) -> None:
    forks = manager.list_forks(args.account)
    if not forks:
        print(f"No forks found for account: {args.account}")
        return
    print(f"\nForks for {args.account}:")
    print(RULE)
    for fork in forks:
        print(f"\n{fork.name}")
        print(f"  URL: {fork.url}")
        if fork.root_url:
            print(f"  Root: {fork.root_url}")
        if fork.description:
            print(f"  Description: {fork.description}")
        print(f"  Updated: {fork.updated_at or ''}")
    print(f"\nTotal forks: {len(forks)}")


def _cmd_fork(manager: ForkManager, args: argparse.Namespace) -> None:
    result = manager.fork_repository(args.url, args.account)
    print("\nSuccessfully forked repository!")
    print(f"  Original: {result.original_url}")
    print(f"  Fork: {result.fork_url}")
    if result.root_url:
        print(f"  Root: {result.root_url}")


def _cmd_status(manager: ForkManager, args: argparse.Namespace) -> None:
    statuses = manager.fork_statuses()
    if not statuses:
        print("No tracked forks found in .forker directory")
        return
    print("\nFork Status:")
    print(RULE)
    for status in statuses:
        print(f"\n{status.name}")
        print(f"  Fork: {status.fork_url}")
        if status.root_url:
            print(f"  Root: {status.root_url}")
        if status.ahead_by is not None:
            print(f"  Commits ahead: {status.ahead_by}")
        if status.behind_by is not None:
            print(f"  Commits behind: {status.behind_by}")
        print(f"  Last updated: {status.updated_at or ''}")
    print(f"\nTotal tracked forks: {len(statuses)}")


def _cmd_peers(manager: ForkManager, args: argparse.Namespace) -> None:
    reports = manager.find_peers()
    if not reports:
        print("No tracked forks found")
        return
    print("\nPeer Forks:")
    print(RULE)
    for report in reports:
        print(f"\n{report.name} ({report.root_url})")
        if not report.peers:
            print("  No other forks found")
            continue
        print(f"  Other forks ({len(report.peers)}):")
        for peer in report.peers:
            print(f"    - {peer.owner}/{peer.name} (updated: {peer.updated_at or ''})")


def _cmd_prs(manager: ForkManager, args: argparse.Namespace) -> None:
    reports = manager.list_pull_requests()
    if not reports:
        print("No tracked forks found")
        return
    print("\nPull Requests:")
    print(RULE)
    for report in reports:
        print(f"\n{report.name}")
        if not report.prs:
            print("  No open pull requests")
            continue
        print(f"  Open PRs ({len(report.prs)}):")
        for pr in report.prs:
            print(f"    #{pr.number}: {pr.title}")
            print(f"      Author: {pr.author} | State: {pr.state} | Created: {pr.created_at or ''}")


def _cmd_active(manager: ForkManager, args: argparse.Namespace) -> None:
    forks = manager.most_active_forks()
    if not forks:
        print("No tracked forks found")
        return
    print("\nMost Active Forks:")
    print(RULE)
    for index, fork in enumerate(forks, start=1):
        print(f"\n{index}. {fork.name}")
        print(f"   URL: {fork.url}")
        if fork.root_url:
            print(f"   Root: {fork.root_url}")
        print(f"   Last activity: {fork.updated_at or ''}")


COMMANDS: dict[str, Callable[[ForkManager, argparse.Namespace], None]] = {
    "list": _cmd_list,
    "fork": _cmd_fork,
    "status": _cmd_status,
    "peers": _cmd_peers,
    "prs": _cmd_prs,
    "active": _cmd_active,
}


def _apply_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    if args.base_path is not None:
        config.storage.base_path = args.base_path
    if args.log_level:
        config.logging.level = args.log_level
    return config


def main(argv: list[str] | None = None) -> int:
    """Entry point: run one subcommand, print its report, return exit code."""
    args = parse_args(argv)
    try:
        config = _apply_overrides(load_config(args.config), args)
    except ForkerError as e:
        print(f"Error: {e}")
        return 1
    log = ForkerLogging(config.logging).setup()

    storage = Storage(config.storage)
    try:
        if args.command == "untrack":
            storage.delete_data(args.name)
            print(f"Removed tracked data for {args.name}")
            return 0
        manager = ForkManager(storage, GhCliClient(config.github), config.github)
        COMMANDS[args.command](manager, args)
    except ForkerError as e:
        log.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
