"""git-req entry point.

Usage: git req [-u REMOTE] REQUEST_ID | -l | --set-project-id ID | ...

REQUEST_ID is a merge/pull request number, or "-" for the request that was
checked out before the current one.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable

from gitreq import __version__
from gitreq.config import AppConfig, load_config
from gitreq.errors import ConfigNotFoundError, RemoteNotFoundError, ReqError
from gitreq.logging import GitReqLogging
from gitreq.remotes import KeyProvider, Remote, get_remote
from gitreq.remotes.identity import get_domain
from gitreq.services.git import (
    CheckoutResult,
    ConfigStore,
    RequestHistory,
    checkout_request_branch,
    current_branch,
    find_repo_root,
    get_remote_url,
    get_remotes,
    guess_default_remote_name,
)

LOG = logging.getLogger("gitreq")

PREVIOUS_REQUEST = "-"
API_KEY_HELP_URL = "https://github.com/arusahni/git-req/wiki/API-Keys"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        prog="git req",
        description="Switch between merge/pull requests in your GitLab and GitHub repositories "
        "with just the request ID",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-u",
        "--use-remote",
        dest="remote_name",
        help="The remote to be used for this command",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to YAML config file (default ~/.config/git-req/config.yaml)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log API calls and git commands")

    actions = parser.add_mutually_exclusive_group(required=True)
    actions.add_argument(
        "request_id",
        nargs="?",
        help="The ID of the MR or PR, or '-' to reference the one previously checked out",
    )
    actions.add_argument(
        "-l",
        "--list",
        action="store_true",
        help="List all open requests against the repository",
    )
    actions.add_argument(
        "--set-project-id",
        dest="new_project_id",
        metavar="PROJECT_ID",
        help="Set a project ID for the current repository",
    )
    actions.add_argument(
        "--clear-project-id",
        action="store_true",
        help="Clear the project ID for the current repository",
    )
    actions.add_argument(
        "--set-domain-key",
        dest="new_domain_key",
        metavar="DOMAIN_KEY",
        help="Set the API key for the current repository's domain",
    )
    actions.add_argument(
        "--clear-domain-key",
        action="store_true",
        help="Clear the API key for the current repository's domain",
    )
    actions.add_argument(
        "--set-default-remote",
        dest="new_default_remote",
        metavar="REMOTE_NAME",
        help="Set the name of the default remote for the repository",
    )
    args = parser.parse_args(argv)
    if args.request_id is not None and args.request_id != PREVIOUS_REQUEST:
        try:
            int(args.request_id)
        except ValueError:
            parser.error(f"invalid request ID {args.request_id!r}: expected a number or '-'")
    return args


def prompt_for_api_key(domain: str) -> str:
    """Ask for the API token of a domain on stdin."""
    print(f"No API token for {domain} found. See {API_KEY_HELP_URL} for instructions.")
    return input(f"{domain} API token: ")


def prompt_for_remote(remotes: list[str]) -> str:
    """Ask which remote to use when it cannot be guessed."""
    print("Multiple remotes found and none is named 'origin'. Which one should git-req use?")
    for index, name in enumerate(remotes, start=1):
        print(f"  {index}) {name}")
    while True:
        answer = input("Remote number or name: ").strip()
        if answer in remotes:
            return answer
        if answer.isdigit() and 1 <= int(answer) <= len(remotes):
            return remotes[int(answer) - 1]
        print(f"Please choose 1-{len(remotes)}.")


def resolve_remote_name(
    requested: str | None,
    store: ConfigStore,
    repo_dir: Path,
    choose_remote: Callable[[list[str]], str] = prompt_for_remote,
) -> str:
    """Pick the remote: -u, else req.defaultremote, else a guess, else ask.

    A remote picked by the user is saved as req.defaultremote.
    """
    if requested:
        return requested
    default = store.get_project_config("defaultremote")
    if default:
        return default
    try:
        return guess_default_remote_name(repo_dir)
    except RemoteNotFoundError:
        remotes = get_remotes(repo_dir)
        if not remotes:
            raise
    chosen = choose_remote(remotes)
    store.set_project_config("defaultremote", chosen)
    return chosen


def resolve_request_id(token: str, history: RequestHistory) -> int:
    """Turn the REQUEST_ID argument into a number ("-" means the previous one)."""
    if token == PREVIOUS_REQUEST:
        try:
            return history.read_previous()
        except ConfigNotFoundError as e:
            raise ConfigNotFoundError("No previous request has been checked out") from e
    return int(token)


def checkout_request(
    request_id: int,
    remote_name: str,
    remote: Remote,
    store: ConfigStore,
    history: RequestHistory,
    repo_dir: Path,
) -> CheckoutResult:
    """Check out the branch for request_id and record it in the history."""
    LOG.info("Getting request %s from %s", request_id, remote)
    remote_branch = remote.remote_branch_name(request_id)
    local_branch = remote.local_branch_name(request_id)
    LOG.debug("Remote branch %s, local branch %s", remote_branch, local_branch)
    result = checkout_request_branch(
        remote_name,
        remote_branch,
        local_branch,
        is_virtual_remote_branch=remote.uses_virtual_remote_refs(),
        default_remote=store.get_project_config("defaultremote"),
        repo_dir=repo_dir,
    )
    if result is CheckoutResult.CHANGED:
        history.record(request_id)
    return result


def list_requests(remote: Remote) -> None:
    """Print the open requests of the remote."""
    requests = remote.list_open_requests()
    if not requests:
        print("No open requests.")
        return
    show_branches = remote.uses_human_branch_names()
    for req in requests:
        if show_branches:
            print(f"{req.id} [{req.source_branch}] - {req.title}")
        else:
            print(f"{req.id} - {req.title}")


def run(
    args: argparse.Namespace,
    config: AppConfig,
    repo_dir: Path | None = None,
    key_provider: KeyProvider | None = prompt_for_api_key,
) -> int:
    """Dispatch one command; ReqError propagates to main()."""
    repo_dir = find_repo_root(repo_dir)
    store = ConfigStore(repo_dir, global_config_path=config.global_config_path)

    if args.new_default_remote:
        if args.new_default_remote not in get_remotes(repo_dir):
            raise RemoteNotFoundError(f"Couldn't find the remote {args.new_default_remote!r}")
        store.set_project_config("defaultremote", args.new_default_remote)
        print(f"Default remote set to {args.new_default_remote}")
        return 0

    remote_name = resolve_remote_name(args.remote_name, store, repo_dir)
    origin = get_remote_url(remote_name, repo_dir)
    LOG.debug("Using remote %s (%s)", remote_name, origin)

    if args.new_project_id:
        store.set_config("projectid", remote_name, args.new_project_id)
        print(f"Project ID for {remote_name} set to {args.new_project_id}")
        return 0
    if args.clear_project_id:
        store.delete_config("projectid", remote_name)
        print(f"Project ID for {remote_name} cleared")
        return 0
    if args.new_domain_key:
        domain = get_domain(origin)
        store.set_req_config(domain, "apikey", args.new_domain_key.strip())
        print(f"API key for {domain} set")
        return 0
    if args.clear_domain_key:
        domain = get_domain(origin)
        store.delete_req_config(domain, "apikey")
        print(f"API key for {domain} cleared")
        return 0

    with get_remote(remote_name, origin, store, key_provider=key_provider, http=config.http) as remote:
        if args.list:
            list_requests(remote)
            return 0

        history = RequestHistory(repo_dir)
        request_id = resolve_request_id(args.request_id, history)
        result = checkout_request(request_id, remote_name, remote, store, history, repo_dir)
    branch = current_branch(repo_dir)
    if result is CheckoutResult.UNCHANGED:
        print(f"Already on '{branch}'")
    else:
        print(f"Switched to branch '{branch}' for request {request_id}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for git req."""
    args = parse_args(argv)
    config = load_config(args.config)
    GitReqLogging(config.logging, verbose=args.verbose).setup()

    try:
        return run(args, config)
    except ReqError as e:
        LOG.debug("Command failed (%s)", e.kind, exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1
    except (KeyboardInterrupt, EOFError):
        print("Aborted", file=sys.stderr)
        return 1
    except Exception as e:
        LOG.exception("Fatal error: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
