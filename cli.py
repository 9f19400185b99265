"""
CLI entry point for workpulse. Wires the pipeline: identity -> intent -> cached fetch -> summary,
plus direct data commands that bypass the language model.
"""

import argparse
import json
import logging
import sys
from typing import Optional

from assistant.aggregator import ActivityAggregator
from assistant.intent import IntentClassifier
from assistant.llm import GeminiSummarizer
from config import load_settings
from correlate.identity import IdentityResolver, load_identities
from errors import WorkPulseError, describe_failure
from ingest.github import GitHubClient
from ingest.jira import JiraClient
from storage.cache import DataCache

logger = logging.getLogger(__name__)

DEFAULT_CACHE_FILE = "workpulse_cache.db"


def _print_json(obj):
    print(json.dumps(obj, indent=2, default=str))


def _print_cache_stats(cache: DataCache):
    _print_json(cache.stats())


def _print_cache_list(cache: DataCache):
    _print_json(cache.list_keys(limit=1000))


def _clear_cache(cache: DataCache, force: bool):
    if not force:
        confirm = input(f"Are you sure you want to clear the cache at {cache.path}? This cannot be undone. [y/N]: ")
        if confirm.strip().lower() not in ("y", "yes"):
            print("Aborted cache clear.")
            return
    cache.clear()
    print(f"Cleared cache at {cache.path}")


def _remove_cache_key(cache: DataCache, key: str, force: bool):
    if not force:
        confirm = input(f"Are you sure you want to remove cache key '{key}' from {cache.path}? [y/N]: ")
        if confirm.strip().lower() not in ("y", "yes"):
            print("Aborted cache key removal.")
            return
    removed = cache.delete_key(key)
    if removed:
        print(f"Removed {removed} row(s) for key: {key}")
    else:
        print(f"Cache key not found: {key}")


def _handle_cache_actions(args) -> bool:
    """Run a cache inspection/management flag if one was given. Returns True when the CLI should exit."""
    if not (args.cache_info or args.cache_clear or args.cache_list or args.cache_remove):
        return False
    with DataCache(args.cache or DEFAULT_CACHE_FILE) as cache:
        flag_actions = [
            (args.cache_info, lambda: _print_cache_stats(cache)),
            (args.cache_clear, lambda: _clear_cache(cache, args.force)),
            (args.cache_list, lambda: _print_cache_list(cache)),
            (bool(args.cache_remove), lambda: _remove_cache_key(cache, args.cache_remove, args.force)),
        ]
        for enabled, handler in flag_actions:
            if enabled:
                handler()
                break
    return True


def _apply_overrides(args, settings):
    """CLI flags take precedence over environment variables; write resolved values back onto args."""
    args.jira_host = args.jira_host or settings.jira_host
    args.jira_email = args.jira_email or settings.jira_user_email
    args.jira_token = args.jira_token or settings.jira_api_token
    args.github_token = args.github_token or settings.github_token
    args.google_api_key = args.google_api_key or settings.google_api_key
    args.model = args.model or settings.llm_model
    args.users_file = args.users_file or settings.users_file


def build_github(args, settings) -> GitHubClient:
    return GitHubClient(args.github_token, base_url=settings.github_api_url, timeout=settings.http_timeout)


def build_jira(args, settings) -> JiraClient:
    return JiraClient(args.jira_host, args.jira_email, args.jira_token, timeout=settings.http_timeout)


def build_aggregator(args, settings, cache: DataCache) -> ActivityAggregator:
    resolver = IdentityResolver(load_identities(args.users_file))
    summarizer = GeminiSummarizer(args.google_api_key, model=args.model)
    return ActivityAggregator(
        resolver=resolver,
        classifier=IntentClassifier(summarizer),
        github=build_github(args, settings),
        jira=build_jira(args, settings),
        cache=cache,
        summarizer=summarizer,
    )


def run_ask(args, settings) -> int:
    cache = DataCache(args.cache or DEFAULT_CACHE_FILE)
    try:
        aggregator = build_aggregator(args, settings, cache)
        print(aggregator.handle_query(args.question))
    finally:
        cache.close()
    return 0


def _records(items):
    return [r.to_dict() for r in items]


def _fan_out_payload(result):
    return {'items': _records(result.items), 'skipped': [{'repo': s.item, 'reason': s.reason} for s in result.skipped]}


def _target_user(args, service: str) -> str:
    """The login/name to query: --user as given, or --person resolved through the alias table."""
    if not args.person:
        return args.user
    identity = IdentityResolver(load_identities(args.users_file)).require(args.person)
    return identity.jira_id if service == 'jira' else identity.github_id


def run_data_command(args, settings) -> int:
    """Thin pass-through to the connectors; prints JSON."""
    command = args.command
    if command == 'search-jira':
        user = _target_user(args, 'jira')
        jira = build_jira(args, settings)
        issues = jira.all_issues_for_user(user) if args.all else jira.active_issues_for_user(user)
        _print_json({'issues': _records(issues)})
        return 0

    user = _target_user(args, 'github')
    github = build_github(args, settings)
    if command == 'commits':
        _print_json({'commits': _records(github.recent_commits(user, args.owner, args.repo))})
    elif command == 'prs':
        _print_json({'prs': _records(github.active_pull_requests(user, args.owner, args.repo))})
    elif command == 'repos':
        _print_json({'repos': github.contribution_repos(user)})
    elif command == 'search-commits':
        _print_json({'commits': _fan_out_payload(github.all_commits_for_user(user))})
    elif command == 'search-prs':
        _print_json({'prs': _fan_out_payload(github.all_pull_requests_for_user(user))})
    return 0


def _add_user_args(p, user_help: str):
    who = p.add_mutually_exclusive_group(required=True)
    who.add_argument("--user", help=user_help)
    who.add_argument("--person", help="Team member alias from the users file")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="workpulse", description="Ask what a team member has been working on (Jira + GitHub)")
    parser.add_argument("--users-file", type=str, default="", help="JSON alias table: {alias: {jiraId, githubId}} (or WORKPULSE_USERS_FILE env)")
    parser.add_argument("--cache", type=str, default="", help=f"Path to SQLite cache file (default {DEFAULT_CACHE_FILE})")
    parser.add_argument("--jira-host", type=str, default="", help="Jira base URL (or JIRA_HOST env)")
    parser.add_argument("--jira-email", type=str, default="", help="Jira account email (or JIRA_USER_EMAIL env)")
    parser.add_argument("--jira-token", type=str, default="", help="Jira API token (or JIRA_API_TOKEN env)")
    parser.add_argument("--github-token", type=str, default="", help="GitHub token (or GITHUB_TOKEN env)")
    parser.add_argument("--google-api-key", type=str, default="", help="Gemini API key (or GOOGLE_API_KEY env)")
    parser.add_argument("--model", type=str, default="", help="Gemini model name (or WORKPULSE_LLM_MODEL env)")
    parser.add_argument("--log-level", type=str, default="WARNING", help="Logging level (DEBUG, INFO, WARNING, ERROR)")
    parser.add_argument("--cache-info", action="store_true", help="Show cache statistics (uses --cache or the default cache file)")
    parser.add_argument("--cache-list", action="store_true", help="List cache keys (uses --cache or the default cache file)")
    parser.add_argument("--cache-clear", action="store_true", help="Clear the cache (uses --cache or the default cache file)")
    parser.add_argument("--cache-remove", type=str, default="", help="Remove a specific cache key, e.g. issues:Mike Ross")
    parser.add_argument("--force", action="store_true", help="Skip confirmation (use with --cache-clear or --cache-remove)")

    sub = parser.add_subparsers(dest="command")

    ask = sub.add_parser("ask", help="Answer a natural-language question about a team member")
    ask.add_argument("question", type=str)

    for name, help_text in (("commits", "Recent commits by a user in one repo"), ("prs", "Open pull requests by a user in one repo")):
        p = sub.add_parser(name, help=help_text)
        _add_user_args(p, "GitHub login")
        p.add_argument("--owner", required=True)
        p.add_argument("--repo", required=True)

    for name, help_text in (
        ("repos", "Repos a user recently contributed to"),
        ("search-commits", "Recent commits by a user across their recent repos"),
        ("search-prs", "Open pull requests by a user across their recent repos"),
    ):
        p = sub.add_parser(name, help=help_text)
        _add_user_args(p, "GitHub login")

    jira = sub.add_parser("search-jira", help="Jira issues assigned to a user")
    _add_user_args(jira, "Jira display name or email")
    jira.add_argument("--all", action="store_true", help="Include issues in a Done status category")
    return parser


def main(argv: Optional[list] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if _handle_cache_actions(args):
        return 0
    if not args.command:
        parser.error("a command is required (ask, commits, prs, repos, search-commits, search-prs, search-jira)")

    settings = load_settings()
    _apply_overrides(args, settings)

    try:
        if args.command == "ask":
            return run_ask(args, settings)
        return run_data_command(args, settings)
    except WorkPulseError as e:
        logger.debug("command %s failed", args.command, exc_info=True)
        print(describe_failure(e), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
