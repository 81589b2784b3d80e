import argparse
import json
import sys
from pathlib import Path

from . import __version__
from .cache import VerificationCache
from .database import SqliteStore
from .env import DEFAULT_STORE_PATH, get_env, load_env
from .errors import ConfigError
from .extractor import extract_links
from .helper import JobHelper
from .logger import get_logger
from .schema import listing_from_dict, validate_listing
from .scorer import score_listing
from .search import DUCKDUCKGO_HTML_ENDPOINT, DuckDuckGoSearch
from .settings import SettingsStore, parse_bool
from .storage import JsonFileStore

logger = get_logger()


def open_store(args: argparse.Namespace):
    if args.db:
        return SqliteStore(Path(args.db))
    return JsonFileStore(Path(args.store))


def _read_input(path_str: str) -> str:
    input_path = Path(path_str)
    if not input_path.exists():
        raise SystemExit(f"Input file not found: {input_path}")
    return input_path.read_text(encoding="utf-8")


def cmd_verify(args: argparse.Namespace) -> None:
    store = open_store(args)
    search = DuckDuckGoSearch(base_url=get_env("JOBHELPER_SEARCH_URL", DUCKDUCKGO_HTML_ENDPOINT))
    helper = JobHelper(store, search=search)
    if not helper.settings.get_verification_enabled():
        raise SystemExit("Verification is disabled. Enable it with: settings set verification true")

    hide_unverified = helper.settings.get_hide_unverified()
    futures = [(name, helper.request_verification(name)) for name in args.names]
    verified = unverified = failed = 0
    for name, future in futures:
        try:
            result = future.result()
        except Exception as e:
            print(f"[error] {name} -> {e}")
            failed += 1
            continue
        source = "cache" if result.from_cache else "search"
        if result.verified:
            verified += 1
            print(f"[verified] {name} ({source})")
            if result.website:
                print(f"  Website: {result.website}")
            for profile in result.social:
                print(f"  Social: {profile}")
        else:
            unverified += 1
            if hide_unverified:
                continue
            print(f"[unverified] {name} ({source}): no official website or social profiles found")
    print(f"Done. verified={verified} unverified={unverified} failed={failed}")
    logger.log_metrics_summary()


def cmd_extract(args: argparse.Namespace) -> None:
    html = _read_input(args.input)
    signal = extract_links(html)
    print(json.dumps(signal.to_dict(), indent=2))


def cmd_score(args: argparse.Namespace) -> None:
    try:
        listing = json.loads(_read_input(args.input))
    except json.JSONDecodeError as e:
        raise SystemExit(f"Invalid JSON in {args.input}: {e}")
    errors = validate_listing(listing)
    if errors:
        print("Invalid:")
        for e in errors:
            print(f" - {e}")
        raise SystemExit(2)

    settings = SettingsStore(open_store(args))
    settings.init()
    result = score_listing(listing_from_dict(listing), settings.scorer_config())
    print(json.dumps({
        "filtered": result.decision.should_filter,
        "reason": result.decision.reason,
        "priority_score": result.priority_score,
        "matched_keywords": result.matched_keywords,
    }, indent=2))


def cmd_keywords(args: argparse.Namespace) -> None:
    settings = SettingsStore(open_store(args))
    settings.init()
    label = "priority keyword" if args.priority else "keyword"

    if args.action == "list":
        keywords = settings.get_keywords(args.priority)
        if not keywords:
            print(f"No {label}s.")
            return
        for k in keywords:
            print(f"[{'on' if k.enabled else 'off'}] {k.text}")
        return

    if not args.text:
        raise SystemExit(f"Provide the {label} text for '{args.action}'.")
    text = args.text.strip()
    if args.action == "add":
        changed = settings.add_keyword(text, args.priority)
        print(f"Added {label}: {text}" if changed else f"{label.capitalize()} already exists: {text}")
    elif args.action == "remove":
        changed = settings.remove_keyword(text, args.priority)
        print(f"Removed {label}: {text}" if changed else f"No such {label}: {text}")
    else:
        changed = settings.toggle_keyword(text, args.priority)
        print(f"Toggled {label}: {text}" if changed else f"No such {label}: {text}")


def _split_list(value: str) -> list:
    return [v.strip() for v in value.split(",") if v.strip()]


SETTERS = {
    "easy-apply": lambda s, v: s.set_easy_apply_enabled(parse_bool(v)),
    "verification": lambda s, v: s.set_verification_enabled(parse_bool(v)),
    "hide-unverified": lambda s, v: s.set_hide_unverified(parse_bool(v)),
    "min-rate": lambda s, v: s.set_min_hourly_rate(v),
    "disallowed-terms": lambda s, v: s.set_disallowed_terms(_split_list(v)),
    "social-domains": lambda s, v: s.set_social_domains(_split_list(v)),
}


def cmd_settings(args: argparse.Namespace) -> None:
    settings = SettingsStore(open_store(args))
    settings.init()
    if args.action == "set":
        if not args.key or args.value is None:
            raise SystemExit("Usage: settings set KEY VALUE")
        try:
            SETTERS[args.key](settings, args.value)
        except ConfigError as e:
            raise SystemExit(f"Invalid value for {args.key}: {e}")
        print(f"Set {args.key} = {args.value}")
        return
    print(json.dumps(settings.as_dict(), indent=2))


def cmd_cache(args: argparse.Namespace) -> None:
    entries = VerificationCache(open_store(args)).entries()
    if not entries:
        print("Verification cache is empty.")
        return
    print(f"Found {len(entries)} cached employers:\n")
    for name, signal in entries.items():
        print(f"Employer: {name}")
        print(f"  Verified: {signal.verified}")
        print(f"  Website: {signal.website}")
        print(f"  Social: {', '.join(signal.social) if signal.social else '-'}")
        print(f"  Timestamp: {signal.timestamp}")
        print()


def _add_store_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--store", default=get_env("JOBHELPER_STORE", DEFAULT_STORE_PATH),
                   help=f"Path to JSON store (default: {DEFAULT_STORE_PATH})")
    p.add_argument("--db", default=get_env("JOBHELPER_DB") or None,
                   help="Path to SQLite store; overrides --store")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="jobhelper", description="Employer verification and listing relevance scoring")
    parser.add_argument("--version", action="store_true", help="Show version")

    subparsers = parser.add_subparsers(dest="command")

    ver = subparsers.add_parser("verify", help="Verify employers through web search (cached, throttled)")
    ver.add_argument("names", nargs="+", help="Employer names, verified in the given order")
    _add_store_args(ver)
    ver.set_defaults(func=cmd_verify)

    ext = subparsers.add_parser("extract", help="Extract website and social links from a saved results page")
    ext.add_argument("--input", required=True, help="Path to a saved DuckDuckGo HTML results page")
    ext.set_defaults(func=cmd_extract)

    sco = subparsers.add_parser("score", help="Filter and score a listing JSON against stored settings")
    sco.add_argument("--input", required=True, help="Path to listing JSON (title, company, listing_text, metadata, easy_apply)")
    _add_store_args(sco)
    sco.set_defaults(func=cmd_score)

    kw = subparsers.add_parser("keywords", help="Manage block and priority keywords")
    kw.add_argument("action", choices=["list", "add", "remove", "toggle"])
    kw.add_argument("text", nargs="?", help="Keyword text (exact match for remove/toggle)")
    kw.add_argument("--priority", action="store_true", help="Operate on the priority list instead of the block list")
    _add_store_args(kw)
    kw.set_defaults(func=cmd_keywords)

    st = subparsers.add_parser("settings", help="Show or change settings")
    st.add_argument("action", choices=["show", "set"])
    st.add_argument("key", nargs="?", choices=sorted(SETTERS))
    st.add_argument("value", nargs="?")
    _add_store_args(st)
    st.set_defaults(func=cmd_settings)

    ca = subparsers.add_parser("cache", help="Inspect the verification cache")
    ca.add_argument("action", choices=["list"])
    _add_store_args(ca)
    ca.set_defaults(func=cmd_cache)

    return parser


def main(argv=None):
    load_env()
    level = get_env("JOBHELPER_LOG_LEVEL")
    if level:
        logger.set_level(level)

    args = build_parser().parse_args(argv)

    if args.version:
        print(__version__)
        return

    if hasattr(args, "func"):
        args.func(args)
        return

    build_parser().print_help(sys.stderr)


if __name__ == "__main__":
    main()
