"""
CLI — Outline navigation over files from the command line

    navi search init.el --key f             functions (key f)
    navi search init.el --level 2           headings up to level 2
    navi search notes.org --level 3 --exclusive --keyword todo
    navi keys --lang emacs-lisp             what each key does
    navi languages                          registered languages
    navi config search.context_lines 2      change a setting

Exit status for search: 0 with matches, 1 without, 2 on errors.
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import ConfigManager
from .core.errors import NaviError
from .core.navigator import NavigationRequest, NavigationStatus, Navigator
from .core.registry import PatternRegistry
from .core.sources import FileSourceProvider
from .presentation.formatters import format_outcome, outcome_to_json
from .presentation.symbols import get_symbols, safe_print

EXIT_MATCHES = 0
EXIT_NO_MATCHES = 1
EXIT_ERROR = 2


def _detect_language(registry: PatternRegistry, files: List[str]) -> Optional[str]:
    """Language shared by all files, by extension; None if unknown or mixed."""
    languages = set()
    for name in files:
        profile = registry.get_profile_for_path(Path(name))
        if profile is None:
            return None
        languages.add(profile.name)
    return languages.pop() if len(languages) == 1 else None


def cmd_search(args, manager: ConfigManager) -> int:
    config = manager.load()
    registry = manager.build_registry()

    language = args.lang or _detect_language(registry, args.files)
    if language is None:
        safe_print("Error: cannot tell the language of these files, use --lang", file=sys.stderr)
        return EXIT_ERROR

    context = args.context if args.context is not None else config.search.context_lines
    exclusive = args.exclusive or config.search.exclusive_levels
    request = NavigationRequest(
        language=language,
        level=args.level,
        keyword=args.keyword,
        key=args.key,
        exclusive=exclusive,
        context_lines=context,
    )

    provider = FileSourceProvider(args.files)
    navigator = Navigator(registry, provider)
    outcome = navigator.navigate(request)

    output_format = args.format or config.display.format
    if output_format == "json":
        safe_print(outcome_to_json(outcome))
    else:
        symbols = get_symbols(config.display.symbols)
        stream = sys.stdout if outcome.ok else sys.stderr
        safe_print(format_outcome(outcome, symbols, registry.get_profile(language)), file=stream)

    if outcome.status is NavigationStatus.OK:
        return EXIT_MATCHES
    if outcome.status is NavigationStatus.NO_MATCHES:
        return EXIT_NO_MATCHES
    return EXIT_ERROR


def cmd_keys(args, manager: ConfigManager) -> int:
    registry = manager.build_registry()
    profile = registry.get_profile(args.lang)
    if profile is None:
        safe_print(f"Error: language '{args.lang}' is not registered", file=sys.stderr)
        return EXIT_ERROR

    symbols = get_symbols(manager.load().display.symbols)
    safe_print(f"{profile.name}: {profile.description}" if profile.description else profile.name)
    safe_print(f"{symbols.indent}1-8 {symbols.arrow} headings up to that level")
    for keyword in profile.keywords():
        binding = profile.binding_for(keyword) or " "
        result = registry.lookup(profile.name, keyword)
        detail = result.pattern if result.found else f"{symbols.check_fail} {result.message}"
        safe_print(f"{symbols.indent}{binding}   {symbols.arrow} {keyword:<14} {detail}")
    return EXIT_MATCHES


def cmd_languages(args, manager: ConfigManager) -> int:
    registry = manager.build_registry()
    symbols = get_symbols(manager.load().display.symbols)
    for name in registry.supported_languages():
        profile = registry.get_profile(name)
        extensions = ", ".join(sorted(profile.extensions)) or "-"
        safe_print(f"{symbols.bullet} {name:<12} {extensions}")
    return EXIT_MATCHES


def cmd_config(args, manager: ConfigManager) -> int:
    if args.key is None:
        safe_print(manager.display())
        return EXIT_MATCHES
    if args.value is None:
        value = manager.get(args.key)
        if value is None:
            safe_print(f"Error: unknown setting '{args.key}'", file=sys.stderr)
            return EXIT_ERROR
        safe_print(value)
        return EXIT_MATCHES

    error = manager.set(args.key, args.value, scope="user" if args.user else "project")
    if error:
        safe_print(f"Error: {error}", file=sys.stderr)
        return EXIT_ERROR
    return EXIT_MATCHES


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="navi",
        description="navi -- outline navigation by keyword and heading level",
    )
    parser.add_argument(
        '--project', '-p',
        default=os.environ.get("NAVI_PROJECT_PATH", "."),
        help='Project directory (default: NAVI_PROJECT_PATH or current)'
    )
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')
    parser.add_argument('--version', '-V', action='version', version=f'navi {__version__}')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    search_parser = subparsers.add_parser('search', help='Show headings and keyword matches')
    search_parser.add_argument('files', nargs='+', help='Files to search')
    search_parser.add_argument('--lang', '-l', help='Language profile (default: from extension)')
    target = search_parser.add_mutually_exclusive_group()
    target.add_argument('--key', '-k', help='Key bound to a keyword, or a digit 1-8 for a level')
    target.add_argument('--keyword', '-w', help='Keyword name (e.g. FUN, defun)')
    search_parser.add_argument('--level', '-n', type=int, help='Show headings up to this level')
    search_parser.add_argument('--exclusive', '-x', action='store_true',
                               help='Only headings at exactly --level')
    search_parser.add_argument('--context', '-C', type=int, help='Context lines per match')
    search_parser.add_argument('--format', '-f', choices=('text', 'json'), help='Output format')
    search_parser.set_defaults(handler=cmd_search)

    keys_parser = subparsers.add_parser('keys', help='List keys and patterns of a language')
    keys_parser.add_argument('--lang', '-l', required=True, help='Language profile')
    keys_parser.set_defaults(handler=cmd_keys)

    languages_parser = subparsers.add_parser('languages', help='List registered languages')
    languages_parser.set_defaults(handler=cmd_languages)

    config_parser = subparsers.add_parser('config', help='Show or change settings')
    config_parser.add_argument('key', nargs='?', help='Setting (e.g. search.context_lines)')
    config_parser.add_argument('value', nargs='?', help='New value')
    config_parser.add_argument('--user', action='store_true', help='Write user config instead of project')
    config_parser.set_defaults(handler=cmd_config)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the navi CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    debug = args.verbose or os.environ.get('NAVI_DEBUG', '').lower() in ('1', 'true', 'yes')
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return EXIT_ERROR

    manager = ConfigManager(Path(args.project))
    try:
        return args.handler(args, manager)
    except NaviError as e:
        safe_print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == '__main__':
    sys.exit(main())
