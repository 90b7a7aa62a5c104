# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Command-line interface for relseq.

Commands:

    classify: Print the release type of each version
    compare: Compare two versions
    sequence: Print the natural sequence of a set of versions
    validate: Validate a library profile
    fetch: Download new release archives linked from the profile's SourceUrl
    scan: Record new versions found in the profile's SourceDir
    plan: List the versions to build, newest first
    install: Record the install directory of a built version
    timeline: Show installed versions with their deleted marks

Example:
    Order a few versions:
        ```bash
        $ relseq sequence 1.0 1.1 2.0-rc1 2.0-rc2 current
        ```

    Use a library's comparison options:
        ```bash
        $ relseq compare 0.9.8k 0.9.8 --profile profiles/openssl.json
        ```

    Fetch or scan sources and plan new builds:
        ```bash
        $ relseq fetch profiles/zlib.yaml --limit 2
        $ relseq scan profiles/zlib.yaml --verbose
        $ relseq plan profiles/zlib.yaml --new-only --limit 3
        $ relseq install profiles/zlib.yaml 1.3 /opt/zlib/1.3
        ```

Exit Codes:

- 0: Success
- 1: Error (configuration, state, network, or validation failure)

Note:
    Each command has its own handler function (cmd_<command>). Verbose mode
    shows full tracebacks on errors. Debug mode implies verbose mode.

"""

from __future__ import annotations

import argparse
from importlib.metadata import version
from pathlib import Path
import sys

from relseq.config import load_profile
from relseq.core import (
    DEFAULT_REPO_DIR,
    DEFAULT_STATE_FILE,
    discover_local,
    discover_remote,
    plan_builds,
    record_install,
    version_timeline,
)
from relseq.exceptions import ConfigError, RelseqError
from relseq.logging import get_logger, set_global_logger
from relseq.validation import validate_profile
from relseq.versioning import (
    ComparisonProfile,
    classify,
    compare,
    natural_sequence,
)


def _print_error(err: Exception, args: argparse.Namespace) -> None:
    print(f"Error: {err}")
    if getattr(args, "verbose", False) or getattr(args, "debug", False):
        import traceback

        traceback.print_exc()


def _comparison_profile(args: argparse.Namespace) -> ComparisonProfile | None:
    if not args.profile:
        return None
    return load_profile(Path(args.profile).resolve()).comparison


def cmd_classify(args: argparse.Namespace) -> int:
    """Handler for 'relseq classify' command.

    Args:
        args: Parsed command-line arguments containing versions and an
            optional profile path.

    Returns:
        Exit code (0 for success, 1 if the profile cannot be loaded).

    """
    try:
        profile = _comparison_profile(args)
    except ConfigError as err:
        _print_error(err, args)
        return 1

    width = max(len(v) for v in args.versions)
    for v in args.versions:
        print(f"{v:<{width}}  {classify(v, profile)}")
    return 0


def cmd_compare(args: argparse.Namespace) -> int:
    """Handler for 'relseq compare' command.

    Prints "A < B", "A == B" or "A > B".
    """
    try:
        profile = _comparison_profile(args)
    except ConfigError as err:
        _print_error(err, args)
        return 1

    symbol = {-1: "<", 0: "==", 1: ">"}[compare(args.a, args.b, profile)]
    print(f"{args.a} {symbol} {args.b}")
    return 0


def cmd_sequence(args: argparse.Namespace) -> int:
    """Handler for 'relseq sequence' command.

    Prints the natural sequence of the given versions, oldest first, one per
    line.
    """
    try:
        profile = _comparison_profile(args)
    except ConfigError as err:
        _print_error(err, args)
        return 1

    for v in natural_sequence(args.versions, profile):
        print(v)
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    """Handler for 'relseq validate' command.

    Validates a library profile without scanning sources or touching the
    state file.

    Args:
        args: Parsed command-line arguments containing the profile path and
            verbose flag.

    Returns:
        Exit code (0 for a valid profile, 1 for invalid).

    """
    logger = get_logger(verbose=args.verbose, debug=False)
    set_global_logger(logger)

    profile_path = Path(args.profile).resolve()

    print(f"Validating profile: {profile_path}")
    print()

    result = validate_profile(profile_path, verbose=args.verbose)

    print("=" * 70)
    print("VALIDATION RESULTS")
    print("=" * 70)
    print(f"Profile:     {result['profile_path']}")
    print(f"Status:      {result['status'].upper()}")
    print(f"Key Count:   {result['key_count']}")
    print()

    if result["warnings"]:
        print(f"Warnings ({len(result['warnings'])}):")
        for warning in result["warnings"]:
            print(f"  [WARNING] {warning}")
        print()

    if result["errors"]:
        print(f"Errors ({len(result['errors'])}):")
        for error in result["errors"]:
            print(f"  [X] {error}")
        print()

    print("=" * 70)

    if result["status"] == "valid":
        print()
        print("[SUCCESS] Profile is valid!")
        return 0
    else:
        print()
        print(
            f"[FAILED] Profile validation failed with {len(result['errors'])} error(s)."
        )
        return 1


def cmd_fetch(args: argparse.Namespace) -> int:
    """Handler for 'relseq fetch' command.

    Crawls the profile's SourceUrl, downloads new release archives into
    the repository directory and records them in the state file.

    Returns:
        Exit code (0 for success, 1 for failure). A run where some
        downloads failed still exits 0; the failures are listed.

    """
    logger = get_logger(verbose=args.verbose, debug=args.debug)
    set_global_logger(logger)

    profile_path = Path(args.profile).resolve()
    print(f"Fetching sources for profile: {profile_path}")
    print()

    try:
        result = discover_remote(
            profile_path, args.state_file, repo_dir=args.repo_dir, limit=args.limit
        )
    except RelseqError as err:
        _print_error(err, args)
        return 1

    print("=" * 70)
    print("FETCH RESULTS")
    print("=" * 70)
    print(f"Library:         {result.library}")
    print(f"Source URL:      {result.source_url}")
    print(f"Found:           {len(result.found)}")
    print(f"Added:           {', '.join(result.added) or '(none)'}")
    if result.skipped:
        print("Skipped:")
        for v, reason in sorted(result.skipped.items()):
            print(f"  {v:<20} {reason}")
    if result.failed:
        print("Failed:")
        for v, error in sorted(result.failed.items()):
            print(f"  {v:<20} {error}")
    print(f"Status:          {result.status}")
    print("=" * 70)
    print()
    if result.added:
        print(f"[SUCCESS] Added {len(result.added)} new version(s)")
    else:
        print("[SUCCESS] No new versions found")

    return 0


def cmd_scan(args: argparse.Namespace) -> int:
    """Handler for 'relseq scan' command.

    Scans the profile's SourceDir for release archives and records the
    versions worth keeping in the state file.

    Returns:
        Exit code (0 for success, 1 for failure).

    """
    logger = get_logger(verbose=args.verbose, debug=args.debug)
    set_global_logger(logger)

    profile_path = Path(args.profile).resolve()
    print(f"Scanning sources for profile: {profile_path}")
    print()

    try:
        result = discover_local(profile_path, args.state_file)
    except RelseqError as err:
        _print_error(err, args)
        return 1

    print("=" * 70)
    print("SCAN RESULTS")
    print("=" * 70)
    print(f"Library:         {result.library}")
    print(f"Source Dir:      {result.source_dir}")
    print(f"Found:           {len(result.found)}")
    print(f"Added:           {', '.join(result.added) or '(none)'}")
    if result.skipped:
        print("Skipped:")
        for v, reason in sorted(result.skipped.items()):
            print(f"  {v:<20} {reason}")
    print(f"Status:          {result.status}")
    print("=" * 70)
    print()
    if result.added:
        print(f"[SUCCESS] Recorded {len(result.added)} new version(s)")
    else:
        print("[SUCCESS] No new versions found")

    return 0


def cmd_plan(args: argparse.Namespace) -> int:
    """Handler for 'relseq plan' command.

    Lists the versions to build from the known sources, newest first.

    Returns:
        Exit code (0 for success, 1 for failure).

    """
    logger = get_logger(verbose=args.verbose, debug=args.debug)
    set_global_logger(logger)

    profile_path = Path(args.profile).resolve()

    try:
        result = plan_builds(
            profile_path,
            args.state_file,
            target_version=args.target_version,
            new_only=args.new_only,
            limit=args.limit,
        )
    except RelseqError as err:
        _print_error(err, args)
        return 1

    print("=" * 70)
    print(f"BUILD PLAN: {result.library}")
    print("=" * 70)
    for v in result.versions:
        print(f"{v:<20} {result.sources.get(v, '')}")
    if not result.versions:
        print("(nothing to build)")
    print("=" * 70)

    return 0


def cmd_install(args: argparse.Namespace) -> int:
    """Handler for 'relseq install' command.

    Records that a version was built and installed, so that plan --new-only
    and timeline take it into account.

    Returns:
        Exit code (0 for success, 1 for failure).

    """
    logger = get_logger(verbose=args.verbose, debug=args.debug)
    set_global_logger(logger)

    profile_path = Path(args.profile).resolve()

    try:
        result = record_install(
            profile_path, args.version, args.install_dir, args.state_file
        )
    except RelseqError as err:
        _print_error(err, args)
        return 1

    action = "Updated" if result.replaced else "Recorded"
    print(f"[SUCCESS] {action} {result.library} {result.version}: {result.install_dir}")

    return 0


def cmd_timeline(args: argparse.Namespace) -> int:
    """Handler for 'relseq timeline' command.

    Shows installed versions newest first. Deleted versions are hidden
    unless --all is given.

    Returns:
        Exit code (0 for success, 1 for failure).

    """
    logger = get_logger(verbose=args.verbose, debug=args.debug)
    set_global_logger(logger)

    profile_path = Path(args.profile).resolve()

    try:
        entries = version_timeline(profile_path, args.state_file)
    except RelseqError as err:
        _print_error(err, args)
        return 1

    print("=" * 70)
    print("TIMELINE")
    print("=" * 70)
    shown = 0
    for entry in entries:
        if entry.deleted and not args.all:
            continue
        mark = "  [deleted]" if entry.deleted else ""
        print(f"{entry.version:<20} {entry.release_type:<20}{mark}")
        shown += 1
    if not shown:
        print("(no installed versions)")
    print("=" * 70)

    return 0


def _add_log_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show progress and high-level status updates",
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Show detailed debugging output (implies --verbose)",
    )


def _add_state_file(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--state-file",
        type=Path,
        default=DEFAULT_STATE_FILE,
        help="State file for known sources and installed builds (default: state/versions.json)",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the relseq argument parser."""
    parser = argparse.ArgumentParser(
        prog="relseq",
        description="relseq - classify, order and track upstream library versions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"relseq {version('relseq')}",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
        required=True,
    )

    # 'classify' command
    parser_classify = subparsers.add_parser(
        "classify",
        help="Print the release type of each version",
    )
    parser_classify.add_argument("versions", nargs="+", help="Version strings")
    parser_classify.add_argument(
        "--profile", help="Library profile providing comparison options"
    )
    parser_classify.set_defaults(func=cmd_classify)

    # 'compare' command
    parser_compare = subparsers.add_parser(
        "compare",
        help="Compare two versions",
    )
    parser_compare.add_argument("a", help="First version")
    parser_compare.add_argument("b", help="Second version")
    parser_compare.add_argument(
        "--profile", help="Library profile providing comparison options"
    )
    parser_compare.set_defaults(func=cmd_compare)

    # 'sequence' command
    parser_sequence = subparsers.add_parser(
        "sequence",
        help="Print the natural sequence of versions, oldest first",
        description="Keep all releases and the newest pre-release if it is ahead of them.",
    )
    parser_sequence.add_argument("versions", nargs="+", help="Version strings")
    parser_sequence.add_argument(
        "--profile", help="Library profile providing comparison options"
    )
    parser_sequence.set_defaults(func=cmd_sequence)

    # 'validate' command
    parser_validate = subparsers.add_parser(
        "validate",
        help="Validate a library profile",
        description="Check a profile for syntax errors and invalid comparison options.",
    )
    parser_validate.add_argument("profile", help="Path to the library profile")
    parser_validate.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show validation progress and details",
    )
    parser_validate.set_defaults(func=cmd_validate)

    # 'fetch' command
    parser_fetch = subparsers.add_parser(
        "fetch",
        help="Download new release archives linked from the profile's SourceUrl",
    )
    parser_fetch.add_argument("profile", help="Path to the library profile")
    parser_fetch.add_argument(
        "--repo-dir",
        type=Path,
        default=DEFAULT_REPO_DIR,
        help="Directory for downloaded archives (default: src)",
    )
    parser_fetch.add_argument(
        "--limit", type=int, default=None, help="Add at most this many versions"
    )
    _add_state_file(parser_fetch)
    _add_log_flags(parser_fetch)
    parser_fetch.set_defaults(func=cmd_fetch)

    # 'scan' command
    parser_scan = subparsers.add_parser(
        "scan",
        help="Record new versions found in the profile's SourceDir",
    )
    parser_scan.add_argument("profile", help="Path to the library profile")
    _add_state_file(parser_scan)
    _add_log_flags(parser_scan)
    parser_scan.set_defaults(func=cmd_scan)

    # 'plan' command
    parser_plan = subparsers.add_parser(
        "plan",
        help="List the versions to build, newest first",
    )
    parser_plan.add_argument("profile", help="Path to the library profile")
    parser_plan.add_argument(
        "--target-version", default=None, help="Plan only this version"
    )
    parser_plan.add_argument(
        "--new-only", action="store_true", help="Skip installed versions"
    )
    parser_plan.add_argument(
        "--limit", type=int, default=None, help="Plan at most this many versions"
    )
    _add_state_file(parser_plan)
    _add_log_flags(parser_plan)
    parser_plan.set_defaults(func=cmd_plan)

    # 'install' command
    parser_install = subparsers.add_parser(
        "install",
        help="Record the install directory of a built version",
    )
    parser_install.add_argument("profile", help="Path to the library profile")
    parser_install.add_argument("version", help="Version that was built")
    parser_install.add_argument(
        "install_dir", type=Path, help="Directory the build was installed into"
    )
    _add_state_file(parser_install)
    _add_log_flags(parser_install)
    parser_install.set_defaults(func=cmd_install)

    # 'timeline' command
    parser_timeline = subparsers.add_parser(
        "timeline",
        help="Show installed versions, newest first",
    )
    parser_timeline.add_argument("profile", help="Path to the library profile")
    parser_timeline.add_argument(
        "--all", action="store_true", help="Include versions marked deleted"
    )
    _add_state_file(parser_timeline)
    _add_log_flags(parser_timeline)
    parser_timeline.set_defaults(func=cmd_timeline)

    return parser


def main() -> None:
    """Main entry point for the relseq CLI.

    This function is registered as the 'relseq' console script in
    pyproject.toml.
    """
    parser = build_parser()
    args = parser.parse_args()

    exit_code = args.func(args)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
