"""CLI entry point for modern-patch."""
import argparse
import json
import sys
import traceback
from pathlib import Path

from dotenv import load_dotenv

from modern_patch.config import PatchSettings, load_settings
from modern_patch.engine.exceptions import PatchError
from modern_patch.logging_config import setup_logging
from modern_patch.models import PatchArtifact, PatchResult, ProjectInfo
from modern_patch.orchestrator.patcher import PatchOptions, PatchPackage

load_dotenv()

# Exit codes
EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_KEYBOARD_INTERRUPT = 130


def _add_patch_dir(parser: argparse.ArgumentParser, help_text: str) -> None:
    parser.add_argument(
        "-d",
        "--patch-dir",
        type=str,
        default=None,
        help=f"{help_text} (default: MODERN_PATCH_DIR or 'patches')",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    parser = argparse.ArgumentParser(
        prog="modern-patch",
        description="Create and apply patches to npm, pnpm and Yarn dependencies",
    )
    parser.add_argument(
        "--project-root",
        type=str,
        default=".",
        help="Project directory containing package.json (default: current directory)",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable verbose output")
    parser.add_argument(
        "--output-json", action="store_true", help="Output results as JSON"
    )

    subparsers = parser.add_subparsers(dest="command")

    create = subparsers.add_parser("create", help="Create a patch for a specific package")
    create.add_argument("package_name", type=str, help="Dependency to capture edits from")
    _add_patch_dir(create, "Directory to store patch files")
    create.add_argument(
        "-e", "--exclude", nargs="+", default=[], help="Exclude files matching these patterns"
    )
    create.add_argument(
        "-i", "--include", nargs="+", default=[], help="Include only files matching these patterns"
    )
    create.add_argument(
        "-c", "--case-sensitive", action="store_true", help="Make file patterns case-sensitive"
    )
    create.add_argument(
        "--create-issue", action="store_true", help="Open a prefilled issue for the patch"
    )
    create.add_argument(
        "--append",
        type=str,
        default=None,
        metavar="DESCRIPTION",
        help="Append a new sequenced patch with this description",
    )

    apply = subparsers.add_parser("apply", help="Apply all patches in the project")
    _add_patch_dir(apply, "Directory containing patch files")
    apply.add_argument(
        "--error-on-fail", action="store_true", help="Exit with code 1 if any patch fails"
    )
    apply.add_argument("--reverse", action="store_true", help="Reverse all patches")

    list_cmd = subparsers.add_parser("list", help="List all patches in the project")
    _add_patch_dir(list_cmd, "Directory containing patch files")

    subparsers.add_parser("info", help="Show information about the current project")

    return parser


def validate_project_root(raw_path: str) -> Path:
    """Resolve the project root.

    Raises:
        SystemExit: If path is not a valid directory.
    """
    resolved = Path(raw_path).resolve()
    if not resolved.is_dir():
        print(f"Error: '{raw_path}' is not a valid directory.", file=sys.stderr)
        raise SystemExit(EXIT_FAILURE)
    return resolved


def options_from_args(args: argparse.Namespace) -> PatchOptions:
    """Translate parsed arguments into PatchOptions."""
    return PatchOptions(
        patch_dir=getattr(args, "patch_dir", None),
        include=getattr(args, "include", None) or [],
        exclude=getattr(args, "exclude", None) or [],
        case_sensitive=getattr(args, "case_sensitive", False),
        create_issue=getattr(args, "create_issue", False),
        append=getattr(args, "append", None),
        error_on_fail=getattr(args, "error_on_fail", False),
        reverse=getattr(args, "reverse", False),
    )


def format_result_json(result: PatchResult) -> str:
    return json.dumps(result.model_dump(mode="json"), indent=2)


def print_result_human(title: str, result: PatchResult) -> None:
    """Print a success/failure summary plus the itemized errors."""
    status = "✓" if result.success else "✗"
    print(f"{status} {title}")
    for path in result.patches_created:
        print(f"  created: {path}")
    for path in result.patches_applied:
        print(f"  applied: {Path(path).name}")
    for path in result.patches_skipped:
        print(f"  skipped (manual): {Path(path).name}")
    if result.errors:
        print(f"\nErrors ({len(result.errors)}):")
        for err in result.errors:
            print(f"  - {err}")


def print_patch_list(patches: list[PatchArtifact]) -> None:
    if not patches:
        print("No patches found")
        return
    print("Patches:")
    for patch in patches:
        sequence = f" ({patch.sequence})" if patch.sequence is not None else ""
        description = f" - {patch.description}" if patch.description else ""
        print(f"  {patch.dependency_name}@{patch.dependency_version}{sequence}{description}")


def print_info(info: ProjectInfo) -> None:
    manager = info.manager
    print("Project Information:")
    print(f"  Package Manager: {manager.kind.value} {manager.version}")
    print(f"  Lock File: {manager.lock_file}")
    print(f"  Has Lock File: {'Yes' if manager.has_lock_file else 'No'}")
    print(f"  Patch Directory: {info.patch_dir}")
    print(f"  Patches: {info.patch_count}")


def determine_exit_code(command: str, result: PatchResult, error_on_fail: bool) -> int:
    """Only create and `apply --error-on-fail` turn errors into a failing exit."""
    if result.success:
        return EXIT_SUCCESS
    if command == "create" or error_on_fail:
        return EXIT_FAILURE
    return EXIT_SUCCESS


def _handle_error(label: str, exc: BaseException, verbose: bool, exit_code: int) -> int:
    """Print error message to stderr and return the exit code."""
    print(f"{label}: {exc}", file=sys.stderr)
    if verbose:
        traceback.print_exc(file=sys.stderr)
    return exit_code


def dispatch(args: argparse.Namespace, settings: PatchSettings, project_root: Path) -> int:
    """Dispatch a parsed command; running without one applies patches."""
    command = args.command or "apply"
    options = options_from_args(args)
    patcher = PatchPackage(project_root, options=options, settings=settings)

    if command == "list":
        patches = patcher.list_patches()
        if args.output_json:
            print(json.dumps([p.model_dump(mode="json") for p in patches], indent=2))
        else:
            print_patch_list(patches)
        return EXIT_SUCCESS

    if command == "info":
        info = patcher.info()
        if args.output_json:
            print(json.dumps(info.model_dump(mode="json"), indent=2))
        else:
            print_info(info)
        return EXIT_SUCCESS

    if command == "create":
        result = patcher.create_patch(args.package_name)
        title = "Patch created successfully" if result.success else "Failed to create patch"
    elif options.reverse:
        result = patcher.reverse_patches()
        title = "Patches reversed" if result.success else "Failed to reverse patches"
    else:
        result = patcher.apply_patches()
        title = "Patches processed successfully" if result.success else "Failed to process patches"

    if args.output_json:
        print(format_result_json(result))
    else:
        print_result_human(title, result)
    return determine_exit_code(command, result, options.error_on_fail)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code integer.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = load_settings()
    setup_logging(settings.log_level, verbose=args.verbose)

    try:
        project_root = validate_project_root(args.project_root)
    except SystemExit as exc:
        return exc.code

    try:
        return dispatch(args, settings, project_root)

    except PatchError as exc:
        return _handle_error("Patch error", exc, args.verbose, EXIT_FAILURE)

    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_KEYBOARD_INTERRUPT

    except Exception as exc:
        return _handle_error("Unexpected error", exc, args.verbose, EXIT_FAILURE)


if __name__ == "__main__":
    sys.exit(main())
