"""Selection commands.

Provides ``treepack add`` to write a selection into a zip archive and
``treepack ls`` to preview the local names a selection would produce.
"""

import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Annotated, Any

import typer

from treepack.archive import ArchiveError, MemoryArchive, ZipArchiveSink
from treepack.config import ConfigError, get_profile, load_config_or_default
from treepack.selection import (
    DirectoryPolicy,
    EntrySource,
    ErrorPolicy,
    IgnoreFilter,
    PathMatcher,
    SelectionError,
    SelectionPipeline,
    Sink,
    compile_glob,
    compile_regex,
)
from treepack.utils.formatting import (
    console,
    create_entry_table,
    format_size,
    print_error,
    print_info,
    print_success,
)


class OutputFormat(str, Enum):
    """Output format options for previews."""

    TABLE = "table"
    JSON = "json"


@dataclass(frozen=True, slots=True)
class Selection:
    """Resolved selection parameters from CLI options and profiles."""

    root: Path
    prefix: str
    recursive: bool
    matcher: PathMatcher | None
    ignore: tuple[str, ...]
    follow_symlinks: bool
    on_error: ErrorPolicy
    directories: DirectoryPolicy

    def pipeline(self, sink: Sink) -> SelectionPipeline:
        return SelectionPipeline(
            sink,
            follow_symlinks=self.follow_symlinks,
            on_error=self.on_error,
            directories=self.directories,
        )

    def source(self, pipeline: SelectionPipeline) -> EntrySource:
        walker = pipeline.walker(self.root, self.recursive)
        if self.ignore:
            return IgnoreFilter(walker, self.ignore)
        return walker


RootArg = Annotated[
    Path | None,
    typer.Argument(help="Directory to select from (optional with --profile)."),
]
PrefixOpt = Annotated[
    str | None,
    typer.Option("--prefix", "-p", help="Local-path prefix inside the archive."),
]
RecursiveOpt = Annotated[
    bool | None,
    typer.Option(
        "--recursive/--no-recursive",
        "-r/-R",
        help="Walk every depth, not just direct children (default: profile value or flat).",
    ),
]
GlobOpt = Annotated[
    str | None,
    typer.Option("--glob", "-g", help="Select files whose relative path matches a glob."),
]
RegexOpt = Annotated[
    str | None,
    typer.Option("--regex", "-x", help="Select files whose relative path contains a regex match."),
]
IgnoreOpt = Annotated[
    list[str] | None,
    typer.Option("--ignore", "-i", help="Relative path to exclude (repeatable)."),
]
EmptyDirsOpt = Annotated[
    bool,
    typer.Option("--empty-dirs-only", help="Only register directories that are empty."),
]
FollowOpt = Annotated[
    bool,
    typer.Option("--follow-symlinks", help="Descend into symlinked directories."),
]
SkipErrorsOpt = Annotated[
    bool,
    typer.Option("--skip-errors", help="Skip unreadable entries with a warning."),
]
ProfileOpt = Annotated[
    str | None,
    typer.Option("--profile", "-P", help="Use a named profile from the config file."),
]
ConfigOpt = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Config file (default: ~/.config/treepack/config.toml)."),
]


def add(
    ctx: typer.Context,
    root: RootArg = None,
    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="Destination zip file."),
    ] = Path("archive.zip"),
    prefix: PrefixOpt = None,
    recursive: RecursiveOpt = None,
    glob: GlobOpt = None,
    regex: RegexOpt = None,
    ignore: IgnoreOpt = None,
    empty_dirs_only: EmptyDirsOpt = False,
    follow_symlinks: FollowOpt = False,
    skip_errors: SkipErrorsOpt = False,
    profile: ProfileOpt = None,
    config_path: ConfigOpt = None,
) -> None:
    """Write a directory selection into a zip archive.

    Examples:
        treepack add project -o out.zip                  # Direct children only
        treepack add project -r -p src -o out.zip        # Everything, under src/
        treepack add project -r -g "**.{txt,jpg}"        # Matching files at any depth
        treepack add project -r -i build -i .git         # Prune ignored subtrees
        treepack add --profile docs -o docs.zip          # Replay a saved profile
    """
    output = output.resolve()
    selection = _resolve_or_exit(ctx.params, exclude=output)

    try:
        with ZipArchiveSink(output) as sink:
            pipeline = selection.pipeline(sink)
            summary = pipeline.add_files_from_iterator(
                selection.source(pipeline),
                selection.prefix,
                matcher=selection.matcher,
            )
    except (SelectionError, ArchiveError) as e:
        output.unlink(missing_ok=True)
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if ctx.obj and ctx.obj.get("quiet"):
        return

    print_success(
        f"Added {summary.files} file(s) and {summary.directories} directory(ies) "
        f"({format_size(summary.total_bytes)}) to {output}"
    )


def ls(
    ctx: typer.Context,
    root: RootArg = None,
    prefix: PrefixOpt = None,
    recursive: RecursiveOpt = None,
    glob: GlobOpt = None,
    regex: RegexOpt = None,
    ignore: IgnoreOpt = None,
    empty_dirs_only: EmptyDirsOpt = False,
    follow_symlinks: FollowOpt = False,
    skip_errors: SkipErrorsOpt = False,
    profile: ProfileOpt = None,
    config_path: ConfigOpt = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
) -> None:
    """Preview the local names a selection would produce."""
    selection = _resolve_or_exit(ctx.params)

    # select() only reads the tree; the archive never receives a request
    pipeline = selection.pipeline(MemoryArchive())
    try:
        requests = list(
            pipeline.select(
                selection.source(pipeline),
                selection.prefix,
                selection.matcher,
            )
        )
    except SelectionError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if output_format == OutputFormat.JSON:
        data = [
            {
                "local_name": request.local_name,
                "is_directory": request.is_directory,
                "size_bytes": len(request.content or b""),
            }
            for request in requests
        ]
        console.print_json(json.dumps(data, ensure_ascii=False))
        return

    if not requests:
        print_info("No entries selected.")
        return

    table = create_entry_table()
    for request in requests:
        if request.is_directory:
            table.add_row(f"[directory]{request.local_name}[/]", "directory", "-")
        else:
            table.add_row(request.local_name, "file", format_size(len(request.content or b"")))
    console.print(table)
    console.print(f"\n[muted]{len(requests)} entries selected[/]")


# === Private helper functions ===


def _resolve_or_exit(params: dict[str, Any], exclude: Path | None = None) -> Selection:
    """Resolve CLI parameters into a Selection, exiting with code 1 on error."""
    try:
        return _resolve_selection(params, exclude=exclude)
    except (ConfigError, SelectionError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def _resolve_selection(params: dict[str, Any], exclude: Path | None = None) -> Selection:
    """Merge CLI parameters with config defaults and an optional profile.

    Explicit CLI values win over profile values. Patterns are compiled
    here so malformed syntax is reported before anything is read.

    Args:
        params: Parsed command parameters (``ctx.params``).
        exclude: Path to keep out of the selection (the archive being written).

    Raises:
        ConfigError: If the config file or profile is invalid.
        PatternError: If a pattern is malformed.
        typer.BadParameter: If the options are contradictory.
    """
    root: Path | None = params.get("root")
    prefix: str | None = params.get("prefix")
    recursive: bool | None = params.get("recursive")
    glob: str | None = params.get("glob")
    regex: str | None = params.get("regex")
    ignore = list(params.get("ignore") or [])

    if glob is not None and regex is not None:
        raise typer.BadParameter("--glob and --regex are mutually exclusive")

    matcher: PathMatcher | None = None
    if glob is not None:
        matcher = compile_glob(glob)
    elif regex is not None:
        matcher = compile_regex(regex)

    config = load_config_or_default(params.get("config_path"))
    defaults = config.defaults

    profile_name: str | None = params.get("profile")
    if profile_name is not None:
        saved = get_profile(config, profile_name)
        root = root or saved.root
        prefix = prefix if prefix is not None else saved.prefix
        recursive = recursive if recursive is not None else saved.recursive
        if matcher is None:
            matcher = saved.matcher()
        ignore = [*saved.ignore, *ignore]

    if root is None:
        raise typer.BadParameter("ROOT is required unless --profile provides one")

    if exclude is not None:
        try:
            ignore.append(exclude.relative_to(root.resolve()).as_posix())
        except ValueError:
            pass

    return Selection(
        root=root,
        prefix=prefix or "",
        recursive=bool(recursive),
        matcher=matcher,
        ignore=tuple(ignore),
        follow_symlinks=params.get("follow_symlinks", False) or defaults.follow_symlinks,
        on_error=ErrorPolicy.SKIP if params.get("skip_errors") else defaults.on_error,
        directories=(
            DirectoryPolicy.EMPTY_ONLY if params.get("empty_dirs_only") else defaults.directories
        ),
    )
