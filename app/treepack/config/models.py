"""Pydantic models for the treepack configuration file.

This module defines the structure of config.toml: global selection
defaults and named selection profiles that can be replayed from the CLI.
"""

from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from treepack.selection.models import DirectoryPolicy, ErrorPolicy
from treepack.selection.patterns import PathMatcher, compile_glob, compile_regex


class SelectionDefaults(BaseModel):
    """Defaults applied to every selection.

    Attributes:
        follow_symlinks: Descend into symlinked directories.
        on_error: Policy for unreadable directories and files.
        directories: Which directories are registered as placeholders.
    """

    model_config = ConfigDict(extra="forbid")

    follow_symlinks: Annotated[
        bool,
        Field(description="Descend into symlinked directories"),
    ] = False
    on_error: Annotated[
        ErrorPolicy,
        Field(description="Policy for unreadable entries"),
    ] = ErrorPolicy.FAIL
    directories: Annotated[
        DirectoryPolicy,
        Field(description="Directory placeholder policy"),
    ] = DirectoryPolicy.ALL


class SelectionProfile(BaseModel):
    """A named, replayable selection.

    Attributes:
        root: Directory to select from.
        prefix: Local-path prefix inside the container.
        recursive: Walk every depth instead of direct children only.
        glob: Optional glob pattern restricting selected files.
        regex: Optional regular expression restricting selected files.
        ignore: Relative paths to exclude (directories prune their subtree).
    """

    model_config = ConfigDict(extra="forbid")

    root: Annotated[Path, Field(description="Directory to select from")]
    prefix: Annotated[str, Field(description="Local-path prefix")] = ""
    recursive: Annotated[bool, Field(description="Walk every depth")] = False
    glob: Annotated[str | None, Field(description="Glob pattern")] = None
    regex: Annotated[str | None, Field(description="Regular expression")] = None
    ignore: Annotated[
        list[str],
        Field(default_factory=list, description="Relative paths to exclude"),
    ]

    @field_validator("glob")
    @classmethod
    def validate_glob(cls, v: str | None) -> str | None:
        """Reject malformed glob syntax at load time."""
        if v is not None:
            compile_glob(v)
        return v

    @field_validator("regex")
    @classmethod
    def validate_regex(cls, v: str | None) -> str | None:
        """Reject malformed regular expressions at load time."""
        if v is not None:
            compile_regex(v)
        return v

    @model_validator(mode="after")
    def validate_single_pattern(self) -> "SelectionProfile":
        """Validate that at most one pattern kind is configured."""
        if self.glob is not None and self.regex is not None:
            msg = "A profile cannot define both 'glob' and 'regex'"
            raise ValueError(msg)
        return self

    def matcher(self) -> PathMatcher | None:
        """Compile the configured pattern, if any."""
        if self.glob is not None:
            return compile_glob(self.glob)
        if self.regex is not None:
            return compile_regex(self.regex)
        return None


class TreepackConfig(BaseModel):
    """Complete treepack configuration.

    Attributes:
        defaults: Selection defaults.
        profiles: Named selection profiles.
    """

    model_config = ConfigDict(extra="forbid")

    defaults: Annotated[
        SelectionDefaults,
        Field(default_factory=SelectionDefaults, description="Selection defaults"),
    ]
    profiles: Annotated[
        dict[str, SelectionProfile],
        Field(default_factory=dict, description="Named selection profiles"),
    ]
