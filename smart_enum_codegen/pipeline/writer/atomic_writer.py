"""
Atomic file writer for generated fragments.

Ensures that file writes are atomic to prevent data corruption
from interrupted operations.
"""

from __future__ import annotations

import logging
import tempfile
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from ..ast_backends.base import GeneratedSource
from ..config import OutputConfig, OutputMode
from .validation import FragmentValidator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WrittenFile:
    """One output file and whether this run changed it."""

    path: Path
    changed: bool


class AtomicWriter:
    """Handles atomic file writes with validation.

    Uses a two-phase commit approach:
    1. Write to a temporary file in the same directory
    2. Validate the content
    3. Atomically replace the target file

    This ensures that an interrupted write operation never leaves
    the target file in an incomplete state.
    """

    def __init__(self, validate_csharp: Callable[[str], None] | None = None):
        """Initialize the atomic writer.

        Args:
            validate_csharp: Optional validation function for C# code
                (defaults to a tree-sitter parse check)
        """
        self._validate_csharp = validate_csharp or FragmentValidator().validate

    def write(self, path: Path, content: str, validate: bool = True) -> None:
        """Write content to file atomically.

        Args:
            path: Target file path
            content: Content to write
            validate: Whether to validate before finalizing

        Raises:
            FragmentValidationError: If validation fails
            OSError: If file operations fail
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        # Same directory ensures atomic rename on the same filesystem
        temp_fd, temp_path_str = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            text=True,
        )

        temp_path = Path(temp_path_str)

        try:
            with open(temp_fd, "w", encoding="utf-8", newline="\n") as f:
                f.write(content)

            if validate:
                self._validate_csharp(content)

            temp_path.replace(path)

        except Exception:
            if temp_path.exists():
                try:
                    temp_path.unlink()
                except OSError:
                    logger.warning("Could not remove temporary file %s", temp_path)
            raise

    def validate(self, content: str) -> None:
        """Validate content without writing it."""
        self._validate_csharp(content)

    def write_if_not_exists(self, path: Path, content: str, validate: bool = True) -> None:
        """Write content only if the file doesn't exist.

        Raises:
            FileExistsError: If the file already exists
            FragmentValidationError: If validation fails
        """
        if path.exists():
            raise FileExistsError(f"Output file already exists: {path}. Use force mode to overwrite.")

        self.write(path, content, validate)


def write_sources(
    sources: list[GeneratedSource],
    output_dir: str | Path,
    output: OutputConfig | None = None,
    writer: AtomicWriter | None = None,
) -> list[WrittenFile]:
    """
    Write generated fragments to ``output_dir/<hint_name>``.

    Conflicts (``OutputMode.ERROR_IF_EXISTS``) and validation failures are
    detected before anything is written, so they leave the directory
    untouched. With ``OutputMode.FORCE`` existing files are replaced, except
    those whose content is already identical.

    Args:
        sources: Fragments produced by a generator pass
        output_dir: Directory receiving the files
        output: Output handling options
        writer: Writer to use (defaults to an AtomicWriter with tree-sitter validation)

    Returns:
        One WrittenFile per source, in order

    Raises:
        FileExistsError: If a target exists in ERROR_IF_EXISTS mode
        FragmentValidationError: If a fragment fails validation
    """
    output = output or OutputConfig()
    output_dir = Path(output_dir)
    writer = writer or AtomicWriter()

    targets = [(output_dir / source.hint_name, source) for source in sources]

    if output.mode == OutputMode.ERROR_IF_EXISTS:
        for path, _ in targets:
            if path.exists():
                raise FileExistsError(f"Output file already exists: {path}. Use force mode to overwrite.")

    # Every fragment is checked before the first write
    if output.validate_before_write:
        for _, source in targets:
            writer.validate(source.source_text)

    written: list[WrittenFile] = []
    for path, source in targets:
        if output.mode == OutputMode.FORCE and path.exists() and path.read_text(encoding="utf-8") == source.source_text:
            logger.debug("Unchanged: %s", path)
            written.append(WrittenFile(path=path, changed=False))
            continue

        if output.atomic_write and output.mode == OutputMode.ERROR_IF_EXISTS:
            writer.write_if_not_exists(path, source.source_text, validate=False)
        elif output.atomic_write:
            writer.write(path, source.source_text, validate=False)
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(source.source_text, encoding="utf-8")

        logger.info("Wrote %s", path)
        written.append(WrittenFile(path=path, changed=True))
    return written
