"""Lazy decomposition of a tree move into transfer tasks.

iter_transfer_tasks() walks a source tree and yields one task per unit of
work, in the order a move has to perform them: create a directory, copy
its files, links and subdirectories, then remove the emptied source
directory. Nothing is touched while walking; executing the tasks is the
caller's job.
"""

import os
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class MakeDir:
    """Create the destination counterpart of a source directory."""

    source: Path
    destination: Path


@dataclass(frozen=True, slots=True)
class CopyFile:
    """Move one file: copy, carry over timestamps, delete the source."""

    source: Path
    destination: Path


@dataclass(frozen=True, slots=True)
class MoveLink:
    """Recreate a symbolic link at the destination, then delete the source link."""

    source: Path
    destination: Path


@dataclass(frozen=True, slots=True)
class RemoveDir:
    """Remove a source directory whose children have been processed."""

    source: Path


@dataclass(frozen=True, slots=True)
class WalkFailure:
    """A source directory that could not be listed."""

    source: Path
    error: str


TransferTask = MakeDir | CopyFile | MoveLink | RemoveDir | WalkFailure


def iter_transfer_tasks(source: Path, destination: Path) -> Iterator[TransferTask]:
    """Yield the tasks that move source into destination.

    The destination root itself is created first. Directories are
    traversed depth-first in name order; each directory is followed by a
    RemoveDir once all of its entries were yielded. A directory that
    cannot be listed yields a WalkFailure instead of its children and is
    not removed. Symbolic links are never followed: each one yields a
    MoveLink, whatever it points to.

    Args:
        source: Existing source directory.
        destination: Destination directory (created if missing).

    Yields:
        TransferTask instances, lazily.
    """
    yield MakeDir(source, destination)
    yield from _walk(source, destination)


def _walk(source: Path, destination: Path) -> Iterator[TransferTask]:
    try:
        with os.scandir(source) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as e:
        yield WalkFailure(source, f"Error reading directory {source}: {e}")
        return

    for entry in entries:
        src = source / entry.name
        dst = destination / entry.name
        try:
            is_link = entry.is_symlink()
            is_dir = not is_link and entry.is_dir(follow_symlinks=False)
        except OSError:
            is_link = is_dir = False

        if is_link:
            yield MoveLink(src, dst)
        elif is_dir:
            yield MakeDir(src, dst)
            yield from _walk(src, dst)
        else:
            yield CopyFile(src, dst)

    yield RemoveDir(source)
