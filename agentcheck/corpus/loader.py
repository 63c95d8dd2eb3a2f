"""
Corpus Loader — Read agent documents and strip ignore regions.
"""

from pathlib import Path
from typing import Union

from agentcheck.core.errors import InputError, InputErrorKind
from agentcheck.core.logging import LogChannel, get_logger
from agentcheck.corpus.filter import (
    DEFAULT_MARKERS,
    IgnoreMarkers,
    remove_regions,
    scan_ignore_regions,
)
from agentcheck.corpus.models import DocumentCorpus, DocumentFile

log = get_logger(LogChannel.LOAD)


def load_filtered(
    root_dir: Union[Path, str],
    file_pattern: str = "*.md",
    markers: IgnoreMarkers = DEFAULT_MARKERS,
) -> DocumentCorpus:
    """
    Load every file matching file_pattern under root_dir (recursively).

    Files are ordered by relative path so that discovery order does not
    depend on the filesystem.

    Args:
        root_dir: Documentation directory
        file_pattern: Glob matched against file names
        markers: Ignore-region marker pair

    Returns:
        DocumentCorpus with filtered content

    Raises:
        InputError: root_dir missing, or a file has malformed markers
    """
    root = Path(root_dir)
    if not root.is_dir():
        raise InputError(
            InputErrorKind.MISSING_DIRECTORY,
            "Documentation directory not found",
            path=str(root),
        )

    found = sorted(
        (p for p in root.rglob(file_pattern) if p.is_file()),
        key=lambda p: p.relative_to(root).as_posix(),
    )

    files: list[DocumentFile] = []
    for path in found:
        rel = path.relative_to(root).as_posix()
        raw = path.read_text(encoding="utf-8", errors="replace")
        try:
            regions = scan_ignore_regions(raw, markers)
        except InputError as exc:
            log.error("malformed_ignore_markers", path=rel, kind=exc.kind.value, line=exc.line)
            raise exc.with_path(rel) from exc

        files.append(DocumentFile(
            path=rel,
            raw_content=raw,
            filtered_content=remove_regions(raw, regions),
            regions=tuple(regions),
        ))
        log.verbose("document_loaded", path=rel, ignore_regions=len(regions))

    log.info("corpus_loaded", root=str(root), pattern=file_pattern, files=len(files))
    return DocumentCorpus(root=str(root), files=tuple(files))
