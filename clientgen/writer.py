"""Applies GenFile overwrite policies to an output directory."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from .schema.types import GenFile, OverwritePolicy
from .shared.log import get_logger

logger = get_logger("writer")


@dataclass(slots=True)
class WriteReport:
    written: list[Path] = field(default_factory=list)
    merged: list[Path] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)


def merge_lines(existing: str, generated: str) -> str:
    """Append generated lines missing from ``existing``, keeping its order."""
    present = {line.strip() for line in existing.splitlines() if line.strip()}
    additions = [
        line for line in generated.splitlines()
        if line.strip() and line.strip() not in present
    ]
    if not additions:
        return existing
    merged = existing if existing.endswith("\n") or not existing else existing + "\n"
    return merged + "\n".join(additions) + "\n"


def write_files(
    files: Iterable[GenFile],
    output_dir: Path,
    *,
    force: bool = False,
    dry_run: bool = False,
) -> WriteReport:
    """Write generated files below ``output_dir``.

    ``ALWAYS`` files are replaced, ``WRITE_ONCE`` files are left alone once
    they exist, and ``MERGE`` files gain only the lines they lack. ``force``
    turns every policy into a plain overwrite.
    """
    report = WriteReport()
    for gen_file in files:
        target = output_dir / gen_file.relative_path
        policy = gen_file.overwrite_policy
        content = gen_file.content

        if target.exists() and not force:
            if policy is OverwritePolicy.WRITE_ONCE:
                logger.debug("Keeping existing %s", target)
                report.skipped.append(target)
                continue
            if policy is OverwritePolicy.MERGE:
                existing = target.read_text(encoding="utf-8")
                content = merge_lines(existing, content)
                if content == existing:
                    report.skipped.append(target)
                    continue
                if not dry_run:
                    target.write_text(content, encoding="utf-8")
                report.merged.append(target)
                continue

        if not dry_run:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        report.written.append(target)

    logger.debug(
        "%d written, %d merged, %d skipped",
        len(report.written),
        len(report.merged),
        len(report.skipped),
    )
    return report
