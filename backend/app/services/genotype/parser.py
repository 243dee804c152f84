from __future__ import annotations

import datetime as _dt
import gzip
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import AbstractSet, Dict, Iterable, Iterator, Optional, Union

from app.services.lipidgenomics.variant_registry import get_variant_registry


# ----------------------------------------------------------------------
# Constants & Configuration
# ----------------------------------------------------------------------

# Raw exports (23andMe, Ancestry, ...) use tab or comma separated columns:
#   rsid  chromosome  position  genotype
ID_COLUMN = 0
GENOTYPE_COLUMN = 3
MIN_COLUMNS = 4

_SPLIT_RE = re.compile(r"\t|,")
_GZIP_MAGIC = b"\x1f\x8b"


@dataclass(frozen=True)
class GenotypeParseResult:
    genotypes: Dict[str, str]
    lines_read: int
    lines_skipped: int
    parsed_at_iso: str
    metrics: Dict[str, Union[bool, int, str]] = field(default_factory=dict)

    @property
    def variants_retained(self) -> int:
        return len(self.genotypes)


class GenotypeParseError(ValueError):
    pass


def parse_genotype_export(
    content: Union[str, bytes, Iterable[str], Path],
    *,
    tracked_ids: Optional[AbstractSet[str]] = None,
) -> GenotypeParseResult:
    """
    Parse a raw genotype export into a variant id -> genotype map.

    - Empty lines and lines starting with ``#`` are skipped.
    - Lines with fewer than four columns are skipped and counted.
    - Only ids in ``tracked_ids`` (default: the variant registry) are kept;
      a later row for the same id replaces an earlier one.

    Args:
        content:     File bytes (optionally gzip), string, Path or line iterable.
        tracked_ids: Variant ids worth keeping.
    """
    if tracked_ids is None:
        tracked_ids = get_variant_registry().tracked_ids

    genotypes: Dict[str, str] = {}
    lines_read = 0
    skipped = 0
    comments = 0

    for raw in _normalize_to_lines(content):
        line = raw.rstrip("\r\n")
        if not line:
            continue
        if line.startswith("#"):
            comments += 1
            continue

        lines_read += 1
        parts = _SPLIT_RE.split(line)
        if len(parts) < MIN_COLUMNS:
            skipped += 1
            continue

        rsid = parts[ID_COLUMN].strip()
        if rsid in tracked_ids:
            genotypes[rsid] = parts[GENOTYPE_COLUMN].strip()

    if lines_read == 0 and comments == 0:
        raise GenotypeParseError("Empty genotype file")

    metrics: Dict[str, Union[bool, int, str]] = {
        "parsing_success": True,
        "data_lines": lines_read,
        "comment_lines": comments,
        "malformed_lines": skipped,
        "tracked_variants_found": len(genotypes),
        "tracked_variants_total": len(tracked_ids),
    }

    return GenotypeParseResult(
        genotypes=genotypes,
        lines_read=lines_read,
        lines_skipped=skipped,
        parsed_at_iso=_dt.datetime.now(tz=_dt.timezone.utc).isoformat(),
        metrics=metrics,
    )


def _normalize_to_lines(content: Union[str, bytes, Iterable[str], Path]) -> Iterator[str]:
    if isinstance(content, Path):
        if content.suffix == ".gz":
            with gzip.open(content, "rt", encoding="utf-8", errors="replace") as f:
                yield from f
        else:
            with content.open("r", encoding="utf-8", errors="replace", newline="") as f:
                yield from f
        return
    if isinstance(content, bytes):
        if content[:2] == _GZIP_MAGIC:
            try:
                content = gzip.decompress(content)
            except (OSError, EOFError) as e:
                raise GenotypeParseError(f"Corrupt gzip data: {e}") from e
        text = content.decode("utf-8", errors="replace")
        yield from text.splitlines(True)
        return
    if isinstance(content, str):
        yield from content.splitlines(True)
        return
    yield from content
