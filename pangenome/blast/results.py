"""
Read tabular BLAST results and map query accessions to GO terms.

Results are the 12-column ``-outfmt 6`` rows written by the local and grid
paths. GO terms are transferred from the best subject hit of each query
using a tab-delimited table of subject accession to GO ids.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Iterator, List

from pangenome.blast.command import OUTPUT_FIELDS
from pangenome.exceptions import ResultParseError

logger = logging.getLogger(__name__)

_GOID_RE = re.compile(r"^GO:\d{7}$")


@dataclass(frozen=True)
class BlastHit:
    """One row of tabular BLAST output."""
    qseqid: str
    sseqid: str
    pident: float
    length: int
    mismatch: int
    gapopen: int
    qstart: int
    qend: int
    sstart: int
    send: int
    evalue: float
    bitscore: float


@dataclass(frozen=True)
class GoAssignment:
    """A GO term transferred to a query from its best hit."""
    query: str
    goid: str
    subject: str
    evalue: float
    bitscore: float


def parse_hit_line(line: str, line_number: int = 0) -> BlastHit:
    """
    Parse one tab-separated result row.

    Raises:
        ResultParseError: if the row does not have 12 well-formed columns
    """
    parts = line.rstrip("\r\n").split("\t")
    if len(parts) != len(OUTPUT_FIELDS):
        raise ResultParseError(
            f"Line {line_number}: expected {len(OUTPUT_FIELDS)} columns, got {len(parts)}"
        )
    try:
        return BlastHit(
            qseqid=parts[0],
            sseqid=parts[1],
            pident=float(parts[2]),
            length=int(parts[3]),
            mismatch=int(parts[4]),
            gapopen=int(parts[5]),
            qstart=int(parts[6]),
            qend=int(parts[7]),
            sstart=int(parts[8]),
            send=int(parts[9]),
            evalue=float(parts[10]),
            bitscore=float(parts[11]),
        )
    except ValueError as e:
        raise ResultParseError(f"Line {line_number}: {e}") from e


def parse_blast_tabular(blast_file: Path) -> Iterator[BlastHit]:
    """
    Iterate over the hits in a tabular BLAST file.

    Blank lines and ``#`` comment lines are skipped.
    """
    with open(blast_file) as fh:
        for line_number, line in enumerate(fh, start=1):
            if not line.strip() or line.startswith("#"):
                continue
            yield parse_hit_line(line, line_number)


def best_hits(hits: Iterable[BlastHit], min_percent_id: float = 0) -> Dict[str, BlastHit]:
    """
    Pick the best hit per query.

    Best is lowest evalue, ties broken by highest bitscore. Hits below
    min_percent_id are ignored.
    """
    best: Dict[str, BlastHit] = {}
    for hit in hits:
        if hit.pident < min_percent_id:
            continue
        current = best.get(hit.qseqid)
        if current is None or (hit.evalue, -hit.bitscore) < (current.evalue, -current.bitscore):
            best[hit.qseqid] = hit
    return best


def load_go_map(go_map_file: Path) -> Dict[str, List[str]]:
    """
    Read a subject accession to GO id table.

    Each line is ``accession<TAB>GO:0000001[,GO:0000002...]``. Repeated
    accessions accumulate. Malformed GO ids are skipped with a warning.
    """
    go_map: Dict[str, List[str]] = {}
    with open(go_map_file) as fh:
        for line_number, line in enumerate(fh, start=1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            parts = line.split("\t")
            if len(parts) < 2:
                logger.warning(f"{go_map_file}:{line_number}: no GO column, skipped")
                continue
            terms = go_map.setdefault(parts[0], [])
            for goid in re.split(r"[,\s]+", parts[1].strip()):
                if not goid:
                    continue
                if not _GOID_RE.match(goid):
                    logger.warning(f"{go_map_file}:{line_number}: bad GO id {goid!r}")
                    continue
                if goid not in terms:
                    terms.append(goid)
    return go_map


def map_go_terms(
    hits: Iterable[BlastHit],
    go_map: Dict[str, List[str]],
    min_percent_id: float = 0,
) -> List[GoAssignment]:
    """Transfer the GO terms of each query's best hit to the query."""
    assignments: List[GoAssignment] = []
    for query, hit in sorted(best_hits(hits, min_percent_id).items()):
        for goid in go_map.get(hit.sseqid, []):
            assignments.append(GoAssignment(
                query=query,
                goid=goid,
                subject=hit.sseqid,
                evalue=hit.evalue,
                bitscore=hit.bitscore,
            ))
    return assignments


def write_go_mapping(assignments: Iterable[GoAssignment], output_file: Path) -> int:
    """
    Write GO assignments as tab-delimited rows.

    Returns:
        Number of rows written
    """
    count = 0
    with open(output_file, "w") as fh:
        for a in assignments:
            fh.write(f"{a.query}\t{a.goid}\t{a.subject}\t{a.evalue:g}\t{a.bitscore:g}\n")
            count += 1
    return count


@dataclass
class ResultSummary:
    hit_count: int = 0
    query_count: int = 0
    go_assignments: int = 0


def consume_results(
    blast_file: Path,
    go_map_file: Path = None,
    output_file: Path = None,
    min_percent_id: float = 0,
) -> ResultSummary:
    """
    Parse a BLAST result file and, given a GO table, write GO assignments.

    Args:
        blast_file: Tabular BLAST output
        go_map_file: Optional accession to GO table
        output_file: Where to write assignments (required with go_map_file)
        min_percent_id: Percent identity a best hit must reach

    Returns:
        Counts of hits, queries and GO assignments
    """
    hits = list(parse_blast_tabular(blast_file))
    summary = ResultSummary(
        hit_count=len(hits),
        query_count=len({hit.qseqid for hit in hits}),
    )
    logger.info(f"Parsed {summary.hit_count} hits for {summary.query_count} queries")

    if go_map_file is not None:
        if output_file is None:
            raise ValueError("output_file is required when mapping GO terms")
        go_map = load_go_map(go_map_file)
        assignments = map_go_terms(hits, go_map, min_percent_id)
        summary.go_assignments = write_go_mapping(assignments, output_file)
        logger.info(f"Wrote {summary.go_assignments} GO assignments to {output_file}")

    return summary
