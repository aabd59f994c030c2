"""
Deterministic serializations of an investigation result.

Four exports are produced: a Markdown report, BibTeX, RIS and CSV. Each is a
pure function of the data passed in (no timestamps or other hidden state),
so identical input always yields byte-identical output.
"""

import csv
import io
import re
from collections import Counter

from litmap.models.schemas import (
    ExportBundle,
    InvestigatedPaper,
    KeywordSequence,
    ResearchTopic,
)

MARKDOWN_PAPER_LIMIT = 20
ABSTRACT_PREVIEW_CHARS = 300

CSV_COLUMNS = [
    "Title",
    "Authors",
    "Year",
    "Journal",
    "DOI",
    "Citations",
    "Relevance Score",
    "Overall Score",
    "Category",
    "Methodology",
    "Matched Keywords",
]

_KEY_CHARS = re.compile(r"[^\w]")


def export_markdown(
    topic: ResearchTopic,
    sequences: list[KeywordSequence],
    papers: list[InvestigatedPaper],
) -> str:
    """Render the investigation as a Markdown report (top 20 paper cards)."""
    lines = [
        f"# Literature Investigation: {topic.title}",
        "",
        f"**Domain:** {topic.domain}",
        f"**Total Papers:** {len(papers)}",
    ]
    if topic.description:
        lines.append(f"**Description:** {topic.description}")
    lines += ["", "## Keyword Sequences Used", ""]

    for i, seq in enumerate(sequences, start=1):
        keywords = ", ".join(f"{k.term} ({k.weight:.2f})" for k in seq.keywords)
        lines += [
            f"### {i}. {seq.name}",
            f"**Category:** {seq.category}",
            f"**Score:** {seq.score:.2f}",
            f"**Keywords:** {keywords}",
            "",
        ]

    lines += ["## Key Papers", ""]
    for i, paper in enumerate(papers[:MARKDOWN_PAPER_LIMIT], start=1):
        lines += [
            f"### {i}. {paper.title}",
            f"**Authors:** {', '.join(paper.authors) or 'Unknown'}",
            f"**Year:** {paper.year if paper.year is not None else 'Unknown'}",
            f"**Relevance Score:** {paper.relevance_score:.2f}/100",
            f"**Overall Score:** {paper.overall_score:.2f}",
            f"**Citations:** {paper.citations or 0}",
            f"**Category:** {paper.research_category}",
        ]
        if paper.methodology:
            lines.append(f"**Methodology:** {', '.join(paper.methodology)}")
        if paper.matched_keywords:
            lines.append(f"**Matched Keywords:** {', '.join(paper.matched_keywords)}")
        if paper.abstract:
            preview = paper.abstract[:ABSTRACT_PREVIEW_CHARS]
            if len(paper.abstract) > ABSTRACT_PREVIEW_CHARS:
                preview += "..."
            lines.append(f"**Abstract:** {preview}")
        if paper.doi:
            lines.append(f"**DOI:** [{paper.doi}](https://doi.org/{paper.doi})")
        lines += ["", "---", ""]

    return "\n".join(lines)


def _author_surname(author: str) -> str:
    """Surname from "Last, First" or "First Last"."""
    name = author.split(",")[0] if "," in author else (author.split() or [""])[-1]
    return _KEY_CHARS.sub("", name).lower()


def bibtex_key(paper: InvestigatedPaper) -> str:
    surname = _author_surname(paper.authors[0]) if paper.authors else ""
    year = str(paper.year) if paper.year is not None else "nd"
    return f"{surname or 'unknown'}{year}"


def _suffix(index: int) -> str:
    """0 -> a, 25 -> z, 26 -> aa."""
    letters = ""
    index += 1
    while index:
        index, rem = divmod(index - 1, 26)
        letters = chr(ord("a") + rem) + letters
    return letters


def export_bibtex(papers: list[InvestigatedPaper]) -> str:
    """BibTeX @article entries keyed by first-author surname plus year.

    Repeated keys get a letter suffix (smith2020, smith2020a, smith2020b).
    """
    seen: Counter = Counter()
    chunks: list[str] = []
    for paper in papers:
        key = bibtex_key(paper)
        if seen[key]:
            key_out = f"{key}{_suffix(seen[key] - 1)}"
        else:
            key_out = key
        seen[key] += 1

        fields = [("title", paper.title)]
        if paper.authors:
            fields.append(("author", " and ".join(paper.authors)))
        if paper.year is not None:
            fields.append(("year", str(paper.year)))
        for name in ("journal", "volume", "pages", "doi"):
            value = getattr(paper, name)
            if value:
                fields.append((name, value))

        body = ",\n".join(f"  {name}={{{value}}}" for name, value in fields)
        chunks.append(f"@article{{{key_out},\n{body}\n}}\n")
    return "\n".join(chunks)


def export_ris(papers: list[InvestigatedPaper]) -> str:
    """RIS records, one journal-article record per paper."""
    records: list[str] = []
    for paper in papers:
        lines = ["TY  - JOUR", f"TI  - {paper.title}"]
        lines += [f"AU  - {author}" for author in paper.authors]
        if paper.year is not None:
            lines.append(f"PY  - {paper.year}")
        if paper.journal:
            lines.append(f"JO  - {paper.journal}")
        if paper.volume:
            lines.append(f"VL  - {paper.volume}")
        if paper.pages:
            lines.append(f"SP  - {paper.pages}")
        if paper.doi:
            lines.append(f"DO  - {paper.doi}")
        if paper.abstract:
            lines.append(f"AB  - {paper.abstract}")
        lines.append("ER  - ")
        records.append("\n".join(lines) + "\n")
    return "\n".join(records)


def export_csv(papers: list[InvestigatedPaper]) -> str:
    """CSV with every text field quoted and embedded quotes doubled."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for paper in papers:
        writer.writerow([
            paper.title,
            "; ".join(paper.authors),
            paper.year if paper.year is not None else "",
            paper.journal or "",
            paper.doi or "",
            paper.citations or 0,
            paper.relevance_score,
            paper.overall_score,
            paper.research_category,
            "; ".join(paper.methodology),
            "; ".join(paper.matched_keywords),
        ])
    return buffer.getvalue()


def build_exports(
    topic: ResearchTopic,
    sequences: list[KeywordSequence],
    papers: list[InvestigatedPaper],
) -> ExportBundle:
    return ExportBundle(
        markdown=export_markdown(topic, sequences, papers),
        bibtex=export_bibtex(papers),
        ris=export_ris(papers),
        csv=export_csv(papers),
    )
