"""Tests for Markdown, BibTeX, RIS and CSV exports."""

import csv
import io

import pytest

from litmap.models.schemas import ResearchTopic
from litmap.services.exporters import (
    CSV_COLUMNS,
    bibtex_key,
    build_exports,
    export_bibtex,
    export_csv,
    export_markdown,
    export_ris,
)


@pytest.fixture
def topic():
    return ResearchTopic(
        title="graph coloring",
        domain="computer_science",
        description="Heuristics for sparse graphs",
    )


class TestMarkdown:
    """Markdown report layout."""

    def test_header_and_sequences(self, topic, make_sequence, make_paper):
        seq = make_sequence("s1", [("graph", 1.5), ("coloring", 0.75)])
        report = export_markdown(topic, [seq], [make_paper(title="P")])

        assert report.startswith("# Literature Investigation: graph coloring\n")
        assert "**Domain:** computer_science" in report
        assert "**Total Papers:** 1" in report
        assert "**Description:** Heuristics for sparse graphs" in report
        assert "### 1. s1 (Test)" in report
        assert "**Keywords:** graph (1.50), coloring (0.75)" in report

    def test_paper_cards_limited_to_twenty(self, topic, make_paper):
        papers = [make_paper(title=f"Paper {i}") for i in range(25)]
        report = export_markdown(topic, [], papers)

        assert "**Total Papers:** 25" in report
        assert report.count("\n---\n") == 20
        assert "Paper 19" in report
        assert "Paper 20" not in report

    def test_card_details(self, topic, make_paper):
        paper = make_paper(
            title="Long one",
            abstract="a" * 400,
            doi="10.1/abc",
            methodology=["quantitative"],
            matched_keywords=["graph"],
        )
        report = export_markdown(topic, [], [paper])

        assert f"**Abstract:** {'a' * 300}..." in report
        assert "**DOI:** [10.1/abc](https://doi.org/10.1/abc)" in report
        assert "**Year:** Unknown" in report
        assert "**Authors:** Unknown" in report
        assert "**Methodology:** quantitative" in report
        assert "**Matched Keywords:** graph" in report

    def test_short_abstract_not_truncated(self, topic, make_paper):
        report = export_markdown(topic, [], [make_paper(abstract="Brief.")])
        assert "**Abstract:** Brief.\n" in report

    def test_deterministic(self, topic, make_sequence, make_paper):
        seqs = [make_sequence("s1", [("graph", 1.0)])]
        papers = [make_paper(title="A", year=2020), make_paper(title="B")]
        assert build_exports(topic, seqs, papers) == build_exports(topic, seqs, papers)


class TestBibtex:
    """BibTeX keys and entry layout."""

    def test_entry_layout(self, make_paper):
        paper = make_paper(title="T", authors=["John Smith"], year=2023, journal="J", doi="10.1/x")
        assert export_bibtex([paper]) == (
            "@article{smith2023,\n"
            "  title={T},\n"
            "  author={John Smith},\n"
            "  year={2023},\n"
            "  journal={J},\n"
            "  doi={10.1/x}\n"
            "}\n"
        )

    def test_key_variants(self, make_paper):
        assert bibtex_key(make_paper(authors=["Smith, Jane"], year=2020)) == "smith2020"
        assert bibtex_key(make_paper(authors=["Jane O'Neil"], year=2020)) == "oneil2020"
        assert bibtex_key(make_paper()) == "unknownnd"

    def test_duplicate_keys_get_suffixes(self, make_paper):
        papers = [
            make_paper(title="One", authors=["John Smith"], year=2023),
            make_paper(title="Two", authors=["Smith, Jane"], year=2023),
            make_paper(title="Three", authors=["Ann Smith"], year=2023),
        ]
        output = export_bibtex(papers)
        assert "@article{smith2023,\n" in output
        assert "@article{smith2023a,\n" in output
        assert "@article{smith2023b,\n" in output

    def test_empty(self):
        assert export_bibtex([]) == ""


class TestRis:
    """RIS tagged records."""

    def test_record(self, make_paper):
        paper = make_paper(
            title="T", authors=["A One", "B Two"], year=2021, journal="J",
            volume="4", pages="1-9", doi="10.1/x", abstract="Abs.",
        )
        assert export_ris([paper]).splitlines() == [
            "TY  - JOUR",
            "TI  - T",
            "AU  - A One",
            "AU  - B Two",
            "PY  - 2021",
            "JO  - J",
            "VL  - 4",
            "SP  - 1-9",
            "DO  - 10.1/x",
            "AB  - Abs.",
            "ER  - ",
        ]

    def test_records_separated(self, make_paper):
        output = export_ris([make_paper(title="A"), make_paper(title="B")])
        assert output.count("TY  - JOUR") == 2
        assert "ER  - \n\nTY  - JOUR" in output


class TestCsv:
    """CSV quoting and columns."""

    def test_header(self):
        rows = list(csv.reader(io.StringIO(export_csv([]))))
        assert rows == [CSV_COLUMNS]

    def test_quotes_and_commas_survive_parsing(self, make_paper):
        paper = make_paper(
            title='He said "hi", then left',
            authors=["Smith, J.", "Doe, A."],
            year=2020,
            citations=7,
            methodology=["quantitative", "experimental"],
        )
        rows = list(csv.reader(io.StringIO(export_csv([paper]))))

        assert len(rows) == 2
        row = dict(zip(CSV_COLUMNS, rows[1]))
        assert row["Title"] == 'He said "hi", then left'
        assert row["Authors"] == "Smith, J.; Doe, A."
        assert row["Year"] == "2020"
        assert row["Citations"] == "7"
        assert row["Methodology"] == "quantitative; experimental"

    def test_embedded_quotes_are_doubled(self, make_paper):
        output = export_csv([make_paper(title='A "quoted" word')])
        assert '"A ""quoted"" word"' in output
