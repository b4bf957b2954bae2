"""
Integration tests for parsing XtabML files from disk.

Uses tests/fixtures/survey.xte, a four-table export covering metadata,
multi-statistic tables, nested groups, missing cells and a table without data.
"""

import shutil
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from xtabml import parse, parse_file
from xtabml.exceptions import InvalidStructureError, ResourceAccessError


pytestmark = pytest.mark.integration


FIXTURES = Path(__file__).parent.parent / 'fixtures'
SURVEY_FILE = FIXTURES / 'survey.xte'


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture(scope="module")
def survey():
    """Parsed survey.xte (module-scoped for performance)."""
    return parse_file(SURVEY_FILE)


# ============================================================================
# DOCUMENT
# ============================================================================

class TestSurveyDocument:
    """Document-level content of the survey export."""

    def test_metadata(self, survey):
        assert survey.version == '1.1'
        assert survey.date == '2024-03-12'
        assert survey.time == '14:30:22'
        assert survey.origin == 'SurveyTool 7.2'
        assert survey.user is None

    def test_definitions(self, survey):
        assert [c.name for c in survey.control_types] == ['project', 'base', 'weight']
        assert survey.control_types[2].status is None
        assert [s.name for s in survey.statistic_types] == ['Percent', 'n']
        assert survey.controls[0].value == 'Youth Panel W3'

    def test_tables_in_document_order(self, survey):
        assert [t.title for t in survey.tables] == [
            'q4: Age',
            'q5: Region',
            'q6: Satisfaction (1-5)',
            'q7: Open comments',
        ]

    def test_table_lookup(self, survey):
        assert survey.get_table('97f48ec3-87c5-4c39-b6c2-5229cc884666').title == 'q4: Age'
        assert [t.title for t in survey.find_tables('REGION')] == ['q5: Region']


# ============================================================================
# TABLES
# ============================================================================

class TestAgeTable:
    """q4: two statistics across two column groups."""

    def test_labels(self, survey):
        table = survey.tables[0]

        assert table.row_labels() == ['15 and under', '16-19 yrs', '20-24 yrs', 'NET']
        assert table.column_labels() == ['Male', 'Female', 'Total']
        assert table.shape() == (4, 3)

    def test_statistics_de_interleave(self, survey):
        table = survey.tables[0]

        percent = table.get_statistic_data(0)
        counts = table.get_statistic_data(1)

        assert percent[1] == ['.200', '.250', '.225']
        assert counts[3] == ['356', '357', '713']
        assert len(percent) == len(counts) == 4

    def test_controls(self, survey):
        table = survey.tables[0]

        assert table.get_control('base') == 'Total sample; Unweighted; base n = 713'
        assert table.get_control('weight') == 'none'


class TestRegionTable:
    """q5: nested groups and summaries."""

    def test_nested_labels(self, survey):
        table = survey.tables[1]

        assert table.row_labels() == ['Urban', 'Village', 'Farm', 'Coast']
        assert table.row_edge.groups[0].summaries[0].label == 'North total'
        assert table.get_statistic_data(0) == [['210'], ['98'], ['45'], ['360']]


class TestSatisfactionTable:
    """q6: missing and empty cells."""

    def test_cells(self, survey):
        table = survey.tables[2]

        assert table.row_labels() == ['Mean score', "Don't know"]
        assert table.get_statistic_data(0) == [['3.8', None], ['', 'n/a']]


class TestEmptyTable:
    """q7: edges only, no statistics or data."""

    def test_no_data(self, survey):
        table = survey.tables[3]

        assert table.statistic_types() == []
        assert table.data_rows == ()
        assert table.get_statistic_data(0) is None


# ============================================================================
# SOURCES & ERRORS
# ============================================================================

class TestFileSources:

    def test_parse_accepts_path_and_str(self, survey):
        assert parse(SURVEY_FILE) == survey
        assert parse(str(SURVEY_FILE)) == survey

    def test_open_binary_file(self, survey):
        with open(SURVEY_FILE, 'rb') as f:
            doc = parse(f)

        assert doc == survey

    def test_nonexistent_file(self, tmp_path):
        missing = tmp_path / 'missing.xte'

        with pytest.raises(ResourceAccessError) as exc_info:
            parse_file(missing)

        assert exc_info.value.source == str(missing)

    def test_truncated_file(self, tmp_path):
        """A file cut off mid-document should report an unclosed element."""
        data = SURVEY_FILE.read_bytes()
        truncated = tmp_path / 'truncated.xte'
        truncated.write_bytes(data[:data.index(b'<table title="q6')])

        with pytest.raises(InvalidStructureError, match="Unclosed element <xtab>"):
            parse_file(truncated)

    def test_copied_file_parses_identically(self, tmp_path, survey):
        copy = tmp_path / 'copy.xte'
        shutil.copy(SURVEY_FILE, copy)

        assert parse_file(copy) == survey


class TestConcurrentParsing:
    """Independent parses share no state."""

    def test_parallel_parses_agree(self, survey):
        with ThreadPoolExecutor(max_workers=4) as executor:
            docs = list(executor.map(parse_file, [SURVEY_FILE] * 8))

        assert all(doc == survey for doc in docs)
