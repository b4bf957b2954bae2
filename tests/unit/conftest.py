"""
Pytest configuration for unit tests.

Provides XtabML sample documents and parsed fixtures shared by all unit tests.
"""

import pytest


TWO_STAT_XML = """<?xml version="1.0" encoding="UTF-8"?>
<xtab version="1.1">
  <date>2024-03-12</date>
  <origin>SurveyTool 7.2</origin>
  <language lang="en">English</language>
  <controltype name="base" status="visible">Base</controltype>
  <statistictype name="Percent">Column percent</statistictype>
  <statistictype name="n">Count</statistictype>
  <control type="project">Youth Survey</control>
  <table title="q4: Age" name="97f48ec3-87c5-4c39-b6c2-5229cc884666">
    <control type="base">Total sample; Unweighted; base n = 713</control>
    <edge axis="r">
      <group>
        <element>A</element>
        <element>B</element>
        <element>C</element>
      </group>
    </edge>
    <edge axis="c">
      <group>
        <element>Male</element>
        <element>Female</element>
      </group>
    </edge>
    <statistic type="Percent"/>
    <statistic type="n"/>
    <data>
      <r><c>p_a1</c><c>p_a2</c></r>
      <r><c>n_a1</c><c>n_a2</c></r>
      <r><c>p_b1</c><c>p_b2</c></r>
      <r><c>n_b1</c><c>n_b2</c></r>
      <r><c>p_c1</c><c>p_c2</c></r>
      <r><c>n_c1</c><c>n_c2</c></r>
    </data>
  </table>
</xtab>
"""

MISSING_CELL_XML = """<xtab version="1.1">
  <table title="Missing">
    <edge axis="r"><group><element>Row</element></group></edge>
    <edge axis="c"><group><element>X</element><element>Y</element><element>Z</element></group></edge>
    <statistic type="Percent"/>
    <data>
      <r><c>12.3</c><x/><c></c></r>
    </data>
  </table>
</xtab>
"""

NESTED_XML = """<xtab version="1.1">
  <table>
    <title>Region by Age</title>
    <edge axis="r">
      <group label="North">
        <element code="1"><t>Urban</t></element>
        <group label="Rural">
          <element>Village</element>
          <element>Farm</element>
        </group>
        <element>Suburb</element>
        <summary>Mean</summary>
      </group>
      <group label="South">
        <element>Coast</element>
      </group>
    </edge>
    <edge axis="c"><group><element>Total</element></group></edge>
    <statistic type="n"/>
    <data>
      <r><c>1</c></r>
      <r><c>2</c></r>
      <r><c>3</c></r>
      <r><c>4</c></r>
      <r><c>5</c></r>
    </data>
  </table>
</xtab>
"""


def make_table_xml(rows_xml: str, statistics=('Percent',), row_labels=('A',), column_labels=('X',), title='T') -> str:
    """Build a single-table document around the given <data> content."""
    rows = ''.join(f'<element>{label}</element>' for label in row_labels)
    cols = ''.join(f'<element>{label}</element>' for label in column_labels)
    stats = ''.join(f'<statistic type="{s}"/>' for s in statistics)
    title_attr = f' title="{title}"' if title is not None else ''
    return (
        f'<xtab version="1.1"><table{title_attr}>'
        f'<edge axis="r"><group>{rows}</group></edge>'
        f'<edge axis="c"><group>{cols}</group></edge>'
        f'{stats}<data>{rows_xml}</data></table></xtab>'
    )


@pytest.fixture
def two_stat_xml():
    return TWO_STAT_XML


@pytest.fixture
def missing_cell_xml():
    return MISSING_CELL_XML


@pytest.fixture
def nested_xml():
    return NESTED_XML


@pytest.fixture
def two_stat_document():
    """Parsed TWO_STAT_XML."""
    from xtabml import parse_string

    return parse_string(TWO_STAT_XML)


@pytest.fixture
def two_stat_table(two_stat_document):
    return two_stat_document.tables[0]


@pytest.fixture
def table_xml():
    """Factory for single-table documents (see make_table_xml)."""
    return make_table_xml
