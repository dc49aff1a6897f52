"""
Unit tests for the dump parser / tree builder (jhu_dumps.parser).

Uses the inline sample dumps from conftest plus small hand-written
bodies for edge cases (short rows, quoting, repeats, blank lines).
"""

from __future__ import annotations

from datetime import datetime

import pytest

from jhu_dumps.exceptions import DumpDecodeError
from jhu_dumps.layout_registry import COUNTY_AWARE, GEOGRAPHICALLY_AWARE, LEGACY
from jhu_dumps.parser import decode_dump, parse_dump, rows_to_frame, tokenize_rows
from jhu_dumps.records import DumpTree
from tests.conftest import COUNTY_SAMPLE, GEO_SAMPLE, LEGACY_SAMPLE


class TestDecodeDump:
    """Bytes/text handling."""

    def test_text_passthrough(self):
        assert decode_dump("a,b\n") == "a,b\n"

    def test_utf8_bytes(self):
        assert decode_dump("Curaçao".encode("utf-8")) == "Curaçao"

    def test_bom_removed(self):
        assert decode_dump(b"\xef\xbb\xbfheader\n") == "header\n"
        assert decode_dump("\ufeffheader\n") == "header\n"

    def test_undecodable_bytes_raise(self):
        with pytest.raises(DumpDecodeError, match="03-01-2020.csv"):
            decode_dump(b"header\n\xff\xfe\xfa", target="http://x/03-01-2020.csv")


class TestTokenizeRows:
    """Line splitting and CSV tokenization."""

    def test_header_dropped(self):
        assert tokenize_rows("a,b\n1,2\n") == [["1", "2"]]

    def test_blank_lines_skipped(self):
        assert tokenize_rows("a,b\n1,2\n\n   \n3,4\n\n") == [["1", "2"], ["3", "4"]]

    def test_quoted_commas_kept(self):
        rows = tokenize_rows('h\n,"Korea, South",x\n')
        assert rows == [["", "Korea, South", "x"]]

    def test_doubled_quotes(self):
        rows = tokenize_rows('h\n"Cote d""Ivoire",1\n')
        assert rows == [['Cote d"Ivoire', "1"]]

    def test_crlf_line_endings(self):
        assert tokenize_rows("a,b\r\n1,2\r\n") == [["1", "2"]]

    def test_unbalanced_quote_stays_on_its_line(self):
        rows = tokenize_rows('h\n"Hubei,China,1\nGuangdong,China,2\n')
        assert len(rows) == 2
        assert rows[1] == ["Guangdong", "China", "2"]

    def test_header_only(self):
        assert tokenize_rows("a,b,c\n") == []

    def test_empty_text(self):
        assert tokenize_rows("") == []


class TestRowsToFrame:
    """Picking layout columns out of rows."""

    def test_short_rows_padded_with_none(self):
        df = rows_to_frame([["Hubei", "China"]], LEGACY)
        assert list(df.columns) == list(LEGACY.columns)
        assert df.loc[0, "country"] == "China"
        assert df.loc[0, "confirmed"] is None

    def test_extra_cells_ignored(self):
        df = rows_to_frame([["", "US", "", "1", "2", "3", "extra", "more"]], LEGACY)
        assert list(df.columns) == list(LEGACY.columns)


class TestScenarios:
    """Documented parse scenarios."""

    def test_header_only_yields_empty_tree(self):
        tree = parse_dump("Province/State,Country/Region,Last Update\n", LEGACY)
        assert isinstance(tree, DumpTree)
        assert len(tree) == 0

    def test_legacy_single_row(self):
        tree = parse_dump("header\nUS,,2020-04-01,100,5,20\n", LEGACY)
        assert list(tree) == ["US"]
        record = tree.get("US").record
        assert (record.confirmed, record.deaths, record.recovered) == (100, 5, 20)
        assert record.province is None
        assert record.last_updated == datetime(2020, 4, 1)

    def test_repeated_location_last_write_wins(self):
        body = (
            "header\n"
            "Hubei,China,2020-02-20,10,1,0\n"
            "Hubei,China,2020-02-21,20,2,1\n"
        )
        tree = parse_dump(body, LEGACY)
        china = tree.get("China")
        assert list(china) == ["Hubei"]
        assert china.get("Hubei").record.confirmed == 20

    def test_legacy_has_no_coordinates(self):
        tree = parse_dump(LEGACY_SAMPLE, LEGACY)
        for record in tree.records():
            assert record.latitude is None
            assert record.longitude is None
            assert record.active is None


class TestLegacySample:
    """The legacy-era sample dump."""

    def test_tree_shape(self):
        tree = parse_dump(LEGACY_SAMPLE, LEGACY)
        assert list(tree) == ["Mainland China", "Japan", "US"]
        assert set(tree.get("Mainland China")) == {"Hubei", "Guangdong"}

    def test_country_level_row(self):
        japan = parse_dump(LEGACY_SAMPLE, LEGACY).get("Japan").record
        assert japan.confirmed == 251
        assert japan.province is None
        assert japan.last_updated == datetime(2020, 2, 14, 8, 33)

    def test_quoted_province_and_blank_deaths(self):
        king = parse_dump(LEGACY_SAMPLE, LEGACY).get("US", "King County, WA").record
        assert king.confirmed == 1
        assert king.deaths == 0
        assert king.recovered == 1


class TestGeoSample:
    """The geographically-aware sample dump."""

    def test_coordinates(self):
        tree = parse_dump(GEO_SAMPLE, GEOGRAPHICALLY_AWARE)
        hubei = tree.get("China", "Hubei").record
        assert hubei.latitude == pytest.approx(30.9756)
        assert hubei.longitude == pytest.approx(112.2707)
        assert hubei.last_updated == datetime(2020, 3, 1, 10, 13, 19)

    def test_quoted_country(self):
        tree = parse_dump(GEO_SAMPLE, GEOGRAPHICALLY_AWARE)
        korea = tree.get("Korea, South").record
        assert korea.confirmed == 3736
        assert korea.province is None

    def test_active_absent(self):
        tree = parse_dump(GEO_SAMPLE, GEOGRAPHICALLY_AWARE)
        assert all(r.active is None for r in tree.records())


class TestCountySample:
    """The county-aware sample dump."""

    def test_three_levels(self):
        tree = parse_dump(COUNTY_SAMPLE, COUNTY_AWARE)
        assert list(tree) == ["US", "Italy"]
        king = tree.get("US", "Washington", "King").record
        assert king.county == "King"
        assert king.province == "Washington"
        assert king.location_id == "53033"
        assert king.full_name == "King, Washington, US"
        assert king.confirmed == 1170
        assert king.deaths == 87
        assert king.active == 0
        assert king.latitude == pytest.approx(47.49137892)

    def test_intermediate_province_has_no_record(self):
        tree = parse_dump(COUNTY_SAMPLE, COUNTY_AWARE)
        assert tree.get("US", "Washington").record is None
        assert set(tree.get("US", "Washington")) == {"King", "Snohomish"}

    def test_country_level_row(self):
        italy = parse_dump(COUNTY_SAMPLE, COUNTY_AWARE).get("Italy").record
        assert italy.active == 50418
        assert italy.location_id is None
        assert italy.county is None


class TestMalformedRows:
    """One bad row never fails the dump."""

    def test_short_row_leaves_attributes_absent(self):
        body = (
            "header\n"
            "53033,King,Washington,US,2020-03-23 23:19:34,47.4\n"
        )
        record = parse_dump(body, COUNTY_AWARE).get("US", "Washington", "King").record
        assert record.latitude == pytest.approx(47.4)
        assert record.longitude is None
        assert record.confirmed == 0
        assert record.active is None
        assert record.full_name is None

    def test_blank_active_cell_is_zero(self):
        body = "header\n,,,Italy,2020-03-23,,,1,1,1,,Italy\n"
        assert parse_dump(body, COUNTY_AWARE).get("Italy").record.active == 0

    def test_bad_values_use_defaults(self):
        body = "header\nHubei,China,not-a-date,lots,-1,,north,east\n"
        record = parse_dump(body, GEOGRAPHICALLY_AWARE).get("China", "Hubei").record
        assert record.last_updated is None
        assert (record.confirmed, record.deaths, record.recovered) == (0, 0, 0)
        assert record.latitude is None
        assert record.longitude is None

    def test_huge_counts_stay_non_negative(self):
        body = "header\n,US,2020-02-20,99999999999999999999999,1e30,5\n"
        record = parse_dump(body, LEGACY).get("US").record
        assert record.confirmed > 0
        assert record.deaths > 0
        assert record.recovered == 5

    def test_row_without_location_skipped(self):
        body = "header\n,,2020-02-20,1,0,0\nHubei,China,2020-02-20,5,0,0\n"
        tree = parse_dump(body, LEGACY)
        assert list(tree) == ["China"]

    def test_blank_country_keyed_by_province(self):
        body = "header\nDiamond Princess,,2020-02-20,5,0,0\n"
        tree = parse_dump(body, LEGACY)
        record = tree.get("Diamond Princess").record
        assert record.country == "Diamond Princess"
        assert record.province is None

    def test_names_stripped_for_keys(self):
        body = (
            "header\n"
            " Hubei , China ,2020-02-20,1,0,0\n"
            "Hubei,China,2020-02-21,2,0,0\n"
        )
        tree = parse_dump(body, LEGACY)
        assert list(tree) == ["China"]
        assert tree.get("China", "Hubei").record.confirmed == 2

    def test_keys_are_case_sensitive(self):
        body = "header\n,US,2020-02-20,1,0,0\n,us,2020-02-20,2,0,0\n"
        assert list(parse_dump(body, LEGACY)) == ["US", "us"]

    def test_bytes_input(self):
        tree = parse_dump(LEGACY_SAMPLE.encode("utf-8"), LEGACY)
        assert "Japan" in tree

    def test_undecodable_bytes_fail_whole_parse(self):
        with pytest.raises(DumpDecodeError):
            parse_dump(b"header\n\xff,US,2020-02-20,1,0,0\n", LEGACY)


class TestFreshTrees:
    """Each call builds an independent tree."""

    def test_trees_not_shared(self):
        first = parse_dump(LEGACY_SAMPLE, LEGACY)
        second = parse_dump(LEGACY_SAMPLE, LEGACY)
        assert first is not second
        first.children.clear()
        assert len(second) == 3
