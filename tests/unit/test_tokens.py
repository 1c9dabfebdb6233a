"""Unit tests for STEP token helpers."""
from __future__ import annotations

import pytest

from ifc_specialty.infrastructure.step.tokens import (
    bounded_references,
    decode_step_text,
    first_in_range,
    last_reference,
    numeric_literals,
    parens_balanced,
    quoted_at,
    quoted_strings,
    references,
    type_tag,
)


class TestTypeTag:
    """Tests for type_tag."""

    @pytest.mark.parametrize(
        "body,expected",
        [
            ("IFCWALL('abc',#1,'Wall',$)", "IFCWALL"),
            ("IfcWallStandardCase ('abc')", "IFCWALLSTANDARDCASE"),
            ("'no type'", None),
            ("", None),
        ],
    )
    def test_type_tag(self, body: str, expected: str | None) -> None:
        """Test entity type extraction."""
        assert type_tag(body) == expected


class TestQuotedTokens:
    """Tests for quoted string access."""

    def test_quoted_strings_in_order(self) -> None:
        """Test quoted tokens are returned in field order."""
        body = "IFCWALL('2O2Fr$t4X7Zf8NOew3FLOH',#5,'Basic Wall:200mm',$,'tag')"
        assert quoted_strings(body) == ["2O2Fr$t4X7Zf8NOew3FLOH", "Basic Wall:200mm", "tag"]

    def test_escaped_apostrophes(self) -> None:
        """Test doubled apostrophes stay inside one token."""
        body = "IFCWALL('3vB2YO$MX4xv5uCqZZG05x',#1,'O''Brien wall',$,'tag')"

        assert quoted_strings(body) == ["3vB2YO$MX4xv5uCqZZG05x", "O'Brien wall", "tag"]
        assert quoted_at(body, 1) == "O'Brien wall"

    def test_escaped_apostrophe_numbers_ignored(self) -> None:
        """Test digits inside an escaped string are not numeric literals."""
        body = "IFCWINDOW('g',#1,'Window ''90'' 2',$,1.2,1.4)"
        assert numeric_literals(body) == [1.2, 1.4]

    def test_empty_strings(self) -> None:
        """Test empty strings next to each other are separate tokens."""
        assert quoted_strings("IFCX('','',$)") == ["", ""]

    def test_quoted_at_preference(self) -> None:
        """Test the first present position wins."""
        assert quoted_at("IFCX('a','b')", 1, 0) == "b"
        assert quoted_at("IFCX('a')", 1, 0) == "a"

    def test_quoted_at_missing(self) -> None:
        """Test None is returned when no position exists."""
        assert quoted_at("IFCX(#1,$)", 0) is None


class TestReferences:
    """Tests for #id reference helpers."""

    def test_references_in_order(self) -> None:
        """Test all references are returned in order."""
        assert references("IFCRELX('g',#1,$,$,(#12,#123),#7)") == [1, 12, 123, 7]

    def test_bounded_references_keep_ids_apart(self) -> None:
        """Test #12 and #123 are distinct references."""
        refs = bounded_references("IFCRELX('g',#1,$,$,(#12,#123),#7)")
        assert refs == [1, 12, 123, 7]
        assert 12 in refs and 123 in refs

    def test_bounded_reference_inside_list_bracket(self) -> None:
        """Test references closed by a bracket are found."""
        assert bounded_references("[#4]") == [4]

    def test_last_reference(self) -> None:
        """Test the relating object reference is found."""
        assert last_reference("IFCRELASSOCIATESMATERIAL('g',#1,$,$,(#5,#6),#9)") == 9

    def test_last_reference_absent(self) -> None:
        """Test records not ending in a reference give None."""
        assert last_reference("IFCWALL('g',#1,'Wall',$)") is None


class TestNumericLiterals:
    """Tests for numeric literal extraction."""

    def test_skips_references_and_quoted_text(self) -> None:
        """Test ids and digits inside strings are not numbers."""
        body = "IFCWINDOW('3x9',#12,'Window 1.5m',$,$,#40,#41,'tag',1.2,1.4)"
        assert numeric_literals(body) == [1.2, 1.4]

    @pytest.mark.parametrize(
        "body,expected",
        [
            ("IFCQUANTITYAREA('NetSideArea',$,$,12.5)", [12.5]),
            ("IFCMATERIALLAYERSETUSAGE(#4,.AXIS2.,.POSITIVE.,0.)", [0.0]),
            ("IFCCARTESIANPOINT((-2.5,1.E-3,7))", [-2.5, 0.001, 7.0]),
            ("IFCX(.ELEMENT.,$)", []),
        ],
    )
    def test_literal_forms(self, body: str, expected: list[float]) -> None:
        """Test integer, real, negative and exponent forms."""
        assert numeric_literals(body) == pytest.approx(expected)

    def test_first_in_range_is_exclusive(self) -> None:
        """Test range bounds are exclusive."""
        assert first_in_range("IFCQUANTITYAREA('A',$,$,0.)", 0, 100000) is None
        assert first_in_range("IFCQUANTITYAREA('A',$,$,12.5)", 0, 100000) == 12.5
        assert first_in_range("IFCQUANTITYAREA('A',$,$,100000.)", 0, 100000) is None


class TestDecodeStepText:
    """Tests for STEP string escapes."""

    def test_plain_text_unchanged(self) -> None:
        """Test text without escapes is returned as is."""
        assert decode_step_text("Basic Wall") == "Basic Wall"

    def test_latin1_escape(self) -> None:
        """Test \\X\\HH escapes."""
        assert decode_step_text("Cer\\X\\E2mica") == "Cerâmica"

    def test_utf16_escape(self) -> None:
        """Test \\X2\\...\\X0\\ escapes."""
        assert decode_step_text("Beto\\X2\\00E3\\X0\\o") == "Betoão"
        assert decode_step_text("Instala\\X2\\00E700F5\\X0\\es") == "Instalações"


class TestParensBalanced:
    """Tests for parens_balanced."""

    @pytest.mark.parametrize(
        "body,expected",
        [
            ("IFCX('a',(#1,#2))", True),
            ("IFCX('(',#1)", True),
            ("IFCX((#1,", False),
            ("IFCX('open", False),
        ],
    )
    def test_balance(self, body: str, expected: bool) -> None:
        """Test parentheses inside quotes are ignored."""
        assert parens_balanced(body) is expected
