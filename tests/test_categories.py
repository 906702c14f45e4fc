"""Tests for preset category code decoding."""

from __future__ import annotations

from hemarchive.domain.categories import CategoryCodes, PresetGroup, category_list


class TestCategoryList:
    def test_codes_after_marker(self):
        assert category_list("C=ST_BR_WA") == ["ST", "BR", "WA"]

    def test_marker_within_text(self):
        assert category_list("A soft cello\nC=ST_BO") == ["ST", "BO"]

    def test_no_marker(self):
        assert category_list("just text") == []


class TestCategoryCodes:
    def test_lookup(self):
        codes = CategoryCodes()
        meta = codes.get("WA")
        assert meta is not None
        assert meta.group is PresetGroup.CHARACTER
        assert meta.name == "Warm"

    def test_lookup_by_category(self):
        codes = CategoryCodes()
        assert codes.get_by_category_name("Winds").code == "WI"
        assert codes.get_by_category_code("ST").name == "Strings"
        assert codes.get_by_category_code("BR") is None

    def test_decode_groups(self):
        decoded = CategoryCodes().decode("C=ST_BR_WA")
        assert decoded == '{category:"Strings", type:["Brass"], character:["Warm"]}'

    def test_decode_merges_repeated_groups(self):
        decoded = CategoryCodes().decode("C=BR_ST_BO_BR")
        assert decoded == '{type:["Brass", "Bowed"], category:"Strings"}'

    def test_decode_short_text(self):
        assert CategoryCodes().decode("C=S") is None

    def test_decode_ignores_unknown_codes(self):
        assert CategoryCodes().decode("C=ZZ_KY") == '{category:"Keyboard"}'
