"""
Unit tests for the check matcher and the offset adjuster.
"""
import pytest

from pwl_dc_adjuster.adjustment.check_matcher import find_checks, has_checks, list_checks
from pwl_dc_adjuster.adjustment.offset_adjuster import adjust_text, render_check
from pwl_dc_adjuster.models.annotation import CheckOccurrence


# ===========================================================================
# Matcher
# ===========================================================================


class TestFindChecks:

    def test_decomposes_prefix_value_suffix(self):
        (occ,) = list_checks("@Check[type:fortitude|dc:25|basic]")
        assert occ.prefix == "type:fortitude|"
        assert occ.value == 25
        assert occ.suffix == "|basic"

    def test_dc_first_has_empty_prefix(self):
        (occ,) = list_checks("@Check[dc:12|basic]")
        assert occ.prefix == ""
        assert occ.value == 12
        assert occ.suffix == "|basic"

    def test_span_covers_whole_tag(self):
        text = "Save: @Check[type:will|dc:30] or flee."
        (occ,) = list_checks(text)
        assert text[occ.start:occ.end] == "@Check[type:will|dc:30]"

    def test_multiple_in_order(self):
        text = "@Check[type:reflex|dc:21] then @Check[type:will|dc:19] then @Check[dc:40]"
        assert [o.value for o in find_checks(text)] == [21, 19, 40]

    def test_no_occurrences_is_empty(self):
        assert list_checks("A plain description with dc:25 outside any tag.") == []

    @pytest.mark.parametrize("text", [None, ""])
    def test_none_or_empty_text(self, text):
        assert list_checks(text) == []
        assert not has_checks(text)

    def test_case_insensitive_keyword(self):
        (occ,) = list_checks("@check[type:will|DC:22]")
        assert occ.value == 22

    def test_dc_key_needs_word_boundary(self):
        # "adc:5" is not a dc key
        assert list_checks("@Check[type:will|adc:25]") == []

    def test_tag_without_dc_not_matched(self):
        assert list_checks("@Check[type:perception] and @Check[type:will|dc:22]") != []
        assert [o.value for o in find_checks("@Check[type:perception]")] == []

    def test_first_dc_key_taken(self):
        (occ,) = list_checks("@Check[type:will|dc:25|dc:30]")
        assert occ.value == 25
        assert occ.suffix == "|dc:30"

    def test_restartable(self):
        text = "@Check[type:reflex|dc:21] and @Check[type:will|dc:22]"
        first = list_checks(text)
        second = list_checks(text)
        assert first == second
        assert len(first) == 2

    def test_independent_scans_do_not_interfere(self):
        a = find_checks("@Check[dc:21] @Check[dc:22]")
        b = find_checks("@Check[dc:99]")
        assert next(a).value == 21
        assert next(b).value == 99
        assert next(a).value == 22

    def test_has_checks(self):
        assert has_checks("x @Check[type:will|dc:22] y")
        assert not has_checks("no tags")


# ===========================================================================
# Offset adjuster
# ===========================================================================


class TestRenderCheck:

    def test_subtracts_level(self):
        occ = CheckOccurrence("type:fortitude|", 25, "")
        assert render_check(occ, 5) == "@Check[type:fortitude|dc:20]"

    def test_no_clamping_to_zero(self):
        occ = CheckOccurrence("", 3, "|basic")
        assert render_check(occ, 5) == "@Check[dc:-2|basic]"

    def test_zero_result(self):
        assert render_check(CheckOccurrence("", 4, ""), 4) == "@Check[dc:0]"

    def test_prefix_suffix_verbatim(self):
        occ = CheckOccurrence(" Type:Will | ", 30, " | Basic ")
        assert render_check(occ, 10) == "@Check[ Type:Will | dc:20 | Basic ]"


class TestAdjustText:

    def test_end_to_end_fortitude(self):
        assert adjust_text("@Check[type:fortitude|dc:25]", 5) == "@Check[type:fortitude|dc:20]"

    def test_end_to_end_basic_suffix(self):
        assert adjust_text("@Check[dc:12|basic]", 3) == "@Check[dc:9|basic]"

    def test_surrounding_text_untouched(self):
        text = "<p>Each creature attempts a @Check[type:reflex|dc:28|basic] save.</p>"
        assert adjust_text(text, 8) == "<p>Each creature attempts a @Check[type:reflex|dc:20|basic] save.</p>"

    def test_every_occurrence_adjusted_once(self):
        text = "@Check[dc:30] @Check[dc:30]"
        assert adjust_text(text, 10) == "@Check[dc:20] @Check[dc:20]"

    def test_text_without_tags_unchanged(self):
        text = "Nothing to see, dc:25 is not a tag."
        assert adjust_text(text, 5) == text

    def test_empty_text(self):
        assert adjust_text("", 5) == ""

    def test_keyword_rendered_lowercase(self):
        assert adjust_text("@check[type:will|DC:22]", 2) == "@Check[type:will|dc:20]"
