"""
Tests for availability indexing, BTL scheme resolution and unit requirements.
"""

import pytest

from generation.availability import build_availability_index
from generation.blueprint_builder import (
    PAPER_SIZE,
    UNIT_REQUIREMENTS,
    get_unit_requirements,
    resolve_btl_scheme,
)
from generation.exceptions import (
    GenerationError,
    InsufficientQuestionsError,
    InvalidPaperTypeError,
    UnsupportedSchemeError,
)
from conftest import make_bank


class TestAvailabilityIndex:
    def test_groups_questions_by_unit_and_level(self):
        questions = make_bank([(1, "2", 2), (1, "3", 1), (4, "2", 3)])
        index = build_availability_index(questions)

        assert set(index.by_unit) == {1, 2, 3, 4, 5}
        assert [q.id for q in index.by_unit[1]["2"]] == [1, 2]
        assert len(index.by_unit[1]["3"]) == 1
        assert len(index.by_unit[4]["2"]) == 3
        assert index.by_unit[2] == {}
        assert index.levels == {"2", "3"}

    def test_count_sums_over_units(self):
        index = build_availability_index(make_bank([(1, "2", 2), (2, "2", 1), (5, "2", 4)]))

        assert index.count([1, 2, 3], "2") == 3
        assert index.count([1, 2, 3], "6") == 0

    def test_empty_bank(self):
        index = build_availability_index([])

        assert index.levels == frozenset()
        assert all(groups == {} for groups in index.by_unit.values())


class TestResolveBTLScheme:
    def test_max_level_six_uses_scheme_a(self):
        scheme = resolve_btl_scheme({"1", "2", "3", "4", "5", "6"})

        assert scheme.scheme_id == "A"
        assert [(q.level, q.count) for q in scheme.quotas[:3]] == [("2", 2), ("3", 2), ("4", 1)]
        assert scheme.quotas[3].is_choice
        assert scheme.quotas[3].options == ("1", "5", "6")

    def test_max_level_four_uses_scheme_b(self):
        scheme = resolve_btl_scheme({"2", "3", "4"})

        assert scheme.scheme_id == "B"
        assert [(q.level, q.count) for q in scheme.quotas] == [("2", 2), ("3", 2), ("4", 2)]

    def test_single_level_uses_scheme_c(self):
        scheme = resolve_btl_scheme({"3"})

        assert scheme.scheme_id == "C"
        assert [(q.level, q.count) for q in scheme.quotas] == [("3", 6)]

    @pytest.mark.parametrize("levels, expected", [({"6"}, "A"), ({"4"}, "B")])
    def test_max_level_takes_precedence_over_single_level(self, levels, expected):
        assert resolve_btl_scheme(levels).scheme_id == expected

    @pytest.mark.parametrize("levels", [{"2", "5"}, {"1", "2", "3"}, {"3", "5"}])
    def test_other_distributions_are_unsupported(self, levels):
        with pytest.raises(UnsupportedSchemeError) as exc:
            resolve_btl_scheme(levels)

        message = str(exc.value)
        assert message.startswith("Unsupported case")
        assert f"Max BTL = {max(int(l) for l in levels)}" in message
        for level in levels:
            assert level in message

    def test_no_levels_fails(self):
        with pytest.raises(InsufficientQuestionsError, match="No valid BTL levels"):
            resolve_btl_scheme(set())

    @pytest.mark.parametrize("scheme_levels", [{"1", "2", "3", "4", "5", "6"}, {"2", "3", "4"}, {"5"}])
    def test_quotas_total_paper_size(self, scheme_levels):
        assert resolve_btl_scheme(scheme_levels).total == PAPER_SIZE


class TestUnitRequirements:
    def test_mid1(self):
        reqs = get_unit_requirements("mid1")
        assert [(r.unit, r.min_count, r.max_count) for r in reqs] == [(1, 2, 3), (2, 2, 3), (3, 1, 1)]

    def test_mid2(self):
        reqs = get_unit_requirements("mid2")
        assert [(r.unit, r.min_count, r.max_count) for r in reqs] == [(4, 2, 3), (5, 2, 3), (3, 1, 1)]

    def test_special(self):
        reqs = get_unit_requirements("special")
        assert [(r.unit, r.min_count, r.max_count) for r in reqs] == [(u, 1, 2) for u in range(1, 6)]

    @pytest.mark.parametrize("paper_type", ["mid3", "", "MID1", None])
    def test_invalid_paper_type(self, paper_type):
        with pytest.raises(InvalidPaperTypeError) as exc:
            get_unit_requirements(paper_type)

        assert isinstance(exc.value, GenerationError)
        assert isinstance(exc.value, ValueError)
        assert repr(paper_type) in str(exc.value)

    @pytest.mark.parametrize("paper_type", sorted(UNIT_REQUIREMENTS))
    def test_tables_can_always_total_paper_size(self, paper_type):
        reqs = UNIT_REQUIREMENTS[paper_type]
        assert sum(r.min_count for r in reqs) <= PAPER_SIZE <= sum(r.max_count for r in reqs)
