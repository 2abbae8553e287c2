"""Unit tests for rule consolidation and evaluation."""

from datetime import date

import pytest

from vitae.contexts.documents.variant_data_structure import (
    DateRangeRule,
    ExcludeTagsRule,
    IncludeTagsRule,
    MaxBulletsRule,
    SectionOrderRule,
    UnknownRule,
)
from vitae.contexts.resolution.rule_evaluator import (
    consolidate_rules,
    evaluate_rules,
    experience_overlaps,
)
from vitae.contexts.documents.resume_data_structure import Experience

TODAY = date(2025, 6, 1)


def _ids(document):
    return [exp.id for exp in document.experience]


@pytest.mark.unit
def test_consolidate_unions_tags_and_keeps_last_scalars():
    rule_set = consolidate_rules(
        [
            IncludeTagsRule(("eng",)),
            IncludeTagsRule(("ops",)),
            MaxBulletsRule(3),
            MaxBulletsRule(-2),
            DateRangeRule("2010", None),
            DateRangeRule("2020", None),
            SectionOrderRule(("skills",)),
            UnknownRule("keyword_boost", ["ml"]),
        ]
    )

    assert rule_set.include_tags == {"eng", "ops"}
    assert rule_set.max_bullets == 0
    assert rule_set.date_range == DateRangeRule("2020", None)
    assert not rule_set.is_identity


@pytest.mark.unit
def test_no_rules_is_identity(master):
    """An empty rule list returns an equal copy."""
    result = evaluate_rules(master, [])
    assert result == master
    assert result is not master


@pytest.mark.unit
def test_include_tags(master):
    assert _ids(evaluate_rules(master, [IncludeTagsRule(("eng",))])) == ["e1", "e3"]


@pytest.mark.unit
def test_include_empty_tags_keeps_everything(master):
    assert _ids(evaluate_rules(master, [IncludeTagsRule(())])) == ["e1", "e2", "e3"]


@pytest.mark.unit
def test_include_unknown_tag_filters_everything(master):
    assert evaluate_rules(master, [IncludeTagsRule(("marketing",))]).experience == []


@pytest.mark.unit
def test_exclude_tags(master):
    assert _ids(evaluate_rules(master, [ExcludeTagsRule(("leadership",))])) == ["e2", "e3"]


@pytest.mark.unit
def test_exclude_wins_over_include(master):
    """Including and excluding the same tag leaves nothing carrying it."""
    result = evaluate_rules(master, [IncludeTagsRule(("eng",)), ExcludeTagsRule(("eng",))])
    assert result.experience == []


@pytest.mark.unit
def test_max_bullets_truncates_in_order(master):
    result = evaluate_rules(master, [MaxBulletsRule(2)])

    assert result.experience[0].bullets == ["Led platform team", "Built CI pipeline"]
    assert result.experience[1].bullets == ["Closed enterprise deals", "Grew territory 30%"]
    assert [len(exp.bullets) for exp in master.experience] == [4, 2, 3]


@pytest.mark.unit
def test_max_bullets_zero_and_negative(master):
    for count in (0, -5):
        result = evaluate_rules(master, [MaxBulletsRule(count)])
        assert all(exp.bullets == [] for exp in result.experience)


@pytest.mark.unit
@pytest.mark.parametrize("smaller,larger", [(1, 3), (2, 2), (0, 4)])
def test_max_bullets_applied_twice_keeps_minimum(master, smaller, larger):
    once = evaluate_rules(master, [MaxBulletsRule(smaller)])
    twice = evaluate_rules(once, [MaxBulletsRule(larger)])
    assert twice.experience == once.experience


@pytest.mark.unit
def test_date_range_keeps_overlapping(master):
    """A 2019-2020 window overlaps only the sales role."""
    result = evaluate_rules(master, [DateRangeRule("2019", "2020")], reference_day=TODAY)
    assert _ids(result) == ["e2"]


@pytest.mark.unit
def test_date_range_open_end_includes_current_role(master):
    result = evaluate_rules(master, [DateRangeRule("2021-07", None)], reference_day=TODAY)
    assert _ids(result) == ["e1"]


@pytest.mark.unit
def test_date_range_open_start(master):
    result = evaluate_rules(master, [DateRangeRule(None, "2017")], reference_day=TODAY)
    assert _ids(result) == ["e3"]


@pytest.mark.unit
def test_current_role_runs_to_reference_day():
    """An ongoing role is active until the reference day."""
    ongoing = Experience(id="x", date_start="2024-01")
    window = DateRangeRule("2024-06", "2024-12")

    assert experience_overlaps(ongoing, window, reference_day=date(2025, 1, 1))
    assert not experience_overlaps(ongoing, DateRangeRule("2025-06", "2025-12"), reference_day=date(2025, 1, 1))


@pytest.mark.unit
def test_unparsable_dates_keep_experience():
    window = DateRangeRule("2000", "2001")
    assert experience_overlaps(Experience(id="x", date_start=""), window, TODAY)
    assert experience_overlaps(Experience(id="y", date_start="someday"), window, TODAY)
    assert experience_overlaps(Experience(id="z", date_start="2010", date_end="later"), window, TODAY)


@pytest.mark.unit
def test_rules_combine(master):
    """Filters run together: eng roles active since 2019, two bullets each."""
    result = evaluate_rules(
        master,
        [IncludeTagsRule(("eng",)), DateRangeRule("2019", None), MaxBulletsRule(2)],
        reference_day=TODAY,
    )

    assert _ids(result) == ["e1"]
    assert len(result.experience[0].bullets) == 2


@pytest.mark.unit
def test_rules_leave_other_sections_alone(master):
    result = evaluate_rules(master, [IncludeTagsRule(("sales",)), MaxBulletsRule(1)])

    assert result.summary == master.summary
    assert result.key_achievements == master.key_achievements
    assert result.skills == master.skills


@pytest.mark.unit
def test_unknown_rules_are_ignored(master):
    assert evaluate_rules(master, [UnknownRule("keyword_boost", ["ml"])]) == master
