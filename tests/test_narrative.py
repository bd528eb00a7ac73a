"""
Tests for template filling and report text.

The narrative is part of the result, so its exact wording is pinned down
here: placeholder substitution, sentence order, the charged override and
the formatting of position lists and scores.
"""

import pytest

from mutinterp.core.exceptions import MissingConfigKeyError, TemplateError
from mutinterp.core.models import (
    ChemistryAnalysis,
    GlobalGroupPreference,
    Mutation,
    PositionClass,
    PositionStats,
)
from mutinterp.narrative.templates import fill_template, format_score, placeholders
from mutinterp.narrative.text import (
    format_positions,
    generate_global_summary,
    generate_mutation_report,
    generate_position_text,
    position_variables,
)
from mutinterp.rules.config import reference_config

CONFIG = reference_config()

OVERRIDE = CONFIG.templates["conserved_charged_override"]
TARGET = CONFIG.templates["excellent_target"]


@pytest.fixture
def stats():
    return PositionStats(
        pos_index=11,
        pos1=12,
        wt_aa="K",
        column=(0.0,) * 20,
        num_improve=15,
        num_degrade=1,
        num_neutral=3,
        best_aa="W",
        best_score=1.234,
        worst_aa="P",
        worst_score=-0.5,
    )


@pytest.fixture
def designable():
    return PositionClass("highly_designable", "Highly designable / promising")


class TestFillTemplate:
    """Tests for placeholder substitution."""

    def test_substitution(self):
        assert fill_template("{{a}} and {{b}}", {"a": 1, "b": "x"}) == "1 and x"

    def test_repeated_placeholder(self):
        assert fill_template("{{a}}{{a}}", {"a": "z"}) == "zz"

    def test_extra_variables_ignored(self):
        assert fill_template("plain", {"unused": 1}) == "plain"

    def test_missing_variable(self):
        with pytest.raises(TemplateError) as exc_info:
            fill_template("{{a}} {{b}} {{c}}", {"b": 1}, name="demo")
        assert exc_info.value.template_name == "demo"
        assert exc_info.value.missing == ["a", "c"]
        assert "demo" in str(exc_info.value)

    def test_values_are_not_refilled(self):
        """A value that looks like a placeholder is inserted literally."""
        assert fill_template("{{a}}", {"a": "{{b}}"}) == "{{b}}"

    def test_placeholders_in_order(self):
        assert placeholders("{{x}} {{y}} {{x}}") == ["x", "y"]

    def test_single_braces_untouched(self):
        assert fill_template("{a} {{a}}", {"a": 1}) == "{a} 1"

    def test_spaced_placeholder(self):
        assert fill_template("Position {{ pos1 }} ({{wt}})", {"pos1": 3, "wt": "K"}) == "Position 3 (K)"

    def test_spaced_placeholder_without_value(self):
        with pytest.raises(TemplateError) as exc_info:
            fill_template("Position {{ pos1 }} ({{wt}})", {"wt": "K"})
        assert exc_info.value.missing == ["pos1"]

    @pytest.mark.parametrize("template,bad", [
        ("Position {{pos-1}}", "pos-1"),
        ("Best: {{best AA}}", "best AA"),
        ("Empty {{}} braces", ""),
    ])
    def test_malformed_placeholder(self, template, bad):
        """Anything between double braces must resolve or the fill fails."""
        variables = {"pos1": 1, "best_AA": "W"}
        with pytest.raises(TemplateError) as exc_info:
            fill_template(template, variables)
        assert exc_info.value.missing == [bad]

    @pytest.mark.parametrize("value,expected", [
        (1.0, "1.00"),
        (-0.456, "-0.46"),
        (0.0, "0.00"),
        (3.8000000000000003, "3.80"),
    ])
    def test_format_score(self, value, expected):
        assert format_score(value) == expected


class TestPositionText:
    """Tests for the per-position narrative."""

    def test_variables(self, stats, designable):
        variables = position_variables(stats, designable)
        assert variables["pos1"] == 12
        assert variables["wt"] == "K"
        assert variables["best_score"] == "1.23"
        assert variables["worst_score"] == "-0.50"

    def test_header_and_stats(self, stats, designable):
        interp = generate_position_text(
            stats, designable, ChemistryAnalysis(), False, False, CONFIG
        )
        assert interp.header == "Position 12 (K): Highly designable / promising."
        assert interp.basic_stats == (
            "Best: W (+1.23), Worst: P (-0.50). Improve: 15, Degrade: 1, Neutral: 3."
        )
        assert interp.chemistry_text == ()
        assert interp.full_text == f"{interp.header} {interp.basic_stats}"

    def test_beneficial_then_harmful(self, stats, designable):
        chem = ChemistryAnalysis(
            group_means={"aromatic": 1.0, "special": -1.0},
            dominant_beneficial_group="aromatic",
            dominant_harmful_group="special",
        )
        interp = generate_position_text(stats, designable, chem, False, False, CONFIG)

        assert interp.chemistry_text == (
            CONFIG.beneficial_explanations["aromatic"],
            CONFIG.harmful_explanations["special"],
        )
        assert interp.dominant_beneficial_group == "aromatic"
        assert interp.group_means == {"aromatic": 1.0, "special": -1.0}

    def test_excellent_target_last(self, stats, designable):
        chem = ChemistryAnalysis(dominant_beneficial_group="aromatic")
        interp = generate_position_text(stats, designable, chem, False, True, CONFIG)

        assert interp.chemistry_text[-1] == TARGET
        assert interp.full_text.endswith(TARGET)
        assert interp.is_excellent_target

    def test_override_replaces_explanations(self, stats):
        sensitive = PositionClass("highly_sensitive", "Highly sensitive / intolerant")
        chem = ChemistryAnalysis(
            dominant_beneficial_group="aromatic",
            dominant_harmful_group="positive",
        )
        interp = generate_position_text(stats, sensitive, chem, True, False, CONFIG)

        assert interp.chemistry_text == (OVERRIDE,)
        assert interp.is_conserved_charged
        # The structured fields still report the dominant groups
        assert interp.dominant_harmful_group == "positive"

    def test_full_text_joins_with_single_spaces(self, stats, designable):
        chem = ChemistryAnalysis(dominant_beneficial_group="aromatic")
        interp = generate_position_text(stats, designable, chem, False, True, CONFIG)
        expected = " ".join([interp.header, interp.basic_stats, *interp.chemistry_text])
        assert interp.full_text == expected
        assert "  " not in interp.full_text

    def test_max_score_alias(self, stats, designable):
        interp = generate_position_text(stats, designable, ChemistryAnalysis(), False, False, CONFIG)
        assert interp.max_score == interp.best_score == 1.234

    def test_missing_explanation(self, stats, designable):
        chem = ChemistryAnalysis(dominant_beneficial_group="halogenated")
        with pytest.raises(MissingConfigKeyError, match="beneficial_explanations"):
            generate_position_text(stats, designable, chem, False, False, CONFIG)

    def test_missing_template(self, stats, designable):
        templates = {k: v for k, v in CONFIG.templates.items() if k != "position_header"}
        config = CONFIG.model_copy(update={"templates": templates})
        with pytest.raises(MissingConfigKeyError, match="position_header"):
            generate_position_text(stats, designable, ChemistryAnalysis(), False, False, config)

    def test_unknown_placeholder(self, stats, designable):
        templates = dict(CONFIG.templates, position_header="Position {{pos1}} {{mystery}}")
        config = CONFIG.model_copy(update={"templates": templates})
        with pytest.raises(TemplateError, match="mystery"):
            generate_position_text(stats, designable, ChemistryAnalysis(), False, False, config)

    def test_malformed_header_placeholder(self, stats, designable):
        templates = dict(CONFIG.templates, position_header="Position {{pos-1}} ({{wt}}).")
        config = CONFIG.model_copy(update={"templates": templates})
        with pytest.raises(TemplateError, match="pos-1"):
            generate_position_text(stats, designable, ChemistryAnalysis(), False, False, config)

    def test_explanations_may_use_position_variables(self, stats, designable):
        explanations = dict(CONFIG.beneficial_explanations, aromatic="{{best_AA}} fits at {{pos1}}.")
        config = CONFIG.model_copy(update={"beneficial_explanations": explanations})
        chem = ChemistryAnalysis(dominant_beneficial_group="aromatic")
        interp = generate_position_text(stats, designable, chem, False, False, config)
        assert interp.chemistry_text == ("W fits at 12.",)


class TestGlobalSummary:
    """Tests for the whole-peptide summary."""

    @pytest.fixture
    def group_prefs(self):
        return [
            GlobalGroupPreference(group=g, mean=0.1 * i)
            for i, g in enumerate(CONFIG.aa_groups)
        ]

    def test_format_positions(self):
        assert format_positions([1, 2, 10], CONFIG) == "1, 2, 10"
        assert format_positions([], CONFIG) == "None"

    def test_custom_placeholder(self):
        config = CONFIG.model_copy(update={"empty_list_placeholder": "-"})
        assert format_positions([], config) == "-"

    def test_summary(self, group_prefs):
        summary = generate_global_summary([3], [3, 4], [], group_prefs, CONFIG)

        assert summary.startswith("Global Analysis: ")
        assert "Conserved core: 3." in summary
        assert "Sensitive: 3, 4." in summary
        assert "Designable: None." in summary
        assert "Hydrophobic: 0.00, Aromatic: 0.10" in summary
        assert "Special: 0.50." in summary

    def test_group_template_needs_every_group(self, group_prefs):
        with pytest.raises(TemplateError, match="special_mean"):
            generate_global_summary([], [], [], group_prefs[:-1], CONFIG)


class TestMutationReport:
    """Tests for the ranked substitution listing."""

    def test_report_lines(self):
        good = [Mutation(from_aa="A", to_aa="Y", position=1, delta=3.8)]
        bad = [
            Mutation(from_aa="K", to_aa="A", position=3, delta=-0.4),
            Mutation(from_aa="V", to_aa="A", position=2, delta=-0.2),
        ]
        report = generate_mutation_report(good, bad, CONFIG)

        assert report.split("\n") == [
            "Top Beneficial Mutations:",
            "A1Y: 3.80",
            "Top Harmful Mutations:",
            "K3A: -0.40",
            "V2A: -0.20",
        ]

    def test_empty_rankings(self):
        report = generate_mutation_report([], [], CONFIG)
        assert report == "Top Beneficial Mutations:\nTop Harmful Mutations:"

    def test_mutation_label(self):
        assert Mutation(from_aa="K", to_aa="W", position=12, delta=0.0).label == "K12W"
