"""Tests for version predicate parsing and evaluation."""

import dataclasses
from concurrent.futures import ThreadPoolExecutor

import pytest

from modversion import (
    ANY,
    INFINITE,
    ComparisonOperator,
    PredicateTerm,
    SemanticVersion,
    StringVersion,
    VersionParsingError,
    VersionPredicate,
    parse_predicate,
    parse_version,
)


def v(literal):
    return parse_version(literal)


class TestPredicateParse:
    """Tests for VersionPredicate.parse."""

    def test_single_term(self):
        predicate = VersionPredicate.parse(">=1.2.0")
        assert predicate.terms == (PredicateTerm(ComparisonOperator.GREATER_EQUAL, v("1.2.0")),)

    def test_default_operator_is_equal(self):
        predicate = VersionPredicate.parse("1.2.0")
        assert predicate.terms[0].operator is ComparisonOperator.EQUAL

    def test_multiple_terms(self):
        predicate = VersionPredicate.parse(">=1.2.0   <2.0.0")
        assert [term.operator for term in predicate.terms] == [
            ComparisonOperator.GREATER_EQUAL,
            ComparisonOperator.LESS,
        ]
        assert str(predicate) == ">=1.2.0 <2.0.0"

    @pytest.mark.parametrize("expression", ["", "   ", "*", "* *"])
    def test_any(self, expression):
        """Test that empty expressions and * match every version."""
        predicate = parse_predicate(expression)
        assert predicate == ANY
        assert str(predicate) == "*"
        assert predicate.interval == INFINITE

    def test_star_is_skipped(self):
        predicate = parse_predicate("* >=1.0")
        assert len(predicate.terms) == 1

    def test_missing_version(self):
        with pytest.raises(VersionParsingError):
            parse_predicate(">=")
        with pytest.raises(VersionParsingError):
            parse_predicate(">=1.0 <")

    def test_parse_all_collapses_duplicates(self):
        predicates = VersionPredicate.parse_all([">=1", ">=1", "<0.5"])
        assert isinstance(predicates, set)
        assert len(predicates) == 2

    def test_structural_equality(self):
        """Test that padded references produce equal predicates."""
        assert parse_predicate(">=1.2") == parse_predicate(">=1.2.0")
        assert hash(parse_predicate(">=1.2")) == hash(parse_predicate(">=1.2.0"))

    def test_terms_coerced_to_tuple(self):
        term = PredicateTerm(ComparisonOperator.LESS, v("2"))
        assert VersionPredicate([term]).terms == (term,)

    def test_immutable(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            parse_predicate(">=1").terms = ()


class TestWildcardRewrite:
    """Tests for rewriting X-ranges into ~ and ^ terms."""

    def test_minor_wildcard(self):
        """Test that 1.2.x means the 1.2 line."""
        predicate = parse_predicate("1.2.x")
        term = predicate.terms[0]
        assert term.operator is ComparisonOperator.SAME_TO_NEXT_MINOR
        assert term.reference_version == SemanticVersion((1, 2), "")
        assert str(predicate.interval) == "[1.2-,1.3-)"

        assert predicate.test(v("1.2.0"))
        assert predicate.test(v("1.2.99"))
        assert predicate.test(v("1.2.0-beta"))
        assert not predicate.test(v("1.3.0"))
        assert not predicate.test(v("1.1.9"))

    def test_major_wildcard(self):
        predicate = parse_predicate("1.x")
        assert predicate.terms[0].operator is ComparisonOperator.SAME_TO_NEXT_MAJOR
        assert str(predicate.interval) == "[1-,2-)"
        assert predicate.test(v("1.99.0"))
        assert not predicate.test(v("2.0.0"))

    @pytest.mark.parametrize("expression", ["1.X", "1.*", "=1.x", "1.x.x"])
    def test_major_wildcard_spellings(self, expression):
        assert parse_predicate(expression) == parse_predicate("1.x")

    @pytest.mark.parametrize("expression", [">=1.x", "<1.2.x", "~1.x", "^1.2.x"])
    def test_wildcard_requires_equality(self, expression):
        with pytest.raises(VersionParsingError):
            parse_predicate(expression)

    def test_wildcard_depth(self):
        """Test that only the second or third component may be a wildcard."""
        with pytest.raises(VersionParsingError):
            parse_predicate("1.2.3.x")

    def test_build_is_kept(self):
        term = parse_predicate("1.2.x+build").terms[0]
        assert term.reference_version.build == "build"


class TestPredicateOpaque:
    """Tests for predicates referencing opaque versions."""

    def test_equality(self):
        predicate = parse_predicate("b1.7.3")
        assert isinstance(predicate.terms[0].reference_version, StringVersion)
        assert predicate.test(StringVersion("b1.7.3"))
        assert not predicate.test(StringVersion("b1.7.2"))
        assert not predicate.test(v("1.7.3"))

    def test_interval_is_point(self):
        interval = parse_predicate("=b1.7.3").interval
        assert interval.min == StringVersion("b1.7.3")
        assert interval.max == StringVersion("b1.7.3")
        assert interval.min_inclusive and interval.max_inclusive

    @pytest.mark.parametrize("expression", [">=b1.7.3", ">b1.7.3", "<b1.7.3", "<=b1.7.3", "~b1.7.3", "^b1.7.3"])
    def test_only_equality(self, expression):
        """Test that opaque references reject ordering operators."""
        with pytest.raises(VersionParsingError):
            parse_predicate(expression)


class TestPredicateEvaluation:
    """Tests for VersionPredicate.test and VersionPredicate.interval."""

    def test_range(self):
        predicate = parse_predicate(">=1.2.0 <2.0.0")
        assert predicate.test(v("1.9.9"))
        assert predicate.test(v("1.2.0"))
        assert not predicate.test(v("2.0.0"))
        assert not predicate.test(v("1.1.0"))
        assert str(predicate.interval) == "[1.2.0,2.0.0)"

    def test_caret(self):
        """Test that ^1.2.3 covers 1.2.3 up to, not including, 2.0.0 and its prereleases."""
        predicate = parse_predicate("^1.2.3")
        interval = predicate.interval
        assert str(interval) == "[1.2.3,2-)"
        assert interval.min == v("1.2.3")
        assert interval.min_inclusive
        assert not interval.max_inclusive

        assert v("1.2.3") in interval
        assert v("1.9.9") in interval
        assert v("2.0.0") not in interval
        assert v("2.0.0-alpha") not in interval
        assert v("1.2.2") not in interval

    def test_tilde(self):
        predicate = parse_predicate("~1.2.3")
        assert str(predicate.interval) == "[1.2.3,1.3-)"
        assert predicate.test(v("1.2.10"))
        assert not predicate.test(v("1.3.0"))
        assert v("1.3.0-rc.1") not in predicate.interval

    def test_test_agrees_with_interval(self):
        """Test that membership in the interval matches test() for semantic versions."""
        samples = [v(literal) for literal in [
            "0.9", "1.0.0-alpha", "1.0.0", "1.2.2", "1.2.3", "1.2.3-rc.1", "1.2.4", "1.3.0-0", "1.3.0",
            "1.9.9", "2.0.0-alpha", "2.0.0", "2.1",
        ]]
        for expression in ["^1.2.3", "~1.2.3", ">=1.2.3", ">1.2.3", "<1.2.3", "<=1.2.3", "=1.2.3",
                           ">=1.0.0 <2.0.0", "1.2.x", "1.x"]:
            predicate = parse_predicate(expression)
            for version in samples:
                assert predicate.test(version) == (version in predicate.interval), f"{expression} / {version}"

    def test_empty_interval(self):
        """Test that contradicting terms yield no interval but remain testable."""
        predicate = parse_predicate(">=2.0 <1.0")
        assert predicate.interval is None
        assert not predicate.test(v("1.5"))

    def test_exact_point(self):
        assert str(parse_predicate(">=1.0 <=1.0").interval) == "[1.0,1.0]"
        assert parse_predicate(">1.0 <=1.0").interval is None

    def test_none_version(self):
        with pytest.raises(TypeError):
            parse_predicate(">=1").test(None)

    def test_any_matches_everything(self):
        assert ANY.test(v("0.0.1"))
        assert ANY.test(StringVersion("b1.7.3"))

    def test_shared_between_threads(self):
        """Test that one parsed predicate can be evaluated from many threads."""
        predicate = parse_predicate(">=1.0.0 <2.0.0")
        versions = [v(f"1.{minor}.0") for minor in range(50)] + [v(f"2.{minor}.0") for minor in range(50)]

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(predicate.test, versions))

        assert results == [True] * 50 + [False] * 50
