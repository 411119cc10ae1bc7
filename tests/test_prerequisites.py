"""Tests for prerequisite decoding and version canonicalization."""

import pytest

from cpan.prerequisites import Prerequisites, canonical_version


class TestCanonicalVersion:
    """Numeric and textual version values."""

    def test_float_drops_trailing_zero(self):
        assert canonical_version(1.20) == "1.2"

    def test_text_is_unchanged(self):
        assert canonical_version("1.20") == "1.20"

    def test_integer(self):
        assert canonical_version(0) == "0"
        assert canonical_version(5) == "5"

    def test_whole_float_has_no_fraction(self):
        assert canonical_version(2.0) == "2"

    def test_no_exponent_for_small_values(self):
        assert canonical_version(0.00001) == "0.00001"

    def test_no_exponent_for_large_values(self):
        assert canonical_version(1e16) == "10000000000000000"

    def test_long_fraction_round_trips(self):
        assert canonical_version(5.010001) == "5.010001"

    @pytest.mark.parametrize("value", [True, None, [1], {"a": 1}, float("nan")])
    def test_rejects_other_shapes(self, value):
        with pytest.raises(ValueError):
            canonical_version(value)


class TestPrerequisitesFromMapping:
    """Decoding of a prerequisite section."""

    def test_mixed_values(self):
        prereqs = Prerequisites.from_mapping({"Foo": 1.20, "Bar": "1.20", "Baz": 0})

        versions = {d.name: d.version for d in prereqs}
        assert versions == {"Foo": "1.2", "Bar": "1.20", "Baz": "0"}
        assert len(prereqs) == 3

    def test_dependencies_start_unresolved(self):
        prereqs = Prerequisites.from_mapping({"Foo": "1.0"})
        dep = list(prereqs)[0]
        assert dep.succeeded is False
        assert dep.error is None

    def test_null_section_is_empty(self):
        assert len(Prerequisites.from_mapping(None)) == 0

    def test_non_mapping_section_is_rejected(self):
        with pytest.raises(ValueError):
            Prerequisites.from_mapping(["Foo", "Bar"])

    def test_bad_value_names_the_prerequisite(self):
        with pytest.raises(ValueError, match="Foo"):
            Prerequisites.from_mapping({"Foo": ["1.0"]})

    def test_describe(self):
        prereqs = Prerequisites.from_mapping({"Foo": "1.0"})
        assert prereqs.describe() == ["require Foo, version 1.0"]
        assert prereqs.names() == ["Foo"]
