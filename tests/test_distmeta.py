"""Tests for META.yml loading."""

import pytest

from cpan.distmeta import Distmeta, load_distmeta
from cpan.errors import MetadataParseError

META_YML = """---
abstract: 'A fine module'
author:
  - 'Jane Doe <jane@example.com>'
build_requires:
  Test::More: 0.88
configure_requires:
  ExtUtils::MakeMaker: 6.30
distribution_type: module
dynamic_config: 1
generated_by: 'ExtUtils::MakeMaker version 7.34'
license: perl
meta-spec:
  url: http://module-build.sourceforge.net/META-spec-v1.4.html
  version: 1.4
name: Foo-Bar
no_index:
  directory:
    - t
requires:
  Carp: 0
  Scalar::Util: '1.20'
  perl: 5.006
resources:
  repository: https://github.com/example/foo-bar
version: 1.10
"""


class TestLoadDistmeta:
    """Decoding of a complete document."""

    def test_full_document(self, tmp_path):
        path = tmp_path / "META.yml"
        path.write_text(META_YML, encoding="utf-8")

        meta = load_distmeta(str(path), "J/JD/JDOE/Foo-Bar-1.10.tar.gz")

        assert meta.abstract == "A fine module"
        assert meta.author == ["Jane Doe <jane@example.com>"]
        assert meta.name == "Foo-Bar"
        assert meta.version == "1.10"
        assert meta.license == "perl"
        assert meta.dynamic_config is True
        assert meta.meta_spec["version"] == "1.4"
        assert meta.resources["repository"] == "https://github.com/example/foo-bar"
        assert {d.name: d.version for d in meta.build_requires} == {"Test::More": "0.88"}
        assert {d.name: d.version for d in meta.configure_requires} == {"ExtUtils::MakeMaker": "6.3"}
        assert {d.name: d.version for d in meta.requires} == {
            "Carp": "0",
            "Scalar::Util": "1.20",
            "perl": "5.006",
        }

    def test_missing_sections_are_empty_lists(self, tmp_path):
        path = tmp_path / "META.yml"
        path.write_text("name: Tiny\nversion: '0.01'\n", encoding="utf-8")

        meta = load_distmeta(str(path))

        assert list(meta.configure_requires) == []
        assert list(meta.requires) == []
        assert list(meta.build_requires) == []
        assert meta.version == "0.01"

    def test_descriptive_versions_keep_source_text(self, tmp_path):
        path = tmp_path / "META.yml"
        path.write_text(
            "version: 2.50\nmeta-spec:\n  version: 1.40\nrequires:\n  Bar: 2.50\n",
            encoding="utf-8",
        )

        meta = load_distmeta(str(path))

        assert meta.version == "2.50"
        assert meta.meta_spec["version"] == "1.40"
        assert [d.version for d in meta.requires] == ["2.5"]

    def test_single_author_string(self):
        meta = Distmeta.from_document({"author": "Solo Author"})
        assert meta.author == ["Solo Author"]

    def test_missing_file(self, tmp_path):
        path = tmp_path / "META.yml"
        with pytest.raises(MetadataParseError) as excinfo:
            load_distmeta(str(path), "A/AU/AUTHOR/Dist-1.0.tar.gz")

        assert str(path) in str(excinfo.value)
        assert "A/AU/AUTHOR/Dist-1.0.tar.gz" in str(excinfo.value)
        assert isinstance(excinfo.value.__cause__, OSError)

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "META.yml"
        path.write_text("name: [unclosed\n", encoding="utf-8")

        with pytest.raises(MetadataParseError):
            load_distmeta(str(path), "dist")

    def test_bad_prerequisite_value(self, tmp_path):
        path = tmp_path / "META.yml"
        path.write_text("requires:\n  Foo: [1, 2]\n", encoding="utf-8")

        with pytest.raises(MetadataParseError, match="Foo"):
            load_distmeta(str(path), "dist")

    def test_non_mapping_document(self, tmp_path):
        path = tmp_path / "META.yml"
        path.write_text("- just\n- a list\n", encoding="utf-8")

        with pytest.raises(MetadataParseError):
            load_distmeta(str(path), "dist")
