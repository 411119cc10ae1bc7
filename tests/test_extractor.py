"""Tests for tarball extraction and root detection."""

import os

import pytest

from conftest import dist_entries
from cpan.errors import UnpackError
from cpan.extractor import extract_archive


class TestExtractArchive:
    """Root detection and entry handling."""

    def test_root_from_leading_directory(self, tmp_path, make_tarball):
        archive = make_tarball("Foo-1.0.tar.gz", dist_entries("Foo-1.0", "name: Foo\n", [
            ("Foo-1.0/lib/", None),
            ("Foo-1.0/lib/Foo.pm", "package Foo; 1;\n"),
        ]))
        dest = tmp_path / "work"
        dest.mkdir()

        root = extract_archive(archive, str(dest))

        assert root == str(dest / "Foo-1.0")
        assert (dest / "Foo-1.0" / "META.yml").read_text() == "name: Foo\n"
        assert (dest / "Foo-1.0" / "lib" / "Foo.pm").is_file()

    def test_root_from_first_file_entry(self, tmp_path, make_tarball):
        archive = make_tarball("Bar-2.tar.gz", [
            ("Bar-2/META.yml", "name: Bar\n"),
            ("Bar-2/Makefile.PL", "use ExtUtils::MakeMaker;\n"),
        ])
        dest = tmp_path / "work"
        dest.mkdir()

        root = extract_archive(archive, str(dest))

        assert root == str(dest / "Bar-2")
        assert (dest / "Bar-2" / "Makefile.PL").is_file()

    def test_flat_archive_extracts_into_destination(self, tmp_path, make_tarball):
        archive = make_tarball("flat.tar.gz", [
            ("META.yml", "name: Flat\n"),
            ("README", "hello\n"),
        ])
        dest = tmp_path / "work"
        dest.mkdir()

        root = extract_archive(archive, str(dest))

        assert root == str(dest)
        assert (dest / "META.yml").is_file()
        assert (dest / "README").is_file()

    def test_dot_slash_prefix_is_ignored(self, tmp_path, make_tarball):
        archive = make_tarball("dot.tar.gz", [
            ("./", None),
            ("./Dot-1.0/", None),
            ("./Dot-1.0/META.yml", "name: Dot\n"),
        ])
        dest = tmp_path / "work"
        dest.mkdir()

        assert extract_archive(archive, str(dest)) == str(dest / "Dot-1.0")

    def test_existing_files_are_overwritten(self, tmp_path, make_tarball):
        dest = tmp_path / "work"
        (dest / "Foo-1.0").mkdir(parents=True)
        (dest / "Foo-1.0" / "META.yml").write_text("stale and much longer content\n")
        archive = make_tarball("Foo-1.0.tar.gz", dist_entries("Foo-1.0", "name: Foo\n"))

        extract_archive(archive, str(dest))

        assert (dest / "Foo-1.0" / "META.yml").read_text() == "name: Foo\n"

    def test_symlink_entry_fails_and_removes_root(self, tmp_path, make_tarball):
        archive = make_tarball("Bad-1.0.tar.gz", dist_entries("Bad-1.0", "name: Bad\n", [
            ("Bad-1.0/link", ("symlink", "META.yml")),
        ]))
        dest = tmp_path / "work"
        dest.mkdir()

        with pytest.raises(UnpackError, match="unknown type"):
            extract_archive(archive, str(dest))

        assert not (dest / "Bad-1.0").exists()

    def test_entry_escaping_destination_is_rejected(self, tmp_path, make_tarball):
        archive = make_tarball("evil.tar.gz", [
            ("Evil-1.0/", None),
            ("Evil-1.0/../../escaped.txt", "boom"),
        ])
        dest = tmp_path / "work"
        dest.mkdir()

        with pytest.raises(UnpackError):
            extract_archive(archive, str(dest))

        assert not (tmp_path / "escaped.txt").exists()
        assert not (dest / "Evil-1.0").exists()

    def test_not_an_archive(self, tmp_path):
        bogus = tmp_path / "bogus.tar.gz"
        bogus.write_bytes(b"this is not a tarball")
        dest = tmp_path / "work"
        dest.mkdir()

        with pytest.raises(UnpackError):
            extract_archive(str(bogus), str(dest))

        assert os.listdir(dest) == []


def test_distribution_cleanup_removes_extracted_tree(tmp_path, make_tarball):
    from cpan.models import Distribution
    archive = make_tarball("Foo-1.0.tar.gz", dist_entries("Foo-1.0", "name: Foo\n"))
    dist = Distribution("F/FO/FOO/Foo-1.0.tar.gz")
    dist.work_dir = extract_archive(str(archive), str(tmp_path))

    dist.cleanup()

    assert not os.path.exists(dist.work_dir)
    dist.cleanup()
