"""
Tests for the example source bundle reader.
"""
import zipfile

import pytest

from wikigraph.bundle import ZipExampleBundle
from wikigraph.exceptions import BundleUnavailableError


@pytest.fixture
def bundle_path(tmp_path):
    path = tmp_path / "examples.zip"
    with zipfile.ZipFile(path, "w") as zip_file:
        zip_file.writestr("examples/lz77/src/main/java/", "")
        zip_file.writestr("examples/lz77/src/main/java/LZ77Codeword.java", "class LZ77Codeword {}")
        zip_file.writestr("examples/other/src/main/java/LZ77Codeword.java", "class Other {}")
        zip_file.writestr("examples/czech/Pozdrav.java", "// Dobrý den")
    return path


def test_find_by_suffix_first_match_wins(bundle_path):
    entry = ZipExampleBundle([bundle_path]).find_by_suffix("LZ77Codeword.java")

    assert entry.name == "examples/lz77/src/main/java/LZ77Codeword.java"
    assert entry.contents == "class LZ77Codeword {}"


def test_find_by_longer_suffix(bundle_path):
    entry = ZipExampleBundle([bundle_path]).find_by_suffix("other/src/main/java/LZ77Codeword.java")
    assert entry.contents == "class Other {}"


def test_contents_decoded_as_utf8(bundle_path):
    entry = ZipExampleBundle([bundle_path]).find_by_suffix("Pozdrav.java")
    assert entry.contents == "// Dobrý den"


def test_no_match_returns_none(bundle_path):
    assert ZipExampleBundle([bundle_path]).find_by_suffix("Missing.java") is None


def test_fallback_candidate_used(tmp_path, bundle_path):
    bundle = ZipExampleBundle([tmp_path / "absent.zip", bundle_path])
    assert bundle.locate() == bundle_path


def test_missing_bundle_raises(tmp_path):
    with pytest.raises(BundleUnavailableError):
        ZipExampleBundle([tmp_path / "absent.zip"]).find_by_suffix("Foo.java")


def test_corrupt_bundle_raises(tmp_path):
    path = tmp_path / "broken.zip"
    path.write_bytes(b"this is not a zip archive")
    with pytest.raises(BundleUnavailableError):
        ZipExampleBundle([path]).find_by_suffix("Foo.java")
