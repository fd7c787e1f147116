import re

import pytest
import yaml

from avif_batch.cli import get_args
from avif_batch.config import image as image_config
from avif_batch.domain.exceptions import (
    EncoderNotFoundException,
    InputDirectoryException,
    NoMatchingFilesException,
)
from avif_batch.pipeline.conversion_pipeline import ConversionPipeline, normalize_format
from avif_batch.services import encoder_service
from avif_batch.utils.module_utils import Modules
from tests.conftest import FakeAvifenc, temp_leftovers


@pytest.fixture
def avifenc_available(monkeypatch):
    monkeypatch.setattr(Modules, "require_avifenc", staticmethod(lambda *args, **kwargs: "avifenc"))


@pytest.fixture
def in_dir(tmp_path):
    path = tmp_path / "in"
    path.mkdir()
    return path


@pytest.fixture
def out_dir(tmp_path):
    return tmp_path / "out"


def _pipeline(*argv):
    return ConversionPipeline(get_args(list(argv)))


def test_three_pngs_halved(fake_avifenc, avifenc_available, make_file, in_dir, out_dir):
    for name, size in [("a.png", 100), ("b.png", 200), ("c.png", 300)]:
        make_file(f"in/{name}", size=size)

    summary = _pipeline(
        "--input", str(in_dir), "--output", str(out_dir), "--format", "png", "--workers", "2"
    ).run()

    assert summary.success_count == 3
    assert summary.failure_count == 0
    assert summary.total_original_bytes == 600
    assert summary.total_converted_bytes == 300
    assert summary.reduction_percent == pytest.approx(50.0)
    outputs = sorted(p.name for p in out_dir.iterdir())
    assert len(outputs) == 3
    assert all(re.fullmatch(r"\d{8}_[0-9a-f]{6}(-\d+)?\.avif", name) for name in outputs)


def test_failing_encoder(monkeypatch, avifenc_available, make_file, in_dir, out_dir):
    monkeypatch.setattr(encoder_service, "run_cmd", FakeAvifenc(returncode=1, output="decode error"))
    make_file("in/photo.jpg", size=50)

    summary = _pipeline("--input", str(in_dir), "--output", str(out_dir), "--format", "jpg").run()

    assert summary.success_count == 0
    assert summary.failure_count == 1
    assert "decode error" in summary.failures[0].error
    assert summary.reduction_percent == 0.0
    assert list(out_dir.iterdir()) == []


def test_output_defaults_to_input_dir(fake_avifenc, avifenc_available, make_file, in_dir):
    make_file("in/photo.jpeg", size=10)

    summary = _pipeline("--input", str(in_dir), "--format", "JPEG", "--keep-name").run()

    assert summary.success_count == 1
    assert (in_dir / "photo.avif").exists()
    assert temp_leftovers(in_dir) == []


def test_keep_name_runs_never_overwrite(fake_avifenc, avifenc_available, make_file, in_dir, out_dir):
    make_file("in/one.png", size=10)
    make_file("in/two.png", size=20)
    argv = ["--input", str(in_dir), "--output", str(out_dir), "--format", "png", "--keep-name", "--prefix", "p"]

    _pipeline(*argv).run()
    first = {p.name: p.read_bytes() for p in out_dir.iterdir()}
    _pipeline(*argv).run()

    names = sorted(p.name for p in out_dir.iterdir())
    assert names == ["p_one-1.avif", "p_one.avif", "p_two-1.avif", "p_two.avif"]
    assert {name: (out_dir / name).read_bytes() for name in first} == first


def test_nested_sources_flatten_into_output(fake_avifenc, avifenc_available, make_file, in_dir, out_dir):
    make_file("in/x/cat.png", size=10)
    make_file("in/y/cat.png", size=10)

    summary = _pipeline(
        "--input", str(in_dir), "--output", str(out_dir), "--format", "png", "--keep-name", "--workers", "1"
    ).run()

    assert summary.success_count == 2
    assert sorted(p.name for p in out_dir.iterdir()) == ["cat-1.avif", "cat.avif"]


def test_dry_run_previews_without_writing(fake_avifenc, monkeypatch, make_file, in_dir, out_dir):
    def no_encoder(*args, **kwargs):
        raise AssertionError("encoder must not be resolved in dry-run mode")

    monkeypatch.setattr(Modules, "require_avifenc", staticmethod(no_encoder))
    make_file("in/a.png", size=10)
    make_file("in/b.png", size=10)
    pipeline = _pipeline(
        "--input", str(in_dir), "--output", str(out_dir), "--format", "png", "--keep-name", "--dry-run"
    )

    assert pipeline.run() is None
    entries = pipeline.preview(pipeline.select_jobs(pipeline.scan()))

    assert sorted(e.destination for e in entries) == [out_dir / "a.avif", out_dir / "b.avif"]
    assert not out_dir.exists()
    assert fake_avifenc.calls == []


def test_dry_run_uniquifies_against_existing_outputs(make_file, in_dir):
    make_file("in/a.png", size=10)
    make_file("in/a.avif", size=1)
    pipeline = _pipeline("--input", str(in_dir), "--format", "png", "--keep-name", "--dry-run")

    (entry,) = pipeline.preview(pipeline.select_jobs(pipeline.scan()))

    assert entry.destination == in_dir / "a-1.avif"


def test_list_only_stops_after_scan(fake_avifenc, make_file, in_dir):
    make_file("in/a.png")
    assert _pipeline("--input", str(in_dir), "--format", "png", "--list").run() is None
    assert fake_avifenc.calls == []


def test_missing_format_does_nothing(fake_avifenc, make_file, in_dir):
    make_file("in/a.png")
    assert _pipeline("--input", str(in_dir)).run() is None
    assert fake_avifenc.calls == []


def test_missing_input_directory_is_fatal(tmp_path):
    with pytest.raises(InputDirectoryException):
        _pipeline("--input", str(tmp_path / "nope"), "--format", "png").run()


def test_no_matching_files_is_fatal(make_file, in_dir):
    make_file("in/a.png")
    with pytest.raises(NoMatchingFilesException):
        _pipeline("--input", str(in_dir), "--format", "heic").run()


def test_missing_encoder_is_fatal_before_any_work(fake_avifenc, monkeypatch, make_file, in_dir, out_dir):
    monkeypatch.setattr("avif_batch.utils.module_utils.shutil.which", lambda name: None)
    make_file("in/a.png")

    with pytest.raises(EncoderNotFoundException):
        _pipeline("--input", str(in_dir), "--output", str(out_dir), "--format", "png").run()

    assert fake_avifenc.calls == []
    assert not out_dir.exists()


def test_summary_yaml_report(fake_avifenc, avifenc_available, make_file, in_dir, out_dir, tmp_path):
    make_file("in/a.png", size=100)
    report_path = tmp_path / "reports" / "run.yaml"

    _pipeline(
        "--input", str(in_dir), "--output", str(out_dir), "--format", "png", "--summary-yaml", str(report_path)
    ).run()

    report = yaml.safe_load(report_path.read_text(encoding="utf-8"))
    assert report["source_format"] == "png"
    assert report["success"] == 1
    assert report["failed"] == 0
    assert report["total_original_bytes"] == 100
    assert report["total_converted_bytes"] == 50
    assert report["reduction_percent"] == 50.0
    assert report["failures"] == []


@pytest.mark.parametrize("raw, expected", [(".JPEG", "jpg"), ("png", "png"), ("", ""), (None, "")])
def test_normalize_format(raw, expected):
    assert normalize_format(raw) == expected


def test_dry_run_continues_past_unnamable_file(monkeypatch, make_file, in_dir):
    monkeypatch.setattr(image_config, "MAX_UNIQUE_ATTEMPTS", 1)
    make_file("in/a.png")
    make_file("in/b.png")
    make_file("in/a.avif")
    make_file("in/a-1.avif")
    pipeline = _pipeline("--input", str(in_dir), "--format", "png", "--keep-name", "--dry-run")

    assert pipeline.run() is None
    entries = pipeline.preview(pipeline.select_jobs(pipeline.scan()))

    assert [(e.source.name, e.destination) for e in entries] == [("b.png", in_dir / "b.avif")]


def test_each_result_is_reported_once(fake_avifenc, avifenc_available, monkeypatch, make_file, in_dir, out_dir):
    reported = []
    monkeypatch.setattr(ConversionPipeline, "report_result", staticmethod(reported.append))
    make_file("in/a.png", size=10)
    make_file("in/b.png", size=20)

    summary = _pipeline("--input", str(in_dir), "--output", str(out_dir), "--format", "png").run()

    assert sorted(r.source.name for r in reported) == ["a.png", "b.png"]
    assert summary.success_count == 2
