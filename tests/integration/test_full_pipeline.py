"""Integration tests for the complete layout-to-faces pipeline."""

import os
import sys

import numpy as np
import pytest
from PIL import Image

from skybox_beautifier.core.extract import ExtractionConfig, FailurePolicy, extract_faces
from skybox_beautifier.core.layout import (
    FACE_ORDER,
    LAYOUT_POSITIONS,
    FaceLayout,
    FaceName,
    Region,
    resolve_regions,
)


def cell_color(col, row):
    return (40 + col * 50, 40 + row * 70, 200 - col * 30)


def create_cross_texture(path, face_size):
    """Create a 4x3 cross texture with a distinct colour per cell."""
    array = np.zeros((3 * face_size, 4 * face_size, 3), dtype=np.uint8)
    for row in range(3):
        for col in range(4):
            array[row * face_size:(row + 1) * face_size,
                  col * face_size:(col + 1) * face_size] = cell_color(col, row)
    Image.fromarray(array).save(path)
    return path


class TestFullPipelineIntegration:
    """Resolve regions and extract real faces from a texture."""

    def test_512_faces_from_2048x1536_texture(self, tmp_path):
        source = create_cross_texture(tmp_path / "skybox.png", 512)
        save_dir = tmp_path / "faces"
        save_dir.mkdir()

        regions = resolve_regions(512, FaceLayout.TOP_FRONT_BOTTOM)
        outcome = extract_faces(source, save_dir, regions)

        assert outcome.success
        assert outcome.elapsed_ms >= 0
        assert outcome.saved_directory == save_dir
        assert regions[FACE_ORDER.index(FaceName.TOP)] == Region(left=512, top=0, width=512, height=512)

        assert sorted(p.name for p in save_dir.iterdir()) == sorted(f.filename for f in FACE_ORDER)
        for face in FACE_ORDER:
            with Image.open(save_dir / face.filename) as img:
                assert img.size == (512, 512)

    @pytest.mark.parametrize("layout", list(FaceLayout))
    def test_faces_hold_the_expected_cells(self, tmp_path, layout):
        face_size = 16
        source = create_cross_texture(tmp_path / "skybox.png", face_size)

        outcome = extract_faces(source, tmp_path, resolve_regions(face_size, layout))
        assert outcome.success

        for face, position in zip(FACE_ORDER, LAYOUT_POSITIONS[layout]):
            with Image.open(tmp_path / face.filename) as img:
                pixels = np.array(img.convert("RGB"))
            assert (pixels == cell_color(position.left, position.top)).all(), face

    def test_4096_faces_from_16384x12288_texture(self, tmp_path):
        """Textures above Pillow's stock pixel limit still decode."""
        source = tmp_path / "skybox.png"
        Image.new("1", (16384, 12288)).save(source)
        save_dir = tmp_path / "faces"
        save_dir.mkdir()

        outcome = extract_faces(source, save_dir, resolve_regions(4096, FaceLayout.TOP_FRONT_BOTTOM))

        assert outcome.success, outcome.cause
        for face in FACE_ORDER:
            with Image.open(save_dir / face.filename) as img:
                assert img.size == (4096, 4096)

    def test_undersized_texture_fails(self, tmp_path):
        source = create_cross_texture(tmp_path / "skybox.png", 16)
        save_dir = tmp_path / "faces"
        save_dir.mkdir()

        outcome = extract_faces(source, save_dir, resolve_regions(32, FaceLayout.TOP_FRONT_BOTTOM))

        assert not outcome.success
        assert isinstance(outcome.cause, ValueError)
        assert "bad extract area" in str(outcome.cause)

    def test_missing_source_fails(self, tmp_path):
        outcome = extract_faces(
            tmp_path / "missing.png", tmp_path, resolve_regions(16, FaceLayout.TOP_FRONT_BOTTOM)
        )

        assert not outcome.success
        assert isinstance(outcome.cause, FileNotFoundError)
        assert len(outcome.failures) == 6

    @pytest.mark.skipif(
        sys.platform == "win32" or (hasattr(os, "geteuid") and os.geteuid() == 0),
        reason="directory permissions are not enforced",
    )
    def test_unwritable_destination_fails(self, tmp_path):
        source = create_cross_texture(tmp_path / "skybox.png", 16)
        save_dir = tmp_path / "locked"
        save_dir.mkdir()
        save_dir.chmod(0o500)

        try:
            outcome = extract_faces(source, save_dir, resolve_regions(16, FaceLayout.TOP_FRONT_BOTTOM))
        finally:
            save_dir.chmod(0o700)

        assert not outcome.success
        assert isinstance(outcome.cause, PermissionError)

    def test_fail_fast_policy(self, tmp_path):
        config = ExtractionConfig(failure_policy=FailurePolicy.FAIL_FAST)

        outcome = extract_faces(
            tmp_path / "missing.png",
            tmp_path,
            resolve_regions(16, FaceLayout.TOP_RIGHT_BOTTOM),
            config=config,
        )

        assert not outcome.success
        assert isinstance(outcome.cause, FileNotFoundError)
        assert len(outcome.results) >= 1
