"""Tests for the OpenCV-backed LayerStack."""

import cv2
import numpy as np
import pytest

from trailr.core.apply import ApplyRunner, LayerAssignment
from trailr.core.blend import BlendMode
from trailr.core.errors import LayerLoadError, LayerStackError
from trailr.core.layers import Layer, LayerStack, read_rgb


def write_png(path, bgr):
    ok, buf = cv2.imencode(".png", np.asarray(bgr, dtype=np.uint8))
    assert ok
    buf.tofile(str(path))
    return path


@pytest.fixture
def image_files(tmp_path):
    red = np.zeros((4, 6, 3), np.uint8)
    red[..., 2] = 255                      # BGR
    grey = np.full((8, 12, 3), 128, np.uint8)
    blue = np.zeros((4, 6, 3), np.uint8)
    blue[..., 0] = 255
    return [
        write_png(tmp_path / "top.png", red),
        write_png(tmp_path / "middle.png", grey),
        write_png(tmp_path / "bottom_ü.png", blue),
    ]


class TestLoading:
    def test_read_rgb_converts_from_bgr(self, image_files):
        img = read_rgb(image_files[0])
        assert img.dtype == np.float32
        assert img.shape == (4, 6, 3)
        assert np.allclose(img[0, 0], [1.0, 0.0, 0.0])

    def test_from_files_resizes_to_first_layer(self, image_files):
        stack = LayerStack.from_files(image_files)
        assert len(stack) == 3
        assert [l.name for l in stack] == ["top", "middle", "bottom_ü"]
        assert all(l.image.shape == (4, 6, 3) for l in stack)

    def test_missing_file(self, tmp_path):
        with pytest.raises(LayerLoadError):
            read_rgb(tmp_path / "nope.png")

    def test_undecodable_file(self, tmp_path):
        bad = tmp_path / "bad.png"
        bad.write_bytes(b"not an image")
        with pytest.raises(LayerLoadError):
            read_rgb(bad)

    def test_empty_file(self, tmp_path):
        empty = tmp_path / "empty.png"
        empty.write_bytes(b"")
        with pytest.raises(LayerLoadError, match="empty file"):
            read_rgb(empty)

    def test_empty_file_fails_whole_stack(self, tmp_path, image_files):
        empty = tmp_path / "empty.png"
        empty.write_bytes(b"")
        with pytest.raises(LayerLoadError):
            LayerStack.from_files([*image_files, empty])


class TestApplyBatch:
    def test_runner_writes_opacity_and_blend(self, image_files, default_model):
        stack = LayerStack.from_files(image_files)
        ApplyRunner().run(default_model.sample, stack, "lighten")
        assert [l.opacity for l in stack] == pytest.approx([100.0, 50.0, 0.0])
        assert {l.blend_mode for l in stack} == {BlendMode.LIGHTEN}

    def test_foreign_layer_rejected_without_partial_writes(self):
        mine = Layer(name="mine", opacity=100.0)
        stack = LayerStack([mine])
        batch = [
            LayerAssignment(mine, 10.0, BlendMode.SCREEN),
            LayerAssignment(Layer(name="stranger"), 20.0, BlendMode.SCREEN),
        ]
        with pytest.raises(LayerStackError):
            stack.apply_batch(batch, "test")
        assert mine.opacity == 100.0
        assert mine.blend_mode is BlendMode.NORMAL

    def test_out_of_range_opacity_rejected(self):
        layer = Layer()
        stack = LayerStack([layer])
        with pytest.raises(LayerStackError):
            stack.apply_batch([LayerAssignment(layer, float("nan"), BlendMode.NORMAL)])


class TestComposite:
    def test_top_layer_wins_at_full_opacity(self):
        white = np.ones((2, 2, 3), np.float32)
        black = np.zeros((2, 2, 3), np.float32)
        stack = LayerStack([Layer(image=white), Layer(image=black)])
        out = stack.composite()
        assert out.dtype == np.uint8
        assert (out == 255).all()

    def test_opacity_mixes_with_layers_below(self):
        white = np.ones((2, 2, 3), np.float32)
        black = np.zeros((2, 2, 3), np.float32)
        stack = LayerStack([Layer(image=white, opacity=50.0), Layer(image=black)])
        assert (stack.composite() == 128).all()

    def test_empty_stack(self):
        with pytest.raises(LayerStackError):
            LayerStack().composite()
