import io

import pytest

from pnmimage import (
    BufferSizeError,
    Gray,
    GrayImage,
    Image,
    ImageIOError,
    ImageRepository,
    Rgb,
    RgbImage,
)

HEADER_2X1 = b"P6\n2 1\n255\n"


def test_color_round_trip(tmp_path):
    img = RgbImage(pixels=[Rgb(r, 255 - r, r // 2) for r in range(0, 256, 17)],
                   width=4, height=4, denominator=100)
    path = tmp_path / "out.ppm"
    img.write(path)
    back = RgbImage.read(path)
    assert (back.width, back.height) == (4, 4)
    assert back.pixels == img.pixels
    assert back.denominator == 255


def test_output_is_binary_ppm(tmp_path):
    img = RgbImage(pixels=[Rgb(1, 2, 3), Rgb(4, 5, 6)], width=2, height=1)
    path = tmp_path / "out.ppm"
    img.write(path)
    assert path.read_bytes() == HEADER_2X1 + bytes([1, 2, 3, 4, 5, 6])


def test_channels_above_255_saturate():
    img = RgbImage(pixels=[Rgb(300, 255, 12), Rgb(256, 70000, 254)], width=2, height=1)
    assert ImageRepository.encode(img) == HEADER_2X1 + bytes([255, 255, 12, 255, 255, 254])


def test_negative_channels_floor_at_zero():
    img = GrayImage(pixels=[Gray(-5)], width=1, height=1)
    assert ImageRepository.encode(img)[-3:] == b"\x00\x00\x00"


def test_gray_is_replicated_into_color():
    img = GrayImage(pixels=[Gray(0), Gray(200)], width=2, height=1)
    assert ImageRepository.encode(img) == HEADER_2X1 + bytes([0, 0, 0, 200, 200, 200])


def test_small_denominator_is_not_rescaled():
    # A 9-level grid writes raw values 0..9, i.e. an almost black image.
    # This pins the fixed clamp-to-255 behavior, not a rescale by denominator.
    img = GrayImage(pixels=[Gray(1), Gray(9)], width=2, height=1, denominator=9)
    assert ImageRepository.encode(img) == HEADER_2X1 + bytes([1, 1, 1, 9, 9, 9])


def test_gray_read_of_color_then_write(tmp_path, pnm, write_file):
    src = write_file("c.ppm", pnm(b"P6", 1, 1, [1, 2, 2]))
    dst = tmp_path / "g.ppm"
    GrayImage.read(src).write(dst)
    assert dst.read_bytes() == b"P6\n1 1\n255\n\x01\x01\x01"


def test_untyped_image_can_be_written():
    img = Image(pixels=[Rgb(9, 9, 9)], width=1, height=1)
    assert ImageRepository.encode(img).endswith(b"\t\t\t")


def test_buffer_size_mismatch_writes_nothing(tmp_path, capsysbinary):
    img = GrayImage(pixels=[Gray(1)] * 3, width=2, height=2)
    path = tmp_path / "out.ppm"
    with pytest.raises(BufferSizeError):
        img.write(path)
    assert not path.exists()

    with pytest.raises(BufferSizeError):
        img.write()
    assert capsysbinary.readouterr().out == b""


def test_zero_area_image_is_header_only():
    img = RgbImage(pixels=[], width=0, height=3)
    assert ImageRepository.encode(img) == b"P6\n0 3\n255\n"


def test_existing_file_is_truncated(tmp_path):
    path = tmp_path / "out.ppm"
    path.write_bytes(b"x" * 1000)
    GrayImage(pixels=[Gray(5)], width=1, height=1).write(path)
    assert path.read_bytes() == b"P6\n1 1\n255\n\x05\x05\x05"


def test_writes_stdout_when_no_path(capsysbinary):
    RgbImage(pixels=[Rgb(7, 8, 9)], width=1, height=1).write()
    assert capsysbinary.readouterr().out == b"P6\n1 1\n255\n\x07\x08\x09"


def test_writes_to_open_binary_file():
    sink = io.BytesIO()
    ImageRepository.save(GrayImage(pixels=[Gray(3)], width=1, height=1), sink)
    assert sink.getvalue() == b"P6\n1 1\n255\n\x03\x03\x03"


def test_unwritable_sink_is_an_io_error(tmp_path):
    img = GrayImage(pixels=[Gray(3)], width=1, height=1)
    with pytest.raises(ImageIOError):
        img.write(tmp_path / "missing-dir" / "out.ppm")


def test_module_level_read_and_write(tmp_path):
    import pnmimage
    from pnmimage import PixelKind

    path = tmp_path / "m.ppm"
    pnmimage.write(RgbImage(pixels=[Rgb(3, 6, 9)], width=1, height=1), path)
    assert pnmimage.read(path).pixels == (Rgb(3, 6, 9),)
    assert pnmimage.read(path, kind=PixelKind.GRAY).pixels == (Gray(6),)
