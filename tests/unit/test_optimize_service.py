from shopfront_media.domain.services.optimize_service import OptimizeService
from tests.helpers.images import make_image_bytes, open_image


def test_wide_jpeg_is_shrunk_and_gets_webp_sibling(tmp_path):
    path = tmp_path / "product-1.jpg"
    path.write_bytes(make_image_bytes(2000, 1000))

    assert OptimizeService(max_width=1600, quality=85).optimize_in_place(path) is True

    optimized = open_image(path.read_bytes())
    assert optimized.format == "JPEG"
    assert optimized.size == (1600, 800)
    sibling = open_image((tmp_path / "product-1.webp").read_bytes())
    assert sibling.format == "WEBP"
    assert sibling.size == (1600, 800)
    assert not (tmp_path / "product-1_temp.jpg").exists()


def test_small_png_keeps_size_and_format(tmp_path):
    path = tmp_path / "logo.png"
    path.write_bytes(make_image_bytes(300, 200, fmt="PNG"))

    assert OptimizeService().optimize_in_place(path) is True

    optimized = open_image(path.read_bytes())
    assert optimized.format == "PNG"
    assert optimized.size == (300, 200)
    assert (tmp_path / "logo.webp").exists()


def test_webp_original_has_no_sibling(tmp_path):
    path = tmp_path / "photo.webp"
    path.write_bytes(make_image_bytes(1700, 100, fmt="WEBP"))

    assert OptimizeService().optimize_in_place(path) is True

    optimized = open_image(path.read_bytes())
    assert optimized.format == "WEBP"
    assert optimized.width == 1600
    assert sorted(p.name for p in tmp_path.iterdir()) == ["photo.webp"]


def test_gif_stays_gif(tmp_path):
    path = tmp_path / "anim.gif"
    path.write_bytes(make_image_bytes(50, 50, fmt="GIF"))

    assert OptimizeService().optimize_in_place(path) is True
    assert open_image(path.read_bytes()).format == "GIF"


def test_corrupt_file_returns_false_and_is_left_untouched(tmp_path):
    path = tmp_path / "broken.jpg"
    path.write_bytes(b"not an image")

    assert OptimizeService().optimize_in_place(path) is False
    assert path.read_bytes() == b"not an image"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["broken.jpg"]
