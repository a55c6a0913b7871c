import pytest

from media_builders import (
    make_simple_wave,
    make_simple_png,
    make_dds_header,
    SAMPLE_PCM,
    SAMPLE_PNG_ROWS,
    SAMPLE_DDS_PIXELS,
)


@pytest.fixture
def asset_dir(tmpdir):
    """
    A temporary directory containing one valid file of each supported type:
    'tone.wav', 'image.png' and 'texture.dds'.
    """
    tmpdir.join("tone.wav").write_binary(make_simple_wave(SAMPLE_PCM))
    tmpdir.join("image.png").write_binary(
        make_simple_png(SAMPLE_PNG_ROWS, 2, 2, color_type=2, bpp=3)
    )
    tmpdir.join("texture.dds").write_binary(make_dds_header(4, 4) + SAMPLE_DDS_PIXELS)
    return tmpdir
