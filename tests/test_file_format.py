import pytest

from io import BytesIO

import os

import json

from media_decoders.tables import AudioFormats, ImageFormats

from media_decoders.assets import DecodedImage, DecodedAudio, PcmStream

from media_decoders.file_format import (
    get_metadata_and_data_filenames,
    read_metadata,
    write_metadata,
    write_image,
    write_audio,
    read,
)

from media_decoders.decoder import TruncatedStream


class ShortReader(object):
    """A file-like object which returns at most 'limit' bytes per read."""

    def __init__(self, data, limit):
        self._file = BytesIO(data)
        self._limit = limit

    def read(self, size=-1):
        if size is None or size < 0 or size > self._limit:
            size = self._limit
        return self._file.read(size)


def test_get_metadata_and_data_filenames():
    assert get_metadata_and_data_filenames("/foo/bar/.baz.xxx") == (
        "/foo/bar/.baz.json",
        "/foo/bar/.baz.raw",
    )


@pytest.fixture
def image():
    return DecodedImage(
        format=ImageFormats.rgb,
        width=2,
        height=3,
        depth=1,
        level=2,
        data=bytes(range(18)),
    )


@pytest.fixture
def audio():
    return DecodedAudio(
        format=AudioFormats.stereo_16,
        sample_rate=48000,
        frames=3,
        data=bytes(range(12)),
    )


class TestMetadata(object):
    def test_image(self, image):
        f = BytesIO()
        write_metadata(image, f)
        assert json.loads(f.getvalue().decode("utf-8")) == {
            "kind": "image",
            "format": "rgb",
            "width": 2,
            "height": 3,
            "depth": 1,
            "level": 2,
        }

        f.seek(0)
        metadata = read_metadata(f)
        assert isinstance(metadata, DecodedImage)
        assert metadata["format"] is ImageFormats.rgb
        assert "data" not in metadata

    def test_audio(self, audio):
        f = BytesIO()
        write_metadata(audio, f)
        assert json.loads(f.getvalue().decode("utf-8")) == {
            "kind": "audio",
            "format": "stereo_16",
            "sample_rate": 48000,
            "frames": 3,
        }

        f.seek(0)
        metadata = read_metadata(f)
        assert isinstance(metadata, DecodedAudio)
        assert metadata["format"] is AudioFormats.stereo_16

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            read_metadata(BytesIO(b'{"kind": "video"}'))


class TestReadAndWrite(object):
    def test_image(self, image, tmp_path):
        filename = os.path.join(str(tmp_path), "image.xxx")
        write_image(image, filename)

        assert set(os.listdir(str(tmp_path))) == set(["image.raw", "image.json"])
        with open(os.path.join(str(tmp_path), "image.raw"), "rb") as f:
            assert f.read() == bytes(range(18))

        assert read(filename) == image

    def test_compressed_image(self, tmp_path):
        image = DecodedImage(
            format=ImageFormats.rgba_dxt5,
            width=5,
            height=5,
            depth=1,
            level=0,
            data=bytes(64),
        )
        filename = os.path.join(str(tmp_path), "image.raw")
        write_image(image, filename)
        assert read(filename) == image

    def test_audio(self, audio, tmp_path):
        filename = os.path.join(str(tmp_path), "audio.json")
        write_audio(audio, filename)
        assert read(filename) == audio

    def test_streamed_audio(self, audio, tmp_path):
        source = BytesIO(b"header" + audio["data"] + b"trailer")
        source.seek(6)
        streamed = DecodedAudio(audio)
        streamed["data"] = PcmStream(source, 6, len(audio["data"]))

        filename = os.path.join(str(tmp_path), "audio.raw")
        write_audio(streamed, filename)

        assert read(filename) == audio
        assert not source.closed

    def test_streamed_audio_short_reads(self, audio, tmp_path):
        source = ShortReader(audio["data"], 5)
        streamed = DecodedAudio(audio)
        streamed["data"] = PcmStream(source, None, len(audio["data"]))

        filename = os.path.join(str(tmp_path), "audio.raw")
        write_audio(streamed, filename)

        assert read(filename) == audio

    def test_streamed_audio_ends_early(self, audio, tmp_path):
        source = ShortReader(audio["data"][:7], 5)
        streamed = DecodedAudio(audio)
        streamed["data"] = PcmStream(source, None, len(audio["data"]))

        filename = os.path.join(str(tmp_path), "audio.raw")
        with pytest.raises(TruncatedStream) as exc_info:
            write_audio(streamed, filename)
        assert exc_info.value.num_bytes == 12
        assert exc_info.value.num_read == 7
        assert os.listdir(str(tmp_path)) == []

    def test_image_length_mismatch(self, image, tmp_path):
        filename = os.path.join(str(tmp_path), "image.raw")
        write_image(image, filename)
        with open(filename, "ab") as f:
            f.write(b"\x00")

        with pytest.raises(ValueError):
            read(filename)
