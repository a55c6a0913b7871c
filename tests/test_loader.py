import pytest

from mock import Mock

from media_decoders.tables import (
    AudioFormats,
    ImageFormats,
    TextureDimensions,
    TextureFilters,
    TextureBorders,
)

from media_decoders.assets import AudioDescriptor, TextureDescriptor, PcmStream

from media_decoders.exceptions import UnknownAssetTypeError, AssetNotFoundError

from media_decoders.decoder import (
    BadMagic,
    UnsupportedCubeMap,
)

from media_decoders.loader import (
    AssetManager,
    load_wave,
    load_png_texture,
    load_dds_texture,
)

from media_builders import (
    make_simple_png,
    make_dds_header,
    DDSCAPS2_CUBEMAP,
    SAMPLE_PCM,
    SAMPLE_PNG_ROWS,
    SAMPLE_DDS_PIXELS,
)


@pytest.fixture
def manager(asset_dir):
    return AssetManager(str(asset_dir))


class TestDefaultLoaders(object):
    def test_wave(self, manager):
        audio = manager.load_asset("tone.wav")
        assert audio["format"] == AudioFormats.mono_8
        assert audio["data"] == SAMPLE_PCM

    def test_png(self, manager):
        texture = manager.load_asset("image.png")
        assert texture["dimensions"] == TextureDimensions.texture_2d
        (image,) = texture["images"]
        assert image["format"] == ImageFormats.rgb
        assert image["data"] == b"".join(SAMPLE_PNG_ROWS)

    def test_one_dimensional_png(self, manager, asset_dir):
        asset_dir.join("line.png").write_binary(
            make_simple_png([b"\x01\x02\x03"], 3, -1, color_type=0)
        )
        texture = manager.load_asset("line.png")
        assert texture["dimensions"] == TextureDimensions.texture_1d
        assert texture["images"][0]["height"] == 1

    def test_dds(self, manager):
        texture = manager.load_asset("texture.dds")
        assert texture["dimensions"] == TextureDimensions.texture_2d
        (image,) = texture["images"]
        assert image["format"] == ImageFormats.rgba
        assert image["data"] == SAMPLE_DDS_PIXELS

    def test_dds_cube_map_rejected(self, manager, asset_dir):
        # No pixel data: the cube map must be rejected before it is needed
        asset_dir.join("sky.dds").write_binary(
            make_dds_header(4, 4, caps2=DDSCAPS2_CUBEMAP)
        )
        with pytest.raises(UnsupportedCubeMap):
            manager.load_asset("sky.dds")

    def test_default_texture_descriptor(self, manager):
        descriptor = manager.load_asset("image.png")["descriptor"]
        assert descriptor == TextureDescriptor(
            filter=TextureFilters.bilinear,
            border_x=TextureBorders.repeat,
            border_y=TextureBorders.repeat,
            border_z=TextureBorders.repeat,
        )

    @pytest.mark.parametrize("filename", ["image.png", "texture.dds"])
    def test_texture_descriptor_passed_through(self, manager, filename):
        descriptor = TextureDescriptor(
            filter=TextureFilters.trilinear,
            border_x=TextureBorders.clamp_to_edge,
            border_y=TextureBorders.mirrored_repeat,
            border_z=TextureBorders.repeat,
        )
        assert manager.load_asset(filename, descriptor)["descriptor"] is descriptor

    @pytest.mark.parametrize("extension", [".WAV", ".Wav", ".wave"])
    def test_extension_case_insensitive(self, manager, asset_dir, extension):
        asset_dir.join("tone.wav").copy(asset_dir.join("other" + extension))
        assert manager.load_asset("other" + extension)["data"] == SAMPLE_PCM

    def test_no_root(self, asset_dir):
        manager = AssetManager()
        texture = manager.load_asset(str(asset_dir.join("texture.dds")))
        assert texture["images"][0]["data"] == SAMPLE_DDS_PIXELS

    def test_subdirectory(self, manager, asset_dir):
        asset_dir.mkdir("sub").join("tone.wav").write_binary(
            asset_dir.join("tone.wav").read_binary()
        )
        assert manager.load_asset("sub/tone.wav")["data"] == SAMPLE_PCM


class TestFileOwnership(object):
    @pytest.fixture
    def opened_files(self, manager, monkeypatch):
        files = []
        find_asset = manager.find_asset

        def recording_find_asset(filename):
            f = find_asset(filename)
            files.append(f)
            return f

        monkeypatch.setattr(manager, "find_asset", recording_find_asset)
        return files

    def test_closed_after_load(self, manager, opened_files):
        manager.load_asset("texture.dds")
        (f,) = opened_files
        assert f.closed

    def test_closed_on_decode_error(self, manager, opened_files, asset_dir):
        asset_dir.join("bad.png").write_binary(b"not a png file")
        with pytest.raises(BadMagic):
            manager.load_asset("bad.png")
        (f,) = opened_files
        assert f.closed

    def test_materialised_audio_closed(self, manager, opened_files):
        manager.load_asset("tone.wav", AudioDescriptor(streaming=False))
        (f,) = opened_files
        assert f.closed

    def test_streamed_audio_left_open(self, manager, opened_files):
        audio = manager.load_asset("tone.wav", AudioDescriptor(streaming=True))
        (f,) = opened_files
        assert not f.closed

        stream = audio["data"]
        assert isinstance(stream, PcmStream)
        assert stream.file is f
        assert stream.read() == SAMPLE_PCM

        stream.close()
        assert f.closed


class TestLoaderRegistry(object):
    def test_unknown_extension(self, manager, asset_dir):
        asset_dir.join("model.obj").write("v 0 0 0")
        with pytest.raises(UnknownAssetTypeError):
            manager.load_asset("model.obj")

    def test_no_extension(self, manager):
        with pytest.raises(UnknownAssetTypeError):
            manager.get_loader("README")

    def test_not_found(self, manager):
        with pytest.raises(AssetNotFoundError) as exc_info:
            manager.load_asset("missing.png")
        assert exc_info.value.args[0] == "missing.png"

    def test_unknown_type_checked_before_existence(self, manager):
        with pytest.raises(UnknownAssetTypeError):
            manager.load_asset("missing.obj")

    def test_get_loader(self, manager):
        assert manager.get_loader("a/b.wav") is load_wave
        assert manager.get_loader("a/b.WAVE") is load_wave
        assert manager.get_loader("b.png") is load_png_texture
        assert manager.get_loader("b.dds") is load_dds_texture

    @pytest.mark.parametrize("extension", [".obj", "obj", ".OBJ"])
    def test_register_loader(self, manager, asset_dir, extension):
        asset_dir.join("model.obj").write("v 0 0 0")
        loader = Mock(return_value="a model")
        manager.register_loader(loader, extension)

        descriptor = object()
        assert manager.load_asset("model.obj", descriptor) == "a model"

        (f, passed_descriptor), _ = loader.call_args
        assert f.name.endswith("model.obj")
        assert f.closed
        assert passed_descriptor is descriptor

    def test_register_loader_replaces_existing(self, manager):
        loader = Mock(return_value="replacement")
        manager.register_loader(loader, ".png")
        assert manager.load_asset("image.png") == "replacement"

    def test_register_multiple_extensions(self, manager):
        loader = Mock()
        manager.register_loader(loader, ".a", ".b")
        assert manager.get_loader("x.a") is loader
        assert manager.get_loader("x.b") is loader

    def test_remove_loader(self, manager):
        manager.remove_loader("wav", ".WAVE")
        with pytest.raises(UnknownAssetTypeError):
            manager.load_asset("tone.wav")
        with pytest.raises(UnknownAssetTypeError):
            manager.get_loader("tone.wave")

        # Others unaffected
        assert manager.get_loader("image.png") is load_png_texture

    def test_remove_unregistered_loader(self, manager):
        manager.remove_loader(".xyz")

    def test_instances_independent(self):
        a = AssetManager()
        b = AssetManager()
        a.remove_loader(".png")
        assert b.get_loader("x.png") is load_png_texture
