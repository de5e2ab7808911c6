import pytest

from cornertile.conversion.tileset_io import TileSet
from cornertile.generators.profiles import EXAMPLE_BEVEL_SETTINGS
from cornertile.pipeline import (
    PipelineError,
    PipelineSettings,
    PipelineStage,
    TileSetPipeline,
)


def test_full_run(tmp_path):
    settings = PipelineSettings(
        output_dir=str(tmp_path),
        set_name="bevel",
        export_obj=True,
        write_tileset=True,
    )
    pipeline = TileSetPipeline(settings)
    progress = []
    pipeline.set_progress_callback(progress.append)

    result = pipeline.generate()

    assert result.success, result.errors
    assert result.output_files == [
        str(tmp_path / "bevel.gltf"),
        str(tmp_path / "bevel.obj"),
        str(tmp_path / "bevel.json"),
    ]
    assert result.primary_output == str(tmp_path / "bevel.gltf")
    assert result.stages_completed[-1] == PipelineStage.COMPLETE
    assert result.metrics["partition_count"] == 3 ** 8
    assert result.metrics["class_count"] + result.metrics["duplicate_count"] == 3 ** 8
    assert progress and progress[-1].overall_progress == pytest.approx(1.0)

    manifest = TileSet.load(tmp_path / "bevel.json")
    assert len(manifest) == result.metrics["class_count"]
    assert manifest.tiles[0].model_path.startswith("0: ")
    assert len(manifest.to_entry_pool()) == len(manifest)


@pytest.mark.parametrize("kwargs", [
    {"set_name": "  "},
    {"scene_format": "fbx"},
    {"export_gltf": False},
    {"profile_name": "No Such Bevel"},
])
def test_invalid_settings(kwargs):
    with pytest.raises(PipelineError):
        TileSetPipeline(PipelineSettings(**kwargs))


def test_broken_profiles_fail_before_enumeration(tmp_path):
    broken = EXAMPLE_BEVEL_SETTINGS.copy(name="Broken")
    broken.type2_vertical_inside = []

    pipeline = TileSetPipeline(PipelineSettings(output_dir=str(tmp_path)), generator_settings=broken)
    result = pipeline.generate()

    assert not result.success
    assert any("TILE-201" in e and "[initialize]" in e for e in result.errors)
    assert PipelineStage.ENUMERATE not in result.stages_completed
    assert list(tmp_path.iterdir()) == []


def test_cancelled_run(tmp_path):
    pipeline = TileSetPipeline(PipelineSettings(output_dir=str(tmp_path)))
    pipeline.set_progress_callback(lambda progress: pipeline.cancel())

    result = pipeline.generate()

    assert not result.success
    assert result.errors == ["Pipeline cancelled by user"]
