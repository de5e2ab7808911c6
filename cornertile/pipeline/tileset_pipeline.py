"""
Offline tile-set generation pipeline.

Resolves and checks the generator settings, enumerates the corner classes,
authors their meshes and writes the scene (plus optional OBJ and tile-set
manifest) to the output directory.
"""

import time
import logging
from pathlib import Path
from typing import Dict, Any, Optional, Callable, List
from dataclasses import dataclass, field
from enum import Enum

from cornertile.generators.enumerator import TileSetGeneration, enumerate_classes
from cornertile.generators.mesh_author import MissingProfileError
from cornertile.generators.profiles import SETTINGS_CATALOG, GeneratorSettings
from cornertile.validation.core import ValidationError
from cornertile.validation.checks.tileset_checks import check_settings

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class PipelineStage(Enum):
    INITIALIZE = "initialize"
    ENUMERATE = "enumerate"
    EXPORT = "export"
    COMPLETE = "complete"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class PipelineError(Exception):
    pass


class GenerationCancelledException(PipelineError):
    pass


# ---------------------------------------------------------------------------
# Settings / Result dataclasses
# ---------------------------------------------------------------------------

SCENE_FORMATS = ("gltf", "glb")


@dataclass
class PipelineSettings:
    # Generator settings to use (catalog name)
    profile_name: str = "Example Bevel"

    # Output
    output_dir: Optional[str] = None
    set_name: str = "tile_set"
    export_gltf: bool = True
    scene_format: str = "gltf"  # "gltf" or "glb"
    export_obj: bool = False
    write_tileset: bool = False  # JSON manifest referencing the scene nodes

    # Misc
    verbose: bool = False


@dataclass
class PipelineProgress:
    stage: PipelineStage
    stage_progress: float
    overall_progress: float
    message: str
    elapsed_time: float

    @property
    def percentage(self) -> int:
        return int(self.overall_progress * 100)


@dataclass
class PipelineResult:
    success: bool
    output_files: List[str] = field(default_factory=list)
    primary_output: Optional[str] = None
    stages_completed: List[PipelineStage] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def total_time(self) -> float:
        return self.metrics.get("total_time", 0.0)

    def add_error(self, error: str, stage: Optional[PipelineStage] = None):
        if stage:
            error = f"[{stage.value}] {error}"
        self.errors.append(error)

    def add_warning(self, warning: str, stage: Optional[PipelineStage] = None):
        if stage:
            warning = f"[{stage.value}] {warning}"
        self.warnings.append(warning)


# ---------------------------------------------------------------------------
# Progress tracker
# ---------------------------------------------------------------------------

class ProgressTracker:
    STAGE_WEIGHTS = {
        PipelineStage.INITIALIZE: 0.05,
        PipelineStage.ENUMERATE: 0.75,
        PipelineStage.EXPORT: 0.20,
    }

    def __init__(self):
        self.start_time = time.time()

    def calculate_progress(self, current_stage: PipelineStage, stage_progress: float) -> PipelineProgress:
        stages = list(self.STAGE_WEIGHTS.keys())
        if current_stage not in stages:
            overall = 1.0
        else:
            idx = stages.index(current_stage)
            completed = sum(self.STAGE_WEIGHTS[s] for s in stages[:idx])
            overall = completed + self.STAGE_WEIGHTS[current_stage] * stage_progress
        return PipelineProgress(
            stage=current_stage,
            stage_progress=stage_progress,
            overall_progress=min(overall, 1.0),
            message="",
            elapsed_time=time.time() - self.start_time,
        )


# ---------------------------------------------------------------------------
# Main pipeline
# ---------------------------------------------------------------------------

class TileSetPipeline:
    """Generates the tile-class scene for one set of generator settings."""

    def __init__(self, settings: Optional[PipelineSettings] = None,
                 generator_settings: Optional[GeneratorSettings] = None):
        self.settings = settings or PipelineSettings()
        self.is_running = False
        self.is_cancelled = False
        self.current_stage = PipelineStage.INITIALIZE
        self.progress_tracker = ProgressTracker()
        self.progress_callback: Optional[Callable[[PipelineProgress], None]] = None

        # Explicit settings take precedence over the catalog lookup
        self.generator_settings: Optional[GeneratorSettings] = generator_settings
        self.generation: Optional[TileSetGeneration] = None
        self._validate_settings()

    # -- helpers --

    def set_progress_callback(self, callback: Callable[[PipelineProgress], None]):
        self.progress_callback = callback

    def cancel(self):
        self.is_cancelled = True

    def _check_cancellation(self):
        if self.is_cancelled:
            raise GenerationCancelledException("Pipeline cancelled by user")

    def _update_progress(self, stage_progress: float, message: str):
        if self.is_cancelled:
            return
        progress = self.progress_tracker.calculate_progress(self.current_stage, stage_progress)
        progress.message = message
        if self.progress_callback:
            try:
                self.progress_callback(progress)
            except Exception:
                logger.exception("Progress callback failed")

    def _validate_settings(self):
        errors = []
        if not self.settings.set_name.strip():
            errors.append("Set name must not be empty")
        if self.settings.scene_format not in SCENE_FORMATS:
            errors.append(f"Scene format must be one of {', '.join(SCENE_FORMATS)}")
        if not (self.settings.export_gltf or self.settings.export_obj or self.settings.write_tileset):
            errors.append("Nothing to export: enable glTF, OBJ or tile-set output")
        if self.generator_settings is None and not SETTINGS_CATALOG.is_registered(self.settings.profile_name):
            errors.append(f"Unknown generator settings: {self.settings.profile_name}")
        if errors:
            raise PipelineError(f"Invalid settings: {'; '.join(errors)}")

    @property
    def output_dir(self) -> Path:
        return Path(self.settings.output_dir) if self.settings.output_dir else Path("output") / "tilesets"

    # -- stages --

    def _initialize(self) -> GeneratorSettings:
        self.current_stage = PipelineStage.INITIALIZE
        self._update_progress(0.0, "Resolving generator settings...")

        if self.generator_settings is None:
            self.generator_settings = SETTINGS_CATALOG.get_profile(self.settings.profile_name)

        report = check_settings(self.generator_settings)
        for issue in report.warnings:
            logger.warning("%s", issue)
        if report.failed:
            logger.error("Generator settings '%s' failed validation:\n%s",
                         self.generator_settings.name, report.report())
            raise ValidationError(report)

        self._update_progress(1.0, f"Using settings '{self.generator_settings.name}'")
        return self.generator_settings

    def _enumerate(self) -> TileSetGeneration:
        self.current_stage = PipelineStage.ENUMERATE
        self._check_cancellation()
        self._update_progress(0.0, "Enumerating corner classes...")

        try:
            self.generation = enumerate_classes(with_meshes=True, settings=self.generator_settings)
        except MissingProfileError as e:
            raise PipelineError(str(e)) from e

        self._update_progress(1.0, f"{len(self.generation)} classes")
        return self.generation

    def _export(self) -> List[str]:
        self.current_stage = PipelineStage.EXPORT
        self._check_cancellation()
        self._update_progress(0.0, "Writing outputs...")

        out_dir = self.output_dir
        out_dir.mkdir(parents=True, exist_ok=True)
        written: List[str] = []
        classes = self.generation.classes

        if self.settings.export_gltf:
            # Import here so trimesh is only loaded when a scene is written
            from cornertile.conversion.gltf_writer import export_tile_scene
            scene_path = out_dir / f"{self.settings.set_name}.{self.settings.scene_format}"
            export_tile_scene(classes, scene_path)
            if not scene_path.exists():
                raise PipelineError("Scene file was not created")
            self.generation.output_path = scene_path
            written.append(str(scene_path))
            self._update_progress(0.6, f"Scene written ({scene_path.stat().st_size} bytes)")

        if self.settings.export_obj:
            written.append(self._write_obj_file(out_dir))

        if self.settings.write_tileset:
            written.append(self._write_tileset_file(out_dir))

        self._update_progress(1.0, f"{len(written)} file(s) written")
        return written

    def _write_obj_file(self, out_dir: Path) -> str:
        """Write OBJ mesh alongside the scene."""
        from cornertile.conversion.obj_writer import ObjWriter
        obj_path = str(out_dir / f"{self.settings.set_name}.obj")
        writer = ObjWriter()
        writer.add_classes(self.generation.classes)
        writer.write(obj_path)
        logger.info("OBJ written: %s (%d verts, %d faces)",
                    obj_path, writer.vertex_count, writer.face_count)
        return obj_path

    def _write_tileset_file(self, out_dir: Path) -> str:
        """Write a tile-set manifest with one record per class, keyed by node name."""
        from cornertile.conversion.tileset_io import TileSet
        tile_set = TileSet()
        for tile in self.generation.classes:
            tile_set.add(tile.configuration, tile.name)
        path = tile_set.save(out_dir / f"{self.settings.set_name}.json")
        return str(path)

    # -- main entry --

    def generate(self) -> PipelineResult:
        if self.is_running:
            raise PipelineError("Pipeline is already running")
        self.is_running = True
        self.is_cancelled = False
        result = PipelineResult(success=False)
        start_time = time.time()

        try:
            logger.info("Starting tile-set generation: %s -> %s",
                        self.settings.profile_name, self.output_dir)

            stages = [
                (self._initialize, "Initialize"),
                (self._enumerate, "Enumerate classes"),
                (self._export, "Export"),
            ]
            for stage_fn, desc in stages:
                try:
                    logger.info("Stage: %s", desc)
                    stage_result = stage_fn()
                    result.stages_completed.append(self.current_stage)
                    if self.current_stage == PipelineStage.EXPORT:
                        result.output_files.extend(stage_result)
                        result.primary_output = stage_result[0] if stage_result else None
                except GenerationCancelledException:
                    result.add_error("Pipeline cancelled by user")
                    return result
                except PipelineError as e:
                    result.add_error(str(e), self.current_stage)
                    return result
                except ValidationError as e:
                    for issue in e.result.errors:
                        result.add_error(issue.format(), self.current_stage)
                    return result

            result.success = True
            result.stages_completed.append(PipelineStage.COMPLETE)
            result.metrics["class_count"] = len(self.generation)
            result.metrics["partition_count"] = self.generation.partition_count
            result.metrics["duplicate_count"] = self.generation.duplicate_count
            result.metrics["total_time"] = time.time() - start_time
            logger.info("Pipeline complete in %.2fs", result.metrics["total_time"])
        except Exception as e:
            logger.exception("Unexpected pipeline error")
            result.add_error(f"Unexpected error: {e}")
        finally:
            self.is_running = False
        return result
