from .loader import load_config, load_config_with_overrides
from .schema import AnnotationSettings, PipelineConfig, RankingSettings, WalkParameters

__all__ = [
    "load_config",
    "load_config_with_overrides",
    "PipelineConfig",
    "WalkParameters",
    "AnnotationSettings",
    "RankingSettings",
]
