from .base import Stage, get_stage, register_stage, stage_registry
from .enterprise import EnterpriseStage
from .mvp import MVPStage
from .production import ProductionStage

__all__ = [
    "Stage",
    "MVPStage",
    "ProductionStage",
    "EnterpriseStage",
    "get_stage",
    "register_stage",
    "stage_registry",
]
