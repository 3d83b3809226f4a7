"""Engine configuration — loads tuning knobs from config/engine.yaml.

Provides a single ``EngineConfig`` dataclass that is loaded once and then
handed to :class:`~hextactics.engine.tactics_service.TacticsService`.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from hextactics.models.hex import HexDomainError
from hextactics.util.constants import (
    HEURISTIC_SCALE,
    MAX_SOFT_COVER,
    MIN_STEP_COST,
    MOVEMENT_NODE_LIMIT,
    PATH_NODE_LIMIT,
    SOFT_COVER_K,
    TIE_BREAK_EPSILON,
    ZOC_PENALTY,
)

log = logging.getLogger(__name__)

DEFAULT_ENGINE_CONFIG_PATH = "config/engine.yaml"


@dataclass
class EngineConfig:
    """All tunable engine constants.

    Every field has a default so the engine works without the file.
    Node limits of ``None`` mean unbounded.
    """

    # -- Line of sight -----------------------------------------------
    soft_cover_k: float = SOFT_COVER_K
    max_soft_cover: float = MAX_SOFT_COVER
    see_opaque_target: bool = True

    # -- Pathfinding -------------------------------------------------
    heuristic_scale: float = HEURISTIC_SCALE
    min_step_cost: float = MIN_STEP_COST
    tie_break_epsilon: float = TIE_BREAK_EPSILON
    allow_occupied_goal: bool = False

    # -- Zone of control ---------------------------------------------
    zoc_penalty: float = ZOC_PENALTY
    stop_on_zoc_enter: bool = False

    # -- Search limits -----------------------------------------------
    movement_node_limit: Optional[int] = MOVEMENT_NODE_LIMIT
    path_node_limit: Optional[int] = PATH_NODE_LIMIT

    def validate(self) -> EngineConfig:
        """Reject values the engine cannot work with.

        Raises:
            HexDomainError: On the first invalid field.
        """
        for name in ("soft_cover_k", "max_soft_cover", "heuristic_scale",
                     "min_step_cost", "tie_break_epsilon", "zoc_penalty"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise HexDomainError(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise HexDomainError(f"{name} must be finite, got {value!r}")
        if self.max_soft_cover < 0:
            raise HexDomainError(f"max_soft_cover must be >= 0, got {self.max_soft_cover}")
        if self.heuristic_scale < 0:
            raise HexDomainError(f"heuristic_scale must be >= 0, got {self.heuristic_scale}")
        if self.min_step_cost < 0:
            raise HexDomainError(f"min_step_cost must be >= 0, got {self.min_step_cost}")
        if self.tie_break_epsilon < 0:
            raise HexDomainError(f"tie_break_epsilon must be >= 0, got {self.tie_break_epsilon}")
        if self.zoc_penalty < 0:
            raise HexDomainError(f"zoc_penalty must be >= 0, got {self.zoc_penalty}")
        for name in ("movement_node_limit", "path_node_limit"):
            limit = getattr(self, name)
            if limit is None:
                continue
            if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
                raise HexDomainError(f"{name} must be a positive integer or null, got {limit!r}")
        return self


def load_engine_config(path: str = DEFAULT_ENGINE_CONFIG_PATH) -> EngineConfig:
    """Load engine configuration from a YAML file.

    Missing keys fall back to dataclass defaults and unknown keys are
    ignored.  If the file does not exist, a warning is logged and pure
    defaults are returned.

    Raises:
        HexDomainError: The file is not valid YAML or holds invalid values.
    """
    p = Path(path)
    if not p.exists():
        log.warning("Engine config not found at %s, using defaults", p)
        return EngineConfig()

    with p.open() as f:
        try:
            raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise HexDomainError(f"Engine config at {p} is not valid YAML: {e}") from e
    if not isinstance(raw, dict):
        raise HexDomainError(f"Engine config at {p} must be a mapping")

    log.info("Loaded engine config from %s (%d keys)", p, len(raw))

    unknown = sorted(k for k in raw if k not in EngineConfig.__dataclass_fields__)
    if unknown:
        log.debug("Ignoring unknown engine config keys: %s", ", ".join(map(str, unknown)))

    cfg = EngineConfig(**{
        k: v for k, v in raw.items()
        if k in EngineConfig.__dataclass_fields__
    })
    return cfg.validate()
