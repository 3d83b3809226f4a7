"""Tests for EngineConfig loading and validation."""

from pathlib import Path

import pytest

from hextactics.loaders.engine_config_loader import EngineConfig, load_engine_config
from hextactics.models.hex import HexDomainError

REPO_CONFIG = Path(__file__).resolve().parent.parent / "config" / "engine.yaml"


def _write(tmp_path, text):
    p = tmp_path / "engine.yaml"
    p.write_text(text)
    return str(p)


class TestLoadEngineConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        cfg = load_engine_config(str(tmp_path / "nope.yaml"))
        assert cfg == EngineConfig()

    def test_partial_file(self, tmp_path):
        cfg = load_engine_config(_write(tmp_path, "soft_cover_k: 1.2\nstop_on_zoc_enter: true\n"))
        assert cfg.soft_cover_k == pytest.approx(1.2)
        assert cfg.stop_on_zoc_enter
        assert cfg.max_soft_cover == EngineConfig().max_soft_cover

    def test_unknown_keys_ignored(self, tmp_path):
        cfg = load_engine_config(_write(tmp_path, "tick_rate: 30\nzoc_penalty: 2\n"))
        assert cfg.zoc_penalty == 2

    def test_empty_file(self, tmp_path):
        assert load_engine_config(_write(tmp_path, "")) == EngineConfig()

    def test_null_limits_mean_unbounded(self, tmp_path):
        cfg = load_engine_config(_write(tmp_path, "path_node_limit: null\n"))
        assert cfg.path_node_limit is None

    def test_invalid_value_raises(self, tmp_path):
        with pytest.raises(HexDomainError):
            load_engine_config(_write(tmp_path, "movement_node_limit: 0\n"))

    def test_non_mapping_raises(self, tmp_path):
        with pytest.raises(HexDomainError):
            load_engine_config(_write(tmp_path, "- 1\n- 2\n"))

    def test_unparsable_yaml_raises(self, tmp_path):
        with pytest.raises(HexDomainError, match="not valid YAML"):
            load_engine_config(_write(tmp_path, "soft_cover_k: [1\n"))

    def test_shipped_config_matches_defaults(self):
        assert load_engine_config(str(REPO_CONFIG)) == EngineConfig()


class TestValidate:
    def test_defaults_are_valid(self):
        cfg = EngineConfig()
        assert cfg.validate() is cfg

    @pytest.mark.parametrize("field,value", [
        ("max_soft_cover", -1.0),
        ("heuristic_scale", -0.5),
        ("min_step_cost", -1.0),
        ("tie_break_epsilon", -1e-3),
        ("zoc_penalty", -2.0),
        ("soft_cover_k", float("nan")),
        ("soft_cover_k", "high"),
        ("path_node_limit", -5),
        ("movement_node_limit", 2.5),
        ("movement_node_limit", True),
    ])
    def test_bad_values(self, field, value):
        cfg = EngineConfig(**{field: value})
        with pytest.raises(HexDomainError):
            cfg.validate()
