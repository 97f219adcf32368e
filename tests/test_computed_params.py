"""
Policy knob parsing, computed slot parameters, and environment settings.

Run:
----
    pytest tests/test_computed_params.py -v
"""

import logging

import pytest

from recsys import RELATED_PARAM_DEFAULTS, config_from_params, merge_params
from recsys.computed_params import compute_parameters, compute_slot_plan
from recsys.models import RecommendationConfig
from recsys.settings import EngineSettings, configure_logging, load_params, reload_settings


class TestMergeParams:
    def test_defaults_when_nothing_stored(self):
        assert merge_params() == RELATED_PARAM_DEFAULTS

    def test_stored_knobs_override_and_unknown_keys_drop(self):
        merged = merge_params({"related.batch_size": 12, "related.unknown": "1", "other": "x"})
        assert merged["related.batch_size"] == "12"
        assert "related.unknown" not in merged
        assert "other" not in merged


class TestConfigFromParams:
    def test_defaults_parse_to_engine_defaults(self):
        config = config_from_params(RELATED_PARAM_DEFAULTS)
        assert config.lineage_weight == 100
        assert config.same_server_method_weight == 80
        assert config.transition_cap_per_from == 50
        assert config.decay_half_life_days == 7
        assert config.window_days == 0
        assert config.batch_size == 10

    def test_page_limit_reserves_one_extra_row(self):
        assert config_from_params(RELATED_PARAM_DEFAULTS, limit=24).batch_size == 25

    def test_lenient_parsing_and_clamps(self):
        params = merge_params({
            "related.lineage_weight": "-5",
            "related.candidate_cap_per_signal": "9000",
            "related.transition_cap_k": "0",
            "related.same_creator_weight": "60px",
            "related.fallback_weight": "lots",
            "related.transition_window_days": "-3",
        })
        config = config_from_params(params)
        assert config.lineage_weight == 0
        assert config.candidate_cap_per_signal == 500
        assert config.transition_cap_per_from == 1
        assert config.same_creator_weight == 60
        assert config.fallback_weight == 20
        assert config.window_days == 0

    def test_explicit_zero_is_kept(self):
        params = merge_params({"related.lineage_weight": "0", "related.lineage_min_slots": "0"})
        config = config_from_params(params)
        assert config.lineage_weight == 0
        assert config.lineage_min_slots == 0

    def test_non_numeric_half_life_disables_decay(self):
        params = merge_params({
            "related.transition_decay_half_life_days": "off",
            "related.transition_window_days": "14",
        })
        config = config_from_params(params)
        assert config.decay_half_life_days is None
        assert compute_parameters(config)["decay_mode"] == "window"

    def test_keyword_overrides_win(self):
        config = config_from_params(RELATED_PARAM_DEFAULTS, batch_size=3, hard_preference=False)
        assert config.batch_size == 3
        assert config.hard_preference is False


class TestSlotPlan:
    def test_default_plan(self):
        plan = compute_slot_plan(RecommendationConfig())
        assert plan.random_slots == 0
        assert plan.deterministic_slots == 20
        assert plan.soft_click_slots == 13
        assert plan.lineage_target == 2
        assert plan.cold_guess_slots == 2
        assert plan.cold_explore_slots == 14

    def test_random_slots_clamp(self):
        plan = compute_slot_plan(RecommendationConfig(batch_size=4, random_slots_per_batch=9))
        assert plan.random_slots == 4
        assert plan.deterministic_slots == 0
        assert plan.lineage_target == 0

    def test_explore_slots_leave_room_for_guesses(self):
        plan = compute_slot_plan(
            RecommendationConfig(
                batch_size=4, cold_explore_fraction=1.0, cold_explore_min_guess_slots=1
            )
        )
        assert plan.cold_guess_slots == 1
        assert plan.cold_explore_slots == 3

    @pytest.mark.parametrize(
        "half_life, window, mode",
        [(7, 0, "half_life"), (7, 14, "half_life"), (0, 14, "window"), (0, 0, "none"), (None, 0, "none")],
    )
    def test_decay_mode(self, half_life, window, mode):
        config = RecommendationConfig(decay_half_life_days=half_life, window_days=window)
        assert compute_parameters(config)["decay_mode"] == mode


class TestSettings:
    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch, tmp_path):
        # setenv first so undo also removes values loaded from .env files
        for key in ("RECSYS_LOG_LEVEL", "RELATED_BATCH_SIZE", "RELATED_LINEAGE_WEIGHT"):
            monkeypatch.setenv(key, "")
            monkeypatch.delenv(key)
        monkeypatch.setattr("recsys.settings.PROJECT_ROOT", tmp_path)
        monkeypatch.setattr("recsys.settings._settings", None)

    def test_env_overrides_knobs(self, monkeypatch):
        monkeypatch.setenv("RELATED_BATCH_SIZE", "12")
        monkeypatch.setenv("RECSYS_LOG_LEVEL", "debug")
        settings = EngineSettings.from_env()
        assert settings.knob_overrides == {"related.batch_size": "12"}
        assert settings.log_level == "DEBUG"

    def test_dotenv_file_is_loaded(self, monkeypatch, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("RELATED_LINEAGE_WEIGHT=150\n")
        settings = EngineSettings.from_env(env_file)
        assert settings.knob_overrides["related.lineage_weight"] == "150"

    def test_load_params_layers_env_then_stored(self, monkeypatch):
        monkeypatch.setenv("RELATED_BATCH_SIZE", "12")
        monkeypatch.setenv("RELATED_LINEAGE_WEIGHT", "120")
        reload_settings()
        params = load_params({"related.batch_size": "8"})
        assert params["related.batch_size"] == "8"
        assert params["related.lineage_weight"] == "120"
        assert params["related.fallback_weight"] == "20"

    def test_configure_logging_uses_settings_level(self, monkeypatch):
        monkeypatch.setenv("RECSYS_LOG_LEVEL", "debug")
        reload_settings()
        recsys_logger = logging.getLogger("recsys")
        monkeypatch.setattr(recsys_logger, "level", recsys_logger.level)
        configure_logging()
        assert recsys_logger.level == logging.DEBUG
