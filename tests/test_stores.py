"""
Tests for JSON storage: configuration, rotation state, pool and serializers.

Every store is pointed at a temporary directory.
"""

import json
import stat

import pytest

from viberipped.core.models import Exercise, RecentCategories, RotationState, UserConfig
from viberipped.core.pool import compute_pool_hash
from viberipped.io.config_store import ConfigStore
from viberipped.io.files import read_json, write_json_atomic
from viberipped.io.paths import StoragePaths, get_default_state_dir
from viberipped.io.pool_store import PoolError, PoolStore
from viberipped.io.serializers import (
    ValidationError,
    config_to_dict,
    dict_to_config,
    dict_to_state,
    parse_exercise_batch,
    state_to_dict,
    validate_config,
    validate_exercise_name,
    validate_reps,
    validate_state,
)
from viberipped.io.state_store import StateStore, create_default_state


@pytest.fixture
def paths(tmp_path):
    """Storage paths under a not-yet-existing base directory."""
    return StoragePaths(tmp_path / "viberipped")


def _mode(path) -> int:
    return stat.S_IMODE(path.stat().st_mode)


def _sample_pool() -> list[Exercise]:
    return [
        Exercise("Pushups", 15, category="push"),
        Exercise("Squats", 20, category="legs"),
        Exercise("Plank", 30, type="timed", category="core"),
    ]


# =============================================================================
# Paths and atomic writes
# =============================================================================


class TestPaths:
    """Tests for storage locations."""

    def test_sibling_files(self, tmp_path):
        paths = StoragePaths.from_state_path(tmp_path / "state.json")
        assert paths.base_dir == tmp_path
        assert paths.config == tmp_path / "configuration.json"
        assert paths.pool == tmp_path / "pool.json"
        assert paths.detection == tmp_path / "detection-state.json"

    def test_default_dir_honors_xdg(self, tmp_path, monkeypatch):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert get_default_state_dir() == tmp_path / "viberipped"


class TestAtomicWrite:
    """Tests for write_json_atomic."""

    def test_creates_owner_only_dir_and_file(self, tmp_path):
        target = tmp_path / "nested" / "data.json"
        write_json_atomic(target, {"a": 1})

        assert _mode(target.parent) == 0o700
        assert _mode(target) == 0o600

    def test_two_space_indent_and_trailing_newline(self, tmp_path):
        target = tmp_path / "data.json"
        write_json_atomic(target, {"a": [1]})
        assert target.read_text() == '{\n  "a": [\n    1\n  ]\n}\n'

    def test_leaves_no_temp_files(self, tmp_path):
        target = tmp_path / "data.json"
        write_json_atomic(target, {"a": 1})
        write_json_atomic(target, {"a": 2})
        assert [p.name for p in tmp_path.iterdir()] == ["data.json"]
        assert json.loads(target.read_text()) == {"a": 2}

    def test_read_invalid_utf8_is_decode_error(self, tmp_path):
        target = tmp_path / "data.json"
        target.write_bytes(b"{\"a\": \xff\xfe}")
        with pytest.raises(json.JSONDecodeError):
            read_json(target)


# =============================================================================
# Configuration
# =============================================================================


class TestValidateConfig:
    """Tests for the configuration shape check."""

    def test_minimal(self):
        assert validate_config({"equipment": {}})

    def test_partial_equipment_accepted(self):
        assert validate_config({"equipment": {"kettlebell": True}})

    @pytest.mark.parametrize("candidate", [
        None,
        [],
        {},
        {"equipment": []},
        {"equipment": {"kettlebell": "yes"}},
        {"equipment": {}, "difficulty": 2},
        {"equipment": {}, "difficulty": {"multiplier": "hard"}},
        {"equipment": {}, "environment": 5},
        {"equipment": {}, "difficulty": {"multiplier": float("nan")}},
        {"equipment": {}, "difficulty": {"multiplier": float("inf")}},
        {"equipment": {}, "difficulty": {"multiplier": 10**400}},
        {"equipment": {}, "difficulty": {"multiplier": True}},
    ])
    def test_invalid(self, candidate):
        assert not validate_config(candidate)


class TestConfigSerialization:
    """Tests for config dict conversion."""

    def test_camel_case_keys(self):
        d = config_to_dict(UserConfig())
        assert set(d) == {"equipment", "difficulty", "environment", "schemaVersion", "detection"}
        assert d["equipment"] == {
            "kettlebell": False,
            "dumbbells": False,
            "pullUpBar": False,
            "parallettes": False,
        }
        assert d["difficulty"] == {"multiplier": 1.0}

    def test_missing_fields_filled(self):
        config = dict_to_config({"equipment": {"pullUpBar": True}})
        assert config.equipment["pullUpBar"] is True
        assert config.equipment["kettlebell"] is False
        assert config.multiplier == 1.0
        assert config.environment == "anywhere"
        assert config.schema_version == "1.0"

    def test_unknown_sensitivity_normalized(self):
        config = dict_to_config({"equipment": {}, "detection": {"sensitivity": "wild"}})
        assert config.detection_sensitivity == "normal"

    def test_invalid_raises(self):
        with pytest.raises(ValidationError):
            dict_to_config({"equipment": "none"})


class TestConfigStore:
    """Tests for ConfigStore load/save and settings."""

    def test_missing_file_gives_defaults(self, paths):
        config = ConfigStore(paths.config).load()
        assert config == UserConfig()

    def test_malformed_file_gives_defaults(self, paths):
        paths.base_dir.mkdir()
        paths.config.write_text("{not json")
        assert ConfigStore(paths.config).load() == UserConfig()

    def test_invalid_file_gives_defaults(self, paths):
        paths.base_dir.mkdir()
        paths.config.write_text(json.dumps({"equipment": "kettlebell"}))
        assert ConfigStore(paths.config).load() == UserConfig()

    def test_binary_file_gives_defaults(self, paths):
        paths.base_dir.mkdir()
        paths.config.write_bytes(b"\x89PNG\r\n\x1a\n\xff\xfe\x00")
        assert ConfigStore(paths.config).load() == UserConfig()

    @pytest.mark.parametrize("multiplier", ["NaN", "Infinity", "-Infinity", "1" + "0" * 400])
    def test_non_finite_multiplier_gives_defaults(self, paths, multiplier):
        paths.base_dir.mkdir()
        paths.config.write_text(
            '{"equipment": {"kettlebell": true}, "difficulty": {"multiplier": ' + multiplier + "}}"
        )
        assert ConfigStore(paths.config).load() == UserConfig()

    def test_round_trip(self, paths):
        store = ConfigStore(paths.config)
        config = UserConfig(multiplier=1.75, environment="office")
        config.equipment["dumbbells"] = True

        assert store.save(config)
        loaded = store.load()

        assert loaded.equipment["dumbbells"] is True
        assert loaded.multiplier == 1.75
        assert loaded.environment == "office"
        assert loaded.schema_version == "1.1"

    def test_save_permissions(self, paths):
        ConfigStore(paths.config).save(UserConfig())
        assert _mode(paths.base_dir) == 0o700
        assert _mode(paths.config) == 0o600

    def test_save_failure_returns_false(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        store = ConfigStore(blocker / "configuration.json")
        assert store.save(UserConfig()) is False

    def test_set_and_get_environment(self, paths):
        store = ConfigStore(paths.config)
        store.set_setting("environment", "  office ")
        assert store.get_setting("environment") == "office"

    def test_set_empty_environment_rejected(self, paths):
        store = ConfigStore(paths.config)
        with pytest.raises(ValidationError, match="cannot be empty"):
            store.set_setting("environment", "   ")
        assert not store.exists()

    def test_unknown_key_rejected(self, paths):
        store = ConfigStore(paths.config)
        with pytest.raises(ValidationError, match="Settable keys: environment"):
            store.set_setting("theme", "dark")
        with pytest.raises(ValidationError):
            store.get_setting("theme")

    def test_set_equipment(self, paths):
        store = ConfigStore(paths.config)
        config = store.set_equipment({"kettlebell": True, "parallettes": True})
        assert config.enabled_equipment == ["kettlebell", "parallettes"]
        assert store.load().enabled_equipment == ["kettlebell", "parallettes"]

    def test_set_unknown_equipment_rejected(self, paths):
        with pytest.raises(ValidationError, match="Unknown equipment"):
            ConfigStore(paths.config).set_equipment({"rings": True})

    def test_step_difficulty(self, paths):
        store = ConfigStore(paths.config)
        assert store.step_difficulty(True) == (1.0, 1.25)
        assert store.load().multiplier == 1.25
        assert store.step_difficulty(False) == (1.25, 1.0)

    def test_step_difficulty_saturates(self, paths):
        store = ConfigStore(paths.config)
        store.save(UserConfig(multiplier=2.5))
        assert store.step_difficulty(True) == (2.5, 2.5)
        store.save(UserConfig(multiplier=0.5))
        assert store.step_difficulty(False) == (0.5, 0.5)


# =============================================================================
# Rotation state
# =============================================================================


class TestValidateState:
    """Tests for the state shape check."""

    def _valid(self, **overrides):
        d = {"currentIndex": 0, "lastTriggerTime": 0, "poolHash": "abc", "totalTriggered": 0}
        d.update(overrides)
        return d

    def test_valid(self):
        assert validate_state(self._valid())
        assert validate_state(self._valid(recentCategories=["push"], schemaVersion="1.1"))

    @pytest.mark.parametrize("overrides", [
        {"currentIndex": -1},
        {"currentIndex": 1.5},
        {"lastTriggerTime": "now"},
        {"totalTriggered": None},
        {"poolHash": ""},
        {"poolHash": 7},
        {"recentCategories": "push"},
        {"recentCategories": [1]},
    ])
    def test_invalid(self, overrides):
        assert not validate_state(self._valid(**overrides))

    def test_non_dict(self):
        assert not validate_state([])


class TestStateSerialization:
    """Tests for state dict conversion."""

    def test_round_trip(self):
        state = RotationState(
            current_index=2,
            last_trigger_time=1_700_000_000_000,
            pool_hash="abc",
            total_triggered=9,
            config_pool_hash="def",
            recent_categories=RecentCategories(["push", "legs"]),
            schema_version="1.1",
        )
        assert dict_to_state(state_to_dict(state)) == state

    def test_legacy_missing_buffer(self):
        state = dict_to_state(
            {"currentIndex": 0, "lastTriggerTime": 0, "poolHash": "abc", "totalTriggered": 3}
        )
        assert state.recent_categories is None
        assert state.config_pool_hash is None
        assert state.schema_version == "1.0"

    def test_config_pool_hash_written_only_when_set(self):
        assert "configPoolHash" not in state_to_dict(RotationState(pool_hash="abc"))


class TestStateStore:
    """Tests for StateStore recovery paths."""

    def test_default_state(self):
        pool = _sample_pool()
        state = create_default_state(pool)
        assert state.current_index == 0
        assert state.last_trigger_time == 0
        assert state.total_triggered == 0
        assert state.pool_hash == compute_pool_hash(pool)
        assert state.recent_categories == []

    def test_missing_file(self, paths):
        pool = _sample_pool()
        assert StateStore(paths.state).load(pool) == create_default_state(pool)

    def test_corrupted_file(self, paths):
        paths.base_dir.mkdir()
        paths.state.write_text("{{{")
        pool = _sample_pool()
        assert StateStore(paths.state).load(pool) == create_default_state(pool)

    def test_invalid_utf8_file(self, paths):
        paths.base_dir.mkdir()
        paths.state.write_bytes(b"{\"currentIndex\": \xff\xfe}")
        pool = _sample_pool()
        assert StateStore(paths.state).load(pool) == create_default_state(pool)
        assert StateStore(paths.state).read() is None
        assert StateStore(paths.state).read_config_pool_hash() is None

    def test_invalid_file(self, paths):
        paths.base_dir.mkdir()
        paths.state.write_text(json.dumps({"currentIndex": -4}))
        pool = _sample_pool()
        assert StateStore(paths.state).load(pool).current_index == 0

    def test_round_trip(self, paths):
        pool = _sample_pool()
        store = StateStore(paths.state)
        state = create_default_state(pool)
        state.current_index = 2
        state.total_triggered = 5
        state.recent_categories.push("core")

        assert store.save(state)
        assert store.load(pool) == state
        assert _mode(paths.state) == 0o600

    def test_pool_change_resets_index_keeps_counters(self, paths):
        pool = _sample_pool()
        store = StateStore(paths.state)
        state = create_default_state(pool)
        state.current_index = 2
        state.total_triggered = 7
        store.save(state)

        new_pool = pool + [Exercise("Burpees", 10)]
        loaded = store.load(new_pool)

        assert loaded.current_index == 0
        assert loaded.pool_hash == compute_pool_hash(new_pool)
        assert loaded.total_triggered == 7

    def test_index_out_of_bounds(self, paths):
        pool = _sample_pool()
        store = StateStore(paths.state)
        state = create_default_state(pool)
        state.current_index = 10
        store.save(state)

        assert store.load(pool).current_index == 0

    def test_read_config_pool_hash(self, paths):
        store = StateStore(paths.state)
        assert store.read_config_pool_hash() is None
        store.save(RotationState(pool_hash="abc", config_pool_hash="cfg"))
        assert store.read_config_pool_hash() == "cfg"

    def test_reset_for_pool_keeps_history(self, paths):
        pool = _sample_pool()
        store = StateStore(paths.state)
        state = create_default_state(pool)
        state.current_index = 1
        state.total_triggered = 4
        state.last_trigger_time = 123
        store.save(state)

        new_pool = pool[:2]
        reset = store.reset_for_pool(new_pool, config_pool_hash="cfg")

        assert reset.current_index == 0
        assert reset.total_triggered == 4
        assert reset.last_trigger_time == 123
        assert reset.pool_hash == compute_pool_hash(new_pool)
        assert store.read() == reset


# =============================================================================
# Pool
# =============================================================================


class TestPoolStore:
    """Tests for pool management operations."""

    @pytest.fixture
    def stores(self, paths):
        state_store = StateStore(paths.state)
        pool_store = PoolStore(paths.pool, state_store)
        pool_store.save(_sample_pool())
        state = create_default_state(_sample_pool())
        state.current_index = 2
        state.total_triggered = 3
        state_store.save(state)
        return pool_store, state_store

    def test_read_missing(self, paths):
        with pytest.raises(PoolError, match="No pool found"):
            PoolStore(paths.pool).read()

    def test_read_malformed(self, paths):
        paths.base_dir.mkdir()
        paths.pool.write_text("[oops")
        with pytest.raises(PoolError, match="Failed to load pool"):
            PoolStore(paths.pool).read()

    def test_read_not_array(self, paths):
        paths.base_dir.mkdir()
        paths.pool.write_text("{}")
        with pytest.raises(PoolError, match="not an array"):
            PoolStore(paths.pool).read()

    def test_load_is_lenient(self, paths):
        paths.base_dir.mkdir()
        paths.pool.write_text('[{"name": "", "reps": 0}]')
        assert PoolStore(paths.pool).load() is None

    def test_add_appends_and_resets_rotation(self, stores):
        pool_store, state_store = stores
        pool = pool_store.add_exercises([Exercise("Burpees", 12)])

        assert [ex.name for ex in pool][-1] == "Burpees"
        assert pool_store.read() == pool
        state = state_store.read()
        assert state.current_index == 0
        assert state.pool_hash == compute_pool_hash(pool)
        assert state.total_triggered == 3

    def test_add_duplicate_case_insensitive(self, stores):
        pool_store, _ = stores
        with pytest.raises(PoolError, match='"pushups" already exists'):
            pool_store.add_exercises([Exercise("pushups", 10)])

    def test_add_batch_all_or_nothing(self, stores):
        pool_store, _ = stores
        before = pool_store.pool_path.read_text()
        with pytest.raises(PoolError):
            pool_store.add_exercises([Exercise("Burpees", 12), Exercise("Squats", 10)])
        assert pool_store.pool_path.read_text() == before

    def test_remove_case_insensitive(self, stores):
        pool_store, state_store = stores
        removed = pool_store.remove_exercise("  PLANK ")

        assert removed.name == "Plank"
        assert [ex.name for ex in pool_store.read()] == ["Pushups", "Squats"]
        assert state_store.read().current_index == 0

    def test_remove_unknown(self, stores):
        pool_store, _ = stores
        with pytest.raises(PoolError, match='"Burpees" not found'):
            pool_store.remove_exercise("Burpees")

    def test_remove_empty_name(self, stores):
        pool_store, _ = stores
        with pytest.raises(PoolError, match="name required"):
            pool_store.remove_exercise("  ")

    def test_remove_last_rejected(self, paths):
        pool_store = PoolStore(paths.pool)
        pool_store.save([Exercise("Pushups", 15)])
        with pytest.raises(PoolError, match="last exercise"):
            pool_store.remove_exercise("Pushups")
        assert len(pool_store.read()) == 1

    def test_regenerate(self, stores):
        pool_store, state_store = stores
        new_pool = [Exercise("Lunges", 10, category="legs")]
        assert pool_store.regenerate(new_pool, "cfg-hash")

        assert pool_store.read() == new_pool
        state = state_store.read()
        assert state.current_index == 0
        assert state.config_pool_hash == "cfg-hash"


# =============================================================================
# CLI input parsing
# =============================================================================


class TestInputValidators:
    """Tests for name/reps validators."""

    def test_name(self):
        assert validate_exercise_name("  Burpees ") == "Burpees"
        assert validate_exercise_name("x" * 50) == "x" * 50
        assert validate_exercise_name("x" * 51) is None
        assert validate_exercise_name("   ") is None
        assert validate_exercise_name(None) is None

    @pytest.mark.parametrize("raw,expected", [
        ("1", 1),
        ("12", 12),
        ("999", 999),
        ("0", None),
        ("1000", None),
        ("012", None),
        ("12.0", None),
        ("-5", None),
        (" 12", None),
        ("abc", None),
        ("", None),
    ])
    def test_reps(self, raw, expected):
        assert validate_reps(raw) == expected


class TestParseExerciseBatch:
    """Tests for comma-separated batch input."""

    def test_single(self):
        assert parse_exercise_batch("Burpees 12") == [("Burpees", 12)]

    def test_multi_word_names(self):
        result = parse_exercise_batch("Burpees 12, Mountain climbers 20,Jumping jacks 30")
        assert result == [("Burpees", 12), ("Mountain climbers", 20), ("Jumping jacks", 30)]

    def test_missing_reps(self):
        with pytest.raises(ValidationError, match='"Squats" \\(missing reps\\)'):
            parse_exercise_batch("Burpees 12, Squats")

    def test_bad_reps(self):
        with pytest.raises(ValidationError, match="must be integer 1-999"):
            parse_exercise_batch("Burpees 0")

    def test_duplicate_in_batch(self):
        with pytest.raises(ValidationError, match="Duplicate exercise in batch"):
            parse_exercise_batch("Burpees 12, burpees 10")

    def test_name_too_long(self):
        with pytest.raises(ValidationError, match="Invalid exercise name"):
            parse_exercise_batch(f"{'x' * 51} 10")

    def test_empty(self):
        with pytest.raises(ValidationError):
            parse_exercise_batch(" , ")
