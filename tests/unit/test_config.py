"""Unit tests for loader configuration and hashing."""

from pathlib import Path

import pytest
from coursecorpus.config.hash import compute_config_hash, config_from_yaml, config_to_yaml, load_config
from coursecorpus.config.schema import DedupConfig, LoaderConfig, ReaderConfig
from coursecorpus.errors import ConfigError

DEFAULT_YAML = Path(__file__).resolve().parents[2] / "configs" / "default.yaml"


class TestLoaderConfig:
    def test_defaults(self):
        config = LoaderConfig()
        assert config.dedup.threshold == 0.85
        assert config.dedup.keep_rule == "longest"
        assert config.reader.extensions == [".md", ".markdown", ".txt"]
        assert config.index.index_files == ["SUMMARY.md"]

    def test_from_dict_partial(self):
        config = LoaderConfig.from_dict({"dedup": {"threshold": 0.9, "method": "line_diff"}})
        assert config.dedup.threshold == 0.9
        assert config.dedup.method == "line_diff"
        assert config.dedup.shingle_size == 3
        assert config.reader.encoding == "utf-8"

    def test_round_trip(self):
        config = LoaderConfig.from_dict({"reader": {"num_workers": 4}, "index": {"title_match": False}})
        assert LoaderConfig.from_dict(config.to_dict()) == config

    def test_extensions_normalized(self):
        assert ReaderConfig(extensions=["MD", ".TXT"]).extensions == [".md", ".txt"]

    @pytest.mark.parametrize("kwargs", [
        {"method": "cosine"},
        {"candidates": "everything"},
        {"keep_rule": "newest"},
        {"threshold": 1.5},
        {"threshold": -0.1},
        {"shingle_size": 0},
        {"num_workers": 0},
        {"timeout_seconds": -1},
    ])
    def test_invalid_dedup_config(self, kwargs):
        with pytest.raises(ConfigError):
            DedupConfig(**kwargs)

    def test_unknown_section(self):
        with pytest.raises(ConfigError):
            LoaderConfig.from_dict({"dedupe": {}})

    def test_unknown_key(self):
        with pytest.raises(ConfigError):
            LoaderConfig.from_dict({"dedup": {"bogus": 1}})

    def test_invalid_module_label_mode(self):
        with pytest.raises(ConfigError):
            LoaderConfig.from_dict({"index": {"module_labels": "magic"}})

    def test_config_error_is_value_error(self):
        with pytest.raises(ValueError):
            ReaderConfig(num_workers=0)


class TestConfigHash:
    def test_hash_stable(self):
        assert compute_config_hash(LoaderConfig()) == compute_config_hash(LoaderConfig())
        assert len(compute_config_hash(LoaderConfig())) == 16

    def test_hash_differs(self):
        other = LoaderConfig.from_dict({"dedup": {"threshold": 0.9}})
        assert compute_config_hash(LoaderConfig()) != compute_config_hash(other)


class TestYaml:
    def test_yaml_round_trip(self):
        config = LoaderConfig.from_dict({"dedup": {"candidates": "minhash", "timeout_seconds": 2.5}})
        assert config_from_yaml(config_to_yaml(config)) == config

    def test_empty_yaml_is_default(self):
        assert config_from_yaml("") == LoaderConfig()

    def test_non_mapping_yaml(self):
        with pytest.raises(ConfigError):
            config_from_yaml("- just\n- a list\n")

    def test_malformed_yaml(self):
        with pytest.raises(ConfigError):
            config_from_yaml("dedup: [unclosed")

    def test_shipped_default_matches_defaults(self):
        assert load_config(DEFAULT_YAML) == LoaderConfig()
