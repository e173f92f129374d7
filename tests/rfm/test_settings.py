"""Tests for rfm_analysis.settings."""

from __future__ import annotations

import numpy as np
import pytest
from pydantic import ValidationError

from rfm_analysis.exceptions import ConfigError, ParameterValidationError
from rfm_analysis.settings import DEFAULT_SEGMENTS, OutputConfig, Settings, validate_parameters


class TestSettings:
    def test_defaults(self):
        s = Settings()
        assert s.data_file is None
        assert s.lookback_months == 12
        assert s.segments == DEFAULT_SEGMENTS
        assert s.tie_method == "inclusive"
        assert s.outputs == OutputConfig()

    def test_default_segments_not_shared(self):
        assert Settings().segments is not DEFAULT_SEGMENTS

    def test_frozen(self):
        s = Settings()
        with pytest.raises(ValidationError):
            s.lookback_months = 6

    def test_extra_forbidden(self):
        with pytest.raises(ValidationError):
            Settings(colour="blue")

    def test_data_file_must_exist(self, tmp_path):
        with pytest.raises(ValidationError, match="not found"):
            Settings(data_file=tmp_path / "missing.csv")

    def test_data_file_suffix(self, tmp_path):
        bad = tmp_path / "notes.txt"
        bad.write_text("x")
        with pytest.raises(ValidationError, match="Unsupported"):
            Settings(data_file=bad)

    def test_data_file_resolved(self, sample_csv_path):
        s = Settings(data_file=str(sample_csv_path))
        assert s.data_file == sample_csv_path.resolve()

    @pytest.mark.parametrize("months", [0, -1, 121])
    def test_lookback_range(self, months):
        with pytest.raises(ValidationError):
            Settings(lookback_months=months)

    def test_segments_cleaned(self):
        s = Settings(segments=[" Privado ", "", "Autarquia"])
        assert s.segments == ["Privado", "Autarquia"]

    def test_single_segment_string(self):
        assert Settings(segments="Privado").segments == ["Privado"]

    def test_blank_segments_rejected(self):
        with pytest.raises(ValidationError):
            Settings(segments=["  "])

    def test_unknown_tie_method(self):
        with pytest.raises(ValidationError):
            Settings(tie_method="average")


class TestFromYaml:
    def test_loads_and_overrides(self, tmp_path, sample_csv_path):
        cfg = tmp_path / "config.yaml"
        cfg.write_text(
            f"data_file: {sample_csv_path}\n"
            "lookback_months: 6\n"
            "segments: [Privado]\n"
            "outputs:\n  json_blob: true\n"
        )
        s = Settings.from_yaml(cfg, lookback_months=3, analysis_name=None)
        assert s.lookback_months == 3
        assert s.segments == ["Privado"]
        assert s.outputs.json_blob is True
        assert s.analysis_name is None

    def test_missing_file_uses_defaults(self, tmp_path):
        s = Settings.from_yaml(tmp_path / "absent.yaml")
        assert s.lookback_months == 12

    def test_invalid_wrapped(self, tmp_path):
        cfg = tmp_path / "config.yaml"
        cfg.write_text("colour: blue\n")
        with pytest.raises(ConfigError):
            Settings.from_yaml(cfg)

    def test_bad_lookback_is_parameter_error(self, tmp_path):
        cfg = tmp_path / "config.yaml"
        cfg.write_text("lookback_months: 0\n")
        with pytest.raises(ParameterValidationError):
            Settings.from_yaml(cfg)


class TestFromArgs:
    def test_builds(self, sample_csv_path, tmp_path):
        s = Settings.from_args(sample_csv_path, output_dir=tmp_path)
        assert s.data_file == sample_csv_path.resolve()

    def test_missing_file_wrapped(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            Settings.from_args(tmp_path / "nope.xlsx")

    @pytest.mark.parametrize(
        "overrides", [{"lookback_months": 0}, {"segments": []}, {"segments": ["  "]}]
    )
    def test_bad_parameters(self, sample_csv_path, overrides):
        with pytest.raises(ParameterValidationError):
            Settings.from_args(sample_csv_path, **overrides)

    def test_parameter_error_is_not_config_error(self, sample_csv_path):
        with pytest.raises(ParameterValidationError) as exc_info:
            Settings.from_args(sample_csv_path, lookback_months=0)
        assert not isinstance(exc_info.value, ConfigError)


class TestValidateParameters:
    def test_returns_tags(self):
        assert validate_parameters(12, ["Privado"]) == ["Privado"]

    def test_single_string(self):
        assert validate_parameters(1, "Privado") == ["Privado"]

    @pytest.mark.parametrize("segments", [[], None, [""]])
    def test_empty_segments(self, segments):
        with pytest.raises(ParameterValidationError):
            validate_parameters(12, segments)

    @pytest.mark.parametrize("months", [0, -3, 1.5, True, "12"])
    def test_bad_months(self, months):
        with pytest.raises(ParameterValidationError):
            validate_parameters(months, ["Privado"])

    def test_numpy_integer_months(self):
        assert validate_parameters(np.int64(12), ["Privado"]) == ["Privado"]
