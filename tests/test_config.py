"""
Tests for exporter configuration.
"""

import pytest

from meteoexporter.config import ExporterConfig
from meteoexporter.exceptions import ConfigurationError
from meteoexporter.models import LabelKey, MetricKind


class TestExporterConfig:
    """Test defaults, derived values and validation."""

    def test_defaults(self):
        config = ExporterConfig()

        assert config.station_code == "T0147"
        assert config.place == "Rovereto"
        assert config.interval_seconds == 60.0
        assert config.listen_addr == ":8089"
        assert config.url_schema == "https"
        assert all(config.enabled(kind) for kind in MetricKind)
        assert config.validate() is config

    def test_url(self):
        config = ExporterConfig(url_schema="http", station_code="T0129")

        assert config.url == "http://dati.meteotrentino.it/service.asmx/ultimiDatiStazione?codice=T0129"

    def test_label_key(self):
        assert ExporterConfig(place="Trento").label_key == LabelKey("T0147", "Trento")

    def test_enabled_toggles(self):
        config = ExporterConfig(rain_enabled=False)

        assert config.enabled(MetricKind.TEMPERATURE)
        assert not config.enabled(MetricKind.RAIN)
        assert config.enabled(MetricKind.HUMIDITY)

    @pytest.mark.parametrize(
        "listen_addr, expected",
        [(":8089", ("0.0.0.0", 8089)), ("127.0.0.1:9000", ("127.0.0.1", 9000))],
    )
    def test_listen_address(self, listen_addr, expected):
        assert ExporterConfig(listen_addr=listen_addr).listen_address == expected

    @pytest.mark.parametrize(
        "changes, message",
        [
            ({"url_schema": "ftp"}, "URL schema"),
            ({"interval_seconds": 0}, "interval"),
            ({"listen_addr": "8089"}, "listen address"),
            ({"listen_addr": "localhost:http"}, "listen address"),
            ({"station_code": ""}, "Station code"),
            ({"log_level": "chatty"}, "Log level"),
            (
                {"temperature_enabled": False, "rain_enabled": False, "humidity_enabled": False},
                "No metric enabled",
            ),
        ],
    )
    def test_validate_rejects(self, changes, message):
        with pytest.raises(ConfigurationError, match=message):
            ExporterConfig(**changes).validate()

    def test_lowercase_log_level_accepted(self):
        assert ExporterConfig(log_level="debug").validate().log_level == "debug"

    def test_no_metric_allowed_when_not_required(self):
        config = ExporterConfig(
            temperature_enabled=False, rain_enabled=False, humidity_enabled=False
        )

        assert config.validate(require_metric=False) is config

    def test_with_overrides_skips_none_and_unknown(self):
        config = ExporterConfig().with_overrides(
            {"place": "Trento", "station_code": None, "bogus": 1}
        )

        assert config.place == "Trento"
        assert config.station_code == "T0147"


class TestFromEnv:
    """Test environment variable loading."""

    def test_reads_prefixed_variables(self):
        env = {
            "METEO_STATION_CODE": "T0129",
            "METEO_INTERVAL_SECONDS": "120",
            "METEO_RAIN_ENABLED": "false",
            "METEO_TIMEZONE": "Europe/Rome",
            "UNRELATED": "x",
        }

        config = ExporterConfig.from_env(env)

        assert config.station_code == "T0129"
        assert config.interval_seconds == 120.0
        assert config.rain_enabled is False
        assert config.timezone == "Europe/Rome"
        assert config.place == "Rovereto"

    def test_empty_optional_is_none(self):
        assert ExporterConfig.from_env({"METEO_TIMEZONE": ""}).timezone is None

    @pytest.mark.parametrize(
        "env",
        [{"METEO_HUMIDITY_ENABLED": "maybe"}, {"METEO_INTERVAL_SECONDS": "soon"}],
    )
    def test_invalid_values(self, env):
        with pytest.raises(ConfigurationError):
            ExporterConfig.from_env(env)

    def test_dotenv_file(self, tmp_path, monkeypatch):
        # registered so teardown removes whatever load_dotenv sets
        monkeypatch.setenv("METEO_PLACE", "unset")
        monkeypatch.delenv("METEO_PLACE")
        env_file = tmp_path / ".env"
        env_file.write_text("METEO_PLACE=Arco\n")

        config = ExporterConfig.from_env(dotenv_path=str(env_file))

        assert config.place == "Arco"
