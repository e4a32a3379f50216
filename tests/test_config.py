"""Tests for PlanConfig."""

import pytest

from opticheck.config import PlanConfig
from opticheck.core.errors import BuildError
from opticheck.validation.types import Encoding, Mode


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("OPTICHECK_MODE", "OPTICHECK_ENCODING", "OPTICHECK_MAX_WORKERS"):
        monkeypatch.delenv(name, raising=False)


class TestPlanConfig:
    def test_defaults(self):
        config = PlanConfig()
        assert config.mode is Mode.SEQUENTIAL
        assert config.encoding is Encoding.RESULT
        assert config.max_workers is None

    def test_from_env_without_variables_uses_defaults(self):
        assert PlanConfig.from_env() == PlanConfig()

    def test_from_env_reads_all_variables(self, monkeypatch):
        monkeypatch.setenv("OPTICHECK_MODE", "Parallel")
        monkeypatch.setenv("OPTICHECK_ENCODING", "tagged")
        monkeypatch.setenv("OPTICHECK_MAX_WORKERS", "4")
        config = PlanConfig.from_env()
        assert config.mode is Mode.PARALLEL
        assert config.encoding is Encoding.TAGGED
        assert config.max_workers == 4

    def test_unknown_mode(self, monkeypatch):
        monkeypatch.setenv("OPTICHECK_MODE", "async")
        with pytest.raises(BuildError):
            PlanConfig.from_env()

    @pytest.mark.parametrize("workers", ["many", "0", "-2"])
    def test_invalid_workers(self, monkeypatch, workers):
        monkeypatch.setenv("OPTICHECK_MAX_WORKERS", workers)
        with pytest.raises(BuildError, match="OPTICHECK_MAX_WORKERS"):
            PlanConfig.from_env()
