"""Regime config files."""

from .loaders import RegimeConfig, dump_regime_config, load_regime_config

__all__ = ["RegimeConfig", "load_regime_config", "dump_regime_config"]
