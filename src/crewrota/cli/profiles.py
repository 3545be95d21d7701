"""Named regime presets exposed via the CLI."""

from __future__ import annotations

from dataclasses import dataclass, field

from crewrota.scheduling.regime import RegimeParams


@dataclass(frozen=True)
class Preset:
    """Regime preset with a short description."""

    name: str
    description: str
    params: RegimeParams = field(default_factory=RegimeParams)


DEFAULT_PRESETS: dict[str, Preset] = {
    "14x7": Preset(
        name="14x7",
        description="Fourteen on, seven off with five induction days over a 90-day target.",
        params=RegimeParams(W=14, R=7, I=5, totalCoverageDays=90),
    ),
    "21x7": Preset(
        name="21x7",
        description="Long 21-day block, seven off, three induction days.",
        params=RegimeParams(W=21, R=7, I=3, totalCoverageDays=90),
    ),
    "10x5": Preset(
        name="10x5",
        description="Short ten-day block, five off, two induction days.",
        params=RegimeParams(W=10, R=5, I=2, totalCoverageDays=90),
    ),
    "14x6": Preset(
        name="14x6",
        description="Fourteen on, six off, four induction days over a 950-day target.",
        params=RegimeParams(W=14, R=6, I=4, totalCoverageDays=950),
    ),
}


def get_preset(name: str) -> Preset:
    key = name.lower()
    if key not in DEFAULT_PRESETS:
        available = ", ".join(sorted(DEFAULT_PRESETS))
        raise KeyError(f"Unknown preset '{name}'. Available: {available}")
    return DEFAULT_PRESETS[key]


def list_presets() -> tuple[Preset, ...]:
    return tuple(DEFAULT_PRESETS[key] for key in sorted(DEFAULT_PRESETS))


__all__ = ["Preset", "DEFAULT_PRESETS", "get_preset", "list_presets"]
