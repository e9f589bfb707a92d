"""Configuration for the scan matching core."""

from dataclasses import dataclass
from pathlib import Path
import os
from typing import Optional

from logic.combo_assembler import AssemblerSettings, MAX_CANDIDATES_PER_SLOT, MAX_COMBOS
from logic.pair_scoring import ScoringThresholds
from logic.results_tabs import MAX_OUTFITS_BOTH_TABS, MAX_OUTFITS_SINGLE_TAB
from models.taxonomy import FitPreference, coerce_enum


@dataclass
class MatchingConfig:
    """Tunable thresholds and caps for one deployment.

    Defaults mirror the engine's named constants so an empty environment
    behaves exactly like calling the core directly.
    """

    high_threshold: float = 0.78
    high_shoes_threshold: float = 0.82
    medium_threshold: float = 0.58
    near_match_min: float = 0.70
    max_candidates_per_slot: int = MAX_CANDIDATES_PER_SLOT
    max_combos: int = MAX_COMBOS
    max_outfits_single_tab: int = MAX_OUTFITS_SINGLE_TAB
    max_outfits_both_tabs: int = MAX_OUTFITS_BOTH_TABS
    default_fit_preference: FitPreference = FitPreference.REGULAR
    log_level: str = "INFO"
    environment: str | None = None

    @classmethod
    def from_env(cls) -> "MatchingConfig":
        """Build a config from an environment YAML file overlaid with environment variables.

        ``APP_CONFIG_PATH`` names the file directly; otherwise ``APP_ENV``
        selects ``<MATCH_CONFIG_DIR>/<env>.yaml``. Each key can be overridden
        by the upper-cased environment variable of the same name.
        """

        env_name = os.getenv("APP_ENV")
        config_path = os.getenv("APP_CONFIG_PATH")
        config_dir = Path(os.getenv("MATCH_CONFIG_DIR", "config/environments"))
        yaml_config: dict = {}

        if config_path:
            path = Path(config_path)
        elif env_name:
            path = config_dir / f"{env_name}.yaml"
        else:
            path = None

        if path and path.exists():
            yaml_config = cls._load_yaml_config(path)

        def get_value(key: str, default: Optional[str] = None) -> Optional[str]:
            return os.getenv(key.upper(), yaml_config.get(key, default))

        defaults = cls()
        fit_preference = coerce_enum(
            FitPreference, get_value("default_fit_preference"), defaults.default_fit_preference
        )
        return cls(
            high_threshold=float(get_value("high_threshold", defaults.high_threshold)),
            high_shoes_threshold=float(get_value("high_shoes_threshold", defaults.high_shoes_threshold)),
            medium_threshold=float(get_value("medium_threshold", defaults.medium_threshold)),
            near_match_min=float(get_value("near_match_min", defaults.near_match_min)),
            max_candidates_per_slot=int(get_value("max_candidates_per_slot", defaults.max_candidates_per_slot)),
            max_combos=int(get_value("max_combos", defaults.max_combos)),
            max_outfits_single_tab=int(get_value("max_outfits_single_tab", defaults.max_outfits_single_tab)),
            max_outfits_both_tabs=int(get_value("max_outfits_both_tabs", defaults.max_outfits_both_tabs)),
            default_fit_preference=fit_preference,
            log_level=str(get_value("log_level", defaults.log_level)).upper(),
            environment=env_name,
        )

    def thresholds(self) -> ScoringThresholds:
        return ScoringThresholds(
            high=self.high_threshold,
            high_shoes=self.high_shoes_threshold,
            medium=self.medium_threshold,
            near_match_min=self.near_match_min,
        )

    def assembler_settings(self) -> AssemblerSettings:
        return AssemblerSettings(max_candidates_per_slot=self.max_candidates_per_slot, max_combos=self.max_combos)

    @staticmethod
    def _load_yaml_config(path: Path) -> dict:
        """Parse flat ``key: value`` lines; comments and blank lines are skipped."""

        config: dict[str, str] = {}
        for line in path.read_text().splitlines():
            stripped = line.split("#", 1)[0].strip()
            if not stripped or ":" not in stripped:
                continue
            key, raw_value = stripped.split(":", 1)
            value = raw_value.strip()
            if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
                value = value[1:-1]
            config[key.strip()] = value
        return config
