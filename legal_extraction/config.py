"""
Runtime configuration loaded from the environment and an optional .env file.
"""

import os
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Dict

from dotenv import load_dotenv

from .approval_workflow import ApprovalSettings

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    """Settings shared by the pipeline and its services."""
    confidence_threshold: float = 0.8
    mapping_threshold: float = 0.7
    default_form_type: str = "decret"
    form_specs_dir: Path = Path("templates/form_specs")
    output_dir: Path = Path("outputs/legal")
    log_level: str = "INFO"
    require_double_validation: bool = False
    escalation_timeout_hours: float = 48.0
    auto_assignment: bool = True
    learning_mode: bool = True

    @classmethod
    def from_env(cls) -> 'Settings':
        """Build settings from environment variables, with defaults."""
        settings = cls(
            confidence_threshold=float(os.getenv("CONFIDENCE_THRESHOLD", "0.8")),
            mapping_threshold=float(os.getenv("MAPPING_THRESHOLD", "0.7")),
            default_form_type=os.getenv("DEFAULT_FORM_TYPE", "decret"),
            form_specs_dir=Path(os.getenv("FORM_SPECS_DIR", "templates/form_specs")),
            output_dir=Path(os.getenv("OUTPUT_DIR", "outputs/legal")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            require_double_validation=_env_bool("REQUIRE_DOUBLE_VALIDATION", "false"),
            escalation_timeout_hours=float(os.getenv("ESCALATION_TIMEOUT_HOURS", "48")),
            auto_assignment=_env_bool("AUTO_ASSIGNMENT", "true"),
            learning_mode=_env_bool("LEARNING_MODE", "true"),
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        """
        Raises:
            ValueError: If a threshold is outside [0, 1] or the timeout is not positive
        """
        for name in ("confidence_threshold", "mapping_threshold"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be between 0 and 1, got {value}")
        if self.escalation_timeout_hours <= 0:
            raise ValueError("escalation_timeout_hours must be positive")

    def approval_settings(self) -> ApprovalSettings:
        return ApprovalSettings(
            auto_assignment=self.auto_assignment,
            escalation_timeout=self.escalation_timeout_hours,
            require_double_validation=self.require_double_validation,
            confidence_threshold=self.confidence_threshold,
            learning_mode_enabled=self.learning_mode,
        )

    def mapping_config(self) -> Dict[str, Any]:
        return {
            'mapping_threshold': self.mapping_threshold,
            'high_confidence_threshold': self.confidence_threshold,
            'form_specs_dir': self.form_specs_dir,
        }

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['form_specs_dir'] = str(self.form_specs_dir)
        data['output_dir'] = str(self.output_dir)
        return data
