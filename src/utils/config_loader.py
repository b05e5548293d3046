"""
Landing page configuration loader (brand, offer copy, redirect, questionnaire)
"""

import os
import yaml
from pathlib import Path
from typing import Any, Dict, Literal, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
import logging

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "landing_config.yml"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class BrandConfig(_Frozen):
    """Brand identity shown in the header and emails"""

    name: str
    tagline: str = ""
    accent: str = "#000000"
    website_url: str = ""


class OfferConfig(_Frozen):
    """Offer copy and the discount handed out on confirmation"""

    headline: str
    sub: str = ""
    cta: str = "Start"
    thank_you_title: str = "Check your email!"
    thank_you_body: str = ""
    discount_percent: int = Field(default=10, ge=0, le=100)
    discount_code: str


class QuestionConfig(_Frozen):
    """One questionnaire step"""

    id: str
    label: str
    placeholder: str = ""
    type: Literal["select"] = "select"
    options: Tuple[str, ...] = ()
    required: bool = False

    @field_validator("options")
    @classmethod
    def _options_not_empty(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        if not v:
            raise ValueError("select questions need at least one option")
        return v


class LandingConfig(_Frozen):
    """Complete landing configuration, injected once at startup"""

    brand: BrandConfig
    offer: OfferConfig
    redirect_url: str
    redirect_delay_seconds: int = Field(default=5, ge=0, le=300)
    questions: Tuple[QuestionConfig, ...]

    @field_validator("questions")
    @classmethod
    def _unique_question_ids(cls, v: Tuple[QuestionConfig, ...]) -> Tuple[QuestionConfig, ...]:
        if not v:
            raise ValueError("at least one question is required")
        ids = [q.id for q in v]
        if len(ids) != len(set(ids)):
            raise ValueError(f"duplicate question ids: {ids}")
        return v

    @property
    def question_ids(self) -> Tuple[str, ...]:
        return tuple(q.id for q in self.questions)

    def public_view(self) -> Dict[str, Any]:
        """Everything the client needs to render the wizard. Excludes the discount code."""
        return self.model_dump(mode="json", exclude={"offer": {"discount_code"}})


def load_landing_config(config_path: Optional[Path] = None) -> LandingConfig:
    """
    Load and validate the landing configuration from a YAML file

    Args:
        config_path: Path to config file. Defaults to $LANDING_CONFIG_PATH,
            then config/landing_config.yml

    Returns:
        Validated, immutable LandingConfig

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValidationError: If config doesn't match schema
    """
    if config_path is None:
        env_path = os.getenv("LANDING_CONFIG_PATH", "").strip()
        config_path = Path(env_path) if env_path else DEFAULT_CONFIG_PATH

    if not config_path.exists():
        raise FileNotFoundError(f"Landing config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        config_data = yaml.safe_load(f) or {}

    try:
        config = LandingConfig(**config_data)
        logger.info("Loaded landing config from %s (%d questions)", config_path, len(config.questions))
        return config
    except ValidationError as e:
        logger.error(f"Landing config validation failed: {e}")
        raise
