"""Run configuration for motor selection."""

from .parameter_manager import ParameterValidator
from .settings import SelectorConfig, load_config

__all__ = ["ParameterValidator", "SelectorConfig", "load_config"]
