"""
Configuration module for the voice call agent.

This module provides centralized configuration management for the application,
including constants, logging setup, and environment-based settings.

Key components:
- constants: Application-wide constants such as message types, termination
  phrases, default retry delays and speech parameters.
- logging_config: A consistent logging infrastructure with console and
  rotating file output.
- settings: Environment-backed runtime settings and call timings.

Usage examples:
```python
from voice_call.config.constants import LOGGER_NAME, TERMINATION_PHRASES
from voice_call.config.logging_config import configure_logging
from voice_call.config.settings import get_settings

logger = configure_logging()
settings = get_settings()
logger.info(f"Backend: {settings.backend_api_base}")
```
"""

# Config module initialization
