import os
from dotenv import load_dotenv
from typing import Dict, Any

# Load environment variables from .env file
load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes", "on")


class Config:
    """Central configuration management for the Microdata extractor."""

    # Extraction defaults
    BASE_URI: str = os.getenv("MICRODATA_BASE_URI", "")
    REGISTRY: str = os.getenv("MICRODATA_REGISTRY", "")
    PARSER: str = os.getenv("MICRODATA_PARSER", "html.parser")
    VOCAB_EXPANSION: bool = _flag("MICRODATA_VOCAB_EXPANSION", "false")

    # Term policy hooks
    STRICT: bool = _flag("MICRODATA_STRICT", "false")
    CANONICALIZE: bool = _flag("MICRODATA_CANONICALIZE", "false")
    INTERN: bool = _flag("MICRODATA_INTERN", "true")

    LOG_LEVEL: str = os.getenv("MICRODATA_LOG_LEVEL", "INFO")

    @classmethod
    def to_dict(cls) -> Dict[str, Any]:
        """Return configuration as a dictionary for logging/debugging."""
        return {
            "BASE_URI": cls.BASE_URI,
            "REGISTRY": cls.REGISTRY,
            "PARSER": cls.PARSER,
            "VOCAB_EXPANSION": cls.VOCAB_EXPANSION,
            "STRICT": cls.STRICT,
            "CANONICALIZE": cls.CANONICALIZE,
            "INTERN": cls.INTERN,
            "LOG_LEVEL": cls.LOG_LEVEL
        }

# Initialize on import
config = Config()
