"""
Engine settings data model.
"""

from dataclasses import dataclass
from typing import Any, Dict
import json


@dataclass
class EngineSettings:
    """
    Tunables for script generation and validation.

    Attributes:
        indent: Indentation of statements inside FindProxyForURL
        max_name_length: Proxy names longer than this get a warning
        large_script_threshold: PAC scripts longer than this get a warning
        max_pac_size: PAC scripts longer than this are rejected by the analyzer
        use_js_syntax_check: Parse PAC scripts with a JavaScript runtime when one is available
    """
    indent: str = "  "
    max_name_length: int = 50
    large_script_threshold: int = 10000
    max_pac_size: int = 1024 * 1024  # 1MB limit
    use_js_syntax_check: bool = True

    def __post_init__(self):
        """Validate settings after initialization."""
        self._validate()

    def _validate(self):
        """Validate engine settings."""
        if not self.indent or self.indent.strip(' \t'):
            raise ValueError("Indent must be a non-empty run of spaces or tabs")

        if not (1 <= self.max_name_length <= 500):
            raise ValueError("Max name length must be between 1 and 500")

        if self.large_script_threshold < 1:
            raise ValueError("Large script threshold must be positive")

        if self.max_pac_size < self.large_script_threshold:
            raise ValueError("Max PAC size cannot be below the large script threshold")

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary for serialization."""
        return {
            'indent': self.indent,
            'max_name_length': self.max_name_length,
            'large_script_threshold': self.large_script_threshold,
            'max_pac_size': self.max_pac_size,
            'use_js_syntax_check': self.use_js_syntax_check
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'EngineSettings':
        """Create settings from dictionary."""
        # Filter out unknown keys
        known_keys = {
            'indent', 'max_name_length', 'large_script_threshold',
            'max_pac_size', 'use_js_syntax_check'
        }
        filtered_data = {k: v for k, v in data.items() if k in known_keys}

        return cls(**filtered_data)

    def to_json(self) -> str:
        """Convert settings to JSON string."""
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_json(cls, json_str: str) -> 'EngineSettings':
        """Create settings from JSON string."""
        data = json.loads(json_str)
        return cls.from_dict(data)
