"""Engine configuration management."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class EngineConfig:
    """Persistent engine configuration."""
    default_shots: int = 1024
    default_seed: int = 42
    noise_level: float = 0.01
    decoherence_coefficient: float = 0.1
    noise_seed_offset: int = 1000
    max_qubits: int = 4
    recent_files: list[str] = field(default_factory=list)

    _config_dir: Path = field(
        default_factory=lambda: Path.home() / ".qcircuit",
        repr=False)

    @property
    def config_path(self) -> Path:
        return self._config_dir / "config.json"

    @property
    def library_path(self) -> Path:
        return self._config_dir / "circuits.json"

    def save(self):
        self._config_dir.mkdir(parents=True, exist_ok=True)
        data = {
            "default_shots": self.default_shots,
            "default_seed": self.default_seed,
            "noise_level": self.noise_level,
            "decoherence_coefficient": self.decoherence_coefficient,
            "noise_seed_offset": self.noise_seed_offset,
            "max_qubits": self.max_qubits,
            "recent_files": self.recent_files[:10],
        }
        with open(self.config_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2)

    @classmethod
    def load(cls, config_dir: Path | str | None = None) -> EngineConfig:
        config = cls() if config_dir is None else cls(_config_dir=Path(config_dir))
        if config.config_path.exists():
            try:
                with open(config.config_path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
                for key, value in data.items():
                    if hasattr(config, key) and not key.startswith('_'):
                        setattr(config, key, value)
            except (json.JSONDecodeError, OSError):
                logger.warning("Ignoring unreadable config file %s", config.config_path)
        return config

    def add_recent_file(self, filepath: str):
        """Move ``filepath`` to the front of the recent list (at most 10 kept)."""
        if filepath in self.recent_files:
            self.recent_files.remove(filepath)
        self.recent_files.insert(0, filepath)
        self.recent_files = self.recent_files[:10]
