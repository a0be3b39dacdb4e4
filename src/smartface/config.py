"""Configuration for the capture gate.

Example:
    >>> from smartface.config import GateConfig
    >>> config = GateConfig(max_captures=3, max_yaw_degrees=10.0)
    >>> config = GateConfig.from_yaml("gate.yaml")
"""

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Union


@dataclass(frozen=True)
class GateConfig:
    """Angular tolerances, crop padding and capture limit.

    Attributes:
        max_captures: Number of accepted frames after which processing stops.
        max_yaw_degrees: Maximum absolute yaw before a frame is rejected.
        max_pitch_degrees: Configured maximum absolute pitch. The effective
            threshold is this value times the gate's pitch multiplier.
        padding: Fraction of the landmark box size added around the crop.
        emit_status: Whether a status string is produced per frame.
    """

    max_captures: int = 5
    max_yaw_degrees: float = 15.0
    max_pitch_degrees: float = 15.0
    padding: float = 0.2
    emit_status: bool = True

    def __post_init__(self) -> None:
        if self.max_captures < 0:
            raise ValueError(f"max_captures must be >= 0, got {self.max_captures}")
        if self.max_yaw_degrees < 0:
            raise ValueError(f"max_yaw_degrees must be >= 0, got {self.max_yaw_degrees}")
        if self.max_pitch_degrees < 0:
            raise ValueError(f"max_pitch_degrees must be >= 0, got {self.max_pitch_degrees}")
        if self.padding < 0:
            raise ValueError(f"padding must be >= 0, got {self.padding}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GateConfig":
        """Create a config from a dictionary.

        Unknown keys are ignored; missing keys keep their defaults. The
        ``padding_fraction`` alias is accepted for ``padding``.

        Example:
            >>> import yaml
            >>> with open("gate.yaml") as f:
            ...     data = yaml.safe_load(f)
            >>> config = GateConfig.from_dict(data)
        """
        data = dict(data or {})
        if "padding_fraction" in data and "padding" not in data:
            data["padding"] = data.pop("padding_fraction")

        known = {f.name: f for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            if key not in known:
                continue
            if key == "max_captures":
                kwargs[key] = int(value)
            elif key == "emit_status":
                kwargs[key] = bool(value)
            else:
                kwargs[key] = float(value)
        return cls(**kwargs)

    @classmethod
    def from_yaml(cls, yaml_path: Union[str, Path]) -> "GateConfig":
        """Load a config from a YAML file.

        Raises:
            FileNotFoundError: If the file doesn't exist.
        """
        import yaml

        path = Path(yaml_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        # Allow the settings to live under a top-level "gate" key
        if isinstance(data.get("gate"), dict):
            data = data["gate"]
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dictionary for serialization."""
        return asdict(self)


__all__ = ["GateConfig"]
