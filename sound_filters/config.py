# sound_filters/config.py
from dataclasses import MISSING, dataclass, field, fields
import yaml

from sound_filters.errors import InvalidParameterError
from sound_filters.filters.echo import OverflowPolicy


@dataclass
class EchoConfig:
    delay_seconds: float = 0.25
    decay: float = 0.6
    overflow: str = "wrap"  # "wrap" or "saturate"

    def __post_init__(self):
        if self.delay_seconds <= 0:
            raise InvalidParameterError(
                f"delay_seconds must be positive, got {self.delay_seconds}"
            )
        if not 0.0 < self.decay < 1.0:
            raise InvalidParameterError(f"decay must be in (0, 1), got {self.decay}")
        if self.overflow not in {p.value for p in OverflowPolicy}:
            raise InvalidParameterError(f"Unknown overflow policy: {self.overflow!r}")

    def num_delay_samples(self, sample_rate: int, channels: int = 1) -> int:
        """Delay length in interleaved samples for the given stream format."""
        frames = max(round(self.delay_seconds * sample_rate), 1)
        return frames * channels


@dataclass
class StreamConfig:
    chunk_size: int = 4096  # bytes per read

    def __post_init__(self):
        if self.chunk_size <= 0 or self.chunk_size % 2 != 0:
            raise InvalidParameterError(
                f"chunk_size must be a positive even number, got {self.chunk_size}"
            )


_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass
class SoundFiltersConfig:
    echo: EchoConfig = field(default_factory=EchoConfig)
    stream: StreamConfig = field(default_factory=StreamConfig)
    log_level: str = "INFO"

    def __post_init__(self):
        if not isinstance(self.log_level, str) or self.log_level.upper() not in _LOG_LEVELS:
            raise InvalidParameterError(
                f"log_level must be one of {', '.join(_LOG_LEVELS)}, got {self.log_level!r}"
            )
        self.log_level = self.log_level.upper()


def _build_nested(cls, data: dict | None):
    """Build a config dataclass from a YAML mapping, recursing into sections.

    Raises:
        InvalidParameterError: If a section is not a mapping or holds keys
            the dataclass does not define.
    """
    if data is None:
        return cls()
    if not isinstance(data, dict):
        raise InvalidParameterError(f"{cls.__name__} section must be a mapping, got {data!r}")
    sections = {f.name: f.default_factory for f in fields(cls) if f.default_factory is not MISSING}
    kwargs = {}
    for key, value in data.items():
        if key in sections:
            kwargs[key] = _build_nested(sections[key], value)
        else:
            kwargs[key] = value
    try:
        return cls(**kwargs)
    except TypeError as e:
        raise InvalidParameterError(f"Invalid {cls.__name__} settings: {e}") from e


def load_config(path: str) -> SoundFiltersConfig:
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    return _build_nested(SoundFiltersConfig, data)
