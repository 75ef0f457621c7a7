# sound_filters/main.py
"""Apply an echo to a 16-bit PCM WAV file.

Usage:
  python -m sound_filters.main input.wav output.wav --delay 0.3 --decay 0.5
"""

import argparse
import dataclasses
import logging
import sys
import wave

import yaml

from sound_filters.audio.codec import BYTES_PER_SAMPLE
from sound_filters.audio.stream import FilteredSoundStream
from sound_filters.config import SoundFiltersConfig, load_config
from sound_filters.errors import InvalidParameterError, OutOfBoundsError
from sound_filters.filters.echo import EchoFilter, OverflowPolicy

logger = logging.getLogger(__name__)


class _WavSource:
    """Byte-oriented ``read(size)`` over a ``wave`` reader."""

    def __init__(self, wav: wave.Wave_read):
        self._wav = wav
        self._frame_bytes = wav.getsampwidth() * wav.getnchannels()

    def read(self, size: int) -> bytes:
        return self._wav.readframes(max(size // self._frame_bytes, 1))


def apply_echo(input_path: str, output_path: str, config: SoundFiltersConfig) -> int:
    """Echo ``input_path`` into ``output_path``. Returns bytes written.

    Raises:
        ValueError: If the input is not 16-bit PCM.
    """
    with wave.open(input_path, "rb") as src:
        if src.getsampwidth() != BYTES_PER_SAMPLE:
            raise ValueError(f"Unsupported sample width: {src.getsampwidth()} bytes")

        channels = src.getnchannels()
        sample_rate = src.getframerate()
        echo = EchoFilter(
            config.echo.num_delay_samples(sample_rate, channels),
            config.echo.decay,
            OverflowPolicy(config.echo.overflow),
        )
        logger.info(
            "Echo on %s: %d Hz, %d channel(s), %.3fs delay, decay %.2f",
            input_path, sample_rate, channels, config.echo.delay_seconds, config.echo.decay,
        )

        stream = FilteredSoundStream(_WavSource(src), echo)
        written = 0
        with wave.open(output_path, "wb") as dst:
            dst.setnchannels(channels)
            dst.setsampwidth(BYTES_PER_SAMPLE)
            dst.setframerate(sample_rate)
            while True:
                chunk = stream.read(config.stream.chunk_size)
                if not chunk:
                    break
                dst.writeframes(chunk)
                written += len(chunk)

    logger.info("Wrote %d bytes to %s", written, output_path)
    return written


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Add an echo to a 16-bit PCM WAV file.")
    parser.add_argument("input", help="Source WAV file.")
    parser.add_argument("output", help="Destination WAV file.")
    parser.add_argument("--config", help="YAML config file (defaults built in).")
    parser.add_argument("--delay", type=float, help="Override echo delay in seconds.")
    parser.add_argument("--decay", type=float, help="Override echo decay, 0 < decay < 1.")
    return parser.parse_args(argv)


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    try:
        config = load_config(args.config) if args.config else SoundFiltersConfig()
        overrides = {}
        if args.delay is not None:
            overrides["delay_seconds"] = args.delay
        if args.decay is not None:
            overrides["decay"] = args.decay
        if overrides:
            config.echo = dataclasses.replace(config.echo, **overrides)
    except (OSError, yaml.YAMLError, InvalidParameterError) as e:
        logging.basicConfig(level=logging.INFO)
        logger.error("Invalid configuration: %s", e)
        return 1

    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        apply_echo(args.input, args.output, config)
    except (OSError, EOFError, wave.Error, ValueError, OutOfBoundsError) as e:
        logger.error("Echo failed: %s", e)
        return 1
    return 0


def _cli() -> None:
    sys.exit(main(sys.argv[1:]))


if __name__ == "__main__":
    _cli()
