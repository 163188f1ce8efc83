from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import NamedTuple

from rich.console import Console
from rich.table import Table

from .audio import CHANNEL_COUNTS, SAMPLE_RATES, SAMPLE_SIZES, export_audio
from .codec import load_params, save_params
from .logging_utils import command_context, configure_logging, debug_enabled, log_exception
from .mutate import mutate
from .params import PARAM_GROUPS, SoundParams
from .presets import PRESET_NAMES, preset
from .rng import DesignRandom
from .synth import SAMPLE_RATE, generate

_LOGGER = logging.getLogger("retrosfx.cli")
_CONSOLE = Console()
_DEFAULT_OUTPUT = "output.wav"
_DEFAULT_FORMAT = "44100,16,1"


class WaveFormat(NamedTuple):
    sample_rate: int
    sample_size: int
    channels: int


DEFAULT_FORMAT = WaveFormat(SAMPLE_RATE, 16, 1)


def parse_format(text: str) -> WaveFormat:
    """Parse ``rate,bits,channels``; unsupported values fall back to defaults."""

    values = [part.strip() for part in text.split(",")]
    if len(values) != 3:
        _LOGGER.warning("Incorrect number of format values: %r", text)
        return DEFAULT_FORMAT
    try:
        sample_rate, sample_size, channels = (int(value) for value in values)
    except ValueError:
        _LOGGER.warning("Format values must be integers: %r", text)
        return DEFAULT_FORMAT

    if sample_rate not in SAMPLE_RATES:
        _LOGGER.warning("Sample rate not supported. Default: %d Hz", DEFAULT_FORMAT.sample_rate)
        sample_rate = DEFAULT_FORMAT.sample_rate
    if sample_size not in SAMPLE_SIZES:
        _LOGGER.warning("Sample size not supported. Default: %d bit", DEFAULT_FORMAT.sample_size)
        sample_size = DEFAULT_FORMAT.sample_size
    if channels not in CHANNEL_COUNTS:
        _LOGGER.warning("Channels number not supported. Default: %d (mono)", DEFAULT_FORMAT.channels)
        channels = DEFAULT_FORMAT.channels
    return WaveFormat(sample_rate, sample_size, channels)


def _params_table(params: SoundParams, title: str) -> Table:
    table = Table(title=title)
    table.add_column("group")
    table.add_column("parameter")
    table.add_column("value", justify="right")
    table.add_row("", "rand_seed", str(params.rand_seed))
    table.add_row("", "wave_type", params.wave_type.name.lower())
    for group in PARAM_GROUPS:
        for index, (field, value) in enumerate(params.group(group).items()):
            table.add_row(group if index == 0 else "", field, f"{value:.4f}")
    return table


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="retrosfx")
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Generate audio from an .rfx file.")
    render.add_argument("input", type=str)
    render.add_argument("-o", "--output", type=str, default=_DEFAULT_OUTPUT)
    render.add_argument(
        "-f",
        "--format",
        type=str,
        default=_DEFAULT_FORMAT,
        help="<sample_rate>,<sample_size>,<channels> (22050|44100, 8|16|32, 1|2)",
    )

    make = sub.add_parser("preset", help="Build a preset sound and save it as .rfx.")
    make.add_argument("name", choices=PRESET_NAMES, type=str)
    make.add_argument("-o", "--output", type=str, default=None)
    make.add_argument("--seed", type=int, default=None)
    make.add_argument("--wav", type=str, default=None, help="Also render to this .wav path.")

    change = sub.add_parser("mutate", help="Randomly nudge the parameters of an .rfx file.")
    change.add_argument("input", type=str)
    change.add_argument("-o", "--output", type=str, default=None)
    change.add_argument("--seed", type=int, default=None)

    info = sub.add_parser("info", help="Show the parameters of an .rfx file.")
    info.add_argument("input", type=str)
    return parser


def _render(args: argparse.Namespace) -> int:
    params = load_params(args.input)
    wave_format = parse_format(args.format)
    _CONSOLE.print(f"Input file:       {args.input}")
    _CONSOLE.print(f"Output file:      {args.output}")
    _CONSOLE.print(
        f"Output format:    {wave_format.sample_rate} Hz, {wave_format.sample_size} bits, "
        f"{'Mono' if wave_format.channels == 1 else 'Stereo'}"
    )
    with _CONSOLE.status("Generating wave"):
        audio = generate(params)
    path = export_audio(
        args.output,
        audio,
        sample_rate=wave_format.sample_rate,
        sample_size=wave_format.sample_size,
        channels=wave_format.channels,
    )
    _CONSOLE.print(f"Wrote {len(audio)} frames to {path}")
    return 0


def _preset(args: argparse.Namespace) -> int:
    rng = DesignRandom(args.seed)
    params = preset(args.name, rng)
    output = Path(args.output or f"{args.name}.rfx")
    save_params(params, output)
    _CONSOLE.print(f"Saved {args.name} preset to {output} (seed={params.rand_seed})")
    if args.wav:
        path = export_audio(args.wav, generate(params))
        _CONSOLE.print(f"Wrote {path}")
    return 0


def _mutate(args: argparse.Namespace) -> int:
    params = load_params(args.input)
    if args.seed is None:
        mutate(params, DesignRandom())
    else:
        mutate(params, DesignRandom(args.seed), reseed=False)
    output = Path(args.output or args.input)
    save_params(params, output)
    _CONSOLE.print(f"Saved mutated parameters to {output}")
    return 0


def _info(args: argparse.Namespace) -> int:
    params = load_params(args.input)
    _CONSOLE.print(_params_table(params, title=str(args.input)))
    frames = len(generate(params))
    _CONSOLE.print(f"Length: {frames} frames ({frames / SAMPLE_RATE:.3f}s at {SAMPLE_RATE} Hz)")
    return 0


_COMMANDS = {
    "render": _render,
    "preset": _preset,
    "mutate": _mutate,
    "info": _info,
}


def main(argv: list[str] | None = None) -> int:
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    command = _COMMANDS.get(args.command)
    if command is None:
        parser.print_help()
        return 1
    with command_context(args.command):
        try:
            return command(args)
        except Exception as exc:
            _LOGGER.warning("retrosfx %s failed: %s", args.command, exc, exc_info=debug_enabled())
            log_exception("retrosfx CLI", exc)
            _CONSOLE.print(f"[bold red]retrosfx failed:[/] {type(exc).__name__}: {exc}")
            return 1


if __name__ == "__main__":
    raise SystemExit(main())
