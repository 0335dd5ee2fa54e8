"""Command line front-end for MorseWav.

Reads and writes files on behalf of the codec, which itself only deals in
byte buffers. Defaults come from the JSON config (see mwav_config).

Usage:
    mwav encode "CQ CQ DE TEST" -o cq.wav --wpm 18
    mwav encode --pattern "... --- ..." -o sos.wav
    mwav timings --press 60,55,65 --gaps 60,60 -o keyed.wav
    mwav decode cq.wav --json
    mwav play cq.wav
    mwav lookup SOS
    mwav lookup --wpm 15 -- -.-
    mwav config --set wpm=15 --set tone_hz=650
"""
import argparse
import json
import logging
import sys
from typing import List, Optional

from mwav_codec import decode_wav, encode_morse_to_wav, encode_text_to_wav, encode_timings_to_wav
from mwav_config import (CodecSettings, coerce_setting, load_config, save_config,
                         settings_from_config, settings_to_config)
from mwav_keying import estimate_keying_wpm, keying_to_morse, playback_timings
from mwav_synth import TimingParameters
from mwav_utils import char_to_morse, is_valid_pattern, morse_to_char
from mwav_wav import extract_samples, parse_wav_header

logger = logging.getLogger('mwav')


def _int_list(value: str) -> List[int]:
    try:
        return [int(v) for v in value.split(',') if v.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected comma-separated integers, got {value!r}")


def _read_bytes(path: str) -> Optional[bytes]:
    try:
        with open(path, 'rb') as f:
            return f.read()
    except OSError as e:
        print(f"error: cannot read {path}: {e}", file=sys.stderr)
        return None


def _write_bytes(path: str, data: bytes) -> bool:
    try:
        with open(path, 'wb') as f:
            f.write(data)
    except OSError as e:
        print(f"error: cannot write {path}: {e}", file=sys.stderr)
        return False
    logger.info("wrote %s (%d bytes)", path, len(data))
    return True


def _open_sounddevice():
    """Import sounddevice lazily; PortAudio may be missing on headless hosts."""
    try:
        import sounddevice as sd
    except (ImportError, OSError) as e:
        logger.error("sounddevice unavailable: %s", e)
        return None
    return sd


def cmd_encode(args, settings: CodecSettings) -> int:
    params = TimingParameters(
        words_per_minute=args.wpm or settings.wpm,
        character_wpm=args.char_wpm or settings.character_wpm,
        tone_frequency_hz=args.tone or settings.tone_hz,
        sample_rate=settings.sample_rate,
    )
    if args.pattern:
        data = encode_morse_to_wav(args.message, params)
    else:
        data = encode_text_to_wav(args.message, params)
    return 0 if _write_bytes(args.output, data) else 1


def cmd_timings(args, settings: CodecSettings) -> int:
    wpm = estimate_keying_wpm(args.press, args.gaps)
    if wpm > 0:
        logger.info("keyed at ~%.1f WPM: %s", wpm, keying_to_morse(args.press, args.gaps, round(wpm)))
    data = encode_timings_to_wav(args.press, args.gaps, args.tone or settings.tone_hz, settings.sample_rate)
    return 0 if _write_bytes(args.output, data) else 1


def cmd_decode(args, settings: CodecSettings) -> int:
    data = _read_bytes(args.input)
    if data is None:
        return 1
    threshold = args.threshold if args.threshold is not None else settings.signal_threshold
    min_ms = args.min_signal_ms if args.min_signal_ms is not None else settings.min_signal_ms
    result = decode_wav(data, threshold, min_ms)
    if args.json:
        print(json.dumps({
            'morse_pattern': result.morse_pattern,
            'decoded_text': result.decoded_text,
            'estimated_wpm': result.estimated_wpm,
            'confidence': round(result.confidence, 4),
            'status': result.status.value,
        }, indent=2))
    else:
        print(result.decoded_text)
        print(f"pattern: {result.morse_pattern}")
        print(f"speed: {result.estimated_wpm} WPM  confidence: {result.confidence:.2f}")
    return 0


def cmd_play(args, settings: CodecSettings) -> int:
    data = _read_bytes(args.input)
    if data is None:
        return 1
    info = parse_wav_header(data)
    if info is None:
        print(f"error: {args.input} is not a valid WAV file", file=sys.stderr)
        return 1
    sd = _open_sounddevice()
    if sd is None:
        print("error: audio output is not available (install sounddevice/PortAudio)", file=sys.stderr)
        return 1
    samples = extract_samples(data, info).astype('float32')
    sd.play(samples, samplerate=info.sample_rate)
    sd.wait()
    return 0


def _describe_letter(ch: str, pattern: str, wpm: int) -> str:
    steps = ', '.join(f"{'tone' if on else 'gap'} {ms}" for ms, on in playback_timings(pattern, wpm))
    return f"{ch}  {pattern:<8} {steps} ms"


def cmd_lookup(args, settings: CodecSettings) -> int:
    wpm = args.wpm or settings.wpm
    status = 0
    for item in args.items:
        if item and set(item) <= set('.-'):
            if not is_valid_pattern(item):
                print(f"error: {item} is not a known pattern", file=sys.stderr)
                status = 1
                continue
            print(_describe_letter(morse_to_char(item), item, wpm))
            continue
        for ch in item.replace(' ', ''):
            pattern = char_to_morse(ch)
            if pattern is None:
                print(f"error: {ch!r} has no Morse pattern", file=sys.stderr)
                status = 1
                continue
            print(_describe_letter(ch.upper(), pattern, wpm))
    return status


def cmd_config(args, settings: CodecSettings) -> int:
    if not args.set:
        print(json.dumps(settings_to_config(settings), indent=2))
        return 0
    config = load_config()
    for item in args.set:
        key, sep, raw = item.partition('=')
        try:
            if not sep:
                raise ValueError(f"expected key=value, got {item!r}")
            config[key.strip()] = coerce_setting(key.strip(), raw.strip())
        except ValueError as e:
            print(f"error: {e}", file=sys.stderr)
            return 2
    try:
        save_config(config)
    except OSError as e:
        print(f"error: cannot save config: {e}", file=sys.stderr)
        return 1
    print(json.dumps(settings_to_config(settings_from_config(config)), indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='mwav',
        description="Convert between Morse code and WAV audio.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help="More logging (-vv for debug)")
    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('encode', help="Text or pattern to WAV")
    p.add_argument('message', help="Text to send, or a pattern with --pattern")
    p.add_argument('-o', '--output', required=True, help="Output WAV path")
    p.add_argument('--pattern', action='store_true', help="Treat message as a .-/ pattern")
    p.add_argument('--wpm', type=int, help="Effective speed (config default)")
    p.add_argument('--char-wpm', type=int, help="Farnsworth character speed")
    p.add_argument('--tone', type=int, help="Tone frequency in Hz")
    p.set_defaults(func=cmd_encode)

    p = sub.add_parser('timings', help="Recorded key presses to WAV")
    p.add_argument('--press', type=_int_list, required=True, help="Press durations (ms), comma-separated")
    p.add_argument('--gaps', type=_int_list, default=[], help="Gap durations (ms), comma-separated")
    p.add_argument('-o', '--output', required=True, help="Output WAV path")
    p.add_argument('--tone', type=int, help="Tone frequency in Hz")
    p.set_defaults(func=cmd_timings)

    p = sub.add_parser('decode', help="WAV to pattern and text")
    p.add_argument('input', help="WAV file to decode")
    p.add_argument('--threshold', type=float, help="Envelope threshold (0-1)")
    p.add_argument('--min-signal-ms', type=int, help="Shortest tone kept (ms)")
    p.add_argument('--json', action='store_true', help="Print the result as JSON")
    p.set_defaults(func=cmd_decode)

    p = sub.add_parser('play', help="Play a WAV file")
    p.add_argument('input', help="WAV file to play")
    p.set_defaults(func=cmd_play)

    p = sub.add_parser('lookup', help="Show the pattern and timing of letters or patterns")
    p.add_argument('items', nargs='+', help="Characters, or a .- pattern (after --)")
    p.add_argument('--wpm', type=int, help="Speed for the timing steps (config default)")
    p.set_defaults(func=cmd_lookup)

    p = sub.add_parser('config', help="Show or change saved defaults")
    p.add_argument('--set', action='append', metavar='KEY=VALUE', help="Persist a setting")
    p.set_defaults(func=cmd_config)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    level = logging.WARNING - 10 * min(args.verbose, 2)
    logging.basicConfig(level=level, format='%(levelname)s %(name)s: %(message)s')
    settings = settings_from_config(load_config())
    return args.func(args, settings)


if __name__ == '__main__':
    sys.exit(main())
