import numpy as np

from mwav_synth import (ElementDurations, MorseSynth, TimingParameters, fade_envelope,
                        sample_count, silence, tone)


def test_durations_at_20_wpm():
    assert TimingParameters(words_per_minute=20).durations() == ElementDurations(
        dot=60, dash=180, symbol_gap=60, letter_gap=180, word_gap=420)


def test_farnsworth_keeps_slow_gaps():
    d = TimingParameters(words_per_minute=10, character_wpm=20).durations()
    assert (d.dot, d.dash, d.symbol_gap) == (60, 180, 60)
    assert (d.letter_gap, d.word_gap) == (360, 840)


def test_slower_character_speed_is_honoured():
    d = TimingParameters(words_per_minute=20, character_wpm=10).durations()
    assert d == ElementDurations(dot=120, dash=360, symbol_gap=120, letter_gap=180, word_gap=420)
    synth = MorseSynth(TimingParameters(words_per_minute=20, character_wpm=10))
    # tone 120 + symbol 120 + (letter 180 - symbol 120) + tone 120 + tail 100
    assert len(synth.pattern_samples(". .")) == sample_count(120) * 3 + sample_count(60) + sample_count(100)


def test_letter_break_never_shorter_than_symbol_gap(caplog):
    synth = MorseSynth(TimingParameters(words_per_minute=20, character_wpm=5))
    with caplog.at_level('WARNING', logger='mwav_synth'):
        out = synth.pattern_samples(". . .")
    # tone 240 + symbol 240 per letter break, the negative remainder adds nothing
    assert len(out) == sample_count(240) * 5 + sample_count(100)
    assert sum('exceeds letter gap' in r.getMessage() for r in caplog.records) == 1


def test_out_of_range_wpm_is_clamped():
    assert TimingParameters(words_per_minute=200).durations().dot == 24
    assert TimingParameters(words_per_minute=1).durations().dot == 240


def test_tone_length_and_bounds():
    samples = tone(60, 700)
    assert samples.dtype == np.int16
    assert len(samples) == 2646
    assert samples.min() >= -32768 and samples.max() <= 32767
    assert np.any(np.abs(samples.astype(np.int32)) > 100)


def test_tone_fades_in_and_out():
    samples = tone(100, 700)
    assert samples[0] == 0
    assert abs(int(samples[-1])) < 200
    assert np.abs(samples.astype(np.int32)).max() <= round(32767 * 0.8) + 1


def test_very_short_tone_stays_in_range():
    samples = tone(3, 700)
    assert len(samples) == sample_count(3)
    assert np.all(np.abs(samples.astype(np.int32)) <= 32767)


def test_silence_is_zero():
    s = silence(100)
    assert len(s) == 4410
    assert not s.any()
    assert len(silence(-5)) == 0


def test_fade_envelope_overlapping_ramps():
    env = fade_envelope(10, 3)
    np.testing.assert_allclose(env, [0, 1 / 3, 2 / 3, 1, 1, 1, 1, 1, 2 / 3, 1 / 3])


def test_pattern_gap_arithmetic():
    synth = MorseSynth(TimingParameters(words_per_minute=20))
    # tone 60 + symbol gap 60 + tone 60 + tail 100
    assert len(synth.pattern_samples("..")) == sample_count(280)
    # tone 60 + symbol 60 + (letter 180 - symbol 60) + tone 60 + tail 100
    assert len(synth.pattern_samples(". .")) == sample_count(60) * 3 + sample_count(120) + sample_count(100)
    # tone 60 + word 420 + tone 60 + tail 100
    assert len(synth.pattern_samples("./.")) == sample_count(60) * 2 + sample_count(420) + sample_count(100)


def test_farnsworth_letter_gap_uses_effective_speed():
    synth = MorseSynth(TimingParameters(words_per_minute=10, character_wpm=20))
    assert len(synth.pattern_samples(". .")) == 2646 + 2646 + 13230 + 2646 + 4410


def test_letter_break_totals_letter_gap():
    synth = MorseSynth(TimingParameters(words_per_minute=15))
    letter_break = len(synth.pattern_samples(". .")) - len(synth.pattern_samples(".."))
    assert letter_break == sample_count(160)


def test_unknown_pattern_characters_are_ignored():
    synth = MorseSynth(TimingParameters())
    assert len(synth.pattern_samples("x")) == sample_count(100)


def test_timing_samples_are_verbatim():
    synth = MorseSynth(TimingParameters())
    out = synth.timing_samples([60, 55, 65], [60, 60])
    assert len(out) == sum(sample_count(d) for d in [60, 60, 55, 60, 65, 100])
    np.testing.assert_array_equal(out[:2646], tone(60, 700))


def test_timing_samples_with_fewer_gaps_than_presses():
    synth = MorseSynth(TimingParameters())
    out = synth.timing_samples([100, 100], [])
    assert len(out) == sample_count(300)
