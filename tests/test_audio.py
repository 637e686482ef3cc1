from __future__ import annotations

from types import SimpleNamespace

import numpy as np
import pygame

from flappy.audio import SOUND_SPECS, AudioManager, make_tone


def _fake_sound(calls: list[str], *, fail: bool = False) -> SimpleNamespace:
    def _play() -> None:
        if fail:
            raise pygame.error("device lost")
        calls.append("play")

    return SimpleNamespace(
        play=_play,
        stop=lambda: calls.append("stop"),
        set_volume=lambda v: calls.append(f"volume:{v}"),
    )


def test_make_tone_matches_mixer_channels() -> None:
    stereo = make_tone(44100, 2, 440.0, 440.0, 100, 0.2)
    mono = make_tone(22050, 1, 440.0, 880.0, 100, 0.2, noise_mix=0.5)

    assert stereo.shape == (4410, 2)
    assert stereo.dtype == np.int16
    assert stereo.flags["C_CONTIGUOUS"]
    assert mono.shape == (2205,)
    assert np.abs(mono).max() <= int(0.2 * 32767) + 1


def test_every_effect_is_defined() -> None:
    assert set(SOUND_SPECS) == {"button_click", "back_button", "flap", "collision"}


def test_play_routes_to_named_sound() -> None:
    calls: list[str] = []
    audio = AudioManager(load=False)
    audio.sounds = {"flap": _fake_sound(calls)}

    audio.play("flap")

    assert calls == ["stop", "play"]


def test_muted_manager_plays_nothing() -> None:
    calls: list[str] = []
    audio = AudioManager(enabled=False, load=False)
    audio.sounds = {"flap": _fake_sound(calls)}

    audio.play("flap")

    assert calls == []


def test_unknown_sound_is_ignored() -> None:
    audio = AudioManager(load=False)
    audio.play("explosion")


def test_playback_failure_is_swallowed() -> None:
    calls: list[str] = []
    audio = AudioManager(load=False)
    audio.sounds = {"collision": _fake_sound(calls, fail=True)}

    audio.play("collision")

    assert calls == ["stop"]


def test_toggle_is_debounced() -> None:
    calls: list[str] = []
    audio = AudioManager(load=False)
    audio.sounds = {"flap": _fake_sound(calls)}

    assert audio.toggle_sound(now=10.0) is False
    assert audio.toggle_sound(now=10.1) is False
    assert audio.toggle_sound(now=10.5) is True
    assert calls == ["volume:0.0", "volume:1.0"]


def test_mixer_failure_leaves_audio_silent(monkeypatch) -> None:
    def _broken_init(*_args, **_kwargs) -> None:
        raise pygame.error("no audio device")

    monkeypatch.setattr(pygame.mixer, "get_init", lambda: None)
    monkeypatch.setattr(pygame.mixer, "init", _broken_init)

    audio = AudioManager()

    assert audio.sounds == {}
    audio.play("flap")
