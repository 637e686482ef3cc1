import logging
import time

import numpy as np
import pygame

logger = logging.getLogger(__name__)

# name -> (start Hz, end Hz, length ms, volume, noise mix)
SOUND_SPECS = {
    "button_click": (880.0, 660.0, 70, 0.20, 0.0),
    "back_button": (660.0, 440.0, 70, 0.20, 0.0),
    "flap": (520.0, 760.0, 90, 0.15, 0.1),
    "collision": (160.0, 60.0, 320, 0.30, 0.6),
}


def make_tone(sample_rate, channels, start_hz, end_hz, length_ms, volume, noise_mix=0.0, seed=0):
    """Build an int16 sample buffer for a short enveloped sweep, shaped for the mixer's channel count."""
    n = max(1, int(sample_rate * length_ms / 1000.0))
    t = np.arange(n) / sample_rate
    freq = np.linspace(start_hz, end_hz, n)
    phase = 2 * np.pi * np.cumsum(freq) / sample_rate
    wave = np.sin(phase)
    if noise_mix > 0:
        rng = np.random.default_rng(seed)
        wave = wave * (1.0 - noise_mix) + rng.uniform(-1.0, 1.0, n) * noise_mix
    wave = wave * np.hanning(n) * volume
    samples = (np.clip(wave, -1.0, 1.0) * 32767).astype(np.int16)
    if channels > 1:
        samples = np.ascontiguousarray(np.repeat(samples[:, None], channels, axis=1))
    return samples


class AudioManager:
    TOGGLE_DEBOUNCE_S = 0.3

    def __init__(self, enabled=True, load=True):
        self.sound_enabled = enabled
        self.sounds = {}
        self._last_toggle = None
        if load:
            self.sounds = self._load_sounds()

    def _load_sounds(self):
        try:
            if not pygame.mixer.get_init():
                pygame.mixer.init(frequency=44100, size=-16, channels=2)
            init_args = pygame.mixer.get_init()
        except pygame.error as exc:
            logger.debug("Audio unavailable, running silent: %s", exc)
            return {}
        if init_args is None:
            return {}

        sample_rate, _size, channels = init_args
        sounds = {}
        for seed, (name, spec) in enumerate(SOUND_SPECS.items()):
            try:
                buf = make_tone(sample_rate, channels, *spec, seed=seed)
                sounds[name] = pygame.sndarray.make_sound(buf)
            except (pygame.error, ValueError) as exc:
                logger.debug("Could not build sound %r: %s", name, exc)
        return sounds

    def play(self, name):
        if not self.sound_enabled:
            return
        sound = self.sounds.get(name)
        if sound is None:
            return
        try:
            sound.stop()
            sound.play()
        except pygame.error as exc:
            logger.debug("Playback of %r failed: %s", name, exc)

    def toggle_sound(self, now=None):
        """Flip the mute state. Repeated toggles inside the debounce window are ignored."""
        now = time.monotonic() if now is None else now
        if self._last_toggle is not None and now - self._last_toggle < self.TOGGLE_DEBOUNCE_S:
            return self.sound_enabled
        self._last_toggle = now

        self.sound_enabled = not self.sound_enabled
        for sound in self.sounds.values():
            try:
                sound.set_volume(1.0 if self.sound_enabled else 0.0)
            except pygame.error as exc:
                logger.debug("Could not change volume: %s", exc)
        logger.info("Sound toggled: %s", "on" if self.sound_enabled else "off")
        return self.sound_enabled
