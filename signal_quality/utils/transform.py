"""
Spectral transform used by the frequency-domain analyzers.

Analyzers only rely on two methods, ``forward`` and ``generate_hann``, so any
object providing them can be injected in place of ``SpectralTransform``.
"""

import numpy as np
from scipy import signal as scipy_signal


class SpectralTransform:
    """
    Real-input FFT and Hann window provider.

    ``forward`` follows the half-spectrum convention: ``n`` real samples map
    to ``n // 2 + 1`` complex bins with resolution ``sample_rate / n``.
    Windows are cached per length since analyzers request the same size for
    every frame.
    """

    def __init__(self):
        self._window_cache = {}

    def forward(self, samples: np.ndarray) -> np.ndarray:
        return np.fft.rfft(np.asarray(samples, dtype=np.float64))

    def generate_hann(self, size: int) -> np.ndarray:
        """
        Periodic Hann window of ``size`` samples.

        Args:
            size: Window length

        Returns:
            Window coefficients (read-only, shared between callers)
        """
        window = self._window_cache.get(size)
        if window is None:
            window = scipy_signal.get_window('hann', size, fftbins=True).astype(np.float64)
            window.setflags(write=False)
            self._window_cache[size] = window
        return window


def magnitude_spectrum(transform, frame: np.ndarray) -> np.ndarray:
    """Hann-windowed magnitude spectrum of ``frame``."""
    window = transform.generate_hann(len(frame))
    return np.abs(np.asarray(transform.forward(frame * window)))
