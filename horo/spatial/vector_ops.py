"""
Vectorized Panning Operations Module

This module provides compiled kernels for the per-frame panning work, so a
control-rate update from an audio thread stays bounded in time and only
allocates the output buffer.
"""

import math
import numpy as np
import numba


@numba.njit
def _scaled_distance(dx: float, dy: float, dz: float) -> float:
    # Length of the components scaled into [-1, 1]; zero only for an exact hit
    scale = max(abs(dx), abs(dy), abs(dz))
    if scale == 0.0:
        return 0.0
    x = dx / scale
    y = dy / scale
    z = dz / scale
    return scale * math.sqrt(x*x + y*y + z*z)


@numba.njit
def fast_dbap_gains(positions: np.ndarray, active: np.ndarray,
                    source: np.ndarray, rolloff: float) -> np.ndarray:
    """
    Distance-based amplitude panning gains for one point source.

    Each active speaker gets a raw gain of 1/d, where d is its distance to the
    source. The raw gains are scaled by rolloff / sqrt(sum(1/d^2)), so the sum
    of squared gains equals rolloff^2.

    The law is evaluated relative to the nearest active speaker, as
    (d_min / d) * rolloff / sqrt(sum((d_min / d)^2)). Every ratio is at most 1
    and the sum is at least 1, so sources extremely close to a speaker or
    extremely far from the array still produce a normalized vector.

    When the source sits exactly on one or more active speakers those speakers
    share the whole rolloff (rolloff / sqrt(m) each for m coincident speakers)
    and every other channel is silent.

    Args:
        positions: Speaker positions of shape (n_channels, 3)
        active: Boolean mask of shape (n_channels,), inactive channels get 0
        source: Source position of shape (3,)
        rolloff: Linear rolloff constant

    Returns:
        Gains of shape (n_channels,)
    """
    n_channels = positions.shape[0]
    gains = np.zeros(n_channels, dtype=np.float64)
    distances = np.full(n_channels, np.inf)
    n_coincident = 0
    nearest = np.inf

    for i in range(n_channels):
        if not active[i]:
            continue

        d = _scaled_distance(positions[i, 0] - source[0],
                             positions[i, 1] - source[1],
                             positions[i, 2] - source[2])
        distances[i] = d
        if d == 0.0:
            n_coincident += 1
        elif d < nearest:
            nearest = d

    if n_coincident > 0:
        share = rolloff / math.sqrt(n_coincident)
        for i in range(n_channels):
            if distances[i] == 0.0:
                gains[i] = share
        return gains

    # No active speakers
    if nearest == np.inf:
        return gains

    total = 0.0
    for i in range(n_channels):
        if active[i]:
            r = nearest / distances[i]
            gains[i] = r
            total += r * r

    k = rolloff / math.sqrt(total)
    for i in range(n_channels):
        gains[i] *= k

    return gains


@numba.njit
def fast_apply_gains(audio: np.ndarray, gains: np.ndarray, out: np.ndarray) -> None:
    """
    Write a gain-weighted copy of a mono block into each speaker channel.

    The output buffer is supplied by the caller so a render loop can reuse it
    from block to block. Silent channels are zero-filled without touching
    the input.

    Args:
        audio: Mono audio block of shape (n_samples,)
        gains: Per-channel gains of shape (n_channels,)
        out: Output buffer of shape (n_channels, n_samples), overwritten
    """
    n_samples = audio.shape[0]
    for ch in range(gains.shape[0]):
        g = gains[ch]
        row = out[ch]
        if g == 0.0:
            row[:] = 0.0
            continue
        for s in range(n_samples):
            row[s] = audio[s] * g
