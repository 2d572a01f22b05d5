"""
Example Usage of the Spatializer

This module contains example functions demonstrating the layouts and the
panning law.
"""

import math
import numpy as np

from .layouts import SpeakerLayout
from .panning import AudioSource
from .utils import LayoutKind


def demonstrate_desktop_sweep(steps: int = 9, decay_db: float = 3.0) -> np.ndarray:
    """
    Sweep a source from left to right in front of the desktop pair.

    Args:
        steps: Number of source positions along the sweep
        decay_db: Decay in dB for the layout rolloff

    Returns:
        Gains of shape (steps, 2)
    """
    layout = SpeakerLayout(LayoutKind.DESKTOP, decay_db=decay_db)
    source = AudioSource(layout)

    print(f"Desktop layout, rolloff {layout.rolloff:.4f}")
    history = []
    for x in np.linspace(-2.0, 2.0, steps):
        source.position = (x, 0.0, 0.5)
        left, right = source.gains
        print(f"  x = {x:+.2f}   left {left:.4f}   right {right:.4f}")
        history.append(source.gains)

    return np.array(history)


def demonstrate_sphere_orbit(steps: int = 8, radius: float = 0.5, decay_db: float = 3.0) -> np.ndarray:
    """
    Move a source on a horizontal circle inside the sphere.

    Prints the loudest channel and its mirrored channel at each step.

    Args:
        steps: Number of positions around the circle
        radius: Orbit radius (the speakers sit on the unit sphere)
        decay_db: Decay in dB for the layout rolloff

    Returns:
        Gains of shape (steps, 60)
    """
    layout = SpeakerLayout(LayoutKind.SPHERE, decay_db=decay_db)
    source = AudioSource(layout)

    print(f"Sphere layout, {layout.num_channels()} channels, rolloff {layout.rolloff:.4f}")
    history = []
    for step in range(steps):
        angle = 2 * math.pi * step / steps
        source.position = (-radius * math.cos(angle), 0.0, radius * math.sin(angle))
        loudest = int(np.argmax(source.gains))
        print(f"  angle {math.degrees(angle):6.1f} deg   loudest channel {loudest:2d} "
              f"({source[loudest]:.4f})   reflected {layout.reflect(loudest):2d}")
        history.append(source.gains)

    return np.array(history)


def main():
    """Run all demonstrations."""
    print("Desktop sweep:")
    demonstrate_desktop_sweep()
    print("\nSphere orbit:")
    demonstrate_sphere_orbit()


if __name__ == "__main__":
    main()
