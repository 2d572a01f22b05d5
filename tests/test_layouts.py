"""
Unit tests for the layouts module.

These tests verify speaker placement, channel topology queries and the
reflection table for both layout kinds.
"""

import pytest
import numpy as np
import math
from horo.spatial.layouts import (
    SpeakerLayout, build_reflection_table, channel_groups, place_desktop, place_sphere
)
from horo.spatial.config import RESERVED_CHANNELS, SpatializerConfig
from horo.spatial.utils import LayoutKind
from horo.spatial.exceptions import ConfigurationError, ValidationError

TILT = math.pi / 8


class TestConstruction:
    """Tests for layout construction and configuration errors."""
    
    def test_kind_from_name(self):
        """Test that layout kinds can be given by name."""
        assert SpeakerLayout('desktop').kind is LayoutKind.DESKTOP
        assert SpeakerLayout('Sphere').kind is LayoutKind.SPHERE
    
    def test_unknown_kind(self):
        """Test that an unknown layout kind is rejected."""
        with pytest.raises(ConfigurationError):
            SpeakerLayout('octagon')
        with pytest.raises(ConfigurationError):
            SpeakerLayout(3)
    
    def test_channel_count_mismatch(self):
        """Test that a channel count not matching the kind is rejected."""
        with pytest.raises(ConfigurationError):
            SpeakerLayout(LayoutKind.DESKTOP, num_channels=60)
        with pytest.raises(ConfigurationError):
            SpeakerLayout(LayoutKind.SPHERE, num_channels=2)
    
    def test_matching_channel_count(self):
        """Test that the matching channel count is accepted."""
        assert SpeakerLayout(LayoutKind.SPHERE, num_channels=60).num_channels() == 60
        assert SpeakerLayout(LayoutKind.DESKTOP, num_channels=2).num_channels() == 2
    
    def test_invalid_decay(self):
        """Test that a non-finite decay is a configuration error."""
        with pytest.raises(ConfigurationError):
            SpeakerLayout(LayoutKind.DESKTOP, decay_db=float('nan'))
    
    def test_invalid_mirror_normal(self):
        """Test that a zero mirror normal is a configuration error."""
        with pytest.raises(ConfigurationError):
            SpeakerLayout(LayoutKind.DESKTOP, mirror_normal=(0, 0, 0))
    
    def test_rolloff(self):
        """Test that the rolloff follows the decay."""
        layout = SpeakerLayout(LayoutKind.DESKTOP, decay_db=6.0)
        assert abs(layout.rolloff - 10 ** (-6.0 / 20.0)) < 1e-12
        assert abs(SpeakerLayout(LayoutKind.DESKTOP).rolloff - 10 ** (-3.0 / 20.0)) < 1e-12
    
    def test_determinism(self):
        """Test that identical parameters give identical layouts."""
        a = SpeakerLayout(LayoutKind.SPHERE, decay_db=4.5)
        b = SpeakerLayout(LayoutKind.SPHERE, decay_db=4.5)
        np.testing.assert_array_equal(a.positions, b.positions)
        np.testing.assert_array_equal(a.reflection_table, b.reflection_table)
        assert a.rolloff == b.rolloff
    
    def test_read_only_arrays(self, sphere_layout):
        """Test that positions and tables cannot be modified in place."""
        with pytest.raises(ValueError):
            sphere_layout.positions[0, 0] = 5.0
        with pytest.raises(ValueError):
            sphere_layout.active[0] = False
        with pytest.raises(ValueError):
            sphere_layout.reflection_table[0] = 1
    
    def test_reinitialize(self):
        """Test that reinitializing replaces the rolloff and keeps the geometry."""
        layout = SpeakerLayout(LayoutKind.SPHERE, decay_db=0.0)
        positions = layout.positions.copy()
        
        layout.reinitialize(20.0)
        assert layout.decay_db == 20.0
        assert abs(layout.rolloff - 0.1) < 1e-12
        np.testing.assert_array_equal(layout.positions, positions)
        
        layout.reinitialize()
        assert abs(layout.rolloff - 0.1) < 1e-12
    
    def test_from_config(self, test_config):
        """Test building a layout from a configuration."""
        layout = SpeakerLayout.from_config(test_config)
        assert layout.kind is LayoutKind.DESKTOP
        assert layout.decay_db == 6.0


class TestDesktopPlacement:
    """Tests for the desktop stereo pair."""
    
    def test_positions(self, desktop_layout):
        """Test the two speakers sit at -x and +x."""
        np.testing.assert_array_equal(desktop_layout.positions, [[-1, 0, 0], [1, 0, 0]])
    
    def test_all_active(self):
        """Test that both desktop channels take part in mixing."""
        positions, active = place_desktop()
        assert positions.shape == (2, 3)
        assert active.all()


class TestSpherePlacement:
    """Tests for the 60-channel sphere."""
    
    def test_shape(self, sphere_layout):
        """Test position and mask sizes."""
        assert sphere_layout.positions.shape == (60, 3)
        assert sphere_layout.active.shape == (60,)
    
    def test_reserved_channels(self):
        """Test that reserved channels keep the sentinel and are inactive."""
        positions, active = place_sphere()
        for ch in RESERVED_CHANNELS:
            np.testing.assert_array_equal(positions[ch], [0.0, 0.0, 0.0])
            assert not active[ch]
        assert active.sum() == 54
        assert np.all(np.isfinite(positions))
    
    def test_placed_on_unit_sphere(self, sphere_layout):
        """Test that every placed speaker is at unit distance."""
        radii = np.linalg.norm(sphere_layout.positions[sphere_layout.active], axis=1)
        np.testing.assert_allclose(radii, 1.0, atol=1e-12)
    
    def test_ring_heights(self, sphere_layout):
        """Test the elevation of each ring."""
        pos = sphere_layout.positions
        np.testing.assert_allclose(pos[0:12, 1], math.sin(TILT), atol=1e-12)
        np.testing.assert_allclose(pos[16:46, 1], 0.0, atol=1e-12)
        np.testing.assert_allclose(pos[48:60, 1], -math.sin(TILT), atol=1e-12)
    
    def test_reference_positions(self, sphere_layout):
        """Test the first speaker of each ring and a quarter turn."""
        pos = sphere_layout.positions
        np.testing.assert_allclose(pos[0], [-math.cos(TILT), math.sin(TILT), 0.0], atol=1e-12)
        np.testing.assert_allclose(pos[16], [-1.0, 0.0, 0.0], atol=1e-12)
        np.testing.assert_allclose(pos[48], [-math.cos(TILT), -math.sin(TILT), 0.0], atol=1e-12)
        # Middle ring step 10 is a rotation by pi/2 about +y
        np.testing.assert_allclose(pos[26], [0.0, 0.0, 1.0], atol=1e-12)
        # Top ring step 6 is a rotation by pi/2 about +y
        np.testing.assert_allclose(pos[6], [0.0, math.sin(TILT), math.cos(TILT)], atol=1e-12)
    
    def test_ring_angles(self, sphere_layout):
        """Test the azimuth step of the middle ring."""
        pos = sphere_layout.positions
        for k, ch in enumerate(range(16, 46)):
            angle = math.pi * k / 20
            np.testing.assert_allclose(pos[ch], [-math.cos(angle), 0.0, math.sin(angle)], atol=1e-12)


class TestTopology:
    """Tests for channel arithmetic and the reflection table."""
    
    @pytest.mark.parametrize('kind', [LayoutKind.DESKTOP, LayoutKind.SPHERE])
    def test_full_revolution(self, kind):
        """Test that moving by N returns to the start."""
        layout = SpeakerLayout(kind)
        n = layout.num_channels()
        for ch in range(n):
            assert layout.move(ch, n) == ch
            assert 0 <= layout.move(ch, -3) < n
    
    @pytest.mark.parametrize('kind', [LayoutKind.DESKTOP, LayoutKind.SPHERE])
    def test_opposite_and_next(self, kind):
        """Test opposite and next agree with move."""
        layout = SpeakerLayout(kind)
        n = layout.num_channels()
        for ch in range(n):
            assert layout.opposite(ch) == layout.move(ch, n // 2)
            assert layout.next(ch) == (ch + 1) % n
    
    def test_sphere_wraparound(self, sphere_layout):
        """Test concrete channel arithmetic values."""
        assert sphere_layout.next(59) == 0
        assert sphere_layout.opposite(0) == 30
        assert sphere_layout.opposite(45) == 15
        assert sphere_layout.move(58, 5) == 3
    
    def test_desktop_reflection(self, desktop_layout):
        """Test that the stereo pair reflects onto itself."""
        assert desktop_layout.reflect(0) == 1
        assert desktop_layout.reflect(1) == 0
    
    @pytest.mark.parametrize('kind', [LayoutKind.DESKTOP, LayoutKind.SPHERE])
    def test_reflection_is_fixed_point_free_involution(self, kind):
        """Test that reflect is a permutation, its own inverse and moves every channel."""
        layout = SpeakerLayout(kind)
        n = layout.num_channels()
        table = [layout.reflect(ch) for ch in range(n)]
        assert sorted(table) == list(range(n))
        for ch in range(n):
            assert layout.reflect(layout.reflect(ch)) == ch
            assert layout.reflect(ch) != ch
    
    def test_sphere_mirror_pairs(self, sphere_layout):
        """Test channels with an exact mirror image are paired with it."""
        # Top ring: step k mirrors onto step 12 - k
        assert sphere_layout.reflect(1) == 11
        assert sphere_layout.reflect(5) == 7
        # Middle ring: step k mirrors onto step 20 - k
        assert sphere_layout.reflect(16) == 36
        assert sphere_layout.reflect(17) == 35
        # Bottom ring
        assert sphere_layout.reflect(49) == 59
    
    def test_reserved_channels_pair_together(self, sphere_layout):
        """Test that reserved channels only reflect onto reserved channels."""
        for ch in RESERVED_CHANNELS:
            assert sphere_layout.reflect(ch) in RESERVED_CHANNELS
    
    def test_odd_count_leaves_fixed_point(self):
        """Test that an unpaired channel maps to itself."""
        positions = np.array([[-1.0, 0, 0], [1.0, 0, 0], [0.0, 0, 1.0]])
        table = build_reflection_table(positions, np.ones(3, dtype=bool))
        assert list(table) == [1, 0, 2]
    
    def test_invalid_channel(self, desktop_layout):
        """Test that out-of-range or non-integer channels are rejected."""
        with pytest.raises(ValidationError):
            desktop_layout.reflect(2)
        with pytest.raises(ValidationError):
            desktop_layout.move(-1, 1)
        with pytest.raises(ValidationError):
            desktop_layout.next(1.5)

    def test_invalid_step(self, sphere_layout):
        """Test that a non-integer step is a validation error."""
        with pytest.raises(ValidationError):
            sphere_layout.move(0, 0.5)
        with pytest.raises(ValidationError):
            sphere_layout.move(0, '1')

    def test_check_channel(self, sphere_layout):
        """Test the public channel check returns valid channels unchanged."""
        assert sphere_layout.check_channel(np.int64(59)) == 59
        with pytest.raises(ValidationError):
            sphere_layout.check_channel(60)


class TestGroups:
    """Tests for the shared channel group table."""
    
    def test_sphere_groups(self, sphere_layout):
        """Test the ring groups cover the sphere without overlap."""
        groups = sphere_layout.groups
        assert groups['top'] == tuple(range(12))
        assert groups['middle'] == tuple(range(16, 46))
        assert groups['bottom'] == tuple(range(48, 60))
        assert groups['reserved'] == RESERVED_CHANNELS
        
        channels = sorted(ch for group in groups.values() for ch in group)
        assert channels == list(range(60))
    
    def test_desktop_groups(self, desktop_layout):
        """Test the stereo groups."""
        assert dict(desktop_layout.groups) == {'left': (0,), 'right': (1,)}
    
    def test_shared_and_read_only(self):
        """Test that the table is built once and cannot be mutated."""
        a = SpeakerLayout(LayoutKind.SPHERE).groups
        b = channel_groups(LayoutKind.SPHERE)
        assert a is b
        with pytest.raises(TypeError):
            a['top'] = (0,)
