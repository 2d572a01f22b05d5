#!/usr/bin/env python
"""
Spatializer Demonstration Script

This script runs demonstrations of the speaker layouts and DBAP panning.
"""

import argparse
import logging
from horo.spatial.examples import demonstrate_desktop_sweep, demonstrate_sphere_orbit

def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description='Spatializer Demonstration Script')
    parser.add_argument('demo', nargs='?', choices=['desktop', 'sphere', 'all'],
                      default='all', help='Which demo to run (default: all)')
    parser.add_argument('--decay', type=float, default=3.0,
                      help='Decay in dB used for the rolloff (default: 3.0)')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')
    return parser.parse_args()

if __name__ == "__main__":
    args = parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(levelname)s %(name)s: %(message)s')
    
    print("Speaker Layout / DBAP Demonstrations")
    print("====================================")
    
    if args.demo == 'desktop' or args.demo == 'all':
        print("\nRunning Desktop Sweep Demo:")
        print("---------------------------")
        demonstrate_desktop_sweep(decay_db=args.decay)
    
    if args.demo == 'sphere' or args.demo == 'all':
        print("\nRunning Sphere Orbit Demo:")
        print("--------------------------")
        demonstrate_sphere_orbit(decay_db=args.decay)
    
    if args.demo == 'all':
        print("\nAll demonstrations complete!")
