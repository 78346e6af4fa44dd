#!/usr/bin/env python
"""
Particle Source - Main Runner Script

Creates particle start states from a geometry configuration.

Usage:
    python scripts/run_source.py examples/geometry.in
    python scripts/run_source.py examples/geometry.in -n 1000 --seed 1
    python scripts/run_source.py examples/geometry.in --no-plot

Output files (Data/, Figures/) are written to the current working
directory or to --output-dir.
"""

from pathlib import Path
import sys

# make the package importable when running from a checkout
project_dir = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_dir))

from particle_source.runner import main


if __name__ == "__main__":
    main()
