#!/usr/bin/env python
"""
Fisherfaces blur demo

Trains a Fisherfaces model on the faces listed in a CSV file, each face
augmented with four blurred copies, then labels a blurred test image.

Usage:
    python run_demo.py <csv.ext> [<output_folder>] [--test-label N] [--visualize]

Run ``python run_demo.py --help`` for every option.
"""

import sys

from fisherblur.main import main

if __name__ == "__main__":
    sys.exit(main())
