"""
Fisherfaces on blurred faces

A small OpenCV demo that trains a Fisherfaces (LDA) face recognizer on a
labeled image set augmented with blurred copies of every face, then labels
a blurred test image.

This package contains modules for loading and augmenting the dataset,
training, prediction, evaluation and fisherface visualization.
"""

__version__ = '1.0.0'
