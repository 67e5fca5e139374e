"""
Separation algorithms
=====================

Base classes
------------

These classes are used to build mask-based source separation
algorithms. They provide helpful utilities and make it such that
an algorithm only has to implement ``run``.

.. automodule:: repet.separation.base
    :members:
    :autosummary:
    :undoc-members:

Primitive methods
-----------------

These methods are based on primitives - hard-wired perceptual
grouping cues that are used automatically by the brain.
Repetition is one of them.

.. automodule:: repet.separation.primitive
    :members:
    :autosummary:
    :undoc-members:

"""

from .base import (
    SeparationBase,
    MaskSeparationBase,
    SeparationException,
)

from . import primitive
