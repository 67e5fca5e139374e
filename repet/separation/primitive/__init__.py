"""
Foreground/background via REPET
-------------------------------

.. autoclass:: repet.separation.primitive.Repet
    :autosummary:

.. autoclass:: repet.separation.primitive.RepetParams

.. autofunction:: repet.separation.primitive.separate_background

"""

from .repet import Repet, RepetParams, separate_background
