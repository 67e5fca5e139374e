# Current repet version
__version__ = '0.1.0'

from .core import AudioSignal, STFTParams
from .core import utils, stft_utils, constants, masks

from . import core
from . import separation
from .separation.primitive import Repet, RepetParams, separate_background
