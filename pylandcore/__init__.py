"""pylandcore init."""

from pylandcore.adjacency import *
from pylandcore.core import *
from pylandcore.errors import *
from pylandcore.grid import *
from pylandcore.label import *
from pylandcore.landscape import *
from pylandcore.multilandscape import *
from pylandcore.patch import *

__version__ = "0.1.0"
