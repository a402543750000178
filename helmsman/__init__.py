__title__ = 'helmsman'
__license__ = 'MIT'
__version__ = "0.1.0"

import logging

from .arguments import *
from .commands import *
from .tokenizer import *
from .registry import *
from .converter import *
from .binder import *
from .console import *
from .help import *
from .application import *
from .faults import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
))

version_info = VersionInfo(0, 1, 0, "final", 0)

# Library logging: silent unless the host application configures handlers.
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = (
    "__title__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of the arguments
__all__ += arguments.__all__  # type: ignore[attr-defined]
# Load the exposed API of the commands
__all__ += commands.__all__  # type: ignore[attr-defined]
# Load the exposed API of the tokenizer
__all__ += tokenizer.__all__  # type: ignore[attr-defined]
# Load the exposed API of the registry
__all__ += registry.__all__  # type: ignore[attr-defined]
# Load the exposed API of the converter
__all__ += converter.__all__  # type: ignore[attr-defined]
# Load the exposed API of the binder
__all__ += binder.__all__  # type: ignore[attr-defined]
# Load the exposed API of the console
__all__ += console.__all__  # type: ignore[attr-defined]
# Load the exposed API of the help renderer
__all__ += help.__all__  # type: ignore[attr-defined]
# Load the exposed API of the application
__all__ += application.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
