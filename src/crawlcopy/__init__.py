"""crawlcopy core package.

- **file_discovery**: Recursive tree walk producing FileRecord metadata
- **extensions**: Case-insensitive extension filter
- **collector**: Identifier assignment and copy-job construction for matches
- **worker_pool**: Bounded pool of copy workers with an error channel
- **reporting**: Tab-separated stdout report and CSV export
- **crawler**: Orchestration of a complete run

The main entry point is the ``Crawler`` class; ``crawlcopy.cli`` wraps it
as a command-line program.
"""

from .crawler import Crawler
from .version import __version__

__all__ = [
    "__version__",
    "Crawler",
]
