"""NuGet package acquisition.

Split into:
  - api.py     : all HTTP calls to the NuGet v2 feed
  - nuspec.py  : pure parsing of package metadata
  - archive.py : safe nupkg extraction
  - fetch.py   : cache management + dependency closure
  - types.py   : small shared data structures
"""

from .fetch import fetch_package, package_dir_name, resolve_dependency_version  # noqa: F401
from .types import DEFAULT_PACKAGE_SOURCE, NuGetConfig  # noqa: F401
