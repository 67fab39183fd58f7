"""tools/jar

Plugin archive packaging: MANIFEST.MF formatting (manifest_mf.py) and jar
assembly (packager.py).
"""

from .packager import build_plugin_jar  # noqa: F401
