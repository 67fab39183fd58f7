"""analyzer_plugins

Core package namespace for the analyzer plugin generator.

Why this exists
---------------
The generator is split into three top-level packages:

* ``analyzer_plugins`` (this package) owns the *contracts*: domain types that
  flow between stages and the filesystem rules (workspace layout, atomic
  writes).
* ``tools`` holds the collaborators that talk to the outside world (NuGet
  feed, analyzer inspector, rules.xml, jar packaging).
* ``pipeline`` wires the collaborators together and decides go/no-go at each
  stage boundary.

Contracts do not depend on ``tools`` or ``pipeline``; that keeps the stage
boundaries honest.
"""

from __future__ import annotations
