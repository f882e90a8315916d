"""Outlook add-in scaffolder.

Generates starter projects for Outlook mail add-ins (HTML, Angular, Angular
with ADAL, or a bare manifest) and merges its own requirements into existing
``package.json`` / ``bower.json`` / ``tsd.json`` files.
"""

__version__ = "0.1.0"
