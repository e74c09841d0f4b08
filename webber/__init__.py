"""
Webber: turn a web site into an installable click package.

Derives a package-safe appname from the site URL, stages the click control
and data trees, and assembles them into a ``shortcut.click`` container.
"""

__version__ = "1.0.0"
