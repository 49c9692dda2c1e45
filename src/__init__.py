"""sitecontent: content resolution layer for a two-locale headless-CMS site.

Resolves records from a remote content store, rewrites media URLs to the
CDN origin, and plans the paginated listings a static build has to emit.
"""

__version__ = "0.3.0"
