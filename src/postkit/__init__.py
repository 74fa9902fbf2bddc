"""postkit -- front-matter content pipeline for static blog posts.

Reads authored Markdown documents, splits their front matter from the
body, and hands each ``(metadata, body)`` pair to a page renderer.
"""

__version__ = "0.1.0"
