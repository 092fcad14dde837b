"""
ProcessWire Studio

Developer tools for ProcessWire sites: template-file snippet generation and
the Data Page Lister.
"""

__version__ = "0.1.0"
