"""
Survey Engine Package

The structural core of a survey/assessment builder and taker:

    - model          entity types (Question, Section, Page, Survey, ...)
    - structure      consistent edits of the section/page/question tree
    - validator      structured validation reports and publishing
    - collector      page-by-page response collection state machine
    - statistics     aggregate statistics over submitted responses
    - storage        persistence gateway over a key-value blob store

ARCHITECTURAL GUARANTEE:
------------------------
This package contains ZERO knowledge of:
    - Rendering or styling
    - Routing between screens
    - Network transport

All of those live in the UI layer that consumes this package.
"""

__version__ = "0.1.0"
