"""
ResumeBuilder Pro - structured resume data, visual templates and PDF export

A resume document pipeline: structured resume data is combined with a
user-designed layout template, rendered to a standalone HTML document and
rasterized to a print-ready PDF by a headless browser.

Architecture:
- Intake Context: Resume data model, uploaded-file text extraction, AI parsing
- Templating Context: Template definition tree, structural edits, HTML rendering
- Rendering Context: PDF export through headless Chromium
"""

__version__ = "0.1.0"
