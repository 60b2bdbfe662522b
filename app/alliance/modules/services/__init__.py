"""
Service pages: a hero block plus ordered content sections.

The first section uses the drill icon and later ones the server icon;
only the second is mirrored. Sections are always rewritten as a whole on save.
"""
