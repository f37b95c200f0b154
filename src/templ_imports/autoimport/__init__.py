"""
Auto-Import Primitive.

Single-file import resolution for Python units: ``AutoImporter`` in
``templ_imports.autoimport.importer`` adds the imports a unit needs and drops
the ones it never reads. ``scanners`` holds the LibCST name analysis and
``symbols`` the default table of bare names.
"""
