"""
Import Discovery, Resolution and Merge Engine.

- ``extractor``: walks a document and yields Python fragments.
- ``resolver``: resolves the imports one fragment needs.
- ``merger``: folds per-fragment results into one ordered set.
- ``rewriter``: regenerates the document header from the final set.
- ``process``: orchestrates the four steps.
"""
